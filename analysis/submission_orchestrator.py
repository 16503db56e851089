# analysis/submission_orchestrator.py
# AlgoCoach — The per-submission pipeline. Coordinates every component:
# runner → scoring → persist → recent window → difficulty → proficiency.
# Imports from: ai/quality_analyzer.py, analysis/*, database/stores.py,
#               sandbox/executor.py, utils/*

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ai.quality_analyzer import QualityAnalyzer, quality_coefficient_from
from analysis.difficulty_adjuster import NO_ADJUSTMENT, AdjustmentDecision, evaluate
from analysis.proficiency_tracker import push_recent_score, update_proficiency
from analysis.scoring_engine import ScoreResult, compute_score
from database.models import Submission, User
from database.stores import (
    create_submission,
    get_problem,
    get_unlocked_hint_levels,
    get_user,
    update_profile,
)
from sandbox.executor import CaseOutcome, get_language_id, run_test_cases
from utils.config import LLMConfig, resolve_llm_config
from utils.constants import (
    MAX_CODE_LENGTH,
    QUALITY_DEFAULT,
    RECENT_WINDOW_ACCEPTED_ONLY,
    STATUS_ACCEPTED,
    STATUS_WRONG_ANSWER,
)
from utils.errors import AnalyzerFailure, InvalidInput, ProfileUpdateFailure
from utils.logger import get_logger

log = get_logger("analysis.submission_orchestrator")

T = TypeVar("T")


class SubmissionStage(str, Enum):
    RECEIVED             = "received"
    EXECUTED             = "executed"
    SCORED               = "scored"
    PERSISTED            = "persisted"
    DIFFICULTY_EVALUATED = "difficulty_evaluated"
    PROFICIENCY_UPDATED  = "proficiency_updated"
    RESPONDED            = "responded"


def _enter(stage: SubmissionStage, slog) -> SubmissionStage:
    slog.debug("submission_stage", stage=stage.value)
    return stage


# ─────────────────────────────────────────────
# Output contract
# ─────────────────────────────────────────────

@dataclass
class SubmissionOutcome:
    submission:         Submission
    score:              ScoreResult
    test_results:       list[CaseOutcome]
    adjustment:         AdjustmentDecision
    hints_used:         list[int]
    code_analysis:      Optional[dict] = None
    stage:              SubmissionStage = SubmissionStage.RECEIVED
    profile_errors:     list[str] = field(default_factory=list)


# ─────────────────────────────────────────────
# Orchestrator
# ─────────────────────────────────────────────

class SubmissionOrchestrator:
    """
    One instance per request. Collaborators are injected so the pipeline
    never reaches for globals:

        runner            object with run_test_case(code, language, stdin)
        analyzer_factory  LLMConfig -> object with analyze(code, language, description)
        config_resolver   User -> LLMConfig, resolved once per submission
    """

    def __init__(
        self,
        db:                 Session,
        runner,
        analyzer_factory:   Callable[[LLMConfig], Any] = QualityAnalyzer,
        config_resolver:    Callable[[Optional[User]], LLMConfig] = resolve_llm_config,
    ) -> None:
        self.db = db
        self.runner = runner
        self.analyzer_factory = analyzer_factory
        self.config_resolver = config_resolver

    # ── Helpers ───────────────────────────────

    def _analyze_quality(
        self,
        user:       User,
        code:       str,
        language:   str,
        description: str,
        slog,
    ) -> tuple[float, Optional[dict]]:
        """Never raises: any analyzer problem yields (1.0, None)."""
        try:
            analyzer = self.analyzer_factory(self.config_resolver(user))
            analysis = analyzer.analyze(code, language, description)
        except AnalyzerFailure as exc:
            slog.warning("quality_analysis_skipped", error=str(exc))
            return QUALITY_DEFAULT, None
        except Exception as exc:
            slog.exception("quality_analysis_unexpected_error", error=str(exc))
            return QUALITY_DEFAULT, None
        return quality_coefficient_from(analysis), analysis

    def _best_effort(self, step: str, fn: Callable[[], T], errors: list[str], slog) -> Optional[T]:
        """Profile writes must never fail the request once the submission exists."""
        try:
            return fn()
        except (ProfileUpdateFailure, SQLAlchemyError) as exc:
            self.db.rollback()
            slog.exception("profile_update_failed", step=step, error=str(exc))
            errors.append(step)
            return None

    # ── Pipeline ──────────────────────────────

    def submit(
        self,
        user_id:    str,
        problem_id: str,
        code:       str,
        language:   str,
    ) -> SubmissionOutcome:
        """
        RECEIVED → EXECUTED → SCORED → PERSISTED → DIFFICULTY_EVALUATED
        → PROFICIENCY_UPDATED → RESPONDED

        Raises InvalidInput / NotFound before any external call, and
        PersistenceError if the submission row cannot be written. Everything
        after persistence is best-effort.
        """
        slog = log.bind(user_id=user_id, problem_id=problem_id)
        stage = _enter(SubmissionStage.RECEIVED, slog)

        # ── Step 1: Validate + load ─────────────────────────────────────────
        if not code or not code.strip():
            raise InvalidInput("Submitted code must not be blank.")
        if len(code) > MAX_CODE_LENGTH:
            raise InvalidInput(f"Submitted code exceeds {MAX_CODE_LENGTH} characters.")
        get_language_id(language)

        problem = get_problem(problem_id, self.db)
        user = get_user(user_id, self.db)
        slog.info("submission_received", language=language, difficulty=problem.difficulty)

        # ── Step 2-3: Execute every test case ───────────────────────────────
        test_cases: list[dict] = list(problem.test_cases or [])
        outcomes = run_test_cases(self.runner, code, language, test_cases)

        passed_cases = sum(1 for o in outcomes if o.passed)
        total_cases  = len(outcomes)
        accepted     = total_cases > 0 and passed_cases == total_cases
        status       = STATUS_ACCEPTED if accepted else STATUS_WRONG_ANSWER

        execution_time_ms = outcomes[0].time_ms if outcomes else 0
        memory_kb         = outcomes[0].memory_kb if outcomes else 0
        stage = _enter(SubmissionStage.EXECUTED, slog)

        # ── Step 4: Quality analysis (accepted only) ────────────────────────
        quality: Optional[float] = None
        code_analysis: Optional[dict] = None
        if accepted:
            quality, code_analysis = self._analyze_quality(
                user, code, language, problem.description, slog,
            )

        # ── Step 5-6: Hints + score ─────────────────────────────────────────
        hints_used = sorted(get_unlocked_hint_levels(user_id, problem_id, self.db))
        score = compute_score(
            passed_cases=passed_cases,
            total_cases=total_cases,
            execution_time_ms=execution_time_ms,
            difficulty=problem.difficulty,
            hints_used=hints_used,
            quality_coefficient=quality,
        )
        stage = _enter(SubmissionStage.SCORED, slog)
        slog.info(
            "submission_scored",
            status=status,
            passed=f"{passed_cases}/{total_cases}",
            final_score=score.final_score,
            raw_score=score.raw_score,
            correctness=score.correctness_coefficient,
            time=score.time_coefficient,
            hint_penalty=score.hint_penalty_coefficient,
            quality=score.quality_coefficient,
        )

        # ── Step 7: Persist (fatal on failure) ──────────────────────────────
        submission = create_submission(
            self.db,
            user_id=user_id,
            problem_id=problem_id,
            code=code,
            language=language,
            status=status,
            passed_cases=passed_cases,
            total_cases=total_cases,
            execution_time_ms=execution_time_ms,
            memory_kb=memory_kb,
            score=score.final_score,
            correctness_coefficient=score.correctness_coefficient,
            time_coefficient=score.time_coefficient,
            hint_penalty_coefficient=score.hint_penalty_coefficient,
            quality_coefficient=score.quality_coefficient,
            hints_used=hints_used,
            test_results=[o.to_dict() for o in outcomes],
            code_analysis=code_analysis,
        )
        stage = _enter(SubmissionStage.PERSISTED, slog)
        slog = slog.bind(submission_id=submission.submission_id)

        profile_errors: list[str] = []
        final_score = score.final_score

        # ── Step 8: Counters + recent-score window ──────────────────────────
        def _record_attempt(u: User) -> list:
            u.total_submissions = (u.total_submissions or 0) + 1
            if accepted:
                u.total_problems_solved = (u.total_problems_solved or 0) + 1
            if accepted or not RECENT_WINDOW_ACCEPTED_ONLY:
                u.recent_scores = push_recent_score(u.recent_scores or [], final_score)
            return list(u.recent_scores or [])

        self._best_effort(
            "recent_scores",
            lambda: update_profile(user_id, _record_attempt, self.db, field="recent_scores"),
            profile_errors,
            slog,
        )

        # ── Step 9: Difficulty adjustment ───────────────────────────────────
        # Re-derived from the fresh row on every retry, so re-applying is safe.
        def _apply_level(u: User) -> AdjustmentDecision:
            decision = evaluate(u.current_level, list(reversed(u.recent_scores or [])))
            if decision.should_adjust:
                u.current_level = decision.new_level
            return decision

        adjustment = self._best_effort(
            "current_level",
            lambda: update_profile(user_id, _apply_level, self.db, field="current_level"),
            profile_errors,
            slog,
        ) or NO_ADJUSTMENT
        stage = _enter(SubmissionStage.DIFFICULTY_EVALUATED, slog)
        if adjustment.should_adjust:
            slog.info(
                "difficulty_adjusted",
                direction=adjustment.direction,
                new_level=adjustment.new_level,
                reason=adjustment.reason,
            )

        # ── Step 10: Proficiency (unconditional) ────────────────────────────
        categories = list(problem.algorithm_types or [])

        def _apply_proficiency(u: User) -> dict:
            u.algorithm_proficiency = update_proficiency(
                u.algorithm_proficiency or {}, categories, final_score,
            )
            return u.algorithm_proficiency

        self._best_effort(
            "algorithm_proficiency",
            lambda: update_profile(user_id, _apply_proficiency, self.db, field="algorithm_proficiency"),
            profile_errors,
            slog,
        )
        stage = _enter(SubmissionStage.PROFICIENCY_UPDATED, slog)

        # ── Step 11: Respond ────────────────────────────────────────────────
        stage = _enter(SubmissionStage.RESPONDED, slog)
        slog.info(
            "submission_complete",
            status=status,
            final_score=final_score,
            level_changed=adjustment.should_adjust,
            profile_errors=profile_errors,
        )

        return SubmissionOutcome(
            submission=submission,
            score=score,
            test_results=outcomes,
            adjustment=adjustment,
            hints_used=hints_used,
            code_analysis=code_analysis,
            stage=stage,
            profile_errors=profile_errors,
        )
