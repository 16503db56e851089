# api/routes_submit.py
# AlgoCoach — POST /submissions/submit and the submission history reads.
# The pipeline itself lives in analysis/submission_orchestrator.py.
# Imports from: ai/quality_analyzer.py, analysis/submission_orchestrator.py,
#               api/errors.py, database/*, sandbox/executor.py, schemas/submission.py,
#               utils/*

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ai.quality_analyzer import QualityAnalyzer
from analysis.submission_orchestrator import SubmissionOrchestrator, SubmissionOutcome
from api.errors import to_http_exception
from database.db import get_db
from database.models import Submission
from database.stores import get_submission, get_user, list_submissions
from sandbox.executor import Judge0Runner
from schemas.submission import (
    CaseResultSchema,
    DifficultyAdjustmentSchema,
    ScoreBreakdownSchema,
    SubmissionDetailResponse,
    SubmissionHistoryItem,
    SubmissionHistoryResponse,
    SubmissionSummarySchema,
    SubmitRequest,
    SubmitResponse,
)
from utils.constants import HISTORY_PAGE_MAX
from utils.errors import AlgoCoachError
from utils.logger import get_logger

router = APIRouter(prefix="/submissions", tags=["submissions"])
log    = get_logger("api.routes_submit")


# ─────────────────────────────────────────────
# Dependencies — overridden in tests
# ─────────────────────────────────────────────

def get_runner() -> Judge0Runner:
    return Judge0Runner()


def get_analyzer_factory():
    return QualityAnalyzer


def get_orchestrator(
    db:                 Session = Depends(get_db),
    runner                      = Depends(get_runner),
    analyzer_factory            = Depends(get_analyzer_factory),
) -> SubmissionOrchestrator:
    return SubmissionOrchestrator(db, runner, analyzer_factory=analyzer_factory)


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def _outcome_to_response(outcome: SubmissionOutcome) -> SubmitResponse:
    sub   = outcome.submission
    score = outcome.score
    adj   = outcome.adjustment

    return SubmitResponse(
        submission=SubmissionSummarySchema(
            id=sub.submission_id,
            status=sub.status,
            score=score.final_score,
            score_breakdown=ScoreBreakdownSchema(
                correctness=score.correctness_coefficient,
                time=score.time_coefficient,
                hint_penalty=score.hint_penalty_coefficient,
                quality=score.quality_coefficient,
                raw_score=score.raw_score,
            ),
            passed_tests=sub.passed_cases,
            total_tests=sub.total_cases,
            execution_time_ms=sub.execution_time_ms,
            memory_kb=sub.memory_kb,
            hints_used=outcome.hints_used,
            code_analysis=outcome.code_analysis,
        ),
        difficulty_adjustment=DifficultyAdjustmentSchema(
            changed=adj.should_adjust,
            new_level=adj.new_level,
            direction=adj.direction,
            reason=adj.reason,
        ),
        test_results=[
            CaseResultSchema(
                test_case=o.index,
                passed=o.passed,
                status=o.status,
                time_ms=o.time_ms,
                memory_kb=o.memory_kb,
                output=o.stdout,
                error=o.error or o.stderr,
            )
            for o in outcome.test_results
        ],
    )


def _history_item(row: Submission) -> dict:
    problem = row.problem
    return dict(
        id=row.submission_id,
        problem_id=row.problem_id,
        problem_title=problem.title if problem else None,
        difficulty=problem.difficulty if problem else None,
        language=row.language,
        status=row.status,
        score=row.score,
        passed_cases=row.passed_cases,
        total_cases=row.total_cases,
        execution_time_ms=row.execution_time_ms,
        hints_used=list(row.hints_used or []),
        submitted_at=row.submitted_at,
    )


def _history(
    user_id:    str,
    db:         Session,
    problem_id: Optional[str],
    limit:      Optional[int],
    offset:     int,
) -> SubmissionHistoryResponse:
    try:
        get_user(user_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)

    rows = list_submissions(user_id, db, problem_id=problem_id, limit=limit, offset=offset)
    return SubmissionHistoryResponse(
        user_id=user_id,
        total=len(rows),
        submissions=[SubmissionHistoryItem(**_history_item(r)) for r in rows],
    )


# ─────────────────────────────────────────────
# POST /submissions/submit
# ─────────────────────────────────────────────

@router.post(
    "/submit",
    response_model=SubmitResponse,
    summary="Submit code: run, score, persist and adapt the learner's level",
)
def submit_code(
    body:           SubmitRequest,
    orchestrator:   SubmissionOrchestrator = Depends(get_orchestrator),
) -> SubmitResponse:
    """
    Bad input → 400, unknown user/problem → 404, submission not stored → 500.
    Runner, analyzer and profile-update problems never fail the request.
    """
    try:
        outcome = orchestrator.submit(
            user_id=body.user_id,
            problem_id=body.problem_id,
            code=body.code,
            language=body.language,
        )
    except AlgoCoachError as exc:
        log.warning(
            "submit_rejected",
            user_id=body.user_id,
            problem_id=body.problem_id,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise to_http_exception(exc)

    return _outcome_to_response(outcome)


# ─────────────────────────────────────────────
# GET /submissions/history
# ─────────────────────────────────────────────

@router.get(
    "/history",
    response_model=SubmissionHistoryResponse,
    summary="All of a user's submissions, newest first",
)
def get_history(
    user_id:    str = Query(..., min_length=1, max_length=64),
    limit:      Optional[int] = Query(default=None, ge=1, le=HISTORY_PAGE_MAX),
    offset:     int = Query(default=0, ge=0),
    db:         Session = Depends(get_db),
) -> SubmissionHistoryResponse:
    return _history(user_id, db, problem_id=None, limit=limit, offset=offset)


# ─────────────────────────────────────────────
# GET /submissions/problem/{problem_id}
# ─────────────────────────────────────────────

@router.get(
    "/problem/{problem_id}",
    response_model=SubmissionHistoryResponse,
    summary="A user's submissions on one problem, newest first",
)
def get_problem_history(
    problem_id: str,
    user_id:    str = Query(..., min_length=1, max_length=64),
    db:         Session = Depends(get_db),
) -> SubmissionHistoryResponse:
    return _history(user_id, db, problem_id=problem_id, limit=None, offset=0)


# ─────────────────────────────────────────────
# GET /submissions/{submission_id}
# ─────────────────────────────────────────────

@router.get(
    "/{submission_id}",
    response_model=SubmissionDetailResponse,
    summary="Full detail of one submission",
)
def get_submission_detail(
    submission_id:  str,
    user_id:        str = Query(..., min_length=1, max_length=64),
    db:             Session = Depends(get_db),
) -> SubmissionDetailResponse:
    try:
        row = get_submission(submission_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)

    if row.user_id != user_id:
        log.warning("submission_access_denied", submission_id=submission_id, user_id=user_id)
        raise HTTPException(status_code=403, detail="Submission belongs to another user.")

    return SubmissionDetailResponse(
        **_history_item(row),
        code=row.code,
        correctness_coefficient=row.correctness_coefficient,
        time_coefficient=row.time_coefficient,
        hint_penalty_coefficient=row.hint_penalty_coefficient,
        quality_coefficient=row.quality_coefficient,
        memory_kb=row.memory_kb,
        test_results=list(row.test_results or []),
        code_analysis=row.code_analysis,
    )
