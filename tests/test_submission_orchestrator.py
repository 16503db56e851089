"""Tests for the end-to-end submission pipeline."""

import pytest

import analysis.submission_orchestrator as orchestrator_module
from analysis.submission_orchestrator import SubmissionOrchestrator, SubmissionStage
from database.models import Submission, User
from database.stores import record_hint
from utils.errors import InvalidInput, NotFound, PersistenceError, ProfileUpdateFailure


def _orchestrator(db, runner, analyzer):
    return SubmissionOrchestrator(db, runner, analyzer_factory=analyzer)


def _fresh_user(db) -> User:
    return db.get(User, "u1", populate_existing=True)


class TestAcceptedSubmission:
    def test_perfect_fast_submission(self, db, user, problem, runner, analyzer):
        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "print(input())", "python")

        assert outcome.submission.status == "accepted"
        assert outcome.score.raw_score == 120
        assert outcome.score.final_score == 100
        assert outcome.stage is SubmissionStage.RESPONDED
        assert outcome.profile_errors == []
        assert analyzer.calls == 1
        assert outcome.code_analysis == {"overallScore": 10}

        u = _fresh_user(db)
        assert u.total_submissions == 1
        assert u.total_problems_solved == 1
        assert u.recent_scores == [100]
        assert u.algorithm_proficiency == {"array": 5.3, "hash_table": 5.3}

    def test_submission_row_persisted(self, db, user, problem, runner, analyzer):
        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        row = db.get(Submission, outcome.submission.submission_id)
        assert row.score == 100
        assert row.passed_cases == 10
        assert row.total_cases == 10
        assert row.execution_time_ms == 100
        assert row.memory_kb == 2048
        assert len(row.test_results) == 10

    def test_quality_coefficient_applied(self, db, user, problem, runner, make_analyzer):
        analyzer = make_analyzer(result={"overallScore": 8})

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.score.quality_coefficient == pytest.approx(0.8)
        assert outcome.score.final_score == 96

    def test_analyzer_failure_falls_back_to_neutral(self, db, user, problem, runner, failing_analyzer):
        outcome = _orchestrator(db, runner, failing_analyzer).submit("u1", "p1", "code", "python")

        assert outcome.score.quality_coefficient == 1.0
        assert outcome.code_analysis is None
        assert outcome.score.final_score == 100

    def test_unexpected_analyzer_error_also_falls_back(self, db, user, problem, runner, make_analyzer):
        analyzer = make_analyzer(error=RuntimeError("bug"))

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.score.quality_coefficient == 1.0


class TestWrongAnswer:
    def test_partial_pass(self, db, user, problem, make_runner, analyzer):
        runner = make_runner(wrong={"9", "10"})

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.submission.status == "wrong_answer"
        assert outcome.submission.passed_cases == 8
        assert outcome.score.correctness_coefficient == 0.7
        assert outcome.score.final_score == 84
        assert analyzer.calls == 0

        u = _fresh_user(db)
        assert u.total_submissions == 1
        assert u.total_problems_solved == 0
        assert u.recent_scores == [84]

    def test_runner_failure_on_one_case(self, db, user, problem, make_runner, analyzer):
        runner = make_runner(broken={"3"})

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert len(outcome.test_results) == 10
        assert outcome.test_results[2].passed is False
        assert outcome.test_results[2].error.startswith("execution error")
        assert outcome.submission.status == "wrong_answer"

    def test_runner_crash_on_one_case_still_grades_the_rest(self, db, user, problem, make_runner, analyzer):
        runner = make_runner(crashing={"3"})

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert runner.calls == [str(i) for i in range(1, 11)]
        assert outcome.submission.passed_cases == 9
        assert outcome.test_results[2].passed is False
        assert outcome.test_results[2].error.startswith("runner crashed")
        assert outcome.stage is SubmissionStage.RESPONDED

    def test_hints_lower_the_score(self, db, user, problem, make_runner, analyzer):
        record_hint("u1", "p1", 1, "h1", "python", None, db)
        record_hint("u1", "p1", 2, "h2", "python", None, db)
        record_hint("u1", "p1", 3, "h3", "python", None, db)
        runner = make_runner(time_ms=900_000)

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.hints_used == [1, 2, 3]
        assert outcome.score.time_coefficient == 0.9
        assert outcome.score.hint_penalty_coefficient == 0.70
        assert outcome.score.final_score == 63


class TestDifficulty:
    def test_level_goes_up_after_streak(self, db, user, problem, runner, analyzer):
        user.recent_scores = [85, 90]
        db.commit()

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.adjustment.should_adjust
        assert outcome.adjustment.direction == "up"
        assert outcome.adjustment.new_level == 4
        assert _fresh_user(db).current_level == 4

    def test_level_goes_down_after_two_low_scores(self, db, user, problem, make_runner, analyzer):
        user.recent_scores = [20]
        db.commit()
        runner = make_runner(wrong={str(i) for i in range(1, 11)})

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.score.final_score == 0
        assert outcome.adjustment.direction == "down"
        assert _fresh_user(db).current_level == 2

    def test_first_submission_never_adjusts(self, db, user, problem, runner, analyzer):
        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")
        assert not outcome.adjustment.should_adjust


class TestRejections:
    def test_blank_code(self, db, user, problem, runner, analyzer):
        with pytest.raises(InvalidInput):
            _orchestrator(db, runner, analyzer).submit("u1", "p1", "   ", "python")
        assert runner.calls == []

    def test_unsupported_language(self, db, user, problem, runner, analyzer):
        with pytest.raises(InvalidInput):
            _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "brainfuck")

    def test_unknown_problem(self, db, user, runner, analyzer):
        with pytest.raises(NotFound):
            _orchestrator(db, runner, analyzer).submit("u1", "nope", "code", "python")

    def test_unknown_user(self, db, problem, runner, analyzer):
        with pytest.raises(NotFound):
            _orchestrator(db, runner, analyzer).submit("ghost", "p1", "code", "python")


class TestFailureIsolation:
    def test_persist_failure_is_fatal_and_profile_untouched(
        self, db, user, problem, runner, analyzer, monkeypatch,
    ):
        def fail(db, **fields):
            raise PersistenceError("disk full")

        monkeypatch.setattr(orchestrator_module, "create_submission", fail)

        with pytest.raises(PersistenceError):
            _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        u = _fresh_user(db)
        assert u.total_submissions == 0
        assert u.recent_scores == []

    def test_profile_failures_do_not_fail_the_request(
        self, db, user, problem, runner, analyzer, monkeypatch,
    ):
        def fail(*args, **kwargs):
            raise ProfileUpdateFailure("conflict storm")

        monkeypatch.setattr(orchestrator_module, "update_profile", fail)

        outcome = _orchestrator(db, runner, analyzer).submit("u1", "p1", "code", "python")

        assert outcome.submission.submission_id
        assert outcome.profile_errors == ["recent_scores", "current_level", "algorithm_proficiency"]
        assert not outcome.adjustment.should_adjust
        assert db.get(Submission, outcome.submission.submission_id) is not None
