# schemas/submission.py
# AlgoCoach — Pydantic request/response models for /submissions.
# Single source of truth for all submission API contracts.
# Imports from: pydantic only.

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# ─────────────────────────────────────────────
# Shared sub-models
# ─────────────────────────────────────────────

class ScoreBreakdownSchema(BaseModel):
    """The four multiplicative coefficients behind the final score."""
    correctness:    float
    time:           float
    hint_penalty:   float
    quality:        float
    raw_score:      int     # before clamping to 100


class CaseResultSchema(BaseModel):
    """One executed test case as shown to the learner."""
    test_case:  int                 # 1-based
    passed:     bool
    status:     str                 # Judge0 status description
    time_ms:    int
    memory_kb:  int
    output:     str
    error:      str                 # stderr, or the runner failure detail


class DifficultyAdjustmentSchema(BaseModel):
    changed:    bool
    new_level:  Optional[int] = None
    direction:  Optional[str] = None    # 'up' | 'down'
    reason:     Optional[str] = None


class SubmissionSummarySchema(BaseModel):
    id:                 str
    status:             str             # 'accepted' | 'wrong_answer'
    score:              int = Field(..., ge=0, le=100)
    score_breakdown:    ScoreBreakdownSchema
    passed_tests:       int
    total_tests:        int
    execution_time_ms:  int
    memory_kb:          int
    hints_used:         list[int]
    code_analysis:      Optional[dict[str, Any]] = None


# ─────────────────────────────────────────────
# Request model
# ─────────────────────────────────────────────

class SubmitRequest(BaseModel):
    """
    POST /submissions/submit request body.
    Field-level checks only; language support is checked by the pipeline.
    """
    user_id:    str = Field(..., min_length=1, max_length=64)
    problem_id: str = Field(..., min_length=1, max_length=64)
    code:       str = Field(..., min_length=1, max_length=50_000)
    language:   str = Field(default="python", min_length=1, max_length=32)

    @field_validator("user_id", "problem_id", "language")
    @classmethod
    def no_whitespace_ids(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Value must be non-empty after stripping whitespace.")
        return stripped

    @field_validator("code")
    @classmethod
    def code_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Submitted code must not be blank.")
        return v


# ─────────────────────────────────────────────
# Response model
# ─────────────────────────────────────────────

class SubmitResponse(BaseModel):
    """
    POST /submissions/submit response body.

    {
        "submission":            {id, status, score, score_breakdown, ...},
        "difficulty_adjustment": {changed, new_level?, direction?, reason?},
        "test_results":          [{test_case, passed, status, ...}]
    }
    """
    submission:             SubmissionSummarySchema
    difficulty_adjustment:  DifficultyAdjustmentSchema
    test_results:           list[CaseResultSchema]


# ─────────────────────────────────────────────
# History models
# ─────────────────────────────────────────────

class SubmissionHistoryItem(BaseModel):
    id:                 str
    problem_id:         str
    problem_title:      Optional[str] = None
    difficulty:         Optional[int] = None
    language:           str
    status:             str
    score:              int
    passed_cases:       int
    total_cases:        int
    execution_time_ms:  int
    hints_used:         list[int]
    submitted_at:       datetime


class SubmissionHistoryResponse(BaseModel):
    user_id:        str
    total:          int
    submissions:    list[SubmissionHistoryItem]


class SubmissionDetailResponse(SubmissionHistoryItem):
    code:                       str
    correctness_coefficient:    float
    time_coefficient:           float
    hint_penalty_coefficient:   float
    quality_coefficient:        float
    memory_kb:                  int
    test_results:               list[dict[str, Any]]
    code_analysis:              Optional[dict[str, Any]] = None
