# schemas/hint.py
# AlgoCoach — Pydantic models for /hints.
# Imports from: pydantic only.

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class HintRequest(BaseModel):
    user_id:            str = Field(..., min_length=1, max_length=64)
    problem_id:         str = Field(..., min_length=1, max_length=64)
    hint_level:         int = Field(..., ge=1, le=4)
    current_code:       Optional[str] = Field(default=None, max_length=50_000)
    language:           str = Field(default="python", min_length=1, max_length=32)
    force_regenerate:   bool = False


class HintSchema(BaseModel):
    level:      int
    content:    str
    penalty:    int     # percentage shown to the learner
    language:   str


class HintResponse(BaseModel):
    hint:               HintSchema
    already_obtained:   bool


class HintHistoryItem(BaseModel):
    id:         str
    level:      int
    content:    str
    language:   str
    created_at: datetime


class HintHistoryResponse(BaseModel):
    problem_id: str
    hints:      list[HintHistoryItem]
