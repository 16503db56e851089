# schemas/profile.py
# AlgoCoach — Pydantic models for learner profiles.
# Used by: api/routes_user.py
# Imports from: pydantic only.

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username:   str = Field(..., min_length=1, max_length=64)
    user_id:    Optional[str] = Field(default=None, min_length=1, max_length=64)


class CategoryProficiencySchema(BaseModel):
    """One algorithm category and the learner's estimated skill in it."""
    category:   str
    score:      float = Field(..., ge=1.0, le=10.0)


class UserProfileResponse(BaseModel):
    """
    GET /user/{user_id}/profile response body.

    recent_scores is oldest first; average_score is their mean (None when
    the window is empty). proficiency is sorted weakest first.
    """
    user_id:                str
    username:               str
    current_level:          int = Field(..., ge=1, le=10)
    proficiency:            list[CategoryProficiencySchema]
    recent_scores:          list[float]
    average_score:          Optional[float] = None
    total_problems_solved:  int
    total_submissions:      int
    weakest_category:       Optional[str] = None
    strongest_category:     Optional[str] = None
    created_at:             datetime


# ─────────────────────────────────────────────
# Per-user LLM override
# ─────────────────────────────────────────────

class LLMConfigRequest(BaseModel):
    """
    POST /user/{user_id}/llm-config body. Omitting api_key keeps the key
    already stored; a first-time override must supply one.
    """
    provider:   str = Field(..., min_length=1, max_length=32)
    api_key:    Optional[str] = Field(default=None, min_length=1)
    base_url:   Optional[str] = Field(default=None, min_length=1)
    model:      Optional[str] = Field(default=None, min_length=1)


class LLMConfigResponse(BaseModel):
    """The config hints and quality analysis will use. The key is only ever shown masked."""
    user_id:            str
    provider:           str
    base_url:           str
    model:              str
    is_user_config:     bool
    api_key_masked:     Optional[str] = None
