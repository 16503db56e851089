# schemas/stats.py
# AlgoCoach — Pydantic response models for /stats.
# Used by: api/routes_stats.py
# Imports from: pydantic only.

from datetime import datetime

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────
# GET /stats/overview
# ─────────────────────────────────────────────

class OverviewTotalsSchema(BaseModel):
    current_level:      int = Field(..., ge=1, le=10)
    total_solved:       int
    total_submissions:  int
    average_score:      float   # mean over accepted submissions, 1 dp; 0.0 when none
    accuracy_rate:      int     # solved / submissions as a whole percent


class RecentActivitySchema(BaseModel):
    days:               int
    total:              int
    daily_submissions:  dict[str, int]     # 'YYYY-MM-DD' → count, days with none omitted


class StatsOverviewResponse(BaseModel):
    """
    Learner summary built from the profile row and the submission log.
    difficulty_distribution always carries keys 1..10.
    """
    user_id:                    str
    overview:                   OverviewTotalsSchema
    difficulty_distribution:    dict[int, int]
    algorithm_proficiency:      dict[str, float]
    recent_activity:            RecentActivitySchema


# ─────────────────────────────────────────────
# GET /stats/progress
# ─────────────────────────────────────────────

class ProgressPointSchema(BaseModel):
    submission:     int         # 1-based, oldest first
    score:          int
    submitted_at:   datetime
    problem_title:  str
    difficulty:     int


class StatsProgressResponse(BaseModel):
    user_id:    str
    progress:   list[ProgressPointSchema]
