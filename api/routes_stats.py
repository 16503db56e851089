# api/routes_stats.py
# AlgoCoach — Learner statistics:
#   GET /stats/overview   (totals, difficulty spread, 30-day activity)
#   GET /stats/progress   (last accepted scores, oldest first)
# Imports from: api/errors.py, database/db.py, database/stores.py,
#               schemas/stats.py, utils/constants.py, utils/errors.py, utils/logger.py

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.errors import to_http_exception
from database.db import get_db
from database.models import User
from database.stores import get_user, list_submissions
from schemas.stats import (
    OverviewTotalsSchema,
    ProgressPointSchema,
    RecentActivitySchema,
    StatsOverviewResponse,
    StatsProgressResponse,
)
from utils.constants import (
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    STATS_ACTIVITY_DAYS,
    STATS_PROGRESS_POINTS,
    STATUS_ACCEPTED,
)
from utils.errors import AlgoCoachError
from utils.logger import get_logger

router = APIRouter(prefix="/stats", tags=["stats"])
log    = get_logger("api.routes_stats")


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _load_user(user_id: str, db: Session) -> User:
    try:
        return get_user(user_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)


# ─────────────────────────────────────────────
# GET /stats/overview
# ─────────────────────────────────────────────

@router.get(
    "/overview",
    response_model=StatsOverviewResponse,
    summary="Totals, difficulty spread of solved problems and recent activity",
)
def stats_overview(
    user_id:    str = Query(..., min_length=1),
    db:         Session = Depends(get_db),
) -> StatsOverviewResponse:
    user = _load_user(user_id, db)
    submissions = list_submissions(user_id, db)
    accepted = [s for s in submissions if s.status == STATUS_ACCEPTED]

    average = sum(s.score for s in accepted) / len(accepted) if accepted else 0.0
    total_submissions = user.total_submissions or 0
    total_solved = user.total_problems_solved or 0
    accuracy = round(total_solved / total_submissions * 100) if total_submissions else 0

    distribution = {d: 0 for d in range(DIFFICULTY_MIN, DIFFICULTY_MAX + 1)}
    for s in accepted:
        distribution[s.problem.difficulty] += 1

    cutoff = datetime.now(timezone.utc) - timedelta(days=STATS_ACTIVITY_DAYS)
    daily: dict[str, int] = {}
    recent_total = 0
    for s in submissions:
        submitted = _as_utc(s.submitted_at)
        if submitted < cutoff:
            continue
        day = submitted.date().isoformat()
        daily[day] = daily.get(day, 0) + 1
        recent_total += 1

    log.info(
        "stats_overview_built",
        user_id=user_id,
        submissions=len(submissions),
        accepted=len(accepted),
        recent=recent_total,
    )

    return StatsOverviewResponse(
        user_id=user_id,
        overview=OverviewTotalsSchema(
            current_level=user.current_level,
            total_solved=total_solved,
            total_submissions=total_submissions,
            average_score=round(average, 1),
            accuracy_rate=accuracy,
        ),
        difficulty_distribution=distribution,
        algorithm_proficiency=dict(user.algorithm_proficiency or {}),
        recent_activity=RecentActivitySchema(
            days=STATS_ACTIVITY_DAYS,
            total=recent_total,
            daily_submissions=dict(sorted(daily.items())),
        ),
    )


# ─────────────────────────────────────────────
# GET /stats/progress
# ─────────────────────────────────────────────

@router.get(
    "/progress",
    response_model=StatsProgressResponse,
    summary="Most recent accepted scores, oldest first",
)
def stats_progress(
    user_id:    str = Query(..., min_length=1),
    db:         Session = Depends(get_db),
) -> StatsProgressResponse:
    _load_user(user_id, db)
    newest_first = list_submissions(
        user_id, db, status=STATUS_ACCEPTED, limit=STATS_PROGRESS_POINTS,
    )

    points = [
        ProgressPointSchema(
            submission=index,
            score=s.score,
            submitted_at=s.submitted_at,
            problem_title=s.problem.title,
            difficulty=s.problem.difficulty,
        )
        for index, s in enumerate(reversed(newest_first), start=1)
    ]

    log.info("stats_progress_built", user_id=user_id, points=len(points))
    return StatsProgressResponse(user_id=user_id, progress=points)
