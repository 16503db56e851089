# database/stores.py
# AlgoCoach — Record-store access for problems, hints, user profiles and submissions.
# Imports from: database/models.py, utils/constants.py, utils/errors.py, utils/logger.py

from typing import Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from database.models import HintUsage, Problem, Submission, User
from utils.constants import PROFILE_UPDATE_MAX_RETRIES
from utils.errors import InvalidInput, NotFound, PersistenceError, ProfileUpdateFailure
from utils.logger import get_logger

log = get_logger("database.stores")

T = TypeVar("T")


# ─────────────────────────────────────────────
# Problem store (read-only)
# ─────────────────────────────────────────────

def get_problem(problem_id: str, db: Session) -> Problem:
    problem = db.get(Problem, problem_id)
    if problem is None:
        raise NotFound(f"Problem '{problem_id}' not found.")
    return problem


# ─────────────────────────────────────────────
# User profile store
# ─────────────────────────────────────────────

def get_user(user_id: str, db: Session) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound(f"User '{user_id}' not found.")
    return user


def create_user(username: str, db: Session, user_id: Optional[str] = None) -> User:
    """Creates a fresh profile at level 1. Duplicate usernames/ids are InvalidInput."""
    user = User(
        username=username,
        current_level=1,
        algorithm_proficiency={},
        recent_scores=[],
        total_problems_solved=0,
        total_submissions=0,
    )
    if user_id is not None:
        user.user_id = user_id
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise InvalidInput(f"User '{user_id or username}' already exists.") from exc

    log.info("user_created", user_id=user.user_id, username=username)
    return user


def update_profile(
    user_id:        str,
    mutate:         Callable[[User], T],
    db:             Session,
    field:          str = "profile",
    max_retries:    int = PROFILE_UPDATE_MAX_RETRIES,
) -> T:
    """
    Applies `mutate` to a freshly read User row and commits it as a
    compare-and-swap on users.version. On a version conflict the row is
    re-read and `mutate` runs again, so it must derive everything from the
    row it is given. Returns whatever `mutate` returns.

    Raises ProfileUpdateFailure when the user is missing, on a non-conflict
    database error, or after max_retries conflicts.
    """
    for attempt in range(1, max_retries + 1):
        user = db.get(User, user_id, populate_existing=True)
        if user is None:
            raise ProfileUpdateFailure(f"User '{user_id}' not found for {field} update.")

        result = mutate(user)

        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            log.warning(
                "profile_update_conflict",
                user_id=user_id,
                field=field,
                attempt=attempt,
            )
            continue
        except SQLAlchemyError as exc:
            db.rollback()
            raise ProfileUpdateFailure(
                f"Could not write {field} for user '{user_id}': {exc}"
            ) from exc

        log.debug("profile_updated", user_id=user_id, field=field, attempt=attempt)
        return result

    raise ProfileUpdateFailure(
        f"Gave up writing {field} for user '{user_id}' after {max_retries} conflicts."
    )


# ─────────────────────────────────────────────
# Hint store
# ─────────────────────────────────────────────

def get_unlocked_hint_levels(user_id: str, problem_id: str, db: Session) -> set[int]:
    rows = db.execute(
        select(HintUsage.hint_level)
        .where(HintUsage.user_id == user_id, HintUsage.problem_id == problem_id)
        .distinct()
    ).scalars().all()
    return set(rows)


def list_hints(user_id: str, problem_id: str, db: Session) -> list[HintUsage]:
    """Hint history for one problem, lowest level first, newest row first within a level."""
    return list(db.execute(
        select(HintUsage)
        .where(HintUsage.user_id == user_id, HintUsage.problem_id == problem_id)
        .order_by(HintUsage.hint_level.asc(), HintUsage.created_at.desc())
    ).scalars().all())


def record_hint(
    user_id:        str,
    problem_id:     str,
    hint_level:     int,
    content:        str,
    language:       str,
    code_snapshot:  Optional[str],
    db:             Session,
) -> HintUsage:
    row = HintUsage(
        user_id=user_id,
        problem_id=problem_id,
        hint_level=hint_level,
        content=content,
        language=language,
        code_snapshot=code_snapshot,
    )
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not store hint: {exc}") from exc

    log.info("hint_recorded", user_id=user_id, problem_id=problem_id, hint_level=hint_level)
    return row


# ─────────────────────────────────────────────
# Submission store (append-only)
# ─────────────────────────────────────────────

def create_submission(db: Session, **fields) -> Submission:
    """
    Inserts one Submission row in its own transaction. Any database error
    rolls the transaction back and surfaces as PersistenceError, so no
    partial record is ever visible.
    """
    row = Submission(**fields)
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.exception(
            "submission_persist_failed",
            user_id=fields.get("user_id"),
            problem_id=fields.get("problem_id"),
        )
        raise PersistenceError(f"Could not store submission: {exc}") from exc
    return row


def get_submission(submission_id: str, db: Session) -> Submission:
    row = db.get(Submission, submission_id)
    if row is None:
        raise NotFound(f"Submission '{submission_id}' not found.")
    return row


def list_submissions(
    user_id:    str,
    db:         Session,
    problem_id: Optional[str] = None,
    status:     Optional[str] = None,
    limit:      Optional[int] = None,
    offset:     int = 0,
) -> list[Submission]:
    """Newest first."""
    stmt = select(Submission).where(Submission.user_id == user_id)
    if problem_id is not None:
        stmt = stmt.where(Submission.problem_id == problem_id)
    if status is not None:
        stmt = stmt.where(Submission.status == status)
    stmt = stmt.order_by(Submission.submitted_at.desc()).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())
