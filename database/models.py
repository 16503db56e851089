# database/models.py
# AlgoCoach — SQLAlchemy ORM models for all 4 tables.
# Imports from: sqlalchemy, utils/constants.py.

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

from utils.constants import LEVEL_MAX, LEVEL_MIN

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


# ─────────────────────────────────────────────
# TABLE 1: User — the mutable learner profile
# Every write goes through the `version` compare-and-swap
# (UPDATE ... WHERE user_id = ? AND version = ?).
# ─────────────────────────────────────────────

class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            f"current_level BETWEEN {LEVEL_MIN} AND {LEVEL_MAX}",
            name="ck_users_current_level",
        ),
    )

    user_id                 = Column(String, primary_key=True, default=_uuid)
    username                = Column(String, nullable=False, unique=True)
    created_at              = Column(DateTime, nullable=False, default=_now)

    current_level           = Column(Integer, nullable=False, default=LEVEL_MIN)
    algorithm_proficiency   = Column(JSON, nullable=False, default=dict)   # {category: 1.0..10.0}
    recent_scores           = Column(JSON, nullable=False, default=list)   # oldest first, <= 10
    total_problems_solved   = Column(Integer, nullable=False, default=0)
    total_submissions       = Column(Integer, nullable=False, default=0)

    # Per-user LLM override; all NULL = platform default
    llm_provider            = Column(String, nullable=True)
    llm_base_url            = Column(String, nullable=True)
    llm_model               = Column(String, nullable=True)
    llm_api_key             = Column(String, nullable=True)

    version                 = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    submissions = relationship("Submission", back_populates="user", cascade="all, delete-orphan")
    hints       = relationship("HintUsage",  back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User id={self.user_id} level={self.current_level} v={self.version}>"


# ─────────────────────────────────────────────
# TABLE 2: Problem — written by the problem generator, read-only here
# ─────────────────────────────────────────────

class Problem(Base):
    __tablename__ = "problems"
    __table_args__ = (
        CheckConstraint("difficulty BETWEEN 1 AND 10", name="ck_problems_difficulty"),
    )

    problem_id          = Column(String, primary_key=True, default=_uuid)
    title               = Column(String, nullable=False)
    description         = Column(Text, nullable=False)
    difficulty          = Column(Integer, nullable=False)
    algorithm_types     = Column(JSON, nullable=False, default=list)    # ["array", "dp"]
    test_cases          = Column(JSON, nullable=False, default=list)    # [{input, output}]
    expected_complexity = Column(String, nullable=True)
    created_by          = Column(String, nullable=False, default="llm")
    created_at          = Column(DateTime, nullable=False, default=_now)

    submissions = relationship("Submission", back_populates="problem")
    hints       = relationship("HintUsage",  back_populates="problem")

    def __repr__(self) -> str:
        return f"<Problem id={self.problem_id} title={self.title} difficulty={self.difficulty}>"


# ─────────────────────────────────────────────
# TABLE 3: Submission — append-only
# ─────────────────────────────────────────────

class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        CheckConstraint("passed_cases >= 0 AND passed_cases <= total_cases",
                        name="ck_submissions_cases"),
        Index("ix_submissions_user_submitted", "user_id", "submitted_at"),
    )

    submission_id       = Column(String, primary_key=True, default=_uuid)
    user_id             = Column(String, ForeignKey("users.user_id"), nullable=False)
    problem_id          = Column(String, ForeignKey("problems.problem_id"), nullable=False)

    code                = Column(Text, nullable=False)
    language            = Column(String, nullable=False)
    status              = Column(String, nullable=False)        # 'accepted' | 'wrong_answer'

    passed_cases        = Column(Integer, nullable=False)
    total_cases         = Column(Integer, nullable=False)
    execution_time_ms   = Column(Integer, nullable=False, default=0)
    memory_kb           = Column(Integer, nullable=False, default=0)

    score               = Column(Integer, nullable=False)
    correctness_coefficient  = Column(Float, nullable=False)
    time_coefficient         = Column(Float, nullable=False)
    hint_penalty_coefficient = Column(Float, nullable=False)
    quality_coefficient      = Column(Float, nullable=False)

    hints_used          = Column(JSON, nullable=False, default=list)    # sorted hint levels
    test_results        = Column(JSON, nullable=False, default=list)    # per-case detail
    code_analysis       = Column(JSON, nullable=True)                   # quality analyzer output

    submitted_at        = Column(DateTime, nullable=False, default=_now)

    user    = relationship("User",    back_populates="submissions")
    problem = relationship("Problem", back_populates="submissions")

    def __repr__(self) -> str:
        return f"<Submission id={self.submission_id} user={self.user_id} problem={self.problem_id} score={self.score}>"


# ─────────────────────────────────────────────
# TABLE 4: HintUsage — one row per hint request
# ─────────────────────────────────────────────

class HintUsage(Base):
    __tablename__ = "hints"
    __table_args__ = (
        CheckConstraint("hint_level BETWEEN 1 AND 4", name="ck_hints_level"),
        Index("ix_hints_user_problem", "user_id", "problem_id"),
    )

    hint_id         = Column(String, primary_key=True, default=_uuid)
    user_id         = Column(String, ForeignKey("users.user_id"), nullable=False)
    problem_id      = Column(String, ForeignKey("problems.problem_id"), nullable=False)
    hint_level      = Column(Integer, nullable=False)
    content         = Column(Text, nullable=False)
    language        = Column(String, nullable=False, default="python")
    code_snapshot   = Column(Text, nullable=True)
    created_at      = Column(DateTime, nullable=False, default=_now)

    user    = relationship("User",    back_populates="hints")
    problem = relationship("Problem", back_populates="hints")

    def __repr__(self) -> str:
        return f"<HintUsage user={self.user_id} problem={self.problem_id} level={self.hint_level}>"
