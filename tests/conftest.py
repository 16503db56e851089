"""Shared fixtures for AlgoCoach tests."""

import os

# Point the app-level engine at a throwaway file before any app module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite:///./algocoach_test.db")
os.environ.setdefault("LLM_API_KEY", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database.models import Base, Problem, User
from sandbox.executor import RunnerResult
from utils.errors import AnalyzerFailure, RunnerFailure


# ─────────────────────────────────────────────
# Database
# ─────────────────────────────────────────────

@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so independent sessions see each other's commits."""
    eng = create_engine(
        f"sqlite:///{tmp_path / 'algocoach.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db):
    row = User(
        user_id="u1",
        username="alice",
        current_level=3,
        algorithm_proficiency={},
        recent_scores=[],
        total_problems_solved=0,
        total_submissions=0,
    )
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def problem(db):
    """Difficulty 4 (expected 600 000 ms) with ten echo test cases."""
    row = Problem(
        problem_id="p1",
        title="Echo",
        description="Print the input back.",
        difficulty=4,
        algorithm_types=["array", "hash_table"],
        test_cases=[{"input": str(i), "output": str(i)} for i in range(1, 11)],
        expected_complexity="O(1)",
    )
    db.add(row)
    db.commit()
    return row


# ─────────────────────────────────────────────
# Collaborator doubles
# ─────────────────────────────────────────────

class FakeRunner:
    """
    Echoes stdin back as stdout. Inputs in `wrong` get a bad answer and
    inputs in `broken` raise RunnerFailure. Inputs in `crashing` raise a
    plain RuntimeError, like a buggy runner would.
    """

    def __init__(self, wrong=(), broken=(), crashing=(), time_ms=100, memory_kb=2048, status_id=3):
        self.wrong = set(wrong)
        self.broken = set(broken)
        self.crashing = set(crashing)
        self.time_ms = time_ms
        self.memory_kb = memory_kb
        self.status_id = status_id
        self.calls: list[str] = []

    def run_test_case(self, code, language, stdin):
        self.calls.append(stdin)
        if stdin in self.broken:
            raise RunnerFailure("execution timed out")
        if stdin in self.crashing:
            raise RuntimeError(f"runner blew up on {stdin!r}")
        return RunnerResult(
            stdout="nope" if stdin in self.wrong else stdin,
            stderr="",
            status="Accepted" if self.status_id == 3 else "Internal Error",
            status_id=self.status_id,
            time_ms=self.time_ms,
            memory_kb=self.memory_kb,
        )


class FakeAnalyzer:
    """Stands in for QualityAnalyzer; the factory signature is LLMConfig -> analyzer."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {"overallScore": 10}
        self.error = error
        self.calls = 0

    def __call__(self, config):
        return self

    def analyze(self, code, language, problem_description):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class FakeHintGenerator:
    def __init__(self, text="Think about a hash map."):
        self.text = text
        self.calls: list[int] = []
        self.config = None

    def __call__(self, config):
        self.config = config
        return self

    def generate(self, problem_description, current_code, level, language):
        self.calls.append(level)
        return f"{self.text} (level {level})"


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def failing_analyzer():
    return FakeAnalyzer(error=AnalyzerFailure("llm call failed: no key"))


@pytest.fixture
def hint_generator():
    return FakeHintGenerator()


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def make_analyzer():
    return FakeAnalyzer
