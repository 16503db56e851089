# database/db.py
# AlgoCoach — Engine, session factory, and table initialisation.
# Imports from: database/models.py, utils/config.py, utils/logger.py
# All other modules obtain a DB session via get_db() or SessionLocal().

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, func, select, text
from sqlalchemy.orm import Session, sessionmaker

from database.models import Base, Problem
from utils.config import DATABASE_URL
from utils.logger import get_logger

log = get_logger("database.db")

# ─────────────────────────────────────────────
# Engine configuration
# ─────────────────────────────────────────────

_IS_SQLITE = DATABASE_URL.startswith("sqlite")

# check_same_thread=False: FastAPI runs sync routes on a threadpool.
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if _IS_SQLITE else {},
    echo=False,
)


if _IS_SQLITE:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()


# ─────────────────────────────────────────────
# Session factory
# ─────────────────────────────────────────────

SessionLocal: sessionmaker[Session] = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency. The submission pipeline commits its own
    transactions; this only cleans up whatever is left open.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def db_session() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ─────────────────────────────────────────────
# Table initialisation — called once on startup
# ─────────────────────────────────────────────

def create_tables() -> None:
    """CREATE TABLE IF NOT EXISTS for every model."""
    log.info("db_init_start", database_url=DATABASE_URL)
    Base.metadata.create_all(bind=engine)


def problem_count(db: Session) -> int:
    return db.execute(select(func.count()).select_from(Problem)).scalar_one()


def check_db_health() -> bool:
    """Returns True if the DB is reachable."""
    try:
        with db_session() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        log.error("db_health_check_failed", error=str(exc))
        return False
