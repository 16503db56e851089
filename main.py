# main.py
# AlgoCoach — HTTP service: grading, learner profiles, hints, problems and stats.
# Imports from: api/routes_*.py, database/db.py, database/seed.py,
#               utils/config.py, utils/logger.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from api.routes_hints import router as hints_router
from api.routes_problems import router as problems_router
from api.routes_stats import router as stats_router
from api.routes_submit import router as submit_router
from api.routes_user import router as user_router
from database.db import check_db_health, create_tables
from database.seed import seed_problems
from utils.config import JUDGE0_URL
from utils.logger import get_logger

log = get_logger("main")


# ─────────────────────────────────────────────
# Startup: schema and starter problem bank
# ─────────────────────────────────────────────

def _prepare_database() -> None:
    """
    Creates any missing tables, then fills an empty problem bank with the
    starter set. A failed seed leaves the service up with an empty bank;
    a failed schema create stops startup.
    """
    create_tables()
    log.info("schema_ready")

    try:
        seeded = seed_problems()
    except SQLAlchemyError as exc:
        log.exception("problem_bank_seed_failed", error=str(exc))
        return
    log.info("problem_bank_ready", seeded=seeded)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("service_starting", judge0_url=JUDGE0_URL)
    _prepare_database()
    yield
    log.info("service_stopped")


# ─────────────────────────────────────────────
# Application
# ─────────────────────────────────────────────

app = FastAPI(
    title="AlgoCoach",
    description=(
        "Adaptive algorithm practice. Grades submissions against test cases, "
        "scores them, and moves each learner's difficulty level up or down."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─────────────────────────────────────────────
# Routers
# ─────────────────────────────────────────────

app.include_router(submit_router)       # POST /submissions/submit, GET /submissions/...
app.include_router(user_router)         # POST /user/register, GET /user/{id}/profile, /user/{id}/llm-config
app.include_router(hints_router)        # POST /hints/request, GET /hints/problem/{id}
app.include_router(problems_router)     # GET  /problems/{id}
app.include_router(stats_router)        # GET  /stats/overview, GET /stats/progress


# ─────────────────────────────────────────────
# Health check
# ─────────────────────────────────────────────

@app.get("/health", tags=["system"], summary="Health check")
def health_check() -> dict:
    return {
        "status":   "ok",
        "service":  "AlgoCoach",
        "version":  "1.0.0",
        "database": "ok" if check_db_health() else "unreachable",
    }


@app.get("/", tags=["system"], include_in_schema=False)
def root() -> dict:
    return {
        "service": "AlgoCoach",
        "docs":    "/docs",
        "health":  "/health",
    }


# ─────────────────────────────────────────────
# Dev server entry point
# ─────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    from utils.constants import SERVER_HOST, SERVER_PORT

    log.info("starting_dev_server", host=SERVER_HOST, port=SERVER_PORT)
    uvicorn.run(
        "main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
        log_level="info",
    )
