# api/routes_problems.py
# AlgoCoach — GET /problems/{problem_id}
# Imports from: database/db.py, database/stores.py, schemas/problem.py,
#               utils/constants.py, utils/errors.py, utils/logger.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from database.models import Problem
from database.stores import get_problem
from schemas.problem import ExampleCaseSchema, ProblemResponse
from utils.constants import EXAMPLE_CASES_SHOWN
from utils.errors import NotFound
from utils.logger import get_logger

router = APIRouter(tags=["problems"])
log    = get_logger("api.routes_problems")


def _problem_to_schema(problem: Problem) -> ProblemResponse:
    cases: list[dict] = list(problem.test_cases or [])
    examples = [
        ExampleCaseSchema(input=str(tc.get("input", "")), output=str(tc.get("output", "")))
        for tc in cases[:EXAMPLE_CASES_SHOWN]
    ]
    return ProblemResponse(
        problem_id=problem.problem_id,
        title=problem.title,
        description=problem.description,
        difficulty=problem.difficulty,
        algorithm_types=list(problem.algorithm_types or []),
        expected_complexity=problem.expected_complexity,
        example_cases=examples,
        total_test_cases=len(cases),
    )


@router.get(
    "/problems/{problem_id}",
    response_model=ProblemResponse,
    summary="Get a problem by ID",
)
def get_problem_by_id(
    problem_id: str,
    db:         Session = Depends(get_db),
) -> ProblemResponse:
    log.info("get_problem_by_id", problem_id=problem_id)
    try:
        problem = get_problem(problem_id, db)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return _problem_to_schema(problem)
