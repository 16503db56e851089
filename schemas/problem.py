# schemas/problem.py
# AlgoCoach — Pydantic models for the read-only problem view.
# Used by: api/routes_problems.py
# Imports from: pydantic only.

from typing import Optional

from pydantic import BaseModel


class ExampleCaseSchema(BaseModel):
    input:  str
    output: str


class ProblemResponse(BaseModel):
    """
    GET /problems/{problem_id} response body.

    Only the first few test cases are shown as examples; the rest stay
    server-side and are used for grading.
    """
    problem_id:             str
    title:                  str
    description:            str
    difficulty:             int
    algorithm_types:        list[str]
    expected_complexity:    Optional[str] = None
    example_cases:          list[ExampleCaseSchema] = []
    total_test_cases:       int
