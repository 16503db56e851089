# api/errors.py
# AlgoCoach — Maps domain errors onto HTTP status codes for every router.
# Imports from: utils/errors.py

from fastapi import HTTPException

from utils.errors import AlgoCoachError, InvalidInput, LLMCallError, NotFound, PersistenceError

_STATUS_BY_ERROR: tuple[tuple[type[AlgoCoachError], int], ...] = (
    (InvalidInput,      400),
    (NotFound,          404),
    (LLMCallError,      502),
    (PersistenceError,  500),
)


def to_http_exception(exc: AlgoCoachError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal error.")
