# api/routes_hints.py
# AlgoCoach — POST /hints/request and GET /hints/problem/{problem_id}
# Imports from: ai/hint_generator.py, analysis/hint_unlock.py, api/errors.py,
#               database/*, schemas/hint.py, utils/*

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ai.hint_generator import HintGenerator
from analysis.hint_unlock import request_hint
from api.errors import to_http_exception
from database.db import get_db
from database.stores import get_user, list_hints
from schemas.hint import HintHistoryItem, HintHistoryResponse, HintRequest, HintResponse, HintSchema
from utils.config import resolve_llm_config
from utils.errors import AlgoCoachError
from utils.logger import get_logger

router = APIRouter(prefix="/hints", tags=["hints"])
log    = get_logger("api.routes_hints")


def get_generator_factory():
    """LLMConfig -> hint generator. Overridden in tests."""
    return HintGenerator


@router.post(
    "/request",
    response_model=HintResponse,
    summary="Unlock the next hint level for a problem",
)
def request_hint_route(
    body:               HintRequest,
    db:                 Session = Depends(get_db),
    generator_factory           = Depends(get_generator_factory),
) -> HintResponse:
    """
    Levels unlock strictly in order. Asking again for an unlocked level
    returns the stored hint unless force_regenerate is set. Every unlocked
    level lowers the score of later submissions on this problem.
    """
    try:
        user = get_user(body.user_id, db)
        generator = generator_factory(resolve_llm_config(user))
        result = request_hint(
            user_id=body.user_id,
            problem_id=body.problem_id,
            hint_level=body.hint_level,
            generator=generator,
            db=db,
            current_code=body.current_code,
            language=body.language,
            force_regenerate=body.force_regenerate,
        )
    except AlgoCoachError as exc:
        log.warning(
            "hint_request_failed",
            user_id=body.user_id,
            problem_id=body.problem_id,
            hint_level=body.hint_level,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise to_http_exception(exc)

    return HintResponse(
        hint=HintSchema(
            level=result.hint.hint_level,
            content=result.hint.content,
            penalty=result.penalty_percent,
            language=result.hint.language,
        ),
        already_obtained=result.already_obtained,
    )


@router.get(
    "/problem/{problem_id}",
    response_model=HintHistoryResponse,
    summary="Hints a user has unlocked for one problem",
)
def get_hint_history(
    problem_id: str,
    user_id:    str = Query(..., min_length=1, max_length=64),
    db:         Session = Depends(get_db),
) -> HintHistoryResponse:
    try:
        get_user(user_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)

    return HintHistoryResponse(
        problem_id=problem_id,
        hints=[
            HintHistoryItem(
                id=h.hint_id,
                level=h.hint_level,
                content=h.content,
                language=h.language,
                created_at=h.created_at,
            )
            for h in list_hints(user_id, problem_id, db)
        ],
    )
