# api/routes_user.py
# AlgoCoach — Learner profile endpoints:
#   POST   /user/register
#   GET    /user/{user_id}/profile
#   GET    /user/{user_id}/llm-config
#   POST   /user/{user_id}/llm-config
#   DELETE /user/{user_id}/llm-config
# Imports from: api/errors.py, database/db.py, database/stores.py,
#               schemas/profile.py, utils/config.py, utils/errors.py, utils/logger.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.errors import to_http_exception
from database.db import get_db
from database.models import User
from database.stores import create_user, get_user, update_profile
from schemas.profile import (
    CategoryProficiencySchema,
    LLMConfigRequest,
    LLMConfigResponse,
    RegisterRequest,
    UserProfileResponse,
)
from utils.config import mask_api_key, resolve_llm_config
from utils.errors import AlgoCoachError, InvalidInput
from utils.logger import get_logger

router = APIRouter(prefix="/user", tags=["user"])
log    = get_logger("api.routes_user")


def _user_to_profile(user: User) -> UserProfileResponse:
    """Proficiency sorted weakest first; ties broken by category name."""
    proficiency = sorted(
        (user.algorithm_proficiency or {}).items(),
        key=lambda item: (item[1], item[0]),
    )
    recent = [float(s) for s in (user.recent_scores or [])]
    average = round(sum(recent) / len(recent), 1) if recent else None

    return UserProfileResponse(
        user_id=user.user_id,
        username=user.username,
        current_level=user.current_level,
        proficiency=[
            CategoryProficiencySchema(category=cat, score=score)
            for cat, score in proficiency
        ],
        recent_scores=recent,
        average_score=average,
        total_problems_solved=user.total_problems_solved or 0,
        total_submissions=user.total_submissions or 0,
        weakest_category=proficiency[0][0] if proficiency else None,
        strongest_category=proficiency[-1][0] if proficiency else None,
        created_at=user.created_at,
    )


@router.post(
    "/register",
    response_model=UserProfileResponse,
    status_code=201,
    summary="Create a learner profile at level 1",
)
def register_user(
    body:   RegisterRequest,
    db:     Session = Depends(get_db),
) -> UserProfileResponse:
    try:
        user = create_user(body.username.strip(), db, user_id=body.user_id)
    except AlgoCoachError as exc:
        log.info("register_rejected", username=body.username, error=str(exc))
        raise to_http_exception(exc)
    return _user_to_profile(user)


@router.get(
    "/{user_id}/profile",
    response_model=UserProfileResponse,
    summary="Level, per-category proficiency and recent scores",
)
def get_profile(
    user_id:    str,
    db:         Session = Depends(get_db),
) -> UserProfileResponse:
    try:
        user = get_user(user_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)

    log.info("profile_fetched", user_id=user_id, level=user.current_level)
    return _user_to_profile(user)


# ─────────────────────────────────────────────
# Per-user LLM override
# ─────────────────────────────────────────────

def _llm_config_response(user: User) -> LLMConfigResponse:
    config = resolve_llm_config(user)
    return LLMConfigResponse(
        user_id=user.user_id,
        provider=config.provider,
        base_url=config.base_url,
        model=config.model,
        is_user_config=config.is_user_config,
        api_key_masked=mask_api_key(config.api_key) if config.is_user_config else None,
    )


@router.get(
    "/{user_id}/llm-config",
    response_model=LLMConfigResponse,
    summary="LLM settings in effect for this learner",
)
def get_llm_config(
    user_id:    str,
    db:         Session = Depends(get_db),
) -> LLMConfigResponse:
    try:
        user = get_user(user_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)
    return _llm_config_response(user)


@router.post(
    "/{user_id}/llm-config",
    response_model=LLMConfigResponse,
    summary="Set a personal LLM provider, model and API key",
)
def set_llm_config(
    user_id:    str,
    body:       LLMConfigRequest,
    db:         Session = Depends(get_db),
) -> LLMConfigResponse:
    def apply(user: User) -> None:
        if body.api_key is None and not user.llm_api_key:
            raise InvalidInput("api_key is required when no personal key is stored yet.")
        user.llm_provider = body.provider.strip()
        user.llm_base_url = body.base_url.strip().rstrip("/") if body.base_url else None
        user.llm_model    = body.model.strip() if body.model else None
        if body.api_key is not None:
            user.llm_api_key = body.api_key.strip()

    try:
        get_user(user_id, db)
        update_profile(user_id, apply, db, field="llm_config")
        user = get_user(user_id, db)
    except AlgoCoachError as exc:
        log.info("llm_config_rejected", user_id=user_id, error=str(exc))
        raise to_http_exception(exc)

    log.info(
        "llm_config_saved",
        user_id=user_id,
        provider=user.llm_provider,
        key_replaced=body.api_key is not None,
    )
    return _llm_config_response(user)


@router.delete(
    "/{user_id}/llm-config",
    response_model=LLMConfigResponse,
    summary="Drop the personal LLM override and use the platform default",
)
def delete_llm_config(
    user_id:    str,
    db:         Session = Depends(get_db),
) -> LLMConfigResponse:
    def clear(user: User) -> None:
        user.llm_provider = None
        user.llm_base_url = None
        user.llm_model    = None
        user.llm_api_key  = None

    try:
        get_user(user_id, db)
        update_profile(user_id, clear, db, field="llm_config")
        user = get_user(user_id, db)
    except AlgoCoachError as exc:
        raise to_http_exception(exc)

    log.info("llm_config_cleared", user_id=user_id)
    return _llm_config_response(user)
