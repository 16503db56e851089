# utils/config.py
# AlgoCoach — Environment-backed settings and per-request LLM config resolution.
# Imports from: utils/constants.py

import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

from utils.constants import (
    JUDGE0_DEFAULT_URL,
    LLM_DEFAULT_BASE_URL,
    LLM_DEFAULT_MODEL,
    LLM_DEFAULT_PROVIDER,
)

load_dotenv()


DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./algocoach.db")
JUDGE0_URL: str   = os.getenv("JUDGE0_URL", JUDGE0_DEFAULT_URL)


@dataclass(frozen=True)
class LLMConfig:
    provider:       str
    api_key:        str
    base_url:       str
    model:          str
    is_user_config: bool = False


def get_platform_llm_config() -> LLMConfig:
    """Platform default, read from the environment on every call."""
    return LLMConfig(
        provider=os.getenv("LLM_PROVIDER", LLM_DEFAULT_PROVIDER),
        api_key=os.getenv("LLM_API_KEY", ""),
        base_url=os.getenv("LLM_BASE_URL", LLM_DEFAULT_BASE_URL).rstrip("/"),
        model=os.getenv("LLM_MODEL", LLM_DEFAULT_MODEL),
        is_user_config=False,
    )


def resolve_llm_config(user: Optional[Any]) -> LLMConfig:
    """
    Resolves the LLM settings for one request.

    A user with their own API key gets their override (missing fields fall
    back to the platform default); everyone else gets the platform default.
    `user` is any object exposing llm_provider / llm_api_key / llm_base_url /
    llm_model attributes, normally the ORM User row.
    """
    default = get_platform_llm_config()
    if user is None or not getattr(user, "llm_api_key", None):
        return default

    return LLMConfig(
        provider=user.llm_provider or default.provider,
        api_key=user.llm_api_key,
        base_url=(user.llm_base_url or default.base_url).rstrip("/"),
        model=user.llm_model or default.model,
        is_user_config=True,
    )


def mask_api_key(api_key: Optional[str]) -> Optional[str]:
    """'sk-abcdef123456' → 'sk-***3456'. Short keys are fully hidden."""
    if not api_key:
        return None
    if len(api_key) < 12:
        return "***"
    return f"{api_key[:3]}***{api_key[-4:]}"
