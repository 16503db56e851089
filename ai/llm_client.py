# ai/llm_client.py
# AlgoCoach — OpenAI-compatible chat completions over requests.
# Shared by the quality analyzer and the hint generator.
# Imports from: utils/config.py, utils/constants.py, utils/errors.py, utils/logger.py

import json
from typing import Any, Optional

import requests

from utils.config import LLMConfig
from utils.constants import LLM_CHAT_PATH, LLM_TIMEOUT_S
from utils.errors import LLMCallError
from utils.logger import get_logger

log = get_logger("ai.llm_client")


def chat(
    config:         LLMConfig,
    messages:       list[dict[str, str]],
    temperature:    float,
    max_tokens:     int,
    timeout_s:      int = LLM_TIMEOUT_S,
    session:        Optional[requests.Session] = None,
) -> str:
    """
    POSTs to {base_url}/chat/completions and returns the first choice's
    message content. Raises LLMCallError on any transport, HTTP or payload
    problem; never returns an empty string.
    """
    if not config.api_key:
        raise LLMCallError(f"No API key configured for provider '{config.provider}'.")

    url = f"{config.base_url}{LLM_CHAT_PATH}"
    payload = {
        "model":       config.model,
        "messages":    messages,
        "temperature": temperature,
        "max_tokens":  max_tokens,
        "stream":      False,
    }
    headers = {"Authorization": f"Bearer {config.api_key}"}
    http = session or requests

    try:
        resp = http.post(url, json=payload, headers=headers, timeout=timeout_s)
        resp.raise_for_status()
        data = resp.json()
    except requests.exceptions.Timeout as exc:
        log.warning("llm_timeout", provider=config.provider, timeout_s=timeout_s)
        raise LLMCallError("timeout") from exc
    except requests.exceptions.ConnectionError as exc:
        log.error("llm_connection_error", url=url)
        raise LLMCallError("connection_error") from exc
    except requests.exceptions.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "?"
        log.error("llm_http_error", provider=config.provider, status=status)
        raise LLMCallError(f"http_error:{status}") from exc
    except ValueError as exc:
        raise LLMCallError("response was not JSON") from exc

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LLMCallError("response had no choices[0].message.content") from exc

    content = (content or "").strip()
    if not content:
        raise LLMCallError("empty completion")

    log.debug(
        "llm_call_success",
        provider=config.provider,
        model=config.model,
        user_config=config.is_user_config,
        length=len(content),
    )
    return content


def extract_json(raw: str) -> dict[str, Any]:
    """
    Parses a model reply as a JSON object. Strips ```json fences and, if
    needed, falls back to the outermost {...} span. Raises ValueError.
    """
    text = raw.strip()

    if text.startswith("```"):
        lines = text.splitlines()
        text = "\n".join(
            line for line in lines
            if not line.strip().startswith("```")
        ).strip()

    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end   = text.rfind("}") + 1
        if start == -1 or end == 0:
            raise ValueError("no JSON object in model reply") from None
        obj = json.loads(text[start:end])

    if not isinstance(obj, dict):
        raise ValueError("model reply is not a JSON object")
    return obj
