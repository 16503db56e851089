# utils/logger.py
# AlgoCoach — Structured JSON logger used by every module.
# Imports from: nothing internal.

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

_RESERVED = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "component", "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    Formats every log record as a single-line JSON object.
    Fields: timestamp, level, component, event, and any extra kwargs.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level":     record.levelname,
            "component": getattr(record, "component", record.name),
            "event":     record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            log_obj["exception"] = record.exc_text

        return json.dumps(log_obj, default=str)


def _resolve_level() -> int:
    name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def get_logger(component: str) -> "AlgoCoachLogger":
    """
    Factory function. Every module obtains its logger once at import time.

    Usage:
        from utils.logger import get_logger
        log = get_logger("analysis.scoring_engine")
        log.info("submission_scored", final_score=87, difficulty=4)
    """
    return AlgoCoachLogger(component)


class AlgoCoachLogger:
    """
    Thin wrapper around stdlib Logger that:
    - Enforces JSON-only output
    - Injects `component` (and any bound fields) into every record
    - Accepts arbitrary kwargs as structured fields
    """

    def __init__(self, component: str, bound: dict[str, Any] | None = None) -> None:
        self.component = component
        self._bound = dict(bound or {})
        self._logger = logging.getLogger(f"algocoach.{component}")

        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            self._logger.addHandler(handler)
            self._logger.setLevel(_resolve_level())
            self._logger.propagate = False

    def bind(self, **fields: Any) -> "AlgoCoachLogger":
        """Returns a logger that stamps `fields` on every event."""
        return AlgoCoachLogger(self.component, {**self._bound, **fields})

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        extra = {**self._bound, **kwargs}
        extra["component"] = self.component
        return extra

    def info(self, event: str, **kwargs: Any) -> None:
        self._logger.info(event, extra=self._make_extra(kwargs))

    def debug(self, event: str, **kwargs: Any) -> None:
        self._logger.debug(event, extra=self._make_extra(kwargs))

    def warning(self, event: str, **kwargs: Any) -> None:
        self._logger.warning(event, extra=self._make_extra(kwargs))

    def error(self, event: str, **kwargs: Any) -> None:
        self._logger.error(event, extra=self._make_extra(kwargs))

    def exception(self, event: str, **kwargs: Any) -> None:
        """Logs ERROR level with full traceback attached automatically."""
        extra = self._make_extra(kwargs)
        extra["traceback"] = traceback.format_exc()
        self._logger.error(event, extra=extra)
