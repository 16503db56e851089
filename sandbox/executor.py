# sandbox/executor.py
# AlgoCoach — Judge0 client. Submits code, polls for the verdict, and runs
# a problem's test cases one by one. No scoring here.
# Imports from: utils/config.py, utils/constants.py, utils/errors.py, utils/logger.py

import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional

import requests

from utils.config import JUDGE0_URL
from utils.constants import (
    JUDGE0_HTTP_TIMEOUT_S,
    JUDGE0_MAX_POLL_ATTEMPTS,
    JUDGE0_POLL_INTERVAL_S,
    JUDGE0_STATUS_INTERNAL_ERROR,
    JUDGE0_STATUS_PROCESSING,
    LANGUAGE_IDS,
)
from utils.errors import InvalidInput, RunnerFailure
from utils.logger import get_logger

log = get_logger("sandbox.executor")


# ─────────────────────────────────────────────
# Output contracts
# ─────────────────────────────────────────────

@dataclass
class RunnerResult:
    """What Judge0 reported for a single execution."""
    stdout:     str
    stderr:     str
    status:     str         # Judge0 status description, e.g. 'Accepted'
    status_id:  int
    time_ms:    int
    memory_kb:  int


@dataclass
class CaseOutcome:
    """One graded test case. `error` is set only when the runner itself failed."""
    index:      int         # 1-based
    passed:     bool
    status:     str
    stdout:     str
    stderr:     str
    time_ms:    int
    memory_kb:  int
    error:      Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def get_language_id(language: str) -> int:
    """Judge0 language id. Unsupported languages are rejected, not defaulted."""
    try:
        return LANGUAGE_IDS[language.lower()]
    except KeyError:
        raise InvalidInput(
            f"Unsupported language '{language}'. Supported: {sorted(LANGUAGE_IDS)}."
        ) from None


def _seconds_to_ms(value: Any) -> int:
    """Judge0 reports time as a decimal string of seconds, or null."""
    if value in (None, ""):
        return 0
    try:
        return int(round(float(value) * 1000))
    except (TypeError, ValueError):
        return 0


def _status_id(data: dict) -> int:
    status = data.get("status") or {}
    try:
        return int(status.get("id", 0))
    except (AttributeError, TypeError, ValueError) as exc:
        raise RunnerFailure(f"malformed status in result: {status!r}") from exc


def _to_result(data: dict, status_id: int) -> RunnerResult:
    """Terminal Judge0 payload → RunnerResult. Malformed fields raise RunnerFailure."""
    try:
        return RunnerResult(
            stdout=str(data.get("stdout") or ""),
            stderr=str(data.get("stderr") or data.get("compile_output") or ""),
            status=str(data["status"].get("description", "Unknown")),
            status_id=status_id,
            time_ms=_seconds_to_ms(data.get("time")),
            memory_kb=int(data.get("memory") or 0),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise RunnerFailure(f"malformed result payload: {exc}") from exc


def outputs_match(stdout: Optional[str], expected: Optional[str]) -> bool:
    return (stdout or "").strip() == (expected or "").strip()


# ─────────────────────────────────────────────
# Judge0 runner
# ─────────────────────────────────────────────

class Judge0Runner:
    """
    Submit-then-poll wrapper that looks synchronous to callers.

    run_test_case() either returns a RunnerResult with a terminal Judge0
    status or raises RunnerFailure (transport error, bad payload, or polling
    budget exhausted). A wrong answer is NOT a failure.
    """

    def __init__(
        self,
        base_url:           str = JUDGE0_URL,
        poll_interval_s:    float = JUDGE0_POLL_INTERVAL_S,
        max_poll_attempts:  int = JUDGE0_MAX_POLL_ATTEMPTS,
        http_timeout_s:     float = JUDGE0_HTTP_TIMEOUT_S,
        session:            Optional[requests.Session] = None,
        sleep:              Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.poll_interval_s = poll_interval_s
        self.max_poll_attempts = max_poll_attempts
        self.http_timeout_s = http_timeout_s
        self.session = session or requests.Session()
        self._sleep = sleep

    # ── Transport ─────────────────────────────

    def _submit(self, code: str, language_id: int, stdin: str) -> str:
        url = f"{self.base_url}/submissions"
        try:
            resp = self.session.post(
                url,
                params={"base64_encoded": "false", "wait": "false"},
                json={"source_code": code, "language_id": language_id, "stdin": stdin},
                timeout=self.http_timeout_s,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.exceptions.RequestException as exc:
            log.error("judge0_submit_failed", url=url, error=str(exc))
            raise RunnerFailure(f"submission failed: {exc}") from exc
        except ValueError as exc:
            raise RunnerFailure("submission returned invalid JSON") from exc

        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise RunnerFailure("submission returned no token")
        return token

    def _fetch(self, token: str) -> dict:
        url = f"{self.base_url}/submissions/{token}"
        try:
            resp = self.session.get(
                url,
                params={"base64_encoded": "false"},
                timeout=self.http_timeout_s,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.RequestException as exc:
            log.error("judge0_fetch_failed", token=token, error=str(exc))
            raise RunnerFailure(f"result fetch failed: {exc}") from exc
        except ValueError as exc:
            raise RunnerFailure("result fetch returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise RunnerFailure(f"result fetch returned {type(data).__name__}, expected an object")
        return data

    # ── Public interface ──────────────────────

    def run_test_case(self, code: str, language: str, stdin: str) -> RunnerResult:
        language_id = get_language_id(language)
        token = self._submit(code, language_id, stdin)

        for attempt in range(1, self.max_poll_attempts + 1):
            self._sleep(self.poll_interval_s)
            data = self._fetch(token)
            status_id = _status_id(data)

            if status_id > JUDGE0_STATUS_PROCESSING:
                return _to_result(data, status_id)

            log.debug("judge0_poll_pending", token=token, attempt=attempt, status_id=status_id)

        log.warning(
            "judge0_poll_exhausted",
            token=token,
            attempts=self.max_poll_attempts,
            interval_s=self.poll_interval_s,
        )
        raise RunnerFailure("execution timed out")


# ─────────────────────────────────────────────
# Test-case loop
# ─────────────────────────────────────────────

def _failed_case(index: int, error: str) -> CaseOutcome:
    return CaseOutcome(
        index=index,
        passed=False,
        status="Internal Error",
        stdout="",
        stderr="Execution failed",
        time_ms=0,
        memory_kb=0,
        error=error,
    )


def run_test_cases(
    runner,
    code:       str,
    language:   str,
    test_cases: list[dict],
) -> list[CaseOutcome]:
    """
    Runs each {input, output} case through `runner.run_test_case`.

    A RunnerFailure, or any other crash inside the runner, on one case is
    recorded as a failed case with an error detail and the loop carries on.
    Every case gets an outcome, in order. InvalidInput (unsupported
    language) still propagates since it would fail every case the same way.
    """
    outcomes: list[CaseOutcome] = []

    for index, tc in enumerate(test_cases, start=1):
        stdin    = str(tc.get("input", ""))
        expected = str(tc.get("output", ""))

        try:
            result = runner.run_test_case(code, language, stdin)
        except RunnerFailure as exc:
            log.warning("test_case_runner_failure", case=index, error=str(exc))
            outcomes.append(_failed_case(index, f"execution error: {exc}"))
            continue
        except InvalidInput:
            raise
        except Exception as exc:
            log.exception("test_case_runner_crashed", case=index, error=str(exc))
            outcomes.append(_failed_case(index, f"runner crashed: {type(exc).__name__}: {exc}"))
            continue

        internal_error = result.status_id == JUDGE0_STATUS_INTERNAL_ERROR
        outcomes.append(CaseOutcome(
            index=index,
            passed=outputs_match(result.stdout, expected) and not internal_error,
            status=result.status,
            stdout=result.stdout,
            stderr=result.stderr,
            time_ms=result.time_ms,
            memory_kb=result.memory_kb,
            error=f"runner internal error (status {result.status_id})" if internal_error else None,
        ))

    passed = sum(1 for o in outcomes if o.passed)
    log.info(
        "execution_complete",
        language=language,
        passed=f"{passed}/{len(outcomes)}",
        runner_failures=sum(1 for o in outcomes if o.error),
    )
    return outcomes
