# analysis/scoring_engine.py
# AlgoCoach — Multi-coefficient submission score. No I/O, no config.
# Pure deterministic math.
# Imports from: utils/constants.py, utils/errors.py

import math
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from utils.constants import (
    CORRECTNESS_BANDS,
    CORRECTNESS_FLOOR,
    CORRECTNESS_FULL,
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    EXPECTED_TIME_BANDS,
    EXPECTED_TIME_MAX_MS,
    HINT_LEVEL_MAX,
    HINT_LEVEL_MIN,
    HINT_PENALTY,
    HINT_PENALTY_NONE,
    QUALITY_DEFAULT,
    SCORE_BASE,
    SCORE_CAP,
    TIME_COEFF_FAST,
    TIME_COEFF_ON_PACE,
    TIME_COEFF_SLOW,
    TIME_COEFF_VERY_SLOW,
    TIME_FAST_RATIO,
    TIME_ON_PACE_RATIO,
    TIME_SLOW_RATIO,
)
from utils.errors import InvalidInput


# ─────────────────────────────────────────────
# Output contract
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class ScoreResult:
    final_score:                int      # clamped to SCORE_CAP
    correctness_coefficient:    float
    time_coefficient:           float
    hint_penalty_coefficient:   float
    quality_coefficient:        float
    expected_time_ms:           int
    raw_score:                  int      # before the SCORE_CAP clamp, may reach 120

    def to_dict(self) -> dict:
        return asdict(self)


# ─────────────────────────────────────────────
# Coefficients
# ─────────────────────────────────────────────

def pass_rate(passed_cases: int, total_cases: int) -> float:
    """0.0 when there are no test cases, never NaN."""
    return passed_cases / total_cases if total_cases > 0 else 0.0


def correctness_coefficient(rate: float) -> float:
    if rate >= 1.0:
        return CORRECTNESS_FULL
    for min_rate, coeff in CORRECTNESS_BANDS:
        if rate >= min_rate:
            return coeff
    return CORRECTNESS_FLOOR


def expected_time_ms(difficulty: int) -> int:
    for max_difficulty, expected in EXPECTED_TIME_BANDS:
        if difficulty <= max_difficulty:
            return expected
    return EXPECTED_TIME_MAX_MS


def time_coefficient(execution_time_ms: float, expected_ms: int) -> float:
    ratio = execution_time_ms / expected_ms
    if ratio < TIME_FAST_RATIO:
        return TIME_COEFF_FAST
    if ratio <= TIME_ON_PACE_RATIO:
        return TIME_COEFF_ON_PACE
    if ratio <= TIME_SLOW_RATIO:
        return TIME_COEFF_SLOW
    return TIME_COEFF_VERY_SLOW


def hint_penalty_coefficient(hints_used: Iterable[int]) -> float:
    """Only the highest unlocked level counts."""
    levels = set(hints_used)
    if not levels:
        return HINT_PENALTY_NONE
    return HINT_PENALTY[max(levels)]


def _round_half_up(value: float) -> int:
    """76.5 → 77; round() would give 76."""
    return int(math.floor(value + 0.5))


# ─────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────

def _validate(
    passed_cases:       int,
    total_cases:        int,
    execution_time_ms:  float,
    difficulty:         int,
    hints_used:         set[int],
) -> None:
    if total_cases < 0 or passed_cases < 0:
        raise InvalidInput(
            f"Test case counts must be non-negative (passed={passed_cases}, total={total_cases})."
        )
    if passed_cases > total_cases:
        raise InvalidInput(
            f"passed_cases={passed_cases} exceeds total_cases={total_cases}."
        )
    if execution_time_ms < 0:
        raise InvalidInput(f"execution_time_ms must be non-negative, got {execution_time_ms}.")
    if not DIFFICULTY_MIN <= difficulty <= DIFFICULTY_MAX:
        raise InvalidInput(
            f"difficulty must be in [{DIFFICULTY_MIN}, {DIFFICULTY_MAX}], got {difficulty}."
        )
    bad_levels = sorted(h for h in hints_used if not HINT_LEVEL_MIN <= h <= HINT_LEVEL_MAX)
    if bad_levels:
        raise InvalidInput(f"Hint levels out of range: {bad_levels}.")


# ─────────────────────────────────────────────
# Public interface
# ─────────────────────────────────────────────

def compute_score(
    passed_cases:           int,
    total_cases:            int,
    execution_time_ms:      float,
    difficulty:             int,
    hints_used:             Iterable[int] = (),
    quality_coefficient:    Optional[float] = None,
) -> ScoreResult:
    """
    final = round(100 × correctness × time × hint_penalty × quality)

    correctness   1.0 at 100% pass, 0.7 at >= 80%, 0.4 at >= 50%, else 0.0
    time          1.2 / 1.0 / 0.9 / 0.7 on execution_time / expected_time
    hint_penalty  by the highest hint level unlocked (1.0 when none)
    quality       taken as given; 1.0 when None

    The raw product can exceed 100 through the time bonus; final_score is
    clamped to SCORE_CAP and raw_score keeps the unclamped value.
    """
    hint_levels = set(hints_used)
    _validate(passed_cases, total_cases, execution_time_ms, difficulty, hint_levels)

    correctness = correctness_coefficient(pass_rate(passed_cases, total_cases))
    expected    = expected_time_ms(difficulty)
    timing      = time_coefficient(execution_time_ms, expected)
    penalty     = hint_penalty_coefficient(hint_levels)
    quality     = QUALITY_DEFAULT if quality_coefficient is None else quality_coefficient

    raw = _round_half_up(SCORE_BASE * correctness * timing * penalty * quality)

    return ScoreResult(
        final_score=min(raw, SCORE_CAP),
        correctness_coefficient=correctness,
        time_coefficient=timing,
        hint_penalty_coefficient=penalty,
        quality_coefficient=quality,
        expected_time_ms=expected,
        raw_score=raw,
    )
