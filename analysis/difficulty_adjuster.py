# analysis/difficulty_adjuster.py
# AlgoCoach — Rule engine that decides whether a learner's level moves.
# Pure deterministic logic. Applying the decision is the caller's job.
# Imports from: utils/constants.py

from dataclasses import dataclass
from typing import Optional, Sequence

from utils.constants import (
    DIFFICULTY_MIN_SCORES,
    DIFFICULTY_WINDOW,
    DOWN_AVERAGE_MAX,
    DOWN_STREAK_LEN,
    DOWN_STREAK_MAX_SCORE,
    LEVEL_MAX,
    LEVEL_MIN,
    UP_AVERAGE_MIN,
    UP_STREAK_LEN,
    UP_STREAK_MIN_SCORE,
)

DIRECTION_UP   = "up"
DIRECTION_DOWN = "down"


# ─────────────────────────────────────────────
# Output contract
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class AdjustmentDecision:
    should_adjust:  bool
    new_level:      Optional[int] = None
    direction:      Optional[str] = None    # 'up' | 'down' | None
    reason:         Optional[str] = None

    def to_notice(self) -> dict:
        """Shape sent to the learner: {changed, new_level?, direction?, reason?}."""
        if not self.should_adjust:
            return {"changed": False}
        return {
            "changed":   True,
            "new_level": self.new_level,
            "direction": self.direction,
            "reason":    self.reason,
        }


NO_ADJUSTMENT = AdjustmentDecision(should_adjust=False)


# ─────────────────────────────────────────────
# Rule helpers
# ─────────────────────────────────────────────

def _mean(scores: Sequence[float]) -> float:
    return sum(scores) / len(scores)


def _increase_reason(scores: Sequence[float]) -> Optional[str]:
    if len(scores) >= UP_STREAK_LEN and all(
        s >= UP_STREAK_MIN_SCORE for s in scores[:UP_STREAK_LEN]
    ):
        return f"{UP_STREAK_LEN} consecutive scores >= {UP_STREAK_MIN_SCORE:g}"

    if len(scores) >= DIFFICULTY_WINDOW:
        average = _mean(scores)
        if average >= UP_AVERAGE_MIN:
            return f"{DIFFICULTY_WINDOW}-submission average {average:.1f} >= {UP_AVERAGE_MIN:g}"

    return None


def _decrease_reason(scores: Sequence[float]) -> Optional[str]:
    if len(scores) >= DOWN_STREAK_LEN and all(
        s < DOWN_STREAK_MAX_SCORE for s in scores[:DOWN_STREAK_LEN]
    ):
        return f"{DOWN_STREAK_LEN} consecutive scores < {DOWN_STREAK_MAX_SCORE:g}"

    if len(scores) >= DIFFICULTY_WINDOW:
        average = _mean(scores)
        if average < DOWN_AVERAGE_MAX:
            return f"{DIFFICULTY_WINDOW}-submission average {average:.1f} < {DOWN_AVERAGE_MAX:g}"

    return None


# ─────────────────────────────────────────────
# Public interface
# ─────────────────────────────────────────────

def evaluate(current_level: int, recent_scores_desc: Sequence[float]) -> AdjustmentDecision:
    """
    recent_scores_desc: most recent first. Only the first DIFFICULTY_WINDOW
    scores are looked at.

    Rules, in this exact order (first match wins):
        1. up:   3 most recent all >= 80, or 5-score mean >= 85   (level < 10)
        2. down: 2 most recent both < 50, or 5-score mean < 40    (level > 1)

    Fewer than DIFFICULTY_MIN_SCORES scores never adjusts.
    """
    scores = [float(s) for s in list(recent_scores_desc)[:DIFFICULTY_WINDOW]]
    if len(scores) < DIFFICULTY_MIN_SCORES:
        return NO_ADJUSTMENT

    if current_level < LEVEL_MAX:
        reason = _increase_reason(scores)
        if reason is not None:
            return AdjustmentDecision(
                should_adjust=True,
                new_level=min(current_level + 1, LEVEL_MAX),
                direction=DIRECTION_UP,
                reason=reason,
            )

    if current_level > LEVEL_MIN:
        reason = _decrease_reason(scores)
        if reason is not None:
            return AdjustmentDecision(
                should_adjust=True,
                new_level=max(current_level - 1, LEVEL_MIN),
                direction=DIRECTION_DOWN,
                reason=reason,
            )

    return NO_ADJUSTMENT
