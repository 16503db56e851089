# analysis/proficiency_tracker.py
# AlgoCoach — Per-category proficiency step update and the recent-score FIFO.
# Pure map/list transformations. Reading and persisting state is the caller's job.
# Imports from: utils/constants.py

from typing import Iterable, Mapping, Sequence

from utils.constants import (
    PROFICIENCY_DEFAULT,
    PROFICIENCY_DELTA_FLOOR,
    PROFICIENCY_MAX,
    PROFICIENCY_MIN,
    PROFICIENCY_STEPS,
    RECENT_SCORES_CAPACITY,
)


def proficiency_delta(score: float) -> float:
    """
    Step function on the final score:
        >= 90 → +0.3   >= 80 → +0.2   >= 70 → +0.1
        >= 60 →  0.0   >= 50 → -0.1   else  → -0.2
    """
    for min_score, delta in PROFICIENCY_STEPS:
        if score >= min_score:
            return delta
    return PROFICIENCY_DELTA_FLOOR


def update_proficiency(
    current_proficiency:    Mapping[str, float],
    problem_categories:     Iterable[str],
    score:                  float,
) -> dict[str, float]:
    """
    Returns a new map with every category in problem_categories moved by
    proficiency_delta(score), clamped to [1.0, 10.0] and rounded to 1 decimal.
    Unseen categories start at PROFICIENCY_DEFAULT. Other entries are copied
    through untouched; the input map is never mutated.
    """
    updated = dict(current_proficiency)
    delta = proficiency_delta(score)

    for category in set(problem_categories):
        current = updated.get(category, PROFICIENCY_DEFAULT)
        new_value = max(PROFICIENCY_MIN, min(PROFICIENCY_MAX, current + delta))
        updated[category] = round(new_value, 1)

    return updated


def push_recent_score(
    window:     Sequence[float],
    new_score:  float,
    capacity:   int = RECENT_SCORES_CAPACITY,
) -> list[float]:
    """Fixed-size FIFO: append, then drop from the front (oldest) past capacity."""
    if capacity < 1:
        raise ValueError(f"capacity must be positive, got {capacity}")
    updated = list(window)
    updated.append(new_score)
    return updated[-capacity:]
