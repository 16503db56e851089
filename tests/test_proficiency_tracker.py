"""Tests for per-category proficiency and the recent-score window."""

import pytest

from analysis.proficiency_tracker import (
    proficiency_delta,
    push_recent_score,
    update_proficiency,
)


class TestDelta:
    @pytest.mark.parametrize(
        "score,delta",
        [(100, 0.3), (90, 0.3), (89, 0.2), (80, 0.2), (70, 0.1),
         (69, 0.0), (60, 0.0), (55, -0.1), (50, -0.1), (49, -0.2), (0, -0.2)],
    )
    def test_steps(self, score, delta):
        assert proficiency_delta(score) == delta


class TestUpdateProficiency:
    def test_unseen_category_starts_at_default(self):
        assert update_proficiency({}, ["dp"], 95) == {"dp": 5.3}

    def test_other_categories_untouched(self):
        updated = update_proficiency({"dp": 6.0, "graph": 4.4}, ["dp"], 30)
        assert updated == {"dp": 5.8, "graph": 4.4}

    def test_input_not_mutated(self):
        current = {"dp": 6.0}
        update_proficiency(current, ["dp"], 95)
        assert current == {"dp": 6.0}

    def test_clamped_to_range(self):
        assert update_proficiency({"dp": 9.9}, ["dp"], 100) == {"dp": 10.0}
        assert update_proficiency({"dp": 1.1}, ["dp"], 0) == {"dp": 1.0}

    def test_rounded_to_one_decimal(self):
        value = update_proficiency({"dp": 5.1}, ["dp"], 85)["dp"]
        assert value == 5.3
        assert round(value, 1) == value

    def test_duplicate_categories_applied_once(self):
        assert update_proficiency({}, ["dp", "dp"], 95) == {"dp": 5.3}

    def test_repeated_low_scores_settle_at_the_floor(self):
        proficiency: dict[str, float] = {}
        previous = 5.0
        for _ in range(40):
            proficiency = update_proficiency(proficiency, ["dp"], 30)
            assert 1.0 <= proficiency["dp"] <= previous
            previous = proficiency["dp"]
        assert proficiency == {"dp": 1.0}

    def test_repeated_high_scores_settle_at_the_ceiling(self):
        proficiency: dict[str, float] = {}
        previous = 5.0
        for _ in range(40):
            proficiency = update_proficiency(proficiency, ["dp"], 95)
            assert previous <= proficiency["dp"] <= 10.0
            previous = proficiency["dp"]
        assert proficiency == {"dp": 10.0}


class TestRecentWindow:
    def test_appends_newest_last(self):
        assert push_recent_score([10, 20], 30) == [10, 20, 30]

    def test_drops_oldest_past_capacity(self):
        window = list(range(10))
        assert push_recent_score(window, 99) == [1, 2, 3, 4, 5, 6, 7, 8, 9, 99]

    def test_never_exceeds_capacity(self):
        window: list[float] = []
        for score in range(25):
            window = push_recent_score(window, score, capacity=10)
            assert len(window) <= 10
        assert window == list(range(15, 25))

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            push_recent_score([], 1, capacity=0)
