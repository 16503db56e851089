"""Tests for the multi-coefficient scoring engine."""

import pytest

from analysis.scoring_engine import (
    compute_score,
    correctness_coefficient,
    expected_time_ms,
    hint_penalty_coefficient,
    pass_rate,
    time_coefficient,
)
from utils.constants import HINT_PENALTY_PERCENT
from utils.errors import InvalidInput


class TestCorrectness:
    @pytest.mark.parametrize(
        "passed,total,expected",
        [
            (10, 10, 1.0),
            (9, 10, 0.7),
            (8, 10, 0.7),
            (7, 10, 0.4),
            (5, 10, 0.4),
            (4, 10, 0.0),
            (0, 10, 0.0),
        ],
    )
    def test_bands(self, passed, total, expected):
        assert correctness_coefficient(pass_rate(passed, total)) == expected

    def test_no_test_cases_is_zero_not_nan(self):
        assert pass_rate(0, 0) == 0.0
        result = compute_score(0, 0, 100, 3)
        assert result.correctness_coefficient == 0.0
        assert result.final_score == 0


class TestExpectedTime:
    @pytest.mark.parametrize(
        "difficulty,expected",
        [(1, 300_000), (2, 300_000), (3, 600_000), (4, 600_000), (5, 900_000),
         (6, 900_000), (7, 1_200_000), (8, 1_200_000), (9, 1_800_000), (10, 1_800_000)],
    )
    def test_bands(self, difficulty, expected):
        assert expected_time_ms(difficulty) == expected


class TestTimeCoefficient:
    def test_fast_bonus(self):
        assert time_coefficient(299_999, 600_000) == 1.2

    def test_half_ratio_is_on_pace(self):
        assert time_coefficient(300_000, 600_000) == 1.0

    def test_exactly_expected_is_on_pace(self):
        assert time_coefficient(600_000, 600_000) == 1.0

    def test_slow(self):
        assert time_coefficient(1_200_000, 600_000) == 0.9

    def test_very_slow(self):
        assert time_coefficient(1_200_001, 600_000) == 0.7


class TestHintPenalty:
    def test_no_hints(self):
        assert hint_penalty_coefficient([]) == 1.0

    def test_only_highest_level_counts(self):
        assert hint_penalty_coefficient({1, 2, 3}) == 0.70
        assert hint_penalty_coefficient({3}) == 0.70

    @pytest.mark.parametrize("level,expected", [(1, 0.95), (2, 0.85), (3, 0.70), (4, 0.50)])
    def test_levels(self, level, expected):
        assert hint_penalty_coefficient([level]) == expected

    def test_percent_table_matches_coefficients(self):
        assert HINT_PENALTY_PERCENT == {1: 5, 2: 15, 3: 30, 4: 50}

    @pytest.mark.parametrize("passed", [5, 8, 10])
    @pytest.mark.parametrize("time_ms", [100_000, 500_000, 1_000_000, 5_000_000])
    def test_more_hints_never_raise_the_score(self, passed, time_ms):
        scores = [
            compute_score(passed, 10, time_ms, 4, hints_used=hints).final_score
            for hints in ((), {1}, {1, 2}, {1, 2, 3}, {1, 2, 3, 4})
        ]
        assert scores == sorted(scores, reverse=True)
        assert scores[4] <= scores[1] <= scores[0]


class TestComputeScore:
    def test_fast_medium_problem_hits_the_cap(self):
        result = compute_score(10, 10, 250_000, 5)
        assert result.expected_time_ms == 900_000
        assert result.time_coefficient == 1.2
        assert result.raw_score == 120
        assert result.final_score == 100

    def test_perfect_fast_submission_is_capped(self):
        result = compute_score(10, 10, 100_000, 3)
        assert result.correctness_coefficient == 1.0
        assert result.time_coefficient == 1.2
        assert result.raw_score == 120
        assert result.final_score == 100

    def test_partial_slow_with_hint(self):
        result = compute_score(8, 10, 1_000_000, 5, hints_used={2})
        assert result.correctness_coefficient == 0.7
        assert result.time_coefficient == 0.9
        assert result.hint_penalty_coefficient == 0.85
        assert result.final_score == 54

    def test_seventy_percent_falls_in_lower_band(self):
        result = compute_score(7, 10, 1_000_000, 5, hints_used={2})
        assert result.correctness_coefficient == 0.4
        assert result.final_score == 31

    def test_quality_defaults_to_one(self):
        assert compute_score(10, 10, 600_000, 4).quality_coefficient == 1.0

    def test_quality_scales_score(self):
        result = compute_score(10, 10, 600_000, 4, quality_coefficient=0.8)
        assert result.final_score == 80

    def test_ties_round_half_up(self):
        # 100 × 1.0 × 1.0 × 0.5 × 0.25 = 12.5
        result = compute_score(10, 10, 600_000, 4, hints_used=[4], quality_coefficient=0.25)
        assert result.final_score == 13

    def test_score_stays_in_range(self):
        for passed in range(0, 11):
            for time_ms in (0, 400_000, 900_000, 5_000_000):
                for hints in ((), (1,), (1, 2, 3, 4)):
                    result = compute_score(passed, 10, time_ms, 4, hints_used=hints)
                    assert 0 <= result.final_score <= 100

    def test_deterministic(self):
        a = compute_score(9, 10, 123_456, 6, hints_used=[1], quality_coefficient=0.9)
        b = compute_score(9, 10, 123_456, 6, hints_used=[1], quality_coefficient=0.9)
        assert a == b

    def test_to_dict_has_breakdown(self):
        data = compute_score(10, 10, 100, 1).to_dict()
        assert set(data) == {
            "final_score", "correctness_coefficient", "time_coefficient",
            "hint_penalty_coefficient", "quality_coefficient", "expected_time_ms",
            "raw_score",
        }


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(passed_cases=11, total_cases=10, execution_time_ms=0, difficulty=3),
            dict(passed_cases=-1, total_cases=10, execution_time_ms=0, difficulty=3),
            dict(passed_cases=1, total_cases=10, execution_time_ms=-5, difficulty=3),
            dict(passed_cases=1, total_cases=10, execution_time_ms=0, difficulty=0),
            dict(passed_cases=1, total_cases=10, execution_time_ms=0, difficulty=11),
            dict(passed_cases=1, total_cases=10, execution_time_ms=0, difficulty=3, hints_used=[5]),
        ],
    )
    def test_rejects_bad_input(self, kwargs):
        with pytest.raises(InvalidInput):
            compute_score(**kwargs)
