"""
Unit tests for the SM-2 calculation.

Tests:
- First, second and later successful reviews
- Failure reset
- Ease factor floor
- Half-up rounding of the interval
"""

from datetime import datetime, timedelta, timezone

import pytest

from study_core.sm2 import SM2Algorithm

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestSuccessfulReviews:
    """Interval growth for passing ratings."""

    def test_first_review_schedules_one_day(self):
        ef, interval, reps, next_review = SM2Algorithm.calculate_next_review(2.5, 0, 0, 5, NOW)

        assert reps == 1
        assert interval == 1
        assert ef == pytest.approx(2.6)
        assert next_review == NOW + timedelta(days=1)

    def test_second_review_schedules_six_days(self):
        ef, interval, reps, _ = SM2Algorithm.calculate_next_review(2.6, 1, 1, 4, NOW)

        assert reps == 2
        assert interval == 6
        assert ef == pytest.approx(2.6)

    def test_third_review_multiplies_by_new_ease(self):
        ef, interval, reps, _ = SM2Algorithm.calculate_next_review(2.6, 6, 2, 4, NOW)

        assert reps == 3
        assert interval == 16  # round(6 * 2.6)

    def test_branch_uses_repetitions_before_the_review(self):
        # repetitions == 1 before the review means 6 days, not 1
        _, interval, reps, _ = SM2Algorithm.calculate_next_review(2.5, 1, 1, 3, NOW)

        assert reps == 2
        assert interval == 6

    def test_interval_rounds_half_up(self):
        # 5 * 2.5 = 12.5
        _, interval, _, _ = SM2Algorithm.calculate_next_review(2.5, 5, 2, 4, NOW)

        assert interval == 13

    @pytest.mark.parametrize("quality", [3, 4, 5])
    def test_interval_never_shrinks_on_constant_passing_quality(self, quality):
        ef, interval, reps = 2.5, 0, 0
        previous = 0

        for _ in range(10):
            ef, interval, reps, _ = SM2Algorithm.calculate_next_review(ef, interval, reps, quality, NOW)
            assert interval >= previous
            assert ef >= 1.3
            previous = interval


class TestFailedReviews:
    """Ratings below 3 reset the card."""

    @pytest.mark.parametrize("quality", [0, 1, 2])
    def test_failure_resets_repetitions_and_interval(self, quality):
        ef, interval, reps, next_review = SM2Algorithm.calculate_next_review(2.5, 20, 3, quality, NOW)

        assert reps == 0
        assert interval == 1
        assert next_review == NOW + timedelta(days=1)
        assert 1.3 <= ef < 2.5

    def test_failed_review_lowers_ease(self):
        ef, _, _, _ = SM2Algorithm.calculate_next_review(2.5, 20, 3, 1, NOW)

        assert ef == pytest.approx(1.96)

    def test_ease_never_drops_below_floor(self):
        ef, _, _, _ = SM2Algorithm.calculate_next_review(1.3, 1, 0, 0, NOW)

        assert ef == 1.3


class TestDueHelpers:

    def test_is_due_at_exact_time(self):
        assert SM2Algorithm.is_due_for_review(NOW, NOW)
        assert not SM2Algorithm.is_due_for_review(NOW + timedelta(seconds=1), NOW)

    def test_days_overdue(self):
        assert SM2Algorithm.get_days_overdue(NOW - timedelta(days=3, hours=2), NOW) == 3
        assert SM2Algorithm.get_days_overdue(NOW + timedelta(days=1), NOW) == 0
