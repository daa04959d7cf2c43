"""Tests for the countdown breakdown."""

from datetime import datetime, timedelta

import pytest

from countdown.core.duration import compute_countdown, days_remaining

NOW = datetime(2024, 1, 1, 9, 0, 0)


class TestComputeCountdown:
    def test_breakdown_uses_remainders(self):
        target = NOW + timedelta(days=3, hours=4, minutes=5, seconds=6, milliseconds=789)
        snap = compute_countdown(NOW, target)

        assert snap.is_reached is False
        assert (snap.days, snap.hours, snap.minutes, snap.seconds) == (3, 4, 5, 6)
        assert snap.total_hours == 3 * 24 + 4
        assert snap.total_seconds == ((3 * 24 + 4) * 60 + 5) * 60 + 6

    def test_weeks_and_months(self):
        snap = compute_countdown(NOW, NOW + timedelta(days=100))

        assert snap.days == 100
        assert snap.total_weeks == 14
        # 100 / 30.44 = 3.28
        assert snap.total_months == 3

    def test_months_use_average_length(self):
        assert compute_countdown(NOW, NOW + timedelta(days=30)).total_months == 0
        assert compute_countdown(NOW, NOW + timedelta(days=31)).total_months == 1
        assert compute_countdown(NOW, NOW + timedelta(days=365)).total_months == 11

    def test_target_equal_to_now_is_reached(self):
        snap = compute_countdown(NOW, NOW)
        assert snap.is_reached is True
        assert snap.days == snap.hours == snap.minutes == snap.seconds == 0
        assert snap.total_hours == 0

    def test_past_target_is_reached(self):
        snap = compute_countdown(NOW, NOW - timedelta(days=10))
        assert snap.is_reached is True
        assert snap.total_weeks == 0

    def test_sub_millisecond_difference_is_reached(self):
        assert compute_countdown(NOW, NOW + timedelta(microseconds=500)).is_reached is True

    def test_under_one_second_is_not_reached(self):
        snap = compute_countdown(NOW, NOW + timedelta(milliseconds=400))
        assert snap.is_reached is False
        assert snap.seconds == 0

    @pytest.mark.parametrize(
        "delta",
        [
            timedelta(milliseconds=1),
            timedelta(seconds=59, milliseconds=999),
            timedelta(hours=23, minutes=59, seconds=59),
            timedelta(days=1),
            timedelta(days=400, hours=7, minutes=13, seconds=2, milliseconds=1),
            timedelta(days=18262, milliseconds=999),
        ],
    )
    def test_breakdown_brackets_total_seconds(self, delta):
        snap = compute_countdown(NOW, NOW + delta)
        total = snap.days * 86400 + snap.hours * 3600 + snap.minutes * 60 + snap.seconds
        whole_seconds = int(delta.total_seconds() // 1)

        assert total <= whole_seconds < total + 1
        assert 0 <= snap.hours <= 23
        assert 0 <= snap.minutes <= 59
        assert 0 <= snap.seconds <= 59

    def test_year_boundary(self):
        snap = compute_countdown(datetime(2025, 12, 31, 23, 59, 59), datetime(2026, 1, 1))
        assert snap.seconds == 1
        assert snap.days == 0

    def test_leap_day_counts(self):
        snap = compute_countdown(datetime(2024, 2, 28), datetime(2024, 3, 1))
        assert snap.days == 2

    def test_same_inputs_same_output(self):
        target = NOW + timedelta(days=12, seconds=5)
        assert compute_countdown(NOW, target) == compute_countdown(NOW, target)


def test_days_remaining_floors():
    assert days_remaining(NOW, NOW + timedelta(days=2, hours=23)) == 2
    assert days_remaining(NOW, NOW + timedelta(hours=1)) == 0
    assert days_remaining(NOW, NOW - timedelta(hours=1)) == -1
