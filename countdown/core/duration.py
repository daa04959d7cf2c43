"""Countdown breakdown from the raw time difference."""

import math
from datetime import datetime, timedelta

from .models import CountdownSnapshot

ONE_MS = timedelta(milliseconds=1)
ONE_DAY = timedelta(days=1)

# Average month length. Deliberately approximate, not calendar months.
AVERAGE_MONTH_DAYS = 30.44


def diff_milliseconds(now: datetime, target: datetime) -> int:
    """Signed whole milliseconds from now until target (floored)."""
    return (target - now) // ONE_MS


def compute_countdown(now: datetime, target: datetime) -> CountdownSnapshot:
    """
    Break the time until target into display units.

    Args:
        now: Current instant
        target: Target instant

    Returns:
        CountdownSnapshot. When the target is at or before now the snapshot
        has is_reached=True and every numeric field is 0.
    """
    diff = diff_milliseconds(now, target)
    if diff <= 0:
        return CountdownSnapshot(is_reached=True)

    seconds = diff // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    return CountdownSnapshot(
        days=days,
        hours=hours % 24,
        minutes=minutes % 60,
        seconds=seconds % 60,
        total_seconds=seconds,
        total_hours=hours,
        total_weeks=days // 7,
        total_months=math.floor(days / AVERAGE_MONTH_DAYS),
        is_reached=False,
    )


def days_remaining(now: datetime, target: datetime) -> int:
    """Whole days until target, floored (negative once target has passed)."""
    return (target - now) // ONE_DAY
