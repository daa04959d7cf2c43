"""Calendar metrics: weekends, work days and named weekdays until the target."""

import math
from datetime import datetime, timedelta
from typing import Optional

from .models import CalendarMetrics

HOURS_PER_WORK_DAY = 8

# Python weekday(): Monday=0 ... Sunday=6
MONDAY = 0
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6


def day_floor(dt: datetime) -> datetime:
    """Truncate to local midnight."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def compute_calendar_metrics(
    now: datetime, target: datetime, days: Optional[int] = None
) -> CalendarMetrics:
    """
    Count calendar days between today and the target day.

    Full weeks are counted in closed form; only the trailing partial week
    (at most 6 days) is walked day by day.

    Args:
        now: Current instant
        target: Target instant
        days: Days remaining as reported by the countdown breakdown. Used for
            sleeps/sunrises when given, otherwise the calendar day count is.

    Returns:
        CalendarMetrics, all zero when the target day is today or earlier.
    """
    start = day_floor(now)
    end = day_floor(target)
    total_days = math.ceil((end - start) / timedelta(days=1))

    if total_days <= 0:
        return CalendarMetrics()

    full_weeks, remainder = divmod(total_days, 7)

    # One Saturday, five work days, one Monday and one Friday per full week
    weekends = full_weeks
    work_days = full_weeks * 5
    mondays = full_weeks
    fridays = full_weeks

    first_weekday = start.weekday()
    for offset in range(remainder):
        weekday = (first_weekday + offset) % 7

        if weekday == SATURDAY:
            weekends += 1
        elif weekday == SUNDAY:
            continue
        else:
            work_days += 1
            if weekday == MONDAY:
                mondays += 1
            elif weekday == FRIDAY:
                fridays += 1

    sleeps = total_days if days is None else days

    return CalendarMetrics(
        total_days=total_days,
        weekend_count=weekends,
        work_days=work_days,
        work_hours=work_days * HOURS_PER_WORK_DAY,
        mondays=mondays,
        fridays=fridays,
        sleeps=sleeps,
        sunrises=sleeps + 1,
    )
