"""Milestone states derived from the days remaining."""

from typing import Iterable, Optional

from .models import Milestone, MilestoneState, MilestoneStatus

# A milestone becomes active this many days before it is achieved
ACTIVE_WINDOW_DAYS = 30

# Furthest to closest
DEFAULT_MILESTONES: tuple[Milestone, ...] = (
    Milestone(730, "2 Years to Go", icon="🎯", emoji="📅"),
    Milestone(365, "One Year Left", icon="🎆", emoji="🗓️"),
    Milestone(180, "6 Months Away", icon="🌸", emoji="⏳"),
    Milestone(100, "Double Digits", icon="💯", emoji="🎊"),
    Milestone(50, "50 Days Left", icon="⚡", emoji="🎉"),
    Milestone(30, "One Month", icon="🎪", emoji="📆"),
    Milestone(7, "Final Week", icon="⭐", emoji="🎯"),
    Milestone(1, "LAST DAY!", icon="🔥", emoji="🚀"),
)

# Days-remaining values that trigger a celebration when crossed
CELEBRATION_DAYS = frozenset({100, 50, 30, 7, 1})


def milestone_state(threshold_days: int, days_remaining: int) -> MilestoneState:
    if days_remaining <= threshold_days:
        return MilestoneState.ACHIEVED
    if days_remaining <= threshold_days + ACTIVE_WINDOW_DAYS:
        return MilestoneState.ACTIVE
    return MilestoneState.LOCKED


def evaluate_milestones(
    milestones: Iterable[Milestone], days_remaining: int
) -> list[MilestoneStatus]:
    """
    Evaluate every milestone against the days remaining.

    Args:
        milestones: Milestones in display order
        days_remaining: Whole days left until the target

    Returns:
        One MilestoneStatus per milestone, in the same order
    """
    return [
        MilestoneStatus(milestone=m, state=milestone_state(m.threshold_days, days_remaining))
        for m in milestones
    ]


def is_milestone_crossing(previous_days: Optional[int], days: int) -> bool:
    """True when days just changed onto one of the celebration values."""
    return (
        previous_days is not None
        and days != previous_days
        and days in CELEBRATION_DAYS
    )
