"""Value types produced by the countdown engines."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class CountdownSnapshot:
    """Time remaining until the target, broken down for display."""
    days: int = 0
    hours: int = 0  # 0-23
    minutes: int = 0  # 0-59
    seconds: int = 0  # 0-59
    total_seconds: int = 0
    total_hours: int = 0
    total_weeks: int = 0
    total_months: int = 0
    is_reached: bool = False


@dataclass(frozen=True)
class CalendarMetrics:
    """Calendar-aware counts between today and the target day."""
    total_days: int = 0
    weekend_count: int = 0  # Saturdays
    work_days: int = 0
    work_hours: int = 0
    mondays: int = 0
    fridays: int = 0
    sleeps: int = 0
    sunrises: int = 0


class ProgressBand(str, Enum):
    """Qualitative progress bucket, ordered from start to finish."""

    EARLY = "early"
    STEADY = "steady"
    PAST_MIDPOINT = "past-midpoint"
    NEAR = "near"
    FINAL = "final"

    @property
    def description(self) -> str:
        return _BAND_DESCRIPTIONS[self]

    @property
    def emoji(self) -> str:
        return _BAND_EMOJI[self]


_BAND_DESCRIPTIONS = {
    ProgressBand.EARLY: "The journey has begun!",
    ProgressBand.STEADY: "Making steady progress!",
    ProgressBand.PAST_MIDPOINT: "More than halfway there!",
    ProgressBand.NEAR: "The finish line is in sight!",
    ProgressBand.FINAL: "Almost there! So close!",
}

_BAND_EMOJI = {
    ProgressBand.EARLY: "🌱",
    ProgressBand.STEADY: "🚶",
    ProgressBand.PAST_MIDPOINT: "🏃",
    ProgressBand.NEAR: "🎯",
    ProgressBand.FINAL: "🚀",
}


@dataclass(frozen=True)
class ProgressState:
    """Completion percentage between the anchor and the target."""
    percentage: float
    band: ProgressBand


@dataclass(frozen=True)
class ThermometerState:
    """Thermometer view: liquid level plus the days shown in the bulb."""
    liquid_height: float
    days: int


@dataclass(frozen=True)
class HourglassState:
    """Hourglass view: top sand empties while bottom sand fills."""
    top_sand: float
    bottom_sand: float
    seconds_remaining: int
    flowing: bool


class MilestoneState(str, Enum):
    ACHIEVED = "achieved"
    ACTIVE = "active"
    LOCKED = "locked"


@dataclass(frozen=True)
class Milestone:
    """A fixed day threshold with its display label."""
    threshold_days: int
    label: str
    icon: str = ""
    emoji: str = ""


@dataclass(frozen=True)
class MilestoneStatus:
    """Derived state of one milestone for a given days-remaining value."""
    milestone: Milestone
    state: MilestoneState

    @property
    def display_icon(self) -> str:
        if self.state == MilestoneState.ACHIEVED:
            return "✅"
        if self.state == MilestoneState.ACTIVE:
            return self.milestone.icon
        return "🔒"


class RejectionReason(str, Enum):
    """Why a candidate target date was refused."""

    EMPTY_INPUT = "EMPTY_INPUT"
    UNPARSEABLE = "UNPARSEABLE"
    NOT_FUTURE = "NOT_FUTURE"
    TOO_FAR_FUTURE = "TOO_FAR_FUTURE"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.EMPTY_INPUT: "Please select a date and time.",
    RejectionReason.UNPARSEABLE: "That doesn't look like a valid date.",
    RejectionReason.NOT_FUTURE: "The target date must be in the future.",
    RejectionReason.TOO_FAR_FUTURE: "The target date must be within 50 years.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a candidate target date."""
    value: Optional[datetime] = None
    reason: Optional[RejectionReason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


