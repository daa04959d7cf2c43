"""Per-tick results handed from the driving loop to the presentation layer."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Union

from countdown.core.models import (
    CalendarMetrics,
    CountdownSnapshot,
    HourglassState,
    MilestoneStatus,
    ProgressState,
    ThermometerState,
)


@dataclass(frozen=True)
class CountdownFrame:
    """Everything the engines computed for one tick."""
    now: datetime
    target: datetime
    snapshot: CountdownSnapshot
    metrics: CalendarMetrics
    progress: ProgressState
    thermometer: ThermometerState
    hourglass: HourglassState
    milestones: list[MilestoneStatus]
    days_remaining: int


@dataclass(frozen=True)
class CompletedFrame:
    """Terminal state: the target date has been reached."""
    now: datetime
    target: datetime


Frame = Union[CountdownFrame, CompletedFrame]


class OutputSink(Protocol):
    def publish(self, frame: Frame) -> None: ...


class NullSink:
    def publish(self, frame: Frame) -> None:
        pass
