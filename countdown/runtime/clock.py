"""Clock sources for the driving loop."""

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Host local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Manually advanced clock for deterministic runs."""

    def __init__(self, start: datetime):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta):
        self.current += delta

    def set(self, moment: datetime):
        self.current = moment
