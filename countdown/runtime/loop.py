"""Driving loop: samples the clock, runs the engines, publishes frames."""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Iterable, Optional, Union

from countdown.core.duration import compute_countdown, days_remaining
from countdown.core.metrics import compute_calendar_metrics
from countdown.core.milestones import (
    DEFAULT_MILESTONES,
    evaluate_milestones,
    is_milestone_crossing,
)
from countdown.core.models import Milestone, ValidationResult
from countdown.core.progress import compute_hourglass, compute_progress, compute_thermometer
from countdown.core.validation import validate_target
from countdown.storage.database import StoreError, TargetDateStore

from .clock import Clock, SystemClock
from .events import CountdownEvent, EventSink, EventType, LoggingEventSink
from .frames import CompletedFrame, CountdownFrame, Frame, NullSink, OutputSink

logger = logging.getLogger(__name__)


@dataclass
class CountdownState:
    """State owned by the driving loop."""
    target: datetime
    previous_days: Optional[int] = None
    reached: bool = False


class CountdownLoop:
    """Runs one complete evaluation per tick against the current target."""

    def __init__(
        self,
        default_target: datetime,
        anchor: datetime,
        store: Optional[TargetDateStore] = None,
        clock: Optional[Clock] = None,
        output: Optional[OutputSink] = None,
        events: Optional[EventSink] = None,
        milestones: Iterable[Milestone] = DEFAULT_MILESTONES,
    ):
        """
        Initialize the loop.

        Args:
            default_target: Target used when nothing valid is stored
            anchor: When the journey began (progress starts here)
            store: Persistence for the user's chosen target
            clock: Time source
            output: Receives a frame per tick
            events: Receives celebration and notification events
            milestones: Milestones in display order
        """
        self.default_target = default_target
        self.anchor = anchor
        self.store = store
        self.clock = clock or SystemClock()
        self.output = output or NullSink()
        self.events = events or LoggingEventSink()
        self.milestones = tuple(milestones)
        self.state = CountdownState(target=default_target)

    @property
    def target(self) -> datetime:
        return self.state.target

    @property
    def finished(self) -> bool:
        return self.state.reached

    def _store_failed(self, error: StoreError):
        logger.warning(f"{error.code}: {error}")
        self._emit(EventType.STORE_FAILURE, code=error.code, error=str(error))

    def _emit(self, event_type: EventType, **payload):
        self.events.emit(CountdownEvent(type=event_type, payload=payload))

    def load_target(self) -> datetime:
        """
        Load the saved target, falling back to the default.

        Returns:
            The target now in effect
        """
        saved = None
        if self.store is not None:
            try:
                saved = self.store.load()
            except StoreError as e:
                self._store_failed(e)

        self.state = CountdownState(target=saved or self.default_target)
        logger.info(f"Counting down to {self.state.target.isoformat(timespec='minutes')}")
        return self.state.target

    def update_target(self, candidate: Union[str, datetime, None]) -> ValidationResult:
        """
        Validate and apply a new target date.

        The old target is replaced as a whole on success. Persisting is
        attempted afterwards and a failure there only loses durability.

        Args:
            candidate: User input (YYYY-MM-DDTHH:mm) or a datetime

        Returns:
            The validation result
        """
        result = validate_target(candidate, self.clock.now())

        if not result.ok:
            self._emit(
                EventType.VALIDATION_REJECTED,
                reason=result.reason.value,
                message=result.reason.message,
            )
            return result

        self.state = CountdownState(target=result.value)

        if self.store is not None:
            try:
                self.store.save(result.value)
            except StoreError as e:
                self._store_failed(e)

        self._emit(EventType.TARGET_UPDATED, target=result.value.isoformat(timespec="minutes"))
        return result

    def reset_target(self) -> datetime:
        """Forget the saved target and go back to the default."""
        if self.store is not None:
            try:
                self.store.clear()
            except StoreError as e:
                self._store_failed(e)

        self.state = CountdownState(target=self.default_target)
        return self.state.target

    def tick(self) -> Frame:
        """Run one evaluation and publish the resulting frame."""
        now = self.clock.now()
        target = self.state.target

        snapshot = compute_countdown(now, target)
        if snapshot.is_reached:
            if not self.state.reached:
                self.state.reached = True
                self._emit(EventType.TARGET_REACHED, target=target.isoformat(timespec="minutes"))
            frame = CompletedFrame(now=now, target=target)
            self.output.publish(frame)
            return frame

        remaining = days_remaining(now, target)
        if is_milestone_crossing(self.state.previous_days, remaining):
            self._emit(EventType.MILESTONE_TRANSITION, days=remaining)
        self.state.previous_days = remaining

        progress = compute_progress(self.anchor, target, now)
        frame = CountdownFrame(
            now=now,
            target=target,
            snapshot=snapshot,
            metrics=compute_calendar_metrics(now, target, days=snapshot.days),
            progress=progress,
            thermometer=compute_thermometer(progress, snapshot.days),
            hourglass=compute_hourglass(progress, now, target),
            milestones=evaluate_milestones(self.milestones, snapshot.days),
            days_remaining=remaining,
        )
        self.output.publish(frame)
        return frame


class Ticker:
    """Repeats loop.tick() on a fixed period until stopped or finished."""

    def __init__(
        self,
        loop: CountdownLoop,
        interval: float = 1.0,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.loop = loop
        self.interval = interval
        self.monotonic = monotonic
        self.sleep = sleep
        self._running = False
        self.ticks = 0
        self.skipped = 0

    def stop(self):
        self._running = False

    async def run(self):
        """
        Tick until the countdown finishes or stop() is called.

        Ticks never overlap. If a tick overruns its slot, the missed slots
        are dropped and the next tick lands on the following boundary.
        """
        self._running = True
        next_at = self.monotonic()

        while self._running:
            self.loop.tick()
            self.ticks += 1

            if self.loop.finished:
                logger.info("Countdown finished, stopping ticker")
                break

            next_at += self.interval
            now = self.monotonic()
            if next_at <= now:
                missed = int((now - next_at) // self.interval) + 1
                self.skipped += missed
                next_at += missed * self.interval

            await self.sleep(next_at - now)

        self._running = False


async def run_countdown(new_target: Optional[str] = None, reset: bool = False):
    """Run the countdown, rendering the dashboard image every tick."""
    from pathlib import Path

    from countdown.config import settings
    from countdown.dashboard.renderer import DashboardRenderer, ImageSink
    from countdown.storage.database import KeyValueStore

    store = TargetDateStore(KeyValueStore(settings.store_path), key=settings.store_key)
    image_path = Path(settings.static_dir) / settings.dashboard_image
    renderer = DashboardRenderer(output_dir=str(image_path.parent))

    loop = CountdownLoop(
        default_target=datetime.fromisoformat(settings.target_date),
        anchor=datetime.fromisoformat(settings.anchor_date),
        store=store,
        output=ImageSink(renderer, filename=image_path.name),
    )
    loop.load_target()

    if reset:
        loop.reset_target()
    if new_target is not None:
        result = loop.update_target(new_target)
        if not result.ok:
            logger.error(f"Rejected target date: {result.reason.message}")
            return

    ticker = Ticker(loop, interval=settings.tick_interval)
    await ticker.run()


if __name__ == "__main__":
    import argparse

    from countdown.config import settings

    parser = argparse.ArgumentParser(description="Run the countdown dashboard loop")
    parser.add_argument("--target", help="New target date (YYYY-MM-DDTHH:mm)")
    parser.add_argument("--reset", action="store_true", help="Forget the saved target date")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        asyncio.run(run_countdown(new_target=args.target, reset=args.reset))
    except KeyboardInterrupt:
        logger.info("Stopped")
