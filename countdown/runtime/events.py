"""Events pushed by the driving loop for celebrations and notifications."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    MILESTONE_TRANSITION = "milestone_transition"
    TARGET_REACHED = "target_reached"
    VALIDATION_REJECTED = "validation_rejected"
    TARGET_UPDATED = "target_updated"
    STORE_FAILURE = "store_failure"


@dataclass(frozen=True)
class CountdownEvent:
    type: EventType
    payload: dict[str, Any] = field(default_factory=dict)


class EventSink(Protocol):
    def emit(self, event: CountdownEvent) -> None: ...


class LoggingEventSink:
    """Turns events into log lines (the notification toast of a headless run)."""

    def emit(self, event: CountdownEvent) -> None:
        if event.type == EventType.MILESTONE_TRANSITION:
            logger.info(f"🎉 Milestone: {event.payload['days']} days remaining!")
        elif event.type == EventType.TARGET_REACHED:
            logger.info("🎉 Target date reached!")
        elif event.type == EventType.TARGET_UPDATED:
            logger.info(f"🎉 Target date updated to {event.payload['target']}")
        elif event.type == EventType.VALIDATION_REJECTED:
            logger.info(f"Target date rejected: {event.payload['message']}")
        elif event.type == EventType.STORE_FAILURE:
            logger.warning(f"Target date store failure: {event.payload['error']}")


class RecordingEventSink:
    """Keeps every event in memory."""

    def __init__(self):
        self.events: list[CountdownEvent] = []

    def emit(self, event: CountdownEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType) -> list[CountdownEvent]:
        return [e for e in self.events if e.type == event_type]
