"""Flattens a frame into the key/value output surface."""

import math
from datetime import datetime
from typing import Any

from countdown.runtime.frames import CompletedFrame, Frame

MOTIVATION_QUOTES = (
    "🌟 Every day brings you closer to your dream!",
    "💪 You've worked hard for this moment!",
    "🎉 The best is yet to come!",
    "🏖️ Soon you'll have all the time in the world!",
    "✨ Freedom is just around the corner!",
    "🌅 New adventures await!",
    "🎊 Your well-deserved break is coming!",
    "🦋 Get ready to spread your wings!",
    "🌴 Paradise is calling your name!",
    "🎯 You're crushing this countdown!",
)

# Each quote stays up this long
MOTIVATION_ROTATION_MS = 10_000

CELEBRATION = {
    "title": "🎉🎊 CONGRATULATIONS! 🎊🎉",
    "subtitle": "YOU'RE OFFICIALLY RETIRED!",
    "message": "Welcome to the best chapter of your life! 🏖️",
}


def select_motivation(epoch_ms: int) -> str:
    """Pick the quote for this 10 second slot."""
    index = math.floor(epoch_ms / MOTIVATION_ROTATION_MS) % len(MOTIVATION_QUOTES)
    return MOTIVATION_QUOTES[index]


def epoch_ms(dt: datetime) -> int:
    return math.floor(dt.timestamp() * 1000)


def format_target_display(target: datetime) -> str:
    """Short human date, e.g. "Jan 30, 2026"."""
    return f"{target.strftime('%b')} {target.day}, {target.year}"


def build_output(frame: Frame) -> dict[str, Any]:
    """
    Build the presentation values for one frame.

    Args:
        frame: Frame from the driving loop

    Returns:
        Dict keyed by display field. A completed frame yields the
        celebration card instead of the countdown fields.
    """
    if isinstance(frame, CompletedFrame):
        return {
            "completed": True,
            "targetDateDisplay": format_target_display(frame.target),
            **CELEBRATION,
        }

    snapshot = frame.snapshot
    metrics = frame.metrics
    progress = frame.progress

    return {
        "completed": False,
        "days": snapshot.days,
        "hours": snapshot.hours,
        "minutes": snapshot.minutes,
        "seconds": snapshot.seconds,
        "weeks": snapshot.total_weeks,
        "months": snapshot.total_months,
        "totalHours": snapshot.total_hours,
        "weekends": metrics.weekend_count,
        "workDays": metrics.work_days,
        "workHours": metrics.work_hours,
        "sleeps": metrics.sleeps,
        "sunrises": metrics.sunrises,
        "mondays": metrics.mondays,
        "fridays": metrics.fridays,
        "percentage": progress.percentage,
        "band": progress.band.value,
        "bandDescription": f"{progress.band.emoji} {progress.band.description}",
        "targetDateDisplay": format_target_display(frame.target),
        "thermometerDays": frame.thermometer.days,
        "hourglassSecondsLeft": frame.hourglass.seconds_remaining,
        "milestones": [
            {
                "thresholdDays": status.milestone.threshold_days,
                "label": status.milestone.label,
                "state": status.state.value,
                "icon": status.display_icon,
            }
            for status in frame.milestones
        ],
        "motivation": select_motivation(epoch_ms(frame.now)),
    }
