"""Progress between the journey's anchor date and the target."""

from datetime import datetime, timedelta

from .models import HourglassState, ProgressBand, ProgressState, ThermometerState

# Upper bounds (exclusive) for each band, checked in order
BAND_THRESHOLDS = (
    (25.0, ProgressBand.EARLY),
    (50.0, ProgressBand.STEADY),
    (75.0, ProgressBand.PAST_MIDPOINT),
    (90.0, ProgressBand.NEAR),
)


def band_for(percentage: float) -> ProgressBand:
    """Pick the qualitative band for a percentage."""
    for upper, band in BAND_THRESHOLDS:
        if percentage < upper:
            return band
    return ProgressBand.FINAL


def compute_progress(anchor: datetime, target: datetime, now: datetime) -> ProgressState:
    """
    Calculate how far now sits between anchor and target.

    Args:
        anchor: When the journey began
        target: Target instant
        now: Current instant

    Returns:
        ProgressState with percentage clamped to [0, 100]. A target at or
        before the anchor counts as complete.
    """
    total_span = target - anchor
    if total_span.total_seconds() <= 0:
        return ProgressState(percentage=100.0, band=ProgressBand.FINAL)

    elapsed = now - anchor
    raw = (elapsed / total_span) * 100
    percentage = max(0.0, min(100.0, raw))

    return ProgressState(percentage=percentage, band=band_for(percentage))


def compute_thermometer(progress: ProgressState, days: int) -> ThermometerState:
    return ThermometerState(liquid_height=progress.percentage, days=days)


def compute_hourglass(progress: ProgressState, now: datetime, target: datetime) -> HourglassState:
    """Top sand empties and bottom sand fills as progress grows."""
    seconds_remaining = max(0, (target - now) // timedelta(seconds=1))
    return HourglassState(
        top_sand=100.0 - progress.percentage,
        bottom_sand=progress.percentage,
        seconds_remaining=seconds_remaining,
        flowing=0.0 < progress.percentage < 100.0,
    )
