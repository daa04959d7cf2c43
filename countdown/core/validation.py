"""Target date validation."""

import logging
from datetime import datetime
from typing import Optional, Union

from .models import RejectionReason, ValidationResult

logger = logging.getLogger(__name__)

INPUT_FORMAT = "%Y-%m-%dT%H:%M"
MAX_YEARS_AHEAD = 50


def parse_instant(value: str) -> Optional[datetime]:
    """
    Parse a date/time string into a naive local datetime.

    Accepts the input surface format (YYYY-MM-DDTHH:mm) and ISO-8601.
    Offset-aware timestamps are converted to host local time.

    Returns:
        Parsed datetime, or None if the string is not a date
    """
    text = value.strip()
    try:
        return datetime.strptime(text, INPUT_FORMAT)
    except ValueError:
        pass

    # fromisoformat only accepts a "Z" suffix from 3.11 on
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def add_years(dt: datetime, years: int) -> datetime:
    """Shift by calendar years; Feb 29 rolls over to Mar 1 when needed."""
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, month=3, day=1)


def validate_target(
    candidate: Union[str, datetime, None], now: datetime
) -> ValidationResult:
    """
    Check a candidate target date against the acceptance rules.

    Rules are checked in order and the first failure wins: empty input,
    unparseable input, not in the future, more than 50 years ahead.

    Args:
        candidate: User input string or an already parsed datetime
        now: Current instant

    Returns:
        ValidationResult holding either the parsed value or the reason
    """
    if candidate is None or (isinstance(candidate, str) and not candidate.strip()):
        return ValidationResult(reason=RejectionReason.EMPTY_INPUT)

    if isinstance(candidate, datetime):
        parsed = candidate
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
    else:
        parsed = parse_instant(candidate)
        if parsed is None:
            logger.debug(f"Could not parse target date: {candidate!r}")
            return ValidationResult(reason=RejectionReason.UNPARSEABLE)

    if parsed <= now:
        return ValidationResult(reason=RejectionReason.NOT_FUTURE)

    if parsed > add_years(now, MAX_YEARS_AHEAD):
        return ValidationResult(reason=RejectionReason.TOO_FAR_FUTURE)

    return ValidationResult(value=parsed)


def format_date_for_input(dt: datetime) -> str:
    """Format for the date/time input field (YYYY-MM-DDTHH:mm)."""
    return dt.strftime(INPUT_FORMAT)
