"""
Wall-clock time arithmetic on integer minute-of-day offsets.

All comparisons in the availability engine happen on plain integers
(minutes since midnight), never on "HH:MM" strings.
"""

import re
from datetime import date

import pendulum

from .exceptions import InvalidFormatError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?$")
_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def parse_time(value: str) -> int:
    """
    Convert an "HH:MM" string into minutes since midnight.

    A trailing ":00" seconds component (as stored by the booking backend)
    is accepted and dropped.

    Raises:
        InvalidFormatError: If the string is not a valid 24-hour time
    """
    if not isinstance(value, str):
        raise InvalidFormatError(f"Time must be a string in HH:MM format, got {value!r}")

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidFormatError(f"Time must be in HH:MM format, got {value!r}")

    hours, minutes, seconds = match.groups()
    if seconds is not None and seconds != "00":
        raise InvalidFormatError(f"Seconds are not supported in time {value!r}")

    hour = int(hours)
    minute = int(minutes)

    if not 0 <= hour <= 23:
        raise InvalidFormatError(f"Hour must be between 0 and 23, got {hour}")
    if not 0 <= minute <= 59:
        raise InvalidFormatError(f"Minute must be between 0 and 59, got {minute}")

    return hour * 60 + minute


def validate_time_of_day(value: int) -> int:
    """Ensure a minute offset lies within a single day."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFormatError(f"Time of day must be an integer minute offset, got {value!r}")
    if not 0 <= value < MINUTES_PER_DAY:
        raise InvalidFormatError(
            f"Time of day must be between 0 and {MINUTES_PER_DAY - 1} minutes, got {value}"
        )
    return value


def format_time(value: int) -> str:
    """Format minutes since midnight as a zero-padded "HH:MM" string."""
    validate_time_of_day(value)
    hours, minutes = divmod(value, 60)
    return f"{hours:02d}:{minutes:02d}"


def format_time_12h(value: int) -> str:
    """Format minutes since midnight for display, e.g. 810 -> "1:30 PM"."""
    validate_time_of_day(value)
    hours, minutes = divmod(value, 60)
    period = "PM" if hours >= 12 else "AM"
    hour12 = hours % 12 or 12
    return f"{hour12}:{minutes:02d} {period}"


def parse_date(value: str) -> date:
    """
    Parse a "YYYY-MM-DD" calendar date.

    Raises:
        InvalidFormatError: If the string is not a valid calendar date
    """
    if not isinstance(value, str) or not _DATE_PATTERN.match(value.strip()):
        raise InvalidFormatError(f"Date must be in YYYY-MM-DD format, got {value!r}")

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except ValueError as exc:
        raise InvalidFormatError(f"Invalid calendar date {value!r}: {exc}") from exc


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """
    Check whether the half-open intervals [a_start, a_end) and
    [b_start, b_end) share at least one minute.

    Intervals that only touch at an endpoint do not overlap.
    """
    return a_start < b_end and b_start < a_end
