"""Conversions between "HH:MM" strings, minutes since midnight and display strings."""

from __future__ import annotations

import re

from jarvis.planner.errors import FormatError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def is_valid_time(value: str) -> bool:
    """Strict 24-hour "HH:MM" check (00:00 through 23:59)."""
    return isinstance(value, str) and _TIME_RE.match(value) is not None


def time_to_minutes(value: str) -> int:
    """Parse "HH:MM" into minutes since midnight (0-1439).

    Raises FormatError on anything that is not a strict 24-hour time.
    """
    if not isinstance(value, str):
        raise FormatError(f"Expected an HH:MM string, got {value!r}")
    m = _TIME_RE.match(value)
    if m is None:
        raise FormatError(f"Invalid time {value!r}: use HH:MM (24-hour), e.g. 08:00 or 14:30")
    return int(m.group(1)) * 60 + int(m.group(2))


def minutes_to_time(minutes: int) -> str:
    """540 -> "09:00". Minutes past midnight wrap into the next day."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time(minutes: int) -> str:
    """540 -> "9:00 AM", 810 -> "1:30 PM". Minutes past midnight wrap."""
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    suffix = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {suffix}"


def format_duration(minutes: int) -> str:
    """45 -> "45m", 120 -> "2h", 90 -> "1h 30m"."""
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"
