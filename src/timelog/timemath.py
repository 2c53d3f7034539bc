"""Clock-time arithmetic on ``HH:MM`` strings and minute counts."""

from __future__ import annotations

import math
import re

MINUTES_PER_DAY = 24 * 60

_CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_clock(value: str) -> int:
    """Return minutes since midnight for a 24-hour ``HH:MM`` string."""
    match = _CLOCK_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid time {value!r}; expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def minutes_between(start: str, end: str) -> int:
    """Minutes from ``start`` to ``end``, wrapping past midnight.

    An ``end`` earlier on the clock than ``start`` is read as the next day.
    Equal times give 0, never a full day.
    """
    total = parse_clock(end) - parse_clock(start)
    if total < 0:
        total += MINUTES_PER_DAY
    return total


def add_minutes(start: str, minutes: int) -> str:
    """Clock time ``minutes`` after ``start``; the date change is dropped."""
    return format_clock(parse_clock(start) + minutes)


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"


def to_12_hour(time: str) -> str:
    hours, mins = divmod(parse_clock(time), 60)
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{mins:02d} {period}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going toward +infinity."""
    return int(math.floor(value + 0.5))
