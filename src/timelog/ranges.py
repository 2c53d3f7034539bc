"""Resolve named date filters into inclusive ``YYYY-MM-DD`` ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

DATE_FMT = "%Y-%m-%d"

RANGE_FILTERS: tuple[str, ...] = (
    "today",
    "yesterday",
    "thisWeek",
    "lastWeek",
    "thisMonth",
    "last30Days",
)

DEFAULT_WINDOW_DAYS = 30


@dataclass(slots=True, frozen=True)
class DateRange:
    """Closed interval of calendar dates stored as ISO strings."""

    start_date: str
    end_date: str

    def contains(self, day: str) -> bool:
        # Zero-padded ISO dates sort chronologically as plain strings.
        return self.start_date <= day <= self.end_date

    def as_dict(self) -> dict[str, str]:
        return {"startDate": self.start_date, "endDate": self.end_date}


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    try:
        parsed = datetime.strptime(value, DATE_FMT).date()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD") from exc
    if parsed.strftime(DATE_FMT) != value:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD")
    return parsed


def format_date(value: date) -> str:
    return value.strftime(DATE_FMT)


def days_since_sunday(day: date) -> int:
    # date.weekday() counts from Monday == 0.
    return (day.weekday() + 1) % 7


def resolve_date_range(filter_name: str, now: Union[date, datetime]) -> DateRange:
    """Map a filter keyword to a concrete range anchored at ``now``.

    Weeks begin on Sunday. ``thisWeek`` and ``thisMonth`` run up to ``now``
    rather than to the end of the period. Unknown keywords fall back to the
    trailing thirty days.
    """
    today = now.date() if isinstance(now, datetime) else now

    if filter_name == "today":
        return _span(today, today)
    if filter_name == "yesterday":
        yesterday = today - timedelta(days=1)
        return _span(yesterday, yesterday)
    if filter_name == "thisWeek":
        return _span(today - timedelta(days=days_since_sunday(today)), today)
    if filter_name == "lastWeek":
        end = today - timedelta(days=days_since_sunday(today) + 1)
        return _span(end - timedelta(days=6), end)
    if filter_name == "thisMonth":
        return _span(today.replace(day=1), today)
    return _span(today - timedelta(days=DEFAULT_WINDOW_DAYS), today)


def explicit_range(start: str, end: str) -> DateRange:
    """Validate a caller-supplied range."""
    start_day = parse_date(start)
    end_day = parse_date(end)
    if end_day < start_day:
        raise ValueError("end date must be on or after start date")
    return _span(start_day, end_day)


def _span(start: date, end: date) -> DateRange:
    return DateRange(start_date=format_date(start), end_date=format_date(end))
