"""Select activity subsets by date, date range or project tag."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from .models import Activity
from .ranges import DateRange


def by_date(activities: Iterable[Activity], day: str) -> list[Activity]:
    """Activities logged on ``day``, earliest start first."""
    selected = [activity for activity in activities if activity.date == day]
    selected.sort(key=lambda activity: activity.start_time)
    return selected


def by_date_range(
    activities: Iterable[Activity],
    start: Union[str, DateRange],
    end: Optional[str] = None,
) -> list[Activity]:
    """Activities inside the closed range, newest date first."""
    if isinstance(start, DateRange):
        window = start
    else:
        window = DateRange(start_date=start, end_date=end if end is not None else start)
    return newest_first(activity for activity in activities if window.contains(activity.date))


def by_tag(activities: Iterable[Activity], tag: str) -> list[Activity]:
    return newest_first(activity for activity in activities if tag in activity.project_tags)


def newest_first(activities: Iterable[Activity]) -> list[Activity]:
    """Order by date descending, then start time ascending within a date."""
    # Two stable passes: secondary key first, then the primary one.
    ordered = sorted(activities, key=lambda activity: activity.start_time)
    ordered.sort(key=lambda activity: activity.date, reverse=True)
    return ordered


def group_by_date(activities: Iterable[Activity]) -> list[tuple[str, list[Activity]]]:
    grouped: dict[str, list[Activity]] = {}
    for activity in activities:
        grouped.setdefault(activity.date, []).append(activity)
    return sorted(grouped.items(), key=lambda item: item[0], reverse=True)
