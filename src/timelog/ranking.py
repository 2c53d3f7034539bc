"""Per-project totals and top-project selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .models import Activity
from .timemath import format_duration, round_half_up

NO_PROJECT = "None"


@dataclass(slots=True, frozen=True)
class TopProject:
    name: str
    minutes: int
    percentage: int

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "minutes": self.minutes,
            "time": format_duration(self.minutes),
            "percentage": self.percentage,
        }


EMPTY_PROJECT = TopProject(name=NO_PROJECT, minutes=0, percentage=0)


def tag_totals(activities: Iterable[Activity]) -> dict[str, int]:
    """Minutes per tag, keyed in the order tags are first seen.

    Each activity counts in full toward every tag it carries; a tag repeated
    on one activity counts once.
    """
    totals: dict[str, int] = {}
    for activity in activities:
        for tag in activity.unique_tags:
            totals[tag] = totals.get(tag, 0) + activity.duration_minutes
    return totals


def top_project(
    activities: Sequence[Activity], week_total: Optional[int] = None
) -> TopProject:
    """Return the tag with the largest total.

    Ties go to the tag seen first. ``week_total`` defaults to the summed
    duration of ``activities`` and is the denominator of the percentage.
    """
    totals = tag_totals(activities)
    if not totals:
        return EMPTY_PROJECT

    best_name: Optional[str] = None
    best_minutes = 0
    for name, minutes in totals.items():
        if best_name is None or minutes > best_minutes:
            best_name, best_minutes = name, minutes

    if week_total is None:
        week_total = sum(activity.duration_minutes for activity in activities)
    return TopProject(
        name=best_name,
        minutes=best_minutes,
        percentage=_share(best_minutes, week_total),
    )


def rank_projects(
    activities: Sequence[Activity], week_total: Optional[int] = None
) -> list[TopProject]:
    """All tags ordered by minutes, largest first."""
    if week_total is None:
        week_total = sum(activity.duration_minutes for activity in activities)
    totals = tag_totals(activities)
    # sorted() is stable, so equal totals keep first-seen order.
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        TopProject(name=name, minutes=minutes, percentage=_share(minutes, week_total))
        for name, minutes in ordered
    ]


def _share(minutes: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(minutes / total * 100)
