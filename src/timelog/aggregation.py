"""Daily and weekly totals for the dashboard summary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Union

from . import filters
from .models import Activity
from .ranges import resolve_date_range
from .ranking import TopProject, top_project
from .timemath import format_duration, round_half_up

DEFAULT_WEEK_TARGET_MINUTES = 1440


def total_minutes(activities: Iterable[Activity]) -> int:
    return sum(activity.duration_minutes for activity in activities)


def percent_delta(current: int, previous: int) -> int:
    """Percentage change from ``previous`` to ``current``.

    A ``previous`` of zero yields 0. That is a display policy, not a claim
    that nothing changed.
    """
    if previous <= 0:
        return 0
    return round_half_up((current - previous) / previous * 100)


def week_progress(week_minutes: int, target_minutes: int = DEFAULT_WEEK_TARGET_MINUTES) -> int:
    """Share of the weekly target reached, clamped to 0..100."""
    if target_minutes <= 0:
        return 0
    progress = round_half_up(week_minutes / target_minutes * 100)
    return max(0, min(progress, 100))


@dataclass(slots=True, frozen=True)
class DaySummary:
    total_minutes: int
    compared_to_yesterday: int

    def as_dict(self) -> dict[str, object]:
        return {
            "totalTime": format_duration(self.total_minutes),
            "totalMinutes": self.total_minutes,
            "comparedToYesterday": self.compared_to_yesterday,
        }


@dataclass(slots=True, frozen=True)
class WeekSummary:
    total_minutes: int
    target_minutes: int
    progress: int

    def as_dict(self) -> dict[str, object]:
        return {
            "totalTime": format_duration(self.total_minutes),
            "totalMinutes": self.total_minutes,
            "target": format_duration(self.target_minutes),
            "progress": self.progress,
        }


@dataclass(slots=True, frozen=True)
class Summary:
    today: DaySummary
    week: WeekSummary
    top_project: TopProject

    def as_dict(self) -> dict[str, object]:
        return {
            "today": self.today.as_dict(),
            "week": self.week.as_dict(),
            "topProject": self.top_project.as_dict(),
        }


def summarize(
    today_activities: Iterable[Activity],
    yesterday_activities: Iterable[Activity],
    week_activities: Iterable[Activity],
    target_minutes: int = DEFAULT_WEEK_TARGET_MINUTES,
) -> Summary:
    """Build the summary from already-filtered activity sets."""
    week = list(week_activities)
    today_total = total_minutes(today_activities)
    week_total = total_minutes(week)
    return Summary(
        today=DaySummary(
            total_minutes=today_total,
            compared_to_yesterday=percent_delta(
                today_total, total_minutes(yesterday_activities)
            ),
        ),
        week=WeekSummary(
            total_minutes=week_total,
            target_minutes=target_minutes,
            progress=week_progress(week_total, target_minutes),
        ),
        top_project=top_project(week, week_total),
    )


def build_summary(
    activities: Iterable[Activity],
    now: Union[date, datetime],
    target_minutes: int = DEFAULT_WEEK_TARGET_MINUTES,
) -> Summary:
    """Select today, yesterday and week-to-date from one collection and summarize."""
    snapshot = list(activities)
    today = resolve_date_range("today", now)
    yesterday = resolve_date_range("yesterday", now)
    week = resolve_date_range("thisWeek", now)
    return summarize(
        filters.by_date(snapshot, today.start_date),
        filters.by_date(snapshot, yesterday.start_date),
        filters.by_date_range(snapshot, week),
        target_minutes=target_minutes,
    )
