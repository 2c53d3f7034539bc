"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable

from .aggregation import build_summary
from .db import database_connection, fetch_activities_in_range
from .filters import group_by_date
from .models import Activity
from .ranges import format_date, resolve_date_range
from .ranking import rank_projects
from .timemath import add_minutes, format_duration, to_12_hour


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, db_path: Path, target_minutes: int = 1440) -> None:
        self.db_path = Path(db_path)
        self.target_minutes = target_minutes

    def print_summary(self, day: datetime) -> None:
        yesterday = resolve_date_range("yesterday", day)
        week = resolve_date_range("thisWeek", day)
        with database_connection(self.db_path) as conn:
            activities = fetch_activities_in_range(
                conn, min(yesterday.start_date, week.start_date), week.end_date
            )
        if not activities:
            print("No activity recorded for the selected week.")
            return

        summary = build_summary(activities, day, target_minutes=self.target_minutes)
        print(f"Summary for {format_date(day)}")
        print("-" * 40)
        print(f"Today:       {format_duration(summary.today.total_minutes)}"
              f" ({describe_delta(summary.today.compared_to_yesterday)})")
        print(f"This week:   {format_duration(summary.week.total_minutes)}"
              f" of {format_duration(summary.week.target_minutes)}"
              f" ({summary.week.progress}%)")
        top = summary.top_project
        print(f"Top project: {top.name} {format_duration(top.minutes)} ({top.percentage}%)")

        week_activities = [a for a in activities if week.contains(a.date)]
        ranked = rank_projects(week_activities, summary.week.total_minutes)
        if ranked:
            print()
            print("Projects this week:")
            for project in ranked[:5]:
                print(f"  {project.name:<30} {format_duration(project.minutes):>8}"
                      f" {project.percentage:>4}%")


def describe_delta(percent: int) -> str:
    if percent > 0:
        return f"{percent}% more than yesterday"
    if percent < 0:
        return f"{abs(percent)}% less than yesterday"
    return "same as yesterday"


def print_activities(activities: Iterable[Activity]) -> None:
    groups = group_by_date(activities)
    if not groups:
        print("No activities found.")
        return
    for day, entries in groups:
        print(day)
        for activity in entries:
            print(f"  {format_activity_line(activity)}")


def format_activity_line(activity: Activity) -> str:
    end_time = activity.end_time or add_minutes(activity.start_time, activity.duration_minutes)
    span = f"{to_12_hour(activity.start_time)} - {to_12_hour(end_time)}"
    tags = ", ".join(activity.project_tags)
    return (
        f"#{activity.id:<4} {span:<21} {format_duration(activity.duration_minutes):>8}"
        f"  {activity.description} [{tags}]"
    )
