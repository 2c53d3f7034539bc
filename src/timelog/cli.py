"""Command-line interface for the time log."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from .config import TrackerSettings
from .paths import get_db_path
from .ranges import RANGE_FILTERS, format_date, parse_date, resolve_date_range
from .timemath import minutes_between, parse_clock

app = typer.Typer(help="Personal activity time log.")

logger = logging.getLogger(__name__)

DB_OPTION_HELP = "Location of the activity SQLite database."


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def init(
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=DB_OPTION_HELP),
) -> None:
    """Create the database and the default project tags."""
    from .db import database_connection, seed_default_tags

    db_path = db_path or get_db_path()
    with database_connection(db_path) as conn:
        tags = seed_default_tags(conn, TrackerSettings().default_tags)
    typer.echo(f"Database ready at {db_path} with {len(tags)} default project tags.")


@app.command()
def add(
    description: str = typer.Argument(..., help="What you worked on."),
    date: Optional[str] = typer.Option(
        None, "--date", help="Date (YYYY-MM-DD) of the activity. Defaults to today."
    ),
    start: str = typer.Option(..., "--start", help="Start time (HH:MM, 24-hour)."),
    end: Optional[str] = typer.Option(None, "--end", help="End time (HH:MM, 24-hour)."),
    minutes: Optional[int] = typer.Option(
        None, "--minutes", help="Duration in minutes, instead of an end time."
    ),
    tags: List[str] = typer.Option(
        [], "--tag", "-t", help="Project tag; repeat for several tags."
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=DB_OPTION_HELP),
) -> None:
    """Log a new activity."""
    from .db import database_connection, insert_activity
    from .reporting import format_activity_line

    description = description.strip()
    if not description:
        raise typer.BadParameter("Description is required", param_hint="DESCRIPTION")
    day = _checked_date(date) if date else format_date(datetime.now())
    try:
        parse_clock(start)
        if end is not None:
            parse_clock(end)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    cleaned_tags = [tag.strip() for tag in tags if tag.strip()]
    if not cleaned_tags:
        raise typer.BadParameter("At least one project tag is required", param_hint="--tag")

    if (end is None) == (minutes is None):
        raise typer.BadParameter("Give exactly one of --end or --minutes")
    if end is not None:
        duration = minutes_between(start, end)
    else:
        if minutes < 1:
            raise typer.BadParameter("Duration must be at least 1 minute", param_hint="--minutes")
        duration = minutes

    with database_connection(db_path or get_db_path()) as conn:
        activity = insert_activity(
            conn,
            description=description,
            date=day,
            start_time=start,
            end_time=end,
            duration_minutes=duration,
            project_tags=cleaned_tags,
        )
    typer.echo(f"Logged {format_activity_line(activity)}")


@app.command("list")
def list_activities(
    range_name: Optional[str] = typer.Option(
        None, "--range", help=f"Named range: {', '.join(RANGE_FILTERS)}."
    ),
    date: Optional[str] = typer.Option(None, "--date", help="Exact date (YYYY-MM-DD)."),
    tag: Optional[str] = typer.Option(None, "--tag", help="Only activities with this tag."),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=DB_OPTION_HELP),
) -> None:
    """List logged activities, newest first."""
    from .db import (
        database_connection,
        fetch_activities_by_tag,
        fetch_activities_for_day,
        fetch_activities_in_range,
        fetch_all_activities,
    )
    from .reporting import print_activities

    with database_connection(db_path or get_db_path()) as conn:
        if tag:
            activities = fetch_activities_by_tag(conn, tag)
        elif date:
            activities = fetch_activities_for_day(conn, _checked_date(date))
        elif range_name:
            window = resolve_date_range(range_name, datetime.now())
            logger.debug("Resolved %s to %s..%s", range_name, window.start_date, window.end_date)
            activities = fetch_activities_in_range(conn, window.start_date, window.end_date)
        else:
            activities = fetch_all_activities(conn)
    print_activities(activities)


@app.command()
def summary(
    date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Date (YYYY-MM-DD) to summarize. Defaults to today.",
    ),
    target_hours: float = typer.Option(
        24.0, "--target-hours", min=0.5, help="Weekly target in hours."
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=DB_OPTION_HELP),
) -> None:
    """Print today, this week and the top project."""
    from .reporting import SummaryPrinter

    if date:
        target = datetime.combine(parse_date(_checked_date(date)), datetime.min.time())
    else:
        target = datetime.now()
    settings = TrackerSettings.from_options(target_hours=target_hours)
    summary_printer = SummaryPrinter(
        db_path=db_path or get_db_path(), target_minutes=settings.week_target_minutes
    )
    summary_printer.print_summary(target)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=DB_OPTION_HELP),
    target_hours: float = typer.Option(
        24.0, "--target-hours", min=0.5, help="Weekly target in hours."
    ),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Open the interactive API docs (/docs) in your default browser.",
    ),
) -> None:
    """Start the local JSON API."""
    from .server_runner import run_dashboard

    settings = TrackerSettings.from_options(target_hours=target_hours, host=host, port=port)
    run_dashboard(
        db_path=db_path or get_db_path(),
        settings=settings,
        open_browser=open_browser,
    )


def _checked_date(value: str) -> str:
    try:
        parse_date(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--date") from exc
    return value
