"""SQLite database layer for activities and project tags."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional

from . import filters
from .models import Activity, ProjectTag


DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"

_UNSET = object()

_ACTIVITY_COLUMNS = """
    id,
    description,
    date,
    start_time,
    end_time,
    duration_minutes,
    project_tags,
    created_at
"""

logger = logging.getLogger(__name__)


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS project_tags (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS activities (
            id INTEGER PRIMARY KEY,
            description TEXT NOT NULL,
            date TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT,
            duration_minutes INTEGER NOT NULL,
            project_tags TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_activities_date
            ON activities(date);
        """
    )


def seed_default_tags(conn: sqlite3.Connection, names: Iterable[str]) -> list[ProjectTag]:
    """Ensure every name in ``names`` exists as a project tag.

    Safe to call repeatedly; existing tags are left untouched.
    """
    tags = [upsert_project_tag(conn, name) for name in names]
    logger.info("Default project tags ready: %s", ", ".join(tag.name for tag in tags))
    return tags


def upsert_project_tag(conn: sqlite3.Connection, name: str) -> ProjectTag:
    """Create the tag if missing and return the stored record."""
    name = name.strip()
    if not name:
        raise ValueError("Project tag name must not be empty")
    conn.execute("INSERT OR IGNORE INTO project_tags (name) VALUES (?)", (name,))
    row = conn.execute(
        "SELECT id, name FROM project_tags WHERE name = ?", (name,)
    ).fetchone()
    return ProjectTag(id=row["id"], name=row["name"])


def fetch_project_tags(conn: sqlite3.Connection) -> list[ProjectTag]:
    rows = conn.execute("SELECT id, name FROM project_tags ORDER BY id")
    return [ProjectTag(id=row["id"], name=row["name"]) for row in rows]


def insert_activity(
    conn: sqlite3.Connection,
    *,
    description: str,
    date: str,
    start_time: str,
    duration_minutes: int,
    project_tags: Iterable[str],
    end_time: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Activity:
    """Store a new activity, creating any project tags it mentions."""
    tags = list(project_tags)
    for tag in tags:
        upsert_project_tag(conn, tag)
    created = created_at or datetime.now()
    cur = conn.execute(
        """
        INSERT INTO activities (
            description,
            date,
            start_time,
            end_time,
            duration_minutes,
            project_tags,
            created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            description,
            date,
            start_time,
            end_time,
            int(duration_minutes),
            json.dumps(tags),
            created.strftime(DATETIME_FMT),
        ),
    )
    activity = fetch_activity(conn, int(cur.lastrowid))
    if activity is None:
        raise RuntimeError("Failed to persist activity.")
    logger.debug("Stored activity %s on %s", activity.id, activity.date)
    return activity


def fetch_activity(conn: sqlite3.Connection, activity_id: int) -> Optional[Activity]:
    row = conn.execute(
        f"SELECT {_ACTIVITY_COLUMNS} FROM activities WHERE id = ?",
        (activity_id,),
    ).fetchone()
    return row_to_activity(row) if row is not None else None


def fetch_all_activities(conn: sqlite3.Connection) -> list[Activity]:
    rows = conn.execute(
        f"SELECT {_ACTIVITY_COLUMNS} FROM activities ORDER BY date DESC, start_time ASC"
    )
    return [row_to_activity(row) for row in rows]


def fetch_activities_for_day(conn: sqlite3.Connection, day: str) -> list[Activity]:
    """Fetch the activities logged on ``day`` (YYYY-MM-DD)."""
    rows = conn.execute(
        f"""
        SELECT {_ACTIVITY_COLUMNS}
        FROM activities
        WHERE date = ?
        ORDER BY start_time
        """,
        (day,),
    )
    return [row_to_activity(row) for row in rows]


def fetch_activities_in_range(
    conn: sqlite3.Connection, start_date: str, end_date: str
) -> list[Activity]:
    """Fetch activities with ``start_date <= date <= end_date``."""
    rows = conn.execute(
        f"""
        SELECT {_ACTIVITY_COLUMNS}
        FROM activities
        WHERE date >= ? AND date <= ?
        ORDER BY date DESC, start_time ASC
        """,
        (start_date, end_date),
    )
    return [row_to_activity(row) for row in rows]


def fetch_activities_by_tag(conn: sqlite3.Connection, tag: str) -> list[Activity]:
    # Tags live in a JSON column, so scan and filter in Python.
    return filters.by_tag(fetch_all_activities(conn), tag)


def update_activity(
    conn: sqlite3.Connection,
    activity_id: int,
    *,
    description: Optional[str] = None,
    date: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: object = _UNSET,
    duration_minutes: Optional[int] = None,
    project_tags: Optional[Iterable[str]] = None,
) -> Activity:
    """Update a single activity record."""
    fields: list[str] = []
    params: list[object] = []

    if description is not None:
        fields.append("description = ?")
        params.append(description)
    if date is not None:
        fields.append("date = ?")
        params.append(date)
    if start_time is not None:
        fields.append("start_time = ?")
        params.append(start_time)
    if end_time is not _UNSET:
        fields.append("end_time = ?")
        params.append(end_time)
    if duration_minutes is not None:
        fields.append("duration_minutes = ?")
        params.append(int(duration_minutes))
    if project_tags is not None:
        tags = list(project_tags)
        for tag in tags:
            upsert_project_tag(conn, tag)
        fields.append("project_tags = ?")
        params.append(json.dumps(tags))

    if fields:
        params.append(activity_id)
        cur = conn.execute(
            f"UPDATE activities SET {', '.join(fields)} WHERE id = ?",
            params,
        )
        if cur.rowcount == 0:
            raise ValueError(f"No activity found for id={activity_id}")

    activity = fetch_activity(conn, activity_id)
    if activity is None:
        raise ValueError(f"No activity found for id={activity_id}")
    return activity


def delete_activity(conn: sqlite3.Connection, activity_id: int) -> bool:
    cur = conn.execute("DELETE FROM activities WHERE id = ?", (activity_id,))
    return cur.rowcount > 0


def row_to_activity(row: sqlite3.Row) -> Activity:
    created_at = row["created_at"]
    return Activity(
        id=row["id"],
        description=row["description"],
        date=row["date"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        duration_minutes=int(row["duration_minutes"]),
        project_tags=tuple(json.loads(row["project_tags"] or "[]")),
        created_at=datetime.strptime(created_at, DATETIME_FMT) if created_at else None,
    )
