from __future__ import annotations

import itertools

import pytest

from timelog.models import Activity

_ids = itertools.count(1)


def make_activity(
    date: str = "2024-01-03",
    start_time: str = "09:00",
    duration_minutes: int = 30,
    tags: tuple[str, ...] = ("Development",),
    description: str = "Work",
    end_time: str | None = None,
) -> Activity:
    return Activity(
        id=next(_ids),
        description=description,
        date=date,
        start_time=start_time,
        end_time=end_time,
        duration_minutes=duration_minutes,
        project_tags=tuple(tags),
    )


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "timelog.sqlite3"
