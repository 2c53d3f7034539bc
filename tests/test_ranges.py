from datetime import date, datetime

import pytest

from timelog.ranges import DateRange, explicit_range, resolve_date_range

WEDNESDAY = date(2024, 1, 3)
SUNDAY = date(2024, 1, 7)


@pytest.mark.parametrize(
    "filter_name, expected",
    [
        ("today", ("2024-01-03", "2024-01-03")),
        ("yesterday", ("2024-01-02", "2024-01-02")),
        ("thisWeek", ("2023-12-31", "2024-01-03")),
        ("lastWeek", ("2023-12-24", "2023-12-30")),
        ("thisMonth", ("2024-01-01", "2024-01-03")),
        ("last30Days", ("2023-12-04", "2024-01-03")),
        ("somethingElse", ("2023-12-04", "2024-01-03")),
    ],
)
def test_resolve_date_range_from_a_wednesday(filter_name, expected):
    window = resolve_date_range(filter_name, WEDNESDAY)
    assert (window.start_date, window.end_date) == expected


def test_week_ranges_anchored_on_sunday():
    assert resolve_date_range("thisWeek", SUNDAY) == DateRange("2024-01-07", "2024-01-07")
    assert resolve_date_range("lastWeek", SUNDAY) == DateRange("2023-12-31", "2024-01-06")


def test_resolve_date_range_accepts_datetime():
    now = datetime(2024, 3, 1, 23, 59)
    assert resolve_date_range("yesterday", now) == DateRange("2024-02-29", "2024-02-29")


def test_date_range_contains_is_inclusive():
    window = DateRange("2024-01-01", "2024-01-07")
    assert window.contains("2024-01-01")
    assert window.contains("2024-01-07")
    assert not window.contains("2023-12-31")
    assert not window.contains("2024-01-08")
    assert window.as_dict() == {"startDate": "2024-01-01", "endDate": "2024-01-07"}


def test_explicit_range_validates_input():
    assert explicit_range("2024-01-01", "2024-01-31") == DateRange("2024-01-01", "2024-01-31")
    with pytest.raises(ValueError):
        explicit_range("2024-02-01", "2024-01-01")
    with pytest.raises(ValueError):
        explicit_range("2024-1-1", "2024-01-31")
