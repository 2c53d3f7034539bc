from datetime import datetime

from conftest import make_activity

from timelog.aggregation import (
    build_summary,
    percent_delta,
    summarize,
    total_minutes,
    week_progress,
)

NOW = datetime(2024, 1, 3, 17, 30)


def test_total_minutes():
    assert total_minutes([]) == 0
    activities = [make_activity(duration_minutes=m) for m in (15, 45, 0, 60)]
    assert total_minutes(activities) == 120
    assert total_minutes(reversed(activities)) == 120


def test_percent_delta():
    assert percent_delta(60, 40) == 50
    assert percent_delta(20, 40) == -50
    assert percent_delta(40, 40) == 0
    assert percent_delta(1, 8) == -87
    assert percent_delta(30, 0) == 0
    assert percent_delta(0, 0) == 0


def test_week_progress_is_monotonic_and_clamped():
    values = [week_progress(minutes) for minutes in range(0, 3000, 7)]
    assert values == sorted(values)
    assert week_progress(0) == 0
    assert week_progress(720) == 50
    assert week_progress(1440) == 100
    assert week_progress(5000) == 100
    assert week_progress(90, target_minutes=60) == 100
    assert week_progress(30, target_minutes=0) == 0


def test_summarize_shape():
    today = [make_activity(duration_minutes=90, tags=("A",))]
    yesterday = [make_activity(duration_minutes=60, tags=("B",))]
    week = today + yesterday

    result = summarize(today, yesterday, week).as_dict()

    assert result == {
        "today": {"totalTime": "1h 30m", "totalMinutes": 90, "comparedToYesterday": 50},
        "week": {
            "totalTime": "2h 30m",
            "totalMinutes": 150,
            "target": "24h 0m",
            "progress": 10,
        },
        "topProject": {"name": "A", "minutes": 90, "time": "1h 30m", "percentage": 60},
    }


def test_build_summary_selects_today_yesterday_and_week_to_date():
    activities = [
        make_activity(date="2024-01-03", duration_minutes=60, tags=("Development",)),
        make_activity(date="2024-01-02", duration_minutes=40, tags=("Development", "Research")),
        make_activity(date="2023-12-31", duration_minutes=20, tags=("Research",)),
        make_activity(date="2023-12-30", duration_minutes=500, tags=("Research",)),
        make_activity(date="2024-01-04", duration_minutes=500, tags=("Research",)),
    ]

    summary = build_summary(activities, NOW)

    assert summary.today.total_minutes == 60
    assert summary.today.compared_to_yesterday == 50
    assert summary.week.total_minutes == 120
    assert summary.week.progress == 8
    assert summary.top_project.name == "Development"
    assert summary.top_project.minutes == 100
    assert summary.top_project.percentage == 83


def test_build_summary_with_no_activities():
    summary = build_summary([], NOW).as_dict()
    assert summary["today"] == {"totalTime": "0m", "totalMinutes": 0, "comparedToYesterday": 0}
    assert summary["week"]["progress"] == 0
    assert summary["topProject"]["name"] == "None"


def test_removing_an_activity_changes_totals():
    keep = make_activity(date="2024-01-03", duration_minutes=30)
    removed = make_activity(date="2024-01-03", duration_minutes=45)

    before = build_summary([keep, removed], NOW)
    after = build_summary([keep], NOW)

    assert before.today.total_minutes == 75
    assert after.today.total_minutes == 30
    assert after.week.total_minutes == 30
