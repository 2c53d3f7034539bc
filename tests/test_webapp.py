from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from timelog.config import DEFAULT_TAGS, TrackerSettings
from timelog.webapp import create_app

NOW = datetime(2024, 1, 3, 17, 30)


@pytest.fixture
def client(db_path):
    app = create_app(db_path=db_path, settings=TrackerSettings(), clock=lambda: NOW)
    with TestClient(app) as test_client:
        yield test_client


def _create(client, **overrides):
    payload = {
        "inputMethod": "duration",
        "description": "Coding",
        "date": "2024-01-03",
        "startTime": "09:00",
        "durationMinutes": 60,
        "projectTags": ["Development"],
    }
    payload.update(overrides)
    return client.post("/api/activities", json=payload)


def test_startup_seeds_default_projects(client):
    response = client.get("/api/projects")
    assert response.status_code == 200
    assert [tag["name"] for tag in response.json()] == list(DEFAULT_TAGS)


def test_create_project_is_an_upsert(client):
    first = client.post("/api/projects", json={"name": "Acme"})
    second = client.post("/api/projects", json={"name": "Acme"})
    assert first.status_code == 201
    assert first.json() == second.json()


def test_create_with_start_stop_derives_duration(client):
    response = _create(
        client,
        inputMethod="startStop",
        startTime="23:30",
        endTime="00:45",
        durationMinutes=None,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["durationMinutes"] == 75
    assert body["endTime"] == "00:45"


def test_create_with_duration_has_no_end_time(client):
    response = _create(client)
    assert response.status_code == 201
    body = response.json()
    assert body["durationMinutes"] == 60
    assert body["endTime"] is None
    assert body["projectTags"] == ["Development"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"description": "  "},
        {"projectTags": []},
        {"durationMinutes": 0},
        {"inputMethod": "startStop"},
        {"startTime": "25:00"},
        {"date": "2024-02-30"},
        {"inputMethod": "guess"},
    ],
)
def test_create_rejects_invalid_input(client, overrides):
    assert _create(client, **overrides).status_code == 422


def test_list_filters(client):
    _create(client, date="2024-01-03", startTime="14:00", projectTags=["Research"])
    _create(client, date="2024-01-03", startTime="08:00")
    _create(client, date="2023-12-28", startTime="08:00")

    by_day = client.get("/api/activities", params={"date": "2024-01-03"}).json()
    assert [a["startTime"] for a in by_day] == ["08:00", "14:00"]

    by_tag = client.get("/api/activities", params={"projectTag": "Research"}).json()
    assert len(by_tag) == 1

    explicit = client.get(
        "/api/activities", params={"startDate": "2023-12-01", "endDate": "2023-12-31"}
    ).json()
    assert [a["date"] for a in explicit] == ["2023-12-28"]

    this_week = client.get("/api/activities", params={"range": "thisWeek"}).json()
    assert len(this_week) == 2

    assert len(client.get("/api/activities").json()) == 3


def test_list_rejects_bad_dates(client):
    assert client.get("/api/activities", params={"date": "03/01/2024"}).status_code == 400
    response = client.get(
        "/api/activities", params={"startDate": "2024-02-01", "endDate": "2024-01-01"}
    )
    assert response.status_code == 400


def test_get_update_delete(client):
    created = _create(client, inputMethod="startStop", endTime="10:00").json()
    activity_id = created["id"]

    assert client.get(f"/api/activities/{activity_id}").json() == created

    moved = client.put(f"/api/activities/{activity_id}", json={"startTime": "08:30"})
    assert moved.status_code == 200
    assert moved.json()["durationMinutes"] == 90

    switched = client.put(
        f"/api/activities/{activity_id}",
        json={"durationMinutes": 20, "projectTags": ["Docs"]},
    ).json()
    assert switched["endTime"] is None
    assert switched["durationMinutes"] == 20
    assert "Docs" in [tag["name"] for tag in client.get("/api/projects").json()]

    assert client.delete(f"/api/activities/{activity_id}").status_code == 204
    assert client.get(f"/api/activities/{activity_id}").status_code == 404
    assert client.delete(f"/api/activities/{activity_id}").status_code == 404
    assert client.put(f"/api/activities/{activity_id}", json={"description": "x"}).status_code == 404


def test_summary(client):
    _create(client, date="2024-01-03", durationMinutes=60, projectTags=["Development"])
    _create(client, date="2024-01-02", durationMinutes=40, projectTags=["Development", "Research"])
    _create(client, date="2023-12-31", durationMinutes=20, projectTags=["Research"])
    _create(client, date="2023-12-30", durationMinutes=500, projectTags=["Research"])

    assert client.get("/api/summary").json() == {
        "today": {"totalTime": "1h 0m", "totalMinutes": 60, "comparedToYesterday": 50},
        "week": {"totalTime": "2h 0m", "totalMinutes": 120, "target": "24h 0m", "progress": 8},
        "topProject": {"name": "Development", "minutes": 100, "time": "1h 40m", "percentage": 83},
    }


def test_summary_when_empty(client):
    body = client.get("/api/summary").json()
    assert body["today"]["comparedToYesterday"] == 0
    assert body["topProject"] == {"name": "None", "minutes": 0, "time": "0m", "percentage": 0}


def test_range_endpoint(client):
    assert client.get("/api/range", params={"filter": "lastWeek"}).json() == {
        "startDate": "2023-12-24",
        "endDate": "2023-12-30",
    }


def test_update_rejects_zero_duration(client):
    activity_id = _create(client, durationMinutes=30).json()["id"]

    response = client.put(f"/api/activities/{activity_id}", json={"durationMinutes": 0})

    assert response.status_code == 422
    assert client.get(f"/api/activities/{activity_id}").json()["durationMinutes"] == 30
