"""FastAPI application that exposes the activity log and its summary."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .aggregation import build_summary
from .config import TrackerSettings
from .db import (
    database_connection,
    delete_activity,
    fetch_activities_by_tag,
    fetch_activities_for_day,
    fetch_activities_in_range,
    fetch_activity,
    fetch_all_activities,
    fetch_project_tags,
    insert_activity,
    seed_default_tags,
    update_activity,
    upsert_project_tag,
)
from .models import Activity
from .paths import get_db_path
from .ranges import explicit_range, parse_date, resolve_date_range
from .timemath import minutes_between

logger = logging.getLogger(__name__)

_CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ProjectTagPayload(BaseModel):
    name: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class ActivityCreate(BaseModel):
    """New activity entered either as start/stop times or as a duration."""

    input_method: Literal["startStop", "duration"] = Field(alias="inputMethod")
    description: str
    date: str = Field(pattern=_DATE_PATTERN)
    start_time: str = Field(alias="startTime", pattern=_CLOCK_PATTERN)
    end_time: Optional[str] = Field(default=None, alias="endTime", pattern=_CLOCK_PATTERN)
    duration_minutes: Optional[int] = Field(default=None, alias="durationMinutes")
    project_tags: List[str] = Field(alias="projectTags", min_length=1)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("description")
    @classmethod
    def _require_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Description is required")
        return value

    @field_validator("project_tags")
    @classmethod
    def _clean_tags(cls, value: List[str]) -> List[str]:
        cleaned = [tag.strip() for tag in value if tag and tag.strip()]
        if not cleaned:
            raise ValueError("At least one project tag is required")
        return cleaned

    @model_validator(mode="after")
    def _check_time_fields(self) -> "ActivityCreate":
        parse_date(self.date)
        if self.input_method == "startStop":
            if self.end_time is None:
                raise ValueError("End time is required")
            self.duration_minutes = minutes_between(self.start_time, self.end_time)
        else:
            if self.duration_minutes is None or self.duration_minutes < 1:
                raise ValueError("Duration must be at least 1 minute")
            self.end_time = None
        return self


class ActivityUpdate(BaseModel):
    description: Optional[str] = None
    date: Optional[str] = Field(default=None, pattern=_DATE_PATTERN)
    start_time: Optional[str] = Field(default=None, alias="startTime", pattern=_CLOCK_PATTERN)
    end_time: Optional[str] = Field(default=None, alias="endTime", pattern=_CLOCK_PATTERN)
    duration_minutes: Optional[int] = Field(default=None, alias="durationMinutes", ge=1)
    project_tags: Optional[List[str]] = Field(default=None, alias="projectTags", min_length=1)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("project_tags")
    @classmethod
    def _clean_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        cleaned = [tag.strip() for tag in value if tag and tag.strip()]
        if not cleaned:
            raise ValueError("At least one project tag is required")
        return cleaned


def create_app(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())
    resolved_settings = settings or TrackerSettings()

    app = FastAPI(title="Time Log", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.settings = resolved_settings
    app.state.clock = clock or datetime.now

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        with database_connection(resolved_db_path) as conn:
            seed_default_tags(conn, resolved_settings.default_tags)

    @app.middleware("http")
    async def _log_api_requests(request: Request, call_next):
        if request.url.path.startswith("/api"):
            logger.info("API request: %s %s", request.method, request.url.path)
        return await call_next(request)

    @app.get("/api/projects")
    def list_projects(request: Request) -> List[Dict[str, Any]]:
        with database_connection(request.app.state.db_path) as conn:
            tags = fetch_project_tags(conn)
        return [{"id": tag.id, "name": tag.name} for tag in tags]

    @app.post("/api/projects", status_code=201)
    def create_project(payload: ProjectTagPayload, request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            try:
                tag = upsert_project_tag(conn, payload.name)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"id": tag.id, "name": tag.name}

    @app.get("/api/activities")
    def list_activities(
        request: Request,
        date: Optional[str] = Query(default=None, description="Exact date in YYYY-MM-DD format."),
        start_date: Optional[str] = Query(
            default=None, alias="startDate", description="Range start (inclusive)."
        ),
        end_date: Optional[str] = Query(
            default=None, alias="endDate", description="Range end (inclusive)."
        ),
        project_tag: Optional[str] = Query(
            default=None, alias="projectTag", description="Only activities carrying this tag."
        ),
        range_name: Optional[str] = Query(
            default=None, alias="range", description="Named range such as thisWeek."
        ),
    ) -> List[Dict[str, Any]]:
        with database_connection(request.app.state.db_path) as conn:
            if project_tag:
                activities = fetch_activities_by_tag(conn, project_tag)
            elif date:
                activities = fetch_activities_for_day(conn, _validated_date(date))
            elif start_date and end_date:
                window = _validated_range(start_date, end_date)
                activities = fetch_activities_in_range(conn, window.start_date, window.end_date)
            elif range_name:
                window = resolve_date_range(range_name, request.app.state.clock())
                activities = fetch_activities_in_range(conn, window.start_date, window.end_date)
            else:
                activities = fetch_all_activities(conn)
        return [activity.to_payload() for activity in activities]

    @app.get("/api/activities/{activity_id}")
    def get_activity(activity_id: int, request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            activity = fetch_activity(conn, activity_id)
        if activity is None:
            raise HTTPException(status_code=404, detail="Activity not found")
        return activity.to_payload()

    @app.post("/api/activities", status_code=201)
    def create_activity(payload: ActivityCreate, request: Request) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            activity = insert_activity(
                conn,
                description=payload.description,
                date=payload.date,
                start_time=payload.start_time,
                end_time=payload.end_time,
                duration_minutes=payload.duration_minutes or 0,
                project_tags=payload.project_tags,
            )
        logger.info("Created activity %s (%s min)", activity.id, activity.duration_minutes)
        return activity.to_payload()

    @app.put("/api/activities/{activity_id}")
    def update_activity_endpoint(
        activity_id: int,
        payload: ActivityUpdate,
        request: Request,
    ) -> Dict[str, Any]:
        updates = payload.model_dump(exclude_unset=True)
        if "date" in updates and updates["date"] is not None:
            _validated_date(updates["date"])
        if "description" in updates:
            description = (updates["description"] or "").strip()
            if not description:
                raise HTTPException(status_code=400, detail="Description is required")
            updates["description"] = description
        with database_connection(request.app.state.db_path) as conn:
            current = fetch_activity(conn, activity_id)
            if current is None:
                raise HTTPException(status_code=404, detail="Activity not found")
            try:
                activity = update_activity(
                    conn, activity_id, **_reconcile_times(current, updates)
                )
            except ValueError as exc:
                raise HTTPException(status_code=404, detail="Activity not found") from exc
        return activity.to_payload()

    @app.delete("/api/activities/{activity_id}", status_code=204)
    def delete_activity_endpoint(activity_id: int, request: Request) -> Response:
        with database_connection(request.app.state.db_path) as conn:
            deleted = delete_activity(conn, activity_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Activity not found")
        return Response(status_code=204)

    @app.get("/api/summary")
    def summary(request: Request) -> Dict[str, Any]:
        now = request.app.state.clock()
        yesterday = resolve_date_range("yesterday", now)
        week = resolve_date_range("thisWeek", now)
        start = min(yesterday.start_date, week.start_date)
        with database_connection(request.app.state.db_path) as conn:
            activities = fetch_activities_in_range(conn, start, week.end_date)
        result = build_summary(
            activities,
            now,
            target_minutes=request.app.state.settings.week_target_minutes,
        )
        return result.as_dict()

    @app.get("/api/range")
    def date_range(
        request: Request,
        filter_name: str = Query(default="thisWeek", alias="filter"),
    ) -> Dict[str, str]:
        return resolve_date_range(filter_name, request.app.state.clock()).as_dict()

    return app


def _validated_date(value: str) -> str:
    try:
        parse_date(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc
    return value


def _validated_range(start: str, end: str):
    try:
        return explicit_range(start, end)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _reconcile_times(current: Activity, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Keep duration and end time consistent after a partial update.

    A new end time, or a new start on a start/stop activity, recomputes the
    duration. A duration supplied on its own switches to duration mode.
    """
    if updates.get("duration_minutes", 0) is None:
        updates.pop("duration_minutes")
    if "end_time" in updates and updates["end_time"] is None:
        return updates

    end_time = updates.get("end_time")
    if end_time is None and "start_time" in updates and "duration_minutes" not in updates:
        end_time = current.end_time
    if end_time is not None:
        start_time = updates.get("start_time") or current.start_time
        updates["end_time"] = end_time
        updates["duration_minutes"] = minutes_between(start_time, end_time)
    elif "duration_minutes" in updates:
        updates["end_time"] = None
    return updates
