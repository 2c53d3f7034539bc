"""Domain models for logged activities and project tags."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class ProjectTag:
    """A named project an activity can be filed under."""

    id: int
    name: str


@dataclass(slots=True, frozen=True)
class Activity:
    """A single logged unit of work on one calendar date."""

    id: int
    description: str
    date: str
    start_time: str
    duration_minutes: int
    project_tags: tuple[str, ...] = field(default_factory=tuple)
    end_time: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def unique_tags(self) -> tuple[str, ...]:
        """Tags with repeats removed, first occurrence wins."""
        return tuple(dict.fromkeys(self.project_tags))

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "description": self.description,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "projectTags": list(self.project_tags),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
