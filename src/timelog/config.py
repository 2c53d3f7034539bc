"""Configuration models and helpers for the time log."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_TAGS: tuple[str, ...] = (
    "Website Redesign",
    "Client Meeting",
    "Documentation",
    "Research",
    "Development",
)


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration shared by the CLI and the dashboard."""

    week_target_minutes: int = 1440
    default_tags: tuple[str, ...] = field(default=DEFAULT_TAGS)
    host: str = "127.0.0.1"
    port: int = 8765

    @classmethod
    def from_options(
        cls,
        target_hours: float | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "TrackerSettings":
        settings = cls()
        if target_hours is not None:
            settings.week_target_minutes = max(int(round(target_hours * 60)), 1)
        if host:
            settings.host = host
        if port is not None:
            settings.port = port
        return settings
