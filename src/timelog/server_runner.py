"""Helpers to launch the local JSON API."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TrackerSettings
from .paths import get_db_path
from .webapp import create_app


def run_dashboard(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Start the JSON API and optionally open its docs page in a browser."""
    resolved_settings = settings or TrackerSettings()
    app = create_app(
        db_path=db_path or get_db_path(),
        settings=resolved_settings,
    )

    host, port = resolved_settings.host, resolved_settings.port
    if open_browser:
        url = dashboard_url(resolved_settings)
        threading.Thread(
            target=_launch_browser_after_delay, args=(url,), daemon=True
        ).start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def dashboard_url(settings: TrackerSettings) -> str:
    """Interactive API page served by FastAPI; there is no HTML UI."""
    return f"http://{settings.host}:{settings.port}/docs"


def _launch_browser_after_delay(url: str) -> None:
    time.sleep(1.0)
    try:
        webbrowser.open(url)
    except Exception:
        logging.getLogger(__name__).exception("Failed to launch browser for %s", url)
