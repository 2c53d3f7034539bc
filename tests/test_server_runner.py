from fastapi.testclient import TestClient

from timelog import server_runner
from timelog.config import TrackerSettings
from timelog.server_runner import dashboard_url, run_dashboard
from timelog.webapp import create_app


class _ImmediateThread:
    def __init__(self, target, args=(), daemon=None):
        self._target = target
        self._args = args

    def start(self):
        self._target(*self._args)


def test_dashboard_url_points_at_api_docs():
    settings = TrackerSettings.from_options(host="localhost", port=9000)
    assert dashboard_url(settings) == "http://localhost:9000/docs"


def test_browser_page_exists(db_path):
    with TestClient(create_app(db_path=db_path)) as client:
        assert client.get("/docs").status_code == 200


def test_run_dashboard_opens_docs_page(db_path, monkeypatch):
    opened = []
    served = {}
    monkeypatch.setattr(server_runner.threading, "Thread", _ImmediateThread)
    monkeypatch.setattr(server_runner, "_launch_browser_after_delay", opened.append)
    monkeypatch.setattr(
        server_runner.uvicorn, "run", lambda app, host, port, log_level: served.update(port=port)
    )

    run_dashboard(db_path=db_path, settings=TrackerSettings(port=8800))

    assert opened == ["http://127.0.0.1:8800/docs"]
    assert served == {"port": 8800}


def test_run_dashboard_without_browser(db_path, monkeypatch):
    opened = []
    monkeypatch.setattr(server_runner, "_launch_browser_after_delay", opened.append)
    monkeypatch.setattr(server_runner.uvicorn, "run", lambda *args, **kwargs: None)

    run_dashboard(db_path=db_path, open_browser=False)

    assert opened == []
