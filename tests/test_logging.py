from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi.testclient import TestClient

from htmx_components.app import create_app


def _file_handlers() -> list[RotatingFileHandler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]


def test_lifespan_installs_and_removes_file_handler(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HTMX_COMPONENTS_HOME", str(tmp_path))
    assert _file_handlers() == []

    with TestClient(create_app()) as client:
        handlers = _file_handlers()
        assert len(handlers) == 1
        assert Path(handlers[0].baseFilename) == tmp_path / "logs" / "app.log"
        client.get("/healthz")

    assert _file_handlers() == []
    assert "starting up" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")


def test_each_app_logs_into_its_own_home(tmp_path: Path, monkeypatch) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"

    monkeypatch.setenv("HTMX_COMPONENTS_HOME", str(first))
    with TestClient(create_app()) as client:
        client.get("/privacy")

    monkeypatch.setenv("HTMX_COMPONENTS_HOME", str(second))
    with TestClient(create_app()) as client:
        client.get("/healthz")

    assert "GET /privacy - 200" in (first / "logs" / "app.log").read_text(encoding="utf-8")
    second_log = (second / "logs" / "app.log").read_text(encoding="utf-8")
    assert "GET /healthz - 200" in second_log
    assert "GET /privacy" not in second_log
