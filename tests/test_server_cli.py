"""Tests for the segments-server entry point and logging setup."""

import logging
import os

import uvicorn

from segments.logging_config import configure_logging
from segments.server_cli import main


def _capture_run(monkeypatch) -> dict:
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(uvicorn, "run", fake_run)
    return calls


def test_local_flag_switches_to_sqlite(monkeypatch):
    monkeypatch.delenv("SEGMENTS_LOCAL_MODE", raising=False)
    calls = _capture_run(monkeypatch)

    main(["--local", "--port", "9001"])

    assert os.environ["SEGMENTS_LOCAL_MODE"] == "1"
    assert calls["app"] == "segments.main:app"
    assert calls["port"] == 9001


def test_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("SEGMENTS_HOST", "127.0.0.1")
    monkeypatch.setenv("SEGMENTS_PORT", "8181")
    monkeypatch.delenv("SEGMENTS_LOG_LEVEL", raising=False)
    calls = _capture_run(monkeypatch)

    main(["--log-level", "debug"])

    assert (calls["host"], calls["port"], calls["log_level"]) == ("127.0.0.1", 8181, "debug")


def test_configure_logging_quiets_library_loggers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(log_level="debug", json_output=True)

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
