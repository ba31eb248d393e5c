# tests/test_reporting.py

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from scheduled_tasks.logging_setup import _ConsoleNoiseFilter, level_from_name
from scheduled_tasks.reporting import sentry as sentry_mod


def test_tracker_forwards_to_sentry(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[str, object]] = []
    monkeypatch.setattr(sentry_mod.sentry_sdk, "capture_exception", lambda exc: seen.append(("exc", exc)))
    monkeypatch.setattr(
        sentry_mod.sentry_sdk, "capture_message", lambda text, level=None: seen.append(("msg", text))
    )
    tracker = sentry_mod.SentryErrorTracker()
    err = RuntimeError("db down")

    tracker.capture_exception(err, task_name="scheduled tasks")
    tracker.capture_message("unknown error: x", task_name="scheduled tasks")

    assert seen == [("exc", err), ("msg", "unknown error: x")]


def test_init_sentry_uses_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict = {}
    monkeypatch.setattr(sentry_mod.sentry_sdk, "init", lambda **kw: captured.update(kw))
    settings = SimpleNamespace(
        sentry_dsn="https://key@sentry.example/1",
        sentry_environment="staging",
        sentry_release="1.2.3",
        app_name="scheduled-tasks",
    )

    sentry_mod.init_sentry(settings)

    assert captured["dsn"] == "https://key@sentry.example/1"
    assert captured["environment"] == "staging"
    assert captured["release"] == "1.2.3"


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_own_logs_and_quiets_libraries() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("scheduled_tasks.scheduler.instrumentation", logging.INFO))
    assert not f.filter(_record("psycopg.pool", logging.INFO))
    assert f.filter(_record("redis.connection", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("bogus") == logging.INFO
    assert level_from_name(None, logging.WARNING) == logging.WARNING
