# src/scheduled_tasks/reporting/sentry.py

from __future__ import annotations

import logging

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from ..config import Settings

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings) -> None:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        release=settings.sentry_release,
        server_name=settings.app_name,
        # Failures are reported explicitly by the isolation boundary; ERROR log
        # records must not be turned into a second event.
        integrations=[LoggingIntegration(level=logging.INFO, event_level=None)],
    )
    logger.info("Sentry initialized (environment=%s)", settings.sentry_environment)


class SentryErrorTracker:
    """ErrorTracker backed by the global sentry_sdk client (thread-safe, non-blocking)."""

    def capture_exception(self, exc: BaseException, *, task_name: str | None = None) -> None:
        with sentry_sdk.new_scope() as scope:
            if task_name:
                scope.set_tag("task", task_name)
            sentry_sdk.capture_exception(exc)

    def capture_message(self, text: str, *, task_name: str | None = None) -> None:
        with sentry_sdk.new_scope() as scope:
            if task_name:
                scope.set_tag("task", task_name)
            sentry_sdk.capture_message(text, level="error")
