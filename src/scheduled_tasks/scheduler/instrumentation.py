# src/scheduled_tasks/scheduler/instrumentation.py

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from .models import Failure, InvocationRecord, Success

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    """Short human-readable duration: 850.0ms, 1.503s, 2m3.000s."""
    if seconds < 1.0:
        return f"{seconds * 1000:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes, rest = divmod(seconds, 60.0)
    if minutes < 60:
        return f"{int(minutes)}m{rest:.3f}s"
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}h{minutes}m{rest:.3f}s"


def timed(name: str, fn: Callable[[], Any]) -> Callable[[], InvocationRecord]:
    """
    Wrap `fn` so every call is timed and logged as "ran <name> in <duration>".

    Meant to sit outside the isolation boundary: the log line is written for
    recovered invocations too. The wrapper returns the InvocationRecord and
    never raises; if `fn` was not protected and raises anyway, the error is
    logged and recorded as Failure(exc).
    """

    def _timed() -> InvocationRecord:
        started_at = datetime.now(timezone.utc)
        t0 = time.monotonic()
        try:
            result = fn()
        except Exception as exc:
            logger.exception("unprotected failure in %s", name)
            result = Failure(exc)
        elapsed = time.monotonic() - t0
        ended_at = datetime.now(timezone.utc)
        logger.info("ran %s in %s", name, format_duration(elapsed))

        outcome = result if isinstance(result, (Success, Failure)) else Success(result)
        return InvocationRecord(
            task_name=name,
            started_at=started_at,
            ended_at=ended_at,
            elapsed_seconds=elapsed,
            outcome=outcome,
        )

    return _timed
