# src/scheduled_tasks/scheduler/alignment.py

"""Phase-align the process to a round wall-clock minute before schedulers start."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_minute_boundary(now: datetime) -> datetime:
    """Start of the next full UTC minute strictly after `now` (naive = UTC)."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return (now + timedelta(minutes=1)).replace(second=0, microsecond=0)


def wait_until_next_minute(
    *,
    clock: Callable[[], datetime] = _utcnow,
    sleep: Callable[[float], None] = time.sleep,
) -> float:
    """Sleep until the next round minute; returns the seconds slept (0 if already past)."""
    target = next_minute_boundary(clock())

    # The clock is read again so time spent computing the target is not slept twice.
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    delay = (target - now).total_seconds()
    if delay <= 0:
        return 0.0

    logger.info("waiting %.3fs until %s", delay, target.isoformat())
    sleep(delay)
    return delay
