# tests/fakes.py

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from scheduled_tasks.core.ports import ShardStats


class FakeErrorTracker:
    """
    Thread-safe ErrorTracker that records every call.

    Invocations run in their own threads, so appends go through a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.exceptions: list[tuple[BaseException, str | None]] = []
        self.messages: list[tuple[str, str | None]] = []

    def capture_exception(self, exc: BaseException, *, task_name: str | None = None) -> None:
        with self._lock:
            self.exceptions.append((exc, task_name))

    def capture_message(self, text: str, *, task_name: str | None = None) -> None:
        with self._lock:
            self.messages.append((text, task_name))


class BrokenErrorTracker:
    """Tracker whose transport is down."""

    def capture_exception(self, exc: BaseException, *, task_name: str | None = None) -> None:
        raise ConnectionError("sentry unreachable")

    def capture_message(self, text: str, *, task_name: str | None = None) -> None:
        raise ConnectionError("sentry unreachable")


class CountdownEvent:
    """
    Stand-in for threading.Event in Scheduler: wait() reports "not set"
    exactly `ticks` times, then "set", so the loop fires exactly `ticks` ticks.
    """

    def __init__(self, ticks: int, pause: float = 0.0) -> None:
        self.remaining = ticks
        self.pause = pause
        self.waits: list[float] = []

    def wait(self, timeout: float | None = None) -> bool:
        self.waits.append(timeout)
        if self.pause:
            time.sleep(self.pause)
        if self.remaining <= 0:
            return True
        self.remaining -= 1
        return False

    def set(self) -> None:
        self.remaining = 0


@dataclass
class FakeDataDB:
    info: dict[str, Any] = field(
        default_factory=lambda: {
            "system_count": 3,
            "member_count": 10,
            "group_count": 2,
            "switch_count": 7,
            "message_count": 100,
        }
    )
    message_rows: int = 1234
    updated: list[tuple[str, str]] = field(default_factory=list)
    message_counts_set: list[int] = field(default_factory=list)
    fail_with: BaseException | None = None

    def update_table_count(self, key: str, table: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.updated.append((key, table))

    def count_messages(self) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        return self.message_rows

    def set_message_count(self, count: int) -> None:
        self.message_counts_set.append(count)
        self.info["message_count"] = count

    def table_stats(self) -> dict[str, Any]:
        return dict(self.info)


@dataclass
class FakeStatsDB:
    samples: list[tuple[str, int]] = field(default_factory=list)

    def insert_sample(self, table: str, value: int) -> None:
        self.samples.append((table, value))


@dataclass
class FakeShardCache:
    shards: list[ShardStats] = field(default_factory=list)

    def shard_stats(self) -> list[ShardStats]:
        return list(self.shards)


class FakeRedis:
    """Just enough of redis.Redis for ShardStatusCache."""

    def __init__(self, hashes: dict[str, dict[str, str]]) -> None:
        self.hashes = hashes

    def hgetall(self, key: str) -> dict[str, str]:
        return dict(self.hashes.get(key, {}))


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0, step: float = 0.005) -> bool:
    """Poll until predicate() is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()
