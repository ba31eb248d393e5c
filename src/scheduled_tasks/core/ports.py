# src/scheduled_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and the stats tasks depend on Protocols instead of concrete
clients. This keeps Sentry/Postgres/Redis swappable and makes testing easier.
Every implementation must be safe for use from many threads at once.
"""

from dataclasses import dataclass
from typing import Any, Protocol


class ErrorTracker(Protocol):
    """External error-tracking sink. Both operations are fire-and-forget."""

    def capture_exception(self, exc: BaseException, *, task_name: str | None = None) -> None: ...

    def capture_message(self, text: str, *, task_name: str | None = None) -> None: ...


@dataclass(slots=True, frozen=True)
class ShardStats:
    shard_id: str
    guild_count: int
    channel_count: int


class DataRepo(Protocol):
    """The bot's main database (the `info` table and the counted tables)."""

    def update_table_count(self, key: str, table: str) -> None: ...
    def count_messages(self) -> int: ...
    def set_message_count(self, count: int) -> None: ...
    def table_stats(self) -> dict[str, Any]: ...


class StatsRepo(Protocol):
    """Time-series database; one row per (metric, sample time)."""

    def insert_sample(self, table: str, value: int) -> None: ...


class ShardStatusRepo(Protocol):
    """Cache holding the latest status reported by every gateway shard."""

    def shard_stats(self) -> list[ShardStats]: ...
