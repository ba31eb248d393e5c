# tests/conftest.py

from __future__ import annotations

import pytest

from scheduled_tasks.core.ports import ShardStats
from scheduled_tasks.core.state import Dependencies

from .fakes import FakeDataDB, FakeErrorTracker, FakeShardCache, FakeStatsDB


@pytest.fixture()
def tracker() -> FakeErrorTracker:
    return FakeErrorTracker()


@pytest.fixture()
def deps() -> Dependencies:
    """
    Dependencies bundle wired with in-memory fakes.

    No Postgres or Redis is needed; the task bodies only see the ports.
    """
    return Dependencies(
        data_db=FakeDataDB(),
        stats_db=FakeStatsDB(),
        cache=FakeShardCache(
            shards=[
                ShardStats(shard_id="0", guild_count=10, channel_count=100),
                ShardStats(shard_id="1", guild_count=5, channel_count=40),
            ]
        ),
    )
