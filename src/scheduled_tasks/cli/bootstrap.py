# src/scheduled_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- opens the database pools and the cache client once,
- wires them into the Dependencies bundle the task closures receive.
"""

from __future__ import annotations

import logging

from ..config import Settings
from ..core.state import Dependencies
from ..storage.cache import ShardStatusCache, open_redis
from ..storage.postgres import DataDB, StatsDB, open_pool

logger = logging.getLogger(__name__)


def connect_dependencies(settings: Settings) -> Dependencies:
    """
    Connect to every external collaborator.

    Raises (psycopg.Error / redis.RedisError) on the first failure, after
    closing whatever was already opened.
    """
    closers = []
    try:
        data_pool = open_pool(
            settings.data_db_uri,
            name="data",
            max_size=settings.db_pool_max_size,
            timeout=settings.connect_timeout_seconds,
        )
        closers.append(data_pool.close)

        stats_pool = open_pool(
            settings.stats_db_uri,
            name="stats",
            max_size=settings.db_pool_max_size,
            timeout=settings.connect_timeout_seconds,
        )
        closers.append(stats_pool.close)

        client = open_redis(settings.redis_url, timeout=settings.connect_timeout_seconds)
        closers.append(client.close)
    except Exception:
        for close in reversed(closers):
            try:
                close()
            except Exception:
                logger.debug("close failed during aborted startup", exc_info=True)
        raise

    return Dependencies(
        data_db=DataDB(data_pool),
        stats_db=StatsDB(stats_pool),
        cache=ShardStatusCache(client, settings.shard_status_key),
        closers=closers,
    )
