# src/scheduled_tasks/storage/cache.py

from __future__ import annotations

import json
import logging
from typing import Any

import redis

from ..core.ports import ShardStats

logger = logging.getLogger(__name__)


def open_redis(url: str, *, timeout: float = 30.0) -> redis.Redis:
    """Create a client and PING it; raises redis.RedisError when unreachable."""
    client = redis.Redis.from_url(
        url,
        decode_responses=True,
        socket_connect_timeout=timeout,
        socket_timeout=timeout,
    )
    client.ping()
    logger.info("connected to redis")
    return client


def parse_shard_status(shard_id: str, payload: Any) -> ShardStats | None:
    """Decode one hash value: {"guild_count": int, "channel_count": int, ...}."""
    try:
        data = json.loads(payload)
        return ShardStats(
            shard_id=str(shard_id),
            guild_count=int(data.get("guild_count", 0)),
            channel_count=int(data.get("channel_count", 0)),
        )
    except (TypeError, ValueError, AttributeError):
        logger.warning("skipping undecodable status for shard %s", shard_id)
        return None


class ShardStatusCache:
    """Reads the hash where every gateway shard publishes its latest status."""

    def __init__(self, client: redis.Redis, key: str) -> None:
        self._client = client
        self._key = key

    def shard_stats(self) -> list[ShardStats]:
        raw = self._client.hgetall(self._key)
        out: list[ShardStats] = []
        for shard_id, payload in sorted(raw.items()):
            stats = parse_shard_status(shard_id, payload)
            if stats is not None:
                out.append(stats)
        return out
