# src/scheduled_tasks/stats/tasks.py

from __future__ import annotations

"""
Statistics task bodies.

Every body takes the Dependencies bundle explicitly and raises on collaborator
failure; containment is the scheduler's job, not theirs.
"""

import logging
from functools import partial

from ..core.state import Dependencies
from ..scheduler.models import TaskDescriptor

logger = logging.getLogger(__name__)

TABLE_STAT_KEYS = ("system", "member", "group", "switch", "message")

MINUTELY_INTERVAL_SECONDS = 60.0
MESSAGE_STATS_INTERVAL_SECONDS = 600.0


def plural(key: str) -> str:
    if key.endswith("h"):
        return key + "es"
    return key + "s"


def update_db_meta(deps: Dependencies) -> None:
    logger.info("updating database stats")
    for key in TABLE_STAT_KEYS:
        if key == "message":
            # Counting messages is too slow for the per-minute run; see update_db_message_meta.
            continue
        deps.data_db.update_table_count(key, plural(key))


def update_db_message_meta(deps: Dependencies) -> None:
    count = deps.data_db.count_messages()
    deps.data_db.set_message_count(count)
    logger.info("message count is %d", count)


def update_stats(deps: Dependencies) -> None:
    guild_count = 0
    channel_count = 0
    for shard in deps.cache.shard_stats():
        logger.debug("shard %s: %d guilds, %d channels", shard.shard_id, shard.guild_count, shard.channel_count)
        guild_count += shard.guild_count
        channel_count += shard.channel_count

    deps.stats_db.insert_sample("guilds", guild_count)
    deps.stats_db.insert_sample("channels", channel_count)

    data_stats = deps.data_db.table_stats()
    for key in TABLE_STAT_KEYS:
        column = f"{key}_count"
        if column not in data_stats:
            raise KeyError(f"info table has no {column} column")
        deps.stats_db.insert_sample(plural(key), int(data_stats[column]))


def run_minutely(deps: Dependencies) -> None:
    logger.info("running per-minute scheduled tasks")
    update_db_meta(deps)
    update_stats(deps)


def build_tasks(deps: Dependencies) -> list[TaskDescriptor]:
    """The fixed set of (name, interval, body) triples this process runs."""
    return [
        TaskDescriptor(
            name="message stats updater",
            interval_seconds=MESSAGE_STATS_INTERVAL_SECONDS,
            body=partial(update_db_message_meta, deps),
        ),
        TaskDescriptor(
            name="scheduled tasks",
            interval_seconds=MINUTELY_INTERVAL_SECONDS,
            body=partial(run_minutely, deps),
        ),
    ]
