# src/scheduled_tasks/storage/postgres.py

"""PostgreSQL access for the stats tasks (psycopg 3 + psycopg_pool)."""

from __future__ import annotations

import logging
from typing import Any

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

logger = logging.getLogger(__name__)


def open_pool(conninfo: str, *, name: str, max_size: int = 4, timeout: float = 30.0) -> ConnectionPool:
    """
    Open a pool and wait until it holds a working connection.

    Raises psycopg_pool.PoolTimeout (a psycopg.OperationalError) when the
    database can't be reached within `timeout`; callers treat that as fatal.
    """
    pool = ConnectionPool(
        conninfo,
        min_size=1,
        max_size=max_size,
        timeout=timeout,
        name=name,
        open=False,
        kwargs={"row_factory": dict_row, "autocommit": True},
    )
    try:
        pool.open(wait=True, timeout=timeout)
    except Exception:
        pool.close()
        raise
    logger.info("connected to %s database", name)
    return pool


class DataDB:
    """
    The bot's data database.

    `info` is a single-row table caching expensive counts
    (system_count, member_count, ..., message_count).
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def update_table_count(self, key: str, table: str) -> None:
        query = sql.SQL("update info set {column} = (select count(*) from {table})").format(
            column=sql.Identifier(f"{key}_count"),
            table=sql.Identifier(table),
        )
        with self._pool.connection() as conn:
            logger.info("data db query: refresh %s_count from %s", key, table)
            conn.execute(query)

    def count_messages(self) -> int:
        with self._pool.connection() as conn:
            row = conn.execute("select count(*) as count from messages").fetchone()
        return int(row["count"]) if row else 0

    def set_message_count(self, count: int) -> None:
        with self._pool.connection() as conn:
            conn.execute("update info set message_count = %s", (count,))

    def table_stats(self) -> dict[str, Any]:
        with self._pool.connection() as conn:
            row = conn.execute("select * from info").fetchone()
        if row is None:
            raise LookupError("info table is empty")
        return dict(row)


class StatsDB:
    """Time-series stats database: one table per metric, rows of (timestamp, value)."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def insert_sample(self, table: str, value: int) -> None:
        query = sql.SQL("insert into {table} values (now(), %s)").format(table=sql.Identifier(table))
        with self._pool.connection() as conn:
            conn.execute(query, (value,))
