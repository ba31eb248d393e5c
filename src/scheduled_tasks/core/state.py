# src/scheduled_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .ports import DataRepo, ShardStatusRepo, StatsRepo


@dataclass(slots=True)
class Dependencies:
    """
    Connection handles built once at startup and passed explicitly into
    every task closure. Nothing in the task code reaches for module globals.
    """

    data_db: DataRepo
    stats_db: StatsRepo
    cache: ShardStatusRepo

    # Called (best-effort) by whoever owns the process when it wants to release pools.
    closers: list[Callable[[], None]] = field(default_factory=list)

    def close(self) -> None:
        for close in reversed(self.closers):
            close()
        self.closers.clear()
