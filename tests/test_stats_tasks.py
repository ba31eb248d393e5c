# tests/test_stats_tasks.py

from __future__ import annotations

import pytest

from scheduled_tasks.core.state import Dependencies
from scheduled_tasks.scheduler.isolation import protect
from scheduled_tasks.scheduler.models import Failure, TypedError
from scheduled_tasks.stats.tasks import (
    MESSAGE_STATS_INTERVAL_SECONDS,
    MINUTELY_INTERVAL_SECONDS,
    build_tasks,
    plural,
    run_minutely,
    update_db_message_meta,
    update_db_meta,
    update_stats,
)

from .fakes import FakeErrorTracker


@pytest.mark.parametrize(
    ("key", "expected"),
    [("system", "systems"), ("member", "members"), ("group", "groups"), ("switch", "switches")],
)
def test_plural(key: str, expected: str) -> None:
    assert plural(key) == expected


def test_update_db_meta_skips_messages(deps: Dependencies) -> None:
    update_db_meta(deps)

    assert deps.data_db.updated == [
        ("system", "systems"),
        ("member", "members"),
        ("group", "groups"),
        ("switch", "switches"),
    ]


def test_update_db_message_meta_writes_count(deps: Dependencies) -> None:
    update_db_message_meta(deps)

    assert deps.data_db.message_counts_set == [1234]


def test_update_stats_sums_shards_and_copies_table_counts(deps: Dependencies) -> None:
    update_stats(deps)

    assert deps.stats_db.samples == [
        ("guilds", 15),
        ("channels", 140),
        ("systems", 3),
        ("members", 10),
        ("groups", 2),
        ("switches", 7),
        ("messages", 100),
    ]


def test_update_stats_raises_on_missing_column(deps: Dependencies) -> None:
    del deps.data_db.info["switch_count"]
    with pytest.raises(KeyError):
        update_stats(deps)


def test_run_minutely_updates_meta_then_stats(deps: Dependencies) -> None:
    run_minutely(deps)

    assert len(deps.data_db.updated) == 4
    assert len(deps.stats_db.samples) == 7


def test_collaborator_failure_surfaces_at_boundary(deps: Dependencies, tracker: FakeErrorTracker) -> None:
    deps.data_db.fail_with = ConnectionError("db down")

    outcome = protect(lambda: run_minutely(deps), tracker, name="scheduled tasks")()

    assert isinstance(outcome, Failure)
    assert isinstance(outcome.cause, TypedError)
    assert tracker.exceptions[0][1] == "scheduled tasks"
    assert deps.stats_db.samples == []


def test_build_tasks_fixed_list(deps: Dependencies) -> None:
    tasks = {t.name: t for t in build_tasks(deps)}

    assert set(tasks) == {"scheduled tasks", "message stats updater"}
    assert tasks["scheduled tasks"].interval_seconds == MINUTELY_INTERVAL_SECONDS == 60
    assert tasks["message stats updater"].interval_seconds == MESSAGE_STATS_INTERVAL_SECONDS == 600

    tasks["message stats updater"].body()
    assert deps.data_db.message_counts_set == [1234]
