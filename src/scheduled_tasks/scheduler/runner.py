# src/scheduled_tasks/scheduler/runner.py

from __future__ import annotations

"""
Fixed-interval scheduler.

Every interval_seconds the scheduler starts one independent invocation of
timed(protect(task.body)) in its own thread and goes straight back to
waiting. It never joins an invocation:
- ticks are spaced by the interval measured tick-start to tick-start,
- a slow invocation does not delay the next tick (invocations may overlap),
- a failing invocation cannot reach the loop (protect() contains it).

Overlap is unbounded unless max_concurrent is given. With a cap, a tick that
finds the cap reached is skipped and logged.

To stop a scheduler (tests, embedding), set its stop_event.
"""

import itertools
import logging
import threading
from typing import Iterable

from ..core.ports import ErrorTracker
from .instrumentation import timed
from .isolation import protect
from .models import TaskDescriptor

logger = logging.getLogger(__name__)


class Scheduler:
    def __init__(
            self,
            task: TaskDescriptor,
            tracker: ErrorTracker,
            *,
            max_concurrent: int | None = None,
            stop_event: threading.Event | None = None,
    ) -> None:
        if max_concurrent is not None and max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")

        self.task = task
        self.stop_event = stop_event or threading.Event()
        self._invocation = timed(task.name, protect(task.body, tracker, name=task.name))
        self._slots = threading.BoundedSemaphore(max_concurrent) if max_concurrent else None
        self._seq = itertools.count(1)

    def run(self) -> None:
        """Wait one interval, launch an invocation, repeat. Returns only once stop_event is set."""
        logger.info("starting %s every %ss", self.task.name, self.task.interval_seconds)
        while not self.stop_event.wait(self.task.interval_seconds):
            self.tick()

    def tick(self) -> threading.Thread | None:
        """Launch one invocation without waiting for it."""
        if self._slots is not None and not self._slots.acquire(blocking=False):
            logger.warning("skipping tick of %s: concurrency cap reached", self.task.name)
            return None

        thread = threading.Thread(
            target=self._invoke,
            name=f"{self.task.name}#{next(self._seq)}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError:
            logger.exception("could not start invocation of %s", self.task.name)
            if self._slots is not None:
                self._slots.release()
            return None
        return thread

    def _invoke(self) -> None:
        try:
            self._invocation()
        finally:
            if self._slots is not None:
                self._slots.release()


def start_schedulers(
        tasks: Iterable[TaskDescriptor],
        tracker: ErrorTracker,
        *,
        max_concurrent: int | None = None,
        stop_event: threading.Event | None = None,
) -> list[threading.Thread]:
    """Start one Scheduler loop per task, each in its own thread."""
    threads: list[threading.Thread] = []
    for task in tasks:
        scheduler = Scheduler(task, tracker, max_concurrent=max_concurrent, stop_event=stop_event)
        thread = threading.Thread(target=scheduler.run, name=f"scheduler:{task.name}")
        thread.start()
        threads.append(thread)
    return threads


def run_schedulers(
        tasks: Iterable[TaskDescriptor],
        tracker: ErrorTracker,
        *,
        max_concurrent: int | None = None,
        stop_event: threading.Event | None = None,
) -> None:
    """Run all schedulers concurrently; blocks for the life of the process."""
    threads = start_schedulers(tasks, tracker, max_concurrent=max_concurrent, stop_event=stop_event)
    for thread in threads:
        thread.join()
