# src/scheduled_tasks/scheduler/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, Callable, Union


class InvocationState(StrEnum):
    """
    Per-invocation lifecycle: IDLE -> RUNNING -> (COMPLETED | RECOVERED) -> IDLE.

    COMPLETED and RECOVERED look the same to the scheduler; they differ only in
    whether a failure was reported and logged.

    Only the two terminal states are ever produced (InvocationRecord.state);
    IDLE and RUNNING are not tracked and exist to name the full lifecycle.
    """

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    RECOVERED = "recovered"


@dataclass(slots=True, frozen=True)
class TaskDescriptor:
    name: str
    interval_seconds: float
    body: Callable[[], Any]

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("task name must not be empty")
        if not self.interval_seconds > 0:
            raise ValueError(f"interval for {self.name!r} must be positive, got {self.interval_seconds!r}")


@dataclass(slots=True, frozen=True)
class TypedError:
    """A raised Exception: reported to the tracker as an exception."""

    message: str
    trace: str
    exc: BaseException


@dataclass(slots=True, frozen=True)
class OpaqueValue:
    """Anything else that escaped a task body; reported as a plain message."""

    rendered: str


FailureCause = Union[TypedError, OpaqueValue]


@dataclass(slots=True, frozen=True)
class Success:
    value: Any = None


@dataclass(slots=True, frozen=True)
class Failure:
    """
    Returned by a task body that wants to signal failure without raising.

    `cause` may be an exception, an already-classified FailureCause, or any
    other value (rendered with str()).
    """

    cause: Any


Outcome = Union[Success, Failure]


@dataclass(slots=True, frozen=True)
class InvocationRecord:
    task_name: str
    started_at: datetime
    ended_at: datetime
    elapsed_seconds: float
    outcome: Outcome

    @property
    def state(self) -> InvocationState:
        if isinstance(self.outcome, Failure):
            return InvocationState.RECOVERED
        return InvocationState.COMPLETED

    @property
    def completed(self) -> bool:
        return self.state is InvocationState.COMPLETED

    @property
    def recovered(self) -> bool:
        return self.state is InvocationState.RECOVERED
