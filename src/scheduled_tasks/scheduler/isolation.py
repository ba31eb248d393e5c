# src/scheduled_tasks/scheduler/isolation.py

from __future__ import annotations

"""
Failure isolation for a single invocation.

protect() wraps a task body so that whatever happens inside it, the call
returns normally with an Outcome. Failures are:
- classified (Exception -> TypedError, anything else -> OpaqueValue),
- forwarded to the error tracker (capture_exception / capture_message),
- logged with a stack trace trimmed to the frames below the boundary.

This is the only place where invocation failures are observed.
"""

import logging
import traceback
from typing import Any, Callable

from ..core.ports import ErrorTracker
from .models import Failure, FailureCause, OpaqueValue, Outcome, Success, TypedError

logger = logging.getLogger(__name__)

# Name of the frame function that marks the isolation boundary. Frames up to
# and including it are machinery, not task code, and are dropped from traces.
BOUNDARY_MARKER = "_isolation_boundary"


def trim_trace(tb: Any) -> str:
    """Format a traceback, keeping only the frames below the isolation boundary."""
    frames = traceback.extract_tb(tb)
    cut = 0
    for i, frame in enumerate(frames):
        if frame.name == BOUNDARY_MARKER:
            cut = i + 1
    return "".join(traceback.format_list(frames[cut:])).rstrip()


def _describe(exc: BaseException) -> str:
    return "".join(traceback.format_exception_only(type(exc), exc)).strip()


def _render(value: Any, render: Callable[[Any], str]) -> str:
    try:
        return render(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def classify(value: Any) -> tuple[FailureCause, str]:
    """Turn whatever ended an invocation into a FailureCause plus a printable trace."""
    if isinstance(value, (TypedError, OpaqueValue)):
        return value, value.trace if isinstance(value, TypedError) else ""

    if isinstance(value, Exception):
        trace = trim_trace(value.__traceback__)
        return TypedError(message=_describe(value), trace=trace, exc=value), trace

    if isinstance(value, BaseException):
        # SystemExit & co. carry no error contract; report them as text.
        return OpaqueValue(rendered=_render(value, repr)), trim_trace(value.__traceback__)

    return OpaqueValue(rendered=_render(value, str)), ""


def report(cause: FailureCause, trace: str, tracker: ErrorTracker, task_name: str) -> None:
    """Forward a failure to the tracker and log it. Never raises."""
    try:
        if isinstance(cause, TypedError):
            tracker.capture_exception(cause.exc, task_name=task_name)
        else:
            tracker.capture_message(f"unknown error: {cause.rendered}", task_name=task_name)
    except Exception:
        logger.exception("error tracker failed while reporting %s", task_name)

    message = cause.message if isinstance(cause, TypedError) else cause.rendered
    if trace:
        logger.error("error running %s: %s\n%s", task_name, message, trace)
    else:
        logger.error("error running %s: %s", task_name, message)


def protect(
        fn: Callable[[], Any],
        tracker: ErrorTracker,
        *,
        name: str | None = None,
) -> Callable[[], Outcome]:
    """
    Wrap `fn` in the isolation boundary.

    The wrapper returns Success(value) on a normal return, and Failure(cause)
    when `fn` raised anything or returned a Failure itself.
    """
    task_name = name or getattr(fn, "__name__", None) or repr(fn)

    def _isolation_boundary() -> Outcome:
        try:
            result = fn()
        except BaseException as exc:  # noqa: BLE001 - every raised value ends here
            failed: Any = exc
        else:
            if not isinstance(result, Failure):
                return result if isinstance(result, Success) else Success(result)
            failed = result.cause

        try:
            cause, trace = classify(failed)
            report(cause, trace, tracker, task_name)
        except BaseException:  # noqa: BLE001
            logger.exception("could not report failure of %s", task_name)
            cause = OpaqueValue(rendered=f"<unreportable {type(failed).__name__}>")
        return Failure(cause)

    return _isolation_boundary
