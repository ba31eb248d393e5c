"""
Scheduler subsystem.

Components:
- models.py: TaskDescriptor, Success/Failure, FailureCause, InvocationRecord
- alignment.py: wait for the next round UTC minute
- instrumentation.py: timed() wrapper that logs invocation duration
- isolation.py: protect() boundary that reports and swallows failures
- runner.py: Scheduler loop, one thread per invocation
"""

from .models import Failure, InvocationRecord, OpaqueValue, Success, TaskDescriptor, TypedError
from .runner import Scheduler, run_schedulers, start_schedulers

__all__ = [
    "Failure",
    "InvocationRecord",
    "OpaqueValue",
    "Scheduler",
    "Success",
    "TaskDescriptor",
    "TypedError",
    "run_schedulers",
    "start_schedulers",
]
