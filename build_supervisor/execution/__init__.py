"""
Execution module.

Owns the single-slot action scheduler and the start/stop primitives it runs.
"""

from .actions import dispatch, start, stop
from .scheduler import ActionScheduler, RetryPolicy, SchedulerSlot

__all__ = [
    "ActionScheduler",
    "RetryPolicy",
    "SchedulerSlot",
    "dispatch",
    "start",
    "stop",
]
