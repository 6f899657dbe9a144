"""
Error classification for the build supervisor.

Planning errors are raised from within a check cycle and are fatal by policy;
actuation errors are raised by start/stop calls and are retried by the
scheduler; configuration errors stop the process before it starts.
"""

from .planning import (
    PlanningError,
    ClassificationError,
    MissingStateError,
    TerminatedInstanceError,
    QueueFetchError,
)
from .actuation import ActuationError
from .configuration import ConfigurationError

__all__ = [
    # Planning failures
    "PlanningError",
    "ClassificationError",
    "MissingStateError",
    "TerminatedInstanceError",
    "QueueFetchError",
    # Actuation failures
    "ActuationError",
    # Start-up failures
    "ConfigurationError",
]
