"""
Planning data models for the supervisor's check cycle.

This module defines the immutable queue snapshot item and the closed state
sets that queue, instance and planned action classify into.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..utils.time import from_epoch_seconds


class QueueItemStatus(str, Enum):
    """Statuses a Drone queue item may report."""
    PENDING = "pending"
    RUNNING = "running"


class QueueState(str, Enum):
    """Aggregate state of the build queue."""
    EMPTY = "empty"
    PENDING = "pending"
    RUNNING = "running"


class InstanceState(str, Enum):
    """EC2 instance lifecycle states."""
    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
    STOPPING = "stopping"
    STOPPED = "stopped"


class Action(str, Enum):
    """Outcome of one planning cycle."""
    NOOP = "noop"
    START = "start"
    SCHEDULE_STOP = "schedule-stop"


@dataclass(frozen=True)
class QueueItem:
    """
    One entry of the Drone build queue.

    Drone queue items carry more fields than this; only the status and the
    creation time matter for planning. The status is kept verbatim so that an
    unexpected value reaches the classifier instead of being dropped here.
    """

    status: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "QueueItem":
        """Build a queue item from one element of the queue API response."""
        return cls(
            status=payload.get("status"),
            created_at=from_epoch_seconds(payload.get("created")),
        )
