"""
Planning module.

Classifies the build queue and the instance lifecycle state, and maps the
pair onto the next action through a fixed decision table.
"""

from .classifiers import classify_instance, classify_queue
from .models import Action, InstanceState, QueueItem, QueueItemStatus, QueueState
from .planner import determine_next_action

__all__ = [
    "Action",
    "InstanceState",
    "QueueItem",
    "QueueItemStatus",
    "QueueState",
    "classify_instance",
    "classify_queue",
    "determine_next_action",
]
