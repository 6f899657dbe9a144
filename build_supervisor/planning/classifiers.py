"""
Queue and instance classifiers.

Both classifiers are total: every input maps to exactly one state or raises
a planning error. Nothing falls through to a default.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Optional

import structlog

from ..errors import ClassificationError, MissingStateError
from ..utils.time import age_seconds, now_utc
from .models import InstanceState, QueueItem, QueueItemStatus, QueueState

logger = structlog.get_logger(__name__)


def _item_status(item: QueueItem) -> QueueItemStatus:
    try:
        return QueueItemStatus(item.status)
    except ValueError as e:
        raise ClassificationError(
            "Unable to determine Drone Queue State",
            value=item.status,
            allowed=[s.value for s in QueueItemStatus],
            context={"created_at": item.created_at.isoformat() if item.created_at else None}
        ) from e


def is_active_running(
    item: QueueItem,
    ignore_running_for_seconds: Optional[int],
    now: datetime
) -> bool:
    """
    Whether a queue item is running work that still counts as activity.

    A running item older than the staleness window is assumed to be wedged
    (e.g. the agent died without reporting) and no longer counts. Items
    without a creation time cannot be aged and always count.
    """
    if _item_status(item) is not QueueItemStatus.RUNNING:
        return False

    if not ignore_running_for_seconds or item.created_at is None:
        return True

    return age_seconds(item.created_at, now) < ignore_running_for_seconds


def classify_queue(
    queue: Sequence[QueueItem],
    ignore_running_for_seconds: Optional[int] = None,
    now: Optional[datetime] = None
) -> QueueState:
    """
    Classify a queue snapshot.

    Args:
        queue: Queue items in API order
        ignore_running_for_seconds: Staleness window; None or 0 disables it
        now: Reference time for item ages, defaults to wall-clock time

    Returns:
        RUNNING if any item is actively running, else PENDING if any item is
        pending, else EMPTY (including a queue holding only stale running items)

    Raises:
        ClassificationError: an item reports a status other than pending/running
    """
    if not queue:
        logger.debug("Determined queue state", determined_state=QueueState.EMPTY.value)
        return QueueState.EMPTY

    if now is None:
        now = now_utc()

    # Validate every item up front so a bad status is never masked by a
    # running item earlier in the list.
    statuses = [_item_status(item) for item in queue]

    if any(is_active_running(item, ignore_running_for_seconds, now) for item in queue):
        state = QueueState.RUNNING
    elif QueueItemStatus.PENDING in statuses:
        state = QueueState.PENDING
    else:
        state = QueueState.EMPTY
        logger.info(
            "Ignoring stale running builds",
            stale_items=len(queue),
            ignore_running_for_seconds=ignore_running_for_seconds
        )

    logger.debug(
        "Determined queue state",
        determined_state=state.value,
        queue_length=len(queue)
    )
    return state


def classify_instance(instance: dict[str, Any]) -> InstanceState:
    """
    Classify an EC2 instance descriptor by its lifecycle state.

    Raises:
        MissingStateError: descriptor has no ``State`` or no ``State.Name``
        ClassificationError: state name is not a known lifecycle state
    """
    state = instance.get("State") if instance else None
    if not isinstance(state, dict):
        raise MissingStateError(missing_field="State")

    name = state.get("Name")
    if not name:
        raise MissingStateError(missing_field="State.Name")

    try:
        determined = InstanceState(name)
    except ValueError as e:
        raise ClassificationError(
            f"Unknown EC2 Instance State '{name}'",
            value=name,
            allowed=[s.value for s in InstanceState]
        ) from e

    logger.debug("Determined instance state", determined_state=determined.value)
    return determined
