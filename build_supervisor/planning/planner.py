"""
Action planner.

Maps the classified queue and instance states onto the next action. The
instance is only started from a stopped or stopping state, and a stop is only
ever scheduled, never forced, so in-flight builds get a grace period.
"""

import structlog

from .models import Action, InstanceState, QueueState

logger = structlog.get_logger(__name__)

# First matching row wins; every other combination plans NOOP.
DECISION_TABLE: list[tuple[frozenset[QueueState], frozenset[InstanceState], Action]] = [
    (
        frozenset({QueueState.EMPTY}),
        frozenset({InstanceState.PENDING, InstanceState.RUNNING}),
        Action.SCHEDULE_STOP,
    ),
    (
        frozenset({QueueState.PENDING, QueueState.RUNNING}),
        frozenset({InstanceState.STOPPING, InstanceState.STOPPED}),
        Action.START,
    ),
]


def determine_next_action(queue_state: QueueState, instance_state: InstanceState) -> Action:
    """Plan the next action for a (queue state, instance state) pair."""
    # Reject raw strings so an unmapped provider state cannot slip through as NOOP.
    queue_state = QueueState(queue_state)
    instance_state = InstanceState(instance_state)

    next_action = Action.NOOP
    for queue_states, instance_states, action in DECISION_TABLE:
        if queue_state in queue_states and instance_state in instance_states:
            next_action = action
            break

    logger.debug(
        "Determined next action",
        queue_state=queue_state.value,
        instance_state=instance_state.value,
        next_action=next_action.value
    )
    return next_action
