"""
Start/stop primitives and dispatch of planned actions to the scheduler.

The primitives let control-plane failures propagate so that the scheduler's
retry path handles them.
"""

from typing import Any

import structlog

from ..clients.instance import Ec2InstanceClient
from ..planning.models import Action
from .scheduler import ActionScheduler

logger = structlog.get_logger(__name__)


async def start(instance_client: Ec2InstanceClient) -> Any:
    """Start the EC2 instance."""
    log = logger.bind(instance_id=instance_client.instance_id)

    log.info("Starting EC2 Instance '%s'", instance_client.instance_id, phase="start")
    result = await instance_client.start_instance()
    log.info("Started EC2 Instance '%s'", instance_client.instance_id, phase="finish")
    log.debug("Start response", result=result)

    return result


async def stop(instance_client: Ec2InstanceClient, hibernate: bool) -> Any:
    """Stop the EC2 instance, hibernating it when enabled."""
    log = logger.bind(instance_id=instance_client.instance_id, hibernation_enabled=hibernate)

    log.info("Stopping EC2 Instance '%s'", instance_client.instance_id, phase="start")
    result = await instance_client.stop_instance(hibernate)
    log.info("Stopped EC2 Instance '%s'", instance_client.instance_id, phase="finish")
    log.debug("Stop response", result=result)

    return result


def dispatch(
    action: Action,
    scheduler: ActionScheduler,
    instance_client: Ec2InstanceClient,
    hibernate: bool,
    stop_timeout_seconds: float
) -> None:
    """
    Hand a newly planned action to the scheduler.

    NOOP disarms the slot, START arms an immediate start and SCHEDULE_STOP arms
    a stop after the grace period.
    """
    if action is Action.NOOP:
        scheduler.schedule()
    elif action is Action.START:
        scheduler.schedule(lambda: start(instance_client))
    elif action is Action.SCHEDULE_STOP:
        scheduler.schedule(lambda: stop(instance_client, hibernate), stop_timeout_seconds)
    else:
        raise ValueError(f"Unknown action: {action!r}")
