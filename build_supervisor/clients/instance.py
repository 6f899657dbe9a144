"""EC2 instance control client."""

import asyncio
import functools
from typing import Any, Callable, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..config.defaults import InstanceSettings
from ..errors import ActuationError, MissingStateError, TerminatedInstanceError
from ..planning.models import InstanceState

logger = structlog.get_logger(__name__)


class Ec2InstanceClient:
    """
    Describes, starts and stops the supervised EC2 instance.

    boto3 is blocking, so every call is pushed onto the loop's default
    executor to keep the check cycle and the scheduler responsive.
    """

    def __init__(self, settings: InstanceSettings, ec2_client: Optional[Any] = None):
        self.settings = settings
        self.instance_id = settings.instance_id
        self.logger = logger.bind(instance_id=settings.instance_id)

        if ec2_client is None:
            ec2_client = boto3.client("ec2", region_name=settings.region)
        self.ec2 = ec2_client

    async def _call(self, fn: Callable[..., Any], **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, **kwargs))

    async def describe_instance(self) -> dict[str, Any]:
        """
        Return the instance descriptor.

        Raises:
            TerminatedInstanceError: the instance is in the terminated state
            MissingStateError: the response contains no instance
        """
        self.logger.debug("Describing EC2 instance", phase="start")

        result = await self._call(self.ec2.describe_instances, InstanceIds=[self.instance_id])

        try:
            instance = result["Reservations"][0]["Instances"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise MissingStateError(
                f"EC2 Instance '{self.instance_id}' was not found in the describe response",
                missing_field="Reservations[0].Instances[0]"
            ) from e

        if (instance.get("State") or {}).get("Name") == InstanceState.TERMINATED.value:
            raise TerminatedInstanceError(self.instance_id)

        self.logger.debug("Described EC2 instance", phase="finish")
        return instance

    async def start_instance(self) -> dict[str, Any]:
        """Request the instance to start."""
        try:
            return await self._call(self.ec2.start_instances, InstanceIds=[self.instance_id])
        except (ClientError, BotoCoreError) as e:
            raise ActuationError(
                f"Starting EC2 Instance '{self.instance_id}' failed: {e}",
                operation="start",
                instance_id=self.instance_id
            ) from e

    async def stop_instance(self, hibernate: bool) -> dict[str, Any]:
        """Request the instance to stop, optionally hibernating it."""
        try:
            return await self._call(
                self.ec2.stop_instances,
                InstanceIds=[self.instance_id],
                Hibernate=hibernate,
            )
        except (ClientError, BotoCoreError) as e:
            raise ActuationError(
                f"Stopping EC2 Instance '{self.instance_id}' failed: {e}",
                operation="stop",
                instance_id=self.instance_id,
                context={"hibernate": hibernate}
            ) from e
