"""
Process wiring for the supervisor.

Builds the clients, the scheduler and the Supervisor from a loaded
configuration, and applies the planning error policy: with
``terminate_on_planning_error`` enabled, an error escaping a check cycle ends
the process with a non-zero exit code so an external process manager can
restart it.
"""

import asyncio
import signal
from typing import Optional

import structlog

from .clients.instance import Ec2InstanceClient
from .clients.queue import DroneQueueClient
from .config.defaults import SupervisorConfig
from .execution.scheduler import ActionScheduler, SleepFn
from .supervisor import Supervisor

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_PLANNING_ERROR = 1


class PlanningErrorPolicy:
    """Handles errors that escape a check cycle."""

    def __init__(self, terminate_on_planning_error: bool,
                 shutdown: Optional[asyncio.Event] = None):
        self.terminate_on_planning_error = terminate_on_planning_error
        self.shutdown = shutdown or asyncio.Event()
        self.exit_code = EXIT_OK
        self.errors: list[BaseException] = []

    def __call__(self, error: BaseException) -> None:
        self.errors.append(error)
        logger.error(
            str(error),
            error_type=type(error).__name__,
            context=getattr(error, "context", None),
            terminate=self.terminate_on_planning_error,
            exc_info=error
        )

        if self.terminate_on_planning_error:
            self.exit_code = EXIT_PLANNING_ERROR
            self.shutdown.set()


def _install_signal_handlers(shutdown: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except (NotImplementedError, RuntimeError):
            # Not available on this platform/loop; KeyboardInterrupt still applies.
            pass


async def run(config: SupervisorConfig,
              queue_client: Optional[DroneQueueClient] = None,
              instance_client: Optional[Ec2InstanceClient] = None,
              sleep: SleepFn = asyncio.sleep) -> int:
    """
    Run the supervisor until a shutdown signal or a fatal planning error.

    Returns:
        Process exit code
    """
    shutdown = asyncio.Event()
    policy = PlanningErrorPolicy(config.terminate_on_planning_error, shutdown)

    queue_client = queue_client or DroneQueueClient(config.queue)
    instance_client = instance_client or Ec2InstanceClient(config.instance)

    supervisor = Supervisor(
        config=config,
        queue_client=queue_client,
        instance_client=instance_client,
        scheduler=ActionScheduler(sleep=sleep),
        on_planning_error=policy,
        sleep=sleep,
    )

    _install_signal_handlers(shutdown)
    dispose = supervisor.start()

    try:
        await shutdown.wait()
    finally:
        dispose()
        await queue_client.aclose()

    return policy.exit_code
