"""
Supervisor coordinator.

Runs the fixed-interval check cycle:
Queue + Instance (fetched concurrently) → Classification → Plan → Dispatch

Dispatch is edge-triggered: the scheduler is only touched when the planned
action differs from the one planned in the immediately preceding cycle.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Optional

import structlog

from .clients.instance import Ec2InstanceClient
from .clients.queue import DroneQueueClient
from .config.defaults import SupervisorConfig
from .execution.actions import dispatch
from .execution.scheduler import ActionScheduler, SleepFn
from .logging.config import log_action_change
from .planning.classifiers import classify_instance, classify_queue
from .planning.models import Action
from .planning.planner import determine_next_action
from .utils.time import now_utc

logger = structlog.get_logger(__name__)

PlanningErrorHandler = Callable[[BaseException], None]


class Supervisor:
    """
    Keeps the EC2 instance in line with the Drone build queue.

    Each tick of the repeating timer starts one check cycle as its own task,
    so a slow cycle does not delay the next tick and cycles may overlap. The
    check interval should be generous relative to remote call latency.
    """

    def __init__(
        self,
        config: SupervisorConfig,
        queue_client: DroneQueueClient,
        instance_client: Ec2InstanceClient,
        scheduler: ActionScheduler,
        on_planning_error: Optional[PlanningErrorHandler] = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], datetime] = now_utc
    ) -> None:
        self.logger = logger
        self.config = config
        self.queue_client = queue_client
        self.instance_client = instance_client
        self.scheduler = scheduler
        self.on_planning_error = on_planning_error
        self._sleep = sleep
        self._clock = clock

        self._last_action = Action.NOOP
        self._ticker: Optional["asyncio.Task[None]"] = None
        self._cycles: set["asyncio.Task[Any]"] = set()

    @property
    def last_action(self) -> Action:
        """Action planned by the most recent completed check cycle."""
        return self._last_action

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    async def plan(self) -> Action:
        """Fetch queue and instance concurrently, classify both and plan."""
        queue, instance = await asyncio.gather(
            self.queue_client.fetch_queue(),
            self.instance_client.describe_instance(),
        )

        queue_state = classify_queue(
            queue,
            ignore_running_for_seconds=self.config.queue.ignore_running_for_seconds,
            now=self._clock(),
        )
        instance_state = classify_instance(instance)

        return determine_next_action(queue_state, instance_state)

    async def check(self) -> Action:
        """Run one check cycle; planning errors propagate to the caller."""
        self.logger.debug("Performing check")

        next_action = await self.plan()
        self.logger.debug("Next action is: %s", next_action.value, next_action=next_action.value)

        if next_action is not self._last_action:
            log_action_change(self.logger, self._last_action.value, next_action.value)
            self.dispatch(next_action)

        self._last_action = next_action
        return next_action

    def dispatch(self, action: Action) -> None:
        """Hand a changed action to the scheduler."""
        dispatch(
            action,
            self.scheduler,
            self.instance_client,
            hibernate=self.config.instance.hibernation_enabled,
            stop_timeout_seconds=self.config.stop_timeout_seconds,
        )

    def start(self) -> Callable[[], None]:
        """
        Start the repeating check timer.

        Returns:
            Disposer that stops future ticks. It deliberately leaves any
            action armed in the scheduler untouched.
        """
        if self.running:
            raise RuntimeError("Supervisor is already running")

        self.logger.info(
            "Creating Supervisor (checking every %d seconds)",
            self.config.check_interval_seconds,
            phase="start",
            check_interval_seconds=self.config.check_interval_seconds
        )
        self._ticker = asyncio.get_running_loop().create_task(self._tick_forever())
        return self.stop

    def stop(self) -> None:
        """Stop future ticks. Cycles already started and armed actions continue."""
        if self._ticker is None:
            return

        self.logger.info("Terminating Supervisor", phase="finish")
        self._ticker.cancel()
        self._ticker = None

    async def _tick_forever(self) -> None:
        while True:
            await self._sleep(self.config.check_interval_seconds)
            cycle = asyncio.get_running_loop().create_task(self.check())
            self._cycles.add(cycle)
            cycle.add_done_callback(self._on_cycle_done)

    def _on_cycle_done(self, cycle: "asyncio.Task[Any]") -> None:
        self._cycles.discard(cycle)

        if cycle.cancelled():
            return

        error = cycle.exception()
        if error is None:
            return

        if self.on_planning_error is None:
            self.logger.error(
                "Check cycle failed",
                error=str(error),
                error_type=type(error).__name__
            )
            return

        self.on_planning_error(error)
