"""
Single-slot cancellable action scheduler.

The scheduler holds at most one armed action at a time. Arming always
replaces whatever occupies the slot. A failed action is re-armed with
exponential backoff until it succeeds or the slot is replaced.

Only actions that are still waiting for their delay can be cancelled. Once an
action has started executing it runs to completion; if it was superseded in
the meantime its outcome is logged but it is never retried.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

MAX_RETRY_DELAY_SECONDS = 15

ActionFn = Callable[[], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff state of a scheduled action."""
    current_delay: float = 0
    max_delay: float = MAX_RETRY_DELAY_SECONDS

    @property
    def next_delay(self) -> float:
        """Delay before the retry that follows a failure at current_delay."""
        if self.current_delay == 0:
            return 1
        return min(self.current_delay * 2, self.max_delay)

    def advance(self) -> "RetryPolicy":
        """Policy for the next attempt after a failure."""
        return RetryPolicy(current_delay=self.next_delay, max_delay=self.max_delay)


@dataclass
class SchedulerSlot:
    """The scheduler's single armed action."""
    action: ActionFn
    policy: RetryPolicy
    attempts: int = 0
    in_flight: bool = False
    superseded: bool = False
    result: Any = None
    task: Optional["asyncio.Task[Any]"] = field(default=None, repr=False)

    @property
    def delay_seconds(self) -> float:
        return self.policy.current_delay


class ActionScheduler:
    """Executes one start/stop action at a time after a delay, retrying failures."""

    def __init__(self, max_retry_delay: float = MAX_RETRY_DELAY_SECONDS,
                 sleep: SleepFn = asyncio.sleep):
        self.logger = logger
        self.max_retry_delay = max_retry_delay
        self._sleep = sleep
        self._slot: Optional[SchedulerSlot] = None
        self.last_result: Any = None

    @property
    def slot(self) -> Optional[SchedulerSlot]:
        """The currently occupied slot, if any."""
        return self._slot

    @property
    def armed(self) -> bool:
        """Whether an action is waiting for its timer to fire."""
        return self._slot is not None and not self._slot.in_flight

    def schedule(self, action: Optional[ActionFn] = None,
                 delay_seconds: float = 0) -> Optional[SchedulerSlot]:
        """
        Replace the slot's content.

        Any armed action is cancelled first. Without an action this only
        disarms; otherwise the action is armed to run after delay_seconds.
        """
        if action is None:
            self.disarm()
            return None
        return self.arm(action, delay_seconds)

    def arm(self, action: ActionFn, delay_seconds: float = 0) -> SchedulerSlot:
        """Arm the slot with a new action, superseding the current one."""
        self.disarm()

        slot = SchedulerSlot(
            action=action,
            policy=RetryPolicy(current_delay=delay_seconds, max_delay=self.max_retry_delay),
        )
        self._slot = slot
        slot.task = asyncio.get_running_loop().create_task(self._run(slot))

        self.logger.info("Will execute next action in %d seconds", delay_seconds,
                         delay_seconds=delay_seconds)
        return slot

    def disarm(self) -> bool:
        """
        Empty the slot.

        Returns:
            True if the slot was occupied
        """
        slot = self._slot
        if slot is None:
            return False

        self._slot = None
        slot.superseded = True

        if slot.in_flight:
            self.logger.info(
                "Previously scheduled action is already executing and will not be retried",
                attempt=slot.attempts
            )
        else:
            self.logger.info("Cancelling previously scheduled action")
            if slot.task is not None:
                slot.task.cancel()

        return True

    async def _run(self, slot: SchedulerSlot) -> Any:
        delay = slot.delay_seconds

        while True:
            await self._sleep(delay)

            slot.in_flight = True
            slot.attempts += 1
            self.logger.info("Executing scheduled action", attempt=slot.attempts)

            try:
                result = await slot.action()
            except Exception as e:
                slot.in_flight = False
                self.logger.warning(
                    "Execution of scheduled action threw an error",
                    error=str(e),
                    error_type=type(e).__name__,
                    attempt=slot.attempts
                )

                if slot.superseded:
                    return None

                slot.policy = slot.policy.advance()
                delay = slot.delay_seconds
                self.logger.info("Retry scheduled in %d seconds", delay, retry_seconds=delay)
                continue

            slot.in_flight = False
            slot.result = result
            self.last_result = result
            self.logger.info(
                "Execution of scheduled action successful",
                result=result,
                attempt=slot.attempts
            )

            if self._slot is slot:
                self._slot = None
            return result
