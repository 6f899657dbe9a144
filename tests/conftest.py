"""Pytest configuration and shared fixtures."""

import asyncio
import heapq
import itertools
from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from build_supervisor.config.defaults import InstanceSettings, QueueSettings, SupervisorConfig
from build_supervisor.planning.models import QueueItem


class FakeClock:
    """
    Deterministic replacement for ``asyncio.sleep``.

    Sleepers park on futures that are only released by ``advance``; released
    timers fire in deadline order and the loop is drained after each one.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []
        self._timers: list[tuple[float, int, asyncio.Future]] = []
        self._seq = itertools.count()

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._timers, (self.now + delay, next(self._seq), future))
        await future

    async def settle(self) -> None:
        for _ in range(50):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        await self.settle()

        while self._timers and self._timers[0][0] <= target:
            deadline, _, future = heapq.heappop(self._timers)
            self.now = deadline
            if not future.done():
                future.set_result(None)
            await self.settle()

        self.now = target

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, future in self._timers if not future.done())


class FakeQueueClient:
    """Queue client returning a fixed snapshot."""

    def __init__(self, queue: Optional[list[QueueItem]] = None):
        self.queue = queue or []
        self.calls = 0

    async def fetch_queue(self) -> list[QueueItem]:
        self.calls += 1
        return list(self.queue)

    async def aclose(self) -> None:
        pass


class FakeInstanceClient:
    """Instance client recording start/stop requests."""

    def __init__(self, state: str = "stopped", fail_times: int = 0,
                 describe_error: Optional[Exception] = None):
        self.instance_id = "test-instance"
        self.state = state
        self.fail_times = fail_times
        self.describe_error = describe_error
        self.starts = 0
        self.stops: list[bool] = []

    async def describe_instance(self) -> dict[str, Any]:
        if self.describe_error is not None:
            raise self.describe_error
        return {"InstanceId": self.instance_id, "State": {"Name": self.state}}

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_times > 0:
            self.fail_times -= 1
            raise RuntimeError(f"{operation} failed")

    async def start_instance(self) -> dict[str, Any]:
        self.starts += 1
        self._maybe_fail("start")
        return {"StartingInstances": [{"InstanceId": self.instance_id}]}

    async def stop_instance(self, hibernate: bool) -> dict[str, Any]:
        self.stops.append(hibernate)
        self._maybe_fail("stop")
        return {"StoppingInstances": [{"InstanceId": self.instance_id}]}


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock whose sleep is injected into the scheduler and supervisor."""
    return FakeClock()


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for queue age filtering."""
    return datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def supervisor_config() -> SupervisorConfig:
    """Supervisor configuration used by the supervisor tests."""
    return SupervisorConfig(
        check_interval_seconds=10,
        stop_timeout_seconds=20,
        queue=QueueSettings(
            server="http://test-server",
            token="test-token",
            ignore_running_for_seconds=3600,
        ),
        instance=InstanceSettings(
            instance_id="test-instance",
            hibernation_enabled=True,
        ),
    )


@pytest.fixture
def fake_queue_client() -> FakeQueueClient:
    return FakeQueueClient()


@pytest.fixture
def fake_instance_client() -> FakeInstanceClient:
    return FakeInstanceClient()
