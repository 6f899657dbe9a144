"""Drone build queue client."""

from typing import Any, Optional

import httpx
import orjson
import structlog

from ..config.defaults import QueueSettings
from ..errors import QueueFetchError
from ..planning.models import QueueItem

logger = structlog.get_logger(__name__)


class DroneQueueClient:
    """Reads the build queue from the Drone API."""

    def __init__(self, settings: QueueSettings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.logger = logger.bind(server=settings.server)
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def queue_url(self) -> str:
        return f"{self.settings.server.rstrip('/')}/api/queue"

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.settings.request_timeout_seconds)
        return self._http_client

    async def fetch_queue(self) -> list[QueueItem]:
        """
        Fetch the current queue snapshot.

        Returns:
            Queue items in API order

        Raises:
            QueueFetchError: non-2xx response or a body that is not a JSON
                array of queue item objects
        """
        self.logger.debug("Fetching build queue", phase="start")

        try:
            response = await self._client().get(
                self.queue_url,
                headers={"Authorization": f"Bearer {self.settings.token}"},
            )
        except httpx.HTTPError as e:
            raise QueueFetchError(
                f"Drone queue request failed: {e}",
                url=self.queue_url
            ) from e

        if response.status_code < 200 or response.status_code >= 300:
            raise QueueFetchError(
                f"Drone queue request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                url=self.queue_url,
                context={"body": response.text[:200]}
            )

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise QueueFetchError(
                f"Drone queue response is not valid JSON: {e}",
                status_code=response.status_code,
                url=self.queue_url
            ) from e

        queue = self._parse_queue(payload)

        self.logger.debug("Fetched build queue", phase="finish", queue_length=len(queue))
        return queue

    def _parse_queue(self, payload: Any) -> list[QueueItem]:
        if not isinstance(payload, list):
            raise QueueFetchError(
                "Drone queue response is not a JSON array",
                url=self.queue_url,
                context={"type": type(payload).__name__}
            )

        queue = []
        for index, entry in enumerate(payload):
            if not isinstance(entry, dict):
                raise QueueFetchError(
                    f"Drone queue item {index} is not an object",
                    url=self.queue_url
                )
            try:
                queue.append(QueueItem.from_payload(entry))
            except ValueError as e:
                raise QueueFetchError(
                    f"Drone queue item {index} has an invalid creation time: {e}",
                    url=self.queue_url
                ) from e
        return queue

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
