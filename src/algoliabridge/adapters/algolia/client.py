"""Algolia client — Thin async wrapper over the Algolia REST API.

This is the only module that talks to Algolia over the network.  It uses
``httpx`` directly; no Algolia SDK is required.

The client is created by the caller and handed to the provider, which never
opens connections of its own::

    async with AlgoliaClient(app_id="APP", api_key="KEY") as client:
        provider = AlgoliaSearchProvider(client, settings)
        await provider.index_documents("product", documents)

Connection-level retries are left to ``httpx``; failed API calls are never
retried here.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from algoliabridge.adapters.base.exceptions import AlgoliaApiError, ConfigurationError, ConnectionError
from algoliabridge.models.result import BatchAck, BatchResponse, IndexDescriptor, TaskAck
from algoliabridge.models.schema import SchemaSettings

if TYPE_CHECKING:
    from algoliabridge.config.settings import AlgoliaSettings

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


class AlgoliaClient:
    """Async client for the Algolia REST API.

    Args:
        app_id: Algolia application id.
        api_key: Admin API key (writes need index and settings rights).
        base_url: API host; defaults to ``https://{app_id}.algolia.net``.
        timeout: HTTP request timeout in seconds.
        retries: Connection retries performed by the HTTP transport.
        batch_size: Maximum records per batch request.
        transport: Optional ``httpx`` transport, mainly for tests.
    """

    def __init__(
        self,
        app_id: str,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        retries: int = 1,
        batch_size: int = DEFAULT_BATCH_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not app_id:
            raise ConfigurationError("Algolia app_id must not be empty.")
        if not api_key:
            raise ConfigurationError("Algolia api_key must not be empty.")
        if batch_size < 1:
            raise ConfigurationError("batch_size must be at least 1.")

        self._app_id = app_id
        self._api_key = api_key
        self._base_url = (base_url or f"https://{app_id}.algolia.net").rstrip("/")
        self._timeout = timeout
        self._retries = retries
        self._batch_size = batch_size
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: AlgoliaSettings, **kwargs: Any) -> AlgoliaClient:
        """Create a client from ``AlgoliaSettings``."""
        return cls(
            app_id=settings.app_id,
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            retries=settings.retries,
            batch_size=settings.batch_size,
            **kwargs,
        )

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def batch_size(self) -> int:
        return self._batch_size

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the underlying ``httpx.AsyncClient``."""
        if self._client is not None:
            return

        headers = {
            "X-Algolia-Application-Id": self._app_id,
            "X-Algolia-API-Key": self._api_key,
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=headers,
            transport=self._transport or httpx.AsyncHTTPTransport(retries=self._retries),
        )
        logger.info("Algolia client ready (application: %s, host: %s)", self._app_id, self._base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> AlgoliaClient:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()

    # ── Indexes ──────────────────────────────────────────────────────────

    async def list_indices(self) -> list[IndexDescriptor]:
        data = await self._request("GET", "/1/indexes")
        return [IndexDescriptor.model_validate(item) for item in data.get("items", [])]

    async def index_exists(self, index_name: str) -> bool:
        """Whether an index with this name exists (case-insensitive)."""
        wanted = index_name.casefold()
        return any(index.name.casefold() == wanted for index in await self.list_indices())

    async def delete_index(self, index_name: str) -> TaskAck:
        data = await self._request("DELETE", f"/1/indexes/{_encode(index_name)}")
        return TaskAck.model_validate(data)

    # ── Settings ─────────────────────────────────────────────────────────

    async def get_settings(self, index_name: str) -> SchemaSettings:
        data = await self._request("GET", f"/1/indexes/{_encode(index_name)}/settings")
        return SchemaSettings.model_validate(data)

    async def set_settings(
        self,
        index_name: str,
        settings: SchemaSettings,
        forward_to_replicas: bool = False,
    ) -> TaskAck:
        """Update index settings. Only the settings present in ``settings`` change."""
        data = await self._request(
            "PUT",
            f"/1/indexes/{_encode(index_name)}/settings",
            params={"forwardToReplicas": "true" if forward_to_replicas else "false"},
            json=settings.to_payload(),
        )
        return TaskAck.model_validate(data)

    async def wait_task(
        self,
        index_name: str,
        task_id: int,
        timeout: float = 60.0,
        poll_interval: float = 0.5,
    ) -> None:
        """Poll a task until Algolia reports it published.

        Raises:
            AlgoliaApiError: If the task is still pending after ``timeout`` seconds.
        """
        deadline = time.monotonic() + timeout
        path = f"/1/indexes/{_encode(index_name)}/task/{task_id}"
        while True:
            data = await self._request("GET", path)
            if data.get("status") == "published":
                return
            if time.monotonic() >= deadline:
                raise AlgoliaApiError(f"Task {task_id} on {index_name} not published after {timeout}s")
            await asyncio.sleep(poll_interval)

    # ── Records ──────────────────────────────────────────────────────────

    async def save_objects(self, index_name: str, records: Sequence[dict[str, Any]]) -> BatchResponse:
        """Create or replace records, one batch request per ``batch_size`` records."""
        return await self._batch(index_name, [{"action": "updateObject", "body": r} for r in records])

    async def delete_objects(self, index_name: str, object_ids: Sequence[str]) -> BatchResponse:
        return await self._batch(
            index_name,
            [{"action": "deleteObject", "body": {"objectID": object_id}} for object_id in object_ids],
        )

    async def _batch(self, index_name: str, requests: list[dict[str, Any]]) -> BatchResponse:
        responses: list[BatchAck] = []
        path = f"/1/indexes/{_encode(index_name)}/batch"
        for start in range(0, len(requests), self._batch_size):
            chunk = requests[start : start + self._batch_size]
            data = await self._request("POST", path, json={"requests": chunk})
            responses.append(BatchAck.model_validate(data))
            logger.debug("Batch of %d operations sent to %s (task %s)", len(chunk), index_name, data.get("taskID"))
        return BatchResponse(responses=responses)

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, index_name: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", f"/1/indexes/{_encode(index_name)}/query", json=params)

    # ── Helpers ──────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self._client:
            raise ConnectionError("Algolia client not initialized.")

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ConnectionError(f"Failed to reach Algolia at {self._base_url}: {e}") from e

        if resp.is_error:
            raise AlgoliaApiError(
                f"Algolia {method} {path} failed with HTTP {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise AlgoliaApiError(
                f"Algolia {method} {path} returned a non-JSON body: {resp.text[:200]}",
                status_code=resp.status_code,
            ) from e


def _encode(index_name: str) -> str:
    return quote(index_name, safe="")


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.text
