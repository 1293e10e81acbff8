"""HTTP client for the LifeForge task proxy."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from lifeforge_cli.models.task import NextTask
from lifeforge_cli.services.config_service import get_config_service

logger = logging.getLogger(__name__)


class ProxyClient:
    """HTTP client for the task proxy (``GET /tasks/next``)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if base_url is None or timeout is None:
            proxy_config = get_config_service().config.proxy
            base_url = base_url or proxy_config.endpoint
            timeout = timeout or proxy_config.timeout
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(
        self, path: str, *, params: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        """Make a GET request, raising on HTTP error status."""
        client = await self._get_client()
        url = path if path.startswith("/") else f"/{path}"
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response

    async def get_next_task(self) -> NextTask | None:
        """
        Fetch the next task candidate.

        Accepts both ``{"next": {...} | null}`` and a bare candidate object.

        Raises:
            httpx.HTTPError: On transport failure or an error status
            ValueError: If the body is not a usable candidate
        """
        response = await self.get("/tasks/next")
        data = response.json()

        candidate = data.get("next", data) if isinstance(data, dict) else data
        if not candidate:
            return None
        if not isinstance(candidate, dict):
            raise ValueError(f"Unexpected /tasks/next payload: {data!r}")

        try:
            return NextTask.model_validate(candidate)
        except ValidationError as e:
            raise ValueError(f"Invalid task candidate: {e}") from e

    async def fetch_next_task_or_none(self) -> NextTask | None:
        """Like get_next_task, but any failure means "no task available"."""
        try:
            return await self.get_next_task()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch next task: %s", e)
            return None

    async def health(self) -> dict[str, Any]:
        """Return the proxy's ``/health`` payload."""
        response = await self.get("/health")
        return response.json()


def get_client() -> ProxyClient:
    """Get a proxy client configured from the active config."""
    return ProxyClient()
