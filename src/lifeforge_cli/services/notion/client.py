"""Notion REST API client.

Defines a Protocol for testability and a concrete implementation backed by
httpx. Only the handful of endpoints the task proxy needs are wrapped.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx

_BASE_URL = "https://api.notion.com/v1"
_NOTION_VERSION = "2022-06-28"
_DEFAULT_TIMEOUT = 30.0


class NotionAPIError(Exception):
    """A failed Notion request, carrying the upstream status and error body."""

    def __init__(
        self,
        status: int,
        message: str,
        code: str | None = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "body": self.body,
        }


@runtime_checkable
class NotionClientProtocol(Protocol):
    """Abstract interface for the Notion endpoints used by the proxy."""

    async def query_database(
        self,
        database_id: str,
        *,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int = 100,
    ) -> dict[str, Any]:
        """Return one page of database query results."""
        ...

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        """Return the database object (title, property schema)."""
        ...

    async def users_me(self) -> dict[str, Any]:
        """Return the bot user behind the token."""
        ...

    async def search_databases(self, query: str, *, page_size: int = 25) -> dict[str, Any]:
        """Search databases shared with the integration."""
        ...

    async def aclose(self) -> None:
        ...


class NotionClient:
    """Concrete Notion API client using httpx.

    Args:
        token: Notion integration token.
        base_url: Override API base URL (useful for testing).
        notion_version: Value of the ``Notion-Version`` header.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = _BASE_URL,
        notion_version: str = _NOTION_VERSION,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": notion_version,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def query_database(
        self,
        database_id: str,
        *,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int = 100,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"page_size": page_size}
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        return await self._request("POST", f"/databases/{database_id}/query", json=body)

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/databases/{database_id}")

    async def users_me(self) -> dict[str, Any]:
        return await self._request("GET", "/users/me")

    async def search_databases(self, query: str, *, page_size: int = 25) -> dict[str, Any]:
        body = {
            "query": query,
            "filter": {"property": "object", "value": "database"},
            "page_size": page_size,
        }
        return await self._request("POST", "/search", json=body)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a request, raising NotionAPIError on any failure."""
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            raise NotionAPIError(504, f"Notion request timed out: {e}", code="timeout") from e
        except httpx.RequestError as e:
            raise NotionAPIError(502, f"Notion unreachable: {e}", code="request_error") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            code = body.get("code") if isinstance(body, dict) else None
            message = (
                body.get("message") if isinstance(body, dict) else None
            ) or f"HTTP {response.status_code} from Notion"
            raise NotionAPIError(response.status_code, message, code=code, body=body)

        return response.json()
