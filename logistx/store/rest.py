"""Hosted-store REST client (PostgREST dialect) on httpx.AsyncClient.

Change events for this backend arrive through the webhook receiver, which publishes them to
`RestStore.feed`; writes made here are not echoed locally.
"""

import asyncio
from decimal import Decimal
from typing import Any

import httpx
from pydantic_core import to_jsonable_python

from logistx.store.errors import StoreError, StoreUnavailableError
from logistx.store.feed import ChangeFeed, ChangeHandler, Subscription
from logistx.store.schema import Embed, check_table, render_select
from logistx.utils.logger import get_logger

logger = get_logger("logistx.store.rest")

Row = dict[str, Any]


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"is.{str(value).lower()}"
    return f"eq.{to_jsonable_python(value)}"


def _filter_params(filters: dict[str, Any] | None) -> dict[str, str]:
    return {k: _filter_value(v) for k, v in (filters or {}).items()}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body.get("hint") or body)
    return str(body)


def _parse_count(content_range: str | None) -> int:
    # "0-24/3573" or "*/0"
    if not content_range or "/" not in content_range:
        raise StoreError(f"Missing or malformed Content-Range: {content_range!r}")
    total = content_range.rsplit("/", 1)[1]
    if total == "*":
        raise StoreError("Server did not return an exact count")
    return int(total)


class RestStore:
    """RemoteStore over the hosted database's REST API (`/rest/v1/<table>`)."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        feed: ChangeFeed | None = None,
        client: httpx.AsyncClient | None = None,
        retries: int = 1,
    ):
        if not base_url:
            raise ValueError("REMOTE_STORE_URL is required for the rest backend")
        self.feed = feed or ChangeFeed()
        self.retries = retries
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self._client = client or httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers=headers,
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )
        if client is not None:
            self._client.headers.update(headers)

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        attempts = 1 + (self.retries if method in ("GET", "HEAD") else 0)
        for attempt in range(attempts):
            try:
                response = await self._client.request(
                    method, f"/{table}", params=params, json=json, headers=headers
                )
            except httpx.TransportError as e:
                if attempt < attempts - 1:
                    logger.debug(
                        "rest_store.retry",
                        table=table,
                        method=method,
                        attempt=attempt + 1,
                        error_type=type(e).__name__,
                    )
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue
                logger.warning("rest_store.unavailable", table=table, method=method, error=str(e))
                raise StoreUnavailableError(str(e) or type(e).__name__, table=table) from e
            if response.is_error:
                message = _error_message(response)
                logger.warning(
                    "rest_store.request_failed",
                    table=table,
                    method=method,
                    status_code=response.status_code,
                    error=message,
                )
                raise StoreError(message, status_code=response.status_code, table=table)
            return response
        raise StoreUnavailableError("request not attempted", table=table)

    @staticmethod
    def _rows(response: httpx.Response) -> list[Row]:
        if not response.content:
            return []
        return response.json(parse_float=Decimal)

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        embed: tuple[Embed, ...] = (),
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        check_table(table)
        params = {"select": render_select(embed), **_filter_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}.nullslast"
        if limit is not None:
            params["limit"] = str(limit)
        return self._rows(await self._request("GET", table, params=params))

    async def count(self, table: str, *, filters: dict[str, Any] | None = None) -> int:
        check_table(table)
        params = {"select": "id", **_filter_params(filters)}
        response = await self._request("HEAD", table, params=params, prefer="count=exact")
        return _parse_count(response.headers.get("content-range"))

    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        check_table(table)
        batch = [rows] if isinstance(rows, dict) else list(rows)
        response = await self._request(
            "POST", table, json=to_jsonable_python(batch), prefer="return=representation"
        )
        return self._rows(response)

    async def update(self, table: str, values: Row, *, filters: dict[str, Any]) -> list[Row]:
        check_table(table)
        response = await self._request(
            "PATCH",
            table,
            params=_filter_params(filters),
            json=to_jsonable_python(values),
            prefer="return=representation",
        )
        return self._rows(response)

    async def delete(self, table: str, *, filters: dict[str, Any]) -> list[Row]:
        check_table(table)
        response = await self._request(
            "DELETE", table, params=_filter_params(filters), prefer="return=representation"
        )
        return self._rows(response)

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        check_table(table)
        return self.feed.subscribe(table, handler)

    async def aclose(self) -> None:
        await self._client.aclose()
