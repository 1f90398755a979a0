"""EntityStore backed by a remote generic CRUD endpoint.

Every operation is a POST to one endpoint whose body names the action
and table:

    {"action": "create", "table": "agents", "payload": {...}}
    {"action": "list", "table": "agents", "search_field1": "tenant_id", ...}
    {"action": "update", "table": "agents", "payload": {"id": ..., ...}}

Usage:
    async with HttpEntityStore("https://crud.example.com", token="...") as store:
        row = await store.create("agents", {"tenant_id": tenant_id, ...})
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from agentpack.observability.logging import get_logger
from agentpack.stores.entity_store import CrudFilter, EntityStore, Record, StoreError

logger = get_logger(__name__)

MAX_FILTERS = 8
MAX_ERROR_DETAIL = 300


def build_search_params(
    filters: list[CrudFilter],
    *,
    auto_exclude_deleted: bool = False,
) -> dict[str, Any]:
    """Flatten filters into numbered search_field/search_value params.

    The endpoint accepts at most eight filters; extra ones are dropped.
    Values are always sent as strings.
    """
    if len(filters) > MAX_FILTERS:
        logger.warning("crud_filters_truncated", requested=len(filters), limit=MAX_FILTERS)

    params: dict[str, Any] = {}
    for n, crud_filter in enumerate(filters[:MAX_FILTERS], start=1):
        params[f"search_field{n}"] = crud_filter.field
        params[f"search_value{n}"] = str(crud_filter.value)
        if crud_filter.operator:
            params[f"search_operator{n}"] = crud_filter.operator

    if auto_exclude_deleted:
        params["auto_exclude_deleted"] = True

    return params


def normalize_list(data: Any) -> list[Record]:
    """Extract rows from a list response (bare, or under data/value/items)."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "value", "items"):
            if key in data:
                rows = data[key]
                return rows if isinstance(rows, list) else []
    return []


def normalize_one(data: Any) -> Record:
    """Extract a single row from a create/update response."""
    if isinstance(data, list):
        if not data:
            raise StoreError("Empty response from CRUD endpoint")
        return data[0]
    if isinstance(data, dict):
        for key in ("data", "value"):
            inner = data.get(key)
            if isinstance(inner, dict):
                return inner
            if isinstance(inner, list) and inner:
                return inner[0]
        return data
    raise StoreError(f"Unexpected response from CRUD endpoint: {data!r}"[:MAX_ERROR_DETAIL])


class HttpEntityStore(EntityStore):
    """Async EntityStore client for the generic CRUD endpoint.

    Attributes:
        base_url: Base URL of the CRUD service
        crud_path: Path of the CRUD endpoint
    """

    def __init__(
        self,
        base_url: str,
        *,
        crud_path: str = "/api_crud",
        token: str | None = None,
        timeout: float = 30.0,
        auto_exclude_deleted: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the store client.

        Args:
            base_url: Base URL of the CRUD service
            crud_path: Path of the CRUD endpoint
            token: Bearer token sent with every request
            timeout: Request timeout in seconds
            auto_exclude_deleted: Ask the server to hide soft-deleted rows
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.crud_path = crud_path
        self._token = token
        self._auto_exclude_deleted = auto_exclude_deleted
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> HttpEntityStore:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _post(self, body: dict[str, Any]) -> Any:
        try:
            response = await self._client.post(
                self.crud_path,
                headers=self._headers(),
                json=body,
            )
        except httpx.HTTPError as e:
            raise StoreError(f"{type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            try:
                details = response.json()
                message = json.dumps(details)
            except ValueError:
                details = None
                message = response.text
            raise StoreError(
                message=message[:MAX_ERROR_DETAIL] or response.reason_phrase,
                status_code=response.status_code,
                details=details,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise StoreError("CRUD endpoint returned invalid JSON", response.status_code) from e

    async def create(self, table: str, fields: Record) -> Record:
        data = await self._post({"action": "create", "table": table, "payload": fields})
        return normalize_one(data)

    async def list(self, table: str, filters: list[CrudFilter]) -> list[Record]:
        body = {
            "action": "list",
            "table": table,
            **build_search_params(filters, auto_exclude_deleted=self._auto_exclude_deleted),
        }
        return normalize_list(await self._post(body))

    async def update(self, table: str, fields: Record) -> Record:
        data = await self._post({"action": "update", "table": table, "payload": fields})
        if data is None:
            return dict(fields)
        return normalize_one(data)
