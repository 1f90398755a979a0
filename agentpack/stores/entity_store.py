"""EntityStore abstract interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

Record = dict[str, Any]


class StoreError(Exception):
    """A store call failed (network, validation or missing row)."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def describe(self) -> str:
        """Human-readable failure detail, prefixed with the HTTP status if any."""
        if self.status_code is not None:
            return f"HTTP {self.status_code} - {self.message}"
        return self.message


class CrudFilter(BaseModel):
    """Equality (or operator) filter on a single column."""

    model_config = ConfigDict(frozen=True)

    field: str
    value: Any
    operator: str | None = None


class EntityStore(ABC):
    """Generic tenant-partitioned row store.

    Rows are plain dicts with a store-assigned `id`. Deletion is soft:
    a row whose `deleted_at` is set no longer shows up in `list`.
    """

    @abstractmethod
    async def create(self, table: str, fields: Record) -> Record:
        """Insert a row and return it, including its assigned `id`."""
        pass

    @abstractmethod
    async def list(self, table: str, filters: list[CrudFilter]) -> list[Record]:
        """Return live rows matching every filter."""
        pass

    @abstractmethod
    async def update(self, table: str, fields: Record) -> Record:
        """Update the row identified by `fields["id"]` and return it."""
        pass

