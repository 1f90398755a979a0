"""In-memory implementation of EntityStore."""

from __future__ import annotations

from copy import deepcopy
from uuid import uuid4

from agentpack.stores.entity_store import CrudFilter, EntityStore, Record, StoreError


class InMemoryEntityStore(EntityStore):
    """In-memory implementation of EntityStore for testing and development.

    Uses dict storage per table with linear scans. Filter values are
    compared as strings, the way the remote CRUD service compares them.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Record]] = {}

    async def create(self, table: str, fields: Record) -> Record:
        row = deepcopy(fields)
        row_id = str(row.get("id") or uuid4())
        row["id"] = row_id
        self._tables.setdefault(table, {})[row_id] = row
        return deepcopy(row)

    async def list(
        self,
        table: str,
        filters: list[CrudFilter],
        *,
        include_deleted: bool = False,
    ) -> list[Record]:
        results = []
        for row in self._tables.get(table, {}).values():
            if not include_deleted and row.get("deleted_at"):
                continue
            if all(self._matches(row, f) for f in filters):
                results.append(deepcopy(row))
        return results

    async def update(self, table: str, fields: Record) -> Record:
        row_id = fields.get("id")
        row = self._tables.get(table, {}).get(str(row_id))
        if row is None:
            raise StoreError(f"{table} row {row_id} not found", status_code=404)
        row.update(deepcopy(fields))
        row["id"] = str(row_id)
        return deepcopy(row)

    def rows(self, table: str, *, include_deleted: bool = True) -> list[Record]:
        """Snapshot of a table for inspection."""
        return [
            deepcopy(row)
            for row in self._tables.get(table, {}).values()
            if include_deleted or not row.get("deleted_at")
        ]

    @staticmethod
    def _matches(row: Record, crud_filter: CrudFilter) -> bool:
        if crud_filter.operator not in (None, "equal"):
            raise StoreError(f"Unsupported filter operator: {crud_filter.operator}", status_code=400)
        if crud_filter.field not in row:
            return False
        return str(row[crud_filter.field]) == str(crud_filter.value)
