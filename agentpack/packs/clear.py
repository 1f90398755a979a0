"""Clear engine: soft-delete a tenant's pack data in reverse dependency order.

Every table except one is cleared by listing its rows for the tenant and
stamping `deleted_at` on each row. Agent states carry no tenant column, so
they are reached through the tenant's agents instead. Teardown is
best-effort: a row that fails to delete is logged and left uncounted.
"""

from uuid import UUID

import structlog

from agentpack.observability.logging import get_logger
from agentpack.observability.metrics import PACK_ROWS_CLEARED
from agentpack.packs.apply import describe_failure, utc_now_iso
from agentpack.packs.models import CLEAR_ORDER, EntityType, id_column
from agentpack.packs.results import ClearResult, ProgressCallback, StageProgress
from agentpack.stores import CrudFilter, EntityStore

logger = get_logger(__name__)


class ClearEngine:
    """Removes everything a pack apply can create for a tenant."""

    def __init__(self, store: EntityStore, *, record_metrics: bool = True) -> None:
        self._store = store
        self._record_metrics = record_metrics

    async def clear(
        self,
        tenant_id: str | UUID,
        on_progress: ProgressCallback | None = None,
    ) -> ClearResult:
        """Soft-delete all pack entities of a tenant.

        Tables are processed in `CLEAR_ORDER`; `on_progress` is called once
        per table before it is cleared. A failure to list a table is recorded
        and the next table is still processed.

        Returns:
            ClearResult with per-table deleted counts
        """
        tenant = str(tenant_id)
        counts: dict[str, int] = {}
        errors: list[str] = []
        progress = StageProgress(len(CLEAR_ORDER), on_progress)

        with structlog.contextvars.bound_contextvars(tenant_id=tenant):
            logger.info("tenant_clear_started")
            try:
                for entity_type in CLEAR_ORDER:
                    progress.advance(f"Clearing {entity_type.table}...")
                    try:
                        counts[entity_type.table] = await self._clear_table(entity_type, tenant)
                    except Exception as e:  # noqa: BLE001 - next table still runs
                        errors.append(f"Clear {entity_type.table}: {describe_failure(e)}")
                        logger.error(
                            "tenant_clear_table_failed",
                            entity_type=entity_type.value,
                            error=describe_failure(e),
                        )
            except Exception as e:
                errors.append(f"Fatal: {describe_failure(e)}")
                logger.error("tenant_clear_fatal", error=describe_failure(e))

            logger.info("tenant_clear_completed", counts=counts, error_count=len(errors))

        return ClearResult(success=not errors, tenant_id=tenant, counts=counts, errors=errors)

    async def _clear_table(self, entity_type: EntityType, tenant_id: str) -> int:
        if entity_type.shape.tenant_scoped:
            return await self._soft_delete_where(entity_type, "tenant_id", tenant_id)
        return await self._clear_through_parent(entity_type, tenant_id)

    async def _clear_through_parent(self, entity_type: EntityType, tenant_id: str) -> int:
        """Clear a table that is only scoped by its parent (agent states by agent).

        The parent rows must still be live, which CLEAR_ORDER guarantees
        since parents are cleared after their children.
        """
        ref_field, parent = entity_type.shape.required_refs[0]
        parents = await self._store.list(
            parent.table, [CrudFilter(field="tenant_id", value=tenant_id)]
        )
        deleted = 0
        for parent_row in parents:
            deleted += await self._soft_delete_where(
                entity_type, id_column(ref_field), str(parent_row["id"])
            )
        return deleted

    async def _soft_delete_where(self, entity_type: EntityType, field: str, value: str) -> int:
        rows = await self._store.list(entity_type.table, [CrudFilter(field=field, value=value)])
        deleted = 0
        for row in rows:
            try:
                await self._store.update(
                    entity_type.table, {"id": row["id"], "deleted_at": utc_now_iso()}
                )
            except Exception as e:  # noqa: BLE001 - best effort per row
                logger.warning(
                    "row_soft_delete_failed",
                    entity_type=entity_type.value,
                    row_id=str(row.get("id")) if isinstance(row, dict) else repr(row),
                    error=describe_failure(e),
                )
                continue
            deleted += 1

        if self._record_metrics and deleted:
            PACK_ROWS_CLEARED.labels(entity_type=entity_type.value).inc(deleted)
        return deleted


async def clear_tenant(
    tenant_id: str | UUID,
    store: EntityStore,
    on_progress: ProgressCallback | None = None,
) -> ClearResult:
    """Soft-delete a tenant's pack data through `store`. See ClearEngine.clear."""
    return await ClearEngine(store).clear(tenant_id, on_progress)
