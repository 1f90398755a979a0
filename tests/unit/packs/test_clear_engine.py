"""Tests for the clear engine."""

import pytest

from agentpack.packs.apply import apply_pack
from agentpack.packs.clear import ClearEngine, clear_tenant
from agentpack.packs.models import CLEAR_ORDER, EntityType
from agentpack.stores import InMemoryEntityStore
from tests.factories import FlakyEntityStore, PackFactory


class TestClearTenant:
    """Tests for clear_tenant."""

    @pytest.mark.asyncio
    async def test_clears_states_through_agents(
        self, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        """States have no tenant column and are found through their agents."""
        await apply_pack(PackFactory.agents_with_states(3, 2), tenant_id, store)

        result = await clear_tenant(tenant_id, store)

        assert result.success is True
        assert result.counts["agent_states"] == 6
        assert result.counts["agents"] == 3
        assert set(result.counts) == {t.table for t in EntityType}
        assert all(row["deleted_at"] for row in store.rows("agent_states"))

    @pytest.mark.asyncio
    async def test_second_clear_is_empty(
        self, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        await apply_pack(PackFactory.full(), tenant_id, store)
        await clear_tenant(tenant_id, store)

        result = await clear_tenant(tenant_id, store)

        assert result.success is True
        assert result.counts == {t.table: 0 for t in EntityType}

    @pytest.mark.asyncio
    async def test_other_tenants_untouched(self, store: InMemoryEntityStore) -> None:
        await apply_pack(PackFactory.full(), "tenant-a", store)
        await apply_pack(PackFactory.full(), "tenant-b", store)

        await clear_tenant("tenant-a", store)

        live_agents = store.rows("agents", include_deleted=False)
        assert [row["tenant_id"] for row in live_agents] == ["tenant-b"]
        assert len(store.rows("agent_states", include_deleted=False)) == 1

    @pytest.mark.asyncio
    async def test_rows_are_soft_deleted(self, store: InMemoryEntityStore, tenant_id: str) -> None:
        await apply_pack(PackFactory.minimal(), tenant_id, store)
        await clear_tenant(tenant_id, store)

        rows = store.rows("agents")
        assert len(rows) == 1
        assert rows[0]["deleted_at"]

    @pytest.mark.asyncio
    async def test_progress_labels(self, store: InMemoryEntityStore, tenant_id: str) -> None:
        calls: list[tuple[str, float]] = []
        await clear_tenant(tenant_id, store, lambda label, f: calls.append((label, f)))

        assert [label for label, _ in calls] == [
            f"Clearing {t.table}..." for t in CLEAR_ORDER
        ]
        assert calls[-1][1] == 1.0

    @pytest.mark.asyncio
    async def test_list_failure_recorded_and_continues(self, tenant_id: str) -> None:
        store = FlakyEntityStore(fail_list={"automations"})
        await apply_pack(PackFactory.full(), tenant_id, store)

        result = await ClearEngine(store, record_metrics=False).clear(tenant_id)

        assert result.success is False
        assert result.errors == ["Clear automations: HTTP 500 - listing unavailable"]
        assert "automations" not in result.counts
        assert result.counts["agents"] == 1

    @pytest.mark.asyncio
    async def test_row_failure_not_counted(self, tenant_id: str) -> None:
        store = FlakyEntityStore(fail_update=lambda table, fields: table == "agent_playbooks")
        await apply_pack(PackFactory.minimal(), tenant_id, store)

        result = await clear_tenant(tenant_id, store)

        assert result.success is True
        assert result.counts["agent_playbooks"] == 0
        assert result.counts["agents"] == 1

    @pytest.mark.asyncio
    async def test_fatal_error_stops_clear(
        self, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        def on_progress(label: str, fraction: float) -> None:
            if label == "Clearing agent_states...":
                raise RuntimeError("cancelled")

        await apply_pack(PackFactory.full(), tenant_id, store)
        result = await clear_tenant(tenant_id, store, on_progress)

        assert result.success is False
        assert result.errors == ["Fatal: cancelled"]
        assert "agents" not in result.counts
        assert result.counts["automations"] == 1

    @pytest.mark.asyncio
    async def test_malformed_row_fails_alone(self, tenant_id: str) -> None:
        """A listed row that is not a record is skipped; its siblings are still cleared."""

        class MalformedRowStore(InMemoryEntityStore):
            async def list(self, table, filters, *, include_deleted=False):
                rows = await super().list(table, filters, include_deleted=include_deleted)
                if table == "agents":
                    return ["not-a-record", *rows]
                return rows

        store = MalformedRowStore()
        await apply_pack(PackFactory.minimal(), tenant_id, store)

        result = await clear_tenant(tenant_id, store)

        assert result.success is True
        assert result.errors == []
        assert result.counts["agents"] == 1
        assert result.counts["agent_playbooks"] == 1
