"""Tests for AgentPackService."""

import pytest

from agentpack.packs.exceptions import InvalidPackError, PackNotFoundError
from agentpack.packs.models import PackAgent, PackPlaybook
from agentpack.packs.registry import PackRegistry
from agentpack.packs.service import AgentPackService
from agentpack.stores import InMemoryEntityStore
from tests.factories import FlakyEntityStore, PackFactory


@pytest.fixture
def registry() -> PackRegistry:
    registry = PackRegistry()
    registry.register(PackFactory.full())
    return registry


@pytest.fixture
def service(store: InMemoryEntityStore, registry: PackRegistry) -> AgentPackService:
    return AgentPackService(store, registry, record_metrics=False)


class TestAgentPackService:
    """Tests for validate/apply/clear through the service."""

    def test_list_summaries(self, service: AgentPackService) -> None:
        assert [s.key for s in service.list_summaries()] == ["test-pack"]

    def test_get_unknown_pack(self, service: AgentPackService) -> None:
        with pytest.raises(PackNotFoundError):
            service.get_pack("missing")

    def test_validate_by_key(self, service: AgentPackService) -> None:
        assert service.validate("test-pack").valid is True

    @pytest.mark.asyncio
    async def test_apply_by_key(
        self, service: AgentPackService, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        result = await service.apply("test-pack", tenant_id)
        assert result.success is True
        assert result.counts["agents"] == 1
        assert len(store.rows("automations")) == 1

    @pytest.mark.asyncio
    async def test_invalid_pack_rejected_before_writes(
        self, service: AgentPackService, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        pack = PackFactory.create(
            agents=[PackAgent(ref_key="a1")],
            playbooks=[PackPlaybook(ref_key="p1", agent_ref="missing")],
        )
        with pytest.raises(InvalidPackError) as exc_info:
            await service.apply(pack, tenant_id)

        assert exc_info.value.errors == ['Playbook p1 -> agent_ref "missing" not found']
        assert store.rows("agents") == []

    @pytest.mark.asyncio
    async def test_apply_clear_first_replaces_data(
        self, service: AgentPackService, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        await service.apply("test-pack", tenant_id)
        result = await service.apply("test-pack", tenant_id, clear_first=True)

        assert result.success is True
        assert len(store.rows("agents")) == 2
        assert len(store.rows("agents", include_deleted=False)) == 1

    @pytest.mark.asyncio
    async def test_clear_first_errors_prepended(
        self, registry: PackRegistry, tenant_id: str
    ) -> None:
        store = FlakyEntityStore(fail_list={"automations"})
        service = AgentPackService(store, registry, record_metrics=False)

        result = await service.apply("test-pack", tenant_id, clear_first=True)

        assert result.success is False
        assert result.errors == ["Clear automations: HTTP 500 - listing unavailable"]
        assert result.counts["agents"] == 1

    @pytest.mark.asyncio
    async def test_clear(
        self, service: AgentPackService, store: InMemoryEntityStore, tenant_id: str
    ) -> None:
        await service.apply("test-pack", tenant_id)
        result = await service.clear(tenant_id)
        assert result.success is True
        assert store.rows("agents", include_deleted=False) == []

    @pytest.mark.asyncio
    async def test_report_unresolved_refs_passed_through(
        self, registry: PackRegistry, tenant_id: str
    ) -> None:
        store = FlakyEntityStore(fail_create=lambda table, fields: table == "agent_playbooks")
        service = AgentPackService(
            store, registry, report_unresolved_refs=True, record_metrics=False
        )
        result = await service.apply("test-pack", tenant_id)

        assert 'Rule "Greet": playbook_ref "p1" not resolved' in result.errors
        assert 'Table "customers": playbook_ref "p1" not resolved' in result.errors
