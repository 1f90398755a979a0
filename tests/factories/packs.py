"""Test factories for template packs and failing stores."""

from typing import Any

from agentpack.packs.models import (
    AgentTemplatePack,
    PackAgent,
    PackAgentState,
    PackAgentStateStep,
    PackAutomation,
    PackMetadata,
    PackPlaybook,
)
from agentpack.stores import InMemoryEntityStore, Record, StoreError


class PackFactory:
    """Factory for creating AgentTemplatePack instances for testing."""

    @staticmethod
    def create(
        *,
        key: str = "test-pack",
        name: str = "Test Pack",
        **collections: Any,
    ) -> AgentTemplatePack:
        """Create a pack from keyword collections.

        Collections may hold spec instances or plain dicts, e.g.
        `PackFactory.create(agents=[{"ref_key": "a1"}])`.
        """
        return AgentTemplatePack.model_validate({
            "metadata": PackMetadata(key=key, name=name),
            **collections,
        })

    @staticmethod
    def minimal(*, agent_ref: str = "a1", playbook_ref: str = "p1") -> AgentTemplatePack:
        """One agent with one playbook."""
        return PackFactory.create(
            agents=[PackAgent(ref_key=agent_ref)],
            playbooks=[PackPlaybook(ref_key=playbook_ref, agent_ref=agent_ref, name="Main")],
        )

    @staticmethod
    def agents_with_states(agent_count: int, states_per_agent: int) -> AgentTemplatePack:
        """Agents each owning the given number of states."""
        agents = [PackAgent(ref_key=f"a{n}") for n in range(agent_count)]
        states = [
            PackAgentState(ref_key=f"a{n}-s{m}", agent_ref=f"a{n}", state_key=f"s{m}")
            for n in range(agent_count)
            for m in range(states_per_agent)
        ]
        return PackFactory.create(agents=agents, agent_states=states)

    @staticmethod
    def full() -> AgentTemplatePack:
        """One spec of every entity type, all references resolvable."""
        return PackFactory.create(
            agents=[PackAgent(ref_key="a1", system_prompt="You help.")],
            playbooks=[PackPlaybook(ref_key="p1", agent_ref="a1", name="WhatsApp")],
            playbook_rules=[{"playbook_ref": "p1", "title": "Greet", "rule_order": 1}],
            playbook_tables=[{"playbook_ref": "p1", "table_name": "customers"}],
            agent_states=[PackAgentState(ref_key="s1", agent_ref="a1", state_key="start")],
            agent_state_steps=[
                PackAgentStateStep(state_ref="s1", agent_ref="a1", step_key="hello"),
            ],
            channel_bindings=[{"agent_ref": "a1", "channel": "whatsapp"}],
            handoff_policies=[
                {
                    "agent_ref": "a1",
                    "playbook_ref": "p1",
                    "from_channel": "whatsapp",
                    "to_channel": "app_operador",
                },
            ],
            automations=[PackAutomation(agent_ref="a1", trigger="new_message")],
        )


class FlakyEntityStore(InMemoryEntityStore):
    """In-memory store that fails selected calls.

    Args:
        fail_create: Predicate on (table, fields); matching creates raise
        fail_update: Predicate on (table, fields); matching updates raise
        fail_list: Tables whose list calls raise
        status_code: Status attached to the raised StoreError
    """

    def __init__(
        self,
        *,
        fail_create: Any = None,
        fail_update: Any = None,
        fail_list: set[str] | None = None,
        status_code: int = 500,
    ) -> None:
        super().__init__()
        self._fail_create = fail_create
        self._fail_update = fail_update
        self._fail_list = fail_list or set()
        self._status_code = status_code
        self.create_calls: list[tuple[str, Record]] = []

    async def create(self, table: str, fields: Record) -> Record:
        self.create_calls.append((table, fields))
        if self._fail_create is not None and self._fail_create(table, fields):
            raise StoreError("boom", status_code=self._status_code)
        return await super().create(table, fields)

    async def list(self, table, filters, *, include_deleted=False):
        if table in self._fail_list:
            raise StoreError("listing unavailable", status_code=self._status_code)
        return await super().list(table, filters, include_deleted=include_deleted)

    async def update(self, table: str, fields: Record) -> Record:
        if self._fail_update is not None and self._fail_update(table, fields):
            raise StoreError("update rejected", status_code=self._status_code)
        return await super().update(table, fields)
