"""Template pack: the deployment unit."""

from pydantic import BaseModel, ConfigDict, Field

from agentpack.packs.models.entity_type import EntityType
from agentpack.packs.models.specs import (
    PackAgent,
    PackAgentState,
    PackAgentStateStep,
    PackAutomation,
    PackChannelBinding,
    PackHandoffPolicy,
    PackPlaybook,
    PackPlaybookRule,
    PackPlaybookTable,
    PackSpec,
)


class PackMetadata(BaseModel):
    """Identity and presentation of a pack."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(default="", description="Unique pack identifier, e.g. 'generic'")
    name: str = Field(default="", description="Display name")
    description: str = ""
    icon: str = ""
    color: str = ""
    version: str = "1.0.0"


class AgentTemplatePack(BaseModel):
    """A portable bundle of agent configuration for one business vertical.

    Entities cross-reference each other by `ref_key`, so the same pack can be
    applied to any tenant; store ids are assigned at apply time.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    metadata: PackMetadata = Field(default_factory=PackMetadata)

    agents: tuple[PackAgent, ...] = ()
    playbooks: tuple[PackPlaybook, ...] = ()
    playbook_rules: tuple[PackPlaybookRule, ...] = ()
    playbook_tables: tuple[PackPlaybookTable, ...] = ()
    agent_states: tuple[PackAgentState, ...] = ()
    agent_state_steps: tuple[PackAgentStateStep, ...] = ()
    channel_bindings: tuple[PackChannelBinding, ...] = ()
    handoff_policies: tuple[PackHandoffPolicy, ...] = ()
    automations: tuple[PackAutomation, ...] = ()

    @property
    def key(self) -> str:
        return self.metadata.key

    def specs(self, entity_type: EntityType) -> tuple[PackSpec, ...]:
        """All specs of one entity type, in declaration order."""
        return getattr(self, entity_type.shape.pack_field)


class PackSummary(BaseModel):
    """Lightweight description of a pack for listings."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str
    icon: str
    color: str
    version: str
    agent_count: int
    playbook_count: int
    state_count: int
    rule_count: int
    automation_count: int


def summarize_pack(pack: AgentTemplatePack) -> PackSummary:
    """Extract a listing summary from a full pack."""
    meta = pack.metadata
    return PackSummary(
        key=meta.key,
        name=meta.name,
        description=meta.description,
        icon=meta.icon,
        color=meta.color,
        version=meta.version,
        agent_count=len(pack.agents),
        playbook_count=len(pack.playbooks),
        state_count=len(pack.agent_states),
        rule_count=len(pack.playbook_rules),
        automation_count=len(pack.automations),
    )
