"""Entity specs: one declared instance of each deployable entity type.

Specs reference each other through `*_ref` fields holding the `ref_key`
of another spec in the same pack. Store identifiers only exist once the
pack is applied.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agentpack.packs.models.enums import (
    AccessMode,
    BehaviorSource,
    Channel,
    RuleType,
    Severity,
    StateMachineMode,
    TriggerType,
)


class PackSpec(BaseModel):
    """Base for all entity specs.

    Specs are read-only input; the pack owns them for its whole lifetime.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def display_key(self) -> str:
        """Short identifier used when reporting problems with this spec."""
        raise NotImplementedError


class PackAgent(PackSpec):
    """Top-level AI agent."""

    ref_key: str = Field(..., min_length=1, description="Pack-local key other specs refer to")
    system_prompt: str = Field(default="", description="Core identity of the agent")
    model: str = Field(default="gpt-4o-mini", description="LLM model identifier")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, gt=0)
    is_default: bool = Field(default=False, description="Default agent for the tenant")
    is_active: bool = True
    version: int = Field(default=1, ge=1)

    @property
    def display_key(self) -> str:
        return self.ref_key


class PackPlaybook(PackSpec):
    """Channel-specific behaviour of an agent."""

    ref_key: str = Field(..., min_length=1)
    agent_ref: str = Field(..., min_length=1)
    channel: Channel = Channel.WHATSAPP
    name: str = ""
    description: str | None = None
    behavior_source: BehaviorSource = BehaviorSource.PLAYBOOK
    inherit_system_prompt: bool = True
    state_machine_mode: StateMachineMode = StateMachineMode.GUIDED
    webhook_url: str | None = None
    operator_webhook_url: str | None = None
    config_ui: dict[str, Any] | None = None
    is_active: bool = True

    @property
    def display_key(self) -> str:
        return self.ref_key


class PackPlaybookRule(PackSpec):
    """Behavioural rule attached to a playbook."""

    playbook_ref: str = Field(..., min_length=1)
    rule_order: int = 0
    rule_type: RuleType = RuleType.POLICY
    title: str = ""
    instruction: str = ""
    severity: Severity = Severity.NORMAL
    is_active: bool = True
    metadata: dict[str, Any] | None = None

    @property
    def display_key(self) -> str:
        return self.title


class PackPlaybookTable(PackSpec):
    """Business table a playbook is allowed to query."""

    playbook_ref: str = Field(..., min_length=1)
    table_name: str
    access_mode: AccessMode = AccessMode.READ
    is_required: bool = False
    purpose: str | None = None
    query_guardrails: dict[str, Any] | None = None
    is_active: bool = True

    @property
    def display_key(self) -> str:
        return self.table_name


class PackAgentState(PackSpec):
    """Conversational state of an agent's state machine."""

    ref_key: str = Field(..., min_length=1)
    agent_ref: str = Field(..., min_length=1)
    state_key: str = ""
    state_label: str = ""
    system_prompt: str = ""
    rules: dict[str, Any] | None = None
    tools: dict[str, Any] | None = None
    is_initial: bool = False
    is_terminal: bool = False

    @property
    def display_key(self) -> str:
        return self.state_key or self.ref_key


class PackAgentStateStep(PackSpec):
    """Ordered step inside an agent state."""

    state_ref: str = Field(..., min_length=1)
    agent_ref: str = Field(..., min_length=1)
    step_key: str = ""
    step_label: str = ""
    step_order: int = 0
    instruction: str = ""
    expected_inputs: Any = None
    expected_outputs: Any = None
    allowed_tables: Any = None
    on_success_action: str | None = None
    on_failure_action: str | None = None
    handoff_to_operator: bool = False
    return_to_bot_allowed: bool = True
    is_active: bool = True

    @property
    def display_key(self) -> str:
        return self.step_key


class PackChannelBinding(PackSpec):
    """Binds an agent to an inbound channel."""

    agent_ref: str = Field(..., min_length=1)
    channel: Channel = Channel.WHATSAPP
    webhook_url: str | None = None
    is_active: bool = True
    config: dict[str, Any] | None = None

    @property
    def display_key(self) -> str:
        return self.channel.value


class PackHandoffPolicy(PackSpec):
    """When and how a conversation moves between bot and operator."""

    agent_ref: str = Field(..., min_length=1)
    playbook_ref: str | None = None
    from_channel: str = ""
    to_channel: str = ""
    trigger_type: TriggerType = TriggerType.USER_REQUEST
    trigger_config: dict[str, Any] | None = None
    pause_bot_while_operator: bool = True
    operator_can_return_to_bot: bool = True
    return_to_state_key: str | None = None
    is_active: bool = True

    @property
    def display_key(self) -> str:
        return f"{self.from_channel}->{self.to_channel}"


class PackAutomation(PackSpec):
    """Trigger/action automation owned by an agent."""

    agent_ref: str = Field(..., min_length=1)
    trigger: str = ""
    action: str = ""
    config: dict[str, Any] | None = None

    @property
    def display_key(self) -> str:
        return self.trigger
