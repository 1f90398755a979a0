"""Template pack models.

Contains the pydantic models describing a pack:
- AgentTemplatePack and its metadata
- One spec model per deployable entity type
- EntityType, the fixed enumeration of those types and their references
"""

from agentpack.packs.models.entity_type import (
    APPLY_ORDER,
    CLEAR_ORDER,
    ENTITY_SHAPES,
    EntityShape,
    EntityType,
    id_column,
)
from agentpack.packs.models.enums import (
    AccessMode,
    BehaviorSource,
    Channel,
    RuleType,
    Severity,
    StateMachineMode,
    TriggerType,
)
from agentpack.packs.models.pack import (
    AgentTemplatePack,
    PackMetadata,
    PackSummary,
    summarize_pack,
)
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

__all__ = [
    # Entity types
    "APPLY_ORDER",
    "CLEAR_ORDER",
    "ENTITY_SHAPES",
    "EntityShape",
    "EntityType",
    "id_column",
    # Enums
    "AccessMode",
    "BehaviorSource",
    "Channel",
    "RuleType",
    "Severity",
    "StateMachineMode",
    "TriggerType",
    # Pack
    "AgentTemplatePack",
    "PackMetadata",
    "PackSummary",
    "summarize_pack",
    # Specs
    "PackSpec",
    "PackAgent",
    "PackPlaybook",
    "PackPlaybookRule",
    "PackPlaybookTable",
    "PackAgentState",
    "PackAgentStateStep",
    "PackChannelBinding",
    "PackHandoffPolicy",
    "PackAutomation",
]
