"""Enums for pack entity specs."""

from enum import Enum


class Channel(str, Enum):
    """Conversation channel a playbook or binding serves."""

    APP_ATENDIMENTO = "app_atendimento"
    APP_OPERADOR = "app_operador"
    WHATSAPP = "whatsapp"


class BehaviorSource(str, Enum):
    """Where a playbook takes its behaviour from.

    - AGENT_SYSTEM_PROMPT: the owning agent's system prompt only
    - PLAYBOOK: the playbook's own rules and states
    """

    AGENT_SYSTEM_PROMPT = "agent_system_prompt"
    PLAYBOOK = "playbook"


class StateMachineMode(str, Enum):
    """Whether the agent must walk its states in order."""

    GUIDED = "guided"
    FREEFORM = "freeform"


class RuleType(str, Enum):
    POLICY = "policy"
    FLOW = "flow"
    SAFETY = "safety"
    TOOLING = "tooling"


class Severity(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class AccessMode(str, Enum):
    """How a playbook may touch a business table."""

    READ = "read"
    READ_WRITE = "read_write"
    WRITE = "write"


class TriggerType(str, Enum):
    """What starts a handoff from bot to operator."""

    USER_REQUEST = "user_request"
    SYSTEM_RULE = "system_rule"
    OPERATOR_REQUEST = "operator_request"
