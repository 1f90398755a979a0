"""The nine deployable entity types and their dependency shape.

Member order is the apply order; teardown walks it backwards.
"""

from dataclasses import dataclass
from enum import Enum


class EntityType(str, Enum):
    """Deployable entity type, valued by its store table name."""

    AGENT = "agents"
    PLAYBOOK = "agent_playbooks"
    PLAYBOOK_RULE = "agent_playbook_rules"
    PLAYBOOK_TABLE = "agent_playbook_tables"
    AGENT_STATE = "agent_states"
    AGENT_STATE_STEP = "agent_state_steps"
    CHANNEL_BINDING = "agent_channel_bindings"
    HANDOFF_POLICY = "agent_handoff_policies"
    AUTOMATION = "automations"

    @property
    def table(self) -> str:
        return self.value

    @property
    def shape(self) -> "EntityShape":
        return ENTITY_SHAPES[self]


@dataclass(frozen=True)
class EntityShape:
    """Static description of one entity type.

    Attributes:
        pack_field: Name of the pack collection holding specs of this type
        label: Human label used in error messages
        apply_label: Progress label shown while creating
        required_refs: (ref field, parent type) pairs that must resolve
        optional_refs: (ref field, parent type) pairs resolved when possible
        produces_refs: Whether created ids are recorded for later stages
        tenant_scoped: Whether the table carries a tenant_id column
    """

    pack_field: str
    label: str
    apply_label: str
    required_refs: tuple[tuple[str, EntityType], ...] = ()
    optional_refs: tuple[tuple[str, EntityType], ...] = ()
    produces_refs: bool = False
    tenant_scoped: bool = True


ENTITY_SHAPES: dict[EntityType, EntityShape] = {
    EntityType.AGENT: EntityShape(
        pack_field="agents",
        label="Agent",
        apply_label="Creating agents...",
        produces_refs=True,
    ),
    EntityType.PLAYBOOK: EntityShape(
        pack_field="playbooks",
        label="Playbook",
        apply_label="Creating playbooks...",
        required_refs=(("agent_ref", EntityType.AGENT),),
        produces_refs=True,
    ),
    EntityType.PLAYBOOK_RULE: EntityShape(
        pack_field="playbook_rules",
        label="Rule",
        apply_label="Creating playbook rules...",
        required_refs=(("playbook_ref", EntityType.PLAYBOOK),),
    ),
    EntityType.PLAYBOOK_TABLE: EntityShape(
        pack_field="playbook_tables",
        label="Table",
        apply_label="Creating playbook tables...",
        required_refs=(("playbook_ref", EntityType.PLAYBOOK),),
    ),
    EntityType.AGENT_STATE: EntityShape(
        pack_field="agent_states",
        label="State",
        apply_label="Creating agent states...",
        required_refs=(("agent_ref", EntityType.AGENT),),
        produces_refs=True,
        tenant_scoped=False,
    ),
    EntityType.AGENT_STATE_STEP: EntityShape(
        pack_field="agent_state_steps",
        label="Step",
        apply_label="Creating state steps...",
        required_refs=(
            ("state_ref", EntityType.AGENT_STATE),
            ("agent_ref", EntityType.AGENT),
        ),
    ),
    EntityType.CHANNEL_BINDING: EntityShape(
        pack_field="channel_bindings",
        label="Channel binding",
        apply_label="Creating channel bindings...",
        required_refs=(("agent_ref", EntityType.AGENT),),
    ),
    EntityType.HANDOFF_POLICY: EntityShape(
        pack_field="handoff_policies",
        label="Handoff",
        apply_label="Creating handoff policies...",
        required_refs=(("agent_ref", EntityType.AGENT),),
        optional_refs=(("playbook_ref", EntityType.PLAYBOOK),),
    ),
    EntityType.AUTOMATION: EntityShape(
        pack_field="automations",
        label="Automation",
        apply_label="Creating automations...",
        required_refs=(("agent_ref", EntityType.AGENT),),
    ),
}

APPLY_ORDER: tuple[EntityType, ...] = tuple(EntityType)
CLEAR_ORDER: tuple[EntityType, ...] = tuple(reversed(APPLY_ORDER))


def id_column(ref_field: str) -> str:
    """Store column for a reference field: `agent_ref` -> `agent_id`."""
    return ref_field.removesuffix("_ref") + "_id"
