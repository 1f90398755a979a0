"""Mapping of entity specs to Entity Store rows."""

from typing import Any

from agentpack.packs.models import EntityType, PackSpec

# Optional fields the store expects as empty containers instead of null
_EMPTY_DEFAULTS: dict[EntityType, dict[str, Any]] = {
    EntityType.PLAYBOOK_RULE: {"metadata": {}},
    EntityType.PLAYBOOK_TABLE: {"query_guardrails": {}},
    EntityType.AGENT_STATE_STEP: {
        "expected_inputs": [],
        "expected_outputs": [],
        "allowed_tables": [],
    },
    EntityType.CHANNEL_BINDING: {"config": {}},
    EntityType.HANDOFF_POLICY: {"trigger_config": {}},
}

# The agents table stores these numeric settings as text
_TEXT_COLUMNS: dict[EntityType, tuple[str, ...]] = {
    EntityType.AGENT: ("temperature", "max_tokens", "version"),
}

_NO_UPDATED_AT: frozenset[EntityType] = frozenset({
    EntityType.AGENT_STATE,
    EntityType.AUTOMATION,
})


def build_payload(
    entity_type: EntityType,
    spec: PackSpec,
    *,
    tenant_id: str,
    resolved_ids: dict[str, str | None],
    now: str,
) -> dict[str, Any]:
    """Build the row to create for one spec.

    Pack-local keys (`ref_key`, `*_ref`) are dropped and replaced by the
    store ids in `resolved_ids`, keyed by column name (`agent_id`, ...).

    Args:
        entity_type: Type of the spec
        spec: The spec to persist
        tenant_id: Owning tenant, written only to tenant-scoped tables
        resolved_ids: Parent ids keyed by column
        now: ISO timestamp for created_at/updated_at

    Returns:
        Field mapping for EntityStore.create
    """
    shape = entity_type.shape
    pack_only = {"ref_key"} | {field for field, _ in shape.required_refs + shape.optional_refs}

    payload: dict[str, Any] = {}
    if shape.tenant_scoped:
        payload["tenant_id"] = tenant_id
    payload.update(resolved_ids)

    fields = spec.model_dump(mode="json", exclude=pack_only)
    for field, default in _EMPTY_DEFAULTS.get(entity_type, {}).items():
        if fields.get(field) is None:
            fields[field] = default
    for field in _TEXT_COLUMNS.get(entity_type, ()):
        fields[field] = str(fields[field])
    payload.update(fields)

    payload["created_at"] = now
    if entity_type not in _NO_UPDATED_AT:
        payload["updated_at"] = now
    return payload
