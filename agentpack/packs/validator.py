"""Pre-flight structural validation of template packs.

Checks reference integrity and ref_key uniqueness across the whole pack
before anything is written. Pure: no I/O, no side effects, never raises.
The apply engine does not call this itself; callers validate first.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from agentpack.packs.models import AgentTemplatePack


class ValidationResult(BaseModel):
    """Outcome of validating a pack."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[str]


def _duplicates(keys: Iterable[str]) -> list[str]:
    """Keys seen more than once, reported at each repeat."""
    seen: set[str] = set()
    repeated: list[str] = []
    for key in keys:
        if key in seen:
            repeated.append(key)
        seen.add(key)
    return repeated


def _schema_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]


def _field(item: Any, name: str) -> Any:
    """Read a field from a parsed spec or from a raw mapping entry."""
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _items(source: Any, name: str) -> list[Any]:
    value = _field(source, name)
    if isinstance(value, list | tuple):
        return list(value)
    return []


def _keys(items: Iterable[Any]) -> list[str]:
    return [key for key in (_field(item, "ref_key") for item in items) if isinstance(key, str)]


def _dangling(item: Any, name: str, declared: set[str]) -> str | None:
    """The reference held in `name` when it points at nothing declared.

    Missing or non-string references are left to schema validation.
    """
    ref = _field(item, name)
    if isinstance(ref, str) and ref and ref not in declared:
        return ref
    return None


def _structural_errors(pack: Any) -> list[str]:
    errors: list[str] = []

    metadata = _field(pack, "metadata")
    if not _field(metadata, "key"):
        errors.append("metadata.key is required")
    if not _field(metadata, "name"):
        errors.append("metadata.name is required")

    agents = _items(pack, "agents")
    playbooks = _items(pack, "playbooks")
    states = _items(pack, "agent_states")
    if not agents:
        errors.append("At least one agent is required")

    # Only referenceable types need unique keys
    for key in _duplicates(_keys(agents)):
        errors.append(f"Duplicate agent ref_key: {key}")
    for key in _duplicates(_keys(playbooks)):
        errors.append(f"Duplicate playbook ref_key: {key}")
    for key in _duplicates(_keys(states)):
        errors.append(f"Duplicate state ref_key: {key}")

    agent_refs = set(_keys(agents))
    playbook_refs = set(_keys(playbooks))
    state_refs = set(_keys(states))

    for pb in playbooks:
        if (ref := _dangling(pb, "agent_ref", agent_refs)) is not None:
            errors.append(f'Playbook {_field(pb, "ref_key")} -> agent_ref "{ref}" not found')
    for state in states:
        if (ref := _dangling(state, "agent_ref", agent_refs)) is not None:
            errors.append(f'State {_field(state, "ref_key")} -> agent_ref "{ref}" not found')

    for rule in _items(pack, "playbook_rules"):
        if (ref := _dangling(rule, "playbook_ref", playbook_refs)) is not None:
            errors.append(f'Rule "{_field(rule, "title") or ""}" -> playbook_ref "{ref}" not found')
    for table in _items(pack, "playbook_tables"):
        if (ref := _dangling(table, "playbook_ref", playbook_refs)) is not None:
            errors.append(
                f'Table "{_field(table, "table_name") or ""}" -> playbook_ref "{ref}" not found'
            )

    for step in _items(pack, "agent_state_steps"):
        step_key = _field(step, "step_key") or ""
        if (ref := _dangling(step, "state_ref", state_refs)) is not None:
            errors.append(f'Step "{step_key}" -> state_ref "{ref}" not found')
        if (ref := _dangling(step, "agent_ref", agent_refs)) is not None:
            errors.append(f'Step "{step_key}" -> agent_ref "{ref}" not found')

    for binding in _items(pack, "channel_bindings"):
        if (ref := _dangling(binding, "agent_ref", agent_refs)) is not None:
            errors.append(f'Channel binding -> agent_ref "{ref}" not found')
    for policy in _items(pack, "handoff_policies"):
        if (ref := _dangling(policy, "agent_ref", agent_refs)) is not None:
            errors.append(f'Handoff policy -> agent_ref "{ref}" not found')
        if (ref := _dangling(policy, "playbook_ref", playbook_refs)) is not None:
            errors.append(f'Handoff policy -> playbook_ref "{ref}" not found')
    for automation in _items(pack, "automations"):
        if (ref := _dangling(automation, "agent_ref", agent_refs)) is not None:
            errors.append(f'Automation -> agent_ref "{ref}" not found')

    return errors


def validate_pack(pack: AgentTemplatePack | Mapping[str, Any]) -> ValidationResult:
    """Validate a pack's structure and cross-references.

    All violations are accumulated in a fixed order: metadata, agent
    presence, ref_key uniqueness, then references from each dependent
    type to its parents.

    A raw mapping is parsed first. If parsing fails, its schema errors
    (`loc: msg`) come first and the structural checks still run on the
    mapping itself, skipping references that are missing or malformed.

    Args:
        pack: Parsed pack, or a raw mapping to parse first

    Returns:
        ValidationResult with `valid` False when any error was found
    """
    errors: list[str] = []
    source: Any = pack
    if not isinstance(pack, AgentTemplatePack):
        try:
            source = AgentTemplatePack.model_validate(pack)
        except ValidationError as e:
            errors.extend(_schema_errors(e))
            if not isinstance(pack, Mapping):
                return ValidationResult(valid=False, errors=errors)

    errors.extend(_structural_errors(source))
    return ValidationResult(valid=not errors, errors=errors)
