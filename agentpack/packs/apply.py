"""Apply engine: materialize a template pack into the Entity Store.

Stages run in the fixed dependency order of `APPLY_ORDER`. Each stage folds
its spec collection into a `DeploymentState` (RefMaps, counts, errors):
created ids feed later stages, a failed or unresolvable spec is recorded
and skipped, and nothing a single entity does aborts the run. Only an
exception outside the per-entity guard ends the run early, as a single
`Fatal: ...` error.
"""

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import structlog

from agentpack.observability.logging import get_logger
from agentpack.observability.metrics import (
    PACK_APPLY_DURATION,
    PACK_ENTITIES_CREATED,
    PACK_ENTITY_FAILURES,
)
from agentpack.packs.models import (
    APPLY_ORDER,
    AgentTemplatePack,
    EntityType,
    PackSpec,
    id_column,
)
from agentpack.packs.payloads import build_payload
from agentpack.packs.results import DeploymentResult, ProgressCallback, StageProgress
from agentpack.stores import EntityStore, Record, StoreError

logger = get_logger(__name__)

# ref_key -> store-assigned id
RefMap = dict[str, str]


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def describe_failure(exc: Exception) -> str:
    """Failure detail for an entity error message."""
    if isinstance(exc, StoreError):
        return exc.describe()
    return str(exc) or type(exc).__name__


@dataclass(frozen=True)
class SpecOutcome:
    """What happened to one spec.

    Exactly one of: created (`record_id` set), failed (`error` set, store was
    called), or unresolved (`unresolved` set, store was not called).
    """

    record_id: str | None = None
    error: str | None = None
    unresolved: str | None = None


@dataclass
class DeploymentState:
    """Accumulator threaded through the stages of one apply run."""

    tenant_id: str
    pack_key: str
    ref_maps: dict[EntityType, RefMap] = field(
        default_factory=lambda: {t: {} for t in APPLY_ORDER if t.shape.produces_refs}
    )
    counts: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def resolve(self, entity_type: EntityType, ref_key: str | None) -> str | None:
        if not ref_key:
            return None
        return self.ref_maps[entity_type].get(ref_key)

    def to_result(self) -> DeploymentResult:
        return DeploymentResult(
            success=not self.errors,
            tenant_id=self.tenant_id,
            pack_key=self.pack_key,
            counts=dict(self.counts),
            errors=list(self.errors),
        )


def _record_id(record: Record) -> str:
    if not isinstance(record, dict) or record.get("id") is None:
        raise StoreError("Store returned a record without an id")
    return str(record["id"])


class ApplyEngine:
    """Creates every entity of a pack for one tenant, parents first."""

    def __init__(
        self,
        store: EntityStore,
        *,
        report_unresolved_refs: bool = False,
        record_metrics: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Entity Store receiving the rows
            report_unresolved_refs: Record an error for every spec skipped
                because a parent was not created. Playbooks always report.
            record_metrics: Update Prometheus counters
        """
        self._store = store
        self._report_unresolved_refs = report_unresolved_refs
        self._record_metrics = record_metrics

    async def apply(
        self,
        pack: AgentTemplatePack,
        tenant_id: str | UUID,
        on_progress: ProgressCallback | None = None,
    ) -> DeploymentResult:
        """Apply a pack to a tenant.

        The pack is assumed validated; unresolved references are skipped, not
        raised. `on_progress` is called once per stage, before the stage runs,
        with fractions 1/9 .. 9/9.

        Returns:
            DeploymentResult; `success` is True only when no error was recorded
        """
        state = DeploymentState(tenant_id=str(tenant_id), pack_key=pack.metadata.key)
        progress = StageProgress(len(APPLY_ORDER), on_progress)
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(
            tenant_id=state.tenant_id, pack_key=state.pack_key
        ):
            logger.info("pack_apply_started")
            try:
                for entity_type in APPLY_ORDER:
                    progress.advance(entity_type.shape.apply_label)
                    await self._apply_stage(entity_type, pack.specs(entity_type), state)
            except Exception as e:
                state.errors.append(f"Fatal: {describe_failure(e)}")
                logger.error(
                    "pack_apply_fatal",
                    stage=progress.current,
                    error=describe_failure(e),
                    error_type=type(e).__name__,
                )

            result = state.to_result()
            duration = time.perf_counter() - started
            if self._record_metrics:
                PACK_APPLY_DURATION.labels(
                    pack_key=state.pack_key,
                    outcome="success" if result.success else "failed",
                ).observe(duration)
            logger.info(
                "pack_apply_completed",
                success=result.success,
                counts=result.counts,
                error_count=len(result.errors),
                duration_ms=int(duration * 1000),
            )
        return result

    async def _apply_stage(
        self,
        entity_type: EntityType,
        specs: tuple[PackSpec, ...],
        state: DeploymentState,
    ) -> DeploymentState:
        """Fold one stage's specs into the deployment state, in order."""
        for spec in specs:
            outcome = await self._apply_one(entity_type, spec, state)
            self._absorb(entity_type, spec, outcome, state)
        return state

    async def _apply_one(
        self,
        entity_type: EntityType,
        spec: PackSpec,
        state: DeploymentState,
    ) -> SpecOutcome:
        shape = entity_type.shape
        resolved_ids: dict[str, str | None] = {}

        for ref_field, parent in shape.required_refs:
            ref_key = getattr(spec, ref_field)
            parent_id = state.resolve(parent, ref_key)
            if parent_id is None:
                return SpecOutcome(unresolved=f'{ref_field} "{ref_key}" not resolved')
            resolved_ids[id_column(ref_field)] = parent_id

        for ref_field, parent in shape.optional_refs:
            resolved_ids[id_column(ref_field)] = state.resolve(parent, getattr(spec, ref_field))

        try:
            payload = build_payload(
                entity_type,
                spec,
                tenant_id=state.tenant_id,
                resolved_ids=resolved_ids,
                now=utc_now_iso(),
            )
            record = await self._store.create(entity_type.table, payload)
            return SpecOutcome(record_id=_record_id(record))
        except Exception as e:  # noqa: BLE001 - one entity never stops the run
            return SpecOutcome(error=describe_failure(e))

    def _absorb(
        self,
        entity_type: EntityType,
        spec: PackSpec,
        outcome: SpecOutcome,
        state: DeploymentState,
    ) -> None:
        shape = entity_type.shape
        entry = f'{shape.label} "{spec.display_key}"'

        if outcome.record_id is not None:
            if shape.produces_refs:
                state.ref_maps[entity_type][spec.ref_key] = outcome.record_id
            state.counts[entity_type.table] = state.counts.get(entity_type.table, 0) + 1
            if self._record_metrics:
                PACK_ENTITIES_CREATED.labels(
                    pack_key=state.pack_key, entity_type=entity_type.value
                ).inc()
            return

        if outcome.unresolved is not None:
            if entity_type is EntityType.PLAYBOOK or self._report_unresolved_refs:
                state.errors.append(f"{entry}: {outcome.unresolved}")
            logger.warning(
                "pack_entity_skipped",
                entity_type=entity_type.value,
                spec=spec.display_key,
                reason=outcome.unresolved,
            )
            reason = "unresolved_ref"
        else:
            state.errors.append(f"{entry}: {outcome.error}")
            logger.error(
                "pack_entity_failed",
                entity_type=entity_type.value,
                spec=spec.display_key,
                error=outcome.error,
            )
            reason = "store_error"

        if self._record_metrics:
            PACK_ENTITY_FAILURES.labels(entity_type=entity_type.value, reason=reason).inc()


async def apply_pack(
    pack: AgentTemplatePack,
    tenant_id: str | UUID,
    store: EntityStore,
    on_progress: ProgressCallback | None = None,
    *,
    report_unresolved_refs: bool = False,
) -> DeploymentResult:
    """Apply `pack` to `tenant_id` through `store`. See ApplyEngine.apply."""
    engine = ApplyEngine(store, report_unresolved_refs=report_unresolved_refs)
    return await engine.apply(pack, tenant_id, on_progress)
