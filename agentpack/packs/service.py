"""Deploy service: validate, apply and clear packs by key or by value."""

from uuid import UUID

from agentpack.observability.logging import get_logger
from agentpack.packs.apply import ApplyEngine
from agentpack.packs.clear import ClearEngine
from agentpack.packs.exceptions import InvalidPackError
from agentpack.packs.models import AgentTemplatePack, PackSummary
from agentpack.packs.registry import PackRegistry
from agentpack.packs.results import ClearResult, DeploymentResult, ProgressCallback
from agentpack.packs.validator import ValidationResult, validate_pack
from agentpack.stores import EntityStore

logger = get_logger(__name__)

PackRef = str | AgentTemplatePack


class AgentPackService:
    """Front door for pack deployment.

    Resolves pack keys through the registry, refuses to apply packs that
    fail validation, and delegates the writes to the apply and clear engines.
    """

    def __init__(
        self,
        store: EntityStore,
        registry: PackRegistry,
        *,
        report_unresolved_refs: bool = False,
        record_metrics: bool = True,
    ) -> None:
        """Initialize the service.

        Args:
            store: Entity Store receiving the rows
            registry: Catalogue used to resolve pack keys
            report_unresolved_refs: Passed through to the apply engine
            record_metrics: Update Prometheus counters
        """
        self._store = store
        self._registry = registry
        self._apply_engine = ApplyEngine(
            store,
            report_unresolved_refs=report_unresolved_refs,
            record_metrics=record_metrics,
        )
        self._clear_engine = ClearEngine(store, record_metrics=record_metrics)

    def list_summaries(self) -> list[PackSummary]:
        return self._registry.list_summaries()

    def get_pack(self, key: str) -> AgentTemplatePack:
        """Get a registered pack.

        Raises:
            PackNotFoundError: If no pack has that key
        """
        return self._registry.require(key)

    def _resolve(self, pack: PackRef) -> AgentTemplatePack:
        if isinstance(pack, AgentTemplatePack):
            return pack
        return self._registry.require(pack)

    def validate(self, pack: PackRef) -> ValidationResult:
        resolved = self._resolve(pack)
        result = validate_pack(resolved)
        logger.info(
            "pack_validated",
            pack_key=resolved.key,
            valid=result.valid,
            error_count=len(result.errors),
        )
        return result

    async def apply(
        self,
        pack: PackRef,
        tenant_id: str | UUID,
        on_progress: ProgressCallback | None = None,
        *,
        clear_first: bool = False,
    ) -> DeploymentResult:
        """Validate and apply a pack to a tenant.

        Args:
            pack: Registered pack key or a pack instance
            tenant_id: Tenant receiving the entities
            on_progress: Called once per apply stage
            clear_first: Soft-delete the tenant's existing pack data before
                applying. Clear progress is not reported.

        Returns:
            DeploymentResult of the apply run. Clear errors are prepended
            to its errors when `clear_first` is set.

        Raises:
            PackNotFoundError: If `pack` is an unknown key
            InvalidPackError: If the pack fails validation; nothing is written
        """
        resolved = self._resolve(pack)
        validation = validate_pack(resolved)
        if not validation.valid:
            logger.warning(
                "pack_apply_rejected",
                pack_key=resolved.key,
                errors=validation.errors,
            )
            raise InvalidPackError(resolved.key, validation.errors)

        if not clear_first:
            return await self._apply_engine.apply(resolved, tenant_id, on_progress)

        cleared = await self._clear_engine.clear(tenant_id)
        result = await self._apply_engine.apply(resolved, tenant_id, on_progress)
        if cleared.success:
            return result
        errors = cleared.errors + result.errors
        return result.model_copy(update={"success": False, "errors": errors})

    async def clear(
        self,
        tenant_id: str | UUID,
        on_progress: ProgressCallback | None = None,
    ) -> ClearResult:
        return await self._clear_engine.clear(tenant_id, on_progress)
