"""Progress signalling and final results for apply and clear runs."""

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

# (stage label, fraction of stages started in (0, 1])
ProgressCallback = Callable[[str, float], None]


class StageProgress:
    """Push-style stage counter.

    Each `advance` announces the next stage before it runs. The fraction is
    stage-granular and does not move while a stage is in progress.
    """

    def __init__(self, total: int, callback: ProgressCallback | None = None) -> None:
        self._total = total
        self._current = 0
        self._callback = callback

    @property
    def current(self) -> int:
        return self._current

    def advance(self, label: str) -> float:
        self._current += 1
        fraction = self._current / self._total
        if self._callback is not None:
            self._callback(label, fraction)
        return fraction


class DeploymentResult(BaseModel):
    """Outcome of applying a pack to a tenant.

    `counts` maps table name to the number of rows created; tables with no
    creations are absent. `errors` lists per-entity failures in the order
    they happened.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    tenant_id: str
    pack_key: str
    counts: dict[str, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)


class ClearResult(BaseModel):
    """Outcome of tearing down a tenant's pack data.

    `counts` maps every processed table to the number of rows soft-deleted.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    tenant_id: str
    counts: dict[str, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
