"""Template packs: models, validation, deployment and teardown."""

from agentpack.packs.apply import ApplyEngine, DeploymentState, apply_pack
from agentpack.packs.clear import ClearEngine, clear_tenant
from agentpack.packs.exceptions import (
    AgentPackError,
    InvalidPackError,
    PackLoadError,
    PackNotFoundError,
)
from agentpack.packs.registry import PackRegistry, load_pack_file, parse_pack
from agentpack.packs.results import (
    ClearResult,
    DeploymentResult,
    ProgressCallback,
    StageProgress,
)
from agentpack.packs.service import AgentPackService
from agentpack.packs.validator import ValidationResult, validate_pack

__all__ = [
    # Engines
    "ApplyEngine",
    "ClearEngine",
    "DeploymentState",
    "apply_pack",
    "clear_tenant",
    # Errors
    "AgentPackError",
    "InvalidPackError",
    "PackLoadError",
    "PackNotFoundError",
    # Registry
    "PackRegistry",
    "load_pack_file",
    "parse_pack",
    # Results
    "ClearResult",
    "DeploymentResult",
    "ProgressCallback",
    "StageProgress",
    # Service
    "AgentPackService",
    # Validation
    "ValidationResult",
    "validate_pack",
]
