"""Configuration section models."""

from agentpack.config.models.observability import LogLevel, ObservabilityConfig
from agentpack.config.models.packs import PacksConfig
from agentpack.config.models.store import EntityStoreConfig, StoreBackend

__all__ = [
    "EntityStoreConfig",
    "LogLevel",
    "ObservabilityConfig",
    "PacksConfig",
    "StoreBackend",
]
