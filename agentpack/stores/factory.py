"""EntityStore factory for creating backend instances."""

from agentpack.config.models import EntityStoreConfig
from agentpack.observability.logging import get_logger
from agentpack.stores.entity_store import EntityStore
from agentpack.stores.http import HttpEntityStore
from agentpack.stores.inmemory import InMemoryEntityStore

logger = get_logger(__name__)


def create_entity_store(config: EntityStoreConfig) -> EntityStore:
    """Create an EntityStore instance based on configuration.

    Args:
        config: Store configuration from settings

    Returns:
        Configured EntityStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if config.backend == "inmemory":
        logger.info("creating_entity_store", backend="inmemory")
        return InMemoryEntityStore()

    if config.backend == "http":
        logger.info(
            "creating_entity_store",
            backend="http",
            base_url=config.base_url,
            crud_path=config.crud_path,
            has_token=bool(config.token),
        )
        return HttpEntityStore(
            config.base_url,
            crud_path=config.crud_path,
            token=config.token,
            timeout=config.timeout,
            auto_exclude_deleted=config.auto_exclude_deleted,
        )

    raise ValueError(f"Unsupported entity store backend: {config.backend}")
