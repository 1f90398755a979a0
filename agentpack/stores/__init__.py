"""Entity store backends."""

from agentpack.stores.entity_store import CrudFilter, EntityStore, Record, StoreError
from agentpack.stores.factory import create_entity_store
from agentpack.stores.http import HttpEntityStore
from agentpack.stores.inmemory import InMemoryEntityStore

__all__ = [
    "CrudFilter",
    "EntityStore",
    "HttpEntityStore",
    "InMemoryEntityStore",
    "Record",
    "StoreError",
    "create_entity_store",
]
