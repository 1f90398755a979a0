"""Entity store backend configuration."""

from typing import Literal

from pydantic import BaseModel, Field

StoreBackend = Literal["inmemory", "http"]


class EntityStoreConfig(BaseModel):
    """Where deployed entities are persisted."""

    backend: StoreBackend = Field(
        default="inmemory",
        description="Store backend type",
    )
    base_url: str = Field(
        default="http://localhost:8787",
        description="Base URL of the remote CRUD service",
    )
    crud_path: str = Field(
        default="/api_crud",
        description="Path of the generic CRUD endpoint",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )
    token: str | None = Field(
        default=None,
        description="Bearer token (set via AGENTPACK_STORE__TOKEN)",
    )
    auto_exclude_deleted: bool = Field(
        default=True,
        description="Ask the server to hide soft-deleted rows from list calls",
    )
