"""Durable store configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "file", "redis"]


class StorageConfig(BaseModel):
    """Configuration for the durable blob store."""

    backend: BackendType = Field(
        default="file",
        description="Backend type",
    )
    path: str = Field(
        default=".maestro/store.json",
        description="TinyDB database file (file backend)",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL (redis backend)",
    )
    key_prefix: str = Field(
        default="maestro",
        description="Namespace prepended to every redis key",
    )
