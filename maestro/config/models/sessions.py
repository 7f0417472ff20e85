"""Active session set configuration."""

from pydantic import BaseModel, Field


class SessionsConfig(BaseModel):
    """Bounds for the set of resident conversations."""

    capacity: int = Field(
        default=5,
        ge=1,
        description="Maximum number of active composers before eviction",
    )
