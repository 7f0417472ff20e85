"""LLM data models, provider interface and error types.

This module provides the core types used by LLMExecutor:
- LLMMessage: Input message format
- LLMResponse: Output response format
- LLMProvider: Interface for anything that turns messages into text
- Error types for different failure modes
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
    """A message in a conversation."""

    role: str = Field(..., description="Role: system, user, or assistant")
    content: str = Field(..., description="Message content")


class LLMResponse(BaseModel):
    """Response from an LLM call."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model used")
    finish_reason: str | None = Field(
        default=None, description="Why generation stopped"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Execution metadata"
    )


class LLMProvider(ABC):
    """Interface for text generation backends."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short provider identifier for logs."""

    @abstractmethod
    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a reply to messages."""


# ============================================================================
# Error Types
# ============================================================================


class ProviderError(Exception):
    """Base exception for LLM provider errors."""

    pass


class AuthenticationError(ProviderError):
    """Invalid or missing API key."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded."""

    pass


class ContentFilterError(ProviderError):
    """Content blocked by safety filter."""

    pass
