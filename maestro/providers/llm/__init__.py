"""LLM providers for text generation.

The primary interface is LLMExecutor, which routes a model string
(e.g. "google/gemini-2.0-flash") to the matching Agno model class and
walks a fallback chain on failure.
"""

from maestro.providers.llm.base import (
    AuthenticationError,
    ContentFilterError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    RateLimitError,
)
from maestro.providers.llm.executor import LLMExecutor
from maestro.providers.llm.mock import MockLLMProvider

__all__ = [
    # Data models
    "LLMMessage",
    "LLMResponse",
    "LLMProvider",
    # Errors
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ContentFilterError",
    # Executor
    "LLMExecutor",
    # Testing
    "MockLLMProvider",
]
