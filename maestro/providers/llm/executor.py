"""LLM Executor - runs chat completions through Agno model classes.

The executor handles:
- Model selection and API routing based on model string prefix
- Fallback chain on failure (Agno doesn't have this natively)
- Latency metadata and logging

Model string formats:
- google/{model} -> Agno Gemini
- openai/{model} -> Agno OpenAIChat
- anthropic/{model} -> Agno Claude
- openrouter/{provider}/{model} -> Agno OpenRouter
- mock/{name} -> canned response, no network
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from maestro.observability.logging import get_logger
from maestro.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    RateLimitError,
)

if TYPE_CHECKING:
    from agno.agent import Agent

logger = get_logger(__name__)

MOCK_RESPONSE = "This is a mock response from the composer."


class LLMExecutor(LLMProvider):
    """Executes LLM calls using Agno.

    Example:
        executor = LLMExecutor(
            model="google/gemini-2.0-flash",
            fallback_models=["openai/gpt-4o-mini"],
        )

        response = await executor.generate(
            messages=[LLMMessage(role="user", content="Hello")],
        )
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            model: Primary model string (e.g., 'google/gemini-2.0-flash')
            fallback_models: Models to try if primary fails
        """
        self._model = model
        self._fallback_models = fallback_models or []
        self._agents: dict[str, Agent] = {}

    @property
    def provider_name(self) -> str:
        return "agno"

    @property
    def model(self) -> str:
        """Primary model for this executor."""
        return self._model

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,  # noqa: ARG002
    ) -> LLMResponse:
        """Generate text from messages.

        Uses the primary model (or `model` when given) and falls back to
        fallback_models on failure.

        Raises:
            ProviderError: If every model failed
        """
        models_to_try = [model or self._model, *self._fallback_models]
        last_error: Exception | None = None

        for candidate in models_to_try:
            try:
                return await self._generate_with_model(
                    candidate, messages, max_tokens=max_tokens, temperature=temperature
                )
            except RateLimitError as e:
                logger.warning("executor_rate_limited", model=candidate, error=str(e))
                last_error = e
            except ProviderError as e:
                logger.warning("executor_provider_error", model=candidate, error=str(e))
                last_error = e

        raise ProviderError(
            f"All models failed. Tried: {models_to_try}. Last error: {last_error}"
        )

    def _get_or_create_agent(self, model: str, max_tokens: int, temperature: float) -> Agent:
        """Get cached Agno agent or create new one for model."""
        if model in self._agents:
            return self._agents[model]

        from agno.agent import Agent

        agent = Agent(
            model=self._create_agno_model(model, max_tokens, temperature),
            markdown=False,
        )
        self._agents[model] = agent
        return agent

    def _create_agno_model(self, model: str, max_tokens: int, temperature: float) -> Any:
        """Create Agno model class from model string."""
        provider_type, api_model = self._parse_model(model)

        if provider_type == "google":
            from agno.models.google import Gemini

            return Gemini(id=api_model, temperature=temperature, max_output_tokens=max_tokens)

        if provider_type == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(id=api_model, temperature=temperature, max_tokens=max_tokens)

        if provider_type == "anthropic":
            from agno.models.anthropic import Claude

            return Claude(id=api_model, temperature=temperature, max_tokens=max_tokens)

        if provider_type != "openrouter":
            logger.warning(
                "unknown_provider_defaulting_to_openrouter",
                model=model,
                provider_type=provider_type,
            )
            api_model = model

        from agno.models.openrouter import OpenRouter

        return OpenRouter(id=api_model, temperature=temperature, max_tokens=max_tokens)

    @staticmethod
    def _format_messages(messages: list[LLMMessage]) -> str:
        """Convert our messages to Agno input format.

        Agno agents take a string input; multi-turn history is rendered as a
        transcript. System messages are passed as instructions instead.
        """
        turns = [m for m in messages if m.role != "system"]
        if len(turns) == 1:
            return turns[0].content

        parts = []
        for msg in turns:
            if msg.role == "user":
                parts.append(f"User: {msg.content}")
            elif msg.role == "assistant":
                parts.append(f"Assistant: {msg.content}")
        return "\n\n".join(parts)

    @staticmethod
    def _get_system_prompt(messages: list[LLMMessage]) -> str | None:
        for msg in messages:
            if msg.role == "system":
                return msg.content
        return None

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        *,
        max_tokens: int,
        temperature: float,
    ) -> LLMResponse:
        provider_type, _ = self._parse_model(model)
        if provider_type == "mock":
            return LLMResponse(
                content=MOCK_RESPONSE,
                model=model,
                finish_reason="stop",
                metadata={"mock": True},
            )

        try:
            agent = self._get_or_create_agent(model, max_tokens, temperature)
        except ImportError as e:
            raise ProviderError(f"Model backend for {model} is not installed: {e}") from e

        system_prompt = self._get_system_prompt(messages)
        if system_prompt:
            agent.instructions = [system_prompt]

        start_time = time.perf_counter()
        try:
            run_response = await agent.arun(self._format_messages(messages))
        except Exception as e:
            error_msg = str(e).lower()
            if "rate" in error_msg and "limit" in error_msg:
                raise RateLimitError(f"Rate limited: {e}") from e
            raise ProviderError(f"Agno execution failed: {e}") from e

        content = run_response.content if run_response.content else ""
        latency_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            "executor_generate_complete",
            model=model,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )

        return LLMResponse(
            content=str(content),
            model=model,
            finish_reason="stop",
            metadata={"latency_ms": latency_ms, "provider": provider_type},
        )

    @staticmethod
    def _parse_model(model: str) -> tuple[str, str]:
        """Split 'provider/model' into (provider, model)."""
        if "/" not in model:
            return "openrouter", model
        provider, api_model = model.split("/", 1)
        return provider.lower(), api_model
