"""In-process LLM provider for tests and offline runs."""

import asyncio
from typing import Any

from maestro.providers.llm.base import LLMMessage, LLMProvider, LLMResponse, ProviderError


class MockLLMProvider(LLMProvider):
    """Answers from a table of canned replies instead of a model.

    The reply is picked by the text of the last message (the user's
    question), falling back to a single default. Replies can be held back
    with hold() until release() is called, which lets tests interleave
    other work with an in-flight request.
    """

    def __init__(
        self,
        reply: str = "Mock response",
        replies: dict[str, str] | None = None,
        error: Exception | None = None,
        model: str = "mock-model",
    ) -> None:
        self._reply = reply
        self._replies = dict(replies or {})
        self._error = error
        self._model = model
        self._released = asyncio.Event()
        self._released.set()
        self.requests: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    def answer(self, question: str, reply: str) -> None:
        self._replies[question] = reply

    def fail_with(self, error: Exception | None) -> None:
        """Raise error from later calls; None goes back to answering."""
        self._error = error

    def hold(self) -> None:
        self._released.clear()

    def release(self) -> None:
        self._released.set()

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        self.requests.append(
            {
                "messages": list(messages),
                "model": model or self._model,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        await self._released.wait()

        if isinstance(self._error, ProviderError):
            raise self._error
        if self._error is not None:
            raise ProviderError(str(self._error)) from self._error

        question = messages[-1].content if messages else ""
        return LLMResponse(
            content=self._replies.get(question, self._reply),
            model=model or self._model,
            finish_reason="stop",
        )
