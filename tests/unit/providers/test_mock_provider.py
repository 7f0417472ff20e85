"""Tests for MockLLMProvider and the provider error hierarchy."""

import asyncio

import pytest

from maestro.providers.llm import (
    AuthenticationError,
    ContentFilterError,
    LLMMessage,
    LLMResponse,
    MockLLMProvider,
    ProviderError,
    RateLimitError,
)


def ask(text: str) -> list[LLMMessage]:
    return [LLMMessage(role="user", content=text)]


class TestMockLLMProvider:
    """Tests for MockLLMProvider."""

    @pytest.fixture
    def provider(self) -> MockLLMProvider:
        return MockLLMProvider(reply="Test response")

    @pytest.mark.asyncio
    async def test_default_reply(self, provider):
        response = await provider.generate(ask("Hello"))

        assert isinstance(response, LLMResponse)
        assert response.content == "Test response"
        assert response.model == "mock-model"
        assert response.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_canned_answer_for_question(self, provider):
        """Should answer a known question with its canned reply."""
        provider.answer("Who taught you?", "My elder brother.")

        response = await provider.generate(ask("Who taught you?"))
        assert response.content == "My elder brother."

    @pytest.mark.asyncio
    async def test_records_requests(self, provider):
        await provider.generate(ask("Hello"), temperature=0.5, max_tokens=64)

        [request] = provider.requests
        assert request["temperature"] == 0.5
        assert request["max_tokens"] == 64
        assert request["messages"][0].content == "Hello"

    @pytest.mark.asyncio
    async def test_fail_with_raises_provider_error(self, provider):
        """Other exceptions should be wrapped in ProviderError."""
        provider.fail_with(TimeoutError("slow"))
        with pytest.raises(ProviderError):
            await provider.generate(ask("Hello"))

        provider.fail_with(None)
        response = await provider.generate(ask("Hello"))
        assert response.content == "Test response"

    @pytest.mark.asyncio
    async def test_provider_errors_pass_through(self):
        provider = MockLLMProvider(error=RateLimitError("slow down"))
        with pytest.raises(RateLimitError):
            await provider.generate(ask("Hello"))

    @pytest.mark.asyncio
    async def test_hold_delays_reply_until_release(self, provider):
        provider.hold()
        pending = asyncio.create_task(provider.generate(ask("Hello")))
        await asyncio.sleep(0)

        assert len(provider.requests) == 1
        assert not pending.done()

        provider.release()
        assert (await pending).content == "Test response"

    def test_provider_name(self, provider):
        assert provider.provider_name == "mock"


class TestErrorClasses:
    """Tests for error class hierarchy."""

    @pytest.mark.parametrize(
        "error_class",
        [AuthenticationError, RateLimitError, ContentFilterError],
    )
    def test_errors_are_provider_errors(self, error_class):
        """Specific errors should inherit from ProviderError."""
        assert isinstance(error_class("boom"), ProviderError)
