"""LLM-backed response generator."""

from maestro.composers.models import ComposerProfile
from maestro.conversation.models import Message, Sender
from maestro.exceptions import GeneratorFailureError
from maestro.generation.base import ResponseGenerator
from maestro.generation.prompt_builder import PromptBuilder
from maestro.observability.logging import get_logger
from maestro.providers.llm import LLMProvider, ProviderError

logger = get_logger(__name__)


class LLMResponseGenerator(ResponseGenerator):
    """Speak as a composer through an LLM provider.

    Keeps the running transcript so each call sends the full history.
    Provider errors and empty completions become GeneratorFailureError.
    """

    def __init__(
        self,
        provider: LLMProvider,
        prompt_builder: PromptBuilder | None = None,
        temperature: float = 0.7,
        max_tokens: int = 800,
    ) -> None:
        self._provider = provider
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._profile: ComposerProfile | None = None
        self._system_prompt = ""
        self._history: list[Message] = []

    async def initialize(
        self, profile: ComposerProfile, prior_transcript: list[Message]
    ) -> None:
        self._profile = profile
        self._system_prompt = self._prompt_builder.build_system_prompt(profile)
        self._history = list(prior_transcript)
        logger.debug(
            "generator_initialized",
            subject_id=profile.id,
            history_length=len(self._history),
        )

    async def generate_reply(self, user_text: str) -> str:
        if self._profile is None:
            raise GeneratorFailureError("Generator not initialized with a composer")

        # Replies stay with the transcript they were asked in, even if
        # initialize switches composers before the provider answers
        history = self._history
        messages = self._prompt_builder.build_messages(self._system_prompt, history, user_text)
        try:
            response = await self._provider.generate(
                messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except ProviderError as e:
            raise GeneratorFailureError(f"Provider failed: {e}", cause=e) from e

        content = response.content.strip()
        if not content:
            raise GeneratorFailureError("Empty response received from provider")

        history.append(Message(text=user_text, sender=Sender.USER))
        history.append(Message(text=content, sender=Sender.ASSISTANT))
        return content
