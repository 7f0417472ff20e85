"""ResponseGenerator abstract interface."""

from abc import ABC, abstractmethod

from maestro.composers.models import ComposerProfile
from maestro.conversation.models import Message


class ResponseGenerator(ABC):
    """Produces the composer's next message.

    Both calls may suspend for an unbounded time and may fail; callers
    convert any failure into placeholder content.
    """

    @abstractmethod
    async def initialize(
        self, profile: ComposerProfile, prior_transcript: list[Message]
    ) -> None:
        """Prepare to speak as profile, continuing prior_transcript."""
        pass

    @abstractmethod
    async def generate_reply(self, user_text: str) -> str:
        """Return the reply to user_text.

        Raises:
            GeneratorFailureError: If no reply could be produced
        """
        pass
