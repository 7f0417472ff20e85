"""Offline keyword responder used when no LLM is configured."""

from maestro.composers.models import ComposerProfile
from maestro.conversation.models import Message
from maestro.exceptions import GeneratorFailureError
from maestro.generation.base import ResponseGenerator


class ScriptedResponseGenerator(ResponseGenerator):
    """Answer from the composer profile by matching keywords."""

    def __init__(self) -> None:
        self._profile: ComposerProfile | None = None

    async def initialize(
        self, profile: ComposerProfile, prior_transcript: list[Message]  # noqa: ARG002
    ) -> None:
        self._profile = profile

    async def generate_reply(self, user_text: str) -> str:
        profile = self._profile
        if profile is None:
            raise GeneratorFailureError("Generator not initialized with a composer")

        lowered = user_text.lower()
        works = profile.famous_works

        if works and ("work" in lowered or "composition" in lowered):
            return (
                f"As {profile.name}, my most famous works include {', '.join(works)}. "
                f"Each composition reflects my style from the {profile.primary_era} period."
            )

        if profile.birth_year is not None and ("life" in lowered or "born" in lowered):
            place = f" in {profile.country}" if profile.country else ""
            until = (
                f"lived until {profile.death_year}"
                if profile.death_year is not None
                else "am still composing"
            )
            first_sentence = profile.bio.split(".")[0].strip()
            reply = f"I was born in {profile.birth_year}{place} and {until}."
            return f"{reply} {first_sentence}." if first_sentence else reply

        if "style" in lowered or "music" in lowered:
            sentences = [s.strip() for s in profile.bio.split(".") if s.strip()]
            detail = (
                sentences[1]
                if len(sentences) > 1
                else "My compositions were known for their technical innovation and emotional depth"
            )
            return (
                f"My musical style is characteristic of the {profile.primary_era} era. "
                f"{detail}."
            )

        known_for = f", known for {works[0]}" if works else ""
        return (
            "Thank you for your interest in my work. I was a composer from the "
            f"{profile.primary_era} era{known_for}. Is there anything specific about "
            "my compositions or life you would like to know?"
        )
