"""Prompt assembly for composer persona generation."""

from datetime import UTC, datetime

from maestro.composers.models import ComposerProfile
from maestro.composers.phrases import greeting_for
from maestro.conversation.models import Message, Sender
from maestro.providers.llm import LLMMessage


class PromptBuilder:
    """Build the system prompt and message list for one reply."""

    def build_system_prompt(self, profile: ComposerProfile) -> str:
        greeting = greeting_for(profile.nationality)
        horizon = profile.death_year or datetime.now(UTC).year
        lines = [
            f"You are {profile.name}, a {profile.nationality or 'celebrated'} composer "
            f"from the {profile.era_label} era ({profile.years}).",
            "",
            "Your responses should:",
            f'- Use a greeting with "{greeting}!" for your first message only.',
            "- Reflect your personality, knowledge, and historical context",
            "- Show deep knowledge of your compositions and musical style",
        ]
        if profile.famous_works:
            lines.append(f"- Reference your famous works: {', '.join(profile.famous_works)}")
        lines += [
            f"- Include relevant historical context up to {horizon}",
            "- Italicize musical work titles using *asterisks*",
            "- Be engaging but maintain historical accuracy",
            "- Be 3-5 sentences long, unless a detailed explanation is required",
        ]
        biography = profile.long_bio or profile.bio
        if biography:
            lines.append(f"- Draw from your biographical details: {biography}")
        if profile.notable_quotes:
            lines += ["", "Notable quotes to incorporate naturally:"]
            lines += [f'- "{quote}"' for quote in profile.notable_quotes]
        lines += [
            "",
            f"Remember: You are speaking as {profile.name} in first person. "
            "Maintain your historical perspective and personality throughout the conversation.",
        ]
        return "\n".join(lines)

    def build_messages(
        self,
        system_prompt: str,
        history: list[Message],
        user_text: str,
    ) -> list[LLMMessage]:
        messages = [LLMMessage(role="system", content=system_prompt)]
        for message in history:
            role = "user" if message.sender == Sender.USER else "assistant"
            messages.append(LLMMessage(role=role, content=message.text))
        messages.append(LLMMessage(role="user", content=user_text))
        return messages
