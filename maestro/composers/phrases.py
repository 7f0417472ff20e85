"""Deterministic composer-voiced text.

Greetings, introductions and the fallback reply used whenever the
response generator cannot produce one.
"""

from maestro.composers.models import ComposerProfile

GREETINGS: dict[str, str] = {
    "German": "Guten Tag",
    "Austrian": "Grüß Gott",
    "Italian": "Buongiorno",
    "French": "Bonjour",
    "Russian": "Здравствуйте",
    "Polish": "Dzień dobry",
    "Czech": "Dobrý den",
    "Hungarian": "Jó napot",
    "English": "Good day",
    "American": "Good day",
    "Danish": "God dag",
    "Spanish": "Buenos días",
}

DEFAULT_GREETING = "Greetings"


def greeting_for(nationality: str) -> str:
    """Greeting in the composer's language."""
    return GREETINGS.get(nationality, DEFAULT_GREETING)


def introduction_for(profile: ComposerProfile) -> str:
    """Opening line shown above a fresh transcript."""
    return (
        f"Hello, I am {profile.name}. As a composer of the {profile.era_label} era, "
        "I created works that reflected the musical aesthetics and cultural context "
        "of my time. How may I assist you in learning about my music and life?"
    )


def placeholder_reply(profile: ComposerProfile) -> str:
    """Fallback reply persisted when generation fails."""
    greeting = greeting_for(profile.nationality)
    if profile.famous_works:
        topic = f"my work *{profile.famous_works[0]}*"
    else:
        topic = "my music"
    return (
        f"{greeting}! I apologize for the technical difficulty. As {profile.name}, "
        f"I would be delighted to discuss {topic} or my experiences during the "
        f"{profile.primary_era} period. What would you like to know?"
    )
