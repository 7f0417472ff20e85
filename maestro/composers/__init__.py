"""Composer profiles and composer-voiced stock phrases."""

from maestro.composers.models import ComposerProfile
from maestro.composers.phrases import (
    greeting_for,
    introduction_for,
    placeholder_reply,
)

__all__ = [
    "ComposerProfile",
    "greeting_for",
    "introduction_for",
    "placeholder_reply",
]
