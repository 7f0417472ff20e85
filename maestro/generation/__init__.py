"""Response generation in the voice of a composer."""

from maestro.generation.base import ResponseGenerator
from maestro.generation.llm import LLMResponseGenerator
from maestro.generation.prompt_builder import PromptBuilder
from maestro.generation.scripted import ScriptedResponseGenerator

__all__ = [
    "LLMResponseGenerator",
    "PromptBuilder",
    "ResponseGenerator",
    "ScriptedResponseGenerator",
]
