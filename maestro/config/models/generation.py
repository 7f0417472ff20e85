"""Response generation configuration."""

from typing import Literal

from pydantic import BaseModel, Field

GeneratorType = Literal["scripted", "llm"]


class GenerationConfig(BaseModel):
    """Which generator answers in the composer's voice, and how."""

    provider: GeneratorType = Field(
        default="scripted",
        description="Offline keyword responder or an LLM-backed generator",
    )
    model: str = Field(
        default="google/gemini-2.0-flash",
        description="Model string routed by the LLM executor",
    )
    fallback_models: list[str] = Field(
        default_factory=list,
        description="Models tried in order if the primary fails",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=800, gt=0)
    reply_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on a single reply generation",
    )
