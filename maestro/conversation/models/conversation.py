"""Conversation and message models."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from maestro.conversation.models.enums import Sender


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid4())


class Message(BaseModel):
    """A single message in a conversation.

    Messages are owned by their conversation and never edited after
    they are appended.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Unique identifier")
    text: str = Field(..., description="User-visible content")
    sender: Sender = Field(..., description="Who wrote the message")
    timestamp: datetime = Field(default_factory=utc_now, description="Logical send time")

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message text must not be empty")
        return value

    @field_validator("sender", mode="before")
    @classmethod
    def _normalize_sender(cls, value: Any) -> Any:
        # Older stores wrote the composer's messages as "composer"
        if value == "composer":
            return Sender.ASSISTANT
        return value


class Conversation(BaseModel):
    """Durable record of one chat thread with a subject.

    Serialized with camelCase keys (`subjectId`, `lastUpdated`,
    `createdAt`) under the `conversations` store key.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=new_id, description="Unique identifier")
    subject_id: str = Field(..., alias="subjectId", description="Composer id")
    messages: list[Message] = Field(default_factory=list, description="Append-only log")
    last_updated: datetime = Field(
        default_factory=utc_now, alias="lastUpdated", description="Most recent append"
    )
    created_at: datetime = Field(
        default_factory=utc_now, alias="createdAt", description="Creation time"
    )

    @field_validator("subject_id")
    @classmethod
    def _subject_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("subject_id must not be empty")
        return value

    def to_blob(self) -> dict[str, Any]:
        """Serialize to the JSON structure kept in the durable store."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_blob(cls, data: dict[str, Any]) -> "Conversation":
        """Rebuild a conversation from its stored JSON structure."""
        return cls.model_validate(data)
