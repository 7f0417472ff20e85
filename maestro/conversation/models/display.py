"""Models published to the display layer."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from maestro.conversation.models.conversation import Message, new_id, utc_now
from maestro.conversation.models.enums import MessageStatus, NotificationKind, SessionPhase


class DisplayMessage(BaseModel):
    """A message as shown, with its persistence status."""

    model_config = ConfigDict(frozen=True)

    message: Message
    status: MessageStatus = MessageStatus.CONFIRMED


class DisplayState(BaseModel):
    """Authoritative snapshot of what the transcript view shows."""

    model_config = ConfigDict(frozen=True)

    subject_id: str | None = None
    conversation_id: str | None = None
    phase: SessionPhase = SessionPhase.UNINITIALIZED
    generation: int = 0
    messages: tuple[DisplayMessage, ...] = ()
    introduction: str | None = None

    @property
    def texts(self) -> list[str]:
        return [m.message.text for m in self.messages]


class Notification(BaseModel):
    """One-shot notice such as an eviction."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    kind: NotificationKind
    subject_id: str | None = None
    text: str
    created_at: datetime = Field(default_factory=utc_now)
