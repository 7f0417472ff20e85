"""Conversation domain models.

Contains all Pydantic models for conversation state:
- Messages and Conversations kept in the durable store
- DisplayState and Notifications published to the display layer
"""

from maestro.conversation.models.conversation import Conversation, Message, new_id, utc_now
from maestro.conversation.models.display import DisplayMessage, DisplayState, Notification
from maestro.conversation.models.enums import (
    MessageStatus,
    NotificationKind,
    SessionPhase,
    Sender,
)

__all__ = [
    # Enums
    "MessageStatus",
    "NotificationKind",
    "SessionPhase",
    "Sender",
    # Stored models
    "Conversation",
    "Message",
    # Display models
    "DisplayMessage",
    "DisplayState",
    "Notification",
    # Helpers
    "new_id",
    "utc_now",
]
