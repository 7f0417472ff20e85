"""Enums for the conversation domain."""

from enum import Enum


class Sender(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, Enum):
    """Persistence state of a displayed message."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class SessionPhase(str, Enum):
    """Lifecycle of the displayed subject."""

    UNINITIALIZED = "uninitialized"
    RESOLVING = "resolving"
    READY = "ready"
    AWAITING_REPLY = "awaiting_reply"


class NotificationKind(str, Enum):
    """One-shot notices surfaced to the display layer."""

    EVICTED = "evicted"
    MESSAGE_NOT_SENT = "message_not_sent"
    STORAGE_DEGRADED = "storage_degraded"
