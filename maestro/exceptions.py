"""Exception hierarchy for the conversation core.

All errors inherit from MaestroError, which carries a human readable
message. Store and generator failures are recovered locally by the
session layer; ConversationNotFoundError is always surfaced to the caller.
"""


class MaestroError(Exception):
    """Base exception for all Maestro errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConversationNotFoundError(MaestroError):
    """Raised when a conversation id does not resolve to a stored record."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class StoreUnavailableError(MaestroError):
    """Raised when the durable store cannot be read or written."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.cause = cause


class GeneratorFailureError(MaestroError):
    """Raised when the response generator rejects or times out."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class MessageNotSentError(MaestroError):
    """Raised when a user message could not be persisted after a retry."""

    def __init__(self, subject_id: str, message_id: str) -> None:
        super().__init__(f"Message {message_id} for {subject_id} was not sent")
        self.subject_id = subject_id
        self.message_id = message_id
