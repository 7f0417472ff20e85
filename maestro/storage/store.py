"""BlobStore abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

CONVERSATIONS_KEY = "conversations"
ACTIVE_SESSIONS_KEY = "activeSessions"


class BlobStore(ABC):
    """Abstract interface for a key to JSON-blob store.

    Values are JSON-compatible Python values (dicts, lists, strings,
    numbers, booleans, None). Implementations raise StoreUnavailableError
    when the underlying medium cannot be read or written.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Get the blob stored under key, or None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Replace the blob stored under key."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        pass

    @property
    def degraded(self) -> bool:
        """True when writes are no longer reaching durable storage."""
        return False
