"""BlobStore wrapper that degrades to memory when the durable store fails."""

from typing import Any

from maestro.exceptions import StoreUnavailableError
from maestro.observability.logging import get_logger
from maestro.storage.store import BlobStore
from maestro.storage.stores.inmemory import InMemoryBlobStore

logger = get_logger(__name__)


class ResilientBlobStore(BlobStore):
    """Delegate to a primary store until it fails, then stay in memory.

    On the first StoreUnavailableError the wrapper switches, for the rest
    of the process, to an InMemoryBlobStore seeded with the last value it
    saw for every key. The session keeps working; history written after
    the switch will not survive a restart.
    """

    def __init__(self, primary: BlobStore) -> None:
        self._primary = primary
        self._fallback: InMemoryBlobStore | None = None
        self._last_seen: dict[str, Any] = {}

    @property
    def degraded(self) -> bool:
        """True once the primary store has failed."""
        return self._fallback is not None

    @property
    def primary(self) -> BlobStore:
        return self._primary

    def _degrade(self, error: StoreUnavailableError, operation: str) -> InMemoryBlobStore:
        logger.warning(
            "store_unavailable_degraded",
            operation=operation,
            key=error.key,
            error=error.message,
            primary=type(self._primary).__name__,
        )
        self._fallback = InMemoryBlobStore(self._last_seen)
        return self._fallback

    async def get(self, key: str) -> Any | None:
        if self._fallback is not None:
            return await self._fallback.get(key)
        try:
            value = await self._primary.get(key)
        except StoreUnavailableError as e:
            return await self._degrade(e, "get").get(key)
        self._remember(key, value)
        return value

    async def set(self, key: str, value: Any) -> None:
        if self._fallback is not None:
            await self._fallback.set(key, value)
            return
        try:
            await self._primary.set(key, value)
        except StoreUnavailableError as e:
            fallback = self._degrade(e, "set")
            # Unserializable values fail the same way in memory and propagate.
            await fallback.set(key, value)
            return
        self._remember(key, value)

    async def delete(self, key: str) -> None:
        if self._fallback is not None:
            await self._fallback.delete(key)
            return
        try:
            await self._primary.delete(key)
        except StoreUnavailableError as e:
            self._last_seen.pop(key, None)
            await self._degrade(e, "delete").delete(key)
            return
        self._last_seen.pop(key, None)

    def _remember(self, key: str, value: Any) -> None:
        if value is None:
            self._last_seen.pop(key, None)
        else:
            self._last_seen[key] = value
