"""Redis implementation of BlobStore.

Key structure:
- {prefix}:{key} - JSON encoded blob
"""

import json
from typing import Any

import redis.asyncio as redis

from maestro.exceptions import StoreUnavailableError
from maestro.observability.logging import get_logger
from maestro.storage.store import BlobStore

logger = get_logger(__name__)


class RedisBlobStore(BlobStore):
    """Redis implementation of BlobStore.

    Every blob is a plain string value; there is no TTL because the
    conversation history must survive restarts.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "maestro") -> None:
        """Initialize Redis blob store.

        Args:
            client: Redis client instance
            key_prefix: Namespace prepended to every key
        """
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "maestro") -> "RedisBlobStore":
        """Create a store with a client connected to url."""
        return cls(redis.from_url(url, decode_responses=True), key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> Any | None:
        try:
            data = await self._client.get(self._key(key))
        except redis.RedisError as e:
            logger.error("redis_get_error", key=key, error=str(e))
            raise StoreUnavailableError(
                f"Failed to get {key!r}: {e}", key=key, cause=e
            ) from e

        if data is None:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            logger.error("redis_decode_error", key=key, error=str(e))
            raise StoreUnavailableError(
                f"Corrupt blob under {key!r}: {e}", key=key, cause=e
            ) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            data = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreUnavailableError(
                f"Value for {key!r} is not JSON serializable: {e}", key=key, cause=e
            ) from e

        try:
            await self._client.set(self._key(key), data)
        except redis.RedisError as e:
            logger.error("redis_set_error", key=key, error=str(e))
            raise StoreUnavailableError(
                f"Failed to set {key!r}: {e}", key=key, cause=e
            ) from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except redis.RedisError as e:
            logger.error("redis_delete_error", key=key, error=str(e))
            raise StoreUnavailableError(
                f"Failed to delete {key!r}: {e}", key=key, cause=e
            ) from e

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
