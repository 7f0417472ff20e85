"""In-memory implementation of BlobStore."""

import json
from typing import Any

from maestro.exceptions import StoreUnavailableError
from maestro.storage.store import BlobStore


class InMemoryBlobStore(BlobStore):
    """In-memory implementation of BlobStore for testing and degraded mode.

    Values are stored as serialized JSON text so readers never share
    mutable objects with writers, the same as a real serializing store.
    Nothing survives the process.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        """Initialize storage, optionally seeded with values."""
        self._blobs: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._blobs[key] = self._dump(key, value)

    @staticmethod
    def _dump(key: str, value: Any) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreUnavailableError(
                f"Value for {key!r} is not JSON serializable: {e}", key=key, cause=e
            ) from e

    async def get(self, key: str) -> Any | None:
        data = self._blobs.get(key)
        if data is None:
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any) -> None:
        self._blobs[key] = self._dump(key, value)

    async def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        """Return a decoded copy of every stored blob."""
        return {key: json.loads(data) for key, data in self._blobs.items()}
