"""File-backed implementation of BlobStore using TinyDB.

All keys share one TinyDB JSON document database; each key is a single
document `{"key": ..., "value": ...}`. TinyDB's default JSONStorage reads
the file on every query, so writes made by another process are always
observed.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from tinydb import Query, TinyDB

from maestro.exceptions import StoreUnavailableError
from maestro.observability.logging import get_logger
from maestro.storage.store import BlobStore

logger = get_logger(__name__)

T = TypeVar("T")

Entry = Query()


class FileBlobStore(BlobStore):
    """TinyDB database file holding one document per key.

    TinyDB is synchronous and not thread-safe, so every call runs in a
    worker thread while holding the store's lock.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: Database file; a `.json` suffix is added when missing
        """
        path = Path(path)
        if path.suffix != ".json":
            path = path.with_name(path.name + ".json")
        self._path = path
        self._db: TinyDB | None = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _database(self) -> TinyDB:
        if self._db is None:
            self._db = TinyDB(self._path, create_dirs=True)
        return self._db

    async def _run(self, operation: str, key: str | None, call: Callable[[], T]) -> T:
        async with self._lock:
            try:
                return await asyncio.to_thread(call)
            except (OSError, ValueError, TypeError) as e:
                # JSONDecodeError is a ValueError; unserializable values raise TypeError
                logger.error(
                    "file_store_error",
                    operation=operation,
                    key=key,
                    path=str(self._path),
                    error=str(e),
                )
                raise StoreUnavailableError(
                    f"File store {operation} failed for {key!r}: {e}", key=key, cause=e
                ) from e

    async def get(self, key: str) -> Any | None:
        def read() -> Any | None:
            document = self._database().get(Entry.key == key)
            return None if document is None else document["value"]

        return await self._run("get", key, read)

    async def set(self, key: str, value: Any) -> None:
        await self._run(
            "set",
            key,
            lambda: self._database().upsert({"key": key, "value": value}, Entry.key == key),
        )

    async def delete(self, key: str) -> None:
        await self._run("delete", key, lambda: self._database().remove(Entry.key == key))

    async def close(self) -> None:
        """Release the database file handle."""
        if self._db is not None:
            db, self._db = self._db, None
            await asyncio.to_thread(db.close)
