"""Capacity-bounded, most-recently-used ordered set of active subjects.

The set knows nothing about conversations. When a touch pushes a subject
off the end, the evicted id is reported back and the caller cascades the
delete. Recency moves only on touch, which the session layer calls once
per user-authored message; merely viewing a subject never reorders it.
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, Field

from maestro.observability.logging import get_logger
from maestro.storage.store import ACTIVE_SESSIONS_KEY, BlobStore

logger = get_logger(__name__)

DEFAULT_CAPACITY = 5


class TouchResult(BaseModel):
    """Outcome of a touch."""

    activated: list[str] = Field(default_factory=list, description="Members, MRU first")
    evicted: str | None = Field(default=None, description="Member pushed off the end")
    overflow: list[str] = Field(
        default_factory=list,
        description="Members cut when a stored list exceeded capacity",
    )


def normalize_members(members: list[str], capacity: int) -> tuple[list[str], list[str]]:
    """Drop duplicates (keeping first occurrence) and truncate to capacity.

    Returns:
        (kept members, members cut by truncation)
    """
    seen: set[str] = set()
    unique: list[str] = []
    for member in members:
        if member not in seen:
            seen.add(member)
            unique.append(member)
    return unique[:capacity], unique[capacity:]


def apply_touch(
    members: list[str], subject_id: str, capacity: int
) -> tuple[list[str], str | None]:
    """Move subject_id to the front, evicting the last member if over capacity.

    Assumes members is already duplicate-free and within capacity, so at
    most one member can fall off.
    """
    if capacity < 1:
        raise ValueError("capacity must be at least 1")
    updated = [subject_id, *(m for m in members if m != subject_id)]
    evicted: str | None = None
    if len(updated) > capacity:
        evicted = updated.pop()
    return updated, evicted


class ActiveSessionSet:
    """Persisted LRU policy over subject identifiers.

    Each mutation is one read-modify-write of the `activeSessions` key
    under a lock, so the capacity bound holds after every call.
    """

    def __init__(
        self,
        store: BlobStore,
        capacity: int = DEFAULT_CAPACITY,
        key: str = ACTIVE_SESSIONS_KEY,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._store = store
        self._capacity = capacity
        self._key = key
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    async def touch(self, subject_id: str) -> TouchResult:
        """Mark subject_id most recently used."""
        if not subject_id:
            raise ValueError("subject_id must not be empty")

        async with self._lock:
            members, overflow = normalize_members(await self._load(), self._capacity)
            updated, evicted = apply_touch(members, subject_id, self._capacity)
            await self._store.set(self._key, updated)

        if evicted is not None:
            logger.info("subject_evicted", subject_id=evicted, capacity=self._capacity)
        if overflow:
            logger.warning("active_sessions_overflow_trimmed", subjects=overflow)
        logger.debug("subject_touched", subject_id=subject_id, size=len(updated))

        return TouchResult(activated=updated, evicted=evicted, overflow=overflow)

    async def remove(self, subject_id: str) -> None:
        """Remove subject_id if present."""
        async with self._lock:
            members = await self._load()
            if subject_id not in members:
                return
            await self._store.set(self._key, [m for m in members if m != subject_id])
        logger.info("subject_removed", subject_id=subject_id)

    async def clear(self) -> None:
        """Empty the set."""
        async with self._lock:
            await self._store.set(self._key, [])
        logger.info("active_sessions_cleared")

    async def list(self) -> list[str]:
        """Current membership, most recently used first."""
        members, _ = normalize_members(await self._load(), self._capacity)
        return members

    async def contains(self, subject_id: str) -> bool:
        return subject_id in await self.list()

    async def remaining(self) -> int:
        """Free slots before the next new subject evicts another."""
        return self._capacity - len(await self.list())

    async def _load(self) -> list[str]:
        data = await self._store.get(self._key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("active_sessions_blob_malformed", type=type(data).__name__)
            return []
        return [m for m in data if isinstance(m, str) and m]
