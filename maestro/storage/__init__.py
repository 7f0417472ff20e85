"""Durable key-addressed JSON blob stores.

Every collection the conversation core persists lives under a single
string key and is rewritten whole on each mutation.
"""

from maestro.storage.store import ACTIVE_SESSIONS_KEY, CONVERSATIONS_KEY, BlobStore
from maestro.storage.stores import (
    FileBlobStore,
    InMemoryBlobStore,
    RedisBlobStore,
    ResilientBlobStore,
)

__all__ = [
    "ACTIVE_SESSIONS_KEY",
    "CONVERSATIONS_KEY",
    "BlobStore",
    "FileBlobStore",
    "InMemoryBlobStore",
    "RedisBlobStore",
    "ResilientBlobStore",
]
