"""Blob store implementations."""

from maestro.storage.stores.file import FileBlobStore
from maestro.storage.stores.inmemory import InMemoryBlobStore
from maestro.storage.stores.redis import RedisBlobStore
from maestro.storage.stores.resilient import ResilientBlobStore

__all__ = [
    "FileBlobStore",
    "InMemoryBlobStore",
    "RedisBlobStore",
    "ResilientBlobStore",
]
