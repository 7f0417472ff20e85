"""Store doubles shared across tests."""

import asyncio

from maestro.storage import InMemoryBlobStore


class YieldingBlobStore(InMemoryBlobStore):
    """In-memory store that suspends on every call, like real I/O."""

    async def get(self, key):
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key, value):
        await asyncio.sleep(0)
        await super().set(key, value)
