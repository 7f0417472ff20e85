"""Tests for RedisBlobStore against a mocked client."""

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from maestro.exceptions import StoreUnavailableError
from maestro.storage import RedisBlobStore


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def redis_store(client) -> RedisBlobStore:
    return RedisBlobStore(client, key_prefix="test")


class TestRedisBlobStore:
    """Tests for key namespacing, JSON encoding and error mapping."""

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, redis_store, client):
        client.get.return_value = '["bach", "vivaldi"]'

        assert await redis_store.get("activeSessions") == ["bach", "vivaldi"]
        client.get.assert_awaited_once_with("test:activeSessions")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, redis_store, client):
        client.get.return_value = None
        assert await redis_store.get("conversations") is None

    @pytest.mark.asyncio
    async def test_set_encodes_json(self, redis_store, client):
        await redis_store.set("activeSessions", ["bach"])
        client.set.assert_awaited_once_with("test:activeSessions", '["bach"]')

    @pytest.mark.asyncio
    async def test_delete_uses_prefixed_key(self, redis_store, client):
        await redis_store.delete("conversations")
        client.delete.assert_awaited_once_with("test:conversations")

    @pytest.mark.asyncio
    async def test_redis_error_maps_to_store_unavailable(self, redis_store, client):
        client.set.side_effect = redis.ConnectionError("down")

        with pytest.raises(StoreUnavailableError) as exc_info:
            await redis_store.set("conversations", [])
        assert isinstance(exc_info.value.cause, redis.ConnectionError)

    @pytest.mark.asyncio
    async def test_corrupt_blob_maps_to_store_unavailable(self, redis_store, client):
        client.get.return_value = "{oops"
        with pytest.raises(StoreUnavailableError):
            await redis_store.get("conversations")
