"""
Tests for cart storage backends
"""

from unittest.mock import AsyncMock

import pytest
from storefront.cart import CartStore, FileCartStorage, RedisCartStorage
from storefront.db import RedisKeys
from storefront.errors import CartStorageError


class TestFileCartStorage:

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        storage = FileCartStorage(tmp_path / "carts")

        assert await storage.read("cart") is None
        await storage.write("cart", "[]")
        assert await storage.read("cart") == "[]"

        await storage.delete("cart")
        await storage.delete("cart")
        assert await storage.read("cart") is None

    def test_key_is_sanitized(self, tmp_path):
        storage = FileCartStorage(tmp_path)

        path = storage.path_for("cart:../../etc")

        assert path.parent == tmp_path
        assert "/" not in path.name

    @pytest.mark.asyncio
    async def test_cart_survives_restart(self, tmp_path, sample_product):
        store = CartStore(FileCartStorage(tmp_path))
        await store.add_to_cart(sample_product, 2)

        restarted = CartStore(FileCartStorage(tmp_path))
        cart = await restarted.load()

        assert cart.count == 2


class TestRedisCartStorage:

    @pytest.mark.asyncio
    async def test_write_sets_ttl(self):
        redis = AsyncMock()
        storage = RedisCartStorage(redis=redis, ttl=60)

        await storage.write("cart", "[]")

        redis.set.assert_awaited_once_with("cart", "[]", ex=60)

    @pytest.mark.asyncio
    async def test_write_without_ttl(self):
        redis = AsyncMock()
        storage = RedisCartStorage(redis=redis, ttl=None)

        await storage.write("cart", "[]")

        redis.set.assert_awaited_once_with("cart", "[]")

    @pytest.mark.asyncio
    async def test_read_decodes_bytes(self):
        redis = AsyncMock()
        redis.get.return_value = b"[]"
        storage = RedisCartStorage(redis=redis)

        assert await storage.read("cart") == "[]"

    @pytest.mark.asyncio
    async def test_errors_are_wrapped(self):
        redis = AsyncMock()
        redis.set.side_effect = ConnectionError("unreachable")
        storage = RedisCartStorage(redis=redis)

        with pytest.raises(CartStorageError):
            await storage.write("cart", "[]")

    @pytest.mark.asyncio
    async def test_missing_configuration(self, monkeypatch):
        def not_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")

        monkeypatch.setattr("storefront.cart.storage.get_redis", not_configured)
        storage = RedisCartStorage()

        with pytest.raises(CartStorageError):
            await storage.read("cart")


def test_cart_key():
    assert RedisKeys.cart_key() == "cart"
    assert RedisKeys.cart_key("abc") == "cart:abc"
