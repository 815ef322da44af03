"""
Client Module - Records backend and Redis clients

Provides singleton instances of:
- Async records client (products, orders, reviews, users)
- Upstash Redis client for durable carts
- The cart storage selected by CART_STORAGE
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from storefront.config import get_settings


_records_client = None
_redis_client: Optional[AsyncRedis] = None
_cart_storage = None


def get_records_client():
    """
    Get async records client (singleton).

    Requires RECORDS_URL (or POCKETBASE_URL).
    """
    global _records_client

    if _records_client is None:
        from storefront.services.records import RecordsClient

        settings = get_settings()
        if not settings.records_url:
            raise ValueError("RECORDS_URL must be set")
        _records_client = RecordsClient(settings.records_url, timeout=settings.http_timeout)

    return _records_client


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


def get_cart_storage():
    """Get the configured cart storage (singleton)."""
    global _cart_storage

    if _cart_storage is None:
        from storefront.cart.storage import FileCartStorage, MemoryCartStorage, RedisCartStorage

        settings = get_settings()
        if settings.cart_storage == "file":
            _cart_storage = FileCartStorage(settings.cart_file_dir)
        elif settings.cart_storage == "memory":
            _cart_storage = MemoryCartStorage()
        else:
            _cart_storage = RedisCartStorage(ttl=settings.cart_ttl_seconds or None)

    return _cart_storage


def reset_clients() -> None:
    """Drop cached singletons (used when settings change, e.g. in tests)."""
    global _records_client, _redis_client, _cart_storage
    _records_client = None
    _redis_client = None
    _cart_storage = None
    get_settings.cache_clear()


class RedisKeys:
    """Key names for durable client-side slots."""

    CART = "cart"  # cart or cart:{scope}

    @staticmethod
    def cart_key(scope: str | None = None) -> str:
        return f"{RedisKeys.CART}:{scope}" if scope else RedisKeys.CART


class TTL:
    """Time-to-live constants (seconds)."""

    CART = 2592000  # 30 days
