"""Durable key-value slots for the serialized cart."""
import asyncio
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from storefront.db import get_redis, RedisKeys, TTL
from storefront.errors import CartStorageError
from storefront.logging import get_logger

logger = get_logger(__name__)

# Fixed slot name for the cart record
CART_KEY = RedisKeys.CART


class CartStorage(ABC):
    """Async key-value slot holding one serialized cart per key."""

    @abstractmethod
    async def read(self, key: str) -> Optional[str]:
        """Return the stored payload or None if the slot is empty."""

    @abstractmethod
    async def write(self, key: str, payload: str) -> None:
        """Replace the payload. Raises CartStorageError on failure."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Empty the slot. Deleting an empty slot is not an error."""


class MemoryCartStorage(CartStorage):
    """Process-local storage; durable only for the life of the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def write(self, key: str, payload: str) -> None:
        self.data[key] = payload

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class RedisCartStorage(CartStorage):
    """Upstash Redis storage with a TTL refreshed on every write."""

    def __init__(self, redis=None, ttl: Optional[int] = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise CartStorageError(f"Redis not available: {e}") from e
        return self._redis

    async def read(self, key: str) -> Optional[str]:
        try:
            data = await self.redis.get(key)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to read cart from Redis: {e}")
            raise CartStorageError(f"Cart storage unavailable: {e}") from e
        if data is None:
            return None
        return data.decode("utf-8") if isinstance(data, bytes) else str(data)

    async def write(self, key: str, payload: str) -> None:
        try:
            if self.ttl:
                await self.redis.set(key, payload, ex=self.ttl)
            else:
                await self.redis.set(key, payload)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise CartStorageError(f"Cart storage unavailable: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to clear cart from Redis: {e}")
            raise CartStorageError(f"Cart storage unavailable: {e}") from e


_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileCartStorage(CartStorage):
    """One JSON file per key under a local directory."""

    def __init__(self, directory: str | os.PathLike):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_FILENAME_CHARS.sub('_', key)}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(payload, encoding="utf-8")
        # Readers never see a half-written file
        os.replace(tmp, path)

    def _delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    async def read(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, key)
        except OSError as e:
            logger.error(f"Failed to read cart file: {e}")
            raise CartStorageError(f"Cart storage unavailable: {e}") from e

    async def write(self, key: str, payload: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, payload)
        except OSError as e:
            logger.error(f"Failed to write cart file: {e}")
            raise CartStorageError(f"Cart storage unavailable: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete, key)
        except OSError as e:
            logger.error(f"Failed to delete cart file: {e}")
            raise CartStorageError(f"Cart storage unavailable: {e}") from e


__all__ = [
    "CART_KEY",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "FileCartStorage",
]
