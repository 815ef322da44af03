"""Cart package: models, storage, and store."""
from .models import CartLineItem, Cart
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage, FileCartStorage
from .service import CartStore, get_cart_store

__all__ = [
    "CartLineItem",
    "Cart",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "FileCartStorage",
    "CartStore",
    "get_cart_store",
]
