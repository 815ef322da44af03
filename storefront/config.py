"""Environment-driven settings for the storefront core."""
import os
from dataclasses import dataclass
from decimal import Decimal
from functools import cache
from typing import Optional


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    for key in keys:
        value = os.environ.get(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    value = _get_env(*keys)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{keys[0]} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    records_url: str
    redis_url: str
    redis_token: str
    cart_storage: str  # redis | file | memory
    cart_file_dir: str
    cart_scope: str
    cart_ttl_seconds: int
    catalog_per_page: int
    tax_rate: Decimal
    http_timeout: float


def load_settings() -> Settings:
    """Read settings from the environment (uncached)."""
    cart_storage = (_get_env("CART_STORAGE", default="redis") or "redis").lower()
    if cart_storage not in ("redis", "file", "memory"):
        raise ValueError(f"CART_STORAGE must be redis, file or memory, got {cart_storage!r}")

    per_page = _get_int("CATALOG_PER_PAGE", default=12)
    if per_page < 1:
        raise ValueError("CATALOG_PER_PAGE must be positive")

    return Settings(
        records_url=(_get_env("RECORDS_URL", "POCKETBASE_URL", default="") or "").rstrip("/"),
        # Upstash uses REST_URL and REST_TOKEN
        redis_url=_get_env("UPSTASH_REDIS_REST_URL", default="") or "",
        redis_token=_get_env("UPSTASH_REDIS_REST_TOKEN", default="") or "",
        cart_storage=cart_storage,
        cart_file_dir=_get_env("CART_FILE_DIR", default=".storefront") or ".storefront",
        cart_scope=_get_env("CART_SCOPE", default="") or "",
        cart_ttl_seconds=_get_int("CART_TTL_SECONDS", default=2592000),  # 30 days
        catalog_per_page=per_page,
        tax_rate=Decimal(_get_env("TAX_RATE", default="0.08") or "0.08"),
        http_timeout=float(_get_env("RECORDS_HTTP_TIMEOUT", default="10") or "10"),
    )


@cache
def get_settings() -> Settings:
    """Get process-wide settings (read once)."""
    return load_settings()
