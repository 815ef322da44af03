"""Order Repository - Order operations."""
from typing import Any, Optional

from .base import BaseRepository
from storefront.catalog.query import eq
from storefront.errors import RecordsError
from storefront.services.models import Order

COLLECTION = "orders"


class OrderRepository(BaseRepository):
    """Order records operations."""

    async def create(self, data: dict[str, Any]) -> Order:
        """Create new order."""
        record = await self.client.create(COLLECTION, data)
        return Order(**record)

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        """Get order by ID (None when the backend has no such record)."""
        try:
            record = await self.client.get_one(COLLECTION, order_id)
        except RecordsError as e:
            if e.status == 404:
                return None
            raise
        return Order(**record)

    async def list_for_customer(self, customer_id: str, limit: int = 50) -> list[Order]:
        """Customer's orders, newest first."""
        result = await self.client.get_list(
            COLLECTION,
            page=1,
            per_page=limit,
            filter=eq("customer_id", customer_id),
            sort="-created",
        )
        return [Order(**r) for r in result.get("items", [])]
