"""Account Domain Service - order history and order confirmation lookups."""
from typing import Optional

from storefront.errors import ERROR_ORDER_NOT_FOUND, ERROR_ORDERS_UNAVAILABLE, RecordsError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.models import Order, User
from storefront.services.notifications import NotificationCenter
from storefront.services.repositories import OrderRepository

logger = get_logger(__name__)


class AccountService:
    def __init__(self, orders: OrderRepository, notifications: NotificationCenter | None = None):
        self.orders = orders
        self.notifications = notifications or NotificationCenter()

    async def order_history(self, user: User, limit: int = 50) -> list[Order]:
        try:
            return await self.orders.list_for_customer(user.id, limit)
        except RecordsError as e:
            logger.error(f"Failed to fetch orders: {e}")
            self.notifications.error(ERROR_ORDERS_UNAVAILABLE)
            return []

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Load one order for the confirmation view when it was not handed over by checkout."""
        if not order_id:
            return None
        try:
            order = await self.orders.get_by_id(order_id)
        except RecordsError as e:
            logger.error(f"Failed to fetch order {sanitize_id_for_logging(order_id)}: {e}")
            self.notifications.error(ERROR_ORDERS_UNAVAILABLE)
            return None
        if order is None:
            self.notifications.error(ERROR_ORDER_NOT_FOUND)
        return order
