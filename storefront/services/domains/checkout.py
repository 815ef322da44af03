"""
Checkout Domain Service

Totals the cart, submits the payment element, records the order and
empties the cart. The cart is cleared only once the order exists.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from storefront.cart import CartStore
from storefront.config import get_settings
from storefront.errors import (
    ERROR_CART_EMPTY,
    ERROR_ORDER_FAILED,
    ERROR_PAYMENT_FAILED,
    CartStorageError,
    RecordsError,
)
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_text_for_logging
from storefront.services.models import Order, User
from storefront.services.money import multiply, round_money, to_decimal, to_float
from storefront.services.notifications import NotificationCenter
from storefront.services.payments import PaymentElement
from storefront.services.repositories import OrderRepository

logger = get_logger(__name__)

GUEST_CUSTOMER_ID = "guest"


class CustomerDetails(BaseModel):
    """Contact and shipping details entered on the checkout form."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


@dataclass
class CheckoutSummary:
    """Cart totals. Values are exact; round with format_money for display."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int


@dataclass
class CheckoutResult:
    """Checkout outcome."""

    success: bool
    order: Optional[Order] = None
    reason: Optional[str] = None


class CheckoutService:
    """Checkout flow over the cart store, payment element and orders collection."""

    def __init__(
        self,
        cart: CartStore,
        orders: OrderRepository,
        payment: PaymentElement,
        notifications: NotificationCenter | None = None,
        tax_rate: Decimal | None = None,
    ):
        self.cart = cart
        self.orders = orders
        self.payment = payment
        self.notifications = notifications or NotificationCenter()
        self.tax_rate = to_decimal(tax_rate) if tax_rate is not None else get_settings().tax_rate

    def summary(self) -> CheckoutSummary:
        subtotal = self.cart.get_cart_total()
        tax = multiply(subtotal, self.tax_rate)
        return CheckoutSummary(
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            item_count=self.cart.get_cart_count(),
        )

    def _order_payload(
        self,
        customer: CustomerDetails,
        user: Optional[User],
        amount: Decimal,
        payment_id: Optional[str],
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "customer_id": user.id if user else GUEST_CUSTOMER_ID,
            "products": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "price": to_float(item.price),
                    "quantity": item.quantity,
                    "image": item.image,
                }
                for item in self.cart.items
            ],
            "total_price": to_float(amount),
            "status": "pending",
            "shipping_address": customer.address,
            "customer_email": customer.email,
            "customer_name": customer.name,
            "customer_phone": customer.phone,
            "date": datetime.now(timezone.utc).isoformat(),
        }
        if payment_id:
            data["payment_id"] = payment_id
        return data

    async def place_order(self, customer: CustomerDetails, user: Optional[User] = None) -> CheckoutResult:
        """Pay for the cart and record the order."""
        if not self.cart.loaded:
            await self.cart.load()

        if self.cart.get_cart_count() == 0:
            self.notifications.error(ERROR_CART_EMPTY)
            return CheckoutResult(success=False, reason=ERROR_CART_EMPTY)

        if not self.payment.ready:
            return CheckoutResult(success=False, reason="Payment form is not ready")

        amount = round_money(self.summary().total)
        billing = customer.model_dump()

        try:
            payment = await self.payment.confirm(amount, billing)
        except Exception as e:
            logger.error(f"Payment element failed: {e}", exc_info=True)
            self.notifications.error(ERROR_PAYMENT_FAILED)
            return CheckoutResult(success=False, reason=ERROR_PAYMENT_FAILED)

        if not payment.success:
            reason = payment.error or ERROR_PAYMENT_FAILED
            logger.warning(f"Payment declined: {sanitize_text_for_logging(reason)}")
            self.notifications.error(reason, title=ERROR_PAYMENT_FAILED)
            return CheckoutResult(success=False, reason=reason)

        try:
            order = await self.orders.create(self._order_payload(customer, user, amount, payment.payment_id))
        except RecordsError as e:
            logger.error(f"Checkout error: {e}")
            self.notifications.error(ERROR_ORDER_FAILED)
            return CheckoutResult(success=False, reason=ERROR_ORDER_FAILED)

        try:
            await self.cart.clear_cart()
        except CartStorageError as e:
            logger.error(f"Order {sanitize_id_for_logging(order.id)} created but cart not cleared: {e}")

        logger.info(f"Order {sanitize_id_for_logging(order.id)} placed for {amount}")
        return CheckoutResult(success=True, order=order)
