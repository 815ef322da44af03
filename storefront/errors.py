"""
Common Error Constants and Exceptions

Centralized user-facing messages so views and services show the same text.
"""
from typing import Any, Optional

# Auth errors
ERROR_LOGIN_FAILED = "Login failed"
ERROR_SIGNUP_FAILED = "Signup failed"
ERROR_PASSWORD_RESET_FAILED = "Password reset request failed"
ERROR_PASSWORD_MISMATCH = "Passwords do not match"
ERROR_PASSWORD_TOO_SHORT = "Password must be at least 8 characters"

# Catalog errors
ERROR_PRODUCTS_UNAVAILABLE = "Failed to load products. Please try again."
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_REVIEWS_UNAVAILABLE = "Failed to load reviews"

# Cart / checkout errors
ERROR_CART_EMPTY = "Your cart is empty"
ERROR_PAYMENT_FAILED = "Payment failed"
ERROR_ORDER_FAILED = "Failed to process order. Please try again."
ERROR_ORDERS_UNAVAILABLE = "Failed to load orders"
ERROR_ORDER_NOT_FOUND = "Order not found"

# Generic
ERROR_GENERIC_TITLE = "Error"


class StorefrontError(Exception):
    """Base class for collaborator failures surfaced by the core."""


class RecordsError(StorefrontError):
    """Records backend returned an error or could not be reached."""

    def __init__(self, message: str, status: int = 0, data: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data or {}

    def __str__(self) -> str:
        if self.status:
            return f"{self.message} (HTTP {self.status})"
        return self.message


class CartStorageError(StorefrontError):
    """Durable cart slot could not be written."""
