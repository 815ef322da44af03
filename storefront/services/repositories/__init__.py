"""
Repository Pattern for Records Operations

- ProductRepository: Product catalog pages, detail, trending
- OrderRepository: Order creation and history
- ReviewRepository: Product reviews
"""
from .product_repo import ProductRepository
from .order_repo import OrderRepository
from .review_repo import ReviewRepository

__all__ = [
    "ProductRepository",
    "OrderRepository",
    "ReviewRepository",
]
