"""Records Models - Pydantic models for backend collections."""
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, field_validator

from storefront.services.money import to_decimal as _to_decimal


class User(BaseModel):
    """User model."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    verified: bool = False

    class Config:
        extra = "ignore"  # Ignore unknown fields from backend


class Product(BaseModel):
    """Product model."""
    id: str
    collectionId: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    category: Optional[str] = None
    rating: Optional[float] = None
    reviews_count: int = 0
    stock: int = 0
    images: list[str] = []
    image_url: Optional[str] = None  # URL of the first image, filled by the repository
    created: Optional[str] = None

    class Config:
        extra = "ignore"

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def low_stock(self) -> bool:
        """Fewer than 10 left."""
        return 0 < self.stock < 10


class ProductPage(BaseModel):
    """One page of products."""
    items: list[Product] = []
    page: int = 1
    per_page: int = 0
    total_items: int = 0
    total_pages: int = 0


class Review(BaseModel):
    """Review model."""
    id: str
    product_id: str
    customer_name: Optional[str] = None
    rating: int = 0
    comment: Optional[str] = None
    created: Optional[str] = None

    class Config:
        extra = "ignore"


class Order(BaseModel):
    """Order model."""
    id: str
    customer_id: str = "guest"
    products: list[dict[str, Any]] = []
    total_price: Decimal
    status: str = "pending"
    shipping_address: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    date: Optional[str] = None
    created: Optional[str] = None

    class Config:
        extra = "ignore"

    @field_validator("total_price", mode="before")
    @classmethod
    def convert_total_to_decimal(cls, v):
        return _to_decimal(v)
