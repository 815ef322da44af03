"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, List

from storefront.services.money import to_decimal, multiply


@dataclass
class CartLineItem:
    """Single product entry in the cart."""
    product_id: str
    name: str
    price: Decimal  # Unit price captured when the product was added
    quantity: int
    image: Optional[str] = None

    def __post_init__(self):
        self.price = to_decimal(self.price)

    @property
    def subtotal(self) -> Decimal:
        """Unrounded price * quantity."""
        return multiply(self.price, self.quantity)

    def copy(self) -> "CartLineItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        """Create from dictionary."""
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        return cls(
            product_id=str(data["product_id"]),
            name=data.get("name") or "",
            price=to_decimal(data["price"]),
            quantity=quantity,
            image=data.get("image"),
        )


@dataclass
class Cart:
    """Ordered collection of line items (insertion order is display order)."""
    items: List[CartLineItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def total(self) -> Decimal:
        """Exact sum of price * quantity. Never rounded here."""
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def copy(self) -> "Cart":
        return Cart(items=[item.copy() for item in self.items])

    def to_list(self) -> list:
        """Serialized layout kept in the durable cart slot."""
        return [item.to_dict() for item in self.items]

    @classmethod
    def from_list(cls, data: list) -> "Cart":
        """Create from the serialized layout, merging duplicate product ids."""
        if not isinstance(data, list):
            raise TypeError(f"cart payload must be a list, got {type(data).__name__}")
        cart = cls()
        for raw in data:
            item = CartLineItem.from_dict(raw)
            existing = cart.find(item.product_id)
            if existing:
                existing.quantity += item.quantity
            else:
                cart.items.append(item)
        return cart
