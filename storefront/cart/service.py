"""Cart store: in-memory cart backed by a durable storage slot."""
import asyncio
import json
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional

from storefront.errors import CartStorageError
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_text_for_logging
from storefront.services.money import is_valid_amount, to_decimal
from .models import CartLineItem, Cart
from .storage import CART_KEY, CartStorage

logger = get_logger(__name__)

CartListener = Callable[[Cart], None]


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _product_field(product: Any, name: str, default: Any = None) -> Any:
    if isinstance(product, Mapping):
        return product.get(name, default)
    return getattr(product, name, default)


def _product_image(product: Any) -> Optional[str]:
    image = _product_field(product, "image_url") or _product_field(product, "image")
    if image:
        return str(image)
    return None


class CartStore:
    """
    Owns one shopping cart and keeps it in sync with durable storage.

    - Mutations are validated first; malformed input leaves state unchanged
    - The new state is persisted before it becomes visible (atomic commit)
    - Subscribers are notified after every committed mutation
    - Mutations run one at a time and read storage first if nothing is loaded
    """

    def __init__(self, storage: CartStorage, key: str = CART_KEY):
        self.storage = storage
        self.key = key
        self._cart = Cart()
        self._listeners: List[CartListener] = []
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def cart(self) -> Cart:
        """Snapshot of the current cart."""
        return self._cart.copy()

    @property
    def items(self) -> List[CartLineItem]:
        return [item.copy() for item in self._cart.items]

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> Cart:
        """
        Reload the cart from storage (session start).

        If storage cannot be read the store stays unloaded and shows an
        empty cart; the next mutation retries the read and raises
        CartStorageError instead of overwriting the stored cart.
        """
        async with self._lock:
            try:
                await self._read()
            except CartStorageError as e:
                logger.error(f"Failed to load cart {sanitize_text_for_logging(self.key)}: {e}")
                self._set_cart(Cart())
                self._loaded = False
            return self.cart

    async def add_to_cart(self, product: Any, quantity: int = 1) -> Cart:
        """Add product to cart, merging with an existing line for the same product."""
        if not _is_positive_int(quantity):
            logger.warning(f"Rejected add_to_cart: invalid quantity {quantity!r}")
            return self.cart

        product_id = _product_field(product, "id")
        if not product_id:
            logger.warning("Rejected add_to_cart: product has no id")
            return self.cart

        price = _product_field(product, "price")
        if not is_valid_amount(price):
            logger.warning(
                f"Rejected add_to_cart for {sanitize_id_for_logging(str(product_id))}: invalid price {price!r}"
            )
            return self.cart

        async with self._lock:
            await self._ensure_loaded()

            cart = self._cart.copy()
            existing = cart.find(str(product_id))
            if existing:
                existing.quantity += quantity
            else:
                cart.items.append(
                    CartLineItem(
                        product_id=str(product_id),
                        name=_product_field(product, "name") or "",
                        price=to_decimal(price),
                        quantity=quantity,
                        image=_product_image(product),
                    )
                )

            await self._commit(cart)
            return self.cart

    async def update_quantity(self, product_id: str, new_quantity: int) -> Cart:
        """
        Replace a line's quantity in place.

        Requires new_quantity >= 1; stock limits are the caller's concern.
        No-op when the product is not in the cart.
        """
        if not product_id:
            logger.warning("Rejected update_quantity: missing product_id")
            return self.cart
        if not _is_positive_int(new_quantity):
            logger.warning(f"Rejected update_quantity: invalid quantity {new_quantity!r}")
            return self.cart

        async with self._lock:
            await self._ensure_loaded()

            item = self._cart.find(product_id)
            if item is None or item.quantity == new_quantity:
                return self.cart

            cart = self._cart.copy()
            cart.find(product_id).quantity = new_quantity

            await self._commit(cart)
            return self.cart

    async def remove_from_cart(self, product_id: str) -> Cart:
        """Remove a line. Removing an absent product is a no-op."""
        if not product_id:
            return self.cart

        async with self._lock:
            await self._ensure_loaded()

            if self._cart.find(product_id) is None:
                return self.cart

            cart = Cart(items=[item.copy() for item in self._cart.items if item.product_id != product_id])

            await self._commit(cart)
            return self.cart

    async def clear_cart(self) -> Cart:
        """Empty the cart (after checkout completes)."""
        async with self._lock:
            await self.storage.delete(self.key)
            self._set_cart(Cart())
            self._loaded = True
            self._notify()
            return self.cart

    def get_cart_count(self) -> int:
        """Sum of quantities."""
        return self._cart.count

    def get_cart_total(self) -> Decimal:
        """Exact sum of price * quantity; callers round for display."""
        return self._cart.total

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that unregisters the listener (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _ensure_loaded(self) -> None:
        # Caller holds the lock
        if not self._loaded:
            await self._read()

    async def _read(self) -> None:
        data = await self.storage.read(self.key)

        cart = Cart()
        if data:
            try:
                cart = Cart.from_list(json.loads(data))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                # Corrupted data - clear it and start empty
                logger.warning(f"Corrupted cart data under {sanitize_text_for_logging(self.key)}: {e}")
                try:
                    await self.storage.delete(self.key)
                except CartStorageError as delete_error:
                    logger.warning(f"Failed to clear corrupted cart: {delete_error}")
                cart = Cart()

        self._set_cart(cart)
        self._loaded = True
        logger.debug(f"Cart loaded with {cart.count} units")

    async def _commit(self, cart: Cart) -> None:
        # Persist first so a failed write leaves the visible state untouched
        await self.storage.write(self.key, json.dumps(cart.to_list()))
        self._set_cart(cart)
        self._notify()

    def _set_cart(self, cart: Cart) -> None:
        self._cart = cart

    def _notify(self) -> None:
        snapshot = self.cart
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Cart listener failed: {e}", exc_info=True)


# Singleton instance
_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """Get CartStore singleton bound to the configured storage."""
    global _cart_store
    if _cart_store is None:
        from storefront.config import get_settings
        from storefront.db import RedisKeys, get_cart_storage

        _cart_store = CartStore(get_cart_storage(), key=RedisKeys.cart_key(get_settings().cart_scope))
    return _cart_store
