"""Product Repository - Product catalog operations."""
from typing import Optional, Any

from .base import BaseRepository
from storefront.errors import RecordsError
from storefront.catalog.query import QueryDescriptor, SORT_EXPRESSIONS, SORT_POPULARITY
from storefront.services.models import Product, ProductPage

COLLECTION = "products"


class ProductRepository(BaseRepository):
    """Product records operations."""

    def _to_product(self, record: dict[str, Any]) -> Product:
        images = record.get("images") or []
        if images and not record.get("image_url"):
            record = {**record, "image_url": self.client.file_url(record, images[0])}
        return Product(**record)

    async def list_page(self, query: QueryDescriptor) -> ProductPage:
        """Fetch the page described by a catalog query."""
        result = await self.client.get_list(
            COLLECTION,
            page=query.page,
            per_page=query.per_page,
            filter=query.filter,
            sort=query.sort,
        )
        return ProductPage(
            items=[self._to_product(r) for r in result.get("items", [])],
            page=result.get("page", query.page),
            per_page=result.get("perPage", query.per_page),
            total_items=result.get("totalItems", 0),
            total_pages=result.get("totalPages", 0),
        )

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID (None when the backend has no such record)."""
        try:
            record = await self.client.get_one(COLLECTION, product_id)
        except RecordsError as e:
            if e.status == 404:
                return None
            raise
        return self._to_product(record)

    async def get_trending(self, limit: int = 6) -> list[Product]:
        """Most reviewed products first."""
        result = await self.client.get_list(
            COLLECTION, page=1, per_page=limit, sort=SORT_EXPRESSIONS[SORT_POPULARITY]
        )
        return [self._to_product(r) for r in result.get("items", [])]
