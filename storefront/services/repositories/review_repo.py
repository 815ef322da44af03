"""Review Repository - Product reviews."""
from .base import BaseRepository
from storefront.catalog.query import eq
from storefront.services.models import Review

COLLECTION = "reviews"


class ReviewRepository(BaseRepository):
    """Review records operations."""

    async def list_for_product(self, product_id: str, limit: int = 10) -> list[Review]:
        """Latest reviews for a product."""
        result = await self.client.get_list(
            COLLECTION,
            page=1,
            per_page=limit,
            filter=eq("product_id", product_id),
            sort="-created",
        )
        return [Review(**r) for r in result.get("items", [])]
