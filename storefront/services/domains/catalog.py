"""
Catalog Domain Service

Product listing, detail, trending and reviews on top of the records backend.
List requests are numbered; a response that arrives after a newer request
was issued is dropped so an older page never overwrites a newer one.
"""

from dataclasses import dataclass, field
from typing import Optional

from storefront.catalog.query import CatalogFilterState, QueryDescriptor, build_query
from storefront.config import get_settings
from storefront.errors import (
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_PRODUCTS_UNAVAILABLE,
    ERROR_REVIEWS_UNAVAILABLE,
    RecordsError,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.models import Product, ProductPage, Review
from storefront.services.notifications import NotificationCenter
from storefront.services.repositories import ProductRepository, ReviewRepository

logger = get_logger(__name__)


@dataclass
class ReviewSummary:
    """Reviews for one product with their average rating."""

    reviews: list[Review] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.reviews)

    @property
    def average(self) -> float:
        if not self.reviews:
            return 0.0
        return sum(r.rating for r in self.reviews) / len(self.reviews)


class CatalogService:
    """
    Catalog domain service.

    Provides:
    - Filtered, sorted, paginated product pages (stale responses discarded)
    - Product detail and trending products
    - Review listing with average rating
    """

    def __init__(
        self,
        products: ProductRepository,
        reviews: ReviewRepository,
        notifications: NotificationCenter | None = None,
        per_page: int | None = None,
    ):
        self.products = products
        self.reviews = reviews
        self.notifications = notifications or NotificationCenter()
        # Page size used when neither the caller nor the filter state sets one
        self.per_page = per_page or get_settings().catalog_per_page
        self.current_page: Optional[ProductPage] = None
        self.current_query: Optional[QueryDescriptor] = None
        self._sequence = 0

    @property
    def sequence(self) -> int:
        """Number of the most recently issued list request."""
        return self._sequence

    async def fetch_page(
        self,
        filters: CatalogFilterState,
        search_term: str | None = None,
        sort_key: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Optional[ProductPage]:
        """
        Load the product page for a catalog state.

        Returns:
            ProductPage, or None if the request failed or was superseded
        """
        if per_page is None and "per_page" not in filters.model_fields_set:
            per_page = self.per_page
        query = build_query(filters, search_term, sort_key, page, per_page)
        self._sequence += 1
        request_id = self._sequence

        try:
            result = await self.products.list_page(query)
        except RecordsError as e:
            if request_id != self._sequence:
                logger.debug(f"Ignoring failure of superseded catalog request #{request_id}")
                return None
            logger.error(f"Failed to fetch products: {e}")
            self.notifications.error(ERROR_PRODUCTS_UNAVAILABLE)
            return None

        if request_id != self._sequence:
            logger.debug(f"Discarding stale catalog response #{request_id} (latest #{self._sequence})")
            return None

        self.current_page = result
        self.current_query = query
        return result

    async def get_trending(self, limit: int = 6) -> list[Product]:
        """Most reviewed products (home page)."""
        try:
            return await self.products.get_trending(limit)
        except RecordsError as e:
            logger.error(f"Failed to fetch trending products: {e}")
            return []

    async def get_product(self, product_id: str) -> Optional[Product]:
        try:
            product = await self.products.get_by_id(product_id)
        except RecordsError as e:
            logger.error(f"Failed to fetch product {sanitize_id_for_logging(product_id)}: {e}")
            self.notifications.error(ERROR_PRODUCTS_UNAVAILABLE)
            return None
        if product is None:
            self.notifications.error(ERROR_PRODUCT_NOT_FOUND)
        return product

    async def get_reviews(self, product_id: str, limit: int = 10) -> ReviewSummary:
        try:
            reviews = await self.reviews.list_for_product(product_id, limit)
        except RecordsError as e:
            logger.error(f"Failed to fetch reviews for {sanitize_id_for_logging(product_id)}: {e}")
            self.notifications.error(ERROR_REVIEWS_UNAVAILABLE)
            return ReviewSummary()
        return ReviewSummary(reviews=reviews)
