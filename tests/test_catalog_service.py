"""
Tests for CatalogService
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from storefront.catalog import CatalogFilterState
from storefront.errors import ERROR_PRODUCT_NOT_FOUND, RecordsError
from storefront.services.domains import CatalogService
from storefront.services.models import ProductPage, Review
from storefront.services.notifications import NotificationCenter


class _SlowProducts:
    """Product repository whose responses are released by the test."""

    def __init__(self):
        self.gates: dict[int, asyncio.Event] = {}
        self.queries = []

    async def list_page(self, query):
        self.queries.append(query)
        gate = self.gates.setdefault(query.page, asyncio.Event())
        await gate.wait()
        return ProductPage(page=query.page, per_page=query.per_page)

    def release(self, page):
        self.gates.setdefault(page, asyncio.Event()).set()


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.mark.asyncio
async def test_fetch_page_stores_current_page(notifications):
    products = AsyncMock()
    products.list_page.return_value = ProductPage(page=1, total_pages=2)
    service = CatalogService(products, AsyncMock(), notifications)

    page = await service.fetch_page(CatalogFilterState(), search_term="shirt")

    assert page.total_pages == 2
    assert service.current_page is page
    assert service.current_query.clauses[-1] == '(name ~ "shirt" || description ~ "shirt")'


@pytest.mark.asyncio
async def test_stale_response_is_discarded(notifications):
    products = _SlowProducts()
    service = CatalogService(products, AsyncMock(), notifications)
    state = CatalogFilterState()

    older = asyncio.create_task(service.fetch_page(state, page=1))
    await asyncio.sleep(0)
    newer = asyncio.create_task(service.fetch_page(state, page=2))
    await asyncio.sleep(0)

    # Newer page answers first, then the older one arrives late
    products.release(2)
    newer_result = await newer
    products.release(1)
    older_result = await older

    assert newer_result.page == 2
    assert older_result is None
    assert service.current_page.page == 2
    assert service.sequence == 2


@pytest.mark.asyncio
async def test_backend_error_notifies(notifications):
    products = AsyncMock()
    products.list_page.side_effect = RecordsError("Something went wrong", status=500)
    service = CatalogService(products, AsyncMock(), notifications)

    page = await service.fetch_page(CatalogFilterState())

    assert page is None
    assert service.current_page is None
    assert notifications.latest.variant == "destructive"


@pytest.mark.asyncio
async def test_trending_failure_returns_empty(notifications):
    products = AsyncMock()
    products.get_trending.side_effect = RecordsError("down")
    service = CatalogService(products, AsyncMock(), notifications)

    assert await service.get_trending() == []


@pytest.mark.asyncio
async def test_reviews_summary(notifications):
    reviews = AsyncMock()
    reviews.list_for_product.return_value = [
        Review(id="r1", product_id="p1", rating=5),
        Review(id="r2", product_id="p1", rating=4),
    ]
    service = CatalogService(AsyncMock(), reviews, notifications)

    summary = await service.get_reviews("p1")

    assert summary.count == 2
    assert summary.average == 4.5
    reviews.list_for_product.assert_awaited_once_with("p1", 10)


@pytest.mark.asyncio
async def test_reviews_failure_returns_empty_summary(notifications):
    reviews = AsyncMock()
    reviews.list_for_product.side_effect = RecordsError("down")
    service = CatalogService(AsyncMock(), reviews, notifications)

    summary = await service.get_reviews("p1")

    assert summary.count == 0
    assert summary.average == 0.0
    assert notifications.latest is not None


@pytest.mark.asyncio
async def test_configured_page_size(monkeypatch, notifications):
    from storefront.config import get_settings

    monkeypatch.setenv("CATALOG_PER_PAGE", "24")
    get_settings.cache_clear()
    try:
        products = AsyncMock()
        products.list_page.return_value = ProductPage()
        service = CatalogService(products, AsyncMock(), notifications)

        await service.fetch_page(CatalogFilterState())
        default_query = products.list_page.await_args.args[0]
        await service.fetch_page(CatalogFilterState(per_page=6))
        state_query = products.list_page.await_args.args[0]
        await service.fetch_page(CatalogFilterState(), per_page=3)
        explicit_query = products.list_page.await_args.args[0]
    finally:
        get_settings.cache_clear()

    assert service.per_page == 24
    assert default_query.per_page == 24
    assert state_query.per_page == 6
    assert explicit_query.per_page == 3


@pytest.mark.asyncio
async def test_page_size_argument(notifications):
    products = AsyncMock()
    products.list_page.return_value = ProductPage()
    service = CatalogService(products, AsyncMock(), notifications, per_page=8)

    await service.fetch_page(CatalogFilterState())

    assert products.list_page.await_args.args[0].to_params()["perPage"] == 8


@pytest.mark.asyncio
async def test_missing_product_notifies(notifications):
    products = AsyncMock()
    products.get_by_id.return_value = None
    service = CatalogService(products, AsyncMock(), notifications)

    assert await service.get_product("nope") is None
    assert notifications.latest.description == ERROR_PRODUCT_NOT_FOUND
