"""
Tests for RecordsClient and repositories
"""

from decimal import Decimal

import httpx
import pytest

from storefront.catalog import CatalogFilterState, build_query
from storefront.errors import RecordsError
from storefront.services.records import RecordsClient
from storefront.services.repositories import OrderRepository, ProductRepository, ReviewRepository

PRODUCTS_PATH = "/api/collections/products/records"


def _page(items, page=1, total_pages=1):
    return {"page": page, "perPage": 12, "totalItems": len(items), "totalPages": total_pages, "items": items}


class TestRecordsClient:

    @pytest.mark.asyncio
    async def test_get_list_params(self, backend, records_client):
        backend.route("GET", PRODUCTS_PATH, body=_page([]))

        await records_client.get_list("products", page=2, per_page=12, filter='category = "Accessories"', sort="-price")

        params = backend.last_request.url.params
        assert params["page"] == "2"
        assert params["perPage"] == "12"
        assert params["filter"] == 'category = "Accessories"'
        assert params["sort"] == "-price"

    @pytest.mark.asyncio
    async def test_empty_filter_is_omitted(self, backend, records_client):
        backend.route("GET", PRODUCTS_PATH, body=_page([]))

        await records_client.get_list("products")

        assert "filter" not in backend.last_request.url.params

    @pytest.mark.asyncio
    async def test_error_response_raises(self, backend, records_client):
        backend.route("POST", "/api/collections/orders/records", status=400,
                      body={"code": 400, "message": "Failed to create record.", "data": {}})

        with pytest.raises(RecordsError) as exc_info:
            await records_client.create("orders", {"total_price": 1})

        assert exc_info.value.status == 400
        assert exc_info.value.message == "Failed to create record."

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = RecordsClient("https://records.test", transport=httpx.MockTransport(handler))

        with pytest.raises(RecordsError) as exc_info:
            await client.get_one("products", "p1")

        assert exc_info.value.status == 0

    @pytest.mark.asyncio
    async def test_auth_saves_token_and_sends_header(self, backend, records_client):
        backend.route("POST", "/api/collections/users/auth-with-password",
                      body={"token": "tok-1", "record": {"id": "u1", "email": "a@b.c"}})
        backend.route("GET", PRODUCTS_PATH, body=_page([]))

        await records_client.auth_with_password("a@b.c", "secret123")
        assert backend.last_json() == {"identity": "a@b.c", "password": "secret123"}

        await records_client.get_list("products")

        assert records_client.auth_store.is_valid
        assert backend.last_request.headers["Authorization"] == "tok-1"

    def test_file_url(self, records_client, sample_product):
        url = records_client.file_url(sample_product, "shirt.jpg")

        assert url == "https://records.test/api/files/pbc_products/p1/shirt.jpg"


class TestProductRepository:

    @pytest.mark.asyncio
    async def test_list_page(self, backend, records_client, sample_product, second_product):
        backend.route("GET", PRODUCTS_PATH, body=_page([sample_product, second_product], total_pages=3))
        repo = ProductRepository(records_client)

        page = await repo.list_page(build_query(CatalogFilterState()))

        assert page.total_pages == 3
        assert [p.id for p in page.items] == ["p1", "p2"]
        assert page.items[0].price == Decimal("20")
        assert page.items[0].image_url == "https://records.test/api/files/pbc_products/p1/shirt.jpg"
        assert page.items[1].image_url is None
        assert backend.last_request.url.params["filter"] == "price >= 0 && price <= 500"

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, records_client):
        repo = ProductRepository(records_client)

        assert await repo.get_by_id("nope") is None

    @pytest.mark.asyncio
    async def test_trending(self, backend, records_client, sample_product):
        backend.route("GET", PRODUCTS_PATH, body=_page([sample_product]))
        repo = ProductRepository(records_client)

        products = await repo.get_trending()

        assert len(products) == 1
        assert backend.last_request.url.params["sort"] == "-reviews_count"
        assert backend.last_request.url.params["perPage"] == "6"


class TestOrderAndReviewRepositories:

    @pytest.mark.asyncio
    async def test_orders_for_customer(self, backend, records_client):
        backend.route("GET", "/api/collections/orders/records", body=_page([
            {"id": "o1", "customer_id": "u1", "total_price": 21.6, "status": "pending"},
        ]))
        repo = OrderRepository(records_client)

        orders = await repo.list_for_customer("u1")

        assert orders[0].total_price == Decimal("21.6")
        params = backend.last_request.url.params
        assert params["filter"] == 'customer_id = "u1"'
        assert params["sort"] == "-created"
        assert params["perPage"] == "50"

    @pytest.mark.asyncio
    async def test_order_by_id(self, backend, records_client):
        backend.route("GET", "/api/collections/orders/records/o1", body={
            "id": "o1", "customer_name": "Ana", "total_price": 64.8, "status": "pending",
        })
        repo = OrderRepository(records_client)

        order = await repo.get_by_id("o1")

        assert order.id == "o1"
        assert order.total_price == Decimal("64.8")
        assert await repo.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_order_by_id_server_error(self, backend, records_client):
        backend.route("GET", "/api/collections/orders/records/o1", status=500, body={"message": "boom"})
        repo = OrderRepository(records_client)

        with pytest.raises(RecordsError):
            await repo.get_by_id("o1")

    @pytest.mark.asyncio
    async def test_reviews_for_product(self, backend, records_client):
        backend.route("GET", "/api/collections/reviews/records", body=_page([
            {"id": "r1", "product_id": "p1", "rating": 5, "customer_name": "Ana"},
        ]))
        repo = ReviewRepository(records_client)

        reviews = await repo.list_for_product("p1")

        assert reviews[0].rating == 5
        assert backend.last_request.url.params["filter"] == 'product_id = "p1"'
        assert backend.last_request.url.params["perPage"] == "10"
