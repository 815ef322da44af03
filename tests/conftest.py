"""Pytest configuration and fixtures"""
import json
import os
from typing import Any, Callable, Dict, List

import httpx
import pytest

# Set test environment variables
os.environ.setdefault("RECORDS_URL", "https://records.test")
os.environ.setdefault("CART_STORAGE", "memory")
os.environ.setdefault("TAX_RATE", "0.08")

from storefront.cart import CartStore, MemoryCartStorage  # noqa: E402
from storefront.services.records import RecordsClient  # noqa: E402


@pytest.fixture
def memory_storage():
    """Empty in-memory cart slot"""
    return MemoryCartStorage()


@pytest.fixture
def cart_store(memory_storage):
    """Cart store over in-memory storage"""
    return CartStore(memory_storage)


@pytest.fixture
def sample_product():
    """Sample product record"""
    return {
        "id": "p1",
        "collectionId": "pbc_products",
        "name": "Linen Shirt",
        "description": "Breathable summer shirt",
        "price": 20,
        "category": "Men's Clothing",
        "rating": 4.5,
        "reviews_count": 12,
        "stock": 7,
        "images": ["shirt.jpg"],
        "created": "2025-01-01 00:00:00.000Z",
    }


@pytest.fixture
def second_product():
    """Another product record"""
    return {
        "id": "p2",
        "collectionId": "pbc_products",
        "name": "Leather Belt",
        "description": "Full grain leather",
        "price": "19.99",
        "category": "Accessories",
        "rating": 4.0,
        "reviews_count": 3,
        "stock": 2,
        "images": [],
        "created": "2025-02-01 00:00:00.000Z",
    }


class RecordedBackend:
    """httpx MockTransport handler that records requests and replays routes."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[tuple, Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, method: str, path: str, status: int = 200, body: Any = None):
        def responder(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json=body if body is not None else {})

        self.routes[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"code": 404, "message": "The requested resource wasn't found."})
        return responder(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def backend():
    """Fake records backend"""
    return RecordedBackend()


@pytest.fixture
def records_client(backend):
    """RecordsClient wired to the fake backend"""
    return RecordsClient("https://records.test", transport=httpx.MockTransport(backend.handler))
