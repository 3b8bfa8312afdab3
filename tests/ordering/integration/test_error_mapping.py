"""Integration tests for rendering domain failures as HTTP responses."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import register_error_handlers
from ordering.errors import ConcurrentModification
from ordering.product.product import Product
from protean import current_domain


@pytest.fixture()
def client(make_product):
    product_id = make_product(stock_quantity=5)
    app = FastAPI()

    @app.put("/stale-restock")
    async def stale_restock():
        repo = current_domain.repository_for(Product)
        first = repo.get(product_id)
        second = repo.get(product_id)
        first.restock(1)
        repo.add(first)
        second.restock(2)
        repo.add(second)

    register_error_handlers(app)
    return TestClient(app)


class TestStaleWrites:
    def test_stale_write_returns_409(self, client):
        response = client.put("/stale-restock")

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "concurrent-modification"
        assert body["message"] == "The record was modified concurrently; retry the request"
        assert "cause" in body["details"]

    def test_concurrent_modification_is_retriable(self):
        assert ConcurrentModification.from_stale_write(Exception("stale")).retriable is True
