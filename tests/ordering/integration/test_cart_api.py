"""Integration tests for Cart API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import cart_router, register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    register_error_handlers(app)
    return TestClient(app)


def _add_item(client, customer_id, product_id, quantity=1):
    response = client.post(
        "/carts/items",
        json={"customer_id": customer_id, "product_id": product_id, "quantity": quantity},
    )
    assert response.status_code == 201
    return response.json()["cart_id"]


def _get_cart(client, customer_id):
    response = client.get(f"/carts/customer/{customer_id}")
    assert response.status_code == 200
    return response.json()


class TestCartEndpoints:
    def test_customer_without_cart(self, client, customer_id):
        data = _get_cart(client, customer_id)

        assert data["cart_id"] is None
        assert data["is_empty"] is True

    def test_add_items(self, client, customer_id, make_product):
        apple = make_product(name="Apple")
        cart_id = _add_item(client, customer_id, apple, 2)
        _add_item(client, customer_id, apple, 1)
        _add_item(client, customer_id, make_product(name="Pear"), 4)

        data = _get_cart(client, customer_id)

        assert data["cart_id"] == cart_id
        assert len(data["items"]) == 2
        assert data["total_quantity"] == 7

    def test_add_unknown_product_returns_404(self, client, customer_id):
        response = client.post(
            "/carts/items",
            json={"customer_id": customer_id, "product_id": "missing", "quantity": 1},
        )
        assert response.status_code == 404

    def test_add_zero_quantity_returns_422(self, client, customer_id, make_product):
        response = client.post(
            "/carts/items",
            json={"customer_id": customer_id, "product_id": make_product(), "quantity": 0},
        )
        assert response.status_code == 422

    def test_update_quantity(self, client, customer_id, make_product):
        cart_id = _add_item(client, customer_id, make_product(), 1)
        item_id = _get_cart(client, customer_id)["items"][0]["id"]

        response = client.put(f"/carts/{cart_id}/items/{item_id}", json={"new_quantity": 6})

        assert response.status_code == 200
        assert _get_cart(client, customer_id)["total_quantity"] == 6

    def test_remove_item(self, client, customer_id, make_product):
        cart_id = _add_item(client, customer_id, make_product(), 1)
        item_id = _get_cart(client, customer_id)["items"][0]["id"]

        response = client.delete(f"/carts/{cart_id}/items/{item_id}")

        assert response.status_code == 200
        assert _get_cart(client, customer_id)["is_empty"] is True

    def test_remove_unknown_item_returns_404(self, client, customer_id, make_product):
        cart_id = _add_item(client, customer_id, make_product(), 1)

        response = client.delete(f"/carts/{cart_id}/items/missing")

        assert response.status_code == 404

    def test_clear(self, client, customer_id, make_product):
        cart_id = _add_item(client, customer_id, make_product(name="Apple"), 1)
        _add_item(client, customer_id, make_product(name="Pear"), 1)

        response = client.delete(f"/carts/{cart_id}/items")

        assert response.status_code == 200
        assert _get_cart(client, customer_id)["items"] == []
