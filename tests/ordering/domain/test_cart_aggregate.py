"""Tests for the ShoppingCart aggregate."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from protean.exceptions import ObjectNotFoundError, ValidationError


def _make_cart():
    return ShoppingCart.create(customer_id="cust-001")


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2
        assert not cart.is_empty

    def test_add_item_raises_event(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        added_events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(added_events) == 1
        assert added_events[0].product_id == "prod-001"

    def test_add_same_product_increases_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-001", 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_add_different_products(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-002", 4)
        assert len(cart.items) == 2
        assert cart.total_quantity() == 5


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart._events.clear()
        cart.update_item_quantity(cart.items[0].id, 5)

        assert cart.items[0].quantity == 5
        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 5

    def test_quantity_must_be_positive(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        with pytest.raises(ValidationError):
            cart.update_item_quantity(cart.items[0].id, 0)

    def test_update_nonexistent_item(self):
        cart = _make_cart()
        with pytest.raises(ObjectNotFoundError):
            cart.update_item_quantity("nonexistent", 5)


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        item_id = cart.items[0].id
        cart.remove_item(item_id)
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_remove_nonexistent_item(self):
        with pytest.raises(ObjectNotFoundError):
            _make_cart().remove_item("nonexistent")

    def test_clear(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-002", 1)
        cart.clear()

        assert cart.is_empty
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.items_removed == 2
