"""Shared fixtures for the ordering tests.

Data is created through the same commands the API uses, so every fixture
exercises real handlers and repositories.
"""

import pytest
from ordering.cart.items import AddToCart
from ordering.customer.registration import RegisterCustomer
from ordering.discount.management import CreateDiscount
from ordering.order.creation import PlaceOrder
from ordering.product.stock import AddProduct
from protean import current_domain


@pytest.fixture()
def customer_id():
    return current_domain.process(
        RegisterCustomer(name="Sam Lee", email="sam@example.com", phone="+1-555-0100"),
        asynchronous=False,
    )


@pytest.fixture()
def make_product():
    def _make(name="Apple", price=2.50, stock_quantity=10):
        return current_domain.process(
            AddProduct(name=name, price=price, stock_quantity=stock_quantity),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def make_discount():
    def _make(**overrides):
        defaults = {
            "code": "WELCOME10",
            "description": "10% off your first order",
            "discount_type": "percentage",
            "discount_value": 10.0,
            "min_order_amount": 0.0,
        }
        defaults.update(overrides)
        return current_domain.process(CreateDiscount(**defaults), asynchronous=False)

    return _make


@pytest.fixture()
def add_to_cart():
    def _add(customer_id, product_id, quantity=1):
        return current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def place_order():
    def _place(customer_id, **overrides):
        defaults = {
            "customer_id": customer_id,
            "shipping_address": "12 Orchard Lane, Springfield",
            "customer_name": "Sam Lee",
            "customer_email": "sam@example.com",
            "phone_number": "+1-555-0100",
        }
        defaults.update(overrides)
        return current_domain.process(PlaceOrder(**defaults), asynchronous=False)

    return _place
