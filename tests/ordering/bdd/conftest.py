"""Shared BDD fixtures and step definitions for the ordering scenarios."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.discount.discount import Discount
from ordering.discount.ledger import RecordDiscountUsage
from ordering.discount.management import DeactivateDiscount, UpdateDiscount
from ordering.errors import OrderingError
from ordering.order.order import Order
from ordering.product.product import Product
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Scenario state
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def discounts():
    """Discount ids by code."""
    return {}


@pytest.fixture()
def result():
    """The order touched by the scenario and any business failure raised."""
    return {"order": None, "exc": None}


@pytest.fixture()
def attempt(result):
    """Process a command, keeping the returned order or the business failure."""

    def _attempt(command):
        try:
            view = current_domain.process(command, asynchronous=False)
        except OrderingError as exc:
            result["exc"] = exc
        else:
            result["order"] = view
            result["exc"] = None

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def _(products, make_product, name, price, stock):
    products[name] = make_product(name=name, price=price, stock_quantity=stock)


@given(parsers.cfparse('a percentage discount "{code}" of {value:f}'))
def _(discounts, make_discount, code, value):
    discounts[code] = make_discount(code=code, discount_type="percentage", discount_value=value)


@given(parsers.cfparse('a percentage discount "{code}" of {value:f} for orders of at least {minimum:f}'))
def _(discounts, make_discount, code, value, minimum):
    discounts[code] = make_discount(
        code=code,
        discount_type="percentage",
        discount_value=value,
        min_order_amount=minimum,
    )


@given(parsers.cfparse('a percentage discount "{code}" of {value:f} capped at {cap:f}'))
def _(discounts, make_discount, code, value, cap):
    discounts[code] = make_discount(
        code=code,
        discount_type="percentage",
        discount_value=value,
        max_discount_amount=cap,
    )


@given(parsers.cfparse('a fixed discount "{code}" of {value:f}'))
def _(discounts, make_discount, code, value):
    discounts[code] = make_discount(code=code, discount_type="fixed_amount", discount_value=value)


@given(parsers.cfparse('discount "{code}" is deactivated'))
def _(discounts, code):
    current_domain.process(DeactivateDiscount(discount_id=discounts[code]), asynchronous=False)


@given(parsers.cfparse('discount "{code}" allows {limit:d} use'))
def _(discounts, code, limit):
    current_domain.process(UpdateDiscount(discount_id=discounts[code], usage_limit=limit), asynchronous=False)


@given(parsers.cfparse('discount "{code}" has been redeemed'))
def _(discounts, customer_id, code):
    current_domain.process(
        RecordDiscountUsage(discount_id=discounts[code], customer_id=customer_id, discount_amount=1.0),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request is rejected with "{kind}"'))
def _(result, kind):
    assert result["exc"] is not None, "Expected the request to be rejected"
    assert result["exc"].kind == kind


@then(parsers.cfparse('the order status is "{status}"'))
def _(result, status):
    order = current_domain.repository_for(Order).get(result["order"]["id"])
    assert order.status == status


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock_quantity == stock


@then(parsers.cfparse('discount "{code}" has been used {count:d} times'))
def _(discounts, code, count):
    assert current_domain.repository_for(Discount).get(discounts[code]).used_count == count


@then(parsers.cfparse("the cart holds {count:d} line"))
def _(customer_id, count):
    cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
    assert len(cart.items) == count
