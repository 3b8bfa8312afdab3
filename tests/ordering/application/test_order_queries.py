from datetime import UTC, datetime, timedelta

import pytest
from ordering.customer.registration import RegisterCustomer
from ordering.order.lifecycle import CancelOrder, ConfirmOrder, DeliverOrder, ShipOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.repository import order_statistics
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _deliver(order_id):
    for command in (ConfirmOrder, ShipOrder, DeliverOrder):
        _process(command(order_id=order_id))


@pytest.fixture()
def order_for(make_product, add_to_cart, place_order):
    product_id = make_product(price=10.0, stock_quantity=100)

    def _order(customer_id, quantity=1):
        add_to_cart(customer_id, product_id, quantity)
        return place_order(customer_id)

    return _order


@pytest.fixture()
def other_customer_id():
    return _process(RegisterCustomer(name="Alex Kim", email="alex@example.com"))


class TestOrderLookups:
    def test_get_by_number(self, customer_id, order_for):
        placed = order_for(customer_id)

        order = current_domain.repository_for(Order).get_by_number(placed["order_number"])

        assert str(order.id) == placed["id"]

    def test_unknown_number(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Order).get_by_number("ORD-0-0")

    def test_for_customer(self, customer_id, other_customer_id, order_for):
        mine = {order_for(customer_id)["id"], order_for(customer_id)["id"]}
        order_for(other_customer_id)

        orders = current_domain.repository_for(Order).for_customer(customer_id)

        assert {str(order.id) for order in orders} == mine

    def test_for_customer_with_status(self, customer_id, order_for):
        first = order_for(customer_id)
        order_for(customer_id)
        _process(ConfirmOrder(order_id=first["id"]))

        orders = current_domain.repository_for(Order).for_customer(customer_id, status=OrderStatus.CONFIRMED)

        assert [str(order.id) for order in orders] == [first["id"]]

    def test_cancellable(self, customer_id, order_for):
        pending = order_for(customer_id)
        confirmed = order_for(customer_id)
        delivered = order_for(customer_id)
        cancelled = order_for(customer_id)
        _process(ConfirmOrder(order_id=confirmed["id"]))
        _deliver(delivered["id"])
        _process(CancelOrder(order_id=cancelled["id"]))

        orders = current_domain.repository_for(Order).cancellable(customer_id)

        assert {str(order.id) for order in orders} == {pending["id"], confirmed["id"]}

    def test_recent_within_days(self, customer_id, order_for):
        repo = current_domain.repository_for(Order)
        stale_id = order_for(customer_id)["id"]
        fresh_id = order_for(customer_id)["id"]
        stale = repo.get(stale_id)
        stale.created_at = datetime.now(UTC) - timedelta(days=10)
        repo.add(stale)

        assert [str(order.id) for order in repo.recent(days=7)] == [fresh_id]
        assert [str(order.id) for order in repo.recent()] == [fresh_id, stale_id]


class TestOrderStatistics:
    def test_empty(self):
        stats = order_statistics()

        assert stats.total_orders == 0
        assert stats.total_revenue == 0.0
        assert stats.average_order_value == 0.0

    def test_counts_and_revenue(self, customer_id, order_for):
        delivered = order_for(customer_id, quantity=3)
        order_for(customer_id, quantity=1)
        cancelled = order_for(customer_id, quantity=2)
        _deliver(delivered["id"])
        _process(CancelOrder(order_id=cancelled["id"]))

        stats = order_statistics()

        assert stats.total_orders == 3
        assert stats.pending_orders == 1
        assert stats.delivered_orders == 1
        assert stats.cancelled_orders == 1
        assert stats.confirmed_orders == 0
        assert stats.shipped_orders == 0
        assert stats.total_revenue == 30.0
        # Delivered revenue spread over all orders
        assert stats.average_order_value == 10.0

    def test_scoped_to_customer(self, customer_id, other_customer_id, order_for):
        _deliver(order_for(customer_id, quantity=2)["id"])
        _deliver(order_for(other_customer_id, quantity=5)["id"])

        stats = order_statistics(customer_id=customer_id)

        assert stats.total_orders == 1
        assert stats.delivered_orders == 1
        assert stats.total_revenue == 20.0
        assert stats.average_order_value == 20.0
