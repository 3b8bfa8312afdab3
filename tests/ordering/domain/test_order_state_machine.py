"""Tests for the order status state machine."""

import pytest
from ordering.errors import InvalidStateTransition, UnknownOrderStatus
from ordering.order.events import OrderCancelled, OrderConfirmed, OrderDelivered, OrderShipped
from ordering.order.order import Order, OrderStatus


def _make_order():
    order = Order.create(
        customer_id="cust-001",
        shipping_address="12 Orchard Lane",
        customer_name="Sam Lee",
        customer_email="sam@example.com",
    )
    order.add_item("prod-001", quantity=1, unit_price=10.0)
    return order


def _order_in(status):
    order = _make_order()
    steps = {
        OrderStatus.PENDING: [],
        OrderStatus.CONFIRMED: [order.confirm],
        OrderStatus.SHIPPED: [order.confirm, order.ship],
        OrderStatus.DELIVERED: [order.confirm, order.ship, order.deliver],
        OrderStatus.CANCELLED: [order.cancel],
    }
    for step in steps[status]:
        step()
    return order


class TestHappyPath:
    def test_full_lifecycle(self):
        order = _make_order()
        order.confirm()
        assert order.status == OrderStatus.CONFIRMED.value

        order.ship()
        assert order.status == OrderStatus.SHIPPED.value
        assert order.shipped_at is not None

        order.deliver()
        assert order.status == OrderStatus.DELIVERED.value
        assert order.delivered_at is not None

    def test_lifecycle_events(self):
        order = _make_order()
        order._events.clear()
        order.confirm()
        order.ship()
        order.deliver()
        assert [type(e) for e in order._events] == [OrderConfirmed, OrderShipped, OrderDelivered]

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED])
    def test_cancel_from_open_states(self, status):
        order = _order_in(status)
        order.cancel()
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_at is not None
        assert isinstance(order._events[-1], OrderCancelled)
        assert order._events[-1].previous_status == status.value


class TestIllegalTransitions:
    @pytest.mark.parametrize(
        "status",
        [OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    )
    def test_confirm_only_from_pending(self, status):
        with pytest.raises(InvalidStateTransition):
            _order_in(status).confirm()

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    )
    def test_ship_only_from_confirmed(self, status):
        with pytest.raises(InvalidStateTransition):
            _order_in(status).ship()

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    )
    def test_deliver_only_after_ship(self, status):
        with pytest.raises(InvalidStateTransition):
            _order_in(status).deliver()

    @pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_cancel_rejected_once_shipped_or_closed(self, status):
        order = _order_in(status)
        with pytest.raises(InvalidStateTransition) as exc:
            order.cancel()
        assert exc.value.message == f"Order cannot be cancelled in current status: {status.value}"

    def test_failed_transition_leaves_status_unchanged(self):
        order = _order_in(OrderStatus.PENDING)
        with pytest.raises(InvalidStateTransition):
            order.ship()
        assert order.status == OrderStatus.PENDING.value
        assert order.shipped_at is None


class TestStatusQueries:
    @pytest.mark.parametrize(
        ("status", "cancellable", "completed"),
        [
            (OrderStatus.PENDING, True, False),
            (OrderStatus.CONFIRMED, True, False),
            (OrderStatus.SHIPPED, False, False),
            (OrderStatus.DELIVERED, False, True),
            (OrderStatus.CANCELLED, False, True),
        ],
    )
    def test_flags(self, status, cancellable, completed):
        order = _order_in(status)
        assert order.can_be_cancelled() is cancellable
        assert order.is_completed() is completed


class TestTransitionTo:
    def test_transition_to_dispatches(self):
        order = _make_order()
        order.transition_to(OrderStatus.CONFIRMED)
        order.transition_to(OrderStatus.SHIPPED)
        assert order.status == OrderStatus.SHIPPED.value

    def test_transition_back_to_pending_rejected(self):
        order = _order_in(OrderStatus.CONFIRMED)
        with pytest.raises(InvalidStateTransition):
            order.transition_to(OrderStatus.PENDING)


class TestStatusParsing:
    @pytest.mark.parametrize("text", ["shipped", "SHIPPED", "Shipped", "  shipped "])
    def test_case_insensitive(self, text):
        assert OrderStatus.parse(text) is OrderStatus.SHIPPED

    @pytest.mark.parametrize("text", ["returned", "", None])
    def test_unknown_status(self, text):
        with pytest.raises(UnknownOrderStatus) as exc:
            OrderStatus.parse(text)
        assert exc.value.kind == "unknown-status"
