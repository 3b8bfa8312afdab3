"""Order lookups and reporting."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.shared.money import ZERO, as_amount, round_money, to_decimal


@ordering.repository(part_of=Order)
class OrderRepository:
    def get_by_number(self, order_number):
        orders = self._dao.query.filter(order_number=order_number).all().items
        if not orders:
            raise ObjectNotFoundError(f"Order not found with number: {order_number}")
        return orders[0]

    def order_number_exists(self, order_number):
        return self._dao.query.filter(order_number=order_number).all().total > 0

    def recent(self, days=None):
        """Newest first. With ``days``, only orders placed within that many days."""
        query = self._dao.query
        if days is not None:
            query = query.filter(created_at__gte=datetime.now(UTC) - timedelta(days=days))
        return query.order_by("-created_at").all().items

    def for_customer(self, customer_id, status=None):
        filters = {"customer_id": str(customer_id)}
        if status is not None:
            filters["status"] = status.value
        return self._dao.query.filter(**filters).order_by("-created_at").all().items

    def with_status(self, status):
        return self._dao.query.filter(status=status.value).order_by("-created_at").all().items

    def cancellable(self, customer_id=None):
        filters = {"status__in": [OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value]}
        if customer_id is not None:
            filters["customer_id"] = str(customer_id)
        return self._dao.query.filter(**filters).order_by("-created_at").all().items

    def count(self, customer_id=None, status=None):
        filters = {}
        if customer_id is not None:
            filters["customer_id"] = str(customer_id)
        if status is not None:
            filters["status"] = status.value
        query = self._dao.query.filter(**filters) if filters else self._dao.query
        return query.all().total


@dataclass(frozen=True)
class OrderStatistics:
    total_orders: int
    pending_orders: int
    confirmed_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: float
    average_order_value: float


def order_statistics(customer_id=None):
    """Order counts per status plus revenue from delivered orders.

    The average spreads delivered revenue over every order counted, cancelled
    ones included.
    """
    repo = current_domain.repository_for(Order)

    counts = {status: repo.count(customer_id=customer_id, status=status) for status in OrderStatus}
    total_orders = repo.count(customer_id=customer_id)

    if customer_id is not None:
        delivered = repo.for_customer(customer_id, status=OrderStatus.DELIVERED)
    else:
        delivered = repo.with_status(OrderStatus.DELIVERED)
    revenue = sum((to_decimal(order.total_amount) for order in delivered), ZERO)
    average = round_money(revenue / total_orders) if total_orders else ZERO

    return OrderStatistics(
        total_orders=total_orders,
        pending_orders=counts[OrderStatus.PENDING],
        confirmed_orders=counts[OrderStatus.CONFIRMED],
        shipped_orders=counts[OrderStatus.SHIPPED],
        delivered_orders=counts[OrderStatus.DELIVERED],
        cancelled_orders=counts[OrderStatus.CANCELLED],
        total_revenue=as_amount(revenue),
        average_order_value=as_amount(average),
    )
