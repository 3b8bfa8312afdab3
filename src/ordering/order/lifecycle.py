"""Order lifecycle: status transition commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.order.views import order_view

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class DeliverOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier()  # When set, the order must belong to this customer


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    def _transition(self, order_id, action):
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        previous_status = order.status
        action(order)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            from_status=previous_status,
            to_status=order.status,
        )
        return order_view(order)

    @handle(ConfirmOrder)
    def confirm_order(self, command):
        return self._transition(command.order_id, Order.confirm)

    @handle(ShipOrder)
    def ship_order(self, command):
        return self._transition(command.order_id, Order.ship)

    @handle(DeliverOrder)
    def deliver_order(self, command):
        return self._transition(command.order_id, Order.deliver)

    @handle(CancelOrder)
    def cancel_order(self, command):
        if command.customer_id:
            order = current_domain.repository_for(Order).get(command.order_id)
            ensure_belongs_to(order, command.customer_id)
        return self._transition(command.order_id, Order.cancel)

    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        target = OrderStatus.parse(command.status)
        return self._transition(
            command.order_id,
            lambda order: order.transition_to(target),
        )


def ensure_belongs_to(order, customer_id):
    """Customers only see their own orders; anything else reads as missing."""
    if str(order.customer_id) != str(customer_id):
        raise ObjectNotFoundError(f"Order not found with ID: {order.id}")
