"""Administrative corrections to an order's line items."""

from protean import handle
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.views import order_view


@ordering.command(part_of="Order")
class CorrectItemQuantity:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Order")
class CorrectItemPrice:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    unit_price = Float(required=True)


@ordering.command(part_of="Order")
class RemoveOrderItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderCorrectionHandler:
    @handle(CorrectItemQuantity)
    def correct_item_quantity(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_item_quantity(command.item_id, command.quantity)
        repo.add(order)
        return order_view(order)

    @handle(CorrectItemPrice)
    def correct_item_price(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_item_price(command.item_id, command.unit_price)
        repo.add(order)
        return order_view(order)

    @handle(RemoveOrderItem)
    def remove_order_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.remove_item(command.item_id)
        repo.add(order)
        return order_view(order)
