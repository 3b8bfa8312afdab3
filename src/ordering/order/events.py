"""Domain events for the Order aggregate.

Events are raised by the aggregate and dispatched when the unit of work that
persisted the order commits.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was opened for a customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPlaced:
    """Checkout finished: items attached, stock deducted and totals final."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal_amount = Float(required=True)
    discount_code = String()
    discount_amount = Float()
    total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderItemAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)
    new_total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderItemRemoved:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderItemCorrected:
    """An administrator changed a line item's quantity or unit price."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)
    new_total_amount = Float(required=True)


@ordering.event(part_of="Order")
class DiscountApplied:
    __version__ = 1

    order_id = Identifier(required=True)
    discount_code = String(required=True)
    discount_amount = Float(required=True)
    new_total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
