"""Domain events for the Product aggregate."""

from protean.fields import Identifier, Integer

from ordering.domain import ordering


@ordering.event(part_of="Product")
class StockReduced:
    """Stock was deducted, normally because an order was placed."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)
    order_id = Identifier()


@ordering.event(part_of="Product")
class StockReplenished:
    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
