"""Product aggregate: the price and stock a checkout reads and deducts.

Catalogue browsing and category management are out of scope; this aggregate
carries just enough to price a cart and to keep stock consistent when orders
are placed. Concurrent stock writes are caught by the aggregate version that
Protean checks on every save.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Integer, String

from ordering.domain import ordering
from ordering.errors import InsufficientStock, InvalidQuantity
from ordering.product.events import StockReduced, StockReplenished


@ordering.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.01)
    stock_quantity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, price, stock_quantity=0):
        now = datetime.now(UTC)
        return cls(
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            created_at=now,
            updated_at=now,
        )

    def has_sufficient_stock(self, quantity):
        return (self.stock_quantity or 0) >= (quantity or 0)

    def reduce_stock(self, quantity, order_id=None):
        if quantity is None or quantity <= 0:
            raise InvalidQuantity("Quantity must be positive", quantity=quantity)
        if not self.has_sufficient_stock(quantity):
            raise InsufficientStock(available=self.stock_quantity, requested=quantity)

        self.stock_quantity -= quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReduced(
                product_id=str(self.id),
                quantity=quantity,
                remaining=self.stock_quantity,
                order_id=str(order_id) if order_id else None,
            )
        )

    def restock(self, quantity):
        if quantity is None or quantity <= 0:
            raise InvalidQuantity("Quantity must be positive", quantity=quantity)

        self.stock_quantity = (self.stock_quantity or 0) + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReplenished(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock_quantity,
            )
        )
