"""Shopping Cart aggregate: the items a customer intends to order.

Each customer has one cart. It is created lazily the first time it is needed,
filled through the item commands, read by order placement, and emptied once an
order has been placed from it.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.domain import ordering


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_empty(self):
        return not self.items

    def total_quantity(self):
        return sum(item.quantity or 0 for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity):
        """Add a product to the cart (or increase quantity if already present)."""
        existing = next(
            (i for i in self.items if str(i.product_id) == str(product_id)),
            None,
        )

        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
            )
        )

    def update_item_quantity(self, item_id, new_quantity):
        """Update the quantity of an existing cart item."""
        if new_quantity is None or new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._find_item(item_id)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        """Remove an item from the cart."""
        item = self._find_item(item_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    def clear(self):
        """Remove every item from the cart."""
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed=removed,
            )
        )

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Cart item not found with ID: {item_id}")
        return item


@ordering.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_customer(self, customer_id):
        carts = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return carts[0] if carts else None

    def find_or_create_for(self, customer_id):
        """Return the customer's cart, creating an empty one on first use."""
        cart = self.find_for_customer(customer_id)
        if cart is None:
            cart = ShoppingCart.create(customer_id=str(customer_id))
            self.add(cart)
        return cart
