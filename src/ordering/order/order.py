"""Order aggregate: the core of the ordering domain.

An order owns its line items and keeps its totals in step with them. Prices on
line items are snapshots taken when the order was placed; the product's live
price never flows back into an existing order.

State Machine:
    PENDING → CONFIRMED → SHIPPED → DELIVERED
    PENDING | CONFIRMED → CANCELLED

DELIVERED and CANCELLED are terminal.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.errors import InvalidPrice, InvalidQuantity, InvalidStateTransition, UnknownOrderStatus
from ordering.order.events import (
    DiscountApplied,
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderDelivered,
    OrderItemAdded,
    OrderItemCorrected,
    OrderItemRemoved,
    OrderPlaced,
    OrderShipped,
)
from ordering.shared.money import ZERO, as_amount, round_money, to_decimal


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, text):
        """Case-insensitive lookup by name or value, e.g. ``"shipped"`` or ``"SHIPPED"``."""
        normalized = (text or "").strip().upper()
        for status in cls:
            if normalized in (status.name, status.value.upper()):
                return status
        raise UnknownOrderStatus(text)


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}
_COMPLETED_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def generate_order_number(customer_id, now=None):
    """``ORD-<epoch millis>-<customer id>``; anonymous orders use ``0``."""
    now = now or datetime.now(UTC)
    return f"ORD-{int(now.timestamp() * 1000)}-{customer_id or 0}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line in an order: a product, how many, and the price paid for each.

    The back-reference to the owning order is maintained by the order when the
    item is added or removed.
    """

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(default=0.0)

    def calculate_subtotal(self):
        # Missing values count as zero so totals can always be computed
        return round_money(to_decimal(self.quantity) * to_decimal(self.unit_price))


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=100)
    customer_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    subtotal_amount = Float(default=0.0)
    discount_code = String(max_length=50)
    discount_amount = Float(default=0.0)
    total_amount = Float(default=0.0)
    shipping_address = Text(required=True)
    customer_name = String(required=True, max_length=150)
    customer_email = String(required=True, max_length=255)
    phone_number = String(max_length=30)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def total_amount_cannot_be_negative(self):
        if self.total_amount is not None and self.total_amount < 0:
            raise ValidationError({"total_amount": ["Order total cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        customer_id,
        shipping_address,
        customer_name,
        customer_email,
        phone_number=None,
        notes=None,
        order_number=None,
    ):
        """Open a new, empty PENDING order.

        The order number is generated here, once; pass ``order_number`` only
        when the caller has already reserved one.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=order_number or generate_order_number(customer_id, now),
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            customer_name=customer_name,
            customer_email=customer_email,
            phone_number=phone_number,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self):
        return OrderStatus(self.status)

    def can_be_cancelled(self):
        return self.current_status in _CANCELLABLE_STATES

    def is_completed(self):
        return self.current_status in _COMPLETED_STATES

    def total_items(self):
        return sum(item.quantity or 0 for item in self.items)

    @property
    def is_empty(self):
        return not self.items

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def recalculate_total_amount(self):
        """Refresh line subtotals and order totals from the current items.

        Never raises: a line with a missing quantity or price contributes zero.
        Returns the pre-discount subtotal.
        """
        subtotal = ZERO
        for item in self.items:
            line_subtotal = item.calculate_subtotal()
            item.subtotal = as_amount(line_subtotal)
            subtotal += line_subtotal

        total = max(ZERO, round_money(subtotal) - round_money(self.discount_amount))

        self.subtotal_amount = as_amount(subtotal)
        self.total_amount = as_amount(total)
        return self.subtotal_amount

    def apply_discount(self, code, amount):
        """Record a discount and derive the final total, clamped at zero."""
        self.discount_code = code
        self.discount_amount = as_amount(amount)
        self.recalculate_total_amount()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DiscountApplied(
                order_id=str(self.id),
                discount_code=code,
                discount_amount=self.discount_amount,
                new_total_amount=self.total_amount,
            )
        )

    def mark_placed(self):
        """Announce that checkout finished and the totals are final."""
        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                item_count=len(self.items),
                subtotal_amount=self.subtotal_amount,
                discount_code=self.discount_code,
                discount_amount=self.discount_amount,
                total_amount=self.total_amount,
            )
        )

    # -------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, unit_price, product_name=None):
        _ensure_positive_quantity(quantity)
        _ensure_positive_price(unit_price)

        item = OrderItem(
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            unit_price=as_amount(unit_price),
        )
        item.subtotal = as_amount(item.calculate_subtotal())
        self.add_items(item)
        self.recalculate_total_amount()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemAdded(
                order_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=quantity,
                unit_price=item.unit_price,
                new_total_amount=self.total_amount,
            )
        )
        return item

    def remove_item(self, item_id):
        item = self._find_item(item_id)

        self.remove_items(item)
        self.recalculate_total_amount()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemRemoved(
                order_id=str(self.id),
                item_id=str(item_id),
                new_total_amount=self.total_amount,
            )
        )

    def update_item_quantity(self, item_id, quantity):
        """Administrative correction of a line's quantity."""
        _ensure_positive_quantity(quantity)
        item = self._find_item(item_id)

        item.quantity = quantity
        self._item_corrected(item)

    def update_item_price(self, item_id, unit_price):
        """Administrative correction of a line's unit price."""
        _ensure_positive_price(unit_price)
        item = self._find_item(item_id)

        item.unit_price = as_amount(unit_price)
        self._item_corrected(item)

    def _item_corrected(self, item):
        self.recalculate_total_amount()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemCorrected(
                order_id=str(self.id),
                item_id=str(item.id),
                quantity=item.quantity,
                unit_price=item.unit_price,
                new_total_amount=self.total_amount,
            )
        )

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Order item not found with ID: {item_id}")
        return item

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status, message):
        if target_status not in _VALID_TRANSITIONS[self.current_status]:
            raise InvalidStateTransition(
                message,
                current_status=self.status,
                target_status=target_status.value,
            )

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def confirm(self):
        self._assert_can_transition(OrderStatus.CONFIRMED, "Only pending orders can be confirmed")
        now = datetime.now(UTC)
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = now

        self.raise_(OrderConfirmed(order_id=str(self.id), confirmed_at=now))

    def ship(self):
        self._assert_can_transition(OrderStatus.SHIPPED, "Only confirmed orders can be shipped")
        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.shipped_at = now
        self.updated_at = now

        self.raise_(OrderShipped(order_id=str(self.id), shipped_at=now))

    def deliver(self):
        self._assert_can_transition(OrderStatus.DELIVERED, "Only shipped orders can be delivered")
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now

        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    def cancel(self):
        self._assert_can_transition(
            OrderStatus.CANCELLED,
            f"Order cannot be cancelled in current status: {self.status}",
        )
        previous_status = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous_status,
                cancelled_at=now,
            )
        )

    def transition_to(self, target_status):
        """Move to ``target_status`` through the matching lifecycle method."""
        transitions = {
            OrderStatus.CONFIRMED: self.confirm,
            OrderStatus.SHIPPED: self.ship,
            OrderStatus.DELIVERED: self.deliver,
            OrderStatus.CANCELLED: self.cancel,
        }
        if target_status not in transitions:
            raise InvalidStateTransition(
                f"Invalid status transition from {self.status} to {target_status.value}",
                current_status=self.status,
                target_status=target_status.value,
            )
        transitions[target_status]()


def _ensure_positive_quantity(quantity):
    if quantity is None or quantity <= 0:
        raise InvalidQuantity("Quantity must be positive", quantity=quantity)


def _ensure_positive_price(unit_price):
    if unit_price is None or to_decimal(unit_price) <= 0:
        raise InvalidPrice("Unit price must be positive", unit_price=unit_price)
