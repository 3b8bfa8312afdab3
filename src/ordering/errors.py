"""Business failures raised by the ordering domain.

Each error is a Protean ``ValidationError`` so callers that already handle
validation failures keep working, and carries a ``kind`` plus a human-readable
``message`` for the API layer. Missing entities are reported with Protean's
``ObjectNotFoundError``, which repositories raise on their own.
"""

from protean.exceptions import ValidationError


class OrderingError(ValidationError):
    kind = "invalid-request"
    field = "request"

    def __init__(self, message, **details):
        self.message = message
        self.details = details
        super().__init__({self.field: [message]})

    def __str__(self):
        return self.message


class InvalidStateTransition(OrderingError):
    kind = "invalid-state-transition"
    field = "status"


class UnknownOrderStatus(OrderingError):
    kind = "unknown-status"
    field = "status"

    def __init__(self, value):
        super().__init__(f"Invalid order status: {value}", value=value)


class InsufficientStock(OrderingError):
    kind = "insufficient-stock"
    field = "stock"

    def __init__(self, available, requested, product_name=None):
        message = f"Insufficient stock. Available: {available}, Requested: {requested}"
        if product_name:
            message = f"Insufficient stock for product: {product_name}. Available: {available}, Requested: {requested}"
        super().__init__(
            message,
            product_name=product_name,
            available=available,
            requested=requested,
        )


class EmptyCart(OrderingError):
    kind = "empty-cart"
    field = "cart"

    def __init__(self):
        super().__init__("Cannot create order from empty cart")


class InvalidDiscount(OrderingError):
    kind = "invalid-discount"
    field = "discount_code"

    def __init__(self, reason, message, required_minimum=None):
        self.reason = reason
        self.required_minimum = required_minimum
        details = {"reason": reason.value}
        if required_minimum is not None:
            details["required_minimum"] = required_minimum
        super().__init__(f"Invalid discount: {message}", **details)


class InvalidQuantity(OrderingError):
    kind = "invalid-quantity"
    field = "quantity"


class InvalidPrice(OrderingError):
    kind = "invalid-price"
    field = "unit_price"


class DuplicateDiscountCode(OrderingError):
    kind = "duplicate-discount-code"
    field = "code"

    def __init__(self, code):
        super().__init__(f"Discount code already exists: {code}", code=code)


class ConcurrentModification(OrderingError):
    """Another writer updated the record first. Safe to retry the whole request."""

    kind = "concurrent-modification"
    field = "version"
    retriable = True

    @classmethod
    def from_stale_write(cls, exc):
        """Wrap Protean's ``ExpectedVersionError`` raised when a save loses the race."""
        return cls("The record was modified concurrently; retry the request", cause=str(exc))
