"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Customer")
class CustomerRegistered:
    """A customer account became known to the ordering context."""

    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)
