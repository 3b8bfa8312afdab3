"""Customer aggregate: the account an order and a cart belong to.

Only the attributes order placement needs are modelled here; account
management and authentication are handled elsewhere.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, String

from ordering.customer.events import CustomerRegistered
from ordering.domain import ordering


@ordering.aggregate
class Customer:
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=255)
    phone = String(max_length=30)
    registered_at = DateTime()

    @classmethod
    def register(cls, name, email, phone=None):
        now = datetime.now(UTC)
        customer = cls(name=name, email=email, phone=phone, registered_at=now)
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                name=name,
                email=email,
                registered_at=now,
            )
        )
        return customer
