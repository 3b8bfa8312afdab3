"""Domain events for the Discount and DiscountUsage aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Discount")
class DiscountCreated:
    """A new discount code was created."""

    __version__ = 1

    discount_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)


@ordering.event(part_of="Discount")
class DiscountUpdated:
    """Discount attributes were changed by an administrator."""

    __version__ = 1

    discount_id = Identifier(required=True)
    code = String(required=True)
    changed_fields = String()


@ordering.event(part_of="Discount")
class DiscountDeactivated:
    __version__ = 1

    discount_id = Identifier(required=True)
    code = String(required=True)


@ordering.event(part_of="Discount")
class DiscountUsageRegistered:
    """The discount's usage counter was incremented."""

    __version__ = 1

    discount_id = Identifier(required=True)
    code = String(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier()
    amount = Float(required=True)
    used_count = Integer(required=True)


@ordering.event(part_of="DiscountUsage")
class DiscountUsageRecorded:
    """An immutable usage record was written to the ledger."""

    __version__ = 1

    usage_id = Identifier(required=True)
    discount_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier()
    discount_amount = Float(required=True)
    used_at = DateTime(required=True)
