"""DiscountUsage aggregate: one immutable ledger entry per discount application."""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, String

from ordering.discount.events import DiscountUsageRecorded
from ordering.domain import ordering
from ordering.shared.money import as_amount


@ordering.aggregate
class DiscountUsage:
    discount_id = Identifier(required=True)
    discount_code = String(max_length=50)
    customer_id = Identifier(required=True)
    order_id = Identifier()
    discount_amount = Float(required=True, min_value=0.0)
    used_at = DateTime()

    @classmethod
    def record(cls, discount, customer_id, amount, order_id=None):
        now = datetime.now(UTC)
        usage = cls(
            discount_id=str(discount.id),
            discount_code=discount.code,
            customer_id=str(customer_id),
            order_id=str(order_id) if order_id else None,
            discount_amount=as_amount(amount),
            used_at=now,
        )
        usage.raise_(
            DiscountUsageRecorded(
                usage_id=str(usage.id),
                discount_id=usage.discount_id,
                customer_id=usage.customer_id,
                order_id=usage.order_id,
                discount_amount=usage.discount_amount,
                used_at=now,
            )
        )
        return usage


@ordering.repository(part_of=DiscountUsage)
class DiscountUsageRepository:
    def for_discount(self, discount_id):
        return self._dao.query.filter(discount_id=str(discount_id)).order_by("-used_at").all()

    def for_customer(self, customer_id):
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-used_at").all()

    def for_customer_and_discount(self, customer_id, discount_id):
        return self._dao.query.filter(
            customer_id=str(customer_id),
            discount_id=str(discount_id),
        ).all()
