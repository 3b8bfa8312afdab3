"""Discount usage ledger: recording applications and reporting on them.

``record_usage`` writes the usage record and bumps the discount's counter in
the caller's unit of work, so neither can be stored without the other. It does
not re-check eligibility: callers validate first (``rules.validate`` or
``rules.apply``) or, for administrative corrections, deliberately skip it.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from ordering.discount.discount import Discount
from ordering.discount.usage import DiscountUsage
from ordering.domain import ordering
from ordering.shared.money import ZERO, as_amount, round_money, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DiscountUsageStats:
    discount_id: str
    code: str
    total_usages: int
    total_discount_amount: float
    used_count: int
    usage_limit: int | None

    @property
    def remaining_usage(self):
        if self.usage_limit is None:
            return None
        return max(0, self.usage_limit - self.used_count)


def record_usage(discount, customer_id, amount, order_id=None):
    """Persist a usage record and increment ``discount.used_count``.

    The increment is refused once the limit is reached. Protean checks the
    discount's aggregate version on save, so two concurrent recorders cannot
    both win.
    """
    discount.register_usage(amount, customer_id=customer_id, order_id=order_id)
    current_domain.repository_for(Discount).add(discount)

    usage = DiscountUsage.record(
        discount,
        customer_id=customer_id,
        amount=amount,
        order_id=order_id,
    )
    current_domain.repository_for(DiscountUsage).add(usage)

    logger.info(
        "Discount usage recorded",
        discount_code=discount.code,
        customer_id=str(customer_id),
        order_id=str(order_id) if order_id else None,
        amount=usage.discount_amount,
        used_count=discount.used_count,
    )
    return usage


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def usages_for_discount(discount_id):
    return current_domain.repository_for(DiscountUsage).for_discount(discount_id).items


def usages_for_customer(customer_id):
    return current_domain.repository_for(DiscountUsage).for_customer(customer_id).items


def usage_count(discount_id):
    return current_domain.repository_for(DiscountUsage).for_discount(discount_id).total


def total_discount_amount(discount_id):
    total = sum(
        (to_decimal(usage.discount_amount) for usage in usages_for_discount(discount_id)),
        ZERO,
    )
    return as_amount(round_money(total))


def has_customer_used(customer_id, discount_id):
    repo = current_domain.repository_for(DiscountUsage)
    return repo.for_customer_and_discount(customer_id, discount_id).total > 0


def usage_stats(discount_id):
    discount = current_domain.repository_for(Discount).get(discount_id)
    return DiscountUsageStats(
        discount_id=str(discount.id),
        code=discount.code,
        total_usages=usage_count(discount.id),
        total_discount_amount=total_discount_amount(discount.id),
        used_count=discount.used_count or 0,
        usage_limit=discount.usage_limit,
    )


# ---------------------------------------------------------------------------
# Administrative recording
# ---------------------------------------------------------------------------
@ordering.command(part_of="DiscountUsage")
class RecordDiscountUsage:
    discount_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier()
    discount_amount = Float(required=True, min_value=0.0)


@ordering.command_handler(part_of=DiscountUsage)
class DiscountUsageHandler:
    @handle(RecordDiscountUsage)
    def record_discount_usage(self, command):
        discount = current_domain.repository_for(Discount).get(command.discount_id)
        usage = record_usage(
            discount,
            customer_id=command.customer_id,
            amount=command.discount_amount,
            order_id=command.order_id,
        )
        return str(usage.id)
