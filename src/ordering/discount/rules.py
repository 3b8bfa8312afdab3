"""Discount eligibility and amount calculation.

Everything here is read-only: discounts are looked up and evaluated, never
modified. ``evaluate`` is the pure core; ``validate`` and ``apply`` resolve a
code first. Checks run in a fixed order and the first failure wins:

    not found → inactive → outside window → usage limit → minimum amount

The active window is half-open: a discount ending at ``end_date`` is already
expired at that instant.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from ordering.discount.discount import Discount, DiscountReason, normalize_code
from ordering.errors import InvalidDiscount
from ordering.shared.money import as_amount, round_money, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    code: str
    reason: DiscountReason
    message: str
    discount_amount: float | None = None
    required_minimum: float | None = None
    discount: Discount | None = None

    @property
    def is_valid(self):
        return self.reason is DiscountReason.VALID

    @property
    def remaining_usage(self):
        if self.discount is None:
            return None
        return self.discount.remaining_usage()

    def raise_if_invalid(self):
        if not self.is_valid:
            raise InvalidDiscount(
                self.reason,
                self.message,
                required_minimum=self.required_minimum,
            )


def _invalid(code, reason, message, **extra):
    return ValidationOutcome(code=code, reason=reason, message=message, **extra)


def evaluate(discount, order_amount, now=None, code=None):
    """Check one discount against an order amount at a point in time."""
    now = now or datetime.now(UTC)
    code = code if code is not None else (discount.code if discount else "")

    if discount is None:
        return _invalid(code, DiscountReason.NOT_FOUND, "Discount code not found")

    if not discount.is_active:
        return _invalid(code, DiscountReason.INACTIVE, "Discount is inactive", discount=discount)

    if not discount.has_started(now):
        return _invalid(code, DiscountReason.NOT_STARTED, "Discount has not started yet", discount=discount)

    if discount.has_expired(now):
        return _invalid(code, DiscountReason.EXPIRED, "Discount has expired", discount=discount)

    if discount.is_usage_limit_reached():
        return _invalid(
            code,
            DiscountReason.LIMIT_REACHED,
            "Discount usage limit has been reached",
            discount=discount,
        )

    if not discount.is_valid_for_order_amount(order_amount):
        minimum = round_money(discount.min_order_amount)
        return _invalid(
            code,
            DiscountReason.INSUFFICIENT_AMOUNT,
            f"Order amount must be at least {minimum} to use this discount",
            required_minimum=float(minimum),
            discount=discount,
        )

    return ValidationOutcome(
        code=code,
        reason=DiscountReason.VALID,
        message="Discount is valid",
        discount_amount=as_amount(discount.calculate_discount_amount(order_amount)),
        discount=discount,
    )


def validate(code, order_amount, now=None):
    """Look up ``code`` (case-insensitively) and evaluate it against ``order_amount``."""
    discount = current_domain.repository_for(Discount).find_by_code(code)
    outcome = evaluate(discount, order_amount, now=now, code=normalize_code(code))

    logger.debug(
        "Discount evaluated",
        discount_code=outcome.code,
        order_amount=as_amount(to_decimal(order_amount)),
        reason=outcome.reason.value,
    )
    return outcome


def apply(code, order_amount, now=None):
    """Return the discount amount for ``code`` or raise ``InvalidDiscount``."""
    outcome = validate(code, order_amount, now=now)
    outcome.raise_if_invalid()
    return outcome.discount_amount


def available_discounts(order_amount, now=None):
    """Every discount that would be accepted for ``order_amount`` right now."""
    now = now or datetime.now(UTC)
    repo = current_domain.repository_for(Discount)
    return [discount for discount in repo.active_discounts() if evaluate(discount, order_amount, now=now).is_valid]
