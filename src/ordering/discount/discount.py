"""Discount aggregate: a promotional code with eligibility rules and a usage counter.

A discount is either a percentage of the order amount (optionally capped) or a
fixed amount. It can be switched off with ``is_active``, limited to a time
window ``[start_date, end_date)``, restricted to orders above a minimum amount,
and limited to a number of uses. ``used_count`` only grows, through
``register_usage``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from ordering.discount.events import (
    DiscountCreated,
    DiscountDeactivated,
    DiscountUpdated,
    DiscountUsageRegistered,
)
from ordering.domain import ordering
from ordering.errors import InvalidDiscount
from ordering.shared.money import ZERO, as_amount, round_money, to_decimal

CLEARABLE_FIELDS = ("max_discount_amount", "usage_limit", "start_date", "end_date")


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class DiscountReason(Enum):
    NOT_FOUND = "not-found"
    INACTIVE = "inactive"
    NOT_STARTED = "not-started"
    EXPIRED = "expired"
    LIMIT_REACHED = "limit-reached"
    INSUFFICIENT_AMOUNT = "insufficient-amount"
    VALID = "valid"


def normalize_code(code):
    return (code or "").strip().upper()


def _as_utc(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@ordering.aggregate
class Discount:
    code = String(required=True, max_length=50)
    description = Text()
    discount_type = String(
        choices=DiscountType,
        default=DiscountType.PERCENTAGE.value,
    )
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    used_count = Integer(default=0, min_value=0)
    start_date = DateTime()
    end_date = DateTime()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def used_count_cannot_exceed_usage_limit(self):
        if self.usage_limit is not None and (self.used_count or 0) > self.usage_limit:
            raise ValidationError({"used_count": ["Discount usage limit exceeded"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and (self.discount_value or 0) > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @invariant.post
    def window_must_end_after_it_starts(self):
        if self.start_date and self.end_date and _as_utc(self.end_date) <= _as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        discount_value,
        discount_type=DiscountType.PERCENTAGE.value,
        description=None,
        min_order_amount=0.0,
        max_discount_amount=None,
        usage_limit=None,
        start_date=None,
        end_date=None,
        is_active=True,
    ):
        now = datetime.now(UTC)
        discount = cls(
            code=normalize_code(code),
            description=description,
            discount_type=discount_type,
            discount_value=discount_value,
            min_order_amount=min_order_amount or 0.0,
            max_discount_amount=max_discount_amount,
            usage_limit=usage_limit,
            used_count=0,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        discount.raise_(
            DiscountCreated(
                discount_id=str(discount.id),
                code=discount.code,
                discount_type=discount.discount_type,
                discount_value=discount.discount_value,
            )
        )
        return discount

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def has_started(self, now):
        return self.start_date is None or _as_utc(now) >= _as_utc(self.start_date)

    def has_expired(self, now):
        return self.end_date is not None and _as_utc(now) >= _as_utc(self.end_date)

    def is_currently_active(self, now=None):
        now = now or datetime.now(UTC)
        return bool(self.is_active) and self.has_started(now) and not self.has_expired(now)

    def is_usage_limit_reached(self):
        return self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit

    def remaining_usage(self):
        if self.usage_limit is None:
            return None
        return max(0, self.usage_limit - (self.used_count or 0))

    def is_valid_for_order_amount(self, order_amount):
        return to_decimal(order_amount) >= to_decimal(self.min_order_amount)

    def calculate_discount_amount(self, order_amount):
        """Amount taken off ``order_amount``, rounded half-up to cents.

        Percentage discounts are capped at ``max_discount_amount`` when one is
        set. Fixed discounts are returned as-is, even when larger than the
        order amount.
        """
        if self.discount_type == DiscountType.PERCENTAGE.value:
            amount = to_decimal(order_amount) * to_decimal(self.discount_value) / 100
            if self.max_discount_amount is not None:
                amount = min(amount, to_decimal(self.max_discount_amount))
        else:
            amount = to_decimal(self.discount_value)
        return round_money(max(amount, ZERO))

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def register_usage(self, amount, customer_id, order_id=None):
        """Count one more use of this discount.

        Refuses to go past ``usage_limit``, so a stale read that slipped past
        validation can never push the counter over the limit.
        """
        if self.is_usage_limit_reached():
            raise InvalidDiscount(
                DiscountReason.LIMIT_REACHED,
                "Discount usage limit has been reached",
            )

        self.used_count = (self.used_count or 0) + 1
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DiscountUsageRegistered(
                discount_id=str(self.id),
                code=self.code,
                customer_id=str(customer_id),
                order_id=str(order_id) if order_id else None,
                amount=as_amount(amount),
                used_count=self.used_count,
            )
        )

    def update_details(self, clear=(), **changes):
        """Apply a partial update.

        ``None`` values leave the attribute unchanged. Optional attributes named
        in ``clear`` are unset.
        """
        applied = {key: value for key, value in changes.items() if value is not None}
        not_clearable = sorted(set(clear) - set(CLEARABLE_FIELDS))
        if not_clearable:
            raise ValidationError({"clear_fields": [f"Cannot clear: {', '.join(not_clearable)}"]})
        both = sorted(set(clear) & set(applied))
        if both:
            raise ValidationError({"clear_fields": [f"Cannot both set and clear: {', '.join(both)}"]})
        applied.update(dict.fromkeys(clear))
        if "code" in applied:
            applied["code"] = normalize_code(applied["code"])

        with atomic_change(self):
            for key, value in applied.items():
                setattr(self, key, value)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            DiscountUpdated(
                discount_id=str(self.id),
                code=self.code,
                changed_fields=", ".join(sorted(applied)),
            )
        )

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DiscountDeactivated(
                discount_id=str(self.id),
                code=self.code,
            )
        )


@ordering.repository(part_of=Discount)
class DiscountRepository:
    def find_by_code(self, code):
        """Case-insensitive lookup. Returns ``None`` when no discount has the code."""
        normalized = normalize_code(code)
        if not normalized:
            return None
        discounts = self._dao.query.filter(code=normalized).all().items
        return discounts[0] if discounts else None

    def all_discounts(self):
        return self._dao.query.order_by("code").all().items

    def active_discounts(self):
        return self._dao.query.filter(is_active=True).order_by("code").all().items
