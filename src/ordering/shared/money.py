"""Monetary arithmetic helpers.

Amounts are persisted as floats but every calculation goes through Decimal and
is rounded to two places, half-up.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert a stored amount to Decimal. Missing values count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def as_amount(value) -> float:
    """Rounded float, ready to be stored in a Float field."""
    return float(round_money(value))
