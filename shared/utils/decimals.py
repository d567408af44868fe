"""
Money helpers.

Amounts are stored as Numeric(10, 2) and handled as Decimal inside the
service layer. Every value that leaves the service layer goes through
to_number() so callers never see a Decimal.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a stored or computed amount to a 2-place Decimal."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        # str() first so 0.1 becomes Decimal("0.1") and not its binary expansion
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: Decimal | int | float | str, quantity: int) -> Decimal:
    """unit_price * quantity, rounded to cents."""
    return to_decimal(to_decimal(unit_price) * quantity)


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    return to_decimal(sum(amounts, ZERO))


def final_amount(total: Decimal, discount: Decimal | None) -> Decimal:
    """total - discount, never below zero."""
    return max(to_decimal(total) - to_decimal(discount), ZERO)


def to_number(value: Decimal | int | float | None) -> float | None:
    """Normalize a stored amount to a plain float (None stays None)."""
    if value is None:
        return None
    return float(to_decimal(value))
