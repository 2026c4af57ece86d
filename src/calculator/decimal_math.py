"""
Decimal Math Utilities for Tax Calculations.

All amounts inside the calculator are integer cents. Rates and dollar
parameters are converted through Decimal so that the same inputs always
produce the same outputs, independent of float representation.

Why Decimal?
- Float: 0.1 + 0.2 = 0.30000000000000004
- Decimal: 0.1 + 0.2 = 0.3

This matters for:
- Tax brackets where thresholds are precise ($48,475 vs $48,475.00001)
- Rounding to pennies (IRS requires exact cent amounts)
- Audit trails where $0.01 discrepancy can flag issues
"""

from decimal import Decimal, ROUND_HALF_UP, ROUND_CEILING
from typing import Iterable

from models._decimal_utils import Numeric, to_decimal, whole_cents

__all__ = [
    "Numeric",
    "to_decimal",
    "whole_cents",
    "to_cents",
    "apply_rate",
    "clamp_cents",
    "ceil_units",
    "sum_cents",
    "format_money",
    "CENTS_PER_DOLLAR",
]

CENTS_PER_DOLLAR = 100
ZERO = Decimal("0")
ONE = Decimal("1")


def to_cents(dollars: Numeric) -> int:
    """
    Convert a dollar parameter to integer cents.

    Examples:
        >>> to_cents(15750)
        1575000
        >>> to_cents("0.125")
        13
    """
    return int((to_decimal(dollars) * CENTS_PER_DOLLAR).quantize(ONE, rounding=ROUND_HALF_UP))


def apply_rate(amount_cents: Numeric, rate_value: Numeric) -> int:
    """
    Multiply an amount in cents by a rate and round half-up to a whole cent.

    Examples:
        >>> apply_rate(10000, 0.0495)
        495
    """
    return whole_cents(to_decimal(amount_cents) * to_decimal(rate_value))


def clamp_cents(value: int, minimum: int, maximum: int) -> int:
    """Clamp value between minimum and maximum."""
    return max(minimum, min(value, maximum))


def ceil_units(amount_cents: int, unit_cents: int) -> int:
    """
    Number of whole (or partial) units in an amount.

    Used by "for each $1,000 or fraction thereof" phase-outs.

    Examples:
        >>> ceil_units(100001, 100000)
        2
    """
    if amount_cents <= 0:
        return 0
    return int((Decimal(amount_cents) / Decimal(unit_cents)).to_integral_value(rounding=ROUND_CEILING))


def sum_cents(values: Iterable[int]) -> int:
    return sum(values, 0)


def format_money(amount_cents: int) -> str:
    """
    Format cents as a money string.

    Examples:
        >>> format_money(123456789)
        '$1,234,567.89'
        >>> format_money(-5000)
        '-$50.00'
    """
    dollars = Decimal(amount_cents) / CENTS_PER_DOLLAR
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"
