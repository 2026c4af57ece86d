"""
Decimal utilities for model-layer rounding.

This module provides the same to_decimal() and whole-cent rounding as
calculator.decimal_math, but lives in models/ to avoid circular imports
(models -> calculator -> models).

Uses only stdlib 'decimal' - no dependencies on calculator package.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Numeric = Union[int, float, str, Decimal]

CENT = Decimal("1")


def to_decimal(value: Numeric) -> Decimal:
    """Convert a numeric value to Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def whole_cents(value: Numeric) -> int:
    """Round an amount already expressed in cents to an int (ROUND_HALF_UP)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))
