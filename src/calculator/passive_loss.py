"""
Passive Activity Loss Limitations (Form 8582, IRC Section 469(i)).

Rental real estate losses of active participants are deductible up to a
special allowance that phases out with modified AGI. The allowance is a
single pool per return: Schedule E rental losses and K-1 rental losses draw
from the same remaining balance, in that order.

IRC References:
- Section 469(i)(2): $25,000 offset for rental real estate
- Section 469(i)(3): Phase-out at 50% of MAGI over $100,000
- Section 469(i)(5): Married filing separately
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Tuple

from calculator.decimal_math import to_cents, to_decimal, whole_cents
from calculator.tax_year_config import TaxYearConfig
from models.taxpayer import FilingStatus


def special_allowance(
    magi: int,
    filing_status: FilingStatus,
    mfs_lived_apart: bool,
    config: TaxYearConfig,
) -> int:
    """
    Rental real estate special allowance in cents.

    MFS filers who lived with their spouse at any time get no allowance.
    """
    if filing_status == FilingStatus.MARRIED_SEPARATE:
        if not mfs_lived_apart:
            return 0
        base = to_cents(config.pal_mfs_rental_loss_allowance)
        threshold = to_cents(config.pal_mfs_phaseout_start)
    else:
        base = to_cents(config.pal_rental_loss_allowance)
        threshold = to_cents(config.pal_phaseout_start)

    excess = max(0, magi - threshold)
    reduction = whole_cents(Decimal(excess) * to_decimal(config.pal_phaseout_rate))
    return max(0, base - reduction)


def preliminary_income_proxy(
    wages: int,
    taxable_interest: int,
    ordinary_dividends: int,
    capital_gain: int,
    business_income: int,
    k1_passthrough: int,
) -> int:
    """
    Modified AGI used to size the special allowance.

    AGI is not known yet when rental losses are limited, so the allowance
    is measured against income computed before any rental activity:
    Form 1040 Lines 1a, 2b, 3b and 7, Schedule C (including 1099-NEC)
    and K-1 ordinary, rental and guaranteed payment income. Schedule E is
    left out.
    """
    return wages + taxable_interest + ordinary_dividends + capital_gain + business_income + k1_passthrough


@dataclass(frozen=True)
class AllowanceClaim:
    """Outcome of one source drawing on the shared allowance."""
    source: str
    net_income: int
    allowed: int
    disallowed: int
    remaining_after: int

    @property
    def deductible_amount(self) -> int:
        """Amount flowing to Schedule 1: profit as-is, or the allowed loss (negative)."""
        if self.net_income >= 0:
            return self.net_income
        return -self.allowed


@dataclass
class LossAllowanceCoordinator:
    """
    Single shared allowance pool for one return.

    Profits pass through untouched. Losses are allowed up to whatever is
    left in the pool, in claim order.
    """
    total_allowance: int
    _claims: List[AllowanceClaim] = field(default_factory=list)
    _used: int = 0

    @property
    def used(self) -> int:
        return self._used

    @property
    def remaining(self) -> int:
        return max(0, self.total_allowance - self._used)

    @property
    def claims(self) -> Tuple[AllowanceClaim, ...]:
        return tuple(self._claims)

    def claim(self, source: str, net_income: int) -> AllowanceClaim:
        if net_income >= 0:
            result = AllowanceClaim(source, net_income, 0, 0, self.remaining)
        else:
            loss = -net_income
            allowed = min(loss, self.remaining)
            self._used += allowed
            result = AllowanceClaim(source, net_income, allowed, loss - allowed, self.remaining)
        self._claims.append(result)
        return result


@dataclass(frozen=True)
class Form8582Result:
    """Summary of the special allowance for the return."""
    modified_agi: int
    special_allowance: int
    allowance_used: int
    claims: Tuple[AllowanceClaim, ...]

    @property
    def total_disallowed(self) -> int:
        """Suspended loss carried forward to next year."""
        return sum(c.disallowed for c in self.claims)

    def claim_for(self, source: str) -> AllowanceClaim:
        for c in self.claims:
            if c.source == source:
                return c
        raise KeyError(source)

    @classmethod
    def from_coordinator(cls, modified_agi: int, coordinator: LossAllowanceCoordinator) -> "Form8582Result":
        return cls(
            modified_agi=modified_agi,
            special_allowance=coordinator.total_allowance,
            allowance_used=coordinator.used,
            claims=coordinator.claims,
        )
