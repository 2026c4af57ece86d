"""
Other refundable credits (Schedule 3, Part II -> Form 1040, Line 31).

Only excess Social Security withholding is modelled: with two or more
employers, each withholds on its own wages up to the wage base, and the
combined excess over the single-employer maximum is refunded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from calculator.decimal_math import apply_rate, to_cents
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue


@dataclass(frozen=True)
class RefundableCreditItem:
    credit_id: str
    description: str
    amount: int
    citation: str


@dataclass(frozen=True)
class RefundableCreditsResult:
    line31: TracedValue
    items: List[RefundableCreditItem] = field(default_factory=list)


def max_ss_withholding(config: TaxYearConfig) -> int:
    return apply_rate(to_cents(config.ss_wage_base), config.employee_ss_rate)


def compute_refundable_credits(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
) -> RefundableCreditsResult:
    items: List[RefundableCreditItem] = []
    w2s = tax_return.w2s

    excess = 0
    if len(w2s) >= 2:
        withheld = sum(w.social_security_tax_withheld for w in w2s)
        excess = max(0, withheld - max_ss_withholding(config))
    excess_value = recorder.compute(
        "schedule3.line11",
        excess,
        [w.ref("social_security_tax_withheld") for w in w2s] if len(w2s) >= 2 else [],
        "Schedule 3, Line 11",
    )
    if excess > 0:
        items.append(RefundableCreditItem(
            "excessSSWithholding",
            "Excess Social Security tax withheld (multiple employers)",
            excess,
            "Schedule 3, Line 11",
        ))

    line31 = recorder.compute("form1040.line31", excess_value.amount, ["schedule3.line11"], "Form 1040, Line 31")
    return RefundableCreditsResult(line31, items)
