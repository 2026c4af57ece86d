"""
Surtaxes reported on Schedule 2:

- Net Investment Income Tax (Form 8960, IRC Section 1411): 3.8% of the
  smaller of net investment income and MAGI over the threshold.
- Additional Medicare Tax (Form 8959, IRC Section 3101(b)(2)): 0.9% of
  Medicare wages over the threshold, plus self-employment earnings over
  whatever threshold the wages left unused.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from calculator.decimal_math import apply_rate
from calculator.schedules.schedule_se import ScheduleSEResult
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue


@dataclass(frozen=True)
class SurtaxResult:
    net_investment_income: TracedValue
    niit: TracedValue
    medicare_wages: TracedValue
    additional_medicare_tax: TracedValue


def compute_surtaxes(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
    rental_node_ids: List[str],
    schedule_se: Optional[ScheduleSEResult],
) -> SurtaxResult:
    """Requires Form 1040 Lines 2b, 3b, 7 and 11 to be recorded already."""
    status = tax_return.filing_status.value

    rental = sum(recorder.amount(n) for n in rental_node_ids)
    nii_amount = (
        recorder.amount("form1040.line2b")
        + recorder.amount("form1040.line3b")
        + max(0, recorder.amount("form1040.line7"))
        + max(0, rental)
    )
    nii = recorder.compute(
        "form8960.netInvestmentIncome",
        max(0, nii_amount),
        ["form1040.line2b", "form1040.line3b", "form1040.line7"] + list(rental_node_ids),
        "Form 8960, Line 8",
    )

    magi_excess = max(0, recorder.amount("form1040.line11") - config.cents(config.niit_threshold, status))
    niit = recorder.compute(
        "form8960.niit",
        apply_rate(min(nii.amount, magi_excess), config.niit_rate),
        ["form8960.netInvestmentIncome", "form1040.line11"],
        "Form 8960, Line 17",
    )

    threshold = config.cents(config.additional_medicare_threshold, status)
    medicare_wages = recorder.sum_fields("form8959.line1", tax_return.w2s, "medicare_wages", "Form 8959, Line 1")
    excess_wages = max(0, medicare_wages.amount - threshold)
    inputs = ["form8959.line1"]
    se_excess = 0
    if schedule_se is not None:
        remaining_threshold = max(0, threshold - medicare_wages.amount)
        se_excess = max(0, schedule_se.line4a.amount - remaining_threshold)
        inputs.append("scheduleSE.line4a")
    additional = recorder.compute(
        "form8959.additionalMedicareTax",
        apply_rate(excess_wages, config.additional_medicare_tax_rate)
        + apply_rate(se_excess, config.additional_medicare_tax_rate),
        inputs,
        "Form 8959, Line 18",
    )

    return SurtaxResult(nii, niit, medicare_wages, additional)
