"""
Form 6251 - Alternative Minimum Tax (Individuals)

AMTI adds back the SALT deduction and the ISO bargain element to taxable
income. The exemption phases out at 25 cents per dollar of AMTI over the
threshold. Tentative minimum tax uses 26%/28% rates, with qualified
dividends and net capital gain still taxed at the preferential rates.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from calculator.brackets import amt_bracket_tax, preferential_brackets, stacked_preferential_tax
from calculator.decimal_math import to_decimal, whole_cents
from calculator.schedules.schedule_a import ScheduleAResult
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue


@dataclass(frozen=True)
class AMTResult:
    line1: TracedValue  # Taxable income
    line2a: TracedValue  # SALT add-back
    line2i: TracedValue  # ISO bargain element
    line4: TracedValue  # AMTI
    line5: TracedValue  # Exemption after phase-out
    line6: TracedValue  # AMTI after exemption
    line9: TracedValue  # Tentative minimum tax
    line11: TracedValue  # AMT


def tentative_minimum_tax(
    amti_after_exemption: int,
    preferential_income: int,
    filing_status: str,
    config: TaxYearConfig,
) -> int:
    def flat(amount: int) -> int:
        return amt_bracket_tax(amount, filing_status, config)

    if amti_after_exemption <= 0:
        return 0
    if preferential_income <= 0:
        return flat(amti_after_exemption)
    return stacked_preferential_tax(
        amti_after_exemption,
        preferential_income,
        preferential_brackets(filing_status, config),
        flat,
    )


def compute_amt(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
    schedule_a: Optional[ScheduleAResult],
    preferential_income: int,
    preferential_inputs: list,
) -> AMTResult:
    """Requires Form 1040 Lines 15 and 16 to be recorded already."""
    status = tax_return.filing_status.value

    line1 = recorder.compute("form6251.line1", recorder.amount("form1040.line15"), ["form1040.line15"], "Form 6251, Line 1")
    if schedule_a is not None:
        line2a = recorder.compute("form6251.line2a", schedule_a.salt_deduction, ["scheduleA.line5e"], "Form 6251, Line 2a")
    else:
        line2a = recorder.zero("form6251.line2a", "Form 6251, Line 2a")
    line2i = recorder.sum_fields("form6251.line2i", tax_return.iso_exercises, "bargain_element", "Form 6251, Line 2i")

    line4 = recorder.compute(
        "form6251.line4",
        line1.amount + line2a.amount + line2i.amount,
        ["form6251.line1", "form6251.line2a", "form6251.line2i"],
        "Form 6251, Line 4",
    )

    exemption = config.cents(config.amt_exemption, status)
    threshold = config.cents(config.amt_exemption_phaseout_start, status)
    reduction = whole_cents(Decimal(max(0, line4.amount - threshold)) * to_decimal(config.amt_exemption_phaseout_rate))
    line5 = recorder.compute("form6251.line5", max(0, exemption - reduction), ["form6251.line4"], "Form 6251, Line 5")
    line6 = recorder.compute(
        "form6251.line6",
        max(0, line4.amount - line5.amount),
        ["form6251.line4", "form6251.line5"],
        "Form 6251, Line 6",
    )

    tmt = tentative_minimum_tax(line6.amount, min(preferential_income, line6.amount), status, config)
    line9 = recorder.compute("form6251.line9", tmt, ["form6251.line6"] + list(preferential_inputs), "Form 6251, Line 9")
    line11 = recorder.compute(
        "form6251.line11",
        max(0, line9.amount - recorder.amount("form1040.line16")),
        ["form6251.line9", "form1040.line16"],
        "Form 6251, Line 11",
    )
    return AMTResult(line1, line2a, line2i, line4, line5, line6, line9, line11)
