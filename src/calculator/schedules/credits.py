"""
Child Tax Credit (Schedule 8812) and Earned Income Credit.

CTC: $2,000 per qualifying child under 17 and $500 per other dependent,
reduced by $50 for each $1,000 (or part) of AGI over the threshold. The
non-refundable part is limited to tax; the refundable additional credit is
the smallest of the unused credit, $1,700 per child and 15% of earned
income over $2,500.

EIC: piecewise linear in income (phase-in, plateau, phase-out), evaluated
at both earned income and AGI; the smaller amount is allowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from calculator.decimal_math import apply_rate, ceil_units, to_cents, to_decimal, whole_cents
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.taxpayer import QUALIFYING_CHILD_RELATIONSHIPS, Dependent, FilingStatus
from models.traced import TracedValue

CTC_AGE_LIMIT = 17
EIC_AGE_LIMIT = 19
EIC_STUDENT_AGE_LIMIT = 24
MIN_MONTHS_LIVED = 7


def is_ctc_qualifying_child(dependent: Dependent, tax_year: int) -> bool:
    if not dependent.has_valid_ssn:
        return False
    if dependent.relationship not in QUALIFYING_CHILD_RELATIONSHIPS:
        return False
    if dependent.months_lived_with_taxpayer < MIN_MONTHS_LIVED:
        return False
    return 0 <= dependent.age_at_year_end(tax_year) < CTC_AGE_LIMIT


def is_eic_qualifying_child(dependent: Dependent, tax_year: int) -> bool:
    if not dependent.has_valid_ssn:
        return False
    if dependent.relationship not in QUALIFYING_CHILD_RELATIONSHIPS:
        return False
    if dependent.months_lived_with_taxpayer < MIN_MONTHS_LIVED:
        return False
    if dependent.is_permanently_disabled:
        return True
    age = dependent.age_at_year_end(tax_year)
    limit = EIC_STUDENT_AGE_LIMIT if dependent.is_student else EIC_AGE_LIMIT
    return 0 <= age < limit


@dataclass(frozen=True)
class ChildTaxCreditResult:
    qualifying_children: int
    other_dependents: int
    initial_credit: TracedValue
    credit_after_phase_out: TracedValue
    non_refundable: TracedValue  # -> Form 1040, Line 19
    additional_ctc: TracedValue  # -> Form 1040, Line 28


def compute_child_tax_credit(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
) -> ChildTaxCreditResult:
    """Requires Form 1040 Lines 11 and 18 and ``credits.earnedIncome``."""
    year = tax_return.tax_year
    children = sum(1 for d in tax_return.dependents if is_ctc_qualifying_child(d, year))
    others = len(tax_return.dependents) - children

    initial = recorder.compute(
        "ctc.initialCredit",
        children * to_cents(config.child_tax_credit_amount) + others * to_cents(config.other_dependent_credit_amount),
        [],
        "Schedule 8812, Line 8",
    )

    threshold = config.cents(config.child_tax_credit_phaseout_start, tax_return.filing_status.value, 200000.0)
    excess = max(0, recorder.amount("form1040.line11") - threshold)
    reduction = ceil_units(excess, to_cents(1000)) * to_cents(config.child_tax_credit_phaseout_step)
    after = recorder.compute(
        "ctc.creditAfterPhaseOut",
        max(0, initial.amount - reduction),
        ["ctc.initialCredit", "form1040.line11"],
        "Schedule 8812, Line 12",
    )

    non_refundable = recorder.compute(
        "ctc.nonRefundableCredit",
        min(after.amount, max(0, recorder.amount("form1040.line18"))),
        ["ctc.creditAfterPhaseOut", "form1040.line18"],
        "Schedule 8812, Line 14",
    )

    additional_amount = 0
    unused = after.amount - non_refundable.amount
    if children > 0 and unused > 0:
        cap = children * to_cents(config.child_tax_credit_refundable)
        earned_over = max(0, recorder.amount("credits.earnedIncome") - to_cents(config.actc_earned_income_floor))
        additional_amount = min(unused, cap, apply_rate(earned_over, config.actc_rate))
    additional = recorder.compute(
        "ctc.additionalCredit",
        additional_amount,
        ["ctc.creditAfterPhaseOut", "ctc.nonRefundableCredit", "credits.earnedIncome"],
        "Schedule 8812, Line 27",
    )

    return ChildTaxCreditResult(children, others, initial, after, non_refundable, additional)


@dataclass(frozen=True)
class EarnedIncomeCreditResult:
    qualifying_children: int
    eligible: bool
    ineligible_reason: Optional[str]
    credit_at_earned_income: int
    credit_at_agi: int
    credit: TracedValue  # -> Form 1040, Line 27


def eic_at_income(income: int, children: int, filing_status: FilingStatus, config: TaxYearConfig) -> int:
    """Credit from the EIC table for one income figure (cents)."""
    if income <= 0:
        return 0
    index = min(children, 3)
    status = filing_status.value
    max_credit = to_cents(config.eitc_max_credit[index])
    phase_in_rate = to_decimal(config.eitc_phase_in_rate[index])

    phase_in = whole_cents(Decimal(income) * phase_in_rate)
    if phase_in < max_credit:
        return phase_in

    if config.eitc_phaseout_end:
        ends = config.eitc_phaseout_end.get(status) or config.eitc_phaseout_end["single"]
        if income >= to_cents(ends[index]):
            return 0

    starts = config.eitc_phaseout_start.get(status) or config.eitc_phaseout_start["single"]
    phase_out_start = to_cents(starts[index])
    if income <= phase_out_start:
        return max_credit
    reduction = whole_cents(Decimal(income - phase_out_start) * to_decimal(config.eitc_phaseout_rate[index]))
    return max(0, max_credit - reduction)


def _age_eligible(tax_return: TaxReturn, config: TaxYearConfig) -> bool:
    filers = [tax_return.taxpayer]
    if tax_return.filing_status == FilingStatus.MARRIED_JOINT and tax_return.spouse is not None:
        filers.append(tax_return.spouse)
    ages = [f.age_at_year_end(tax_return.tax_year) for f in filers]
    if all(a is None for a in ages):
        return True
    return any(
        a is not None and config.eitc_min_age_no_children <= a <= config.eitc_max_age_no_children
        for a in ages
    )


def compute_earned_income_credit(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
) -> EarnedIncomeCreditResult:
    """Requires Form 1040 Line 11, ``credits.earnedIncome`` and ``eic.investmentIncome``."""
    year = tax_return.tax_year
    children = sum(1 for d in tax_return.dependents if is_eic_qualifying_child(d, year))
    earned = recorder.amount("credits.earnedIncome")
    agi = recorder.amount("form1040.line11")
    investment = recorder.amount("eic.investmentIncome")
    inputs = ["credits.earnedIncome", "form1040.line11", "eic.investmentIncome"]

    reason: Optional[str] = None
    if tax_return.filing_status == FilingStatus.MARRIED_SEPARATE:
        reason = "mfs"
    elif investment > to_cents(config.eitc_investment_income_limit):
        reason = "investment_income"
    elif earned <= 0:
        reason = "no_income"
    elif children == 0 and not _age_eligible(tax_return, config):
        reason = "age"

    if reason is not None:
        credit = recorder.compute("eic.creditAmount", 0, inputs, "Form 1040, Line 27")
        return EarnedIncomeCreditResult(children, False, reason, 0, 0, credit)

    at_earned = eic_at_income(earned, children, tax_return.filing_status, config)
    at_agi = eic_at_income(agi, children, tax_return.filing_status, config)
    credit = recorder.compute("eic.creditAmount", min(at_earned, at_agi), inputs, "Form 1040, Line 27")
    return EarnedIncomeCreditResult(children, True, None, at_earned, at_agi, credit)
