"""
California Form 540 - Resident Income Tax Return.

Sits downstream of the federal Form 1040:
- CA AGI is federal AGI less U.S. obligation interest (Schedule CA)
- Standard deduction, or CA itemized deductions when the federal return
  itemizes (no SALT cap, state income tax not deductible)
- Nine brackets from 1% to 12.3%
- Personal and dependent exemption credits, reduced 6% for each $2,500
  of CA AGI over the phase-out threshold
- Mental Health Services Tax: 1% of taxable income over $1,000,000
- Nonrefundable renter's credit below the AGI limit

Part-year residents (540NR) prorate tax and exemption credits by days of
residence; nonresidents by the CA-source share of federal AGI.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Tuple, TYPE_CHECKING

from calculator.apportionment import apportionment_ratio
from calculator.decimal_math import apply_rate, ceil_units, to_cents, whole_cents
from calculator.state.base_state_calculator import (
    ReviewItem,
    ReviewResultLine,
    ReviewSection,
    StateModule,
    StateResult,
    settle,
)
from calculator.state.configs import CALIFORNIA_2025
from calculator.state.state_tax_config import StateTaxConfig
from models.state import ResidencyType, StateReturnConfig
from models.taxpayer import FilingStatus
from models.traced import TracedValue

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class Form540Result:
    federal_agi: int  # Line 13
    subtractions: int  # Schedule CA, U.S. obligation interest
    ca_agi: int  # Line 17
    standard_deduction: int
    itemized_deduction: int  # 0 when not itemizing
    deduction: int  # Line 18
    deduction_method: str
    taxable_income: int  # Line 19
    bracket_tax: int  # Line 31
    mental_health_tax: int  # Line 62
    exemption_credits_full: int  # Line 32 before proration
    exemption_credits: int
    total_tax: int  # after residency proration
    renters_credit: int  # Line 46
    total_credits: int
    tax_after_credits: int  # Line 48
    ratio: float
    subtraction_inputs: Tuple[str, ...] = ()
    itemized_inputs: Tuple[str, ...] = ()
    withholding_inputs: Tuple[str, ...] = ()


class CaliforniaModule(StateModule):
    """California Form 540 / 540NR."""

    state_code = "CA"
    state_name = "California"
    form_label = "CA Form 540"
    sidebar_label = "CA 540"

    node_labels = {
        "form540.federalAGI": "Federal adjusted gross income",
        "form540.caSubtractions": "CA income subtractions",
        "form540.caAGI": "California adjusted gross income",
        "form540.standardDeduction": "CA standard deduction",
        "form540.itemizedDeduction": "CA itemized deductions",
        "form540.caDeduction": "California deduction",
        "form540.caTaxableIncome": "California taxable income",
        "form540.caTax": "California tax",
        "form540.mentalHealthTax": "Mental health services tax (1%)",
        "form540.totalTax": "California tax after residency proration",
        "form540.exemptionCredits": "CA exemption credits",
        "form540.rentersCredit": "CA renter's credit",
        "form540.totalCredits": "CA total credits",
        "form540.taxAfterCredits": "CA tax after credits",
        "form540.stateWithholding": "CA state income tax withheld",
        "form540.estimatedPayments": "CA estimated payments",
        "form540.totalPayments": "CA total payments",
        "form540.overpaid": "CA overpaid (refund)",
        "form540.amountOwed": "CA amount you owe",
    }

    review_layout = (
        ReviewSection("Income", (
            ReviewItem("Federal AGI", "form540.federalAGI"),
            ReviewItem("CA Subtractions", "form540.caSubtractions",
                       "U.S. Treasury and savings bond interest is not taxed by California."),
            ReviewItem("CA AGI", "form540.caAGI"),
        )),
        ReviewSection("Deductions", (
            ReviewItem("CA Deduction", "form540.caDeduction",
                       "The larger of the CA standard deduction and CA itemized deductions."),
            ReviewItem("CA Taxable Income", "form540.caTaxableIncome"),
        )),
        ReviewSection("Tax & Credits", (
            ReviewItem("CA Tax", "form540.caTax"),
            ReviewItem("Mental Health Services Tax", "form540.mentalHealthTax"),
            ReviewItem("Exemption Credits", "form540.exemptionCredits"),
            ReviewItem("Renter's Credit", "form540.rentersCredit"),
            ReviewItem("CA Tax After Credits", "form540.taxAfterCredits"),
        )),
        ReviewSection("Payments", (
            ReviewItem("CA State Withholding", "form540.stateWithholding"),
            ReviewItem("CA Estimated Payments", "form540.estimatedPayments"),
        )),
    )

    review_result_lines = (
        ReviewResultLine("refund", "CA Refund", "form540.overpaid"),
        ReviewResultLine("owed", "CA Amount You Owe", "form540.amountOwed"),
        ReviewResultLine("zero", "CA tax balance", "form540.taxAfterCredits"),
    )

    def __init__(self, config: StateTaxConfig = CALIFORNIA_2025):
        super().__init__(config)

    def residency_ratio(self, tax_return: "TaxReturn", federal: "Form1040Result", config: StateReturnConfig) -> float:
        if config.residency_type != ResidencyType.NONRESIDENT:
            return apportionment_ratio(config, tax_return.tax_year)
        # Nonresidents: CA-source wages over federal AGI
        if federal.agi <= 0:
            return 0.0
        ca_wages = sum(w.state_wages for w in tax_return.w2s if w.state_code == self.state_code)
        return max(0.0, min(1.0, ca_wages / federal.agi))

    def itemized_deduction(self, tax_return: "TaxReturn", federal: "Form1040Result", ca_agi: int) -> int:
        """CA Schedule CA itemized deductions; 0 when the federal return does not itemize."""
        itemized = tax_return.deductions.itemized
        schedule_a = federal.schedule_a
        if itemized is None or schedule_a is None:
            return 0
        medical_floor = apply_rate(max(0, ca_agi), self.config.medical_expense_floor_pct)
        medical = max(0, itemized.medical_expenses - medical_floor)
        taxes = itemized.real_estate_tax + itemized.personal_property_tax
        return (
            medical
            + taxes
            + itemized.mortgage_interest
            + schedule_a.line14.amount
            + schedule_a.line16.amount
        )

    def exemption_credits(self, filing_status: FilingStatus, dependents: int, ca_agi: int) -> int:
        personal = 2 if filing_status in (FilingStatus.MARRIED_JOINT, FilingStatus.QUALIFYING_WIDOW) else 1
        total = personal * to_cents(self.config.personal_exemption_credit) + dependents * to_cents(
            self.config.dependent_exemption_credit
        )
        threshold = to_cents(self.config.exemption_credit_phaseout_start.get(filing_status.value, 0.0))
        if ca_agi <= threshold:
            return total
        steps = ceil_units(ca_agi - threshold, to_cents(self.config.exemption_credit_phaseout_step))
        reduction = whole_cents(Decimal(total) * Decimal(str(self.config.exemption_credit_phaseout_rate)) * steps)
        return max(0, total - min(reduction, total))

    def renters_credit(self, filing_status: FilingStatus, ca_agi: int, config: StateReturnConfig) -> int:
        if not config.rent_paid or config.residency_type == ResidencyType.NONRESIDENT:
            return 0
        if filing_status in (FilingStatus.SINGLE, FilingStatus.MARRIED_SEPARATE):
            credit, limit = self.config.renter_credit_single, self.config.renter_credit_income_limit_single
        else:
            credit, limit = self.config.renter_credit_joint, self.config.renter_credit_income_limit_joint
        if limit is not None and ca_agi > to_cents(limit):
            return 0
        return to_cents(credit)

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        config: StateReturnConfig,
    ) -> StateResult:
        status = tax_return.filing_status
        ratio = self.residency_ratio(tax_return, federal, config)

        ints = tax_return.form1099_ints
        subtractions = sum(i.us_obligation_interest for i in ints)
        ca_agi = federal.agi - subtractions

        standard = self.config.get_standard_deduction(status.value)
        itemized = self.itemized_deduction(tax_return, federal, ca_agi)
        deduction = max(standard, itemized)
        taxable = max(0, ca_agi - deduction)

        bracket_amount = self.calculate_brackets(taxable, status.value)
        mental_health = 0
        if self.config.surtax_threshold is not None:
            mental_health = apply_rate(max(0, taxable - to_cents(self.config.surtax_threshold)), self.config.surtax_rate)
        exemptions_full = self.exemption_credits(status, len(tax_return.dependents), ca_agi)

        total_tax = bracket_amount + mental_health
        exemptions = exemptions_full
        if ratio < 1:
            total_tax = self.prorate(total_tax, ratio)
            exemptions = self.prorate(exemptions_full, ratio)

        renters = self.renters_credit(status, ca_agi, config)
        credits = exemptions + renters
        tax_after_credits = max(0, total_tax - credits)

        withholding = self.get_state_withholding(tax_return)
        other = config.estimated_payments
        overpaid, owed = settle(tax_after_credits, withholding + other)

        itemized_inputs: List[str] = []
        if itemized:
            itemized_inputs = [
                "scheduleA.line1", "form540.caAGI", "scheduleA.line5b", "scheduleA.line5c",
                "scheduleA.line8a", "scheduleA.line14", "scheduleA.line16",
            ]

        detail = Form540Result(
            federal_agi=federal.agi,
            subtractions=subtractions,
            ca_agi=ca_agi,
            standard_deduction=standard,
            itemized_deduction=itemized,
            deduction=deduction,
            deduction_method="itemized" if itemized > standard else "standard",
            taxable_income=taxable,
            bracket_tax=bracket_amount,
            mental_health_tax=mental_health,
            exemption_credits_full=exemptions_full,
            exemption_credits=exemptions,
            total_tax=total_tax,
            renters_credit=renters,
            total_credits=credits,
            tax_after_credits=tax_after_credits,
            ratio=ratio,
            subtraction_inputs=tuple(i.ref("us_obligation_interest") for i in ints),
            itemized_inputs=tuple(itemized_inputs),
            withholding_inputs=tuple(self.withholding_refs(tax_return)),
        )
        return StateResult(
            state_code=self.state_code,
            form_label=self.form_label,
            residency_type=config.residency_type,
            state_agi=ca_agi,
            state_taxable_income=taxable,
            state_tax=total_tax,
            state_credits=credits,
            tax_after_credits=tax_after_credits,
            state_withholding=withholding,
            other_payments=other,
            overpaid=overpaid,
            amount_owed=owed,
            apportionment_ratio=None if config.residency_type == ResidencyType.FULL_YEAR else ratio,
            detail=detail,
        )

    def collect_traced_values(self, result: StateResult) -> Dict[str, TracedValue]:
        form: Form540Result = result.detail
        values: Dict[str, TracedValue] = {}
        self.node(values, "form540.federalAGI", form.federal_agi, ["form1040.line11"], "Form 540, Line 13")
        self.node(values, "form540.caSubtractions", form.subtractions, form.subtraction_inputs,
                  "Schedule CA, Part I")
        self.node(values, "form540.caAGI", form.ca_agi, ["form540.federalAGI", "form540.caSubtractions"],
                  "Form 540, Line 17")
        self.node(values, "form540.standardDeduction", form.standard_deduction, [], "Form 540, Line 18")
        self.node(values, "form540.itemizedDeduction", form.itemized_deduction, form.itemized_inputs,
                  "Schedule CA, Part II")
        self.node(values, "form540.caDeduction", form.deduction,
                  ["form540.standardDeduction", "form540.itemizedDeduction"], "Form 540, Line 18")
        self.node(values, "form540.caTaxableIncome", form.taxable_income,
                  ["form540.caAGI", "form540.caDeduction"], "Form 540, Line 19")
        self.node(values, "form540.caTax", form.bracket_tax, ["form540.caTaxableIncome"], "Form 540, Line 31")
        self.node(values, "form540.mentalHealthTax", form.mental_health_tax, ["form540.caTaxableIncome"],
                  "Form 540, Line 62")
        self.node(values, "form540.totalTax", form.total_tax, ["form540.caTax", "form540.mentalHealthTax"],
                  "Form 540, Line 31" if form.ratio >= 1 else "Form 540NR, Line 37")
        self.node(values, "form540.exemptionCredits", form.exemption_credits, ["form540.caAGI"],
                  "Form 540, Line 32")
        self.node(values, "form540.rentersCredit", form.renters_credit, ["form540.caAGI"], "Form 540, Line 46")
        self.node(values, "form540.totalCredits", form.total_credits,
                  ["form540.exemptionCredits", "form540.rentersCredit"], "Form 540, Lines 32 and 46")
        self.node(values, "form540.taxAfterCredits", form.tax_after_credits,
                  ["form540.totalTax", "form540.totalCredits"], "Form 540, Line 48")
        self.add_payment_nodes(values, "form540", result, form.withholding_inputs)
        return values
