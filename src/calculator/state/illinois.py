"""
Illinois Form IL-1040 - Individual Income Tax Return.

IL starts from federal AGI, applies Schedule M additions and subtractions,
deducts a per-person exemption allowance and applies a flat rate.

- No standard deduction; the exemption allowance covers the taxpayer,
  the spouse on a joint return, and each dependent
- Additions: federally tax-exempt interest and exempt-interest dividends
- Subtractions: U.S. government obligation interest
- Credits: IL EIC at 20% of the federal credit
- Part-year and nonresident filers: net income times the residency ratio
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, TYPE_CHECKING

from calculator.apportionment import apportionment_ratio
from calculator.decimal_math import to_cents
from calculator.state.base_state_calculator import (
    ReviewItem,
    ReviewResultLine,
    ReviewSection,
    StateModule,
    StateResult,
    settle,
)
from calculator.state.configs import ILLINOIS_2025
from calculator.state.state_tax_config import StateTaxConfig
from models.state import ResidencyType, StateReturnConfig
from models.taxpayer import FilingStatus
from models.traced import TracedValue

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class IL1040Result:
    federal_agi: int
    additions: int  # Schedule M, federally tax-exempt interest
    subtractions: int  # Schedule M, U.S. obligation interest
    base_income: int
    exemption_count: int
    exemption_allowance: int
    net_income: int
    taxable_income: int
    tax: int
    eic: int
    total_credits: int
    tax_after_credits: int
    ratio: float
    subtraction_inputs: Tuple[str, ...] = ()
    withholding_inputs: Tuple[str, ...] = ()


class IllinoisModule(StateModule):
    """Illinois IL-1040."""

    state_code = "IL"
    state_name = "Illinois"
    form_label = "IL Form IL-1040"
    sidebar_label = "IL-1040"

    node_labels = {
        "il1040.federalAGI": "Federal adjusted gross income",
        "il1040.ilAdditions": "IL additions (Schedule M)",
        "il1040.ilSubtractions": "IL subtractions (Schedule M)",
        "il1040.ilBaseIncome": "Illinois base income",
        "il1040.exemptionAllowance": "IL personal exemption allowance",
        "il1040.ilNetIncome": "Illinois net income",
        "il1040.ilTaxableIncome": "Illinois taxable income",
        "il1040.ilTax": "Illinois income tax (4.95%)",
        "il1040.ilEIC": "IL Earned Income Credit",
        "il1040.totalCredits": "IL total credits",
        "il1040.taxAfterCredits": "IL tax after credits",
        "il1040.stateWithholding": "IL state income tax withheld",
        "il1040.estimatedPayments": "IL estimated payments",
        "il1040.totalPayments": "IL total payments",
        "il1040.overpaid": "IL overpaid (refund)",
        "il1040.amountOwed": "IL amount you owe",
    }

    review_layout = (
        ReviewSection("Income", (
            ReviewItem("Federal AGI", "il1040.federalAGI",
                       "Illinois starts from your federal adjusted gross income on Form 1040 Line 11."),
            ReviewItem("IL Additions", "il1040.ilAdditions",
                       "Federally tax-exempt interest income is added back."),
            ReviewItem("IL Subtractions", "il1040.ilSubtractions",
                       "U.S. government obligation interest is exempt from Illinois tax."),
            ReviewItem("Illinois Base Income", "il1040.ilBaseIncome"),
        )),
        ReviewSection("Exemptions", (
            ReviewItem("Exemption Allowance", "il1040.exemptionAllowance",
                       "$2,850 for each of the taxpayer, spouse and dependents."),
            ReviewItem("Illinois Net Income", "il1040.ilNetIncome"),
        )),
        ReviewSection("Tax & Credits", (
            ReviewItem("Illinois Taxable Income", "il1040.ilTaxableIncome"),
            ReviewItem("Illinois Tax (4.95%)", "il1040.ilTax"),
            ReviewItem("IL Earned Income Credit", "il1040.ilEIC",
                       "20% of the federal earned income credit."),
            ReviewItem("Tax After Credits", "il1040.taxAfterCredits"),
        )),
        ReviewSection("Payments", (
            ReviewItem("IL State Withholding", "il1040.stateWithholding"),
            ReviewItem("IL Estimated Payments", "il1040.estimatedPayments"),
        )),
    )

    review_result_lines = (
        ReviewResultLine("refund", "IL Refund", "il1040.overpaid"),
        ReviewResultLine("owed", "IL Amount You Owe", "il1040.amountOwed"),
        ReviewResultLine("zero", "IL tax balance", "il1040.taxAfterCredits"),
    )

    def __init__(self, config: StateTaxConfig = ILLINOIS_2025):
        super().__init__(config)

    def exemption_count(self, tax_return: "TaxReturn") -> int:
        count = 1
        if tax_return.filing_status == FilingStatus.MARRIED_JOINT and tax_return.spouse is not None:
            count += 1
        return count + len(tax_return.dependents)

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        config: StateReturnConfig,
    ) -> StateResult:
        ratio = apportionment_ratio(config, tax_return.tax_year)
        federal_agi = federal.agi

        additions = federal.line("2a").amount
        ints = tax_return.form1099_ints
        subtractions = sum(i.us_obligation_interest for i in ints)
        base_income = max(0, federal_agi + additions - subtractions)

        count = self.exemption_count(tax_return)
        exemption = count * to_cents(self.config.personal_exemption_amount)
        net_income = max(0, base_income - exemption)
        taxable = self.prorate(net_income, ratio) if ratio < 1 else net_income

        tax = self.calculate_brackets(taxable, tax_return.filing_status.value)
        federal_eic = federal.earned_income_credit.credit.amount if federal.earned_income_credit else 0
        eic = self.calculate_state_eitc(federal_eic)
        tax_after_credits = max(0, tax - eic)

        withholding = self.get_state_withholding(tax_return)
        other = config.estimated_payments
        overpaid, owed = settle(tax_after_credits, withholding + other)

        detail = IL1040Result(
            federal_agi=federal_agi,
            additions=additions,
            subtractions=subtractions,
            base_income=base_income,
            exemption_count=count,
            exemption_allowance=exemption,
            net_income=net_income,
            taxable_income=taxable,
            tax=tax,
            eic=eic,
            total_credits=eic,
            tax_after_credits=tax_after_credits,
            ratio=ratio,
            subtraction_inputs=tuple(i.ref("us_obligation_interest") for i in ints),
            withholding_inputs=tuple(self.withholding_refs(tax_return)),
        )
        return StateResult(
            state_code=self.state_code,
            form_label=self.form_label,
            residency_type=config.residency_type,
            state_agi=base_income,
            state_taxable_income=taxable,
            state_tax=tax,
            state_credits=eic,
            tax_after_credits=tax_after_credits,
            state_withholding=withholding,
            other_payments=other,
            overpaid=overpaid,
            amount_owed=owed,
            apportionment_ratio=None if config.residency_type == ResidencyType.FULL_YEAR else ratio,
            detail=detail,
        )

    def collect_traced_values(self, result: StateResult) -> Dict[str, TracedValue]:
        form: IL1040Result = result.detail
        values: Dict[str, TracedValue] = {}
        self.node(values, "il1040.federalAGI", form.federal_agi, ["form1040.line11"], "IL-1040, Line 1")
        self.node(values, "il1040.ilAdditions", form.additions, ["form1040.line2a"], "IL-1040, Line 2")
        self.node(values, "il1040.ilSubtractions", form.subtractions, form.subtraction_inputs,
                  "IL-1040, Line 7 (Schedule M)")
        self.node(values, "il1040.ilBaseIncome", form.base_income,
                  ["il1040.federalAGI", "il1040.ilAdditions", "il1040.ilSubtractions"], "IL-1040, Line 9")
        self.node(values, "il1040.exemptionAllowance", form.exemption_allowance, [],
                  f"IL-1040, Line 10 (${self.config.personal_exemption_amount:,.0f} x {form.exemption_count})")
        self.node(values, "il1040.ilNetIncome", form.net_income,
                  ["il1040.ilBaseIncome", "il1040.exemptionAllowance"], "IL-1040, Line 11")
        self.node(values, "il1040.ilTaxableIncome", form.taxable_income, ["il1040.ilNetIncome"],
                  "IL-1040, Line 11" if form.ratio >= 1 else "Schedule NR, Line 46")
        self.node(values, "il1040.ilTax", form.tax, ["il1040.ilTaxableIncome"], "IL-1040, Line 12")
        self.node(values, "il1040.ilEIC", form.eic, ["eic.creditAmount"], "Schedule IL-E/EIC")
        self.node(values, "il1040.totalCredits", form.total_credits, ["il1040.ilEIC"], "IL-1040, Line 18")
        self.node(values, "il1040.taxAfterCredits", form.tax_after_credits,
                  ["il1040.ilTax", "il1040.totalCredits"], "IL-1040, Line 19")
        self.add_payment_nodes(values, "il1040", result, form.withholding_inputs)
        return values

