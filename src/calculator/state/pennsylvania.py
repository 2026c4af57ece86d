"""
PA-40 - Pennsylvania Personal Income Tax Return.

PA does not start from federal AGI. Income is classified independently
into classes, each floored at zero so a loss in one class cannot offset
another, and the sum is taxed at a flat 3.07% with no deductions.

Part-year residents prorate the tax by days of residence. Nonresidents
are taxed only on PA-source compensation (W-2 Box 15 = PA); interest and
dividends are intangible income and never PA-source for a nonresident.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, TYPE_CHECKING

from calculator.apportionment import apportionment_ratio
from calculator.state.base_state_calculator import (
    ReviewItem,
    ReviewResultLine,
    ReviewSection,
    StateModule,
    StateResult,
    settle,
)
from calculator.state.configs import PENNSYLVANIA_2025
from calculator.state.state_tax_config import StateTaxConfig
from models.state import ResidencyType, StateReturnConfig
from models.traced import TracedValue

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


# (node suffix, PA-40 line)
INCOME_CLASSES: Tuple[Tuple[str, str], ...] = (
    ("compensation", "PA-40, Line 1a"),
    ("interest", "PA-40, Line 2"),
    ("dividends", "PA-40, Line 3"),
    ("netBusinessIncome", "PA-40, Line 4"),
    ("netGains", "PA-40, Line 5"),
    ("rentsRoyalties", "PA-40, Line 6"),
)


@dataclass(frozen=True)
class PA40Result:
    classes: Dict[str, int]
    total_taxable_income: int  # Line 9
    tax_before_proration: int
    tax: int  # Line 12
    tax_after_credits: int  # Line 18
    ratio: float
    class_inputs: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    withholding_inputs: Tuple[str, ...] = ()


class PennsylvaniaModule(StateModule):
    """Pennsylvania PA-40."""

    state_code = "PA"
    state_name = "Pennsylvania"
    form_label = "PA Form PA-40"
    sidebar_label = "PA-40"

    node_labels = {
        "pa40.compensation": "PA compensation",
        "pa40.interest": "PA interest income",
        "pa40.dividends": "PA dividend income",
        "pa40.netBusinessIncome": "PA net business income",
        "pa40.netGains": "PA net gains from property",
        "pa40.rentsRoyalties": "PA rents and royalties",
        "pa40.totalTaxableIncome": "PA total taxable income",
        "pa40.paTax": "PA income tax (3.07%)",
        "pa40.taxAfterCredits": "PA tax after credits",
        "pa40.stateWithholding": "PA state income tax withheld",
        "pa40.estimatedPayments": "PA estimated payments",
        "pa40.totalPayments": "PA total payments",
        "pa40.overpaid": "PA overpaid (refund)",
        "pa40.amountOwed": "PA amount you owe",
    }

    review_layout = (
        ReviewSection("Income Classes", (
            ReviewItem("Compensation", "pa40.compensation"),
            ReviewItem("Interest", "pa40.interest"),
            ReviewItem("Dividends", "pa40.dividends"),
            ReviewItem("Net Business Income", "pa40.netBusinessIncome"),
            ReviewItem("Net Gains", "pa40.netGains",
                       "Pennsylvania has no capital loss deduction; a net loss is zero."),
            ReviewItem("Rents and Royalties", "pa40.rentsRoyalties"),
        )),
        ReviewSection("Tax", (
            ReviewItem("Total PA Taxable Income", "pa40.totalTaxableIncome"),
            ReviewItem("PA Tax (3.07%)", "pa40.paTax"),
        )),
        ReviewSection("Payments", (
            ReviewItem("PA State Withholding", "pa40.stateWithholding"),
            ReviewItem("PA Estimated Payments", "pa40.estimatedPayments"),
        )),
    )

    review_result_lines = (
        ReviewResultLine("refund", "PA Refund", "pa40.overpaid"),
        ReviewResultLine("owed", "PA Amount You Owe", "pa40.amountOwed"),
        ReviewResultLine("zero", "PA tax balance", "pa40.taxAfterCredits"),
    )

    def __init__(self, config: StateTaxConfig = PENNSYLVANIA_2025):
        super().__init__(config)

    def classify_income(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        config: StateReturnConfig,
    ) -> Tuple[Dict[str, int], Dict[str, Tuple[str, ...]]]:
        """Income by PA class (each floored at zero) and the inputs read for it."""
        nonresident = config.residency_type == ResidencyType.NONRESIDENT
        classes: Dict[str, int] = {}
        inputs: Dict[str, List[str]] = {name: [] for name, _ in INCOME_CLASSES}

        # Class 1: PA wages use Box 16, others Box 1
        compensation = 0
        for w2 in tax_return.w2s:
            is_pa = w2.state_code == self.state_code
            if nonresident and not is_pa:
                continue
            if is_pa and w2.state_wages > 0:
                compensation += w2.state_wages
                inputs["compensation"].append(w2.ref("state_wages"))
            else:
                compensation += w2.wages
                inputs["compensation"].append(w2.ref("wages"))
        classes["compensation"] = max(0, compensation)

        if nonresident:
            for name, _ in INCOME_CLASSES[1:]:
                classes[name] = 0
            return classes, {k: tuple(v) for k, v in inputs.items()}

        k1 = federal.k1

        # U.S. obligation interest is exempt
        interest = sum(i.interest_income for i in tax_return.form1099_ints)
        inputs["interest"].extend(i.ref("interest_income") for i in tax_return.form1099_ints)
        if k1 is not None:
            interest += k1.interest.amount
            inputs["interest"].append("k1.totalInterest")
        classes["interest"] = max(0, interest)

        dividends = sum(d.ordinary_dividends for d in tax_return.form1099_divs)
        inputs["dividends"].extend(d.ref("ordinary_dividends") for d in tax_return.form1099_divs)
        if k1 is not None:
            dividends += k1.dividends.amount
            inputs["dividends"].append("k1.totalDividends")
        classes["dividends"] = max(0, dividends)

        business = 0
        if federal.schedule_c is not None:
            business += federal.schedule_c.total_net_profit.amount
            inputs["netBusinessIncome"].append("scheduleC.totalNetProfit")
        if k1 is not None:
            business += k1.ordinary_income.amount + k1.guaranteed_payments.amount
            inputs["netBusinessIncome"].extend(["k1.totalOrdinaryIncome", "k1.totalGuaranteedPayments"])
        classes["netBusinessIncome"] = max(0, business)

        # Schedule D before the federal capital loss limit
        gains = 0
        if federal.schedule_d is not None:
            gains = federal.schedule_d.line16.amount
            inputs["netGains"].append("scheduleD.line16")
        classes["netGains"] = max(0, gains)

        # Rents before the federal passive loss limit
        rents = 0
        if federal.schedule_e is not None:
            rents += federal.schedule_e.line23a.amount
            inputs["rentsRoyalties"].append("scheduleE.line23a")
        if k1 is not None:
            rents += k1.rental_income.amount
            inputs["rentsRoyalties"].append("k1.totalRentalIncome")
        classes["rentsRoyalties"] = max(0, rents)

        return classes, {k: tuple(v) for k, v in inputs.items()}

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        config: StateReturnConfig,
    ) -> StateResult:
        ratio = apportionment_ratio(config, tax_return.tax_year)
        classes, class_inputs = self.classify_income(tax_return, federal, config)
        total = sum(classes.values())

        full_tax = self.calculate_brackets(total, tax_return.filing_status.value)
        tax = self.prorate(full_tax, ratio) if config.residency_type == ResidencyType.PART_YEAR else full_tax
        tax_after_credits = max(0, tax)

        withholding = self.get_state_withholding(tax_return)
        other = config.estimated_payments
        overpaid, owed = settle(tax_after_credits, withholding + other)

        detail = PA40Result(
            classes=classes,
            total_taxable_income=total,
            tax_before_proration=full_tax,
            tax=tax,
            tax_after_credits=tax_after_credits,
            ratio=ratio,
            class_inputs=class_inputs,
            withholding_inputs=tuple(self.withholding_refs(tax_return)),
        )
        return StateResult(
            state_code=self.state_code,
            form_label=self.form_label,
            residency_type=config.residency_type,
            state_agi=total,
            state_taxable_income=total,
            state_tax=tax,
            state_credits=0,
            tax_after_credits=tax_after_credits,
            state_withholding=withholding,
            other_payments=other,
            overpaid=overpaid,
            amount_owed=owed,
            apportionment_ratio=None if config.residency_type == ResidencyType.FULL_YEAR else ratio,
            detail=detail,
        )

    def collect_traced_values(self, result: StateResult) -> Dict[str, TracedValue]:
        form: PA40Result = result.detail
        values: Dict[str, TracedValue] = {}
        for name, citation in INCOME_CLASSES:
            self.node(values, f"pa40.{name}", form.classes[name], form.class_inputs.get(name, ()), citation)
        self.node(values, "pa40.totalTaxableIncome", form.total_taxable_income,
                  [f"pa40.{name}" for name, _ in INCOME_CLASSES], "PA-40, Line 9")
        self.node(values, "pa40.paTax", form.tax, ["pa40.totalTaxableIncome"],
                  "PA-40, Line 12" if result.residency_type != ResidencyType.PART_YEAR else "PA-40, Line 12 (part-year ratio)")
        self.node(values, "pa40.taxAfterCredits", form.tax_after_credits, ["pa40.paTax"], "PA-40, Line 18")
        self.add_payment_nodes(values, "pa40", result, form.withholding_inputs)
        return values
