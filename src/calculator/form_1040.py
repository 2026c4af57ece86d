"""
Form 1040 - U.S. Individual Income Tax Return.

Evaluates the primary derivation graph in a fixed order. Every line and
sub-schedule value is recorded on a TraceRecorder, so a value can only
read values computed before it and each node is produced once. Line
references follow the 2025 Form 1040.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from calculator.brackets import net_cap_gain_for_qdcg, ordinary_tax, qdcg_tax
from calculator.passive_loss import (
    Form8582Result,
    LossAllowanceCoordinator,
    preliminary_income_proxy,
    special_allowance,
)
from calculator.schedules import (
    AMTResult,
    ChildTaxCreditResult,
    EarnedIncomeCreditResult,
    K1AggregateResult,
    QBIBreakdown,
    QBICalculator,
    RefundableCreditsResult,
    Schedule1Result,
    ScheduleAResult,
    ScheduleCResult,
    ScheduleDResult,
    ScheduleEResult,
    ScheduleSEResult,
    SurtaxResult,
    compute_amt,
    compute_child_tax_credit,
    compute_earned_income_credit,
    compute_k1_aggregate,
    compute_k1_rental,
    compute_refundable_credits,
    compute_schedule_1,
    compute_schedule_a,
    compute_schedule_c,
    compute_schedule_d,
    compute_schedule_e,
    compute_schedule_se,
    compute_surtaxes,
)
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from calculator.validation import TaxReturnValidator, ValidationIssue
from models.deductions import DeductionMethod
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus, TaxpayerInfo
from models.traced import TracedValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Form1040Result:
    """Read-only outcome of the primary graph."""
    tax_year: int
    filing_status: FilingStatus
    values: Dict[str, TracedValue]
    deduction_method: DeductionMethod
    k1: Optional[K1AggregateResult] = None
    schedule_d: Optional[ScheduleDResult] = None
    schedule_c: Optional[ScheduleCResult] = None
    schedule_se: Optional[ScheduleSEResult] = None
    schedule_e: Optional[ScheduleEResult] = None
    form8582: Optional[Form8582Result] = None
    schedule_1: Optional[Schedule1Result] = None
    schedule_a: Optional[ScheduleAResult] = None
    qbi: Optional[QBIBreakdown] = None
    amt: Optional[AMTResult] = None
    child_tax_credit: Optional[ChildTaxCreditResult] = None
    earned_income_credit: Optional[EarnedIncomeCreditResult] = None
    surtaxes: Optional[SurtaxResult] = None
    refundable_credits: Optional[RefundableCreditsResult] = None
    issues: Tuple[ValidationIssue, ...] = field(default_factory=tuple)

    def line(self, line: str) -> TracedValue:
        """Traced value of a Form 1040 line, e.g. ``line("11")``."""
        return self.values[f"form1040.line{line}"]

    @property
    def total_income(self) -> int:
        return self.line("9").amount

    @property
    def agi(self) -> int:
        return self.line("11").amount

    @property
    def deduction(self) -> int:
        return self.line("12").amount

    @property
    def taxable_income(self) -> int:
        return self.line("15").amount

    @property
    def total_tax(self) -> int:
        return self.line("24").amount

    @property
    def total_payments(self) -> int:
        return self.line("33").amount

    @property
    def overpaid(self) -> int:
        return self.line("34").amount

    @property
    def amount_owed(self) -> int:
        return self.line("37").amount

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def executed_schedules(self) -> List[str]:
        """Sub-schedules that produced values, in evaluation order."""
        present = [
            ("scheduleK1", self.k1),
            ("scheduleD", self.schedule_d),
            ("scheduleC", self.schedule_c),
            ("scheduleSE", self.schedule_se),
            ("scheduleE", self.schedule_e),
            ("form8582", self.form8582),
            ("schedule1", self.schedule_1),
            ("scheduleA", self.schedule_a),
            ("form8995", self.qbi if self.qbi and self.qbi.final_qbi_deduction else None),
            ("form6251", self.amt),
            ("schedule8812", self.child_tax_credit),
            ("form8960", self.surtaxes),
            ("scheduleEIC", self.earned_income_credit),
            ("schedule3", self.refundable_credits),
        ]
        return [name for name, result in present if result is not None]


def _count_additional_deductions(filer: Optional[TaxpayerInfo], tax_year: int) -> int:
    if filer is None:
        return 0
    age = filer.age_at_year_end(tax_year)
    count = 1 if filer.is_over_65 or (age is not None and age >= 65) else 0
    if filer.is_blind:
        count += 1
    return count


def standard_deduction(tax_return: TaxReturn, config: TaxYearConfig) -> int:
    """Basic standard deduction plus the additional amount per 65+/blind box checked."""
    status = tax_return.filing_status.value
    count = _count_additional_deductions(tax_return.taxpayer, tax_return.tax_year)
    if tax_return.filing_status == FilingStatus.MARRIED_JOINT:
        count += _count_additional_deductions(tax_return.spouse, tax_return.tax_year)
    return config.cents(config.standard_deduction, status) + count * config.cents(
        config.additional_standard_deduction_over_65_or_blind, status
    )


def compute_form_1040(tax_return: TaxReturn, config: Optional[TaxYearConfig] = None) -> Form1040Result:
    """Run the primary graph for one return."""
    config = config or TaxYearConfig.for_2025()
    recorder = TraceRecorder()
    status = tax_return.filing_status.value

    recorder.record_all(tax_return.document_values())

    k1 = compute_k1_aggregate(tax_return, recorder)
    schedule_d = compute_schedule_d(tax_return, recorder, config, k1)
    schedule_c = compute_schedule_c(tax_return, recorder)
    schedule_se = compute_schedule_se(tax_return, recorder, config, schedule_c, k1)

    # Income lines
    recorder.sum_fields("form1040.line1a", tax_return.w2s, "wages", "Form 1040, Line 1a")
    recorder.compute("form1040.line1z", recorder.amount("form1040.line1a"), ["form1040.line1a"], "Form 1040, Line 1z")

    ints = tax_return.form1099_ints
    divs = tax_return.form1099_divs
    recorder.compute(
        "form1040.line2a",
        sum(i.tax_exempt_interest for i in ints) + sum(d.exempt_interest_dividends for d in divs),
        [i.ref("tax_exempt_interest") for i in ints] + [d.ref("exempt_interest_dividends") for d in divs],
        "Form 1040, Line 2a",
    )
    interest = sum(i.interest_income + i.us_obligation_interest for i in ints)
    interest_inputs: List[str] = []
    for i in ints:
        interest_inputs.extend([i.ref("interest_income"), i.ref("us_obligation_interest")])
    if k1 is not None:
        interest += k1.interest.amount
        interest_inputs.append("k1.totalInterest")
    recorder.compute("form1040.line2b", interest, interest_inputs, "Form 1040, Line 2b")

    recorder.sum_fields("form1040.line3a", divs, "qualified_dividends", "Form 1040, Line 3a")
    dividends = sum(d.ordinary_dividends for d in divs)
    dividend_inputs = [d.ref("ordinary_dividends") for d in divs]
    if k1 is not None:
        dividends += k1.dividends.amount
        dividend_inputs.append("k1.totalDividends")
    recorder.compute("form1040.line3b", dividends, dividend_inputs, "Form 1040, Line 3b")

    if schedule_d is not None:
        recorder.compute("form1040.line7", schedule_d.line21.amount, ["scheduleD.line21"], "Form 1040, Line 7")
    else:
        recorder.zero("form1040.line7", "Form 1040, Line 7")

    # Rental loss allowance, sized before AGI exists
    proxy_inputs = ["form1040.line1a", "form1040.line2b", "form1040.line3b", "form1040.line7"]
    if schedule_c is not None:
        proxy_inputs.append("scheduleC.totalNetProfit")
    if k1 is not None:
        proxy_inputs.append("k1.totalPassthroughIncome")
    proxy = recorder.compute(
        "form8582.preliminaryAGI",
        preliminary_income_proxy(
            wages=recorder.amount("form1040.line1a"),
            taxable_interest=recorder.amount("form1040.line2b"),
            ordinary_dividends=recorder.amount("form1040.line3b"),
            capital_gain=recorder.amount("form1040.line7"),
            business_income=schedule_c.total_net_profit.amount if schedule_c else 0,
            k1_passthrough=k1.passthrough_income.amount if k1 else 0,
        ),
        proxy_inputs,
        "Form 8582, Line 6",
    )
    allowance = recorder.compute(
        "form8582.specialAllowance",
        special_allowance(proxy.amount, tax_return.filing_status, tax_return.mfs_lived_apart_all_year, config),
        ["form8582.preliminaryAGI"],
        "Form 8582, Line 9",
    )

    coordinator = LossAllowanceCoordinator(allowance.amount)
    schedule_e = compute_schedule_e(tax_return, recorder, coordinator)
    k1_rental, _ = compute_k1_rental(recorder, coordinator, k1, schedule_e)
    form8582 = None
    if coordinator.claims:
        form8582 = Form8582Result.from_coordinator(proxy.amount, coordinator)
        logger.debug(
            "Rental allowance %s: used %s, disallowed %s",
            allowance.amount, form8582.allowance_used, form8582.total_disallowed,
        )

    schedule_1 = compute_schedule_1(recorder, schedule_c, schedule_e, k1, k1_rental, schedule_se)

    # Total income and AGI
    recorder.compute("form1040.line8", schedule_1.line10.amount, ["schedule1.line10"], "Form 1040, Line 8")
    recorder.compute(
        "form1040.line9",
        sum(recorder.amount(f"form1040.line{n}") for n in ("1z", "2b", "3b", "7", "8")),
        ["form1040.line1z", "form1040.line2b", "form1040.line3b", "form1040.line7", "form1040.line8"],
        "Form 1040, Line 9",
    )
    recorder.compute("form1040.line10", schedule_1.line26.amount, ["schedule1.line26"], "Form 1040, Line 10")
    agi = recorder.compute(
        "form1040.line11",
        recorder.amount("form1040.line9") - recorder.amount("form1040.line10"),
        ["form1040.line9", "form1040.line10"],
        "Form 1040, Line 11",
    )

    # Deductions
    standard = recorder.compute("deduction.standard", standard_deduction(tax_return, config), [], "Form 1040, Line 12")
    schedule_a = None
    deduction_method = DeductionMethod.STANDARD
    line12_inputs = ["deduction.standard"]
    line12_amount = standard.amount
    itemized = tax_return.deductions.itemized
    if tax_return.deductions.method == DeductionMethod.ITEMIZED and itemized is not None:
        schedule_a = compute_schedule_a(itemized, tax_return.filing_status, recorder, config)
        line12_inputs.append("scheduleA.line17")
        if schedule_a.line17.amount > standard.amount:
            line12_amount = schedule_a.line17.amount
            deduction_method = DeductionMethod.ITEMIZED
    recorder.compute("form1040.line12", line12_amount, line12_inputs, "Form 1040, Line 12")

    # Qualified business income deduction
    qualified_dividends = recorder.amount("form1040.line3a")
    net_capital_gain = 0
    preferential_inputs = ["form1040.line3a"]
    if schedule_d is not None:
        net_capital_gain = net_cap_gain_for_qdcg(schedule_d.line15.amount, schedule_d.line16.amount)
        preferential_inputs.extend(["scheduleD.line15", "scheduleD.line16"])
    preferential_income = max(0, qualified_dividends) + net_capital_gain

    qbi_inputs = ["form1040.line11", "form1040.line12"] + preferential_inputs
    if schedule_c is not None:
        qbi_inputs.append("scheduleC.totalNetProfit")
    if k1 is not None:
        qbi_inputs.append("k1.totalQBI")
    qbi = QBICalculator().calculate(
        tax_return,
        schedule_c_net_profit=schedule_c.total_net_profit.amount if schedule_c else 0,
        k1_qbi=k1.qbi.amount if k1 else 0,
        taxable_income_before_qbi=max(0, agi.amount - line12_amount),
        net_capital_gain=preferential_income,
        config=config,
    )
    recorder.compute("qbi.deduction", qbi.final_qbi_deduction, qbi_inputs, "Form 8995, Line 15")
    recorder.compute("form1040.line13", qbi.final_qbi_deduction, ["qbi.deduction"], "Form 1040, Line 13")
    recorder.compute(
        "form1040.line14",
        line12_amount + qbi.final_qbi_deduction,
        ["form1040.line12", "form1040.line13"],
        "Form 1040, Line 14",
    )
    taxable = recorder.compute(
        "form1040.line15",
        max(0, agi.amount - recorder.amount("form1040.line14")),
        ["form1040.line11", "form1040.line14"],
        "Form 1040, Line 15",
    )

    # Tax
    if preferential_income > 0:
        line16 = qdcg_tax(taxable.amount, qualified_dividends, net_capital_gain, status, config)
        recorder.compute(
            "form1040.line16", line16, ["form1040.line15"] + preferential_inputs, "Form 1040, Line 16 (QDCG Worksheet)"
        )
    else:
        recorder.compute(
            "form1040.line16", ordinary_tax(taxable.amount, status, config), ["form1040.line15"], "Form 1040, Line 16"
        )

    amt = compute_amt(tax_return, recorder, config, schedule_a, preferential_income, preferential_inputs)
    recorder.compute("form1040.line17", amt.line11.amount, ["form6251.line11"], "Form 1040, Line 17")
    recorder.compute(
        "form1040.line18",
        recorder.amount("form1040.line16") + recorder.amount("form1040.line17"),
        ["form1040.line16", "form1040.line17"],
        "Form 1040, Line 18",
    )

    # Credits
    earned = recorder.amount("form1040.line1z")
    earned_inputs = ["form1040.line1z"]
    if schedule_se is not None:
        earned += schedule_se.line2.amount - schedule_se.line13.amount
        earned_inputs.extend(["scheduleSE.line2", "scheduleSE.line13"])
    recorder.compute("credits.earnedIncome", earned, earned_inputs, "Earned income (Schedule 8812 / EIC Worksheet)")

    ctc = compute_child_tax_credit(tax_return, recorder, config)
    recorder.compute("form1040.line19", ctc.non_refundable.amount, ["ctc.nonRefundableCredit"], "Form 1040, Line 19")
    recorder.zero("form1040.line20", "Form 1040, Line 20")
    recorder.compute(
        "form1040.line21",
        recorder.amount("form1040.line19") + recorder.amount("form1040.line20"),
        ["form1040.line19", "form1040.line20"],
        "Form 1040, Line 21",
    )
    recorder.compute(
        "form1040.line22",
        max(0, recorder.amount("form1040.line18") - recorder.amount("form1040.line21")),
        ["form1040.line18", "form1040.line21"],
        "Form 1040, Line 22",
    )

    # Other taxes
    rental_nodes = ["k1.allowedRentalIncome"]
    if schedule_e is not None:
        rental_nodes.insert(0, "scheduleE.line26")
    surtaxes = compute_surtaxes(tax_return, recorder, config, rental_nodes, schedule_se)
    other_inputs = ["form8960.niit", "form8959.additionalMedicareTax"]
    other_taxes = surtaxes.niit.amount + surtaxes.additional_medicare_tax.amount
    if schedule_se is not None:
        other_taxes += schedule_se.line12.amount
        other_inputs.insert(0, "scheduleSE.line12")
    recorder.compute("form1040.line23", other_taxes, other_inputs, "Form 1040, Line 23")
    recorder.compute(
        "form1040.line24",
        recorder.amount("form1040.line22") + recorder.amount("form1040.line23"),
        ["form1040.line22", "form1040.line23"],
        "Form 1040, Line 24",
    )

    # Payments
    recorder.sum_fields("form1040.line25a", tax_return.w2s, "federal_tax_withheld", "Form 1040, Line 25a")
    forms_1099 = list(ints) + list(divs) + list(tax_return.form1099_necs)
    recorder.sum_fields("form1040.line25b", forms_1099, "federal_tax_withheld", "Form 1040, Line 25b")
    recorder.compute(
        "form1040.line25d",
        recorder.amount("form1040.line25a") + recorder.amount("form1040.line25b"),
        ["form1040.line25a", "form1040.line25b"],
        "Form 1040, Line 25d",
    )
    recorder.compute("form1040.line26", tax_return.estimated_tax_payments, [], "Form 1040, Line 26")

    recorder.compute(
        "eic.investmentIncome",
        recorder.amount("form1040.line2a")
        + recorder.amount("form1040.line2b")
        + recorder.amount("form1040.line3b")
        + max(0, recorder.amount("form1040.line7")),
        ["form1040.line2a", "form1040.line2b", "form1040.line3b", "form1040.line7"],
        "EIC investment income",
    )
    eic = compute_earned_income_credit(tax_return, recorder, config)
    recorder.compute("form1040.line27", eic.credit.amount, ["eic.creditAmount"], "Form 1040, Line 27")
    recorder.compute("form1040.line28", ctc.additional_ctc.amount, ["ctc.additionalCredit"], "Form 1040, Line 28")
    recorder.zero("form1040.line29", "Form 1040, Line 29")
    refundable = compute_refundable_credits(tax_return, recorder, config)
    recorder.compute(
        "form1040.line32",
        sum(recorder.amount(f"form1040.line{n}") for n in ("27", "28", "29", "31")),
        ["form1040.line27", "form1040.line28", "form1040.line29", "form1040.line31"],
        "Form 1040, Line 32",
    )
    recorder.compute(
        "form1040.line33",
        sum(recorder.amount(f"form1040.line{n}") for n in ("25d", "26", "32")),
        ["form1040.line25d", "form1040.line26", "form1040.line32"],
        "Form 1040, Line 33",
    )

    # Refund or amount owed
    total_tax = recorder.amount("form1040.line24")
    payments = recorder.amount("form1040.line33")
    recorder.compute(
        "form1040.line34", max(0, payments - total_tax), ["form1040.line33", "form1040.line24"], "Form 1040, Line 34"
    )
    recorder.compute(
        "form1040.line37", max(0, total_tax - payments), ["form1040.line24", "form1040.line33"], "Form 1040, Line 37"
    )

    issues = TaxReturnValidator().validate(tax_return, config.tax_year)
    logger.info(
        "Form 1040 computed: AGI=%s taxable=%s total_tax=%s payments=%s",
        agi.amount, taxable.amount, total_tax, payments,
    )

    return Form1040Result(
        tax_year=tax_return.tax_year,
        filing_status=tax_return.filing_status,
        values=recorder.snapshot(),
        deduction_method=deduction_method,
        k1=k1,
        schedule_d=schedule_d,
        schedule_c=schedule_c,
        schedule_se=schedule_se,
        schedule_e=schedule_e,
        form8582=form8582,
        schedule_1=schedule_1,
        schedule_a=schedule_a,
        qbi=qbi,
        amt=amt,
        child_tax_credit=ctc,
        earned_income_credit=eic,
        surtaxes=surtaxes,
        refundable_credits=refundable,
        issues=tuple(issues),
    )
