"""
Schedule D - Capital Gains and Losses

Part I:   Short-term (Lines 1a, 5, 7)
Part II:  Long-term (Lines 8a, 12, 13, 15)
Part III: Summary (Lines 16, 21)

Net capital losses are deductible up to $3,000 ($1,500 MFS) per year;
the remainder carries forward (IRC Sections 1211(b) and 1212).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from calculator.decimal_math import to_cents
from calculator.schedules.schedule_k1 import K1AggregateResult
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.income import CapitalTransaction
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus
from models.traced import TracedValue


@dataclass(frozen=True)
class ScheduleDResult:
    line1a: TracedValue  # Short-term transactions (Form 8949)
    line5: TracedValue  # Short-term gain from K-1s
    line7: TracedValue  # Net short-term gain/(loss)
    line8a: TracedValue  # Long-term transactions (Form 8949)
    line12: TracedValue  # Long-term gain from K-1s
    line13: TracedValue  # Capital gain distributions
    line15: TracedValue  # Net long-term gain/(loss)
    line16: TracedValue  # Combined
    line21: TracedValue  # Amount for Form 1040, Line 7 (loss-limited)
    capital_loss_carryforward: int


def _transaction_inputs(transactions: List[CapitalTransaction]) -> List[str]:
    inputs: List[str] = []
    for t in transactions:
        inputs.extend([t.ref("proceeds"), t.ref("cost_basis"), t.ref("adjustment")])
    return inputs


def has_capital_activity(tax_return: TaxReturn) -> bool:
    if tax_return.capital_transactions:
        return True
    if any(d.capital_gain_distributions for d in tax_return.form1099_divs):
        return True
    return any(k.short_term_capital_gain or k.long_term_capital_gain for k in tax_return.schedule_k1s)


def capital_loss_limit(filing_status: FilingStatus, config: TaxYearConfig) -> int:
    if filing_status == FilingStatus.MARRIED_SEPARATE:
        return to_cents(config.capital_loss_limit_mfs)
    return to_cents(config.capital_loss_limit)


def compute_schedule_d(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
    k1: Optional[K1AggregateResult] = None,
) -> Optional[ScheduleDResult]:
    if not has_capital_activity(tax_return):
        return None

    short_term = [t for t in tax_return.capital_transactions if not t.is_long_term]
    long_term = [t for t in tax_return.capital_transactions if t.is_long_term]

    # Part I
    line1a = recorder.compute(
        "scheduleD.line1a",
        sum(t.gain_or_loss for t in short_term),
        _transaction_inputs(short_term),
        "Schedule D, Line 1a",
    )
    if k1 is not None:
        line5 = recorder.compute("scheduleD.line5", k1.short_term_gain.amount, ["k1.totalSTCapitalGain"], "Schedule D, Line 5")
    else:
        line5 = recorder.zero("scheduleD.line5", "Schedule D, Line 5")
    line7 = recorder.compute(
        "scheduleD.line7",
        line1a.amount + line5.amount,
        ["scheduleD.line1a", "scheduleD.line5"],
        "Schedule D, Line 7",
    )

    # Part II
    line8a = recorder.compute(
        "scheduleD.line8a",
        sum(t.gain_or_loss for t in long_term),
        _transaction_inputs(long_term),
        "Schedule D, Line 8a",
    )
    if k1 is not None:
        line12 = recorder.compute("scheduleD.line12", k1.long_term_gain.amount, ["k1.totalLTCapitalGain"], "Schedule D, Line 12")
    else:
        line12 = recorder.zero("scheduleD.line12", "Schedule D, Line 12")
    line13 = recorder.sum_fields(
        "scheduleD.line13", tax_return.form1099_divs, "capital_gain_distributions", "Schedule D, Line 13"
    )
    line15 = recorder.compute(
        "scheduleD.line15",
        line8a.amount + line12.amount + line13.amount,
        ["scheduleD.line8a", "scheduleD.line12", "scheduleD.line13"],
        "Schedule D, Line 15",
    )

    # Part III
    line16 = recorder.compute(
        "scheduleD.line16",
        line7.amount + line15.amount,
        ["scheduleD.line7", "scheduleD.line15"],
        "Schedule D, Line 16",
    )

    if line16.amount >= 0:
        line21_amount = line16.amount
        carryforward = 0
    else:
        line21_amount = max(line16.amount, -capital_loss_limit(tax_return.filing_status, config))
        carryforward = line21_amount - line16.amount

    line21 = recorder.compute("scheduleD.line21", line21_amount, ["scheduleD.line16"], "Schedule D, Line 21")

    return ScheduleDResult(
        line1a=line1a,
        line5=line5,
        line7=line7,
        line8a=line8a,
        line12=line12,
        line13=line13,
        line15=line15,
        line16=line16,
        line21=line21,
        capital_loss_carryforward=carryforward,
    )
