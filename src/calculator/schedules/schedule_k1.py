"""
Schedule K-1 income aggregation.

Routes passthrough items to the Form 1040 flow:
    Box 1  ordinary income     -> Schedule E Part II -> Schedule 1, Line 5
    Box 2  rental income       -> Schedule 1, Line 5 (subject to the rental allowance)
    Box 4  guaranteed payments -> Schedule 1, Line 5
    Box 5  interest            -> Form 1040, Line 2b
    Box 6a dividends           -> Form 1040, Line 3b (treated as non-qualified)
    Box 8 / 9a capital gains   -> Schedule D, Lines 5 and 12
    Box 14 Code A              -> Schedule SE
    Box 20 Code Z              -> QBI deduction
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue


@dataclass(frozen=True)
class K1AggregateResult:
    ordinary_income: TracedValue
    rental_income: TracedValue
    guaranteed_payments: TracedValue
    interest: TracedValue
    dividends: TracedValue
    short_term_gain: TracedValue
    long_term_gain: TracedValue
    qbi: TracedValue
    se_earnings: TracedValue
    passthrough_income: TracedValue
    k1_count: int


def compute_k1_aggregate(tax_return: TaxReturn, recorder: TraceRecorder) -> Optional[K1AggregateResult]:
    k1s = tax_return.schedule_k1s
    if not k1s:
        return None

    ordinary = recorder.sum_fields("k1.totalOrdinaryIncome", k1s, "ordinary_income", "Schedule K-1, Box 1")
    rental = recorder.sum_fields("k1.totalRentalIncome", k1s, "rental_income", "Schedule K-1, Box 2")
    guaranteed = recorder.sum_fields("k1.totalGuaranteedPayments", k1s, "guaranteed_payments", "Schedule K-1, Box 4")
    interest = recorder.sum_fields("k1.totalInterest", k1s, "interest_income", "Schedule K-1, Box 5")
    dividends = recorder.sum_fields("k1.totalDividends", k1s, "dividends", "Schedule K-1, Box 6a")
    st_gain = recorder.sum_fields("k1.totalSTCapitalGain", k1s, "short_term_capital_gain", "Schedule K-1, Box 8")
    lt_gain = recorder.sum_fields("k1.totalLTCapitalGain", k1s, "long_term_capital_gain", "Schedule K-1, Box 9a")
    qbi = recorder.sum_fields("k1.totalQBI", k1s, "section_199a_qbi", "Schedule K-1, Box 20 Code Z")
    se = recorder.sum_fields("k1.totalSEEarnings", k1s, "self_employment_earnings", "Schedule K-1, Box 14 Code A")

    passthrough = recorder.compute(
        "k1.totalPassthroughIncome",
        ordinary.amount + rental.amount + guaranteed.amount,
        ["k1.totalOrdinaryIncome", "k1.totalRentalIncome", "k1.totalGuaranteedPayments"],
        "Schedule K-1 passthrough income",
    )

    return K1AggregateResult(
        ordinary_income=ordinary,
        rental_income=rental,
        guaranteed_payments=guaranteed,
        interest=interest,
        dividends=dividends,
        short_term_gain=st_gain,
        long_term_gain=lt_gain,
        qbi=qbi,
        se_earnings=se,
        passthrough_income=passthrough,
        k1_count=len(k1s),
    )
