"""Schedule C - Profit or Loss From Business, plus 1099-NEC income."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue


@dataclass(frozen=True)
class ScheduleCResult:
    business_net: Tuple[TracedValue, ...]
    nec_income: TracedValue
    total_net_profit: TracedValue


def compute_schedule_c(tax_return: TaxReturn, recorder: TraceRecorder) -> Optional[ScheduleCResult]:
    """
    Net profit of every sole proprietorship plus nonemployee compensation.

    1099-NEC amounts without a matching Schedule C are treated as gross
    receipts of an unnamed business.
    """
    businesses = tax_return.schedule_c_businesses
    necs = tax_return.form1099_necs
    if not businesses and not necs:
        return None

    nets = []
    for b in businesses:
        nets.append(recorder.compute(
            f"scheduleC.{b.id}.line31",
            b.gross_receipts - b.total_expenses,
            [b.ref("gross_receipts"), b.ref("total_expenses")],
            f"Schedule C, Line 31 ({b.business_name})",
        ))

    nec = recorder.sum_fields("scheduleC.necIncome", necs, "nonemployee_compensation", "1099-NEC, Box 1")

    total = recorder.compute(
        "scheduleC.totalNetProfit",
        sum(n.amount for n in nets) + nec.amount,
        [n.node_id for n in nets] + ["scheduleC.necIncome"],
        "Schedule C, Line 31 (all businesses)",
    )
    return ScheduleCResult(business_net=tuple(nets), nec_income=nec, total_net_profit=total)
