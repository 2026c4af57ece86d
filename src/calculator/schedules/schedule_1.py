"""Schedule 1 - Additional Income and Adjustments to Income."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from calculator.schedules.schedule_c import ScheduleCResult
from calculator.schedules.schedule_e import ScheduleEResult
from calculator.schedules.schedule_k1 import K1AggregateResult
from calculator.schedules.schedule_se import ScheduleSEResult
from calculator.trace import TraceRecorder
from models.traced import TracedValue


@dataclass(frozen=True)
class Schedule1Result:
    line3: TracedValue  # Business income or (loss)
    line5: TracedValue  # Rental real estate, royalties, partnerships, S corps
    line10: TracedValue  # Total additional income -> Form 1040, Line 8
    line15: TracedValue  # Deductible part of self-employment tax
    line26: TracedValue  # Total adjustments -> Form 1040, Line 10


def compute_schedule_1(
    recorder: TraceRecorder,
    schedule_c: Optional[ScheduleCResult],
    schedule_e: Optional[ScheduleEResult],
    k1: Optional[K1AggregateResult],
    k1_rental: TracedValue,
    schedule_se: Optional[ScheduleSEResult],
) -> Schedule1Result:
    if schedule_c is not None:
        line3 = recorder.compute(
            "schedule1.line3", schedule_c.total_net_profit.amount, ["scheduleC.totalNetProfit"], "Schedule 1, Line 3"
        )
    else:
        line3 = recorder.zero("schedule1.line3", "Schedule 1, Line 3")

    amount = k1_rental.amount
    inputs: List[str] = [k1_rental.node_id]
    if schedule_e is not None:
        amount += schedule_e.line26.amount
        inputs.append("scheduleE.line26")
    if k1 is not None:
        amount += k1.ordinary_income.amount + k1.guaranteed_payments.amount
        inputs.extend(["k1.totalOrdinaryIncome", "k1.totalGuaranteedPayments"])
    line5 = recorder.compute("schedule1.line5", amount, inputs, "Schedule 1, Line 5")

    line10 = recorder.compute(
        "schedule1.line10",
        line3.amount + line5.amount,
        ["schedule1.line3", "schedule1.line5"],
        "Schedule 1, Line 10",
    )

    if schedule_se is not None:
        line15 = recorder.compute(
            "schedule1.line15", schedule_se.line13.amount, ["scheduleSE.line13"], "Schedule 1, Line 15"
        )
    else:
        line15 = recorder.zero("schedule1.line15", "Schedule 1, Line 15")

    line26 = recorder.compute("schedule1.line26", line15.amount, ["schedule1.line15"], "Schedule 1, Line 26")
    return Schedule1Result(line3, line5, line10, line15, line26)
