"""
Schedule E - Supplemental Income and Loss (rental real estate and royalties)

Per-property net income rolls up to Line 23a. A net loss is limited by the
shared rental allowance (Form 8582); only the allowed part reaches Line 26.
K-1 rental losses draw on the same allowance after Schedule E.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from calculator.passive_loss import AllowanceClaim, LossAllowanceCoordinator
from calculator.schedules.schedule_k1 import K1AggregateResult
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue

SCHEDULE_E_SOURCE = "scheduleE"
K1_RENTAL_SOURCE = "k1.rental"


@dataclass(frozen=True)
class ScheduleEPropertyResult:
    property_id: str
    income: TracedValue
    expenses: TracedValue
    net: TracedValue


@dataclass(frozen=True)
class ScheduleEResult:
    properties: Tuple[ScheduleEPropertyResult, ...]
    line23a: TracedValue  # Total income or loss before the allowance
    line25: TracedValue  # Loss allowed (negative) or zero
    line26: TracedValue  # To Schedule 1, Line 5
    claim: AllowanceClaim

    @property
    def disallowed_loss(self) -> int:
        return self.claim.disallowed


def compute_schedule_e(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    coordinator: LossAllowanceCoordinator,
) -> Optional[ScheduleEResult]:
    properties = tax_return.schedule_e_properties
    if not properties:
        return None

    results = []
    for p in properties:
        label = p.address or "Property"
        income = recorder.compute(
            f"scheduleE.{p.id}.income",
            p.rents_received + p.royalties_received,
            [p.ref("rents_received"), p.ref("royalties_received")],
            f"Schedule E, {label} income",
        )
        expenses = recorder.compute(
            f"scheduleE.{p.id}.expenses",
            p.total_expenses,
            [p.ref("total_expenses")],
            f"Schedule E, {label} expenses",
        )
        net = recorder.compute(
            f"scheduleE.{p.id}.net",
            income.amount - expenses.amount,
            [income.node_id, expenses.node_id],
            f"Schedule E, {label} net",
        )
        results.append(ScheduleEPropertyResult(p.id, income, expenses, net))

    line23a = recorder.compute(
        "scheduleE.line23a",
        sum(r.net.amount for r in results),
        [r.net.node_id for r in results],
        "Schedule E, Line 23a",
    )

    claim = coordinator.claim(SCHEDULE_E_SOURCE, line23a.amount)
    line25 = recorder.compute(
        "scheduleE.line25",
        -claim.allowed if claim.allowed else 0,
        ["scheduleE.line23a", "form8582.specialAllowance"],
        "Schedule E, Line 25",
    )
    if line23a.amount >= 0:
        line26 = recorder.compute("scheduleE.line26", line23a.amount, ["scheduleE.line23a"], "Schedule E, Line 26")
    else:
        line26 = recorder.compute("scheduleE.line26", line25.amount, ["scheduleE.line25"], "Schedule E, Line 26")

    return ScheduleEResult(tuple(results), line23a, line25, line26, claim)


def compute_k1_rental(
    recorder: TraceRecorder,
    coordinator: LossAllowanceCoordinator,
    k1: Optional[K1AggregateResult],
    schedule_e: Optional[ScheduleEResult],
) -> Tuple[TracedValue, Optional[AllowanceClaim]]:
    """
    K-1 Box 2 rental income after the shared allowance.

    Reads Schedule E Line 25 when present because the allowance left for
    K-1 rentals depends on what Schedule E used.
    """
    if k1 is None:
        return recorder.zero("k1.allowedRentalIncome", "Schedule E Part II, rental"), None

    claim = coordinator.claim(K1_RENTAL_SOURCE, k1.rental_income.amount)
    inputs = ["k1.totalRentalIncome", "form8582.specialAllowance"]
    if schedule_e is not None:
        inputs.append("scheduleE.line25")
    allowed = recorder.compute(
        "k1.allowedRentalIncome",
        claim.deductible_amount,
        inputs,
        "Schedule E Part II, rental",
    )
    return allowed, claim
