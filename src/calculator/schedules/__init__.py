"""Sub-schedules evaluated by the Form 1040 pipeline."""

from .schedule_k1 import K1AggregateResult, compute_k1_aggregate
from .schedule_d import ScheduleDResult, compute_schedule_d
from .schedule_c import ScheduleCResult, compute_schedule_c
from .schedule_se import ScheduleSEResult, compute_schedule_se
from .schedule_e import ScheduleEResult, compute_schedule_e, compute_k1_rental
from .schedule_1 import Schedule1Result, compute_schedule_1
from .schedule_a import ScheduleAResult, compute_schedule_a
from .qbi import QBIBreakdown, QBICalculator
from .amt import AMTResult, compute_amt
from .credits import (
    ChildTaxCreditResult,
    EarnedIncomeCreditResult,
    compute_child_tax_credit,
    compute_earned_income_credit,
)
from .surtaxes import SurtaxResult, compute_surtaxes
from .refundable import RefundableCreditsResult, compute_refundable_credits

__all__ = [
    "K1AggregateResult",
    "compute_k1_aggregate",
    "ScheduleDResult",
    "compute_schedule_d",
    "ScheduleCResult",
    "compute_schedule_c",
    "ScheduleSEResult",
    "compute_schedule_se",
    "ScheduleEResult",
    "compute_schedule_e",
    "compute_k1_rental",
    "Schedule1Result",
    "compute_schedule_1",
    "ScheduleAResult",
    "compute_schedule_a",
    "QBIBreakdown",
    "QBICalculator",
    "AMTResult",
    "compute_amt",
    "ChildTaxCreditResult",
    "EarnedIncomeCreditResult",
    "compute_child_tax_credit",
    "compute_earned_income_credit",
    "SurtaxResult",
    "compute_surtaxes",
    "RefundableCreditsResult",
    "compute_refundable_credits",
]
