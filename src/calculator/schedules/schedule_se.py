"""
Schedule SE - Self-Employment Tax

Net earnings are 92.35% of self-employment income. The 12.4% Social
Security portion applies only up to the wage base left after W-2 Social
Security wages; the 2.9% Medicare portion has no cap. Half of the tax is
an adjustment to income (Schedule 1, Line 15).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from calculator.decimal_math import apply_rate, to_cents
from calculator.schedules.schedule_c import ScheduleCResult
from calculator.schedules.schedule_k1 import K1AggregateResult
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue


@dataclass(frozen=True)
class ScheduleSEResult:
    line2: TracedValue  # Net profit from Schedule C and K-1 Box 14
    line4a: TracedValue  # Net earnings (x 92.35%)
    line8a: TracedValue  # W-2 Social Security wages
    line9: TracedValue  # Remaining wage base
    line10: TracedValue  # Social Security portion
    line11: TracedValue  # Medicare portion
    line12: TracedValue  # Self-employment tax
    line13: TracedValue  # Deductible half


def compute_schedule_se(
    tax_return: TaxReturn,
    recorder: TraceRecorder,
    config: TaxYearConfig,
    schedule_c: Optional[ScheduleCResult],
    k1: Optional[K1AggregateResult],
) -> Optional[ScheduleSEResult]:
    c_amount = schedule_c.total_net_profit.amount if schedule_c else 0
    k1_amount = k1.se_earnings.amount if k1 else 0
    if c_amount + k1_amount <= 0:
        return None

    inputs: List[str] = []
    if schedule_c:
        inputs.append("scheduleC.totalNetProfit")
    if k1:
        inputs.append("k1.totalSEEarnings")
    line2 = recorder.compute("scheduleSE.line2", c_amount + k1_amount, inputs, "Schedule SE, Line 2")

    net_earnings = apply_rate(line2.amount, config.se_net_earnings_factor)
    if net_earnings < to_cents(config.se_minimum_earnings):
        net_earnings = 0
    line4a = recorder.compute("scheduleSE.line4a", net_earnings, ["scheduleSE.line2"], "Schedule SE, Line 4a")

    line8a = recorder.sum_fields("scheduleSE.line8a", tax_return.w2s, "social_security_wages", "Schedule SE, Line 8a")
    line9 = recorder.compute(
        "scheduleSE.line9",
        max(0, to_cents(config.ss_wage_base) - line8a.amount),
        ["scheduleSE.line8a"],
        "Schedule SE, Line 9",
    )
    line10 = recorder.compute(
        "scheduleSE.line10",
        apply_rate(min(line4a.amount, line9.amount), config.ss_rate),
        ["scheduleSE.line4a", "scheduleSE.line9"],
        "Schedule SE, Line 10",
    )
    line11 = recorder.compute(
        "scheduleSE.line11",
        apply_rate(line4a.amount, config.medicare_rate),
        ["scheduleSE.line4a"],
        "Schedule SE, Line 11",
    )
    line12 = recorder.compute(
        "scheduleSE.line12",
        line10.amount + line11.amount,
        ["scheduleSE.line10", "scheduleSE.line11"],
        "Schedule SE, Line 12",
    )
    line13 = recorder.compute(
        "scheduleSE.line13",
        apply_rate(line12.amount, 0.5),
        ["scheduleSE.line12"],
        "Schedule SE, Line 13",
    )
    return ScheduleSEResult(line2, line4a, line8a, line9, line10, line11, line12, line13)
