"""
Schedule A - Itemized Deductions

Medical expenses above 7.5% of AGI, state and local taxes up to the SALT
cap, home mortgage interest, charitable gifts limited by AGI percentage,
and other itemized deductions.
"""

from __future__ import annotations

from dataclasses import dataclass

from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.deductions import ItemizedDeductions
from models.taxpayer import FilingStatus
from models.traced import TracedValue


@dataclass(frozen=True)
class ScheduleAResult:
    line4: TracedValue  # Medical and dental after AGI floor
    line5d: TracedValue  # State and local taxes before cap
    line5e: TracedValue  # SALT after cap
    line8a: TracedValue  # Home mortgage interest
    line14: TracedValue  # Gifts to charity after AGI limits
    line16: TracedValue  # Other itemized deductions
    line17: TracedValue  # Total itemized deductions

    @property
    def salt_deduction(self) -> int:
        return self.line5e.amount


def salt_cap(filing_status: FilingStatus, magi: int, config: TaxYearConfig) -> int:
    """SALT cap in cents: the base cap less 30% of MAGI over the threshold, not below the floor."""
    status = filing_status.value
    mfs = filing_status == FilingStatus.MARRIED_SEPARATE
    base_cap = config.cents(config.salt_base_cap, status, 20000.0 if mfs else 40000.0)
    threshold = config.cents(config.salt_phaseout_threshold, status, 250000.0 if mfs else 500000.0)
    floor = config.cents(config.salt_floor, status, 5000.0 if mfs else 10000.0)
    reduction = apply_rate(max(0, magi - threshold), config.salt_phaseout_rate)
    return max(floor, base_cap - reduction)


def compute_schedule_a(
    itemized: ItemizedDeductions,
    filing_status: FilingStatus,
    recorder: TraceRecorder,
    config: TaxYearConfig,
) -> ScheduleAResult:
    """Requires ``form1040.line11`` (AGI) to be recorded already."""
    agi = max(0, recorder.amount("form1040.line11"))

    # Medical
    line1 = recorder.compute("scheduleA.line1", itemized.medical_expenses, [], "Schedule A, Line 1")
    line3 = recorder.compute(
        "scheduleA.line3",
        apply_rate(agi, config.medical_expense_floor_pct),
        ["form1040.line11"],
        "Schedule A, Line 3",
    )
    line4 = recorder.compute(
        "scheduleA.line4",
        max(0, line1.amount - line3.amount),
        ["scheduleA.line1", "scheduleA.line3"],
        "Schedule A, Line 4",
    )

    # Taxes
    line5a = recorder.compute("scheduleA.line5a", itemized.state_local_income_tax, [], "Schedule A, Line 5a")
    line5b = recorder.compute("scheduleA.line5b", itemized.real_estate_tax, [], "Schedule A, Line 5b")
    line5c = recorder.compute("scheduleA.line5c", itemized.personal_property_tax, [], "Schedule A, Line 5c")
    line5d = recorder.compute(
        "scheduleA.line5d",
        line5a.amount + line5b.amount + line5c.amount,
        ["scheduleA.line5a", "scheduleA.line5b", "scheduleA.line5c"],
        "Schedule A, Line 5d",
    )
    line5e = recorder.compute(
        "scheduleA.line5e",
        min(line5d.amount, salt_cap(filing_status, agi, config)),
        ["scheduleA.line5d", "form1040.line11"],
        "Schedule A, Line 5e",
    )

    # Interest
    line8a = recorder.compute("scheduleA.line8a", itemized.mortgage_interest, [], "Schedule A, Line 8a")

    # Gifts to charity
    cash = min(itemized.charitable_cash, apply_rate(agi, config.charitable_agi_limit_pct))
    line11 = recorder.compute("scheduleA.line11", cash, ["form1040.line11"], "Schedule A, Line 11")
    noncash = min(itemized.charitable_non_cash, apply_rate(agi, config.charitable_noncash_agi_limit_pct))
    line12 = recorder.compute("scheduleA.line12", noncash, ["form1040.line11"], "Schedule A, Line 12")
    line14 = recorder.compute(
        "scheduleA.line14",
        min(line11.amount + line12.amount, apply_rate(agi, config.charitable_agi_limit_pct)),
        ["scheduleA.line11", "scheduleA.line12", "form1040.line11"],
        "Schedule A, Line 14",
    )

    line16 = recorder.compute("scheduleA.line16", itemized.other_itemized, [], "Schedule A, Line 16")

    line17 = recorder.compute(
        "scheduleA.line17",
        line4.amount + line5e.amount + line8a.amount + line14.amount + line16.amount,
        ["scheduleA.line4", "scheduleA.line5e", "scheduleA.line8a", "scheduleA.line14", "scheduleA.line16"],
        "Schedule A, Line 17",
    )
    return ScheduleAResult(line4, line5d, line5e, line8a, line14, line16, line17)
