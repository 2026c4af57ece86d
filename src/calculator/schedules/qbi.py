"""
QBI (Qualified Business Income) Deduction Calculator - Section 199A

Implements the 20% pass-through deduction for qualified business income
from sole proprietorships, partnerships, S corporations, and some trusts/estates.

Tax Year 2025 implementation per IRS Rev. Proc. 2024-40.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from calculator.decimal_math import to_cents, to_decimal, whole_cents
from calculator.tax_year_config import TaxYearConfig
from models.tax_return import TaxReturn


@dataclass
class QBIBreakdown:
    """Detailed breakdown of QBI deduction calculation (cents)."""

    # QBI components
    total_qbi: int = 0
    qbi_from_self_employment: int = 0
    qbi_from_k1: int = 0

    # Limitation factors
    w2_wages_total: int = 0
    ubia_total: int = 0
    has_sstb: bool = False

    # Threshold analysis
    taxable_income_before_qbi: int = 0
    threshold_start: int = 0
    threshold_end: int = 0
    is_below_threshold: bool = True
    is_above_threshold: bool = False
    phase_in_ratio: Decimal = Decimal("0")  # 0.0 = below threshold, 1.0 = above threshold

    # Limitation calculations
    sstb_applicable_percentage: Decimal = Decimal("1")  # 1.0 = full QBI, 0.0 = no QBI for SSTB
    wage_limitation: int = 0  # Greater of 50% of wages, or 25% of wages + 2.5% of UBIA
    wage_limitation_applies: bool = False

    # Deduction calculation
    tentative_qbi_deduction: int = 0  # 20% of QBI (before limits)
    qbi_after_wage_limit: int = 0
    taxable_income_limit: int = 0  # 20% of (taxable income - net capital gain)
    final_qbi_deduction: int = 0


class QBICalculator:
    """
    Calculator for Section 199A Qualified Business Income deduction.

    The QBI deduction allows eligible taxpayers to deduct up to 20% of their
    qualified business income from pass-through entities, subject to limitations
    based on taxable income, W-2 wages, and UBIA of qualified property.
    """

    def calculate(
        self,
        tax_return: TaxReturn,
        schedule_c_net_profit: int,
        k1_qbi: int,
        taxable_income_before_qbi: int,
        net_capital_gain: int,
        config: TaxYearConfig,
    ) -> QBIBreakdown:
        """
        Calculate the QBI deduction per Section 199A.

        Args:
            tax_return: The tax return (business W-2 wages, UBIA, SSTB flags)
            schedule_c_net_profit: Schedule C net profit including 1099-NEC
            k1_qbi: K-1 Box 20 Code Z total
            taxable_income_before_qbi: Form 1040 Line 11 minus Line 12
            net_capital_gain: Qualified dividends plus net capital gain
            config: Tax year configuration with thresholds

        Returns:
            QBIBreakdown with detailed calculation breakdown
        """
        breakdown = QBIBreakdown()
        breakdown.taxable_income_before_qbi = taxable_income_before_qbi
        filing_status = tax_return.filing_status.value

        # Step 1: Calculate total QBI from all sources
        breakdown.qbi_from_self_employment = max(0, schedule_c_net_profit)
        breakdown.qbi_from_k1 = k1_qbi
        breakdown.total_qbi = breakdown.qbi_from_self_employment + breakdown.qbi_from_k1

        if breakdown.total_qbi <= 0 or taxable_income_before_qbi <= 0:
            return breakdown

        # Step 2: W-2 wages and UBIA for limitations
        businesses = tax_return.schedule_c_businesses
        k1s = tax_return.schedule_k1s
        breakdown.w2_wages_total = sum(b.qbi_w2_wages for b in businesses) + sum(k.section_199a_w2_wages for k in k1s)
        breakdown.ubia_total = sum(b.qbi_ubia for b in businesses) + sum(k.section_199a_ubia for k in k1s)
        breakdown.has_sstb = any(b.is_sstb for b in businesses) or any(k.is_sstb for k in k1s)

        # Step 3: Thresholds
        breakdown.threshold_start = config.cents(config.qbi_threshold_start, filing_status, 197300.0)
        breakdown.threshold_end = config.cents(config.qbi_threshold_end, filing_status, 247300.0)

        # Step 4: Determine threshold position
        breakdown.is_below_threshold = taxable_income_before_qbi <= breakdown.threshold_start
        breakdown.is_above_threshold = taxable_income_before_qbi >= breakdown.threshold_end

        if breakdown.is_below_threshold:
            breakdown.phase_in_ratio = Decimal("0")
        elif breakdown.is_above_threshold:
            breakdown.phase_in_ratio = Decimal("1")
        else:
            phase_range = breakdown.threshold_end - breakdown.threshold_start
            excess = taxable_income_before_qbi - breakdown.threshold_start
            breakdown.phase_in_ratio = Decimal(excess) / Decimal(phase_range) if phase_range > 0 else Decimal("1")

        # Step 5: Tentative deduction (20% of QBI)
        qbi_rate = to_decimal(config.qbi_deduction_rate)
        breakdown.tentative_qbi_deduction = whole_cents(Decimal(breakdown.total_qbi) * qbi_rate)

        # Step 6: SSTB reduction
        if breakdown.has_sstb:
            breakdown.sstb_applicable_percentage = max(Decimal("0"), Decimal("1") - breakdown.phase_in_ratio)
        effective_qbi = Decimal(breakdown.total_qbi) * breakdown.sstb_applicable_percentage

        # Step 7: Wage limitation
        wages = Decimal(breakdown.w2_wages_total)
        wage_limit_50 = wages * to_decimal(config.qbi_wage_limit_rate)
        wage_limit_25 = wages * to_decimal(config.qbi_alt_wage_limit_rate) + Decimal(breakdown.ubia_total) * to_decimal(
            config.qbi_ubia_rate
        )
        wage_limitation = max(wage_limit_50, wage_limit_25)
        breakdown.wage_limitation = whole_cents(wage_limitation)

        # Step 8: Apply wage limitation
        tentative = effective_qbi * qbi_rate
        if breakdown.is_below_threshold:
            after_wage_limit = tentative
        elif breakdown.is_above_threshold:
            breakdown.wage_limitation_applies = True
            after_wage_limit = min(tentative, wage_limitation)
        else:
            breakdown.wage_limitation_applies = True
            if tentative > wage_limitation:
                reduction = (tentative - wage_limitation) * breakdown.phase_in_ratio
                after_wage_limit = tentative - reduction
            else:
                after_wage_limit = tentative
        breakdown.qbi_after_wage_limit = whole_cents(after_wage_limit)

        # Step 9: Taxable income limitation
        ti_for_limit = max(0, taxable_income_before_qbi - max(0, net_capital_gain))
        breakdown.taxable_income_limit = whole_cents(Decimal(ti_for_limit) * qbi_rate)

        # Step 10: Final deduction
        breakdown.final_qbi_deduction = max(0, min(breakdown.qbi_after_wage_limit, breakdown.taxable_income_limit))
        return breakdown
