from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Optional

from calculator.decimal_math import to_cents


BracketTable = Dict[str, List[Tuple[float, float]]]


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Centralized federal constants for a given tax year.

    Amounts are in dollars, keyed by filing status value; the calculator
    converts to cents at the point of use (see ``cents``).

    NOTE: Values here should be reviewed annually against IRS published figures.
    The structure is designed to make updates localized and testable.
    """

    tax_year: int
    ordinary_income_brackets: BracketTable
    standard_deduction: Dict[str, float]
    additional_standard_deduction_over_65_or_blind: Dict[str, float]

    # Preferential rate thresholds for Qualified Dividends / Long-Term Capital Gains.
    qd_ltcg_0_rate_threshold: Dict[str, float]
    qd_ltcg_15_rate_threshold: Dict[str, float]

    # Self-employment (Schedule SE) configuration
    se_net_earnings_factor: float = 0.9235  # 92.35%
    ss_wage_base: float = 176100.0  # Social Security wage base limit for 2025
    medicare_rate: float = 0.029  # 2.9% Medicare (no wage base limit)
    ss_rate: float = 0.124  # 12.4% Social Security (up to wage base)
    employee_ss_rate: float = 0.062  # Employee share, used for excess withholding
    se_minimum_earnings: float = 400.0  # No SE tax below this amount of net earnings

    # Additional Medicare Tax (0.9% on wages/SE income over threshold)
    additional_medicare_tax_rate: float = 0.009
    additional_medicare_threshold: Optional[Dict[str, float]] = None

    # Net Investment Income Tax (3.8% on lesser of NII or MAGI over threshold)
    niit_rate: float = 0.038
    niit_threshold: Optional[Dict[str, float]] = None

    # Alternative Minimum Tax (AMT) configuration
    amt_rate_26: float = 0.26
    amt_rate_28: float = 0.28
    amt_28_threshold: Optional[Dict[str, float]] = None
    amt_exemption: Optional[Dict[str, float]] = None
    amt_exemption_phaseout_start: Optional[Dict[str, float]] = None
    amt_exemption_phaseout_rate: float = 0.25  # Exemption reduced by 25 cents per dollar over threshold

    # Child Tax Credit / Credit for Other Dependents
    child_tax_credit_amount: float = 2000.0
    child_tax_credit_refundable: float = 1700.0  # Additional Child Tax Credit max per child
    other_dependent_credit_amount: float = 500.0
    child_tax_credit_phaseout_start: Optional[Dict[str, float]] = None
    child_tax_credit_phaseout_step: float = 50.0  # Reduction per $1,000 (or part) over threshold
    actc_earned_income_floor: float = 2500.0
    actc_rate: float = 0.15

    # EITC parameters by number of qualifying children (0, 1, 2, 3+)
    eitc_max_credit: Optional[Dict[int, float]] = None
    eitc_phase_in_rate: Optional[Dict[int, float]] = None
    eitc_phaseout_rate: Optional[Dict[int, float]] = None
    eitc_phaseout_start: Optional[Dict[str, Dict[int, float]]] = None
    eitc_phaseout_end: Optional[Dict[str, Dict[int, float]]] = None
    eitc_investment_income_limit: float = 11950.0  # 2025 limit
    eitc_min_age_no_children: int = 25
    eitc_max_age_no_children: int = 64

    # Miscellaneous thresholds
    # SALT cap: base cap reduced by 30% of MAGI over the threshold, never below the floor
    salt_base_cap: Optional[Dict[str, float]] = None
    salt_phaseout_threshold: Optional[Dict[str, float]] = None
    salt_phaseout_rate: float = 0.30
    salt_floor: Optional[Dict[str, float]] = None
    medical_expense_floor_pct: float = 0.075  # 7.5% of AGI
    charitable_agi_limit_pct: float = 0.60
    charitable_noncash_agi_limit_pct: float = 0.30
    qbi_deduction_rate: float = 0.20  # 20% QBI deduction
    qbi_wage_limit_rate: float = 0.50  # 50% of W-2 wages
    qbi_alt_wage_limit_rate: float = 0.25  # 25% of W-2 wages plus 2.5% of UBIA
    qbi_ubia_rate: float = 0.025

    # QBI (Section 199A) deduction thresholds
    # Below threshold_start: no limitations
    # Between threshold_start and threshold_end: phase-in of limitations
    # Above threshold_end: full W-2 wage/UBIA limitation; SSTB gets $0
    qbi_threshold_start: Optional[Dict[str, float]] = None
    qbi_threshold_end: Optional[Dict[str, float]] = None

    # Capital Loss Deduction Limits (IRC Section 1211(b))
    capital_loss_limit: float = 3000.0
    capital_loss_limit_mfs: float = 1500.0  # Married Filing Separately

    # Passive Activity Loss (PAL) - Form 8582 / IRC Section 469
    pal_rental_loss_allowance: float = 25000.0  # Active participation allowance
    pal_phaseout_start: float = 100000.0  # MAGI threshold where the allowance begins phaseout
    pal_phaseout_rate: float = 0.50  # 50 cents per dollar over threshold
    pal_mfs_rental_loss_allowance: float = 12500.0  # MFS who lived apart all year
    pal_mfs_phaseout_start: float = 50000.0

    def cents(self, table: Optional[Dict[str, float]], filing_status: str, default: float = 0.0) -> int:
        """Look up a per-status dollar amount and return it in cents."""
        if not table:
            return to_cents(default)
        return to_cents(table.get(filing_status, default))

    @staticmethod
    def for_2025() -> "TaxYearConfig":
        # Ordinary income brackets (marginal rates) for tax year 2025 (filing in 2026).
        brackets = {
            "single": [
                (0, 0.10),
                (11925, 0.12),
                (48475, 0.22),
                (103350, 0.24),
                (197300, 0.32),
                (250525, 0.35),
                (626350, 0.37),
            ],
            "married_joint": [
                (0, 0.10),
                (23850, 0.12),
                (96950, 0.22),
                (206700, 0.24),
                (394600, 0.32),
                (501050, 0.35),
                (751600, 0.37),
            ],
            "married_separate": [
                (0, 0.10),
                (11925, 0.12),
                (48475, 0.22),
                (103350, 0.24),
                (197300, 0.32),
                (250525, 0.35),
                (375800, 0.37),
            ],
            "head_of_household": [
                (0, 0.10),
                (17050, 0.12),
                (64850, 0.22),
                (103350, 0.24),
                (197300, 0.32),
                (250525, 0.35),
                (626350, 0.37),
            ],
            "qualifying_widow": [
                (0, 0.10),
                (23850, 0.12),
                (96950, 0.22),
                (206700, 0.24),
                (394600, 0.32),
                (501050, 0.35),
                (751600, 0.37),
            ],
        }

        # Standard deduction amounts (tax year 2025). IRS Rev. Proc. 2024-40.
        std = {
            "single": 15750.0,
            "married_joint": 31500.0,
            "married_separate": 15750.0,
            "head_of_household": 23625.0,
            "qualifying_widow": 31500.0,
        }

        # Additional standard deduction amounts per condition (65+ OR blind).
        # Single/HOH: $1,950 each; Married: $1,550 each
        additional = {
            "single": 1950.0,
            "head_of_household": 1950.0,
            "married_joint": 1550.0,
            "married_separate": 1550.0,
            "qualifying_widow": 1550.0,
        }

        # Qualified dividends / Long-term capital gains rate thresholds (2025)
        # 0% rate up to this threshold, 15% rate up to next, 20% above
        qd_ltcg_0 = {
            "single": 48350.0,
            "married_joint": 96700.0,
            "married_separate": 48350.0,
            "head_of_household": 64750.0,
            "qualifying_widow": 96700.0,
        }
        qd_ltcg_15 = {
            "single": 533400.0,
            "married_joint": 600050.0,
            "married_separate": 300025.0,
            "head_of_household": 566700.0,
            "qualifying_widow": 600050.0,
        }

        # Additional Medicare Tax thresholds (0.9% on wages/SE over threshold)
        additional_medicare = {
            "single": 200000.0,
            "married_joint": 250000.0,
            "married_separate": 125000.0,
            "head_of_household": 200000.0,
            "qualifying_widow": 200000.0,
        }

        # Net Investment Income Tax (NIIT) thresholds (3.8%)
        niit = {
            "single": 200000.0,
            "married_joint": 250000.0,
            "married_separate": 125000.0,
            "head_of_household": 200000.0,
            "qualifying_widow": 250000.0,
        }

        # AMT exemption amounts (2025)
        amt_exemption = {
            "single": 88100.0,
            "married_joint": 137000.0,
            "married_separate": 68500.0,
            "head_of_household": 88100.0,
            "qualifying_widow": 137000.0,
        }

        # AMT exemption phaseout starts at
        amt_phaseout_start = {
            "single": 626350.0,
            "married_joint": 1252700.0,
            "married_separate": 626350.0,
            "head_of_household": 626350.0,
            "qualifying_widow": 1252700.0,
        }

        # AMT 28% rate kicks in at (for AMTI over exemption)
        amt_28_threshold = {
            "single": 232600.0,
            "married_joint": 232600.0,
            "married_separate": 116300.0,
            "head_of_household": 232600.0,
            "qualifying_widow": 232600.0,
        }

        # Child Tax Credit phaseout starts at
        ctc_phaseout = {
            "single": 200000.0,
            "married_joint": 400000.0,
            "married_separate": 200000.0,
            "head_of_household": 200000.0,
            "qualifying_widow": 400000.0,
        }

        # EITC by number of qualifying children (2025), IRS Rev. Proc. 2024-40
        eitc_max = {0: 649.0, 1: 4328.0, 2: 7152.0, 3: 8046.0}
        eitc_phase_in = {0: 0.0765, 1: 0.34, 2: 0.40, 3: 0.45}
        eitc_phase_out = {0: 0.0765, 1: 0.1598, 2: 0.2106, 3: 0.2106}

        # EITC phaseout start by filing status and children
        eitc_phase_start = {
            "single": {0: 10620.0, 1: 23350.0, 2: 23350.0, 3: 23350.0},
            "married_joint": {0: 17730.0, 1: 30470.0, 2: 30470.0, 3: 30470.0},
            "head_of_household": {0: 10620.0, 1: 23350.0, 2: 23350.0, 3: 23350.0},
            "qualifying_widow": {0: 10620.0, 1: 23350.0, 2: 23350.0, 3: 23350.0},
        }

        # EITC phaseout end (no credit above this)
        eitc_phase_end = {
            "single": {0: 19104.0, 1: 50434.0, 2: 57310.0, 3: 61555.0},
            "married_joint": {0: 26214.0, 1: 57554.0, 2: 64430.0, 3: 68675.0},
            "head_of_household": {0: 19104.0, 1: 50434.0, 2: 57310.0, 3: 61555.0},
            "qualifying_widow": {0: 19104.0, 1: 50434.0, 2: 57310.0, 3: 61555.0},
        }

        # SALT cap (One Big Beautiful Bill Act, 2025)
        salt_base_cap = {
            "single": 40000.0,
            "married_joint": 40000.0,
            "married_separate": 20000.0,
            "head_of_household": 40000.0,
            "qualifying_widow": 40000.0,
        }
        salt_phaseout_threshold = {
            "single": 500000.0,
            "married_joint": 500000.0,
            "married_separate": 250000.0,
            "head_of_household": 500000.0,
            "qualifying_widow": 500000.0,
        }
        salt_floor = {
            "single": 10000.0,
            "married_joint": 10000.0,
            "married_separate": 5000.0,
            "head_of_household": 10000.0,
            "qualifying_widow": 10000.0,
        }

        # QBI (Section 199A) deduction thresholds
        # Phase-in range is $50,000 for single and $100,000 for MFJ
        qbi_threshold_start = {
            "single": 197300.0,
            "married_joint": 394600.0,
            "married_separate": 197300.0,
            "head_of_household": 197300.0,
            "qualifying_widow": 394600.0,
        }
        qbi_threshold_end = {
            "single": 247300.0,  # +50,000
            "married_joint": 494600.0,  # +100,000
            "married_separate": 247300.0,  # +50,000
            "head_of_household": 247300.0,  # +50,000
            "qualifying_widow": 494600.0,  # +100,000
        }

        return TaxYearConfig(
            tax_year=2025,
            ordinary_income_brackets=brackets,
            standard_deduction=std,
            additional_standard_deduction_over_65_or_blind=additional,
            # Capital gains / qualified dividends rates
            qd_ltcg_0_rate_threshold=qd_ltcg_0,
            qd_ltcg_15_rate_threshold=qd_ltcg_15,
            # Self-employment
            se_net_earnings_factor=0.9235,
            ss_wage_base=176100.0,
            medicare_rate=0.029,
            ss_rate=0.124,
            # Additional Medicare Tax
            additional_medicare_tax_rate=0.009,
            additional_medicare_threshold=additional_medicare,
            # NIIT
            niit_rate=0.038,
            niit_threshold=niit,
            # AMT
            amt_rate_26=0.26,
            amt_rate_28=0.28,
            amt_28_threshold=amt_28_threshold,
            amt_exemption=amt_exemption,
            amt_exemption_phaseout_start=amt_phaseout_start,
            amt_exemption_phaseout_rate=0.25,
            # Child Tax Credit
            child_tax_credit_amount=2000.0,
            child_tax_credit_refundable=1700.0,
            other_dependent_credit_amount=500.0,
            child_tax_credit_phaseout_start=ctc_phaseout,
            # EITC
            eitc_max_credit=eitc_max,
            eitc_phase_in_rate=eitc_phase_in,
            eitc_phaseout_rate=eitc_phase_out,
            eitc_phaseout_start=eitc_phase_start,
            eitc_phaseout_end=eitc_phase_end,
            eitc_investment_income_limit=11950.0,
            # Deductions
            salt_base_cap=salt_base_cap,
            salt_phaseout_threshold=salt_phaseout_threshold,
            salt_phaseout_rate=0.30,
            salt_floor=salt_floor,
            medical_expense_floor_pct=0.075,
            qbi_deduction_rate=0.20,
            qbi_threshold_start=qbi_threshold_start,
            qbi_threshold_end=qbi_threshold_end,
        )
