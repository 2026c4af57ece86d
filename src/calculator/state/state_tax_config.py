"""State tax configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional

from calculator.brackets import TaxBracket, brackets_from_floors
from calculator.decimal_math import to_cents


# Type alias for bracket tables: filing_status -> [(threshold, rate), ...]
StateBracketTable = Dict[str, List[Tuple[float, float]]]


@dataclass(frozen=True)
class StateTaxConfig:
    """
    Configuration for a specific state and tax year.

    Holds the static data needed to calculate state income tax. Amounts are
    in dollars, converted to cents at the point of use.
    """

    # Basic identification
    state_code: str
    state_name: str
    tax_year: int

    # Tax structure
    is_flat_tax: bool
    flat_rate: Optional[float] = None  # If is_flat_tax is True
    brackets: Optional[StateBracketTable] = None  # If progressive

    # Standard deduction amounts by filing status
    standard_deduction: Dict[str, float] = field(default_factory=dict)

    # Itemized deductions: medical expenses above this share of state AGI
    medical_expense_floor_pct: float = 0.075

    # Personal exemption allowance (deduction from income)
    personal_exemption_amount: float = 0.0

    # Exemption credits (credit against tax) and their phase-out
    personal_exemption_credit: float = 0.0
    dependent_exemption_credit: float = 0.0
    exemption_credit_phaseout_start: Dict[str, float] = field(default_factory=dict)
    exemption_credit_phaseout_step: float = 2500.0
    exemption_credit_phaseout_rate: float = 0.06

    # Surtax on high incomes
    surtax_threshold: Optional[float] = None
    surtax_rate: float = 0.0

    # State EITC (as percentage of federal EITC, e.g., 0.20 = 20%)
    eitc_percentage: Optional[float] = None

    # Renter's credit
    renter_credit_single: float = 0.0
    renter_credit_joint: float = 0.0
    renter_credit_income_limit_single: Optional[float] = None
    renter_credit_income_limit_joint: Optional[float] = None

    def get_standard_deduction(self, filing_status: str) -> int:
        """Standard deduction for a filing status, in cents."""
        return to_cents(self.standard_deduction.get(filing_status, 0.0))

    def get_brackets(self, filing_status: str) -> List[TaxBracket]:
        """Tax brackets for a filing status, in cents."""
        if self.is_flat_tax:
            return [TaxBracket(None, self.flat_rate or 0.0)]
        if self.brackets:
            return brackets_from_floors(self.brackets.get(filing_status, self.brackets.get("single", [])))
        return []
