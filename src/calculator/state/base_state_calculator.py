"""Base class for state tax modules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from calculator.brackets import bracket_tax
from calculator.decimal_math import apply_rate, whole_cents
from calculator.state.state_tax_config import StateTaxConfig
from models.state import ResidencyType, StateReturnConfig
from models.traced import TracedValue

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class StateResult:
    """
    Standardised outcome of one state return.

    Mirrors the federal result for consistency. Amounts are cents;
    ``detail`` holds the state form's own line-by-line result.
    """

    state_code: str
    form_label: str
    residency_type: ResidencyType

    state_agi: int
    state_taxable_income: int
    state_tax: int
    state_credits: int
    tax_after_credits: int

    state_withholding: int
    other_payments: int = 0
    overpaid: int = 0
    amount_owed: int = 0

    # None for full-year residents
    apportionment_ratio: Optional[float] = None
    detail: Any = None

    @property
    def total_payments(self) -> int:
        return self.state_withholding + self.other_payments

    @property
    def is_refund(self) -> bool:
        return self.overpaid > 0


@dataclass(frozen=True)
class ReviewItem:
    """One labelled figure in a review section."""
    label: str
    node_id: str
    explanation: str = ""


@dataclass(frozen=True)
class ReviewSection:
    title: str
    items: Tuple[ReviewItem, ...] = ()


@dataclass(frozen=True)
class ReviewResultLine:
    """Bottom-line entry; ``kind`` is "refund", "owed" or "zero"."""
    kind: str
    label: str
    node_id: str


def settle(tax_after_credits: int, total_payments: int) -> Tuple[int, int]:
    """Return (overpaid, amount_owed); at most one is nonzero."""
    return max(0, total_payments - tax_after_credits), max(0, tax_after_credits - total_payments)


class StateModule(ABC):
    """
    Abstract base class for state tax modules.

    Each state implements this class with state-specific logic for:
    - Income adjustments (additions and subtractions)
    - Deductions or exemptions
    - Credits
    - Residency apportionment

    ``compute`` is pure: it reads the return, the federal result and the
    state selection and returns a StateResult.
    """

    state_code: str = ""
    state_name: str = ""
    form_label: str = ""
    sidebar_label: str = ""
    node_labels: Mapping[str, str] = {}
    review_layout: Tuple[ReviewSection, ...] = ()
    review_result_lines: Tuple[ReviewResultLine, ...] = ()

    def __init__(self, config: StateTaxConfig):
        self.config = config

    @abstractmethod
    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        config: StateReturnConfig,
    ) -> StateResult:
        """
        Calculate state tax for the given return.

        Args:
            tax_return: The input record
            federal: The computed federal Form 1040
            config: The state selection (residency, move dates, payments)

        Returns:
            StateResult with the complete state calculation.
        """

    @abstractmethod
    def collect_traced_values(self, result: StateResult) -> Dict[str, TracedValue]:
        """
        Traced values for the state's lines, in evaluation order.

        Inputs may name federal nodes, document leaves or earlier state
        nodes in the same mapping.
        """

    def calculate_brackets(self, taxable_income: int, filing_status: str) -> int:
        """Tax using progressive brackets or flat rate."""
        if taxable_income <= 0:
            return 0
        if self.config.is_flat_tax:
            return apply_rate(taxable_income, self.config.flat_rate or 0.0)
        return bracket_tax(taxable_income, self.config.get_brackets(self._get_filing_status_key(filing_status)))

    def calculate_state_eitc(self, federal_eitc: int) -> int:
        """
        State EITC as a percentage of the federal credit.
        """
        if self.config.eitc_percentage and federal_eitc > 0:
            return apply_rate(federal_eitc, self.config.eitc_percentage)
        return 0

    def get_state_withholding(self, tax_return: "TaxReturn") -> int:
        """W-2 Box 17 withholding where Box 15 names this state."""
        return tax_return.state_withholding(self.state_code)

    def withholding_refs(self, tax_return: "TaxReturn") -> list:
        return [w.ref("state_tax_withheld") for w in tax_return.w2s if w.state_code == self.state_code]

    @staticmethod
    def prorate(amount: int, ratio: float) -> int:
        return whole_cents(Decimal(amount) * Decimal(str(ratio)))

    def node(self, values: Dict[str, TracedValue], node_id: str, amount: int, inputs, citation: str) -> None:
        values[node_id] = TracedValue.from_computation(amount, node_id, inputs, citation)

    def add_payment_nodes(
        self,
        values: Dict[str, TracedValue],
        prefix: str,
        result: StateResult,
        withholding_inputs,
    ) -> None:
        """Payments and refund/owed lines; expects ``<prefix>.taxAfterCredits`` already in ``values``."""
        code = self.state_code
        self.node(values, f"{prefix}.stateWithholding", result.state_withholding, withholding_inputs,
                  f"{code} state income tax withheld")
        self.node(values, f"{prefix}.estimatedPayments", result.other_payments, [], f"{code} estimated payments")
        self.node(values, f"{prefix}.totalPayments", result.total_payments,
                  [f"{prefix}.stateWithholding", f"{prefix}.estimatedPayments"], f"{code} total payments")
        settle_inputs = [f"{prefix}.taxAfterCredits", f"{prefix}.totalPayments"]
        self.node(values, f"{prefix}.overpaid", result.overpaid, settle_inputs, f"{code} overpaid (refund)")
        self.node(values, f"{prefix}.amountOwed", result.amount_owed, settle_inputs, f"{code} amount you owe")

    def _get_filing_status_key(self, filing_status: str) -> str:
        """
        Normalize filing status to match bracket keys.

        Some state configs may use different key formats.
        """
        status_map = {
            "single": "single",
            "married_joint": "married_joint",
            "married_filing_jointly": "married_joint",
            "married_separate": "married_separate",
            "married_filing_separately": "married_separate",
            "head_of_household": "head_of_household",
            "qualifying_widow": "qualifying_widow",
            "qualifying_surviving_spouse": "qualifying_widow",
        }
        return status_map.get(filing_status.lower(), "single")
