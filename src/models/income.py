"""
Source document catalogue.

Each document model is one variant of the tagged set the primary graph
consumes; ``document_type`` is the tag. All amounts are integer cents.
``TRACED_FIELDS`` names the fields that become document leaves in the
traced-value map, in the order they are recorded.
"""

from enum import Enum
from typing import ClassVar, Dict, Iterator, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .traced import TracedValue


class SourceDocument(BaseModel):
    """Common behaviour for every input document."""
    model_config = ConfigDict(frozen=True)

    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ()
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {}

    id: str
    document_type: str

    def ref(self, field: str) -> str:
        """Node id of one of this document's leaves."""
        return f"{self.document_type}:{self.id}:{field}"

    def traced_values(self) -> Iterator[TracedValue]:
        for field in self.TRACED_FIELDS:
            yield TracedValue.from_document(
                getattr(self, field),
                self.document_type,
                self.id,
                field,
                self.FIELD_CITATIONS.get(field),
            )


class W2Info(SourceDocument):
    """W-2 form information"""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "wages",
        "federal_tax_withheld",
        "social_security_wages",
        "social_security_tax_withheld",
        "medicare_wages",
        "state_wages",
        "state_tax_withheld",
    )
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "wages": "W-2, Box 1",
        "federal_tax_withheld": "W-2, Box 2",
        "social_security_wages": "W-2, Box 3",
        "social_security_tax_withheld": "W-2, Box 4",
        "medicare_wages": "W-2, Box 5",
        "state_wages": "W-2, Box 16",
        "state_tax_withheld": "W-2, Box 17",
    }

    document_type: Literal["w2"] = "w2"
    employer_name: str
    wages: int = Field(ge=0, description="Box 1: Wages, tips, other compensation")
    federal_tax_withheld: int = Field(default=0, ge=0, description="Box 2: Federal income tax withheld")
    social_security_wages: int = Field(default=0, ge=0, description="Box 3")
    social_security_tax_withheld: int = Field(default=0, ge=0, description="Box 4")
    medicare_wages: int = Field(default=0, ge=0, description="Box 5")
    state_code: Optional[str] = Field(default=None, description="Box 15: two-letter state code")
    state_wages: int = Field(default=0, ge=0, description="Box 16")
    state_tax_withheld: int = Field(default=0, ge=0, description="Box 17")

    @field_validator("state_code")
    @classmethod
    def _upper_state(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value


class Form1099INT(SourceDocument):
    """Interest income"""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ("interest_income", "us_obligation_interest", "federal_tax_withheld", "tax_exempt_interest")
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "interest_income": "1099-INT, Box 1",
        "us_obligation_interest": "1099-INT, Box 3",
        "federal_tax_withheld": "1099-INT, Box 4",
        "tax_exempt_interest": "1099-INT, Box 8",
    }

    document_type: Literal["1099int"] = "1099int"
    payer_name: str
    interest_income: int = Field(default=0, ge=0, description="Box 1")
    us_obligation_interest: int = Field(default=0, ge=0, description="Box 3: Interest on U.S. savings bonds and Treasury obligations")
    federal_tax_withheld: int = Field(default=0, ge=0, description="Box 4")
    tax_exempt_interest: int = Field(default=0, ge=0, description="Box 8")


class Form1099DIV(SourceDocument):
    """Dividends and distributions"""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "ordinary_dividends",
        "qualified_dividends",
        "capital_gain_distributions",
        "federal_tax_withheld",
        "exempt_interest_dividends",
    )
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "ordinary_dividends": "1099-DIV, Box 1a",
        "qualified_dividends": "1099-DIV, Box 1b",
        "capital_gain_distributions": "1099-DIV, Box 2a",
        "federal_tax_withheld": "1099-DIV, Box 4",
        "exempt_interest_dividends": "1099-DIV, Box 12",
    }

    document_type: Literal["1099div"] = "1099div"
    payer_name: str
    ordinary_dividends: int = Field(default=0, ge=0, description="Box 1a")
    qualified_dividends: int = Field(default=0, ge=0, description="Box 1b")
    capital_gain_distributions: int = Field(default=0, ge=0, description="Box 2a")
    federal_tax_withheld: int = Field(default=0, ge=0, description="Box 4")
    exempt_interest_dividends: int = Field(default=0, ge=0, description="Box 12")


class Form1099NEC(SourceDocument):
    """Nonemployee compensation (self-employment income)"""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ("nonemployee_compensation", "federal_tax_withheld")
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "nonemployee_compensation": "1099-NEC, Box 1",
        "federal_tax_withheld": "1099-NEC, Box 4",
    }

    document_type: Literal["1099nec"] = "1099nec"
    payer_name: str
    nonemployee_compensation: int = Field(default=0, ge=0, description="Box 1")
    federal_tax_withheld: int = Field(default=0, ge=0, description="Box 4")


class CapitalTransaction(SourceDocument):
    """One sale reported on Form 8949 (from a 1099-B or a manual entry)."""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ("proceeds", "cost_basis", "adjustment")
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "proceeds": "Form 8949, column (d)",
        "cost_basis": "Form 8949, column (e)",
        "adjustment": "Form 8949, column (g)",
    }

    document_type: Literal["8949"] = "8949"
    description: str = ""
    proceeds: int = Field(ge=0)
    cost_basis: int = Field(ge=0)
    adjustment: int = Field(default=0, description="Wash sale or other basis adjustment (added to gain)")
    is_long_term: bool = False

    @property
    def gain_or_loss(self) -> int:
        return self.proceeds - self.cost_basis + self.adjustment


class ScheduleCBusiness(SourceDocument):
    """Sole proprietorship summary (Schedule C)"""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ("gross_receipts", "total_expenses")
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "gross_receipts": "Schedule C, Line 1",
        "total_expenses": "Schedule C, Line 28",
    }

    document_type: Literal["scheduleC"] = "scheduleC"
    business_name: str
    gross_receipts: int = Field(default=0, ge=0)
    total_expenses: int = Field(default=0, ge=0)
    qbi_w2_wages: int = Field(default=0, ge=0, description="W-2 wages paid by the business (Form 8995-A)")
    qbi_ubia: int = Field(default=0, ge=0, description="Unadjusted basis of qualified property")
    is_sstb: bool = Field(default=False, description="Specified service trade or business")


class ScheduleEProperty(SourceDocument):
    """Rental or royalty property (Schedule E Part I)"""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ("rents_received", "royalties_received", "total_expenses")
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "rents_received": "Schedule E, Line 3",
        "royalties_received": "Schedule E, Line 4",
        "total_expenses": "Schedule E, Line 20",
    }

    document_type: Literal["scheduleE"] = "scheduleE"
    address: str = ""
    rents_received: int = Field(default=0, ge=0)
    royalties_received: int = Field(default=0, ge=0)
    total_expenses: int = Field(default=0, ge=0, description="Lines 5-19 including depreciation")


class K1EntityType(str, Enum):
    PARTNERSHIP = "partnership"
    S_CORP = "s_corp"
    TRUST_ESTATE = "trust_estate"


class ScheduleK1(SourceDocument):
    """Passthrough income from a partnership, S corporation, or trust."""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "ordinary_income",
        "rental_income",
        "guaranteed_payments",
        "interest_income",
        "dividends",
        "short_term_capital_gain",
        "long_term_capital_gain",
        "self_employment_earnings",
        "section_199a_qbi",
    )
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {
        "ordinary_income": "Schedule K-1, Box 1",
        "rental_income": "Schedule K-1, Box 2",
        "guaranteed_payments": "Schedule K-1, Box 4",
        "interest_income": "Schedule K-1, Box 5",
        "dividends": "Schedule K-1, Box 6a",
        "short_term_capital_gain": "Schedule K-1, Box 8",
        "long_term_capital_gain": "Schedule K-1, Box 9a",
        "self_employment_earnings": "Schedule K-1, Box 14 Code A",
        "section_199a_qbi": "Schedule K-1, Box 20 Code Z",
    }

    document_type: Literal["k1"] = "k1"
    entity_name: str
    entity_type: K1EntityType = K1EntityType.PARTNERSHIP
    ordinary_income: int = 0
    rental_income: int = 0
    guaranteed_payments: int = Field(default=0, ge=0)
    interest_income: int = Field(default=0, ge=0)
    dividends: int = Field(default=0, ge=0)
    short_term_capital_gain: int = 0
    long_term_capital_gain: int = 0
    self_employment_earnings: int = 0
    section_199a_qbi: int = 0
    section_199a_w2_wages: int = Field(default=0, ge=0)
    section_199a_ubia: int = Field(default=0, ge=0)
    is_sstb: bool = False


class ISOExercise(SourceDocument):
    """Incentive stock option exercise (AMT preference item)."""
    TRACED_FIELDS: ClassVar[Tuple[str, ...]] = ("bargain_element",)
    FIELD_CITATIONS: ClassVar[Dict[str, str]] = {"bargain_element": "Form 6251, Line 2i"}

    document_type: Literal["iso"] = "iso"
    shares: int = Field(ge=0)
    exercise_price: int = Field(ge=0, description="Per share, cents")
    fmv_at_exercise: int = Field(ge=0, description="Per share, cents")

    @property
    def bargain_element(self) -> int:
        return max(0, self.fmv_at_exercise - self.exercise_price) * self.shares
