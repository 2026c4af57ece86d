from collections import Counter
from typing import Iterator, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .taxpayer import Dependent, FilingStatus, TaxpayerInfo
from .income import (
    CapitalTransaction,
    Form1099DIV,
    Form1099INT,
    Form1099NEC,
    ISOExercise,
    ScheduleCBusiness,
    ScheduleEProperty,
    ScheduleK1,
    SourceDocument,
    W2Info,
)
from .deductions import Deductions
from .state import StateReturnConfig
from .traced import TracedValue


class TaxReturn(BaseModel):
    """
    Complete input record for one computation.

    Immutable: nothing downstream writes to it. All amounts are cents.
    """
    model_config = ConfigDict(frozen=True)

    tax_year: int = 2025
    filing_status: FilingStatus = FilingStatus.SINGLE
    taxpayer: TaxpayerInfo
    spouse: Optional[TaxpayerInfo] = None
    dependents: List[Dependent] = Field(default_factory=list)

    # Source documents
    w2s: List[W2Info] = Field(default_factory=list)
    form1099_ints: List[Form1099INT] = Field(default_factory=list)
    form1099_divs: List[Form1099DIV] = Field(default_factory=list)
    form1099_necs: List[Form1099NEC] = Field(default_factory=list)
    capital_transactions: List[CapitalTransaction] = Field(default_factory=list)
    schedule_c_businesses: List[ScheduleCBusiness] = Field(default_factory=list)
    schedule_e_properties: List[ScheduleEProperty] = Field(default_factory=list)
    schedule_k1s: List[ScheduleK1] = Field(default_factory=list)
    iso_exercises: List[ISOExercise] = Field(default_factory=list)

    deductions: Deductions = Field(default_factory=Deductions)
    estimated_tax_payments: int = Field(default=0, ge=0, description="Federal estimated payments (Line 26)")
    mfs_lived_apart_all_year: bool = Field(
        default=False,
        description="MFS only: lived apart from spouse all year (Form 8582 special allowance)"
    )

    # Requested state returns
    state_returns: List[StateReturnConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_document_ids(self) -> "TaxReturn":
        # Leaf node ids are document_type:id:field
        counts = Counter((d.document_type, d.id) for d in self.documents())
        duplicates = sorted(f"{doc_type}:{doc_id}" for (doc_type, doc_id), n in counts.items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate document ids: {', '.join(duplicates)}")
        return self

    def documents(self) -> Iterator[SourceDocument]:
        """Every source document in catalogue order."""
        yield from self.w2s
        yield from self.form1099_ints
        yield from self.form1099_divs
        yield from self.form1099_necs
        yield from self.capital_transactions
        yield from self.schedule_c_businesses
        yield from self.schedule_e_properties
        yield from self.schedule_k1s
        yield from self.iso_exercises

    def document_values(self) -> Iterator[TracedValue]:
        for document in self.documents():
            yield from document.traced_values()

    def state_withholding(self, state_code: str) -> int:
        """W-2 Box 17 withholding tagged to a state in Box 15."""
        code = state_code.upper()
        return sum(w.state_tax_withheld for w in self.w2s if w.state_code == code)
