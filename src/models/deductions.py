from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class DeductionMethod(str, Enum):
    STANDARD = "standard"
    ITEMIZED = "itemized"


class ItemizedDeductions(BaseModel):
    """Itemized deduction details (Schedule A), integer cents"""
    model_config = ConfigDict(frozen=True)

    medical_expenses: int = Field(default=0, ge=0)
    state_local_income_tax: int = Field(default=0, ge=0)
    real_estate_tax: int = Field(default=0, ge=0)
    personal_property_tax: int = Field(default=0, ge=0)
    mortgage_interest: int = Field(default=0, ge=0)
    charitable_cash: int = Field(default=0, ge=0)
    charitable_non_cash: int = Field(default=0, ge=0)
    other_itemized: int = Field(default=0, ge=0, description="Schedule A, Line 16")


class Deductions(BaseModel):
    """Elected deduction method plus the itemized detail when provided."""
    model_config = ConfigDict(frozen=True)

    method: DeductionMethod = DeductionMethod.STANDARD
    itemized: Optional[ItemizedDeductions] = None
