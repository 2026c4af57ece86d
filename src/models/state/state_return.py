"""Per-jurisdiction selection supplied with the return."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResidencyType(str, Enum):
    FULL_YEAR = "full-year"
    PART_YEAR = "part-year"
    NONRESIDENT = "nonresident"


class StateReturnConfig(BaseModel):
    """
    One requested state return.

    Move dates are only read for part-year residents; when absent they
    default to the first and last day of the tax year.
    """
    model_config = ConfigDict(frozen=True)

    state_code: str = Field(min_length=1, description="Two-letter state code")
    residency_type: ResidencyType = ResidencyType.FULL_YEAR
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None

    # State-specific flags
    rent_paid: bool = Field(default=False, description="Paid rent on a principal residence in the state")
    estimated_payments: int = Field(default=0, ge=0, description="State estimated tax payments, cents")

    @field_validator("state_code")
    @classmethod
    def _upper_code(cls, value: str) -> str:
        return value.upper()
