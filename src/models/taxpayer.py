from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class FilingStatus(str, Enum):
    """IRS filing status options"""
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOW = "qualifying_widow"


class DependentRelationship(str, Enum):
    """Relationships that can satisfy the qualifying child relationship test."""
    SON = "son"
    DAUGHTER = "daughter"
    STEPCHILD = "stepchild"
    FOSTER_CHILD = "foster_child"
    SIBLING = "sibling"
    GRANDCHILD = "grandchild"
    NIECE = "niece"
    NEPHEW = "nephew"
    # Qualifying relative only
    PARENT = "parent"
    OTHER_RELATIVE = "other_relative"


QUALIFYING_CHILD_RELATIONSHIPS = frozenset({
    DependentRelationship.SON,
    DependentRelationship.DAUGHTER,
    DependentRelationship.STEPCHILD,
    DependentRelationship.FOSTER_CHILD,
    DependentRelationship.SIBLING,
    DependentRelationship.GRANDCHILD,
    DependentRelationship.NIECE,
    DependentRelationship.NEPHEW,
})


class Dependent(BaseModel):
    """
    Tax dependent information.

    Only the facts the credit computations read are captured: age at year
    end, relationship, residency months and whether a valid SSN was issued.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    date_of_birth: date
    relationship: DependentRelationship
    months_lived_with_taxpayer: int = Field(default=12, ge=0, le=12, description="Months lived with taxpayer in tax year")
    has_valid_ssn: bool = Field(default=True, description="SSN valid for employment issued before the due date")
    is_student: bool = Field(default=False, description="Full-time student for 5+ months")
    is_permanently_disabled: bool = Field(default=False, description="Permanently and totally disabled")

    def age_at_year_end(self, tax_year: int) -> int:
        return tax_year - self.date_of_birth.year


class TaxpayerInfo(BaseModel):
    """Primary taxpayer (or spouse) information"""
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    is_blind: bool = False
    is_over_65: bool = False

    def age_at_year_end(self, tax_year: int) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return tax_year - self.date_of_birth.year
