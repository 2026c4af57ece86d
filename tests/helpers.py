"""Builders for test tax returns. Arguments are dollars; models hold cents."""

from datetime import date
from typing import List, Optional, Sequence

from calculator.decimal_math import to_cents
from models.deductions import DeductionMethod, Deductions, ItemizedDeductions
from models.income import (
    CapitalTransaction,
    Form1099DIV,
    Form1099INT,
    Form1099NEC,
    ScheduleCBusiness,
    ScheduleEProperty,
    ScheduleK1,
    W2Info,
)
from models.state import ResidencyType, StateReturnConfig
from models.tax_return import TaxReturn
from models.taxpayer import Dependent, DependentRelationship, FilingStatus, TaxpayerInfo


def make_w2(
    wages: float,
    federal_withholding: float = 0.0,
    state_code: Optional[str] = None,
    state_wages: Optional[float] = None,
    state_withholding: float = 0.0,
    id: str = "w2-1",
) -> W2Info:
    """W-2 with Social Security and Medicare wages equal to Box 1."""
    if state_wages is None:
        state_wages = wages if state_code else 0.0
    return W2Info(
        id=id,
        employer_name="Test Corp",
        wages=to_cents(wages),
        federal_tax_withheld=to_cents(federal_withholding),
        social_security_wages=to_cents(wages),
        social_security_tax_withheld=to_cents(wages * 0.062),
        medicare_wages=to_cents(wages),
        state_code=state_code,
        state_wages=to_cents(state_wages),
        state_tax_withheld=to_cents(state_withholding),
    )


def make_child(id: str = "child-1", born: date = date(2015, 6, 1)) -> Dependent:
    return Dependent(id=id, name="Test Child", date_of_birth=born, relationship=DependentRelationship.SON)


def state(
    code: str,
    residency: ResidencyType = ResidencyType.FULL_YEAR,
    move_in: Optional[date] = None,
    move_out: Optional[date] = None,
    estimated_payments: float = 0.0,
    rent_paid: bool = False,
) -> StateReturnConfig:
    return StateReturnConfig(
        state_code=code,
        residency_type=residency,
        move_in_date=move_in,
        move_out_date=move_out,
        estimated_payments=to_cents(estimated_payments),
        rent_paid=rent_paid,
    )


def create_test_return(
    filing_status: FilingStatus = FilingStatus.SINGLE,
    wages: float = 75000.0,
    federal_withholding: float = 0.0,
    state_code: Optional[str] = None,
    state_withholding: float = 0.0,
    w2s: Optional[Sequence[W2Info]] = None,
    interest: float = 0.0,
    us_obligation_interest: float = 0.0,
    tax_exempt_interest: float = 0.0,
    ordinary_dividends: float = 0.0,
    qualified_dividends: float = 0.0,
    capital_gain_distributions: float = 0.0,
    nec_income: float = 0.0,
    business_receipts: float = 0.0,
    business_expenses: float = 0.0,
    rents: float = 0.0,
    rental_expenses: float = 0.0,
    k1s: Sequence[ScheduleK1] = (),
    capital_transactions: Sequence[CapitalTransaction] = (),
    dependents: Sequence[Dependent] = (),
    itemized: Optional[ItemizedDeductions] = None,
    state_returns: Sequence[StateReturnConfig] = (),
    spouse: bool = False,
    taxpayer_born: Optional[date] = None,
    mfs_lived_apart: bool = False,
) -> TaxReturn:
    """Create a test tax return."""
    if w2s is None:
        w2s = [make_w2(wages, federal_withholding, state_code, state_withholding=state_withholding)] if wages else []

    ints: List[Form1099INT] = []
    if interest or us_obligation_interest or tax_exempt_interest:
        ints.append(Form1099INT(
            id="int-1",
            payer_name="Test Bank",
            interest_income=to_cents(interest),
            us_obligation_interest=to_cents(us_obligation_interest),
            tax_exempt_interest=to_cents(tax_exempt_interest),
        ))

    divs: List[Form1099DIV] = []
    if ordinary_dividends or capital_gain_distributions:
        divs.append(Form1099DIV(
            id="div-1",
            payer_name="Test Fund",
            ordinary_dividends=to_cents(ordinary_dividends),
            qualified_dividends=to_cents(qualified_dividends),
            capital_gain_distributions=to_cents(capital_gain_distributions),
        ))

    necs: List[Form1099NEC] = []
    if nec_income:
        necs.append(Form1099NEC(id="nec-1", payer_name="Client", nonemployee_compensation=to_cents(nec_income)))

    businesses: List[ScheduleCBusiness] = []
    if business_receipts or business_expenses:
        businesses.append(ScheduleCBusiness(
            id="biz-1",
            business_name="Consulting",
            gross_receipts=to_cents(business_receipts),
            total_expenses=to_cents(business_expenses),
        ))

    properties: List[ScheduleEProperty] = []
    if rents or rental_expenses:
        properties.append(ScheduleEProperty(
            id="rental-1",
            address="1 Main St",
            rents_received=to_cents(rents),
            total_expenses=to_cents(rental_expenses),
        ))

    deductions = Deductions()
    if itemized is not None:
        deductions = Deductions(method=DeductionMethod.ITEMIZED, itemized=itemized)

    return TaxReturn(
        filing_status=filing_status,
        taxpayer=TaxpayerInfo(first_name="Test", last_name="User", date_of_birth=taxpayer_born),
        spouse=TaxpayerInfo(first_name="Test", last_name="Spouse") if spouse else None,
        dependents=list(dependents),
        w2s=list(w2s),
        form1099_ints=ints,
        form1099_divs=divs,
        form1099_necs=necs,
        capital_transactions=list(capital_transactions),
        schedule_c_businesses=businesses,
        schedule_e_properties=properties,
        schedule_k1s=list(k1s),
        deductions=deductions,
        mfs_lived_apart_all_year=mfs_lived_apart,
        state_returns=list(state_returns),
    )
