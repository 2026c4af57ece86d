"""Tests for the California Form 540 module."""

from datetime import date

import pytest

from calculator.form_1040 import compute_form_1040
from calculator.state import CaliforniaModule
from calculator.state.configs import CALIFORNIA_2025
from helpers import create_test_return, make_child, make_w2, state
from models.deductions import ItemizedDeductions
from models.state import ResidencyType
from models.taxpayer import FilingStatus


def compute_ca(tax_return, config=None):
    config = config or state("CA")
    module = CaliforniaModule()
    return module, module.compute(tax_return, compute_form_1040(tax_return), config)


class TestCaliforniaConfig:

    def test_progressive(self):
        assert CALIFORNIA_2025.is_flat_tax is False
        assert len(CALIFORNIA_2025.get_brackets("single")) == 9
        assert CALIFORNIA_2025.get_brackets("single")[-1].rate == 0.123

    def test_standard_deduction(self):
        assert CALIFORNIA_2025.get_standard_deduction("single") == 570600
        assert CALIFORNIA_2025.get_standard_deduction("married_joint") == 1141200


class TestCaliforniaFullYear:
    """Single, $75,000 wages, $3,000 CA withholding."""

    @pytest.fixture
    def result(self):
        tax_return = create_test_return(wages=75000.0, state_code="CA", state_withholding=3000.0)
        return compute_ca(tax_return)[1]

    def test_taxable_income(self, result):
        assert result.state_agi == 7500000
        assert result.detail.deduction == 570600
        assert result.state_taxable_income == 6929400

    def test_tax_and_exemption_credit(self, result):
        assert result.detail.bracket_tax == 292757
        assert result.detail.mental_health_tax == 0
        assert result.detail.exemption_credits == 15300
        assert result.tax_after_credits == 277457

    def test_refund(self, result):
        assert result.overpaid == 22543
        assert result.amount_owed == 0


class TestCaliforniaCredits:
    """Exemption and renter's credits."""

    def test_joint_return_gets_two_personal_credits(self):
        module = CaliforniaModule()
        assert module.exemption_credits(FilingStatus.MARRIED_JOINT, 0, 10000000) == 30600
        assert module.exemption_credits(FilingStatus.HEAD_OF_HOUSEHOLD, 1, 10000000) == 15300 + 47500

    def test_exemption_credit_phase_out(self):
        """$300,000 AGI is 20 steps over the single threshold: fully phased out."""
        assert CaliforniaModule().exemption_credits(FilingStatus.SINGLE, 0, 30000000) == 0

    def test_exemption_credit_partial_phase_out(self):
        """One step over the threshold removes 6%."""
        credits = CaliforniaModule().exemption_credits(FilingStatus.SINGLE, 0, 25220300 + 100)
        assert credits == 15300 - 918

    def test_renters_credit(self):
        tax_return = create_test_return(wages=50000.0)
        result = compute_ca(tax_return, state("CA", rent_paid=True))[1]
        assert result.detail.renters_credit == 6000

    def test_renters_credit_income_limit(self):
        result = compute_ca(create_test_return(wages=75000.0), state("CA", rent_paid=True))[1]
        assert result.detail.renters_credit == 0

    def test_dependent_credit(self):
        result = compute_ca(create_test_return(dependents=[make_child()]))[1]
        assert result.detail.exemption_credits == 15300 + 47500


class TestCaliforniaDeductions:

    def test_itemized_without_salt_cap(self):
        """CA itemizing drops state income tax and keeps property tax uncapped."""
        itemized = ItemizedDeductions(
            state_local_income_tax=900000, real_estate_tax=1500000, mortgage_interest=1200000
        )
        result = compute_ca(create_test_return(wages=150000.0, itemized=itemized))[1]

        assert result.detail.itemized_deduction == 1500000 + 1200000
        assert result.detail.deduction_method == "itemized"

    def test_us_obligation_interest_subtracted(self):
        result = compute_ca(create_test_return(us_obligation_interest=1000.0))[1]
        assert result.detail.subtractions == 100000
        assert result.state_agi == 7500000

    def test_mental_health_services_tax(self):
        result = compute_ca(create_test_return(wages=1200000.0))[1]
        expected = round((result.state_taxable_income - 100000000) * 0.01)
        assert result.detail.mental_health_tax == expected


class TestCaliforniaResidency:

    def test_part_year_prorates_tax_and_credits(self):
        config = state("CA", ResidencyType.PART_YEAR, move_out=date(2025, 6, 30))
        module, result = compute_ca(create_test_return(), config)
        ratio = 181 / 365

        assert result.apportionment_ratio == pytest.approx(ratio)
        assert result.state_tax == pytest.approx(292757 * ratio, abs=1)
        assert result.detail.exemption_credits == pytest.approx(15300 * ratio, abs=1)

    def test_nonresident_uses_ca_wage_share(self):
        w2s = [make_w2(35000.0, state_code="NY", id="ny"), make_w2(40000.0, state_code="CA", id="ca")]
        result = compute_ca(create_test_return(w2s=w2s), state("CA", ResidencyType.NONRESIDENT))[1]

        assert result.apportionment_ratio == pytest.approx(40000 / 75000)
        assert result.state_tax == pytest.approx(292757 * 40000 / 75000, abs=1)

    def test_nonresident_without_ca_wages(self):
        result = compute_ca(create_test_return(), state("CA", ResidencyType.NONRESIDENT))[1]
        assert result.apportionment_ratio == 0.0
        assert result.tax_after_credits == 0


class TestCaliforniaTracedValues:

    def test_values(self):
        tax_return = create_test_return(wages=75000.0, state_code="CA", state_withholding=3000.0)
        module, result = compute_ca(tax_return)
        values = module.collect_traced_values(result)

        assert values["form540.caTaxableIncome"].amount == 6929400
        assert values["form540.taxAfterCredits"].amount == 277457
        assert values["form540.overpaid"].amount == 22543
        assert set(values) <= set(module.node_labels)
