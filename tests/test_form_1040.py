"""Tests for the Form 1040 derivation graph."""

import dataclasses

import pytest

from calculator.explain import topological_sort
from calculator.form_1040 import compute_form_1040, standard_deduction
from calculator.schedules.credits import eic_at_income
from calculator.schedules.schedule_a import salt_cap
from helpers import create_test_return, make_child, make_w2
from models.deductions import DeductionMethod, ItemizedDeductions
from models.income import ISOExercise
from models.taxpayer import FilingStatus


class TestSingleWageEarner:
    """Single filer, one $75,000 W-2, $9,000 withheld."""

    @pytest.fixture
    def result(self, single_75k):
        return compute_form_1040(single_75k)

    def test_income_lines(self, result):
        assert result.line("1a").amount == 7500000
        assert result.line("1z").amount == 7500000
        assert result.total_income == 7500000
        assert result.agi == 7500000

    def test_deduction_and_taxable_income(self, result):
        assert result.deduction == 1575000
        assert result.deduction_method == DeductionMethod.STANDARD
        assert result.line("13").amount == 0
        assert result.taxable_income == 5925000

    def test_tax(self, result):
        assert result.line("16").amount == 794900
        assert result.line("17").amount == 0
        assert result.line("19").amount == 0
        assert result.line("23").amount == 0
        assert result.total_tax == 794900

    def test_refund(self, result):
        assert result.line("25a").amount == 900000
        assert result.total_payments == 900000
        assert result.overpaid == 105100
        assert result.amount_owed == 0

    def test_no_credits(self, result):
        assert result.line("27").amount == 0
        assert result.line("28").amount == 0
        assert result.line("31").amount == 0

    def test_schedules_not_run(self, result):
        assert result.schedule_c is None
        assert result.schedule_se is None
        assert result.schedule_d is None
        assert result.k1 is None
        assert "scheduleC" not in result.executed_schedules
        assert "schedule1" in result.executed_schedules

    def test_no_validation_issues(self, result):
        assert result.issues == ()

    def test_line_citations(self, result):
        assert result.line("15").citation == "Form 1040, Line 15"
        assert result.line("11").inputs == ("form1040.line9", "form1040.line10")


class TestGraphStructure:
    """Every node reads only nodes that were produced before it."""

    def test_inputs_precede_readers(self, single_75k):
        values = compute_form_1040(single_75k).values
        seen = set()
        for node_id, value in values.items():
            for input_id in value.inputs:
                assert input_id in seen, f"{node_id} reads {input_id} before it exists"
            seen.add(node_id)

    def test_map_is_acyclic(self):
        tax_return = create_test_return(
            wages=60000.0, interest=500.0, ordinary_dividends=2000.0, qualified_dividends=1500.0,
            nec_income=10000.0, rents=12000.0, rental_expenses=15000.0,
        )
        values = compute_form_1040(tax_return).values
        assert len(topological_sort(values)) == len(values)

    def test_document_leaves_recorded(self, single_75k):
        values = compute_form_1040(single_75k).values
        assert values["w2:w2-1:wages"].amount == 7500000
        assert not values["w2:w2-1:wages"].is_computed

    def test_balance_lines_mutually_exclusive(self):
        owes = compute_form_1040(create_test_return(wages=75000.0, federal_withholding=1000.0))
        assert owes.overpaid == 0
        assert owes.amount_owed == 794900 - 100000


class TestIncomeLines:
    """Interest, dividends and capital gains."""

    def test_interest_includes_us_obligations(self):
        result = compute_form_1040(create_test_return(wages=0.0, interest=1000.0, us_obligation_interest=500.0))
        assert result.line("2b").amount == 150000

    def test_tax_exempt_interest_on_line_2a(self):
        result = compute_form_1040(create_test_return(tax_exempt_interest=800.0))
        assert result.line("2a").amount == 80000
        assert result.agi == 7500000

    def test_qualified_dividends_taxed_at_preferential_rates(self):
        """$50,000 wages plus $10,000 qualified dividends."""
        tax_return = create_test_return(wages=50000.0, ordinary_dividends=10000.0, qualified_dividends=10000.0)
        result = compute_form_1040(tax_return)

        assert result.taxable_income == 4425000
        assert result.line("16").amount == 387150
        assert result.line("16").citation == "Form 1040, Line 16 (QDCG Worksheet)"

    def test_capital_loss_limited(self, tax_config):
        from models.income import CapitalTransaction

        loss = CapitalTransaction(id="t1", proceeds=0, cost_basis=1000000, is_long_term=False)
        result = compute_form_1040(create_test_return(capital_transactions=[loss]))

        assert result.schedule_d.line16.amount == -1000000
        assert result.line("7").amount == -300000
        assert result.schedule_d.capital_loss_carryforward == 700000

    def test_capital_gain_distributions(self):
        result = compute_form_1040(create_test_return(ordinary_dividends=100.0, capital_gain_distributions=2000.0))
        assert result.schedule_d.line13.amount == 200000
        assert result.line("7").amount == 200000


class TestDeductions:
    """Standard and itemized deductions."""

    def test_married_joint_standard(self):
        result = compute_form_1040(
            create_test_return(filing_status=FilingStatus.MARRIED_JOINT, wages=100000.0, spouse=True)
        )
        assert result.deduction == 3150000

    def test_additional_for_age(self, tax_config):
        from datetime import date

        tax_return = create_test_return(taxpayer_born=date(1955, 3, 1))
        assert standard_deduction(tax_return, tax_config) == 1575000 + 195000

    def test_itemized_used_when_larger(self):
        itemized = ItemizedDeductions(
            state_local_income_tax=800000, real_estate_tax=600000, mortgage_interest=1500000
        )
        result = compute_form_1040(create_test_return(wages=150000.0, itemized=itemized))

        assert result.deduction_method == DeductionMethod.ITEMIZED
        assert result.deduction == 1400000 + 1500000
        assert "scheduleA.line17" in result.line("12").inputs

    @pytest.mark.parametrize(
        "status, magi, cap",
        [
            (FilingStatus.SINGLE, 15000000, 4000000),
            (FilingStatus.SINGLE, 50000000, 4000000),
            (FilingStatus.SINGLE, 55000000, 2500000),
            (FilingStatus.SINGLE, 60000000, 1000000),
            (FilingStatus.SINGLE, 100000000, 1000000),
            (FilingStatus.MARRIED_JOINT, 55000000, 2500000),
            (FilingStatus.MARRIED_SEPARATE, 20000000, 2000000),
            (FilingStatus.MARRIED_SEPARATE, 27500000, 1250000),
            (FilingStatus.MARRIED_SEPARATE, 30000000, 500000),
        ],
    )
    def test_salt_cap_phase_out(self, tax_config, status, magi, cap):
        assert salt_cap(status, magi, tax_config) == cap

    def test_salt_capped_by_agi(self):
        """$550,000 of wages: the $40,000 cap loses 30% of the $50,000 excess."""
        itemized = ItemizedDeductions(state_local_income_tax=5000000)
        result = compute_form_1040(create_test_return(wages=550000.0, itemized=itemized))

        line5e = result.schedule_a.line5e
        assert line5e.amount == 2500000
        assert "form1040.line11" in line5e.inputs

    def test_standard_used_when_itemized_smaller(self):
        itemized = ItemizedDeductions(mortgage_interest=100000)
        result = compute_form_1040(create_test_return(itemized=itemized))

        assert result.deduction_method == DeductionMethod.STANDARD
        assert result.deduction == 1575000
        assert result.schedule_a is not None


class TestSelfEmployment:
    """$40,000 of nonemployee compensation, no wages."""

    @pytest.fixture
    def result(self):
        return compute_form_1040(create_test_return(wages=0.0, nec_income=40000.0))

    def test_schedule_se(self, result):
        se = result.schedule_se
        assert se.line2.amount == 4000000
        assert se.line4a.amount == 3694000
        assert se.line10.amount == 458056
        assert se.line11.amount == 107126
        assert se.line12.amount == 565182
        assert se.line13.amount == 282591

    def test_flows_to_form_1040(self, result):
        assert result.values["schedule1.line3"].amount == 4000000
        assert result.line("10").amount == 282591
        assert result.agi == 4000000 - 282591
        assert "scheduleSE.line12" in result.line("23").inputs

    def test_wage_base_shared_with_w2(self):
        """W-2 Social Security wages use up the base first."""
        result = compute_form_1040(create_test_return(wages=176100.0, nec_income=40000.0))
        assert result.schedule_se.line9.amount == 0
        assert result.schedule_se.line10.amount == 0


class TestQBI:
    """Section 199A deduction."""

    def test_below_threshold_limited_by_taxable_income(self):
        result = compute_form_1040(create_test_return(wages=0.0, business_receipts=100000.0))
        qbi = result.qbi

        assert qbi.total_qbi == 10000000
        assert qbi.tentative_qbi_deduction == 2000000
        assert qbi.is_below_threshold
        assert qbi.final_qbi_deduction == min(2000000, qbi.taxable_income_limit)
        assert result.line("13").amount == qbi.final_qbi_deduction
        assert "form8995" in result.executed_schedules

    def test_no_business_no_deduction(self, single_75k):
        result = compute_form_1040(single_75k)
        assert result.qbi.final_qbi_deduction == 0
        assert "form8995" not in result.executed_schedules


class TestAMT:
    """Form 6251 with an ISO exercise."""

    def test_iso_bargain_element_triggers_amt(self):
        iso = ISOExercise(id="iso-1", shares=1000, exercise_price=1000, fmv_at_exercise=21000)
        tax_return = create_test_return(wages=100000.0).model_copy(update={"iso_exercises": [iso]})
        result = compute_form_1040(tax_return)

        assert result.amt.line2i.amount == 20000000
        assert result.amt.line4.amount == 8425000 + 20000000
        assert result.amt.line5.amount == 8810000
        assert result.amt.line9.amount == 5099900
        assert result.line("16").amount == 1344900
        assert result.line("17").amount == 3755000

    def test_no_amt_for_wage_earner(self, single_75k):
        assert compute_form_1040(single_75k).line("17").amount == 0


class TestCredits:
    """Child tax credit and earned income credit."""

    def test_child_tax_credit_non_refundable(self):
        result = compute_form_1040(create_test_return(dependents=[make_child()]))
        assert result.child_tax_credit.qualifying_children == 1
        assert result.line("19").amount == 200000
        assert result.line("22").amount == 794900 - 200000

    def test_additional_child_tax_credit_and_eic(self):
        """$20,000 wages with one child: ACTC limited by the unused credit, full EIC."""
        tax_return = create_test_return(wages=20000.0, dependents=[make_child()])
        result = compute_form_1040(tax_return)

        assert result.line("16").amount == 42500
        assert result.line("19").amount == 42500
        assert result.line("28").amount == 157500
        assert result.line("27").amount == 432800

    def test_eic_smaller_of_earned_and_agi(self):
        """Investment income raises AGI above earned income; the AGI figure wins."""
        tax_return = create_test_return(wages=25000.0, interest=3000.0, dependents=[make_child()])
        eic = compute_form_1040(tax_return).earned_income_credit

        assert eic.eligible
        assert eic.credit_at_agi < eic.credit_at_earned_income
        assert eic.credit.amount == eic.credit_at_agi

    def test_eic_denied_for_investment_income(self):
        tax_return = create_test_return(wages=15000.0, interest=12000.0, dependents=[make_child()])
        eic = compute_form_1040(tax_return).earned_income_credit

        assert not eic.eligible
        assert eic.ineligible_reason == "investment_income"
        assert eic.credit.amount == 0

    def test_eic_zero_at_phase_out_end(self, tax_config):
        assert eic_at_income(5043300, 1, FilingStatus.SINGLE, tax_config) == 14
        assert eic_at_income(5043400, 1, FilingStatus.SINGLE, tax_config) == 0

    def test_eic_phase_out_end_from_config(self, tax_config):
        ends = {"single": {0: 19104.0, 1: 40000.0, 2: 57310.0, 3: 61555.0}}
        shortened = dataclasses.replace(tax_config, eitc_phaseout_end=ends)

        assert eic_at_income(3999900, 1, FilingStatus.SINGLE, shortened) > 0
        assert eic_at_income(4000000, 1, FilingStatus.SINGLE, shortened) == 0
        assert eic_at_income(4000000, 1, FilingStatus.SINGLE, tax_config) == 166733

    def test_excess_social_security(self):
        w2s = [make_w2(150000.0, id="a"), make_w2(150000.0, id="b")]
        result = compute_form_1040(create_test_return(w2s=w2s))
        assert result.values["schedule3.line11"].amount == 768180
        assert result.line("31").amount == 768180


class TestSurtaxes:
    """NIIT and Additional Medicare Tax."""

    def test_niit(self):
        result = compute_form_1040(create_test_return(wages=150000.0, interest=100000.0))
        assert result.values["form8960.netInvestmentIncome"].amount == 10000000
        assert result.values["form8960.niit"].amount == 190000

    def test_additional_medicare(self):
        result = compute_form_1040(create_test_return(wages=250000.0))
        assert result.values["form8959.additionalMedicareTax"].amount == 45000
        assert result.line("23").amount == 45000


class TestPayments:
    """Withholding lines 25a, 25b and 25d."""

    def test_1099_withholding_on_line_25b(self):
        from models.income import Form1099INT

        form = Form1099INT(id="int-9", payer_name="Bank", interest_income=100000, federal_tax_withheld=24000)
        tax_return = create_test_return(federal_withholding=9000.0).model_copy(update={"form1099_ints": [form]})
        result = compute_form_1040(tax_return)

        assert result.line("25a").amount == 900000
        assert result.line("25b").amount == 24000
        assert result.line("25d").amount == 924000
