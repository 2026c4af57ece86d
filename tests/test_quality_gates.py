"""Tests for the registry, computation, cross-state and compiler quality gates."""

from dataclasses import replace
from datetime import date

import pytest

from calculator.form_1040 import compute_form_1040
from calculator.quality_gates import (
    GateResult,
    GateViolation,
    StateComputation,
    check_compiled_output,
    check_cross_state,
    check_registry_consistency,
    check_state_result,
    combine,
    run_all_gates,
)
from calculator.state import (
    DEFAULT_COMPILERS,
    DEFAULT_REGISTRY,
    CompiledForm,
    CompiledStateReturn,
    IllinoisModule,
    StateRegistry,
    StateResult,
    SummaryFormCompiler,
)
from config.settings import EngineSettings
from helpers import create_test_return, state
from models.state import ResidencyType


def _result(**overrides) -> StateResult:
    fields = dict(
        state_code="IL",
        form_label="IL Form IL-1040",
        residency_type=ResidencyType.FULL_YEAR,
        state_agi=7500000,
        state_taxable_income=7215000,
        state_tax=357143,
        state_credits=0,
        tax_after_credits=357143,
        state_withholding=300000,
        other_payments=0,
        overpaid=0,
        amount_owed=57143,
    )
    fields.update(overrides)
    return StateResult(**fields)


def _gates(result: GateResult):
    return set(result.gates())


class TestGateResult:

    def test_warning_only_passes(self):
        result = GateResult.from_violations([GateViolation("g", "c", "warning", "m")])
        assert result.passed
        assert result.errors == []
        assert len(result.warnings) == 1

    def test_error_fails(self):
        result = GateResult.from_violations([GateViolation("g", "c", "error", "m")])
        assert not result.passed

    def test_combine(self):
        ok = GateResult.from_violations([])
        bad = GateResult.from_violations([GateViolation("g", "c", "error", "m")])
        assert combine([ok, ok]).passed
        assert not combine([ok, bad]).passed
        assert combine([bad, bad]).gates() == ["g", "g"]


class TestRegistryGates:
    """Registry and compiler consistency."""

    def test_default_registry_is_consistent(self):
        result = check_registry_consistency(DEFAULT_REGISTRY, DEFAULT_COMPILERS)
        assert result.passed
        assert result.violations == ()

    def test_module_without_compiler(self):
        compilers = {k: v for k, v in DEFAULT_COMPILERS.items() if k != "PA"}
        result = check_registry_consistency(DEFAULT_REGISTRY, compilers)

        assert not result.passed
        assert "registry.module-without-compiler" in _gates(result)

    def test_compiler_without_module(self):
        registry = StateRegistry.from_modules([IllinoisModule()])
        result = check_registry_consistency(registry, DEFAULT_COMPILERS)

        assert not result.passed
        assert "registry.compiler-without-module" in _gates(result)

    def test_state_code_mismatch_is_gate_error(self):
        """A module registered under the wrong code is reported, not raised."""
        module = IllinoisModule()
        registry = StateRegistry([("IN", module)])
        result = check_registry_consistency(registry, {"IN": SummaryFormCompiler(module)})

        assert not result.passed
        assert "registry.state-code-mismatch" in _gates(result)
        assert "registry.compiler-code-mismatch" in _gates(result)

    def test_duplicate_state_code(self):
        registry = StateRegistry([("IL", IllinoisModule()), ("IL", IllinoisModule())])
        result = check_registry_consistency(registry, {"IL": SummaryFormCompiler(IllinoisModule())})

        assert "registry.duplicate-state-code" in _gates(result)
        assert len(registry) == 1

    def test_incomplete_module(self):
        class BareModule(IllinoisModule):
            state_name = ""
            form_label = ""
            review_layout = ()
            review_result_lines = ()

        module = BareModule()
        result = check_registry_consistency(
            StateRegistry.from_modules([module]), {"IL": SummaryFormCompiler(module)}
        )

        assert {
            "registry.missing-state-name",
            "registry.missing-form-label",
            "registry.empty-review-layout",
            "registry.empty-review-result-lines",
        } <= _gates(result)
        assert {v.gate for v in result.warnings} == {
            "registry.empty-review-layout",
            "registry.empty-review-result-lines",
        }


class TestStateResultGates:
    """Numeric invariants of one state result."""

    def test_valid_result_passes(self):
        assert check_state_result(_result(), state("IL")).violations == ()

    def test_negative_taxable_income(self):
        result = check_state_result(_result(state_taxable_income=-100), state("IL"))

        assert not result.passed
        assert "compute.negative-taxable-income" in _gates(result)

    @pytest.mark.parametrize("field,gate", [
        ("state_tax", "compute.negative-state-tax"),
        ("state_credits", "compute.negative-credits"),
        ("state_withholding", "compute.negative-withholding"),
        ("overpaid", "compute.negative-overpaid"),
        ("amount_owed", "compute.negative-amount-owed"),
    ])
    def test_negative_fields(self, field, gate):
        result = check_state_result(_result(**{field: -1}), state("IL"))
        assert gate in _gates(result)

    def test_overpaid_and_owed(self):
        result = check_state_result(_result(overpaid=10, amount_owed=10), state("IL"))
        assert "compute.overpaid-and-owed" in _gates(result)

    def test_balance_within_one_cent(self):
        result = check_state_result(_result(amount_owed=57144), state("IL"))
        assert result.passed

    def test_balance_mismatch(self):
        result = check_state_result(_result(amount_owed=50000), state("IL"))

        assert not result.passed
        assert "compute.balance-mismatch" in _gates(result)

    def test_balance_tolerance_from_settings(self):
        settings = EngineSettings(balance_tolerance_cents=10000)
        result = check_state_result(_result(amount_owed=50000), state("IL"), settings)
        assert "compute.balance-mismatch" not in _gates(result)

    def test_balance_includes_estimated_payments(self):
        result = _result(other_payments=57143, amount_owed=0)
        assert check_state_result(result, state("IL", estimated_payments=571.43)).passed

    def test_missing_apportionment_is_warning(self):
        config = state("IL", ResidencyType.PART_YEAR, move_in=date(2025, 7, 1))
        result = check_state_result(
            _result(residency_type=ResidencyType.PART_YEAR, apportionment_ratio=None), config
        )

        assert result.passed
        assert [v.gate for v in result.warnings] == ["compute.missing-apportionment"]

    @pytest.mark.parametrize("ratio", [-0.1, 1.5])
    def test_invalid_apportionment(self, ratio):
        config = state("IL", ResidencyType.NONRESIDENT)
        result = check_state_result(
            _result(residency_type=ResidencyType.NONRESIDENT, apportionment_ratio=ratio), config
        )
        assert "compute.invalid-apportionment" in _gates(result)

    def test_code_and_residency_mismatch(self):
        result = check_state_result(_result(), state("CA", ResidencyType.PART_YEAR))
        assert {"compute.state-code-mismatch", "compute.residency-mismatch"} <= _gates(result)

    def test_missing_form_label(self):
        assert "compute.missing-form-label" in _gates(check_state_result(_result(form_label=""), state("IL")))


class TestCrossStateGates:
    """Consistency of all results with the return."""

    @pytest.fixture
    def federal(self, single_75k):
        return compute_form_1040(single_75k)

    def test_duplicate_state_codes(self, federal):
        tax_return = create_test_return(state_returns=[state("IL"), state("IL")])
        result = check_cross_state(tax_return, federal, [_result()])

        assert not result.passed
        assert "cross-state.duplicate-state-codes" in _gates(result)

    def test_missing_result(self, federal):
        tax_return = create_test_return(state_returns=[state("IL"), state("NY")])
        result = check_cross_state(tax_return, federal, [_result(state_withholding=0, amount_owed=357143)])

        assert [v.state_code for v in result.errors] == ["NY"]
        assert result.errors[0].gate == "cross-state.missing-result"

    def test_no_income_tax_state_still_needs_result(self, federal):
        tax_return = create_test_return(state_returns=[state("TX")])
        result = check_cross_state(tax_return, federal, [])

        assert not result.passed
        assert [(v.gate, v.state_code) for v in result.errors] == [("cross-state.missing-result", "TX")]

    def test_withholding_exceeds_w2(self, federal):
        tax_return = create_test_return(state_returns=[state("IL")])
        result = check_cross_state(tax_return, federal, [_result()])

        assert result.passed
        assert "cross-state.withholding-exceeds-w2" in _gates(result)

    def test_withholding_compared_per_state(self, federal):
        """$3,000 withheld for CA does not cover the $3,000 IL reports."""
        tax_return = create_test_return(
            state_code="CA", state_withholding=3000.0, state_returns=[state("IL")]
        )
        result = check_cross_state(tax_return, federal, [_result()])

        withholding = [v for v in result.warnings if v.gate == "cross-state.withholding-exceeds-w2"]
        assert [v.state_code for v in withholding] == ["IL"]

    def test_withholding_within_tolerance(self, federal):
        tax_return = create_test_return(
            state_code="IL", state_withholding=2999.99, state_returns=[state("IL")]
        )
        assert check_cross_state(tax_return, federal, [_result()]).violations == ()

    def test_agi_deviation(self, federal):
        tax_return = create_test_return(state_code="IL", state_withholding=3000.0, state_returns=[state("IL")])
        result = check_cross_state(tax_return, federal, [_result(state_agi=1000000)])

        assert result.passed
        assert [v.gate for v in result.warnings] == ["cross-state.agi-deviation"]

    def test_agi_deviation_skips_part_year(self, federal):
        tax_return = create_test_return(state_code="IL", state_withholding=3000.0, state_returns=[state("IL")])
        part_year = _result(state_agi=1000000, residency_type=ResidencyType.PART_YEAR, apportionment_ratio=0.5)
        assert check_cross_state(tax_return, federal, [part_year]).violations == ()


class TestCompilerGates:
    """Compiled artifact shape."""

    def test_valid(self):
        compiled = CompiledStateReturn("IL", b"{}", (CompiledForm("IL-1040", "00", 4),))
        assert check_compiled_output(compiled).violations == ()

    def test_no_forms_and_empty_document(self):
        result = check_compiled_output(CompiledStateReturn("IL", b"", ()))
        assert _gates(result) == {"compiler.no-forms", "compiler.empty-pdf"}

    def test_bad_form(self):
        compiled = CompiledStateReturn("IL", b"x", (CompiledForm("", "", 0),))
        assert _gates(check_compiled_output(compiled)) == {
            "compiler.empty-form-id",
            "compiler.empty-sequence-number",
            "compiler.zero-page-count",
        }


class TestRunAllGates:
    """All families together."""

    def test_real_computation_passes(self):
        tax_return = create_test_return(state_code="IL", state_withholding=3000.0, state_returns=[state("IL")])
        federal = compute_form_1040(tax_return)
        config = tax_return.state_returns[0]
        module = DEFAULT_REGISTRY.get_module("IL")
        result = module.compute(tax_return, federal, config)
        compiled = [DEFAULT_COMPILERS["IL"].compile(tax_return, result)]

        gate_result = run_all_gates(
            tax_return, federal, [StateComputation(config, result)],
            registry=DEFAULT_REGISTRY, compilers=DEFAULT_COMPILERS, compiled=compiled,
        )
        assert gate_result.passed
        assert gate_result.violations == ()

    def test_collects_every_family(self, single_75k):
        federal = compute_form_1040(single_75k)
        tax_return = create_test_return(state_returns=[state("IL"), state("IL")])
        broken = replace(_result(), state_taxable_income=-100)

        gate_result = run_all_gates(
            tax_return, federal, [StateComputation(state("IL"), broken)],
            registry=StateRegistry([("IL", IllinoisModule()), ("IL", IllinoisModule())]),
            compilers=DEFAULT_COMPILERS,
            compiled=[CompiledStateReturn("IL", b"", ())],
        )

        categories = {v.category for v in gate_result.violations}
        assert categories == {"registry", "computation", "cross-state", "compiler"}
        assert not gate_result.passed
