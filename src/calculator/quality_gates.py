"""
Quality gates for the state registry, state results and compiled output.

Gates run after computation and report every problem they find instead of
stopping at the first one. Four families:

1. Registry: every state module has a compiler and a complete interface
2. Computation: each StateResult satisfies the numeric invariants
3. Cross-state: the set of state results is consistent with the return
4. Compiler: compiled artifacts contain well-formed forms

A violation with severity "error" fails the gate; "warning" is advisory.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple, TYPE_CHECKING

from calculator.state.state_registry import StateRegistry
from models.state import ResidencyType, StateReturnConfig

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from calculator.state.base_state_calculator import StateResult
    from calculator.state.compilers import CompiledStateReturn, StateFormCompiler
    from config.settings import EngineSettings
    from models.tax_return import TaxReturn


logger = logging.getLogger(__name__)

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CATEGORY_REGISTRY = "registry"
CATEGORY_COMPUTATION = "computation"
CATEGORY_CROSS_STATE = "cross-state"
CATEGORY_COMPILER = "compiler"

# Used when no EngineSettings are supplied
DEFAULT_BALANCE_TOLERANCE_CENTS = 1
DEFAULT_WITHHOLDING_TOLERANCE_CENTS = 1
DEFAULT_AGI_DEVIATION_THRESHOLD = 0.5


@dataclass(frozen=True)
class GateViolation:
    gate: str
    category: str
    severity: str
    message: str
    state_code: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR


@dataclass(frozen=True)
class GateResult:
    """Outcome of one or more gates; ``passed`` is False if any violation is an error."""

    passed: bool
    violations: Tuple[GateViolation, ...] = ()

    @classmethod
    def from_violations(cls, violations: Iterable[GateViolation]) -> "GateResult":
        violations = tuple(violations)
        return cls(passed=not any(v.is_error for v in violations), violations=violations)

    @property
    def errors(self) -> List[GateViolation]:
        return [v for v in self.violations if v.is_error]

    @property
    def warnings(self) -> List[GateViolation]:
        return [v for v in self.violations if not v.is_error]

    def gates(self) -> List[str]:
        """Names of the gates that reported, in order."""
        return [v.gate for v in self.violations]


class StateComputation(NamedTuple):
    """A state selection paired with the result computed for it."""

    config: StateReturnConfig
    result: "StateResult"


def _tolerance(settings: Optional["EngineSettings"], name: str, default):
    if settings is None:
        return default
    return getattr(settings, name)


# =============================================================================
# Registry gates
# =============================================================================

def check_registry_consistency(
    registry: StateRegistry,
    compilers: Mapping[str, "StateFormCompiler"],
) -> GateResult:
    """Every module has a compiler and vice versa, and both are fully declared."""
    violations: List[GateViolation] = []

    def add(gate: str, severity: str, message: str, code: str) -> None:
        violations.append(GateViolation(gate, CATEGORY_REGISTRY, severity, message, code))

    counts = Counter(code for code, _ in registry.entries)
    for code, count in counts.items():
        if count > 1:
            add("registry.duplicate-state-code", SEVERITY_ERROR,
                f"State code {code} is registered {count} times", code)

    for code, module in registry.items():
        if code not in compilers:
            add("registry.module-without-compiler", SEVERITY_ERROR,
                f'State module "{module.state_name}" ({code}) has no registered form compiler', code)

    for code in compilers:
        if code not in registry:
            add("registry.compiler-without-module", SEVERITY_ERROR,
                f"Form compiler for {code} has no registered state module", code)

    for code, module in registry.items():
        if not module.state_code:
            add("registry.missing-state-code", SEVERITY_ERROR,
                f"State module for {code} is missing state_code", code)
        if module.state_code != code:
            add("registry.state-code-mismatch", SEVERITY_ERROR,
                f'State module registered as {code} declares state_code="{module.state_code}"', code)
        if not module.state_name:
            add("registry.missing-state-name", SEVERITY_ERROR,
                f"State module for {code} is missing state_name", code)
        if not module.form_label:
            add("registry.missing-form-label", SEVERITY_ERROR,
                f"State module for {code} is missing form_label", code)
        if not module.review_layout:
            add("registry.empty-review-layout", SEVERITY_WARNING,
                f"State module for {code} has no review layout sections", code)
        if not module.review_result_lines:
            add("registry.empty-review-result-lines", SEVERITY_WARNING,
                f"State module for {code} has no review result lines", code)

    for code, compiler in compilers.items():
        if compiler.state_code != code:
            add("registry.compiler-code-mismatch", SEVERITY_ERROR,
                f'Form compiler registered as {code} declares state_code="{compiler.state_code}"', code)

    return GateResult.from_violations(violations)


# =============================================================================
# Computation gates
# =============================================================================

NON_NEGATIVE_FIELDS = (
    ("state_taxable_income", "compute.negative-taxable-income"),
    ("state_tax", "compute.negative-state-tax"),
    ("state_credits", "compute.negative-credits"),
    ("tax_after_credits", "compute.negative-tax-after-credits"),
    ("state_withholding", "compute.negative-withholding"),
    ("overpaid", "compute.negative-overpaid"),
    ("amount_owed", "compute.negative-amount-owed"),
)


def check_state_result(
    result: "StateResult",
    config: StateReturnConfig,
    settings: Optional["EngineSettings"] = None,
) -> GateResult:
    """Numeric and structural invariants of one state's result."""
    violations: List[GateViolation] = []
    code = result.state_code

    def add(gate: str, message: str, severity: str = SEVERITY_ERROR) -> None:
        violations.append(GateViolation(gate, CATEGORY_COMPUTATION, severity, message, code))

    if result.state_code != config.state_code:
        add("compute.state-code-mismatch",
            f'Compute result state_code="{result.state_code}" does not match config state_code="{config.state_code}"')

    if result.residency_type != config.residency_type:
        add("compute.residency-mismatch",
            f'Compute result residency_type="{result.residency_type.value}" does not match '
            f'config residency_type="{config.residency_type.value}"')

    for attr, gate in NON_NEGATIVE_FIELDS:
        amount = getattr(result, attr)
        if amount < 0:
            add(gate, f"{code}: {attr} is negative ({amount})")

    if result.overpaid > 0 and result.amount_owed > 0:
        add("compute.overpaid-and-owed",
            f"{code}: both overpaid ({result.overpaid}) and amount_owed ({result.amount_owed}) are positive")

    tolerance = _tolerance(settings, "balance_tolerance_cents", DEFAULT_BALANCE_TOLERANCE_CENTS)
    balance = result.state_withholding + result.other_payments - result.tax_after_credits
    reported = result.overpaid - result.amount_owed
    if abs(balance - reported) > tolerance:
        add("compute.balance-mismatch",
            f"{code}: balance mismatch, payments({result.total_payments}) - "
            f"tax_after_credits({result.tax_after_credits}) = {balance}, but "
            f"overpaid({result.overpaid}) - amount_owed({result.amount_owed}) = {reported}")

    if config.residency_type != ResidencyType.FULL_YEAR:
        ratio = result.apportionment_ratio
        if ratio is None:
            add("compute.missing-apportionment",
                f"{code}: part-year/nonresident return has no apportionment_ratio", SEVERITY_WARNING)
        elif ratio < 0 or ratio > 1:
            add("compute.invalid-apportionment",
                f"{code}: apportionment_ratio {ratio} is outside the 0-1 range")

    if not result.form_label:
        add("compute.missing-form-label", f"{code}: compute result has empty form_label")

    return GateResult.from_violations(violations)


# =============================================================================
# Cross-state gates
# =============================================================================

def check_cross_state(
    tax_return: "TaxReturn",
    federal: "Form1040Result",
    results: Sequence["StateResult"],
    settings: Optional["EngineSettings"] = None,
) -> GateResult:
    """Consistency of all state results with the return and the federal AGI."""
    violations: List[GateViolation] = []

    def add(gate: str, severity: str, message: str, code: Optional[str] = None) -> None:
        violations.append(GateViolation(gate, CATEGORY_CROSS_STATE, severity, message, code))

    codes = [c.state_code for c in tax_return.state_returns]
    duplicates = sorted(code for code, count in Counter(codes).items() if count > 1)
    if duplicates:
        add("cross-state.duplicate-state-codes", SEVERITY_ERROR,
            f"Duplicate state codes in state_returns: {', '.join(duplicates)}")

    computed = {r.state_code for r in results}
    for config in tax_return.state_returns:
        if config.state_code in computed:
            continue
        add("cross-state.missing-result", SEVERITY_ERROR,
            f"No compute result for configured state {config.state_code}", config.state_code)

    tolerance = _tolerance(settings, "withholding_tolerance_cents", DEFAULT_WITHHOLDING_TOLERANCE_CENTS)
    for result in results:
        w2_withheld = tax_return.state_withholding(result.state_code)
        if result.state_withholding > w2_withheld + tolerance:
            add("cross-state.withholding-exceeds-w2", SEVERITY_WARNING,
                f"{result.state_code}: state withholding ({result.state_withholding}) exceeds "
                f"W-2 withholding tagged to the state ({w2_withheld})", result.state_code)

    threshold = _tolerance(settings, "agi_deviation_threshold", DEFAULT_AGI_DEVIATION_THRESHOLD)
    federal_agi = federal.agi
    for result in results:
        if result.residency_type != ResidencyType.FULL_YEAR or federal_agi <= 0:
            continue
        deviation = abs(result.state_agi - federal_agi) / federal_agi
        if deviation > threshold:
            add("cross-state.agi-deviation", SEVERITY_WARNING,
                f"{result.state_code}: state AGI ({result.state_agi}) deviates more than "
                f"{threshold:.0%} from federal AGI ({federal_agi})", result.state_code)

    return GateResult.from_violations(violations)


# =============================================================================
# Compiler output gates
# =============================================================================

def check_compiled_output(compiled: "CompiledStateReturn") -> GateResult:
    """Form list and document of one compiled state return."""
    violations: List[GateViolation] = []
    code = compiled.state_code

    def add(gate: str, message: str) -> None:
        violations.append(GateViolation(gate, CATEGORY_COMPILER, SEVERITY_ERROR, message, code))

    if not compiled.forms:
        add("compiler.no-forms", f"{code}: compiler produced no forms")

    for form in compiled.forms:
        if not form.form_id:
            add("compiler.empty-form-id", f"{code}: compiled form has empty form_id")
        if not form.sequence_number:
            add("compiler.empty-sequence-number",
                f'{code}: compiled form "{form.form_id}" has empty sequence_number')
        if form.page_count < 1:
            add("compiler.zero-page-count",
                f'{code}: compiled form "{form.form_id}" has {form.page_count} pages')

    if not compiled.document:
        add("compiler.empty-pdf", f"{code}: compiled document is empty")

    return GateResult.from_violations(violations)


# =============================================================================
# Aggregate runner
# =============================================================================

def combine(results: Iterable[GateResult]) -> GateResult:
    """Union of violations; passes only if every part passes."""
    violations: List[GateViolation] = []
    for result in results:
        violations.extend(result.violations)
    return GateResult.from_violations(violations)


def run_all_gates(
    tax_return: "TaxReturn",
    federal: "Form1040Result",
    computations: Sequence[StateComputation],
    *,
    registry: StateRegistry,
    compilers: Mapping[str, "StateFormCompiler"],
    compiled: Optional[Sequence["CompiledStateReturn"]] = None,
    settings: Optional["EngineSettings"] = None,
) -> GateResult:
    """
    Run every gate family and return the combined result.

    Args:
        tax_return: The input record
        federal: The computed federal return
        computations: Each computed state result with the selection it came from
        registry: State modules in use
        compilers: Compilers in use, keyed by state code
        compiled: Compiled artifacts to check, if any were produced
        settings: Gate tolerances; built-in defaults when omitted
    """
    parts = [check_registry_consistency(registry, compilers)]
    parts.extend(check_state_result(c.result, c.config, settings) for c in computations)
    parts.append(check_cross_state(tax_return, federal, [c.result for c in computations], settings))
    parts.extend(check_compiled_output(c) for c in compiled or ())

    combined = combine(parts)
    for violation in combined.violations:
        if violation.is_error:
            logger.warning("Quality gate %s failed: %s", violation.gate, violation.message)
        else:
            logger.debug("Quality gate %s warning: %s", violation.gate, violation.message)
    return combined
