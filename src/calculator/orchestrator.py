"""
Multi-state orchestration.

``compute_all`` runs the federal return, then every selected state module
in selection order, merging each state's traced values into one map, and
finally runs the quality gates over the whole result.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from calculator.form_1040 import Form1040Result, compute_form_1040
from calculator.quality_gates import GateResult, StateComputation, run_all_gates
from calculator.state.base_state_calculator import StateResult
from calculator.state.compilers import (
    DEFAULT_COMPILERS,
    CompiledStateReturn,
    StateFormCompiler,
    compile_state_returns,
)
from calculator.state.state_registry import DEFAULT_REGISTRY, StateRegistry
from calculator.tax_year_config import TaxYearConfig
from calculator.trace import TraceRecorder
from models.tax_return import TaxReturn
from models.traced import TracedValue

if TYPE_CHECKING:
    from config.settings import EngineSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputeAllResult:
    """Federal and state results with the merged traced-value map."""

    federal: Form1040Result
    state_results: Tuple[StateResult, ...]
    values: Dict[str, TracedValue]
    # None when the return selects no states
    gate_result: Optional[GateResult]
    executed_schedules: Tuple[str, ...]
    computations: Tuple[StateComputation, ...] = ()
    compiled: Tuple[CompiledStateReturn, ...] = ()

    def state_result(self, state_code: str) -> Optional[StateResult]:
        """First result for ``state_code``, if any."""
        code = state_code.upper()
        for result in self.state_results:
            if result.state_code == code:
                return result
        return None

    @property
    def digest(self) -> str:
        return traced_values_digest(self.values)


def traced_values_digest(values: Mapping[str, TracedValue]) -> str:
    """SHA-256 fingerprint of a traced-value map; equal maps give equal digests."""
    data = {node_id: value.to_dict() for node_id, value in values.items()}
    json_str = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(json_str.encode()).hexdigest()


def compute_all(
    tax_return: TaxReturn,
    *,
    config: Optional[TaxYearConfig] = None,
    registry: Optional[StateRegistry] = None,
    compilers: Optional[Mapping[str, StateFormCompiler]] = None,
    settings: Optional["EngineSettings"] = None,
) -> ComputeAllResult:
    """
    Compute the federal return and every selected state return.

    Args:
        tax_return: The input record
        config: Federal parameters; the 2025 defaults when omitted
        registry: State modules; DEFAULT_REGISTRY when omitted
        compilers: State compilers; DEFAULT_COMPILERS when omitted
        settings: Quality gate tolerances

    Returns:
        ComputeAllResult. States without a registered module are skipped
        (and reported by the cross-state gates).
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    if compilers is None:
        compilers = DEFAULT_COMPILERS

    federal = compute_form_1040(tax_return, config)

    recorder = TraceRecorder()
    recorder.record_all(federal.values.values())

    computations = []
    executed = list(federal.executed_schedules)
    for state_config in tax_return.state_returns:
        module = registry.get_module(state_config.state_code)
        if module is None:
            logger.warning("No state module registered for %s; skipping", state_config.state_code)
            continue

        result = module.compute(tax_return, federal, state_config)
        recorder.merge(module.collect_traced_values(result))
        computations.append(StateComputation(state_config, result))
        executed.append(module.sidebar_label)

    results = tuple(c.result for c in computations)
    compiled: Tuple[CompiledStateReturn, ...] = ()
    gate_result = None
    if tax_return.state_returns:
        compiled = tuple(compile_state_returns(tax_return, results, compilers))
        gate_result = run_all_gates(
            tax_return,
            federal,
            computations,
            registry=registry,
            compilers=compilers,
            compiled=compiled,
            settings=settings,
        )
        logger.info(
            "Computed %d of %d state returns; quality gates %s with %d violations",
            len(results),
            len(tax_return.state_returns),
            "passed" if gate_result.passed else "failed",
            len(gate_result.violations),
        )
    else:
        logger.info("No state returns selected; federal only")

    return ComputeAllResult(
        federal=federal,
        state_results=results,
        values=recorder.snapshot(),
        gate_result=gate_result,
        executed_schedules=tuple(executed),
        computations=tuple(computations),
        compiled=compiled,
    )
