from .tax_year_config import TaxYearConfig
from .errors import CycleDetectedError, DuplicateNodeError, MissingNodeError, TaxComputationError
from .trace import TraceRecorder
from .validation import TaxReturnValidator, ValidationIssue
from .form_1040 import Form1040Result, compute_form_1040
from .explain import ComputeTrace, build_trace, explain_line, topological_sort
from .quality_gates import GateResult, GateViolation, run_all_gates
from .orchestrator import ComputeAllResult, compute_all, traced_values_digest
from .state import (
    DEFAULT_COMPILERS,
    DEFAULT_REGISTRY,
    NO_INCOME_TAX_STATES,
    StateModule,
    StateRegistry,
    StateResult,
    StateTaxConfig,
)

__all__ = [
    "TaxYearConfig",
    "TaxComputationError",
    "MissingNodeError",
    "DuplicateNodeError",
    "CycleDetectedError",
    "TraceRecorder",
    "TaxReturnValidator",
    "ValidationIssue",
    "Form1040Result",
    "compute_form_1040",
    "ComputeTrace",
    "build_trace",
    "explain_line",
    "topological_sort",
    "GateResult",
    "GateViolation",
    "run_all_gates",
    "ComputeAllResult",
    "compute_all",
    "traced_values_digest",
    "StateTaxConfig",
    "StateModule",
    "StateResult",
    "StateRegistry",
    "DEFAULT_REGISTRY",
    "DEFAULT_COMPILERS",
    "NO_INCOME_TAX_STATES",
]
