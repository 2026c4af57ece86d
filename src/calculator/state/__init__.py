"""State tax calculation module."""

from calculator.state.state_tax_config import StateTaxConfig
from calculator.state.base_state_calculator import (
    ReviewItem,
    ReviewResultLine,
    ReviewSection,
    StateModule,
    StateResult,
)
from calculator.state.illinois import IllinoisModule
from calculator.state.california import CaliforniaModule
from calculator.state.pennsylvania import PennsylvaniaModule
from calculator.state.state_registry import DEFAULT_REGISTRY, NO_INCOME_TAX_STATES, StateRegistry
from calculator.state.compilers import (
    DEFAULT_COMPILERS,
    CompiledForm,
    CompiledStateReturn,
    StateFormCompiler,
    SummaryFormCompiler,
    compile_state_returns,
)

__all__ = [
    "StateTaxConfig",
    "ReviewItem",
    "ReviewResultLine",
    "ReviewSection",
    "StateModule",
    "StateResult",
    "IllinoisModule",
    "CaliforniaModule",
    "PennsylvaniaModule",
    "StateRegistry",
    "DEFAULT_REGISTRY",
    "NO_INCOME_TAX_STATES",
    "StateFormCompiler",
    "SummaryFormCompiler",
    "CompiledForm",
    "CompiledStateReturn",
    "DEFAULT_COMPILERS",
    "compile_state_returns",
]
