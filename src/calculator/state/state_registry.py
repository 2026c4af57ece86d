"""State module registry for dynamic lookup."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from calculator.state.base_state_calculator import StateModule
from calculator.state.california import CaliforniaModule
from calculator.state.illinois import IllinoisModule
from calculator.state.pennsylvania import PennsylvaniaModule


# States without income tax
NO_INCOME_TAX_STATES = frozenset({
    "AK",  # Alaska
    "FL",  # Florida
    "NV",  # Nevada
    "SD",  # South Dakota
    "TX",  # Texas
    "WA",  # Washington
    "WY",  # Wyoming
    "TN",  # Tennessee (no tax on wages, limited tax on interest/dividends being phased out)
    "NH",  # New Hampshire (no tax on wages, limited tax on interest/dividends being phased out)
})


class StateRegistry:
    """
    Read-only registry of state modules.

    Built once from ``(state_code, module)`` entries. The registered code is
    kept alongside the module so a module whose own ``state_code`` disagrees
    with its key, or a code registered twice, is still visible to the
    registry quality gates instead of failing at import.
    """

    def __init__(self, entries: Iterable[Tuple[str, StateModule]]):
        self._entries: Tuple[Tuple[str, StateModule], ...] = tuple(
            (code.upper(), module) for code, module in entries
        )
        lookup = {}
        for code, module in self._entries:
            # First registration wins
            lookup.setdefault(code, module)
        self._modules: Mapping[str, StateModule] = MappingProxyType(lookup)

    @classmethod
    def from_modules(cls, modules: Iterable[StateModule]) -> "StateRegistry":
        """Register each module under its own state code."""
        return cls((module.state_code, module) for module in modules)

    @property
    def entries(self) -> Tuple[Tuple[str, StateModule], ...]:
        """Every registration in order, duplicates included."""
        return self._entries

    def get_module(self, state_code: str) -> Optional[StateModule]:
        """
        Get the module for a state.

        Args:
            state_code: Two-letter state code, any case

        Returns:
            The registered module or None if the state is not supported
        """
        return self._modules.get(state_code.upper())

    def is_supported(self, state_code: str) -> bool:
        """
        Check if a state is supported.

        No income tax states are "supported" (they just have nothing to compute).
        """
        state_upper = state_code.upper()
        return state_upper in NO_INCOME_TAX_STATES or state_upper in self._modules

    def supported_states(self) -> List[str]:
        """Sorted list of state codes with a registered module."""
        return sorted(self._modules)

    def items(self) -> List[Tuple[str, StateModule]]:
        return sorted(self._modules.items())

    def __contains__(self, state_code: str) -> bool:
        return state_code.upper() in self._modules

    def __len__(self) -> int:
        return len(self._modules)


DEFAULT_REGISTRY = StateRegistry.from_modules((
    IllinoisModule(),
    CaliforniaModule(),
    PennsylvaniaModule(),
))
