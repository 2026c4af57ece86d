"""
State return compilers.

A compiler turns a computed StateResult into a filing artifact: the
document bytes plus the list of forms it contains. The shipped
compilers render a JSON summary built from the module's review layout;
the artifact shape is what the compiler-output quality gates check.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple, TYPE_CHECKING

from calculator.decimal_math import format_money
from calculator.state.base_state_calculator import StateModule, StateResult
from calculator.state.state_registry import DEFAULT_REGISTRY

if TYPE_CHECKING:
    from models.tax_return import TaxReturn


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledForm:
    form_id: str
    sequence_number: str  # Attachment sequence number printed on the form
    page_count: int


@dataclass(frozen=True)
class CompiledStateReturn:
    state_code: str
    document: bytes
    forms: Tuple[CompiledForm, ...]


class StateFormCompiler(ABC):
    """Produces the filing artifact for one state."""

    state_code: str = ""

    @abstractmethod
    def compile(self, tax_return: "TaxReturn", result: StateResult) -> CompiledStateReturn:
        """Render ``result`` for ``tax_return``."""


class SummaryFormCompiler(StateFormCompiler):
    """JSON summary of a state return, laid out like the module's review screen."""

    def __init__(self, module: StateModule, sequence_number: str = "00"):
        self.module = module
        self.state_code = module.state_code
        self.sequence_number = sequence_number

    def render(self, tax_return: "TaxReturn", result: StateResult) -> Dict[str, object]:
        values = self.module.collect_traced_values(result)

        def amount(node_id: str) -> int:
            value = values.get(node_id)
            return value.amount if value is not None else 0

        sections = []
        for section in self.module.review_layout:
            sections.append({
                "title": section.title,
                "items": [
                    {
                        "label": item.label,
                        "node_id": item.node_id,
                        "amount": amount(item.node_id),
                        "display": format_money(amount(item.node_id)),
                    }
                    for item in section.items
                ],
            })

        # Only the result line matching the outcome is printed
        if result.overpaid > 0:
            kind = "refund"
        elif result.amount_owed > 0:
            kind = "owed"
        else:
            kind = "zero"
        result_lines = [
            {"label": line.label, "node_id": line.node_id, "amount": amount(line.node_id)}
            for line in self.module.review_result_lines
            if line.kind == kind
        ]

        return {
            "state_code": result.state_code,
            "form_label": result.form_label,
            "tax_year": tax_return.tax_year,
            "residency_type": result.residency_type.value,
            "apportionment_ratio": result.apportionment_ratio,
            "sections": sections,
            "result_lines": result_lines,
        }

    def compile(self, tax_return: "TaxReturn", result: StateResult) -> CompiledStateReturn:
        summary = self.render(tax_return, result)
        document = json.dumps(summary, sort_keys=True, indent=2).encode("utf-8")
        form = CompiledForm(
            form_id=self.module.sidebar_label,
            sequence_number=self.sequence_number,
            page_count=max(1, len(self.module.review_layout)),
        )
        return CompiledStateReturn(state_code=self.state_code, document=document, forms=(form,))


DEFAULT_COMPILERS: Mapping[str, StateFormCompiler] = MappingProxyType({
    code: SummaryFormCompiler(module) for code, module in DEFAULT_REGISTRY.items()
})


def compile_state_returns(
    tax_return: "TaxReturn",
    results: Iterable[StateResult],
    compilers: Mapping[str, StateFormCompiler] = DEFAULT_COMPILERS,
) -> List[CompiledStateReturn]:
    """Compile every result that has a registered compiler, in result order."""
    compiled = []
    for result in results:
        compiler = compilers.get(result.state_code)
        if compiler is None:
            logger.debug("No compiler registered for %s; skipping", result.state_code)
            continue
        compiled.append(compiler.compile(tax_return, result))
    return compiled
