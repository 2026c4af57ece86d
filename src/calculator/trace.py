"""
Evaluation-order recorder for traced values.

The primary graph records every node here as it is evaluated. Recording
enforces the two structural rules of the graph: a node may only read nodes
recorded before it, and a primary node is produced exactly once.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence

from calculator.errors import DuplicateNodeError, MissingNodeError
from models.income import SourceDocument
from models.traced import TracedValue


class TraceRecorder:
    """Ordered map of node id to TracedValue for one computation."""

    def __init__(self) -> None:
        self._values: Dict[str, TracedValue] = {}

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def _check_inputs(self, value: TracedValue) -> None:
        missing = [i for i in value.inputs if i not in self._values]
        if missing:
            raise MissingNodeError(value.node_id, missing)

    def record(self, value: TracedValue) -> TracedValue:
        self._check_inputs(value)
        if value.node_id in self._values:
            raise DuplicateNodeError(value.node_id)
        self._values[value.node_id] = value
        return value

    def record_all(self, values: Iterable[TracedValue]) -> None:
        for value in values:
            self.record(value)

    def compute(
        self,
        node_id: str,
        amount,
        inputs: Iterable[str] = (),
        citation: Optional[str] = None,
    ) -> TracedValue:
        """Build a computed value and record it."""
        return self.record(TracedValue.from_computation(amount, node_id, inputs, citation))

    def zero(self, node_id: str, citation: Optional[str] = None) -> TracedValue:
        return self.record(TracedValue.zero(node_id, citation))

    def sum_fields(
        self,
        node_id: str,
        documents: Sequence[SourceDocument],
        field: str,
        citation: Optional[str] = None,
    ) -> TracedValue:
        """Record the total of one document field across documents."""
        return self.compute(
            node_id,
            sum(getattr(d, field) for d in documents),
            [d.ref(field) for d in documents],
            citation,
        )

    def merge(self, values: Mapping[str, TracedValue]) -> None:
        """
        Merge a jurisdiction's values into the map.

        Later values for an existing id replace earlier ones; inputs must
        still resolve to values already present.
        """
        for value in values.values():
            self._check_inputs(value)
            self._values[value.node_id] = value

    def get(self, node_id: str) -> TracedValue:
        try:
            return self._values[node_id]
        except KeyError:
            raise MissingNodeError(node_id, [node_id]) from None

    def amount(self, node_id: str) -> int:
        return self.get(node_id).amount

    def snapshot(self) -> Dict[str, TracedValue]:
        return dict(self._values)
