"""
Traced values: monetary amounts that carry their own derivation.

Every line on every form is a TracedValue. Leaves point at the document
field they were copied from; everything else names the node that computed
it and the node ids it read. Amounts are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ._decimal_utils import Numeric, whole_cents


@dataclass(frozen=True)
class DocumentSource:
    """Leaf source: a field copied verbatim from an input document."""

    document_type: str
    document_id: str
    field: str

    @property
    def reference(self) -> str:
        return f"{self.document_type}:{self.document_id}:{self.field}"


@dataclass(frozen=True)
class ComputedSource:
    """Derived source: the node that produced the value and what it read."""

    node_id: str
    inputs: Tuple[str, ...] = ()


Source = Union[DocumentSource, ComputedSource]


@dataclass(frozen=True)
class TracedValue:
    """An amount in cents plus the record of how it was obtained."""

    amount: int
    source: Source
    citation: Optional[str] = None

    @classmethod
    def from_document(
        cls,
        amount: Numeric,
        document_type: str,
        document_id: str,
        field: str,
        citation: Optional[str] = None,
    ) -> "TracedValue":
        return cls(
            amount=whole_cents(amount),
            source=DocumentSource(document_type, document_id, field),
            citation=citation,
        )

    @classmethod
    def from_computation(
        cls,
        amount: Numeric,
        node_id: str,
        input_node_ids: Iterable[str] = (),
        citation: Optional[str] = None,
    ) -> "TracedValue":
        return cls(
            amount=whole_cents(amount),
            source=ComputedSource(node_id, tuple(input_node_ids)),
            citation=citation,
        )

    @classmethod
    def zero(cls, node_id: str, citation: Optional[str] = None) -> "TracedValue":
        """Value for a line that does not apply to this return."""
        return cls(amount=0, source=ComputedSource(node_id, ()), citation=citation)

    @property
    def is_computed(self) -> bool:
        return isinstance(self.source, ComputedSource)

    @property
    def node_id(self) -> str:
        if isinstance(self.source, ComputedSource):
            return self.source.node_id
        return self.source.reference

    @property
    def inputs(self) -> Tuple[str, ...]:
        if isinstance(self.source, ComputedSource):
            return self.source.inputs
        return ()

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.source, ComputedSource):
            source: Dict[str, Any] = {
                "kind": "computed",
                "node_id": self.source.node_id,
                "inputs": list(self.source.inputs),
            }
        else:
            source = {
                "kind": "document",
                "document_type": self.source.document_type,
                "document_id": self.source.document_id,
                "field": self.source.field,
            }
        return {"amount": self.amount, "source": source, "citation": self.citation}
