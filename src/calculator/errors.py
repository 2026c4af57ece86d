"""
Structural errors raised by the computation core.

These indicate a defect in the derivation graph itself (a node read a value
nobody produced, or a node was produced twice). They are never downgraded
to warnings; domain non-applicability is expressed with zero values instead.
"""

from typing import Iterable


class TaxComputationError(Exception):
    """Base class for computation-core failures."""


class MissingNodeError(TaxComputationError):
    """A node read an input that was never computed in this run."""

    def __init__(self, node_id: str, missing: Iterable[str]):
        self.node_id = node_id
        self.missing = tuple(missing)
        super().__init__(
            f"Node '{node_id}' reads inputs not computed in this run: {', '.join(self.missing)}"
        )


class DuplicateNodeError(TaxComputationError):
    """A primary node was recorded twice."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' was already recorded")


class CycleDetectedError(TaxComputationError):
    """A cycle was found while ordering a traced-value map."""

    def __init__(self, node_ids: Iterable[str]):
        self.node_ids = tuple(sorted(node_ids))
        super().__init__(f"Cycle detected among nodes: {', '.join(self.node_ids)}")
