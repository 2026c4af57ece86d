"""
Explain a traced value by walking its inputs.

Works on any node-id -> TracedValue map, primary or merged with
jurisdiction values.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from calculator.decimal_math import format_money
from calculator.errors import CycleDetectedError
from calculator.node_labels import NODE_LABELS
from models.traced import TracedValue


@dataclass(frozen=True)
class ComputeTrace:
    """One node of an explanation tree."""
    node_id: str
    label: str
    output: int
    inputs: Tuple["ComputeTrace", ...] = field(default_factory=tuple)
    citation: Optional[str] = None


def format_dollars(cents: int) -> str:
    return format_money(cents)


def _label_for(node_id: str, value: Optional[TracedValue], labels: Mapping[str, str]) -> str:
    if node_id in labels:
        return labels[node_id]
    if value is not None and not value.is_computed and value.citation:
        return value.citation
    return node_id


def build_trace(
    values: Mapping[str, TracedValue],
    node_id: str,
    labels: Optional[Mapping[str, str]] = None,
) -> ComputeTrace:
    """
    Build the explanation tree rooted at ``node_id``.

    Ids absent from ``values`` become zero leaves so a partial map can
    still be explained.
    """
    labels = NODE_LABELS if labels is None else labels

    def walk(current: str, path: Tuple[str, ...]) -> ComputeTrace:
        if current in path:
            raise CycleDetectedError(path[path.index(current):])
        value = values.get(current)
        label = _label_for(current, value, labels)
        if value is None:
            return ComputeTrace(current, label, 0)
        children = tuple(walk(i, path + (current,)) for i in value.inputs)
        return ComputeTrace(current, label, value.amount, children, value.citation)

    return walk(node_id, ())


def explain_line(
    values: Mapping[str, TracedValue],
    node_id: str,
    labels: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render a node and its inputs as an indented text tree.

    Example:
        Taxable income: $62,900.00 [Form 1040, Line 15]
          |- Adjusted gross income: $75,000.00 [Form 1040, Line 11]
    """
    lines: List[str] = []

    def render(node: ComputeTrace, depth: int) -> None:
        prefix = "" if depth == 0 else "  " * depth + "|- "
        text = f"{prefix}{node.label}: {format_dollars(node.output)}"
        if node.citation:
            text += f" [{node.citation}]"
        lines.append(text)
        for child in node.inputs:
            render(child, depth + 1)

    render(build_trace(values, node_id, labels), 0)
    return "\n".join(lines)


def topological_sort(values: Mapping[str, TracedValue]) -> List[str]:
    """
    Order node ids so every node follows its inputs (Kahn's algorithm).

    Inputs not present in the map are ignored. Ties keep the map's own order.
    """
    indegree: Dict[str, int] = {node_id: 0 for node_id in values}
    dependents: Dict[str, List[str]] = {node_id: [] for node_id in values}
    for node_id, value in values.items():
        for input_id in value.inputs:
            if input_id in values:
                indegree[node_id] += 1
                dependents[input_id].append(node_id)

    queue = deque(node_id for node_id, degree in indegree.items() if degree == 0)
    ordered: List[str] = []
    while queue:
        node_id = queue.popleft()
        ordered.append(node_id)
        for dependent in dependents[node_id]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                queue.append(dependent)

    if len(ordered) != len(indegree):
        raise CycleDetectedError(n for n, degree in indegree.items() if degree > 0)
    return ordered
