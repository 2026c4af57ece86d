"""Tests for explaining traced values."""

import pytest

from calculator.errors import CycleDetectedError
from calculator.explain import build_trace, explain_line, topological_sort
from calculator.form_1040 import compute_form_1040
from models.traced import TracedValue


def _values(*specs):
    return {node_id: TracedValue.from_computation(amount, node_id, inputs) for node_id, amount, inputs in specs}


class TestBuildTrace:
    """Explanation trees."""

    def test_tree_follows_inputs(self):
        values = _values(("a", 1, []), ("b", 2, []), ("c", 3, ["a", "b"]))
        trace = build_trace(values, "c", labels={})

        assert trace.node_id == "c"
        assert trace.output == 3
        assert [child.node_id for child in trace.inputs] == ["a", "b"]

    def test_absent_input_is_zero_leaf(self):
        values = _values(("c", 3, ["missing"]))
        trace = build_trace(values, "c", labels={})

        assert trace.inputs[0].node_id == "missing"
        assert trace.inputs[0].output == 0
        assert trace.inputs[0].inputs == ()

    def test_cycle_raises(self):
        values = _values(("a", 1, ["b"]), ("b", 2, ["a"]))
        with pytest.raises(CycleDetectedError):
            build_trace(values, "a")

    def test_document_leaf_labelled_by_citation(self, single_75k):
        values = compute_form_1040(single_75k).values
        trace = build_trace(values, "form1040.line1a")
        assert trace.inputs[0].label == "W-2, Box 1"


class TestExplainLine:
    """Text rendering."""

    def test_taxable_income(self, single_75k):
        values = compute_form_1040(single_75k).values
        text = explain_line(values, "form1040.line15")
        lines = text.splitlines()

        assert lines[0] == "Taxable income: $59,250.00 [Form 1040, Line 15]"
        assert lines[1] == "  |- Adjusted gross income: $75,000.00 [Form 1040, Line 11]"
        assert any("Total deductions: $15,750.00" in line for line in lines)


class TestTopologicalSort:
    """Ordering a traced-value map."""

    def test_inputs_first(self):
        values = _values(("c", 3, ["a", "b"]), ("b", 2, ["a"]), ("a", 1, []))
        assert topological_sort(values) == ["a", "b", "c"]

    def test_ties_keep_map_order(self):
        values = _values(("x", 1, []), ("y", 1, []), ("z", 1, []))
        assert topological_sort(values) == ["x", "y", "z"]

    def test_cycle_raises(self):
        values = _values(("a", 1, ["b"]), ("b", 2, ["a"]), ("c", 3, []))
        with pytest.raises(CycleDetectedError) as exc:
            topological_sort(values)
        assert exc.value.node_ids == ("a", "b")
