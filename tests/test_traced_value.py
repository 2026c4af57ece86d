"""Tests for traced values and document leaves."""

from decimal import Decimal

import pytest

from models.income import W2Info
from models.traced import ComputedSource, DocumentSource, TracedValue


class TestTracedValue:
    """Construction and inspection of traced values."""

    def test_from_document_is_leaf(self):
        """Document values have no inputs and are keyed by their reference."""
        value = TracedValue.from_document(7500000, "w2", "w2-1", "wages", "W-2, Box 1")

        assert value.amount == 7500000
        assert not value.is_computed
        assert value.inputs == ()
        assert value.node_id == "w2:w2-1:wages"
        assert isinstance(value.source, DocumentSource)
        assert value.source.reference == "w2:w2-1:wages"

    def test_from_computation_keeps_inputs_in_order(self):
        """Computed values record the node that produced them and what it read."""
        value = TracedValue.from_computation(100, "form1040.line9", ["form1040.line1z", "form1040.line2b"])

        assert value.is_computed
        assert value.node_id == "form1040.line9"
        assert value.inputs == ("form1040.line1z", "form1040.line2b")
        assert isinstance(value.source, ComputedSource)

    def test_zero(self):
        """A non-applicable line is a computed zero without inputs."""
        value = TracedValue.zero("form1040.line20", "Form 1040, Line 20")

        assert value.amount == 0
        assert value.inputs == ()
        assert value.citation == "Form 1040, Line 20"

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("100.5"), 101),
        (Decimal("100.4"), 100),
        (Decimal("-100.5"), -101),
        (12.5, 13),
    ])
    def test_amounts_rounded_half_up(self, amount, expected):
        """Fractional cents are rounded half away from zero."""
        assert TracedValue.from_computation(amount, "n").amount == expected

    def test_is_immutable(self):
        """Traced values cannot be modified after creation."""
        value = TracedValue.zero("n")
        with pytest.raises(Exception):
            value.amount = 5

    def test_to_dict_document(self):
        """Document values serialise their document coordinates."""
        data = TracedValue.from_document(10, "1099int", "int-1", "interest_income").to_dict()

        assert data == {
            "amount": 10,
            "source": {
                "kind": "document",
                "document_type": "1099int",
                "document_id": "int-1",
                "field": "interest_income",
            },
            "citation": None,
        }

    def test_to_dict_computed(self):
        """Computed values serialise node id and inputs."""
        data = TracedValue.from_computation(10, "a", ["b"], "cite").to_dict()

        assert data["source"] == {"kind": "computed", "node_id": "a", "inputs": ["b"]}
        assert data["citation"] == "cite"


class TestDocumentLeaves:
    """Documents expose their traced fields as leaves."""

    def test_w2_traced_values(self):
        """Every traced W-2 field becomes a leaf, in declared order."""
        w2 = W2Info(id="w2-1", employer_name="Acme", wages=100, state_code="il", state_tax_withheld=5)
        values = list(w2.traced_values())

        assert [v.node_id for v in values] == [f"w2:w2-1:{f}" for f in W2Info.TRACED_FIELDS]
        assert values[0].citation == "W-2, Box 1"
        assert w2.state_code == "IL"

    def test_ref(self):
        """ref() names the leaf node of a field."""
        w2 = W2Info(id="abc", employer_name="Acme", wages=0)
        assert w2.ref("wages") == "w2:abc:wages"
