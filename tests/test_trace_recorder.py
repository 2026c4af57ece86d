"""Tests for the evaluation-order recorder."""

import pytest

from calculator.errors import DuplicateNodeError, MissingNodeError
from calculator.trace import TraceRecorder
from models.income import W2Info
from models.traced import TracedValue


@pytest.fixture
def recorder():
    return TraceRecorder()


class TestRecording:
    """Inputs must exist and nodes are produced once."""

    def test_compute_reads_earlier_nodes(self, recorder):
        recorder.compute("a", 100)
        recorder.compute("b", 200)
        total = recorder.compute("c", 300, ["a", "b"], "cite")

        assert total.inputs == ("a", "b")
        assert recorder.amount("c") == 300
        assert list(recorder) == ["a", "b", "c"]
        assert len(recorder) == 3

    def test_missing_input_raises(self, recorder):
        with pytest.raises(MissingNodeError) as exc:
            recorder.compute("c", 1, ["a", "b"])
        assert exc.value.node_id == "c"
        assert exc.value.missing == ("a", "b")
        assert "c" not in recorder

    def test_duplicate_raises(self, recorder):
        recorder.zero("a")
        with pytest.raises(DuplicateNodeError):
            recorder.compute("a", 1)

    def test_get_unknown_raises(self, recorder):
        with pytest.raises(MissingNodeError):
            recorder.get("nope")

    def test_sum_fields(self, recorder):
        w2s = [
            W2Info(id="a", employer_name="A", wages=100),
            W2Info(id="b", employer_name="B", wages=250),
        ]
        for w2 in w2s:
            recorder.record_all(w2.traced_values())

        total = recorder.sum_fields("form1040.line1a", w2s, "wages", "Form 1040, Line 1a")
        assert total.amount == 350
        assert total.inputs == ("w2:a:wages", "w2:b:wages")

    def test_sum_fields_empty(self, recorder):
        assert recorder.sum_fields("x", [], "wages").amount == 0


class TestMerge:
    """Jurisdiction values merged into the primary map."""

    def test_merge_overwrites(self, recorder):
        recorder.compute("a", 1)
        recorder.merge({"a": TracedValue.from_computation(2, "a")})
        assert recorder.amount("a") == 2

    def test_merge_validates_inputs_in_order(self, recorder):
        recorder.compute("form1040.line11", 100)
        recorder.merge({
            "st.agi": TracedValue.from_computation(100, "st.agi", ["form1040.line11"]),
            "st.tax": TracedValue.from_computation(5, "st.tax", ["st.agi"]),
        })
        assert recorder.amount("st.tax") == 5

    def test_merge_missing_input_raises(self, recorder):
        with pytest.raises(MissingNodeError):
            recorder.merge({"st.tax": TracedValue.from_computation(5, "st.tax", ["st.agi"])})

    def test_snapshot_is_a_copy(self, recorder):
        recorder.compute("a", 1)
        snapshot = recorder.snapshot()
        recorder.compute("b", 2)
        assert list(snapshot) == ["a"]
