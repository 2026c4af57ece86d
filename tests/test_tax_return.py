"""Tests for the TaxReturn input record."""

import pytest
from pydantic import ValidationError

from helpers import create_test_return, make_w2


class TestDocumentIds:

    def test_duplicate_w2_ids_rejected(self):
        w2s = [make_w2(50000.0, id="w2-1"), make_w2(25000.0, id="w2-1")]

        with pytest.raises(ValidationError, match="w2:w2-1"):
            create_test_return(w2s=w2s)

    def test_same_id_across_document_types(self):
        tax_return = create_test_return(w2s=[make_w2(50000.0, id="int-1")], interest=100.0)

        refs = [v.node_id for v in tax_return.document_values()]
        assert len(refs) == len(set(refs))

    def test_distinct_ids(self):
        w2s = [make_w2(50000.0, id="a"), make_w2(25000.0, id="b")]
        assert len(create_test_return(w2s=w2s).w2s) == 2
