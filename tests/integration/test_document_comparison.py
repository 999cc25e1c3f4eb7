#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Integration tests running realistic documents through the public API."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

import docalign
from docalign import AlignerOptions, compare_json_documents, compare_pages, compare_units, compare_xml_documents


@pytest.mark.integration
class TestInvoiceComparison:
    """Tests for the invoice revision scenario."""

    def test_inserted_item_and_new_total(self, invoice_old, invoice_new):
        """Test an inserted line item is added and the total is modified."""
        result = compare_units(invoice_old, invoice_new)
        summary = [(c.type, c.new_value if c.has_new else c.old_value) for c in result.changes]
        assert summary == [
            ("unchanged", "INVOICE"),
            ("unchanged", "Item A $5"),
            ("added", "Item B $5"),
            ("modified", "Total $15"),
        ]
        total = result.changes[3]
        assert total.old_value == "Total $10"
        assert total.content_type == "financial_total"
        assert result.similarity_percentage == 50

    def test_stats_equation(self, invoice_old, invoice_new):
        """Test the record counts add up and match the similarity formula."""
        result = compare_units(invoice_old, invoice_new)
        stats = result.stats
        assert stats.added + stats.removed + stats.modified + stats.unchanged == stats.total
        assert result.similarity_percentage == round(100 * stats.unchanged / stats.total)

    def test_paged_invoice(self, invoice_old, invoice_new):
        """Test the same revision split over two pages."""
        old_pages = [invoice_old[:1], invoice_old[1:]]
        new_pages = [invoice_new[:1], invoice_new[1:]]
        result = compare_pages(old_pages, new_pages)
        assert result.page_summaries[0].similarity_percentage == 100
        assert result.page_summaries[1].changes_count == 2
        assert result.stats.total == 4

    def test_word_level_total(self, invoice_old, invoice_new):
        """Test word changes on the modified total."""
        result = compare_units(invoice_old, invoice_new, AlignerOptions(word_level=True))
        (modified,) = [c for c in result.changes if c.type == "modified"]
        assert [(w.type, w.content) for w in modified.word_changes] == [("delete", "$10"), ("insert", "$15")]


@pytest.mark.integration
class TestStructuredDocuments:
    """Tests for JSON and XML documents."""

    def test_json_order_update(self):
        """Test a realistic order document."""
        old = '{"id": 7, "customer": {"name": "Ada"}, "lines": [{"sku": "A", "qty": 1}], "paid": false}'
        new = '{"id": 7, "customer": {"name": "Ada", "email": "ada@example.com"}, "lines": [{"sku": "A", "qty": 2}], "paid": true}'
        result = compare_json_documents(old, new)
        assert [(c.type, c.position) for c in result.changes] == [
            ("added", "customer.email"),
            ("modified", "lines[0].qty"),
            ("modified", "paid"),
        ]
        assert result.to_dict()["added_count"] == 1

    def test_xml_catalog(self, sample_xml_old, sample_xml_new):
        """Test the catalog revision through the public API."""
        result = compare_xml_documents(sample_xml_old, sample_xml_new)
        added = [c for c in result.changes if c.type == "added"]
        assert [(c.position, c.element_name) for c in added] == [("root.book[2]", "book")]
        assert {c.attribute_name for c in result.attribute_changes} == {"version", "currency"}

    def test_public_exports(self):
        """Test the package exposes its entry points."""
        for name in docalign.__all__:
            assert hasattr(docalign, name)


@pytest.mark.integration
@pytest.mark.property
class TestDocumentProperties:
    """Property-based tests over generated documents."""

    @given(
        st.lists(st.sampled_from(["INVOICE", "Item A $5", "Item B $7", "Total $10", "Thanks"]), max_size=6),
        st.lists(st.sampled_from(["INVOICE", "Item A $5", "Item C $9", "Total $12", "Thanks"]), max_size=6),
    )
    def test_pages_match_units_counts(self, old, new):
        """Property: a single-page comparison equals the unit comparison."""
        units = compare_units(old, new)
        pages = compare_pages([old], [new])
        assert pages.stats == units.stats
        assert pages.similarity_percentage == units.similarity_percentage
