#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the shared data model."""

import pytest

from docalign.diff.models import (
    MISSING,
    AlignmentResult,
    AlignmentStats,
    ChangeRecord,
    LineRecord,
    PagedAlignmentResult,
    PageSummary,
    TextUnit,
    TreeDiffResult,
    UnitMetadata,
    WordChange,
    XmlElement,
    coerce_units,
    percentage,
)
from docalign.exceptions import InvalidInputShapeError


@pytest.mark.unit
class TestChangeRecord:
    """Tests for ChangeRecord invariants and serialization."""

    def test_added_needs_only_new(self):
        """Test added records reject an old value."""
        with pytest.raises(ValueError):
            ChangeRecord("added", 0, old_value="x", new_value="y")
        with pytest.raises(ValueError):
            ChangeRecord("added", 0)

    def test_removed_needs_only_old(self):
        """Test removed records reject a new value."""
        with pytest.raises(ValueError):
            ChangeRecord("removed", 0, old_value="x", new_value="y")

    @pytest.mark.parametrize("change_type", ["modified", "unchanged", "attribute_changed"])
    def test_two_sided_records(self, change_type):
        """Test two-sided records need both values."""
        with pytest.raises(ValueError):
            ChangeRecord(change_type, 0, old_value="x")

    def test_none_is_a_value(self):
        """Test a JSON null is distinct from a missing side."""
        record = ChangeRecord("removed", "a", old_value=None)
        assert record.has_old
        assert not record.has_new
        assert record.new_value is MISSING

    def test_to_dict_omits_missing(self):
        """Test serialization leaves out absent values and empty fields."""
        record = ChangeRecord("added", 2, new_value="x", content_type="content")
        assert record.to_dict() == {"type": "added", "position": 2, "new_value": "x", "content_type": "content"}

    def test_to_dict_with_word_changes(self):
        """Test word changes and metadata are serialized."""
        record = ChangeRecord(
            "modified",
            0,
            old_value="a",
            new_value="b",
            confidence=0.5,
            similarity_percentage=50,
            word_changes=(WordChange("delete", "a", 0),),
            metadata={"old_index": 0},
        )
        data = record.to_dict()
        assert data["word_changes"] == [{"type": "delete", "content": "a", "position": 0}]
        assert data["metadata"] == {"old_index": 0}
        assert data["similarity_percentage"] == 50

    def test_is_change(self):
        """Test only unchanged records are not changes."""
        assert not ChangeRecord("unchanged", 0, old_value="a", new_value="a").is_change
        assert ChangeRecord("added", 0, new_value="a").is_change

    def test_metadata_not_compared(self):
        """Test equality ignores metadata."""
        a = ChangeRecord("added", 0, new_value="a", metadata={"new_index": 0})
        b = ChangeRecord("added", 0, new_value="a", metadata={"new_index": 5})
        assert a == b

    def test_missing_is_singleton_and_falsy(self):
        """Test the missing marker."""
        assert not MISSING
        assert repr(MISSING) == "MISSING"
        assert type(MISSING)() is MISSING


@pytest.mark.unit
class TestTextUnit:
    """Tests for TextUnit and unit coercion."""

    def test_rejects_non_string(self):
        """Test text must be a string."""
        with pytest.raises(InvalidInputShapeError):
            TextUnit(42)

    def test_coerce_string(self):
        """Test plain strings become units without metadata."""
        assert TextUnit.coerce("a") == TextUnit("a")

    def test_coerce_camel_case_metadata(self):
        """Test camelCase metadata keys are accepted."""
        unit = TextUnit.coerce({"text": "a", "metadata": {"page": 2, "paragraphIndex": 3, "yPosition": 1.5}})
        assert unit.metadata == UnitMetadata(page=2, paragraph_index=3, y_position=1.5)

    def test_coerce_bad_metadata(self):
        """Test metadata must be a mapping."""
        with pytest.raises(InvalidInputShapeError):
            TextUnit.coerce({"text": "a", "metadata": [1]}, side="old", index=0)

    def test_coerce_error_location(self):
        """Test the error names the side and index."""
        with pytest.raises(InvalidInputShapeError, match=r"new\[2\]"):
            TextUnit.coerce(None, side="new", index=2)

    def test_coerce_units_rejects_non_iterable(self):
        """Test a non-iterable input is rejected."""
        with pytest.raises(InvalidInputShapeError) as exc_info:
            coerce_units(5, "old")
        assert isinstance(exc_info.value.original_error, TypeError)

    def test_coerce_units_rejects_mapping(self):
        """Test a single mapping is not taken as a sequence."""
        with pytest.raises(InvalidInputShapeError):
            coerce_units({"text": "a"}, "old")

    def test_metadata_to_dict(self):
        """Test only populated metadata fields are serialized."""
        assert UnitMetadata(page=1).to_dict() == {"page": 1}


@pytest.mark.unit
class TestResults:
    """Tests for result containers and metrics."""

    def test_percentage(self):
        """Test the similarity formula and the empty case."""
        assert percentage(4, 2) == 50
        assert percentage(3, 1) == 67
        assert percentage(0, 0) == 100

    def test_stats_from_changes(self):
        """Test counting records by type."""
        changes = [
            ChangeRecord("added", 0, new_value="a"),
            ChangeRecord("unchanged", 1, old_value="b", new_value="b"),
            ChangeRecord("removed", 2, old_value="c"),
        ]
        stats = AlignmentStats.from_changes(changes)
        assert stats.to_dict() == {"total": 3, "added": 1, "removed": 1, "modified": 0, "unchanged": 1}
        assert stats.changed == 2

    def test_alignment_result_confidence(self):
        """Test one-sided records count as full confidence in the mean."""
        changes = [
            ChangeRecord("added", 0, new_value="a"),
            ChangeRecord("modified", 1, old_value="b", new_value="c", confidence=0.5),
        ]
        result = AlignmentResult.from_changes(changes)
        assert result.confidence_score == pytest.approx(0.75)
        assert result.similarity_percentage == 0
        assert result.to_dict()["differences_found"] == 2

    def test_paged_result_to_dict(self):
        """Test page summaries are serialized."""
        result = PagedAlignmentResult.from_changes([])
        result.page_summaries = [PageSummary(1, 100, 0, 0)]
        assert result.to_dict()["page_summaries"] == [
            {"page_number": 1, "similarity_percentage": 100, "changes_count": 0, "units_compared": 0}
        ]

    def test_tree_result_empty(self):
        """Test an empty tree comparison is fully similar."""
        result = TreeDiffResult(changes=[], total_units=0)
        assert result.similarity_percentage == 100
        assert result.to_dict()["attribute_changes_count"] == 0

    def test_line_record_to_dict(self):
        """Test old_text only appears on modified rows."""
        assert "old_text" not in LineRecord(1, "added", "x", None, 1).to_dict()
        assert LineRecord(1, "modified", "x", 1, 1, "y").to_dict()["old_text"] == "y"

    def test_xml_element_children_tuple(self):
        """Test children are stored as a tuple."""
        element = XmlElement("a", children=[XmlElement("b")])
        assert isinstance(element.children, tuple)
        assert element.to_dict()["children"][0]["name"] == "b"
