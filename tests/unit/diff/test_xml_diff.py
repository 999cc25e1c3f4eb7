#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for XML parsing and the recursive XML differ."""

import pytest

from docalign.diff.models import XmlElement
from docalign.diff.xml_diff import compare_xml, diff_xml, parse_xml, validate_xml
from docalign.exceptions import InvalidInputShapeError, ParsingError
from docalign.options import XmlDiffOptions


def _summary(changes):
    return [(c.type, c.position) for c in changes]


@pytest.mark.unit
class TestParseXml:
    """Tests for parse_xml function."""

    def test_paths_and_text(self):
        """Test the parsed tree carries paths, attributes and stripped text."""
        root = parse_xml('<order id="7"><item sku="A">Widget</item><item sku="B"> Gadget </item></order>')
        assert root.name == "order"
        assert root.path == "root"
        assert root.attributes == {"id": "7"}
        assert [child.path for child in root.children] == ["root.item[0]", "root.item[1]"]
        assert [child.text for child in root.children] == ["Widget", "Gadget"]

    def test_direct_text_only(self):
        """Test an element's text excludes its children's text."""
        root = parse_xml("<p>Hello <b>bold</b> world</p>")
        assert root.text == "Hello world"
        assert root.children[0].text == "bold"

    def test_namespaces_use_clark_notation(self):
        """Test namespaced tags keep their URI."""
        root = parse_xml('<r xmlns:x="urn:x"><x:a/></r>')
        assert root.children[0].name == "{urn:x}a"

    def test_comments_dropped(self):
        """Test comments do not become elements."""
        root = parse_xml("<r><!-- note --><a/></r>")
        assert [child.name for child in root.children] == ["a"]

    def test_bytes_input(self):
        """Test parsing from bytes with an encoding declaration."""
        root = parse_xml('<?xml version="1.0" encoding="UTF-8"?><r>café</r>'.encode("utf-8"))
        assert root.text == "café"

    def test_malformed(self):
        """Test malformed XML raises ParsingError."""
        with pytest.raises(ParsingError) as exc_info:
            parse_xml("<r><a></r>")
        assert exc_info.value.parsing_stage == "xml_parsing"

    def test_empty(self):
        """Test empty input raises ParsingError."""
        with pytest.raises(ParsingError):
            parse_xml("  ")

    def test_entity_expansion_rejected(self):
        """Test entity declarations are refused."""
        document = '<?xml version="1.0"?><!DOCTYPE r [<!ENTITY e "boom">]><r>&e;</r>'
        with pytest.raises(ParsingError):
            parse_xml(document)

    def test_count(self):
        """Test element counting includes the root."""
        assert parse_xml("<r><a><b/></a><c/></r>").count() == 4


@pytest.mark.unit
class TestDiffXml:
    """Tests for diff_xml function."""

    def test_identical(self):
        """Test identical trees produce no records."""
        tree = parse_xml('<r a="1"><x>t</x></r>')
        assert diff_xml(tree, tree) == []

    def test_attribute_change(self):
        """Test a changed attribute value gives one attribute_changed record."""
        (change,) = diff_xml(XmlElement("a", attributes={"x": "1"}), XmlElement("a", attributes={"x": "2"}))
        assert change.type == "attribute_changed"
        assert change.attribute_name == "x"
        assert change.old_value == "1"
        assert change.new_value == "2"
        assert change.position == "root@x"

    def test_attribute_added_and_removed(self):
        """Test missing attributes are shown as '(undefined)'."""
        changes = diff_xml(XmlElement("a", attributes={"x": "1"}), XmlElement("a", attributes={"y": "2"}))
        assert [(c.position, c.old_value, c.new_value) for c in changes] == [
            ("root@x", "1", "(undefined)"),
            ("root@y", "(undefined)", "2"),
        ]

    def test_empty_attribute_value_is_kept(self):
        """Test an empty attribute value is not replaced by the sentinel."""
        (change,) = diff_xml(XmlElement("a", attributes={"x": ""}), XmlElement("a", attributes={"x": "1"}))
        assert change.old_value == ""

    def test_text_change(self):
        """Test a text change is reported at path.text with '(empty)' for no text."""
        (change,) = diff_xml(XmlElement("a", text=""), XmlElement("a", text="hi"))
        assert (change.type, change.position) == ("modified", "root.text")
        assert (change.old_value, change.new_value) == ("(empty)", "hi")

    def test_name_change_continues(self):
        """Test a renamed element is still compared below the name."""
        old = XmlElement("a", attributes={"k": "1"}, text="x")
        new = XmlElement("b", attributes={"k": "2"}, text="y")
        changes = diff_xml(old, new)
        assert _summary(changes) == [("modified", "root"), ("modified", "root.text"), ("attribute_changed", "root@k")]
        assert (changes[0].old_value, changes[0].new_value) == ("a", "b")

    def test_child_added(self):
        """Test an extra trailing child is added with its name."""
        old = parse_xml("<r><a/></r>")
        new = parse_xml("<r><a/><b/></r>")
        (change,) = diff_xml(old, new)
        assert (change.type, change.position, change.element_name) == ("added", "root.b[1]", "b")
        assert change.new_value == "b"

    def test_child_removed(self):
        """Test a missing trailing child is removed."""
        (change,) = diff_xml(parse_xml("<r><a/><b/></r>"), parse_xml("<r><a/></r>"))
        assert (change.type, change.position) == ("removed", "root.b[1]")

    def test_positional_children_cascade(self):
        """Test a child inserted at the front shifts every later comparison."""
        old = parse_xml("<r><a>1</a><b>2</b></r>")
        new = parse_xml("<r><x>0</x><a>1</a><b>2</b></r>")
        changes = diff_xml(old, new)
        assert ("added", "root.b[2]") in _summary(changes)
        assert len(changes) > 1

    def test_missing_sides(self):
        """Test one-sided comparisons and the empty comparison."""
        element = XmlElement("a")
        assert _summary(diff_xml(None, element, "p")) == [("added", "p")]
        assert _summary(diff_xml(element, None, "p")) == [("removed", "p")]
        assert diff_xml(None, None) == []


@pytest.mark.unit
class TestAlignedChildren:
    """Tests for child_strategy='align'."""

    def test_inserted_child_does_not_cascade(self):
        """Test aligned children report only the inserted element."""
        old = parse_xml("<r><a>1</a><b>2</b></r>")
        new = parse_xml("<r><x>0</x><a>1</a><b>2</b></r>")
        changes = diff_xml(old, new, options=XmlDiffOptions(child_strategy="align"))
        assert _summary(changes) == [("added", "root.x[0]")]

    def test_matched_children_are_recursed(self):
        """Test aligned pairs are still compared in depth."""
        old = parse_xml('<r><item id="1">Widget</item></r>')
        new = parse_xml('<r><note/><item id="1">Widgets</item></r>')
        changes = diff_xml(old, new, options=XmlDiffOptions(child_strategy="align"))
        assert _summary(changes) == [("added", "root.note[0]"), ("modified", "root.item[0].text")]


@pytest.mark.unit
class TestCompareXml:
    """Tests for compare_xml function."""

    def test_catalog(self, sample_xml_old, sample_xml_new):
        """Test separating element and attribute changes in a realistic document."""
        result = compare_xml(parse_xml(sample_xml_old), parse_xml(sample_xml_new))
        assert _summary(result.attribute_changes) == [
            ("attribute_changed", "root@version"),
            ("attribute_changed", "root.book[0].price[1]@currency"),
        ]
        assert _summary(result.element_changes) == [
            ("modified", "root.book[0].price[1].text"),
            ("added", "root.book[2]"),
        ]
        assert result.total_units == 8
        assert result.matches_found == 4

    def test_rejects_non_elements(self):
        """Test trees must be made of XmlElement nodes."""
        with pytest.raises(InvalidInputShapeError):
            compare_xml({"name": "a"}, XmlElement("a"))

    def test_validate_nested(self):
        """Test validation reaches children."""
        bad = XmlElement("a", children=(XmlElement("b", text=None),))
        with pytest.raises(InvalidInputShapeError):
            validate_xml(bad, "new")
