#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/xml_diff.py
"""Recursive structural diff of parsed XML element trees.

Element paths start at ``"root"`` and append ``.name[i]`` for each child, so a
record's position matches the ``path`` that :func:`parse_xml` assigns to the
element. Text changes are reported at ``path.text`` and attribute changes at
``path@name``.

Unlike the JSON differ, a tag-name mismatch does not stop the comparison: the
text, attributes and children of the two elements are still compared.
"""

from __future__ import annotations

from typing import Any

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from docalign.constants import EMPTY_TEXT, ROOT_PATH_LABEL, UNDEFINED_ATTRIBUTE
from docalign.diff.aligner import SequenceAligner
from docalign.diff.models import ChangeRecord, TextUnit, TreeDiffResult, XmlElement
from docalign.exceptions import InvalidInputShapeError, ParsingError
from docalign.options import XmlDiffOptions


def _child_path(path: str, name: str, index: int) -> str:
    return f"{path}.{name}[{index}]" if path else f"{name}[{index}]"


def _direct_text(element: Any) -> str:
    """Join the element's own text nodes, ignoring text inside children."""
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return " ".join(part.strip() for part in parts if part.strip())


def _convert(element: Any, path: str) -> XmlElement:
    children = [_convert(child, _child_path(path, child.tag, index)) for index, child in enumerate(element)]
    return XmlElement(
        name=element.tag,
        path=path,
        attributes=dict(element.attrib),
        text=_direct_text(element),
        children=tuple(children),
    )


def parse_xml(text: str | bytes) -> XmlElement:
    """Parse an XML document into an :class:`XmlElement` tree.

    Parsing goes through ``defusedxml`` so entity expansion and external
    references are rejected. Comments and processing instructions are
    dropped; namespaced tags keep ElementTree's ``{uri}local`` form.

    Parameters
    ----------
    text : str or bytes
        The XML document

    Returns
    -------
    XmlElement
        Root element with path ``"root"``

    Raises
    ------
    ParsingError
        If the document is empty, malformed or uses forbidden XML features.

    """
    if not text.strip():
        raise ParsingError("XML document is empty", parsing_stage="xml_parsing")
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ParsingError(f"Invalid XML format: {e}", parsing_stage="xml_parsing", original_error=e) from e
    except DefusedXmlException as e:
        raise ParsingError(
            f"XML document uses a forbidden construct: {e!r}",
            parsing_stage="xml_parsing",
            original_error=e,
        ) from e
    return _convert(root, ROOT_PATH_LABEL)


def validate_xml(element: Any, side: str = "input") -> None:
    """Check that ``element`` is an :class:`XmlElement` tree.

    Raises
    ------
    InvalidInputShapeError
        If the element or any descendant is not an ``XmlElement`` or has a
        non-string name or text.

    """
    if not isinstance(element, XmlElement):
        raise InvalidInputShapeError(
            f"{side} XML tree must contain XmlElement nodes, got {type(element).__name__}",
            side=side,
            parameter_value=element,
        )
    if not isinstance(element.name, str) or not isinstance(element.text, str):
        raise InvalidInputShapeError(
            f"{side} XML element at '{element.path or ROOT_PATH_LABEL}' must have string name and text",
            side=side,
            parameter_value=element,
        )
    for child in element.children:
        validate_xml(child, side)


def diff_xml(
    a: XmlElement | None,
    b: XmlElement | None,
    path: str = ROOT_PATH_LABEL,
    options: XmlDiffOptions | None = None,
) -> list[ChangeRecord]:
    """Return the element and attribute changes between two XML subtrees.

    Parameters
    ----------
    a, b : XmlElement or None
        Old and new elements; ``None`` marks an element missing on that side
    path : str, default "root"
        Path of the elements being compared
    options : XmlDiffOptions, optional
        Child comparison strategy

    Returns
    -------
    list of ChangeRecord
        Records in document order; ``attribute_changed`` records can be
        separated out by type

    Examples
    --------
        >>> old = XmlElement("a", attributes={"x": "1"})
        >>> new = XmlElement("a", attributes={"x": "2"})
        >>> [(c.type, c.position, c.attribute_name) for c in diff_xml(old, new)]
        [('attribute_changed', 'root@x', 'x')]

    """
    opts = options or XmlDiffOptions()

    if a is None and b is None:
        return []
    if a is None:
        return [ChangeRecord("added", path, new_value=b.name, element_name=b.name)]
    if b is None:
        return [ChangeRecord("removed", path, old_value=a.name, element_name=a.name)]

    changes: list[ChangeRecord] = []

    if a.name != b.name:
        changes.append(ChangeRecord("modified", path, old_value=a.name, new_value=b.name, element_name=a.name))

    if a.text != b.text:
        changes.append(
            ChangeRecord(
                "modified",
                f"{path}.text",
                old_value=a.text or EMPTY_TEXT,
                new_value=b.text or EMPTY_TEXT,
                element_name=a.name,
            )
        )

    changes.extend(_diff_attributes(a, b, path))

    if opts.child_strategy == "align":
        changes.extend(_diff_children_aligned(a.children, b.children, path, opts))
    else:
        changes.extend(_diff_children_positional(a.children, b.children, path, opts))

    return changes


def _diff_attributes(a: XmlElement, b: XmlElement, path: str) -> list[ChangeRecord]:
    changes: list[ChangeRecord] = []
    keys = list(a.attributes) + [key for key in b.attributes if key not in a.attributes]
    for key in keys:
        old = a.attributes.get(key)
        new = b.attributes.get(key)
        if old == new:
            continue
        changes.append(
            ChangeRecord(
                "attribute_changed",
                f"{path}@{key}",
                old_value=UNDEFINED_ATTRIBUTE if old is None else old,
                new_value=UNDEFINED_ATTRIBUTE if new is None else new,
                element_name=a.name,
                attribute_name=key,
            )
        )
    return changes


def _diff_children_positional(
    children_a: tuple[XmlElement, ...],
    children_b: tuple[XmlElement, ...],
    path: str,
    opts: XmlDiffOptions,
) -> list[ChangeRecord]:
    changes: list[ChangeRecord] = []
    for index in range(max(len(children_a), len(children_b))):
        child_a = children_a[index] if index < len(children_a) else None
        child_b = children_b[index] if index < len(children_b) else None
        name = child_a.name if child_a is not None else child_b.name
        changes.extend(diff_xml(child_a, child_b, _child_path(path, name, index), opts))
    return changes


def _signature(element: XmlElement) -> str:
    """Return the text used to match children when aligning."""
    attributes = " ".join(f'{key}="{value}"' for key, value in sorted(element.attributes.items()))
    return f"<{element.name} {attributes}> {element.text}".strip()


def _diff_children_aligned(
    children_a: tuple[XmlElement, ...],
    children_b: tuple[XmlElement, ...],
    path: str,
    opts: XmlDiffOptions,
) -> list[ChangeRecord]:
    """Match children by signature with the sequence aligner, then recurse into each pair."""
    units_a = [TextUnit(_signature(child)) for child in children_a]
    units_b = [TextUnit(_signature(child)) for child in children_b]
    records = SequenceAligner(opts.aligner).align_units(units_a, units_b)

    changes: list[ChangeRecord] = []
    for record in records:
        old_index = record.metadata.get("old_index")
        new_index = record.metadata.get("new_index")
        if record.type == "added":
            child = children_b[new_index]
            changes.extend(diff_xml(None, child, _child_path(path, child.name, new_index), opts))
        elif record.type == "removed":
            child = children_a[old_index]
            changes.extend(diff_xml(child, None, _child_path(path, child.name, old_index), opts))
        else:
            child_a = children_a[old_index]
            changes.extend(
                diff_xml(child_a, children_b[new_index], _child_path(path, child_a.name, old_index), opts)
            )
    return changes


def compare_xml(a: XmlElement, b: XmlElement, options: XmlDiffOptions | None = None) -> TreeDiffResult:
    """Validate and diff two XML trees and summarize the outcome.

    Raises
    ------
    InvalidInputShapeError
        If either tree contains something other than ``XmlElement`` nodes.

    """
    validate_xml(a, "old")
    validate_xml(b, "new")
    changes = diff_xml(a, b, a.path or ROOT_PATH_LABEL, options)
    return TreeDiffResult(changes=changes, total_units=max(a.count(), b.count()))
