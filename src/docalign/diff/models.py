#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/models.py
"""Data model shared by every differ.

Inputs (``TextUnit``, ``XmlElement``) and outputs (``ChangeRecord`` and the
result containers) are plain dataclasses created fresh for each comparison.
Differs treat their inputs as read-only and never mutate a result after
returning it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Union

from docalign.constants import ChangeType, CharChangeType, LineStatus, WordChangeType
from docalign.exceptions import InvalidInputShapeError

JsonValue = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]


class _Missing:
    """Marker for a value that one side of a change does not have."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class UnitMetadata:
    """Optional layout information attached to a text unit."""

    page: int | None = None
    paragraph_index: int | None = None
    y_position: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UnitMetadata:
        """Build metadata from a mapping using snake_case or camelCase keys."""
        return cls(
            page=data.get("page"),
            paragraph_index=data.get("paragraph_index", data.get("paragraphIndex")),
            y_position=data.get("y_position", data.get("yPosition")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the populated fields as a dictionary."""
        data: dict[str, Any] = {}
        if self.page is not None:
            data["page"] = self.page
        if self.paragraph_index is not None:
            data["paragraph_index"] = self.paragraph_index
        if self.y_position is not None:
            data["y_position"] = self.y_position
        return data


@dataclass(frozen=True)
class TextUnit:
    """A single comparable piece of text (a line, paragraph or table row).

    Parameters
    ----------
    text : str
        The unit's text content.
    metadata : UnitMetadata, optional
        Page/paragraph/position information supplied by the parser.

    Raises
    ------
    InvalidInputShapeError
        If ``text`` is not a string.

    """

    text: str
    metadata: UnitMetadata | None = None

    def __post_init__(self) -> None:
        """Reject non-string text."""
        if not isinstance(self.text, str):
            raise InvalidInputShapeError(
                f"TextUnit.text must be a string, got {type(self.text).__name__}",
                parameter_value=self.text,
            )

    @classmethod
    def coerce(cls, value: Any, *, side: str | None = None, index: int | None = None) -> TextUnit:
        """Convert a string, mapping or ``TextUnit`` into a ``TextUnit``.

        Parameters
        ----------
        value : TextUnit, str or Mapping
            Candidate unit. Mappings must contain a string ``"text"`` entry and
            may contain a ``"metadata"`` mapping.
        side : str, optional
            Input label reported in the error ("old" or "new").
        index : int, optional
            Position reported in the error.

        Returns
        -------
        TextUnit
            The validated unit.

        Raises
        ------
        InvalidInputShapeError
            If the value has none of the accepted shapes.

        """
        if isinstance(value, TextUnit):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping):
            text = value.get("text")
            if isinstance(text, str):
                raw_meta = value.get("metadata")
                if raw_meta is None:
                    return cls(text)
                if isinstance(raw_meta, UnitMetadata):
                    return cls(text, raw_meta)
                if isinstance(raw_meta, Mapping):
                    return cls(text, UnitMetadata.from_mapping(raw_meta))
                raise InvalidInputShapeError(
                    f"Unit metadata at {side or 'input'}[{index}] must be a mapping",
                    side=side,
                    index=index,
                    parameter_value=value,
                )

        location = f"{side or 'input'}[{index}]" if index is not None else (side or "input")
        raise InvalidInputShapeError(
            f"Element {location} has no string 'text' field: {value!r}",
            side=side,
            index=index,
            parameter_value=value,
        )


def coerce_units(values: Iterable[Any], side: str) -> list[TextUnit]:
    """Validate a whole sequence up front and return it as ``TextUnit`` objects."""
    if isinstance(values, (str, bytes)) or isinstance(values, Mapping):
        raise InvalidInputShapeError(
            f"The {side} input must be a sequence of units, got {type(values).__name__}",
            side=side,
            parameter_value=values,
        )
    try:
        items = list(values)
    except TypeError as e:
        raise InvalidInputShapeError(
            f"The {side} input must be iterable, got {type(values).__name__}",
            side=side,
            parameter_value=values,
            original_error=e,
        ) from e
    return [TextUnit.coerce(item, side=side, index=index) for index, item in enumerate(items)]


@dataclass(frozen=True)
class WordChange:
    """A word-level insertion or deletion inside a modified unit."""

    type: WordChangeType
    content: str
    position: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {"type": self.type, "content": self.content, "position": self.position}


@dataclass(frozen=True)
class CharChange:
    """One position of a character-by-character comparison."""

    char: str
    type: CharChangeType

    def to_dict(self) -> dict[str, str]:
        """Serialize to a dictionary."""
        return {"char": self.char, "type": self.type}


@dataclass(frozen=True)
class CharacterDiff:
    """Positional character comparison of two strings.

    ``old`` and ``new`` have one entry per position up to the longer string.
    A position past the end of a string is ``"missing"`` on that side.
    """

    old: tuple[CharChange, ...]
    new: tuple[CharChange, ...]
    has_changes: bool

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "old": [change.to_dict() for change in self.old],
            "new": [change.to_dict() for change in self.new],
            "has_changes": self.has_changes,
        }


@dataclass(frozen=True)
class ChangeRecord:
    """One classified difference (or match) between two documents.

    Sides that a record does not have hold ``MISSING``; this keeps a JSON
    ``null`` distinguishable from an absent value.

    Parameters
    ----------
    type : ChangeType
        Classification of the record.
    position : str or int
        Tree path (JSON/XML) or output index (aligner).
    old_value, new_value : any
        Values from the old and new document.
    confidence : float, optional
        Match quality in [0, 1].
    content_type : str, optional
        Heuristic content label of the old (or only) unit.
    similarity_percentage : int, optional
        ``round(similarity * 100)`` for modified pairs.
    element_name : str, optional
        XML element the record belongs to.
    attribute_name : str, optional
        XML attribute for ``attribute_changed`` records.
    word_changes : tuple of WordChange
        Word-level operations for modified text units.
    char_diff : CharacterDiff, optional
        Character-level comparison for modified text units.
    metadata : dict
        Free-form positional information (unit indices, page, paragraph).

    """

    type: ChangeType
    position: str | int
    old_value: Any = MISSING
    new_value: Any = MISSING
    confidence: float | None = None
    content_type: str | None = None
    similarity_percentage: int | None = None
    element_name: str | None = None
    attribute_name: str | None = None
    word_changes: tuple[WordChange, ...] = ()
    char_diff: CharacterDiff | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        """Enforce which values each record type carries."""
        has_old = self.old_value is not MISSING
        has_new = self.new_value is not MISSING
        if self.type == "added" and (has_old or not has_new):
            raise ValueError("added records carry only new_value")
        if self.type == "removed" and (has_new or not has_old):
            raise ValueError("removed records carry only old_value")
        if self.type in ("modified", "attribute_changed", "unchanged") and not (has_old and has_new):
            raise ValueError(f"{self.type} records carry both old_value and new_value")

    @property
    def has_old(self) -> bool:
        """Whether the record carries an old value."""
        return self.old_value is not MISSING

    @property
    def has_new(self) -> bool:
        """Whether the record carries a new value."""
        return self.new_value is not MISSING

    @property
    def is_change(self) -> bool:
        """Whether the record describes a difference rather than a match."""
        return self.type != "unchanged"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, omitting absent values."""
        data: dict[str, Any] = {"type": self.type, "position": self.position}
        if self.has_old:
            data["old_value"] = self.old_value
        if self.has_new:
            data["new_value"] = self.new_value
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.content_type is not None:
            data["content_type"] = self.content_type
        if self.similarity_percentage is not None:
            data["similarity_percentage"] = self.similarity_percentage
        if self.element_name is not None:
            data["element_name"] = self.element_name
        if self.attribute_name is not None:
            data["attribute_name"] = self.attribute_name
        if self.word_changes:
            data["word_changes"] = [change.to_dict() for change in self.word_changes]
        if self.char_diff is not None:
            data["char_diff"] = self.char_diff.to_dict()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


def percentage(total: int, changed: int) -> int:
    """Return ``round(100 * (total - changed) / total)``, or 100 for an empty comparison."""
    if total <= 0:
        return 100
    return round(100 * (total - changed) / total)


@dataclass(frozen=True)
class AlignmentStats:
    """Record counts by type for an alignment."""

    total: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    @classmethod
    def from_changes(cls, changes: Iterable[ChangeRecord]) -> AlignmentStats:
        """Count records by type."""
        counts = {"added": 0, "removed": 0, "modified": 0, "unchanged": 0}
        total = 0
        for change in changes:
            total += 1
            if change.type in counts:
                counts[change.type] += 1
        return cls(total=total, **counts)

    @property
    def changed(self) -> int:
        """Number of records that are not unchanged."""
        return self.added + self.removed + self.modified

    def to_dict(self) -> dict[str, int]:
        """Serialize to a dictionary."""
        return {
            "total": self.total,
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "unchanged": self.unchanged,
        }


@dataclass
class AlignmentResult:
    """Result of aligning two unit sequences.

    Attributes
    ----------
    changes : list of ChangeRecord
        One record per output position, in document order.
    stats : AlignmentStats
        Counts by record type; the four counts sum to ``stats.total``.
    similarity_percentage : int
        ``round(100 * (total - changed) / total)``.
    confidence_score : float or None
        Mean of the record confidences, or None for an empty result.

    """

    changes: list[ChangeRecord]
    stats: AlignmentStats
    similarity_percentage: int
    confidence_score: float | None = None

    @classmethod
    def from_changes(cls, changes: list[ChangeRecord]) -> AlignmentResult:
        """Build a result and its derived metrics from a complete record list."""
        stats = AlignmentStats.from_changes(changes)
        confidence: float | None = None
        if changes:
            confidence = sum(1.0 if c.confidence is None else c.confidence for c in changes) / len(changes)
        return cls(
            changes=changes,
            stats=stats,
            similarity_percentage=percentage(stats.total, stats.changed),
            confidence_score=confidence,
        )

    @property
    def differences_found(self) -> int:
        """Number of added, removed and modified records."""
        return self.stats.changed

    @property
    def matches_found(self) -> int:
        """Number of unchanged records."""
        return self.stats.unchanged

    @property
    def total_units(self) -> int:
        """Total number of records."""
        return self.stats.total

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "changes": [change.to_dict() for change in self.changes],
            "stats": self.stats.to_dict(),
            "similarity_percentage": self.similarity_percentage,
            "confidence_score": self.confidence_score,
            "differences_found": self.differences_found,
            "matches_found": self.matches_found,
            "total_units": self.total_units,
        }


@dataclass(frozen=True)
class PageSummary:
    """Per-page outcome of a paged comparison."""

    page_number: int
    similarity_percentage: int
    changes_count: int
    units_compared: int

    def to_dict(self) -> dict[str, int]:
        """Serialize to a dictionary."""
        return {
            "page_number": self.page_number,
            "similarity_percentage": self.similarity_percentage,
            "changes_count": self.changes_count,
            "units_compared": self.units_compared,
        }


@dataclass
class PagedAlignmentResult(AlignmentResult):
    """Alignment result for page-chunked documents, with per-page summaries."""

    page_summaries: list[PageSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        data = super().to_dict()
        data["page_summaries"] = [summary.to_dict() for summary in self.page_summaries]
        return data


@dataclass(frozen=True)
class XmlElement:
    """A parsed XML element.

    Parameters
    ----------
    name : str
        Tag name (namespaced tags use Clark notation, ``{uri}local``).
    path : str
        Dot-separated, index-qualified address built during parsing.
    attributes : dict
        Attribute names mapped to values.
    text : str
        Direct text content, stripped; child text is not included.
    children : tuple of XmlElement
        Child elements in document order.

    """

    name: str
    path: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: tuple[XmlElement, ...] = ()

    def __post_init__(self) -> None:
        """Store children as a tuple so the tree stays read-only."""
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    def count(self) -> int:
        """Return the number of elements in this subtree, including itself."""
        return 1 + sum(child.count() for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the subtree to nested dictionaries."""
        return {
            "name": self.name,
            "path": self.path,
            "attributes": dict(self.attributes),
            "text": self.text,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class LineRecord:
    """One output row of a line diff.

    ``text`` is the new line (the old line for removed rows). ``old_text`` is set
    on modified rows, and on unchanged rows whose old line differs only in
    whitespace.
    """

    line_number: int
    status: LineStatus
    text: str
    old_line_number: int | None = None
    new_line_number: int | None = None
    old_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        data: dict[str, Any] = {
            "line_number": self.line_number,
            "status": self.status,
            "text": self.text,
            "old_line_number": self.old_line_number,
            "new_line_number": self.new_line_number,
        }
        if self.old_text is not None:
            data["old_text"] = self.old_text
        return data


@dataclass
class LineDiffResult:
    """Records and statistics produced by the line differ."""

    records: list[LineRecord]
    stats: AlignmentStats

    @property
    def similarity_percentage(self) -> int:
        """Share of unchanged rows, as an integer percentage."""
        return percentage(self.stats.total, self.stats.changed)

    @property
    def differences_found(self) -> int:
        """Number of rows that are not unchanged."""
        return self.stats.changed

    @property
    def matches_found(self) -> int:
        """Number of unchanged rows."""
        return self.stats.unchanged

    def old_lines(self) -> list[str]:
        """Rebuild the old document's lines from the records."""
        lines = []
        for record in self.records:
            if record.status == "removed":
                lines.append(record.text)
            elif record.status in ("unchanged", "modified"):
                lines.append(record.text if record.old_text is None else record.old_text)
        return lines

    def new_lines(self) -> list[str]:
        """Rebuild the new document's lines from the records."""
        return [record.text for record in self.records if record.status != "removed"]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "records": [record.to_dict() for record in self.records],
            "stats": self.stats.to_dict(),
            "similarity_percentage": self.similarity_percentage,
        }


@dataclass
class TreeDiffResult:
    """Summary of a JSON or XML tree comparison.

    Attributes
    ----------
    changes : list of ChangeRecord
        All records, in traversal order.
    total_units : int
        The larger of the two documents' unit counts (leaves for JSON,
        elements for XML).

    """

    changes: list[ChangeRecord]
    total_units: int

    @property
    def differences_found(self) -> int:
        """Number of change records."""
        return len(self.changes)

    @property
    def matches_found(self) -> int:
        """Units not touched by any change record (never negative)."""
        return max(0, self.total_units - self.differences_found)

    @property
    def similarity_percentage(self) -> int:
        """Share of matching units as an integer percentage."""
        if self.total_units <= 0:
            return 100
        return round(100 * self.matches_found / self.total_units)

    def count(self, change_type: ChangeType) -> int:
        """Count records of a given type."""
        return sum(1 for change in self.changes if change.type == change_type)

    @property
    def element_changes(self) -> list[ChangeRecord]:
        """Records that are not attribute changes."""
        return [change for change in self.changes if change.type != "attribute_changed"]

    @property
    def attribute_changes(self) -> list[ChangeRecord]:
        """Attribute change records."""
        return [change for change in self.changes if change.type == "attribute_changed"]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "changes": [change.to_dict() for change in self.changes],
            "differences_found": self.differences_found,
            "matches_found": self.matches_found,
            "total_units": self.total_units,
            "similarity_percentage": self.similarity_percentage,
            "added_count": self.count("added"),
            "removed_count": self.count("removed"),
            "modified_count": self.count("modified"),
            "attribute_changes_count": self.count("attribute_changed"),
        }


__all__ = [
    "MISSING",
    "JsonValue",
    "UnitMetadata",
    "TextUnit",
    "coerce_units",
    "WordChange",
    "ChangeRecord",
    "AlignmentStats",
    "AlignmentResult",
    "PageSummary",
    "PagedAlignmentResult",
    "XmlElement",
    "LineRecord",
    "LineDiffResult",
    "TreeDiffResult",
    "percentage",
]
