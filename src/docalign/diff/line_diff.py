#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/line_diff.py
"""Line-by-line text comparison using difflib.

Both texts are split on ``"\\n"`` and compared with
:class:`difflib.SequenceMatcher` (auto-junk heuristics disabled, so repeated
lines are never ignored). The opcodes are then flattened into one
:class:`LineRecord` per output row.

This differ is exact: it never pairs similar lines the way the look-ahead
aligner does. ``pair_modified=True`` is the only exception; it turns the
positional pairs inside each replaced block into ``modified`` rows.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Iterator, Literal, Sequence

from docalign.constants import LineStatus
from docalign.diff.models import AlignmentStats, LineDiffResult, LineRecord
from docalign.diff.similarity import normalize_whitespace
from docalign.exceptions import InvalidInputShapeError
from docalign.options import LineDiffOptions


@dataclass(slots=True)
class LineOp:
    """Structured diff operation between two line sequences."""

    tag: Literal["replace", "delete", "insert", "equal"]
    old_range: tuple[int, int]
    new_range: tuple[int, int]


def split_lines(text: str) -> list[str]:
    """Split text on newlines; an empty text is a single empty line."""
    return text.split("\n")


class LineDiffer:
    """Compute line records between two texts.

    Parameters
    ----------
    options : LineDiffOptions, optional
        Whitespace handling and modified-row pairing.

    """

    def __init__(self, options: LineDiffOptions | None = None):
        """Store the differ options."""
        self.options = options or LineDiffOptions()

    def iter_operations(self, old_lines: Sequence[str], new_lines: Sequence[str]) -> Iterator[LineOp]:
        """Yield SequenceMatcher operations over the (optionally normalized) lines."""
        if self.options.ignore_whitespace:
            old_keys = [normalize_whitespace(line) for line in old_lines]
            new_keys = [normalize_whitespace(line) for line in new_lines]
        else:
            old_keys, new_keys = list(old_lines), list(new_lines)

        matcher = difflib.SequenceMatcher(None, old_keys, new_keys, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            yield LineOp(tag, (i1, i2), (j1, j2))

    def diff(self, text_a: str, text_b: str) -> LineDiffResult:
        """Compare two texts line by line.

        Raises
        ------
        InvalidInputShapeError
            If either input is not a string.

        """
        for side, value in (("old", text_a), ("new", text_b)):
            if not isinstance(value, str):
                raise InvalidInputShapeError(
                    f"{side} text must be a string, got {type(value).__name__}",
                    side=side,
                    parameter_value=value,
                )

        old_lines = split_lines(text_a)
        new_lines = split_lines(text_b)
        records: list[LineRecord] = []

        def emit(
            status: LineStatus,
            text: str,
            old_no: int | None = None,
            new_no: int | None = None,
            old_text: str | None = None,
        ) -> None:
            records.append(LineRecord(len(records) + 1, status, text, old_no, new_no, old_text))

        for op in self.iter_operations(old_lines, new_lines):
            i1, i2 = op.old_range
            j1, j2 = op.new_range
            if op.tag == "equal":
                for offset in range(i2 - i1):
                    old_line, new_line = old_lines[i1 + offset], new_lines[j1 + offset]
                    emit(
                        "unchanged",
                        new_line,
                        i1 + offset + 1,
                        j1 + offset + 1,
                        old_text=None if old_line == new_line else old_line,
                    )
            elif op.tag == "delete":
                for i in range(i1, i2):
                    emit("removed", old_lines[i], old_no=i + 1)
            elif op.tag == "insert":
                for j in range(j1, j2):
                    emit("added", new_lines[j], new_no=j + 1)
            elif self.options.pair_modified:
                paired = min(i2 - i1, j2 - j1)
                for offset in range(paired):
                    emit(
                        "modified",
                        new_lines[j1 + offset],
                        i1 + offset + 1,
                        j1 + offset + 1,
                        old_text=old_lines[i1 + offset],
                    )
                for i in range(i1 + paired, i2):
                    emit("removed", old_lines[i], old_no=i + 1)
                for j in range(j1 + paired, j2):
                    emit("added", new_lines[j], new_no=j + 1)
            else:
                for i in range(i1, i2):
                    emit("removed", old_lines[i], old_no=i + 1)
                for j in range(j1, j2):
                    emit("added", new_lines[j], new_no=j + 1)

        stats = AlignmentStats(
            total=len(records),
            added=sum(1 for r in records if r.status == "added"),
            removed=sum(1 for r in records if r.status == "removed"),
            modified=sum(1 for r in records if r.status == "modified"),
            unchanged=sum(1 for r in records if r.status == "unchanged"),
        )
        return LineDiffResult(records=records, stats=stats)


def diff_lines(
    text_a: str,
    text_b: str,
    ignore_whitespace: bool = False,
    pair_modified: bool = False,
) -> LineDiffResult:
    """Compare two texts line by line.

    Parameters
    ----------
    text_a, text_b : str
        Old and new text
    ignore_whitespace : bool, default False
        Compare lines after collapsing whitespace; records keep the original text
    pair_modified : bool, default False
        Merge positional pairs in replaced blocks into ``modified`` rows

    Returns
    -------
    LineDiffResult
        One record per output row plus statistics

    Examples
    --------
        >>> result = diff_lines("a\\nb", "a\\nc")
        >>> [(r.status, r.text) for r in result.records]
        [('unchanged', 'a'), ('removed', 'b'), ('added', 'c')]

    """
    options = LineDiffOptions(ignore_whitespace=ignore_whitespace, pair_modified=pair_modified)
    return LineDiffer(options).diff(text_a, text_b)


def unified_diff(
    text_a: str,
    text_b: str,
    old_label: str = "old",
    new_label: str = "new",
    context_lines: int = 3,
) -> Iterator[str]:
    """Yield unified diff lines for two texts."""
    yield from difflib.unified_diff(
        split_lines(text_a),
        split_lines(text_b),
        fromfile=old_label,
        tofile=new_label,
        n=context_lines,
        lineterm="",
    )
