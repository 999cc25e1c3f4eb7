#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/compare.py
"""High-level comparison entry points.

These functions wrap the pure differs in :mod:`docalign.diff` with input
parsing, logging, progress reporting and uniform error handling:

- :class:`~docalign.exceptions.DocAlignError` subclasses propagate unchanged.
- Any other exception is wrapped in a
  :class:`~docalign.exceptions.ComputationError` naming the failed stage.
- Either way an ``"error"`` progress event is emitted before raising.

Long documents can be compared page by page with :func:`compare_pages`, which
reports progress after each page.
"""

from __future__ import annotations

import dataclasses
import logging
from functools import partial
from typing import Any, Callable, Iterable, Sequence, TypeVar

from docalign.constants import PAGE_SEPARATOR
from docalign.diff.aligner import SequenceAligner
from docalign.diff.json_diff import compare_json, parse_json
from docalign.diff.line_diff import LineDiffer
from docalign.diff.models import (
    AlignmentResult,
    ChangeRecord,
    LineDiffResult,
    PagedAlignmentResult,
    PageSummary,
    TextUnit,
    TreeDiffResult,
    UnitMetadata,
    XmlElement,
    coerce_units,
)
from docalign.diff.xml_diff import compare_xml, parse_xml
from docalign.exceptions import ComputationError, DocAlignError, InvalidInputShapeError
from docalign.options import AlignerOptions, JsonDiffOptions, LineDiffOptions, XmlDiffOptions
from docalign.progress import ProgressCallback, emit_progress

logger = logging.getLogger(__name__)

T = TypeVar("T")


def text_to_units(text: str, page: int | None = None, skip_blank: bool = True) -> list[TextUnit]:
    """Split text into one unit per line.

    Parameters
    ----------
    text : str
        Text to split on newlines
    page : int, optional
        Page number recorded in each unit's metadata
    skip_blank : bool, default True
        Drop lines that are empty after stripping

    Returns
    -------
    list of TextUnit
        Units with ``paragraph_index`` set to the line's position in ``text``

    """
    units = []
    for index, line in enumerate(text.split("\n")):
        if skip_blank and not line.strip():
            continue
        units.append(TextUnit(line, UnitMetadata(page=page, paragraph_index=index)))
    return units


def text_to_pages(text: str, separator: str = PAGE_SEPARATOR) -> list[list[TextUnit]]:
    """Split text into pages on ``separator`` (form feed by default), then into line units."""
    return [text_to_units(page_text, page=number) for number, page_text in enumerate(text.split(separator), start=1)]


def _run(
    stage: str,
    description: str,
    progress_callback: ProgressCallback | None,
    func: Callable[[], T],
) -> T:
    """Run ``func`` and translate unexpected failures into ``ComputationError``."""
    try:
        return func()
    except DocAlignError as e:
        logger.debug(f"{description} failed during {stage}: {e}")
        emit_progress(progress_callback, "error", f"{description} failed", error=str(e), stage=stage)
        raise
    except Exception as e:
        logger.error(f"{description} failed during {stage}: {e!r}")
        emit_progress(progress_callback, "error", f"{description} failed", error=str(e), stage=stage)
        raise ComputationError(f"Comparison failed during {stage}: {e!r}", stage=stage, original_error=e) from e


def compare_units(
    seq_a: Iterable[Any],
    seq_b: Iterable[Any],
    options: AlignerOptions | None = None,
    progress_callback: ProgressCallback | None = None,
) -> AlignmentResult:
    """Align two unit sequences.

    Parameters
    ----------
    seq_a, seq_b : iterable
        Old and new units (``TextUnit``, ``str`` or mapping with ``"text"``)
    options : AlignerOptions, optional
        Aligner settings
    progress_callback : ProgressCallback, optional
        Receives ``started``, ``finished`` and ``error`` events

    Returns
    -------
    AlignmentResult
        Classified records and metrics

    Raises
    ------
    InvalidInputShapeError
        If a unit has the wrong shape
    ComputationError
        If alignment fails unexpectedly

    """
    emit_progress(progress_callback, "started", "Aligning documents", total=1)
    aligner = SequenceAligner(options)
    units_a = _run("validation", "Alignment", progress_callback, lambda: coerce_units(seq_a, "old"))
    units_b = _run("validation", "Alignment", progress_callback, lambda: coerce_units(seq_b, "new"))
    logger.debug(f"Aligning {len(units_a)} old units against {len(units_b)} new units")

    result = _run(
        "alignment",
        "Alignment",
        progress_callback,
        lambda: AlignmentResult.from_changes(aligner.align_units(units_a, units_b)),
    )

    logger.debug(f"Alignment finished: {result.similarity_percentage}% similar, {result.differences_found} changes")
    emit_progress(
        progress_callback,
        "finished",
        "Alignment complete",
        current=1,
        total=1,
        similarity_percentage=result.similarity_percentage,
    )
    return result


def _coerce_pages(pages: Iterable[Any], side: str) -> list[list[TextUnit]]:
    if isinstance(pages, (str, bytes)):
        raise InvalidInputShapeError(f"{side} pages must be a sequence of unit sequences", side=side)
    try:
        return [coerce_units(page, side) for page in pages]
    except TypeError as e:
        raise InvalidInputShapeError(
            f"{side} pages must be a sequence of unit sequences", side=side, original_error=e
        ) from e


def _with_page(record: ChangeRecord, position: int, page_number: int) -> ChangeRecord:
    return dataclasses.replace(record, position=position, metadata={**record.metadata, "page": page_number})


def compare_pages(
    pages_a: Sequence[Iterable[Any]],
    pages_b: Sequence[Iterable[Any]],
    options: AlignerOptions | None = None,
    progress_callback: ProgressCallback | None = None,
) -> PagedAlignmentResult:
    """Align two paged documents one page at a time.

    Page ``n`` of the old document is aligned against page ``n`` of the new
    one; a page present on one side only becomes all ``removed`` or all
    ``added`` records. Page results are concatenated, renumbered and tagged
    with ``metadata["page"]``.

    Parameters
    ----------
    pages_a, pages_b : sequence of iterables
        One unit sequence per page
    options : AlignerOptions, optional
        Aligner settings applied to every page
    progress_callback : ProgressCallback, optional
        Receives ``started``, one ``item_done`` per page, then ``finished``

    Returns
    -------
    PagedAlignmentResult
        Merged records and metrics plus per-page summaries

    """
    aligner = SequenceAligner(options)
    old_pages = _run("validation", "Page comparison", progress_callback, lambda: _coerce_pages(pages_a, "old"))
    new_pages = _run("validation", "Page comparison", progress_callback, lambda: _coerce_pages(pages_b, "new"))
    page_count = max(len(old_pages), len(new_pages))

    logger.debug(f"Comparing {len(old_pages)} old pages against {len(new_pages)} new pages")
    emit_progress(progress_callback, "started", "Comparing pages", total=page_count)

    changes: list[ChangeRecord] = []
    summaries: list[PageSummary] = []

    for index in range(page_count):
        page_number = index + 1
        units_a = old_pages[index] if index < len(old_pages) else []
        units_b = new_pages[index] if index < len(new_pages) else []

        page_records = _run(
            f"page {page_number}",
            "Page comparison",
            progress_callback,
            partial(aligner.align_units, units_a, units_b),
        )
        page_result = AlignmentResult.from_changes(page_records)
        for record in page_records:
            changes.append(_with_page(record, len(changes), page_number))

        summaries.append(
            PageSummary(
                page_number=page_number,
                similarity_percentage=page_result.similarity_percentage,
                changes_count=page_result.differences_found,
                units_compared=page_result.total_units,
            )
        )
        logger.debug(f"Page {page_number}: {page_result.similarity_percentage}% similar")
        emit_progress(
            progress_callback,
            "item_done",
            f"Page {page_number} of {page_count}",
            current=page_number,
            total=page_count,
            item_type="page",
            page=page_number,
            similarity_percentage=page_result.similarity_percentage,
        )

    result = PagedAlignmentResult.from_changes(changes)
    result.page_summaries = summaries
    emit_progress(progress_callback, "finished", "Page comparison complete", current=page_count, total=page_count)
    return result


def compare_json_documents(
    a: Any,
    b: Any,
    options: JsonDiffOptions | None = None,
    progress_callback: ProgressCallback | None = None,
) -> TreeDiffResult:
    """Diff two JSON documents.

    ``str`` and ``bytes`` arguments are parsed as JSON text; anything else is
    taken as an already parsed value. To compare two bare JSON strings, pass
    them as JSON text (``'"abc"'``).

    Raises
    ------
    ParsingError
        If a text argument is not valid JSON
    InvalidInputShapeError
        If a parsed value is not JSON-compatible

    """
    emit_progress(progress_callback, "started", "Comparing JSON documents", total=1)
    value_a = _run("json_parsing", "JSON comparison", progress_callback, lambda: _load_json(a))
    value_b = _run("json_parsing", "JSON comparison", progress_callback, lambda: _load_json(b))
    result = _run("json_diff", "JSON comparison", progress_callback, lambda: compare_json(value_a, value_b, options))
    logger.debug(f"JSON comparison found {result.differences_found} differences")
    emit_progress(progress_callback, "finished", "JSON comparison complete", current=1, total=1)
    return result


def _load_json(value: Any) -> Any:
    return parse_json(value) if isinstance(value, (str, bytes)) else value


def compare_xml_documents(
    a: XmlElement | str | bytes,
    b: XmlElement | str | bytes,
    options: XmlDiffOptions | None = None,
    progress_callback: ProgressCallback | None = None,
) -> TreeDiffResult:
    """Diff two XML documents given as ``XmlElement`` trees or XML text.

    Raises
    ------
    ParsingError
        If a text argument is not well-formed XML
    InvalidInputShapeError
        If a tree contains something other than ``XmlElement`` nodes

    """
    emit_progress(progress_callback, "started", "Comparing XML documents", total=1)
    tree_a = _run("xml_parsing", "XML comparison", progress_callback, lambda: _load_xml(a))
    tree_b = _run("xml_parsing", "XML comparison", progress_callback, lambda: _load_xml(b))
    result = _run("xml_diff", "XML comparison", progress_callback, lambda: compare_xml(tree_a, tree_b, options))
    logger.debug(
        f"XML comparison found {len(result.element_changes)} element and "
        f"{len(result.attribute_changes)} attribute changes"
    )
    emit_progress(progress_callback, "finished", "XML comparison complete", current=1, total=1)
    return result


def _load_xml(value: Any) -> Any:
    return parse_xml(value) if isinstance(value, (str, bytes)) else value


def compare_text(
    text_a: str,
    text_b: str,
    options: LineDiffOptions | None = None,
    progress_callback: ProgressCallback | None = None,
) -> LineDiffResult:
    """Diff two texts line by line with the exact line differ."""
    emit_progress(progress_callback, "started", "Comparing text", total=1)
    differ = LineDiffer(options)
    result = _run("line_diff", "Text comparison", progress_callback, lambda: differ.diff(text_a, text_b))
    logger.debug(f"Text comparison: {result.stats.total} rows, {result.differences_found} differences")
    emit_progress(progress_callback, "finished", "Text comparison complete", current=1, total=1)
    return result
