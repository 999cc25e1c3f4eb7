#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/cli.py
"""Command line interface for docalign.

Usage::

    docalign align old.txt new.txt
    docalign pages old.txt new.txt --threshold 0.7
    docalign lines old.txt new.txt --pair-modified
    docalign json old.json new.json --format json
    docalign xml old.xml new.xml --child-strategy align

Either input may be ``-`` to read it from stdin.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence, Union

from docalign.compare import (
    compare_json_documents,
    compare_pages,
    compare_text,
    compare_units,
    compare_xml_documents,
    text_to_pages,
    text_to_units,
)
from docalign.constants import (
    DEFAULT_ARRAY_STRATEGY,
    DEFAULT_CHILD_STRATEGY,
    DEFAULT_LOOK_AHEAD_LIMIT,
    DEFAULT_ORPHAN_POLICY,
    DEFAULT_SIMILARITY_THRESHOLD,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from docalign.diff.models import MISSING, AlignmentResult, LineDiffResult, PagedAlignmentResult, TreeDiffResult
from docalign.exceptions import DocAlignError, ParsingError, ValidationError
from docalign.logging_utils import configure_logging
from docalign.options import AlignerOptions, JsonDiffOptions, LineDiffOptions, XmlDiffOptions

logger = logging.getLogger(__name__)

MODES = ("align", "pages", "lines", "json", "xml")
VALUE_DISPLAY_LENGTH = 60

Result = Union[AlignmentResult, LineDiffResult, TreeDiffResult]


def _unit_interval(value: str) -> float:
    """Parse a float in [0, 1] for argparse."""
    try:
        fvalue = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a number between 0 and 1, got '{value}'") from e
    if not 0.0 <= fvalue <= 1.0:
        raise argparse.ArgumentTypeError(f"expected a number between 0 and 1, got {fvalue}")
    return fvalue


def _positive_int(value: str) -> int:
    """Parse a positive integer for argparse."""
    try:
        ivalue = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'") from e
    if ivalue < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {ivalue}")
    return ivalue


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``docalign`` command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="docalign",
        description="Align and diff two documents: text lines, pages, JSON or XML.",
    )
    parser.add_argument(
        "mode",
        choices=MODES,
        help="align: fuzzy line alignment; pages: per-page alignment (form-feed separated); "
        "lines: exact line diff; json / xml: structural tree diff",
    )
    parser.add_argument("old", help="Original document ('-' for stdin)")
    parser.add_argument("new", help="Modified document ('-' for stdin)")

    matching = parser.add_argument_group("matching options")
    matching.add_argument(
        "--threshold",
        type=_unit_interval,
        default=DEFAULT_SIMILARITY_THRESHOLD,
        help=f"Minimum similarity for two units to be paired (default: {DEFAULT_SIMILARITY_THRESHOLD})",
    )
    matching.add_argument(
        "--look-ahead",
        type=_positive_int,
        default=DEFAULT_LOOK_AHEAD_LIMIT,
        help=f"Units searched ahead on each side when realigning (default: {DEFAULT_LOOK_AHEAD_LIMIT})",
    )
    matching.add_argument("--ignore-case", action="store_true", help="Compare case-insensitively")
    matching.add_argument(
        "--ignore-whitespace",
        "-w",
        action="store_true",
        help="Collapse whitespace runs before comparing (like diff -w)",
    )
    matching.add_argument(
        "--orphan-policy",
        choices=["remove", "replace"],
        default=DEFAULT_ORPHAN_POLICY,
        help="When neither side finds a match: report only the old unit as removed, "
        "or report a removal plus an addition",
    )
    matching.add_argument(
        "--no-content-bonus",
        dest="use_content_bonus",
        action="store_false",
        help="Do not favour matches between units of the same content type",
    )
    matching.add_argument("--word-level", action="store_true", help="Include word changes for modified units")
    matching.add_argument(
        "--char-level", action="store_true", help="Include character comparisons for modified units"
    )
    matching.add_argument(
        "--pair-modified",
        action="store_true",
        help="lines mode: report replaced line pairs as modified rows",
    )
    matching.add_argument(
        "--array-strategy",
        choices=["whole", "align"],
        default=DEFAULT_ARRAY_STRATEGY,
        help="json mode: how arrays of different length are compared",
    )
    matching.add_argument(
        "--child-strategy",
        choices=["positional", "align"],
        default=DEFAULT_CHILD_STRATEGY,
        help="xml mode: how child elements are matched",
    )

    output = parser.add_argument_group("output options")
    output.add_argument(
        "--format",
        "-f",
        choices=["summary", "json"],
        default="summary",
        help="summary (default): tables for the terminal; json: full structured result",
    )
    output.add_argument("--output", "-o", help="Write output to file (default: stdout)")
    output.add_argument("--show-unchanged", action="store_true", help="summary format: list unchanged units too")

    logging_group = parser.add_argument_group("logging options")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    logging_group.add_argument("--log-file", help="Also write log messages to this file")
    logging_group.add_argument("--trace", action="store_true", help="Debug logging with timestamps")

    return parser


def _read_input(source: str) -> bytes:
    """Read a document from a path, or from stdin for ``-``."""
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def _decode(data: bytes) -> str:
    return data.decode("utf-8-sig").replace("\r\n", "\n")


def build_aligner_options(parsed: argparse.Namespace) -> AlignerOptions:
    """Build aligner options from parsed arguments."""
    return AlignerOptions(
        ignore_case=parsed.ignore_case,
        ignore_whitespace=parsed.ignore_whitespace,
        similarity_threshold=parsed.threshold,
        look_ahead_limit=parsed.look_ahead,
        use_content_bonus=parsed.use_content_bonus,
        orphan_policy=parsed.orphan_policy,
        word_level=parsed.word_level,
        character_level=parsed.char_level,
    )


def run_comparison(parsed: argparse.Namespace, old: bytes, new: bytes) -> Result:
    """Dispatch to the comparison for ``parsed.mode``."""
    aligner = build_aligner_options(parsed)

    if parsed.mode == "align":
        return compare_units(text_to_units(_decode(old)), text_to_units(_decode(new)), aligner)
    if parsed.mode == "pages":
        return compare_pages(text_to_pages(_decode(old)), text_to_pages(_decode(new)), aligner)
    if parsed.mode == "lines":
        options = LineDiffOptions(ignore_whitespace=parsed.ignore_whitespace, pair_modified=parsed.pair_modified)
        return compare_text(_decode(old), _decode(new), options)
    if parsed.mode == "json":
        return compare_json_documents(old, new, JsonDiffOptions(array_strategy=parsed.array_strategy, aligner=aligner))
    return compare_xml_documents(old, new, XmlDiffOptions(child_strategy=parsed.child_strategy, aligner=aligner))


def _format_value(value: Any) -> str:
    if value is MISSING:
        return ""
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    if len(text) > VALUE_DISPLAY_LENGTH:
        return text[: VALUE_DISPLAY_LENGTH - 3] + "..."
    return text


_STATUS_STYLES = {
    "added": "green",
    "removed": "red",
    "modified": "yellow",
    "attribute_changed": "magenta",
    "unchanged": "dim",
}


def render_summary(console: Any, result: Result, label: str, show_unchanged: bool = False) -> None:
    """Print a result as rich tables.

    Parameters
    ----------
    console : Console
        Rich console to print to
    result : AlignmentResult, LineDiffResult or TreeDiffResult
        Comparison outcome
    label : str
        Title describing the two inputs
    show_unchanged : bool, default False
        Also list unchanged units and lines

    """
    from rich.table import Table

    stats = Table(title=label)
    stats.add_column("Metric", style="cyan")
    stats.add_column("Value", style="green", justify="right")
    stats.add_row("Similarity", f"{result.similarity_percentage}%")
    stats.add_row("Differences", str(result.differences_found))
    stats.add_row("Matches", str(result.matches_found))
    if isinstance(result, AlignmentResult) and result.confidence_score is not None:
        stats.add_row("Confidence", f"{result.confidence_score:.2f}")
    console.print(stats)

    if isinstance(result, PagedAlignmentResult) and result.page_summaries:
        pages = Table(title="Pages")
        pages.add_column("Page", justify="right")
        pages.add_column("Similarity", justify="right")
        pages.add_column("Changes", justify="right")
        pages.add_column("Units", justify="right")
        for summary in result.page_summaries:
            pages.add_row(
                str(summary.page_number),
                f"{summary.similarity_percentage}%",
                str(summary.changes_count),
                str(summary.units_compared),
            )
        console.print(pages)

    if isinstance(result, LineDiffResult):
        rows = Table(title="Lines")
        rows.add_column("#", justify="right")
        rows.add_column("Status")
        rows.add_column("Old", justify="right")
        rows.add_column("New", justify="right")
        rows.add_column("Text")
        for record in result.records:
            if record.status == "unchanged" and not show_unchanged:
                continue
            style = _STATUS_STYLES[record.status]
            text = record.text if record.old_text is None else f"{record.old_text} -> {record.text}"
            rows.add_row(
                str(record.line_number),
                f"[{style}]{record.status}[/{style}]",
                "" if record.old_line_number is None else str(record.old_line_number),
                "" if record.new_line_number is None else str(record.new_line_number),
                _format_value(text),
            )
        console.print(rows)
        return

    changes = Table(title="Changes")
    changes.add_column("Type")
    changes.add_column("Position")
    changes.add_column("Old")
    changes.add_column("New")
    changes.add_column("Similarity", justify="right")
    for change in result.changes:
        if not change.is_change and not show_unchanged:
            continue
        style = _STATUS_STYLES[change.type]
        changes.add_row(
            f"[{style}]{change.type}[/{style}]",
            str(change.position),
            _format_value(change.old_value),
            _format_value(change.new_value),
            "" if change.similarity_percentage is None else f"{change.similarity_percentage}%",
        )
    console.print(changes)


def _write_output(parsed: argparse.Namespace, result: Result) -> None:
    from rich.console import Console

    label = f"{parsed.old} vs {parsed.new}"

    if parsed.format == "json":
        output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        if parsed.output:
            Path(parsed.output).write_text(output, encoding="utf-8")
            print(f"Result written to: {parsed.output}", file=sys.stderr)
        else:
            print(output)
        return

    if parsed.output:
        with open(parsed.output, "w", encoding="utf-8") as handle:
            render_summary(Console(file=handle, width=120), result, label, parsed.show_unchanged)
        print(f"Summary written to: {parsed.output}", file=sys.stderr)
    else:
        render_summary(Console(), result, label, parsed.show_unchanged)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``docalign`` command.

    Parameters
    ----------
    argv : sequence of str, optional
        Command line arguments, defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit code

    """
    parser = create_parser()
    try:
        parsed = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_SUCCESS

    configure_logging(parsed.log_level, log_file=parsed.log_file, trace_mode=parsed.trace)

    if parsed.old == "-" and parsed.new == "-":
        print("Error: Cannot read both documents from stdin", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        old = _read_input(parsed.old)
        new = _read_input(parsed.new)
    except OSError as e:
        print(f"Error: Could not read input: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        result = run_comparison(parsed, old, new)
    except ParsingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_PARSING_ERROR
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except UnicodeDecodeError as e:
        print(f"Error: Input is not valid UTF-8 text: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except DocAlignError as e:
        logger.debug("Comparison failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    try:
        _write_output(parsed, result)
    except OSError as e:
        print(f"Error: Could not write output: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
