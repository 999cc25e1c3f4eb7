"""docalign - document alignment and diff engine.

docalign compares two versions of a document and reports what was added,
removed, modified or left unchanged. Plain text is compared as a sequence of
lines or paragraphs with a fuzzy look-ahead aligner that resynchronizes after
insertions and deletions; JSON and XML are compared structurally with
path-qualified change records.

Key Features
------------
- Edit-distance similarity with optional case and whitespace normalization
- Look-ahead realignment so one inserted line does not shift every later line
- Content-type hints for invoices and reports (totals, taxes, line items)
- Page-by-page comparison with progress callbacks
- Recursive JSON and XML diffs
- Exact line diff built on difflib

Requirements
------------
- Python 3.10+

Examples
--------
Align two lists of lines:

    >>> from docalign import compare_units
    >>> result = compare_units(["Header", "Item A $5", "Total $10"],
    ...                        ["Header", "Item A $5", "Item B $5", "Total $15"])
    >>> result.stats.to_dict()
    {'total': 4, 'added': 1, 'removed': 0, 'modified': 1, 'unchanged': 2}
    >>> result.similarity_percentage
    50

Diff two JSON documents given as text:

    >>> from docalign import compare_json_documents
    >>> result = compare_json_documents('{"a": 1, "b": 2}', '{"a": 1, "b": 3}')
    >>> [(c.type, c.position) for c in result.changes]
    [('modified', 'b')]

See Also
--------
docalign.diff : the individual differs
docalign.compare : orchestration with logging and progress reporting

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "docalign requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from docalign.compare import (
    compare_json_documents,
    compare_pages,
    compare_text,
    compare_units,
    compare_xml_documents,
    text_to_pages,
    text_to_units,
)
from docalign.diff import (
    AlignmentResult,
    ChangeRecord,
    LineDiffResult,
    PagedAlignmentResult,
    TextUnit,
    TreeDiffResult,
    UnitMetadata,
    XmlElement,
    align,
    diff_json,
    diff_lines,
    diff_xml,
    similarity,
)
from docalign.exceptions import (
    ComputationError,
    DocAlignError,
    InvalidInputShapeError,
    InvalidOptionsError,
    ParsingError,
    ValidationError,
)
from docalign.options import AlignerOptions, JsonDiffOptions, LineDiffOptions, SimilarityOptions, XmlDiffOptions
from docalign.progress import ProgressCallback, ProgressEvent

__all__ = [
    "__version__",
    # Comparisons
    "compare_units",
    "compare_pages",
    "compare_text",
    "compare_json_documents",
    "compare_xml_documents",
    "text_to_units",
    "text_to_pages",
    # Differs
    "align",
    "similarity",
    "diff_json",
    "diff_xml",
    "diff_lines",
    # Data model
    "TextUnit",
    "UnitMetadata",
    "XmlElement",
    "ChangeRecord",
    "AlignmentResult",
    "PagedAlignmentResult",
    "LineDiffResult",
    "TreeDiffResult",
    # Options
    "SimilarityOptions",
    "AlignerOptions",
    "JsonDiffOptions",
    "XmlDiffOptions",
    "LineDiffOptions",
    # Progress
    "ProgressCallback",
    "ProgressEvent",
    # Exceptions
    "DocAlignError",
    "ValidationError",
    "InvalidInputShapeError",
    "InvalidOptionsError",
    "ComputationError",
    "ParsingError",
]
