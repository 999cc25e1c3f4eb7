#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/__init__.py
"""Alignment and diff engines.

Every differ here is a pure function of its inputs: no I/O, no logging and no
shared state, so comparisons may run concurrently from several threads.

Key Features
------------
- Look-ahead sequence alignment that survives inserted and deleted lines
- Content-type hints (totals, taxes, headers, dates) that bias matching
- Recursive JSON and XML tree diffs with path-qualified change records
- Exact line diff built on difflib
- Word-level insert/delete detail for modified units

Examples
--------
Align two versions of a document:
    >>> from docalign.diff import align
    >>> result = align(["Header", "Total $10"], ["Header", "Total $15"])
    >>> result.stats.modified
    1

Diff two JSON values:
    >>> from docalign.diff import diff_json
    >>> [c.position for c in diff_json({"a": 1}, {"a": 2})]
    ['a']

"""

from docalign.diff.aligner import SequenceAligner, align
from docalign.diff.classifier import boosted_similarity, classifier_bonus, classify, extract_content_key
from docalign.diff.json_diff import compare_json, count_json_units, diff_json, parse_json, validate_json
from docalign.diff.line_diff import LineDiffer, diff_lines, unified_diff
from docalign.diff.models import (
    MISSING,
    AlignmentResult,
    AlignmentStats,
    ChangeRecord,
    CharacterDiff,
    CharChange,
    LineDiffResult,
    LineRecord,
    PagedAlignmentResult,
    PageSummary,
    TextUnit,
    TreeDiffResult,
    UnitMetadata,
    WordChange,
    XmlElement,
)
from docalign.diff.similarity import SimilarityScorer, levenshtein_distance, normalize_text, similarity
from docalign.diff.word_diff import diff_characters, diff_words, summarize_word_changes
from docalign.diff.xml_diff import compare_xml, diff_xml, parse_xml, validate_xml

__all__ = [
    "MISSING",
    "AlignmentResult",
    "AlignmentStats",
    "ChangeRecord",
    "CharChange",
    "CharacterDiff",
    "LineDiffResult",
    "LineDiffer",
    "LineRecord",
    "PageSummary",
    "PagedAlignmentResult",
    "SequenceAligner",
    "SimilarityScorer",
    "TextUnit",
    "TreeDiffResult",
    "UnitMetadata",
    "WordChange",
    "XmlElement",
    "align",
    "boosted_similarity",
    "classifier_bonus",
    "classify",
    "compare_json",
    "compare_xml",
    "count_json_units",
    "diff_characters",
    "diff_json",
    "diff_lines",
    "diff_words",
    "diff_xml",
    "extract_content_key",
    "levenshtein_distance",
    "normalize_text",
    "parse_json",
    "parse_xml",
    "similarity",
    "summarize_word_changes",
    "unified_diff",
    "validate_json",
    "validate_xml",
]
