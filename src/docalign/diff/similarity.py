#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/similarity.py
"""Normalized edit-distance similarity between two strings.

The score is ``(max_len - distance) / max_len`` where ``distance`` is the
Levenshtein distance (unit cost insert/delete/substitute, no transposition)
between the normalized strings. Scores are symmetric and bounded to [0, 1].
"""

from __future__ import annotations

import re

from docalign.options import SimilarityOptions

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and strip the ends.

    Parameters
    ----------
    text : str
        Text to normalize

    Returns
    -------
    str
        Normalized text with consistent whitespace

    """
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: str, ignore_case: bool = False, ignore_whitespace: bool = False) -> str:
    """Apply the requested normalization rules to ``text``."""
    if ignore_whitespace:
        text = normalize_whitespace(text)
    if ignore_case:
        text = text.lower()
    return text


def levenshtein_distance(a: str, b: str) -> int:
    """Compute the Levenshtein edit distance between two strings.

    Fills the standard dynamic-programming table row by row, keeping only the
    previous row. Every insertion, deletion and substitution costs 1.

    Parameters
    ----------
    a, b : str
        Strings to compare

    Returns
    -------
    int
        Minimum number of single-character edits turning ``a`` into ``b``

    """
    if a == b:
        return 0
    # Iterate over the longer string so the row stays short
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous_row = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current_row = [i]
        for j, char_b in enumerate(b, start=1):
            insertion = current_row[j - 1] + 1
            deletion = previous_row[j] + 1
            substitution = previous_row[j - 1] + (char_a != char_b)
            current_row.append(min(insertion, deletion, substitution))
        previous_row = current_row
    return previous_row[-1]


def similarity(a: str, b: str, ignore_case: bool = False, ignore_whitespace: bool = False) -> float:
    """Return the normalized similarity of two strings in [0, 1].

    Parameters
    ----------
    a, b : str
        Strings to compare
    ignore_case : bool, default False
        Lower-case both strings first
    ignore_whitespace : bool, default False
        Collapse whitespace runs and trim both strings first

    Returns
    -------
    float
        1.0 for strings equal after normalization (including two empty
        strings), otherwise ``(max_len - distance) / max_len``

    Examples
    --------
        >>> similarity("kitten", "sitting")
        0.5714285714285714
        >>> similarity("Total  $10", "total $10", ignore_case=True, ignore_whitespace=True)
        1.0

    """
    norm_a = normalize_text(a, ignore_case=ignore_case, ignore_whitespace=ignore_whitespace)
    norm_b = normalize_text(b, ignore_case=ignore_case, ignore_whitespace=ignore_whitespace)

    if norm_a == norm_b:
        return 1.0

    max_len = max(len(norm_a), len(norm_b))
    if max_len == 0:
        return 1.0

    distance = levenshtein_distance(norm_a, norm_b)
    return (max_len - distance) / max_len


class SimilarityScorer:
    """Similarity function bound to a fixed set of normalization options.

    Parameters
    ----------
    options : SimilarityOptions, optional
        Normalization settings; defaults to exact comparison.

    """

    def __init__(self, options: SimilarityOptions | None = None):
        """Store the normalization options."""
        self.options = options or SimilarityOptions()

    def normalize(self, text: str) -> str:
        """Normalize ``text`` with the bound options."""
        return normalize_text(
            text,
            ignore_case=self.options.ignore_case,
            ignore_whitespace=self.options.ignore_whitespace,
        )

    def score(self, a: str, b: str) -> float:
        """Return the similarity of ``a`` and ``b`` under the bound options."""
        return similarity(
            a,
            b,
            ignore_case=self.options.ignore_case,
            ignore_whitespace=self.options.ignore_whitespace,
        )

    __call__ = score
