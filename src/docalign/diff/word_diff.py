#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/word_diff.py
"""Word- and character-level comparison of two strings.

Word diffs are LCS insert/delete operations over whitespace tokens. Character
diffs compare the two strings position by position.
"""

from __future__ import annotations

import re
from typing import Sequence

from docalign.diff.models import CharacterDiff, CharChange, WordChange

_WHITESPACE_RUN = re.compile(r"\s+")


def tokenize_words(text: str) -> list[str]:
    """Split text on whitespace, dropping empty tokens."""
    return text.split()


def diff_tokens(old_tokens: Sequence[str], new_tokens: Sequence[str]) -> list[WordChange]:
    """Return the insertions and deletions turning ``old_tokens`` into ``new_tokens``.

    Builds a longest-common-subsequence table and walks it back from the end.
    When both directions keep the LCS length, insertions are preferred, so a
    substituted word appears as a deletion followed by an insertion.

    Parameters
    ----------
    old_tokens, new_tokens : sequence of str
        Token sequences to compare

    Returns
    -------
    list of WordChange
        Operations in document order; ``position`` indexes the token in its
        own sequence (old for deletions, new for insertions)

    """
    m, n = len(old_tokens), len(new_tokens)
    lcs = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if old_tokens[i - 1] == new_tokens[j - 1]:
                lcs[i][j] = lcs[i - 1][j - 1] + 1
            else:
                lcs[i][j] = max(lcs[i - 1][j], lcs[i][j - 1])

    changes: list[WordChange] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old_tokens[i - 1] == new_tokens[j - 1]:
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or lcs[i][j - 1] >= lcs[i - 1][j]):
            changes.append(WordChange("insert", new_tokens[j - 1], j - 1))
            j -= 1
        else:
            changes.append(WordChange("delete", old_tokens[i - 1], i - 1))
            i -= 1

    changes.reverse()
    return changes


def diff_words(old: str, new: str) -> list[WordChange]:
    """Return word-level changes between two strings.

    Examples
    --------
        >>> [(c.type, c.content) for c in diff_words("Total $10", "Total $15")]
        [('delete', '$10'), ('insert', '$15')]

    """
    return diff_tokens(tokenize_words(old), tokenize_words(new))


def summarize_word_changes(changes: Sequence[WordChange]) -> dict[str, int]:
    """Count insertions and deletions."""
    insertions = sum(1 for change in changes if change.type == "insert")
    deletions = sum(1 for change in changes if change.type == "delete")
    return {"insertions": insertions, "deletions": deletions, "total_changes": len(changes)}


def diff_characters(old: str, new: str, ignore_whitespace: bool = False) -> CharacterDiff:
    """Compare two strings character by character at matching positions.

    Each position up to the longer string gets one entry per side: ``"same"``
    when the characters agree, otherwise ``"removed"`` on the old side and
    ``"added"`` on the new side. A side that has run out of characters gets a
    ``"missing"`` entry with an empty ``char``.

    Parameters
    ----------
    old, new : str
        Strings to compare
    ignore_whitespace : bool, default False
        Collapse whitespace runs to one space and trim both ends first. When
        the normalized strings are equal, every entry is ``"same"`` and
        ``has_changes`` is False.

    Returns
    -------
    CharacterDiff
        Per-position entries for both sides

    Examples
    --------
        >>> result = diff_characters("abc", "abd")
        >>> [c.type for c in result.old], [c.type for c in result.new]
        (['same', 'same', 'removed'], ['same', 'same', 'added'])

    """
    if ignore_whitespace:
        old = _WHITESPACE_RUN.sub(" ", old).strip()
        new = _WHITESPACE_RUN.sub(" ", new).strip()

    if old == new:
        same = tuple(CharChange(char, "same") for char in old)
        return CharacterDiff(old=same, new=same, has_changes=False)

    old_entries: list[CharChange] = []
    new_entries: list[CharChange] = []
    for index in range(max(len(old), len(new))):
        old_char = old[index] if index < len(old) else ""
        new_char = new[index] if index < len(new) else ""
        if old_char and old_char == new_char:
            old_entries.append(CharChange(old_char, "same"))
            new_entries.append(CharChange(new_char, "same"))
            continue
        old_entries.append(CharChange(old_char, "removed" if old_char else "missing"))
        new_entries.append(CharChange(new_char, "added" if new_char else "missing"))

    return CharacterDiff(old=tuple(old_entries), new=tuple(new_entries), has_changes=True)
