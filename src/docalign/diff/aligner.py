#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/aligner.py
"""Look-ahead sequence alignment of text units.

The aligner walks both sequences with two cursors. Units at the cursors are
compared directly; when they are not similar enough, a bounded search looks a
few units ahead on both sides for the best fuzzy match and resynchronizes the
cursors there. This keeps a single inserted or deleted line from turning every
following line into a modification, at a cost of O(n * look_ahead_limit)
comparisons.

Examples
--------
Resynchronize after an inserted line:

    >>> from docalign.diff.aligner import align
    >>> result = align(["a", "b", "c"], ["a", "X", "b", "c"])
    >>> [(c.type, c.new_value if c.has_new else c.old_value) for c in result.changes]
    [('unchanged', 'a'), ('added', 'X'), ('unchanged', 'b'), ('unchanged', 'c')]
    >>> result.similarity_percentage
    75

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from docalign.diff.classifier import boosted_similarity, classify, extract_content_key
from docalign.diff.models import AlignmentResult, ChangeRecord, TextUnit, coerce_units
from docalign.diff.similarity import SimilarityScorer
from docalign.diff.word_diff import diff_characters, diff_words
from docalign.options import AlignerOptions


@dataclass(frozen=True)
class _Candidate:
    """Best fuzzy match found in a look-ahead window."""

    index: int
    score: float


class SequenceAligner:
    """Align two sequences of text units into classified change records.

    Parameters
    ----------
    options : AlignerOptions, optional
        Threshold, window and normalization settings.

    """

    def __init__(self, options: AlignerOptions | None = None):
        """Bind the aligner to its options."""
        self.options = options or AlignerOptions()
        self.scorer = SimilarityScorer(self.options)

    def align(self, seq_a: Iterable[Any], seq_b: Iterable[Any]) -> AlignmentResult:
        """Align ``seq_a`` (old) against ``seq_b`` (new).

        Parameters
        ----------
        seq_a, seq_b : iterable
            Units as ``TextUnit`` objects, strings, or mappings with a
            ``"text"`` entry. Both are validated before scanning starts.

        Returns
        -------
        AlignmentResult
            One record per output position plus counts and metrics.

        Raises
        ------
        InvalidInputShapeError
            If any element of either sequence has the wrong shape.

        """
        units_a = coerce_units(seq_a, "old")
        units_b = coerce_units(seq_b, "new")
        return AlignmentResult.from_changes(self.align_units(units_a, units_b))

    def align_units(self, units_a: list[TextUnit], units_b: list[TextUnit]) -> list[ChangeRecord]:
        """Run the two-cursor scan over validated units and return the records."""
        opts = self.options
        types_a = [classify(unit.text) for unit in units_a]
        types_b = [classify(unit.text) for unit in units_b]
        changes: list[ChangeRecord] = []

        i, j = 0, 0
        len_a, len_b = len(units_a), len(units_b)

        while i < len_a or j < len_b:
            if i >= len_a:
                for k in range(j, len_b):
                    changes.append(self._added(len(changes), units_b[k], k, types_b[k]))
                break

            if j >= len_b:
                for k in range(i, len_a):
                    changes.append(self._removed(len(changes), units_a[k], k, types_a[k]))
                break

            score = self.scorer.score(units_a[i].text, units_b[j].text)
            if score >= opts.similarity_threshold:
                changes.append(self._paired(len(changes), units_a[i], units_b[j], i, j, score, types_a[i]))
                i += 1
                j += 1
                continue

            best_b = self._search(units_a[i].text, types_a[i], units_b, types_b, j)
            best_a = self._search(units_b[j].text, types_b[j], units_a, types_a, i)

            if best_b is not None and best_b.score >= opts.similarity_threshold and (
                best_a is None or best_b.score >= best_a.score
            ):
                for k in range(j, best_b.index):
                    changes.append(self._added(len(changes), units_b[k], k, types_b[k]))
                match = units_b[best_b.index]
                raw = self.scorer.score(units_a[i].text, match.text)
                changes.append(self._paired(len(changes), units_a[i], match, i, best_b.index, raw, types_a[i]))
                i += 1
                j = best_b.index + 1
            elif best_a is not None and best_a.score >= opts.similarity_threshold:
                for k in range(i, best_a.index):
                    changes.append(self._removed(len(changes), units_a[k], k, types_a[k]))
                match = units_a[best_a.index]
                raw = self.scorer.score(match.text, units_b[j].text)
                changes.append(self._paired(len(changes), match, units_b[j], best_a.index, j, raw, types_a[best_a.index]))
                j += 1
                i = best_a.index + 1
            elif opts.orphan_policy == "replace":
                changes.append(self._removed(len(changes), units_a[i], i, types_a[i]))
                changes.append(self._added(len(changes), units_b[j], j, types_b[j]))
                i += 1
                j += 1
            else:
                # Unmatched on both sides: the old unit is taken as the orphan
                changes.append(self._removed(len(changes), units_a[i], i, types_a[i]))
                i += 1

        return changes

    def _search(
        self,
        text: str,
        content_type: str,
        units: list[TextUnit],
        types: list[str],
        start: int,
    ) -> _Candidate | None:
        """Return the highest-scoring unit in ``units[start:start + look_ahead_limit]``.

        Ties keep the earliest index.
        """
        opts = self.options
        best: _Candidate | None = None
        end = min(start + opts.look_ahead_limit, len(units))
        for k in range(start, end):
            score = self.scorer.score(text, units[k].text)
            if opts.use_content_bonus:
                score = boosted_similarity(score, content_type, types[k], opts.content_bonus)
            if best is None or score > best.score:
                best = _Candidate(k, score)
        return best

    def _paired(
        self,
        position: int,
        unit_a: TextUnit,
        unit_b: TextUnit,
        index_a: int,
        index_b: int,
        score: float,
        content_type: str,
    ) -> ChangeRecord:
        metadata = _pair_metadata(unit_a, unit_b, index_a, index_b, content_type)
        if score > self.options.unchanged_threshold:
            return ChangeRecord(
                "unchanged",
                position,
                old_value=unit_a.text,
                new_value=unit_b.text,
                confidence=1.0,
                content_type=content_type,
                metadata=metadata,
            )

        word_changes = tuple(diff_words(unit_a.text, unit_b.text)) if self.options.word_level else ()
        char_diff = (
            diff_characters(unit_a.text, unit_b.text, self.options.ignore_whitespace)
            if self.options.character_level
            else None
        )
        return ChangeRecord(
            "modified",
            position,
            old_value=unit_a.text,
            new_value=unit_b.text,
            confidence=score,
            content_type=content_type,
            similarity_percentage=round(score * 100),
            word_changes=word_changes,
            char_diff=char_diff,
            metadata=metadata,
        )

    @staticmethod
    def _added(position: int, unit: TextUnit, index: int, content_type: str) -> ChangeRecord:
        metadata: dict[str, Any] = {"new_index": index, "content_key": extract_content_key(unit.text, content_type)}
        if unit.metadata is not None:
            metadata["new_metadata"] = unit.metadata.to_dict()
        return ChangeRecord("added", position, new_value=unit.text, content_type=content_type, metadata=metadata)

    @staticmethod
    def _removed(position: int, unit: TextUnit, index: int, content_type: str) -> ChangeRecord:
        metadata: dict[str, Any] = {"old_index": index, "content_key": extract_content_key(unit.text, content_type)}
        if unit.metadata is not None:
            metadata["old_metadata"] = unit.metadata.to_dict()
        return ChangeRecord("removed", position, old_value=unit.text, content_type=content_type, metadata=metadata)


def _pair_metadata(
    unit_a: TextUnit, unit_b: TextUnit, index_a: int, index_b: int, content_type: str
) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "old_index": index_a,
        "new_index": index_b,
        "content_key": extract_content_key(unit_a.text, content_type),
    }
    if unit_a.metadata is not None:
        metadata["old_metadata"] = unit_a.metadata.to_dict()
    if unit_b.metadata is not None:
        metadata["new_metadata"] = unit_b.metadata.to_dict()
    return metadata


def align(seq_a: Iterable[Any], seq_b: Iterable[Any], options: AlignerOptions | None = None) -> AlignmentResult:
    """Align two unit sequences with the look-ahead aligner.

    Parameters
    ----------
    seq_a, seq_b : iterable
        Old and new units (``TextUnit``, ``str`` or mapping with ``"text"``)
    options : AlignerOptions, optional
        Defaults to threshold 0.8 and a look-ahead window of 10

    Returns
    -------
    AlignmentResult
        Classified records, counts, similarity percentage and confidence

    """
    return SequenceAligner(options).align(seq_a, seq_b)
