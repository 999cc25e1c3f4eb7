#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/options.py
"""Configuration options for the docalign differs.

All options are frozen dataclasses. Each field carries a ``help`` entry in
its metadata, which the CLI reuses for argument help text. Use
``create_updated()`` to derive a modified copy of an options instance.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from docalign.constants import (
    DEFAULT_ARRAY_STRATEGY,
    DEFAULT_CHILD_STRATEGY,
    DEFAULT_CHARACTER_LEVEL,
    DEFAULT_CONTENT_BONUS,
    DEFAULT_IGNORE_CASE,
    DEFAULT_IGNORE_WHITESPACE,
    DEFAULT_LOOK_AHEAD_LIMIT,
    DEFAULT_ORPHAN_POLICY,
    DEFAULT_PAIR_MODIFIED,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_UNCHANGED_THRESHOLD,
    DEFAULT_USE_CONTENT_BONUS,
    DEFAULT_WORD_LEVEL,
    ArrayStrategy,
    ChildStrategy,
    OrphanPolicy,
)
from docalign.exceptions import InvalidOptionsError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidOptionsError(name, value, f"{name} must be between 0.0 and 1.0, got {value}")


def _check_choice(name: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise InvalidOptionsError(name, value, f"{name} must be one of {', '.join(choices)}; got {value!r}")


@dataclass(frozen=True)
class SimilarityOptions(CloneFrozenMixin):
    """Text normalization applied before two units are scored.

    Parameters
    ----------
    ignore_case : bool, default False
        Lower-case both strings before computing edit distance.
    ignore_whitespace : bool, default False
        Collapse whitespace runs to a single space and trim both strings.

    """

    ignore_case: bool = field(
        default=DEFAULT_IGNORE_CASE,
        metadata={"help": "Compare text case-insensitively"},
    )
    ignore_whitespace: bool = field(
        default=DEFAULT_IGNORE_WHITESPACE,
        metadata={"help": "Collapse whitespace runs and trim before comparing"},
    )


@dataclass(frozen=True)
class AlignerOptions(SimilarityOptions):
    """Options for the look-ahead sequence aligner.

    Parameters
    ----------
    similarity_threshold : float, default 0.8
        Minimum similarity for two units to be paired (as unchanged or modified).
    look_ahead_limit : int, default 10
        Number of units scanned ahead on each side when the cursors disagree.
    unchanged_threshold : float, default 0.98
        Paired units scoring strictly above this are reported as unchanged.
    content_bonus : float, default 0.1
        Bonus added to a fuzzy-search score when both units share a content type.
    use_content_bonus : bool, default True
        Whether the content-type bonus is applied at all.
    orphan_policy : {"remove", "replace"}, default "remove"
        Handling of a unit pair with no match on either side of the window.
        ``"remove"`` reports only the old unit as removed and keeps the new
        cursor in place; ``"replace"`` reports a removal and an addition and
        advances both cursors.
    word_level : bool, default False
        Attach word-level insert/delete operations to modified records.
    character_level : bool, default False
        Attach a position-by-position character comparison to modified records.

    """

    similarity_threshold: float = field(
        default=DEFAULT_SIMILARITY_THRESHOLD,
        metadata={"help": "Minimum similarity (0.0-1.0) for two units to be paired", "type": float},
    )
    look_ahead_limit: int = field(
        default=DEFAULT_LOOK_AHEAD_LIMIT,
        metadata={"help": "Units scanned ahead on each side to resynchronize after an edit", "type": int},
    )
    unchanged_threshold: float = field(
        default=DEFAULT_UNCHANGED_THRESHOLD,
        metadata={"help": "Paired units scoring above this are reported as unchanged", "type": float},
    )
    content_bonus: float = field(
        default=DEFAULT_CONTENT_BONUS,
        metadata={"help": "Score bonus when both units share a content type", "type": float},
    )
    use_content_bonus: bool = field(
        default=DEFAULT_USE_CONTENT_BONUS,
        metadata={"help": "Apply the content-type bonus during look-ahead search"},
    )
    orphan_policy: OrphanPolicy = field(
        default=DEFAULT_ORPHAN_POLICY,
        metadata={"help": "Unmatched pair handling: remove (old side only) or replace", "choices": ["remove", "replace"]},
    )
    word_level: bool = field(
        default=DEFAULT_WORD_LEVEL,
        metadata={"help": "Attach word-level changes to modified records"},
    )
    character_level: bool = field(
        default=DEFAULT_CHARACTER_LEVEL,
        metadata={"help": "Attach character-level comparisons to modified records"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and choices.

        Raises
        ------
        InvalidOptionsError
            If any field value is outside its valid range.

        """
        _check_unit_interval("similarity_threshold", self.similarity_threshold)
        _check_unit_interval("unchanged_threshold", self.unchanged_threshold)
        _check_unit_interval("content_bonus", self.content_bonus)
        if isinstance(self.look_ahead_limit, bool) or not isinstance(self.look_ahead_limit, int):
            raise InvalidOptionsError("look_ahead_limit", self.look_ahead_limit, "look_ahead_limit must be an integer")
        if self.look_ahead_limit < 1:
            raise InvalidOptionsError(
                "look_ahead_limit", self.look_ahead_limit, f"look_ahead_limit must be at least 1, got {self.look_ahead_limit}"
            )
        _check_choice("orphan_policy", self.orphan_policy, ("remove", "replace"))


@dataclass(frozen=True)
class JsonDiffOptions(CloneFrozenMixin):
    """Options for the JSON tree differ.

    Parameters
    ----------
    array_strategy : {"whole", "align"}, default "whole"
        ``"whole"`` reports a length-mismatched array as one modified record.
        ``"align"`` runs arrays of scalars through the sequence aligner and
        reports element-level added/removed/modified records instead.
    aligner : AlignerOptions
        Aligner settings used when ``array_strategy="align"``.

    """

    array_strategy: ArrayStrategy = field(
        default=DEFAULT_ARRAY_STRATEGY,
        metadata={"help": "Length-mismatched arrays: whole (one record) or align", "choices": ["whole", "align"]},
    )
    aligner: AlignerOptions = field(
        default_factory=AlignerOptions,
        metadata={"help": "Aligner settings for array_strategy='align'", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the array strategy."""
        _check_choice("array_strategy", self.array_strategy, ("whole", "align"))


@dataclass(frozen=True)
class XmlDiffOptions(CloneFrozenMixin):
    """Options for the XML tree differ.

    Parameters
    ----------
    child_strategy : {"positional", "align"}, default "positional"
        ``"positional"`` pairs the i-th child of each element.
        ``"align"`` pairs children through the sequence aligner using a
        name/text signature, so an inserted child does not cascade.
    aligner : AlignerOptions
        Aligner settings used when ``child_strategy="align"``.

    """

    child_strategy: ChildStrategy = field(
        default=DEFAULT_CHILD_STRATEGY,
        metadata={"help": "Child pairing: positional or align", "choices": ["positional", "align"]},
    )
    aligner: AlignerOptions = field(
        default_factory=AlignerOptions,
        metadata={"help": "Aligner settings for child_strategy='align'", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the child strategy."""
        _check_choice("child_strategy", self.child_strategy, ("positional", "align"))


@dataclass(frozen=True)
class LineDiffOptions(CloneFrozenMixin):
    """Options for the line differ.

    Parameters
    ----------
    ignore_whitespace : bool, default False
        Compare lines after whitespace normalization (records keep the original text).
    pair_modified : bool, default False
        Merge positional removed/added pairs inside a replaced block into
        ``modified`` rows.

    """

    ignore_whitespace: bool = field(
        default=DEFAULT_IGNORE_WHITESPACE,
        metadata={"help": "Ignore whitespace differences between lines"},
    )
    pair_modified: bool = field(
        default=DEFAULT_PAIR_MODIFIED,
        metadata={"help": "Report replaced line pairs as modified rows"},
    )


__all__ = [
    "CloneFrozenMixin",
    "SimilarityOptions",
    "AlignerOptions",
    "JsonDiffOptions",
    "XmlDiffOptions",
    "LineDiffOptions",
]
