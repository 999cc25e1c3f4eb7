#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the docalign library.

This module centralizes the thresholds, sentinels and literal types shared by
the differs, the options classes and the CLI.

Constants are organized by category:
1. Type Definitions - Literal types used across the package
2. Similarity and Alignment Defaults
3. Tree Diff Defaults and Display Sentinels
4. CLI Exit Codes
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ChangeType = Literal["added", "removed", "modified", "unchanged", "attribute_changed"]
LineStatus = Literal["added", "removed", "modified", "unchanged"]
WordChangeType = Literal["insert", "delete"]
CharChangeType = Literal["same", "added", "removed", "missing"]

ContentType = Literal[
    "financial_subtotal",
    "financial_tax",
    "financial_total",
    "financial_item_price",
    "financial_line_item",
    "header",
    "contact",
    "date",
    "label",
    "content",
]

# What to do when neither side finds a match inside the look-ahead window
OrphanPolicy = Literal["remove", "replace"]

# How to compare JSON arrays whose lengths differ
ArrayStrategy = Literal["whole", "align"]

# How to pair XML child elements
ChildStrategy = Literal["positional", "align"]

# =============================================================================
# Similarity and Alignment Defaults
# =============================================================================

DEFAULT_IGNORE_CASE = False
DEFAULT_IGNORE_WHITESPACE = False

DEFAULT_SIMILARITY_THRESHOLD = 0.8
DEFAULT_LOOK_AHEAD_LIMIT = 10

# Paired units scoring above this are reported as unchanged rather than modified
DEFAULT_UNCHANGED_THRESHOLD = 0.98

# Added to a fuzzy-search score when both units share a content type
DEFAULT_CONTENT_BONUS = 0.1
DEFAULT_USE_CONTENT_BONUS = True

DEFAULT_ORPHAN_POLICY: OrphanPolicy = "remove"
DEFAULT_WORD_LEVEL = False
DEFAULT_CHARACTER_LEVEL = False

# Labels shorter than this (and fully upper-case) classify as "label"
LABEL_MAX_LENGTH = 30

# Characters kept from a generic unit when building its content key
CONTENT_KEY_LENGTH = 50

# =============================================================================
# Tree Diff Defaults and Display Sentinels
# =============================================================================

DEFAULT_ARRAY_STRATEGY: ArrayStrategy = "whole"
DEFAULT_CHILD_STRATEGY: ChildStrategy = "positional"
DEFAULT_PAIR_MODIFIED = False

# Display name of the empty root path
ROOT_PATH_LABEL = "root"

# Value shown for an attribute that one side lacks
UNDEFINED_ATTRIBUTE = "(undefined)"

# Value shown for an element whose direct text is empty
EMPTY_TEXT = "(empty)"

# Separates pages in plain-text input handed to the CLI "pages" mode
PAGE_SEPARATOR = "\f"

# =============================================================================
# CLI Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
