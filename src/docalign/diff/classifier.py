#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/classifier.py
"""Heuristic content-type labels for text units.

Labels bias the aligner's look-ahead search: two units sharing a label get a
small score bonus. A label is never a reason to pair or separate units on its
own.

Labels are checked in priority order and the first match wins:

1. ``financial_subtotal``
2. ``financial_tax``
3. ``financial_total``
4. ``financial_item_price``
5. ``financial_line_item``
6. ``header``
7. ``contact``
8. ``date``
9. ``label``
10. ``content`` (fallback)
"""

from __future__ import annotations

import re

from docalign.constants import CONTENT_KEY_LENGTH, DEFAULT_CONTENT_BONUS, LABEL_MAX_LENGTH, ContentType

# Optional currency symbol, then a number with thousands separators and decimals
_AMOUNT = r"[$€£¥]?\s*\d[\d,]*(?:\.\d+)?"
# Stricter form for unlabelled line items: a currency symbol or two decimals
_CURRENCY_AMOUNT = r"(?:[$€£¥]\s*\d[\d,]*(?:\.\d+)?|\d[\d,]*\.\d{2})"

_SUBTOTAL_RE = re.compile(rf"\bsub[\s-]?total\b\s*:?\s*{_AMOUNT}", re.IGNORECASE)
_TAX_RE = re.compile(
    rf"\b(?:tax|vat|gst|hst)\b\s*(?:\(\s*[\d.]+\s*%?\s*\)|[\d.]+\s*%)?\s*:?\s*{_AMOUNT}",
    re.IGNORECASE,
)
_TOTAL_RE = re.compile(rf"\b(?:grand\s+)?total\b(?:\s+due)?\s*:?\s*{_AMOUNT}", re.IGNORECASE)
_ITEM_PRICE_RE = re.compile(
    rf"\b(?:unit\s+)?(?:price|amount|cost|fee|discount)\b\s*:?\s*{_AMOUNT}",
    re.IGNORECASE,
)
_LINE_ITEM_RE = re.compile(
    rf"^(?P<description>.*?[A-Za-z].*?)\s+{_CURRENCY_AMOUNT}(?:\s+{_CURRENCY_AMOUNT})?$",
)

_HEADER_RE = re.compile(
    r"^(?:\d+(?:\.\d+)*\.?\s+\S"
    r"|(?:section|chapter|article|part|appendix)\s+[\dIVXLC]+\b"
    r"|[IVXLC]+\.\s+\S)",
    re.IGNORECASE,
)
_CONTACT_PREFIX_RE = re.compile(
    r"^(?:name|address|phone|tel|telephone|mobile|email|e-mail|fax|contact)\b",
    re.IGNORECASE,
)
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b|\b\d{4}-\d{2}-\d{2}\b")

_FINANCIAL_KEYS: dict[str, str] = {
    "financial_subtotal": "subtotal",
    "financial_tax": "tax",
    "financial_total": "total",
    "financial_item_price": "price",
}


def classify(text: str) -> ContentType:
    """Return the content-type label for a line of text.

    Parameters
    ----------
    text : str
        The unit's text

    Returns
    -------
    ContentType
        First matching label in priority order, ``"content"`` when none match

    Examples
    --------
        >>> classify("Subtotal: $1,200.00")
        'financial_subtotal'
        >>> classify("Item A $10")
        'financial_line_item'
        >>> classify("INVOICE")
        'label'

    """
    stripped = text.strip()
    if not stripped:
        return "content"

    if _SUBTOTAL_RE.search(stripped):
        return "financial_subtotal"
    if _TAX_RE.search(stripped):
        return "financial_tax"
    if _TOTAL_RE.search(stripped):
        return "financial_total"
    if _ITEM_PRICE_RE.search(stripped):
        return "financial_item_price"
    if _LINE_ITEM_RE.match(stripped):
        return "financial_line_item"

    if _HEADER_RE.match(stripped):
        return "header"
    if _CONTACT_PREFIX_RE.match(stripped) or _EMAIL_RE.search(stripped):
        return "contact"
    if _DATE_RE.search(stripped):
        return "date"
    if len(stripped) <= LABEL_MAX_LENGTH and any(c.isalpha() for c in stripped) and stripped == stripped.upper():
        return "label"

    return "content"


def extract_content_key(text: str, content_type: ContentType | None = None) -> str:
    """Return a short key identifying what a unit is about.

    Financial totals share one key per keyword regardless of amount, line
    items are keyed by their description, and everything else by its first
    characters.

    Parameters
    ----------
    text : str
        The unit's text
    content_type : ContentType, optional
        Pre-computed label; classified on demand when omitted

    Returns
    -------
    str
        Lower-cased key

    """
    label = content_type or classify(text)
    normalized = text.strip().lower()

    if label in _FINANCIAL_KEYS:
        return _FINANCIAL_KEYS[label]
    if label == "financial_line_item":
        match = _LINE_ITEM_RE.match(text.strip())
        return match.group("description").strip().lower() if match else normalized
    if label == "contact":
        email = _EMAIL_RE.search(normalized)
        if email:
            return email.group(0)
        return re.sub(r"[\s()\-]", "", normalized)
    return normalized[:CONTENT_KEY_LENGTH]


def classifier_bonus(type_a: str, type_b: str, bonus: float = DEFAULT_CONTENT_BONUS) -> float:
    """Return ``bonus`` when both labels agree, otherwise 0.0."""
    return bonus if type_a == type_b else 0.0


def boosted_similarity(score: float, type_a: str, type_b: str, bonus: float = DEFAULT_CONTENT_BONUS) -> float:
    """Add the agreement bonus to ``score``, capped at 1.0."""
    return min(1.0, score + classifier_bonus(type_a, type_b, bonus))
