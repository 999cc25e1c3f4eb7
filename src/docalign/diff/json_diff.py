#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/diff/json_diff.py
"""Recursive structural diff of JSON values.

Paths join object keys with dots and append ``[i]`` for array indices. The
root path is the empty string, reported as ``"root"``.

Rules, checked in order at each level:

1. Values equal by JSON semantics produce no record.
2. A ``null`` on either side produces a ``modified`` record.
3. Different JSON kinds produce one ``modified`` record for the whole subtree.
4. Arrays of different length produce one ``modified`` record for the whole
   array (or element records with ``array_strategy="align"``); arrays of
   equal length are compared index by index.
5. Objects are compared over the union of their keys: ``added`` for keys only
   in the new value, ``removed`` for keys only in the old value, recursion
   for shared keys.
6. Any other unequal scalars produce a ``modified`` record.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from docalign.constants import ROOT_PATH_LABEL
from docalign.diff.aligner import SequenceAligner
from docalign.diff.models import ChangeRecord, TextUnit, TreeDiffResult
from docalign.exceptions import InvalidInputShapeError, ParsingError
from docalign.options import JsonDiffOptions


def json_kind(value: Any) -> str:
    """Return the JSON kind of a Python value.

    Raises
    ------
    InvalidInputShapeError
        If the value is not JSON-compatible.

    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    raise InvalidInputShapeError(f"Value of type {type(value).__name__} is not JSON-compatible", parameter_value=value)


def validate_json(value: Any, side: str = "input", path: str = "") -> None:
    """Check that ``value`` is a JSON tree with string object keys.

    Raises
    ------
    InvalidInputShapeError
        At the first non-JSON value or non-string key, naming its path.

    """
    try:
        kind = json_kind(value)
    except InvalidInputShapeError as e:
        raise InvalidInputShapeError(
            f"{side} value at '{path or ROOT_PATH_LABEL}' is not JSON-compatible: {type(value).__name__}",
            side=side,
            parameter_value=value,
            original_error=e,
        ) from e

    if kind == "array":
        for index, item in enumerate(value):
            validate_json(item, side, f"{path}[{index}]")
    elif kind == "object":
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidInputShapeError(
                    f"{side} object at '{path or ROOT_PATH_LABEL}' has non-string key {key!r}",
                    side=side,
                    parameter_value=key,
                )
            validate_json(item, side, _join_key(path, key))


def json_equal(a: Any, b: Any) -> bool:
    """Deep equality that keeps booleans distinct from numbers and treats NaN as equal to NaN."""
    kind = json_kind(a)
    if kind != json_kind(b):
        return False
    if kind == "array":
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if kind == "object":
        return a.keys() == b.keys() and all(json_equal(a[key], b[key]) for key in a)
    if kind == "number" and isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return bool(a == b)


def _join_key(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _display(path: str) -> str:
    return path or ROOT_PATH_LABEL


def diff_json(a: Any, b: Any, path: str = "", options: JsonDiffOptions | None = None) -> list[ChangeRecord]:
    """Return the change records between two JSON values.

    Parameters
    ----------
    a, b : JsonValue
        Old and new values
    path : str, default ""
        Path of ``a``/``b`` within their documents; empty for the root
    options : JsonDiffOptions, optional
        Array comparison strategy

    Returns
    -------
    list of ChangeRecord
        Records in traversal order; empty when the values are equal

    Examples
    --------
        >>> [(c.type, c.position) for c in diff_json({}, {"x": 1})]
        [('added', 'x')]
        >>> [(c.type, c.position) for c in diff_json({"a": [1, 2]}, {"a": [1, 3]})]
        [('modified', 'a[1]')]

    """
    opts = options or JsonDiffOptions()

    if json_equal(a, b):
        return []

    if a is None or b is None:
        return [ChangeRecord("modified", _display(path), old_value=a, new_value=b)]

    kind_a, kind_b = json_kind(a), json_kind(b)
    if kind_a != kind_b:
        return [ChangeRecord("modified", _display(path), old_value=a, new_value=b)]

    if kind_a == "array":
        if len(a) != len(b):
            if opts.array_strategy == "align" and _all_scalars(a) and _all_scalars(b):
                return _align_arrays(a, b, path, opts)
            return [ChangeRecord("modified", _display(path), old_value=a, new_value=b)]
        changes: list[ChangeRecord] = []
        for index, (item_a, item_b) in enumerate(zip(a, b)):
            changes.extend(diff_json(item_a, item_b, f"{path}[{index}]", opts))
        return changes

    if kind_a == "object":
        changes = []
        keys = list(a.keys()) + [key for key in b.keys() if key not in a]
        for key in keys:
            key_path = _join_key(path, key)
            if key not in a:
                changes.append(ChangeRecord("added", key_path, new_value=b[key]))
            elif key not in b:
                changes.append(ChangeRecord("removed", key_path, old_value=a[key]))
            else:
                changes.extend(diff_json(a[key], b[key], key_path, opts))
        return changes

    return [ChangeRecord("modified", _display(path), old_value=a, new_value=b)]


def _all_scalars(values: Any) -> bool:
    return all(json_kind(value) not in ("array", "object") for value in values)


def _align_arrays(a: Any, b: Any, path: str, opts: JsonDiffOptions) -> list[ChangeRecord]:
    """Report element-level changes for scalar arrays of different length."""
    units_a = [TextUnit(json.dumps(value, ensure_ascii=False)) for value in a]
    units_b = [TextUnit(json.dumps(value, ensure_ascii=False)) for value in b]
    records = SequenceAligner(opts.aligner).align_units(units_a, units_b)

    changes: list[ChangeRecord] = []
    for record in records:
        old_index = record.metadata.get("old_index")
        new_index = record.metadata.get("new_index")
        if record.type == "added":
            changes.append(ChangeRecord("added", f"{path}[{new_index}]", new_value=b[new_index]))
        elif record.type == "removed":
            changes.append(ChangeRecord("removed", f"{path}[{old_index}]", old_value=a[old_index]))
        elif not json_equal(a[old_index], b[new_index]):
            changes.append(
                ChangeRecord(
                    "modified",
                    f"{path}[{old_index}]",
                    old_value=a[old_index],
                    new_value=b[new_index],
                    confidence=record.confidence,
                )
            )
    return changes


def count_json_units(value: Any) -> int:
    """Count the leaves of a JSON value; empty containers count as one unit."""
    kind = json_kind(value)
    if kind == "array":
        return sum(count_json_units(item) for item in value) or 1
    if kind == "object":
        return sum(count_json_units(item) for item in value.values()) or 1
    return 1


def _reject_constant(name: str) -> Any:
    raise ParsingError(f"Invalid JSON format: {name} is not a JSON value", parsing_stage="json")


def parse_json(text: str | bytes) -> Any:
    """Parse JSON text into a value.

    Raises
    ------
    ParsingError
        If the text is empty, not valid JSON, or uses ``NaN`` / ``Infinity``.

    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParsingError("JSON document is not valid UTF-8", parsing_stage="json", original_error=e) from e
    if not text.strip():
        raise ParsingError("JSON document is empty", parsing_stage="json")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParsingError(f"Invalid JSON format: {e}", parsing_stage="json", original_error=e) from e


def compare_json(a: Any, b: Any, options: JsonDiffOptions | None = None) -> TreeDiffResult:
    """Validate and diff two JSON values and summarize the outcome.

    Raises
    ------
    InvalidInputShapeError
        If either value is not JSON-compatible.

    """
    validate_json(a, "old")
    validate_json(b, "new")
    changes = diff_json(a, b, options=options)
    return TreeDiffResult(changes=changes, total_units=max(count_json_units(a), count_json_units(b)))
