#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/progress.py
"""Progress events for long-running comparisons.

The differs themselves never report progress. The orchestration functions in
:mod:`docalign.compare` emit events between chunks of work (for example after
each page of a paged comparison) to a callback passed in by the caller.

Examples
--------
    >>> from docalign import compare_pages
    >>> from docalign.progress import ProgressEvent
    >>>
    >>> def on_progress(event: ProgressEvent) -> None:
    ...     print(event)
    >>>
    >>> result = compare_pages(old_units, new_units, progress_callback=on_progress)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

logger = logging.getLogger(__name__)

EventType = Literal["started", "item_done", "finished", "error"]


@dataclass
class ProgressEvent:
    """One progress notification from a comparison.

    Parameters
    ----------
    event_type : EventType
        - "started": the comparison has begun; ``total`` is the number of
          chunks when known
        - "item_done": one chunk finished; ``metadata["item_type"]`` names
          the chunk kind (``"page"``, ``"document"``)
        - "finished": the comparison completed; ``current == total``
        - "error": the comparison failed; ``metadata`` holds ``"error"`` and
          ``"stage"``
    message : str
        Human-readable description
    current : int, default 0
        Chunks completed so far
    total : int, default 0
        Total chunks, 0 if unknown
    metadata : dict, default empty
        Event-specific details

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return a one-line description of the event."""
        progress = f"({self.current}/{self.total})" if self.total > 0 else ""
        return f"[{self.event_type.upper()}] {self.message} {progress}".strip()


ProgressCallback = Callable[[ProgressEvent], None]
"""Callable receiving each :class:`ProgressEvent`; its return value is ignored."""


def emit_progress(
    callback: ProgressCallback | None,
    event_type: EventType,
    message: str,
    current: int = 0,
    total: int = 0,
    **metadata: Any,
) -> None:
    """Send an event to ``callback`` if one is given.

    Exceptions raised by the callback are logged and do not interrupt the
    comparison.
    """
    if callback is None:
        return

    try:
        callback(ProgressEvent(event_type, message, current=current, total=total, metadata=metadata))
    except Exception as e:
        logger.warning(f"Progress callback raised exception: {e}", exc_info=True)
