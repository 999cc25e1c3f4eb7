#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docalign/logging_utils.py
"""Logging setup for the docalign command line.

Handlers are installed on the ``docalign`` package logger rather than the root
logger, so embedding applications keep their own logging configuration.
Records still propagate, which lets pytest's ``caplog`` and host handlers see
them. Handlers installed here are tagged and replaced on each call, so
configuring twice never duplicates output.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "docalign"

TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_docalign_handler"


def resolve_level(log_level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value (INFO if unknown)."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def build_formatter(trace_mode: bool) -> logging.Formatter:
    """Return the timestamped trace formatter or the plain ``LEVEL: message`` one."""
    if trace_mode:
        return logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    return logging.Formatter(PLAIN_FORMAT)


def _tag(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_TAG, True)
    return handler


def remove_handlers(logger: logging.Logger) -> None:
    """Detach and close the handlers previously installed by ``configure_logging``."""
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    log_level: int | str = logging.WARNING,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install a stderr handler (and optional file handler) on the package logger.

    Parameters
    ----------
    log_level : int | str, default WARNING
        Numeric level or level name.
    log_file : str, optional
        Also append log records to this file. File records always use the
        timestamped trace format.
    trace_mode : bool, default False
        Force DEBUG level and include timestamps and logger names on stderr.

    Returns
    -------
    logging.Logger
        The ``docalign`` logger.

    """
    level = logging.DEBUG if trace_mode else resolve_level(log_level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    remove_handlers(logger)
    logger.setLevel(level)

    logger.addHandler(_tag(logging.StreamHandler(sys.stderr), level, build_formatter(trace_mode)))

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            logger.addHandler(_tag(file_handler, level, build_formatter(True)))
            logger.debug("Logging to file: %s", log_file)

    return logger
