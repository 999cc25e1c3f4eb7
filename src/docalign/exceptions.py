#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the docalign library.

This module defines specialized exception classes for the error conditions
that can occur while validating comparison inputs, running a differ, or
parsing JSON/XML text into comparable trees.

Exception Hierarchy
-------------------
- DocAlignError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidInputShapeError (sequence element or tree lacks the expected shape)
    - InvalidOptionsError (option values outside their valid range)

  - ComputationError (unexpected internal failure during a comparison)

  - ParsingError (JSON/XML text could not be parsed)

"""

from typing import Any


class DocAlignError(Exception):
    """Base exception class for all docalign-specific errors.

    Catching this will catch every error raised deliberately by the library.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(DocAlignError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidInputShapeError(ValidationError):
    """Exception raised when a comparison input does not have the expected shape.

    Raised eagerly, before any scanning starts, when an element of a unit
    sequence is neither a ``TextUnit``, a string, nor a mapping with a string
    ``"text"`` entry, or when an XML tree node is not an ``XmlElement``.

    Parameters
    ----------
    message : str
        Description of the shape problem
    side : str, optional
        Which input was malformed ("old" or "new")
    index : int, optional
        Position of the offending element within its sequence
    parameter_value : any, optional
        The offending element
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        side: str | None = None,
        index: int | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the input shape error."""
        super().__init__(
            message, parameter_name=side, parameter_value=parameter_value, original_error=original_error
        )
        self.side = side
        self.index = index


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object holds an out-of-range value.

    Parameters
    ----------
    option_name : str
        Name of the offending option field
    option_value : any
        The value that failed validation
    message : str, optional
        Custom error message. If not provided, a generic one is generated
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        option_name: str,
        option_value: Any,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = f"Invalid value for option '{option_name}': {option_value!r}"
        super().__init__(
            message, parameter_name=option_name, parameter_value=option_value, original_error=original_error
        )


class ComputationError(DocAlignError):
    """Exception raised when a comparison fails unexpectedly.

    The orchestration layer wraps any non-docalign exception escaping a differ
    in this class so callers see a single failure instead of partial output.

    Parameters
    ----------
    message : str
        Description of the failure
    stage : str, optional
        The comparison stage that failed (e.g. "align", "json", "xml")
    original_error : Exception, optional
        The underlying exception

    Attributes
    ----------
    stage : str or None
        Where the comparison failed

    """

    def __init__(self, message: str, stage: str | None = None, original_error: Exception | None = None):
        """Initialize the computation error."""
        super().__init__(message, original_error)
        self.stage = stage


class ParsingError(DocAlignError):
    """Exception raised when JSON or XML text cannot be parsed into a tree.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    Attributes
    ----------
    parsing_stage : str or None
        Where in the parsing process the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


__all__ = [
    "DocAlignError",
    "ValidationError",
    "InvalidInputShapeError",
    "InvalidOptionsError",
    "ComputationError",
    "ParsingError",
]
