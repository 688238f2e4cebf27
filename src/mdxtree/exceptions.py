#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/exceptions.py
"""Custom exceptions for the mdxtree library.

This module defines specialized exception classes for the error conditions
that can occur while transcoding between markup and the structured tree.

Exception Hierarchy
-------------------
- MdxTreeError (base exception)

  - ValidationError (parameter/option/tree validation)
    - InvalidOptionsError (wrong options class for parser or renderer)
    - UnknownKindError (registry lookup for an unregistered node kind)
    - TreeShapeError (malformed interchange dictionary)

  - ParsingError (markup parsing failures, always carry an offset)
    - UnterminatedBlockError (open tag without its closing tag)
    - SchemaViolationError (component attributes or content break the kind's schema)
    - UnknownAttributeShapeError (attribute value is neither quoted nor an expression)

  - RenderingError (serialization failures when warnings are fatal)

Serialize-time problems are not exceptions: they are reported as
:class:`SerializeWarning` records, logged, and the offending subtree is omitted.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


class MdxTreeError(Exception):
    """Base exception class for all mdxtree-specific errors.

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


class ValidationError(MdxTreeError):
    """Exception raised for invalid input parameters, options or trees.

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


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class UnknownKindError(ValidationError):
    """Exception raised when a node kind or tag has no registered descriptor.

    Parameters
    ----------
    kind : str
        The kind (or tag name) that was looked up

    """

    def __init__(self, kind: str, message: str | None = None):
        """Initialize the unknown kind error."""
        super().__init__(message or f"Unknown node kind: {kind!r}", parameter_name="kind", parameter_value=kind)
        self.kind = kind


class TreeShapeError(ValidationError):
    """Exception raised when an interchange dictionary does not describe a node.

    Parameters
    ----------
    message : str
        Description of the shape problem
    path : str, optional
        Slash-separated position of the offending node (e.g. ``document/2/0``)

    """

    def __init__(self, message: str, path: str | None = None):
        """Initialize the tree shape error."""
        super().__init__(f"{message} (at {path})" if path else message, parameter_name="tree")
        self.path = path


class ParsingError(MdxTreeError):
    """Base exception for markup parsing failures.

    Parse errors always reach the caller: a page that cannot be read must block
    editing rather than show corrupted content.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    offset : int, optional
        Absolute character offset in the source where the problem starts
    line : int, optional
        1-based line number of ``offset``
    column : int, optional
        1-based column number of ``offset``
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        line: int | None = None,
        column: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error with its source position."""
        super().__init__(message, original_error=original_error)
        self.offset = offset
        self.line = line
        self.column = column

    def locate(self, source: str) -> "ParsingError":
        """Fill in ``line`` and ``column`` from ``offset`` against the source text.

        Parameters
        ----------
        source : str
            The full markup text the offset refers to

        Returns
        -------
        ParsingError
            This error, for chaining in ``raise err.locate(text)``

        """
        if self.offset is not None and self.line is None:
            prefix = source[: self.offset]
            self.line = prefix.count("\n") + 1
            self.column = self.offset - (prefix.rfind("\n") + 1) + 1
        return self

    def __str__(self) -> str:
        """Render the message with its position when known."""
        if self.line is not None:
            return f"{self.message} (line {self.line}, column {self.column})"
        if self.offset is not None:
            return f"{self.message} (offset {self.offset})"
        return self.message


class UnterminatedBlockError(ParsingError):
    """Exception raised when a component tag is opened but never closed.

    Parameters
    ----------
    kind : str
        Tag name (or node kind) of the unterminated block
    offset : int
        Absolute offset of the opening tag

    """

    def __init__(self, kind: str, offset: int, message: str | None = None):
        """Initialize the unterminated block error."""
        super().__init__(message or f"Unterminated <{kind}> block", offset=offset)
        self.kind = kind


class SchemaViolationError(ParsingError):
    """Exception raised when a component breaks its kind's attribute or content schema.

    Examples are a featured table whose data rows do not match the header width,
    or a label group with no items.

    Parameters
    ----------
    kind : str
        The node kind whose schema was violated
    message : str
        Description of the violation
    offset : int, optional
        Absolute offset of the component in the source

    """

    def __init__(self, kind: str, message: str, offset: int | None = None):
        """Initialize the schema violation error."""
        super().__init__(f"{kind}: {message}", offset=offset)
        self.kind = kind


class UnknownAttributeShapeError(ParsingError):
    """Exception raised when an attribute value is neither quoted nor an expression.

    Parameters
    ----------
    name : str
        Attribute name
    offset : int
        Absolute offset of the attribute value

    """

    def __init__(self, name: str, offset: int, message: str | None = None):
        """Initialize the unknown attribute shape error."""
        super().__init__(message or f"Attribute {name!r} has an unsupported value shape", offset=offset)
        self.name = name


class RenderingError(MdxTreeError):
    """Exception raised when serialization is configured to fail on warnings.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    warnings : list of SerializeWarning, optional
        The warnings collected before the failure

    """

    def __init__(self, message: str, warnings: list["SerializeWarning"] | None = None):
        """Initialize the rendering error."""
        super().__init__(message)
        self.warnings = list(warnings or [])


WarningCode = Literal["unknown_kind", "malformed_composite", "invalid_placement"]


@dataclass(frozen=True)
class SerializeWarning:
    """A problem found while serializing a tree.

    The serializer never raises for these; it logs them, omits the offending
    subtree and keeps going, since losing one block is better than losing a page.

    Parameters
    ----------
    code : {"unknown_kind", "malformed_composite", "invalid_placement"}
        Warning category
    kind : str
        Kind of the omitted node
    path : str
        Slash-separated position of the omitted node
    message : str
        Human-readable description

    """

    code: WarningCode
    kind: str
    path: str
    message: str

    def __str__(self) -> str:
        """Format the warning for logs."""
        return f"[{self.code}] {self.kind} at {self.path}: {self.message}"


# Short names used throughout the documentation
ParseError = ParsingError
UnterminatedBlock = UnterminatedBlockError
SchemaViolation = SchemaViolationError
UnknownAttributeShape = UnknownAttributeShapeError
