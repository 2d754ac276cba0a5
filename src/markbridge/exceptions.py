#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the markbridge library.

This module defines the exception classes raised while converting documents
between the editor tree, the canonical AST and markdown text.

Exception Hierarchy
-------------------
- MarkbridgeError (base exception)

  - ValidationError (schema and parameter validation)
    - InvalidOptionsError (wrong options class for a parser or renderer)

  - ParsingError (event stream and editor tree failures)
    - UnhandledNodeError (node type with no known mapping)

  - RenderingError (markdown output failures)

"""

from typing import Any


class MarkbridgeError(Exception):
    """Base exception class for all markbridge-specific errors.

    Catching this will catch every error raised deliberately by the library.
    Errors raised by collaborating libraries (the markdown tokenizer, the XML
    parser) are propagated unchanged and are not wrapped.

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


class ValidationError(MarkbridgeError):
    """Exception raised when a tree or a parameter fails validation.

    Raised by the schema layer when a ``$class`` tagged tree does not match
    the canonical model (unknown class, unknown or missing property, wrong
    property type), and by decoders that reject malformed input.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid property or parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic property or parameter
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
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

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


class ParsingError(MarkbridgeError):
    """Exception raised when building a canonical tree fails.

    Raised for structurally invalid input, such as a close event with no
    open frame on the builder stack, or an editor node that cannot be mapped.
    A conversion that raises this never returns a partial tree.

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


class UnhandledNodeError(ParsingError):
    """Exception raised for a node whose type has no known mapping.

    Parameters
    ----------
    node : any
        The offending node (raw dict or decoded node)
    message : str, optional
        Custom error message
    parsing_stage : str, optional
        The stage of parsing where the node was met

    Attributes
    ----------
    node : any
        The node that could not be processed

    """

    def __init__(self, node: Any, message: str | None = None, parsing_stage: str | None = None):
        """Initialize the unhandled node error."""
        if message is None:
            message = f"Unhandled node: {node!r}"
        super().__init__(message, parsing_stage=parsing_stage)
        self.node = node


class RenderingError(MarkbridgeError):
    """Exception raised when markdown rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    Attributes
    ----------
    rendering_stage : str or None
        Where in the rendering process the error occurred

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage
