#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/parsers/base.py
"""Base class for parsers producing the canonical AST.

Every parser converts its input into a ``$class`` tagged dict first and
instantiates typed nodes from it. Subclasses implement ``_build_dict``;
``parse_to_dict`` and ``parse`` are provided here.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Optional, Union

import chardet

from markbridge.ast.nodes import Document
from markbridge.ast.serialization import dict_to_ast
from markbridge.constants import CLASS_KEY
from markbridge.exceptions import InvalidOptionsError, ValidationError
from markbridge.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

# utf-8-sig also decodes plain utf-8 and drops a leading BOM
_UTF8_ENCODING = "utf-8-sig"
_FINAL_ENCODING = "latin-1"
_DETECTION_SAMPLE_SIZE = 8192
_DETECTION_CONFIDENCE = 0.7


class BaseParser(ABC):
    """Abstract base class for canonical AST parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parser-specific configuration options

    Examples
    --------
    Creating a custom parser:

        >>> class EmptyParser(BaseParser):
        ...     def _build_dict(self, input_data):
        ...         return {"$class": "org.accordproject.commonmark.Document"}
        >>> EmptyParser().parse("ignored").children
        []

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options = options or BaseParserOptions()

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def _build_dict(self, input_data: Any) -> dict[str, Any]:
        """Convert input into an unvalidated ``$class`` tagged tree."""

    def parse_to_dict(self, input_data: Any) -> dict[str, Any]:
        """Parse input into a ``$class`` tagged canonical AST.

        When ``options.validate`` is set the result has passed the schema
        layer before it is returned.

        Parameters
        ----------
        input_data : Any
            Parser-specific input

        Returns
        -------
        dict
            Root Document node

        Raises
        ------
        ParsingError
            If the input cannot be converted
        ValidationError
            If validation is enabled and the result is not a valid tree

        """
        tree = self._build_dict(input_data)
        if self.options.validate:
            self._to_document(tree)
        return tree

    def parse(self, input_data: Any) -> Document:
        """Parse input into a typed Document.

        Typed nodes are always instantiated through the schema layer, so
        this validates regardless of ``options.validate``.

        Raises
        ------
        ParsingError
            If the input cannot be converted
        ValidationError
            If the converted tree does not match the canonical model

        """
        return self._to_document(self._build_dict(input_data))

    @staticmethod
    def _to_document(tree: dict[str, Any]) -> Document:
        document = dict_to_ast(tree)
        if not isinstance(document, Document):
            raise ValidationError(
                f"Root node must be a Document, got {type(document).__name__}",
                parameter_name=CLASS_KEY,
                parameter_value=tree.get(CLASS_KEY),
            )
        return document

    @staticmethod
    def _load_text_content(input_data: Union[str, Path, IO[bytes], IO[str], bytes]) -> str:
        """Load text from a string, path, bytes or stream.

        A ``str`` is always treated as content, never as a path; wrap paths
        in :class:`pathlib.Path`.

        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, Path):
            return decode_text(input_data.read_bytes())
        if isinstance(input_data, (bytes, bytearray)):
            return decode_text(bytes(input_data))
        if hasattr(input_data, "read"):
            content = input_data.read()
            return content if isinstance(content, str) else decode_text(content)
        raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def detect_encoding(data: bytes) -> Optional[str]:
    """Guess the encoding of ``data`` with chardet.

    Returns None when chardet has no answer or its confidence is below
    the detection threshold.
    """
    result = chardet.detect(data[:_DETECTION_SAMPLE_SIZE])
    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: No encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug("chardet detected encoding: %s (confidence: %.2f)", encoding, confidence)
    if confidence < _DETECTION_CONFIDENCE:
        logger.debug("chardet confidence %.2f below threshold %.2f", confidence, _DETECTION_CONFIDENCE)
        return None
    return encoding


def decode_text(data: bytes) -> str:
    """Decode markdown or JSON bytes to text.

    Valid UTF-8 wins (a leading BOM is dropped). Anything else is decoded
    with the encoding chardet detects, and latin-1 when detection is
    inconclusive, since latin-1 accepts every byte sequence.

    Parameters
    ----------
    data : bytes
        Raw input bytes

    Returns
    -------
    str
        Decoded text

    """
    try:
        return data.decode(_UTF8_ENCODING)
    except UnicodeDecodeError as e:
        logger.debug("Input is not UTF-8: %s", e)

    detected = detect_encoding(data)
    if detected:
        try:
            text = data.decode(detected)
            logger.debug("Decoded input with chardet-detected encoding: %s", detected)
            return text
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug("Failed to decode with chardet-detected encoding %s: %s", detected, e)

    logger.debug("Decoding input with %s", _FINAL_ENCODING)
    return data.decode(_FINAL_ENCODING)
