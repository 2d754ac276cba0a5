#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/parsers/markdown.py
"""Markdown to canonical AST converter.

Markdown is tokenized with mistune, the tokens are walked into a
CommonMark-shaped event stream, and the stream is folded into a tree by
:class:`~markbridge.ast.builder.AstStreamBuilder`. The same builder also
accepts CommonMark XML through :func:`commonmark_xml_to_ast`.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Iterable, Union

from markbridge.ast.builder import AstStreamBuilder
from markbridge.ast.nodes import Document
from markbridge.options.markdown import MarkdownParserOptions
from markbridge.parsers.base import BaseParser
from markbridge.parsers.event_sources import MarkdownEventSource, xml_events

logger = logging.getLogger(__name__)


class MarkdownToAstConverter(BaseParser):
    r"""Convert Markdown to the canonical AST.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> converter = MarkdownToAstConverter()
        >>> doc = converter.parse("# Hello\n\nThis is **bold**.")
        >>> [type(child).__name__ for child in doc.children]
        ['Heading', 'Paragraph']

    With tag metadata for HTML:

        >>> options = MarkdownParserOptions(tag_info=True)
        >>> tree = MarkdownToAstConverter(options).parse_to_dict('<div class="x">\nhi\n</div>')
        >>> tree["nodes"][0]["tag"]["tagName"]
        'div'

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options
        self._source = MarkdownEventSource()

    def _build_dict(self, input_data: Union[str, Path, IO[bytes], IO[str], bytes]) -> dict[str, Any]:
        """Tokenize markdown and build the ``$class`` tagged tree.

        Parameters
        ----------
        input_data : str, Path, IO[bytes], IO[str] or bytes
            Markdown content, a path to a markdown file, or a stream

        Returns
        -------
        dict
            Root Document node

        """
        markdown_content = self._load_text_content(input_data)

        builder = AstStreamBuilder(self.options)
        builder.feed(self._source.events(markdown_content))
        tree = builder.result
        logger.debug("Parsed markdown into %d top-level nodes", len(tree.get("nodes", [])))
        return tree


def markdown_to_ast(markdown_content: str, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert markdown to a typed Document.

    Parameters
    ----------
    markdown_content : str
        Markdown text to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> doc = markdown_to_ast("# Hello\n\nWorld")
    >>> len(doc.children)
    2

    """
    converter = MarkdownToAstConverter(options)
    return converter.parse(markdown_content)


def commonmark_xml_to_dict(
    xml: Union[str, Iterable[str]], options: MarkdownParserOptions | None = None
) -> dict[str, Any]:
    """Convert a CommonMark XML document to a ``$class`` tagged tree.

    Parameters
    ----------
    xml : str or iterable of str
        XML text, whole or in chunks
    options : MarkdownParserOptions or None, default = None
        Text handling options; ``validate`` runs the result through the schema layer

    Returns
    -------
    dict
        Root Document node

    Raises
    ------
    xml.etree.ElementTree.ParseError
        If the XML is not well formed
    ParsingError
        If the elements do not nest into a single document
    ValidationError
        If validation is enabled and the tree does not match the canonical model

    """
    BaseParser._validate_options_type(options, MarkdownParserOptions, "commonmark_xml")
    options = options or MarkdownParserOptions()

    builder = AstStreamBuilder(options)
    builder.feed(xml_events(xml))
    tree = builder.result
    if options.validate:
        BaseParser._to_document(tree)
    return tree


def commonmark_xml_to_ast(xml: Union[str, Iterable[str]], options: MarkdownParserOptions | None = None) -> Document:
    """Convert a CommonMark XML document to a typed Document."""
    BaseParser._validate_options_type(options, MarkdownParserOptions, "commonmark_xml")
    options = (options or MarkdownParserOptions()).create_updated(validate=False)
    return BaseParser._to_document(commonmark_xml_to_dict(xml, options))
