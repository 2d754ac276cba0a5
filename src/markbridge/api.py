#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/api.py
"""High-level conversion functions.

The canonical AST is the hub: markdown and editor trees are parsed into it,
and it is rendered back to markdown. Every function accepts either a
pre-built options object or individual option values as keyword arguments;
keyword arguments override the matching fields of the options object.

Examples
--------
    >>> from markbridge import editor_to_markdown
    >>> editor_to_markdown({"nodes": [{"type": "paragraph", "nodes": [
    ...     {"object": "text", "text": "hi", "marks": [{"type": "italic"}]}]}]})
    '*hi*'

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Iterable, Mapping, Optional, TypeVar, Union

from markbridge.ast.nodes import Document
from markbridge.options.base import CloneFrozenMixin
from markbridge.options.editor import EditorParserOptions
from markbridge.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from markbridge.parsers.editor import EditorToAstConverter
from markbridge.parsers.markdown import MarkdownToAstConverter, commonmark_xml_to_ast
from markbridge.renderers.markdown import MarkdownRenderer

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound=CloneFrozenMixin)

MarkdownSource = Union[str, Path, IO[bytes], IO[str], bytes]


def _create_options(options_class: type[OptionsT], options: Optional[OptionsT], **kwargs: Any) -> OptionsT:
    """Build an options object from a base object and keyword overrides.

    Keyword arguments that are not fields of ``options_class`` are skipped
    with a debug message.

    """
    if options is not None and not isinstance(options, options_class):
        # the parser or renderer rejects it with InvalidOptionsError
        return options
    option_names = options_class.field_names()
    valid_kwargs = {key: value for key, value in kwargs.items() if key in option_names}
    missing = [key for key in kwargs if key not in option_names]
    if missing:
        logger.debug("Skipping unknown %s options: %s", options_class.__name__, missing)

    if options is None:
        return options_class(**valid_kwargs)
    return options.create_updated(**valid_kwargs) if valid_kwargs else options


def from_markdown(
    source: MarkdownSource, *, options: Optional[MarkdownParserOptions] = None, **kwargs: Any
) -> Document:
    """Parse markdown into a typed canonical AST.

    Parameters
    ----------
    source : str, Path, IO or bytes
        Markdown content; a ``str`` is always content, use ``Path`` for files
    options : MarkdownParserOptions, optional
        Parser options
    kwargs : Any
        Individual parser options (``trim_text``, ``tag_info``)

    Returns
    -------
    Document
        Canonical AST

    """
    parser_options = _create_options(MarkdownParserOptions, options, **kwargs)
    return MarkdownToAstConverter(parser_options).parse(source)


def markdown_to_dict(
    source: MarkdownSource, *, options: Optional[MarkdownParserOptions] = None, **kwargs: Any
) -> dict[str, Any]:
    """Parse markdown into a ``$class`` tagged canonical AST."""
    parser_options = _create_options(MarkdownParserOptions, options, **kwargs)
    return MarkdownToAstConverter(parser_options).parse_to_dict(source)


def from_commonmark_xml(
    xml: Union[str, Iterable[str]], *, options: Optional[MarkdownParserOptions] = None, **kwargs: Any
) -> Document:
    """Parse a CommonMark XML document into a typed canonical AST."""
    parser_options = _create_options(MarkdownParserOptions, options, **kwargs)
    return commonmark_xml_to_ast(xml, parser_options)


def from_editor(
    editor_value: Union[Mapping[str, Any], str, Path, bytes],
    *,
    options: Optional[EditorParserOptions] = None,
    **kwargs: Any,
) -> Document:
    """Convert an editor tree into a typed canonical AST.

    Parameters
    ----------
    editor_value : dict, str, Path or bytes
        Editor value, or JSON text holding one
    options : EditorParserOptions, optional
        Parser options

    Returns
    -------
    Document
        Canonical AST

    Raises
    ------
    UnhandledNodeError
        If an editor node type has no mapping
    ValidationError
        If the editor value is malformed

    """
    parser_options = _create_options(EditorParserOptions, options, **kwargs)
    return EditorToAstConverter(parser_options).parse(editor_value)


def editor_to_dict(
    editor_value: Union[Mapping[str, Any], str, Path, bytes],
    *,
    options: Optional[EditorParserOptions] = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Convert an editor tree into a ``$class`` tagged canonical AST."""
    parser_options = _create_options(EditorParserOptions, options, **kwargs)
    return EditorToAstConverter(parser_options).convert_to_dict(editor_value)


def to_markdown(
    doc: Union[Document, Mapping[str, Any]],
    *,
    options: Optional[MarkdownRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Render a canonical AST to markdown.

    Parameters
    ----------
    doc : Document or dict
        Typed AST, or a ``$class`` tagged tree (validated first)
    options : MarkdownRendererOptions, optional
        Renderer options
    kwargs : Any
        Individual renderer options (``no_index``, ``escape_special``,
        ``bullet_symbol``, ``code_fence_min``)

    Returns
    -------
    str
        Markdown text

    """
    renderer_options = _create_options(MarkdownRendererOptions, options, **kwargs)
    tree = dict(doc) if isinstance(doc, Mapping) else doc
    return MarkdownRenderer(renderer_options).render_to_string(tree)


def editor_to_markdown(
    editor_value: Union[Mapping[str, Any], str, Path, bytes],
    *,
    parser_options: Optional[EditorParserOptions] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
) -> str:
    """Convert an editor tree straight to markdown."""
    return to_markdown(from_editor(editor_value, options=parser_options), options=renderer_options)


def normalize_markdown(
    source: MarkdownSource,
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
) -> str:
    """Parse markdown and render it back in the canonical markdown style."""
    return to_markdown(from_markdown(source, options=parser_options), options=renderer_options)
