#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/parsers/event_sources.py
"""Event sources producing open/text/close streams for the tree builder.

Two sources are provided:

- :class:`MarkdownEventSource` tokenizes markdown with mistune and walks the
  token tree, emitting events named the way the CommonMark XML renderer
  names its elements (``paragraph``, ``block_quote``, ``code_block``...).
- :func:`xml_events` streams an existing CommonMark XML document through
  defusedxml's incremental parser.

Errors raised by mistune or by the XML parser are not caught here.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

import defusedxml.ElementTree as ET
import mistune
from mistune.util import unescape

from markbridge.ast.events import CloseTag, MarkupEvent, OpenTag, TextEvent
from markbridge.constants import COMMONMARK_XMLNS, DOCUMENT_TAG
from markbridge.exceptions import ParsingError

logger = logging.getLogger(__name__)

# mistune token type -> CommonMark element name, for tokens that only wrap children
_CONTAINER_TOKENS = {
    "paragraph": "paragraph",
    # tight list items hold block_text instead of paragraph tokens
    "block_text": "paragraph",
    "block_quote": "block_quote",
    "list_item": "item",
    "emphasis": "emph",
    "strong": "strong",
}

# mistune token type -> CommonMark element name, for tokens carrying raw text
_LEAF_TOKENS = {
    "codespan": "code",
    "inline_html": "html_inline",
    "block_html": "html_block",
}

_EMPTY_TOKENS = {
    "thematic_break": "thematic_break",
    "softbreak": "softbreak",
    "linebreak": "linebreak",
}


def _element(
    name: str, children: Iterator[MarkupEvent], attributes: dict[str, str] | None = None
) -> Iterator[MarkupEvent]:
    yield OpenTag(name, attributes or {})
    yield from children
    yield CloseTag(name)


def _leaf(name: str, text: str, attributes: dict[str, str] | None = None) -> Iterator[MarkupEvent]:
    yield OpenTag(name, attributes or {})
    if text:
        yield TextEvent(text)
    yield CloseTag(name)


class MarkdownEventSource:
    """Turn markdown text into a CommonMark-shaped event stream.

    Examples
    --------
        >>> source = MarkdownEventSource()
        >>> [type(e).__name__ for e in source.events("hi")]
        ['OpenTag', 'OpenTag', 'OpenTag', 'TextEvent', 'CloseTag', 'CloseTag', 'CloseTag']

    """

    def __init__(self) -> None:
        """Create the mistune parser used for tokenizing."""
        self._markdown = mistune.create_markdown(renderer=None)

    def tokenize(self, markdown: str) -> list[dict[str, Any]]:
        """Tokenize markdown into mistune's token tree."""
        tokens, _state = self._markdown.parse(markdown)
        return tokens if isinstance(tokens, list) else []

    def events(self, markdown: str) -> Iterator[MarkupEvent]:
        """Yield the events of a whole document, wrapped in ``document``."""
        tokens = self.tokenize(markdown)
        logger.debug("Tokenized markdown into %d block tokens", len(tokens))
        yield from _element(DOCUMENT_TAG, self._walk(tokens), {"xmlns": COMMONMARK_XMLNS})

    def _walk(self, tokens: Iterable[dict[str, Any]]) -> Iterator[MarkupEvent]:
        for token in tokens:
            yield from self._token_events(token)

    def _token_events(self, token: dict[str, Any]) -> Iterator[MarkupEvent]:
        token_type = token.get("type", "")
        attrs = token.get("attrs") or {}
        children = token.get("children") or []

        if token_type == "blank_line":
            return
        if token_type in _CONTAINER_TOKENS:
            yield from _element(_CONTAINER_TOKENS[token_type], self._walk(children))
        elif token_type == "text":
            # character references decode in text, but not in code or HTML
            yield from _leaf("text", unescape(token.get("raw", "")))
        elif token_type in _LEAF_TOKENS:
            yield from _leaf(_LEAF_TOKENS[token_type], token.get("raw", ""))
        elif token_type in _EMPTY_TOKENS:
            yield from _element(_EMPTY_TOKENS[token_type], iter(()))
        elif token_type == "heading":
            yield from _element("heading", self._walk(children), {"level": str(attrs.get("level", 1))})
        elif token_type == "list":
            yield from _element("list", self._walk(children), self._list_attributes(token))
        elif token_type == "block_code":
            info = (attrs.get("info") or "").strip()
            yield from _leaf("code_block", token.get("raw", ""), {"info": info} if info else None)
        elif token_type in ("link", "image"):
            attributes = {"destination": attrs.get("url", ""), "title": unescape(attrs.get("title") or "")}
            yield from _element(token_type, self._walk(children), attributes)
        else:
            raise ParsingError(f"Unsupported markdown token: {token_type!r}", parsing_stage="tokenize")

    @staticmethod
    def _list_attributes(token: dict[str, Any]) -> dict[str, str]:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        tight = token.get("tight", attrs.get("tight", True))

        attributes = {"type": "ordered" if ordered else "bullet", "tight": "true" if tight else "false"}
        if ordered:
            attributes["start"] = str(attrs.get("start", 1))
            attributes["delimiter"] = "paren" if token.get("bullet") == ")" else "period"
        return attributes


def markdown_events(markdown: str) -> Iterator[MarkupEvent]:
    """Yield the CommonMark-shaped event stream of a markdown string."""
    return MarkdownEventSource().events(markdown)


def _local_name(tag: str) -> tuple[str | None, str]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


class _ChunkReader:
    """File-like view over text chunks, one chunk per ``read`` call."""

    def __init__(self, chunks: Iterable[str]):
        self._chunks = iter(chunks)

    def read(self, size: int = -1) -> str:
        for chunk in self._chunks:
            if chunk:
                return chunk
        return ""


def xml_events(source: str | Iterable[str]) -> Iterator[MarkupEvent]:
    """Stream a CommonMark XML document as markup events.

    The document is read through defusedxml, so entity declarations are
    rejected. The default namespace of the root element is reported as its
    ``xmlns`` attribute. Text is reported once per element, when the element
    ends, which places leaf text inside its own open/close pair.

    Parameters
    ----------
    source : str or iterable of str
        Whole XML document, or chunks of it

    Yields
    ------
    MarkupEvent
        Events in document order

    Raises
    ------
    xml.etree.ElementTree.ParseError
        If the XML is not well formed
    defusedxml.EntitiesForbidden
        If the document declares entities

    """
    reader = _ChunkReader([source] if isinstance(source, str) else source)

    for kind, element in ET.iterparse(reader, events=("start", "end")):
        namespace, name = _local_name(element.tag)
        if kind == "start":
            attributes = dict(element.attrib)
            if namespace and name == DOCUMENT_TAG:
                attributes.setdefault("xmlns", namespace)
            yield OpenTag(name, attributes)
        else:
            if element.text:
                yield TextEvent(element.text)
            yield CloseTag(name)
            element.clear()
