#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/builder.py
"""Stack-based builder turning a flat markup event stream into a tree.

The builder consumes open/text/close events (see :mod:`markbridge.ast.events`)
and produces one JSON-compatible canonical AST rooted at a Document node.
It keeps an explicit stack of nodes in progress instead of recursing, so its
own call depth does not grow with the nesting depth of the markup.

Examples
--------
    >>> from markbridge.ast.events import CloseTag, OpenTag, TextEvent
    >>> events = [
    ...     OpenTag("document"),
    ...     OpenTag("paragraph"),
    ...     OpenTag("text"),
    ...     TextEvent("Hello"),
    ...     CloseTag("text"),
    ...     CloseTag("paragraph"),
    ...     CloseTag("document"),
    ... ]
    >>> tree = build_ast_dict(events)
    >>> tree["nodes"][0]["nodes"][0]["text"]
    'Hello'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from markbridge.ast.events import CloseTag, MarkupEvent, OpenTag, TextEvent
from markbridge.ast.tags import class_short_name, is_code_block_class, is_html_class, is_leaf_class, tag_to_class
from markbridge.constants import CLASS_KEY, COMMON_NS_PREFIX, DOCUMENT_TAG
from markbridge.exceptions import ParsingError
from markbridge.options.markdown import MarkdownParserOptions
from markbridge.utils.html_utils import HtmlTagInfo, inspect_html_fragment

logger = logging.getLogger(__name__)


@dataclass
class StackFrame:
    """A node in progress on the builder stack.

    Parameters
    ----------
    node : dict
        The JSON-compatible node being built
    has_children : bool, default = False
        Whether the node's ``nodes`` list has been created yet

    """

    node: dict[str, Any]
    has_children: bool = False

    @property
    def class_tag(self) -> str:
        """Class tag of the node in this frame."""
        return self.node[CLASS_KEY]

    def append_child(self, child: dict[str, Any]) -> None:
        """Append a child node, creating the ``nodes`` list on first use."""
        if not self.has_children:
            self.node["nodes"] = []
            self.has_children = True
        self.node["nodes"].append(child)


def tag_info_to_dict(info: HtmlTagInfo) -> dict[str, Any]:
    """Convert inspected HTML metadata into a ``TagInfo`` JSON object."""
    return {
        CLASS_KEY: COMMON_NS_PREFIX + "TagInfo",
        "tagName": info.tag,
        "attributeString": info.attribute_string,
        "attributes": [
            {CLASS_KEY: COMMON_NS_PREFIX + "Attribute", "name": name, "value": value}
            for name, value in info.attributes.items()
        ],
        "content": info.content,
        "closed": info.closed,
    }


class AstStreamBuilder:
    """Rebuild a nested canonical AST from a flat event stream.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        ``trim_text`` and ``tag_info`` control text handling

    Notes
    -----
    A builder holds the state of a single conversion. Create a new one (or
    call :meth:`reset`) for every stream.

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the builder with an empty stack."""
        self.options = options or MarkdownParserOptions()
        self._stack: list[StackFrame] = []
        self._node_count = 0

    def reset(self) -> None:
        """Discard any partially built tree."""
        self._stack = []
        self._node_count = 0

    @property
    def depth(self) -> int:
        """Number of frames currently on the stack."""
        return len(self._stack)

    def _peek(self) -> StackFrame | None:
        return self._stack[-1] if self._stack else None

    def open_tag(self, name: str, attributes: dict[str, str] | None = None) -> None:
        """Start a new node and push it on the stack.

        Every attribute of the tag is copied onto the node under the same
        name; this is how ``level``, ``destination``, ``tight`` and similar
        structural fields arrive.

        Parameters
        ----------
        name : str
            Tag name from the event stream
        attributes : dict of str to str, optional
            Tag attributes to hoist onto the node

        """
        new_node: dict[str, Any] = {CLASS_KEY: tag_to_class(name)}
        for key, value in (attributes or {}).items():
            new_node[key] = value

        head = self._peek()
        if head is not None:
            head.append_child(new_node)
        self._stack.append(StackFrame(new_node))
        self._node_count += 1

    def text(self, content: str) -> None:
        """Store character content on the node at the top of the stack.

        Only leaf nodes (Text, Code, CodeBlock, HtmlBlock, HtmlInline) keep
        text; content arriving for any other node is ignored, as is content
        arriving before the first open tag.

        Parameters
        ----------
        content : str
            Character data from the event stream

        """
        if self.options.trim_text:
            content = content.strip()

        head = self._peek()
        if not content or head is None:
            return

        node = head.node
        class_tag = head.class_tag
        if is_leaf_class(class_tag):
            node["text"] = node.get("text", "") + content

        if self.options.tag_info and (is_html_class(class_tag) or is_code_block_class(class_tag)):
            maybe_html = node.get("text") if is_html_class(class_tag) else node.get("info")
            info = inspect_html_fragment(maybe_html)
            if info is not None:
                node["tag"] = tag_info_to_dict(info)

    def close_tag(self, name: str) -> None:
        """Finish the node at the top of the stack.

        The document node is never popped so it can be retrieved as the
        result once the stream ends.

        Parameters
        ----------
        name : str
            Tag name from the event stream

        Raises
        ------
        ParsingError
            If there is no open node, or the open node is not a ``name`` node

        """
        head = self._peek()
        if head is None:
            raise ParsingError(f"Close tag '{name}' with no open node", parsing_stage="close_tag")

        expected = tag_to_class(name)
        if head.class_tag != expected:
            raise ParsingError(
                f"Close tag '{name}' does not match open node '{class_short_name(head.class_tag)}'",
                parsing_stage="close_tag",
            )

        if name != DOCUMENT_TAG:
            self._stack.pop()

    def feed(self, events: Iterable[MarkupEvent]) -> None:
        """Process a sequence of events.

        Errors raised while iterating ``events`` (i.e. by the event source)
        propagate unchanged.

        Parameters
        ----------
        events : iterable of MarkupEvent
            Events to dispatch

        """
        for event in events:
            if isinstance(event, OpenTag):
                self.open_tag(event.name, event.attributes)
            elif isinstance(event, TextEvent):
                self.text(event.content)
            elif isinstance(event, CloseTag):
                self.close_tag(event.name)
            else:
                raise ParsingError(f"Unknown event: {event!r}", parsing_stage="feed")

    @property
    def result(self) -> dict[str, Any]:
        """The finished tree: the node left on top of the stack.

        Raises
        ------
        ParsingError
            If no node was ever opened, or nodes other than the root were
            left open

        """
        head = self._peek()
        if head is None:
            raise ParsingError("Event stream produced no document", parsing_stage="result")
        if self.depth > 1:
            raise ParsingError(
                f"Event stream ended with {self.depth - 1} unclosed node(s) inside the document",
                parsing_stage="result",
            )
        logger.debug("Built tree of %d nodes", self._node_count)
        return head.node


def build_ast_dict(events: Iterable[MarkupEvent], options: MarkdownParserOptions | None = None) -> dict[str, Any]:
    """Build a JSON-compatible canonical AST from an event stream.

    Parameters
    ----------
    events : iterable of MarkupEvent
        Events, starting with the document open tag
    options : MarkdownParserOptions or None, default = None
        Text handling options

    Returns
    -------
    dict
        Root Document node tagged with ``$class``

    """
    builder = AstStreamBuilder(options)
    builder.feed(events)
    return builder.result
