#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/renderers/markdown.py
"""Markdown rendering from the canonical AST.

This module provides the MarkdownRenderer class which converts canonical
AST nodes to CommonMark text. The rendering process uses the visitor pattern
to traverse the AST; the renderer keeps the current indentation (the summed
widths of the enclosing list markers) and whether the next block is the
first one of its container, so block separators are only emitted between
blocks.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Union

from markbridge.ast.nodes import (
    BlockQuote,
    Clause,
    Code,
    CodeBlock,
    ComputedVariable,
    Document,
    Emph,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    Item,
    Linebreak,
    Link,
    List,
    Node,
    Paragraph,
    Softbreak,
    Strong,
    Text,
    ThematicBreak,
    Variable,
)
from markbridge.ast.serialization import dict_to_ast
from markbridge.ast.visitors import NodeVisitor
from markbridge.constants import THEMATIC_BREAK_MARKER
from markbridge.exceptions import RenderingError
from markbridge.options.markdown import MarkdownRendererOptions
from markbridge.renderers.base import BaseRenderer, InlineContentMixin

logger = logging.getLogger(__name__)

_INLINE_TYPES = (
    Text,
    Emph,
    Strong,
    Code,
    Link,
    Image,
    HtmlInline,
    Softbreak,
    Linebreak,
    Variable,
    ComputedVariable,
)

_BACKTICK_RUN = re.compile(r"`+")
_LEADING_DIGITS = re.compile(r"\d{1,9}")
_ENTITY_REFERENCE = re.compile(r"&(?:#[0-9]{1,7};|#[xX][0-9a-fA-F]+;|[^\t\n\f <&#;]{1,32};)")
_TRAILING_BACKSLASHES = re.compile(r"\\+$")
_CLOSING_HASHES = re.compile(r"(^|[ \t])(#+)$")

# blocks after which a paragraph may start on the next line
_PARAGRAPH_SAFE_PREDECESSORS = (Heading, ThematicBreak, CodeBlock)

BlockUnit = Union[list[Node], Node]


def _longest_backtick_run(text: str) -> int:
    return max((len(run) for run in _BACKTICK_RUN.findall(text)), default=0)


def _escape_entities(text: str) -> str:
    return _ENTITY_REFERENCE.sub(lambda m: "\\" + m.group(0), text)


def _holds_blocks(node: Any) -> bool:
    return isinstance(node, Paragraph) and any(not isinstance(child, _INLINE_TYPES) for child in node.children)


def _block_units(children: list[Any]) -> list[BlockUnit]:
    """Split block container children into runs of inline nodes and single blocks.

    Clauses, and paragraphs that hold block children (as editor list items
    do), are flattened into the units of their own children.
    """
    units: list[BlockUnit] = []
    inline_run: list[Node] = []
    for child in children:
        if isinstance(child, _INLINE_TYPES):
            inline_run.append(child)
            continue
        if inline_run:
            units.append(inline_run)
            inline_run = []
        if isinstance(child, Clause) or _holds_blocks(child):
            units.extend(_block_units(child.children))
        else:
            units.append(child)
    if inline_run:
        units.append(inline_run)
    return units


def _paragraph_like(unit: BlockUnit) -> bool:
    return isinstance(unit, (list, Paragraph))


def _merge_adjacent(content: list[Node]) -> list[Node]:
    """Fold neighbouring Text, Code, Emph or Strong nodes of the same type into one node."""
    merged: list[Node] = []
    for node in content:
        previous = merged[-1] if merged else None
        if type(node) is Text and type(previous) is Text:
            merged[-1] = Text(text=previous.text + node.text)
        elif type(node) is Code and type(previous) is Code:
            merged[-1] = Code(text=previous.text + node.text)
        elif type(node) in (Emph, Strong) and type(previous) is type(node):
            merged[-1] = type(node)(children=previous.children + node.children)
        else:
            merged.append(node)
    return merged


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render canonical AST nodes to markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
    Basic usage:

        >>> from markbridge.ast.nodes import Document, Item, List, Paragraph, Text
        >>> doc = Document(children=[
        ...     List(list_type="ordered", start="1", children=[
        ...         Item(children=[Paragraph(children=[Text(text="x")])])
        ...     ])
        ... ])
        >>> MarkdownRenderer().render_to_string(doc)
        '1. x'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._indent: int = 0
        self._first: bool = True
        self._tight: bool = False
        self._list_marker_stack: list[tuple[str, bool]] = []

    def render_to_string(self, doc: Union[Document, dict[str, Any]]) -> str:
        """Render a document AST to a markdown string.

        Parameters
        ----------
        doc : Document or dict
            The document to render, either typed or as a ``$class`` tagged
            dict (validated before rendering)

        Returns
        -------
        str
            Markdown text with leading and trailing whitespace removed

        Raises
        ------
        ValidationError
            If a dict document fails validation
        RenderingError
            If the root is not a Document or the tree holds a non-node child

        """
        if isinstance(doc, dict):
            doc = dict_to_ast(doc)
        if not isinstance(doc, Document):
            raise RenderingError(
                f"Expected a Document to render, got {type(doc).__name__}",
                rendering_stage="render_to_string",
            )

        self._output = []
        self._indent = 0
        self._first = True
        self._tight = False
        self._list_marker_stack = []

        doc.accept(self)
        result = "".join(self._output).strip()

        self._output = []
        logger.debug("Rendered %d characters of markdown", len(result))
        return result

    def _visit(self, node: Any) -> None:
        if not isinstance(node, Node):
            raise RenderingError(f"Cannot render {type(node).__name__} as markdown", rendering_stage="visit")
        node.accept(self)

    def _newline(self) -> str:
        return "\n" + " " * self._indent

    def _start_block(self) -> None:
        """Emit the separator that goes before a block, unless it is the first."""
        if self._first:
            self._first = False
            return
        self._output.append("\n" if self._tight else "\n\n")
        self._output.append(" " * self._indent)

    def _render_blocks(self, children: list[Node]) -> None:
        """Render the children of a block container.

        Consecutive inline children are rendered as one paragraph. Clauses
        and paragraphs holding blocks are transparent: their children are
        rendered in place.
        """
        for unit in _block_units(children):
            self._start_block()
            if isinstance(unit, list):
                self._output.append(self._render_inline(unit))
            else:
                self._visit(unit)

    def _render_inline(self, content: list[Node]) -> str:
        for node in content:
            if not isinstance(node, Node):
                raise RenderingError(f"Cannot render {type(node).__name__} as markdown", rendering_stage="inline")
        return self._render_inline_content(_merge_adjacent(content))

    def _needs_blank_line(self, previous: BlockUnit, unit: BlockUnit) -> bool:
        """Whether two consecutive blocks must be separated by a blank line to parse back apart."""
        if isinstance(previous, HtmlBlock):
            return True
        if _paragraph_like(unit) or isinstance(unit, HtmlBlock):
            return not isinstance(previous, _PARAGRAPH_SAFE_PREDECESSORS)
        if _paragraph_like(previous):
            # a paragraph followed by a list is only split if the list may interrupt it
            return isinstance(unit, List) and not self._can_interrupt_paragraph(unit)
        return False

    def _can_interrupt_paragraph(self, node: List) -> bool:
        if not node.children:
            return True
        first_units = _block_units(node.children[0].children) if isinstance(node.children[0], Item) else []
        if all(isinstance(unit, Paragraph) and not unit.children for unit in first_units):
            return False
        if not node.ordered or self.options.no_index:
            return True
        try:
            return int(node.start or 1) == 1
        except ValueError:
            return False

    def _item_needs_blank_line(self, item: Any) -> bool:
        units = _block_units(item.children) if isinstance(item, Item) else []
        return any(self._needs_blank_line(prev, unit) for prev, unit in zip(units, units[1:]))

    def _render_delimited(self, delimiter: str, children: list[Node]) -> str:
        """Wrap rendered inline content in emphasis delimiters.

        Whitespace at either end is moved outside the delimiters, which
        cannot open before or close after whitespace. A trailing hard break
        moves out with it.
        """
        inner = self._render_inline(children)
        content = inner.strip()
        if not content:
            return inner
        leading = inner[: len(inner) - len(inner.lstrip())]
        trailing = inner[len(inner.rstrip()) :]
        backslashes = _TRAILING_BACKSLASHES.search(content)
        if trailing.startswith("\n") and backslashes and len(backslashes.group(0)) % 2 == 1:
            content, trailing = content[:-1], "\\" + trailing
        return f"{leading}{delimiter}{content}{delimiter}{trailing}"

    def _indent_lines(self, text: str) -> str:
        """Join the lines of ``text`` with newlines, indenting all non-empty lines after the first."""
        lines = text.split("\n")
        pad = " " * self._indent
        return "\n".join([lines[0]] + [pad + line if line else "" for line in lines[1:]])

    def _escape_markdown(self, text: str) -> str:
        """Escape special markdown characters with context awareness.

        Backslash, backticks, asterisks, braces, brackets and ``<`` are
        always escaped, and ``&`` when it starts a character reference.
        Block markers (``#``, ``-``, ``+``, ``>``, ``=`` and the delimiter of a
        leading ``1.`` or ``1)``) are escaped only at the start of the text,
        and ``_`` only at word boundaries, so ``snake_case`` stays readable.

        """
        if not self.options.escape_special:
            return text

        always_escape = "\\`*{}[]<"
        leading_digits = _LEADING_DIGITS.match(text)
        ordered_marker_end = leading_digits.end() if leading_digits else -1

        escaped_chars = []
        for i, char in enumerate(text):
            if char in always_escape:
                escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char == "&" and _ENTITY_REFERENCE.match(text, i):
                escaped_chars.append("\\&")
            elif i == 0 and char in "#-+>=":
                escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char in ".)" and i == ordered_marker_end and text[i + 1 : i + 2] in ("", " ", "\t"):
                escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                if not (prev_alnum and next_alnum):
                    escaped_chars.append("\\")
                escaped_chars.append(char)
            else:
                escaped_chars.append(char)

        return "".join(escaped_chars)

    @staticmethod
    def _link_target(destination: str, title: str) -> str:
        if destination and re.search(r"[\s()<>]", destination):
            destination = "<" + destination.replace("<", "%3C").replace(">", "%3E") + ">"
        if title:
            escaped_title = _escape_entities(title.replace("\\", "\\\\").replace('"', '\\"'))
            return f'{destination} "{escaped_title}"'
        return destination

    # Block-level nodes

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        self._render_blocks(node.children)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self._output.append(self._render_inline(node.children))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node as an ATX heading."""
        content = self._render_inline(node.children)
        if self.options.escape_special:
            # trailing hashes would be read as a closing sequence
            content = _CLOSING_HASHES.sub(r"\1\\\2", content)
        prefix = "#" * int(node.level)
        self._output.append(f"{prefix} {content}" if content else prefix)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node.

        Children are rendered in a fresh context (no indentation, first block
        pending) and every resulting line is prefixed with ``> ``.
        """
        saved = (self._output, self._indent, self._first, self._tight, self._list_marker_stack)
        self._output, self._indent, self._first, self._tight, self._list_marker_stack = [], 0, True, False, []

        self._render_blocks(node.children)
        quoted = "".join(self._output)

        self._output, self._indent, self._first, self._tight, self._list_marker_stack = saved

        lines = quoted.split("\n")
        self._output.append(self._newline().join(f"> {line}" if line else ">" for line in lines))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Ordered items count up from the list's start number (``1`` for every
        item with ``no_index``); the marker delimiter is ``)`` for lists with
        a ``paren`` delimiter.
        """
        tight = node.is_tight and not any(self._item_needs_blank_line(item) for item in node.children)
        start = 1
        if node.ordered and node.start:
            try:
                start = int(node.start)
            except ValueError as e:
                raise RenderingError(
                    f"Invalid ordered list start: {node.start!r}", rendering_stage="list", original_error=e
                ) from e
        delimiter = ")" if node.delimiter == "paren" else "."

        for i, item in enumerate(node.children):
            if i > 0:
                self._output.append("\n" if tight else "\n\n")
                self._output.append(" " * self._indent)

            if node.ordered:
                number = 1 if self.options.no_index else start + i
                marker = f"{number}{delimiter} "
            else:
                marker = f"{self.options.bullet_symbol} "

            self._list_marker_stack.append((marker, tight))
            self._visit(item)
            self._list_marker_stack.pop()

    def visit_item(self, node: Item) -> None:
        """Render a list Item node.

        The first block follows the marker on the same line; later blocks are
        indented by the marker width. An item without content renders as the
        bare marker.
        """
        marker, tight = self._list_marker_stack[-1] if self._list_marker_stack else ("- ", True)

        saved = (self._output, self._indent, self._first, self._tight)
        self._output = []
        self._indent += len(marker)
        self._first = True
        self._tight = tight

        self._render_blocks(node.children)
        content = "".join(self._output)

        self._output, self._indent, self._first, self._tight = saved
        self._output.append(marker + content if content else marker.rstrip())

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as a backtick fence.

        The fence is longer than any backtick run inside the code.
        """
        fence = "`" * max(self.options.code_fence_min, _longest_backtick_run(node.text) + 1)
        text = node.text[:-1] if node.text.endswith("\n") else node.text

        parts = [f"{fence}{node.info or ''}"]
        if node.text:
            parts.append(text)
        parts.append(fence)
        self._output.append(self._indent_lines("\n".join(parts)))

    def visit_html_block(self, node: HtmlBlock) -> None:
        """Render an HtmlBlock node verbatim."""
        self._output.append(self._indent_lines(node.text.rstrip("\n")))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append(THEMATIC_BREAK_MARKER)

    # Inline nodes

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        self._output.append(self._escape_markdown(node.text))

    def visit_emph(self, node: Emph) -> None:
        """Render an Emph node."""
        self._output.append(self._render_delimited("*", node.children))

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._output.append(self._render_delimited("**", node.children))

    def visit_code(self, node: Code) -> None:
        """Render an inline Code node.

        The delimiter is one backtick longer than the longest run inside the
        code. The code is padded with a space on both sides when it starts or
        ends with a backtick, or when it is surrounded by spaces.
        """
        text = node.text
        fence = "`" * (_longest_backtick_run(text) + 1)
        if text.startswith("`") or text.endswith("`") or (text.startswith(" ") and text.endswith(" ") and text.strip()):
            text = f" {text} "
        self._output.append(f"{fence}{text}{fence}")

    def visit_link(self, node: Link) -> None:
        """Render a Link node as an inline link."""
        if self.options.escape_special and self._output and self._output[-1].endswith("!"):
            # keep a preceding "!" from turning the link into an image
            self._output[-1] = self._output[-1][:-1] + "\\!"
        content = self._render_inline(node.children)
        self._output.append(f"[{content}]({self._link_target(node.destination, node.title)})")

    def visit_image(self, node: Image) -> None:
        """Render an Image node; its children become the alt text."""
        alt = self._render_inline(node.children)
        self._output.append(f"![{alt}]({self._link_target(node.destination, node.title)})")

    def visit_html_inline(self, node: HtmlInline) -> None:
        """Render an HtmlInline node verbatim."""
        self._output.append(node.text)

    def visit_softbreak(self, node: Softbreak) -> None:
        """Render a Softbreak node."""
        self._output.append(self._newline())

    def visit_linebreak(self, node: Linebreak) -> None:
        """Render a Linebreak node as a backslash hard break."""
        self._output.append("\\" + self._newline())

    # CiceroMark nodes

    def visit_clause(self, node: Clause) -> None:
        """Render a Clause node: its children are rendered as blocks in place."""
        self._render_blocks(node.children)

    def visit_variable(self, node: Variable) -> None:
        """Render a Variable node; childless variables render their value."""
        if node.children:
            self._output.append(self._render_inline(node.children))
        else:
            self._output.append(self._escape_markdown(node.value))

    def visit_computed_variable(self, node: ComputedVariable) -> None:
        """Render a ComputedVariable node; childless nodes render their value."""
        if node.children:
            self._output.append(self._render_inline(node.children))
        else:
            self._output.append(self._escape_markdown(node.value))
