#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/nodes.py
"""Typed node classes for the canonical AST.

This module defines the node hierarchy of the canonical AST. The same tree
also exists in a JSON-compatible form (dicts tagged with ``$class``); the
:mod:`markbridge.ast.serialization` module converts between the two.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Container nodes own an ordered ``children`` list:
    - Document, Paragraph, Heading, BlockQuote, List, Item
    - Emph, Strong, Link, Image
    - Clause, Variable, ComputedVariable (CiceroMark extensions)

Leaf nodes carry raw ``text`` or nothing at all:
    - Text, Code, CodeBlock, HtmlBlock, HtmlInline
    - ThematicBreak, Softbreak, Linebreak

"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from markbridge.constants import COMMONMARK_XMLNS

HEADING_LEVELS = ("1", "2", "3", "4", "5", "6")

_SOURCEPOS_PATTERN = re.compile(r"(\d+):(\d+)-(\d+):(\d+)")


@dataclass
class Attribute:
    """A single HTML attribute of a :class:`TagInfo`."""

    name: str
    value: str


@dataclass
class TagInfo:
    """Structured metadata extracted from an HTML fragment.

    Parameters
    ----------
    tag_name : str
        Lower-cased tag name of the fragment's root element
    attribute_string : str
        Human-readable re-serialization of the attributes
    attributes : list of Attribute
        Attributes in fragment order
    content : str
        Text content of the element
    closed : bool
        Whether the fragment was written as a self-closing tag

    """

    tag_name: str
    attribute_string: str = ""
    attributes: list[Attribute] = field(default_factory=list)
    content: str = ""
    closed: bool = False


@dataclass
class SourceLocation:
    """Span of a node in its markdown source.

    Written as a CommonMark ``sourcepos`` string, ``"line:column-line:column"``,
    in the JSON form. Lines and columns are 1-based.

    Parameters
    ----------
    start_line : int
        Line of the first character of the node
    start_column : int
        Column of the first character of the node
    end_line : int
        Line of the last character of the node
    end_column : int
        Column of the last character of the node

    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def from_sourcepos(cls, sourcepos: str) -> SourceLocation:
        """Parse a ``sourcepos`` attribute value.

        Raises
        ------
        ValueError
            If the value is not of the form ``"l:c-l:c"``

        """
        match = _SOURCEPOS_PATTERN.fullmatch(sourcepos.strip())
        if match is None:
            raise ValueError(f"Invalid sourcepos {sourcepos!r}, expected 'line:column-line:column'")
        return cls(*(int(group) for group in match.groups()))

    def to_sourcepos(self) -> str:
        """Return the ``sourcepos`` attribute value of this span."""
        return f"{self.start_line}:{self.start_column}-{self.end_line}:{self.end_column}"


class Node(ABC):
    """Base class for all canonical AST nodes.

    Every node class carries an optional ``source_location``, filled in when
    the input records positions (CommonMark XML ``sourcepos`` attributes).
    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing block-level children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    xmlns : str
        Namespace of the CommonMark XML the tree corresponds to

    """

    children: list[Node] = field(default_factory=list)
    xmlns: str = COMMONMARK_XMLNS
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : str
        Heading level as a string, "1" through "6"
    children : list of Node, default = empty list
        Inline nodes representing heading text

    Raises
    ------
    ValueError
        If level is not one of "1".."6"

    """

    level: str
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if self.level not in HEADING_LEVELS:
            raise ValueError(f"Heading level must be '1'-'6', got {self.level!r}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements."""

    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or bullet).

    All attributes are kept as strings, as they arrive from the event stream.

    Parameters
    ----------
    list_type : str
        "ordered" or "bullet" (``type`` in the JSON form)
    start : str or None, default = None
        Starting number for ordered lists
    tight : str or None, default = None
        "true" when items are not separated by blank lines
    delimiter : str or None, default = None
        "period" or "paren" for ordered lists
    children : list of Node, default = empty list
        Item nodes

    """

    list_type: str
    start: Optional[str] = None
    tight: Optional[str] = None
    delimiter: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    @property
    def ordered(self) -> bool:
        """Whether this is an ordered list."""
        return self.list_type == "ordered"

    @property
    def is_tight(self) -> bool:
        """Whether items are rendered without blank lines between them."""
        return self.tight == "true"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class Item(Node):
    """List item node containing block content."""

    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_item(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    text : str, default = ""
        Code content, usually ending with a newline
    info : str or None, default = None
        Info string following the opening fence
    tag : TagInfo or None, default = None
        Tag metadata when the info string is an HTML tag

    """

    text: str = ""
    info: Optional[str] = None
    tag: Optional[TagInfo] = None
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class HtmlBlock(Node):
    """Raw HTML block."""

    text: str = ""
    tag: Optional[TagInfo] = None
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run."""

    text: str = ""
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class Emph(Node):
    """Emphasis (italic) wrapper."""

    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emph(self)


@dataclass
class Strong(Node):
    """Strong (bold) wrapper."""

    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong node."""
        return visitor.visit_strong(self)


@dataclass
class Code(Node):
    """Inline code span."""

    text: str = ""
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink with inline content.

    Parameters
    ----------
    destination : str
        Link target
    title : str, default = ""
        Link title; empty when the source had none
    children : list of Node, default = empty list
        Inline nodes forming the link text

    """

    destination: str
    title: str = ""
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image; its children form the alt text."""

    destination: str
    title: str = ""
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class HtmlInline(Node):
    """Raw inline HTML."""

    text: str = ""
    tag: Optional[TagInfo] = None
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


@dataclass
class Softbreak(Node):
    """Soft line break inside a paragraph."""

    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this soft break."""
        return visitor.visit_softbreak(self)


@dataclass
class Linebreak(Node):
    """Hard line break."""

    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this hard break."""
        return visitor.visit_linebreak(self)


# ============================================================================
# CiceroMark Nodes
# ============================================================================


@dataclass
class Clause(Node):
    """Contract clause wrapping block content.

    Parameters
    ----------
    clauseid : str
        Identifier of the clause instance
    src : str
        Location of the clause template
    clause_text : str or None, default = None
        Template text of the clause (``clauseText`` in the JSON form)
    children : list of Node, default = empty list
        Block content of the clause

    """

    clauseid: str
    src: str
    clause_text: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this clause."""
        return visitor.visit_clause(self)


@dataclass
class Variable(Node):
    """Template variable with its current value."""

    id: str
    value: str
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this variable."""
        return visitor.visit_variable(self)


@dataclass
class ComputedVariable(Node):
    """Computed template value."""

    value: str
    children: list[Node] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this computed variable."""
        return visitor.visit_computed_variable(self)


def get_node_children(node: Node) -> list[Node]:
    """Return the children of a node, or an empty list for leaves.

    Parameters
    ----------
    node : Node
        Node to inspect

    Returns
    -------
    list of Node
        The node's own children list (not a copy) for containers

    """
    children = getattr(node, "children", None)
    if children is None:
        return []
    return children
