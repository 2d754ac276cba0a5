#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/visitors.py
"""Visitor pattern implementation for canonical AST traversal.

Each node's ``accept`` method calls the matching ``visit_*`` method of the
visitor, so algorithms over the tree (such as markdown rendering) live
outside the node classes.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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
    Paragraph,
    Softbreak,
    Strong,
    Text,
    ThematicBreak,
    Variable,
)


class NodeVisitor(ABC):
    """Abstract base class for canonical AST visitors.

    Subclasses implement one ``visit_*`` method per node type. Return values
    are up to the visitor; side-effect visitors return None.

    Examples
    --------
    Collecting the text of a tree:

        >>> class TextCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.parts = []
        ...
        ...     def visit_text(self, node):
        ...         self.parts.append(node.text)
        ...
        ...     # remaining visit_* methods walk node.children

    """

    # Block-level nodes

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_item(self, node: Item) -> Any:
        """Visit a list Item node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_html_block(self, node: HtmlBlock) -> Any:
        """Visit an HtmlBlock node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    # Inline nodes

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_emph(self, node: Emph) -> Any:
        """Visit an Emph node."""

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit an inline Code node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    @abstractmethod
    def visit_html_inline(self, node: HtmlInline) -> Any:
        """Visit an HtmlInline node."""

    @abstractmethod
    def visit_softbreak(self, node: Softbreak) -> Any:
        """Visit a Softbreak node."""

    @abstractmethod
    def visit_linebreak(self, node: Linebreak) -> Any:
        """Visit a Linebreak node."""

    # CiceroMark nodes

    @abstractmethod
    def visit_clause(self, node: Clause) -> Any:
        """Visit a Clause node."""

    @abstractmethod
    def visit_variable(self, node: Variable) -> Any:
        """Visit a Variable node."""

    @abstractmethod
    def visit_computed_variable(self, node: ComputedVariable) -> Any:
        """Visit a ComputedVariable node."""
