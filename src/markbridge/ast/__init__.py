#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/__init__.py
"""Canonical Abstract Syntax Tree (AST) module.

The canonical AST exists in two forms:

- JSON-compatible dicts tagged with ``$class`` (produced by the stream
  builder and the editor mapper, and the wire format of the model),
- typed dataclass nodes (see :mod:`markbridge.ast.nodes`), which support
  the visitor pattern.

The module consists of several components:

- nodes: typed node classes
- tags: mapping of markup tag names to class tags
- events: open/text/close events consumed by the builder
- builder: stack-based stream-to-tree builder
- serialization: validation and conversion between the two forms
- visitors: visitor base class for traversal

Examples
--------
    >>> from markbridge.ast import Document, Paragraph, Text, ast_to_dict
    >>> doc = Document(children=[Paragraph(children=[Text(text="Hello")])])
    >>> ast_to_dict(doc)["nodes"][0]["$class"]
    'org.accordproject.commonmark.Paragraph'

"""

from markbridge.ast.builder import AstStreamBuilder, StackFrame, build_ast_dict
from markbridge.ast.events import CloseTag, MarkupEvent, OpenTag, TextEvent
from markbridge.ast.nodes import (
    Attribute,
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
    SourceLocation,
    Strong,
    TagInfo,
    Text,
    ThematicBreak,
    Variable,
    get_node_children,
)
from markbridge.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, get_class_tag, json_to_ast
from markbridge.ast.tags import tag_to_class
from markbridge.ast.visitors import NodeVisitor

__all__ = [
    # Nodes
    "Node",
    "SourceLocation",
    "Document",
    "Paragraph",
    "Heading",
    "BlockQuote",
    "List",
    "Item",
    "CodeBlock",
    "HtmlBlock",
    "ThematicBreak",
    "Text",
    "Emph",
    "Strong",
    "Code",
    "Link",
    "Image",
    "HtmlInline",
    "Softbreak",
    "Linebreak",
    "Clause",
    "Variable",
    "ComputedVariable",
    "TagInfo",
    "Attribute",
    "get_node_children",
    # Events and builder
    "OpenTag",
    "TextEvent",
    "CloseTag",
    "MarkupEvent",
    "AstStreamBuilder",
    "StackFrame",
    "build_ast_dict",
    "tag_to_class",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "get_class_tag",
    # Visitors
    "NodeVisitor",
]
