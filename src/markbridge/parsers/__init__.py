#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/parsers/__init__.py
"""Parsers producing the canonical AST from markdown, CommonMark XML and editor trees."""

from markbridge.parsers.base import BaseParser
from markbridge.parsers.editor import EditorToAstConverter, compose_marks, decode_editor_value, editor_to_ast
from markbridge.parsers.event_sources import MarkdownEventSource, markdown_events, xml_events
from markbridge.parsers.markdown import (
    MarkdownToAstConverter,
    commonmark_xml_to_ast,
    commonmark_xml_to_dict,
    markdown_to_ast,
)

__all__ = [
    "BaseParser",
    "EditorToAstConverter",
    "MarkdownEventSource",
    "MarkdownToAstConverter",
    "commonmark_xml_to_ast",
    "commonmark_xml_to_dict",
    "compose_marks",
    "decode_editor_value",
    "editor_to_ast",
    "markdown_events",
    "markdown_to_ast",
    "xml_events",
]
