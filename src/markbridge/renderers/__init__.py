#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/renderers/__init__.py
"""Renderers turning the canonical AST into output formats."""

from markbridge.renderers.base import BaseRenderer, InlineContentMixin
from markbridge.renderers.markdown import MarkdownRenderer

__all__ = ["BaseRenderer", "InlineContentMixin", "MarkdownRenderer"]
