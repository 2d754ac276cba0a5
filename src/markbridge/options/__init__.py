#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the markbridge parsers and renderers.

Each parser and renderer has its own frozen Options dataclass. Use
``create_updated`` to derive a modified copy.
"""

from __future__ import annotations

from markbridge.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from markbridge.options.editor import EditorParserOptions
from markbridge.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "EditorParserOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
]
