#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and rendering."""
# src/markbridge/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from markbridge.constants import (
    DEFAULT_BULLET_SYMBOL,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_NO_INDEX,
    BulletSymbol,
)
from markbridge.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-AST parsing.

    Parameters
    ----------
    trim_text : bool, default False
        Strip leading and trailing whitespace from every text event before it
        is stored. Whitespace-only text is then dropped.
    tag_info : bool, default False
        Attach structured tag metadata (tag name, attributes, content,
        self-closing flag) to HTML nodes and to code blocks whose info string
        is an HTML tag.

    """

    trim_text: bool = field(
        default=False,
        metadata={"help": "Trim whitespace from all text nodes", "importance": "advanced"},
    )
    tag_info: bool = field(
        default=False,
        metadata={"help": "Construct tag metadata for HTML elements", "importance": "advanced"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for AST-to-Markdown rendering.

    Parameters
    ----------
    no_index : bool, default False
        Number every ordered list item ``1`` instead of counting up from the
        list's start number.
    escape_special : bool, default True
        Escape characters in text nodes that would otherwise be read back
        as markdown syntax.
    bullet_symbol : {"-", "*", "+"}, default "-"
        Marker used for bullet list items.
    code_fence_min : int, default 3
        Minimum number of backticks in a code block fence.

    """

    no_index: bool = field(
        default=DEFAULT_NO_INDEX,
        metadata={"help": "Do not index ordered lists (use 1. everywhere)", "importance": "core"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape markdown special characters in text", "importance": "core"},
    )
    bullet_symbol: BulletSymbol = field(
        default=DEFAULT_BULLET_SYMBOL,
        metadata={"help": "Bullet list marker", "choices": ["-", "*", "+"], "importance": "advanced"},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If bullet_symbol is not a bullet marker or code_fence_min is below 3.

        """
        if self.bullet_symbol not in ("-", "*", "+"):
            raise ValueError(f"bullet_symbol must be one of '-', '*', '+', got {self.bullet_symbol!r}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
