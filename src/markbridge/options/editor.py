#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for editor tree parsing."""
# src/markbridge/options/editor.py

from __future__ import annotations

from dataclasses import dataclass

from markbridge.options.base import BaseParserOptions


@dataclass(frozen=True)
class EditorParserOptions(BaseParserOptions):
    """Configuration options for editor-tree-to-AST conversion.

    The editor mapper has no format-specific settings beyond the shared
    ``validate`` flag; the class exists so the converter can reject options
    meant for another parser.

    """
