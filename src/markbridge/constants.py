#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the markbridge library.

Constants are organized by category:
1. Type Definitions - Literal types used by options and nodes
2. Namespaces - Class-tag prefixes of the canonical model
3. Node Kinds - Class-name sets used to classify canonical nodes
4. Markdown Output - Rendering defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ListType = Literal["ordered", "bullet"]
BulletSymbol = Literal["-", "*", "+"]

# =============================================================================
# Namespaces
# =============================================================================

COMMONMARK_NS = "org.accordproject.commonmark"
CICEROMARK_NS = "org.accordproject.ciceromark"

COMMON_NS_PREFIX = COMMONMARK_NS + "."
CICERO_NS_PREFIX = CICEROMARK_NS + "."

# xmlns carried by every Document, as emitted by the CommonMark XML renderer
COMMONMARK_XMLNS = "http://commonmark.org/xml/1.0"

# JSON key holding the class tag of a canonical node
CLASS_KEY = "$class"

# Tag name of the event stream root; its close event never pops the stack
DOCUMENT_TAG = "document"

# =============================================================================
# Node Kinds
# =============================================================================

# Nodes whose text event payload is stored on the node itself
LEAF_TEXT_CLASSES = frozenset(
    {
        COMMON_NS_PREFIX + "Text",
        COMMON_NS_PREFIX + "CodeBlock",
        COMMON_NS_PREFIX + "HtmlInline",
        COMMON_NS_PREFIX + "HtmlBlock",
        COMMON_NS_PREFIX + "Code",
    }
)

HTML_CLASSES = frozenset({COMMON_NS_PREFIX + "HtmlInline", COMMON_NS_PREFIX + "HtmlBlock"})

CODE_BLOCK_CLASS = COMMON_NS_PREFIX + "CodeBlock"

# Editor heading types, in level order
EDITOR_HEADING_TYPES = (
    "heading_one",
    "heading_two",
    "heading_three",
    "heading_four",
    "heading_five",
    "heading_six",
)

# =============================================================================
# Markdown Output
# =============================================================================

DEFAULT_BULLET_SYMBOL: BulletSymbol = "-"
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_NO_INDEX = False
DEFAULT_CODE_FENCE_MIN = 3
THEMATIC_BREAK_MARKER = "***"
