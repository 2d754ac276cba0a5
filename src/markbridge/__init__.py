"""markbridge - conversion between editor trees, a canonical AST and markdown.

markbridge converts documents between three representations:

- the JSON document model of a Slate-style rich-text editor,
- a canonical, schema-tagged abstract syntax tree for CommonMark plus the
  CiceroMark extensions (Clause, Variable, ComputedVariable),
- markdown text.

The canonical AST is the hub format. Markdown is tokenized with mistune and
folded into the AST by a streaming stack builder; editor trees are mapped
into it structurally; the markdown renderer walks it back to text.

Examples
--------
Markdown to AST and back:

    >>> from markbridge import from_markdown, to_markdown
    >>> doc = from_markdown("1. x")
    >>> to_markdown(doc)
    '1. x'

Editor tree to the ``$class`` tagged AST:

    >>> from markbridge import editor_to_dict
    >>> tree = editor_to_dict({"nodes": [{"type": "heading_two", "nodes": []}]})
    >>> tree["nodes"][0]["level"]
    '2'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "markbridge requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from markbridge.api import (
    editor_to_dict,
    editor_to_markdown,
    from_commonmark_xml,
    from_editor,
    from_markdown,
    markdown_to_dict,
    normalize_markdown,
    to_markdown,
)
from markbridge.exceptions import (
    InvalidOptionsError,
    MarkbridgeError,
    ParsingError,
    RenderingError,
    UnhandledNodeError,
    ValidationError,
)
from markbridge.options import (
    BaseParserOptions,
    BaseRendererOptions,
    EditorParserOptions,
    MarkdownParserOptions,
    MarkdownRendererOptions,
)

__all__ = [
    "__version__",
    # Conversion
    "from_markdown",
    "markdown_to_dict",
    "from_commonmark_xml",
    "from_editor",
    "editor_to_dict",
    "to_markdown",
    "editor_to_markdown",
    "normalize_markdown",
    # Options
    "BaseParserOptions",
    "BaseRendererOptions",
    "EditorParserOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    # Exceptions
    "MarkbridgeError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "UnhandledNodeError",
    "RenderingError",
]
