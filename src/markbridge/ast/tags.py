#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/tags.py
"""Mapping from event-stream tag names to canonical class tags.

The markdown event stream names its elements the way the CommonMark XML
renderer does (``block_quote``, ``code_block``, ``html_inline``...). Each
name maps to a namespace-qualified class tag of the canonical model.

Examples
--------
    >>> tag_to_class("paragraph")
    'org.accordproject.commonmark.Paragraph'
    >>> tag_to_class("html_inline")
    'org.accordproject.commonmark.HtmlInline'

"""

from __future__ import annotations

import re

from markbridge.constants import CODE_BLOCK_CLASS, COMMON_NS_PREFIX, HTML_CLASSES, LEAF_TEXT_CLASSES

_UNDERSCORE_LETTER = re.compile(r"_([a-z])")


def capitalize_first_letter(value: str) -> str:
    """Upper-case the first character of a string, leaving the rest intact."""
    return value[:1].upper() + value[1:]


def tag_to_class(tag_name: str) -> str:
    """Classify an event-stream tag name as a canonical class tag.

    Each lower-case letter following an underscore is upper-cased and the
    underscore removed, the first letter is capitalized, and the CommonMark
    namespace is prefixed.

    Parameters
    ----------
    tag_name : str
        Tag name as produced by the event source

    Returns
    -------
    str
        Namespace-qualified class tag

    """
    camel_cased = _UNDERSCORE_LETTER.sub(lambda match: match.group(1).upper(), tag_name)
    return COMMON_NS_PREFIX + capitalize_first_letter(camel_cased)


def class_short_name(class_tag: str) -> str:
    """Strip the namespace from a class tag (``...commonmark.Text`` -> ``Text``)."""
    return class_tag.rsplit(".", 1)[-1]


def is_leaf_class(class_tag: str | None) -> bool:
    """Whether nodes of this class store text event payloads."""
    return class_tag in LEAF_TEXT_CLASSES


def is_html_class(class_tag: str | None) -> bool:
    """Whether nodes of this class hold raw HTML (blocks or inlines)."""
    return class_tag in HTML_CLASSES


def is_code_block_class(class_tag: str | None) -> bool:
    """Whether nodes of this class are code blocks."""
    return class_tag == CODE_BLOCK_CLASS
