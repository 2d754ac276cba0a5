#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/events.py
"""Event types of the flat markup stream consumed by the tree builder.

An event source turns a document into an ordered sequence of these events:
one :class:`OpenTag` per element, :class:`TextEvent` for character content,
and a matching :class:`CloseTag`. The first event opens ``document`` and the
last one closes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class OpenTag:
    """Start of an element.

    Parameters
    ----------
    name : str
        Tag name, e.g. ``"paragraph"`` or ``"code_block"``
    attributes : dict of str to str
        Tag attributes; hoisted onto the node the builder creates

    """

    name: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TextEvent:
    """Character content of the innermost open element."""

    content: str


@dataclass(frozen=True)
class CloseTag:
    """End of an element."""

    name: str


MarkupEvent = Union[OpenTag, TextEvent, CloseTag]
