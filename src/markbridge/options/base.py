"""Base classes for parser and renderer options.

This module defines the foundation classes for the option dataclasses used
by the markbridge parsers and renderers.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Copy-with-changes support for frozen option dataclasses."""

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the names of the option fields of this class."""
        return frozenset(option.name for option in fields(cls))  # type: ignore[arg-type]

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced.

        ``__post_init__`` checks run again on the copy.

        Raises
        ------
        TypeError
            If a keyword is not a field of this class
        ValueError
            If a new value fails validation

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Renderers convert canonical AST documents into an output format.
    Subclasses define format-specific rendering options as frozen dataclass
    fields.

    """


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Parsers convert a source representation (markdown text, an editor tree)
    into the canonical AST.

    Parameters
    ----------
    validate : bool, default True
        Whether ``parse_to_dict`` results are run through the schema layer
        before being returned. ``parse`` always validates, since it
        instantiates typed nodes.

    """

    validate: bool = field(
        default=True,
        metadata={
            "help": "Validate the $class tagged tree against the canonical model",
            "importance": "core",
        },
    )
