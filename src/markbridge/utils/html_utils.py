"""HTML fragment inspection helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HtmlTagInfo:
    """Structured view of the root element of an HTML fragment.

    Parameters
    ----------
    tag : str
        Lower-cased tag name
    attributes : dict of str to str
        Attribute values by name; multi-valued attributes are space-joined
    attribute_string : str
        ``name = "value" `` for every attribute, in fragment order
    content : str
        Text content of the element
    closed : bool
        Whether the fragment ends with ``/>``

    """

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    attribute_string: str = ""
    content: str = ""
    closed: bool = False


def _attribute_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return " ".join(str(part) for part in value)
    return str(value)


def _root_element(soup: BeautifulSoup) -> Tag | None:
    for child in soup.contents:
        if isinstance(child, Tag):
            return child
        # Comment and Doctype subclass NavigableString; only plain whitespace is skipped
        if type(child) is NavigableString and not child.strip():
            continue
        return None
    return None


def inspect_html_fragment(html: object) -> HtmlTagInfo | None:
    """Extract tag name, attributes and content from an HTML fragment.

    Returns None for anything that does not start with an element, e.g. a
    bare closing tag like ``</foo>``, a comment, or plain text. Callers treat
    None as "no tag metadata available"; it is never an error.

    Parameters
    ----------
    html : str
        Raw HTML fragment, typically the text of an HTML block or inline

    Returns
    -------
    HtmlTagInfo or None
        Metadata of the fragment's root element, or None if not parseable

    """
    if not isinstance(html, str) or not html.strip():
        return None

    try:
        soup = BeautifulSoup(html, "html.parser")
        item = _root_element(soup)
    except Exception as exc:
        logger.debug("Could not parse HTML fragment %r: %s", html, exc)
        return None

    if item is None:
        logger.debug("HTML fragment has no root element: %r", html)
        return None

    attributes: dict[str, str] = {}
    attribute_string = ""
    for name, value in item.attrs.items():
        text_value = _attribute_value(value)
        attribute_string += f'{name} = "{text_value}" '
        attributes[name] = text_value

    return HtmlTagInfo(
        tag=item.name.lower(),
        attributes=attributes,
        attribute_string=attribute_string,
        content=item.get_text(),
        closed=html.rstrip().endswith("/>"),
    )
