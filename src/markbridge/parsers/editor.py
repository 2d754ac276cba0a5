#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/parsers/editor.py
"""Editor tree to canonical AST converter.

The rich-text editor stores documents as Slate-style JSON: text nodes carry
a string and a list of marks, element nodes carry a ``type``, a ``data``
bag and child ``nodes``. Conversion happens in two steps:

1. Decoding turns the raw JSON into :class:`EditorText` and
   :class:`EditorElement` values. The ``data`` bag becomes a per-type
   dataclass, so a missing ``href`` or an unknown ``type`` is rejected here,
   before any output is produced.
2. Mapping walks the decoded tree and emits ``$class`` tagged canonical
   nodes. Text runs go through :func:`compose_marks`.

Examples
--------
    >>> value = {"nodes": [{"type": "paragraph", "nodes": [
    ...     {"object": "text", "text": "hi", "marks": [{"type": "bold"}]}]}]}
    >>> tree = EditorToAstConverter().convert_to_dict(value)
    >>> tree["nodes"][0]["nodes"][0]["$class"]
    'org.accordproject.commonmark.Strong'

"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Callable, Mapping, Optional, Union

from markbridge.ast.nodes import Document
from markbridge.constants import (
    CICERO_NS_PREFIX,
    CLASS_KEY,
    COMMON_NS_PREFIX,
    COMMONMARK_XMLNS,
    EDITOR_HEADING_TYPES,
)
from markbridge.exceptions import ParsingError, UnhandledNodeError, ValidationError
from markbridge.options.editor import EditorParserOptions
from markbridge.parsers.base import BaseParser

logger = logging.getLogger(__name__)

BOLD = "bold"
ITALIC = "italic"
CODE = "code"


# =============================================================================
# Decoded editor tree
# =============================================================================


@dataclass(frozen=True)
class ListData:
    """Data of an ``ol_list``/``ul_list`` node, values kept as strings."""

    delimiter: Optional[str] = None
    start: Optional[str] = None
    tight: Optional[str] = None


@dataclass(frozen=True)
class LinkData:
    """Data of a ``link`` node."""

    href: str


@dataclass(frozen=True)
class ClauseData:
    """Data of a ``clause`` node."""

    clauseid: str
    src: str
    clause_text: Optional[str] = None


@dataclass(frozen=True)
class VariableData:
    """Data of a ``variable`` node."""

    id: str
    value: str


@dataclass(frozen=True)
class ComputedData:
    """Data of a ``computed`` node."""

    value: str


EditorData = Union[ListData, LinkData, ClauseData, VariableData, ComputedData]


@dataclass(frozen=True)
class EditorText:
    """A run of text with its marks.

    Parameters
    ----------
    text : str
        The raw text
    marks : frozenset of str
        Mark types, e.g. ``{"bold", "italic"}``

    """

    text: str
    marks: frozenset[str] = frozenset()


@dataclass(frozen=True)
class EditorElement:
    """A typed editor element.

    Parameters
    ----------
    type : str
        Editor node type, e.g. ``paragraph`` or ``heading_two``
    data : EditorData or None
        Type-specific data, None for types that carry none
    nodes : tuple
        Child nodes in document order
    text : str or None
        The element's own text; used by ``code_block``, ``html_block`` and
        ``html_inline``

    """

    type: str
    data: Optional[EditorData] = None
    nodes: tuple[Union[EditorText, EditorElement], ...] = ()
    text: Optional[str] = None


EditorNode = Union[EditorText, EditorElement]


def _as_str(value: Any) -> Optional[str]:
    """Normalise a data value to the string form used by the canonical AST."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _required(data: Mapping[str, Any], key: str, node_type: str, path: str) -> str:
    value = _as_str(data.get(key))
    if value is None:
        raise ValidationError(
            f"Editor node '{node_type}' at {path} is missing data field '{key}'",
            parameter_name=key,
        )
    return value


def _decode_list_data(data: Mapping[str, Any], node_type: str, path: str) -> ListData:
    return ListData(
        delimiter=_as_str(data.get("delimiter")),
        start=_as_str(data.get("start")),
        tight=_as_str(data.get("tight")),
    )


def _decode_link_data(data: Mapping[str, Any], node_type: str, path: str) -> LinkData:
    return LinkData(href=_required(data, "href", node_type, path))


def _decode_clause_data(data: Mapping[str, Any], node_type: str, path: str) -> ClauseData:
    return ClauseData(
        clauseid=_required(data, "clauseid", node_type, path),
        src=_required(data, "src", node_type, path),
        clause_text=_as_str(data.get("clauseText")),
    )


def _decode_variable_data(data: Mapping[str, Any], node_type: str, path: str) -> VariableData:
    return VariableData(id=_required(data, "id", node_type, path), value=_required(data, "value", node_type, path))


def _decode_computed_data(data: Mapping[str, Any], node_type: str, path: str) -> ComputedData:
    return ComputedData(value=_required(data, "value", node_type, path))


_DATA_DECODERS: dict[str, Callable[[Mapping[str, Any], str, str], EditorData]] = {
    "ol_list": _decode_list_data,
    "ul_list": _decode_list_data,
    "link": _decode_link_data,
    "clause": _decode_clause_data,
    "variable": _decode_variable_data,
    "computed": _decode_computed_data,
}

_PLAIN_TYPES = frozenset(
    {
        "paragraph",
        "quote",
        "block_quote",
        "horizontal_rule",
        "code_block",
        "html_block",
        "html_inline",
        "list_item",
        *EDITOR_HEADING_TYPES,
    }
)


def _decode_marks(raw_marks: Any, path: str) -> frozenset[str]:
    if raw_marks is None:
        return frozenset()
    if not isinstance(raw_marks, list):
        raise ValidationError(f"Marks at {path} must be a list", parameter_name="marks", parameter_value=raw_marks)
    marks = set()
    for mark in raw_marks:
        mark_type = mark.get("type") if isinstance(mark, Mapping) else mark
        if not isinstance(mark_type, str):
            raise ValidationError(f"Mark at {path} has no type", parameter_name="marks", parameter_value=mark)
        marks.add(mark_type)
    return frozenset(marks)


def _decode_text(raw: Any, path: str) -> list[EditorText]:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Text node at {path} must be an object", parameter_value=raw)
    leaves = raw.get("leaves")
    if isinstance(leaves, list):
        # Older editor payloads split a text node into leaves, one per mark set
        return [
            item for index, leaf in enumerate(leaves) for item in _decode_text(leaf, f"{path}.leaves[{index}]")
        ]

    text = raw.get("text", "")
    if not isinstance(text, str):
        raise ValidationError(f"Text at {path} must be a string", parameter_name="text", parameter_value=text)
    return [EditorText(text=text, marks=_decode_marks(raw.get("marks"), path))]


def _collect_text(nodes: tuple[EditorNode, ...]) -> str:
    parts = []
    for node in nodes:
        parts.append(node.text if isinstance(node, EditorText) else _collect_text(node.nodes))
    return "".join(parts)


def decode_editor_node(raw: Any, path: str = "nodes[0]") -> list[EditorNode]:
    """Decode one raw editor node.

    A text node with legacy ``leaves`` decodes to one :class:`EditorText`
    per leaf, hence the list result.

    Parameters
    ----------
    raw : dict
        Raw editor node
    path : str, default "nodes[0]"
        Location of the node, used in error messages

    Returns
    -------
    list of EditorNode
        Decoded nodes

    Raises
    ------
    ValidationError
        If the node is not an object, has neither ``object`` nor ``type``,
        or lacks a required data field
    UnhandledNodeError
        If the element type has no mapping

    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Editor node at {path} must be an object", parameter_value=raw)

    if raw.get("object") == "text":
        return _decode_text(raw, path)

    node_type = raw.get("type")
    if node_type is None:
        raise ValidationError(
            f"Editor node at {path} has neither a text 'object' nor a 'type'",
            parameter_name="type",
            parameter_value=raw,
        )
    if not isinstance(node_type, str) or (node_type not in _PLAIN_TYPES and node_type not in _DATA_DECODERS):
        raise UnhandledNodeError(raw, parsing_stage="decode")

    raw_data = raw.get("data") or {}
    if not isinstance(raw_data, Mapping):
        raise ValidationError(f"Data at {path} must be an object", parameter_name="data", parameter_value=raw_data)
    decoder = _DATA_DECODERS.get(node_type)
    data = decoder(raw_data, node_type, path) if decoder else None

    children = decode_editor_nodes(raw.get("nodes"), path)

    text = raw.get("text")
    if text is not None and not isinstance(text, str):
        raise ValidationError(f"Text at {path} must be a string", parameter_name="text", parameter_value=text)
    if text is None and node_type in ("code_block", "html_block", "html_inline"):
        text = _collect_text(children)

    return [EditorElement(type=node_type, data=data, nodes=children, text=text)]


def decode_editor_nodes(raw_nodes: Any, path: str = "") -> tuple[EditorNode, ...]:
    """Decode a raw ``nodes`` list; None decodes to no children."""
    if raw_nodes is None:
        return ()
    if not isinstance(raw_nodes, list):
        raise ValidationError(
            f"'nodes' at {path or 'root'} must be a list", parameter_name="nodes", parameter_value=raw_nodes
        )
    prefix = f"{path}.nodes" if path else "nodes"
    return tuple(
        decoded
        for index, raw in enumerate(raw_nodes)
        for decoded in decode_editor_node(raw, f"{prefix}[{index}]")
    )


def decode_editor_value(value: Any) -> tuple[EditorNode, ...]:
    """Decode a whole editor value.

    Accepts ``{"nodes": [...]}`` as well as the serialized editor value
    ``{"document": {"nodes": [...]}}``.

    Raises
    ------
    ValidationError
        If the value has no ``nodes`` list

    """
    if isinstance(value, Mapping) and isinstance(value.get("document"), Mapping):
        value = value["document"]
    if not isinstance(value, Mapping) or not isinstance(value.get("nodes"), list):
        raise ValidationError("Editor value must be an object with a 'nodes' list", parameter_name="nodes")
    return decode_editor_nodes(value["nodes"])


# =============================================================================
# Mapping
# =============================================================================


def _node(class_name: str, prefix: str = COMMON_NS_PREFIX, **attributes: Optional[str]) -> dict[str, Any]:
    result: dict[str, Any] = {CLASS_KEY: prefix + class_name}
    result.update({key: value for key, value in attributes.items() if value is not None})
    return result


def compose_marks(text_node: EditorText) -> dict[str, Any]:
    """Build the canonical inline node for a run of marked text.

    A ``code`` mark wins over everything else and yields a bare Code leaf.
    Otherwise the Text leaf is wrapped in Strong for ``bold`` and in Emph
    for ``italic``; with both, Emph is the outer wrapper. Other marks are
    ignored.

    Parameters
    ----------
    text_node : EditorText
        Decoded text run

    Returns
    -------
    dict
        Code, Text, Strong or Emph node

    """
    if CODE in text_node.marks:
        return _node("Code", text=text_node.text)

    result = _node("Text", text=text_node.text)
    if BOLD in text_node.marks:
        result = {**_node("Strong"), "nodes": [result]}
    if ITALIC in text_node.marks:
        result = {**_node("Emph"), "nodes": [result]}
    return result


_HEADING_LEVELS = {node_type: str(level) for level, node_type in enumerate(EDITOR_HEADING_TYPES, start=1)}


def _map_element(element: EditorElement) -> dict[str, Any]:
    """Produce the canonical node for an element, without its editor children."""
    node_type = element.type
    data = element.data

    if node_type in _HEADING_LEVELS:
        return {**_node("Heading", level=_HEADING_LEVELS[node_type]), "nodes": []}
    if node_type == "paragraph":
        return {**_node("Paragraph"), "nodes": []}
    if node_type in ("quote", "block_quote"):
        return {**_node("BlockQuote"), "nodes": []}
    if node_type == "horizontal_rule":
        return _node("ThematicBreak")
    if node_type == "code_block":
        return _node("CodeBlock", text=element.text or "")
    if node_type == "html_block":
        return _node("HtmlBlock", text=element.text or "")
    if node_type == "html_inline":
        return _node("HtmlInline", text=element.text or "")
    if node_type == "list_item":
        return {**_node("Item"), "nodes": [{**_node("Paragraph"), "nodes": []}]}
    if isinstance(data, ListData):
        list_type = "ordered" if node_type == "ol_list" else "bullet"
        attributes = _node("List", type=list_type, delimiter=data.delimiter, start=data.start, tight=data.tight)
        return {**attributes, "nodes": []}
    if isinstance(data, LinkData):
        return {**_node("Link", destination=data.href, title=""), "nodes": []}
    if isinstance(data, ClauseData):
        clause = _node("Clause", CICERO_NS_PREFIX, clauseid=data.clauseid, src=data.src, clauseText=data.clause_text)
        return {**clause, "nodes": []}
    if isinstance(data, VariableData):
        return {**_node("Variable", CICERO_NS_PREFIX, id=data.id, value=data.value), "nodes": []}
    if isinstance(data, ComputedData):
        return {**_node("ComputedVariable", CICERO_NS_PREFIX, value=data.value), "nodes": []}

    raise UnhandledNodeError(element, parsing_stage="map")


def map_editor_nodes(parent: dict[str, Any], nodes: tuple[EditorNode, ...]) -> None:
    """Append the canonical form of ``nodes`` to ``parent``'s children.

    Editor children of an element are mapped into the first child of the
    produced node when it already has one, otherwise into the produced node
    itself. This places a ``list_item``'s content inside its Paragraph.
    Children of elements that produce leaves (code, HTML, rules) are
    dropped.

    Raises
    ------
    ParsingError
        If ``parent`` cannot hold children
    UnhandledNodeError
        If an element has no mapping

    """
    if "nodes" not in parent:
        raise ParsingError(f"Parent node {parent.get(CLASS_KEY)!r} cannot hold children", parsing_stage="map")

    for node in nodes:
        if isinstance(node, EditorText):
            produced = compose_marks(node)
        else:
            produced = _map_element(node)
            if node.nodes and "nodes" in produced:
                target = produced["nodes"][0] if produced["nodes"] else produced
                map_editor_nodes(target, node.nodes)
        parent["nodes"].append(produced)


class EditorToAstConverter(BaseParser):
    """Convert an editor tree to the canonical AST.

    Parameters
    ----------
    options : EditorParserOptions or None, default = None
        Parser configuration options

    """

    def __init__(self, options: EditorParserOptions | None = None):
        """Initialize the editor parser with options."""
        BaseParser._validate_options_type(options, EditorParserOptions, "editor")
        options = options or EditorParserOptions()
        super().__init__(options)
        self.options: EditorParserOptions = options

    @staticmethod
    def _load_editor_value(input_data: Union[Mapping[str, Any], str, Path, IO[bytes], IO[str], bytes]) -> Any:
        if isinstance(input_data, Mapping):
            return input_data
        content = BaseParser._load_text_content(input_data)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Editor value is not valid JSON: {e}", original_error=e) from e

    def _build_dict(self, input_data: Any) -> dict[str, Any]:
        """Decode the editor value and map it to a ``$class`` tagged tree.

        Parameters
        ----------
        input_data : dict, str, Path, IO or bytes
            Editor value, or JSON text holding one

        Returns
        -------
        dict
            Root Document node

        """
        nodes = decode_editor_value(self._load_editor_value(input_data))

        result: dict[str, Any] = {**_node("Document", xmlns=COMMONMARK_XMLNS), "nodes": []}
        map_editor_nodes(result, nodes)
        logger.debug("Converted editor tree with %d top-level nodes", len(result["nodes"]))
        return result

    def convert_to_dict(self, editor_value: Any) -> dict[str, Any]:
        """Convert an editor value to a ``$class`` tagged canonical AST."""
        return self.parse_to_dict(editor_value)


def editor_to_ast(editor_value: Any, options: EditorParserOptions | None = None) -> Document:
    """Convert an editor value to a typed Document."""
    return EditorToAstConverter(options).parse(editor_value)
