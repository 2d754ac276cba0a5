#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/ast/serialization.py
"""Validation and conversion between ``$class`` tagged dicts and typed nodes.

The tree builder and the editor mapper produce JSON-compatible trees whose
nodes carry a ``$class`` tag. This module checks such a tree against the
canonical model and instantiates the typed node classes, and converts typed
trees back to the JSON form.

Validation is strict: unknown classes, unknown properties, missing required
properties, non-string values for string properties and ``nodes`` on leaf
classes are all rejected with :class:`~markbridge.exceptions.ValidationError`.
Every class also accepts an optional ``sourcepos`` string
(``"line:column-line:column"``), kept as the node's ``source_location``.

Examples
--------
    >>> data = {
    ...     "$class": "org.accordproject.commonmark.Document",
    ...     "xmlns": "http://commonmark.org/xml/1.0",
    ...     "nodes": [{"$class": "org.accordproject.commonmark.Paragraph"}],
    ... }
    >>> doc = dict_to_ast(data)
    >>> type(doc.children[0]).__name__
    'Paragraph'
    >>> ast_to_dict(doc)["nodes"][0]
    {'$class': 'org.accordproject.commonmark.Paragraph', 'nodes': []}

"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from markbridge.ast.nodes import (
    Attribute,
    BlockQuote,
    Clause,
    Code,
    CodeBlock,
    ComputedVariable,
    Document,
    Emph,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    Item,
    Linebreak,
    Link,
    List,
    Node,
    Paragraph,
    Softbreak,
    SourceLocation,
    Strong,
    TagInfo,
    Text,
    ThematicBreak,
    Variable,
)
from markbridge.constants import CICERO_NS_PREFIX, CLASS_KEY, COMMON_NS_PREFIX
from markbridge.exceptions import ValidationError


@dataclass(frozen=True)
class _Property:
    json_name: str
    attr_name: str
    required: bool = False
    is_tag: bool = False


@dataclass(frozen=True)
class _NodeSchema:
    class_tag: str
    node_class: type[Node]
    properties: tuple[_Property, ...] = ()
    has_children: bool = False


def _prop(name: str, attr_name: str | None = None, required: bool = False) -> _Property:
    return _Property(json_name=name, attr_name=attr_name or name, required=required)


_TAG = _Property(json_name="tag", attr_name="tag", is_tag=True)

SOURCEPOS_KEY = "sourcepos"

_SCHEMAS: tuple[_NodeSchema, ...] = (
    _NodeSchema(COMMON_NS_PREFIX + "Document", Document, (_prop("xmlns"),), has_children=True),
    _NodeSchema(COMMON_NS_PREFIX + "Paragraph", Paragraph, has_children=True),
    _NodeSchema(COMMON_NS_PREFIX + "Heading", Heading, (_prop("level", required=True),), has_children=True),
    _NodeSchema(COMMON_NS_PREFIX + "BlockQuote", BlockQuote, has_children=True),
    _NodeSchema(
        COMMON_NS_PREFIX + "List",
        List,
        (_prop("type", "list_type", required=True), _prop("start"), _prop("tight"), _prop("delimiter")),
        has_children=True,
    ),
    _NodeSchema(COMMON_NS_PREFIX + "Item", Item, has_children=True),
    _NodeSchema(COMMON_NS_PREFIX + "CodeBlock", CodeBlock, (_prop("text"), _prop("info"), _TAG)),
    _NodeSchema(COMMON_NS_PREFIX + "HtmlBlock", HtmlBlock, (_prop("text"), _TAG)),
    _NodeSchema(COMMON_NS_PREFIX + "ThematicBreak", ThematicBreak),
    _NodeSchema(COMMON_NS_PREFIX + "Text", Text, (_prop("text"),)),
    _NodeSchema(COMMON_NS_PREFIX + "Emph", Emph, has_children=True),
    _NodeSchema(COMMON_NS_PREFIX + "Strong", Strong, has_children=True),
    _NodeSchema(COMMON_NS_PREFIX + "Code", Code, (_prop("text"),)),
    _NodeSchema(
        COMMON_NS_PREFIX + "Link",
        Link,
        (_prop("destination", required=True), _prop("title", required=True)),
        has_children=True,
    ),
    _NodeSchema(
        COMMON_NS_PREFIX + "Image",
        Image,
        (_prop("destination", required=True), _prop("title", required=True)),
        has_children=True,
    ),
    _NodeSchema(COMMON_NS_PREFIX + "HtmlInline", HtmlInline, (_prop("text"), _TAG)),
    _NodeSchema(COMMON_NS_PREFIX + "Softbreak", Softbreak),
    _NodeSchema(COMMON_NS_PREFIX + "Linebreak", Linebreak),
    _NodeSchema(
        CICERO_NS_PREFIX + "Clause",
        Clause,
        (_prop("clauseid", required=True), _prop("src", required=True), _prop("clauseText", "clause_text")),
        has_children=True,
    ),
    _NodeSchema(
        CICERO_NS_PREFIX + "Variable",
        Variable,
        (_prop("id", required=True), _prop("value", required=True)),
        has_children=True,
    ),
    _NodeSchema(
        CICERO_NS_PREFIX + "ComputedVariable",
        ComputedVariable,
        (_prop("value", required=True),),
        has_children=True,
    ),
)

_SCHEMA_BY_CLASS_TAG: dict[str, _NodeSchema] = {schema.class_tag: schema for schema in _SCHEMAS}
_SCHEMA_BY_TYPE: dict[type[Node], _NodeSchema] = {schema.node_class: schema for schema in _SCHEMAS}

TAG_INFO_CLASS = COMMON_NS_PREFIX + "TagInfo"
ATTRIBUTE_CLASS = COMMON_NS_PREFIX + "Attribute"


def get_class_tag(node: Node) -> str:
    """Return the namespace-qualified class tag of a typed node.

    Raises
    ------
    ValidationError
        If the node type is not part of the canonical model

    """
    schema = _SCHEMA_BY_TYPE.get(type(node))
    if schema is None:
        raise ValidationError(f"Not a canonical node: {type(node).__name__}", parameter_value=node)
    return schema.class_tag


def is_known_class(class_tag: str) -> bool:
    """Whether a class tag names a node of the canonical model."""
    return class_tag in _SCHEMA_BY_CLASS_TAG


# ============================================================================
# Typed -> dict
# ============================================================================


def _tag_info_to_dict(tag: TagInfo) -> dict[str, Any]:
    return {
        CLASS_KEY: TAG_INFO_CLASS,
        "tagName": tag.tag_name,
        "attributeString": tag.attribute_string,
        "attributes": [
            {CLASS_KEY: ATTRIBUTE_CLASS, "name": attribute.name, "value": attribute.value}
            for attribute in tag.attributes
        ],
        "content": tag.content,
        "closed": tag.closed,
    }


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert a typed node (and its subtree) to the ``$class`` tagged form.

    Optional properties that are None are omitted. Containers always carry
    a ``nodes`` list, possibly empty.

    Parameters
    ----------
    node : Node
        Node to convert

    Returns
    -------
    dict
        JSON-compatible representation

    """
    schema = _SCHEMA_BY_TYPE.get(type(node))
    if schema is None:
        raise ValidationError(f"Not a canonical node: {type(node).__name__}", parameter_value=node)

    result: dict[str, Any] = {CLASS_KEY: schema.class_tag}
    for prop in schema.properties:
        value = getattr(node, prop.attr_name)
        if value is None:
            continue
        result[prop.json_name] = _tag_info_to_dict(value) if prop.is_tag else value
    source_location = getattr(node, "source_location", None)
    if source_location is not None:
        result[SOURCEPOS_KEY] = source_location.to_sourcepos()

    if schema.has_children:
        result["nodes"] = [ast_to_dict(child) for child in getattr(node, "children")]
    return result


# ============================================================================
# dict -> typed
# ============================================================================


def _require_string(value: Any, name: str, path: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(
            f"Property '{name}' at {path} must be a string, got {type(value).__name__}",
            parameter_name=name,
            parameter_value=value,
        )
    return value


def _dict_to_tag_info(data: Any, path: str) -> TagInfo:
    if not isinstance(data, dict):
        raise ValidationError(f"Tag info at {path} must be an object", parameter_name="tag", parameter_value=data)
    if data.get(CLASS_KEY, TAG_INFO_CLASS) != TAG_INFO_CLASS:
        raise ValidationError(
            f"Tag info at {path} has class {data.get(CLASS_KEY)!r}", parameter_name="tag", parameter_value=data
        )
    if "tagName" not in data:
        raise ValidationError(f"Tag info at {path} is missing 'tagName'", parameter_name="tagName")

    attributes = data.get("attributes", [])
    if not isinstance(attributes, list):
        raise ValidationError(
            f"Property 'attributes' at {path} must be a list", parameter_name="attributes", parameter_value=attributes
        )
    parsed_attributes = []
    for index, attribute in enumerate(attributes):
        attribute_path = f"{path}.attributes[{index}]"
        if not isinstance(attribute, dict):
            raise ValidationError(f"Attribute at {attribute_path} must be an object", parameter_value=attribute)
        parsed_attributes.append(
            Attribute(
                name=_require_string(attribute.get("name"), "name", attribute_path),
                value=_require_string(attribute.get("value"), "value", attribute_path),
            )
        )

    closed = data.get("closed", False)
    if not isinstance(closed, bool):
        raise ValidationError(
            f"Property 'closed' at {path} must be a boolean", parameter_name="closed", parameter_value=closed
        )

    return TagInfo(
        tag_name=_require_string(data["tagName"], "tagName", path),
        attribute_string=_require_string(data.get("attributeString", ""), "attributeString", path),
        attributes=parsed_attributes,
        content=_require_string(data.get("content", ""), "content", path),
        closed=closed,
    )


def _dict_to_node(data: Any, path: str) -> Node:
    if not isinstance(data, dict):
        raise ValidationError(f"Node at {path} must be an object, got {type(data).__name__}", parameter_value=data)

    class_tag = data.get(CLASS_KEY)
    if class_tag is None:
        raise ValidationError(f"Node at {path} has no '{CLASS_KEY}'", parameter_name=CLASS_KEY)
    schema = _SCHEMA_BY_CLASS_TAG.get(class_tag)
    if schema is None:
        raise ValidationError(
            f"Unknown class {class_tag!r} at {path}", parameter_name=CLASS_KEY, parameter_value=class_tag
        )

    known = {prop.json_name for prop in schema.properties} | {CLASS_KEY, SOURCEPOS_KEY}
    if schema.has_children:
        known.add("nodes")
    unknown = [key for key in data if key not in known]
    if unknown:
        raise ValidationError(
            f"Unknown propert{'y' if len(unknown) == 1 else 'ies'} {', '.join(map(repr, unknown))} "
            f"on {class_tag} at {path}",
            parameter_name=unknown[0],
            parameter_value=data[unknown[0]],
        )

    kwargs: dict[str, Any] = {}
    for prop in schema.properties:
        value = data.get(prop.json_name)
        if value is None:
            if prop.required:
                raise ValidationError(
                    f"Missing required property '{prop.json_name}' on {class_tag} at {path}",
                    parameter_name=prop.json_name,
                )
            continue
        if prop.is_tag:
            kwargs[prop.attr_name] = _dict_to_tag_info(value, f"{path}.tag")
        else:
            kwargs[prop.attr_name] = _require_string(value, prop.json_name, path)

    sourcepos = data.get(SOURCEPOS_KEY)
    if sourcepos is not None:
        try:
            kwargs["source_location"] = SourceLocation.from_sourcepos(
                _require_string(sourcepos, SOURCEPOS_KEY, path)
            )
        except ValueError as exc:
            raise ValidationError(
                f"{exc} on {class_tag} at {path}",
                parameter_name=SOURCEPOS_KEY,
                parameter_value=sourcepos,
                original_error=exc,
            ) from exc

    if schema.has_children:
        children = data.get("nodes", [])
        if not isinstance(children, list):
            raise ValidationError(
                f"Property 'nodes' at {path} must be a list", parameter_name="nodes", parameter_value=children
            )
        kwargs["children"] = [_dict_to_node(child, f"{path}.nodes[{index}]") for index, child in enumerate(children)]

    try:
        return schema.node_class(**kwargs)
    except ValueError as exc:
        raise ValidationError(f"Invalid {class_tag} at {path}: {exc}", original_error=exc) from exc


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Validate a ``$class`` tagged tree and build typed nodes from it.

    Parameters
    ----------
    data : dict
        JSON-compatible tree

    Returns
    -------
    Node
        Typed root node

    Raises
    ------
    ValidationError
        If any node in the tree does not match the canonical model

    """
    return _dict_to_node(data, "$")


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a typed tree to a JSON string.

    Parameters
    ----------
    node : Node
        Root node to serialize
    indent : int or None, default = None
        Indentation passed to :func:`json.dumps`

    Returns
    -------
    str
        JSON text

    """
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Parse and validate a JSON string into a typed tree.

    Raises
    ------
    ValidationError
        If the JSON is malformed or does not match the canonical model

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON: {exc}", original_error=exc) from exc
    return dict_to_ast(data)
