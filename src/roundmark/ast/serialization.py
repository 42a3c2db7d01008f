#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/ast/serialization.py
"""JSON and YAML serialization for AST nodes.

Every node becomes a mapping with a ``node_type`` key naming its class plus
one key per dataclass field. Child nodes are serialized recursively, so a
whole document turns into plain dicts and lists that ``json`` and PyYAML
can write.

Provenance markers are ordinary fields and therefore survive a round trip
through either format.

Examples
--------
    >>> from roundmark.ast import Document, Heading, Text
    >>> doc = Document(children=[Heading(level=2, content=[Text(content="Title")], marker="##")])
    >>> json_str = ast_to_json(doc, indent=2)
    >>> json_to_ast(json_str).children[0].marker
    '##'

"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from typing import Any

import yaml

from roundmark.ast.nodes import (
    Autolink,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    SourceLocation,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from roundmark.exceptions import ValidationError

_NODE_CLASSES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        SourceLocation,
        Document,
        Heading,
        Paragraph,
        CodeBlock,
        BlockQuote,
        List,
        ListItem,
        Table,
        TableRow,
        TableCell,
        ThematicBreak,
        Text,
        Emphasis,
        Strong,
        Strikethrough,
        Code,
        Link,
        Image,
        Autolink,
        LineBreak,
    )
}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, (Node, SourceLocation)):
        return ast_to_dict(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    return value


def ast_to_dict(node: Node | SourceLocation) -> dict[str, Any]:
    """Convert an AST node to a dictionary representation.

    Fields holding ``None`` are omitted; everything else is kept.

    Parameters
    ----------
    node : Node or SourceLocation
        The AST node to convert

    Returns
    -------
    dict
        Dictionary representation of the node

    Raises
    ------
    ValueError
        If the node type is not part of the roundmark AST

    Examples
    --------
    >>> ast_to_dict(Text(content="Hello"))
    {'node_type': 'Text', 'content': 'Hello', 'metadata': {}}

    """
    node_type = type(node).__name__
    if _NODE_CLASSES.get(node_type) is not type(node) or not is_dataclass(node):
        raise ValueError(f"Unknown node type for serialization: {node_type}")

    result: dict[str, Any] = {"node_type": node_type}
    for f in fields(node):
        value = getattr(node, f.name)
        if value is None:
            continue
        result[f.name] = _serialize_value(value)
    return result


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, dict) and "node_type" in value:
        return dict_to_ast(value)
    if isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    return value


def dict_to_ast(data: dict[str, Any]) -> Node | SourceLocation:
    """Convert a dictionary produced by :func:`ast_to_dict` back to a node.

    Parameters
    ----------
    data : dict
        Dictionary with a ``node_type`` key

    Returns
    -------
    Node or SourceLocation
        Reconstructed node

    Raises
    ------
    ValueError
        If ``node_type`` is missing or unknown, or a field is not valid for it

    """
    if not isinstance(data, dict) or "node_type" not in data:
        raise ValueError("Invalid node data: missing 'node_type'")

    node_type = data["node_type"]
    cls = _NODE_CLASSES.get(node_type)
    if cls is None:
        raise ValueError(f"Unknown node type: {node_type}")

    valid_fields = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "node_type":
            continue
        if key not in valid_fields:
            raise ValueError(f"Unknown field '{key}' for node type {node_type}")
        # metadata dicts are plain data even when they happen to contain nested dicts
        kwargs[key] = value if key == "metadata" else _deserialize_value(value)

    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ValueError(f"Invalid fields for node type {node_type}: {e}") from e


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST node to a JSON string.

    Parameters
    ----------
    node : Node
        Root node to serialize
    indent : int or None, default None
        Indentation passed to :func:`json.dumps`

    Returns
    -------
    str
        JSON text

    """
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string produced by :func:`ast_to_json`.

    Raises
    ------
    ValidationError
        If the text is not valid JSON or does not describe an AST

    """
    try:
        data = json.loads(json_str)
        node = dict_to_ast(data)
    except (json.JSONDecodeError, ValueError) as e:
        raise ValidationError(f"Invalid AST JSON: {e}", parameter_name="json_str", original_error=e) from e
    if not isinstance(node, Node):
        raise ValidationError("AST JSON must describe a node, not a source location", parameter_name="json_str")
    return node


def ast_to_yaml(node: Node) -> str:
    """Serialize an AST node to YAML.

    Parameters
    ----------
    node : Node
        Root node to serialize

    Returns
    -------
    str
        YAML text with keys in field order

    """
    return yaml.safe_dump(ast_to_dict(node), sort_keys=False, allow_unicode=True, default_flow_style=False)


def yaml_to_ast(yaml_str: str) -> Node:
    """Deserialize YAML produced by :func:`ast_to_yaml`.

    Only the safe YAML loader is used.

    Raises
    ------
    ValidationError
        If the text is not valid YAML or does not describe an AST

    """
    try:
        data = yaml.safe_load(yaml_str)
        node = dict_to_ast(data)
    except (yaml.YAMLError, ValueError) as e:
        raise ValidationError(f"Invalid AST YAML: {e}", parameter_name="yaml_str", original_error=e) from e
    if not isinstance(node, Node):
        raise ValidationError("AST YAML must describe a node, not a source location", parameter_name="yaml_str")
    return node
