#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/ast/serialization.py
"""JSON serialization and deserialization for source tree nodes.

The JSON form is what ``mdweave --stages`` prints for the source tree. Every
node becomes an object with a ``node_type`` (the class name), its ``kind``
tag and its dataclass fields; child lists are serialized recursively and an
empty ``metadata`` dict is omitted.

Examples
--------
Serialize a tree to JSON:

    >>> from mdweave.ast import Document, Paragraph, Text
    >>> from mdweave.ast.serialization import ast_to_json
    >>> ast_to_json(Document(children=[Paragraph(children=[Text("Hi")])]), indent=2)

Deserialize JSON back to a tree:

    >>> from mdweave.ast.serialization import json_to_ast
    >>> doc = json_to_ast(json_str)

"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from mdweave.ast import nodes as ast_nodes
from mdweave.ast.nodes import Node

SCHEMA_VERSION = 1

# Fields holding lists of nodes
_NODE_LIST_FIELDS = frozenset({"children", "label"})

_NODE_CLASSES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in vars(ast_nodes).values()
    if isinstance(cls, type) and issubclass(cls, Node) and dataclasses.is_dataclass(cls)
}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to a dictionary representation.

    Parameters
    ----------
    node : Node
        Node to convert

    Returns
    -------
    dict
        JSON-compatible dictionary

    Raises
    ------
    TypeError
        If ``node`` is not a dataclass node

    """
    if not dataclasses.is_dataclass(node):
        raise TypeError(f"Cannot serialize non-dataclass node: {type(node).__name__}")

    result: dict[str, Any] = {"node_type": type(node).__name__, "kind": node.kind}
    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        if f.name in _NODE_LIST_FIELDS:
            result[f.name] = [ast_to_dict(child) for child in value]
        elif f.name == "metadata":
            if value:
                result["metadata"] = _jsonable(value)
        else:
            result[f.name] = _jsonable(value)
    return result


def _jsonable(value: Any) -> Any:
    """Convert metadata values to JSON-compatible structures."""
    if isinstance(value, Node):
        return ast_to_dict(value)
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Convert a dictionary representation back to an AST node.

    Parameters
    ----------
    data : dict
        Dictionary produced by :func:`ast_to_dict`

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    ValueError
        If the node type is missing or unknown

    """
    node_type = data.get("node_type")
    if not isinstance(node_type, str) or node_type not in _NODE_CLASSES:
        raise ValueError(f"Unknown node type: {node_type!r}")

    cls = _NODE_CLASSES[node_type]
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name in _NODE_LIST_FIELDS:
            value = [dict_to_ast(child) for child in value]
        elif isinstance(value, dict):
            value = dict(value)
        kwargs[f.name] = value
    return cls(**kwargs)


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST node to a JSON string with schema versioning.

    Parameters
    ----------
    node : Node
        Node to serialize
    indent : int or None, default = None
        Indentation for pretty printing

    Returns
    -------
    str
        JSON string of the form ``{"schema_version": 1, "node_type": ...}``

    """
    versioned_dict = {"schema_version": SCHEMA_VERSION, **ast_to_dict(node)}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string to an AST node.

    Parameters
    ----------
    json_str : str
        JSON produced by :func:`ast_to_json`

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    ValueError
        If the JSON is invalid or the schema version is unsupported

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise ValueError(
            f"Unsupported schema version: {schema_version}. "
            f"This version of mdweave supports schema version {SCHEMA_VERSION} only."
        )
    return dict_to_ast(data)
