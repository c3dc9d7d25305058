#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/ast/utils.py
"""Utility functions for working with source tree nodes.

Examples
--------
Extract all directives named ``video``:

    >>> from mdweave.ast.utils import extract_directives
    >>> videos = extract_directives(doc, name="video")

"""

from __future__ import annotations

import copy
from typing import Callable, Type, Union

from mdweave.ast.nodes import (
    Code,
    CodeBlock,
    Document,
    Image,
    Node,
    Text,
    get_node_children,
    is_directive,
)
from mdweave.ast.traversal import walk


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "") -> str:
    """Extract plain text from a node or list of nodes.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = ""
        String placed between the text of sibling nodes

    Returns
    -------
    str
        Concatenated text content

    Examples
    --------
        >>> extract_text(Paragraph(children=[Text("Be "), Strong(children=[Text("careful")])]))
        'Be careful'

    """
    if isinstance(node_or_nodes, list):
        return joiner.join(extract_text(node, joiner) for node in node_or_nodes)

    node = node_or_nodes
    if isinstance(node, (Text, Code, CodeBlock)):
        return node.content
    if isinstance(node, Image):
        return node.alt_text
    return joiner.join(extract_text(child, joiner) for child in get_node_children(node))


def clone_node(node: Node) -> Node:
    """Create a deep copy of an AST node.

    Parameters
    ----------
    node : Node
        Node to clone

    Returns
    -------
    Node
        Deep copy of the node, sharing no lists or dicts with the original

    """
    return copy.deepcopy(node)


def extract_nodes(doc: Node, node_type: Type[Node] | None = None) -> list[Node]:
    """Extract all nodes of a specific type in pre-order.

    Parameters
    ----------
    doc : Node
        Tree to extract from
    node_type : type or None, default = None
        Node type to extract (None for all nodes)

    Returns
    -------
    list of Node
        All matching nodes

    """
    return filter_nodes(doc, (lambda n: isinstance(n, node_type)) if node_type else (lambda n: True))


def filter_nodes(doc: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    """Return every node for which ``predicate`` is true, in pre-order."""
    return [node for node, _index, _parent in walk(doc) if predicate(node)]


def extract_directives(doc: Node, name: str | None = None) -> list[Node]:
    """Return all container, leaf and text directives, optionally filtered by name."""
    return filter_nodes(doc, lambda n: is_directive(n, name))


def count_nodes(doc: Document) -> dict[str, int]:
    """Count nodes per ``kind``."""
    counts: dict[str, int] = {}
    for node, _index, _parent in walk(doc):
        counts[node.kind] = counts.get(node.kind, 0) + 1
    return counts
