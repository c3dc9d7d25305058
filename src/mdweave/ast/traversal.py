#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/ast/traversal.py
"""In-place rewriting traversal over the source tree.

A traversal walks the tree depth-first in pre-order and hands every node to a
visitor callable together with its position (``index`` in ``parent.children``).
The visitor never mutates the tree itself; it returns a :class:`Rewrite`
describing the change and the engine applies it:

- ``KEEP`` leaves the node as it is
- ``annotate(**metadata)`` merges keys into ``node.metadata`` (later values win)
- ``replace_with(node)`` assigns the new node into ``parent.children[index]``

Returning ``None`` is treated like ``KEEP`` so side-effect visitors still work.

Examples
--------
Mark every container directive:

    >>> def mark(node, index, parent):
    ...     if node.kind == "container_directive":
    ...         return annotate(seen=True)
    ...     return KEEP
    >>> traverse(doc, mark)

"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Optional

from mdweave.ast.nodes import Node, Parent, get_node_children
from mdweave.exceptions import TransformError

logger = logging.getLogger(__name__)


class RewriteAction(enum.Enum):
    """What a visitor asks the traversal to do with the current node."""

    KEEP = "keep"
    ANNOTATE = "annotate"
    REPLACE = "replace"


@dataclass(frozen=True)
class Rewrite:
    """Tagged result returned by a traversal visitor.

    Parameters
    ----------
    action : RewriteAction
        The requested change
    metadata : Mapping, default = empty
        Keys merged into the node's metadata for ``ANNOTATE``
    replacement : Node or None, default = None
        New node for ``REPLACE``

    Notes
    -----
    Build instances with :data:`KEEP`, :func:`annotate` and
    :func:`replace_with` rather than calling the constructor.

    """

    action: RewriteAction
    metadata: Mapping[str, Any] = field(default_factory=dict)
    replacement: Optional[Node] = None


KEEP = Rewrite(RewriteAction.KEEP)


def annotate(**metadata: Any) -> Rewrite:
    """Request a metadata update on the visited node.

    Parameters
    ----------
    **metadata : Any
        Keys and values to store; existing keys are overwritten

    Returns
    -------
    Rewrite
        An ``ANNOTATE`` result

    """
    return Rewrite(RewriteAction.ANNOTATE, metadata=dict(metadata))


def replace_with(node: Node) -> Rewrite:
    """Request that the visited node be replaced by ``node`` at the same index."""
    if not isinstance(node, Node):
        raise TransformError(f"Replacement must be a Node, got {type(node).__name__}")
    return Rewrite(RewriteAction.REPLACE, replacement=node)


Visitor = Callable[[Node, Optional[int], Optional[Parent]], Optional[Rewrite]]


def _apply_rewrite(result: Rewrite | None, node: Node, index: int | None, parent: Parent | None) -> Node:
    """Apply a visitor's result and return the node now occupying the slot."""
    if result is None:
        return node
    if not isinstance(result, Rewrite):
        raise TransformError(f"Visitor returned {type(result).__name__}, expected Rewrite or None")

    if result.action is RewriteAction.KEEP:
        return node

    if result.action is RewriteAction.ANNOTATE:
        node.metadata.update(result.metadata)
        return node

    # REPLACE
    if parent is None or index is None:
        raise TransformError("Cannot replace the root node of a tree")
    replacement = result.replacement
    if replacement is None:
        raise TransformError("Replace rewrite carries no replacement node")
    parent.children[index] = replacement
    logger.debug("Replaced %s at index %d with %s", node.kind, index, replacement.kind)
    return replacement


def _traverse_node(node: Node, index: int | None, parent: Parent | None, visitor: Visitor) -> None:
    current = _apply_rewrite(visitor(node, index, parent), node, index, parent)

    # A replacement's children are visited; the replacement itself is not
    children = get_node_children(current)
    if not children or not isinstance(current, Parent):
        return
    position = 0
    while position < len(children):
        _traverse_node(children[position], position, current, visitor)
        position += 1


def traverse(tree: Node, visitor: Visitor) -> None:
    """Walk ``tree`` in depth-first pre-order, applying the visitor's rewrites.

    Parameters
    ----------
    tree : Node
        Root of the tree to process; mutated in place
    visitor : callable
        ``visitor(node, index, parent)`` returning a :class:`Rewrite` or None.
        ``index`` and ``parent`` are None for the root.

    Raises
    ------
    TransformError
        If the visitor asks to replace the root or returns an unknown value.

    Notes
    -----
    Exceptions raised by the visitor propagate unchanged and abort the walk.
    Every node reachable at the time it is visited is visited exactly once,
    so the traversal always terminates.

    """
    _traverse_node(tree, None, None, visitor)


def walk(tree: Node) -> Iterator[tuple[Node, Optional[int], Optional[Parent]]]:
    """Yield ``(node, index, parent)`` for every node in depth-first pre-order.

    This is a read-only companion to :func:`traverse`. Mutating the tree while
    iterating gives undefined results.
    """
    stack: list[tuple[Node, Optional[int], Optional[Parent]]] = [(tree, None, None)]
    while stack:
        node, index, parent = stack.pop()
        yield node, index, parent
        if isinstance(node, Parent):
            for position in range(len(node.children) - 1, -1, -1):
                stack.append((node.children[position], position, node))
