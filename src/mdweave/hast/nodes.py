#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/hast/nodes.py
"""Node classes for the target (HTML) tree.

The target tree is what the tree converter produces and the HTML renderer
serializes. It has four node types:

- :class:`Root` holds the top-level nodes
- :class:`Element` is an HTML element with a tag name and properties
- :class:`Text` is character data, escaped on output
- :class:`Raw` is a pre-rendered fragment, emitted byte-for-byte

Element properties map attribute names to values. A string or number is
written as ``name="value"``, a list is space-joined, ``True`` writes a bare
attribute and ``False`` or ``None`` omits it.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

PropertyValue = Union[str, int, float, bool, None, list]


class HastNode(ABC):
    """Base class for target tree nodes."""

    type: ClassVar[str] = "node"

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dictionary for this node and its subtree."""
        pass


@dataclass
class Root(HastNode):
    """Root of a target tree.

    Parameters
    ----------
    children : list of HastNode, default = empty list
        Top-level nodes

    """

    type: ClassVar[str] = "root"

    children: list[HastNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "children": [child.to_dict() for child in self.children]}


@dataclass
class Element(HastNode):
    """HTML element.

    Parameters
    ----------
    tag_name : str
        Element name (e.g. ``"p"``, ``"doc-content-callout"``)
    properties : dict, default = empty dict
        Attribute values keyed by attribute name
    children : list of HastNode, default = empty list
        Child nodes

    """

    type: ClassVar[str] = "element"

    tag_name: str
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    children: list[HastNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "tagName": self.tag_name,
            "properties": dict(self.properties),
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class Text(HastNode):
    """Character data."""

    type: ClassVar[str] = "text"

    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass
class Raw(HastNode):
    """Pre-rendered HTML emitted verbatim by the renderer."""

    type: ClassVar[str] = "raw"

    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value}
