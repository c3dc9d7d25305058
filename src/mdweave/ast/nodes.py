#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/ast/nodes.py
"""AST node classes for the source tree.

This module defines the node hierarchy that represents a parsed Markdown
document, including the generic directive nodes that rewrite rules act on.
Each node represents a structural or inline element in the document.

The node hierarchy is designed to:
- Give every node a ``kind`` tag so rules can select nodes by category
- Keep all child nodes in one ``children`` list so a traversal can replace a
  node by assigning into its parent's list
- Carry a ``metadata`` dict that rewrite rules use to steer conversion

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.
Nodes with children also inherit from Parent.

Block-level nodes:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, ThematicBreak, HTMLBlock
    - ContainerDirective, LeafDirective

Inline nodes:
    - Text, Emphasis, Strong, Code
    - Link, Image, LineBreak, HTMLInline
    - TextDirective

Rewrite output:
    - RawOutput (a pre-rendered fragment emitted verbatim)

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional


class Node(ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and conversion.

    Attributes
    ----------
    kind : str
        Class-level category tag (e.g. ``"paragraph"``, ``"leaf_directive"``).
        Rewrite rules select nodes by ``kind`` and, for directives, ``name``.
    metadata : dict
        Arbitrary metadata associated with this node. Rewrite rules store
        ``target_element`` and ``target_properties`` here.

    """

    kind: ClassVar[str] = "node"
    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


class Parent(Node):
    """Base class for nodes that hold an ordered list of child nodes.

    The ``children`` list is the single place a node's descendants live.
    """

    children: list[Node]


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Parent):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (front matter values)

    """

    kind: ClassVar[str] = "root"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_document method

        Returns
        -------
        Any
            Result from visitor.visit_document(self)

        """
        return visitor.visit_document(self)


@dataclass
class Heading(Parent):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    children : list of Node, default = empty list
        Inline nodes representing heading text
    metadata : dict, default = empty dict
        Heading metadata

    """

    kind: ClassVar[str] = "heading"

    level: int
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Parent):
    """Paragraph node containing inline content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Inline nodes representing paragraph content
    metadata : dict, default = empty dict
        Paragraph metadata

    """

    kind: ClassVar[str] = "paragraph"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Code block node with optional language specification.

    Represents a fenced or indented code block. The content is not parsed
    as Markdown, so directive syntax inside it is left alone.

    Parameters
    ----------
    content : str
        Code content
    language : str or None, default = None
        Language from the fence info string
    metadata : dict, default = empty dict
        Code block metadata

    """

    kind: ClassVar[str] = "code"

    content: str
    language: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Parent):
    """Block quote node containing other block elements.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the quote
    metadata : dict, default = empty dict
        Block quote metadata

    """

    kind: ClassVar[str] = "blockquote"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Parent):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    children : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists
    tight : bool, default = True
        Whether list is tight (no blank lines between items)
    metadata : dict, default = empty dict
        List metadata

    """

    kind: ClassVar[str] = "list"

    ordered: bool
    children: list[Node] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Parent):
    """List item node containing block content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item
    metadata : dict, default = empty dict
        List item metadata

    """

    kind: ClassVar[str] = "list_item"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break node (horizontal rule)."""

    kind: ClassVar[str] = "thematic_break"

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block written by the document author.

    Parameters
    ----------
    content : str
        Raw HTML content
    metadata : dict, default = empty dict
        HTML block metadata

    Notes
    -----
    Author HTML reaches the output unless the converter is configured
    with ``allow_dangerous_html=False``.

    """

    kind: ClassVar[str] = "html"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node.

    Parameters
    ----------
    content : str
        Text content
    metadata : dict, default = empty dict
        Text metadata

    """

    kind: ClassVar[str] = "text"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text node."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Parent):
    """Emphasis (italic) node."""

    kind: ClassVar[str] = "emphasis"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis node."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Parent):
    """Strong (bold) node."""

    kind: ClassVar[str] = "strong"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong node."""
        return visitor.visit_strong(self)


@dataclass
class Code(Node):
    """Inline code span.

    Parameters
    ----------
    content : str
        Code text
    metadata : dict, default = empty dict
        Code metadata

    """

    kind: ClassVar[str] = "inline_code"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass
class Link(Parent):
    """Hyperlink node.

    Parameters
    ----------
    url : str
        Link target
    children : list of Node, default = empty list
        Inline nodes forming the link text
    title : str or None, default = None
        Optional link title
    metadata : dict, default = empty dict
        Link metadata

    """

    kind: ClassVar[str] = "link"

    url: str
    children: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image node.

    Parameters
    ----------
    url : str
        Image source
    alt_text : str, default = ""
        Alternative text
    title : str or None, default = None
        Optional image title
    metadata : dict, default = empty dict
        Image metadata

    """

    kind: ClassVar[str] = "image"

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Line break node.

    Parameters
    ----------
    soft : bool, default = False
        True for soft breaks (newline in source), False for hard breaks
    metadata : dict, default = empty dict
        Line break metadata

    """

    kind: ClassVar[str] = "break"

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


@dataclass
class HTMLInline(Node):
    """Inline raw HTML written by the document author."""

    kind: ClassVar[str] = "inline_html"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


# ============================================================================
# Directive Nodes
# ============================================================================


@dataclass
class ContainerDirective(Parent):
    """Block directive that wraps other block content.

    Written as ``:::name[label]{attributes}`` up to a closing line of at
    least as many colons.

    Parameters
    ----------
    name : str
        Directive identifier (e.g. ``"warning"``)
    attributes : dict of str to str, default = empty dict
        Attributes from the ``{...}`` list
    children : list of Node, default = empty list
        Block content between the opening and closing fences
    label : list of Node, default = empty list
        Inline content of the ``[...]`` label, kept apart from the body
    metadata : dict, default = empty dict
        Directive metadata

    """

    kind: ClassVar[str] = "container_directive"

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    label: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this container directive."""
        return visitor.visit_container_directive(self)


@dataclass
class LeafDirective(Parent):
    """Block directive occupying a single line: ``::name[label]{attributes}``.

    The children are the inline content of the label.
    """

    kind: ClassVar[str] = "leaf_directive"

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this leaf directive."""
        return visitor.visit_leaf_directive(self)


@dataclass
class TextDirective(Parent):
    """Inline directive: ``:name[label]{attributes}``.

    The children are the inline content of the label.
    """

    kind: ClassVar[str] = "text_directive"

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text directive."""
        return visitor.visit_text_directive(self)


@dataclass
class RawOutput(Node):
    """Pre-rendered output fragment produced by a rewrite rule.

    The converter emits ``raw_content`` verbatim. A raw output node has no
    children.

    Parameters
    ----------
    raw_content : str
        Fragment to emit (may be empty)
    metadata : dict, default = empty dict
        Node metadata

    """

    kind: ClassVar[str] = "raw_output"

    raw_content: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this raw output."""
        return visitor.visit_raw_output(self)


DIRECTIVE_TYPES: tuple[type[Node], ...] = (ContainerDirective, LeafDirective, TextDirective)


def get_node_children(node: Node) -> list[Node]:
    """Get the live child list of a node.

    Unlike a copy, the returned list can be assigned into, which is how a
    traversal replaces a node in place.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        The node's ``children`` list, or a new empty list for leaf nodes

    Examples
    --------
    >>> heading = Heading(level=1, children=[Text("Hello"), Strong(children=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, Parent):
        return node.children
    return []


def is_directive(node: Node, name: str | None = None) -> bool:
    """Return True when ``node`` is a directive, optionally with the given name."""
    if not isinstance(node, DIRECTIVE_TYPES):
        return False
    return name is None or getattr(node, "name", None) == name
