"""Test utilities for the mdweave test suite.

Builders for small source trees and helpers for inspecting pipeline output.
"""

from mdweave.ast import ContainerDirective, Document, LeafDirective, Paragraph, Text
from mdweave.hast import Element, HastNode


def paragraph(text: str) -> Paragraph:
    """Build a paragraph holding a single text node."""
    return Paragraph(children=[Text(content=text)])


def container(name: str, *texts: str, **attributes: str) -> ContainerDirective:
    """Build a container directive whose body is one paragraph per text."""
    return ContainerDirective(name=name, attributes=dict(attributes), children=[paragraph(t) for t in texts])


def video(src: str = "", title: str = "", type: str | None = None) -> LeafDirective:
    """Build a ``::video`` leaf directive; omitted attributes are left out."""
    attributes = {"src": src, "title": title}
    if type is not None:
        attributes["type"] = type
    return LeafDirective(name="video", attributes=attributes)


def document(*children) -> Document:
    """Build a document from block nodes."""
    return Document(children=list(children))


def find_elements(node: HastNode, tag_name: str) -> list[Element]:
    """Collect every target element with ``tag_name`` in document order."""
    found: list[Element] = []
    if isinstance(node, Element) and node.tag_name == tag_name:
        found.append(node)
    for child in getattr(node, "children", []):
        found.extend(find_elements(child, tag_name))
    return found
