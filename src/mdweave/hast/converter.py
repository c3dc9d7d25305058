#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/hast/converter.py
"""Conversion of the rewritten source tree into the target (HTML) tree.

The converter honors what rewrite rules left on the tree before anything else:

1. A :class:`~mdweave.ast.nodes.RawOutput` becomes a :class:`Raw` node with
   its fragment, verbatim.
2. A node whose metadata carries ``target_element`` becomes an
   :class:`Element` with that tag, ``target_properties`` as its properties and
   its converted children. A container directive's label comes first, as a
   paragraph.
3. Every other node gets the default structural mapping (``h1``-``h6``, ``p``,
   ``em``, ``strong``, ``code``, ``pre``, ``blockquote``, ``ul``/``ol``/``li``,
   ``a``, ``img``, ``br``, ``hr``). Directives no rule claimed become ``div``
   (container and leaf) or ``span`` (text) with their attributes.

Author-written HTML passes through verbatim; with ``allow_dangerous_html`` off
it is dropped.

With ``block_newlines`` (the default) newline text nodes separate sibling
block elements, so the serialized HTML has one block per line.

"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from mdweave.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    ContainerDirective,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LeafDirective,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    RawOutput,
    Strong,
    Text,
    TextDirective,
    ThematicBreak,
    get_node_children,
)
from mdweave.ast.visitors import NodeVisitor
from mdweave.constants import META_TARGET_ELEMENT, META_TARGET_PROPERTIES
from mdweave.exceptions import InvalidOptionsError, RenderingError
from mdweave.hast import nodes as hast
from mdweave.options.html import HastConverterOptions

logger = logging.getLogger(__name__)

# Source node kinds that occupy their own block in the output
_BLOCK_KINDS = frozenset(
    {
        "paragraph",
        "heading",
        "code",
        "blockquote",
        "list",
        "list_item",
        "thematic_break",
        "html",
        "container_directive",
        "leaf_directive",
        "raw_output",
    }
)


class HastConverter(NodeVisitor):
    """Convert a source tree into a target tree.

    Every ``visit_*`` method returns a list of target nodes, so a source
    node may produce zero nodes (dropped HTML) or several (a hard line break
    is ``<br>`` followed by a newline).

    Parameters
    ----------
    options : HastConverterOptions or None, default = None
        Conversion options

    Examples
    --------
        >>> from mdweave.hast import HastConverter
        >>> root = HastConverter().convert(document)

    """

    def __init__(self, options: HastConverterOptions | None = None):
        if options is not None and not isinstance(options, HastConverterOptions):
            raise InvalidOptionsError(
                component_name="hast-converter",
                expected_type=HastConverterOptions,
                received_type=type(options),
            )
        self.options: HastConverterOptions = options or HastConverterOptions()

    def convert(self, document: Document) -> hast.Root:
        """Convert a document into a target tree root.

        Parameters
        ----------
        document : Document
            Rewritten source tree

        Returns
        -------
        Root
            The target tree

        Raises
        ------
        RenderingError
            If the tree holds a node the converter does not know, or a
            malformed ``target_element``

        """
        if not isinstance(document, Document):
            raise RenderingError(
                f"Expected a Document to convert, got {type(document).__name__}", rendering_stage="conversion"
            )
        root = hast.Root(children=self._wrap(self._convert_all(document.children), loose=False))
        logger.debug(f"Converted document into {len(root.children)} top-level target node(s)")
        return root

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _convert(self, node: Node) -> list[hast.HastNode]:
        """Convert one node, honoring rewrite-rule metadata first."""
        if isinstance(node, RawOutput):
            return self.visit_raw_output(node)
        if META_TARGET_ELEMENT in node.metadata:
            return [self._targeted_element(node)]
        return node.accept(self)

    def _convert_all(self, nodes: Iterable[Node]) -> list[hast.HastNode]:
        result: list[hast.HastNode] = []
        for node in nodes:
            result.extend(self._convert(node))
        return result

    def _targeted_element(self, node: Node) -> hast.Element:
        tag_name = node.metadata[META_TARGET_ELEMENT]
        if not isinstance(tag_name, str) or not tag_name:
            raise RenderingError(
                f"Invalid {META_TARGET_ELEMENT} on {node.kind} node: {tag_name!r}", rendering_stage="conversion"
            )
        properties = node.metadata.get(META_TARGET_PROPERTIES) or {}
        if isinstance(node, ContainerDirective) and node.label:
            # The label leads the body as its own paragraph
            blocks = [hast.Element("p", children=self._convert_all(node.label)), *self._convert_all(node.children)]
            children = self._wrap(blocks, loose=True)
        else:
            children = self._convert_children(get_node_children(node))
        return hast.Element(tag_name=tag_name, properties=dict(properties), children=children)

    def _convert_children(self, children: list[Node]) -> list[hast.HastNode]:
        """Convert child nodes, separating them by newlines when they are blocks."""
        converted = self._convert_all(children)
        if any(child.kind in _BLOCK_KINDS for child in children):
            return self._wrap(converted, loose=True)
        return converted

    def _wrap(self, nodes: list[hast.HastNode], loose: bool) -> list[hast.HastNode]:
        """Put newline text nodes between ``nodes``, and around them when ``loose``."""
        if not self.options.block_newlines:
            return nodes
        result: list[hast.HastNode] = []
        if loose:
            result.append(hast.Text("\n"))
        for i, node in enumerate(nodes):
            if i:
                result.append(hast.Text("\n"))
            result.append(node)
        if loose and nodes:
            result.append(hast.Text("\n"))
        return result

    def _newline(self) -> list[hast.HastNode]:
        return [hast.Text("\n")] if self.options.block_newlines else []

    def _directive_element(self, tag_name: str, node: Any, children: list[hast.HastNode]) -> hast.Element:
        return hast.Element(tag_name=tag_name, properties=dict(node.attributes), children=children)

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> list[hast.HastNode]:
        return [self.convert(node)]

    def visit_heading(self, node: Heading) -> list[hast.HastNode]:
        level = min(6, max(1, node.level))
        return [hast.Element(f"h{level}", children=self._convert_all(node.children))]

    def visit_paragraph(self, node: Paragraph) -> list[hast.HastNode]:
        return [hast.Element("p", children=self._convert_all(node.children))]

    def visit_code_block(self, node: CodeBlock) -> list[hast.HastNode]:
        properties: dict[str, hast.PropertyValue] = {}
        if node.language:
            properties["class"] = f"{self.options.code_language_prefix}{node.language}"
        content = f"{node.content}\n" if node.content else ""
        code = hast.Element("code", properties=properties, children=[hast.Text(content)])
        return [hast.Element("pre", children=[code])]

    def visit_block_quote(self, node: BlockQuote) -> list[hast.HastNode]:
        return [hast.Element("blockquote", children=self._wrap(self._convert_all(node.children), loose=True))]

    def visit_list(self, node: List) -> list[hast.HastNode]:
        tag_name = "ol" if node.ordered else "ul"
        properties: dict[str, hast.PropertyValue] = {}
        if node.ordered and node.start != 1:
            properties["start"] = node.start

        items: list[hast.HastNode] = []
        for item in node.children:
            if isinstance(item, ListItem) and META_TARGET_ELEMENT not in item.metadata:
                items.append(self._list_item(item, tight=node.tight))
            else:
                items.extend(self._convert(item))
        return [hast.Element(tag_name, properties=properties, children=self._wrap(items, loose=True))]

    def visit_list_item(self, node: ListItem) -> list[hast.HastNode]:
        return [self._list_item(node, tight=False)]

    def _list_item(self, node: ListItem, tight: bool) -> hast.Element:
        """Convert a list item; paragraphs of tight lists lose their ``<p>``."""
        children: list[hast.HastNode] = []
        for i, child in enumerate(node.children):
            is_paragraph = isinstance(child, Paragraph) and META_TARGET_ELEMENT not in child.metadata
            if not tight or i != 0 or not is_paragraph:
                children.extend(self._newline())
            if is_paragraph and tight:
                children.extend(self._convert_all(child.children))
            else:
                children.extend(self._convert(child))

        last = node.children[-1] if node.children else None
        if last is not None and (not tight or not isinstance(last, Paragraph)):
            children.extend(self._newline())
        return hast.Element("li", children=children)

    def visit_thematic_break(self, node: ThematicBreak) -> list[hast.HastNode]:
        return [hast.Element("hr")]

    def visit_html_block(self, node: HTMLBlock) -> list[hast.HastNode]:
        if not self.options.allow_dangerous_html:
            logger.debug("Dropping HTML block (allow_dangerous_html is off)")
            return []
        return [hast.Raw(node.content)]

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> list[hast.HastNode]:
        return [hast.Text(node.content)]

    def visit_emphasis(self, node: Emphasis) -> list[hast.HastNode]:
        return [hast.Element("em", children=self._convert_all(node.children))]

    def visit_strong(self, node: Strong) -> list[hast.HastNode]:
        return [hast.Element("strong", children=self._convert_all(node.children))]

    def visit_code(self, node: Code) -> list[hast.HastNode]:
        return [hast.Element("code", children=[hast.Text(node.content)])]

    def visit_link(self, node: Link) -> list[hast.HastNode]:
        properties: dict[str, hast.PropertyValue] = {"href": node.url}
        if node.title:
            properties["title"] = node.title
        return [hast.Element("a", properties=properties, children=self._convert_all(node.children))]

    def visit_image(self, node: Image) -> list[hast.HastNode]:
        properties: dict[str, hast.PropertyValue] = {"src": node.url, "alt": node.alt_text}
        if node.title:
            properties["title"] = node.title
        return [hast.Element("img", properties=properties)]

    def visit_line_break(self, node: LineBreak) -> list[hast.HastNode]:
        if node.soft:
            return [hast.Text("\n")]
        return [hast.Element("br"), hast.Text("\n")]

    def visit_html_inline(self, node: HTMLInline) -> list[hast.HastNode]:
        if not self.options.allow_dangerous_html:
            logger.debug("Dropping inline HTML (allow_dangerous_html is off)")
            return []
        return [hast.Raw(node.content)]

    # ------------------------------------------------------------------
    # Directives and rule output
    # ------------------------------------------------------------------

    def visit_container_directive(self, node: ContainerDirective) -> list[hast.HastNode]:
        blocks = self._convert_all(node.children)
        if node.label:
            blocks.insert(0, hast.Element("p", children=self._convert_all(node.label)))
        return [self._directive_element(self.options.directive_tag, node, self._wrap(blocks, loose=True))]

    def visit_leaf_directive(self, node: LeafDirective) -> list[hast.HastNode]:
        return [self._directive_element(self.options.directive_tag, node, self._convert_all(node.children))]

    def visit_text_directive(self, node: TextDirective) -> list[hast.HastNode]:
        return [self._directive_element(self.options.text_directive_tag, node, self._convert_all(node.children))]

    def visit_raw_output(self, node: RawOutput) -> list[hast.HastNode]:
        return [hast.Raw(node.raw_content)]

    def generic_visit(self, node: Node) -> list[hast.HastNode]:
        raise RenderingError(f"Cannot convert node of kind {node.kind!r}", rendering_stage="conversion")
