#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/renderers/html.py
"""HTML rendering from the target tree.

This module provides the HtmlRenderer class, which serializes a target tree
into an HTML fragment:

- Text values are escaped (``&``, ``<``, ``>``)
- Attribute values are escaped and double-quoted
- :class:`~mdweave.hast.nodes.Raw` fragments are emitted byte-for-byte
- Void elements (``br``, ``hr``, ``img``, ``source``, ...) get no closing tag

Examples
--------
    >>> from mdweave.hast.nodes import Element, Root, Text
    >>> HtmlRenderer().render_to_string(Root([Element("p", children=[Text("a < b")])]))
    '<p>a &lt; b</p>'

"""

from __future__ import annotations

import logging
import re
from html import escape

from mdweave.constants import HTML_VOID_ELEMENTS
from mdweave.exceptions import RenderingError
from mdweave.hast.nodes import Element, HastNode, PropertyValue, Raw, Root, Text
from mdweave.options.html import HtmlRendererOptions
from mdweave.renderers.base import BaseRenderer, RendererOutput

logger = logging.getLogger(__name__)

# Characters that would end a tag or attribute name early
_INVALID_NAME_RE = re.compile(r"[\s\"'<>/=\x00-\x1f]")


class HtmlRenderer(BaseRenderer):
    """Serialize a target tree to HTML.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML serialization options

    """

    def __init__(self, options: HtmlRendererOptions | None = None):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options
        self._output: list[str] = []

    def render_to_string(self, root: Root) -> str:
        """Render a target tree to an HTML string.

        Parameters
        ----------
        root : Root
            The target tree to render

        Returns
        -------
        str
            HTML text

        Raises
        ------
        RenderingError
            If the tree contains an unknown node type or an invalid tag or
            attribute name

        """
        self._output = []
        self._render_node(root)
        html_text = "".join(self._output)
        if self.options.trailing_newline and not html_text.endswith("\n"):
            html_text += "\n"
        return html_text

    def render(self, root: Root, output: RendererOutput) -> None:
        """Render the target tree to HTML and write to output.

        Parameters
        ----------
        root : Root
            Target tree to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination (file path or file-like object)

        """
        html_text = self.render_to_string(root)
        self.write_text_output(html_text, output)
        logger.debug(f"Wrote {len(html_text)} characters of HTML")

    def _render_node(self, node: HastNode) -> None:
        if isinstance(node, Text):
            self._output.append(escape(node.value, quote=False))
        elif isinstance(node, Raw):
            self._output.append(node.value)
        elif isinstance(node, Element):
            self._render_element(node)
        elif isinstance(node, Root):
            for child in node.children:
                self._render_node(child)
        else:
            raise RenderingError(
                f"Cannot render target node of type {type(node).__name__}", rendering_stage="serialization"
            )

    def _render_element(self, node: Element) -> None:
        tag_name = self._check_name(node.tag_name, "tag")
        self._output.append(f"<{tag_name}{self._render_properties(node)}")

        if tag_name.lower() in HTML_VOID_ELEMENTS:
            if node.children:
                logger.warning(f"Dropping {len(node.children)} child node(s) of void element <{tag_name}>")
            self._output.append(" />" if self.options.close_void_elements else ">")
            return

        self._output.append(">")
        for child in node.children:
            self._render_node(child)
        self._output.append(f"</{tag_name}>")

    def _render_properties(self, node: Element) -> str:
        parts: list[str] = []
        for name, value in node.properties.items():
            attribute = self._format_attribute(self._check_name(name, "attribute"), value)
            if attribute:
                parts.append(attribute)
        return "".join(f" {part}" for part in parts)

    @staticmethod
    def _format_attribute(name: str, value: PropertyValue) -> str:
        """Format one attribute; returns an empty string for omitted values."""
        if value is None or value is False:
            return ""
        if value is True:
            return name
        if isinstance(value, (list, tuple)):
            value = " ".join(str(item) for item in value)
        return f'{name}="{escape(str(value), quote=True)}"'

    @staticmethod
    def _check_name(name: str, what: str) -> str:
        if not name or _INVALID_NAME_RE.search(name):
            raise RenderingError(f"Invalid HTML {what} name: {name!r}", rendering_stage="serialization")
        return name
