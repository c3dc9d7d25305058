#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/parsers/markdown.py
"""Markdown to source tree parser.

This module converts Markdown with generic directives into the mdweave source
tree using mistune. Mistune produces a token stream (``renderer=None``) and
the parser maps every token to a node; the directive tokens come from the
:mod:`mdweave.parsers.directives` plugin.

"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import mistune
import yaml

from mdweave.ast import (
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
    Strong,
    Text,
    TextDirective,
    ThematicBreak,
    extract_text,
)
from mdweave.exceptions import ParsingError
from mdweave.options.markdown import MarkdownParserOptions
from mdweave.parsers.base import BaseParser, ParserInput
from mdweave.parsers.directives import directives

logger = logging.getLogger(__name__)

_FRONTMATTER_FENCES = {"---": "yaml", "+++": "toml"}


class MarkdownParser(BaseParser):
    r"""Parse Markdown into a source tree.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = MarkdownParser()
        >>> doc = parser.parse(":::warning\\nBe careful.\\n:::\\n")
        >>> doc.children[0].name
        'warning'

    Without directive syntax:

        >>> parser = MarkdownParser(MarkdownParserOptions(parse_directives=False))

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options

        self._inline_handlers: dict[str, Callable[[dict[str, Any]], Optional[Node]]] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "inline_html": self._handle_inline_html_token,
            "text_directive": self._handle_text_directive_token,
        }

    def _create_markdown(self) -> mistune.Markdown:
        """Build a fresh mistune instance for one parse call."""
        plugins: list[Any] = []
        if self.options.parse_directives:
            plugins.append(directives)
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")
        return mistune.create_markdown(renderer=None, plugins=plugins)

    def parse(self, input_data: ParserInput) -> Document:
        """Parse Markdown input into a Document.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Markdown input to parse

        Returns
        -------
        Document
            Root of the source tree

        Raises
        ------
        ParsingError
            If the input cannot be read or mistune fails

        """
        content = self._load_text_content(input_data)
        content, metadata = self._extract_frontmatter(content)

        try:
            tokens, _state = self._create_markdown().parse(content)
        except (ValueError, TypeError, KeyError, IndexError, RecursionError) as e:
            raise ParsingError(f"Failed to parse Markdown: {e}", parsing_stage="tokenize", original_error=e) from e

        if not isinstance(tokens, list):
            raise ParsingError("Markdown tokenizer did not return a token list", parsing_stage="tokenize")

        children = self._process_tokens(tokens)
        logger.debug("Parsed %d top-level blocks", len(children))
        return Document(children=children, metadata=metadata)

    # ------------------------------------------------------------------
    # Front matter
    # ------------------------------------------------------------------

    def _extract_frontmatter(self, content: str) -> tuple[str, dict[str, Any]]:
        """Extract YAML (``---``) or TOML (``+++``) front matter.

        Parameters
        ----------
        content : str
            Markdown content that may start with front matter

        Returns
        -------
        tuple[str, dict]
            Content with the front matter removed and the parsed values.
            Front matter that does not parse to a mapping is logged and
            yields empty metadata.

        """
        if not self.options.extract_metadata:
            return content, {}

        lines = content.splitlines(keepends=True)
        if not lines:
            return content, {}
        fence = lines[0].strip()
        fmt = _FRONTMATTER_FENCES.get(fence)
        if fmt is None:
            return content, {}

        end_index = next((i for i in range(1, len(lines)) if lines[i].strip() == fence), -1)
        if end_index <= 0:
            return content, {}

        raw = "".join(lines[1:end_index])
        remaining = "".join(lines[end_index + 1 :])

        try:
            data = yaml.safe_load(raw) if fmt == "yaml" else tomllib.loads(raw)
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring invalid %s front matter: %s", fmt.upper(), e)
            return remaining, {}

        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Ignoring %s front matter that is not a mapping", fmt.upper())
            return remaining, {}
        return remaining, data

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of mistune block tokens into nodes."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single mistune block token.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields

        Returns
        -------
        Node or None
            Resulting node, or None for tokens with no tree counterpart

        """
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items
            return Paragraph(children=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "list_item":
            return ListItem(children=self._process_tokens(token.get("children", [])))
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", ""))
        elif token_type == "container_directive":
            return self._process_container_directive(token)
        elif token_type == "leaf_directive":
            attrs = token.get("attrs", {})
            return LeafDirective(
                name=attrs.get("name", ""),
                attributes=dict(attrs.get("attributes", {})),
                children=self._process_inline_tokens(token.get("children", [])),
            )
        elif token_type == "blank_line":
            return None

        logger.debug("Skipping unsupported block token: %s", token_type)
        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        """Process heading token.

        Parameters
        ----------
        token : dict
            Heading token with 'attrs' (level) and 'children'

        Returns
        -------
        Heading
            Heading node

        """
        attrs = token.get("attrs", {})
        level = attrs.get("level", 1) if isinstance(attrs, dict) else 1
        if not isinstance(level, int) or level < 1 or level > 6:
            level = 1
        return Heading(level=level, children=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process code block token.

        The first word of the info string is the language; the rest is kept
        in metadata. One trailing newline is removed from the content.
        """
        code_content = token.get("raw", "")
        if code_content.endswith("\n"):
            code_content = code_content[:-1]

        metadata: dict[str, Any] = {}
        language = None
        info_string = (token.get("attrs") or {}).get("info")
        if info_string:
            parts = info_string.strip().split(maxsplit=1)
            if parts:
                language = parts[0]
                if len(parts) > 1:
                    metadata["info_attrs"] = parts[1]

        return CodeBlock(content=code_content, language=language, metadata=metadata)

    def _process_list(self, token: dict[str, Any]) -> List:
        """Process list token.

        Parameters
        ----------
        token : dict
            List token with 'children', 'tight' and 'attrs' (ordered, start)

        Returns
        -------
        List
            List node

        """
        attrs = token.get("attrs", {})
        ordered = bool(attrs.get("ordered", False))
        start = attrs.get("start", 1)
        if not isinstance(start, int):
            start = 1
        tight = bool(token.get("tight", True))
        items: list[Node] = [
            ListItem(children=self._process_tokens(child.get("children", [])))
            for child in token.get("children", [])
            if isinstance(child, dict)
        ]
        return List(ordered=ordered, children=items, start=start, tight=tight)

    def _process_container_directive(self, token: dict[str, Any]) -> ContainerDirective:
        """Process a container directive, separating its label from its body."""
        attrs = token.get("attrs", {})
        label: list[Node] = []
        body_tokens: list[dict[str, Any]] = []
        for child in token.get("children", []):
            if child.get("type") == "directive_label":
                label = self._process_inline_tokens(child.get("children", []))
            else:
                body_tokens.append(child)

        return ContainerDirective(
            name=attrs.get("name", ""),
            attributes=dict(attrs.get("attributes", {})),
            children=self._process_tokens(body_tokens),
            label=label,
        )

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens, merging adjacent text.

        Parameters
        ----------
        tokens : list of dict
            Inline token dictionaries

        Returns
        -------
        list of Node
            Inline nodes

        """
        nodes: list[Node] = []
        for token in tokens:
            token_type = token.get("type", "")
            if token_type == "strikethrough":
                # No strikethrough node; keep the struck text
                new_nodes = self._process_inline_tokens(token.get("children", []))
            else:
                handler = self._inline_handlers.get(token_type)
                if handler is None:
                    logger.debug("Skipping unsupported inline token: %s", token_type)
                    continue
                node = handler(token)
                new_nodes = [node] if node is not None else []

            for node in new_nodes:
                if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text) and not nodes[-1].metadata:
                    nodes[-1].content += node.content
                elif not (isinstance(node, Text) and not node.content):
                    nodes.append(node)
        return nodes

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        """Handle text token."""
        return Text(content=token.get("raw", ""))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        """Handle strong token."""
        return Strong(children=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        """Handle emphasis token."""
        return Emphasis(children=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        """Handle codespan token."""
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        """Handle link token."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        return Link(
            url=attrs.get("url", ""),
            children=self._process_inline_tokens(token.get("children", [])),
            title=attrs.get("title"),
        )

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        """Handle image token; the alt text is the plain text of its children."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        alt_text = extract_text(self._process_inline_tokens(token.get("children", [])))
        return Image(url=attrs.get("url", ""), alt_text=alt_text, title=attrs.get("title"))

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=True)

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        """Handle inline_html token."""
        return HTMLInline(content=token.get("raw", ""))

    def _handle_text_directive_token(self, token: dict[str, Any]) -> TextDirective:
        """Handle text_directive token."""
        attrs = token.get("attrs", {})
        return TextDirective(
            name=attrs.get("name", ""),
            attributes=dict(attrs.get("attributes", {})),
            children=self._process_inline_tokens(token.get("children", [])),
        )


def markdown_to_ast(markdown_content: ParserInput, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert Markdown to a source tree.

    This is a convenience function that creates a parser and parses the
    markdown in one step.

    Parameters
    ----------
    markdown_content : str, Path, IO, or bytes
        Markdown text or a path to a Markdown file
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        Root of the source tree

    Examples
    --------
    >>> doc = markdown_to_ast("# Hello\\n\\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
