#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/options/html.py
"""Configuration options for the target tree converter and the HTML renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from mdweave.constants import DEFAULT_ALLOW_DANGEROUS_HTML, DEFAULT_CODE_LANGUAGE_PREFIX
from mdweave.options.base import BaseRendererOptions


@dataclass(frozen=True)
class HastConverterOptions(BaseRendererOptions):
    """Configuration options for source-tree to target-tree conversion.

    Parameters
    ----------
    allow_dangerous_html : bool, default True
        Pass author-written HTML blocks and inline HTML through as raw nodes.
        Set to False to drop them (``--safe-html``). Raw output produced by
        rewrite rules is always kept.
    code_language_prefix : str, default "language-"
        Prefix for the class attribute of ``<code>`` inside fenced code blocks.
    directive_tag : str, default "div"
        Element used for container and leaf directives no rule claimed.
    text_directive_tag : str, default "span"
        Element used for text directives no rule claimed.
    block_newlines : bool, default True
        Insert a newline text node between sibling block elements so the
        serialized HTML has one block per line.

    """

    allow_dangerous_html: bool = field(
        default=DEFAULT_ALLOW_DANGEROUS_HTML,
        metadata={"help": "Keep author-written HTML in the output", "importance": "security"},
    )
    code_language_prefix: str = field(
        default=DEFAULT_CODE_LANGUAGE_PREFIX,
        metadata={"help": "Class prefix for the language of fenced code", "importance": "advanced"},
    )
    directive_tag: str = field(
        default="div",
        metadata={"help": "Element for unclaimed container and leaf directives", "importance": "advanced"},
    )
    text_directive_tag: str = field(
        default="span",
        metadata={"help": "Element for unclaimed text directives", "importance": "advanced"},
    )
    block_newlines: bool = field(
        default=True,
        metadata={"help": "Separate block elements with newlines", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate element names.

        Raises
        ------
        ValueError
            If a fallback element name is empty.

        """
        if not self.directive_tag or not self.text_directive_tag:
            raise ValueError("Fallback directive element names must be non-empty")


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for target-tree to HTML serialization.

    Parameters
    ----------
    close_void_elements : bool, default False
        Write void elements as ``<br />`` instead of ``<br>``.
    trailing_newline : bool, default False
        Append a final newline to the serialized document.

    """

    close_void_elements: bool = field(
        default=False,
        metadata={"help": "Write void elements in XHTML style (<br />)", "importance": "advanced"},
    )
    trailing_newline: bool = field(
        default=False,
        metadata={"help": "End the output with a newline", "importance": "advanced"},
    )
