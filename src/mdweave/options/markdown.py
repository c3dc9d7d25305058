#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing.

This module defines options for reading Markdown with generic directives.
"""
# src/mdweave/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from mdweave.options.base import BaseParserOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-AST parsing.

    Parameters
    ----------
    parse_directives : bool, default True
        Whether to recognize container (``:::``), leaf (``::``) and text
        (``:``) directives. When disabled the directive lines are read as
        ordinary paragraphs.
    parse_strikethrough : bool, default False
        Whether to enable the mistune strikethrough plugin. Struck text is
        kept as plain text in the source tree.

    """

    parse_directives: bool = field(
        default=True,
        metadata={
            "help": "Recognize :::container, ::leaf and :text directives",
            "cli_name": "no-directives",
            "importance": "core",
        },
    )
    parse_strikethrough: bool = field(
        default=False,
        metadata={"help": "Enable ~~strikethrough~~ syntax (rendered as plain text)", "importance": "advanced"},
    )
