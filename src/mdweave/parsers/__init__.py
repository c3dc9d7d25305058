#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Parser adapters that build the mdweave source tree."""

from mdweave.parsers.base import BaseParser
from mdweave.parsers.directives import directives, parse_attributes
from mdweave.parsers.markdown import MarkdownParser, markdown_to_ast

__all__ = ["BaseParser", "MarkdownParser", "markdown_to_ast", "directives", "parse_attributes"]
