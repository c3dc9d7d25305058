#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for mdweave pipeline stages.

Each stage (parser, rewrite rules, tree converter, HTML renderer) takes a
frozen options dataclass. Use ``create_updated`` to derive a modified copy.
"""

from __future__ import annotations

from mdweave.options.base import BaseParserOptions, BaseRendererOptions, BaseRuleOptions, CloneFrozenMixin
from mdweave.options.html import HastConverterOptions, HtmlRendererOptions
from mdweave.options.markdown import MarkdownParserOptions
from mdweave.options.rules import CalloutOptions, VideoOptions

__all__ = [
    "CloneFrozenMixin",
    "BaseParserOptions",
    "BaseRendererOptions",
    "BaseRuleOptions",
    "MarkdownParserOptions",
    "HastConverterOptions",
    "HtmlRendererOptions",
    "CalloutOptions",
    "VideoOptions",
]
