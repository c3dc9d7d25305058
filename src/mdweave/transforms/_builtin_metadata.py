#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/_builtin_metadata.py
"""Metadata definitions for the built-in rewrite rules.

The rule registry registers these before scanning entry points, so the
built-in rules are available without installed package metadata.

"""

from __future__ import annotations

from mdweave.transforms.callout import CalloutRule
from mdweave.transforms.metadata import RuleMetadata
from mdweave.transforms.video import VideoRule

CALLOUT_METADATA = RuleMetadata(
    name="callout",
    description="Render callout container directives (:::note, :::warning, ...) as a custom element",
    rule_class=CalloutRule,
    priority=100,
    tags=["directives", "container"],
    author="mdweave",
)

VIDEO_METADATA = RuleMetadata(
    name="video",
    description="Replace ::video leaf directives with an embedded player fragment",
    rule_class=VideoRule,
    priority=100,
    tags=["directives", "leaf", "media"],
    author="mdweave",
)

BUILTIN_RULES: tuple[RuleMetadata, ...] = (CALLOUT_METADATA, VIDEO_METADATA)
