#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Rewrite rule system for the source tree.

This package provides the rewrite rule base class, the built-in callout and
video rules, a registry for discovering rules by name, and the pipeline that
applies rules and renders the result.

Third-party packages register rules through the ``mdweave.rules`` entry point
group.

Examples
--------
Render with rules by name:

    >>> from mdweave.transforms import render
    >>> html = render(":::tip\\nUse the CLI.\\n:::\\n", rules=["callout"])

Use a configured rule instance:

    >>> from mdweave.options import VideoOptions
    >>> from mdweave.transforms import VideoRule, apply
    >>> doc = apply(doc, rules=[VideoRule(VideoOptions(strict=True))])

"""

from mdweave.transforms.base import RewriteRule, SelectionSet, selections_overlap
from mdweave.transforms.callout import CalloutRule
from mdweave.transforms.metadata import RuleMetadata
from mdweave.transforms.pipeline import Pipeline, PipelineResult, apply, render
from mdweave.transforms.registry import RuleRegistry, rule_registry
from mdweave.transforms.video import VideoAttributes, VideoRule

__all__ = [
    "RewriteRule",
    "SelectionSet",
    "selections_overlap",
    "CalloutRule",
    "VideoAttributes",
    "VideoRule",
    "RuleMetadata",
    "RuleRegistry",
    "rule_registry",
    "Pipeline",
    "PipelineResult",
    "apply",
    "render",
]
