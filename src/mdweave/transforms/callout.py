#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/callout.py
"""Callout rule: container directives rendered as callout elements.

A container directive whose name is one of the configured categories keeps its
children and gains two metadata entries that the tree converter turns into a
custom element::

    :::warning
    Be careful.
    :::

becomes ``<doc-content-callout header="Warning" variant="warning">`` around
the converted body.

"""

from __future__ import annotations

import logging

from mdweave.ast.nodes import Node, Parent
from mdweave.ast.traversal import Rewrite, annotate
from mdweave.constants import META_TARGET_ELEMENT, META_TARGET_PROPERTIES
from mdweave.options.rules import CalloutOptions
from mdweave.transforms.base import RewriteRule, SelectionSet

logger = logging.getLogger(__name__)


class CalloutRule(RewriteRule):
    """Mark callout containers for rendering as a custom element.

    Parameters
    ----------
    options : CalloutOptions or None, default = None
        Categories, titles and tag name. Defaults recognize ``note``,
        ``tip``, ``warning``, ``important`` and ``caution``.

    Examples
    --------
        >>> rule = CalloutRule()
        >>> rule.apply(doc)
        >>> doc.children[0].metadata["target_properties"]
        {'header': 'Warning', 'variant': 'warning'}

    """

    name = "callout"
    options_class = CalloutOptions

    options: CalloutOptions

    def __init__(self, options: CalloutOptions | None = None):
        super().__init__(options)
        self._selection: SelectionSet = frozenset(
            ("container_directive", category) for category in self.options.categories
        )

    def selection_set(self) -> SelectionSet:
        return self._selection

    def rewrite(self, node: Node, index: int | None, parent: Parent | None) -> Rewrite:
        variant = getattr(node, "name")
        logger.debug(f"Marking '{variant}' container as {self.options.tag_name}")
        # A fresh properties dict per node, never shared between nodes
        return annotate(
            **{
                META_TARGET_ELEMENT: self.options.tag_name,
                META_TARGET_PROPERTIES: {"header": self.options.titles[variant], "variant": variant},
            }
        )
