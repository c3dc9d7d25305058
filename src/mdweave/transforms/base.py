#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/base.py
"""Base class for rewrite rules.

A rewrite rule declares which nodes it acts on (its *selection set*) and how
it rewrites each of them. Rules never walk the tree themselves;
:meth:`RewriteRule.apply` hands :meth:`RewriteRule.visit` to
:func:`~mdweave.ast.traversal.traverse`, which applies the returned
:class:`~mdweave.ast.traversal.Rewrite` results.

Selection sets are made of ``(kind, name)`` pairs. ``name`` is the directive
name, or None to select every node of that kind. Two rules whose selection
sets share no pair can run in either order with the same result, which is
what :class:`~mdweave.transforms.pipeline.Pipeline` checks at setup.

Examples
--------
A rule that tags every ``:::aside`` container:

    >>> class AsideRule(RewriteRule):
    ...     name = "aside"
    ...
    ...     def selection_set(self):
    ...         return frozenset({("container_directive", "aside")})
    ...
    ...     def rewrite(self, node, index, parent):
    ...         return annotate(target_element="aside")

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, FrozenSet, Optional, Tuple

from mdweave.ast.nodes import Document, Node, Parent
from mdweave.ast.traversal import KEEP, Rewrite, traverse
from mdweave.exceptions import InvalidOptionsError
from mdweave.options.base import BaseRuleOptions

logger = logging.getLogger(__name__)

Selector = Tuple[str, Optional[str]]
SelectionSet = FrozenSet[Selector]


def selectors_overlap(first: Selector, second: Selector) -> bool:
    """Return True when two selectors can match the same node."""
    kind_a, name_a = first
    kind_b, name_b = second
    if kind_a != kind_b:
        return False
    return name_a is None or name_b is None or name_a == name_b


def selections_overlap(first: SelectionSet, second: SelectionSet) -> bool:
    """Return True when any selector of ``first`` overlaps one of ``second``."""
    return any(selectors_overlap(a, b) for a in first for b in second)


class RewriteRule(ABC):
    """Abstract base class for rewrite rules.

    Parameters
    ----------
    options : BaseRuleOptions or None, default = None
        Rule configuration. Subclasses set ``options_class`` and substitute
        its defaults when None is given.

    Attributes
    ----------
    name : str
        Registry name of the rule
    after : tuple of str
        Names of rules that must run before this one. Declaring an ordering
        is what allows two rules to select overlapping nodes.
    options_class : type or None
        Options dataclass accepted by the constructor

    """

    name: ClassVar[str] = ""
    after: ClassVar[tuple[str, ...]] = ()
    options_class: ClassVar[Optional[type[BaseRuleOptions]]] = None

    def __init__(self, options: BaseRuleOptions | None = None):
        """Initialize the rule, validating the options type."""
        if self.options_class is not None:
            if options is None:
                options = self.options_class()
            elif not isinstance(options, self.options_class):
                raise InvalidOptionsError(
                    component_name=self.name or type(self).__name__,
                    expected_type=self.options_class,
                    received_type=type(options),
                )
        self.options = options

    @abstractmethod
    def selection_set(self) -> SelectionSet:
        """Return the ``(kind, name)`` pairs this rule acts on."""
        raise NotImplementedError

    def matches(self, node: Node) -> bool:
        """Check whether ``node`` falls inside this rule's selection set.

        Parameters
        ----------
        node : Node
            Node to test

        Returns
        -------
        bool
            True if some selector matches the node's kind and name

        """
        node_name = getattr(node, "name", None)
        for kind, name in self.selection_set():
            if node.kind == kind and (name is None or name == node_name):
                return True
        return False

    @abstractmethod
    def rewrite(self, node: Node, index: int | None, parent: Parent | None) -> Rewrite:
        """Rewrite a matched node.

        Parameters
        ----------
        node : Node
            A node for which :meth:`matches` is True
        index : int or None
            Position of ``node`` in ``parent.children``
        parent : Parent or None
            The node's parent, None for the root

        Returns
        -------
        Rewrite
            The change to apply

        """
        raise NotImplementedError

    def visit(self, node: Node, index: int | None, parent: Parent | None) -> Rewrite:
        """Traversal callback dispatching matched nodes to :meth:`rewrite`."""
        if self.matches(node):
            return self.rewrite(node, index, parent)
        return KEEP

    def apply(self, document: Document) -> Document:
        """Apply the rule to every node of ``document`` in place.

        Parameters
        ----------
        document : Document
            Source tree to rewrite

        Returns
        -------
        Document
            The same document, for chaining

        """
        logger.debug(f"Applying rule: {self.name or type(self).__name__}")
        traverse(document, self.visit)
        return document

    def __repr__(self) -> str:
        return f"{type(self).__name__}(options={self.options!r})"
