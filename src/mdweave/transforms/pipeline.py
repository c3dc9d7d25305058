#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/pipeline.py
"""Pipeline orchestration: parse, rewrite, convert and serialize.

This module provides the :class:`Pipeline` that carries one document through
all four stages:

1. Parse source text into a source tree (skipped when a Document is given)
2. Apply the rewrite rules in order, each through the rewrite engine
3. Convert the source tree into a target tree
4. Serialize the target tree to HTML

Rules are resolved and checked when the pipeline is built. Two rules whose
selection sets overlap must declare an ordering (``after``); otherwise their
result could depend on the order they run in and the pipeline refuses them
with a :class:`~mdweave.exceptions.ConfigurationError`.

Examples
--------
Render with the built-in rules:

    >>> from mdweave.transforms import Pipeline
    >>> html = Pipeline(rules=["callout", "video"]).execute(":::note\\nHi\\n:::\\n")

Rewrite only:

    >>> from mdweave.transforms import apply
    >>> doc = apply(doc, rules=["callout"])

"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from mdweave.ast.nodes import Document
from mdweave.exceptions import ConfigurationError
from mdweave.hast.converter import HastConverter
from mdweave.hast.nodes import Root
from mdweave.parsers.base import BaseParser, ParserInput
from mdweave.parsers.markdown import MarkdownParser
from mdweave.renderers.html import HtmlRenderer
from mdweave.transforms.base import RewriteRule, selections_overlap
from mdweave.transforms.registry import rule_registry

logger = logging.getLogger(__name__)

RuleSpec = Union[str, RewriteRule]


@dataclass
class PipelineResult:
    """Every intermediate product of one pipeline run.

    Parameters
    ----------
    document : Document
        Source tree after all rewrite rules
    hast : Root
        Target tree produced by the converter
    html : str
        Serialized output

    """

    document: Document
    hast: Root
    html: str


def _rule_label(rule: RewriteRule) -> str:
    return rule.name or type(rule).__name__


class Pipeline:
    """Pipeline for rewriting and rendering documents.

    Parameters
    ----------
    rules : list of str or RewriteRule, optional
        Rules to apply. Names are resolved through the rule registry, which
        also pulls in rules they declare in ``after``.
    converter : HastConverter, optional
        Source-to-target tree converter. Defaults to ``HastConverter()``.
    renderer : HtmlRenderer, optional
        Target tree serializer. Defaults to ``HtmlRenderer()``.
    parser : BaseParser, optional
        Parser used when :meth:`execute` receives text. Defaults to
        ``MarkdownParser()``.

    Raises
    ------
    ConfigurationError
        If a rule name is unknown, rule ordering is circular, or two rules
        select overlapping nodes without a declared ordering.

    Examples
    --------
        >>> pipeline = Pipeline(rules=["callout", "video"])
        >>> html = pipeline.execute(document)

    """

    def __init__(
        self,
        rules: Optional[Sequence[RuleSpec]] = None,
        converter: Optional[HastConverter] = None,
        renderer: Optional[HtmlRenderer] = None,
        parser: Optional[BaseParser] = None,
    ):
        self.parser = parser if parser is not None else MarkdownParser()
        self.converter = converter if converter is not None else HastConverter()
        self.renderer = renderer if renderer is not None else HtmlRenderer()
        self.rules: list[RewriteRule] = self._order_rules(self._resolve_rules(list(rules or [])))
        self._check_selections()

    @staticmethod
    def _resolve_rules(rules: list[RuleSpec]) -> list[RewriteRule]:
        """Resolve rule names and instances to a list of instances.

        Named rules are expanded with their dependencies; each name is
        instantiated once.

        Raises
        ------
        TypeError
            If an entry is neither a string nor a RewriteRule
        ConfigurationError
            If a name cannot be resolved

        """
        result: list[RewriteRule] = []
        seen_names: set[str] = set()

        for rule in rules:
            if isinstance(rule, RewriteRule):
                result.append(rule)
                if rule.name:
                    seen_names.add(rule.name)
            elif isinstance(rule, str):
                if rule in seen_names:
                    continue
                try:
                    ordered = rule_registry.resolve_dependencies([rule])
                except ValueError as e:
                    raise ConfigurationError(str(e), setting="rules", original_error=e) from e
                for name in ordered:
                    if name not in seen_names:
                        result.append(rule_registry.get_rule(name))
                        seen_names.add(name)
            else:
                raise TypeError(f"Rule must be str or RewriteRule, got {type(rule).__name__}")

        logger.debug(f"Resolved {len(result)} rule(s)")
        return result

    @staticmethod
    def _order_rules(rules: list[RewriteRule]) -> list[RewriteRule]:
        """Order rules so every rule runs after the rules named in its ``after``.

        Rules with no ordering between them keep their configured order.

        """
        positions = {rule.name: i for i, rule in enumerate(rules) if rule.name}
        dependents: dict[int, list[int]] = {i: [] for i in range(len(rules))}
        indegree = [0] * len(rules)
        for i, rule in enumerate(rules):
            for dep in rule.after:
                if dep in positions:
                    dependents[positions[dep]].append(i)
                    indegree[i] += 1

        heap = [i for i, degree in enumerate(indegree) if degree == 0]
        heapq.heapify(heap)
        order: list[int] = []
        while heap:
            i = heapq.heappop(heap)
            order.append(i)
            for dependent in dependents[i]:
                indegree[dependent] -= 1
                if indegree[dependent] == 0:
                    heapq.heappush(heap, dependent)

        if len(order) != len(rules):
            remaining = sorted(_rule_label(rules[i]) for i in range(len(rules)) if i not in order)
            raise ConfigurationError(
                f"Circular rule ordering involving: {', '.join(remaining)}", setting="rules"
            )
        return [rules[i] for i in order]

    def _check_selections(self) -> None:
        """Reject rule pairs with overlapping selections and no declared ordering."""
        ordered_before = self._ordering_closure()
        for i, first in enumerate(self.rules):
            for second in self.rules[i + 1 :]:
                if not selections_overlap(first.selection_set(), second.selection_set()):
                    continue
                if (first.name, second.name) in ordered_before:
                    continue
                raise ConfigurationError(
                    f"Rules '{_rule_label(first)}' and '{_rule_label(second)}' select overlapping nodes "
                    "but declare no ordering between them",
                    setting="rules",
                )

    def _ordering_closure(self) -> set[tuple[str, str]]:
        """Return ``(a, b)`` pairs where rule ``a`` is declared to run before ``b``."""
        pairs = {(dep, rule.name) for rule in self.rules if rule.name for dep in rule.after}
        changed = True
        while changed:
            changed = False
            for a, b in list(pairs):
                for c, d in list(pairs):
                    if b == c and (a, d) not in pairs:
                        pairs.add((a, d))
                        changed = True
        return pairs

    def parse(self, source: ParserInput | Document) -> Document:
        """Return ``source`` as a source tree, parsing it when needed."""
        if isinstance(source, Document):
            return source
        logger.debug(f"Parsing input with {type(self.parser).__name__}")
        return self.parser.parse(source)

    def apply_rules(self, document: Document) -> Document:
        """Apply every rule in order to ``document`` in place; rule errors are logged and re-raised."""
        logger.debug(f"Applying {len(self.rules)} rule(s)")
        for i, rule in enumerate(self.rules, 1):
            label = _rule_label(rule)
            logger.debug(f"Applying rule {i}/{len(self.rules)}: {label}")
            try:
                rule.apply(document)
            except Exception as e:
                logger.error(f"Rule {label} failed: {e}", exc_info=True)
                # Re-raise - rule failures abort the run with no partial output
                raise
        return document

    def run(self, source: ParserInput | Document) -> PipelineResult:
        """Run every stage and return all intermediate trees.

        Parameters
        ----------
        source : str, Path, bytes, IO or Document
            Markdown input, or an already parsed source tree (rewritten in
            place)

        Returns
        -------
        PipelineResult
            The rewritten source tree, the target tree and the HTML

        """
        document = self.parse(source)
        self.apply_rules(document)

        logger.debug("Converting source tree to target tree")
        hast = self.converter.convert(document)

        logger.debug(f"Rendering with {type(self.renderer).__name__}")
        html = self.renderer.render_to_string(hast)

        logger.info(f"Pipeline complete: {len(self.rules)} rule(s), {len(html)} characters of output")
        return PipelineResult(document=document, hast=hast, html=html)

    def execute(self, source: ParserInput | Document) -> str:
        """Run the pipeline and return the HTML output."""
        return self.run(source).html


def apply(document: Document, rules: Optional[Sequence[RuleSpec]] = None) -> Document:
    """Apply rewrite rules to a document without rendering.

    Parameters
    ----------
    document : Document
        Source tree, rewritten in place
    rules : list of str or RewriteRule, optional
        Rules to apply

    Returns
    -------
    Document
        The rewritten document

    Examples
    --------
        >>> doc = apply(doc, rules=["callout", "video"])

    """
    return Pipeline(rules=rules).apply_rules(document)


def render(
    source: ParserInput | Document,
    rules: Optional[Sequence[RuleSpec]] = None,
    converter: Optional[HastConverter] = None,
    renderer: Optional[HtmlRenderer] = None,
) -> str:
    """Rewrite and render a document to HTML in one call.

    Parameters
    ----------
    source : str, Path, bytes, IO or Document
        Markdown input or source tree
    rules : list of str or RewriteRule, optional
        Rules to apply
    converter : HastConverter, optional
        Tree converter to use
    renderer : HtmlRenderer, optional
        Serializer to use

    Returns
    -------
    str
        HTML output

    """
    return Pipeline(rules=rules, converter=converter, renderer=renderer).execute(source)


__all__ = ["Pipeline", "PipelineResult", "apply", "render"]
