#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/registry.py
"""Rule registry for rewrite rule discovery and ordering.

This module implements a registry pattern for rewrite rules, enabling:
- Built-in rules available by name (``"callout"``, ``"video"``)
- Plugin discovery via the ``mdweave.rules`` entry point group
- Ordering of rules by their declared ``after`` dependencies

Examples
--------
Get a rule:

    >>> from mdweave.transforms import rule_registry
    >>> rule = rule_registry.get_rule("callout")

Order a set of rules:

    >>> rule_registry.resolve_dependencies(["video", "callout"])
    ['callout', 'video']

"""

from __future__ import annotations

import heapq
import importlib.metadata
import logging
from typing import Any, Optional

from mdweave.constants import RULES_ENTRY_POINT_GROUP
from mdweave.options.base import BaseRuleOptions
from mdweave.transforms.base import RewriteRule
from mdweave.transforms.metadata import RuleMetadata

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Registry for managing rewrite rules.

    This singleton class provides a central registry for all rules. Built-in
    rules are registered and entry point plugins discovered on first access.

    Notes
    -----
    Import the global ``rule_registry`` instance rather than instantiating
    this class; both give the same object.

    """

    _instance: Optional[RuleRegistry] = None
    _rules: dict[str, RuleMetadata]
    _initialized: bool

    def __new__(cls) -> RuleRegistry:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._rules = {}
            cls._instance._initialized = False
        return cls._instance

    def _ensure_initialized(self) -> None:
        """Register built-in rules and run plugin discovery once."""
        if not self._initialized:
            self._initialized = True
            from mdweave.transforms._builtin_metadata import BUILTIN_RULES

            for metadata in BUILTIN_RULES:
                self._rules.setdefault(metadata.name, metadata)
            self.discover_plugins()

    def register(self, metadata: RuleMetadata) -> None:
        """Register a rule with its metadata.

        Parameters
        ----------
        metadata : RuleMetadata
            Rule metadata to register

        Notes
        -----
        If a rule with the same name is already registered, it is
        overwritten and a warning is logged.

        """
        if metadata.name in self._rules:
            logger.warning(f"Rule '{metadata.name}' already registered, overwriting")

        self._rules[metadata.name] = metadata
        logger.debug(f"Registered rule: {metadata.name}")

    def unregister(self, name: str) -> bool:
        """Unregister a rule.

        Returns
        -------
        bool
            True if the rule was unregistered, False if not found

        """
        if name in self._rules:
            del self._rules[name]
            logger.debug(f"Unregistered rule: {name}")
            return True
        return False

    def get_metadata(self, name: str) -> RuleMetadata:
        """Get metadata for a rule.

        Raises
        ------
        KeyError
            If the rule is not registered

        """
        self._ensure_initialized()

        if name not in self._rules:
            raise KeyError(f"Rule '{name}' not registered")

        return self._rules[name]

    def get_rule(self, name: str, options: Optional[BaseRuleOptions] = None, **kwargs: Any) -> RewriteRule:
        """Get a rule instance by name.

        Parameters
        ----------
        name : str
            Rule name
        options : BaseRuleOptions, optional
            Options for the rule
        **kwargs
            Option field overrides

        Returns
        -------
        RewriteRule
            Rule instance

        Raises
        ------
        KeyError
            If the rule is not registered

        Examples
        --------
            >>> rule = rule_registry.get_rule("video", strict=True)

        """
        metadata = self.get_metadata(name)
        return metadata.create_instance(options, **kwargs)

    def has_rule(self, name: str) -> bool:
        """Check if a rule is registered."""
        self._ensure_initialized()
        return name in self._rules

    def list_rules(self, tags: Optional[list[str]] = None) -> list[str]:
        """List registered rule names, sorted alphabetically.

        Parameters
        ----------
        tags : list[str], optional
            Only return rules with at least one of these tags

        """
        self._ensure_initialized()

        if tags is None:
            return sorted(self._rules.keys())

        return sorted(name for name, metadata in self._rules.items() if any(tag in metadata.tags for tag in tags))

    def discover_plugins(self) -> int:
        """Discover and register rules from entry points.

        This method scans the ``mdweave.rules`` entry point group. Each entry
        point must load to a :class:`RuleMetadata`; others are skipped with a
        warning.

        Returns
        -------
        int
            Number of rules discovered and registered

        """
        discovered_count = 0

        for ep in importlib.metadata.entry_points().select(group=RULES_ENTRY_POINT_GROUP):
            try:
                metadata = ep.load()
            except (ImportError, AttributeError) as e:
                logger.warning(f"Failed to load rule entry point '{ep.name}': {e}")
                continue

            if not isinstance(metadata, RuleMetadata):
                logger.warning(f"Entry point '{ep.name}' did not return RuleMetadata, skipping")
                continue

            self.register(metadata)
            discovered_count += 1
            logger.debug(f"Discovered rule from entry point: {ep.name}")

        logger.debug(f"Discovered {discovered_count} rule(s) from entry points")
        return discovered_count

    def resolve_dependencies(self, rule_names: list[str]) -> list[str]:
        """Resolve rule ordering and return execution order.

        Topological sort with Kahn's algorithm over the rules' ``after``
        declarations. Priority, then name, breaks ties among rules with no
        pending dependencies, so the result does not depend on the order of
        ``rule_names``.

        Parameters
        ----------
        rule_names : list[str]
            Rule names to order. Rules named in ``after`` are pulled in.

        Returns
        -------
        list[str]
            Rule names in execution order (dependencies first)

        Raises
        ------
        ValueError
            If circular dependencies are detected or a dependency is not found

        """
        self._ensure_initialized()

        graph: dict[str, list[str]] = {}
        priorities: dict[str, int] = {}

        def add_to_graph(name: str) -> None:
            if name in graph:
                return

            if not self.has_rule(name):
                raise ValueError(f"Dependency '{name}' not found")

            metadata = self.get_metadata(name)
            graph[name] = metadata.dependencies
            priorities[name] = metadata.priority

            for dep in metadata.dependencies:
                add_to_graph(dep)

        for name in rule_names:
            add_to_graph(name)

        # reverse_graph[A] lists the rules that must run after A
        reverse_graph: dict[str, list[str]] = {name: [] for name in graph}
        for name, deps in graph.items():
            for dep in deps:
                reverse_graph[dep].append(name)

        indegree: dict[str, int] = {name: len(deps) for name, deps in graph.items()}

        heap: list[tuple[int, str]] = [(priorities[name], name) for name, deg in indegree.items() if deg == 0]
        heapq.heapify(heap)

        sorted_names: list[str] = []
        while heap:
            _, name = heapq.heappop(heap)
            sorted_names.append(name)

            for dependent in reverse_graph[name]:
                indegree[dependent] -= 1
                if indegree[dependent] == 0:
                    heapq.heappush(heap, (priorities[dependent], dependent))

        if len(sorted_names) != len(graph):
            remaining = set(graph) - set(sorted_names)
            raise ValueError(f"Circular dependency detected involving: {', '.join(sorted(remaining))}")

        return sorted_names

    def clear(self) -> None:
        """Clear all registered rules.

        The next access registers the built-in rules again. This is
        primarily useful for testing.

        """
        self._rules.clear()
        self._initialized = False
        logger.debug("Cleared rule registry")


# Global registry instance (preferred access pattern)
rule_registry = RuleRegistry()

__all__ = [
    "RuleRegistry",
    "rule_registry",
]
