#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/metadata.py
"""Metadata describing a registered rewrite rule.

Third-party packages expose a :class:`RuleMetadata` object through the
``mdweave.rules`` entry point group::

    [project.entry-points."mdweave.rules"]
    aside = "my_package.rules:ASIDE_METADATA"

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Type

from mdweave.options.base import BaseRuleOptions
from mdweave.transforms.base import RewriteRule

logger = logging.getLogger(__name__)


@dataclass
class RuleMetadata:
    """Metadata for a rewrite rule.

    Parameters
    ----------
    name : str
        Unique identifier for the rule (e.g., "callout")
    description : str
        Human-readable description of what the rule does
    rule_class : type[RewriteRule]
        The rule class (must inherit from RewriteRule)
    priority : int, default = 100
        Tiebreaker among rules with no ordering between them (lower runs first)
    version : str, default = "1.0.0"
        Rule version
    author : str, optional
        Rule author or maintainer
    tags : list[str], default = empty list
        Tags for categorization

    Examples
    --------
        >>> metadata = RuleMetadata(
        ...     name="aside",
        ...     description="Render :::aside containers as <aside>",
        ...     rule_class=AsideRule,
        ... )

    """

    name: str
    description: str
    rule_class: Type[RewriteRule]
    priority: int = 100
    version: str = "1.0.0"
    author: Optional[str] = None
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if not self.name:
            raise ValueError("Rule name cannot be empty")

        if not isinstance(self.rule_class, type) or not issubclass(self.rule_class, RewriteRule):
            raise ValueError(f"rule_class must inherit from RewriteRule, got {self.rule_class!r}")

        if self.priority < 0:
            raise ValueError(f"Priority must be non-negative, got {self.priority}")

    @property
    def dependencies(self) -> list[str]:
        """Names of rules that must run before this one."""
        return list(self.rule_class.after)

    @property
    def options_class(self) -> Optional[type[BaseRuleOptions]]:
        return self.rule_class.options_class

    def create_instance(self, options: Optional[BaseRuleOptions] = None, **kwargs: Any) -> RewriteRule:
        """Create an instance of the rule.

        Parameters
        ----------
        options : BaseRuleOptions, optional
            Options object passed to the rule constructor
        **kwargs
            Option field overrides, applied to ``options`` (or to the
            defaults) with ``create_updated``

        Returns
        -------
        RewriteRule
            Rule instance

        """
        if kwargs:
            if self.options_class is None:
                raise ValueError(f"Rule '{self.name}' takes no options, got: {', '.join(sorted(kwargs))}")
            base = options if options is not None else self.options_class()
            options = base.create_updated(**kwargs)
        return self.rule_class(options)

    def to_dict(self) -> dict[str, Any]:
        """Summarize the metadata for listings."""
        return {
            "name": self.name,
            "description": self.description,
            "priority": self.priority,
            "after": self.dependencies,
            "version": self.version,
            "author": self.author,
            "tags": list(self.tags),
        }
