#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/options/base.py
"""Base classes for parser, converter, renderer and rule options.

This module defines the foundation classes for the option objects used
throughout the mdweave pipeline. Every options class is a frozen dataclass so
that a configured component can never have its behavior changed mid-run.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Parsers turn source text into a source tree.

    Parameters
    ----------
    extract_metadata : bool, default True
        Whether to read front matter into ``Document.metadata``

    """

    extract_metadata: bool = field(
        default=True,
        metadata={"help": "Read YAML/TOML front matter into document metadata", "importance": "core"},
    )


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for converter and renderer options.

    Notes
    -----
    Subclasses define stage-specific settings as frozen dataclass fields.

    """


@dataclass(frozen=True)
class BaseRuleOptions(CloneFrozenMixin):
    """Base class for rewrite rule options.

    Rule options are validated in ``__post_init__`` so that misconfiguration
    surfaces when the rule is set up rather than while a document is processed.
    """
