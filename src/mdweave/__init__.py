"""mdweave - Markdown with directives, rewritten and rendered to HTML.

mdweave parses Markdown extended with generic directives into a source tree,
applies rewrite rules that annotate or replace directive nodes, converts the
result into a target (HTML) tree and serializes it.

Pipeline
--------
1. Parse: Markdown text to a :class:`~mdweave.ast.Document`
2. Rewrite: rules such as ``callout`` and ``video`` act on selected nodes
3. Convert: the rewritten tree becomes a :class:`~mdweave.hast.Root`
4. Serialize: the target tree is written out as HTML

Built-in rules
--------------
- ``callout``: ``:::note``/``:::warning``/... containers become
  ``<doc-content-callout header="..." variant="...">`` elements
- ``video``: ``::video{src=... title=... type=youtube|local}`` becomes an
  embedded player fragment

Examples
--------
Render a document with the built-in rules:

    >>> from mdweave import to_html
    >>> print(to_html(":::warning\\nBe careful.\\n:::\\n"))
    <doc-content-callout header="Warning" variant="warning">
    <p>Be careful.</p>
    </doc-content-callout>

Work with the source tree directly:

    >>> from mdweave import to_ast
    >>> from mdweave.transforms import apply
    >>> doc = apply(to_ast(":::note\\nHi\\n:::\\n"), rules=["callout"])

See Also
--------
mdweave.transforms : Rewrite rules, registry and pipeline
mdweave.ast : Source tree nodes and traversal

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mdweave requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from mdweave.api import to_ast, to_hast, to_html  # noqa: E402
from mdweave.exceptions import (  # noqa: E402
    ConfigurationError,
    MdweaveError,
    ParsingError,
    RenderingError,
    TransformError,
    ValidationError,
)
from mdweave.transforms import Pipeline, PipelineResult, rule_registry  # noqa: E402

__all__ = [
    "__version__",
    "to_ast",
    "to_hast",
    "to_html",
    "Pipeline",
    "PipelineResult",
    "rule_registry",
    "MdweaveError",
    "ValidationError",
    "ConfigurationError",
    "ParsingError",
    "TransformError",
    "RenderingError",
]
