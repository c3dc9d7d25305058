#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/api.py
"""High-level API for mdweave.

Three functions cover the pipeline stages:

- :func:`to_ast` parses Markdown into a source tree
- :func:`to_hast` applies rewrite rules and converts to the target tree
- :func:`to_html` runs the whole pipeline and returns HTML

Individual option fields can be passed as keyword arguments; they override
the corresponding options object.

"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from mdweave.ast.nodes import Document
from mdweave.constants import DEFAULT_RULES
from mdweave.hast.converter import HastConverter
from mdweave.hast.nodes import Root
from mdweave.options import HastConverterOptions, HtmlRendererOptions, MarkdownParserOptions
from mdweave.parsers.base import ParserInput
from mdweave.parsers.markdown import MarkdownParser
from mdweave.renderers.base import RendererOutput
from mdweave.renderers.html import HtmlRenderer
from mdweave.transforms.pipeline import Pipeline, RuleSpec

logger = logging.getLogger(__name__)


def _merge_options(options: Any, options_class: type, overrides: dict[str, Any]) -> Any:
    """Apply keyword overrides to an options object (or to the defaults)."""
    base = options if options is not None else options_class()
    return base.create_updated(**overrides) if overrides else base


def to_ast(
    source: ParserInput,
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    **kwargs: Any,
) -> Document:
    """Parse Markdown into a source tree.

    Parameters
    ----------
    source : str, Path, IO or bytes
        Markdown text, a path to a Markdown file, or a stream
    parser_options : MarkdownParserOptions, optional
        Parser options
    kwargs : Any
        Individual parser option fields overriding ``parser_options``

    Returns
    -------
    Document
        A freshly built source tree

    Raises
    ------
    ParsingError
        If the input cannot be read or parsed

    Examples
    --------
        >>> doc = to_ast(":::note\\nRead this.\\n:::\\n")
        >>> doc.children[0].name
        'note'

    """
    options = _merge_options(parser_options, MarkdownParserOptions, kwargs)
    return MarkdownParser(options).parse(source)


def to_hast(
    source: Union[ParserInput, Document],
    rules: Optional[Sequence[RuleSpec]] = DEFAULT_RULES,
    *,
    converter_options: Optional[HastConverterOptions] = None,
    **kwargs: Any,
) -> Root:
    """Apply rewrite rules and convert to the target tree.

    Parameters
    ----------
    source : Document, str, Path, IO or bytes
        Source tree (rewritten in place) or Markdown input
    rules : sequence of str or RewriteRule, default ("callout", "video")
        Rules to apply; pass an empty sequence for none
    converter_options : HastConverterOptions, optional
        Tree converter options
    kwargs : Any
        Individual converter option fields overriding ``converter_options``

    Returns
    -------
    Root
        The target tree

    """
    options = _merge_options(converter_options, HastConverterOptions, kwargs)
    pipeline = Pipeline(rules=rules, converter=HastConverter(options))
    document = pipeline.apply_rules(pipeline.parse(source))
    return pipeline.converter.convert(document)


def to_html(
    source: Union[ParserInput, Document],
    rules: Optional[Sequence[RuleSpec]] = DEFAULT_RULES,
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    converter_options: Optional[HastConverterOptions] = None,
    renderer_options: Optional[HtmlRendererOptions] = None,
    output: Optional[RendererOutput] = None,
) -> str:
    """Run the whole pipeline and return HTML.

    Parameters
    ----------
    source : Document, str, Path, IO or bytes
        Markdown input or a source tree
    rules : sequence of str or RewriteRule, default ("callout", "video")
        Rules to apply; pass an empty sequence for none
    parser_options : MarkdownParserOptions, optional
        Parser options
    converter_options : HastConverterOptions, optional
        Tree converter options
    renderer_options : HtmlRendererOptions, optional
        HTML serialization options
    output : str, Path or stream, optional
        Where to also write the HTML

    Returns
    -------
    str
        HTML output

    Raises
    ------
    ParsingError
        If the input cannot be parsed
    TransformError
        If a rewrite rule fails
    RenderingError
        If conversion or serialization fails

    Examples
    --------
        >>> to_html('::video{src="https://x/y" title="Demo" type="youtube"}')
        '<div class="video-plugin-div"><div class="video-plugin-title">Demo</div><iframe src="https://x/y"></iframe></div>'

    """
    pipeline = Pipeline(
        rules=rules,
        parser=MarkdownParser(parser_options),
        converter=HastConverter(converter_options),
        renderer=HtmlRenderer(renderer_options),
    )
    html_text = pipeline.execute(source)
    if output is not None:
        pipeline.renderer.write_text_output(html_text, output)
    return html_text


__all__ = ["to_ast", "to_hast", "to_html"]
