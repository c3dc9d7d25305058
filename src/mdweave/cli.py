#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/cli.py
"""Command-line interface for mdweave.

Render a Markdown file with directives to HTML::

    $ mdweave page.md -o page.html

Show every pipeline stage (source tree, target tree, HTML)::

    $ mdweave page.md --stages

Apply only some rules, failing on unknown video types::

    $ mdweave page.md --rules callout,video --strict-video

Read from standard input::

    $ cat page.md | mdweave -

Exit codes
----------
0 success, 1 general error, 2 configuration error, 3 parsing error,
4 transform or rendering error.

"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from mdweave import __version__
from mdweave.ast.serialization import ast_to_dict
from mdweave.config import MdweaveConfig, load_config
from mdweave.constants import DEFAULT_RULES
from mdweave.exceptions import (
    MdweaveError,
    ParsingError,
    RenderingError,
    TransformError,
    ValidationError,
)
from mdweave.hast.converter import HastConverter
from mdweave.logging_utils import configure_logging
from mdweave.parsers.markdown import MarkdownParser
from mdweave.renderers.html import HtmlRenderer
from mdweave.transforms.base import RewriteRule
from mdweave.transforms.pipeline import Pipeline, PipelineResult
from mdweave.transforms.registry import rule_registry

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_PARSING_ERROR = 3
EXIT_TRANSFORM_ERROR = 4


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code."""
    if isinstance(exception, ValidationError):
        return EXIT_CONFIG_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, (TransformError, RenderingError)):
        return EXIT_TRANSFORM_ERROR
    return EXIT_ERROR


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``mdweave`` command."""
    parser = argparse.ArgumentParser(
        prog="mdweave",
        description="Render Markdown with callout and video directives to HTML.",
    )
    parser.add_argument("input", nargs="?", help="Markdown file to render, or '-' for standard input")
    parser.add_argument("-o", "--output", help="Write HTML to this file instead of standard output")
    parser.add_argument(
        "--stages",
        action="store_true",
        help="Print the source tree, the target tree and the HTML",
    )
    parser.add_argument(
        "--rules",
        metavar="NAMES",
        help=f"Comma-separated rewrite rules to apply (default: {','.join(DEFAULT_RULES)})",
    )
    parser.add_argument("--no-rules", action="store_true", help="Apply no rewrite rules")
    parser.add_argument("--list-rules", action="store_true", help="List available rewrite rules and exit")
    parser.add_argument("--config", help="Configuration file (.toml, .yaml, .json or pyproject.toml)")
    parser.add_argument("--no-config", action="store_true", help="Ignore configuration files")
    parser.add_argument(
        "--strict-video",
        action="store_true",
        default=None,
        help="Fail on ::video directives with an unknown type",
    )
    parser.add_argument(
        "--safe-html",
        action="store_false",
        dest="allow_dangerous_html",
        default=None,
        help="Drop HTML written in the Markdown source",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _config_overrides(parsed_args: argparse.Namespace) -> dict[str, Any]:
    """Translate command line flags into configuration overrides."""
    overrides: dict[str, Any] = {}
    if parsed_args.no_rules:
        overrides["rules"] = []
    elif parsed_args.rules is not None:
        overrides["rules"] = [name.strip() for name in parsed_args.rules.split(",") if name.strip()]
    if parsed_args.strict_video is not None:
        overrides["video"] = {"strict": parsed_args.strict_video}
    if parsed_args.allow_dangerous_html is not None:
        overrides["html"] = {"allow_dangerous_html": parsed_args.allow_dangerous_html}
    return overrides


def build_pipeline(config: MdweaveConfig) -> Pipeline:
    """Build a pipeline from loaded configuration.

    Built-in rules receive their options from the configuration; other
    registered rules are created with their defaults.

    Raises
    ------
    ConfigurationError
        If a rule is unknown or the rule set is inconsistent

    """
    rule_names = config.rules if config.rules is not None else list(DEFAULT_RULES)
    rules: list[RewriteRule | str] = []
    for name in rule_names:
        options = config.rule_options(name)
        if options is not None and rule_registry.has_rule(name):
            rules.append(rule_registry.get_rule(name, options))
        else:
            rules.append(name)

    return Pipeline(
        rules=rules,
        parser=MarkdownParser(config.parser),
        converter=HastConverter(config.converter),
        renderer=HtmlRenderer(config.html),
    )


def _read_input(input_arg: str) -> Any:
    """Return what the parser should read: stdin bytes or the path."""
    if input_arg == "-":
        return sys.stdin.buffer.read()
    return Path(input_arg)


def _print_stages(console: Console, result: PipelineResult) -> None:
    console.rule("Stage 1: Markdown to source tree (rewritten)")
    console.print(Syntax(json.dumps(ast_to_dict(result.document), indent=2, ensure_ascii=False), "json"))
    console.rule("Stage 2: source tree to target tree")
    console.print(Syntax(json.dumps(result.hast.to_dict(), indent=2, ensure_ascii=False), "json"))
    console.rule("Stage 3: target tree to HTML")
    console.print(Syntax(result.html, "html", word_wrap=True))


def _print_rules(console: Console) -> None:
    table = Table(title="Rewrite rules")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Runs after")
    table.add_column("Tags", style="dim")
    for name in rule_registry.list_rules():
        metadata = rule_registry.get_metadata(name)
        table.add_row(name, metadata.description, ", ".join(metadata.dependencies), ", ".join(metadata.tags))
    console.print(table)


def main(args: Optional[Sequence[str]] = None) -> int:
    """Execute the ``mdweave`` command and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)
    console = Console()

    if parsed_args.list_rules:
        _print_rules(console)
        return EXIT_SUCCESS

    if not parsed_args.input:
        print("Error: Input file is required", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if parsed_args.input != "-" and not Path(parsed_args.input).is_file():
        print(f"Error: Input file not found: {parsed_args.input}", file=sys.stderr)
        return EXIT_ERROR

    try:
        config = load_config(
            parsed_args.config,
            overrides=_config_overrides(parsed_args),
            discover=not parsed_args.no_config,
        )
        pipeline = build_pipeline(config)
        result = pipeline.run(_read_input(parsed_args.input))

        if parsed_args.output:
            pipeline.renderer.write_text_output(result.html, parsed_args.output)
            logger.info(f"Wrote {parsed_args.output}")

        if parsed_args.stages:
            _print_stages(console, result)
        elif not parsed_args.output:
            sys.stdout.write(result.html)
            if not result.html.endswith("\n"):
                sys.stdout.write("\n")
    except MdweaveError as e:
        logger.debug("Pipeline failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
