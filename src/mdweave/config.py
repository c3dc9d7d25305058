#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/config.py
"""Configuration file discovery and loading.

Configuration is read from the first of these found in the current directory
or one of its parents:

1. ``.mdweave.toml``
2. ``.mdweave.yaml`` / ``.mdweave.yml``
3. ``.mdweave.json``
4. ``pyproject.toml`` with a ``[tool.mdweave]`` table

An explicit path (``--config``) or the ``MDWEAVE_CONFIG`` environment variable
takes precedence over discovery.

Example ``.mdweave.toml``::

    rules = ["callout", "video"]

    [callout]
    categories = ["note", "warning", "danger"]
    titles = { note = "Note", warning = "Warning", danger = "Danger" }

    [video]
    strict = true

    [parser]
    parse_strikethrough = true

    [html]
    allow_dangerous_html = false
    trailing_newline = true

The ``html`` table takes the fields of both
:class:`~mdweave.options.HastConverterOptions` and
:class:`~mdweave.options.HtmlRendererOptions`.

"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from mdweave.constants import CONFIG_FILENAMES, PYPROJECT_TOOL_SECTION
from mdweave.exceptions import ConfigurationError
from mdweave.options import (
    CalloutOptions,
    HastConverterOptions,
    HtmlRendererOptions,
    MarkdownParserOptions,
    VideoOptions,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDWEAVE_CONFIG"

_KNOWN_SECTIONS = frozenset({"rules", "parser", "html", "callout", "video"})

OptionsT = TypeVar("OptionsT")


@dataclass
class MdweaveConfig:
    """Options for every pipeline stage, as loaded from configuration.

    Parameters
    ----------
    rules : list of str or None, default = None
        Rule names to apply; None means the CLI default
    parser : MarkdownParserOptions
        Parser options
    converter : HastConverterOptions
        Tree converter options
    html : HtmlRendererOptions
        HTML serialization options
    callout : CalloutOptions
        Callout rule options
    video : VideoOptions
        Video rule options
    source : Path or None, default = None
        File the configuration was loaded from

    """

    rules: Optional[list[str]] = None
    parser: MarkdownParserOptions = field(default_factory=MarkdownParserOptions)
    converter: HastConverterOptions = field(default_factory=HastConverterOptions)
    html: HtmlRendererOptions = field(default_factory=HtmlRendererOptions)
    callout: CalloutOptions = field(default_factory=CalloutOptions)
    video: VideoOptions = field(default_factory=VideoOptions)
    source: Optional[Path] = None

    def rule_options(self, name: str) -> Any:
        """Return the options object for a built-in rule, or None."""
        return {"callout": self.callout, "video": self.video}.get(name)


# =============================================================================
# File loading
# =============================================================================


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.mdweave]`` table from a pyproject.toml file.

    Returns
    -------
    dict
        The table, or an empty dict if there is none

    Raises
    ------
    ConfigurationError
        If the file is not valid TOML or the table is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {pyproject_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading {pyproject_path}: {e}", original_error=e) from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in config file {config_path}: {e}", original_error=e) from e


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}", original_error=e) from e

    # An empty file is an empty configuration
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}", original_error=e) from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration file into a dictionary.

    The format is chosen from the file name: ``pyproject.toml`` (its
    ``[tool.mdweave]`` table), ``.toml``, ``.yaml``/``.yml`` or ``.json``.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Raw configuration

    Raises
    ------
    ConfigurationError
        If the file is missing, unreadable, malformed or of an unknown format

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file does not exist: {config_path}")

    ext = config_path.suffix.lower()
    try:
        if config_path.name.lower() == "pyproject.toml":
            return _load_pyproject_section(config_path)
        elif ext == ".toml":
            return _load_toml_config(config_path)
        elif ext in (".yaml", ".yml"):
            return _load_yaml_config(config_path)
        elif ext == ".json":
            return _load_json_config(config_path)
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {config_path}: {e}", original_error=e) from e

    raise ConfigurationError(f"Unsupported config file format: {ext}. Use .toml, .yaml, .yml or .json")


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file in ``start_dir`` or one of its parents.

    Dedicated config files win over ``pyproject.toml`` in the same
    directory, and a ``pyproject.toml`` only counts when it has a
    ``[tool.mdweave]`` table. Invalid ``pyproject.toml`` files are skipped.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        The first configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigurationError as e:
                logger.debug(f"Skipping {pyproject_path}: {e}")

        parent = current.parent
        if parent == current:
            return None
        current = parent


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two configuration dictionaries; ``override`` wins.

    Examples
    --------
    >>> merge_configs({"video": {"strict": False}, "rules": ["callout"]}, {"video": {"strict": True}})
    {'video': {'strict': True}, 'rules': ['callout']}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


# =============================================================================
# Conversion to option objects
# =============================================================================


def _field_defaults(options_class: type) -> Dict[str, Any]:
    defaults: Dict[str, Any] = {}
    for f in dataclasses.fields(options_class):
        if f.default is not dataclasses.MISSING:
            defaults[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            defaults[f.name] = f.default_factory()
    return defaults


def _check_value(section: str, key: str, value: Any, default: Any) -> Any:
    """Check a config value against the type of the field's default."""
    setting = f"{section}.{key}"
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigurationError(f"{setting} must be true or false, got {value!r}", setting=setting)
    elif isinstance(default, str):
        if not isinstance(value, str):
            raise ConfigurationError(f"{setting} must be a string, got {value!r}", setting=setting)
    elif isinstance(default, tuple):
        if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
            raise ConfigurationError(f"{setting} must be a list of strings, got {value!r}", setting=setting)
        return tuple(value)
    elif isinstance(default, dict):
        if not isinstance(value, dict) or not all(isinstance(item, str) for item in value.values()):
            raise ConfigurationError(f"{setting} must be a table of strings, got {value!r}", setting=setting)
        return {str(k): v for k, v in value.items()}
    return value


def _build_options(options_class: Type[OptionsT], section: str, table: Dict[str, Any]) -> OptionsT:
    """Build an options object from a config table, rejecting unknown keys."""
    defaults = _field_defaults(options_class)
    kwargs: Dict[str, Any] = {}
    for key, value in table.items():
        if key not in defaults:
            raise ConfigurationError(
                f"Unknown setting '{section}.{key}' (expected one of: {', '.join(sorted(defaults))})",
                setting=f"{section}.{key}",
            )
        kwargs[key] = _check_value(section, key, value, defaults[key])

    try:
        return options_class(**kwargs)
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid [{section}] settings: {e}", setting=section, original_error=e) from e


def _table(data: Dict[str, Any], section: str) -> Dict[str, Any]:
    table = data.get(section, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[{section}] must be a table, got {type(table).__name__}", setting=section)
    return table


def config_from_dict(data: Dict[str, Any], source: Optional[Path] = None) -> MdweaveConfig:
    """Turn a raw configuration dictionary into option objects.

    Parameters
    ----------
    data : dict
        Raw configuration, as returned by :func:`load_config_file`
    source : Path, optional
        File the data came from, recorded on the result

    Returns
    -------
    MdweaveConfig
        Validated options for every stage

    Raises
    ------
    ConfigurationError
        For unknown sections or keys, wrongly typed values, or option
        objects that reject their values (such as a callout category
        without a title)

    """
    unknown = sorted(set(data) - _KNOWN_SECTIONS)
    if unknown:
        raise ConfigurationError(f"Unknown configuration section(s): {', '.join(unknown)}", setting=unknown[0])

    rules = data.get("rules")
    if rules is not None and (not isinstance(rules, list) or not all(isinstance(r, str) for r in rules)):
        raise ConfigurationError(f"rules must be a list of rule names, got {rules!r}", setting="rules")

    html_table = _table(data, "html")
    converter_keys = {f.name for f in dataclasses.fields(HastConverterOptions)}
    converter_table = {k: v for k, v in html_table.items() if k in converter_keys}
    renderer_table = {k: v for k, v in html_table.items() if k not in converter_keys}

    config = MdweaveConfig(
        rules=rules,
        parser=_build_options(MarkdownParserOptions, "parser", _table(data, "parser")),
        converter=_build_options(HastConverterOptions, "html", converter_table),
        html=_build_options(HtmlRendererOptions, "html", renderer_table),
        callout=_build_options(CalloutOptions, "callout", _table(data, "callout")),
        video=_build_options(VideoOptions, "video", _table(data, "video")),
        source=source,
    )
    logger.debug(f"Loaded configuration from {source or 'defaults'}")
    return config


def load_config(
    explicit_path: Optional[Path | str] = None,
    start_dir: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    discover: bool = True,
) -> MdweaveConfig:
    """Load configuration by priority.

    Priority order (highest first):

    1. ``explicit_path``
    2. The file named by the ``MDWEAVE_CONFIG`` environment variable
    3. Discovery from ``start_dir`` (default: current directory) upwards

    With no file found, default options are returned. ``overrides`` (for
    example from command line flags) are deep-merged over the file contents,
    and ``discover=False`` skips the environment variable and discovery.

    Raises
    ------
    ConfigurationError
        If a named file is missing or any file is invalid

    """
    path: Optional[Path] = None
    if explicit_path:
        path = Path(explicit_path)
    elif discover and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])
    elif discover:
        path = find_config_in_parents(start_dir)

    data: Dict[str, Any] = {}
    if path is not None:
        logger.info(f"Using configuration file: {path}")
        data = load_config_file(path)
    return config_from_dict(merge_configs(data, overrides or {}), source=path)


__all__ = [
    "CONFIG_ENV_VAR",
    "MdweaveConfig",
    "config_from_dict",
    "find_config_in_parents",
    "load_config",
    "load_config_file",
    "merge_configs",
]
