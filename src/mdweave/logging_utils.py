"""Logging setup for the mdweave command line.

Library modules only create ``logging.getLogger(__name__)`` loggers under the
``mdweave`` namespace; handlers are installed here, by the CLI.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "mdweave"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] %(message)s"
_TRACE_DATE_FORMAT = "%H:%M:%S"


def resolve_level(log_level: int | str) -> int:
    """Turn a level name such as ``"info"`` into its numeric value.

    Unknown names fall back to ``WARNING``, the CLI default.
    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optionally file) handlers on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name.
    log_file : str, optional
        Also append log records to this file.
    trace_mode : bool, default False
        Include timestamps, logger names and line numbers, which makes it
        possible to follow each pipeline stage and rule application.

    Returns
    -------
    logging.Logger
        The ``mdweave`` package logger.

    """
    level = resolve_level(log_level)
    formatter = (
        logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(_PLAIN_FORMAT)
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if file_error is not None:
        package_logger.warning(f"Could not open log file {log_file}: {file_error}")
    elif log_file:
        package_logger.info(f"Logging to file: {log_file}")
    return package_logger
