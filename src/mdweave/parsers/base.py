#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/parsers/base.py
"""Base classes for document parsers.

This module defines the abstract base class for parser adapters. A parser
turns source text into a fresh source tree (:class:`~mdweave.ast.Document`)
for every call, so one parser instance can serve many documents.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

import chardet

from mdweave.ast import Document
from mdweave.exceptions import InvalidOptionsError, ParsingError
from mdweave.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]

_CHARDET_SAMPLE_SIZE = 8192
_CHARDET_CONFIDENCE_THRESHOLD = 0.7


def read_text_with_encoding_detection(data: bytes) -> str:
    """Decode bytes as text, detecting the encoding when UTF-8 fails.

    Parameters
    ----------
    data : bytes
        Binary data to decode

    Returns
    -------
    str
        Decoded text content

    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Input is not UTF-8, detecting encoding")

    result = chardet.detect(data[:_CHARDET_SAMPLE_SIZE])
    encoding = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    if encoding and confidence >= _CHARDET_CONFIDENCE_THRESHOLD:
        try:
            logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with chardet-detected encoding {encoding}: {e}")

    logger.warning("Could not detect input encoding, decoding as latin-1")
    return data.decode("latin-1")


class BaseParser(ABC):
    """Abstract base class for parser adapters.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Notes
    -----
    The parse() method accepts:
    - str: Markdown text, or a path to a file when it names an existing file
    - Path: File path to read
    - IO: File-like object in binary or text mode
    - bytes: Raw document bytes

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input document into a source tree.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            The input document to parse

        Returns
        -------
        Document
            Root of a freshly built source tree

        Raises
        ------
        ParsingError
            If the input cannot be read or parsed

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load content from various input types with encoding detection.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Input data to load

        Returns
        -------
        str
            Document text

        Raises
        ------
        ParsingError
            If a file cannot be read

        """
        try:
            if isinstance(input_data, bytes):
                return read_text_with_encoding_detection(input_data)
            elif isinstance(input_data, Path):
                return read_text_with_encoding_detection(input_data.read_bytes())
            elif isinstance(input_data, str):
                # Could be file path or content. Very long strings or strings with
                # newlines are never paths, and path.exists() raises on some of them
                if len(input_data) <= 260 and "\n" not in input_data:
                    try:
                        path = Path(input_data)
                        if path.is_file():
                            return read_text_with_encoding_detection(path.read_bytes())
                    except OSError:
                        pass
                return input_data
            else:
                data = input_data.read()
                if isinstance(data, bytes):
                    return read_text_with_encoding_detection(data)
                return data
        except OSError as e:
            raise ParsingError(f"Failed to read input: {e}", parsing_stage="input_loading", original_error=e) from e
