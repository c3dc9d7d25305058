#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/renderers/base.py
"""Base classes for target tree renderers.

This module defines the abstract base class that renderers inherit from. A
renderer serializes a target tree (:class:`~mdweave.hast.nodes.Root`) into
an output format and writes it to a path or stream.

"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union, cast

from mdweave.exceptions import InvalidOptionsError, OutputWriteError
from mdweave.hast.nodes import Root
from mdweave.options.base import BaseRendererOptions

RendererOutput = Union[str, Path, IO[bytes], IO[str]]


class BaseRenderer(ABC):
    """Abstract base class for target tree renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> class TextRenderer(BaseRenderer):
        ...     def render_to_string(self, root):
        ...         return "".join(node.value for node in root.children if node.type == "text")
        ...
        ...     def render(self, root, output):
        ...         self.write_text_output(self.render_to_string(root), output)

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, root: Root) -> str:
        """Serialize the target tree to a string.

        Parameters
        ----------
        root : Root
            Target tree to serialize

        Returns
        -------
        str
            Serialized document

        Raises
        ------
        RenderingError
            If the tree contains a node the renderer cannot serialize

        """
        pass

    @abstractmethod
    def render(self, root: Root, output: RendererOutput) -> None:
        """Serialize the target tree and write it to ``output``.

        Parameters
        ----------
        root : Root
            Target tree to serialize
        output : str, Path, IO[bytes] or IO[str]
            File path or file-like object

        Raises
        ------
        OutputWriteError
            If the output cannot be written

        """
        pass

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: RendererOutput) -> None:
        """Write text output to a file path or stream.

        Paths are written as UTF-8. Binary streams receive UTF-8 bytes and
        text streams receive the string.

        Parameters
        ----------
        text : str
            Rendered text to write
        output : str, Path, IO[bytes] or IO[str]
            Output destination

        Raises
        ------
        OutputWriteError
            If the output cannot be written
        TypeError
            If ``output`` is neither a path nor writable

        Examples
        --------
            >>> from io import BytesIO
            >>> buffer = BytesIO()
            >>> BaseRenderer.write_text_output("<p>Hi</p>", buffer)
            >>> buffer.getvalue()
            b'<p>Hi</p>'

        """
        if isinstance(output, (str, Path)):
            try:
                Path(output).write_text(text, encoding="utf-8")
            except OSError as e:
                raise OutputWriteError(str(output), original_error=e) from e
            return

        if not hasattr(output, "write"):
            raise TypeError(f"Output must be a path or a writable stream, got {type(output).__name__}")

        if isinstance(output, io.TextIOBase):
            is_binary_mode = False
        elif isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
            is_binary_mode = True
        else:
            mode = getattr(output, "mode", "")
            is_binary_mode = isinstance(mode, str) and "b" in mode

        name = str(getattr(output, "name", "<stream>"))
        try:
            if is_binary_mode:
                cast(IO[bytes], output).write(text.encode("utf-8"))
            else:
                cast(IO[str], output).write(text)
        except (OSError, ValueError) as e:
            raise OutputWriteError(name, original_error=e) from e
