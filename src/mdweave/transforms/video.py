#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/transforms/video.py
"""Video rule: ``::video`` leaf directives replaced by an embed fragment.

The directive's attributes select the embed::

    ::video{src="https://www.youtube.com/embed/xyz" title="Demo" type="youtube"}
    ::video{src="/media/intro.mp4" title="Intro" type="local"}

Each directive is replaced in place by a
:class:`~mdweave.ast.nodes.RawOutput` holding the pre-rendered HTML, which
the converter emits verbatim. An unknown or missing ``type`` yields an empty
fragment and a warning, or a :class:`~mdweave.exceptions.TransformError`
when ``VideoOptions.strict`` is set.

"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Mapping

from mdweave.ast.nodes import Node, Parent, RawOutput
from mdweave.ast.traversal import Rewrite, replace_with
from mdweave.constants import VIDEO_DIRECTIVE_NAME, VIDEO_TYPES
from mdweave.exceptions import TransformError
from mdweave.options.rules import VideoOptions
from mdweave.transforms.base import RewriteRule, SelectionSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoAttributes:
    """Typed view of a ``::video`` directive's attributes.

    Parameters
    ----------
    src : str
        Video URL or path
    title : str
        Caption shown above the video
    type : str
        ``"youtube"`` or ``"local"``; anything else is unknown

    """

    src: str = ""
    title: str = ""
    type: str = ""

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> VideoAttributes:
        """Build from a directive attribute bag; absent keys become empty strings."""
        return cls(
            src=attributes.get("src", ""),
            title=attributes.get("title", ""),
            type=attributes.get("type", ""),
        )


class VideoRule(RewriteRule):
    """Replace ``::video`` leaf directives with an embedded player fragment.

    Parameters
    ----------
    options : VideoOptions or None, default = None
        Strictness and the class names used in the fragment

    """

    name = "video"
    options_class = VideoOptions

    options: VideoOptions

    _SELECTION: SelectionSet = frozenset({("leaf_directive", VIDEO_DIRECTIVE_NAME)})

    def selection_set(self) -> SelectionSet:
        return self._SELECTION

    def render_fragment(self, video: VideoAttributes) -> str:
        """Render the HTML fragment for a video.

        Parameters
        ----------
        video : VideoAttributes
            Parsed directive attributes

        Returns
        -------
        str
            The fragment, or an empty string for an unknown type

        Raises
        ------
        TransformError
            If the type is unknown and the rule is strict

        """
        if video.type not in VIDEO_TYPES:
            message = f"Unknown video type {video.type!r} (expected one of: {', '.join(VIDEO_TYPES)})"
            if self.options.strict:
                raise TransformError(message, transform_name=self.name)
            logger.warning(f"{message}; emitting an empty fragment for src={video.src!r}")
            return ""

        src = html.escape(video.src, quote=True)
        title = html.escape(video.title, quote=True)
        wrapper_class = html.escape(self.options.wrapper_class, quote=True)
        title_class = html.escape(self.options.title_class, quote=True)

        if video.type == "youtube":
            player = f'<iframe src="{src}"></iframe>'
        else:
            mime_type = html.escape(self.options.local_mime_type, quote=True)
            player = f'<video controls><source src="{src}" type="{mime_type}"></video>'

        return f'<div class="{wrapper_class}"><div class="{title_class}">{title}</div>{player}</div>'

    def rewrite(self, node: Node, index: int | None, parent: Parent | None) -> Rewrite:
        video = VideoAttributes.from_attributes(getattr(node, "attributes", {}))
        return replace_with(RawOutput(raw_content=self.render_fragment(video)))
