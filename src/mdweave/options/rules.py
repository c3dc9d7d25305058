#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/options/rules.py
"""Configuration options for the built-in rewrite rules."""

from __future__ import annotations

from dataclasses import dataclass, field

from mdweave.constants import (
    DEFAULT_CALLOUT_CATEGORIES,
    DEFAULT_CALLOUT_TAG_NAME,
    DEFAULT_CALLOUT_TITLES,
    DEFAULT_LOCAL_VIDEO_MIME_TYPE,
    DEFAULT_VIDEO_TITLE_CLASS,
    DEFAULT_VIDEO_WRAPPER_CLASS,
)
from mdweave.exceptions import ConfigurationError
from mdweave.options.base import BaseRuleOptions


@dataclass(frozen=True)
class CalloutOptions(BaseRuleOptions):
    """Configuration options for the callout rule.

    Parameters
    ----------
    categories : tuple of str
        Container directive names recognized as callouts.
    titles : dict of str to str
        Display header for each category. Every category needs an entry.
    tag_name : str, default "doc-content-callout"
        Custom element the matched containers are rendered as.

    Raises
    ------
    ConfigurationError
        If a category has no title or the tag name is empty.

    Examples
    --------
    Add a ``danger`` category:

        >>> CalloutOptions(
        ...     categories=("note", "danger"),
        ...     titles={"note": "Note", "danger": "Danger"},
        ... )

    """

    categories: tuple[str, ...] = field(
        default=DEFAULT_CALLOUT_CATEGORIES,
        metadata={"help": "Container directive names treated as callouts", "importance": "core"},
    )
    titles: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CALLOUT_TITLES),
        metadata={"help": "Display header per callout category", "importance": "core"},
    )
    tag_name: str = field(
        default=DEFAULT_CALLOUT_TAG_NAME,
        metadata={"help": "Element name callouts are rendered as", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Check that the category set and the title table agree."""
        # Config files deliver lists
        if not isinstance(self.categories, tuple):
            object.__setattr__(self, "categories", tuple(self.categories))

        missing = [name for name in self.categories if name not in self.titles]
        if missing:
            raise ConfigurationError(
                f"Callout categories without a title: {', '.join(missing)}", setting="callout.titles"
            )
        if not self.tag_name:
            raise ConfigurationError("Callout tag_name must be non-empty", setting="callout.tag_name")


@dataclass(frozen=True)
class VideoOptions(BaseRuleOptions):
    """Configuration options for the video rule.

    Parameters
    ----------
    strict : bool, default False
        Raise TransformError for an unknown or missing ``type`` attribute
        instead of emitting an empty fragment.
    wrapper_class : str, default "video-plugin-div"
        Class of the outer ``<div>``.
    title_class : str, default "video-plugin-title"
        Class of the title ``<div>``.
    local_mime_type : str, default "video/mp4"
        MIME type declared on the ``<source>`` of local videos.

    """

    strict: bool = field(
        default=False,
        metadata={"help": "Fail on unknown video types", "cli_name": "strict-video", "importance": "core"},
    )
    wrapper_class: str = field(
        default=DEFAULT_VIDEO_WRAPPER_CLASS,
        metadata={"help": "Class of the video wrapper element", "importance": "advanced"},
    )
    title_class: str = field(
        default=DEFAULT_VIDEO_TITLE_CLASS,
        metadata={"help": "Class of the video title element", "importance": "advanced"},
    )
    local_mime_type: str = field(
        default=DEFAULT_LOCAL_VIDEO_MIME_TYPE,
        metadata={"help": "MIME type for local video sources", "importance": "advanced"},
    )
