#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/constants.py
"""Constants and default values for the mdweave library.

This module centralizes the hardcoded values used across mdweave so that the
parser, the rewrite rules and the renderers agree on names and defaults.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Node Metadata Keys - Keys rewrite rules use to steer the tree converter
3. Callout Rule - Categories, display titles and the target element
4. Video Rule - Fragment markup used for embedded videos
5. HTML Rendering - Void elements and raw HTML handling
6. Configuration Files - Names searched for configuration
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

VideoType = Literal["youtube", "local"]
FrontmatterFormat = Literal["yaml", "toml"]

# =============================================================================
# Node Metadata Keys
# =============================================================================

# Written by rewrite rules, read by the tree converter
META_TARGET_ELEMENT = "target_element"
META_TARGET_PROPERTIES = "target_properties"

# =============================================================================
# Callout Rule
# =============================================================================

DEFAULT_CALLOUT_CATEGORIES: tuple[str, ...] = ("note", "tip", "warning", "important", "caution")

DEFAULT_CALLOUT_TITLES: dict[str, str] = {
    "note": "Note",
    "tip": "Tip",
    "warning": "Warning",
    "important": "Important",
    "caution": "Caution",
}

DEFAULT_CALLOUT_TAG_NAME = "doc-content-callout"

# =============================================================================
# Video Rule
# =============================================================================

VIDEO_DIRECTIVE_NAME = "video"
VIDEO_TYPES: tuple[str, ...] = ("youtube", "local")

DEFAULT_VIDEO_WRAPPER_CLASS = "video-plugin-div"
DEFAULT_VIDEO_TITLE_CLASS = "video-plugin-title"
DEFAULT_LOCAL_VIDEO_MIME_TYPE = "video/mp4"

# =============================================================================
# HTML Rendering
# =============================================================================

HTML_VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

DEFAULT_ALLOW_DANGEROUS_HTML = True
DEFAULT_CODE_LANGUAGE_PREFIX = "language-"

# =============================================================================
# Configuration Files
# =============================================================================

CONFIG_FILENAMES: tuple[str, ...] = (".mdweave.toml", ".mdweave.yaml", ".mdweave.yml", ".mdweave.json")
PYPROJECT_TOOL_SECTION = "mdweave"

# Entry point group scanned for third-party rewrite rules
RULES_ENTRY_POINT_GROUP = "mdweave.rules"

# Rules applied when none are named
DEFAULT_RULES: tuple[str, ...] = ("callout", "video")
