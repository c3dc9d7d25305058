#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Renderers that serialize the target tree."""

from mdweave.renderers.base import BaseRenderer
from mdweave.renderers.html import HtmlRenderer

__all__ = ["BaseRenderer", "HtmlRenderer"]
