#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Target (HTML) tree model and the converter that builds it."""

from mdweave.hast.converter import HastConverter
from mdweave.hast.nodes import Element, HastNode, Raw, Root, Text

__all__ = ["HastConverter", "HastNode", "Root", "Element", "Text", "Raw"]
