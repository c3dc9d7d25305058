#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Source tree model for mdweave.

This package contains the node classes, the visitor base class and the
in-place rewriting traversal used by rewrite rules.
"""

from mdweave.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    ContainerDirective,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LeafDirective,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Parent,
    RawOutput,
    Strong,
    Text,
    TextDirective,
    ThematicBreak,
    get_node_children,
    is_directive,
)
from mdweave.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from mdweave.ast.traversal import KEEP, Rewrite, RewriteAction, annotate, replace_with, traverse, walk
from mdweave.ast.utils import clone_node, extract_directives, extract_nodes, extract_text
from mdweave.ast.visitors import NodeVisitor

__all__ = [
    # Nodes
    "Node",
    "Parent",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "ThematicBreak",
    "HTMLBlock",
    "Text",
    "Emphasis",
    "Strong",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "HTMLInline",
    "ContainerDirective",
    "LeafDirective",
    "TextDirective",
    "RawOutput",
    "get_node_children",
    "is_directive",
    # Traversal
    "KEEP",
    "Rewrite",
    "RewriteAction",
    "annotate",
    "replace_with",
    "traverse",
    "walk",
    # Utilities
    "NodeVisitor",
    "clone_node",
    "extract_directives",
    "extract_nodes",
    "extract_text",
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
