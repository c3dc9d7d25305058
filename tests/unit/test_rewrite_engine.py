#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_rewrite_engine.py
"""Unit tests for the in-place rewriting traversal."""

import pytest

from mdweave.ast import (
    KEEP,
    ContainerDirective,
    Document,
    LeafDirective,
    Paragraph,
    RawOutput,
    RewriteAction,
    Text,
    annotate,
    replace_with,
    traverse,
    walk,
)
from mdweave.exceptions import TransformError


def _sample_tree():
    return Document(
        children=[
            Paragraph(children=[Text(content="a")]),
            ContainerDirective(
                name="note",
                children=[Paragraph(children=[Text(content="b")]), LeafDirective(name="video")],
            ),
        ]
    )


@pytest.mark.unit
class TestVisitOrder:
    """Tests for the depth-first pre-order walk."""

    def test_pre_order_with_positions(self):
        """Test every node is visited once with its index and parent."""
        tree = _sample_tree()
        seen = []

        def record(node, index, parent):
            seen.append((node.kind, index, parent.kind if parent else None))
            return KEEP

        traverse(tree, record)

        assert seen == [
            ("root", None, None),
            ("paragraph", 0, "root"),
            ("text", 0, "paragraph"),
            ("container_directive", 1, "root"),
            ("paragraph", 0, "container_directive"),
            ("text", 0, "paragraph"),
            ("leaf_directive", 1, "container_directive"),
        ]

    def test_walk_matches_traverse_order(self):
        """Test walk yields the same sequence as traverse visits."""
        tree = _sample_tree()
        visited = []
        traverse(tree, lambda node, index, parent: visited.append(node))
        assert [node for node, _i, _p in walk(tree)] == visited

    def test_none_result_keeps_node(self):
        """Test a visitor returning None leaves the tree unchanged."""
        tree = _sample_tree()
        before = repr(tree)
        traverse(tree, lambda node, index, parent: None)
        assert repr(tree) == before


@pytest.mark.unit
class TestRewriteResults:
    """Tests for annotate and replace results."""

    def test_keep_constant(self):
        """Test KEEP is the keep action."""
        assert KEEP.action is RewriteAction.KEEP

    def test_annotate_merges_metadata(self):
        """Test annotation overwrites existing keys and keeps others."""
        tree = Document(children=[Paragraph(metadata={"a": 1, "b": 2})])

        def visitor(node, index, parent):
            if node.kind == "paragraph":
                return annotate(b=3, c=4)
            return KEEP

        traverse(tree, visitor)
        assert tree.children[0].metadata == {"a": 1, "b": 3, "c": 4}

    def test_replace_assigns_into_parent(self):
        """Test replacement lands at the same index of the same parent."""
        tree = _sample_tree()
        container = tree.children[1]

        def visitor(node, index, parent):
            if node.kind == "leaf_directive":
                return replace_with(RawOutput(raw_content="<hr>"))
            return KEEP

        traverse(tree, visitor)
        assert container.children[1] == RawOutput(raw_content="<hr>")
        assert len(container.children) == 2

    def test_replacement_not_revisited_but_children_are(self):
        """Test the replacement itself is not visited again, its children are."""
        tree = Document(children=[LeafDirective(name="swap")])
        calls = []

        def visitor(node, index, parent):
            calls.append(node.kind)
            if node.kind == "leaf_directive":
                return replace_with(Paragraph(children=[Text(content="new")]))
            return KEEP

        traverse(tree, visitor)
        assert calls == ["root", "leaf_directive", "text"]
        assert tree.children[0].children[0].content == "new"

    def test_replacing_with_same_kind_terminates(self):
        """Test a visitor that always replaces still finishes in one pass."""
        tree = Document(children=[LeafDirective(name="loop")])
        count = 0

        def visitor(node, index, parent):
            nonlocal count
            if node.kind == "leaf_directive":
                count += 1
                return replace_with(LeafDirective(name="loop"))
            return KEEP

        traverse(tree, visitor)
        assert count == 1

    def test_replace_root_rejected(self):
        """Test the root cannot be replaced."""
        with pytest.raises(TransformError):
            traverse(Document(), lambda node, index, parent: replace_with(Document()))

    def test_replace_with_non_node_rejected(self):
        """Test replacements must be nodes."""
        with pytest.raises(TransformError):
            replace_with("<b>")  # type: ignore[arg-type]

    def test_unknown_result_rejected(self):
        """Test visitors must return a Rewrite or None."""
        with pytest.raises(TransformError):
            traverse(Document(), lambda node, index, parent: "keep")

    def test_visitor_exception_propagates(self):
        """Test visitor errors abort the walk unchanged."""
        tree = _sample_tree()
        seen = []

        def visitor(node, index, parent):
            seen.append(node.kind)
            if node.kind == "container_directive":
                raise KeyError("boom")
            return KEEP

        with pytest.raises(KeyError, match="boom"):
            traverse(tree, visitor)
        assert "leaf_directive" not in seen
