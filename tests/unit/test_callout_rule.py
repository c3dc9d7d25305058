#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_callout_rule.py
"""Unit tests for the callout rewrite rule."""

import pytest
from utils import container, document, paragraph

from mdweave.ast import LeafDirective, Text
from mdweave.exceptions import ConfigurationError, InvalidOptionsError
from mdweave.options import CalloutOptions, VideoOptions
from mdweave.parsers import markdown_to_ast
from mdweave.transforms import CalloutRule


@pytest.mark.unit
class TestCalloutRule:
    """Tests for CalloutRule."""

    def test_warning_scenario(self):
        """Test a parsed warning container gets the callout target."""
        doc = markdown_to_ast(":::warning\nBe careful.\n:::")
        CalloutRule().apply(doc)
        node = doc.children[0]

        assert node.metadata["target_element"] == "doc-content-callout"
        assert node.metadata["target_properties"] == {"header": "Warning", "variant": "warning"}
        assert len(node.children) == 1
        assert node.children[0].children == [Text(content="Be careful.")]

    @pytest.mark.parametrize(
        "name,header",
        [("note", "Note"), ("tip", "Tip"), ("warning", "Warning"), ("important", "Important"), ("caution", "Caution")],
    )
    def test_default_categories(self, name, header):
        """Test every default category maps to its header."""
        doc = document(container(name, "x"))
        CalloutRule().apply(doc)
        assert doc.children[0].metadata["target_properties"] == {"header": header, "variant": name}

    def test_other_containers_untouched(self):
        """Test containers outside the category set keep empty metadata."""
        doc = document(container("custom", "x"), container("NOTE", "y"))
        CalloutRule().apply(doc)
        assert doc.children[0].metadata == {}
        assert doc.children[1].metadata == {}

    def test_leaf_with_category_name_untouched(self):
        """Test only container directives are selected."""
        doc = document(LeafDirective(name="note"))
        CalloutRule().apply(doc)
        assert doc.children[0].metadata == {}

    def test_nested_callouts(self):
        """Test callouts inside callouts are both marked."""
        inner = container("tip", "inner")
        outer = container("note")
        outer.children.append(inner)
        doc = document(outer)

        CalloutRule().apply(doc)

        assert outer.metadata["target_properties"]["variant"] == "note"
        assert inner.metadata["target_properties"]["variant"] == "tip"

    def test_existing_metadata_kept(self):
        """Test unrelated metadata keys survive annotation."""
        node = container("note", "x")
        node.metadata["source_line"] = 3
        CalloutRule().apply(document(node))
        assert node.metadata["source_line"] == 3

    def test_properties_not_shared_between_nodes(self):
        """Test each node gets its own properties dict."""
        first, second = container("note"), container("note")
        CalloutRule().apply(document(first, second))

        first.metadata["target_properties"]["header"] = "Changed"
        assert second.metadata["target_properties"]["header"] == "Note"

    def test_idempotent(self):
        """Test a second application changes nothing."""
        doc = document(container("warning", "a"), paragraph("b"))
        rule = CalloutRule()
        rule.apply(doc)
        once = repr(doc)
        rule.apply(doc)
        assert repr(doc) == once

    def test_custom_categories_and_tag(self):
        """Test configured categories, titles and element name."""
        options = CalloutOptions(categories=("danger",), titles={"danger": "Danger!"}, tag_name="x-callout")
        doc = document(container("danger"), container("note"))
        CalloutRule(options).apply(doc)

        assert doc.children[0].metadata == {
            "target_element": "x-callout",
            "target_properties": {"header": "Danger!", "variant": "danger"},
        }
        assert doc.children[1].metadata == {}

    def test_selection_set(self):
        """Test the selection set lists one container selector per category."""
        rule = CalloutRule(CalloutOptions(categories=("a", "b"), titles={"a": "A", "b": "B"}))
        assert rule.selection_set() == frozenset({("container_directive", "a"), ("container_directive", "b")})


@pytest.mark.unit
class TestCalloutOptions:
    """Tests for CalloutOptions validation."""

    def test_category_without_title(self):
        """Test a category with no title fails at setup."""
        with pytest.raises(ConfigurationError, match="danger"):
            CalloutOptions(categories=("note", "danger"), titles={"note": "Note"})

    def test_empty_tag_name(self):
        """Test the element name must not be empty."""
        with pytest.raises(ConfigurationError):
            CalloutOptions(tag_name="")

    def test_list_categories_converted(self):
        """Test list input is stored as a tuple."""
        options = CalloutOptions(categories=["note"], titles={"note": "N"})  # type: ignore[arg-type]
        assert options.categories == ("note",)

    def test_create_updated(self):
        """Test derived options are validated too."""
        options = CalloutOptions()
        with pytest.raises(ConfigurationError):
            options.create_updated(categories=("note", "extra"))

    def test_wrong_options_type(self):
        """Test the rule rejects options for another rule."""
        with pytest.raises(InvalidOptionsError):
            CalloutRule(VideoOptions())  # type: ignore[arg-type]
