#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_rule_properties.py
"""Property-based tests for the built-in rewrite rules."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from utils import container, document, paragraph, video

from mdweave.ast import clone_node
from mdweave.constants import DEFAULT_CALLOUT_CATEGORIES, VIDEO_TYPES
from mdweave.hast import HastConverter
from mdweave.renderers import HtmlRenderer
from mdweave.transforms import CalloutRule, Pipeline, VideoRule

words = st.text(alphabet=st.characters(whitelist_categories=("L", "N")), min_size=1, max_size=12)
directive_names = st.one_of(st.sampled_from(DEFAULT_CALLOUT_CATEGORIES), st.sampled_from(["custom", "video", "x"]))


@st.composite
def directive_blocks(draw):
    """Paragraphs, containers (callout or not) and video leaves, nested one level."""
    kind = draw(st.sampled_from(["paragraph", "container", "video"]))
    if kind == "paragraph":
        return paragraph(draw(words))
    if kind == "video":
        return video(
            src=draw(words),
            title=draw(words),
            type=draw(st.one_of(st.none(), st.sampled_from(VIDEO_TYPES), words)),
        )
    box = container(draw(directive_names), *draw(st.lists(words, max_size=2)))
    if draw(st.booleans()):
        box.children.append(video(src=draw(words), title=draw(words), type="youtube"))
    return box


documents = st.lists(directive_blocks(), max_size=6).map(lambda blocks: document(*blocks))


def render(doc):
    return HtmlRenderer().render_to_string(HastConverter().convert(doc))


@pytest.mark.integration
class TestRuleProperties:
    """Invariants that hold for any directive document."""

    @given(doc=documents)
    def test_callout_idempotent(self, doc):
        """Test applying the callout rule twice equals applying it once."""
        rule = CalloutRule()
        once = rule.apply(doc)
        snapshot = clone_node(once)
        assert rule.apply(once) == snapshot

    @given(doc=documents)
    def test_rule_order_irrelevant(self, doc):
        """Test disjoint rules give the same tree in either order."""
        other = clone_node(doc)
        first = Pipeline(rules=[CalloutRule(), VideoRule()]).apply_rules(doc)
        second = Pipeline(rules=[VideoRule(), CalloutRule()]).apply_rules(other)
        assert first == second

    @given(doc=documents)
    def test_no_video_directives_survive(self, doc):
        """Test every video leaf is replaced, at any depth."""
        VideoRule().apply(doc)
        html = render(doc)
        assert "::video" not in html
        assert all(
            not (getattr(node, "kind", None) == "leaf_directive" and node.name == "video")
            for block in doc.children
            for node in [block, *getattr(block, "children", [])]
        )

    @given(name=st.sampled_from(DEFAULT_CALLOUT_CATEGORIES), body=words)
    def test_callout_header_matches_title(self, name, body):
        """Test the header is the configured title of the category."""
        doc = CalloutRule().apply(document(container(name, body)))
        properties = doc.children[0].metadata["target_properties"]

        assert properties == {"header": name.capitalize(), "variant": name}
        assert render(doc).startswith(f'<doc-content-callout header="{name.capitalize()}" variant="{name}">')
