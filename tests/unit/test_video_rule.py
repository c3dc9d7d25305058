#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_video_rule.py
"""Unit tests for the video rewrite rule."""

import logging

import pytest
from utils import container, document, paragraph, video

from mdweave.ast import ContainerDirective, LeafDirective, RawOutput
from mdweave.exceptions import TransformError
from mdweave.options import VideoOptions
from mdweave.parsers import markdown_to_ast
from mdweave.transforms import VideoAttributes, VideoRule

YOUTUBE_FRAGMENT = (
    '<div class="video-plugin-div"><div class="video-plugin-title">Demo</div>'
    '<iframe src="https://x/y"></iframe></div>'
)


@pytest.mark.unit
class TestVideoAttributes:
    """Tests for the typed view of directive attributes."""

    def test_known_keys(self):
        """Test src, title and type are read."""
        attrs = VideoAttributes.from_attributes({"src": "a", "title": "b", "type": "local", "extra": "x"})
        assert attrs == VideoAttributes(src="a", title="b", type="local")

    def test_missing_keys_are_empty(self):
        """Test absent keys fall back to empty strings."""
        assert VideoAttributes.from_attributes({}) == VideoAttributes("", "", "")


@pytest.mark.unit
class TestVideoRule:
    """Tests for VideoRule."""

    def test_youtube_scenario(self):
        """Test a parsed youtube leaf becomes the iframe fragment."""
        doc = markdown_to_ast('::video{src="https://x/y" title="Demo" type="youtube"}')
        VideoRule().apply(doc)

        assert doc.children == [RawOutput(raw_content=YOUTUBE_FRAGMENT)]

    def test_local_video(self):
        """Test local videos use a video element with an mp4 source."""
        doc = document(video(src="/media/intro.mp4", title="Intro", type="local"))
        VideoRule().apply(doc)

        assert doc.children[0].raw_content == (
            '<div class="video-plugin-div"><div class="video-plugin-title">Intro</div>'
            '<video controls><source src="/media/intro.mp4" type="video/mp4"></video></div>'
        )

    @pytest.mark.parametrize("video_type", ["vimeo", "", None, "YouTube"])
    def test_unknown_type_gives_empty_fragment(self, video_type, caplog):
        """Test unknown or missing types render nothing and log a warning."""
        doc = document(video(src="s", title="t", type=video_type))
        with caplog.at_level(logging.WARNING):
            VideoRule().apply(doc)

        assert doc.children == [RawOutput(raw_content="")]
        assert "Unknown video type" in caplog.text

    def test_strict_mode_raises(self):
        """Test strict mode refuses unknown types."""
        doc = document(video(src="s", title="t", type="vimeo"))
        with pytest.raises(TransformError, match="vimeo"):
            VideoRule(VideoOptions(strict=True)).apply(doc)

    def test_attribute_values_escaped(self):
        """Test src and title cannot break out of the markup."""
        doc = document(video(src='x" onload="alert(1)', title="<b>T</b>", type="youtube"))
        VideoRule().apply(doc)
        fragment = doc.children[0].raw_content

        assert 'src="x&quot; onload=&quot;alert(1)"' in fragment
        assert "&lt;b&gt;T&lt;/b&gt;" in fragment
        assert "<b>" not in fragment

    def test_replacement_keeps_position(self):
        """Test the fragment replaces the directive at the same index."""
        box = container("note", "before")
        box.children.append(video(src="v", title="t", type="youtube"))
        box.children.append(paragraph("after"))
        VideoRule().apply(document(box))

        assert len(box.children) == 3
        assert isinstance(box.children[1], RawOutput)
        assert box.children[2].children[0].content == "after"

    def test_other_leaf_directives_untouched(self):
        """Test leaf directives with another name are kept."""
        doc = document(LeafDirective(name="audio", attributes={"type": "youtube"}))
        VideoRule().apply(doc)
        assert isinstance(doc.children[0], LeafDirective)

    def test_video_container_untouched(self):
        """Test a container named video is not selected."""
        doc = document(ContainerDirective(name="video"))
        VideoRule().apply(doc)
        assert isinstance(doc.children[0], ContainerDirective)

    def test_custom_classes(self):
        """Test configured class names and MIME type."""
        options = VideoOptions(wrapper_class="player", title_class="caption", local_mime_type="video/webm")
        doc = document(video(src="a.webm", title="T", type="local"))
        VideoRule(options).apply(doc)
        fragment = doc.children[0].raw_content

        assert fragment.startswith('<div class="player"><div class="caption">T</div>')
        assert 'type="video/webm"' in fragment

    def test_second_application_is_noop(self):
        """Test applying again finds no video directives."""
        doc = document(video(src="v", title="t", type="youtube"))
        rule = VideoRule()
        rule.apply(doc)
        first = repr(doc)
        rule.apply(doc)
        assert repr(doc) == first
