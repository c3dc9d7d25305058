#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_directive_syntax.py
"""Unit tests for directive label and attribute scanning."""

import pytest

from mdweave.parsers.directives import parse_attributes, split_directive_suffix


@pytest.mark.unit
class TestParseAttributes:
    """Tests for parse_attributes."""

    def test_quoted_values(self):
        """Test double- and single-quoted values."""
        assert parse_attributes("src=\"https://x/y\" title='Demo'") == {"src": "https://x/y", "title": "Demo"}

    def test_bare_value_and_bare_key(self):
        """Test unquoted values and keys without a value."""
        assert parse_attributes("type=youtube hidden") == {"type": "youtube", "hidden": ""}

    def test_id_and_classes(self):
        """Test #id and .class shorthands, classes space-joined."""
        assert parse_attributes("#intro .note .wide class=extra") == {"id": "intro", "class": "note wide extra"}

    def test_chained_shorthands(self):
        """Test shorthands may follow each other without spaces."""
        assert parse_attributes("#a.b.c") == {"id": "a", "class": "b c"}

    def test_last_value_wins(self):
        """Test repeated keys keep the last value."""
        assert parse_attributes("type=local type=youtube") == {"type": "youtube"}

    def test_quoted_value_with_spaces_and_braces(self):
        """Test quoted values keep their spaces."""
        assert parse_attributes('title="A long title"') == {"title": "A long title"}

    def test_empty(self):
        """Test an empty list yields no attributes."""
        assert parse_attributes("") == {}
        assert parse_attributes("   ") == {}

    @pytest.mark.parametrize("text", ['src="unterminated', "=value", 'a="x"b="y"'])
    def test_malformed(self, text):
        """Test malformed attribute lists raise ValueError."""
        with pytest.raises(ValueError):
            parse_attributes(text)


@pytest.mark.unit
class TestSplitDirectiveSuffix:
    """Tests for split_directive_suffix."""

    def test_label_and_attributes(self):
        """Test both parts are split off and the end index returned."""
        label, attributes, end = split_directive_suffix("[Read me]{.box} rest")
        assert label == "Read me"
        assert attributes == {"class": "box"}
        assert end == len("[Read me]{.box}")

    def test_nested_brackets_in_label(self):
        """Test balanced brackets inside the label."""
        label, _attributes, _end = split_directive_suffix("[see [1]]")
        assert label == "see [1]"

    def test_nothing_to_split(self):
        """Test text without label or attributes consumes nothing."""
        assert split_directive_suffix(" plain") == (None, {}, 0)

    @pytest.mark.parametrize("text", ["[unclosed", "{unclosed", '{src="x" =}'])
    def test_malformed_returns_none(self, text):
        """Test malformed suffixes are reported as None."""
        assert split_directive_suffix(text) is None
