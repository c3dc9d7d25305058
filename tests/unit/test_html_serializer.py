#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_html_serializer.py
"""Unit tests for HtmlRenderer."""

from io import BytesIO, StringIO

import pytest

from mdweave.exceptions import InvalidOptionsError, RenderingError
from mdweave.hast import Element, Raw, Root, Text
from mdweave.options import HastConverterOptions, HtmlRendererOptions
from mdweave.renderers import HtmlRenderer


def html(*children, **options):
    return HtmlRenderer(HtmlRendererOptions(**options)).render_to_string(Root(list(children)))


@pytest.mark.unit
class TestHtmlRendererBasic:
    """Tests for basic serialization."""

    def test_text_escaped(self):
        """Test text content is escaped but quotes are left alone."""
        assert html(Element("p", children=[Text('a < b & "c"')])) == '<p>a &lt; b &amp; "c"</p>'

    def test_raw_verbatim(self):
        """Test raw fragments are not escaped."""
        assert html(Raw("<iframe src='x'></iframe>")) == "<iframe src='x'></iframe>"

    def test_custom_element(self):
        """Test custom element names with dashes are kept."""
        element = Element("doc-content-callout", {"header": "Note", "variant": "note"})
        assert html(element) == '<doc-content-callout header="Note" variant="note"></doc-content-callout>'

    def test_nested_elements(self):
        """Test children are written inside their parent."""
        tree = Element("ul", children=[Text("\n"), Element("li", children=[Text("a")]), Text("\n")])
        assert html(tree) == "<ul>\n<li>a</li>\n</ul>"

    def test_empty_root(self):
        """Test an empty tree renders as an empty string."""
        assert html() == ""


@pytest.mark.unit
class TestHtmlRendererAttributes:
    """Tests for attribute serialization."""

    def test_values_escaped(self):
        """Test attribute values cannot close the quote."""
        assert html(Element("a", {"title": 'say "hi" <now>'})) == '<a title="say &quot;hi&quot; &lt;now&gt;"></a>'

    def test_boolean_and_none(self):
        """Test True writes a bare attribute, False and None omit it."""
        element = Element("video", {"controls": True, "muted": False, "poster": None})
        assert html(element) == "<video controls></video>"

    def test_list_joined(self):
        """Test list values are space-joined."""
        assert html(Element("div", {"class": ["a", "b"]})) == '<div class="a b"></div>'

    def test_number(self):
        """Test numbers are written as strings."""
        assert html(Element("ol", {"start": 3})) == '<ol start="3"></ol>'

    @pytest.mark.parametrize("name", ["", "on click", 'x"y', "a>b", "a=b"])
    def test_invalid_attribute_name(self, name):
        """Test attribute names that would break the tag are refused."""
        with pytest.raises(RenderingError):
            html(Element("p", {name: "v"}))

    @pytest.mark.parametrize("name", ["", "p x", "<p", "p/"])
    def test_invalid_tag_name(self, name):
        """Test tag names that would break the markup are refused."""
        with pytest.raises(RenderingError):
            html(Element(name))


@pytest.mark.unit
class TestHtmlRendererVoidElements:
    """Tests for void element handling."""

    def test_no_closing_tag(self):
        """Test void elements are written without a closing tag."""
        assert html(Element("img", {"src": "a.png", "alt": ""})) == '<img src="a.png" alt="">'
        assert html(Element("br")) == "<br>"

    def test_close_void_elements(self):
        """Test XHTML-style void elements."""
        assert html(Element("hr"), close_void_elements=True) == "<hr />"

    def test_void_children_dropped(self, caplog):
        """Test children of void elements are dropped with a warning."""
        assert html(Element("br", children=[Text("x")])) == "<br>"
        assert "void element" in caplog.text


@pytest.mark.unit
class TestHtmlRendererOptions:
    """Tests for renderer options."""

    def test_trailing_newline(self):
        """Test a newline is appended once."""
        assert html(Element("p"), trailing_newline=True) == "<p></p>\n"
        assert html(Text("x\n"), trailing_newline=True) == "x\n"

    def test_wrong_options_type(self):
        """Test converter options are rejected."""
        with pytest.raises(InvalidOptionsError):
            HtmlRenderer(HastConverterOptions())  # type: ignore[arg-type]

    def test_unknown_node_type(self):
        """Test foreign nodes are refused."""
        with pytest.raises(RenderingError):
            HtmlRenderer().render_to_string(Root([object()]))  # type: ignore[list-item]


@pytest.mark.unit
class TestWriteOutput:
    """Tests for writing rendered output."""

    def test_render_to_path(self, tmp_path):
        """Test writing to a file path as UTF-8."""
        target = tmp_path / "out.html"
        HtmlRenderer().render(Root([Element("p", children=[Text("café")])]), target)
        assert target.read_text(encoding="utf-8") == "<p>café</p>"

    def test_render_to_str_path(self, tmp_path):
        """Test string paths are accepted."""
        target = tmp_path / "out.html"
        HtmlRenderer().render(Root([Text("x")]), str(target))
        assert target.read_text(encoding="utf-8") == "x"

    def test_binary_stream(self):
        """Test binary streams receive UTF-8 bytes."""
        buffer = BytesIO()
        HtmlRenderer.write_text_output("é", buffer)
        assert buffer.getvalue() == "é".encode("utf-8")

    def test_text_stream(self):
        """Test text streams receive the string."""
        buffer = StringIO()
        HtmlRenderer.write_text_output("<p>x</p>", buffer)
        assert buffer.getvalue() == "<p>x</p>"

    def test_not_writable(self):
        """Test unsupported outputs are a TypeError."""
        with pytest.raises(TypeError):
            HtmlRenderer.write_text_output("x", 42)  # type: ignore[arg-type]
