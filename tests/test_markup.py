"""
Default markup beautifier tests

Tests element nesting, multi-line tags, raw text elements, comments and
blank line handling.
"""

import pytest

from smartyfmt.lib.markup import markup_beautify
from smartyfmt.models import BeautifyConfig


class TestNesting:
    """Test indentation from element nesting"""

    def test_nested_list(self):
        """Children go one unit deeper"""
        assert markup_beautify("<ul>\n<li>one</li>\n</ul>", BeautifyConfig(indent_size=2)) == (
            "<ul>\n  <li>one</li>\n</ul>"
        )

    def test_void_elements(self):
        """Void elements do not nest"""
        source = '<div>\n<br>\n<img src="a">\n<p>x</p>\n</div>'
        assert markup_beautify(source, BeautifyConfig()) == (
            '<div>\n    <br>\n    <img src="a">\n    <p>x</p>\n</div>'
        )

    def test_self_closing(self):
        """Self-closing tags do not nest"""
        source = "<div>\n<x-icon />\n<p>a</p>\n</div>"
        assert markup_beautify(source, BeautifyConfig()) == "<div>\n    <x-icon />\n    <p>a</p>\n</div>"

    def test_existing_indent_replaced(self):
        """Source indentation is discarded"""
        source = "<div>\n          <p>x</p>\n  </div>"
        assert markup_beautify(source, BeautifyConfig()) == "<div>\n    <p>x</p>\n</div>"

    def test_tabs(self):
        """Tab indentation"""
        source = "<div>\n<p>x</p>\n</div>"
        assert markup_beautify(source, BeautifyConfig(indent_with_tabs=True)) == "<div>\n\t<p>x</p>\n</div>"

    def test_html_children_not_indented(self):
        """<head>/<body> stay at the <html> level by default"""
        source = "<html>\n<body>\n<p>x</p>\n</body>\n</html>"
        assert markup_beautify(source, BeautifyConfig()) == (
            "<html>\n<body>\n    <p>x</p>\n</body>\n</html>"
        )

    def test_indent_inner_html(self):
        """indent_inner_html nests <html> children"""
        source = "<html>\n<body>\n<p>x</p>\n</body>\n</html>"
        assert markup_beautify(source, BeautifyConfig(indent_inner_html=True)) == (
            "<html>\n    <body>\n        <p>x</p>\n    </body>\n</html>"
        )

    def test_synthetic_element(self):
        """Custom elements nest like any other element"""
        source = '<smartyfmt-if data-smarty-content="%20%24a">\nx\n</smartyfmt-if>'
        assert markup_beautify(source, BeautifyConfig()) == (
            '<smartyfmt-if data-smarty-content="%20%24a">\n    x\n</smartyfmt-if>'
        )

    def test_unclosed_element_tolerated(self):
        """A missing end tag does not raise"""
        assert markup_beautify("<div>\n<p>x\n</div>", BeautifyConfig()) == "<div>\n    <p>x\n</div>"


class TestMultilineTags:
    """Test start tags spread over several lines"""

    def test_attribute_lines(self):
        """Attribute lines go one unit deeper, a bare '>' aligns with the tag"""
        source = '<div\nclass="a"\nid="b"\n>\n<p>x</p>\n</div>'
        assert markup_beautify(source, BeautifyConfig()) == (
            '<div\n    class="a"\n    id="b"\n>\n    <p>x</p>\n</div>'
        )

    def test_wrap_attributes_not_applied(self):
        """Attribute layout is left as written whatever the wrap policy"""
        source = '<div class="a" id="b">\n<p>x</p>\n</div>'
        assert markup_beautify(source, BeautifyConfig(wrap_attributes="force")) == (
            '<div class="a" id="b">\n    <p>x</p>\n</div>'
        )


class TestRawText:
    """Test script, style, pre and comments"""

    def test_inline_script_untouched(self):
        """Single-line script bodies stay inline"""
        assert markup_beautify("<script>var a=1;</script>", BeautifyConfig()) == "<script>var a=1;</script>"

    def test_script_body_beautified(self):
        """Script bodies are formatted as JavaScript one level deeper"""
        source = "<script>\nvar a=1;\nvar b=2;\n</script>"
        assert markup_beautify(source, BeautifyConfig()) == (
            "<script>\n    var a = 1;\n    var b = 2;\n</script>"
        )

    def test_empty_script_collapsed(self):
        """A blank script body collapses"""
        assert markup_beautify('<script src="a.js">\n</script>', BeautifyConfig()) == (
            '<script src="a.js"></script>'
        )

    def test_style_rebased(self):
        """Style bodies keep their relative indentation"""
        source = "<div>\n<style>\n      .a { color: red; }\n        .b { x: y; }\n</style>\n</div>"
        assert markup_beautify(source, BeautifyConfig()) == (
            "<div>\n    <style>\n        .a { color: red; }\n          .b { x: y; }\n    </style>\n</div>"
        )

    def test_style_end_newline_not_applied(self):
        """Style bodies are only re-based, css_end_with_newline adds nothing"""
        source = "<style>\n.a { color: red; }\n</style>"
        assert markup_beautify(source, BeautifyConfig(css_end_with_newline=True)) == (
            "<style>\n    .a { color: red; }\n</style>"
        )

    def test_pre_verbatim(self):
        """Preformatted bodies are not touched"""
        source = "<div>\n<pre>\n  a\n    b\n</pre>\n</div>"
        assert markup_beautify(source, BeautifyConfig()) == "<div>\n    <pre>\n  a\n    b\n</pre>\n</div>"

    def test_multiline_comment(self):
        """Comment lines are re-based at the comment's level"""
        source = "<div>\n<!--\n  note\n-->\n</div>"
        assert markup_beautify(source, BeautifyConfig()) == "<div>\n    <!--\n      note\n    -->\n</div>"

    def test_tag_inside_comment_ignored(self):
        """Markup inside comments does not nest"""
        source = "<!-- <div> -->\n<p>x</p>"
        assert markup_beautify(source, BeautifyConfig()) == source


class TestBlankLines:
    """Test blank line handling"""

    def test_runs_limited(self):
        """max_preserve_newlines=2 keeps one blank line"""
        source = "<p>a</p>\n\n\n\n<p>b</p>"
        assert markup_beautify(source, BeautifyConfig()) == "<p>a</p>\n\n<p>b</p>"

    def test_unlimited(self):
        """max_preserve_newlines=0 keeps every blank line"""
        source = "<p>a</p>\n\n\n\n<p>b</p>"
        assert markup_beautify(source, BeautifyConfig(max_preserve_newlines=0)) == source

    def test_not_preserved(self):
        """preserve_newlines=False drops blank lines"""
        source = "<p>a</p>\n\n<p>b</p>"
        assert markup_beautify(source, BeautifyConfig(preserve_newlines=False)) == "<p>a</p>\n<p>b</p>"

    def test_leading_and_trailing_blank_lines(self):
        """Blank lines at the edges are dropped"""
        assert markup_beautify("\n\n<p>x</p>\n\n", BeautifyConfig()) == "<p>x</p>"

    def test_end_with_newline(self):
        """end_with_newline appends one newline"""
        assert markup_beautify("<p>x</p>", BeautifyConfig(end_with_newline=True)) == "<p>x</p>\n"

    def test_whitespace_only(self):
        """Whitespace-only input gives empty output"""
        assert markup_beautify("  \n\t\n", BeautifyConfig()) == ""
