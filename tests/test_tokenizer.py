"""
Tokenizer tests

Tests directive span matching, the directive lexer and the encode pass.
"""

import pytest

from smartyfmt.config import AppSettings
from smartyfmt.lib.formatter import Formatter
from smartyfmt.lib.tokenizer import (
    DirectiveLexer,
    directiveSpan_match,
    directives_tokenize,
    region_contains,
    syntheticElement_make,
)
from smartyfmt.models import FormattingOptions, TokenKind


def context_make():
    return Formatter(settings=AppSettings()).context_create(FormattingOptions())


class TestDirectiveSpanMatch:
    """Test balanced directive detection"""

    def test_double_braces(self):
        """Brace runs are recorded on both sides"""
        span = directiveSpan_match("{{if $a}} rest", 0)
        assert span.start == 0
        assert span.end == 9
        assert span.open_braces == "{{"
        assert span.close_braces == "}}"
        assert span.inner == "if $a"
        assert span.name == "if"

    def test_closing_directive(self):
        """Closing directives are recognised"""
        span = directiveSpan_match("x{/foreach}", 1)
        assert span.closing
        assert span.name == "foreach"
        assert span.raw == "{/foreach}"

    def test_brace_inside_string(self):
        """Braces inside quotes do not close the directive"""
        source = '{$a|default:"}"}'
        span = directiveSpan_match(source, 0)
        assert span.end == len(source)
        assert span.inner == '$a|default:"}"'

    def test_nested_directive(self):
        """Nested braces are balanced"""
        source = '{include file="a" title="{$t}"}'
        span = directiveSpan_match(source, 0)
        assert span.raw == source

    def test_css_block_not_directive(self):
        """'{ color: red }' has no directive head"""
        assert directiveSpan_match("{ color: red }", 0) is None

    def test_unbalanced(self):
        """Missing close brace gives None"""
        assert directiveSpan_match("{$a <b>", 0) is None


class TestDirectiveLexer:
    """Test the finite-state lexer"""

    def test_text_and_directive(self):
        """Text around a directive becomes TEXT tokens"""
        tokens = list(DirectiveLexer("a{$b}c").tokens())
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.TEXT, "a"),
            (TokenKind.DIRECTIVE, "{$b}"),
            (TokenKind.TEXT, "c"),
        ]

    def test_literal_interior_untouched(self):
        """Directives inside a literal block are plain text"""
        tokens = list(DirectiveLexer("{literal}{$x}{/literal}").tokens())
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.LITERAL_OPEN, "{literal}"),
            (TokenKind.TEXT, "{$x}"),
            (TokenKind.LITERAL_CLOSE, "{/literal}"),
        ]

    def test_unclosed_literal_is_directive(self):
        """A literal opener without its closer is an ordinary directive"""
        tokens = list(DirectiveLexer("{literal} x").tokens())
        assert tokens[0].kind is TokenKind.DIRECTIVE

    def test_script_context(self):
        """Directives inside <script> carry the script flag"""
        tokens = list(DirectiveLexer("<script>{$a}</script>{$b}").tokens())
        directives = [t for t in tokens if t.kind is TokenKind.DIRECTIVE]
        assert [t.in_script for t in directives] == [True, False]

    def test_unbalanced_resumes(self):
        """An unbalanced brace run is text and later directives still match"""
        tokens = list(DirectiveLexer("{$a {$b}").tokens())
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.TEXT, "{$a "),
            (TokenKind.DIRECTIVE, "{$b}"),
        ]


class TestSyntheticElements:
    """Test synthetic element construction"""

    def test_block_start(self):
        """Block start carries encoded brace style and content"""
        element = syntheticElement_make("{if $a}", context_make())
        assert element == (
            '<smartyfmt-if data-smarty-open="%7B" data-smarty-close="%7D"'
            ' data-smarty-content="%20%24a">'
        )

    def test_block_end(self):
        """Block end is a bare closing element"""
        assert syntheticElement_make("{{/foreach}}", context_make()) == "</smartyfmt-foreach>"

    def test_non_block(self):
        """Variables and else-like directives get no element"""
        context = context_make()
        assert syntheticElement_make("{$a}", context) is None
        assert syntheticElement_make("{else}", context) is None
        assert syntheticElement_make("{literal}", context) is None


class TestDirectivesTokenize:
    """Test the encode pass"""

    def test_attribute_and_body_directives(self):
        """Directives in tags are placeholders, block directives in text are elements"""
        context = context_make()
        result = directives_tokenize('<p class="{$c}">{if $a}x{/if}</p>', context)
        assert result == (
            '<p class="___SMARTYFMT_TOKEN_0___">'
            '<smartyfmt-if data-smarty-open="%7B" data-smarty-close="%7D" data-smarty-content="%20%24a">'
            "x</smartyfmt-if></p>"
        )
        assert [t.rawText for t in context.tokens] == ['{$c}', "{if $a}", "{/if}"]
        assert [t.id for t in context.tokens] == [0, 1, 2]

    def test_block_directive_in_tag_is_placeholder(self):
        """Block directives inside a start tag stay opaque"""
        context = context_make()
        result = directives_tokenize('<div {if $a}class="x"{/if}>', context)
        assert result == "<div ___SMARTYFMT_TOKEN_0___class=\"x\"___SMARTYFMT_TOKEN_1___>"

    def test_script_directive_is_placeholder(self):
        """Directives in scripts are placeholders, JS braces are left alone"""
        context = context_make()
        result = directives_tokenize("<script>var o = { a: 1 }; var b = '{$b}';</script>", context)
        assert result == "<script>var o = { a: 1 }; var b = '___SMARTYFMT_TOKEN_0___';</script>"

    def test_literal_markers(self):
        """Literal boundaries become comments and are remembered"""
        context = context_make()
        result = directives_tokenize("{literal}<b>{$x}</b>{/literal}", context)
        assert result == (
            "<!-- ___SMARTYFMT_LITERAL_START___ --><b>{$x}</b><!-- ___SMARTYFMT_LITERAL_END___ -->"
        )
        assert context.literals == [("{literal}", "{/literal}")]
        assert context.tokens == []

    def test_literal_markers_in_style(self):
        """Literal markers inside <style> are CSS comments"""
        context = context_make()
        result = directives_tokenize("<style>{literal}a{}{/literal}</style>", context)
        assert result == (
            "<style>/* ___SMARTYFMT_LITERAL_START___ */a{}/* ___SMARTYFMT_LITERAL_END___ */</style>"
        )

    def test_double_brace_block(self):
        """Double-brace blocks record their brace style"""
        context = context_make()
        result = directives_tokenize("{{if $a}}x{{/if}}", context)
        assert 'data-smarty-open="%7B%7B"' in result
        assert 'data-smarty-close="%7D%7D"' in result
        assert result.endswith("x</smartyfmt-if>")

    def test_fresh_context_restarts_ids(self):
        """Token ids start at 0 for every context"""
        first = context_make()
        directives_tokenize("{$a}{$b}", first)
        second = context_make()
        assert directives_tokenize("{$c}", second) == "___SMARTYFMT_TOKEN_0___"
        assert len(first.tokens) == 2


class TestRegionContains:
    """Test offset lookup in tag regions"""

    def test_inside_and_outside(self):
        regions = [(0, 5), (10, 20)]
        assert region_contains(regions, 0)
        assert region_contains(regions, 15)
        assert not region_contains(regions, 5)
        assert not region_contains(regions, 25)
        assert not region_contains([], 1)
