"""
Detokenizer tests

Tests literal restoration, placeholder restoration and synthetic element
restoration.
"""

import pytest

from smartyfmt.config import AppSettings
from smartyfmt.lib.detokenizer import (
    directive_flatten,
    directives_detokenize,
    literalBlocks_restore,
    placeholders_compact,
    placeholders_restore,
    syntheticElements_restore,
)
from smartyfmt.lib.formatter import Formatter
from smartyfmt.lib.tokenizer import directives_tokenize
from smartyfmt.models import FormattingOptions


def context_make(tabSize: int = 4):
    return Formatter(settings=AppSettings()).context_create(FormattingOptions(tabSize=tabSize))


class TestDecodeAfterEncode:
    """Test that decoding undoes encoding when nothing changed in between"""

    @pytest.mark.parametrize(
        "source",
        [
            '<p class="{$c}">{if $a}x{/if}</p>',
            "{{if $a}}{if $b}x{/if}{{/if}}",
            "<script>var a = '{$a}';</script>",
            "{foreach $items as $i}{$i}{foreachelse}none{/foreach}",
        ],
    )
    def test_source_restored(self, source):
        """Directive text comes back exactly"""
        context = context_make()
        assert directives_detokenize(directives_tokenize(source, context), context) == source

    def test_every_token_resolved(self):
        """Each placeholder and element is counted once"""
        context = context_make()
        directives_detokenize(directives_tokenize("{{if $a}}{if $b}x{/if}{{/if}}", context), context)
        assert context.tokens_resolved == len(context.tokens) == 4


class TestLiteralRestore:
    """Test literal block restoration"""

    def test_interior_lines_indented(self):
        """Lines inside a literal block get one extra unit"""
        context = context_make()
        encoded = directives_tokenize("{literal}\n<b>x</b>\n{/literal}", context)
        assert literalBlocks_restore(encoded, context) == "{literal}\n    <b>x</b>\n{/literal}"

    def test_same_line_segment_untouched(self):
        """Content on the opening line is not indented"""
        context = context_make(tabSize=2)
        encoded = directives_tokenize("{literal}a\nb{/literal}", context)
        assert literalBlocks_restore(encoded, context) == "{literal}a\n  b{/literal}"

    def test_empty_literal(self):
        """Empty literal block is restored as a pair"""
        context = context_make()
        encoded = directives_tokenize("{literal}{/literal}", context)
        assert literalBlocks_restore(encoded, context) == "{literal}{/literal}"

    def test_brace_style_kept(self):
        """Double-brace literal directives come back double"""
        context = context_make()
        encoded = directives_tokenize("{{literal}}x{{/literal}}", context)
        assert literalBlocks_restore(encoded, context) == "{{literal}}x{{/literal}}"


class TestPlaceholders:
    """Test placeholder compaction and restoration"""

    def test_compact(self):
        """Line breaks inside a placeholder are removed"""
        context = context_make()
        assert placeholders_compact("a ___SMARTYFMT_TOKEN_\n   12___ b", context) == "a ___SMARTYFMT_TOKEN_12___ b"

    def test_flatten(self):
        """Multi-line directive collapses to one line"""
        assert directive_flatten("{include\n    file='a'\n    x=1\n}") == "{include file='a' x=1}"

    def test_wrapped_directive_flattened(self):
        """Wrap directives spread over lines are restored flat"""
        context = context_make()
        context.token_register("{include\n  file='a'\n}")
        assert placeholders_restore("___SMARTYFMT_TOKEN_0___", context) == "{include file='a'}"

    def test_other_multiline_directive_verbatim(self):
        """Non-wrap directives keep their line breaks"""
        context = context_make()
        context.token_register("{$a|\nupper}")
        assert placeholders_restore("___SMARTYFMT_TOKEN_0___", context) == "{$a|\nupper}"

    def test_unknown_placeholder_left(self):
        """Placeholders without a token stay as they are"""
        context = context_make()
        assert placeholders_restore("___SMARTYFMT_TOKEN_5___", context) == "___SMARTYFMT_TOKEN_5___"
        assert context.tokens_resolved == 0


class TestSyntheticRestore:
    """Test synthetic element restoration"""

    def test_unmatched_close_defaults_to_single_braces(self):
        """A closing element with no opener becomes {/name}"""
        context = context_make()
        assert syntheticElements_restore("</smartyfmt-if>", context) == "{/if}"

    def test_beautifier_spacing_tolerated(self):
        """Whitespace the beautifier adds inside the tag is accepted"""
        context = context_make()
        text = '<smartyfmt-while data-smarty-open="%7B" data-smarty-close="%7D" data-smarty-content="%20%24i%20%3C%203" >x</ smartyfmt-while>'
        assert syntheticElements_restore(text, context) == "{while $i < 3}x{/while}"


class TestTokenBalance:
    """Every stand-in emitted is resolved after the default beautifier ran"""

    def test_balance_through_beautifier(self):
        from smartyfmt.lib.markup import markup_beautify

        source = (
            '<ul class="{$cls}">\n{foreach $items as $i}\n<li>{$i|escape}</li>\n'
            "{foreachelse}\n<li>none</li>\n{/foreach}\n</ul>\n"
            "<script>\nvar n = {$count};\n</script>"
        )
        context = context_make()
        beautified = markup_beautify(directives_tokenize(source, context), context.config)
        restored = directives_detokenize(beautified, context)
        assert context.tokens_resolved == len(context.tokens) == 6
        assert "___SMARTYFMT" not in restored
        assert "{$count}" in restored
