"""
Formatter for Smarty templates

Ties the passes together:

    source
      -> directives_tokenize      (directives disguised as markup)
      -> beautifier               (markup_beautify or any injected callable)
      -> directives_detokenize    (directives restored)
      -> lines_split
      -> longTags_wrap            (long directives spread over lines)
      -> IndentReconciler         (directive nesting fixed up)
      -> lines_join

The Formatter object only holds immutable collaborators; everything a call
produces lives in the FormatContext created for that call.

Example:
    >>> Formatter().format("{if $a}\\n<b>x</b>\\n{/if}", FormattingOptions(tabSize=2))
    '{if $a}\\n  <b>x</b>\\n{/if}'
"""

from typing import Any, Optional

from ..config.settings import AppSettings, appsettings
from ..models.formatting import Beautifier, BeautifyConfig, FormatContext, FormattingOptions
from ..models.tags import TagTaxonomy
from .detokenizer import directives_detokenize
from .indenter import IndentReconciler
from .lines import lines_join, lines_split
from .log import LOG
from .markup import markup_beautify
from .tokenizer import directives_tokenize
from .wrapper import longTags_wrap


def beautifyConfig_build(options: FormattingOptions, settings: AppSettings) -> BeautifyConfig:
    """
    Derive the beautifier configuration of one call

    The beautifier's own line wrapping is always disabled; the settings'
    wrap_line_length is the width above which directives get wrapped.

    Args:
        options: Caller formatting preferences
        settings: Process-wide settings

    Returns:
        BeautifyConfig shared by the beautifier and the re-indent passes
    """
    return BeautifyConfig(
        indent_size=options.tabSize,
        indent_with_tabs=not options.insertSpaces,
        indent_inner_html=settings.indent_inner_html,
        max_preserve_newlines=settings.max_preserve_newlines,
        preserve_newlines=settings.preserve_newlines,
        wrap_line_length=0,
        wrap_attributes=settings.wrap_attributes,
        end_with_newline=settings.end_with_newline,
        js_end_with_newline=False,
        css_end_with_newline=False,
        attribute_wrap_width=settings.wrap_line_length,
    )


class Formatter:
    """
    Formats Smarty template text

    Attributes:
        settings: Process-wide settings (placeholder shapes, thresholds)
        taxonomy: Directive name categories, settings extensions included
        beautifier: Markup beautifier, (text, BeautifyConfig) -> text
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        taxonomy: Optional[TagTaxonomy] = None,
        beautifier: Optional[Beautifier] = None,
    ) -> None:
        self.settings = settings or appsettings
        self.taxonomy = taxonomy or TagTaxonomy.fromSettings(self.settings)
        self.beautifier = beautifier or markup_beautify

    def context_create(self, options: FormattingOptions) -> FormatContext:
        """Fresh scratch state for one format() call"""
        return FormatContext(
            config=beautifyConfig_build(options, self.settings),
            taxonomy=self.taxonomy,
            settings=self.settings,
        )

    def format(self, source: str, options: Optional[FormattingOptions] = None) -> str:
        """
        Format template source

        Never raises for malformed template text. If the beautifier itself
        fails, the failure is logged and the source comes back unchanged.

        Args:
            source: Template text
            options: Formatting preferences (defaults: 4 spaces)

        Returns:
            Formatted text
        """
        context = self.context_create(options or FormattingOptions())

        tokenized = directives_tokenize(source, context)
        try:
            beautified = self.beautifier(tokenized, context.config)
        except Exception as e:
            LOG(f"Beautifier failed, returning source unchanged: {e}", level=2)
            return source

        restored = directives_detokenize(beautified, context)
        lines = longTags_wrap(lines_split(restored), context)
        lines = IndentReconciler(context).reconcile(lines)
        return lines_join(lines)


def source_format(source: str, options: Optional[FormattingOptions] = None, **kwargs: Any) -> str:
    """
    Format template source with a one-off Formatter

    Args:
        source: Template text
        options: Formatting preferences
        **kwargs: Formatter arguments (settings, taxonomy, beautifier)

    Returns:
        Formatted text
    """
    return Formatter(**kwargs).format(source, options)
