"""
smartyfmt - Directive-aware formatter for Smarty templates

Disguises Smarty directives as markup, runs a markup beautifier over the
result, then restores the directives and fixes indentation for directive
block nesting.
"""

__version__ = "1.0.0"

from .lib import Formatter, source_format, markup_beautify, LOG, state_connectToLogger
from .models import FormattingOptions, BeautifyConfig, TagTaxonomy

__all__ = [
    "Formatter",
    "source_format",
    "markup_beautify",
    "FormattingOptions",
    "BeautifyConfig",
    "TagTaxonomy",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
