"""
smartyfmt - Directive-aware formatter for Smarty templates

Formats templates that mix HTML, CSS, JavaScript and Smarty directives.
"""

__version__ = "1.0.0"

from .formatter import Formatter, beautifyConfig_build, source_format
from .markup import markup_beautify
from .log import LOG, state_connectToLogger, template_connectToLogger

__all__ = [
    "Formatter",
    "beautifyConfig_build",
    "source_format",
    "markup_beautify",
    "LOG",
    "state_connectToLogger",
    "template_connectToLogger",
    "__version__",
]
