"""
Models package for smartyfmt

Contains data structures and type definitions for the formatting pipeline.
"""

from .state import ProgramState, pipeline
from .tags import TagCategory, TagTaxonomy
from .tokens import DirectiveSpan, DirectiveToken, LexToken, TokenKind
from .formatting import Beautifier, BeautifyConfig, FormatContext, FormattingOptions

__all__ = [
    "ProgramState",
    "pipeline",
    "TagCategory",
    "TagTaxonomy",
    "DirectiveSpan",
    "DirectiveToken",
    "LexToken",
    "TokenKind",
    "Beautifier",
    "BeautifyConfig",
    "FormatContext",
    "FormattingOptions",
]
