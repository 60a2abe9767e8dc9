"""
Formatting data models

Caller-supplied options, the derived beautifier configuration and the
per-invocation context threaded through every formatting step.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Tuple, TYPE_CHECKING

from .tags import TagTaxonomy
from .tokens import DirectiveToken

if TYPE_CHECKING:
    from ..config.settings import AppSettings


@dataclass(frozen=True)
class FormattingOptions:
    """
    Editor-style formatting preferences

    Attributes:
        tabSize: Width of one indent unit (number of spaces)
        insertSpaces: Indent with spaces (True) or tabs (False)

    Raises:
        ValueError: If tabSize is not a positive integer
    """
    tabSize: int = 4
    insertSpaces: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.tabSize, bool) or not isinstance(self.tabSize, int) or self.tabSize < 1:
            raise ValueError(f"tabSize must be a positive integer, got {self.tabSize!r}")


@dataclass(frozen=True)
class BeautifyConfig:
    """
    Read-only configuration shared by the beautifier and the re-indent passes

    Built once per format() call from FormattingOptions and AppSettings.
    Both the external beautifier and the wrap/indent passes derive their
    indent unit from the same record so they always agree.

    Attributes:
        indent_size: Spaces per indent unit (ignored with tabs)
        indent_with_tabs: Indent with one tab per unit
        indent_inner_html: Indent <head>/<body> inside <html>
        max_preserve_newlines: Longest run of line breaks kept (0 = unlimited)
        preserve_newlines: Keep blank lines at all
        wrap_line_length: Generic line wrapping of the beautifier; always 0
                          (disabled), directive wrapping is done afterwards
        wrap_attributes: Attribute wrapping policy for an injected beautifier;
                         markup_beautify keeps attribute layout as written
        end_with_newline: Markup output ends with a newline
        js_end_with_newline: Script bodies end with a newline
        css_end_with_newline: Style bodies end with a newline (injected
                              beautifiers only; markup_beautify re-bases
                              style bodies without reformatting them)
        attribute_wrap_width: Width above which directives are wrapped
    """
    indent_size: int = 4
    indent_with_tabs: bool = False
    indent_inner_html: bool = False
    max_preserve_newlines: int = 2
    preserve_newlines: bool = True
    wrap_line_length: int = 0
    wrap_attributes: str = "auto"
    end_with_newline: bool = False
    js_end_with_newline: bool = False
    css_end_with_newline: bool = False
    attribute_wrap_width: int = 80

    @property
    def indent_unit(self) -> str:
        """One level of indentation: a tab, or indent_size spaces"""
        return "\t" if self.indent_with_tabs else " " * self.indent_size


Beautifier = Callable[[str, BeautifyConfig], str]


@dataclass
class FormatContext:
    """
    Scratch state of a single format() call

    Created fresh at the start of every call and passed explicitly to each
    step, so concurrent or re-entrant calls never share a token table.

    Attributes:
        config: Derived beautifier configuration
        taxonomy: Directive name categories in effect
        settings: Process-wide settings (placeholder shapes, markers)
        tokens: Token table, indexed by DirectiveToken.id
        literals: Original (opening, closing) literal directives, in order
        tokens_resolved: Placeholders and synthetic elements restored so far
    """
    config: BeautifyConfig
    taxonomy: TagTaxonomy
    settings: "AppSettings"
    tokens: List[DirectiveToken] = field(default_factory=list)
    literals: List[Tuple[str, str]] = field(default_factory=list)
    tokens_resolved: int = 0

    def token_register(self, raw_text: str) -> DirectiveToken:
        """Append a directive to the token table and return its entry"""
        token = DirectiveToken(id=len(self.tokens), rawText=raw_text)
        self.tokens.append(token)
        return token

    def token_get(self, index: int) -> DirectiveToken | None:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None
