"""
Tokenizer-specific data models

Type-safe structures produced by the directive lexer and stored in the
per-invocation token table.
"""

import re
from enum import Enum
from dataclasses import dataclass
from typing import Optional


class TokenKind(Enum):
    """Kinds of token the directive lexer emits"""
    TEXT = "text"
    DIRECTIVE = "directive"
    LITERAL_OPEN = "literal_open"
    LITERAL_CLOSE = "literal_close"


@dataclass
class LexToken:
    """
    One token of lexed template source

    Attributes:
        kind: What the token is
        text: Exact source text of the token
        in_script: True when the token starts inside a <script> or <style>
                   region (decides the comment style of literal markers)
        span: Matched directive span for DIRECTIVE and literal marker tokens
    """
    kind: TokenKind
    text: str
    in_script: bool = False
    span: Optional["DirectiveSpan"] = None


@dataclass
class DirectiveSpan:
    """
    A balanced directive found in source text

    Returned by directiveSpan_match() once the brace depth returns to zero.

    Attributes:
        start: Position of the first opening brace
        end: Position just past the last closing brace
        open_braces: The opening brace run (e.g. "{" or "{{")
        close_braces: The closing brace run (e.g. "}" or "}}")
        inner: Everything between the brace runs

    Example:
        For source '{{if $a}}' at position 0:
        DirectiveSpan(start=0, end=9, open_braces='{{', close_braces='}}', inner='if $a')
    """
    start: int
    end: int
    open_braces: str
    close_braces: str
    inner: str

    @property
    def raw(self) -> str:
        return f"{self.open_braces}{self.inner}{self.close_braces}"

    @property
    def closing(self) -> bool:
        """True for {/name} style directives"""
        return self.inner.lstrip().startswith("/")

    @property
    def name(self) -> Optional[str]:
        """Directive name without the leading slash, None for {$var} and friends"""
        match = re.match(r"^\s*/?(\w+)", self.inner)
        return match.group(1) if match else None


@dataclass
class DirectiveToken:
    """
    Entry of the per-invocation token table

    Every opaque placeholder and synthetic element emitted by the tokenizer
    owns exactly one entry; ids are allocated from 0 in emission order.

    Attributes:
        id: Ordinal of the token within one format() call
        rawText: Exact original directive source
    """
    id: int
    rawText: str
