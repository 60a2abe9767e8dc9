"""
Tokenizer (encode pass) for Smarty directives

Disguises directives so a generic markup beautifier can format the text
without corrupting them.

The pass operates in two phases:
1. Lexing: DirectiveLexer walks the source with an explicit state machine
   (TEXT / LITERAL) and emits typed tokens. Balanced directives become
   DIRECTIVE tokens, {literal}...{/literal} boundaries become literal marker
   tokens and the literal interior stays plain TEXT.
2. Substitution: every DIRECTIVE token is registered in the per-invocation
   token table and replaced by
   - an opaque placeholder (___SMARTYFMT_TOKEN_N___) when it sits inside a
     markup tag, inside a <script>/<style> region, or is not a block directive
   - a synthetic element (<smartyfmt-if data-smarty-...>) when it is a block
     start/end directive in body text, so the beautifier's own nesting logic
     indents the block
   Literal markers become comments (<!-- ... --> or /* ... */ depending on
   the script/style context) so the literal interior is formatted as
   ordinary content.

Example:
    >>> context = Formatter().context_create(FormattingOptions())
    >>> directives_tokenize('<p class="{$c}">{if $a}x{/if}</p>', context)
    '<p class="___SMARTYFMT_TOKEN_0___"><smartyfmt-if data-smarty-open="%7B" ...>x</smartyfmt-if></p>'
"""

import re
from bisect import bisect_right
from enum import Enum
from typing import Iterator, List, Optional, Set, Tuple
from urllib.parse import quote

from ..models.formatting import FormatContext
from ..models.tokens import DirectiveSpan, LexToken, TokenKind
from .log import LOG


QUOTES = ('"', "'", "`")

_DIRECTIVE_HEAD_RE = re.compile(r"/?\$?\w")
_SCRIPT_OPEN_RE = re.compile(r"<(script|style)(?=[\s>/]|$)", re.IGNORECASE)
_SCRIPT_CLOSE_RE = re.compile(r"</(script|style)\b", re.IGNORECASE)
_MARKUP_TAG_RE = re.compile(r"<[^>]*?>")
_ID_MARKER_RE = re.compile(r"\x00SMARTYFMT_ID_(\d+)\x00")
_BLOCK_NAME_RE = re.compile(r"(/?)(\w+)")

# encodeURIComponent leaves these unescaped
_URI_SAFE = "-_.!~*'()"


def directiveSpan_match(text: str, start: int) -> Optional[DirectiveSpan]:
    """
    Match a balanced directive starting at an opening brace

    Counts the opening brace run, then scans forward tracking quote state
    (", ' and `, honoring backslash escapes) and brace depth. The directive
    ends at the brace that brings the depth back to zero.

    Args:
        text: Source text
        start: Position of the first '{'

    Returns:
        DirectiveSpan, or None when the braces are not followed by a
        directive head (optional '/', optional '$', word character) or the
        depth never returns to zero

    Example:
        For '{{if $a}} rest' at position 0:
        DirectiveSpan(start=0, end=9, open_braces='{{', close_braces='}}', inner='if $a')

        For '{ color: red }' at position 0: None (not a directive)
    """
    pos = start
    while pos < len(text) and text[pos] == "{":
        pos += 1
    open_count = pos - start

    if open_count == 0 or not _DIRECTIVE_HEAD_RE.match(text, pos):
        return None

    depth = open_count
    quote_char: Optional[str] = None

    while pos < len(text):
        char = text[pos]
        if quote_char:
            if char == quote_char and text[pos - 1] != "\\":
                quote_char = None
        elif char in QUOTES:
            quote_char = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                inner_start = start + open_count
                close_count = 0
                while (
                    close_count < open_count
                    and pos - close_count >= inner_start
                    and text[pos - close_count] == "}"
                ):
                    close_count += 1
                end = pos + 1
                return DirectiveSpan(
                    start=start,
                    end=end,
                    open_braces=text[start:inner_start],
                    close_braces="}" * close_count,
                    inner=text[inner_start:end - close_count],
                )
        pos += 1

    return None


class LexerState(Enum):
    """States of the directive lexer"""
    TEXT = "text"          # normal scanning: directives are recognised
    LITERAL = "literal"    # inside {literal}: only the closing marker counts


class DirectiveLexer:
    """
    Finite-state lexer splitting template source into typed tokens

    Transitions:
        TEXT    --{literal} with a matching {/literal} ahead-->  LITERAL
        LITERAL --{/literal}-->                                  TEXT

    Independently of the state, '<script'/'<style' and their closing tags
    toggle the script context recorded on every emitted token.

    Unbalanced directives are not errors: the opening brace run is kept as
    text and scanning resumes right after it.
    """

    def __init__(self, source: str, literal: str = "literal") -> None:
        """
        Initialize lexer with source text

        Args:
            source: Raw template text
            literal: Name of the verbatim directive pair
        """
        self.source = source
        self.literal = literal
        self.literalClose_re = re.compile(r"\{+\s*/" + re.escape(literal) + r"\s*\}+")

    def tokens(self) -> Iterator[LexToken]:
        """Yield the tokens of the source in order"""
        source = self.source
        state = LexerState.TEXT
        in_script = False
        text_start = 0
        pos = 0

        while pos < len(source):
            char = source[pos]

            if char == "<":
                if _SCRIPT_OPEN_RE.match(source, pos):
                    in_script = True
                elif _SCRIPT_CLOSE_RE.match(source, pos):
                    in_script = False
                pos += 1
                continue

            if char != "{":
                pos += 1
                continue

            if state is LexerState.LITERAL:
                closing = self.literalClose_re.match(source, pos)
                if not closing:
                    pos += 1
                    continue
                if text_start < pos:
                    yield LexToken(TokenKind.TEXT, source[text_start:pos], in_script)
                yield LexToken(TokenKind.LITERAL_CLOSE, closing.group(0), in_script)
                state = LexerState.TEXT
                pos = text_start = closing.end()
                continue

            span = directiveSpan_match(source, pos)
            if span is None:
                brace_start = pos
                while pos < len(source) and source[pos] == "{":
                    pos += 1
                LOG(f"Unbalanced or non-directive brace run at position {brace_start}", level=3)
                continue

            if text_start < pos:
                yield LexToken(TokenKind.TEXT, source[text_start:pos], in_script)

            if self.literalOpen_is(span):
                yield LexToken(TokenKind.LITERAL_OPEN, span.raw, in_script, span)
                state = LexerState.LITERAL
            else:
                yield LexToken(TokenKind.DIRECTIVE, span.raw, in_script, span)

            pos = text_start = span.end

        if text_start < len(source):
            yield LexToken(TokenKind.TEXT, source[text_start:], in_script)

    def literalOpen_is(self, span: DirectiveSpan) -> bool:
        """An opening literal directive counts only if its closing one follows"""
        if span.closing or span.name != self.literal:
            return False
        return self.literalClose_re.search(self.source, span.end) is not None


def literalMarker_make(marker: str, in_script: bool) -> str:
    """Wrap a literal marker in a comment the current context tolerates"""
    if in_script:
        return f"/* {marker} */"
    return f"<!-- {marker} -->"


def markupRegions_find(text: str) -> List[Tuple[int, int]]:
    """Return (start, end) ranges of every markup tag in text"""
    return [(match.start(), match.end()) for match in _MARKUP_TAG_RE.finditer(text)]


def region_contains(regions: List[Tuple[int, int]], offset: int) -> bool:
    """Check if offset falls inside one of the sorted, disjoint regions"""
    index = bisect_right(regions, (offset, float("inf"))) - 1
    return index >= 0 and regions[index][0] <= offset < regions[index][1]


def syntheticElement_make(raw: str, context: FormatContext) -> Optional[str]:
    """
    Build the synthetic element standing in for a block directive

    Args:
        raw: Original directive text, e.g. '{{foreach $items as $i}}'
        context: Current format context

    Returns:
        '<smartyfmt-NAME data-smarty-open=... data-smarty-close=...
        data-smarty-content=...>' for a block start, '</smartyfmt-NAME>' for
        a block end, or None when the directive is not a block directive
    """
    span = directiveSpan_match(raw, 0)
    if span is None:
        return None
    head = _BLOCK_NAME_RE.match(span.inner)
    if not head:
        return None

    slash, name = head.group(1), head.group(2)
    taxonomy = context.taxonomy
    if name == taxonomy.literal or not taxonomy.block_is(name):
        return None

    element = f"{context.settings.element_prefix}{name}"
    if slash:
        return f"</{element}>"

    content = span.inner[head.end():]
    return (
        f'<{element}'
        f' data-smarty-open="{quote(span.open_braces, safe=_URI_SAFE)}"'
        f' data-smarty-close="{quote(span.close_braces, safe=_URI_SAFE)}"'
        f' data-smarty-content="{quote(content, safe=_URI_SAFE)}">'
    )


def directives_tokenize(text: str, context: FormatContext) -> str:
    """
    Replace every directive in text by a beautifier-safe stand-in

    Populates context.tokens (one entry per placeholder or synthetic element)
    and context.literals (the original literal boundary directives, in order).

    Args:
        text: Raw template source
        context: Fresh format context of the current call

    Returns:
        Tokenized text ready for the markup beautifier
    """
    settings = context.settings
    pieces: List[str] = []
    script_ids: Set[int] = set()
    pending_open: Optional[str] = None

    for token in DirectiveLexer(text, context.taxonomy.literal).tokens():
        if token.kind is TokenKind.TEXT:
            pieces.append(token.text)
        elif token.kind is TokenKind.LITERAL_OPEN:
            pending_open = token.text
            pieces.append(literalMarker_make(settings.literal_start_marker, token.in_script))
        elif token.kind is TokenKind.LITERAL_CLOSE:
            context.literals.append((pending_open or f"{{{context.taxonomy.literal}}}", token.text))
            pending_open = None
            pieces.append(literalMarker_make(settings.literal_end_marker, token.in_script))
        else:
            entry = context.token_register(token.text)
            if token.in_script:
                script_ids.add(entry.id)
            pieces.append(f"\x00SMARTYFMT_ID_{entry.id}\x00")

    tokenized = "".join(pieces)
    regions = markupRegions_find(tokenized)

    def standIn_choose(match: re.Match) -> str:
        index = int(match.group(1))
        placeholder = settings.placeHolder_make(index)
        if index in script_ids or region_contains(regions, match.start()):
            return placeholder
        return syntheticElement_make(context.tokens[index].rawText, context) or placeholder

    result = _ID_MARKER_RE.sub(standIn_choose, tokenized)
    LOG(f"Tokenized {len(context.tokens)} directives, {len(context.literals)} literal blocks", level=2)
    return result
