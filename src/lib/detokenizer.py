"""
Detokenizer (decode pass) for Smarty directives

Restores original directive syntax in beautified text. Runs four steps in
order, each a pure function of (text, context):

1. literalBlocks_restore: comment markers back to {literal}...{/literal},
   adding one indent unit to interior lines
2. placeholders_compact: drop whitespace the beautifier put inside an
   opaque placeholder
3. placeholders_restore: opaque placeholders back to their directive text,
   flattening multi-line wrap/logic directives to one line
4. syntheticElements_restore: synthetic elements back to {name ...} and
   {/name}, keeping each block's brace style
"""

import re
from typing import Dict, List
from urllib.parse import unquote

from ..models.formatting import FormatContext
from .log import LOG


_TAG_NAME_RE = re.compile(r"^\{\{?\s*(\w+)")
_ATTRIBUTE_RES: Dict[str, re.Pattern] = {
    "open": re.compile(r'data-smarty-open="([^"]*)"'),
    "close": re.compile(r'data-smarty-close="([^"]*)"'),
    "content": re.compile(r'data-smarty-content="([^"]*)"'),
}


def _comment_marker_re(marker: str) -> str:
    return r"(?:<!--|/\*)\s*" + re.escape(marker) + r"\s*(?:-->|\*/)"


def literalBlocks_restore(text: str, context: FormatContext) -> str:
    """
    Turn literal comment markers back into the original literal directives

    The beautifier indented the literal interior as ordinary content at the
    level of the markers themselves; every interior line that starts a line
    gets one extra indent unit so it nests under the directive. The part
    sharing a line with the opening marker is left alone.

    Args:
        text: Beautified text
        context: Format context holding the original literal directives

    Returns:
        Text with {literal} blocks restored
    """
    settings = context.settings
    unit = context.config.indent_unit
    literal = context.taxonomy.literal
    pattern = re.compile(
        _comment_marker_re(settings.literal_start_marker)
        + r"([\s\S]*?)"
        + _comment_marker_re(settings.literal_end_marker)
    )
    pairs = iter(context.literals)

    def block_restore(match: re.Match) -> str:
        opening, closing = next(pairs, (f"{{{literal}}}", f"{{/{literal}}}"))
        inner = match.group(1)
        if not inner:
            return f"{opening}{closing}"

        lines = inner.split("\n")
        indented = [lines[0]] + [unit + line if line.strip() else line for line in lines[1:]]
        return opening + "\n".join(indented) + closing

    return pattern.sub(block_restore, text)


def placeholders_compact(text: str, context: FormatContext) -> str:
    """Remove newlines (and the indentation after them) inside placeholders"""
    settings = context.settings
    pattern = re.compile(
        re.escape(settings.placeholder_prefix) + r"[\d\s]*?" + re.escape(settings.placeholder_suffix)
    )
    return pattern.sub(lambda match: re.sub(r"\r?\n\s*", "", match.group(0)), text)


def directive_flatten(raw: str) -> str:
    """
    Collapse a multi-line directive onto one line

    Whitespace runs become one space and whitespace next to the brace runs
    is dropped, so the wrapper can decide the layout afresh.

    Example:
        >>> directive_flatten("{include\\n    file='a'\\n    x=1\\n}")
        "{include file='a' x=1}"
    """
    flat = re.sub(r"\s+", " ", raw)
    flat = re.sub(r"^(\{+) ", r"\1", flat)
    return re.sub(r" (\}+)$", r"\1", flat)


def placeholders_restore(text: str, context: FormatContext) -> str:
    """
    Replace opaque placeholders by their original directive text

    Placeholders without a token table entry are left untouched.
    """
    settings = context.settings
    taxonomy = context.taxonomy
    pattern = re.compile(
        re.escape(settings.placeholder_prefix) + r"(\d+)" + re.escape(settings.placeholder_suffix)
    )

    def token_restore(match: re.Match) -> str:
        token = context.token_get(settings.tokenIndex_extract(match.group(0)))
        if token is None:
            LOG(f"Unresolved placeholder {match.group(0)} left in place", level=2)
            return match.group(0)

        context.tokens_resolved += 1
        original = token.rawText
        name = _TAG_NAME_RE.match(original)
        if name and (name.group(1) in taxonomy.wrap or name.group(1) in taxonomy.logic):
            if "\n" in original:
                original = directive_flatten(original)
        return original

    return pattern.sub(token_restore, text)


def syntheticElements_restore(text: str, context: FormatContext) -> str:
    """
    Replace synthetic elements by block directives

    Opening and closing elements are handled in one document-order pass. An
    opening element pushes its brace style on a stack; a closing element pops
    it, so {{if}}...{{/if}} keeps double braces even next to single-brace
    blocks. An unmatched closing element falls back to single braces.
    """
    prefix = re.escape(context.settings.element_prefix)
    pattern = re.compile(r"<\s*(/?)\s*" + prefix + r"([\w-]+)([^>]*)>")
    brace_stack: List[Dict[str, str]] = []

    def element_restore(match: re.Match) -> str:
        closing, name, attrs = match.group(1), match.group(2), match.group(3)
        context.tokens_resolved += 1

        if closing:
            braces = brace_stack.pop() if brace_stack else {"open": "{", "close": "}"}
            return f"{braces['open']}/{name}{braces['close']}"

        values = {}
        for key, attribute_re in _ATTRIBUTE_RES.items():
            found = attribute_re.search(attrs)
            values[key] = unquote(found.group(1)) if found else None

        open_braces = values["open"] or "{"
        close_braces = values["close"] or "}"
        brace_stack.append({"open": open_braces, "close": close_braces})
        return f"{open_braces}{name}{values['content'] or ''}{close_braces}"

    return pattern.sub(element_restore, text)


def directives_detokenize(text: str, context: FormatContext) -> str:
    """
    Run the full decode pass

    Args:
        text: Output of the markup beautifier
        context: Format context populated by directives_tokenize()

    Returns:
        Text with every directive restored
    """
    text = literalBlocks_restore(text, context)
    text = placeholders_compact(text, context)
    text = placeholders_restore(text, context)
    text = syntheticElements_restore(text, context)
    LOG(f"Restored {context.tokens_resolved} of {len(context.tokens)} directive tokens", level=2)
    return text
