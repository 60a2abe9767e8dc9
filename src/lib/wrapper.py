"""
Long-directive wrapper

Re-serializes single-line directives that are too long or too dense:

- attribute-style directives ({include}, {assign}, or anything holding an
  array literal) go one attribute per line, arrays one element per line
- logic directives ({if}, {elseif}, {while}) wider than the limit are split
  before their top-level boolean operators

Example:
    {include file="x.tpl" var1=1 var2=2 var3=3 var4=4}

    becomes

    {include
        file="x.tpl"
        var1=1
        var2=2
        var3=3
        var4=4
    }
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from ..models.formatting import FormatContext
from .attributes import (
    arrayAttribute_is,
    attributeValue_format,
    attributes_lossless,
    attributes_parse,
)
from .lines import leadingWhitespace_get, scriptRegion_update
from .log import LOG
from .splitters import logicExpression_split
from .tokenizer import directiveSpan_match


_NAME_CONTENT_RE = re.compile(r"^\s*(\w+)\s+([\s\S]*)$")

# More attributes than this always wrap
MAX_INLINE_ATTRIBUTES = 3


@dataclass
class DirectiveLine:
    """
    A line holding exactly one directive

    Attributes:
        indent: Leading whitespace of the line
        open_braces: Opening brace run
        name: Directive name
        content: Everything after the name
        close_braces: Closing brace run
    """
    indent: str
    open_braces: str
    name: str
    content: str
    close_braces: str


def directiveLine_parse(line: str) -> Optional[DirectiveLine]:
    """
    Parse a line consisting of one balanced directive with content

    Returns:
        DirectiveLine, or None when the line is anything else (text, several
        directives, a directive without content, unbalanced braces)
    """
    trimmed = line.strip()
    if not trimmed.startswith("{"):
        return None

    span = directiveSpan_match(trimmed, 0)
    if span is None or span.end != len(trimmed):
        return None

    match = _NAME_CONTENT_RE.match(span.inner)
    if not match:
        return None

    return DirectiveLine(
        indent=leadingWhitespace_get(line),
        open_braces=span.open_braces,
        name=match.group(1),
        content=match.group(2),
        close_braces=span.close_braces,
    )


def attributeTag_wrap(
    directive: DirectiveLine, line: str, context: FormatContext
) -> Optional[List[str]]:
    """Lay out an attribute-style directive one attribute per line, if it needs it"""
    unit = context.config.indent_unit
    attrs = attributes_parse(directive.content)
    if not attrs or not attributes_lossless(directive.content, attrs):
        return None

    too_wide = len(line) > context.config.attribute_wrap_width
    too_many = len(attrs) > MAX_INLINE_ATTRIBUTES
    has_array = any(arrayAttribute_is(attr) for attr in attrs)
    if not (too_wide or too_many or has_array):
        return None

    wrapped = [f"{directive.indent}{directive.open_braces}{directive.name}"]
    for attr in attrs:
        wrapped.extend(attributeValue_format(attr, directive.indent + unit, unit))
    wrapped.append(f"{directive.indent}{directive.close_braces}")
    return wrapped


def logicTag_wrap(
    directive: DirectiveLine, line: str, context: FormatContext
) -> Optional[List[str]]:
    """Split a wide boolean expression before its top-level operators"""
    if len(line) <= context.config.attribute_wrap_width:
        return None

    parts = logicExpression_split(directive.content)
    if len(parts) < 2:
        return None

    unit = context.config.indent_unit
    wrapped = [f"{directive.indent}{directive.open_braces}{directive.name} {parts[0]}"]
    wrapped.extend(f"{directive.indent}{unit}{part}" for part in parts[1:])
    wrapped.append(f"{directive.indent}{directive.close_braces}")
    return wrapped


def longTags_wrap(lines: List[str], context: FormatContext) -> List[str]:
    """
    Wrap long or attribute-heavy directives

    Lines inside <script>/<style> regions pass through untouched.

    Args:
        lines: Restored lines
        context: Current format context

    Returns:
        New list of lines
    """
    taxonomy = context.taxonomy
    wrapped_lines: List[str] = []
    inside_script = False
    wrap_count = 0

    for line in lines:
        inside_script = scriptRegion_update(line.strip(), inside_script)
        directive = None if inside_script else directiveLine_parse(line)

        if directive is None:
            wrapped_lines.append(line)
            continue

        has_array = any(arrayAttribute_is(attr) for attr in attributes_parse(directive.content))
        attribute_style = directive.name in taxonomy.wrap or (
            has_array and directive.name not in taxonomy.logic and directive.name != taxonomy.literal
        )

        wrapped = None
        if attribute_style:
            wrapped = attributeTag_wrap(directive, line, context)
        elif directive.name in taxonomy.logic:
            wrapped = logicTag_wrap(directive, line, context)

        if wrapped is None:
            wrapped_lines.append(line)
        else:
            wrap_count += 1
            wrapped_lines.extend(wrapped)

    LOG(f"Wrapped {wrap_count} long directives", level=3)
    return wrapped_lines
