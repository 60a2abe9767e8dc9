"""
Attribute parser for directive content

Turns the content of an attribute-style directive into an ordered list of
``key`` / ``key=value`` strings, and re-serializes array-valued attributes
one element per line for the long-directive wrapper.

Example:
    >>> attributes_parse('file="x.tpl" items=[1, 2] title="{$t|upper}" nocache')
    ['file="x.tpl"', 'items=[1, 2]', 'title="{$t|upper}"', 'nocache']
"""

import re
from typing import List, Optional

from .splitters import array_split


_ARRAY_ATTRIBUTE_RE = re.compile(r"^([^=]+=\s*)\[([\s\S]*)\]$")
_KEY_STOP = set(" \t\r\n\f\v,={}")


def _whitespace_skip(content: str, i: int, commas: bool = False) -> int:
    while i < len(content) and (content[i].isspace() or (commas and content[i] == ",")):
        i += 1
    return i


def value_scan(content: str, i: int) -> int:
    """
    Scan an attribute value starting at position i

    The value ends at the first top-level whitespace or comma. Quotes,
    brackets, parens and directive braces nest. Braces are counted inside
    quotes too, and a quote only closes outside any brace, so values like
    "{$a|default:"x"}" stay whole.

    Args:
        content: Directive content
        i: Position of the first value character

    Returns:
        Position just past the value
    """
    bracket = paren = brace = 0
    quote: Optional[str] = None

    while i < len(content):
        char = content[i]
        if quote:
            if char == "{":
                brace += 1
            elif char == "}" and brace > 0:
                brace -= 1
            elif char == quote and content[i - 1] != "\\" and brace == 0:
                quote = None
        else:
            if char in ('"', "'"):
                quote = char
            elif char == "[":
                bracket += 1
            elif char == "]":
                bracket -= 1
            elif char == "(":
                paren += 1
            elif char == ")":
                paren -= 1
            elif char == "{":
                brace += 1
            elif char == "}":
                if brace > 0:
                    brace -= 1
            elif (char.isspace() or char == ",") and bracket == 0 and paren == 0 and brace == 0:
                break
        i += 1

    return i


def attributes_parse(content: str) -> List[str]:
    """
    Extract attributes from directive content

    Args:
        content: Everything after the directive name, without braces

    Returns:
        Attribute strings in source order. Whitespace around '=' is dropped
        ("a = 1" gives "a=1"); bare words are returned as they are.

    Example:
        >>> attributes_parse("var='x' value=$y|default:0")
        ["var='x'", 'value=$y|default:0']
    """
    attrs: List[str] = []
    i = 0

    while i < len(content):
        i = _whitespace_skip(content, i, commas=True)
        if i >= len(content):
            break

        start = i
        while i < len(content) and content[i] not in _KEY_STOP:
            i += 1
        key = content[start:i]

        i = _whitespace_skip(content, i)

        if i >= len(content) or content[i] != "=":
            if key:
                attrs.append(key)
            # Stray '=', '{' or '}' with no key in front: step over it
            if start == i and i < len(content):
                i += 1
            continue

        i = _whitespace_skip(content, i + 1)
        value_start = i
        i = value_scan(content, i)
        attrs.append(f"{key}={content[value_start:i]}")

    return attrs


def attributes_lossless(content: str, attrs: List[str]) -> bool:
    """
    Check that the parsed attributes account for every non-blank character

    attributes_parse() steps over separating commas and stray braces, so
    content that is not really an attribute list ("[1, 2] as $x") parses
    with characters missing. Such content must not be laid out again from
    its attributes.
    """
    return re.sub(r"\s+", "", content) == re.sub(r"\s+", "", "".join(attrs))


def arrayAttribute_is(attr: str) -> bool:
    """Check if an attribute string has an array value (key=[...])"""
    return re.search(r"=\s*\[", attr) is not None


def attributeValue_format(attr: str, indent: str, indent_unit: str) -> List[str]:
    """
    Lay out one attribute for a wrapped directive

    An array value is expanded to one element per line, each element one
    indent unit deeper than the key, with trailing commas except on the last.

    Args:
        attr: Attribute string, e.g. "items=[1, 2, 3]"
        indent: Indentation of the attribute line
        indent_unit: One level of indentation

    Returns:
        Output lines (already indented)

    Example:
        >>> attributeValue_format("items=[1, 2]", "  ", "  ")
        ['  items=[', '    1,', '    2', '  ]']
    """
    match = _ARRAY_ATTRIBUTE_RE.match(attr)
    if not match:
        return [f"{indent}{attr}"]

    prefix, inner = match.group(1), match.group(2)
    elements = array_split(inner)
    if not elements:
        return [f"{indent}{attr}"]

    lines = [f"{indent}{prefix}["]
    for position, element in enumerate(elements):
        suffix = "" if position == len(elements) - 1 else ","
        lines.append(f"{indent}{indent_unit}{element}{suffix}")
    lines.append(f"{indent}]")
    return lines
