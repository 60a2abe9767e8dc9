"""
Line handling shared by the wrap and indent passes

lines_split() cuts restored text into lines without cutting through string
literals or comments, so a multi-line comment travels through the passes as
one unit. scriptRegion_update() is the script/style boundary check both
passes use.
"""

import re
from typing import List


LITERAL_PATTERNS = {
    "strings": r"\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`",
    "smartyComment": r"\{\*[\s\S]*?\*\}",
    "htmlComment": r"<!--[\s\S]*?-->",
    "cssComment": r"/\*[\s\S]*?\*/",
    "scriptTemplate": r"<script [^>]*?type=['\"]text/template['\"][^>]*>[\s\S]*?</script>",
}

_LINE_RE = re.compile("|".join(LITERAL_PATTERNS.values()) + r"|(?P<linebreak>\r?\n)")
_SCRIPT_START_RE = re.compile(r"^<(script|style)", re.IGNORECASE)
_SCRIPT_END_RE = re.compile(r"</(script|style)>", re.IGNORECASE)
_BLANK_LINE_RE = re.compile(r"^[ \t]+$", re.MULTILINE)


def lines_split(text: str) -> List[str]:
    """
    Split text into lines, keeping strings and comments whole

    Line breaks inside single-line string literals cannot occur; line breaks
    inside backtick strings, Smarty/HTML/CSS comments and text/template
    script blocks do not split.

    Example:
        >>> lines_split('<p>\\n<!-- a\\nb -->\\n</p>')
        ['<p>', '<!-- a\\nb -->', '</p>']
    """
    lines: List[str] = []
    start = 0
    for match in _LINE_RE.finditer(text):
        if match.group("linebreak") is not None:
            lines.append(text[start:match.start()])
            start = match.end()
    lines.append(text[start:])
    return lines


def lines_join(lines: List[str]) -> str:
    """Join lines with newlines, emptying lines that hold only spaces/tabs"""
    return _BLANK_LINE_RE.sub("", "\n".join(lines))


def leadingWhitespace_get(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def scriptRegion_update(trimmed: str, inside: bool) -> bool:
    """
    Track whether the following lines are inside a <script>/<style> element

    A line opening a script/style element without closing it enters the
    region (the opening line itself counts as inside); a line containing a
    closing tag leaves it.
    """
    if _SCRIPT_START_RE.match(trimmed) and not _SCRIPT_END_RE.search(trimmed):
        return True
    if _SCRIPT_END_RE.search(trimmed):
        return False
    return inside
