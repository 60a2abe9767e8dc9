"""
Default markup beautifier

A line-preserving re-indenter used when no other beautifier is supplied.
It never joins or breaks lines of markup; it only rewrites leading
whitespace from element nesting:

- each line is indented by the element depth at its start (a line starting
  with a closing tag is indented for the element it closes)
- void elements and self-closing tags do not nest; <html> children nest only
  with indent_inner_html
- attribute lines of a start tag spread over several lines go one unit
  deeper than the tag, a bare '>' or '/>' line aligns with the tag
- <script> bodies are formatted by jsbeautifier, <style> bodies and
  multi-line comments are re-based keeping their relative indentation,
  <pre>/<textarea> bodies are kept verbatim
- blank line runs are limited by preserve_newlines / max_preserve_newlines

Synthetic block elements produced by the tokenizer are ordinary elements
here, which is what makes block directives indent their bodies.

Example:
    >>> markup_beautify("<ul>\\n<li>one</li>\\n</ul>", BeautifyConfig(indent_size=2))
    '<ul>\\n  <li>one</li>\\n</ul>'
"""

import re
import textwrap
from typing import List, Optional, Tuple

import jsbeautifier

from ..models.formatting import BeautifyConfig


VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

VERBATIM_ELEMENTS = frozenset({"pre", "textarea"})

SCRIPT_TYPES = frozenset({
    "", "text/javascript", "application/javascript", "text/ecmascript",
    "module", "application/json", "application/ld+json",
})

_ATTRS = r"""(?:"[^"]*"|'[^']*'|[^'">])*"""

_MARKUP_TOKEN_RE = re.compile(
    r"(?P<comment><!--[\s\S]*?-->)"
    r"|(?P<raw>(?P<rawopen><(?P<rawname>script|style|pre|textarea)\b" + _ATTRS + r">)"
    r"(?P<body>[\s\S]*?)(?P<rawclose></(?P=rawname)\s*>))"
    r"|(?P<tag><(?P<closing>/?)(?P<name>[a-zA-Z][\w:.-]*)(?P<attrs>" + _ATTRS + r")>)",
    re.IGNORECASE,
)
_TYPE_ATTR_RE = re.compile(r"""\btype\s*=\s*["']?([^"'\s>]*)""", re.IGNORECASE)


class MarkupBeautifier:
    """
    Re-indents markup for one beautify() call

    Attributes:
        config: Beautifier configuration
        unit: One indent level
        lines: Finished output lines
        pending: Pieces of the line being built, None between lines
        line_level: Indent level of the line being built
        breaks: Line breaks seen since the last finished line
        stack: Open elements as (name, depth increment)
    """

    def __init__(self, config: BeautifyConfig) -> None:
        self.config = config
        self.unit = config.indent_unit
        self.lines: List[str] = []
        self.pending: Optional[List[str]] = None
        self.line_level = 0
        self.breaks = 0
        self.stack: List[Tuple[str, int]] = []

    @property
    def depth(self) -> int:
        return sum(increment for _, increment in self.stack)

    def beautify(self, text: str) -> str:
        """Return text re-indented"""
        text = text.replace("\r\n", "\n")
        if not text.strip():
            return ""

        pos = 0
        for match in _MARKUP_TOKEN_RE.finditer(text):
            if match.start() > pos:
                self.text_add(text[pos:match.start()])
            if match.group("comment") is not None:
                self.comment_add(match.group("comment"))
            elif match.group("raw") is not None:
                self.rawElement_add(match)
            else:
                self.tag_add(match)
            pos = match.end()
        if pos < len(text):
            self.text_add(text[pos:])
        self.line_end()

        output = "\n".join(self.lines)
        if self.config.end_with_newline:
            output += "\n"
        return output

    # Line building

    def line_start(self, level: int) -> None:
        if self.lines:
            blanks = max(self.breaks - 1, 0)
            if not self.config.preserve_newlines:
                blanks = 0
            elif self.config.max_preserve_newlines > 0:
                blanks = min(blanks, self.config.max_preserve_newlines - 1)
            self.lines.extend([""] * blanks)
        self.breaks = 0
        self.pending = []
        self.line_level = level

    def line_end(self) -> None:
        if self.pending is not None:
            self.lines.append(self.unit * self.line_level + "".join(self.pending).rstrip())
            self.pending = None
            self.breaks = 0

    def line_break(self) -> None:
        self.line_end()
        self.breaks += 1

    def piece_add(self, piece: str) -> None:
        """Append to the current line, starting one at the current depth if needed"""
        if self.pending is None:
            piece = piece.lstrip()
            if not piece:
                return
            self.line_start(self.depth)
        self.pending.append(piece)

    def text_add(self, chunk: str) -> None:
        for index, segment in enumerate(chunk.split("\n")):
            if index:
                self.line_break()
            self.piece_add(segment)

    def block_add(self, raw: str) -> int:
        """
        Add a tag that may span several lines

        Returns:
            Indent level of the line the tag starts on
        """
        parts = raw.split("\n")
        self.piece_add(parts[0])
        base = self.line_level
        for part in parts[1:]:
            self.line_end()
            stripped = part.strip()
            if not stripped:
                continue
            self.line_start(base if stripped in (">", "/>") else base + 1)
            self.pending.append(stripped)
        return base

    # Markup tokens

    def tag_add(self, match: re.Match) -> None:
        name = match.group("name").lower()
        raw = match.group("tag")

        if match.group("closing"):
            self.element_close(name)
            self.block_add(raw)
            return

        self.block_add(raw)
        if name in VOID_ELEMENTS or match.group("attrs").rstrip().endswith("/"):
            return
        increment = 0 if name == "html" and not self.config.indent_inner_html else 1
        self.stack.append((name, increment))

    def element_close(self, name: str) -> None:
        """Pop the innermost open element called name and everything above it"""
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index][0] == name:
                del self.stack[index:]
                return

    def comment_add(self, raw: str) -> None:
        parts = raw.split("\n")
        self.piece_add(parts[0])
        if len(parts) == 1:
            return

        base = self.line_level
        for part in textwrap.dedent("\n".join(parts[1:])).split("\n"):
            self.line_end()
            if not part.strip():
                self.lines.append("")
                continue
            self.line_start(base)
            self.pending.append(part.rstrip())

    def rawElement_add(self, match: re.Match) -> None:
        name = match.group("rawname").lower()
        body = match.group("body")
        close_raw = match.group("rawclose")

        base = self.block_add(match.group("rawopen"))
        if "\n" not in body or name in VERBATIM_ELEMENTS:
            self.pending.append(body + close_raw)
            return
        if not body.strip():
            self.pending.append(close_raw)
            return

        self.line_end()
        for body_line in self.rawBody_format(name, match.group("rawopen"), body):
            if body_line.strip():
                self.line_start(base + 1)
                self.pending.append(body_line)
                self.line_end()
            else:
                self.lines.append("")
        self.line_start(base)
        self.pending.append(close_raw)

    def rawBody_format(self, name: str, open_raw: str, body: str) -> List[str]:
        """Format a script/style body; lines come back without the base indent"""
        source = textwrap.dedent(body).strip("\n").rstrip()
        if name == "script" and self.scriptType_get(open_raw) in SCRIPT_TYPES:
            source = jsbeautifier.beautify(source, self.scriptOptions_make())
        return source.split("\n")

    @staticmethod
    def scriptType_get(open_raw: str) -> str:
        match = _TYPE_ATTR_RE.search(open_raw)
        return match.group(1).lower() if match else ""

    def scriptOptions_make(self):
        """jsbeautifier options matching the markup configuration"""
        options = jsbeautifier.default_options()
        options.indent_size = self.config.indent_size
        options.indent_char = " "
        options.indent_with_tabs = self.config.indent_with_tabs
        options.preserve_newlines = self.config.preserve_newlines
        options.max_preserve_newlines = self.config.max_preserve_newlines
        options.wrap_line_length = self.config.wrap_line_length
        options.end_with_newline = self.config.js_end_with_newline
        options.brace_style = "collapse,preserve-inline"
        options.jslint_happy = False
        return options


def markup_beautify(text: str, config: BeautifyConfig) -> str:
    """
    Beautify markup with the default re-indenter

    Args:
        text: Tokenized template text
        config: Beautifier configuration

    Returns:
        Re-indented text
    """
    return MarkupBeautifier(config).beautify(text)
