"""
Directive-aware indentation reconciliation

The markup beautifier knows nothing about directive nesting written inside
text lines, attribute lists or multi-line directives. This pass walks the
lines top to bottom with a small state machine and fixes indentation:

    inside_script      lines of a <script>/<style> element: only floored to
                       one unit below the innermost open block
    inside_attributes  lines of a start tag still open (attributes spread
                       over several lines): directive blocks nest through a
                       relative counter on top of the beautifier's indent
    inside_multiline   lines of a directive spanning several lines: the
                       closing line gets the directive's own indent back
    stack              indent strings of the open block directives; body
                       lines are put at least one unit deeper than the top

Unbalanced input never raises: popping an empty stack or decrementing a
zero counter is a no-op.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

from ..models.formatting import FormatContext
from .lines import leadingWhitespace_get, scriptRegion_update
from .log import LOG


_END_TAG_RE = re.compile(r"^\{\{?\s*/(\w+)")
_TAG_NAME_RE = re.compile(r"^\{\{?\s*(\w+)")
_ATTRIBUTE_OPEN_RE = re.compile(r"^<[a-zA-Z0-9:-]+")
BARE_CLOSE = (">", "/>")


@dataclass
class IndentState:
    """
    Named states of the reconciliation pass

    Attributes:
        inside_script: Current line belongs to a <script>/<style> element
        inside_attributes: Current line is inside an unclosed start tag
        attr_level: Open directive blocks inside the current start tag
        inside_multiline: Current line belongs to an unclosed directive
        multiline_indent: Indent of the line that opened that directive
        multiline_outdent: That directive is an outdented middle tag, so its
            continuation lines move one unit left with it
        stack: Indent strings of the open block directives
    """
    inside_script: bool = False
    inside_attributes: bool = False
    attr_level: int = 0
    inside_multiline: bool = False
    multiline_indent: str = ""
    multiline_outdent: bool = False
    stack: List[str] = field(default_factory=list)


class IndentReconciler:
    """
    Re-indents restored lines according to directive block nesting

    Holds only the indent unit and taxonomy of one format context; the line
    state is created per reconcile() call.
    """

    def __init__(self, context: FormatContext) -> None:
        self.unit = context.config.indent_unit
        self.taxonomy = context.taxonomy

    def reconcile(self, lines: List[str]) -> List[str]:
        """
        Re-indent all lines

        Args:
            lines: Lines after long-directive wrapping

        Returns:
            Re-indented lines (same count)
        """
        state = IndentState()
        reconciled = [self.line_reconcile(line, state) for line in lines]
        if state.stack:
            LOG(f"{len(state.stack)} block directives left open at end of input", level=2)
        return reconciled

    def line_reconcile(self, line: str, state: IndentState) -> str:
        """Apply every transition for one line and return its final form"""
        trimmed = line.strip()
        current = leadingWhitespace_get(line)

        state.inside_script = scriptRegion_update(trimmed, state.inside_script)
        if state.inside_script:
            return self.scriptLine_clamp(line, trimmed, current, state)

        self.attributeRegion_update(trimmed, state)
        self.blockEnd_apply(trimmed, state)
        line, current = self.indent_apply(line, trimmed, current, state)
        indented = line
        line, current = self.middleTag_outdent(line, trimmed, current, state)
        return self.multilineTag_track(line, trimmed, current, state, outdented=line != indented)

    def scriptLine_clamp(self, line: str, trimmed: str, current: str, state: IndentState) -> str:
        """Keep the beautifier's script indentation, floored below the open block"""
        if state.stack:
            base = state.stack[-1]
            if not current.startswith(base):
                return base + self.unit + current + trimmed
        return line

    def attributeRegion_update(self, trimmed: str, state: IndentState) -> None:
        """Enter on '<tag ...' left open, leave on a line ending with '>'"""
        if not state.inside_attributes:
            if (
                _ATTRIBUTE_OPEN_RE.match(trimmed)
                and not trimmed.startswith("</")
                and not trimmed.endswith(">")
            ):
                state.inside_attributes = True
                state.attr_level = 0
        elif trimmed.endswith(">"):
            state.inside_attributes = False
            state.attr_level = 0

    def blockEnd_apply(self, trimmed: str, state: IndentState) -> None:
        """A line starting with a block end closes one level"""
        match = _END_TAG_RE.match(trimmed)
        if not match or match.group(1) not in self.taxonomy.end:
            return
        if state.inside_attributes:
            state.attr_level = max(0, state.attr_level - 1)
        elif state.stack:
            state.stack.pop()

    def indent_apply(
        self, line: str, trimmed: str, current: str, state: IndentState
    ) -> Tuple[str, str]:
        """
        Indent a line for the open directive blocks

        Inside a start tag the indent is relative (attr_level extra units on
        top of the beautifier's); elsewhere it is absolute (at least one unit
        deeper than the innermost open block). Bare '>' and '/>' lines keep
        the position the beautifier gave them, next to their start tag.
        """
        if trimmed in BARE_CLOSE:
            return line, current

        if state.inside_attributes:
            if state.attr_level > 0:
                line = current + self.unit * state.attr_level + trimmed
            return line, current

        if state.stack:
            base = state.stack[-1]
            minimum = base + self.unit
            if not current.startswith(minimum):
                if current.startswith(base):
                    current = minimum + current[len(base):]
                else:
                    current = minimum
                line = current + trimmed
        return line, current

    def middleTag_outdent(
        self, line: str, trimmed: str, current: str, state: IndentState
    ) -> Tuple[str, str]:
        """Else-like directives sit one unit left of the block body"""
        match = _TAG_NAME_RE.match(trimmed)
        if not match or match.group(1) not in self.taxonomy.middle:
            return line, current

        if state.inside_attributes:
            if state.attr_level > 0:
                line = line.replace(self.unit, "", 1)
        elif current.startswith(self.unit):
            current = current[len(self.unit):]
            line = current + trimmed
        return line, current

    def blockStart_push(self, trimmed: str, current: str, state: IndentState) -> None:
        match = _TAG_NAME_RE.match(trimmed)
        if not match or match.group(1) not in self.taxonomy.start:
            return
        if state.inside_attributes:
            state.attr_level += 1
        else:
            state.stack.append(current)

    @staticmethod
    def multilineClose_is(trimmed: str) -> bool:
        """Lines that end a directive spread over several lines"""
        return (
            trimmed in ("}", "}}")
            or (trimmed.endswith("}") and "{" not in trimmed)
            or trimmed.startswith("{/")
            or trimmed.startswith("{{/")
        )

    def multilineTag_track(
        self, line: str, trimmed: str, current: str, state: IndentState, outdented: bool = False
    ) -> str:
        """
        Track directives left open at the end of a line and open blocks

        A block start that closes itself on the same line ({if $a}x{/if})
        does not open a level. The continuation lines of a middle tag
        ({elseif ...) that was moved left are moved left by the same unit.
        """
        opens_directive = trimmed.startswith("{")

        if not state.inside_multiline and opens_directive and "}" not in trimmed:
            state.inside_multiline = True
            state.multiline_indent = current
            state.multiline_outdent = outdented
            self.blockStart_push(trimmed, current, state)
            return line

        if state.inside_multiline and self.multilineClose_is(trimmed):
            state.inside_multiline = False
            state.multiline_outdent = False
            return state.multiline_indent + trimmed

        if state.inside_multiline:
            if state.multiline_outdent and line.startswith(self.unit):
                line = line[len(self.unit):]
            return line

        if not state.inside_multiline and opens_directive:
            match = _TAG_NAME_RE.match(trimmed)
            if match and match.group(1) in self.taxonomy.start:
                closing_re = re.compile(r"\{\{?\s*/" + re.escape(match.group(1)) + r"\s*\}\}?")
                if not closing_re.search(trimmed):
                    self.blockStart_push(trimmed, current, state)
        return line
