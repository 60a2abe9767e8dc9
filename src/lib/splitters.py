"""
Expression splitters for directive content

Two small scanners that cut directive content at top-level separators while
honoring quotes and bracket/paren/brace nesting:

- array_split(): comma separated lists (array literals, attribute lists)
- logicExpression_split(): boolean expressions at &&, ||, and, or

Both share NestingTracker, an explicit cursor state advanced one character
at a time.

Example:
    >>> array_split('"a", [1, 2], $b')
    ['"a"', '[1, 2]', '$b']
    >>> logicExpression_split('$a && ($b || $c) and $d')
    ['$a', '&& ($b || $c)', 'and $d']
"""

import re
from dataclasses import dataclass
from typing import List, Optional


_OPERATOR_RE = re.compile(r"\s*(&&|\|\||and|or)\s+")


@dataclass
class NestingTracker:
    """
    Quote and bracket state of a left-to-right scan

    Attributes:
        quote: Quote character of the string being scanned, or None
        bracket: [] depth
        paren: () depth
        brace: {} depth
    """
    quote: Optional[str] = None
    bracket: int = 0
    paren: int = 0
    brace: int = 0

    def advance(self, char: str, previous: str) -> None:
        """Update the state for char (previous is the character before it)"""
        if self.quote:
            if char == self.quote and previous != "\\":
                self.quote = None
            return

        if char in ('"', "'"):
            self.quote = char
        elif char == "[":
            self.bracket += 1
        elif char == "]":
            self.bracket -= 1
        elif char == "(":
            self.paren += 1
        elif char == ")":
            self.paren -= 1
        elif char == "{":
            self.brace += 1
        elif char == "}":
            self.brace -= 1

    @property
    def at_top_level(self) -> bool:
        return self.quote is None and self.bracket == 0 and self.paren == 0 and self.brace == 0


def array_split(content: str) -> List[str]:
    """
    Split content on top-level commas

    Args:
        content: Comma separated list, e.g. the inside of an array literal

    Returns:
        Stripped parts in order. An empty part between two commas is kept,
        a trailing empty part is dropped.

    Example:
        >>> array_split("'x' => 1, 'y' => [2, 3]")
        ["'x' => 1", "'y' => [2, 3]"]
    """
    parts: List[str] = []
    current = ""
    tracker = NestingTracker()

    for i, char in enumerate(content):
        tracker.advance(char, content[i - 1] if i else "")

        if char == "," and tracker.at_top_level:
            parts.append(current.strip())
            current = ""
        else:
            current += char

    if current.strip():
        parts.append(current.strip())
    return parts


def logicExpression_split(content: str) -> List[str]:
    """
    Split a boolean expression before each top-level operator

    Operators are &&, ||, and, or followed by whitespace. Word operators only
    count at a whitespace boundary, so names such as $band or $order stay
    whole. Each part after the first starts with its operator.

    Args:
        content: Directive content, e.g. '$a && $b || count($c) > 1'

    Returns:
        Stripped parts; a single element when nothing splits

    Example:
        >>> logicExpression_split("$user.isAdmin && $page.visible")
        ['$user.isAdmin', '&& $page.visible']
    """
    parts: List[str] = []
    current = ""
    tracker = NestingTracker()
    i = 0

    while i < len(content):
        char = content[i]

        if tracker.at_top_level and (char.isspace() or char in "&|"):
            operator = _OPERATOR_RE.match(content, i)
            if operator:
                if current.strip():
                    parts.append(current.strip())
                current = operator.group(1) + " "
                i = operator.end()
                continue

        tracker.advance(char, content[i - 1] if i else "")
        current += char
        i += 1

    if current.strip():
        parts.append(current.strip())
    return parts
