"""
Bracket balance scanner for C-family source text.

Walks the content once, tracking line numbers, and ignores brackets inside
string literals ('...', "...", `...`), // line comments and /* */ block
comments. Backslash escapes inside strings are honoured, so "a\\"b" is one
string.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")": "(", "]": "[", "}": "{"}
QUOTES = ("'", '"', "`")


@dataclass(frozen=True)
class BracketCheck:
    """Result of a bracket scan. On failure, `char` and `line` locate it."""
    valid: bool
    message: Optional[str] = None
    char: Optional[str] = None
    line: Optional[int] = None


def _unmatched(char: str, line: int) -> BracketCheck:
    return BracketCheck(False, f"Unmatched '{char}' at line {line}", char, line)


def check_brackets(content: str) -> BracketCheck:
    """Check that (), [] and {} are balanced outside strings and comments.

    Returns:
        BracketCheck. An unmatched closer fails at the first occurrence;
        leftover openers fail with the innermost one.
    """
    stack: List[Tuple[str, int]] = []
    line = 1
    quote: Optional[str] = None
    line_comment = False
    block_comment = False

    i = 0
    length = len(content)
    while i < length:
        char = content[i]
        nxt = content[i + 1] if i + 1 < length else ""

        if char == "\n":
            line += 1
            line_comment = False
            i += 1
            continue

        if quote is not None:
            if char == "\\":
                # Escaped newline still advances the line count
                if nxt == "\n":
                    line += 1
                i += 2
                continue
            if char == quote:
                quote = None
            i += 1
            continue

        if line_comment:
            i += 1
            continue

        if block_comment:
            if char == "*" and nxt == "/":
                block_comment = False
                i += 2
            else:
                i += 1
            continue

        if char == "/" and nxt == "/":
            line_comment = True
            i += 2
            continue
        if char == "/" and nxt == "*":
            block_comment = True
            i += 2
            continue

        if char in QUOTES:
            quote = char
        elif char in OPENERS:
            stack.append((char, line))
        elif char in CLOSERS:
            if not stack or stack[-1][0] != CLOSERS[char]:
                return _unmatched(char, line)
            stack.pop()
        i += 1

    if stack:
        char, opened_at = stack[-1]
        return BracketCheck(False, f"Unclosed '{char}' from line {opened_at}", char, opened_at)

    return BracketCheck(True)
