from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

"""Splitting of macro text into top-level text and script segments.

Error recovery parses each top-level script on its own, so a broken
script leaves the rest of the document analysable.
"""

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
QUOTES = "\"'"


class SegmentKind(Enum):
    TEXT = "text"
    SCRIPT = "script"
    STRAY_BRACKET = "stray_bracket"


@dataclass(frozen=True)
class Segment:
    """A ``[start, end)`` slice of the macro text."""

    kind: SegmentKind
    start: int
    end: int


def split_segments(text: str) -> List[Segment]:
    """Cut macro text into text, script and stray "]" segments.

    A script runs from a top-level "[" to its matching "]", or to the end
    of the text when it is never closed. Brackets inside HTML comments,
    string literals and nested blocks do not end it.
    """
    segments: List[Segment] = []
    text_start = 0
    index = 0
    length = len(text)

    def flush_text(end: int) -> None:
        if end > text_start:
            segments.append(Segment(SegmentKind.TEXT, text_start, end))

    while index < length:
        if text.startswith(COMMENT_OPEN, index):
            close = text.find(COMMENT_CLOSE, index + len(COMMENT_OPEN))
            index = length if close < 0 else close + len(COMMENT_CLOSE)
            continue

        char = text[index]
        if char == "[":
            flush_text(index)
            end = _script_end(text, index)
            segments.append(Segment(SegmentKind.SCRIPT, index, end))
            index = text_start = end
        elif char == "]":
            flush_text(index)
            segments.append(Segment(SegmentKind.STRAY_BRACKET, index, index + 1))
            index = text_start = index + 1
        else:
            index += 1

    flush_text(length)
    return segments


def _script_end(text: str, start: int) -> int:
    """Offset just past the "]" closing the script opened at ``start``."""
    # "[" marks script code, "{" marks block text
    stack: List[str] = []
    index = start
    while index < len(text):
        char = text[index]
        in_code = bool(stack) and stack[-1] == "["

        if in_code and char in QUOTES:
            index = _string_end(text, index)
            continue

        if char == "[":
            stack.append("[")
        elif char == "{" and in_code:
            stack.append("{")
        elif char == "}" and stack and not in_code:
            stack.pop()
        elif char == "]":
            while stack and stack.pop() != "[":
                pass
            if not stack:
                return index + 1
        index += 1
    return len(text)


def _string_end(text: str, start: int) -> int:
    """Offset past a string literal; an unterminated one stops at the newline."""
    quote = text[start]
    index = start + 1
    while index < len(text) and text[index] not in (quote, "\n"):
        index += 1
    if index < len(text) and text[index] == quote:
        return index + 1
    return index


def line_and_column(text: str, offset: int) -> Tuple[int, int]:
    """1-based line and column of a code point offset."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def blank_prefix(text: str, end: int) -> str:
    """``text[:end]`` with everything but newlines replaced by spaces."""
    return "".join(char if char == "\n" else " " for char in text[:end])
