from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List

"""Positions, ranges and offset conversion for macro documents.

Lines are zero-based. Columns count UTF-16 code units, which is what
editors speaking the language server protocol expect.
"""


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed to encode ``text``."""
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based (line, character) location in a document."""

    line: int = 0
    character: int = 0

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.character + 1}"


@dataclass(frozen=True, order=True)
class Range:
    """An ordered (start, end) pair of positions."""

    start: Position = Position()
    end: Position = Position()

    def contains(self, position: Position) -> bool:
        return self.start <= position <= self.end

    @staticmethod
    def on_line(line: int, character: int, length: int) -> "Range":
        """Range for a token that does not span lines."""
        return Range(Position(line, character), Position(line, character + length))


class LineIndex:
    """Maps code point offsets of a document to positions and back."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.line_starts: List[int] = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self.line_starts.append(index + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def position_at(self, offset: int) -> Position:
        """Convert an offset into a position, clamping to the text bounds."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self.line_starts, offset) - 1
        line_start = self.line_starts[line]
        return Position(line, utf16_length(self.text[line_start:offset]))

    def offset_at(self, position: Position) -> int:
        """Convert a position into an offset, clamping to the text bounds."""
        if position.line < 0:
            return 0
        if position.line >= len(self.line_starts):
            return len(self.text)

        offset = self.line_starts[position.line]
        line_end = (
            self.line_starts[position.line + 1] - 1
            if position.line + 1 < len(self.line_starts)
            else len(self.text)
        )
        units = 0
        while offset < line_end and units < position.character:
            units += utf16_length(self.text[offset])
            offset += 1
        return offset

    def range_of(self, start: int, end: int) -> Range:
        """Range covering the offsets ``[start, end)``."""
        return Range(self.position_at(start), self.position_at(end))

    def line_text(self, line: int) -> str:
        """Text of a line without its line terminator."""
        if line < 0 or line >= len(self.line_starts):
            return ""
        start = self.line_starts[line]
        end = (
            self.line_starts[line + 1] - 1
            if line + 1 < len(self.line_starts)
            else len(self.text)
        )
        return self.text[start:end].rstrip("\r")
