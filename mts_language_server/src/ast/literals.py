"""Literal node definitions."""

from __future__ import annotations

from typing import Optional, Union

from .expressions import Expr


class Literal(Expr):
    """Base class for literal values."""

    def __init__(
        self, line: int = 0, column: int = 0, raw_text: Optional[str] = None
    ) -> None:
        super().__init__(line, column, raw_text=raw_text)


class NumberLiteral(Literal):
    """Numeric literal: 42, 2.5"""

    def __init__(
        self,
        value: Union[int, float],
        line: int = 0,
        column: int = 0,
        raw_text: Optional[str] = None,
    ) -> None:
        super().__init__(line, column, raw_text=raw_text)
        self.value = value


class DiceLiteral(Literal):
    """Dice roll literal: 1d20, 3d6"""

    def __init__(
        self,
        count: int,
        sides: int,
        line: int = 0,
        column: int = 0,
        raw_text: Optional[str] = None,
    ) -> None:
        super().__init__(line, column, raw_text=raw_text)
        self.count = count
        self.sides = sides


class StringLiteral(Literal):
    """String literal: "text" or 'text'"""

    def __init__(
        self,
        value: str,
        line: int = 0,
        column: int = 0,
        raw_text: Optional[str] = None,
    ) -> None:
        super().__init__(line, column, raw_text=raw_text)
        self.value = value


class BooleanLiteral(Literal):
    """Boolean literal: true, false"""

    def __init__(
        self,
        value: bool,
        line: int = 0,
        column: int = 0,
        raw_text: Optional[str] = None,
    ) -> None:
        super().__init__(line, column, raw_text=raw_text)
        self.value = value
