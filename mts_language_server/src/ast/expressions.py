from __future__ import annotations
from typing import List, Optional
from .base import ASTNode, TokenRef

"""Expression node definitions for MapTool macro scripts."""


class Expr(ASTNode):
    """Base class for all expressions."""

    def __init__(
        self, line: int = 0, column: int = 0, raw_text: Optional[str] = None
    ) -> None:
        super().__init__(line, column, raw_text=raw_text)


class BinaryOp(Expr):
    """Binary operation: left op right"""

    def __init__(
        self, op: TokenRef, left: "Expr", right: "Expr", line: int = 0, column: int = 0
    ) -> None:
        super().__init__(line, column)
        self.op = op  # ||, &&, ==, !=, <, <=, >, >=, +, -, *, /, ^
        self.left = left
        self.right = right


class UnaryOp(Expr):
    """Unary operation: op expr"""

    def __init__(self, op: TokenRef, expr: "Expr", line: int = 0, column: int = 0) -> None:
        super().__init__(line, column)
        self.op = op  # +, -, !
        self.expr = expr


class CallExpr(Expr):
    """Function call: name(args...)"""

    def __init__(
        self,
        name: str,
        name_token: TokenRef,
        args: List["Expr"],
        lparen: TokenRef,
        rparen: TokenRef,
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(line, column)
        self.name = name
        self.name_token = name_token
        self.args = args
        self.lparen = lparen
        self.rparen = rparen


class VariableRef(Expr):
    """Variable reference, e.g. ``hp`` or ``macro.args``."""

    def __init__(
        self, name: str, line: int = 0, column: int = 0, raw_text: Optional[str] = None
    ) -> None:
        super().__init__(line, column, raw_text=raw_text or name)
        self.name = name


class ParenExpr(Expr):
    """Parenthesised expression: ( expr )"""

    def __init__(self, expr: "Expr", line: int = 0, column: int = 0) -> None:
        super().__init__(line, column)
        self.expr = expr
