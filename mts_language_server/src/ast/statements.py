from __future__ import annotations
from typing import List, Optional, Union
from .base import ASTNode, TokenRef
from .expressions import Expr, VariableRef

"""Script structure node definitions for MapTool macros."""


class Macro(ASTNode):
    """Root node: free text interleaved with bracketed scripts."""

    def __init__(self, bits: List[Union["TextChunk", "Script"]], line: int = 0, column: int = 0) -> None:
        super().__init__(line, column)
        self.bits = bits


class TextChunk(ASTNode):
    """Output text outside of scripts."""

    def __init__(self, text: str, line: int = 0, column: int = 0) -> None:
        super().__init__(line, column, raw_text=text)
        self.text = text


class Script(ASTNode):
    """[options: body] or [body]"""

    def __init__(
        self,
        options: List["Option"],
        colon: Optional[TokenRef],
        body: "Body",
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(line, column)
        self.options = options
        self.colon = colon
        self.body = body


class Option(ASTNode):
    """Base class for roll options."""

    def __init__(self, name: str, line: int = 0, column: int = 0) -> None:
        super().__init__(line, column)
        self.name = name

    @property
    def argument_count(self) -> int:
        return 0


class RollOption(Option):
    """Simple roll option without arguments: h, r, code, ..."""


class FunctionOption(Option):
    """Roll option taking arguments: if(...), switch(...), count(...), ..."""

    def __init__(
        self,
        name: str,
        keyword: TokenRef,
        args: List[Expr],
        lparen: TokenRef,
        rparen: TokenRef,
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(name, line, column)
        self.keyword = keyword
        self.args = args
        self.lparen = lparen
        self.rparen = rparen

    @property
    def argument_count(self) -> int:
        return len(self.args)


class ForOption(Option):
    """for(var, start, end[, step[, separator]]) or foreach(var, list[, separator[, delimiter]])

    ``declaration`` is the loop variable when the first argument is a bare
    name; otherwise ``invalid`` holds the offending first argument, which
    is also the first entry of ``expressions``.
    """

    def __init__(
        self,
        keyword: TokenRef,
        declaration: Optional[VariableRef],
        invalid: Optional[Expr],
        expressions: List[Expr],
        lparen: TokenRef,
        rparen: TokenRef,
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(keyword.text, line, column)
        self.keyword = keyword
        self.declaration = declaration
        self.invalid = invalid
        self.expressions = expressions
        self.lparen = lparen
        self.rparen = rparen

    @property
    def argument_count(self) -> int:
        return len(self.expressions) + (1 if self.declaration is not None else 0)


class InvalidOption(Option):
    """An option expression that is neither a name nor a call."""

    def __init__(self, expr: Expr, line: int = 0, column: int = 0) -> None:
        super().__init__(expr.raw_text or "", line, column)
        self.expr = expr


class Body(ASTNode):
    """Base class for script bodies."""


class Branches(Body):
    """branch (; branch)* - a single statement, or then/else parts"""

    def __init__(
        self,
        branches: List[Union["Statement", "Block"]],
        separators: List[TokenRef],
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(line, column)
        self.branches = branches
        self.separators = separators


class SwitchBody(Body):
    """case label: branch; ... default: branch"""

    def __init__(
        self,
        cases: List["SwitchCase"],
        default: Optional["DefaultCase"],
        separators: List[TokenRef],
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(line, column)
        self.cases = cases
        self.default = default
        self.separators = separators


class SwitchCase(ASTNode):
    """case label: branch"""

    def __init__(
        self,
        keyword: TokenRef,
        label: Expr,
        colon: TokenRef,
        branch: Union["Statement", "Block"],
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(line, column)
        self.keyword = keyword
        self.label = label
        self.colon = colon
        self.branch = branch


class DefaultCase(ASTNode):
    """default: branch"""

    def __init__(
        self,
        keyword: TokenRef,
        colon: TokenRef,
        branch: Union["Statement", "Block"],
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(line, column)
        self.keyword = keyword
        self.colon = colon
        self.branch = branch


class Block(ASTNode):
    """{ text and nested scripts }"""

    def __init__(self, bits: List[Union[TextChunk, Script]], line: int = 0, column: int = 0) -> None:
        super().__init__(line, column)
        self.bits = bits


class Assignment(ASTNode):
    """variable = expression"""

    def __init__(
        self, target: VariableRef, op: TokenRef, value: Expr, line: int = 0, column: int = 0
    ) -> None:
        super().__init__(line, column)
        self.target = target
        self.op = op
        self.value = value


Statement = Union[Assignment, Expr]
