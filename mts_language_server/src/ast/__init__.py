"""Syntax tree node definitions for MapTool macro scripts."""

from .base import ASTNode, ASTVisitor, TokenRef, ast_to_dict, print_ast
from .expressions import (
    Expr,
    BinaryOp,
    UnaryOp,
    CallExpr,
    VariableRef,
    ParenExpr,
)
from .literals import (
    Literal,
    NumberLiteral,
    DiceLiteral,
    StringLiteral,
    BooleanLiteral,
)
from .statements import (
    Macro,
    TextChunk,
    Script,
    Option,
    RollOption,
    FunctionOption,
    ForOption,
    InvalidOption,
    Body,
    Branches,
    SwitchBody,
    SwitchCase,
    DefaultCase,
    Block,
    Assignment,
    Statement,
)

__all__ = [
    # Base classes
    "ASTNode",
    "ASTVisitor",
    "TokenRef",
    "ast_to_dict",
    "print_ast",
    # Expressions
    "Expr",
    "BinaryOp",
    "UnaryOp",
    "CallExpr",
    "VariableRef",
    "ParenExpr",
    # Literals
    "Literal",
    "NumberLiteral",
    "DiceLiteral",
    "StringLiteral",
    "BooleanLiteral",
    # Script structure
    "Macro",
    "TextChunk",
    "Script",
    "Option",
    "RollOption",
    "FunctionOption",
    "ForOption",
    "InvalidOption",
    "Body",
    "Branches",
    "SwitchBody",
    "SwitchCase",
    "DefaultCase",
    "Block",
    "Assignment",
    "Statement",
]
