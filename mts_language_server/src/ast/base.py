"""Base classes and utilities for syntax tree traversal."""

from __future__ import annotations

from typing import Any, Dict, Optional

POSITION_FIELDS = ("line", "column", "start_pos", "end_pos", "source_file")


class ASTNode:
    """Base class for all syntax tree nodes.

    ``line`` and ``column`` are 1-based as reported by the lexer;
    ``start_pos`` and ``end_pos`` are 0-based code point offsets.
    """

    def __init__(
        self,
        line: int = 0,
        column: int = 0,
        start_pos: int = 0,
        end_pos: int = 0,
        source_file: Optional[str] = None,
        raw_text: Optional[str] = None,
    ) -> None:
        self.line = line
        self.column = column
        self.start_pos = start_pos
        self.end_pos = end_pos
        self.source_file = source_file
        self.raw_text = raw_text

    @property
    def length(self) -> int:
        return self.end_pos - self.start_pos

    def span_from(self, first: "ASTNode", last: Optional["ASTNode"] = None) -> "ASTNode":
        """Cover the source extent from ``first`` to ``last`` (inclusive)."""
        last = last or first
        self.line = first.line
        self.column = first.column
        self.start_pos = first.start_pos
        self.end_pos = last.end_pos
        return self


class TokenRef(ASTNode):
    """A keyword or punctuation token kept for highlighting and ranges."""

    def __init__(
        self,
        text: str,
        line: int = 0,
        column: int = 0,
        start_pos: int = 0,
        end_pos: int = 0,
    ) -> None:
        super().__init__(line, column, start_pos, end_pos, raw_text=text)
        self.text = text


class ASTVisitor:
    """Base class for syntax tree visitors."""

    def visit(self, node: ASTNode) -> Any:
        """Visit a node and return result."""
        method_name = f"visit_{type(node).__name__}"
        if hasattr(self, method_name):
            return getattr(self, method_name)(node)
        return self.generic_visit(node)

    def generic_visit(self, node: ASTNode) -> Any:
        """Default visitor for unhandled node types."""
        pass


def ast_to_dict(node: ASTNode) -> Any:
    """Convert a syntax tree node to a dictionary for debugging."""
    if not isinstance(node, ASTNode):
        return node

    result: Dict[str, Any] = {"type": type(node).__name__}
    for field_name, field_value in node.__dict__.items():
        if field_name in POSITION_FIELDS:
            continue
        if isinstance(field_value, list):
            result[field_name] = [ast_to_dict(item) for item in field_value]
        elif isinstance(field_value, ASTNode):
            result[field_name] = ast_to_dict(field_value)
        else:
            result[field_name] = field_value

    return result


def print_ast(node: ASTNode, indent: int = 0) -> None:
    """Pretty-print tree structure for debugging."""
    spaces = "  " * indent
    print(f"{spaces}{type(node).__name__} @{node.line}:{node.column}")

    for field_name, field_value in node.__dict__.items():
        if field_name in POSITION_FIELDS or field_name == "raw_text":
            continue
        print(f"{spaces}  {field_name}:", end="")
        if isinstance(field_value, ASTNode):
            print()
            print_ast(field_value, indent + 2)
        elif isinstance(field_value, list):
            print()
            for item in field_value:
                if isinstance(item, ASTNode):
                    print_ast(item, indent + 2)
                else:
                    print(f"{spaces}    {item}")
        else:
            print(f" {field_value!r}")
