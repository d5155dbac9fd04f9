from typing import Optional
from mts_language_server.src.ast import ASTNode

"""Exceptions for programming errors in the analysis stages."""


class SemanticError(Exception):
    """Exception raised when an analysis component is misused."""

    def __init__(self, message: str, node: Optional[ASTNode] = None) -> None:
        self.message = message
        self.node = node
        location = f" at {node.line}:{node.column}" if node and node.line > 0 else ""
        super().__init__(f"{message}{location}")
