"""Workspace state shared across open documents."""

from .features import CompletionCandidate, HoverResult, function_hover, reference_hover, symbol_at, word_before
from .manager import WorkspaceManager
from .session import DocumentSessionArtifacts, DocumentSessionStore
from .symbol_index import (
    DocumentLocation,
    DocumentSymbolRef,
    PrefixIndex,
    WorkspaceSymbolIndex,
    WorkspaceSymbolRecord,
)

__all__ = [
    "CompletionCandidate",
    "HoverResult",
    "function_hover",
    "reference_hover",
    "symbol_at",
    "word_before",
    "WorkspaceManager",
    "DocumentSessionArtifacts",
    "DocumentSessionStore",
    "DocumentLocation",
    "DocumentSymbolRef",
    "PrefixIndex",
    "WorkspaceSymbolIndex",
    "WorkspaceSymbolRecord",
]
