from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mts_language_server.src.catalog.inline_docs import NO_DOCUMENTATION, InlineDocumentation
from mts_language_server.src.common.diagnostics import Diagnostic
from mts_language_server.src.common.source_location import LineIndex
from mts_language_server.src.semantic.analyzer import FoundSymbol
from mts_language_server.src.semantic.variables import VariableMap, new_variable_map

from .symbol_index import DocumentSymbolRef

"""Latest derived artifacts per open document."""


@dataclass(frozen=True)
class DocumentSessionArtifacts:
    """Everything derived from one analysis of one document.

    ``structural`` holds the analyzer's own diagnostics so the capped
    variable checks can be recomputed when settings change.
    """

    uri: str
    text: str = ""
    tokens: List[int] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    variables: VariableMap = field(default_factory=new_variable_map)
    symbols: List[DocumentSymbolRef] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)
    documentation: InlineDocumentation = NO_DOCUMENTATION
    found: List[FoundSymbol] = field(default_factory=list)
    structural: List[Diagnostic] = field(default_factory=list)
    line_index: Optional[LineIndex] = None


class DocumentSessionStore:
    """Keyed by URI; entries are only ever replaced or removed whole."""

    def __init__(self) -> None:
        self._sessions: Dict[str, DocumentSessionArtifacts] = {}

    def get(self, uri: str) -> Optional[DocumentSessionArtifacts]:
        return self._sessions.get(uri)

    def put(self, artifacts: DocumentSessionArtifacts) -> None:
        self._sessions[artifacts.uri] = artifacts

    def remove(self, uri: str) -> Optional[DocumentSessionArtifacts]:
        return self._sessions.pop(uri, None)

    def uris(self) -> List[str]:
        return list(self._sessions)

    def values(self) -> List[DocumentSessionArtifacts]:
        return list(self._sessions.values())

    def __contains__(self, uri: str) -> bool:
        return uri in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
