"""Per-event orchestration of parsing, analysis, indexing and diagnostics."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, List, Optional, Set

from mts_language_server.src.catalog.registry import BuiltinRegistry
from mts_language_server.src.common.constants import (
    DEFAULT_SETTINGS,
    MTS_LANGUAGE_ID,
    SOURCE_SYNTAX,
    MTSSettings,
)
from mts_language_server.src.common.diagnostics import Diagnostic, DiagnosticSeverity
from mts_language_server.src.common.source_location import LineIndex, Position, Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.parsing.parser import MTSParser, MTSSyntaxError
from mts_language_server.src.semantic.analyzer import AnalysisResult, DocumentAnalyzer
from mts_language_server.src.semantic.validators import DiagnosticSynthesizer

from .features import (
    CompletionCandidate,
    HoverResult,
    function_hover,
    reference_hover,
    symbol_at,
    word_before,
)
from .session import DocumentSessionArtifacts, DocumentSessionStore
from .symbol_index import WorkspaceSymbolIndex

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """Owns all shared state of an editing session.

    One call handles one editor event to completion; nothing here is
    safe to call from more than one thread at a time.
    """

    def __init__(
        self,
        registry: Optional[BuiltinRegistry] = None,
        parser: Optional[MTSParser] = None,
    ) -> None:
        self.registry = registry if registry is not None else BuiltinRegistry.load_default()
        self.parser = parser or MTSParser()
        self.index = WorkspaceSymbolIndex()
        self.index.seed_builtins(self.registry)
        self.synthesizer = DiagnosticSynthesizer(self.registry)
        self.sessions = DocumentSessionStore()
        self.udfs: Dict[str, Set[str]] = {}

    # -- Document lifecycle -----------------------------------------------

    def update_document(
        self,
        uri: str,
        text: str,
        language_id: str = MTS_LANGUAGE_ID,
        settings: MTSSettings = DEFAULT_SETTINGS,
    ) -> Optional[DocumentSessionArtifacts]:
        """Re-analyse a document after its content changed.

        Documents in other languages are not analysed; any state kept for
        them from an earlier language id is dropped.

        Returns:
            The new session artifacts, or None when the document is not MTS
        """
        if language_id != MTS_LANGUAGE_ID:
            if uri in self.sessions:
                logger.debug("Dropping %s, language is now %s", uri, language_id)
                self.close_document(uri)
            return None

        line_index = LineIndex(text)
        analysis = self._analyze(uri, text, line_index)

        previous = self.sessions.get(uri)
        previous_refs = previous.symbols if previous is not None else []

        self._update_udfs(uri, analysis.defines)
        refs = self.index.update_document(uri, previous_refs, analysis.symbols)
        diagnostics = self.synthesizer.synthesize(
            analysis.symbols,
            analysis.variables,
            analysis.diagnostics,
            line_index,
            settings,
        )

        artifacts = DocumentSessionArtifacts(
            uri=uri,
            text=text,
            tokens=analysis.tokens,
            diagnostics=diagnostics,
            variables=analysis.variables,
            symbols=refs,
            defines=analysis.defines,
            documentation=analysis.documentation,
            found=analysis.symbols,
            structural=analysis.diagnostics,
            line_index=line_index,
        )
        self.sessions.put(artifacts)
        return artifacts

    def _analyze(self, uri: str, text: str, line_index: LineIndex) -> AnalysisResult:
        """Analyse the scripts that parse; each one that does not is an error."""
        macro, errors = self.parser.parse_tolerant(text, filename=uri)
        analysis = DocumentAnalyzer(text, line_index).analyze(macro)
        for exc in errors:
            logger.debug("%s", exc)
        analysis.diagnostics[:0] = [self._syntax_diagnostic(exc, line_index) for exc in errors]
        return analysis

    @staticmethod
    def _syntax_diagnostic(exc: MTSSyntaxError, line_index: LineIndex) -> Diagnostic:
        start = line_index.position_at(exc.position)
        end = line_index.position_at(exc.position + 1)
        if end.line != start.line:
            end = start
        return Diagnostic(DiagnosticSeverity.ERROR, exc.message, Range(start, end), SOURCE_SYNTAX)

    def close_document(self, uri: str) -> bool:
        """Forget a closed document and withdraw its symbols.

        Returns:
            True when the document was tracked
        """
        artifacts = self.sessions.remove(uri)
        if artifacts is None:
            return False
        self.index.remove_document(uri, artifacts.symbols)
        self._update_udfs(uri, [])
        return True

    def revalidate(self, uri: str, settings: MTSSettings = DEFAULT_SETTINGS) -> Optional[DocumentSessionArtifacts]:
        """Recompute the diagnostics of a stored document under new settings."""
        artifacts = self.sessions.get(uri)
        if artifacts is None:
            return None

        line_index = artifacts.line_index or LineIndex(artifacts.text)
        diagnostics = self.synthesizer.synthesize(
            artifacts.found,
            artifacts.variables,
            artifacts.structural,
            line_index,
            settings,
        )
        artifacts = dataclasses.replace(artifacts, diagnostics=diagnostics)
        self.sessions.put(artifacts)
        return artifacts

    def _update_udfs(self, uri: str, defines: Iterable[str]) -> None:
        defined = set(defines)
        for name in list(self.udfs):
            uris = self.udfs[name]
            if name in defined:
                uris.add(uri)
                continue
            uris.discard(uri)
            if not uris:
                del self.udfs[name]
        for name in defined:
            self.udfs.setdefault(name, set()).add(uri)

    # -- Queries ----------------------------------------------------------

    def hover(
        self,
        uri: str,
        position: Position,
        settings: MTSSettings = DEFAULT_SETTINGS,
    ) -> Optional[HoverResult]:
        """Hover content for the symbol under ``position``, if any."""
        artifacts = self.sessions.get(uri)
        if artifacts is None:
            return None

        ref = symbol_at(artifacts.symbols, position)
        if ref is None:
            return None

        # The occurrence's own kind decides; records are shared by name
        record = ref.record
        kind = ref.kind if ref.kind != SymbolKind.UNKNOWN else record.kind
        if kind != SymbolKind.VARIABLE:
            definition = self.registry.get(record.name, kind)
            if definition is not None:
                return HoverResult(function_hover(definition, settings.wiki_uri_root), ref.range)

            documented = self._inline_definition(record.name)
            if documented is not None:
                return HoverResult(function_hover(documented), ref.range)

        return HoverResult(reference_hover(record, kind), ref.range)

    def _inline_definition(self, name: str):
        """Inline documentation of an open macro describing UDF ``name``."""
        for artifacts in self.sessions.values():
            documentation = artifacts.documentation
            if documentation.found and documentation.definition.name == name:
                return documentation.definition
        return None

    def complete(self, line_text: str, position: Position) -> List[CompletionCandidate]:
        """Candidates for the word ending at ``position`` on ``line_text``.

        ``line_text`` is the text of the cursor's line; ``position`` uses
        UTF-16 columns.
        """
        line_index = LineIndex(line_text)
        cursor = line_index.offset_at(Position(0, position.character))
        found = word_before(line_text[:cursor])
        if found is None:
            return []

        word, start = found
        replace_range = Range(
            Position(position.line, line_index.position_at(start).character),
            Position(position.line, line_index.position_at(cursor).character),
        )

        candidates = []
        seen = set()
        for record in self.index.search(word):
            seen.add(record.name)
            candidates.append(self._candidate(record.name, record.kind, replace_range))

        folded = word.casefold()
        for name in sorted(self.udfs):
            if name not in seen and name.casefold().startswith(folded):
                candidates.append(self._candidate(name, SymbolKind.FUNCTION, replace_range))
        return candidates

    def _candidate(self, name: str, kind: SymbolKind, replace_range: Range) -> CompletionCandidate:
        detail = None
        definition = self.registry.get(name, kind) if kind != SymbolKind.VARIABLE else None
        if definition is not None:
            detail = f"{definition.name}{definition.signature()}"

        is_function = kind == SymbolKind.FUNCTION
        return CompletionCandidate(
            label=name,
            kind=kind,
            replace_range=replace_range,
            insert_text=f"{name}()" if is_function else name,
            detail=detail,
            cursor_left=is_function,
        )
