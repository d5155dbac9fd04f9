"""Workspace-wide symbol records and prefix search.

Every open document contributes the symbols its latest analysis found.
Records are shared: a document only holds DocumentSymbolRef pointers into
them, together with its own call's argument count. Re-analysing a document
replaces all of its earlier contributions; closing it withdraws them.
Built-in records are seeded once and survive with zero locations.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from mts_language_server.src.catalog.registry import BuiltinRegistry
from mts_language_server.src.common.source_location import Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.semantic.analyzer import FoundSymbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentLocation:
    """One occurrence of a symbol in an open document."""

    uri: str
    range: Range
    kind: SymbolKind = field(default=SymbolKind.UNKNOWN, compare=False)


@dataclass(eq=False)
class WorkspaceSymbolRecord:
    """All occurrences of one name across the workspace.

    ``locations`` stays ordered by (uri, start position).
    """

    name: str
    kind: SymbolKind
    builtin: bool = False
    locations: List[DocumentLocation] = field(default_factory=list)

    def locations_in(self, uri: str) -> List[DocumentLocation]:
        return [location for location in self.locations if location.uri == uri]

    def locations_of(self, kind: SymbolKind) -> List[DocumentLocation]:
        """Occurrences used as ``kind``; a variable may share a built-in's name."""
        return [location for location in self.locations if location.kind == kind]

    @property
    def document_count(self) -> int:
        return len({location.uri for location in self.locations})


@dataclass(frozen=True)
class DocumentSymbolRef:
    """A document's pointer into a shared record."""

    range: Range
    record: WorkspaceSymbolRecord
    arg_count: Optional[int] = None
    kind: SymbolKind = SymbolKind.UNKNOWN

    @property
    def name(self) -> str:
        return self.record.name


def _location_key(location: DocumentLocation):
    return (location.uri, location.range.start)


class PrefixIndex:
    """Case-insensitive prefix search over record names.

    Keys are kept sorted so a search is a bisect plus a scan of the
    matching run.
    """

    def __init__(self) -> None:
        self._keys: List[Tuple[str, str]] = []
        self._records: Dict[str, WorkspaceSymbolRecord] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def reset(self) -> None:
        self._keys = []
        self._records = {}

    def add_all(self, records: Iterable[WorkspaceSymbolRecord]) -> None:
        for record in records:
            self._records[record.name] = record
        self._keys = sorted((name.casefold(), name) for name in self._records)

    def search(self, prefix: str) -> List[WorkspaceSymbolRecord]:
        """Records whose name starts with ``prefix``, in name order."""
        if not prefix:
            return []

        folded = prefix.casefold()
        start = bisect_left(self._keys, (folded, ""))
        matches = []
        for key, name in self._keys[start:]:
            if not key.startswith(folded):
                break
            matches.append(self._records[name])
        return matches


class WorkspaceSymbolIndex:
    """Name to record map shared by all open documents."""

    def __init__(self) -> None:
        self.records: Dict[str, WorkspaceSymbolRecord] = {}
        self.prefix_index = PrefixIndex()

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, name: str) -> bool:
        return name in self.records

    def __iter__(self) -> Iterator[WorkspaceSymbolRecord]:
        return iter(self.records.values())

    def get(self, name: str) -> Optional[WorkspaceSymbolRecord]:
        return self.records.get(name)

    def seed_builtins(self, registry: BuiltinRegistry) -> None:
        """Create a builtin record for every catalog name and alias.

        Functions are seeded first; a roll option never replaces a
        function of the same name.
        """
        for definition in registry.functions():
            for name in definition.all_names:
                self._seed(name, SymbolKind.FUNCTION)
        for definition in registry.roll_options():
            for name in definition.all_names:
                if name not in self.records:
                    self._seed(name, SymbolKind.ROLL_OPTION)

        self.rebuild()
        logger.debug("Seeded %d built-in symbols", len(self.records))

    def _seed(self, name: str, kind: SymbolKind) -> None:
        self.records[name] = WorkspaceSymbolRecord(name=name, kind=kind, builtin=True)

    def update_document(
        self,
        uri: str,
        previous_refs: Sequence[DocumentSymbolRef],
        found: Iterable[FoundSymbol],
    ) -> List[DocumentSymbolRef]:
        """Replace ``uri``'s contributions with the symbols just found.

        Returns:
            The document's new refs, ordered by range start
        """
        self._withdraw(uri, previous_refs)

        refs = []
        touched: Dict[str, WorkspaceSymbolRecord] = {}
        for symbol in found:
            location = DocumentLocation(uri, symbol.range, symbol.kind)
            record = self.records.get(symbol.name)
            if record is None:
                record = WorkspaceSymbolRecord(name=symbol.name, kind=symbol.kind, locations=[location])
                self.records[symbol.name] = record
            else:
                record.locations.append(location)
            touched[record.name] = record
            refs.append(DocumentSymbolRef(symbol.range, record, symbol.arg_count, symbol.kind))

        for record in touched.values():
            record.locations.sort(key=_location_key)

        self.rebuild()
        return sorted(refs, key=lambda ref: ref.range.start)

    def remove_document(self, uri: str, previous_refs: Sequence[DocumentSymbolRef]) -> None:
        """Withdraw every contribution of a closed document."""
        self._withdraw(uri, previous_refs)
        self.rebuild()

    def _withdraw(self, uri: str, previous_refs: Sequence[DocumentSymbolRef]) -> None:
        records = {ref.record.name: ref.record for ref in previous_refs}
        for name, record in records.items():
            record.locations = [location for location in record.locations if location.uri != uri]
            if record.builtin or record.locations:
                continue
            if self.records.get(name) is record:
                del self.records[name]

    def rebuild(self) -> None:
        """Reset the prefix index and bulk insert every current record."""
        self.prefix_index.reset()
        self.prefix_index.add_all(self.records.values())

    def search(self, prefix: str) -> List[WorkspaceSymbolRecord]:
        return self.prefix_index.search(prefix)
