"""
Tests for workspace/symbol_index.py - shared symbol records and prefix search.
"""

import pytest

from mts_language_server.src.catalog.registry import BuiltinRegistry
from mts_language_server.src.common.source_location import Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.semantic.analyzer import FoundSymbol
from mts_language_server.src.workspace.symbol_index import (
    DocumentLocation,
    PrefixIndex,
    WorkspaceSymbolIndex,
    WorkspaceSymbolRecord,
)

DOC_A = "file:///a.mts"
DOC_B = "file:///b.mts"


def found(name, line=0, character=0, kind=SymbolKind.VARIABLE, arg_count=None):
    return FoundSymbol(name, kind, Range.on_line(line, character, len(name)), arg_count)


def names(records):
    return [record.name for record in records]


@pytest.fixture
def index():
    registry = BuiltinRegistry.from_records(
        functions=[{"name": "max", "aliases": ["maximum"]}],
        roll_options=[{"name": "hidden", "aliases": ["h"]}, {"name": "max"}],
    )
    index = WorkspaceSymbolIndex()
    index.seed_builtins(registry)
    return index


class TestSeeding:
    def test_every_name_and_alias_is_seeded(self, index):
        assert len(index) == 4
        for name in ("max", "maximum", "hidden", "h"):
            record = index.get(name)
            assert record.builtin
            assert record.locations == []

    def test_functions_win_over_roll_options(self, index):
        assert index.get("max").kind == SymbolKind.FUNCTION
        assert index.get("h").kind == SymbolKind.ROLL_OPTION


class TestUpdateDocument:
    """Tests for merging a document's found symbols."""

    def test_creates_records(self, index):
        refs = index.update_document(DOC_A, [], [found("bar", 0, 4), found("foo", 0, 1)])

        assert [ref.name for ref in refs] == ["foo", "bar"]
        record = index.get("bar")
        assert not record.builtin
        assert record.locations == [DocumentLocation(DOC_A, Range.on_line(0, 4, 3))]

    def test_refs_carry_arg_counts(self, index):
        refs = index.update_document(DOC_A, [], [found("max", kind=SymbolKind.FUNCTION, arg_count=2)])
        assert refs[0].arg_count == 2
        assert refs[0].record is index.get("max")

    def test_variable_sharing_a_builtin_name(self, index):
        """Occurrences keep their own kind inside the shared record."""
        refs = index.update_document(
            DOC_A, [], [found("max", 0, 4), found("max", 0, 9, kind=SymbolKind.FUNCTION, arg_count=1)]
        )

        record = index.get("max")
        assert record.kind == SymbolKind.FUNCTION
        assert [ref.kind for ref in refs] == [SymbolKind.VARIABLE, SymbolKind.FUNCTION]
        assert [location.range.start.character for location in record.locations_of(SymbolKind.VARIABLE)] == [4]
        assert len(record.locations_of(SymbolKind.FUNCTION)) == 1

    def test_reanalysis_supersedes_previous_locations(self, index):
        first = index.update_document(DOC_A, [], [found("bar", 0, 1), found("max", 0, 8)])
        index.update_document(DOC_A, first, [found("bar", 2, 0)])

        assert index.get("bar").locations == [DocumentLocation(DOC_A, Range.on_line(2, 0, 3))]
        assert index.get("max").locations == []

    def test_dropped_names_are_deleted(self, index):
        first = index.update_document(DOC_A, [], [found("bar")])
        index.update_document(DOC_A, first, [found("baz")])

        assert "bar" not in index
        assert names(index.search("ba")) == ["baz"]

    def test_locations_ordered_by_document_then_position(self, index):
        index.update_document(DOC_B, [], [found("x", 0, 5)])
        index.update_document(DOC_A, [], [found("x", 3, 0), found("x", 1, 2)])

        locations = index.get("x").locations
        assert [(location.uri, location.range.start.line) for location in locations] == [
            (DOC_A, 1),
            (DOC_A, 3),
            (DOC_B, 0),
        ]


class TestRemoveDocument:
    """Tests for withdrawing a closed document."""

    def test_closed_symbol_not_found_by_prefix(self, index):
        refs = index.update_document(DOC_A, [], [found("bar")])
        assert "bar" in names(index.search("ba"))

        index.remove_document(DOC_A, refs)

        assert "bar" not in names(index.search("ba"))
        assert index.get("bar") is None

    def test_shared_record_survives(self, index):
        refs_a = index.update_document(DOC_A, [], [found("bar")])
        index.update_document(DOC_B, [], [found("bar", 1, 1)])

        index.remove_document(DOC_A, refs_a)

        assert [location.uri for location in index.get("bar").locations] == [DOC_B]

    def test_builtins_survive_with_no_references(self, index):
        refs = index.update_document(DOC_A, [], [found("max", kind=SymbolKind.FUNCTION, arg_count=1)])
        index.remove_document(DOC_A, refs)

        assert index.get("max").builtin
        assert names(index.search("max")) == ["max", "maximum"]


class TestPrefixIndex:
    def test_case_insensitive(self):
        prefix_index = PrefixIndex()
        prefix_index.add_all(
            [
                WorkspaceSymbolRecord("getName", SymbolKind.FUNCTION),
                WorkspaceSymbolRecord("getBar", SymbolKind.FUNCTION),
                WorkspaceSymbolRecord("gm", SymbolKind.ROLL_OPTION),
            ]
        )

        assert names(prefix_index.search("GET")) == ["getBar", "getName"]
        assert names(prefix_index.search("g")) == ["getBar", "getName", "gm"]
        assert prefix_index.search("x") == []

    def test_empty_prefix(self, index):
        assert index.search("") == []

    def test_reset(self):
        prefix_index = PrefixIndex()
        prefix_index.add_all([WorkspaceSymbolRecord("abs", SymbolKind.FUNCTION)])
        prefix_index.reset()
        assert len(prefix_index) == 0
