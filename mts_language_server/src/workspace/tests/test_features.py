"""
Tests for workspace/features.py - hover text and completion words.
"""

import pytest

from mts_language_server.src.catalog.registry import BuiltinRegistry
from mts_language_server.src.common.source_location import Position, Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.workspace.features import (
    function_hover,
    reference_hover,
    symbol_at,
    word_before,
)
from mts_language_server.src.workspace.symbol_index import (
    DocumentLocation,
    DocumentSymbolRef,
    WorkspaceSymbolRecord,
)

DOC_A = "file:///a.mts"
DOC_B = "file:///b.mts"


@pytest.fixture
def registry():
    return BuiltinRegistry.from_records(
        functions=[
            {
                "name": "between",
                "usages": [{"parameters": {"a": {}, "b": {"type": "number", "description": "Upper."}}}],
            },
            {"name": "roll", "description": "Rolls dice.", "wiki": "roll"},
        ]
    )


class TestFunctionHover:
    def test_empty_descriptions_are_skipped(self, registry):
        assert function_hover(registry.get_function("between")) == (
            "#### **between**( a, b )\n\n**a** `any`\n\n**b** `number` — Upper."
        )

    def test_description_and_wiki(self, registry):
        hover = function_hover(registry.get_function("roll"), "https://example.org/")
        assert hover == "#### **roll**()\n\nRolls dice.\n\n[Wiki](https://example.org/roll)"

    def test_no_wiki_root(self, registry):
        assert "[Wiki]" not in function_hover(registry.get_function("roll"))


class TestReferenceHover:
    @pytest.fixture
    def record(self):
        line = Range.on_line
        return WorkspaceSymbolRecord(
            name="max",
            kind=SymbolKind.FUNCTION,
            builtin=True,
            locations=[
                DocumentLocation(DOC_A, line(0, 4, 3), SymbolKind.VARIABLE),
                DocumentLocation(DOC_A, line(1, 4, 3), SymbolKind.FUNCTION),
                DocumentLocation(DOC_B, line(0, 9, 3), SymbolKind.VARIABLE),
            ],
        )

    def test_counts_every_location(self, record):
        assert reference_hover(record) == "#### **max**\n\nUser-defined function, 3 references in 2 open documents."

    def test_counts_only_the_given_kind(self, record):
        assert reference_hover(record, SymbolKind.FUNCTION) == (
            "#### **max**\n\nUser-defined function, 1 reference in 1 open document."
        )
        assert reference_hover(record, SymbolKind.VARIABLE) == (
            "#### **max**\n\nUser-defined variable, 2 references in 2 open documents."
        )


class TestLookups:
    def test_symbol_at(self):
        record = WorkspaceSymbolRecord(name="x", kind=SymbolKind.VARIABLE)
        refs = [
            DocumentSymbolRef(Range.on_line(0, 4, 1), record),
            DocumentSymbolRef(Range.on_line(0, 10, 1), record),
        ]
        assert symbol_at(refs, Position(0, 10)) is refs[1]
        assert symbol_at(refs, Position(0, 7)) is None
        assert symbol_at(refs, Position(0, 0)) is None

    def test_word_before(self):
        assert word_before("[r: macro.ar") == ("macro.ar", 4)
        assert word_before("[r: ") is None
