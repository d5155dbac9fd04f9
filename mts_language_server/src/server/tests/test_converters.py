"""
Tests for server/converters.py - core to lsprotocol conversions.
"""

from lsprotocol import types as lsp

from mts_language_server.src.common.diagnostics import Diagnostic, DiagnosticSeverity
from mts_language_server.src.common.source_location import Position, Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.server.converters import (
    CURSOR_LEFT_COMMAND,
    completion_item_kind,
    from_lsp_position,
    to_lsp_completion_item,
    to_lsp_diagnostic,
    to_lsp_hover,
    to_lsp_range,
)
from mts_language_server.src.workspace.features import CompletionCandidate, HoverResult


class TestPositions:
    def test_range(self):
        converted = to_lsp_range(Range(Position(1, 2), Position(1, 5)))
        assert converted == lsp.Range(
            start=lsp.Position(line=1, character=2),
            end=lsp.Position(line=1, character=5),
        )

    def test_from_lsp(self):
        assert from_lsp_position(lsp.Position(line=3, character=7)) == Position(3, 7)


class TestDiagnostics:
    def test_warning(self):
        diagnostic = Diagnostic(DiagnosticSeverity.WARNING, "x is not yet assigned.", Range.on_line(0, 4, 1))

        converted = to_lsp_diagnostic(diagnostic)

        assert converted.severity == lsp.DiagnosticSeverity.Warning
        assert converted.message == "x is not yet assigned."
        assert converted.source == "mts"
        assert converted.range.end.character == 5

    def test_error_source_kept(self):
        diagnostic = Diagnostic(DiagnosticSeverity.ERROR, "bad", Range.on_line(0, 0, 1), "mts:for_loop")
        converted = to_lsp_diagnostic(diagnostic)
        assert converted.severity == lsp.DiagnosticSeverity.Error
        assert converted.source == "mts:for_loop"


class TestCompletion:
    def test_kinds(self):
        assert completion_item_kind(SymbolKind.FUNCTION) == lsp.CompletionItemKind.Function
        assert completion_item_kind(SymbolKind.ROLL_OPTION) == lsp.CompletionItemKind.Keyword
        assert completion_item_kind(SymbolKind.VARIABLE) == lsp.CompletionItemKind.Variable
        assert completion_item_kind(SymbolKind.UNKNOWN) == lsp.CompletionItemKind.Text

    def test_function_item(self):
        candidate = CompletionCandidate(
            label="abs",
            kind=SymbolKind.FUNCTION,
            replace_range=Range.on_line(0, 4, 2),
            insert_text="abs()",
            detail="abs( value )",
            cursor_left=True,
        )

        item = to_lsp_completion_item(candidate)

        assert item.label == "abs"
        assert item.detail == "abs( value )"
        assert item.text_edit.new_text == "abs()"
        assert item.text_edit.range == to_lsp_range(Range.on_line(0, 4, 2))
        assert item.command == CURSOR_LEFT_COMMAND

    def test_variable_item_has_no_command(self):
        candidate = CompletionCandidate("hp", SymbolKind.VARIABLE, Range.on_line(0, 0, 1), "hp")
        assert to_lsp_completion_item(candidate).command is None


class TestHover:
    def test_markdown(self):
        hover = to_lsp_hover(HoverResult("#### **abs**( value )", Range.on_line(0, 4, 3)))
        assert hover.contents.kind == lsp.MarkupKind.Markdown
        assert hover.contents.value == "#### **abs**( value )"
        assert hover.range.start == lsp.Position(line=0, character=4)
