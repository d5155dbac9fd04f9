"""Conversions between core types and lsprotocol wire types."""

from typing import Iterable, List

from lsprotocol import types as lsp

from mts_language_server.src.common.diagnostics import Diagnostic, DiagnosticSeverity
from mts_language_server.src.common.source_location import Position, Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.workspace.features import CompletionCandidate, HoverResult

# Editor command that moves the cursor between the inserted parentheses
CURSOR_LEFT_COMMAND = lsp.Command(title="cursorLeft", command="cursorLeft")

SEVERITIES = {
    DiagnosticSeverity.ERROR: lsp.DiagnosticSeverity.Error,
    DiagnosticSeverity.WARNING: lsp.DiagnosticSeverity.Warning,
    DiagnosticSeverity.INFORMATION: lsp.DiagnosticSeverity.Information,
    DiagnosticSeverity.HINT: lsp.DiagnosticSeverity.Hint,
}

COMPLETION_KINDS = {
    SymbolKind.FUNCTION: lsp.CompletionItemKind.Function,
    SymbolKind.ROLL_OPTION: lsp.CompletionItemKind.Keyword,
    SymbolKind.VARIABLE: lsp.CompletionItemKind.Variable,
}


def to_lsp_position(position: Position) -> lsp.Position:
    return lsp.Position(line=position.line, character=position.character)


def from_lsp_position(position: lsp.Position) -> Position:
    return Position(position.line, position.character)


def to_lsp_range(range_: Range) -> lsp.Range:
    return lsp.Range(start=to_lsp_position(range_.start), end=to_lsp_position(range_.end))


def to_lsp_diagnostic(diagnostic: Diagnostic) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=to_lsp_range(diagnostic.range),
        message=diagnostic.message,
        severity=SEVERITIES[diagnostic.severity],
        source=diagnostic.source,
    )


def to_lsp_diagnostics(diagnostics: Iterable[Diagnostic]) -> List[lsp.Diagnostic]:
    return [to_lsp_diagnostic(diagnostic) for diagnostic in diagnostics]


def completion_item_kind(kind: SymbolKind) -> lsp.CompletionItemKind:
    return COMPLETION_KINDS.get(kind, lsp.CompletionItemKind.Text)


def to_lsp_completion_item(candidate: CompletionCandidate) -> lsp.CompletionItem:
    return lsp.CompletionItem(
        label=candidate.label,
        kind=completion_item_kind(candidate.kind),
        detail=candidate.detail,
        text_edit=lsp.TextEdit(range=to_lsp_range(candidate.replace_range), new_text=candidate.insert_text),
        command=CURSOR_LEFT_COMMAND if candidate.cursor_left else None,
    )


def to_lsp_hover(hover: HoverResult) -> lsp.Hover:
    return lsp.Hover(
        contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=hover.contents),
        range=to_lsp_range(hover.range),
    )
