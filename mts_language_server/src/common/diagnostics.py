from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .source_location import Range

"""Diagnostic collection shared by the analysis stages."""


class DiagnosticSeverity(IntEnum):
    """Severity levels, numbered like the editor protocol numbers them."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found in a document."""

    severity: DiagnosticSeverity
    message: str
    range: Range
    source: str = "mts"


class DocumentDiagnostics:
    """Diagnostic collection for one analysis of one document.

    Usage:
        diagnostics = DocumentDiagnostics()
        diagnostics.error("Bad loop", node_range, source="mts:for_loop")
        if diagnostics.has_errors():
            print(diagnostics.format_for_user())
    """

    def __init__(self, default_source: str = "mts") -> None:
        self.diagnostics: List[Diagnostic] = []
        self.default_source = default_source
        self._error_count = 0
        self._warning_count = 0

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def info(self, message: str, range: Range, source: Optional[str] = None) -> None:
        """Add an informational message."""
        self.add(Diagnostic(DiagnosticSeverity.INFORMATION, message, range, source or self.default_source))

    def warning(self, message: str, range: Range, source: Optional[str] = None) -> None:
        """Add a warning."""
        self.add(Diagnostic(DiagnosticSeverity.WARNING, message, range, source or self.default_source))

    def error(self, message: str, range: Range, source: Optional[str] = None) -> None:
        """Add an error."""
        self.add(Diagnostic(DiagnosticSeverity.ERROR, message, range, source or self.default_source))

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == DiagnosticSeverity.ERROR:
            self._error_count += 1
        elif diagnostic.severity == DiagnosticSeverity.WARNING:
            self._warning_count += 1

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        return self._error_count

    def warning_count(self) -> int:
        return self._warning_count

    def get_messages(
        self,
        min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING,
        source_file: Optional[str] = None,
    ) -> List[str]:
        """Formatted messages at or above the given severity."""
        return format_diagnostics(self.diagnostics, min_severity, source_file)

    def format_for_user(self, source_file: Optional[str] = None) -> str:
        """Format all diagnostics for terminal output."""
        if not self.diagnostics:
            return "No diagnostics."

        messages = self.get_messages(DiagnosticSeverity.HINT, source_file)
        summary = f"\nSummary: {self._error_count} error(s), {self._warning_count} warning(s)"
        return "\n".join(messages) + summary


def format_diagnostic(diag: Diagnostic, source_file: Optional[str] = None) -> str:
    """Format: SEVERITY [file:line:col]: message"""
    location_parts = []
    if source_file:
        location_parts.append(Path(source_file).name)
    location_parts.append(str(diag.range.start))
    location = ":".join(location_parts)
    return f"{diag.severity.name} [{location}]: {diag.message}"


def format_diagnostics(
    diagnostics: Iterable[Diagnostic],
    min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING,
    source_file: Optional[str] = None,
) -> List[str]:
    # Lower numbers are more severe.
    return [
        format_diagnostic(diag, source_file)
        for diag in diagnostics
        if diag.severity <= min_severity
    ]
