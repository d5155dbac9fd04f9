"""Common utilities shared across analysis stages."""

from .diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
    DocumentDiagnostics,
    format_diagnostic,
    format_diagnostics,
)
from .exceptions import SemanticError
from .source_location import LineIndex, Position, Range, utf16_length
from .symbol_types import SymbolKind
from .constants import *

__all__ = [
    "Diagnostic",
    "DiagnosticSeverity",
    "DocumentDiagnostics",
    "format_diagnostic",
    "format_diagnostics",
    "SemanticError",
    "LineIndex",
    "Position",
    "Range",
    "utf16_length",
    "SymbolKind",
    # Constants
    "MTS_LANGUAGE_ID",
    "CONFIGURATION_SECTION",
    "MACRO_ARGS",
    "MACRO_ARGS_SET_OFFSET",
    "SOURCE_MTS",
    "SOURCE_FOR_LOOP",
    "SOURCE_FOREACH_LOOP",
    "SOURCE_OPTION",
    "SOURCE_SYNTAX",
    "LOOP_ARITY",
    "DEFINE_FUNCTION",
    "MTSSettings",
    "DEFAULT_SETTINGS",
]
