from .analyzer import AnalysisResult, DocumentAnalyzer, FoundSymbol
from .tokens import (
    TOKEN_LEGEND,
    TOKEN_MODIFIERS,
    SemanticToken,
    SemanticTokensBuilder,
    TokenType,
    decode_tokens,
)
from .validators import DiagnosticSynthesizer
from .variables import VariableGet, VariableMap, VariableUsage, add_get, add_set, new_variable_map

"""Semantic analysis module for MapTool macro scripts."""

__all__ = [
    "AnalysisResult",
    "DocumentAnalyzer",
    "FoundSymbol",
    "TOKEN_LEGEND",
    "TOKEN_MODIFIERS",
    "SemanticToken",
    "SemanticTokensBuilder",
    "TokenType",
    "decode_tokens",
    "DiagnosticSynthesizer",
    "VariableGet",
    "VariableMap",
    "VariableUsage",
    "add_get",
    "add_set",
    "new_variable_map",
]
