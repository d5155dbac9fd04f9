"""Editor protocol surface of the language server."""

from .converters import (
    completion_item_kind,
    from_lsp_position,
    to_lsp_completion_item,
    to_lsp_diagnostic,
    to_lsp_diagnostics,
    to_lsp_hover,
    to_lsp_position,
    to_lsp_range,
)
from .server import MTSLanguageServer, create_server

__all__ = [
    "completion_item_kind",
    "from_lsp_position",
    "to_lsp_completion_item",
    "to_lsp_diagnostic",
    "to_lsp_diagnostics",
    "to_lsp_hover",
    "to_lsp_position",
    "to_lsp_range",
    "MTSLanguageServer",
    "create_server",
]
