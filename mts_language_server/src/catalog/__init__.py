"""Built-in catalog and inline documentation for MapTool macros."""

from .registry import (
    UNBOUNDED,
    ArityRange,
    BuiltinRegistry,
    FunctionDefinition,
    Parameter,
    UsageSignature,
    compute_arity,
    usage_arity,
)
from .inline_docs import (
    NO_DOCUMENTATION,
    DocStatus,
    InlineDocumentation,
    extract_documentation,
)

__all__ = [
    "UNBOUNDED",
    "ArityRange",
    "BuiltinRegistry",
    "FunctionDefinition",
    "Parameter",
    "UsageSignature",
    "compute_arity",
    "usage_arity",
    "NO_DOCUMENTATION",
    "DocStatus",
    "InlineDocumentation",
    "extract_documentation",
]
