"""Hover and completion content built from workspace state."""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from mts_language_server.src.catalog.registry import FunctionDefinition
from mts_language_server.src.common.source_location import Position, Range
from mts_language_server.src.common.symbol_types import SymbolKind

from .symbol_index import DocumentSymbolRef, WorkspaceSymbolRecord

# Names may contain dots, e.g. macro.args
LAST_WORD_RE = re.compile(r"[\w.]+$")

KIND_LABELS = {
    SymbolKind.FUNCTION: "function",
    SymbolKind.ROLL_OPTION: "roll option",
    SymbolKind.VARIABLE: "variable",
}


@dataclass(frozen=True)
class HoverResult:
    """Markdown hover text for the symbol under the cursor."""

    contents: str
    range: Range


@dataclass(frozen=True)
class CompletionCandidate:
    """One completion proposal replacing the word before the cursor."""

    label: str
    kind: SymbolKind
    replace_range: Range
    insert_text: str
    detail: Optional[str] = None
    cursor_left: bool = False


def symbol_at(refs: Sequence[DocumentSymbolRef], position: Position) -> Optional[DocumentSymbolRef]:
    """The last ref starting at or before ``position`` that still covers it.

    ``refs`` must be ordered by range start.
    """
    starts = [ref.range.start for ref in refs]
    index = bisect_right(starts, position)
    if index == 0:
        return None
    ref = refs[index - 1]
    if ref.range.contains(position):
        return ref
    return None


def word_before(line_prefix: str) -> Optional[Tuple[str, int]]:
    """The word ending at the cursor and its code point offset in the line."""
    match = LAST_WORD_RE.search(line_prefix)
    if match is None:
        return None
    return match.group(0), match.start()


def function_hover(definition: FunctionDefinition, wiki_root: Optional[str] = None) -> str:
    """Markdown for a documented function: signature, description, parameters.

    The last usage is the one shown.
    """
    usage = definition.usages[-1] if definition.usages else None
    parameter_lines = ""
    if usage is not None:
        for parameter in usage.parameters:
            parameter_lines += f"\n\n**{parameter.name}** `{parameter.type}`"
            if parameter.description:
                parameter_lines += f" — {parameter.description}"

    value = f"#### **{definition.name}**{definition.signature()}"
    if definition.description:
        value += f"\n\n{definition.description}"
    value += parameter_lines
    if wiki_root and definition.wiki:
        value += f"\n\n[Wiki]({wiki_root.rstrip('/')}/{definition.wiki})"
    return value


def reference_hover(record: WorkspaceSymbolRecord, kind: Optional[SymbolKind] = None) -> str:
    """Markdown for a name known only from workspace references.

    With ``kind`` only the occurrences used as that kind are counted.
    """
    locations = record.locations if kind is None else record.locations_of(kind)
    count = len(locations)
    documents = len({location.uri for location in locations})
    label = KIND_LABELS.get(kind or record.kind, "symbol")
    return (
        f"#### **{record.name}**\n\n"
        f"User-defined {label}, {count} reference{'s' if count != 1 else ''} "
        f"in {documents} open document{'s' if documents != 1 else ''}."
    )
