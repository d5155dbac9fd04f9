"""Shared constants and settings across the language server."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

# Only documents tagged with this language id are analyzed
MTS_LANGUAGE_ID = "mts"

# Client configuration section holding MTSSettings
CONFIGURATION_SECTION = "mapToolScriptServer"

# Always assigned, either by the calling macro or defaulting to ""
MACRO_ARGS = "macro.args"
MACRO_ARGS_SET_OFFSET = -1

# Diagnostic sources
SOURCE_MTS = "mts"
SOURCE_FOR_LOOP = "mts:for_loop"
SOURCE_FOREACH_LOOP = "mts:foreach_loop"
SOURCE_OPTION = "mts:option"
SOURCE_SYNTAX = "mts:syntax"

# Accepted argument counts of loop roll options, declaration included
LOOP_ARITY = {
    "for": (3, 5),
    "foreach": (3, 4),
}

# Built-in that registers a user-defined function by name
DEFINE_FUNCTION = "defineFunction"


@dataclass(frozen=True)
class MTSSettings:
    """Per-document server settings."""

    max_number_of_problems: int = 1000
    wiki_uri_root: str = "https://wiki.rptools.info/index.php"

    @classmethod
    def from_dict(
        cls, data: Optional[Mapping[str, Any]], fallback: Optional["MTSSettings"] = None
    ) -> "MTSSettings":
        """Build settings from the client's camelCase configuration section.

        Missing or malformed values fall back to ``fallback`` (or defaults).
        """
        base = fallback or DEFAULT_SETTINGS
        if not isinstance(data, Mapping):
            return base

        max_problems = data.get("maxNumberOfProblems", base.max_number_of_problems)
        try:
            max_problems = int(max_problems)
        except (TypeError, ValueError):
            max_problems = base.max_number_of_problems

        wiki_root = data.get("wikiUriRoot", base.wiki_uri_root)
        if not isinstance(wiki_root, str):
            wiki_root = base.wiki_uri_root

        return cls(max_number_of_problems=max_problems, wiki_uri_root=wiki_root)


DEFAULT_SETTINGS = MTSSettings()
