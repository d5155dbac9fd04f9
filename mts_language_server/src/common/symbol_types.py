from enum import Enum

"""Kinds of symbols tracked across the workspace."""


class SymbolKind(Enum):
    """Symbol kinds found in macro documents."""

    UNKNOWN = 0
    FUNCTION = 1
    ROLL_OPTION = 2
    VARIABLE = 3
