from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mts_language_server.src.common.constants import MACRO_ARGS, MACRO_ARGS_SET_OFFSET

"""Variable def-use bookkeeping for one document."""


@dataclass(frozen=True)
class VariableGet:
    """A read of a variable at a code point offset."""

    position: int
    length: int


@dataclass
class VariableUsage:
    """Ordered set offsets and get events of one variable."""

    sets: List[int] = field(default_factory=list)
    gets: List[VariableGet] = field(default_factory=list)

    def first_set(self) -> Optional[int]:
        return min(self.sets) if self.sets else None


VariableMap = Dict[str, VariableUsage]


def new_variable_map() -> VariableMap:
    """A usage map where ``macro.args`` is already assigned."""
    variables: VariableMap = {}
    add_set(variables, MACRO_ARGS, MACRO_ARGS_SET_OFFSET)
    return variables


def add_set(variables: VariableMap, name: str, position: int) -> None:
    variables.setdefault(name, VariableUsage()).sets.append(position)


def add_get(variables: VariableMap, name: str, position: int, length: int) -> None:
    variables.setdefault(name, VariableUsage()).gets.append(VariableGet(position, length))
