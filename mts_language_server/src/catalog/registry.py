"""Built-in function and roll option catalog.

Catalog records are plain JSON objects:

    {
        "name": "listGet",
        "aliases": [],
        "usages": [
            {"parameters": {"list": {"type": "string"},
                            "index": {"type": "number"},
                            "delim": {"type": "string", "default": ","}}}
        ],
        "description": "Returns the item at index in a string list.",
        "wiki": "listGet"
    }

Every alias is indexed to the same FunctionDefinition instance as the
primary name. A record without usages is normalized to one usage with no
parameters.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from mts_language_server.src.common.exceptions import SemanticError
from mts_language_server.src.common.symbol_types import SymbolKind

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"
FUNCTIONS_FILE = "functions.json"
ROLL_OPTIONS_FILE = "roll_options.json"

# Upper bound of a variadic usage
UNBOUNDED = math.inf


@dataclass(frozen=True)
class Parameter:
    """One named parameter of a usage signature."""

    name: str
    type: str = "any"
    default: Optional[Any] = None
    description: str = ""
    is_variadic: bool = False

    @property
    def is_required(self) -> bool:
        return self.default is None

    @classmethod
    def from_record(cls, name: str, record: Mapping[str, Any]) -> "Parameter":
        if not isinstance(record, Mapping):
            raise TypeError(f"Parameter '{name}' must be an object, got {type(record).__name__}")
        return cls(
            name=name,
            type=str(record.get("type", "any")),
            default=record.get("default"),
            description=str(record.get("description", "")),
            is_variadic=bool(record.get("isVariadic", record.get("isParamArray", False))),
        )


@dataclass(frozen=True)
class UsageSignature:
    """One accepted call shape (overload) of a callable."""

    parameters: Tuple[Parameter, ...] = ()
    is_trusted: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UsageSignature":
        if not isinstance(record, Mapping):
            raise TypeError(f"Usage must be an object, got {type(record).__name__}")
        parameters = record.get("parameters") or {}
        if not isinstance(parameters, Mapping):
            raise TypeError("Usage parameters must be an object keyed by parameter name")
        return cls(
            parameters=tuple(Parameter.from_record(name, value) for name, value in parameters.items()),
            is_trusted=bool(record.get("isTrusted", False)),
        )

    def signature(self) -> str:
        """Render the parameter list, e.g. ``( list, index, delim )``."""
        if not self.parameters:
            return "()"
        return "( " + ", ".join(parameter.name for parameter in self.parameters) + " )"


@dataclass(frozen=True)
class ArityRange:
    """Inclusive bounds on the number of arguments a callable accepts."""

    minimum: int
    maximum: Union[int, float]

    @property
    def is_bounded(self) -> bool:
        return self.maximum != UNBOUNDED

    def accepts(self, count: int) -> bool:
        return self.minimum <= count <= self.maximum

    def __str__(self) -> str:
        upper = "*" if not self.is_bounded else str(self.maximum)
        return f"{self.minimum}..{upper}"


@dataclass(frozen=True)
class FunctionDefinition:
    """A built-in function or roll option, or an inline-documented UDF."""

    name: str
    aliases: Tuple[str, ...] = ()
    usages: Tuple[UsageSignature, ...] = ()
    description: str = ""
    returns: Optional[str] = None
    notes: Optional[str] = None
    wiki: Optional[str] = None
    is_trusted: bool = False
    kind: SymbolKind = SymbolKind.FUNCTION

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        kind: SymbolKind = SymbolKind.FUNCTION,
        normalize: bool = True,
    ) -> "FunctionDefinition":
        """Build a definition from a catalog record.

        Raises:
            TypeError: If the record or one of its usages is not an object
        """
        if not isinstance(record, Mapping):
            raise TypeError(f"Catalog record must be an object, got {type(record).__name__}")

        raw_usages = record.get("usages")
        if raw_usages is None:
            usages: Tuple[UsageSignature, ...] = (UsageSignature(),) if normalize else ()
        else:
            if not isinstance(raw_usages, list):
                raise TypeError("Catalog usages must be a list")
            usages = tuple(UsageSignature.from_record(usage) for usage in raw_usages)

        aliases = record.get("aliases") or ()
        return cls(
            name=str(record.get("name") or ""),
            aliases=tuple(str(alias) for alias in aliases if alias),
            usages=usages,
            description=str(record.get("description") or ""),
            returns=record.get("returns"),
            notes=record.get("notes"),
            wiki=record.get("wiki"),
            is_trusted=bool(record.get("isTrusted", False)),
            kind=kind,
        )

    @property
    def arity(self) -> ArityRange:
        """Accepted argument counts across all usages."""
        return compute_arity(self)

    @property
    def all_names(self) -> Tuple[str, ...]:
        return (self.name,) + self.aliases

    def signature(self) -> str:
        """Parameter list of the last usage, the one shown on hover."""
        if not self.usages:
            return "()"
        return self.usages[-1].signature()


def usage_arity(usage: UsageSignature) -> Tuple[int, Union[int, float]]:
    """(min, max) argument counts of a single usage.

    Parameters are scanned in declared order; a variadic parameter makes
    the maximum unbounded and ends the scan.
    """
    local_min = 0
    local_max: Union[int, float] = 0
    for parameter in usage.parameters:
        local_max += 1
        if parameter.is_required:
            local_min += 1
        if parameter.is_variadic:
            local_max = UNBOUNDED
            break
    return local_min, local_max


def compute_arity(definition: FunctionDefinition) -> ArityRange:
    """Union of the accepted argument counts of every usage."""
    if not definition.usages:
        return ArityRange(0, 0)

    minimum: Union[int, float] = math.inf
    maximum: Union[int, float] = 0
    for usage in definition.usages:
        if not usage.parameters:
            # A bare call is allowed; the maximum is left alone.
            minimum = 0
            continue

        local_min, local_max = usage_arity(usage)
        minimum = min(minimum, local_min)
        maximum = max(maximum, local_max)

    return ArityRange(int(minimum), maximum)


class BuiltinRegistry:
    """Built-in functions and roll options indexed by name and alias.

    Function names are case-sensitive; roll options are matched without
    regard to case.
    """

    def __init__(self) -> None:
        self._functions: Dict[str, FunctionDefinition] = {}
        self._roll_options: Dict[str, FunctionDefinition] = {}

    @classmethod
    def from_records(
        cls,
        functions: Iterable[Mapping[str, Any]] = (),
        roll_options: Iterable[Mapping[str, Any]] = (),
    ) -> "BuiltinRegistry":
        """Build a registry from in-memory catalog records."""
        registry = cls()
        for record in functions:
            registry._register_record(record, SymbolKind.FUNCTION)
        for record in roll_options:
            registry._register_record(record, SymbolKind.ROLL_OPTION)
        logger.debug(
            "Loaded %d functions and %d roll options",
            len(registry.functions()),
            len(registry.roll_options()),
        )
        return registry

    @classmethod
    def load_default(cls, data_dir: Optional[Path] = None) -> "BuiltinRegistry":
        """Load the catalogs shipped with the package."""
        data_dir = data_dir or DEFAULT_DATA_DIR
        functions = _load_catalog(data_dir / FUNCTIONS_FILE)
        roll_options = _load_catalog(data_dir / ROLL_OPTIONS_FILE)
        return cls.from_records(functions, roll_options)

    def _register_record(self, record: Mapping[str, Any], kind: SymbolKind) -> None:
        if not record.get("name"):
            logger.debug("Skipping catalog record without a name")
            return
        self.register(FunctionDefinition.from_record(record, kind))

    def register(self, definition: FunctionDefinition) -> None:
        """Index a definition by its name and every alias."""
        if not definition.name:
            raise SemanticError("Cannot register a definition without a name")

        if definition.kind == SymbolKind.ROLL_OPTION:
            for name in definition.all_names:
                self._roll_options[name.lower()] = definition
        else:
            for name in definition.all_names:
                self._functions[name] = definition

    def get_function(self, name: str) -> Optional[FunctionDefinition]:
        return self._functions.get(name)

    def get_roll_option(self, name: str) -> Optional[FunctionDefinition]:
        return self._roll_options.get(name.lower())

    def get(self, name: str, kind: Optional[SymbolKind] = None) -> Optional[FunctionDefinition]:
        """Look a name up, preferring the catalog matching ``kind``."""
        if kind == SymbolKind.ROLL_OPTION:
            return self.get_roll_option(name) or self.get_function(name)
        return self.get_function(name) or self.get_roll_option(name)

    def functions(self) -> List[FunctionDefinition]:
        """Unique function definitions in catalog order."""
        return _unique(self._functions.values())

    def roll_options(self) -> List[FunctionDefinition]:
        """Unique roll option definitions in catalog order."""
        return _unique(self._roll_options.values())

    def names(self) -> Iterator[str]:
        """Every primary name and alias, functions first."""
        for definition in self.functions():
            yield from definition.all_names
        for definition in self.roll_options():
            yield from definition.all_names

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        return len(self.functions()) + len(self.roll_options())


def _unique(definitions: Iterable[FunctionDefinition]) -> List[FunctionDefinition]:
    seen = set()
    result = []
    for definition in definitions:
        if id(definition) in seen:
            continue
        seen.add(id(definition))
        result.append(definition)
    return result


def _load_catalog(path: Path) -> List[Mapping[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            records = json.load(handle)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Catalog file not found: {path}") from exc

    if not isinstance(records, list):
        raise ValueError(f"Catalog {path} must contain a list of records")
    return records
