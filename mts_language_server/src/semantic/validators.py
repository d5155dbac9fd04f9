"""Diagnostics derived from an analysis: call arity and variable ordering."""

import logging
import math
from typing import Iterable, List, Optional, Sequence

from mts_language_server.src.catalog.registry import BuiltinRegistry
from mts_language_server.src.common.constants import DEFAULT_SETTINGS, SOURCE_MTS, MTSSettings
from mts_language_server.src.common.diagnostics import Diagnostic, DiagnosticSeverity
from mts_language_server.src.common.source_location import LineIndex
from mts_language_server.src.common.symbol_types import SymbolKind

from .analyzer import FoundSymbol
from .variables import VariableMap

logger = logging.getLogger(__name__)


class DiagnosticSynthesizer:
    """Cross-references an analysis against the built-in registry.

    Call arity is checked only for names that resolve to a built-in
    function; anything else is assumed to be user defined.
    """

    def __init__(self, registry: BuiltinRegistry) -> None:
        self.registry = registry

    def check_calls(self, symbols: Iterable[FoundSymbol]) -> List[Diagnostic]:
        """Errors for built-in calls with too few or too many arguments."""
        diagnostics = []
        for symbol in symbols:
            diagnostic = self.check_call(symbol)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
        return diagnostics

    def check_call(self, symbol: FoundSymbol) -> Optional[Diagnostic]:
        if symbol.kind != SymbolKind.FUNCTION or symbol.arg_count is None:
            return None

        definition = self.registry.get_function(symbol.name)
        if definition is None:
            return None

        arity = definition.arity
        if symbol.arg_count < arity.minimum:
            message = f"Built-in function '{definition.name}' requires at least {arity.minimum} arguments."
        elif arity.is_bounded and symbol.arg_count > arity.maximum:
            message = f"Built-in function '{definition.name}' requires at most {arity.maximum} arguments."
        else:
            return None

        return Diagnostic(DiagnosticSeverity.ERROR, message, symbol.range, SOURCE_MTS)

    def check_variables(
        self,
        variables: VariableMap,
        line_index: LineIndex,
        max_problems: int,
        existing: int = 0,
    ) -> List[Diagnostic]:
        """Warnings for variables read before their first assignment.

        The running count starts at ``existing``; scanning stops for good
        once it exceeds ``max_problems``.
        """
        diagnostics: List[Diagnostic] = []
        problems = existing

        for name, usage in variables.items():
            if problems > max_problems:
                break

            first_set = usage.first_set()
            if first_set is None:
                first_set = math.inf

            for get in usage.gets:
                if problems > max_problems:
                    break
                if get.position < first_set:
                    diagnostics.append(
                        Diagnostic(
                            DiagnosticSeverity.WARNING,
                            f"{name} is not yet assigned.",
                            line_index.range_of(get.position, get.position + get.length),
                            SOURCE_MTS,
                        )
                    )
                    problems += 1

        if problems > max_problems:
            logger.debug("Stopped variable checks at %d problems (limit %d)", problems, max_problems)
        return diagnostics

    def synthesize(
        self,
        symbols: Sequence[FoundSymbol],
        variables: VariableMap,
        structural: Sequence[Diagnostic],
        line_index: LineIndex,
        settings: MTSSettings = DEFAULT_SETTINGS,
    ) -> List[Diagnostic]:
        """All diagnostics of a document: structural, call arity, then
        capped variable ordering."""
        diagnostics = list(structural)
        diagnostics.extend(self.check_calls(symbols))
        diagnostics.extend(
            self.check_variables(
                variables,
                line_index,
                settings.max_number_of_problems,
                existing=len(diagnostics),
            )
        )
        return diagnostics
