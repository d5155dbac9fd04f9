"""Single-pass document analysis for MapTool macro scripts."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from mts_language_server.src.ast.base import ASTNode, ASTVisitor
from mts_language_server.src.ast.expressions import (
    BinaryOp,
    CallExpr,
    ParenExpr,
    UnaryOp,
    VariableRef,
)
from mts_language_server.src.ast.literals import (
    BooleanLiteral,
    DiceLiteral,
    NumberLiteral,
    StringLiteral,
)
from mts_language_server.src.ast.statements import (
    Assignment,
    Block,
    Branches,
    DefaultCase,
    ForOption,
    FunctionOption,
    InvalidOption,
    Macro,
    RollOption,
    Script,
    SwitchBody,
    SwitchCase,
    TextChunk,
)
from mts_language_server.src.catalog.inline_docs import (
    NO_DOCUMENTATION,
    InlineDocumentation,
    extract_documentation,
)
from mts_language_server.src.common.constants import (
    DEFINE_FUNCTION,
    LOOP_ARITY,
    SOURCE_FOR_LOOP,
    SOURCE_FOREACH_LOOP,
    SOURCE_OPTION,
)
from mts_language_server.src.common.diagnostics import Diagnostic, DocumentDiagnostics
from mts_language_server.src.common.source_location import LineIndex, Range
from mts_language_server.src.common.symbol_types import SymbolKind

from .tokens import SemanticTokensBuilder, TokenType
from .variables import VariableMap, add_get, add_set, new_variable_map

logger = logging.getLogger(__name__)

LOOP_SOURCES = {
    "for": SOURCE_FOR_LOOP,
    "foreach": SOURCE_FOREACH_LOOP,
}


@dataclass(frozen=True)
class FoundSymbol:
    """One symbol occurrence discovered while walking a document.

    ``arg_count`` is the number of supplied arguments for calls and roll
    options, None for variables.
    """

    name: str
    kind: SymbolKind
    range: Range
    arg_count: Optional[int] = None


@dataclass
class AnalysisResult:
    """Everything one analysis pass derives from a document."""

    tokens: List[int] = field(default_factory=list)
    symbols: List[FoundSymbol] = field(default_factory=list)
    variables: VariableMap = field(default_factory=new_variable_map)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)
    documentation: InlineDocumentation = NO_DOCUMENTATION


class DocumentAnalyzer(ASTVisitor):
    """Walks a macro tree once, collecting tokens, symbols, variables and
    structural diagnostics.

    The analyzer never mutates the tree. Create one analyzer per pass.
    """

    def __init__(self, text: str, line_index: Optional[LineIndex] = None) -> None:
        self.text = text
        self.line_index = line_index or LineIndex(text)
        self.builder = SemanticTokensBuilder()
        self.symbols: List[FoundSymbol] = []
        self.variables: VariableMap = new_variable_map()
        self.diagnostics = DocumentDiagnostics()
        self.defines: List[str] = []
        self.documentation: InlineDocumentation = NO_DOCUMENTATION

    def analyze(self, macro: Macro) -> AnalysisResult:
        """Run the pass over ``macro`` and package the results."""
        self.visit(macro)
        symbols = sorted(self.symbols, key=lambda symbol: symbol.range.start)
        logger.debug(
            "Analyzed %s: %d tokens, %d symbols, %d variables, %d diagnostics",
            macro.source_file or "<document>",
            len(self.builder),
            len(symbols),
            len(self.variables),
            len(self.diagnostics),
        )
        return AnalysisResult(
            tokens=self.builder.build(),
            symbols=symbols,
            variables=self.variables,
            diagnostics=list(self.diagnostics),
            defines=list(self.defines),
            documentation=self.documentation,
        )

    # -- Helpers ----------------------------------------------------------

    def _range(self, node: ASTNode) -> Range:
        return self.line_index.range_of(node.start_pos, node.end_pos)

    def _source_text(self, node: ASTNode) -> str:
        return self.text[node.start_pos : node.end_pos]

    def _push(self, node: Optional[ASTNode], token_type: TokenType) -> None:
        if node is None:
            return
        node_range = self._range(node)
        if node_range.start.line != node_range.end.line:
            return
        length = node_range.end.character - node_range.start.character
        self.builder.push(node_range.start.line, node_range.start.character, length, token_type)

    def _found(self, name: str, kind: SymbolKind, node: ASTNode, arg_count: Optional[int] = None) -> None:
        self.symbols.append(FoundSymbol(name, kind, self._range(node), arg_count))

    def _visit_all(self, nodes) -> None:
        for node in nodes:
            self.visit(node)

    def generic_visit(self, node: ASTNode) -> None:
        logger.warning("No analysis for node kind %s", type(node).__name__)

    # -- Macro structure --------------------------------------------------

    def visit_Macro(self, node: Macro) -> None:
        # Documentation lives in the text before the first script
        leading = []
        for bit in node.bits:
            if not isinstance(bit, TextChunk):
                break
            leading.append(bit.text)
        if leading:
            self.documentation = extract_documentation("".join(leading))
        self._visit_all(node.bits)

    def visit_TextChunk(self, node: TextChunk) -> None:
        pass

    def visit_Script(self, node: Script) -> None:
        self._visit_all(node.options)
        self._push(node.colon, TokenType.COLON)
        self.visit(node.body)

    def visit_Block(self, node: Block) -> None:
        self._visit_all(node.bits)

    def visit_Branches(self, node: Branches) -> None:
        for separator in node.separators:
            self._push(separator, TokenType.COLON)
        self._visit_all(node.branches)

    def visit_SwitchBody(self, node: SwitchBody) -> None:
        for separator in node.separators:
            self._push(separator, TokenType.COLON)
        self._visit_all(node.cases)
        if node.default is not None:
            self.visit(node.default)

    def visit_SwitchCase(self, node: SwitchCase) -> None:
        self._push(node.keyword, TokenType.KEYWORD)
        self.visit(node.label)
        self._push(node.colon, TokenType.COLON)
        self.visit(node.branch)

    def visit_DefaultCase(self, node: DefaultCase) -> None:
        self._push(node.keyword, TokenType.KEYWORD)
        self._push(node.colon, TokenType.COLON)
        self.visit(node.branch)

    # -- Roll options -----------------------------------------------------

    def visit_RollOption(self, node: RollOption) -> None:
        self._push(node, TokenType.KEYWORD)
        self._found(node.name, SymbolKind.ROLL_OPTION, node, 0)

    def visit_FunctionOption(self, node: FunctionOption) -> None:
        self._push(node.keyword, TokenType.KEYWORD)
        self._found(node.name, SymbolKind.ROLL_OPTION, node.keyword, node.argument_count)
        self._visit_all(node.args)

    def visit_ForOption(self, node: ForOption) -> None:
        self._push(node.keyword, TokenType.KEYWORD)
        self._found(node.name, SymbolKind.ROLL_OPTION, node.keyword, node.argument_count)

        if node.invalid is not None:
            self.diagnostics.error(
                "The first argument to a for/foreach loop must be a variable declaration, "
                f"found '{self._source_text(node.invalid)}' instead.",
                self._range(node.invalid),
                source=SOURCE_FOR_LOOP,
            )

        if node.declaration is not None:
            declaration = node.declaration
            self._push(declaration, TokenType.VARIABLE)
            add_set(self.variables, declaration.name, declaration.start_pos)
            self._found(declaration.name, SymbolKind.VARIABLE, declaration)

        self._check_loop_arity(node)
        self._visit_all(node.expressions)

    def _check_loop_arity(self, node: ForOption) -> None:
        keyword = node.name.lower()
        bounds = LOOP_ARITY.get(keyword)
        if bounds is None:
            logger.warning("Ignoring unsupported loop keyword '%s'", node.name)
            return

        minimum, maximum = bounds
        count = node.argument_count
        if minimum <= count <= maximum:
            return

        span = Range(self._range(node.lparen).start, self._range(node.rparen).end)
        self.diagnostics.error(
            f"Invalid number of arguments in '{keyword}' statement. Expected {minimum}-{maximum} arguments.",
            span,
            source=LOOP_SOURCES[keyword],
        )

    def visit_InvalidOption(self, node: InvalidOption) -> None:
        self.diagnostics.error(
            f"'{self._source_text(node)}' is not a valid roll option.",
            self._range(node),
            source=SOURCE_OPTION,
        )
        self.visit(node.expr)

    # -- Statements and expressions ---------------------------------------

    def visit_Assignment(self, node: Assignment) -> None:
        target = node.target
        add_set(self.variables, target.name, target.start_pos)
        self._push(target, TokenType.VARIABLE)
        self._found(target.name, SymbolKind.VARIABLE, target)
        self._push(node.op, TokenType.OPERATOR)
        self.visit(node.value)

    def visit_BinaryOp(self, node: BinaryOp) -> None:
        self.visit(node.left)
        self._push(node.op, TokenType.OPERATOR)
        self.visit(node.right)

    def visit_UnaryOp(self, node: UnaryOp) -> None:
        self._push(node.op, TokenType.OPERATOR)
        self.visit(node.expr)

    def visit_ParenExpr(self, node: ParenExpr) -> None:
        self.visit(node.expr)

    def visit_CallExpr(self, node: CallExpr) -> None:
        self._push(node.name_token, TokenType.FUNCTION)
        self._found(node.name, SymbolKind.FUNCTION, node.name_token, len(node.args))

        if node.name == DEFINE_FUNCTION and node.args and isinstance(node.args[0], StringLiteral):
            defined = node.args[0].value
            if defined and defined not in self.defines:
                self.defines.append(defined)

        self._visit_all(node.args)

    def visit_VariableRef(self, node: VariableRef) -> None:
        self._push(node, TokenType.VARIABLE)
        add_get(self.variables, node.name, node.start_pos, node.length)
        self._found(node.name, SymbolKind.VARIABLE, node)

    def visit_NumberLiteral(self, node: NumberLiteral) -> None:
        self._push(node, TokenType.NUMBER)

    def visit_DiceLiteral(self, node: DiceLiteral) -> None:
        self._push(node, TokenType.NUMBER)

    def visit_StringLiteral(self, node: StringLiteral) -> None:
        self._push(node, TokenType.STRING)

    def visit_BooleanLiteral(self, node: BooleanLiteral) -> None:
        self._push(node, TokenType.KEYWORD)
