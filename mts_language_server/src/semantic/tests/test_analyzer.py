"""
Tests for semantic/analyzer.py - the single-pass document analyzer.
"""

import logging

import pytest

from mts_language_server.src.ast import ASTNode, ForOption, TokenRef, VariableRef
from mts_language_server.src.common.constants import MACRO_ARGS
from mts_language_server.src.common.diagnostics import DiagnosticSeverity
from mts_language_server.src.common.source_location import Position, Range
from mts_language_server.src.common.symbol_types import SymbolKind
from mts_language_server.src.parsing.parser import MTSParser
from mts_language_server.src.semantic.analyzer import DocumentAnalyzer
from mts_language_server.src.semantic.tokens import TokenType, decode_tokens


@pytest.fixture(scope="module")
def parser():
    return MTSParser()


def analyze(parser, text):
    return DocumentAnalyzer(text).analyze(parser.parse(text))


class TestTokens:
    """Tests for semantic token classification."""

    def test_assignment_tokens(self, parser):
        result = analyze(parser, "[h: x = 1]")
        tokens = [(token.character, token.token_type) for token in decode_tokens(result.tokens)]
        assert tokens == [
            (1, TokenType.KEYWORD),
            (2, TokenType.COLON),
            (4, TokenType.VARIABLE),
            (6, TokenType.OPERATOR),
            (8, TokenType.NUMBER),
        ]

    def test_literal_tokens(self, parser):
        result = analyze(parser, '[r: f("a", 1d6, true)]')
        types = [token.token_type for token in decode_tokens(result.tokens)]
        assert types == [
            TokenType.KEYWORD,
            TokenType.COLON,
            TokenType.FUNCTION,
            TokenType.STRING,
            TokenType.NUMBER,
            TokenType.KEYWORD,
        ]

    def test_switch_tokens(self, parser):
        result = analyze(parser, '[r, switch(x): case 1: "a"; default: "b"]')
        keywords = [
            token.character
            for token in decode_tokens(result.tokens)
            if token.token_type == TokenType.KEYWORD
        ]
        # r, switch, case, default
        assert keywords == [1, 4, 15, 28]

    def test_tokens_are_in_document_order(self, parser):
        text = "[h, for(i, 0, 3): x = i * 2]\n[r: x]"
        tokens = decode_tokens(analyze(parser, text).tokens)
        positions = [(token.line, token.character) for token in tokens]
        assert positions == sorted(positions)

    def test_utf16_columns(self, parser):
        text = "é\U0001F600[h: x = 1]"
        first = decode_tokens(analyze(parser, text).tokens)[0]
        assert first.character == 4

    def test_tokens_on_later_lines(self, parser):
        tokens = decode_tokens(analyze(parser, "text\nmore [r: y]").tokens)
        assert tokens[0].line == 1
        assert tokens[0].character == 6


class TestSymbols:
    """Tests for found symbols."""

    def test_calls_and_options(self, parser):
        result = analyze(parser, "[r: max(1, y)]")
        found = [(symbol.name, symbol.kind, symbol.arg_count) for symbol in result.symbols]
        assert found == [
            ("r", SymbolKind.ROLL_OPTION, 0),
            ("max", SymbolKind.FUNCTION, 2),
            ("y", SymbolKind.VARIABLE, None),
        ]
        assert result.symbols[1].range == Range(Position(0, 4), Position(0, 7))

    def test_function_option_arg_count(self, parser):
        result = analyze(parser, "[count(3, ','): x = 1]")
        option = result.symbols[0]
        assert (option.name, option.kind, option.arg_count) == ("count", SymbolKind.ROLL_OPTION, 2)

    def test_define_function(self, parser):
        result = analyze(parser, '[h: defineFunction("heal", "heal@lib:tok")]')
        assert result.defines == ["heal"]
        assert result.symbols[1].name == "defineFunction"

    def test_define_function_needs_string_name(self, parser):
        result = analyze(parser, "[h: defineFunction(name, 'm@lib:tok')]")
        assert result.defines == []


class TestVariables:
    """Tests for variable set/get bookkeeping."""

    def test_sets_and_gets(self, parser):
        result = analyze(parser, "[h: x = 1][r: x + y]")
        assert result.variables["x"].sets == [4]
        assert [get.position for get in result.variables["x"].gets] == [14]
        assert result.variables["y"].sets == []
        assert result.variables["y"].gets[0].length == 1

    def test_macro_args_preseeded(self, parser):
        result = analyze(parser, "plain text")
        assert result.variables[MACRO_ARGS].sets == [-1]

    def test_loop_variable_is_set(self, parser):
        result = analyze(parser, "[h, for(i, 0, 10): x = i]")
        assert result.variables["i"].sets == [8]

    def test_switch_label_is_read(self, parser):
        result = analyze(parser, "[r, switch(x): case y: 1]")
        assert "y" in result.variables


class TestLoopValidation:
    """Tests for for/foreach option checks."""

    def test_valid_for(self, parser):
        assert analyze(parser, "[h, for(i, 0, 10): x = i]").diagnostics == []

    def test_for_with_too_few_arguments(self, parser):
        diagnostics = analyze(parser, "[h, for(i, 0): x]").diagnostics
        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.severity == DiagnosticSeverity.ERROR
        assert diagnostic.message == "Invalid number of arguments in 'for' statement. Expected 3-5 arguments."
        assert diagnostic.source == "mts:for_loop"
        assert diagnostic.range == Range(Position(0, 7), Position(0, 13))

    def test_foreach_with_too_many_arguments(self, parser):
        diagnostics = analyze(parser, "[h, foreach(i, a, b, c, e): x]").diagnostics
        assert [d.message for d in diagnostics] == [
            "Invalid number of arguments in 'foreach' statement. Expected 3-4 arguments."
        ]
        assert diagnostics[0].source == "mts:foreach_loop"

    def test_invalid_declaration(self, parser):
        diagnostics = analyze(parser, "[h, foreach(1, list, ','): x]").diagnostics
        assert len(diagnostics) == 1
        assert diagnostics[0].message == (
            "The first argument to a for/foreach loop must be a variable declaration, found '1' instead."
        )
        assert diagnostics[0].range == Range(Position(0, 12), Position(0, 13))

    def test_unknown_loop_keyword_is_ignored(self, caplog):
        text = "loop(i)"
        option = ForOption(
            keyword=TokenRef("loop", 1, 1, 0, 4),
            declaration=VariableRef("i"),
            invalid=None,
            expressions=[],
            lparen=TokenRef("(", 1, 5, 4, 5),
            rparen=TokenRef(")", 1, 7, 6, 7),
        )
        option.declaration.start_pos, option.declaration.end_pos = 5, 6
        option.span_from(option.keyword, option.rparen)

        analyzer = DocumentAnalyzer(text)
        with caplog.at_level(logging.WARNING):
            analyzer.visit(option)

        assert len(analyzer.diagnostics) == 0
        assert "unsupported loop keyword" in caplog.text


class TestOtherAnalysis:
    def test_invalid_option(self, parser):
        diagnostics = analyze(parser, "[1 + 2, h: x]").diagnostics
        assert diagnostics[0].message == "'1 + 2' is not a valid roll option."
        assert diagnostics[0].source == "mts:option"

    def test_inline_documentation(self, parser):
        text = '<!-- {"name": "heal", "description": "Heals."} -->\n[h: x = 1]'
        result = analyze(parser, text)
        assert result.documentation.found
        assert result.documentation.definition.name == "heal"

    def test_unknown_node_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            DocumentAnalyzer("").visit(ASTNode())
        assert "No analysis for node kind ASTNode" in caplog.text

    def test_deterministic(self, parser):
        text = '[h, foreach(item, list): x = item + y][r: max(1)][h, for(j, 1): z]'
        first = analyze(parser, text)
        second = analyze(parser, text)
        assert first.tokens == second.tokens
        assert first.symbols == second.symbols
        assert first.diagnostics == second.diagnostics


class TestCodeBlocks:
    """Tests for scripts nested in code blocks."""

    TEXT = '[h: items = "a,b"][h, foreach(item, items, ","), code: { [h: last = item] [r: last] }]'

    def test_variables_inside_block(self, parser):
        result = analyze(parser, self.TEXT)

        assert result.diagnostics == []
        assert result.variables["item"].sets == [30]
        assert [get.position for get in result.variables["item"].gets] == [68]
        assert result.variables["last"].sets == [61]
        assert [get.position for get in result.variables["last"].gets] == [78]

    def test_block_tokens_in_document_order(self, parser):
        tokens = decode_tokens(analyze(parser, self.TEXT).tokens)

        characters = [token.character for token in tokens]
        assert characters == sorted(characters)
        variables = [token.character for token in tokens if token.token_type == TokenType.VARIABLE]
        assert variables == [4, 30, 36, 61, 68, 78]

    def test_block_symbols(self, parser):
        result = analyze(parser, self.TEXT)
        nested = [(symbol.name, symbol.kind) for symbol in result.symbols][-5:]
        assert nested == [
            ("h", SymbolKind.ROLL_OPTION),
            ("last", SymbolKind.VARIABLE),
            ("item", SymbolKind.VARIABLE),
            ("r", SymbolKind.ROLL_OPTION),
            ("last", SymbolKind.VARIABLE),
        ]
