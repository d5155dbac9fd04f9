"""Parse tree transformer producing syntax tree nodes."""

from __future__ import annotations

from typing import List, Optional, Union

from lark import Token, Transformer

from mts_language_server.src.ast.base import ASTNode, TokenRef
from mts_language_server.src.ast.expressions import (
    BinaryOp,
    CallExpr,
    Expr,
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
    Option,
    RollOption,
    Script,
    SwitchBody,
    SwitchCase,
    TextChunk,
)
from mts_language_server.src.common.constants import LOOP_ARITY

BOOLEAN_NAMES = {"true": True, "false": False}


class MTSTransformer(Transformer):
    """Transforms the Lark parse tree into typed syntax tree nodes."""

    @staticmethod
    def _parse_number(text: str) -> Union[int, float]:
        """Parse a number literal, e.g. "42" or "2.5"."""
        text = text.strip()
        if "." in text:
            return float(text)
        return int(text, 10)

    def _set_position(self, node: ASTNode, token: Token) -> ASTNode:
        """Set position on a node from a Lark token."""
        node.line = token.line
        node.column = token.column
        node.start_pos = token.start_pos
        node.end_pos = token.end_pos
        return node

    def _token_ref(self, token: Token) -> TokenRef:
        return self._set_position(TokenRef(str(token)), token)

    def _text(self, token: Token) -> TextChunk:
        return self._set_position(TextChunk(str(token)), token)

    # -- Macro structure --------------------------------------------------

    def start(self, items) -> Macro:
        """start: (TEXT | COMMENT | script)*"""
        bits = [self._text(item) if isinstance(item, Token) else item for item in items]
        macro = Macro(bits=bits, line=1, column=1)
        if bits:
            macro.start_pos = bits[0].start_pos
            macro.end_pos = bits[-1].end_pos
        return macro

    def option_script(self, items) -> Script:
        """script: LSQB options COLON body RSQB"""
        lsqb, options, colon, body, rsqb = items
        script = Script(options=options, colon=self._token_ref(colon), body=body)
        script.span_from(self._token_ref(lsqb), self._token_ref(rsqb))
        return script

    def bare_script(self, items) -> Script:
        """script: LSQB body RSQB"""
        lsqb, body, rsqb = items
        script = Script(options=[], colon=None, body=body)
        script.span_from(self._token_ref(lsqb), self._token_ref(rsqb))
        return script

    def block_option_script(self, items) -> Script:
        """block_script: LSQB options COLON body RSQB"""
        return self.option_script(items)

    def block_bare_script(self, items) -> Script:
        """block_script: LSQB body RSQB"""
        return self.bare_script(items)

    def options(self, items) -> List[Option]:
        """options: expr ("," expr)*"""
        return [self._to_option(expr) for expr in items]

    def _to_option(self, expr: Expr) -> Option:
        """Classify an option expression by its shape and name."""
        if isinstance(expr, VariableRef):
            option = RollOption(expr.name)
            return option.span_from(expr)

        if isinstance(expr, CallExpr):
            if expr.name.lower() in LOOP_ARITY:
                return self._to_loop_option(expr)
            option = FunctionOption(
                name=expr.name,
                keyword=expr.name_token,
                args=expr.args,
                lparen=expr.lparen,
                rparen=expr.rparen,
            )
            return option.span_from(expr)

        option = InvalidOption(expr)
        return option.span_from(expr)

    def _to_loop_option(self, call: CallExpr) -> ForOption:
        declaration: Optional[VariableRef] = None
        invalid: Optional[Expr] = None
        expressions = list(call.args)

        if expressions:
            first = expressions[0]
            if isinstance(first, VariableRef):
                declaration = first
                expressions = expressions[1:]
            else:
                invalid = first

        option = ForOption(
            keyword=call.name_token,
            declaration=declaration,
            invalid=invalid,
            expressions=expressions,
            lparen=call.lparen,
            rparen=call.rparen,
        )
        return option.span_from(call)

    def branches(self, items) -> Branches:
        """branches: branch (SEMI branch)* SEMI?"""
        branches = []
        separators = []
        for item in items:
            if isinstance(item, Token):
                separators.append(self._token_ref(item))
            else:
                branches.append(item)
        node = Branches(branches=branches, separators=separators)
        return node.span_from(branches[0], branches[-1])

    def switch_body(self, items) -> SwitchBody:
        """switch_body: switch_case (SEMI switch_case)* (SEMI default_case)? SEMI?"""
        cases = []
        default = None
        separators = []
        for item in items:
            if isinstance(item, Token):
                separators.append(self._token_ref(item))
            elif isinstance(item, DefaultCase):
                default = item
            else:
                cases.append(item)
        parts = cases + ([default] if default is not None else [])
        node = SwitchBody(cases=cases, default=default, separators=separators)
        return node.span_from(parts[0], parts[-1])

    def switch_case(self, items) -> SwitchCase:
        """switch_case: CASE case_label COLON branch"""
        keyword, label, colon, branch = items
        node = SwitchCase(
            keyword=self._token_ref(keyword),
            label=label,
            colon=self._token_ref(colon),
            branch=branch,
        )
        return node.span_from(node.keyword, branch)

    def default_case(self, items) -> DefaultCase:
        """default_case: DEFAULT COLON branch"""
        keyword, colon, branch = items
        node = DefaultCase(
            keyword=self._token_ref(keyword),
            colon=self._token_ref(colon),
            branch=branch,
        )
        return node.span_from(node.keyword, branch)

    def block(self, items) -> Block:
        """block: LBRACE (BLOCK_TEXT | block_script)* RBRACE"""
        lbrace, *inner, rbrace = items
        bits = [self._text(item) if isinstance(item, Token) else item for item in inner]
        node = Block(bits=bits)
        return node.span_from(self._token_ref(lbrace), self._token_ref(rbrace))

    def assignment(self, items) -> Assignment:
        """assignment: NAME ASSIGN expr"""
        name, assign, value = items
        target = self.variable([name])
        node = Assignment(target=target, op=self._token_ref(assign), value=value)
        return node.span_from(target, value)

    # -- Expressions ------------------------------------------------------

    def _handle_binary_op_chain(self, items) -> Expr:
        """Handle chains of binary operations like a + b - c (left associative)."""
        result = items[0]
        index = 1
        while index + 1 < len(items):
            op = self._token_ref(items[index])
            right = items[index + 1]
            node = BinaryOp(op=op, left=result, right=right)
            result = node.span_from(result, right)
            index += 2
        return result

    def or_expr(self, items) -> Expr:
        """or_expr: and_expr (OR_OP and_expr)*"""
        return self._handle_binary_op_chain(items)

    def and_expr(self, items) -> Expr:
        """and_expr: not_expr (AND_OP not_expr)*"""
        return self._handle_binary_op_chain(items)

    def comparison(self, items) -> Expr:
        """comparison: sum (COMP_OP sum)*"""
        return self._handle_binary_op_chain(items)

    def sum(self, items) -> Expr:
        """sum: product (ADD_OP product)*"""
        return self._handle_binary_op_chain(items)

    def product(self, items) -> Expr:
        """product: power (MUL_OP power)*"""
        return self._handle_binary_op_chain(items)

    def power(self, items) -> Expr:
        """power: unary (POW_OP power)?

        Right-associative due to the recursive grammar structure.
        """
        left, op, right = items
        node = BinaryOp(op=self._token_ref(op), left=left, right=right)
        return node.span_from(left, right)

    def unary(self, items) -> Expr:
        """unary: ADD_OP unary | NOT_OP not_expr"""
        op, expr = items
        node = UnaryOp(op=self._token_ref(op), expr=expr)
        return node.span_from(node.op, expr)

    def call(self, items) -> CallExpr:
        """call: NAME LPAR [args] RPAR"""
        name, lparen, args, rparen = items
        node = CallExpr(
            name=str(name),
            name_token=self._token_ref(name),
            args=args or [],
            lparen=self._token_ref(lparen),
            rparen=self._token_ref(rparen),
        )
        return node.span_from(node.name_token, node.rparen)

    def args(self, items) -> List[Expr]:
        """args: expr ("," expr)*"""
        return list(items)

    def paren(self, items) -> ParenExpr:
        """paren: LPAR expr RPAR"""
        lparen, expr, rparen = items
        node = ParenExpr(expr=expr)
        return node.span_from(self._token_ref(lparen), self._token_ref(rparen))

    def variable(self, items) -> Expr:
        """variable: NAME (true/false become boolean literals)"""
        token = items[0]
        text = str(token)
        if text.lower() in BOOLEAN_NAMES:
            literal = BooleanLiteral(value=BOOLEAN_NAMES[text.lower()], raw_text=text)
            return self._set_position(literal, token)
        return self._set_position(VariableRef(name=text, raw_text=text), token)

    def number(self, items) -> NumberLiteral:
        token = items[0]
        literal = NumberLiteral(value=self._parse_number(str(token)), raw_text=str(token))
        return self._set_position(literal, token)

    def dice(self, items) -> DiceLiteral:
        token = items[0]
        count, sides = str(token).lower().split("d", 1)
        literal = DiceLiteral(count=int(count), sides=int(sides), raw_text=str(token))
        return self._set_position(literal, token)

    def string(self, items) -> StringLiteral:
        token = items[0]
        literal = StringLiteral(value=str(token)[1:-1], raw_text=str(token))
        return self._set_position(literal, token)
