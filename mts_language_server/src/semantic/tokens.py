"""Semantic token classes and relative encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List


class TokenType(IntEnum):
    """Token classes; the order is the legend advertised to clients."""

    STRING = 0
    KEYWORD = 1
    COLON = 2
    NUMBER = 3
    REGEXP = 4
    OPERATOR = 5
    FUNCTION = 6
    VARIABLE = 7


TOKEN_LEGEND: List[str] = [token_type.name.lower() for token_type in TokenType]
TOKEN_MODIFIERS: List[str] = []


@dataclass(frozen=True, order=True)
class SemanticToken:
    """A classified token at an absolute position."""

    line: int
    character: int
    length: int
    token_type: TokenType
    modifiers: int = 0


class SemanticTokensBuilder:
    """Collects absolute tokens and encodes them as relative deltas.

    Each token becomes five integers: delta line, delta start (relative to
    the previous token when on the same line), length, type, modifiers.
    """

    def __init__(self) -> None:
        self.tokens: List[SemanticToken] = []

    def __len__(self) -> int:
        return len(self.tokens)

    def push(self, line: int, character: int, length: int, token_type: TokenType, modifiers: int = 0) -> None:
        if length <= 0:
            return
        self.tokens.append(SemanticToken(line, character, length, TokenType(token_type), modifiers))

    def sorted_tokens(self) -> List[SemanticToken]:
        """Tokens in document order; ties keep emission order."""
        return sorted(self.tokens, key=lambda token: (token.line, token.character))

    def build(self) -> List[int]:
        data: List[int] = []
        previous_line = 0
        previous_char = 0
        for token in self.sorted_tokens():
            delta_line = token.line - previous_line
            delta_char = token.character - previous_char if delta_line == 0 else token.character
            data.extend([delta_line, delta_char, token.length, int(token.token_type), token.modifiers])
            previous_line = token.line
            previous_char = token.character
        return data


def decode_tokens(data: List[int]) -> List[SemanticToken]:
    """Inverse of SemanticTokensBuilder.build, for inspection and tests."""
    tokens = []
    line = 0
    character = 0
    for index in range(0, len(data) - 4, 5):
        delta_line, delta_char, length, token_type, modifiers = data[index : index + 5]
        if delta_line:
            line += delta_line
            character = delta_char
        else:
            character += delta_char
        tokens.append(SemanticToken(line, character, length, TokenType(token_type), modifiers))
    return tokens
