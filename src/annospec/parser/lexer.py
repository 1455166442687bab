# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for ``{type}`` expressions of annotation tags.

Converts the text between the braces of a tag into a sequence of tokens for
the type-expression parser.
"""

import enum
from dataclasses import dataclass

from annospec.errors import TypeExpressionError

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the type-expression lexer."""

    # Symbols and operators
    LANGLE = "<"
    RANGLE = ">"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    DOT = "."
    COLON = ":"
    PIPE = "|"
    QUESTION = "?"
    BANG = "!"
    STAR = "*"
    EQUALS = "="

    # Literals
    STRING = "STRING"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of expression
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its position in the expression.

    Attributes:
        type: The kind of token.
        value: The raw text of the token (or decoded content for STRING tokens).
        column: 1-based column where the token starts.
    """

    type: TokenType
    value: str
    column: int


def tokenize(source: str) -> list[Token]:
    """Tokenize a type expression.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        TypeExpressionError: On unexpected characters or unterminated strings.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
    "|": TokenType.PIPE,
    "?": TokenType.QUESTION,
    "!": TokenType.BANG,
    "*": TokenType.STAR,
    "=": TokenType.EQUALS,
}


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            ch = self._source[self._pos]
            if ch.isspace():
                self._pos += 1
            elif ch in _SINGLE_CHAR_TOKENS:
                self._tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, self._pos + 1))
                self._pos += 1
            elif ch in "'\"":
                self._scan_string(ch)
            elif ch.isalnum() or ch in "_$":
                self._scan_identifier()
            else:
                raise TypeExpressionError(f"Unexpected character: {ch!r}", self._pos + 1)
        self._tokens.append(Token(TokenType.EOF, "", self._pos + 1))
        return self._tokens

    def _scan_string(self, quote: str) -> None:
        """Scan a quoted literal; a backslash escapes the next character."""
        column = self._pos + 1
        self._pos += 1  # opening quote
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._source[self._pos]
            if ch == quote:
                self._pos += 1  # closing quote
                self._tokens.append(Token(TokenType.STRING, "".join(chars), column))
                return
            if ch == "\\" and self._pos + 1 < len(self._source):
                self._pos += 1
                ch = self._source[self._pos]
            chars.append(ch)
            self._pos += 1
        raise TypeExpressionError("Unterminated string literal", column)

    def _scan_identifier(self) -> None:
        """Scan an identifier (letters, digits, ``_`` and ``$``)."""
        start = self._pos
        while self._pos < len(self._source) and (
            self._source[self._pos].isalnum() or self._source[self._pos] in "_$"
        ):
            self._pos += 1
        self._tokens.append(Token(TokenType.IDENTIFIER, self._source[start : self._pos], start + 1))
