# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for ``{type}`` expressions.

Supported forms::

    string                      primitive name
    User, User.email            model / model property reference
    'literal'                   string literal
    null, *                     null literal, any value
    Array<User>, Array.<User>   application of a keyword or name
    User[]                      shorthand for Array<User>
    Object<id: integer>         object with typed properties
    (string|null), ?string      unions
    string=                     optional
"""

from annospec.errors import TypeExpressionError
from annospec.model.types import (
    AnyNode,
    ApplicationNode,
    ArrayNode,
    DateNode,
    EnumNode,
    FileNode,
    NameNode,
    NullLiteralNode,
    ObjectNode,
    OptionalNode,
    StringLiteralNode,
    TypeNode,
    UnionNode,
)
from annospec.parser.lexer import Token, TokenType, tokenize

# ###############
# Public Interface
# ###############


def parse_type(source: str) -> TypeNode:
    """Parse a type expression into a type-AST node.

    Args:
        source: The expression without its surrounding braces.

    Raises:
        TypeExpressionError: If the expression is malformed.
    """
    return _Parser(tokenize(source)).parse()


# ################
# Implementation
# ################

_KEYWORD_NODES: dict[str, type[ArrayNode | ObjectNode | EnumNode | DateNode | FileNode]] = {
    "Array": ArrayNode,
    "array": ArrayNode,
    "Object": ObjectNode,
    "object": ObjectNode,
    "Enum": EnumNode,
    "enum": EnumNode,
    "Date": DateNode,
    "File": FileNode,
}


class _Parser:
    """Recursive-descent parser for type-expression token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> TypeNode:
        """Parse the full token stream as one expression."""
        if self._check(TokenType.EOF):
            raise TypeExpressionError("Empty type expression", self._current().column)
        node = self._parse_expression()
        tok = self._current()
        if tok.type != TokenType.EOF:
            raise TypeExpressionError(f"Unexpected token {tok.value!r}", tok.column)
        return node

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        return self._peek_type() in types

    def _expect(self, *types: TokenType) -> Token:
        tok = self._current()
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise TypeExpressionError(f"Expected {expected}, got {tok.value or 'end of expression'!r}", tok.column)
        return self._advance()

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> TypeNode:
        """Parse: union ['=']"""
        node = self._parse_union()
        if self._check(TokenType.EQUALS):
            self._advance()
            return OptionalNode(expression=node)
        return node

    def _parse_union(self) -> TypeNode:
        """Parse: primary ('|' primary)*"""
        elements = [self._parse_primary()]
        while self._check(TokenType.PIPE):
            self._advance()
            elements.append(self._parse_primary())
        if len(elements) == 1:
            return elements[0]
        return UnionNode(elements=elements)

    def _parse_primary(self) -> TypeNode:
        tok = self._current()
        if tok.type == TokenType.QUESTION:
            self._advance()
            return UnionNode(elements=[self._parse_primary(), NullLiteralNode()])
        if tok.type == TokenType.BANG:
            self._advance()
            return self._parse_primary()
        if tok.type == TokenType.LPAREN:
            self._advance()
            node = self._parse_union()
            self._expect(TokenType.RPAREN)
            return self._parse_array_suffix(node)
        if tok.type == TokenType.STAR:
            self._advance()
            return AnyNode()
        if tok.type == TokenType.STRING:
            self._advance()
            return StringLiteralNode(value=tok.value)
        if tok.type == TokenType.IDENTIFIER:
            return self._parse_array_suffix(self._parse_named())
        raise TypeExpressionError(f"Unexpected token {tok.value or 'end of expression'!r}", tok.column)

    def _parse_named(self) -> TypeNode:
        """Parse: name ['.'] ['<' arguments '>']"""
        name = self._parse_dotted_name()
        base: TypeNode
        if name == "null":
            base = NullLiteralNode()
        elif name in _KEYWORD_NODES:
            base = _KEYWORD_NODES[name]()
        else:
            base = NameNode(name=name)
        if self._check(TokenType.DOT) and self._peek_type(1) == TokenType.LANGLE:
            self._advance()  # consume . of Array.<T>
        if not self._check(TokenType.LANGLE):
            return base
        self._advance()  # consume <
        arguments = [self._parse_argument()]
        while self._check(TokenType.COMMA):
            self._advance()
            arguments.append(self._parse_argument())
        self._expect(TokenType.RANGLE)
        return ApplicationNode(expression=base, arguments=arguments)

    def _parse_dotted_name(self) -> str:
        """Parse: identifier ('.' identifier)*"""
        parts = [self._expect(TokenType.IDENTIFIER).value]
        while self._check(TokenType.DOT) and self._peek_type(1) == TokenType.IDENTIFIER:
            self._advance()  # consume .
            parts.append(self._advance().value)
        return ".".join(parts)

    def _parse_argument(self) -> TypeNode:
        """Parse a type argument; ``name: type`` pairs become ``name<type>``."""
        if self._check(TokenType.IDENTIFIER) and self._peek_type(1) == TokenType.COLON:
            name_tok = self._advance()
            self._advance()  # consume :
            value = self._parse_expression()
            return ApplicationNode(expression=NameNode(name=name_tok.value), arguments=[value])
        return self._parse_expression()

    def _parse_array_suffix(self, node: TypeNode) -> TypeNode:
        """Parse trailing ``[]`` pairs as nested arrays."""
        while self._check(TokenType.LBRACKET) and self._peek_type(1) == TokenType.RBRACKET:
            self._advance()
            self._advance()
            node = ApplicationNode(expression=ArrayNode(), arguments=[node])
        return node
