# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the type-expression parser."""

import pytest

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
    UnionNode,
)
from annospec.parser.type_expression import parse_type

# ###############
# Names
# ###############


class TestNames:
    @pytest.mark.parametrize("name", ["string", "number", "integer", "boolean", "User"])
    def test_plain_name(self, name: str) -> None:
        assert parse_type(name) == NameNode(name=name)

    def test_dotted_reference(self) -> None:
        assert parse_type("User.email") == NameNode(name="User.email")

    def test_null_literal(self) -> None:
        assert parse_type("null") == NullLiteralNode()

    def test_star_is_any(self) -> None:
        assert parse_type("*") == AnyNode()

    def test_string_literal(self) -> None:
        assert parse_type("'email'") == StringLiteralNode(value="email")

    def test_bang_is_ignored(self) -> None:
        assert parse_type("!string") == NameNode(name="string")


# ###############
# Keywords and Applications
# ###############


class TestApplications:
    @pytest.mark.parametrize(
        ("keyword", "node"),
        [
            ("Array", ArrayNode()),
            ("array", ArrayNode()),
            ("Object", ObjectNode()),
            ("Enum", EnumNode()),
            ("Date", DateNode()),
            ("File", FileNode()),
        ],
    )
    def test_bare_keyword(self, keyword: str, node: object) -> None:
        assert parse_type(keyword) == node

    def test_array_of_model(self) -> None:
        assert parse_type("Array<User>") == ApplicationNode(expression=ArrayNode(), arguments=[NameNode(name="User")])

    def test_jsdoc_dot_application(self) -> None:
        assert parse_type("Array.<string>") == parse_type("Array<string>")

    def test_bracket_suffix(self) -> None:
        assert parse_type("User[]") == parse_type("Array<User>")

    def test_nested_bracket_suffix(self) -> None:
        node = parse_type("string[][]")
        assert node == ApplicationNode(
            expression=ArrayNode(),
            arguments=[ApplicationNode(expression=ArrayNode(), arguments=[NameNode(name="string")])],
        )

    def test_string_with_format_arguments(self) -> None:
        node = parse_type("string<'email', 'uuid'>")
        assert node == ApplicationNode(
            expression=NameNode(name="string"),
            arguments=[StringLiteralNode(value="email"), StringLiteralNode(value="uuid")],
        )

    def test_object_with_named_arguments(self) -> None:
        node = parse_type("Object<id: integer, tags: string[]>")
        assert isinstance(node, ApplicationNode)
        assert node.expression == ObjectNode()
        first, second = node.arguments
        assert first == ApplicationNode(expression=NameNode(name="id"), arguments=[NameNode(name="integer")])
        assert isinstance(second, ApplicationNode)
        assert second.expression == NameNode(name="tags")
        assert second.arguments == [parse_type("Array<string>")]


# ###############
# Unions and Optionals
# ###############


class TestUnions:
    def test_parenthesised_union(self) -> None:
        assert parse_type("(string|null)") == UnionNode(elements=[NameNode(name="string"), NullLiteralNode()])

    def test_bare_union(self) -> None:
        node = parse_type("string | integer")
        assert node == UnionNode(elements=[NameNode(name="string"), NameNode(name="integer")])

    def test_question_mark_is_nullable_union(self) -> None:
        assert parse_type("?string") == UnionNode(elements=[NameNode(name="string"), NullLiteralNode()])

    def test_trailing_equals_is_optional(self) -> None:
        assert parse_type("string=") == OptionalNode(expression=NameNode(name="string"))


# ###############
# Errors
# ###############


class TestErrors:
    def test_empty_expression(self) -> None:
        with pytest.raises(TypeExpressionError, match="Empty type expression"):
            parse_type("")

    def test_unclosed_application(self) -> None:
        with pytest.raises(TypeExpressionError, match="Expected"):
            parse_type("Array<User")

    def test_trailing_garbage(self) -> None:
        with pytest.raises(TypeExpressionError, match="Unexpected token") as exc_info:
            parse_type("string )")
        assert exc_info.value.column == 8

    def test_unclosed_parenthesis(self) -> None:
        with pytest.raises(TypeExpressionError):
            parse_type("(string|null")
