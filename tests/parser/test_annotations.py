# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for annotation block extraction."""

from pathlib import Path

import pytest

from annospec.model.types import ApplicationNode, ArrayNode, NameNode, OptionalNode
from annospec.parser.annotations import extract_annotations, extract_docstrings, extract_file, parse_block

# ###############
# Test data
# ###############

_JS_SOURCE = """\
/**
 * List users.
 * @route GET /users
 * @group users - User management
 * @param {string} query.name.required - Name filter
 *   - minLength: 3
 * @returns {Array<User>} 200 - The users
 */
function listUsers() {}

/** A plain comment without tags. */
"""

_PY_SOURCE = '''\
def list_users(request):
    """List users.

    @route GET /users
    @param {integer} [query.limit=10] - Page size
    @returns {User} 200 - ok
    """


def helper():
    """No annotations here."""


class Users:
    """@route POST /users"""
'''

# ###############
# Comment Blocks
# ###############


class TestCommentBlocks:
    def test_only_blocks_with_tags_are_kept(self) -> None:
        records = extract_annotations(_JS_SOURCE)
        assert len(records) == 1

    def test_description_and_tag_titles(self) -> None:
        record = extract_annotations(_JS_SOURCE)[0]
        assert record.description == "List users."
        assert [tag.title for tag in record.tags] == ["route", "group", "param", "returns"]

    def test_route_description(self) -> None:
        route = extract_annotations(_JS_SOURCE)[0].tags[0]
        assert route.description == "GET /users"
        assert route.type is None
        assert route.name is None

    def test_param_name_type_and_continuation_lines(self) -> None:
        param = extract_annotations(_JS_SOURCE)[0].tags[2]
        assert param.name == "query.name.required"
        assert param.type == NameNode(name="string")
        assert param.raw_type == "string"
        assert param.description.startswith("Name filter")
        assert "- minLength: 3" in param.description

    def test_returns_type_is_parsed(self) -> None:
        returns = extract_annotations(_JS_SOURCE)[0].tags[3]
        assert returns.type == ApplicationNode(expression=ArrayNode(), arguments=[NameNode(name="User")])
        assert returns.description == "200 - The users"


# ###############
# Docstrings
# ###############


class TestDocstrings:
    def test_functions_and_classes_with_tags(self) -> None:
        records = extract_docstrings(_PY_SOURCE)
        routes = sorted(record.tags[0].description for record in records)
        assert routes == ["GET /users", "POST /users"]

    def test_bracketed_name_marks_optional(self) -> None:
        record = next(r for r in extract_docstrings(_PY_SOURCE) if r.description == "List users.")
        param = record.find("param")[0]
        assert param.name == "query.limit"
        assert param.type == OptionalNode(expression=NameNode(name="integer"))
        assert param.description == "Page size"

    def test_syntax_error_propagates(self) -> None:
        with pytest.raises(SyntaxError):
            extract_docstrings("def broken(:\n")


# ###############
# Tag Parsing
# ###############


class TestParseBlock:
    def test_unparsable_type_keeps_raw_text(self) -> None:
        record = parse_block("@param {Array<} query.x - broken")
        tag = record.tags[0]
        assert tag.type is None
        assert tag.raw_type == "Array<"
        assert tag.name == "query.x"

    def test_nested_braces_in_type(self) -> None:
        record = parse_block("@returns {{a}} 200 - ok")
        assert record.tags[0].raw_type == "{a}"

    def test_headers_tag_is_named(self) -> None:
        record = parse_block("@headers {integer} 200.X-Rate-Limit - Requests left")
        tag = record.tags[0]
        assert tag.name == "200.X-Rate-Limit"
        assert tag.description == "Requests left"

    def test_email_in_description_is_not_a_tag(self) -> None:
        record = parse_block("Contact admin@example.com\n@route GET /x")
        assert record.description == "Contact admin@example.com"
        assert len(record.tags) == 1


# ###############
# Files
# ###############


class TestExtractFile:
    def test_python_file_uses_docstrings(self, tmp_path: Path) -> None:
        path = tmp_path / "views.py"
        path.write_text(_PY_SOURCE, encoding="utf-8")
        assert len(extract_file(path)) == 2

    def test_other_files_use_comment_blocks(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.js"
        path.write_text(_JS_SOURCE, encoding="utf-8")
        assert len(extract_file(path)) == 1

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            extract_file(tmp_path / "missing.py")
