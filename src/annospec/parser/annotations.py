# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Extraction of annotation blocks from source files.

Two carriers are recognised: ``/** ... */`` comment blocks in any text file,
and docstrings of functions and classes in Python modules. Every block is
split into a free-text description and its ``@tag`` entries; only blocks with
at least one tag are returned.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path

from annospec.errors import TypeExpressionError
from annospec.logging import get_logger
from annospec.model.annotations import AnnotationRecord, AnnotationTag
from annospec.model.types import OptionalNode, TypeNode
from annospec.parser.type_expression import parse_type

# ###############
# Public Interface
# ###############

# Tags whose first word after the type is a name.
NAMED_TITLES: frozenset[str] = frozenset({"param", "arg", "argument", "headers", "header", "property", "prop"})


def extract_file(path: Path) -> list[AnnotationRecord]:
    """Extract the annotation records of one source file.

    Python modules are read through their docstrings; any other file through
    its ``/** ... */`` comment blocks.

    Raises:
        OSError: If the file cannot be read.
        SyntaxError: If a Python module cannot be parsed.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".py":
        return extract_docstrings(text, filename=str(path))
    return extract_annotations(text)


def extract_annotations(text: str) -> list[AnnotationRecord]:
    """Extract the records of every ``/** ... */`` block in *text*."""
    records = [parse_block(_unwrap_comment(match.group(1))) for match in _BLOCK_RE.finditer(text)]
    return [record for record in records if record.tags]


def extract_docstrings(text: str, filename: str = "<string>") -> list[AnnotationRecord]:
    """Extract the records of the function and class docstrings of a Python module."""
    tree = ast.parse(text, filename=filename)
    records: list[AnnotationRecord] = []
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            docstring = ast.get_docstring(node)
            if docstring and "@" in docstring:
                record = parse_block(docstring)
                if record.tags:
                    records.append(record)
    return records


def parse_block(block: str) -> AnnotationRecord:
    """Split an unwrapped annotation block into description and tags."""
    description_lines: list[str] = []
    tag_lines: list[list[str]] = []
    for line in block.splitlines():
        if _TAG_START_RE.match(line.strip()):
            tag_lines.append([line.strip()])
        elif tag_lines:
            tag_lines[-1].append(line.rstrip())
        else:
            description_lines.append(line.rstrip())
    return AnnotationRecord(
        description="\n".join(description_lines).strip(),
        tags=[_parse_tag("\n".join(lines)) for lines in tag_lines],
    )


# ################
# Implementation
# ################

_logger = get_logger("annotations")

_BLOCK_RE = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
_TAG_START_RE = re.compile(r"@[A-Za-z]")
_TITLE_RE = re.compile(r"@([A-Za-z][A-Za-z0-9_]*)")
_LEADING_STAR_RE = re.compile(r"^\s*\* ?")


def _unwrap_comment(body: str) -> str:
    """Strip the leading ``*`` gutter of each comment line."""
    return "\n".join(_LEADING_STAR_RE.sub("", line) for line in body.splitlines())


def _read_braced(text: str) -> tuple[str, str] | None:
    """Read a ``{...}`` group with nested braces from the start of *text*."""
    if not text.startswith("{"):
        return None
    depth = 0
    for index, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[1:index], text[index + 1 :]
    return None


def _strip_dash(text: str) -> str:
    """Remove the ``-`` separating a tag's name from its description."""
    text = text.strip()
    if text.startswith("-"):
        text = text[1:]
    return text.strip()


def _parse_tag(text: str) -> AnnotationTag:
    match = _TITLE_RE.match(text)
    assert match is not None
    title = match.group(1)
    rest = text[match.end() :].lstrip()

    raw_type: str | None = None
    braced = _read_braced(rest)
    if braced is not None:
        raw_type, rest = braced[0].strip(), braced[1].lstrip()

    name: str | None = None
    optional = False
    if title in NAMED_TITLES and rest:
        parts = rest.split(None, 1)
        name = parts[0]
        rest = _strip_dash(parts[1] if len(parts) > 1 else "")
        if name.startswith("[") and name.endswith("]"):
            # [name] or [name=default] marks an optional parameter.
            optional = True
            name = name[1:-1].partition("=")[0]

    node: TypeNode | None = None
    if raw_type:
        try:
            node = parse_type(raw_type)
        except TypeExpressionError as exc:
            _logger.debug("Unparsable type {%s} in @%s: %s", raw_type, title, exc)
        else:
            if optional:
                node = OptionalNode(expression=node)

    return AnnotationTag(title=title, description=rest.strip(), type=node, name=name, raw_type=raw_type)
