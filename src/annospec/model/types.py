# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type-expression AST consumed by the schema compiler."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

PRIMITIVE_NAMES: frozenset[str] = frozenset({"string", "number", "integer", "boolean"})


class StringLiteralNode(BaseModel):
    """A quoted literal such as ``'email'``, used as an enum member or format."""

    kind: Literal["string_literal"] = "string_literal"
    value: str


class NullLiteralNode(BaseModel):
    """The ``null`` literal; only meaningful as a union branch."""

    kind: Literal["null_literal"] = "null_literal"


class NameNode(BaseModel):
    """A primitive name or a dotted ``Model`` / ``Model.field`` reference."""

    kind: Literal["name"] = "name"
    name: str


class ArrayNode(BaseModel):
    """The ``Array`` keyword; its item type arrives through an application."""

    kind: Literal["array"] = "array"


class ObjectNode(BaseModel):
    """The ``Object`` keyword; properties arrive as ``name<type>`` applications."""

    kind: Literal["object"] = "object"


class EnumNode(BaseModel):
    """The ``Enum`` keyword; members arrive as literal arguments."""

    kind: Literal["enum"] = "enum"


class DateNode(BaseModel):
    """The ``Date`` keyword; arguments are accepted formats."""

    kind: Literal["date"] = "date"


class FileNode(BaseModel):
    """The ``File`` keyword; arguments are accepted binary formats."""

    kind: Literal["file"] = "file"


class OptionalNode(BaseModel):
    """An optional expression (``T=`` or ``[name]``)."""

    kind: Literal["optional"] = "optional"
    expression: TypeNode


class ApplicationNode(BaseModel):
    """A generic application ``Base<Arg1, Arg2>``."""

    kind: Literal["application"] = "application"
    expression: TypeNode
    arguments: list[TypeNode] = _Field(default_factory=list)


class UnionNode(BaseModel):
    """A union ``(A|B|null)``."""

    kind: Literal["union"] = "union"
    elements: list[TypeNode] = _Field(default_factory=list)


class AnyNode(BaseModel):
    """The ``*`` wildcard."""

    kind: Literal["any"] = "any"


# A parsed type expression. The `kind` discriminator keeps the set closed.
TypeNode = Annotated[
    StringLiteralNode
    | NullLiteralNode
    | NameNode
    | ArrayNode
    | ObjectNode
    | EnumNode
    | DateNode
    | FileNode
    | OptionalNode
    | ApplicationNode
    | UnionNode
    | AnyNode,
    _Field(discriminator="kind"),
]


# Resolve forward references for the recursive nodes.
OptionalNode.model_rebuild()
ApplicationNode.model_rebuild()
UnionNode.model_rebuild()
