# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler from type-expression AST nodes to OpenAPI schema objects.

The compiler is a pure function of its inputs: it never mutates the node, the
options or the schema registry it is given.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from annospec.compiler.options import COMPOSITION_KEYWORDS
from annospec.errors import UnknownModelError, UnknownModelPropertyError
from annospec.model.types import (
    PRIMITIVE_NAMES,
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

# ###############
# Public Interface
# ###############

SCHEMA_REF_PREFIX = "#/components/schemas/"

# Model name -> compiled schema object.
SchemaRegistry = Mapping[str, Mapping[str, Any]]


def compile_type(
    node: TypeNode,
    registry: SchemaRegistry,
    field: str | None = None,
    options: Mapping[str, Any] | None = None,
    arguments: list[TypeNode] | None = None,
) -> Any:
    """Compile a type-expression node into a schema object.

    Args:
        node: The node to compile.
        registry: Known model schemas; name references resolve against it.
        field: Name of the decorated field, used in error messages.
        options: Parsed description options (see :mod:`annospec.compiler.options`).
            Only ``enum`` and ``format`` are consulted here.
        arguments: Type arguments of an enclosing application node.

    Returns:
        A schema dictionary, or the bare value of a string literal node.

    Raises:
        UnknownModelError: If a name reference's model is not in *registry*.
        UnknownModelPropertyError: If ``Model.property`` names an unknown property.
    """
    return _Compiler(registry, field, options or {}).compile(node, arguments or [])


def merge_options(schema: Any, options: Mapping[str, Any], *, exclude: frozenset[str] = frozenset()) -> Any:
    """Return *schema* with the option fields merged in.

    Reference schemas are returned unchanged, since siblings of ``$ref`` are
    ignored by OpenAPI 3.0 consumers. A composition keyword the compiled schema
    already carries (the ``anyOf`` of a union, the ``oneOf`` of ``string<a, b>``)
    is kept, and the option's composition is added as an ``allOf`` branch.
    """
    if not isinstance(schema, dict) or "$ref" in schema:
        return schema
    merged = dict(schema)
    for key, value in options.items():
        if key in exclude:
            continue
        if key in COMPOSITION_KEYWORDS and key in merged:
            if key == "allOf" and isinstance(value, list):
                merged["allOf"] = [*merged["allOf"], *value]
            else:
                merged["allOf"] = [*merged.get("allOf", []), {key: value}]
        else:
            merged[key] = value
    return merged


def is_required(node: TypeNode | None) -> bool:
    """Return False if *node* is an optional expression."""
    return not isinstance(node, OptionalNode)


# ################
# Implementation
# ################

_REGEX_LITERAL_RE = re.compile(r"/(.+)/([a-z]*)", re.DOTALL)

_ANY_SCHEMA_BRANCHES: tuple[dict[str, Any], ...] = (
    {"type": "string"},
    {"type": "number"},
    {"type": "integer"},
    {"type": "boolean"},
    {"type": "array", "items": {}},
    {"type": "object"},
)


def _regex_body(value: Any) -> str | None:
    """Return the body of a ``/body/flags`` literal that compiles, else None."""
    if not isinstance(value, str):
        return None
    match = _REGEX_LITERAL_RE.fullmatch(value)
    if match is None:
        return None
    try:
        re.compile(match.group(1))
    except re.error:
        return None
    return match.group(1)


class _Compiler:
    """Recursive translator bound to one registry, field and option set."""

    def __init__(self, registry: SchemaRegistry, field: str | None, options: Mapping[str, Any]) -> None:
        self._registry = registry
        self._field = field
        self._options = options

    def compile(self, node: TypeNode, arguments: list[TypeNode]) -> Any:
        """Dispatch on the node kind."""
        match node:
            case StringLiteralNode(value=value):
                return value
            case NameNode(name=name) if name in PRIMITIVE_NAMES:
                return self._primitive(name, arguments)
            case NameNode(name=name):
                return self._reference(name)
            case ArrayNode():
                return self._array(arguments)
            case ObjectNode():
                return self._object(arguments)
            case EnumNode():
                return self._enum(arguments)
            case DateNode() | FileNode():
                return self._formatted_string(arguments)
            case OptionalNode(expression=expression):
                return self.compile(expression, [])
            case ApplicationNode(expression=expression, arguments=applied):
                return self.compile(expression, applied)
            case UnionNode(elements=elements):
                return self._union(elements)
            case AnyNode():
                return {"nullable": True, "anyOf": [dict(branch) for branch in _ANY_SCHEMA_BRANCHES]}
            case NullLiteralNode():
                return {"nullable": True}
        raise TypeError(f"Unsupported type node: {node!r}")

    def _primitive(self, name: str, arguments: list[TypeNode]) -> dict[str, Any]:
        if name != "string" or not arguments:
            return {"type": name}
        variants: list[dict[str, Any]] = []
        for argument in arguments:
            value = self.compile(argument, [])
            body = _regex_body(value)
            if body is not None:
                variants.append({"type": "string", "pattern": body})
            else:
                variants.append({"type": "string", "format": value})
        if len(variants) == 1:
            return variants[0]
        return {"oneOf": variants}

    def _reference(self, name: str) -> dict[str, Any]:
        model, _, prop = name.partition(".")
        schema = self._registry.get(model)
        if schema is None:
            raise UnknownModelError(model, self._field)
        if prop:
            if prop not in schema.get("properties", {}):
                raise UnknownModelPropertyError(model, prop, self._field)
            return {"$ref": f"{SCHEMA_REF_PREFIX}{model}/properties/{prop}"}
        return {"$ref": f"{SCHEMA_REF_PREFIX}{model}"}

    def _array(self, arguments: list[TypeNode]) -> dict[str, Any]:
        items: Any = {}
        # The last argument wins when several are given.
        for argument in arguments:
            items = self.compile(argument, [])
        return {"type": "array", "items": items}

    def _object(self, arguments: list[TypeNode]) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for argument in arguments:
            if isinstance(argument, ApplicationNode) and isinstance(argument.expression, NameNode):
                value: Any = {}
                for inner in argument.arguments:
                    value = self.compile(inner, [])
                properties[argument.expression.name] = value
            elif isinstance(argument, NameNode):
                properties[argument.name] = {}
        return {"type": "object", "properties": properties}

    def _enum(self, arguments: list[TypeNode]) -> dict[str, Any]:
        if arguments:
            values = [self.compile(argument, []) for argument in arguments]
        else:
            values = list(self._options.get("enum", []))
        return {"type": "string", "enum": values}

    def _formatted_string(self, arguments: list[TypeNode]) -> dict[str, Any]:
        if arguments:
            return {"anyOf": [{"type": "string", "format": self.compile(argument, [])} for argument in arguments]}
        prop: dict[str, Any] = {"type": "string"}
        if self._options.get("format"):
            prop["format"] = self._options["format"]
        return prop

    def _union(self, elements: list[TypeNode]) -> dict[str, Any]:
        nullable = any(isinstance(element, NullLiteralNode) for element in elements)
        remaining = [element for element in elements if not isinstance(element, NullLiteralNode)]
        if len(remaining) > 1:
            prop: dict[str, Any] = {"anyOf": [self.compile(element, []) for element in remaining]}
        elif remaining:
            compiled = self.compile(remaining[0], [])
            prop = dict(compiled) if isinstance(compiled, dict) else {"enum": [compiled]}
        else:
            prop = {}
        prop["nullable"] = nullable
        return prop
