# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Input models: type-expression AST, annotation records and reflected entities."""

from annospec.model.annotations import AnnotationRecord, AnnotationTag
from annospec.model.entities import FieldDef, ModelDef
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

__all__ = [
    # Type expressions
    "PRIMITIVE_NAMES",
    "StringLiteralNode",
    "NullLiteralNode",
    "NameNode",
    "ArrayNode",
    "ObjectNode",
    "EnumNode",
    "DateNode",
    "FileNode",
    "OptionalNode",
    "ApplicationNode",
    "UnionNode",
    "AnyNode",
    "TypeNode",
    # Annotations
    "AnnotationTag",
    "AnnotationRecord",
    # Entities
    "FieldDef",
    "ModelDef",
]
