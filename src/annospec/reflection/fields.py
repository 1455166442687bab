# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component schemas for reflected data models.

Field kinds follow the usual relational vocabulary (``STRING``, ``BIGINT``,
``JSONB``, ...). Each kind maps to a fixed schema fragment; a handful of kinds
also read the field's length, enum values or element kind.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from annospec.model.entities import FieldDef, ModelDef

# ###############
# Public Interface
# ###############


def build_schemas(models: Iterable[ModelDef]) -> dict[str, dict[str, Any]]:
    """Build the schema registry for *models*, in the order given.

    A later model with an already seen name replaces the earlier schema.
    """
    return {model.name: build_model_schema(model) for model in models}


def build_model_schema(model: ModelDef) -> dict[str, Any]:
    """Build the object schema of one model; non-nullable fields are required."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {f.name: build_field_schema(f) for f in model.fields},
    }
    required = [f.name for f in model.fields if not f.nullable]
    if required:
        schema["required"] = required
    return schema


def build_field_schema(field: FieldDef) -> dict[str, Any]:
    """Build the schema of one field; unknown kinds produce an empty schema."""
    kind_schema = _kind_schema(field.kind, field)
    if kind_schema is None:
        return {}
    return {"nullable": field.nullable, "readOnly": field.primary_key, **kind_schema}


def is_known_kind(kind: str) -> bool:
    """Return True if *kind* is in the lookup table."""
    return kind.upper() in _SIMPLE_KINDS or kind.upper() in _COMPOSITE_KINDS


# ################
# Implementation
# ################

_IPV4 = r"((25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IPV6 = (
    r"(([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}|([0-9a-fA-F]{1,4}:){1,7}:|"
    r"([0-9a-fA-F]{1,4}:){1,6}:[0-9a-fA-F]{1,4}|::([0-9a-fA-F]{1,4}:){0,6}[0-9a-fA-F]{1,4}|::)"
)
_HOSTNAME = (
    r"(([a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9\-]*[a-zA-Z0-9])\.)*"
    r"([A-Za-z0-9]|[A-Za-z0-9][A-Za-z0-9\-]*[A-Za-z0-9])"
)
_CIDR_PATTERN = rf"^(({_IPV4})(/(3[0-2]|[12]?[0-9]))?|({_IPV6})(/(12[0-8]|1[01][0-9]|[1-9]?[0-9]))?|{_HOSTNAME})$"
_INET_PATTERN = rf"^({_IPV4}|{_IPV6}|{_HOSTNAME})$"

_SIMPLE_KINDS: dict[str, dict[str, Any]] = {
    "ABSTRACT": {"type": "object"},
    "BIGINT": {"type": "integer", "format": "int64"},
    "BLOB": {"type": "string", "format": "binary"},
    "BOOLEAN": {"type": "boolean"},
    "CIDR": {"type": "string", "pattern": _CIDR_PATTERN},
    "DATE": {"type": "string", "format": "date-time"},
    "DATEONLY": {"type": "string", "format": "date"},
    "DECIMAL": {"type": "number", "format": "float"},
    "DOUBLE": {"type": "number", "format": "double"},
    "FLOAT": {"type": "number", "format": "float"},
    "GEOGRAPHY": {"type": "string"},
    "HSTORE": {"type": "object"},
    "INET": {"type": "string", "pattern": _INET_PATTERN},
    "INTEGER": {"type": "integer", "format": "int32"},
    "JSON": {"type": "object"},
    "JSONB": {"type": "object"},
    "MACADDR": {"type": "string", "format": "mac"},
    "MEDIUMINT": {"type": "integer", "format": "int24"},
    "NOW": {"type": "integer", "format": "int32"},
    "NUMBER": {"type": "number"},
    "REAL": {"type": "number", "format": "float"},
    "SMALLINT": {"type": "integer", "format": "int16"},
    "TIME": {"type": "string", "format": "partial-time"},
    "TINYINT": {"type": "integer", "format": "int8"},
    "UUID": {"type": "string", "format": "uuid"},
    "UUIDV1": {"type": "string", "format": "uuidv1"},
    "UUIDV4": {"type": "string", "format": "uuidv4"},
    "VIRTUAL": {"type": "object"},
    "GEOMETRY": {
        "type": "object",
        "required": ["type", "coordinates"],
        "properties": {
            "crs": {"type": "object"},
            "coordinates": {"type": "array", "items": {"type": "number"}},
            "type": {
                "type": "string",
                "enum": ["Unknown", "Point", "Multipoint", "Polyline", "Polygon", "Envelop"],
            },
        },
    },
}

_COMPOSITE_KINDS = frozenset({"ARRAY", "CHAR", "CITEXT", "ENUM", "RANGE", "STRING", "TEXT"})


def _kind_schema(kind: str, field: FieldDef) -> dict[str, Any] | None:
    """Return the type part of a field schema, or None for an unknown kind."""
    kind = kind.upper()
    if kind in _SIMPLE_KINDS:
        return _copy(_SIMPLE_KINDS[kind])
    if kind in ("STRING", "CHAR", "TEXT", "CITEXT"):
        prop: dict[str, Any] = {"type": "string"}
        if field.max_length is not None:
            prop["maxLength"] = field.max_length
        return prop
    if kind == "ENUM":
        return {"type": "string", "enum": list(field.values)}
    if kind == "ARRAY":
        return {"type": "array", "items": _kind_schema(field.subtype or "", field) or {}}
    if kind == "RANGE":
        subtype = _kind_schema(field.subtype or "", field) or {}
        return {"type": subtype["type"]} if "type" in subtype else {}
    return None


def _copy(schema: dict[str, Any]) -> dict[str, Any]:
    """Deep-copy a table entry so callers may mutate the result."""
    return {
        key: _copy(value) if isinstance(value, dict) else list(value) if isinstance(value, list) else value
        for key, value in schema.items()
    }
