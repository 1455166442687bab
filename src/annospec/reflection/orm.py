# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reflection of SQLAlchemy declarative models into model definitions."""

from __future__ import annotations

import importlib
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from annospec.logging import get_logger
from annospec.model.entities import FieldDef, ModelDef
from annospec.reflection.loader import ModelSourceError

# ###############
# Public Interface
# ###############


def reflect_sqlalchemy(source: Any) -> list[ModelDef]:
    """Reflect mapped classes into model definitions.

    Args:
        source: A declarative base (every class mapped in its registry is
            reflected, ordered by class name) or an iterable of mapped classes
            (reflected in the order given).

    Raises:
        ModelSourceError: If an entry is not a mapped class.
    """
    registry = getattr(source, "registry", None)
    if registry is not None and hasattr(registry, "mappers"):
        classes = sorted((mapper.class_ for mapper in registry.mappers), key=lambda cls: cls.__name__)
    else:
        classes = list(source)
    return [reflect_class(cls) for cls in classes]


def reflect_class(cls: type) -> ModelDef:
    """Reflect the columns of one mapped class.

    Raises:
        ModelSourceError: If *cls* is not a mapped class.
    """
    try:
        mapper = sa.inspect(cls)
    except sa.exc.NoInspectionAvailable:
        raise ModelSourceError(f"{cls!r} is not a mapped class") from None
    fields = [_reflect_column(column) for column in mapper.columns]
    return ModelDef(name=cls.__name__, fields=fields)


def import_declarative_base(target: str) -> Any:
    """Import ``"package.module:Base"`` and return the named attribute.

    Raises:
        ModelSourceError: If the module or attribute cannot be found.
    """
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ModelSourceError(f"Expected 'module:attribute', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ModelSourceError(f"Cannot import '{module_name}': {exc}") from exc
    try:
        return getattr(module, attribute)
    except AttributeError:
        raise ModelSourceError(f"Module '{module_name}' has no attribute '{attribute}'") from None


def column_kind(column_type: sa.types.TypeEngine) -> str | None:
    """Return the field kind of a column type, or None if it has no counterpart."""
    for type_class, kind in _TYPE_KINDS:
        if isinstance(column_type, type_class):
            return kind
    return None


# ################
# Implementation
# ################

_logger = get_logger("reflection")

# Subclasses precede their bases.
_TYPE_KINDS: list[tuple[type, str]] = [
    (postgresql.INET, "INET"),
    (postgresql.CIDR, "CIDR"),
    (postgresql.MACADDR, "MACADDR"),
    (postgresql.HSTORE, "HSTORE"),
    (postgresql.JSONB, "JSONB"),
    (postgresql.INT4RANGE, "RANGE"),
    (postgresql.INT8RANGE, "RANGE"),
    (postgresql.NUMRANGE, "RANGE"),
    (postgresql.DATERANGE, "RANGE"),
    (postgresql.TSRANGE, "RANGE"),
    (postgresql.TSTZRANGE, "RANGE"),
    (sa.Enum, "ENUM"),
    (sa.ARRAY, "ARRAY"),
    (sa.JSON, "JSON"),
    (sa.Uuid, "UUID"),
    (sa.CHAR, "CHAR"),
    (sa.Text, "TEXT"),
    (sa.String, "STRING"),
    (sa.BigInteger, "BIGINT"),
    (sa.SmallInteger, "SMALLINT"),
    (sa.Integer, "INTEGER"),
    (sa.Double, "DOUBLE"),
    (sa.REAL, "REAL"),
    (sa.Float, "FLOAT"),
    (sa.Numeric, "DECIMAL"),
    (sa.Boolean, "BOOLEAN"),
    (sa.DateTime, "DATE"),
    (sa.Date, "DATEONLY"),
    (sa.Time, "TIME"),
    (sa.LargeBinary, "BLOB"),
]

_RANGE_SUBTYPES: list[tuple[type, str]] = [
    (postgresql.INT4RANGE, "INTEGER"),
    (postgresql.INT8RANGE, "BIGINT"),
    (postgresql.NUMRANGE, "DECIMAL"),
    (postgresql.DATERANGE, "DATEONLY"),
    (postgresql.TSRANGE, "DATE"),
    (postgresql.TSTZRANGE, "DATE"),
]


def _reflect_column(column: sa.Column) -> FieldDef:
    column_type = column.type
    kind = column_kind(column_type)
    if kind is None:
        _logger.debug("Column %s has unsupported type %r", column.key, column_type)
        kind = type(column_type).__name__.upper()

    subtype: str | None = None
    values: list[str] = []
    max_length: int | None = None
    if kind == "ARRAY":
        subtype = column_kind(column_type.item_type)
    elif kind == "RANGE":
        subtype = next((sub for cls, sub in _RANGE_SUBTYPES if isinstance(column_type, cls)), None)
    elif kind == "ENUM":
        values = list(column_type.enums)
    elif kind in ("STRING", "CHAR", "TEXT"):
        max_length = column_type.length

    return FieldDef(
        name=column.key,
        kind=kind,
        nullable=bool(column.nullable),
        primary_key=column.primary_key,
        max_length=max_length,
        values=values,
        subtype=subtype,
    )
