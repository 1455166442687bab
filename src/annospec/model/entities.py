# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data-model entities reflected from the persistence layer."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class FieldDef(BaseModel):
    """A reflected model field.

    Attributes:
        name: Column / attribute name.
        kind: Upper-case primitive kind such as ``STRING`` or ``BIGINT``.
        nullable: Whether the field accepts null.
        primary_key: Whether the field is (part of) the primary key.
        max_length: Declared maximum length for character kinds.
        values: Allowed values for ``ENUM`` fields.
        subtype: Element kind for ``ARRAY`` and ``RANGE`` fields.
    """

    name: str
    kind: str
    nullable: bool = True
    primary_key: bool = False
    max_length: int | None = None
    values: list[str] = _Field(default_factory=list)
    subtype: str | None = None


class ModelDef(BaseModel):
    """A reflected model: a name and its ordered fields."""

    name: str
    fields: list[FieldDef] = _Field(default_factory=list)
