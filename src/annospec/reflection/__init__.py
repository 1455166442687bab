# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component schemas reflected from data models."""

from annospec.reflection.fields import build_field_schema, build_model_schema, build_schemas
from annospec.reflection.loader import ModelSourceError, load_models, parse_models
from annospec.reflection.orm import reflect_class, reflect_sqlalchemy

__all__ = [
    "build_schemas",
    "build_model_schema",
    "build_field_schema",
    "load_models",
    "parse_models",
    "ModelSourceError",
    "reflect_sqlalchemy",
    "reflect_class",
]
