# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of model definitions from YAML files.

The file maps model names to their fields. A field is either a bare kind or a
mapping of :class:`~annospec.model.entities.FieldDef` attributes::

    User:
      id: {kind: INTEGER, primary-key: true, nullable: false}
      name: {kind: STRING, max-length: 64}
      email: STRING
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pydantic
import yaml

from annospec.logging import get_logger
from annospec.model.entities import FieldDef, ModelDef
from annospec.reflection.fields import is_known_kind

# ###############
# Public Interface
# ###############


class ModelSourceError(Exception):
    """Raised when model definitions cannot be read or are invalid."""


def load_models(path: Path) -> list[ModelDef]:
    """Load model definitions from a YAML file, in file order.

    Raises:
        ModelSourceError: If the file cannot be read or a definition is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ModelSourceError(f"Model file not found: {path}") from None
    except OSError as exc:
        raise ModelSourceError(f"Cannot read model file: {exc}") from exc

    return parse_models(text, source_label=str(path))


def parse_models(text: str, source_label: str = "<string>") -> list[ModelDef]:
    """Parse YAML model definitions.

    Raises:
        ModelSourceError: If the YAML is invalid or a definition is malformed.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ModelSourceError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, dict):
        raise ModelSourceError(f"{source_label}: model definitions must be a YAML mapping")

    return [_parse_model(str(name), fields, source_label) for name, fields in data.items()]


# ################
# Implementation
# ################

_logger = get_logger("reflection")


def _parse_model(name: str, raw_fields: Any, source_label: str) -> ModelDef:
    location = f"{source_label}: model '{name}'"
    if raw_fields is None:
        return ModelDef(name=name)
    if not isinstance(raw_fields, dict):
        raise ModelSourceError(f"{location} must map field names to definitions")
    fields = [_parse_field(str(field_name), entry, location) for field_name, entry in raw_fields.items()]
    return ModelDef(name=name, fields=fields)


def _parse_field(name: str, entry: Any, location: str) -> FieldDef:
    if isinstance(entry, str):
        entry = {"kind": entry}
    if not isinstance(entry, dict):
        raise ModelSourceError(f"{location}, field '{name}': must be a kind or a mapping")
    attributes = {str(key).replace("-", "_"): value for key, value in entry.items()}
    if isinstance(attributes.get("kind"), str):
        attributes["kind"] = attributes["kind"].upper()
    if isinstance(attributes.get("subtype"), str):
        attributes["subtype"] = attributes["subtype"].upper()
    try:
        field = FieldDef(name=name, **attributes)
    except pydantic.ValidationError as exc:
        raise ModelSourceError(f"{location}, field '{name}': {exc}") from exc
    if not is_known_kind(field.kind):
        _logger.warning("%s, field '%s': unknown kind %s, emitting an empty schema", location, name, field.kind)
    return field
