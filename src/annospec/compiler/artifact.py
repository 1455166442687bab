# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization of generated documents as JSON or YAML."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

# ###############
# Public Interface
# ###############


def serialize(document: dict[str, Any], output_format: str = "json") -> str:
    """Serialize a document to JSON (indented) or YAML (block style, key order kept).

    Raises:
        ValueError: If *output_format* is not ``json`` or ``yaml``, or a JSON document
            holds a non-finite number.
    """
    if output_format == "json":
        return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
    if output_format == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, default_flow_style=False)
    raise ValueError(f"Unsupported output format: {output_format!r}")


def deserialize(data: str, output_format: str = "json") -> dict[str, Any]:
    """Parse a document produced by :func:`serialize`.

    Raises:
        ValueError: If the data is not a mapping or the format is unknown.
    """
    if output_format == "json":
        obj = json.loads(data)
    elif output_format == "yaml":
        obj = yaml.safe_load(data)
    else:
        raise ValueError(f"Unsupported output format: {output_format!r}")
    if not isinstance(obj, dict):
        raise ValueError("Document must be a mapping")
    return obj


def write_document(document: dict[str, Any], path: Path, output_format: str = "json") -> None:
    """Write a document to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(document, output_format), encoding="utf-8")


def read_document(path: Path, output_format: str = "json") -> dict[str, Any]:
    """Read and parse a document from *path*."""
    return deserialize(path.read_text(encoding="utf-8"), output_format)
