# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the annospec generation configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".annospec.yaml"

OUTPUT_FORMATS: tuple[str, ...] = ("json", "yaml")


class MissingConfigurationError(Exception):
    """Raised when the generation configuration is absent, unreadable or incomplete."""


@dataclass
class YamlModelSource:
    """Model definitions read from a YAML file."""

    path: Path


@dataclass
class SqlAlchemyModelSource:
    """Model definitions reflected from a SQLAlchemy declarative base (``module:Base``)."""

    target: str


ModelSource = YamlModelSource | SqlAlchemyModelSource


@dataclass
class GenerationConfig:
    """The parsed configuration for one generation run.

    Attributes:
        definition: Document skeleton; ``info`` is required, ``servers`` and
            ``tags`` are optional.
        files: Glob patterns of annotated source files, relative to ``basedir``.
        basedir: Directory the file patterns are expanded in.
        models: Where the data models come from.
        output: Path of the generated document, or None to write to stdout.
        format: Output serialization, ``json`` or ``yaml``.
    """

    definition: dict[str, Any]
    files: list[str]
    basedir: Path
    models: ModelSource
    output: Path | None = None
    format: str = "json"


def load_generation_config(path: Path) -> GenerationConfig:
    """Load and parse a generation configuration file.

    Relative paths in the file are resolved against the file's directory.

    Args:
        path: Path to the `.annospec.yaml` file.

    Raises:
        MissingConfigurationError: If the file cannot be read or a required
            setting is absent or invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise MissingConfigurationError(f"Configuration file not found: {path}") from None
    except OSError as exc:
        raise MissingConfigurationError(f"Cannot read configuration file: {exc}") from exc

    return parse_generation_config(text, root=path.parent, source_label=str(path))


def parse_generation_config(text: str, root: Path, source_label: str = "<string>") -> GenerationConfig:
    """Parse configuration YAML text into a GenerationConfig.

    Args:
        text: Raw YAML content.
        root: Directory relative paths are resolved against.
        source_label: Human-readable label used in error messages.

    Raises:
        MissingConfigurationError: If the YAML is invalid or required settings are missing.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MissingConfigurationError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise MissingConfigurationError(f"{source_label}: configuration must be a YAML mapping")

    definition = _parse_definition(data.get("definition"), source_label)
    files = _parse_files(data.get("files"), source_label)
    basedir = root / _require_string(data, "basedir", source_label) if "basedir" in data else root
    models = _parse_models(data.get("models"), root, source_label)

    output: Path | None = None
    if data.get("output") is not None:
        output = root / _require_string(data, "output", source_label)

    output_format = data.get("format")
    if output_format is None:
        output_format = "yaml" if output is not None and output.suffix in (".yaml", ".yml") else "json"
    if output_format not in OUTPUT_FORMATS:
        raise MissingConfigurationError(
            f"{source_label}: 'format' must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}"
        )

    return GenerationConfig(
        definition=definition,
        files=files,
        basedir=basedir,
        models=models,
        output=output,
        format=output_format,
    )


def render_starter_config() -> str:
    """Return the YAML text of a starter configuration."""
    return yaml.safe_dump(_STARTER_CONFIG, sort_keys=False)


# ################
# Implementation
# ################

_STARTER_CONFIG: dict[str, Any] = {
    "definition": {
        "info": {"title": "My API", "version": "1.0.0"},
        "servers": [{"url": "http://localhost:8000"}],
    },
    "files": ["src/**/*.py"],
    "basedir": ".",
    "models": "models.yaml",
    "output": "openapi.json",
}


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising MissingConfigurationError if missing."""
    if key not in mapping or mapping[key] is None:
        raise MissingConfigurationError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise MissingConfigurationError(f"{source_label}: '{key}' must be a string")
    return value


def _parse_definition(raw: object, source_label: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise MissingConfigurationError(f"{source_label}: missing required mapping 'definition'")
    if not isinstance(raw.get("info"), dict):
        raise MissingConfigurationError(f"{source_label}: missing required mapping 'definition.info'")
    for key in ("servers", "tags"):
        if key in raw and not isinstance(raw[key], list):
            raise MissingConfigurationError(f"{source_label}: 'definition.{key}' must be a list")
    return raw


def _parse_files(raw: object, source_label: str) -> list[str]:
    if raw is None:
        raise MissingConfigurationError(f"{source_label}: missing required field 'files'")
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw or not all(isinstance(p, str) for p in raw):
        raise MissingConfigurationError(f"{source_label}: 'files' must be a non-empty list of glob patterns")
    return list(raw)


def _parse_models(raw: object, root: Path, source_label: str) -> ModelSource:
    if raw is None:
        raise MissingConfigurationError(f"{source_label}: missing required field 'models'")
    if isinstance(raw, str):
        return YamlModelSource(path=root / raw)
    if isinstance(raw, dict):
        if "sqlalchemy" in raw:
            return SqlAlchemyModelSource(target=_require_string(raw, "sqlalchemy", f"{source_label}: models"))
        if "yaml" in raw:
            return YamlModelSource(path=root / _require_string(raw, "yaml", f"{source_label}: models"))
    raise MissingConfigurationError(
        f"{source_label}: 'models' must be a YAML file path or a mapping with 'yaml' or 'sqlalchemy'"
    )
