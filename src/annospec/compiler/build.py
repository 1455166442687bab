# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end generation workflow.

The run happens in three steps:

1. The Schema Registry is built from the configured model source. This always
   completes before any annotation is compiled.
2. Every file matched by the configured glob patterns is read, its annotation
   records extracted and fed to a :class:`DocumentAssembler`. A stream that
   fails is skipped with a diagnostic; the run goes on.
3. The document skeleton from the configuration is combined with the assembled
   paths, the tag catalog and the registry.

Unreadable files and broken model sources are fatal and raise
:class:`GenerationError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from annospec.compiler.assembler import Diagnostic, DocumentAssembler
from annospec.compiler.merge import merge_tags
from annospec.logging import get_logger
from annospec.parser.annotations import extract_file
from annospec.reflection.fields import build_schemas
from annospec.reflection.loader import ModelSourceError, load_models
from annospec.reflection.orm import import_declarative_base, reflect_sqlalchemy
from annospec.workspace.config import GenerationConfig, ModelSource, SqlAlchemyModelSource

# ###############
# Public Interface
# ###############

OPENAPI_VERSION = "3.0.1"


class GenerationError(Exception):
    """Raised when a generation run cannot continue.

    Covers unreadable or unparsable source files and broken model sources.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


@dataclass
class GenerationResult:
    """The generated document and the diagnostics of the skipped streams."""

    document: dict[str, Any]
    diagnostics: list[Diagnostic] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)


def generate(config: GenerationConfig) -> GenerationResult:
    """Run one generation for *config*.

    Raises:
        GenerationError: If the model source or a matched file cannot be loaded.
    """
    registry = load_registry(config.models)
    files = collect_files(config.files, config.basedir)
    _logger.debug("Matched %d file(s) under %s", len(files), config.basedir)

    assembler = DocumentAssembler(registry)
    for path in files:
        try:
            records = extract_file(path)
        except OSError as exc:
            raise GenerationError(f"Cannot read source file '{path}': {exc}") from exc
        except SyntaxError as exc:
            raise GenerationError(f"Cannot parse source file '{path}': {exc}") from exc
        assembler.add_file(records, _display_path(path, config.basedir))

    document = build_document(config.definition, registry, assembler)
    return GenerationResult(document=document, diagnostics=list(assembler.diagnostics), files=files)


def load_registry(source: ModelSource) -> dict[str, dict[str, Any]]:
    """Build the Schema Registry from a model source.

    Raises:
        GenerationError: If the models cannot be loaded.
    """
    try:
        if isinstance(source, SqlAlchemyModelSource):
            models = reflect_sqlalchemy(import_declarative_base(source.target))
        else:
            models = load_models(source.path)
    except ModelSourceError as exc:
        raise GenerationError(str(exc)) from exc
    _logger.debug("Loaded %d model(s)", len(models))
    return build_schemas(models)


def collect_files(patterns: list[str], basedir: Path) -> list[Path]:
    """Expand glob patterns relative to *basedir*.

    Files are returned pattern by pattern, sorted within a pattern; a file
    matched by several patterns is listed once.
    """
    seen: set[Path] = set()
    files: list[Path] = []
    for pattern in patterns:
        for path in sorted(basedir.glob(pattern)):
            if path.is_file() and path not in seen:
                seen.add(path)
                files.append(path)
    return files


def build_document(
    definition: Mapping[str, Any],
    registry: Mapping[str, Any],
    assembler: DocumentAssembler,
) -> dict[str, Any]:
    """Combine the document skeleton with the assembled paths, tags and schemas.

    Tags declared in the skeleton come first and take precedence over tags of
    the same name collected from annotations.
    """
    tags: list[dict[str, Any]] = []
    merge_tags(tags, definition.get("tags", []))
    merge_tags(tags, assembler.tags)
    return {
        "openapi": OPENAPI_VERSION,
        "info": dict(definition["info"]),
        "servers": list(definition.get("servers", [])),
        "tags": tags,
        "paths": assembler.paths,
        "components": {"schemas": dict(registry)},
    }


# ################
# Implementation
# ################

_logger = get_logger("build")


def _display_path(path: Path, basedir: Path) -> str:
    try:
        return str(path.relative_to(basedir)).replace("\\", "/")
    except ValueError:
        return str(path)
