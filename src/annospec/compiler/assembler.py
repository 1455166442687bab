# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembly of annotation streams into OpenAPI path items.

Each annotation record (one per documented routine) is processed on its own:
tags before the first ``@route`` are ignored, and every ``@route`` opens an
operation that the following ``@param``, ``@returns`` and operation-level
tags fill in. A failing stream is reported as a :class:`Diagnostic` and leaves
the cumulative document untouched.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from annospec.compiler.merge import deep_merge, merge_tags
from annospec.compiler.options import LOCATIONS, parse_options
from annospec.compiler.schema import SchemaRegistry, compile_type, is_required, merge_options
from annospec.errors import AnnotationError, InvalidLocationError
from annospec.logging import get_logger
from annospec.model.annotations import AnnotationRecord, AnnotationTag
from annospec.model.types import TypeNode
from annospec.parser.type_expression import parse_type

# ###############
# Public Interface
# ###############

DEFAULT_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable failure of one annotation stream.

    Attributes:
        source: The file (or other label) the stream came from.
        index: 0-based position of the stream within its source.
        message: Human-readable description of the failure.
    """

    source: str
    index: int
    message: str

    def __str__(self) -> str:
        return f"{self.source} [block {self.index + 1}]: {self.message}"


@dataclass
class PathFragment:
    """Paths and tags produced by one annotation stream."""

    paths: dict[str, dict[str, Any]] = field(default_factory=dict)
    tags: list[dict[str, str]] = field(default_factory=list)


def assemble_stream(record: AnnotationRecord, registry: SchemaRegistry) -> PathFragment:
    """Build the path-item fragment documented by one annotation record.

    Raises:
        AnnotationError: If a parameter or return type cannot be compiled.
    """
    return _StreamAssembler(record, registry).assemble()


class DocumentAssembler:
    """Cumulative paths and tag catalog for one generation run.

    Attributes:
        paths: URI template -> HTTP method -> operation object.
        tags: Tag catalog, deduplicated by name (first occurrence wins).
        diagnostics: Failures of the streams skipped so far.
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self.paths: dict[str, dict[str, Any]] = {}
        self.tags: list[dict[str, str]] = []
        self.diagnostics: list[Diagnostic] = []

    def add_stream(self, record: AnnotationRecord, *, source: str = "<memory>", index: int = 0) -> Diagnostic | None:
        """Assemble one stream and merge it; return its diagnostic on failure."""
        try:
            fragment = assemble_stream(record, self._registry)
        except AnnotationError as exc:
            diagnostic = Diagnostic(source=source, index=index, message=str(exc))
            _logger.warning("Skipping %s", diagnostic)
            self.diagnostics.append(diagnostic)
            return diagnostic
        self.merge(fragment)
        return None

    def add_file(self, records: Iterable[AnnotationRecord], source: str) -> list[Diagnostic]:
        """Assemble every stream of one file; return the diagnostics it produced."""
        diagnostics: list[Diagnostic] = []
        for index, record in enumerate(records):
            diagnostic = self.add_stream(record, source=source, index=index)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
        _logger.debug("Processed %s (%d skipped)", source, len(diagnostics))
        return diagnostics

    def merge(self, fragment: PathFragment) -> None:
        """Merge a fragment into the cumulative paths and tag catalog."""
        deep_merge(self.paths, fragment.paths)
        merge_tags(self.tags, fragment.tags)


# ################
# Implementation
# ################

_logger = get_logger("assembler")

_OPERATION_TITLES = frozenset({"operationId", "summary", "produces", "consumes", "security", "deprecated"})
_MEDIA_TYPE_SPLIT_RE = re.compile(r"[\s,]+")


def _parse_route(description: str) -> tuple[str, str]:
    """Parse ``"<METHOD> <URI>"`` into ``(method, uri)``."""
    parts = description.split()
    if not parts:
        return "get", ""
    if parts[0].startswith("/"):
        return "get", parts[0]
    return parts[0].lower(), parts[1] if len(parts) > 1 else ""


def _split_dash(description: str) -> tuple[str, str]:
    """Split ``"<head> - <tail>"``, preferring a spaced dash over a bare one."""
    separator = " - " if " - " in description else "-"
    head, _, tail = description.partition(separator)
    return head.strip(), tail.strip()


def _parse_group(record: AnnotationRecord) -> tuple[str, str]:
    groups = record.find("group")
    if not groups:
        return "default", ""
    return _split_dash(groups[0].description)


def _parse_media_types(description: str) -> list[str]:
    return [media_type for media_type in _MEDIA_TYPE_SPLIT_RE.split(description.strip()) if media_type]


def _parse_security(description: str) -> Any:
    try:
        return json.loads(description)
    except json.JSONDecodeError:
        return [{description.strip(): []}]


def _sanitize_description(description: str) -> str:
    return description.replace("/**", "", 1).strip()


def _tag_type(tag: AnnotationTag) -> TypeNode | None:
    """Return the tag's type, re-parsing a type the extractor could not parse.

    Raises:
        TypeExpressionError: If the written type is malformed.
    """
    if tag.type is None and tag.raw_type:
        return parse_type(tag.raw_type)
    return tag.type


class _Operation:
    """An operation under construction together with its deferred parts."""

    def __init__(self, body: dict[str, Any]) -> None:
        self.body = body
        self.body_properties: dict[str, Any] = {}
        self.body_required: list[str] = []
        self.returns: list[AnnotationTag] = []
        self.consumes: list[str] = [DEFAULT_MEDIA_TYPE]
        self.produces: list[str] = [DEFAULT_MEDIA_TYPE]


class _StreamAssembler:
    """State machine over the tags of a single annotation record."""

    def __init__(self, record: AnnotationRecord, registry: SchemaRegistry) -> None:
        self._record = record
        self._registry = registry
        self._description = _sanitize_description(record.description)
        self._headers = self._parse_headers()
        self._fragment = PathFragment()
        self._operation: _Operation | None = None

    def assemble(self) -> PathFragment:
        for tag in self._record.tags:
            if tag.title == "route":
                self._open_route(tag)
            elif self._operation is None:
                continue
            elif tag.title == "param":
                self._add_param(self._operation, tag)
            elif tag.title in ("returns", "return"):
                self._operation.returns.append(tag)
            elif tag.title in _OPERATION_TITLES:
                self._set_operation_field(self._operation, tag)
        self._close_route()
        return self._fragment

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def _open_route(self, tag: AnnotationTag) -> None:
        self._close_route()
        method, uri = _parse_route(tag.description)
        group_name, group_description = _parse_group(self._record)
        body: dict[str, Any] = {
            "tags": [group_name],
            "parameters": [],
            "requestBody": {"description": self._description, "content": {}},
        }
        if self._description:
            body["description"] = self._description
        self._fragment.paths.setdefault(uri, {})[method] = body
        merge_tags(self._fragment.tags, [{"name": group_name, "description": group_description}])
        self._operation = _Operation(body)
        _logger.debug("Opened operation %s %s", method.upper(), uri)

    def _close_route(self) -> None:
        operation = self._operation
        if operation is None:
            return
        self._operation = None
        if operation.body_properties:
            schema: dict[str, Any] = {"type": "object", "properties": operation.body_properties}
            if operation.body_required:
                schema["required"] = operation.body_required
            operation.body["requestBody"]["content"] = {
                media_type: {"schema": schema} for media_type in operation.consumes
            }
        if not operation.body["requestBody"]["content"]:
            del operation.body["requestBody"]
        operation.body["responses"] = self._build_responses(operation)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _add_param(self, operation: _Operation, tag: AnnotationTag) -> None:
        parts = (tag.name or "").split(".")
        location = parts[0] if parts[0] else None
        if location not in LOCATIONS:
            raise InvalidLocationError(location, parts[1] if len(parts) > 1 else tag.name)
        if len(parts) < 2 or not parts[1]:
            raise AnnotationError(f"Parameter '{tag.name}' must be written as <location>.<field>")
        name = parts[1]
        modifiers = set(parts[2:])

        options = parse_options(tag.description)
        node = _tag_type(tag)
        required = "optional" not in modifiers and ("required" in modifiers or is_required(node))
        schema: Any = {}
        if node is not None:
            schema = compile_type(node, self._registry, name, options)

        if location == "body":
            operation.body_properties[name] = merge_options(schema, options, exclude=frozenset({"in"}))
            if required:
                operation.body_required.append(name)
            return

        parameter: dict[str, Any] = {
            "name": name,
            "in": "header" if location == "headers" else location,
            "required": required or location == "path",
        }
        if options.get("description"):
            parameter["description"] = options["description"]
        parameter["schema"] = merge_options(schema, options, exclude=frozenset({"in", "description"}))
        operation.body["parameters"].append(parameter)

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def _parse_headers(self) -> dict[str, dict[str, Any]]:
        """Collect ``@headers <status>.<Name>`` entries keyed by status."""
        headers: dict[str, dict[str, Any]] = {}
        for tag in self._record.find("headers", "header"):
            target, description = tag.name, tag.description
            if not target:
                target, description = _split_dash(tag.description)
            status, _, header_name = (target or "").partition(".")
            if not status or not header_name:
                _logger.debug("Ignoring malformed header tag %r", tag.description)
                continue
            schema: Any = {"type": "string"}
            node = _tag_type(tag)
            if node is not None:
                schema = compile_type(node, self._registry, header_name)
            entry: dict[str, Any] = {"schema": schema}
            if description:
                entry["description"] = description
            headers.setdefault(status, {})[header_name] = entry
        return headers

    def _build_responses(self, operation: _Operation) -> dict[str, Any]:
        responses: dict[str, Any] = {}
        for tag in operation.returns:
            key, description = _split_dash(tag.description)
            key = key or "default"
            response: dict[str, Any] = {"description": description}
            if key in self._headers:
                response["headers"] = self._headers[key]
            node = _tag_type(tag)
            if node is not None:
                schema = compile_type(node, self._registry, key)
                response["content"] = {media_type: {"schema": schema} for media_type in operation.produces}
            responses[key] = response
        if not responses:
            responses["default"] = {"description": "Unexpected error"}
        return responses

    # ------------------------------------------------------------------
    # Operation-level tags
    # ------------------------------------------------------------------

    def _set_operation_field(self, operation: _Operation, tag: AnnotationTag) -> None:
        if tag.title in ("operationId", "summary"):
            operation.body[tag.title] = tag.description.strip()
        elif tag.title == "produces":
            operation.produces = _parse_media_types(tag.description) or [DEFAULT_MEDIA_TYPE]
        elif tag.title == "consumes":
            operation.consumes = _parse_media_types(tag.description) or [DEFAULT_MEDIA_TYPE]
        elif tag.title == "security":
            operation.body["security"] = _parse_security(tag.description)
        elif tag.title == "deprecated":
            operation.body["deprecated"] = True
