# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Option grammar for annotation descriptions.

A parameter description may carry schema constraints as dash bullets::

    @param {string} query.name - Name filter
      - minLength: 3
      - pattern: ^[a-z]+$
      - anyOf:
      - format: email
      - format: uuid

Parsing happens in two passes. :func:`reduce_options` folds the bullets into
an :class:`OptionStore`, accumulating every scalar constraint into a list so
that repeated keywords are kept. :func:`construct_options` then flattens the
store into the keys of a schema object: single values are hoisted, repeated
values are promoted into a composition list (``anyOf`` unless another
composition is open).
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from annospec.errors import InvalidLocationError, MalformedLiteralError

# ###############
# Public Interface
# ###############

LOCATIONS: tuple[str, ...] = ("query", "path", "body", "headers")

COMPOSITION_KEYWORDS: frozenset[str] = frozenset({"not", "allOf", "anyOf", "oneOf"})


@dataclass
class OptionStore:
    """Accumulated, not yet flattened, options of one description.

    Attributes:
        values: Object keyword values as written (``str`` or ``None`` when
            valueless), lists of coerced values for scalar keywords, and a
            nested :class:`OptionStore` for each composition keyword.
        level: The composition keyword currently open for nested accumulation.
    """

    values: dict[str, Any] = field(default_factory=dict)
    level: str | None = None


def parse_options(description: str | None) -> dict[str, Any]:
    """Parse a description into flattened schema options.

    Raises:
        InvalidLocationError: If an ``in`` option names an unknown location.
        MalformedLiteralError: If a value fails its keyword's coercion.
    """
    return construct_options(reduce_options(description))


def reduce_options(description: str | None) -> OptionStore:
    """Fold the bullet segments of *description* into an :class:`OptionStore`.

    Segments that are not ``key: value`` pairs of a known keyword are taken as
    the plain-text description; the last such segment wins.

    Raises:
        MalformedLiteralError: If a scalar constraint value cannot be coerced.
    """
    store = OptionStore()
    for segment in _BULLET_RE.split(description or ""):
        segment = segment.strip()
        if segment:
            _reduce_segment(store, segment)
    return store


def construct_options(store: OptionStore, level: str | None = None) -> dict[str, Any]:
    """Flatten an :class:`OptionStore` into schema keys.

    Args:
        store: The accumulated options.
        level: The composition keyword *store* belongs to. Inside ``allOf``,
            ``anyOf`` and ``oneOf`` every scalar value becomes a single-key
            object of that composition's list.

    Raises:
        InvalidLocationError: If the ``in`` option is not a known location.
        MalformedLiteralError: If ``required`` is not a JSON literal.
    """
    result: dict[str, Any] = {}
    level_key = level or "anyOf"
    for key, option in store.values.items():
        if key in _SCALAR_KEYWORDS:
            if level is None and len(option) == 1:
                result[key] = option[0]
            else:
                result.setdefault(level_key, []).extend({key: variant} for variant in option)
        elif key in ("allOf", "anyOf", "oneOf"):
            result.setdefault(key, []).extend(construct_options(option, key).get(key, []))
        elif key == "not":
            result[key] = construct_options(option)
        else:
            result[key] = _OBJECT_KEYWORDS[key](option)
    return result


def is_option_keyword(key: str) -> bool:
    """Return True if *key* belongs to either keyword vocabulary."""
    return key in _OBJECT_KEYWORDS or key in _SCALAR_KEYWORDS


# ################
# Implementation
# ################

# A bullet is a dash at the start of a line (or of the whole text).
_BULLET_RE = re.compile(r"\n\s*-\s*|\A\s*-\s+")
_KEY_RE = re.compile(r"([A-Za-z0-9]+):(.*)", re.DOTALL)


def _location(value: str | None) -> str:
    if value not in LOCATIONS:
        raise InvalidLocationError(value)
    return value


def _flag(value: str | None) -> bool:
    return True if value is None else value == "true"


def _json_literal(keyword: str) -> Callable[[str | None], Any]:
    def coerce(value: str | None) -> Any:
        if value is None:
            raise MalformedLiteralError(keyword, value)
        try:
            return json.loads(value.replace("'", '"'))
        except json.JSONDecodeError:
            raise MalformedLiteralError(keyword, value) from None

    return coerce


def _json_array(keyword: str) -> Callable[[str | None], list[Any]]:
    parse = _json_literal(keyword)

    def coerce(value: str | None) -> list[Any]:
        parsed = parse(value)
        if not isinstance(parsed, list):
            raise MalformedLiteralError(keyword, value)
        return parsed

    return coerce


def _number(keyword: str) -> Callable[[str | None], int | float]:
    def coerce(value: str | None) -> int | float:
        if value is None:
            raise MalformedLiteralError(keyword, value)
        try:
            return int(value)
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            raise MalformedLiteralError(keyword, value) from None
        if not math.isfinite(number):
            raise MalformedLiteralError(keyword, value)
        return number

    return coerce


def _integer(keyword: str) -> Callable[[str | None], int]:
    as_number = _number(keyword)

    def coerce(value: str | None) -> int:
        return round(as_number(value))

    return coerce


def _verbatim(value: Any) -> Any:
    return value


_OBJECT_KEYWORDS: dict[str, Callable[[Any], Any]] = {
    "in": _location,
    "description": _verbatim,
    "not": _verbatim,
    "deprecated": lambda _value: True,
    "discriminator": _verbatim,
    "example": _verbatim,
    "externalDocs": _verbatim,
    "nullable": _flag,
    "readOnly": _flag,
    "writeOnly": _flag,
    "xml": _verbatim,
    "required": _json_literal("required"),
    "oneOf": _verbatim,
    "allOf": _verbatim,
    "anyOf": _verbatim,
}

_SCALAR_KEYWORDS: dict[str, Callable[[str | None], Any]] = {
    "title": _verbatim,
    "format": _verbatim,
    "pattern": _verbatim,
    "enum": _json_array("enum"),
    "minimum": _number("minimum"),
    "maximum": _number("maximum"),
    "exclusiveMinimum": _flag,
    "exclusiveMaximum": _flag,
    "multipleOf": _number("multipleOf"),
    "minLength": _integer("minLength"),
    "maxLength": _integer("maxLength"),
    "minItems": _integer("minItems"),
    "maxItems": _integer("maxItems"),
    "uniqueItems": _flag,
    "minProperties": _integer("minProperties"),
    "maxProperties": _integer("maxProperties"),
}


def _split_key(segment: str) -> tuple[str, str | None] | None:
    """Split ``key: value`` into its parts; None if *segment* has no key prefix.

    A bare keyword such as ``nullable`` is a key without a value.
    """
    if is_option_keyword(segment):
        return segment, None
    match = _KEY_RE.match(segment)
    if match is None:
        return None
    value = match.group(2).strip()
    return match.group(1), value or None


def _reduce_segment(store: OptionStore, segment: str) -> None:
    """Accumulate one bullet segment into *store*."""
    pair = _split_key(segment)
    if pair is None or not is_option_keyword(pair[0]):
        # Prose, or a key outside both vocabularies: treated as description.
        store.values["description"] = segment
        return

    key, value = pair
    if key in _OBJECT_KEYWORDS:
        if key in COMPOSITION_KEYWORDS:
            store.values[key] = OptionStore()
            store.level = key
        else:
            store.values[key] = value
        return

    coerced = _SCALAR_KEYWORDS[key](value)
    target = store.values[store.level] if store.level is not None else store
    target.values.setdefault(key, []).append(coerced)
