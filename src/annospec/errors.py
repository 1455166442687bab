# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised while compiling a single annotation stream.

All of them derive from :class:`AnnotationError`, which the document assembler
catches at stream granularity.
"""

# ###############
# Public Interface
# ###############


class AnnotationError(Exception):
    """Base class for errors that invalidate one annotation stream."""


class InvalidLocationError(AnnotationError):
    """Raised when a parameter location is not query, path, body or headers."""

    def __init__(self, location: str | None, field: str | None = None) -> None:
        target = f" of parameter '{field}'" if field else ""
        super().__init__(
            f"Invalid location {location!r}{target}; valid locations are: query, path, body, headers"
        )
        self.location = location
        self.field = field


class MalformedLiteralError(AnnotationError):
    """Raised when an option value fails the coercion declared for its keyword."""

    def __init__(self, keyword: str, value: str | None) -> None:
        super().__init__(f"Malformed value {value!r} for option '{keyword}'")
        self.keyword = keyword
        self.value = value


class UnknownModelError(AnnotationError):
    """Raised when a name reference points at a model missing from the registry."""

    def __init__(self, model: str, field: str | None = None) -> None:
        super().__init__(f"Property '{field}' refers to an undefined model '{model}'")
        self.model = model
        self.field = field


class UnknownModelPropertyError(AnnotationError):
    """Raised when ``Model.property`` names a property the model does not declare."""

    def __init__(self, model: str, prop: str, field: str | None = None) -> None:
        super().__init__(f"Property '{field}' refers to an undefined property '{prop}' of model '{model}'")
        self.model = model
        self.prop = prop
        self.field = field


class TypeExpressionError(AnnotationError):
    """Raised when a ``{type}`` expression cannot be tokenized or parsed.

    Attributes:
        column: 1-based column of the offending character within the expression.
    """

    def __init__(self, message: str, column: int) -> None:
        super().__init__(f"Column {column}: {message}")
        self.column = column
