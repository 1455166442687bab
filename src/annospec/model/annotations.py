# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Annotation records extracted from documented routines."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

from annospec.model.types import TypeNode

# ###############
# Public Interface
# ###############


class AnnotationTag(BaseModel):
    """One ``@title {type} name description`` entry of an annotation block.

    Attributes:
        title: Tag title without the ``@``.
        description: Remaining text, continuation lines included.
        type: Parsed ``{type}`` expression, if any and if it parsed.
        name: Name of named tags (``@param``, ``@headers``).
        raw_type: The ``{type}`` text as written.
    """

    title: str
    description: str = ""
    type: TypeNode | None = None
    name: str | None = None
    raw_type: str | None = None


class AnnotationRecord(BaseModel):
    """An annotation block: free-text description followed by its tags."""

    description: str = ""
    tags: list[AnnotationTag] = _Field(default_factory=list)

    def find(self, *titles: str) -> list[AnnotationTag]:
        """Return the tags whose title is one of *titles*, in stream order."""
        return [tag for tag in self.tags if tag.title in titles]


AnnotationTag.model_rebuild()
