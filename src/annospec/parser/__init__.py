# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Extraction of annotation blocks and parsing of their type expressions."""

from annospec.parser.annotations import extract_annotations, extract_docstrings, extract_file, parse_block
from annospec.parser.type_expression import parse_type

__all__ = [
    "extract_annotations",
    "extract_docstrings",
    "extract_file",
    "parse_block",
    "parse_type",
]
