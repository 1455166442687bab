# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Annotation-to-schema compiler: options, type expressions and document assembly."""

from annospec.compiler.artifact import deserialize, read_document, serialize, write_document
from annospec.compiler.assembler import Diagnostic, DocumentAssembler, PathFragment, assemble_stream
from annospec.compiler.build import GenerationError, GenerationResult, build_document, collect_files, generate
from annospec.compiler.merge import deep_merge, merge_tags
from annospec.compiler.options import OptionStore, construct_options, parse_options, reduce_options
from annospec.compiler.schema import compile_type, merge_options

__all__ = [
    "parse_options",
    "reduce_options",
    "construct_options",
    "OptionStore",
    "compile_type",
    "merge_options",
    "assemble_stream",
    "DocumentAssembler",
    "PathFragment",
    "Diagnostic",
    "deep_merge",
    "merge_tags",
    "generate",
    "build_document",
    "collect_files",
    "GenerationError",
    "GenerationResult",
    "serialize",
    "deserialize",
    "write_document",
    "read_document",
]
