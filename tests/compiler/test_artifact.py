# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for document serialization."""

import json
from pathlib import Path

import pytest
import yaml

from annospec.compiler.artifact import deserialize, read_document, serialize, write_document

_DOCUMENT = {
    "openapi": "3.0.1",
    "info": {"title": "Café API", "version": "1.0"},
    "paths": {"/users": {"get": {"responses": {"default": {"description": "Unexpected error"}}}}},
}


class TestSerialize:
    def test_json_is_indented_and_keeps_unicode(self) -> None:
        text = serialize(_DOCUMENT, "json")
        assert text.endswith("\n")
        assert '\n  "info"' in text
        assert "Café" in text
        assert json.loads(text) == _DOCUMENT

    def test_yaml_keeps_key_order(self) -> None:
        text = serialize(_DOCUMENT, "yaml")
        assert text.index("openapi") < text.index("info") < text.index("paths")
        assert yaml.safe_load(text) == _DOCUMENT

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="Unsupported output format"):
            serialize(_DOCUMENT, "xml")

    def test_json_rejects_non_finite_numbers(self) -> None:
        with pytest.raises(ValueError):
            serialize({"schema": {"minimum": float("nan")}}, "json")

    def test_deserialize_rejects_non_mappings(self) -> None:
        with pytest.raises(ValueError, match="mapping"):
            deserialize("[1, 2]", "json")


class TestFiles:
    def test_write_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "openapi.yaml"
        write_document(_DOCUMENT, path, "yaml")
        assert read_document(path, "yaml") == _DOCUMENT
