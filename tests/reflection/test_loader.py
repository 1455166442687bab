# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading model definitions from YAML."""

from pathlib import Path

import pytest

from annospec.model.entities import FieldDef
from annospec.reflection.loader import ModelSourceError, load_models, parse_models

# ###############
# Normal Cases
# ###############


def test_models_in_file_order() -> None:
    models = parse_models("Order:\n  id: INTEGER\nUser:\n  id: INTEGER\n")
    assert [m.name for m in models] == ["Order", "User"]


def test_bare_kind_shorthand() -> None:
    model = parse_models("User:\n  email: string\n")[0]
    assert model.fields == [FieldDef(name="email", kind="STRING")]


def test_mapping_with_dashed_keys() -> None:
    content = """\
User:
  id: {kind: integer, primary-key: true, nullable: false}
  tags: {kind: ARRAY, subtype: string}
  role: {kind: ENUM, values: [admin, member]}
  name: {kind: STRING, max-length: 64}
"""
    fields = {f.name: f for f in parse_models(content)[0].fields}
    assert fields["id"].primary_key is True
    assert fields["id"].nullable is False
    assert fields["id"].kind == "INTEGER"
    assert fields["tags"].subtype == "STRING"
    assert fields["role"].values == ["admin", "member"]
    assert fields["name"].max_length == 64


def test_model_without_fields() -> None:
    assert parse_models("Empty:\n")[0].fields == []


def test_empty_file() -> None:
    assert parse_models("") == []


def test_load_from_file(tmp_path: Path) -> None:
    path = tmp_path / "models.yaml"
    path.write_text("User:\n  id: INTEGER\n", encoding="utf-8")
    assert load_models(path)[0].name == "User"


def test_unknown_kind_is_kept_with_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING", logger="annospec"):
        model = parse_models("Place:\n  location: point3d\n  name: STRING\n")[0]
    assert model.fields[0].kind == "POINT3D"
    assert "unknown kind POINT3D" in caplog.text
    assert len(caplog.records) == 1


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ModelSourceError, match="not found"):
        load_models(tmp_path / "missing.yaml")


def test_invalid_yaml() -> None:
    with pytest.raises(ModelSourceError, match="Invalid YAML"):
        parse_models("User: [unclosed\n")


def test_top_level_must_be_mapping() -> None:
    with pytest.raises(ModelSourceError, match="must be a YAML mapping"):
        parse_models("- User\n")


def test_fields_must_be_mapping() -> None:
    with pytest.raises(ModelSourceError, match="model 'User'"):
        parse_models("User: [id]\n")


def test_invalid_field_attribute() -> None:
    with pytest.raises(ModelSourceError, match="field 'id'"):
        parse_models("User:\n  id: {kind: INTEGER, max-length: lots}\n")


def test_field_entry_must_be_kind_or_mapping() -> None:
    with pytest.raises(ModelSourceError, match="must be a kind or a mapping"):
        parse_models("User:\n  id: 3\n")
