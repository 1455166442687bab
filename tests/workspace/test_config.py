# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the generation configuration module."""

from pathlib import Path

import pytest
import yaml

from annospec.workspace import (
    CONFIG_FILE_NAME,
    GenerationConfig,
    MissingConfigurationError,
    SqlAlchemyModelSource,
    YamlModelSource,
    load_generation_config,
)
from annospec.workspace.config import parse_generation_config, render_starter_config

# ###############
# Helpers
# ###############

_MINIMAL = """\
definition:
  info: {title: API, version: "1.0"}
files: ["src/**/*.py"]
models: models.yaml
"""


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a configuration file and return its path."""
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_minimal_config(tmp_path: Path) -> None:
    """Defaults: basedir is the config directory, output to stdout as JSON."""
    config = load_generation_config(_write_config(tmp_path, _MINIMAL))

    assert isinstance(config, GenerationConfig)
    assert config.definition["info"] == {"title": "API", "version": "1.0"}
    assert config.files == ["src/**/*.py"]
    assert config.basedir == tmp_path
    assert config.models == YamlModelSource(path=tmp_path / "models.yaml")
    assert config.output is None
    assert config.format == "json"


def test_paths_are_relative_to_config_file(tmp_path: Path) -> None:
    content = _MINIMAL + "basedir: app\noutput: build/openapi.json\n"
    config = load_generation_config(_write_config(tmp_path, content))
    assert config.basedir == tmp_path / "app"
    assert config.output == tmp_path / "build" / "openapi.json"


def test_format_inferred_from_output_suffix(tmp_path: Path) -> None:
    config = load_generation_config(_write_config(tmp_path, _MINIMAL + "output: openapi.yml\n"))
    assert config.format == "yaml"


def test_explicit_format_wins(tmp_path: Path) -> None:
    config = load_generation_config(_write_config(tmp_path, _MINIMAL + "output: openapi.yml\nformat: json\n"))
    assert config.format == "json"


def test_single_file_pattern_string(tmp_path: Path) -> None:
    content = _MINIMAL.replace('files: ["src/**/*.py"]', "files: src/*.js")
    assert load_generation_config(_write_config(tmp_path, content)).files == ["src/*.js"]


def test_sqlalchemy_model_source(tmp_path: Path) -> None:
    content = _MINIMAL.replace("models: models.yaml", "models: {sqlalchemy: 'app.models:Base'}")
    config = load_generation_config(_write_config(tmp_path, content))
    assert config.models == SqlAlchemyModelSource(target="app.models:Base")


def test_yaml_model_source_mapping(tmp_path: Path) -> None:
    content = _MINIMAL.replace("models: models.yaml", "models: {yaml: schema/models.yaml}")
    config = load_generation_config(_write_config(tmp_path, content))
    assert config.models == YamlModelSource(path=tmp_path / "schema" / "models.yaml")


def test_starter_config_parses(tmp_path: Path) -> None:
    config = parse_generation_config(render_starter_config(), root=tmp_path)
    assert config.output == tmp_path / "openapi.json"
    assert config.definition["servers"] == [{"url": "http://localhost:8000"}]


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError, match="not found"):
        load_generation_config(tmp_path / CONFIG_FILE_NAME)


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError, match="Invalid YAML"):
        load_generation_config(_write_config(tmp_path, "definition: [unclosed\n"))


def test_non_mapping_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError, match="must be a YAML mapping"):
        load_generation_config(_write_config(tmp_path, "- a\n"))


@pytest.mark.parametrize(
    ("key", "message"),
    [
        ("definition", "'definition'"),
        ("files", "'files'"),
        ("models", "'models'"),
    ],
)
def test_missing_required_setting(tmp_path: Path, key: str, message: str) -> None:
    data = yaml.safe_load(_MINIMAL)
    del data[key]
    with pytest.raises(MissingConfigurationError, match=message):
        load_generation_config(_write_config(tmp_path, yaml.safe_dump(data)))


def test_missing_info_raises(tmp_path: Path) -> None:
    content = _MINIMAL.replace('  info: {title: API, version: "1.0"}', "  servers: []")
    with pytest.raises(MissingConfigurationError, match="definition.info"):
        load_generation_config(_write_config(tmp_path, content))


def test_empty_files_raises(tmp_path: Path) -> None:
    content = _MINIMAL.replace('files: ["src/**/*.py"]', "files: []")
    with pytest.raises(MissingConfigurationError, match="non-empty list"):
        load_generation_config(_write_config(tmp_path, content))


def test_unknown_format_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError, match="'format'"):
        load_generation_config(_write_config(tmp_path, _MINIMAL + "format: xml\n"))


def test_invalid_model_source_raises(tmp_path: Path) -> None:
    content = _MINIMAL.replace("models: models.yaml", "models: {django: app}")
    with pytest.raises(MissingConfigurationError, match="'models' must be"):
        load_generation_config(_write_config(tmp_path, content))
