"""Tests for apidocgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from apidocgen.config import ApiDocConfig, ConfigError, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ApiDocConfig)
    assert config.root == tmp_path.resolve()
    assert config.title == "API Documentation"
    assert config.output_dir is None
    assert config.output_subdir == "docs"
    assert config.templates_dir is None
    assert config.extensions == []
    assert config.exclude_paths == []
    assert config.packages == {}


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".apidocgen.yml"
    config_file.write_text(
        """
title: "Browser API"
output_dir: "build"
output_subdir: "reference"
templates_dir: "doc_templates"
extensions: [go, ".PY"]
exclude_paths:
  - "vendor/"
  - "*_test.go"
packages:
  Windows: "Window management endpoints."
  Tabs: |
    Tab lifecycle.
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.title == "Browser API"
    assert config.output_dir == tmp_path / "build"
    assert config.output_subdir == "reference"
    assert config.templates_dir == tmp_path / "doc_templates"
    assert config.extensions == [".go", ".py"]
    assert config.exclude_paths == ["vendor/", "*_test.go"]
    assert config.packages == {
        "Windows": "Window management endpoints.",
        "Tabs": "Tab lifecycle.",
    }


def test_load_config_ignores_wrongly_typed_values(tmp_path: Path) -> None:
    (tmp_path / ".apidocgen.yml").write_text(
        "title: [not, a, string]\npackages: [Windows]\nexclude_paths: 3\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.title == "API Documentation"
    assert config.packages == {}
    assert config.exclude_paths == []


def test_load_config_empty_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / ".apidocgen.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).title == "API Documentation"


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".apidocgen.yml").write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".apidocgen.yml").write_text("title: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)
