"""Tests for componentry.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from componentry.config import DEFAULTS, deep_merge, freeze, load_config
from componentry.errors import ConfigError


def test_deep_merge_prefers_overrides_and_merges_nested_mappings() -> None:
    merged = deep_merge(DEFAULTS, {"fs": {"encoding": "latin-1"}, "adapters": ["jinja"]})

    assert merged["fs"]["encoding"] == "latin-1"
    assert merged["fs"]["exclude"] == DEFAULTS["fs"]["exclude"]
    assert merged["adapters"] == ["jinja"]
    assert merged["components"]["marker"] == "@"


def test_deep_merge_does_not_mutate_defaults() -> None:
    merged = deep_merge(DEFAULTS, {})
    merged["fs"]["exclude"].append("build")

    assert "build" not in DEFAULTS["fs"]["exclude"]


def test_freeze_returns_read_only_views() -> None:
    frozen = freeze({"fs": {"exclude": ["a"]}, "value": 1})

    assert frozen["fs"]["exclude"] == ("a",)
    with pytest.raises(TypeError):
        frozen["value"] = 2  # type: ignore[index]
    with pytest.raises(TypeError):
        frozen["fs"]["exclude"] = []  # type: ignore[index]


def test_load_config_returns_empty_mapping_when_missing(tmp_path: Path) -> None:
    assert load_config(tmp_path) == {}


def test_load_config_parses_yaml_and_resolves_sources(tmp_path: Path) -> None:
    (tmp_path / "componentry.yml").write_text(
        """
src:
  - components
  - /abs/library
adapters:
  - jinja
components:
  marker: "_"
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config["src"] == [str(tmp_path / "components"), "/abs/library"]
    assert config["adapters"] == ["jinja"]
    assert config["components"] == {"marker": "_"}


def test_load_config_accepts_single_source_string(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text("src: library\n", encoding="utf-8")

    assert load_config(config_file)["src"] == [str(tmp_path / "library")]


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / "componentry.yml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / "componentry.yml").write_text("src: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert "componentry.yml" in str(excinfo.value)


def test_load_config_resolves_log_file_against_config_directory(tmp_path: Path) -> None:
    (tmp_path / "componentry.yml").write_text("logging:\n  level: info\n  file: logs/run.log\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config["logging"] == {"level": "info", "file": str(tmp_path / "logs" / "run.log")}


def test_load_config_rejects_non_mapping_logging_section(tmp_path: Path) -> None:
    (tmp_path / "componentry.yml").write_text("logging: debug\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
