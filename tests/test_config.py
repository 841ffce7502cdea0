"""Tests for moddoc.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from moddoc.config import ModdocConfig, load_config
from moddoc.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ModdocConfig)
    assert config.root == tmp_path.resolve()
    assert config.import_map is None
    assert config.unstable is False
    assert config.private is False
    assert config.request_timeout == 60.0
    assert config.color == "auto"
    assert config.user_agent is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".moddoc.yml"
    config_file.write_text(
        """
import_map: "maps/import_map.json"
unstable: true
private: yes
request_timeout: 15
color: never
user_agent: "moddoc-ci"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.import_map == str((tmp_path / "maps" / "import_map.json").resolve())
    assert config.unstable is True
    assert config.private is True
    assert config.request_timeout == 15.0
    assert config.color == "never"
    assert config.user_agent == "moddoc-ci"


def test_load_config_keeps_remote_import_map(tmp_path: Path) -> None:
    (tmp_path / ".moddoc.yml").write_text("import_map: https://cdn.test/import_map.json\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.import_map == "https://cdn.test/import_map.json"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".moddoc.yml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".moddoc.yml").write_text("color: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_unknown_color_mode(tmp_path: Path) -> None:
    (tmp_path / ".moddoc.yml").write_text("color: rainbow\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_positive_timeout(tmp_path: Path) -> None:
    (tmp_path / ".moddoc.yml").write_text("request_timeout: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
