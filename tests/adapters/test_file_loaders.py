from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib_cached_config.adapters.file_loaders import structured as structured_module
from lib_cached_config.adapters.file_loaders.base import BaseFileLoader
from lib_cached_config.adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader
from lib_cached_config.domain.errors import InvalidFormat, MisuseError, NotFound


def test_base_loader_must_be_overridden(tmp_path: Path) -> None:
    with pytest.raises(MisuseError, match="should override load"):
        BaseFileLoader().load(str(tmp_path / "engine.ini"))


def test_toml_loader(tmp_path: Path) -> None:
    path = tmp_path / "engine.toml"
    path.write_text("[db]\nport = 5432\n", encoding="utf-8")
    data = TOMLFileLoader().load(str(path))
    assert data["db"]["port"] == 5432


def test_toml_loader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        TOMLFileLoader().load(str(tmp_path / "missing.toml"))


def test_toml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "engine.toml"
    path.write_text("[db\nport = ", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        TOMLFileLoader().load(str(path))


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "engine.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_json_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"feature": True}), encoding="utf-8")
    assert JSONFileLoader().load(str(path))["feature"] is True


def test_json_loader_requires_object(tmp_path: Path) -> None:
    path = tmp_path / "engine.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidFormat, match="did not produce a mapping"):
        JSONFileLoader().load(str(path))


@pytest.mark.skipif(structured_module.yaml is None, reason="PyYAML not available")
def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("# empty file\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path)) == {}


@pytest.mark.skipif(structured_module.yaml is None, reason="PyYAML not available")
def test_yaml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("db: [unclosed\n", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        YAMLFileLoader().load(str(path))


def test_yaml_loader_without_pyyaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("db:\n  host: localhost\n", encoding="utf-8")
    monkeypatch.setattr(structured_module, "yaml", None)
    with pytest.raises(NotFound, match="PyYAML"):
        YAMLFileLoader().load(str(path))
