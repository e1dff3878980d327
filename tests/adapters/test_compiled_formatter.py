from __future__ import annotations

from pathlib import Path

import pytest

from lib_cached_config.adapters.file_loaders.compiled import CompiledArrayFormatter
from lib_cached_config.domain.errors import InvalidFormat, NotFound


def test_format_is_compact_json() -> None:
    formatter = CompiledArrayFormatter()
    assert formatter.format({"libraries": ["core", "blog"], "count": 2}) == '{"libraries":["core","blog"],"count":2}'
    assert formatter.format(("core", "blog")) == '["core","blog"]'


def test_format_pretty_is_not_supported() -> None:
    with pytest.raises(NotImplementedError):
        CompiledArrayFormatter().format({"a": 1}, pretty=True)


@pytest.mark.parametrize("value", ["text", 42, None])
def test_format_rejects_scalars(value: object) -> None:
    with pytest.raises(InvalidFormat, match="mapping or a list"):
        CompiledArrayFormatter().format(value)


def test_format_rejects_unserialisable_values() -> None:
    with pytest.raises(InvalidFormat, match="not serialisable"):
        CompiledArrayFormatter().format({"modules": {object()}})


def test_load_reads_back_formatted_data(tmp_path: Path) -> None:
    formatter = CompiledArrayFormatter()
    path = tmp_path / "app-libraries.json"
    path.write_text(formatter.format({"libraries": ["core"]}), encoding="utf-8")
    assert formatter.load(str(path)) == {"libraries": ["core"]}


def test_load_rejects_corrupt_artifact(tmp_path: Path) -> None:
    path = tmp_path / "app-libraries.json"
    path.write_text('{"libraries": [', encoding="utf-8")
    with pytest.raises(InvalidFormat):
        CompiledArrayFormatter().load(str(path))


def test_load_rejects_scalar_artifact(tmp_path: Path) -> None:
    path = tmp_path / "app-libraries.json"
    path.write_text("3", encoding="utf-8")
    with pytest.raises(InvalidFormat, match="array data"):
        CompiledArrayFormatter().load(str(path))


def test_load_missing_artifact(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        CompiledArrayFormatter().load(str(tmp_path / "absent.json"))
