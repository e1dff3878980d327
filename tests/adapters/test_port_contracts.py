"""Adapter contract tests: the default adapters satisfy the application ports."""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_cached_config.adapters.cache.compiled import CompiledArtifactCache
from lib_cached_config.adapters.cache.mtime import FilesystemParseCache
from lib_cached_config.adapters.file_loaders import structured as structured_module
from lib_cached_config.adapters.file_loaders.keyfile import EnvFileLoader, IniFileLoader
from lib_cached_config.adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader
from lib_cached_config.adapters.path_resolvers.default import DefaultPathResolver
from lib_cached_config.application import ports
from lib_cached_config.core import FORMATS
from tests.support import AppSandbox


def test_default_path_resolver_contract(sandbox: AppSandbox) -> None:
    resolver = DefaultPathResolver(sandbox.layout, FORMATS["ini"])
    assert isinstance(resolver, ports.PathResolver)
    sandbox.write_config("engine.ini", "[service]\nvalue=1\n")
    assert isinstance(resolver.resolve("engine"), str)
    assert isinstance(resolver.candidate("engine"), Path)


def test_parse_cache_contract() -> None:
    assert isinstance(FilesystemParseCache(Path("unused")), ports.ParseCache)


def test_compiled_cache_contract(tmp_path: Path) -> None:
    compiler = CompiledArtifactCache(tmp_path)
    assert isinstance(compiler, ports.ArtifactCache)
    assert compiler.remember("manifest", lambda: {"service": 1}) == {"service": 1}


loaders = [IniFileLoader, EnvFileLoader, TOMLFileLoader, JSONFileLoader]
if structured_module.yaml is not None:
    loaders.append(YAMLFileLoader)


@pytest.mark.parametrize("loader_cls", loaders)
def test_file_loader_contract(tmp_path: Path, loader_cls) -> None:
    loader = loader_cls()
    assert isinstance(loader, ports.FileLoader)

    bodies = {
        "ini": "[service]\nvalue = 1\n",
        "env": "[service]\nvalue=1\n",
        "toml": "[service]\nvalue = '1'\n",
        "json": '{"service": {"value": "1"}}',
        "yaml": "service:\n  value: '1'\n",
    }
    path = tmp_path / f"source.{loader.format_name}"
    path.write_text(bodies[loader.format_name], encoding="utf-8")
    assert loader.load(str(path)) == {"service": {"value": "1"}}


def test_registered_formats_match_loaders() -> None:
    for name, config_format in FORMATS.items():
        assert config_format.name == name
        assert config_format.loader.format_name == name
