"""Composition root for ``lib_cached_config``.

Purpose
-------
Wire the adapters (path resolver, file loaders, parse cache, compiled artifact
cache) into a :class:`ConfigRegistry` and keep the single process-wide default
registry used by bootstrap code.

Contents
--------
* :data:`FORMATS` – registered format strategies keyed by name.
* :func:`layout_from_env` – :class:`ApplicationLayout` from arguments and
  ``LIB_CACHED_CONFIG_*`` variables.
* :func:`create_registry` – build an independent registry.
* :func:`create_compiler` – build the compiled artifact cache for a layout.
* :func:`default_registry` / :func:`configure` / :func:`reset_default_registry`
  – the process-wide default instance.
* :func:`build`, :func:`build_from`, :func:`build_env`, :func:`get` –
  shortcuts operating on the default registry.

System Role
-----------
Application code should receive a registry explicitly. The module-level
shortcuts exist for top-level bootstrap functions only.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

from .adapters.cache.compiled import CompiledArtifactCache
from .adapters.cache.mtime import FilesystemParseCache
from .adapters.file_loaders.keyfile import EnvFileLoader, IniFileLoader
from .adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader
from .adapters.path_resolvers.default import DefaultPathResolver
from .application.document import ConfigDocument
from .application.formats import ConfigFormat
from .application.registry import DEFAULT_FORMAT, ConfigRegistry
from .domain.layout import DEFAULT_CONFIG_FOLDER, ApplicationLayout
from .observability import log_debug

#: Supported formats keyed by name. ``env`` sources are file names used
#: verbatim in the application (or package) root.
FORMATS: Mapping[str, ConfigFormat] = {
    "ini": ConfigFormat("ini", "ini", IniFileLoader()),
    "env": ConfigFormat("env", None, EnvFileLoader(), uses_config_folder=False, buildable=False),
    "toml": ConfigFormat("toml", "toml", TOMLFileLoader()),
    "json": ConfigFormat("json", "json", JSONFileLoader()),
    "yaml": ConfigFormat("yaml", "yaml", YAMLFileLoader()),
}

ENV_ROOT = "LIB_CACHED_CONFIG_ROOT"
ENV_FOLDER = "LIB_CACHED_CONFIG_FOLDER"
ENV_VENDOR = "LIB_CACHED_CONFIG_VENDOR"
ENV_STORE = "LIB_CACHED_CONFIG_STORE"

_DEFAULT_REGISTRY: ConfigRegistry | None = None


def layout_from_env(
    app_root: str | Path | None = None,
    *,
    config_folder: str | None = None,
    vendor_root: str | Path | None = None,
    store_root: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ApplicationLayout:
    """Return the application layout, explicit arguments winning over the environment.

    Examples
    --------
    >>> layout = layout_from_env(environ={"LIB_CACHED_CONFIG_ROOT": "/srv/app", "LIB_CACHED_CONFIG_FOLDER": "settings"})
    >>> layout.config_root.as_posix()
    '/srv/app/settings'
    >>> layout_from_env("/opt/site", environ={"LIB_CACHED_CONFIG_ROOT": "/srv/app"}).app_root.as_posix()
    '/opt/site'
    """

    env = os.environ if environ is None else environ
    root = app_root or env.get(ENV_ROOT) or Path.cwd()
    vendor = vendor_root or env.get(ENV_VENDOR) or None
    store = store_root or env.get(ENV_STORE) or None
    return ApplicationLayout(
        Path(root),
        config_folder=config_folder or env.get(ENV_FOLDER) or DEFAULT_CONFIG_FOLDER,
        vendor_root=Path(vendor) if vendor else None,
        store_root=Path(store) if store else None,
    )


def create_registry(
    app_root: str | Path | None = None,
    *,
    config_folder: str | None = None,
    vendor_root: str | Path | None = None,
    store_root: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    cache: bool = True,
) -> ConfigRegistry:
    """Return a registry wired to the default adapters.

    Parameters
    ----------
    app_root / config_folder / vendor_root / store_root:
        Layout overrides; see :func:`layout_from_env`.
    environ:
        Environment mapping used for layout defaults (``os.environ`` when
        omitted).
    cache:
        ``False`` disables the parse cache for this registry.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> root = Path(tmp.name)
    >>> (root / "config").mkdir()
    >>> _ = (root / "config" / "engine.ini").write_text("[db]\\nhost=localhost\\n", encoding="utf-8")
    >>> registry = create_registry(root)
    >>> _ = registry.build("engine")
    >>> registry.get("db/host")
    'localhost'
    >>> tmp.cleanup()
    """

    layout = layout_from_env(
        app_root,
        config_folder=config_folder,
        vendor_root=vendor_root,
        store_root=store_root,
        environ=environ,
    )
    parse_cache = FilesystemParseCache(layout.cache_root) if cache else None
    log_debug("registry_created", app_root=str(layout.app_root), cache=str(layout.cache_root) if cache else None)
    return ConfigRegistry(FORMATS, lambda config_format: DefaultPathResolver(layout, config_format), parse_cache)


def create_compiler(layout: ApplicationLayout | None = None) -> CompiledArtifactCache:
    """Return the compiled artifact cache stored under ``<store>/compiler``."""

    return CompiledArtifactCache((layout or layout_from_env()).compiler_root)


def default_registry() -> ConfigRegistry:
    """Return the process-wide registry, creating it from the environment on first use."""

    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_registry()
    return _DEFAULT_REGISTRY


def configure(registry: ConfigRegistry) -> ConfigRegistry:
    """Install *registry* as the process-wide default and return it."""

    global _DEFAULT_REGISTRY
    _DEFAULT_REGISTRY = registry
    return registry


def reset_default_registry() -> None:
    """Drop the process-wide registry; the next access rebuilds it."""

    global _DEFAULT_REGISTRY
    _DEFAULT_REGISTRY = None


def build(source: str, *, minor: bool = False, cached: bool = True, format_name: str = DEFAULT_FORMAT) -> ConfigDocument:
    """Shortcut for :meth:`ConfigRegistry.build` on the default registry."""

    return default_registry().build(source, minor=minor, cached=cached, format_name=format_name)


def build_from(
    package: str | None,
    source: str,
    *,
    cached: bool = True,
    silent: bool = False,
    format_name: str = DEFAULT_FORMAT,
) -> ConfigDocument | None:
    """Shortcut for :meth:`ConfigRegistry.build_from` on the default registry."""

    return default_registry().build_from(package, source, cached=cached, silent=silent, format_name=format_name)


def build_env(*, cached: bool = True) -> ConfigDocument:
    """Shortcut for :meth:`ConfigRegistry.build_env` on the default registry."""

    return default_registry().build_env(cached=cached)


def get(key: str, default: Any = None, *, format_name: str = DEFAULT_FORMAT) -> Any:
    """Read *key* from the default registry's main document."""

    return default_registry().get(key, default, format_name=format_name)
