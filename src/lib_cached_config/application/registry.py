"""Registry of main and minor configuration documents.

Purpose
-------
Own the "main" document of each format (the configuration the rest of the
application reads through :meth:`ConfigRegistry.get`) and hand out independent
"minor" documents for ad-hoc sources. The registry is an ordinary object built
by the composition root and passed to whoever needs it; only
:mod:`lib_cached_config.core` keeps a process-wide default instance.

Contents
--------
* :class:`ConfigRegistry` – build/build_from/build_env plus get/set on the main
  documents.
* :data:`ENV_SOURCES` – the dotenv files loaded by :meth:`ConfigRegistry.build_env`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Final

from ..domain.errors import MisuseError
from ..observability import log_debug
from .document import ConfigDocument
from .formats import ConfigFormat
from .ports import ParseCache, PathResolver

#: Dotenv sources in load order; later files overwrite earlier top-level keys.
ENV_SOURCES: Final[tuple[str, ...]] = (".env", ".env.local")
ENV_FORMAT: Final[str] = "env"
DEFAULT_FORMAT: Final[str] = "ini"


class ConfigRegistry:
    """Build configuration documents and keep one main document per format.

    Parameters
    ----------
    formats:
        Available format strategies keyed by name.
    resolver_factory:
        Returns the path resolver for a format.
    cache:
        Parse cache shared by every document, ``None`` to disable caching.
    """

    def __init__(
        self,
        formats: Mapping[str, ConfigFormat],
        resolver_factory: Callable[[ConfigFormat], PathResolver],
        cache: ParseCache | None = None,
    ) -> None:
        self.formats = dict(formats)
        self.cache = cache
        self._resolver_factory = resolver_factory
        self._resolvers: dict[str, PathResolver] = {}
        self._mains: dict[str, ConfigDocument] = {}

    def format(self, format_name: str) -> ConfigFormat:
        """Return the format registered under *format_name*."""

        try:
            return self.formats[format_name]
        except KeyError as exc:
            known = ", ".join(sorted(self.formats))
            raise MisuseError(f'Unknown configuration format "{format_name}" (known: {known})') from exc

    def resolver(self, format_name: str = DEFAULT_FORMAT) -> PathResolver:
        """Return the (memoised) path resolver for *format_name*."""

        if format_name not in self._resolvers:
            self._resolvers[format_name] = self._resolver_factory(self.format(format_name))
        return self._resolvers[format_name]

    def document(self, format_name: str = DEFAULT_FORMAT) -> ConfigDocument:
        """Return a new, empty minor document of *format_name*."""

        return ConfigDocument(self.format(format_name), self.resolver(format_name), self.cache)

    def main(self, format_name: str = DEFAULT_FORMAT) -> ConfigDocument | None:
        """Return the main document of *format_name*, ``None`` until one was built."""

        return self._mains.get(format_name)

    def _ensure_main(self, format_name: str) -> ConfigDocument:
        document = self._mains.get(format_name)
        if document is None:
            document = self.document(format_name)
            self._mains[format_name] = document
            log_debug("main_config_created", format=format_name)
        return document

    def _buildable(self, format_name: str) -> ConfigFormat:
        config_format = self.format(format_name)
        if not config_format.buildable:
            raise MisuseError(f'Unable to build a "{format_name}" configuration, use build_env() instead')
        return config_format

    def build(
        self,
        source: str,
        *,
        minor: bool = False,
        cached: bool = True,
        format_name: str = DEFAULT_FORMAT,
    ) -> ConfigDocument:
        """Load *source* into the main document, or into a new minor document.

        The main document is created on first use and accumulates every
        non-minor build of its format.
        """

        self._buildable(format_name)
        document = self.document(format_name) if minor else self._ensure_main(format_name)
        document.load(source, cached)
        return document

    def build_from(
        self,
        package: str | None,
        source: str,
        *,
        cached: bool = True,
        silent: bool = False,
        format_name: str = DEFAULT_FORMAT,
    ) -> ConfigDocument | None:
        """Build a minor document from *source* in *package*.

        With ``silent`` an absent source yields ``None`` instead of an empty
        document, for optional per-package configuration.
        """

        self._buildable(format_name)
        document = self.document(format_name)
        if silent and not document.has_source(source, package):
            log_debug("optional_source_absent", source=source, package=package)
            return None
        document.load_from(package, source, cached)
        return document

    def build_env(self, *, cached: bool = True) -> ConfigDocument:
        """Load ``.env`` then ``.env.local`` into the main env document."""

        document = self._ensure_main(ENV_FORMAT)
        for source in ENV_SOURCES:
            document.load(source, cached)
        return document

    def get(self, key: str, default: Any = None, *, format_name: str = DEFAULT_FORMAT) -> Any:
        """Return *key* (slash path) from the main document, *default* when absent."""

        document = self._mains.get(format_name)
        if document is None:
            return default
        return document.get_one(key, default)

    def set(self, key: str, value: Any, *, format_name: str = DEFAULT_FORMAT) -> bool:
        """Replace an existing top-level *key* of the main document."""

        document = self._mains.get(format_name)
        if document is None:
            raise MisuseError(f'No main "{format_name}" configuration to set "{key}" on')
        return document.set(key, value)

    def reset(self) -> None:
        """Forget every main document."""

        self._mains.clear()
