"""Mutable configuration document backed by resolver, loader and parse cache.

Purpose
-------
Hold one application's (or one caller's) configuration mapping and populate it
from named sources. Loading resolves the source, consults the mtime cache,
parses on a miss, refreshes the cache, and merges the result with the
top-level overwrite policy.

Contents
--------
* :class:`ConfigDocument` – the document, with load, lookup and export helpers.

System Role
-----------
Created by :class:`lib_cached_config.application.registry.ConfigRegistry`.
Loading never raises for missing or malformed sources: the problem is logged
and reported through :class:`lib_cached_config.domain.config.LoadOutcome` (or
``False`` from :meth:`ConfigDocument.load_from`) so an application can load
optional sources without aborting its bootstrap.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar

from ..domain.array_path import array_path_flatten, array_path_get
from ..domain.cache_keys import cache_domain
from ..domain.config import LoadOutcome, SourceInfo, deepcopy_mapping
from ..domain.errors import InvalidFormat, NotFound, SourceNotFound
from ..observability import log_debug, log_error, log_info, make_event
from .formats import ConfigFormat
from .merge import merge_top_level
from .ports import ParseCache, PathResolver


class ConfigDocument(Mapping[str, Any]):
    """Nested configuration mapping populated from one or more sources.

    Parameters
    ----------
    config_format:
        Format strategy used to parse every source of this document.
    resolver:
        Path resolver for that format.
    cache:
        Parse cache; ``None`` parses every source on each load.
    data:
        Optional initial mapping.

    Examples
    --------
    >>> from lib_cached_config.adapters.file_loaders.keyfile import IniFileLoader
    >>> class StaticResolver:
    ...     def resolve(self, identifier, package=None):
    ...         raise SourceNotFound(identifier, package)
    >>> doc = ConfigDocument(ConfigFormat("ini", "ini", IniFileLoader()), StaticResolver(), data={"db": {"host": "localhost"}})
    >>> doc.get_one("db/host")
    'localhost'
    >>> doc.load("missing")
    False
    >>> doc.as_dict()
    {'db': {'host': 'localhost'}}
    """

    _caching: ClassVar[bool] = True

    def __init__(
        self,
        config_format: ConfigFormat,
        resolver: PathResolver,
        cache: ParseCache | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        self.format = config_format
        self.resolver = resolver
        self.cache = cache
        self._data: dict[str, Any] = {}
        self._meta: dict[str, SourceInfo] = {}
        if data:
            merge_top_level(self._data, self._meta, data)

    @classmethod
    def is_caching(cls) -> bool:
        """Return whether documents read from the parse cache."""

        return ConfigDocument._caching

    @classmethod
    def set_caching(cls, caching: bool) -> None:
        """Enable or disable cache reads for every document in the process.

        Cache writes keep happening while reads are disabled, so the store is
        warm when caching is turned back on.
        """

        ConfigDocument._caching = bool(caching)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(format={self.format.name!r}, keys={list(self._data)!r})"

    def has_source(self, source: str, package: str | None = None) -> bool:
        """Return ``True`` when *source* resolves to a readable file."""

        try:
            self.resolver.resolve(source, package)
        except NotFound:
            return False
        return True

    def load(self, source: str, cached: bool = True) -> bool:
        """Load an application-level *source*; see :meth:`load_from`."""

        return self.load_from(None, source, cached)

    def load_from(self, package: str | None, source: str, cached: bool = True) -> bool:
        """Load *source* from *package* (``None`` for the application) into this document.

        Returns
        -------
        bool
            ``True`` when the source was merged, ``False`` when it was missing
            or malformed. The document is left unchanged on failure.
        """

        return self.try_load_from(package, source, cached).ok

    def try_load_from(self, package: str | None, source: str, cached: bool = True) -> LoadOutcome:
        """Load *source* and describe what happened.

        Why
        ----
        Callers that must react differently to "missing" and "malformed" get an
        explicit result instead of catching exceptions.

        What
        ----
        Resolves the file, reads the parse cache unless *cached* is ``False``
        or caching is disabled, parses on a miss, stores the fresh parse, and
        merges the payload into the document.

        Side Effects
        ------------
        Writes cache artifacts and emits ``source_loaded`` /
        ``source_load_failed`` events.
        """

        try:
            path = self.resolver.resolve(source, package)
        except NotFound as exc:
            log_info("source_load_failed", **make_event(source, None, {"package": package, "error": str(exc)}))
            return LoadOutcome(source=source, package=package, error=exc)

        try:
            payload, cache_hit = self._parse(path, package, source, cached)
        except (NotFound, InvalidFormat) as exc:
            log_error("source_load_failed", **make_event(source, path, {"package": package, "error": str(exc)}))
            return LoadOutcome(source=source, package=package, path=path, error=exc)
        except OSError as exc:
            error = SourceNotFound(source, package)
            error.__cause__ = exc
            log_error("source_load_failed", **make_event(source, path, {"package": package, "error": str(exc)}))
            return LoadOutcome(source=source, package=package, path=path, error=error)

        self.add(payload, origin=SourceInfo(source=source, package=package, path=path))
        log_info("source_loaded", **make_event(source, path, {"package": package, "cache_hit": cache_hit}))
        return LoadOutcome(source=source, package=package, path=path, cache_hit=cache_hit)

    def _parse(self, path: str, package: str | None, source: str, cached: bool) -> tuple[Mapping[str, Any], bool]:
        """Return ``(payload, cache_hit)`` for the file at *path*."""

        if self.cache is None:
            return self.format.loader.load(path), False
        mtime = os.stat(path).st_mtime_ns
        domain = cache_domain(package, self.format.name)
        if cached and self.is_caching():
            hit, payload = self.cache.get(domain, source, mtime)
            if hit and payload is not None:
                return payload, True
        parsed = dict(self.format.loader.load(path))
        self.cache.set(domain, source, mtime, parsed)
        return parsed, False

    def add(self, config: Mapping[str, Any] | None, origin: SourceInfo | None = None) -> None:
        """Merge *config* into the document, replacing matching top-level keys.

        Examples
        --------
        >>> from lib_cached_config.adapters.file_loaders.keyfile import IniFileLoader
        >>> doc = ConfigDocument(ConfigFormat("ini", "ini", IniFileLoader()), None, data={"a": 1, "b": {"x": 1}})
        >>> doc.add({"b": {"y": 2}})
        >>> doc.as_dict()
        {'a': 1, 'b': {'y': 2}}
        """

        merge_top_level(self._data, self._meta, config, origin)

    def get_one(self, path: str, default: Any = None) -> Any:
        """Return the value addressed by the slash-delimited *path*, or *default*."""

        return array_path_get(self._data, path, default)

    def set(self, key: str, value: Any) -> bool:
        """Replace the value of an existing top-level *key*.

        Unknown keys are ignored so a typo cannot invent configuration; the
        return value tells whether *key* existed.
        """

        if key not in self._data:
            log_debug("config_set_ignored", key=key)
            return False
        self._data[key] = value
        self._meta.pop(key, None)
        return True

    def replace_all(self, config: Mapping[str, Any]) -> None:
        """Replace the whole document with *config*."""

        self._data = deepcopy_mapping(config)
        self._meta = {}

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, mutable copy of the document."""

        return deepcopy_mapping(self._data)

    @property
    def all(self) -> dict[str, Any]:
        """The whole document, for enumeration."""

        return self.as_dict()

    def flatten(self) -> dict[str, Any]:
        """Return ``{slash/path: leaf}`` for every leaf of the document."""

        return array_path_flatten(self._data)

    def origin(self, key: str) -> SourceInfo | None:
        """Return the provenance of top-level *key*, ``None`` when set programmatically."""

        return self._meta.get(key)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the document to JSON."""

        return json.dumps(self._data, indent=indent, separators=(",", ":"), ensure_ascii=False)
