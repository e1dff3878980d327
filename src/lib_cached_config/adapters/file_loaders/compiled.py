"""Compiled-array artifact format.

A compiled artifact is compact JSON holding an object or an array. It is the
on-disk format of :class:`lib_cached_config.adapters.cache.compiled.CompiledArtifactCache`
and is loaded back verbatim.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ...domain.errors import InvalidFormat
from ...observability import log_debug
from .base import BaseFileLoader


class CompiledArrayFormatter(BaseFileLoader):
    """Serialise array data to a compiled artifact and read it back.

    Examples
    --------
    >>> formatter = CompiledArrayFormatter()
    >>> formatter.format({"libraries": ["core", "blog"]})
    '{"libraries":["core","blog"]}'
    >>> formatter.format({"a": 1}, pretty=True)
    Traceback (most recent call last):
    ...
    NotImplementedError: Pretty mode is not implemented for compiled artifacts
    >>> formatter.format("text")
    Traceback (most recent call last):
    ...
    lib_cached_config.domain.errors.InvalidFormat: Compiled data must be a mapping or a list, got str
    """

    format_name = "compiled"
    extension = "json"

    def format(self, data: Any, pretty: bool = False) -> str:
        """Return the artifact text for *data*."""

        if not isinstance(data, (Mapping, list, tuple)):
            raise InvalidFormat(f"Compiled data must be a mapping or a list, got {type(data).__name__}")
        if pretty:
            raise NotImplementedError("Pretty mode is not implemented for compiled artifacts")
        try:
            return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise InvalidFormat(f"Compiled data is not serialisable: {exc}") from exc

    def load(self, path: str) -> Any:  # type: ignore[override]
        """Return the stored value of the artifact at *path*."""

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        if not isinstance(data, (Mapping, list)):
            raise InvalidFormat(f"Compiled artifact {path} does not hold array data")
        log_debug("config_file_loaded", path=path, format=self.format_name)
        return data
