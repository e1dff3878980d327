"""TOML, JSON and YAML loaders.

Applications that prefer structured files over ini keep them behind the same
resolver and mtime cache. Each loader only knows how to turn bytes into a
mapping; reading, validation and logging come from :class:`BaseFileLoader`.
YAML support needs the optional PyYAML dependency.
"""

from __future__ import annotations

import json
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

from ...domain.errors import NotFound
from .base import BaseFileLoader

try:
    import yaml  # type: ignore[import-untyped]
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    yaml = None  # type: ignore[assignment]


class TOMLFileLoader(BaseFileLoader):
    """Parse TOML with :mod:`tomllib` (``tomli`` before Python 3.11).

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import NamedTemporaryFile
    >>> tmp = NamedTemporaryFile('w', suffix='.toml', delete=False, encoding='utf-8')
    >>> _ = tmp.write('[db]\\nport = 5432\\n')
    >>> tmp.close()
    >>> TOMLFileLoader().load(tmp.name)["db"]["port"]
    5432
    >>> Path(tmp.name).unlink()
    """

    format_name = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        text = self._decode(path)
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path=path)


class JSONFileLoader(BaseFileLoader):
    format_name = "json"

    def load(self, path: str) -> Mapping[str, object]:
        raw = self._read(path)
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path=path)


class YAMLFileLoader(BaseFileLoader):
    """Parse YAML with ``yaml.safe_load``; an empty document is an empty mapping.

    Raises ``NotFound`` when PyYAML is not installed, so a YAML source behaves
    like an absent one instead of aborting the caller.
    """

    format_name = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        if yaml is None:
            raise NotFound("PyYAML is required for YAML configuration support")
        raw = self._read(path)
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded({} if data is None else data, path=path)
