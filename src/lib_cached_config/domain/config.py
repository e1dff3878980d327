"""Domain value objects describing loaded configuration.

Purpose
-------
Hold the small immutable records that travel between the document layer and
its callers. This module contains no I/O.

Contents
--------
* :class:`SourceInfo` – provenance of a top-level key (source, package, path).
* :class:`LoadOutcome` – explicit result of loading one source, so callers can
  tell "missing" from "malformed" without exception-based branching.
* :func:`deepcopy_mapping` – clone nested mappings for mutable exports.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypedDict

from .errors import ConfigError, InvalidFormat, NotFound


class SourceInfo(TypedDict):
    """Describe the origin of a top-level configuration key.

    Attributes
    ----------
    source:
        Identifier that was requested (``"engine"``, ``".env.local"``).
    package:
        Package the source belongs to, ``None`` for application sources.
    path:
        Concrete file that produced the key.
    """

    source: str
    package: str | None
    path: str


@dataclass(frozen=True, slots=True)
class LoadOutcome:
    """Result of :meth:`ConfigDocument.try_load_from`.

    Truthy when the source was merged into the document.

    Examples
    --------
    >>> ok = LoadOutcome(source="engine", package=None, path="/app/config/engine.ini", cache_hit=True)
    >>> bool(ok), ok.not_found, ok.invalid
    (True, False, False)
    >>> missing = LoadOutcome(source="engine", package=None, error=NotFound("gone"))
    >>> bool(missing), missing.not_found
    (False, True)
    """

    source: str
    package: str | None
    path: str | None = None
    cache_hit: bool = False
    error: ConfigError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_found(self) -> bool:
        return isinstance(self.error, NotFound)

    @property
    def invalid(self) -> bool:
        return isinstance(self.error, InvalidFormat)

    def __bool__(self) -> bool:
        return self.ok


def deepcopy_mapping(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively clone a mapping so callers receive a mutable copy.

    Examples
    --------
    >>> source = {"a": {"b": [1, 2]}}
    >>> clone = deepcopy_mapping(source)
    >>> clone["a"]["b"].append(3)
    >>> source["a"]["b"]
    [1, 2]
    """

    return {key: _deepcopy_value(value) for key, value in mapping.items()}


def _deepcopy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return deepcopy_mapping(value)
    if isinstance(value, list):
        return [_deepcopy_value(item) for item in value]
    if isinstance(value, (set, tuple)):
        return type(value)(_deepcopy_value(item) for item in value)
    return value
