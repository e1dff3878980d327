"""Slash-delimited path addressing into nested mappings.

Purpose
-------
Give every layer the same way to read and write nested configuration values
with keys such as ``"db/host"``. The helpers are pure and never perform I/O.

Contents
--------
* :func:`array_path_get` – lookup with ``default`` and ``path_required``
  semantics.
* :func:`array_path_set` – assignment creating intermediate mappings, with an
  ``overwrite`` switch.
* :func:`array_path_flatten` – list every leaf with its full path.
* :data:`SEPARATOR` – the path separator (``/``).
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Final

SEPARATOR: Final[str] = "/"


def _split(path: str) -> tuple[str, str]:
    """Split *path* into its first segment and the (possibly empty) remainder."""

    head, _, tail = path.partition(SEPARATOR)
    return head, tail


def array_path_get(
    mapping: Any,
    path: str,
    default: Any = None,
    *,
    path_required: bool = False,
) -> Any:
    """Return the value stored at *path* inside *mapping*.

    Why
    ----
    Callers address nested configuration with one string instead of chained
    ``dict`` lookups and guard clauses.

    What
    ----
    Walks the segments of *path*. A missing segment yields ``default``; when
    ``path_required`` is set and *path* has children, ``None`` is returned
    instead so callers can tell "the path could not be followed" from "the
    value is absent". A scalar met before the last segment counts as missing.
    A trailing separator addresses the container itself.

    Examples
    --------
    >>> data = {"db": {"host": "localhost"}, "debug": True}
    >>> array_path_get(data, "db/host")
    'localhost'
    >>> array_path_get(data, "db")
    {'host': 'localhost'}
    >>> array_path_get(data, "debug/level", default="info")
    'info'
    >>> array_path_get({"a": {}}, "a/b", default=7, path_required=True) is None
    True
    >>> array_path_get({"a": {}}, "a/b", default=7)
    7
    >>> array_path_get({"a": 1}, "a/b", default=7)
    7
    """

    missing = None if path_required and SEPARATOR in path.rstrip(SEPARATOR) else default
    return _lookup(mapping, path, missing)


def _lookup(node: Any, path: str, missing: Any) -> Any:
    """Recursive step of :func:`array_path_get`."""

    if not isinstance(node, Mapping):
        return missing
    key, remainder = _split(path)
    if key not in node:
        return missing
    if not remainder:
        return node[key]
    return _lookup(node[key], remainder, missing)


def array_path_set(
    mapping: MutableMapping[str, Any],
    path: str,
    value: Any,
    *,
    overwrite: bool = True,
) -> None:
    """Store *value* at *path*, creating intermediate mappings on demand.

    With ``overwrite=False`` an existing non-``None`` leaf is preserved; a leaf
    holding ``None`` is always replaced. A scalar standing where an
    intermediate mapping is needed gets replaced by a new mapping.

    Examples
    --------
    >>> data: dict = {}
    >>> array_path_set(data, "db/host", "localhost")
    >>> data
    {'db': {'host': 'localhost'}}
    >>> array_path_set(data, "db/host", "remote", overwrite=False)
    >>> data["db"]["host"]
    'localhost'
    """

    key, remainder = _split(path)
    if not remainder:
        if overwrite or mapping.get(key) is None:
            mapping[key] = value
        return
    child = mapping.get(key)
    if not isinstance(child, MutableMapping):
        child = {}
        mapping[key] = child
    array_path_set(child, remainder, value, overwrite=overwrite)


def array_path_flatten(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Return a flat ``{path: leaf}`` view of *mapping*.

    Examples
    --------
    >>> array_path_flatten({"path": {"to": {"value": 1}}, "flag": True})
    {'path/to/value': 1, 'flag': True}
    """

    flat: dict[str, Any] = {}
    for key, value in mapping.items():
        if isinstance(value, Mapping) and value:
            flat.update(array_path_flatten(value, f"{prefix}{key}{SEPARATOR}"))
        else:
            flat[f"{prefix}{key}"] = value
    return flat
