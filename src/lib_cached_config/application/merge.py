"""Application-layer merge policy.

Purpose
-------
Fold a freshly parsed source into a document. The policy is a top-level
overwrite union: every key of the incoming payload replaces the key of the same
name in full (sections are not deep-merged) and keys the payload does not
mention are kept. Whole-section replacement keeps overrides predictable: a
``[db]`` section in ``.env.local`` fully describes the database.

Contents
    - ``merge_top_level``: apply one payload and record provenance.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy

from ..domain.config import SourceInfo


def merge_top_level(
    target: dict[str, object],
    meta: dict[str, SourceInfo],
    payload: Mapping[str, object] | None,
    origin: SourceInfo | None = None,
) -> None:
    """Merge *payload* into *target*, replacing matching top-level keys wholesale.

    Parameters
    ----------
    target:
        Mutable document mapping updated in place.
    meta:
        Provenance per top-level key, updated alongside *target*.
    payload:
        Parsed source; ``None`` or an empty mapping leaves *target* untouched.
    origin:
        Provenance recorded for every key of *payload*. ``None`` drops any
        previous provenance of the replaced keys.

    Examples
    --------
    >>> data, meta = {"a": 1, "b": {"x": 1}}, {}
    >>> merge_top_level(data, meta, {"b": {"y": 2}})
    >>> data
    {'a': 1, 'b': {'y': 2}}
    """

    if not payload:
        return
    for key, value in deepcopy(dict(payload)).items():
        target[key] = value
        if origin is None:
            meta.pop(key, None)
        else:
            meta[key] = origin
