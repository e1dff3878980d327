"""Filesystem parse cache validated by the source file's mtime.

Purpose
-------
Avoid re-parsing unchanged configuration files on every process start. Each
entry stores the mtime of the source it was parsed from; an entry is valid only
while that mtime still matches the file on disk, so editing a source busts its
entry without any explicit invalidation.

Contents
--------
* :class:`FilesystemParseCache` – JSON artifacts under a store directory.
* :func:`write_atomic` – temp-file-and-rename writer shared with the compiled cache.

System Role
-----------
Used by :class:`lib_cached_config.application.document.ConfigDocument`. Several
processes may share one store: writes go through a temporary file and
``os.replace`` so readers never observe a partial artifact, and any read or
write failure degrades to a logged miss.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ...domain.cache_keys import normalize_cache_token
from ...domain.errors import CacheIOError
from ...observability import log_debug, log_warning

_ARTIFACT_SUFFIX = ".json"


class FilesystemParseCache:
    """Store parsed payloads as ``<root>/<domain>/<source>.json`` artifacts.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> cache = FilesystemParseCache(Path(tmp.name))
    >>> cache.get("app-ini-config", "engine", 1)
    (False, None)
    >>> cache.set("app-ini-config", "engine", 1, {"db": {"host": "localhost"}})
    >>> cache.get("app-ini-config", "engine", 1)
    (True, {'db': {'host': 'localhost'}})
    >>> cache.get("app-ini-config", "engine", 2)
    (False, None)
    >>> tmp.cleanup()
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def artifact_path(self, domain: str, source: str) -> Path:
        """Return the artifact location for ``(domain, source)``."""

        return self.root / normalize_cache_token(domain) / f"{normalize_cache_token(source)}{_ARTIFACT_SUFFIX}"

    def get(self, domain: str, source: str, mtime: int) -> tuple[bool, Mapping[str, Any] | None]:
        """Return ``(True, payload)`` when a fresh entry exists, ``(False, None)`` otherwise."""

        path = self.artifact_path(domain, source)
        try:
            entry = self._read_entry(path)
        except CacheIOError as exc:
            log_warning("parse_cache_read_failed", domain=domain, source=source, path=str(path), error=str(exc))
            return False, None
        if entry is None:
            log_debug("parse_cache_miss", domain=domain, source=source, path=str(path), reason="absent")
            return False, None
        if entry["mtime"] != mtime:
            log_debug("parse_cache_miss", domain=domain, source=source, path=str(path), reason="stale")
            return False, None
        log_debug("parse_cache_hit", domain=domain, source=source, path=str(path))
        return True, entry["payload"]

    def set(self, domain: str, source: str, mtime: int, payload: Mapping[str, Any]) -> None:
        """Persist *payload* for ``(domain, source)``; failures are logged and dropped.

        Payloads that JSON cannot reproduce exactly are not stored: TOML
        dates, YAML keys such as ``on`` or ``1`` that are not strings. A hit
        must return the mapping the loader produced, so such sources are
        parsed on every load instead.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> cache = FilesystemParseCache(Path(tmp.name))
        >>> cache.set("app-yaml-config", "ci", 1, {True: "push"})
        >>> cache.get("app-yaml-config", "ci", 1)
        (False, None)
        >>> tmp.cleanup()
        """

        path = self.artifact_path(domain, source)
        try:
            body = json.dumps({"mtime": mtime, "payload": payload}, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            log_debug("parse_cache_skipped", domain=domain, source=source, path=str(path), reason=str(exc))
            return
        if json.loads(body)["payload"] != dict(payload):
            log_debug("parse_cache_skipped", domain=domain, source=source, path=str(path), reason="lossy")
            return
        try:
            write_atomic(path, body)
        except OSError as exc:
            log_warning("parse_cache_write_failed", domain=domain, source=source, path=str(path), error=str(exc))
            return
        log_debug("parse_cache_stored", domain=domain, source=source, path=str(path))

    def clear(self, domain: str | None = None) -> int:
        """Remove cached artifacts (of one *domain* or all) and return how many were deleted."""

        base = self.root / normalize_cache_token(domain) if domain else self.root
        if not base.is_dir():
            return 0
        removed = 0
        for artifact in sorted(base.rglob(f"*{_ARTIFACT_SUFFIX}")):
            try:
                artifact.unlink()
            except FileNotFoundError:
                continue
            removed += 1
        log_debug("parse_cache_cleared", domain=domain, path=str(base), removed=removed)
        return removed

    @staticmethod
    def _read_entry(path: Path) -> dict[str, Any] | None:
        """Return the decoded entry at *path*, ``None`` when absent."""

        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheIOError(f"Unable to read cache artifact {path}: {exc}") from exc
        try:
            entry = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CacheIOError(f"Corrupt cache artifact {path}: {exc}") from exc
        if not isinstance(entry, dict) or not isinstance(entry.get("mtime"), int):
            raise CacheIOError(f"Unexpected cache artifact layout in {path}")
        if not isinstance(entry.get("payload"), dict):
            raise CacheIOError(f"Unexpected cache artifact layout in {path}")
        return entry


def write_atomic(path: Path, body: str) -> None:
    """Write *body* next to *path* and move it into place in one step."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(body)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
