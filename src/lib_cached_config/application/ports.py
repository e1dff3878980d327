"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the document and registry depend on, so the
composition root can swap implementations (for instance a cache that never
stores anything) without touching orchestration code.

Contents
--------
* :class:`PathResolver` – turns a source identifier into a readable file path.
* :class:`FileLoader` – parses a file into a mapping.
* :class:`ParseCache` – mtime-checked store of parsed payloads.
* :class:`ArtifactCache` – freshness-free store of compiled data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, runtime_checkable


@runtime_checkable
class PathResolver(Protocol):
    """Locate configuration sources for one format."""

    def resolve(self, identifier: str, package: str | None = None) -> str:
        """Return a readable file path or raise ``SourceNotFound``."""

    def candidate(self, identifier: str, package: str | None = None) -> Path:
        """Return the conventional location without checking existence."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a configuration file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``."""


@runtime_checkable
class ParseCache(Protocol):
    """Store parsed payloads keyed by ``(domain, source)`` and validated by mtime."""

    def get(self, domain: str, source: str, mtime: int) -> tuple[bool, Mapping[str, Any] | None]:
        """Return ``(hit, payload)``; a stale or unreadable entry is a miss."""

    def set(self, domain: str, source: str, mtime: int, payload: Mapping[str, Any]) -> None:
        """Persist *payload*; failures are absorbed."""


@runtime_checkable
class ArtifactCache(Protocol):
    """Memoise computed data as directly loadable artifacts."""

    def compile(self, name: str, data: Any) -> None:
        """Write *data* for later :meth:`parse_artifact` calls."""

    def parse_artifact(self, name: str) -> Any | None:
        """Return stored data or ``None`` when nothing was compiled yet."""

    def remember(self, name: str, compute: Callable[[], Any]) -> Any:
        """Return stored data, computing and compiling it on first use."""
