"""Filesystem path resolution for configuration sources.

Purpose
-------
Implement the :class:`lib_cached_config.application.ports.PathResolver`
protocol. The adapter is the only component that knows where sources live:
literal paths first, then the package configuration folder under the vendor
root, then the application configuration folder.

Contents
--------
* :class:`DefaultPathResolver` – resolves identifiers for one format.
* :func:`_is_readable_file` – existence and permission check.
"""

from __future__ import annotations

import os
from pathlib import Path

from ...application.formats import ConfigFormat
from ...domain.errors import SourceNotFound
from ...domain.layout import ApplicationLayout
from ...observability import log_debug


class DefaultPathResolver:
    """Resolve source identifiers to readable files.

    Why
    ----
    Keep the file layout convention in one place so documents only deal with
    concrete paths.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from lib_cached_config.adapters.file_loaders.keyfile import IniFileLoader
    >>> tmp = TemporaryDirectory()
    >>> layout = ApplicationLayout(Path(tmp.name))
    >>> layout.config_root.mkdir()
    >>> _ = (layout.config_root / "engine.ini").write_text("[db]\\nhost=localhost\\n", encoding="utf-8")
    >>> resolver = DefaultPathResolver(layout, ConfigFormat("ini", "ini", IniFileLoader()))
    >>> Path(resolver.resolve("engine")).name
    'engine.ini'
    >>> resolver.resolve("missing")
    Traceback (most recent call last):
    ...
    lib_cached_config.domain.errors.SourceNotFound: Unable to find config source "missing"
    >>> tmp.cleanup()
    """

    def __init__(self, layout: ApplicationLayout, config_format: ConfigFormat) -> None:
        self.layout = layout
        self.format = config_format

    def resolve(self, identifier: str, package: str | None = None) -> str:
        """Return the file backing *identifier*, searching *package* or the application.

        Parameters
        ----------
        identifier:
            Logical source name (``"engine"``) or a literal file path.
        package:
            Optional vendor package name (``"acme/blog"``); ``None`` selects the
            application configuration folder.

        Raises
        ------
        SourceNotFound
            When no readable file exists at the conventional location.
        """

        if _is_readable_file(Path(identifier)):
            log_debug("source_resolved", source=identifier, package=package, path=identifier, literal=True)
            return identifier
        path = self.candidate(identifier, package)
        if not _is_readable_file(path):
            log_debug("source_not_found", source=identifier, package=package, path=str(path))
            raise SourceNotFound(identifier, package)
        log_debug("source_resolved", source=identifier, package=package, path=str(path), literal=False)
        return str(path)

    def candidate(self, identifier: str, package: str | None = None) -> Path:
        """Return the conventional location of *identifier* without checking it exists.

        Examples
        --------
        >>> from lib_cached_config.adapters.file_loaders.keyfile import IniFileLoader
        >>> resolver = DefaultPathResolver(ApplicationLayout(Path("/srv/app")), ConfigFormat("ini", "ini", IniFileLoader()))
        >>> resolver.candidate("engine").as_posix()
        '/srv/app/config/engine.ini'
        >>> resolver.candidate("engine", "acme/blog").as_posix()
        '/srv/app/vendor/acme/blog/config/engine.ini'
        """

        file_name = self.format.file_name(identifier).lstrip("/\\")
        if package:
            if self.format.uses_config_folder:
                base = self.layout.package_config_root(package)
            else:
                base = self.layout.package_root(package)
        elif self.format.uses_config_folder:
            base = self.layout.config_root
        else:
            base = self.layout.app_root
        return base / file_name


def _is_readable_file(path: Path) -> bool:
    """Return ``True`` when *path* is a regular file the process may read."""

    try:
        return path.is_file() and os.access(path, os.R_OK)
    except (OSError, ValueError):
        return False
