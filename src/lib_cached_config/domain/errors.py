"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by adapters, the document/registry layer, and
consuming applications. The hierarchy lives in the domain layer so outer layers
can depend on it without creating import cycles.

Contents
--------
* :class:`ConfigError` – umbrella base class for all configuration issues.
* :class:`NotFound` / :class:`SourceNotFound` – a source cannot be resolved to
  a readable file.
* :class:`InvalidFormat` – the file exists but cannot be parsed.
* :class:`CacheIOError` – a cache artifact could not be read or written.
* :class:`MisuseError` – programmer error (abstract loader, unsupported build).

System Role
-----------
Only :class:`MisuseError` and :class:`InvalidFormat` are allowed to cross the
library boundary. Everything filesystem-related is absorbed by
:class:`lib_cached_config.application.document.ConfigDocument` and reported as
a boolean result plus a structured log entry.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_cached_config``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class NotFound(ConfigError):
    """Represents missing-but-optional resources (files, directories, etc.)."""


class SourceNotFound(NotFound):
    """Raised when a source identifier cannot be resolved to a readable file.

    The message names the identifier and, when present, the package so log
    readers can tell application sources from package sources.

    Examples
    --------
    >>> str(SourceNotFound("engine", package="acme/blog"))
    'Unable to find config source "engine" in package "acme/blog"'
    >>> SourceNotFound("engine").package is None
    True
    """

    def __init__(self, identifier: str, package: str | None = None) -> None:
        self.identifier = identifier
        self.package = package
        if package:
            message = f'Unable to find config source "{identifier}" in package "{package}"'
        else:
            message = f'Unable to find config source "{identifier}"'
        super().__init__(message)


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be parsed into structured data.

    Typical Sources
    ---------------
    The key-file and env parsers, the structured loaders (:mod:`tomllib`,
    :mod:`json`, :mod:`yaml`), and the compiled-array formatter.
    """


class CacheIOError(ConfigError):
    """Signals an unreadable or unwritable cache artifact.

    Never surfaced to callers: the caches catch it, log it, and fall back to
    the authoritative source file.
    """


class MisuseError(ConfigError):
    """Programmer error such as calling the abstract loader or building an env document."""
