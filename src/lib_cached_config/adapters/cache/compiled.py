"""Write-through cache of compiled array artifacts.

Purpose
-------
Memoise data that is expensive to compute and has no single originating file,
such as the manifest of optional extension modules. Artifacts are trusted until
someone calls :meth:`CompiledArtifactCache.invalidate` or deletes the file;
there is no freshness check.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from ...domain.cache_keys import normalize_cache_token
from ...observability import log_debug, log_warning
from ..file_loaders.compiled import CompiledArrayFormatter
from .mtime import write_atomic


class CompiledArtifactCache:
    """Store one compiled artifact per logical name under *root*.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> compiler = CompiledArtifactCache(Path(tmp.name) / "compiler")
    >>> compiler.parse_artifact("app-libraries") is None
    True
    >>> compiler.compile("app-libraries", ["core", "blog"])
    >>> compiler.parse_artifact("app-libraries")
    ['core', 'blog']
    >>> compiler.invalidate("app-libraries")
    True
    >>> tmp.cleanup()
    """

    def __init__(self, root: Path, formatter: CompiledArrayFormatter | None = None) -> None:
        self.root = Path(root)
        self.formatter = formatter or CompiledArrayFormatter()

    def artifact_path(self, name: str) -> Path:
        return self.root / f"{normalize_cache_token(name)}.{self.formatter.extension}"

    def compile(self, name: str, data: Any) -> None:
        """Serialise *data* to the artifact for *name*, creating the directory if needed.

        ``InvalidFormat`` is raised for data that cannot be compiled; filesystem
        failures are logged and absorbed since the artifact is only an
        optimisation.
        """

        contents = self.formatter.format(data)
        path = self.artifact_path(name)
        try:
            write_atomic(path, contents)
        except OSError as exc:
            log_warning("compiled_artifact_write_failed", name=name, path=str(path), error=str(exc))
            return
        log_debug("compiled_artifact_written", name=name, path=str(path), size=len(contents))

    def parse_artifact(self, name: str) -> Any | None:
        """Return the compiled data for *name*, or ``None`` when nothing was compiled yet."""

        path = self.artifact_path(name)
        if not path.is_file():
            log_debug("compiled_artifact_absent", name=name, path=str(path))
            return None
        try:
            return self.formatter.load(str(path))
        except OSError as exc:
            log_warning("compiled_artifact_read_failed", name=name, path=str(path), error=str(exc))
            return None

    def invalidate(self, name: str) -> bool:
        """Delete the artifact for *name*; return ``True`` when one existed."""

        path = self.artifact_path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        log_debug("compiled_artifact_invalidated", name=name, path=str(path))
        return True

    def remember(self, name: str, compute: Callable[[], Any]) -> Any:
        """Return the artifact for *name*, computing and compiling it when absent.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> compiler = CompiledArtifactCache(Path(tmp.name))
        >>> compiler.remember("app-libraries", lambda: ["core"])
        ['core']
        >>> compiler.remember("app-libraries", lambda: ["other"])
        ['core']
        >>> tmp.cleanup()
        """

        cached = self.parse_artifact(name)
        if cached is not None:
            return cached
        data = compute()
        self.compile(name, data)
        return data
