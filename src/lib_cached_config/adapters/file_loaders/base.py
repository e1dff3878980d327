"""Shared helpers for configuration file loaders.

Every concrete loader reads bytes through :meth:`BaseFileLoader._read` and
reports its result through :meth:`BaseFileLoader._loaded` or
:meth:`BaseFileLoader._invalid`, so missing files and malformed content are
logged and raised the same way across formats.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ...domain.errors import InvalidFormat, MisuseError, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the file loaders.

    ``load`` must be overridden; calling it on the base class is a programmer
    error.

    Examples
    --------
    >>> BaseFileLoader().load("engine.ini")
    Traceback (most recent call last):
    ...
    lib_cached_config.domain.errors.MisuseError: BaseFileLoader should override load() from BaseFileLoader
    """

    format_name = "abstract"

    def load(self, path: str) -> Mapping[str, object]:
        raise MisuseError(f"{type(self).__name__} should override load() from BaseFileLoader")

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b"key = value")
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:3]
        b'key'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", path=path, format=self.format_name, size=len(payload))
        return payload

    def _decode(self, path: str) -> str:
        """Return the UTF-8 text of *path*, mapping decode errors to ``InvalidFormat``."""

        try:
            return self._read(path).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InvalidFormat(f"File {path} is not valid UTF-8: {exc}") from exc

    def _loaded(self, data: object, *, path: str) -> Mapping[str, object]:
        """Validate parser output for *path* and record the successful load."""

        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", path=path, format=self.format_name, keys=len(result))
        return result

    def _invalid(self, path: str, detail: object) -> InvalidFormat:
        """Log a parse failure of *path* and return the error to raise."""

        log_error("config_file_invalid", path=path, format=self.format_name, error=str(detail))
        return InvalidFormat(f"Invalid {self.format_name} content in {path}: {detail}")

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_cached_config.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data  # type: ignore[return-value]
