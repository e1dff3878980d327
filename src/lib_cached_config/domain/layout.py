"""Filesystem layout of an application using ``lib_cached_config``.

Purpose
-------
Describe where configuration sources, vendor packages, and cache artifacts
live without touching the filesystem. Adapters receive an
:class:`ApplicationLayout` and derive every location from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

#: Conventional configuration folder relative to the application root and to
#: each vendor package.
DEFAULT_CONFIG_FOLDER = "config"


@dataclass(frozen=True, slots=True)
class ApplicationLayout:
    """Immutable description of the application directories.

    Parameters
    ----------
    app_root:
        Application root; application sources live in
        ``<app_root>/<config_folder>``.
    config_folder:
        Conventional configuration sub directory (``config`` by default).
    vendor_root:
        Root holding third-party packages. Defaults to ``<app_root>/vendor``.
    store_root:
        Writable store for cache artifacts. Defaults to ``<app_root>/store``.

    Examples
    --------
    >>> layout = ApplicationLayout(Path("/srv/app"))
    >>> layout.config_root.as_posix()
    '/srv/app/config'
    >>> layout.package_config_root("acme/blog").as_posix()
    '/srv/app/vendor/acme/blog/config'
    >>> layout.cache_root.as_posix()
    '/srv/app/store/cache'
    """

    app_root: Path
    config_folder: str = DEFAULT_CONFIG_FOLDER
    vendor_root: Path | None = None
    store_root: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "app_root", Path(self.app_root))
        if self.vendor_root is None:
            object.__setattr__(self, "vendor_root", self.app_root / "vendor")
        else:
            object.__setattr__(self, "vendor_root", Path(self.vendor_root))
        if self.store_root is None:
            object.__setattr__(self, "store_root", self.app_root / "store")
        else:
            object.__setattr__(self, "store_root", Path(self.store_root))

    @property
    def config_root(self) -> Path:
        return self.app_root / self.config_folder

    @property
    def cache_root(self) -> Path:
        """Directory holding the mtime-checked parse cache."""

        return self.store_root / "cache"  # type: ignore[operator]

    @property
    def compiler_root(self) -> Path:
        """Directory holding compiled artifacts."""

        return self.store_root / "compiler"  # type: ignore[operator]

    def package_root(self, package: str) -> Path:
        return self.vendor_root / package  # type: ignore[operator]

    def package_config_root(self, package: str) -> Path:
        return self.package_root(package) / self.config_folder
