"""Format strategies selecting how a source is located and parsed.

A :class:`ConfigFormat` bundles the file extension, the loader, and the path
conventions of one configuration flavour. Documents and resolvers receive the
format value instead of subclassing per file type.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ports import FileLoader


@dataclass(frozen=True, slots=True)
class ConfigFormat:
    """Describe one configuration flavour.

    Parameters
    ----------
    name:
        Registry key (``"ini"``, ``"env"``, ...). Also part of the cache domain.
    extension:
        Suffix appended to identifiers, without the dot. ``None`` means the
        identifier already is the file name (``.env``).
    loader:
        Parser turning the file into a mapping.
    uses_config_folder:
        Whether sources live in the conventional config folder or directly
        under the application / package root.
    buildable:
        Whether :meth:`ConfigRegistry.build` may create documents of this
        format. Env documents are only assembled through ``build_env``.

    Examples
    --------
    >>> from lib_cached_config.adapters.file_loaders.keyfile import IniFileLoader
    >>> ConfigFormat("ini", "ini", IniFileLoader()).file_name("engine")
    'engine.ini'
    >>> ConfigFormat("env", None, IniFileLoader(), uses_config_folder=False).file_name(".env")
    '.env'
    """

    name: str
    extension: str | None
    loader: FileLoader
    uses_config_folder: bool = True
    buildable: bool = True

    def file_name(self, identifier: str) -> str:
        """Return the conventional file name for *identifier*."""

        if not self.extension:
            return identifier
        return f"{identifier}.{self.extension}"
