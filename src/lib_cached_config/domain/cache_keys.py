"""Naming rules for parse-cache entries.

Cache domains and source names end up as directory and file names inside the
store, so separators are flattened out of them before they touch the
filesystem.
"""

from __future__ import annotations

_FILLER = "-"


def normalize_cache_token(value: str) -> str:
    """Replace path separators with a filler and trim fillers at both ends.

    Examples
    --------
    >>> normalize_cache_token("acme/blog")
    'acme-blog'
    >>> normalize_cache_token("/etc\\\\app/engine.ini/")
    'etc-app-engine.ini'
    """

    return value.replace("/", _FILLER).replace("\\", _FILLER).strip(_FILLER)


def cache_domain(package: str | None, format_name: str) -> str:
    """Return the cache domain isolating a package's (or the application's) sources.

    Examples
    --------
    >>> cache_domain(None, "ini")
    'app-ini-config'
    >>> cache_domain("acme/blog", "env")
    'acme-blog-env-config'
    """

    owner = normalize_cache_token(package) if package else "app"
    return f"{owner}-{format_name}-config"
