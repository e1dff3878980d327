"""Public package surface of ``lib_cached_config``.

Exports the composition-root helpers, the registry/document types, the error
taxonomy, and the logging hooks so both ``import lib_cached_config`` and
``python -m lib_cached_config`` reach the same API.
"""

from __future__ import annotations

from .adapters.cache.compiled import CompiledArtifactCache
from .application.document import ConfigDocument
from .application.registry import ConfigRegistry
from .core import (
    build,
    build_env,
    build_from,
    configure,
    create_compiler,
    create_registry,
    default_registry,
    get,
    reset_default_registry,
)
from .domain.array_path import array_path_get, array_path_set
from .domain.config import LoadOutcome
from .domain.errors import (
    CacheIOError,
    ConfigError,
    InvalidFormat,
    MisuseError,
    NotFound,
    SourceNotFound,
)
from .domain.layout import ApplicationLayout
from .observability import bind_trace_id, get_logger, trace_scope

__all__ = [
    "ApplicationLayout",
    "CacheIOError",
    "CompiledArtifactCache",
    "ConfigDocument",
    "ConfigError",
    "ConfigRegistry",
    "InvalidFormat",
    "LoadOutcome",
    "MisuseError",
    "NotFound",
    "SourceNotFound",
    "array_path_get",
    "array_path_set",
    "bind_trace_id",
    "build",
    "build_env",
    "build_from",
    "configure",
    "create_compiler",
    "create_registry",
    "default_registry",
    "get",
    "get_logger",
    "reset_default_registry",
    "trace_scope",
]
