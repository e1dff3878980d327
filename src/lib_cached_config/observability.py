"""Structured logging for configuration loading and caching.

Purpose
    Loading never raises for a missing source or a damaged cache artifact, so
    the log is the only place those events show up. Every entry goes through
    one emitter that attaches the active trace identifier and the event
    fields as ``record.context``; the library never installs a real handler.

Contents
    - ``TRACE_ID``: context variable holding the active trace identifier.
    - ``get_logger``: the package logger, silent until the host adds handlers.
    - ``bind_trace_id`` / ``trace_scope``: set the identifier for a call chain.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: level
      specific wrappers around the emitter.
    - ``make_event``: payload builder for per-source events.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_cached_config_trace_id", default=None)

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_cached_config")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the ``lib_cached_config`` logger so applications may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind *trace_id* for subsequent log entries; ``None`` clears it.

    Examples
    --------
    >>> bind_trace_id('boot-1')
    >>> TRACE_ID.get()
    'boot-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


@contextmanager
def trace_scope(trace_id: str | None) -> Iterator[str | None]:
    """Bind *trace_id* for the duration of the ``with`` block, then restore the previous one.

    Examples
    --------
    >>> with trace_scope('cli-1'):
    ...     TRACE_ID.get()
    'cli-1'
    >>> TRACE_ID.get() is None
    True
    """

    token = TRACE_ID.set(trace_id)
    try:
        yield trace_id
    finally:
        TRACE_ID.reset(token)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    """Used for cache failures that were absorbed."""

    _emit(logging.WARNING, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(
    source: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the fields of a per-source event: ``source``, ``path`` and *payload*.

    Examples
    --------
    >>> make_event('engine', '/srv/app/config/engine.ini', {'cache_hit': True})
    {'source': 'engine', 'path': '/srv/app/config/engine.ini', 'cache_hit': True}
    """

    event: dict[str, Any] = {"source": source, "path": path}
    if payload:
        event.update(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    context = {"trace_id": TRACE_ID.get(), **fields}
    _LOGGER.log(level, message, extra={"context": context})
