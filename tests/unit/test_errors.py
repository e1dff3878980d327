from __future__ import annotations

import pytest

from lib_cached_config.domain.errors import (
    CacheIOError,
    ConfigError,
    InvalidFormat,
    MisuseError,
    NotFound,
    SourceNotFound,
)


def test_error_hierarchy() -> None:
    for error_type in (InvalidFormat, NotFound, CacheIOError, MisuseError):
        assert issubclass(error_type, ConfigError)
    assert issubclass(SourceNotFound, NotFound)


def test_source_not_found_names_identifier() -> None:
    error = SourceNotFound("engine")
    assert str(error) == 'Unable to find config source "engine"'
    assert error.identifier == "engine"
    assert error.package is None


def test_source_not_found_names_package() -> None:
    error = SourceNotFound("conf", "missing/pkg")
    assert str(error) == 'Unable to find config source "conf" in package "missing/pkg"'
    assert error.package == "missing/pkg"


def test_source_not_found_is_caught_as_not_found() -> None:
    with pytest.raises(NotFound):
        raise SourceNotFound("engine")
