"""Mtime-checked parse cache: freshness, tolerance to damage, housekeeping."""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path

import pytest

from lib_cached_config.adapters.cache.mtime import FilesystemParseCache, write_atomic

DOMAIN = "app-ini-config"
PAYLOAD = {"db": {"host": "localhost"}}


@pytest.fixture()
def cache(tmp_path: Path) -> FilesystemParseCache:
    return FilesystemParseCache(tmp_path / "store" / "cache")


def test_absent_entry_is_a_miss(cache: FilesystemParseCache) -> None:
    assert cache.get(DOMAIN, "engine", 1) == (False, None)


def test_fresh_entry_is_a_hit(cache: FilesystemParseCache) -> None:
    cache.set(DOMAIN, "engine", 1_700_000_000_000_000_000, PAYLOAD)
    assert cache.get(DOMAIN, "engine", 1_700_000_000_000_000_000) == (True, PAYLOAD)


def test_stale_entry_is_a_miss(cache: FilesystemParseCache) -> None:
    cache.set(DOMAIN, "engine", 1, PAYLOAD)
    assert cache.get(DOMAIN, "engine", 2) == (False, None)
    assert cache.get(DOMAIN, "engine", 0) == (False, None)


def test_artifact_layout(cache: FilesystemParseCache) -> None:
    cache.set("acme/blog-ini-config", "sub/engine", 7, PAYLOAD)
    path = cache.artifact_path("acme/blog-ini-config", "sub/engine")
    assert path == cache.root / "acme-blog-ini-config" / "sub-engine.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"mtime": 7, "payload": PAYLOAD}


def test_domains_are_isolated(cache: FilesystemParseCache) -> None:
    cache.set("app-ini-config", "engine", 1, {"owner": "app"})
    cache.set("acme-blog-ini-config", "engine", 1, {"owner": "package"})
    assert cache.get("app-ini-config", "engine", 1) == (True, {"owner": "app"})
    assert cache.get("acme-blog-ini-config", "engine", 1) == (True, {"owner": "package"})


def test_set_leaves_no_temporary_files(cache: FilesystemParseCache) -> None:
    cache.set(DOMAIN, "engine", 1, PAYLOAD)
    cache.set(DOMAIN, "engine", 2, PAYLOAD)
    assert [path.name for path in (cache.root / DOMAIN).iterdir()] == ["engine.json"]


@pytest.mark.parametrize(
    "body",
    [
        '{"mtime": 1, "payload": {"db"',
        "[]",
        '{"mtime": "1", "payload": {}}',
        '{"mtime": 1, "payload": [1, 2]}',
        '{"payload": {}}',
    ],
)
def test_damaged_entry_is_a_logged_miss(
    cache: FilesystemParseCache, caplog: pytest.LogCaptureFixture, body: str
) -> None:
    path = cache.artifact_path(DOMAIN, "engine")
    path.parent.mkdir(parents=True)
    path.write_text(body, encoding="utf-8")
    caplog.set_level(logging.WARNING, logger="lib_cached_config")
    assert cache.get(DOMAIN, "engine", 1) == (False, None)
    assert [record.getMessage() for record in caplog.records] == ["parse_cache_read_failed"]


def test_damaged_entry_is_repaired_by_next_set(cache: FilesystemParseCache) -> None:
    path = cache.artifact_path(DOMAIN, "engine")
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\x00\xff")
    cache.set(DOMAIN, "engine", 1, PAYLOAD)
    assert cache.get(DOMAIN, "engine", 1) == (True, PAYLOAD)


def test_unwritable_store_is_absorbed(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    blocker = tmp_path / "store"
    blocker.write_text("not a directory", encoding="utf-8")
    cache = FilesystemParseCache(blocker / "cache")
    caplog.set_level(logging.WARNING, logger="lib_cached_config")
    cache.set(DOMAIN, "engine", 1, PAYLOAD)
    assert cache.get(DOMAIN, "engine", 1) == (False, None)
    assert "parse_cache_write_failed" in [record.getMessage() for record in caplog.records]


def test_unserialisable_payload_is_absorbed(cache: FilesystemParseCache) -> None:
    cache.set(DOMAIN, "engine", 1, {"handler": object()})
    assert cache.get(DOMAIN, "engine", 1) == (False, None)
    assert not cache.artifact_path(DOMAIN, "engine").exists()


def test_toml_dates_are_skipped_quietly(cache: FilesystemParseCache, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_cached_config")
    cache.set("app-toml-config", "release", 1, {"released": dt.date(2024, 1, 31)})
    assert cache.get("app-toml-config", "release", 1) == (False, None)
    skipped = [record for record in caplog.records if record.getMessage() == "parse_cache_skipped"]
    assert [record.levelno for record in skipped] == [logging.DEBUG]
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]


@pytest.mark.parametrize(
    "payload",
    [
        {True: "push"},
        {1: "one"},
        {"matrix": {2.5: "py"}},
        {"jobs": {None: "default"}},
    ],
)
def test_keys_json_would_rename_are_not_stored(cache: FilesystemParseCache, payload: dict) -> None:
    cache.set("app-yaml-config", "ci", 1, payload)
    assert cache.get("app-yaml-config", "ci", 1) == (False, None)
    assert not cache.artifact_path("app-yaml-config", "ci").exists()


def test_clear_all(cache: FilesystemParseCache) -> None:
    cache.set("app-ini-config", "engine", 1, PAYLOAD)
    cache.set("app-ini-config", "routing", 1, PAYLOAD)
    cache.set("acme-blog-ini-config", "engine", 1, PAYLOAD)
    assert cache.clear() == 3
    assert cache.get("app-ini-config", "engine", 1) == (False, None)


def test_clear_one_domain(cache: FilesystemParseCache) -> None:
    cache.set("app-ini-config", "engine", 1, PAYLOAD)
    cache.set("acme-blog-ini-config", "engine", 1, PAYLOAD)
    assert cache.clear("acme/blog-ini-config") == 1
    assert cache.get("app-ini-config", "engine", 1) == (True, PAYLOAD)
    assert cache.get("acme-blog-ini-config", "engine", 1) == (False, None)


def test_clear_without_store(cache: FilesystemParseCache) -> None:
    assert cache.clear() == 0
    assert cache.clear(DOMAIN) == 0


def test_write_atomic_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "artifact.json"
    write_atomic(target, "{}")
    write_atomic(target, '{"k":1}')
    assert target.read_text(encoding="utf-8") == '{"k":1}'
    assert sorted(path.name for path in target.parent.iterdir()) == ["artifact.json"]
