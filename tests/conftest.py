from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from lib_cached_config.application.document import ConfigDocument
from lib_cached_config.core import ENV_FOLDER, ENV_ROOT, ENV_STORE, ENV_VENDOR, reset_default_registry
from tests.support import AppSandbox, create_app_sandbox


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep process-wide switches and layout variables from leaking between tests."""

    for name in (ENV_ROOT, ENV_FOLDER, ENV_VENDOR, ENV_STORE):
        monkeypatch.delenv(name, raising=False)
    ConfigDocument.set_caching(True)
    reset_default_registry()
    yield
    ConfigDocument.set_caching(True)
    reset_default_registry()


@pytest.fixture()
def sandbox(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppSandbox:
    """Application sandbox; the working directory is moved inside it so literal
    paths such as ``.env`` cannot pick up files from the checkout."""

    app = create_app_sandbox(tmp_path)
    monkeypatch.chdir(app.root)
    return app
