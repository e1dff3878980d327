"""Shared test fixtures describing an application tree on disk.

Tests build a throwaway application root (config folder, vendor packages,
store) and write sources into it through :class:`AppSandbox` so each scenario
reads as "this file exists with this content".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from lib_cached_config.core import ENV_ROOT, ENV_STORE
from lib_cached_config.domain.layout import ApplicationLayout

__all__ = ["AppSandbox", "create_app_sandbox"]


@dataclass
class AppSandbox:
    """Application root under ``tmp_path`` with helpers to write sources."""

    root: Path
    layout: ApplicationLayout
    env: dict[str, str] = field(default_factory=dict)

    def write_config(self, name: str, content: str, *, package: str | None = None) -> Path:
        """Write ``<config folder>/<name>`` of the application or of *package*."""

        base = self.layout.package_config_root(package) if package else self.layout.config_root
        return _write(base / name, content)

    def write_root(self, name: str, content: str, *, package: str | None = None) -> Path:
        """Write *name* directly under the application (or package) root."""

        base = self.layout.package_root(package) if package else self.layout.app_root
        return _write(base / name, content)

    def cache_artifacts(self) -> list[Path]:
        """Return every parse-cache artifact currently stored."""

        if not self.layout.cache_root.exists():
            return []
        return sorted(self.layout.cache_root.rglob("*.json"))


def create_app_sandbox(tmp_path: Path) -> AppSandbox:
    """Return a sandbox rooted at ``tmp_path / "app"`` with an empty config folder."""

    root = tmp_path / "app"
    layout = ApplicationLayout(root)
    layout.config_root.mkdir(parents=True)
    env = {ENV_ROOT: str(root), ENV_STORE: str(layout.store_root)}
    return AppSandbox(root=root, layout=layout, env=env)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
