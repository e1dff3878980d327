"""CLI adapter for ``lib_cached_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect what an application would load (and what the cache
holds) without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_read` – loads sources into one document and prints JSON.
* :func:`cli_get` – prints a single slash-addressed value.
* :func:`cli_env` – loads ``.env`` then ``.env.local`` and prints JSON.
* :func:`cli_cache_clear` – removes parse-cache artifacts.
* :func:`cli_compiled_invalidate` – drops a compiled artifact.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: commands talk to :mod:`lib_cached_config.core` only.
"""

from __future__ import annotations

import json
import sys
import uuid
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.cache.mtime import FilesystemParseCache
from .application.document import ConfigDocument
from .core import FORMATS, create_compiler, create_registry, layout_from_env
from .observability import trace_scope

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

_BUILDABLE_FORMATS: Final[tuple[str, ...]] = tuple(name for name, fmt in FORMATS.items() if fmt.buildable)
_MISSING: Final[object] = object()

_root_option = click.option(
    "--root",
    "root",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    default=None,
    help="Application root (defaults to LIB_CACHED_CONFIG_ROOT or the CWD)",
)


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_cached_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Cached configuration resolver",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_cached_config",
    message="lib_cached_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Each invocation logs under its own ``cli-<hex>`` trace identifier.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    ctx.obj["trace_id"] = ctx.with_resource(trace_scope(f"cli-{uuid.uuid4().hex[:8]}"))
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_cached_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_cached_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_cached_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("read", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("sources", nargs=-1, required=True)
@_root_option
@click.option("--package", default=None, help="Vendor package holding the sources (e.g. acme/blog)")
@click.option(
    "--format",
    "format_name",
    type=click.Choice(_BUILDABLE_FORMATS, case_sensitive=False),
    default="ini",
    show_default=True,
    help="Source format",
)
@click.option("--cache/--no-cache", default=True, show_default=True, help="Read parsed sources from the cache")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the source of each top-level key in the output",
)
def cli_read(
    sources: Sequence[str],
    root: Optional[Path],
    package: Optional[str],
    format_name: str,
    cache: bool,
    indent: Optional[int],
    provenance: bool,
) -> None:
    """Load SOURCES in order into one document and print it as JSON.

    Later sources overwrite top-level keys of earlier ones. Missing or
    malformed sources are reported on stderr and make the command exit with
    status 1.
    """

    registry = create_registry(root)
    document = registry.document(format_name.lower())
    failed = _load_all(document, package, sources, cache)
    _echo_document(document, indent=indent, provenance=provenance)
    if failed:
        raise SystemExit(1)


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.argument("sources", nargs=-1, required=True)
@_root_option
@click.option("--package", default=None, help="Vendor package holding the sources")
@click.option(
    "--format",
    "format_name",
    type=click.Choice(_BUILDABLE_FORMATS, case_sensitive=False),
    default="ini",
    show_default=True,
    help="Source format",
)
@click.option("--default", "default", default=None, help="Value printed when KEY is absent")
def cli_get(
    key: str,
    sources: Sequence[str],
    root: Optional[Path],
    package: Optional[str],
    format_name: str,
    default: Optional[str],
) -> None:
    """Print the value addressed by KEY (slash path, e.g. ``db/host``) after loading SOURCES.

    An absent KEY without ``--default`` exits with status 1; a stored
    ``null`` is printed as such.
    """

    registry = create_registry(root)
    document = registry.document(format_name.lower())
    _load_all(document, package, sources, True)
    value = document.get_one(key, _MISSING)
    if value is _MISSING:
        if default is None:
            raise SystemExit(1)
        value = default
    click.echo(value if isinstance(value, str) else json.dumps(value, separators=(",", ":")))


@cli.command("env", context_settings=CLICK_CONTEXT_SETTINGS)
@_root_option
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the file of each top-level key in the output",
)
def cli_env(root: Optional[Path], indent: Optional[int], provenance: bool) -> None:
    """Load ``.env`` then ``.env.local`` from the application root and print JSON."""

    document = create_registry(root).build_env()
    _echo_document(document, indent=indent, provenance=provenance)


@cli.command("cache-clear", context_settings=CLICK_CONTEXT_SETTINGS)
@_root_option
@click.option("--domain", default=None, help="Only clear one cache domain (e.g. app-ini-config)")
def cli_cache_clear(root: Optional[Path], domain: Optional[str]) -> None:
    """Remove parse-cache artifacts and print how many were deleted."""

    cache = FilesystemParseCache(layout_from_env(root).cache_root)
    click.echo(str(cache.clear(domain)))


@cli.command("compiled-invalidate", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("name")
@_root_option
def cli_compiled_invalidate(name: str, root: Optional[Path]) -> None:
    """Delete the compiled artifact NAME so it is recomputed on next use."""

    removed = create_compiler(layout_from_env(root)).invalidate(name)
    click.echo("removed" if removed else "absent")


def _load_all(document: ConfigDocument, package: Optional[str], sources: Sequence[str], cached: bool) -> bool:
    """Load *sources* into *document*; return ``True`` when any of them failed."""

    failed = False
    for source in sources:
        outcome = document.try_load_from(package, source, cached)
        if not outcome:
            failed = True
            click.echo(f"{source}: {outcome.error}", err=True)
    return failed


def _echo_document(document: ConfigDocument, *, indent: Optional[int], provenance: bool) -> None:
    if provenance:
        payload = {
            "config": document.as_dict(),
            "provenance": {key: document.origin(key) for key in document},
        }
        click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False))
        return
    click.echo(document.to_json(indent=indent))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_cached_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
