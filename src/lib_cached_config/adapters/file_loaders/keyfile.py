"""Key-file (ini) and environment (``.env``) loaders.

Purpose
-------
Parse the two text formats applications keep their settings in. Both produce
the same shape: keys outside any section are top-level, each ``[section]``
becomes one level of nesting, and values stay strings. A key written as
``name[]`` appends to a list and ``name[key]`` fills a mapping, so one ini
section can hold a list of modules or a small table of limits.

Contents
--------
* :class:`IniFileLoader` – ``configparser`` based key-file parser.
* :class:`EnvFileLoader` – strict ``KEY=VALUE`` parser for ``.env`` files.
* :func:`_assign` – stores one value, expanding ``name[]`` and ``name[key]`` keys.
* :func:`_strip_quotes` – trims quotes and inline comments from values.
"""

from __future__ import annotations

import configparser
import re
from typing import Mapping

from ...domain.errors import InvalidFormat
from ...observability import log_error
from .base import BaseFileLoader

_ROOT_SECTION = "__root__"
_DEFAULT_SECTION = "__defaults__"
_APPEND_MARK = "\x00"
_BRACKET_KEY = re.compile(r"(?P<name>[^\[\]]+)\[(?P<index>[^\[\]]*)\]")
_APPEND_LINE = re.compile(r"^(?P<name>[ \t]*[^\s=;#\[\]][^=\[\]]*?)[ \t]*\[\][ \t]*(?==)")


class IniFileLoader(BaseFileLoader):
    """Load ini files into nested dictionaries.

    Keys keep their case and values are not interpolated. Repeated
    ``name[]`` keys are numbered before ``configparser`` sees them, since it
    keeps only the last value of a repeated key.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import NamedTemporaryFile
    >>> tmp = NamedTemporaryFile('w', suffix='.ini', delete=False, encoding='utf-8')
    >>> _ = tmp.write('name = "demo"\\n[db]\\nhost=localhost\\n')
    >>> tmp.close()
    >>> IniFileLoader().load(tmp.name)
    {'name': 'demo', 'db': {'host': 'localhost'}}
    >>> Path(tmp.name).unlink()
    """

    format_name = "ini"

    def load(self, path: str) -> Mapping[str, object]:
        text = _number_appends(self._decode(path))
        parser = _new_parser()
        try:
            parser.read_string(f"[{_ROOT_SECTION}]\n{text}", source=path)
        except configparser.Error as exc:
            raise self._invalid(path, exc) from exc
        result: dict[str, object] = {}
        for section in parser.sections():
            values: dict[str, object] = {}
            for key, value in parser.items(section, raw=True):
                _assign(values, key, _strip_quotes(value))
            if section == _ROOT_SECTION:
                result.update(values)
            else:
                result[section] = values
        return self._loaded(result, path=path)


class EnvFileLoader(BaseFileLoader):
    """Load ``.env`` files, accepting the same ``[section]`` headers as ini files.

    Why
    ----
    Deployment files are written by hand and by tooling alike; the parser is
    strict so a typo surfaces as ``InvalidFormat`` instead of a silently
    missing key.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import NamedTemporaryFile
    >>> tmp = NamedTemporaryFile('w', suffix='.env', delete=False, encoding='utf-8')
    >>> _ = tmp.write('# local\\nexport APP_ENV=prod\\nSECRET="s3cret" # inline\\n')
    >>> tmp.close()
    >>> EnvFileLoader().load(tmp.name)
    {'APP_ENV': 'prod', 'SECRET': 's3cret'}
    >>> Path(tmp.name).unlink()
    """

    format_name = "env"

    def load(self, path: str) -> Mapping[str, object]:
        result: dict[str, object] = {}
        target = result
        for line_number, raw_line in enumerate(self._decode(path).splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith(("#", ";")):
                continue
            if line.startswith("[") and line.endswith("]"):
                section = line[1:-1].strip()
                if not section:
                    raise self._malformed(path, line_number)
                existing = result.get(section)
                target = existing if isinstance(existing, dict) else {}
                result[section] = target
                continue
            if "=" not in line:
                raise self._malformed(path, line_number)
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            if not key:
                raise self._malformed(path, line_number)
            _assign(target, key, _strip_quotes(value.strip()))
        return self._loaded(result, path=path)

    def _malformed(self, path: str, line_number: int) -> InvalidFormat:
        log_error("config_file_invalid", path=path, format=self.format_name, line=line_number)
        return InvalidFormat(f"Malformed line {line_number} in {path}")


def _number_appends(text: str) -> str:
    """Rewrite every ``name[]`` key to ``name[<mark><n>]`` with a file-wide counter."""

    lines = text.splitlines()
    counter = 0
    for number, line in enumerate(lines):
        match = _APPEND_LINE.match(line)
        if match is None:
            continue
        lines[number] = f"{match.group('name')}[{_APPEND_MARK}{counter}]{line[match.end():]}"
        counter += 1
    return "\n".join(lines)


def _assign(target: dict[str, object], key: str, value: str) -> None:
    """Store *value* under *key*; ``name[]`` appends to a list, ``name[key]`` fills a mapping.

    Mixing both forms turns the list into a mapping keyed by position.

    Examples
    --------
    >>> data = {}
    >>> _assign(data, "modules[]", "blog")
    >>> _assign(data, "modules[]", "shop")
    >>> _assign(data, "limits[upload]", "8M")
    >>> _assign(data, "name", "demo")
    >>> data
    {'modules': ['blog', 'shop'], 'limits': {'upload': '8M'}, 'name': 'demo'}
    >>> _assign(data, "modules[main]", "core")
    >>> data["modules"]
    {'0': 'blog', '1': 'shop', 'main': 'core'}
    """

    match = _BRACKET_KEY.fullmatch(key)
    name = match.group("name").strip() if match else ""
    if not name:
        target[key] = value
        return
    index = match.group("index").strip()
    container = target.get(name)
    if not index or index.startswith(_APPEND_MARK):
        if isinstance(container, list):
            container.append(value)
        elif isinstance(container, dict):
            position = len(container)
            while str(position) in container:
                position += 1
            container[str(position)] = value
        else:
            target[name] = [value]
        return
    if isinstance(container, list):
        container = {str(position): item for position, item in enumerate(container)}
        target[name] = container
    elif not isinstance(container, dict):
        container = {}
        target[name] = container
    container[index] = value


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=(";",),
        default_section=_DEFAULT_SECTION,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def _strip_quotes(value: str) -> str:
    """Trim surrounding quotes and inline ``#`` comments from ``value``.

    Examples
    --------
    >>> _strip_quotes('"token"')
    'token'
    >>> _strip_quotes("value # comment")
    'value'
    >>> _strip_quotes("'a # b'")
    'a # b'
    """

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    if value.startswith("#"):
        return ""
    if " #" in value:
        value = value.split(" #", 1)[0].strip()
        return _strip_quotes(value)
    return value
