"""Source references of a SopsSecret manifest.

Responsabilités:
- Découper les références ``files`` (``path`` ou ``key=path``)
- Classer chaque chemin par extension (yaml, json, dotenv, binary)
"""

from __future__ import annotations

import posixpath
from enum import Enum

from .errors import SourceSyntaxError


class Format(str, Enum):
    """Formats understood by ``sops --input-type/--output-type``."""

    YAML = "yaml"
    JSON = "json"
    DOTENV = "dotenv"
    BINARY = "binary"


_SUFFIXES: tuple[tuple[tuple[str, ...], Format], ...] = (
    ((".yaml", ".yml"), Format.YAML),
    ((".json",), Format.JSON),
    ((".env",), Format.DOTENV),
)


def classify(path: str) -> Format:
    """Return the format of ``path`` from its suffix only (case-sensitive)."""

    for suffixes, fmt in _SUFFIXES:
        if path.endswith(suffixes):
            return fmt
    return Format.BINARY


def _base_name(path: str) -> str:
    """Last path element; trailing slashes are ignored ('a/b/' gives 'b')."""

    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return posixpath.basename(stripped)


def resolve_file_source(source: str) -> tuple[str, str]:
    """Split a file source reference into ``(key, path)``.

    ``path/to/file`` uses the base name as key, ``KEY=path/to/file``
    uses an explicit key.
    """

    separators = source.count("=")
    if separators == 0:
        return _base_name(source), source
    if separators == 1 and source.startswith("="):
        raise SourceSyntaxError(f"key name for file path {source[1:]} missing")
    if separators == 1 and source.endswith("="):
        raise SourceSyntaxError(f"file path for key name {source[:-1]} missing")
    if separators > 1:
        raise SourceSyntaxError("key names or file paths cannot contain '='")
    key, path = source.split("=")
    return key, path
