"""Decoding of decrypted source content into Secret data.

Env sources yield several ``key -> value`` pairs (dotenv, YAML or JSON);
file sources yield a single value holding the whole content.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Dict

import yaml

from .errors import DotenvSyntaxError, EncodingError, FormatError, ParseError
from .sources import Format

UTF8_BOM = b"\xef\xbb\xbf"

# Unicode White_Space only; a bare lstrip() would also eat \x1c-\x1f
_LEADING_SPACE = (
    "\t\n\v\f\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def encode_value(value: str | bytes) -> str:
    """Base64-encode a value the way Secret ``data`` expects it."""

    raw = value.encode("utf-8") if isinstance(value, str) else value
    return base64.b64encode(raw).decode("ascii")


def decode_file(content: bytes) -> str:
    """Whole decrypted content as one encoded value, whatever its format."""

    return encode_value(content)


def decode_env(content: bytes, fmt: Format | str) -> Dict[str, str]:
    """Decode an env source into raw (not yet encoded) string pairs."""

    fmt = Format(fmt)
    if fmt is Format.DOTENV:
        return parse_dotenv(content)
    if fmt is Format.YAML:
        return parse_yaml_mapping(content)
    if fmt is Format.JSON:
        return parse_json_mapping(content)
    raise FormatError("unknown file format, use dotenv, yaml or json")


def parse_dotenv(content: bytes) -> Dict[str, str]:
    """Parse ``KEY=value`` lines.

    Only leading whitespace is trimmed; a ``\\r`` left by CRLF endings
    stays part of the value.
    """

    data: Dict[str, str] = {}
    lines = content.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()

    for line_num, raw_line in enumerate(lines):
        if line_num == 0 and raw_line.startswith(UTF8_BOM):
            raw_line = raw_line[len(UTF8_BOM):]
        try:
            _parse_env_line(raw_line, data)
        except (EncodingError, DotenvSyntaxError) as exc:
            exc.line = line_num
            raise exc.add_context(f"line {line_num}")
    return data


def _parse_env_line(raw_line: bytes, data: Dict[str, str]) -> None:
    try:
        line = raw_line.decode("utf-8")
    except UnicodeDecodeError:
        raise EncodingError(
            f"invalid UTF-8 bytes: {raw_line.decode('utf-8', errors='replace')}"
        ) from None

    line = line.lstrip(_LEADING_SPACE)
    if not line or line.startswith("#"):
        return

    key, sep, value = line.partition("=")
    if not sep:
        raise DotenvSyntaxError(f"requires value: {line}")
    data[key] = value


def _check_flat(doc: Any, kind: str) -> Dict[str, str]:
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ParseError(f"{kind} content must be a mapping of strings, got {type(doc).__name__}")
    for key, value in doc.items():
        if not isinstance(key, str):
            raise ParseError(f"{kind} key {key!r} is not a string")
        if not isinstance(value, str):
            raise ParseError(
                f"{kind} value for key {key} must be a string, got {type(value).__name__}"
            )
        # Lone surrogates (e.g. "\ud800") parse fine but cannot become UTF-8
        try:
            key.encode("utf-8")
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ParseError(
                f"{kind} entry for key {key!r} is not valid UTF-8: {exc.reason}"
            ) from exc
    return doc


def parse_yaml_mapping(content: bytes) -> Dict[str, str]:
    try:
        doc = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ParseError(str(exc)) from exc
    return _check_flat(doc, "yaml")


def parse_json_mapping(content: bytes) -> Dict[str, str]:
    try:
        doc = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(str(exc)) from exc
    if doc is None:
        raise ParseError("json content must be a mapping of strings, got null")
    return _check_flat(doc, "json")
