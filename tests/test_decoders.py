from __future__ import annotations

import base64

import pytest

from SopsSecret.decoders import decode_env, decode_file, encode_value, parse_dotenv
from SopsSecret.errors import DotenvSyntaxError, EncodingError, FormatError, ParseError
from SopsSecret.sources import Format


def test_dotenv_skips_comments_and_blank_lines():
    data = parse_dotenv(b"FOO=bar\n# comment\n\nBAZ=qux=extra\n")
    assert data == {"FOO": "bar", "BAZ": "qux=extra"}


def test_dotenv_trims_leading_whitespace_only():
    data = parse_dotenv(b"   FOO=bar  \n\t# indented comment\nEMPTY=\n")
    assert data == {"FOO": "bar  ", "EMPTY": ""}


def test_dotenv_keeps_carriage_return():
    data = parse_dotenv(b"FOO=bar\r\nBAZ=qux\r\n")
    assert data == {"FOO": "bar\r", "BAZ": "qux\r"}


def test_dotenv_missing_separator_reports_line():
    with pytest.raises(DotenvSyntaxError) as exc:
        parse_dotenv(b"NOVALUE\n")
    assert exc.value.line == 0
    assert str(exc.value) == "line 0: requires value: NOVALUE"


def test_dotenv_error_on_later_line():
    with pytest.raises(DotenvSyntaxError) as exc:
        parse_dotenv(b"A=1\n# c\nBROKEN\n")
    assert exc.value.line == 2
    assert str(exc.value).startswith("line 2:")


def test_dotenv_strips_bom_on_first_line_only():
    assert parse_dotenv(b"\xef\xbb\xbfFOO=bar\n") == {"FOO": "bar"}

    data = parse_dotenv(b"A=1\n\xef\xbb\xbfFOO=bar\n")
    assert data["\ufeffFOO"] == "bar"
    assert "FOO" not in data


def test_dotenv_invalid_utf8():
    with pytest.raises(EncodingError) as exc:
        parse_dotenv(b"A=1\nB=\xff\xfe\n")
    assert exc.value.line == 1
    assert "invalid UTF-8 bytes" in str(exc.value)
    assert "B=" in str(exc.value)


def test_yaml_flat_mapping_in_document_order():
    data = decode_env(b"zeta: last\nalpha: first\n", Format.YAML)
    assert list(data.items()) == [("zeta", "last"), ("alpha", "first")]


def test_yaml_empty_document():
    assert decode_env(b"", "yaml") == {}


@pytest.mark.parametrize(
    "content",
    [
        b"nested:\n  key: value\n",
        b"port: 8080\n",
        b"items:\n  - a\n",
        b"- a\n- b\n",
        b"key: [unclosed\n",
    ],
)
def test_yaml_rejects_non_flat_content(content):
    with pytest.raises(ParseError):
        decode_env(content, Format.YAML)


def test_json_flat_mapping():
    assert decode_env(b'{"USER": "admin", "PASS": "s3cr=t"}', Format.JSON) == {
        "USER": "admin",
        "PASS": "s3cr=t",
    }


@pytest.mark.parametrize("content", [b'{"a": {"b": "c"}}', b'{"a": 1}', b"[]", b"null", b"{"])
def test_json_rejects_non_flat_content(content):
    with pytest.raises(ParseError):
        decode_env(content, Format.JSON)


def test_binary_env_source_rejected():
    with pytest.raises(FormatError, match="use dotenv, yaml or json"):
        decode_env(b"whatever", Format.BINARY)


def test_decode_file_keeps_bytes_exactly():
    raw = b"\x00\xff\xfebinary\r\n"
    assert base64.b64decode(decode_file(raw)) == raw


def test_encode_value_utf8():
    assert encode_value("héllo") == base64.b64encode("héllo".encode("utf-8")).decode("ascii")


@pytest.mark.parametrize(
    "content, fmt",
    [
        (b'{"K": "\\ud800"}', Format.JSON),
        (b'K: "\\ud800"\n', Format.YAML),
    ],
)
def test_lone_surrogate_value_rejected(content, fmt):
    with pytest.raises(ParseError, match="'K'"):
        decode_env(content, fmt)


def test_dotenv_control_separators_are_not_whitespace():
    data = parse_dotenv(b"\x1fFOO=bar\n\xc2\xa0 BAZ=qux\n")
    assert data == {"\x1fFOO": "bar", "BAZ": "qux"}
