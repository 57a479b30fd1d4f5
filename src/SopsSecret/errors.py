"""Exceptions raised while generating a Secret from a SopsSecret manifest.

Each pipeline layer adds a context frame (``env source x.env``,
``line 3``...) to the exception it propagates instead of replacing it,
so callers can still match on the original type.
"""

from __future__ import annotations

from typing import Optional


class SopsSecretError(RuntimeError):
    """Base error for the generator."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, frame: str) -> "SopsSecretError":
        """Prepend ``frame`` to the message and return the same exception."""

        self.context.insert(0, frame)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class ReadError(SopsSecretError):
    """A manifest or source file could not be read."""


class ParseError(SopsSecretError):
    """A structured document (manifest, YAML or JSON source) is malformed."""


class SchemaError(SopsSecretError):
    """The manifest is not a valid SopsSecret."""


class SourceSyntaxError(SopsSecretError):
    """A ``key=path`` file source reference is malformed."""


class FormatError(SopsSecretError):
    """The source format cannot be used here."""


class SopsError(SopsSecretError):
    """Erreur lors du déchiffrement SOPS."""


class DotenvError(SopsSecretError):
    """Error tied to one line of a dotenv source."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.line = line


class EncodingError(DotenvError):
    """A dotenv line is not valid UTF-8."""


class DotenvSyntaxError(DotenvError):
    """A dotenv line has no ``=`` separator."""
