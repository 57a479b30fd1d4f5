"""Pytest fixtures for SopsSecret tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest


class FakeDecryptor:
    """Returns content unchanged and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[bytes, str]] = []

    def decrypt(self, content: bytes, fmt: str) -> bytes:
        self.calls.append((content, fmt))
        return content


@pytest.fixture()
def decryptor() -> FakeDecryptor:
    return FakeDecryptor()


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Run the test from ``tmp_path`` so relative source paths resolve there."""

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def write_manifest(workdir: Path) -> Callable[..., Path]:
    def _write(body: str = "", name: str = "generator.yaml") -> Path:
        path = workdir / name
        path.write_text(
            "apiVersion: goabout.com/v1beta1\n"
            "kind: SopsSecret\n"
            "metadata:\n"
            "  name: my-secret\n" + body,
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_sopssecret_logger():
    yield
    logger = logging.getLogger("SopsSecret")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
