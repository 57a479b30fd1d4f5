"""SOPS integration for SopsSecret.

Responsabilités:
- Déchiffrer le contenu des sources avec la CLI `sops`
- Détecter si un contenu ressemble à un fichier chiffré SOPS
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from .config import Settings
from .errors import SopsError
from .logging_utils import get_logger

logger = get_logger(__name__)


class Decryptor(Protocol):
    """Anything able to turn encrypted bytes of a given format into plaintext."""

    def decrypt(self, content: bytes, fmt: str) -> bytes: ...


class SopsManager:
    """Déchiffrement via la CLI `sops`.

    Le contenu chiffré est passé sur stdin, le texte clair est lu sur
    stdout; rien n'est écrit sur disque.
    """

    def __init__(self, executable: str = "sops", age_key_file: Optional[Path] = None) -> None:
        self.executable = executable
        self.age_key_file = age_key_file

    @classmethod
    def from_settings(cls, settings: Settings) -> "SopsManager":
        return cls(executable=settings.sops_executable, age_key_file=settings.sops_age_key_file)

    def _env(self) -> dict[str, str]:
        env = os.environ.copy()
        if self.age_key_file is not None:
            env["SOPS_AGE_KEY_FILE"] = str(self.age_key_file)
        return env

    def decrypt(self, content: bytes, fmt: str) -> bytes:
        """Déchiffre ``content`` (format ``fmt``) et retourne le texte clair.

        Lève SopsError si sops est introuvable ou retourne un code non nul.
        """

        cmd = [
            self.executable,
            "--decrypt",
            "--input-type",
            fmt,
            "--output-type",
            fmt,
            "/dev/stdin",
        ]
        logger.debug("Running sops", extra={"format": fmt, "executable": self.executable})
        try:
            proc = subprocess.run(cmd, input=content, capture_output=True, env=self._env(), check=False)
        except OSError as exc:
            raise SopsError(f"cannot run {self.executable}: {exc}") from exc

        if proc.returncode != 0:
            raise SopsError(proc.stderr.decode("utf-8", errors="replace").strip())
        return proc.stdout

    @staticmethod
    def is_sops_document(content: bytes) -> bool:
        """Détecte si un contenu est chiffré SOPS.

        Heuristique simple: présence du bloc `sops` en YAML/JSON ou des
        clés `sops_*` en dotenv/binaire.
        """

        return b"sops:" in content or b'"sops"' in content or b"sops_version" in content
