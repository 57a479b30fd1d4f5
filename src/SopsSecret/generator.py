"""Secret generation pipeline.

Responsabilités:
- Déchiffrer chaque source env puis chaque source file, dans l'ordre du manifeste
- Fusionner les paires dans un seul mapping (la dernière valeur gagne)
- Construire et sérialiser le Secret Kubernetes
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

import yaml

from .config import BEHAVIOR_ANNOTATION, NEEDS_HASH_ANNOTATION
from .decoders import decode_env, decode_file, encode_value
from .errors import ReadError, SopsSecretError
from .logging_utils import get_logger
from .manifest import SopsSecretManifest, load_manifest
from .sops_manager import Decryptor, SopsManager
from .sources import classify, resolve_file_source

logger = get_logger(__name__)


class SecretData:
    """Mapping ordonné ``key -> base64`` accumulé sur toutes les sources."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def merge(self, pairs: Mapping[str, str]) -> None:
        """Encode et insère ``pairs``; une clé existante est écrasée."""

        for key, value in pairs.items():
            self._data[key] = encode_value(value)

    def set_encoded(self, key: str, value: str) -> None:
        self._data[key] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._data)


def _read_source(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ReadError(f"open {path}: {exc.strerror or exc}") from exc


def _decrypt(decryptor: Decryptor, path: str, content: bytes, fmt: str) -> bytes:
    if not SopsManager.is_sops_document(content):
        logger.warning("Source does not look SOPS-encrypted", extra={"path": path, "format": fmt})
    return decryptor.decrypt(content, fmt)


def parse_env_source(source: str, data: SecretData, decryptor: Decryptor) -> None:
    fmt = classify(source)
    content = _read_source(source)
    decrypted = _decrypt(decryptor, source, content, fmt.value)
    pairs = decode_env(decrypted, fmt)
    data.merge(pairs)
    logger.debug("Parsed env source", extra={"path": source, "format": fmt.value, "keys": len(pairs)})


def parse_file_source(source: str, data: SecretData, decryptor: Decryptor) -> None:
    key, path = resolve_file_source(source)
    content = _read_source(path)
    fmt = classify(source)
    decrypted = _decrypt(decryptor, path, content, fmt.value)
    data.set_encoded(key, decode_file(decrypted))
    logger.debug("Parsed file source", extra={"path": path, "format": fmt.value, "key": key})


def parse_sources(manifest: SopsSecretManifest, decryptor: Decryptor) -> SecretData:
    """Env sources d'abord, puis file sources, chacune dans l'ordre listé."""

    data = SecretData()
    for source in manifest.env_sources:
        try:
            parse_env_source(source, data, decryptor)
        except SopsSecretError as exc:
            raise exc.add_context(f"env source {source}")
    for source in manifest.file_sources:
        try:
            parse_file_source(source, data, decryptor)
        except SopsSecretError as exc:
            raise exc.add_context(f"file source {source}")
    return data


def build_secret(manifest: SopsSecretManifest, data: SecretData | Mapping[str, str]) -> Dict[str, Any]:
    """Construit le document Secret; injecte les annotations kustomize."""

    annotations = manifest.metadata.annotations
    if not manifest.disable_name_suffix_hash:
        annotations[NEEDS_HASH_ANNOTATION] = "true"
    if manifest.behavior:
        annotations[BEHAVIOR_ANNOTATION] = manifest.behavior

    metadata: Dict[str, Any] = {"name": manifest.metadata.name}
    if manifest.metadata.namespace:
        metadata["namespace"] = manifest.metadata.namespace
    if manifest.metadata.labels:
        metadata["labels"] = dict(manifest.metadata.labels)
    if annotations:
        metadata["annotations"] = dict(annotations)

    secret: Dict[str, Any] = {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": metadata,
        "data": data.to_dict() if isinstance(data, SecretData) else dict(data),
    }
    if manifest.secret_type:
        secret["type"] = manifest.secret_type
    return secret


def render(secret: Mapping[str, Any]) -> str:
    return yaml.safe_dump(dict(secret), sort_keys=False, default_flow_style=False)


def generate_secret(path: str | Path, decryptor: Optional[Decryptor] = None) -> str:
    """Pipeline complet: manifeste -> Secret YAML.

    Sans ``decryptor`` explicite, utilise la CLI sops par défaut.
    """

    manifest = load_manifest(path)
    data = parse_sources(manifest, decryptor or SopsManager())
    secret = build_secret(manifest, data)
    logger.info(
        "Generated Secret",
        extra={"secret": manifest.metadata.name, "keys": len(data)},
    )
    return render(secret)
