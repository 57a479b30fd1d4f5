"""Chargement du manifeste SopsSecret.

Responsabilités:
- Lire et parser le YAML d'entrée
- Valider apiVersion/kind et metadata.name
- Exposer un modèle typé (pydantic) au reste du pipeline
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import API_VERSION, KIND
from .errors import ParseError, ReadError, SchemaError
from .logging_utils import get_logger

logger = get_logger(__name__)


class ObjectMeta(BaseModel):
    """Metadata copiée telle quelle dans le Secret généré."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)


class SopsSecretManifest(BaseModel):
    """Manifeste ``goabout.com/v1beta1/SopsSecret``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    api_version: str = Field(default="", alias="apiVersion")
    kind: str = ""
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    env_sources: List[str] = Field(default_factory=list, alias="envs")
    file_sources: List[str] = Field(default_factory=list, alias="files")
    behavior: str = ""
    disable_name_suffix_hash: bool = Field(default=False, alias="disableNameSuffixHash")
    secret_type: str = Field(default="", alias="type")


def _none_to_defaults(raw: dict) -> dict:
    """``envs:`` sans valeur vaut une liste vide, comme un champ absent."""

    cleaned = {k: v for k, v in raw.items() if v is not None}
    metadata = cleaned.get("metadata")
    if isinstance(metadata, dict):
        cleaned["metadata"] = {k: v for k, v in metadata.items() if v is not None}
    return cleaned


def load_manifest(path: str | Path) -> SopsSecretManifest:
    """Lit et valide le manifeste ``path``.

    Lève ReadError, ParseError ou SchemaError.
    """

    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise ReadError(f"open {path}: {exc.strerror or exc}") from exc

    try:
        raw = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ParseError(str(exc)) from exc
    if not isinstance(raw, dict):
        raise ParseError(f"manifest {path} must contain a mapping, got {type(raw).__name__}")

    try:
        manifest = SopsSecretManifest.model_validate(_none_to_defaults(raw))
    except ValidationError as exc:
        raise ParseError(f"invalid manifest {path}: {exc}") from exc

    if manifest.api_version != API_VERSION or manifest.kind != KIND:
        raise SchemaError(f"input must be apiVersion {API_VERSION}, kind {KIND}")
    if not manifest.metadata.name:
        raise SchemaError("input must contain metadata.name value")

    logger.debug(
        "Loaded manifest",
        extra={
            "manifest": str(path),
            "secret": manifest.metadata.name,
            "env_sources": len(manifest.env_sources),
            "file_sources": len(manifest.file_sources),
        },
    )
    return manifest
