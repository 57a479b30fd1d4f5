"""Configuration du générateur SopsSecret.

Responsabilités:
- Charger les variables d'environnement via pydantic-settings
- Exposer les constantes fixes du manifeste (apiVersion, kind, annotations)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_VERSION: Final = "goabout.com/v1beta1"
KIND: Final = "SopsSecret"

NEEDS_HASH_ANNOTATION: Final = "kustomize.config.k8s.io/needs-hash"
BEHAVIOR_ANNOTATION: Final = "kustomize.config.k8s.io/behavior"


class Settings(BaseSettings):
    """Configuration globale du process.

    Chargée depuis l'environnement (préfixe ``SOPSSECRET_``).
    """

    model_config = SettingsConfigDict(env_prefix="SOPSSECRET_", env_file=None, extra="ignore")

    log_level: str = Field(default="WARNING", description="Niveau de log (DEBUG, INFO, ...)")

    # SOPS / age
    sops_executable: str = Field(default="sops", description="Binaire sops utilisé pour déchiffrer.")
    sops_age_key_file: Path | None = Field(
        default=None, description="Chemin vers la clé age pour SOPS (SOPS_AGE_KEY_FILE)."
    )

    @field_validator("sops_age_key_file", mode="before")
    @classmethod
    def _ensure_path(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return Path(value)
