"""Configuration centralisée de l'application."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration de l'application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environnement (reporté dans meta.source.environment)
    environment: str = "production"

    # Valeurs par défaut du bloc meta
    meta_schema_version: str = "2.0"
    meta_format: str = "trek_import"
    meta_generated_by: str = "admin_panel"
    meta_generator_version: str = "1.0.0"

    # Limites d'upload
    max_treks_per_upload: int = 50
    max_file_size_mb: int = 10

    # Observabilité
    metrics_output_dir: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def max_file_size_bytes(self) -> int:
        """Taille maximale d'un fichier d'import en octets."""
        return self.max_file_size_mb * 1024 * 1024


# Instance globale
settings = Settings()
