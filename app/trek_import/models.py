"""Modèles Pydantic de l'enveloppe d'import et des rapports de validation.

Les treks et régions restent des dictionnaires JSON : seuls le bloc ``meta``,
les statistiques et les rapports de validation sont typés.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.config import settings


ImportMode = Literal["replace_nested", "merge", "append"]


class MetaValidation(BaseModel):
    """Règles de validation transmises avec l'import."""

    model_config = ConfigDict(extra="allow")

    strict_mode: bool = False
    allow_partial_import: bool = True
    skip_missing_images: bool = True
    validate_slugs: bool = True
    required_fields: List[str] = Field(
        default_factory=lambda: ["slug", "title", "region_slug"],
    )


class MetaOptions(BaseModel):
    """Politique d'import côté backend."""

    model_config = ConfigDict(extra="allow")

    overwrite_existing: bool = True
    create_missing_regions: bool = False
    preserve_reviews: bool = True
    preserve_bookings: bool = True
    update_timestamps: bool = True


class MetaSource(BaseModel):
    """Provenance du fichier importé."""

    model_config = ConfigDict(extra="allow")

    type: str = "manual_upload"
    origin: str = "trek_admin_panel"
    environment: str = Field(default_factory=lambda: settings.environment)
    user: str = "admin"
    notes: str = ""


class MetaProcessing(BaseModel):
    """Consignes de traitement par lots."""

    model_config = ConfigDict(extra="allow")

    batch_size: int = Field(default=10, ge=1)
    timeout_seconds: int = Field(default=300, ge=0)
    retry_failed: bool = True
    max_retries: int = Field(default=3, ge=0)


class ImportStatistics(BaseModel):
    """Compteurs recalculés à chaque normalisation."""

    regions: int = Field(default=0, ge=0)
    treks: int = Field(default=0, ge=0)
    total_itinerary_days: int = Field(default=0, ge=0)
    total_highlights: int = Field(default=0, ge=0)
    total_faqs: int = Field(default=0, ge=0)
    total_gallery_images: int = Field(default=0, ge=0)
    total_departures: int = Field(default=0, ge=0)
    days_with_gps: int = Field(default=0, ge=0)


class ImportMeta(BaseModel):
    """Bloc ``meta`` complet d'une enveloppe d'import."""

    model_config = ConfigDict(extra="allow")

    schema_version: str = Field(default_factory=lambda: settings.meta_schema_version)
    format: str = Field(default_factory=lambda: settings.meta_format)
    mode: str = "replace_nested"
    generated_by: str = Field(default_factory=lambda: settings.meta_generated_by)
    generated_at: Optional[str] = None
    generator_version: str = Field(default_factory=lambda: settings.meta_generator_version)
    counts: ImportStatistics = Field(default_factory=ImportStatistics)
    validation: MetaValidation = Field(default_factory=MetaValidation)
    options: MetaOptions = Field(default_factory=MetaOptions)
    source: MetaSource = Field(default_factory=MetaSource)
    processing: MetaProcessing = Field(default_factory=MetaProcessing)


class ValidationReport(BaseModel):
    """Rapport de validation d'un trek normalisé (canal secondaire)."""

    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def valid(self) -> bool:
        return not self.errors
