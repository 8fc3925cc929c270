"""Normalisation et validation des payloads d'import du catalogue de treks."""

from .errors import (
    InvalidPayloadError,
    PayloadLoadError,
    ReconciliationError,
    TrekImportError,
    TrekNormalizationError,
)
from .pipeline import (
    ImportResult,
    TrekImportPipeline,
    build_envelope,
    run_import_from_payload,
)

__all__ = [
    "ImportResult",
    "InvalidPayloadError",
    "PayloadLoadError",
    "ReconciliationError",
    "TrekImportError",
    "TrekImportPipeline",
    "TrekNormalizationError",
    "build_envelope",
    "run_import_from_payload",
]
