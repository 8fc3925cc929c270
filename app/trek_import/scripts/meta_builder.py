"""Construction et réparation du bloc ``meta`` de l'enveloppe d'import."""
from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple, get_args

from pydantic import ValidationError

from app.trek_import.models import ImportMeta, ImportMode

logger = logging.getLogger(__name__)

IMPORT_MODES: Tuple[str, ...] = get_args(ImportMode)

SOURCE_TYPES: Tuple[str, ...] = (
    "manual_upload",
    "api",
    "migration",
    "backup",
    "automated",
)

ENVIRONMENTS: Tuple[str, ...] = (
    "production",
    "staging",
    "development",
    "test",
)

MODE_DESCRIPTIONS = {
    "replace_nested": "Replace existing nested data (itinerary, highlights, etc.)",
    "merge": "Merge with existing data (combine both)",
    "append": "Append new data only (skip existing)",
}

# Sous-objets fusionnés clé par clé avec les valeurs par défaut
META_SECTIONS = ("validation", "options", "source", "processing")


def utc_timestamp() -> str:
    """Horodatage ISO 8601 UTC suffixé par ``Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_meta() -> Dict[str, Any]:
    """Bloc meta par défaut, entièrement renseigné."""
    meta = ImportMeta(generated_at=utc_timestamp())
    return meta.model_dump()


def merge_meta(caller_meta: Any) -> Dict[str, Any]:
    """
    Fusionne le meta fourni par l'appelant sur le meta par défaut.

    Les valeurs de l'appelant gagnent champ par champ, y compris dans les
    sous-objets ``validation``/``options``/``source``/``processing``.
    ``counts`` n'est jamais repris : il est recalculé par la pipeline.
    """
    merged = default_meta()

    if caller_meta is None:
        return merged
    if not isinstance(caller_meta, Mapping):
        logger.warning(f"⚠️ meta ignoré (objet attendu, reçu {type(caller_meta).__name__})")
        return merged

    for key, value in caller_meta.items():
        if key == "counts":
            continue
        if key in META_SECTIONS:
            if isinstance(value, Mapping):
                merged[key] = {**merged[key], **deepcopy(dict(value))}
            elif value is not None:
                logger.warning(f"⚠️ meta.{key} ignoré (objet attendu)")
            continue
        if value is None and key in merged:
            continue
        merged[key] = deepcopy(value)

    return merged


def create_complete_meta(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Crée un meta complet, en appliquant éventuellement des surcharges."""
    return merge_meta(overrides or {})


def validate_meta(meta: Any) -> Tuple[bool, Optional[str]]:
    """Valide la structure du meta (mode connu, types des sous-objets)."""

    if not isinstance(meta, Mapping):
        return False, "Meta must be an object"

    if not meta.get("mode"):
        return False, "Meta missing required fields: mode"

    if not is_valid_mode(meta["mode"]):
        return False, f'Invalid mode: "{meta["mode"]}". Must be one of: {", ".join(IMPORT_MODES)}'

    try:
        ImportMeta.model_validate(dict(meta))
    except ValidationError as exc:
        return False, str(exc)

    return True, None


def repair_meta(meta: Any) -> Dict[str, Any]:
    """Répare un meta incomplet ou incohérent en complétant avec les défauts."""
    repaired = merge_meta(meta)
    defaults = default_meta()

    for key in ("schema_version", "format", "generated_by", "generated_at", "generator_version"):
        if not repaired.get(key):
            repaired[key] = defaults[key]

    if not is_valid_mode(repaired.get("mode")):
        logger.info(f"🔧 mode '{repaired.get('mode')}' remplacé par '{defaults['mode']}'")
        repaired["mode"] = defaults["mode"]

    return repaired


def is_valid_mode(mode: Any) -> bool:
    return mode in IMPORT_MODES


def is_valid_source_type(source_type: Any) -> bool:
    return source_type in SOURCE_TYPES


def is_valid_environment(environment: Any) -> bool:
    return environment in ENVIRONMENTS


def get_mode_description(mode: str) -> str:
    """Description lisible d'un mode d'import."""
    return MODE_DESCRIPTIONS.get(mode, "Unknown mode")
