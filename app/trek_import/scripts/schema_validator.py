"""Validation des treks normalisés et de l'enveloppe d'import.

Deux niveaux pour un trek : les erreurs (slug, title) invalident
l'enregistrement, les avertissements (sections manquantes, GPS absent) sont
purement informatifs. Aucun rejet n'est décidé ici : la politique appartient
à l'appelant.
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import jsonschema

from app.trek_import.models import MetaValidation, ValidationReport
from app.trek_import.scripts.itinerary_normalizer import count_days_with_gps

HARD_REQUIRED_FIELDS = ("slug", "title")

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 120

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "config" / "import_schema.json"


class SchemaValidationError(Exception):
    """Erreur de validation JSON Schema."""


def _slug_problem(slug: Any) -> Optional[str]:
    if not isinstance(slug, str):
        return f"Invalid slug (string expected): {slug!r}"
    if not SLUG_MIN_LENGTH <= len(slug) <= SLUG_MAX_LENGTH:
        return f"Invalid slug length ({len(slug)}): {slug}"
    if not SLUG_PATTERN.match(slug):
        return f"Invalid slug (lowercase letters, numbers and hyphens only): {slug}"
    return None


def validate_trek(trek: Mapping[str, Any], rules: Optional[MetaValidation] = None) -> ValidationReport:
    """
    Valide un trek normalisé.

    Args:
        trek: Trek issu de ``normalize_trek``
        rules: Règles ``meta.validation`` optionnelles (champs requis
            supplémentaires, contrôle des slugs)

    Returns:
        ValidationReport (``valid`` vrai ssi aucune erreur)
    """
    report = ValidationReport()

    for field in HARD_REQUIRED_FIELDS:
        if not trek.get(field):
            report.errors.append(f"Missing required field: {field}")

    if not trek.get("hero_section"):
        report.warnings.append("Missing hero_section")
    if not trek.get("overview"):
        report.warnings.append("Missing overview")

    days = trek.get("itinerary_days")
    if not isinstance(days, (list, tuple)) or not days:
        report.warnings.append("Missing itinerary_days")
    elif count_days_with_gps(days) == 0:
        report.warnings.append("No GPS coordinates found - interactive map will not work")

    if rules is not None:
        _apply_rules(trek, rules, report)

    return report


def _apply_rules(trek: Mapping[str, Any], rules: MetaValidation, report: ValidationReport) -> None:
    for field in rules.required_fields:
        if field in HARD_REQUIRED_FIELDS or trek.get(field):
            continue
        # seuls slug et title sont bloquants, même en strict_mode
        report.warnings.append(f"Missing required field: {field}")

    if rules.validate_slugs and trek.get("slug"):
        problem = _slug_problem(trek["slug"])
        if problem:
            report.warnings.append(problem)


def load_import_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Charge le schéma JSON (Draft-07) de l'enveloppe d'import."""
    schema_path = schema_path or DEFAULT_SCHEMA_PATH
    if not schema_path.exists():
        raise SchemaValidationError(f"Schéma introuvable: {schema_path}")
    with schema_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def validate_envelope_schema(
    envelope: Dict[str, Any],
    schema_path: Optional[Path] = None,
) -> Tuple[bool, Optional[str]]:
    """Valide l'enveloppe normalisée contre le schéma Draft-07."""

    try:
        schema = load_import_schema(schema_path)
    except SchemaValidationError as exc:
        return False, str(exc)

    try:
        jsonschema.validate(instance=envelope, schema=schema)
        return True, None
    except jsonschema.ValidationError as exc:
        return False, exc.message
