"""Chargement et pré-validation d'un fichier d'import (JSON ou YAML)."""
from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from app.config import settings
from app.trek_import.errors import PayloadLoadError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}

BOM = "\ufeff"
_PREVIEW_RADIUS = 20


def _json_error_message(text: str, exc: json.JSONDecodeError) -> str:
    start = max(0, exc.pos - _PREVIEW_RADIUS)
    preview = text[start:exc.pos + _PREVIEW_RADIUS]
    return f'Syntax error near: "{preview}" ({exc.msg}, line {exc.lineno} column {exc.colno})'


def parse_payload_text(text: Any, fmt: Optional[str] = None) -> Any:
    """
    Parse le contenu texte d'un import.

    Args:
        text: Contenu brut (str ou bytes UTF-8)
        fmt: "json", "yaml" ou None (détection : JSON si le texte commence par { ou [)

    Raises:
        PayloadLoadError: contenu vide ou syntaxe invalide
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PayloadLoadError(f"File is not valid UTF-8: {exc}") from exc

    clean_text = text.lstrip(BOM)
    if not clean_text.strip():
        raise PayloadLoadError("File is empty or contains only whitespace")

    if fmt is None:
        fmt = "json" if clean_text.lstrip()[:1] in ("{", "[") else "yaml"

    if fmt == "json":
        try:
            return json.loads(clean_text)
        except json.JSONDecodeError as exc:
            raise PayloadLoadError(_json_error_message(clean_text, exc)) from exc

    if fmt == "yaml":
        try:
            return yaml.safe_load(clean_text)
        except yaml.YAMLError as exc:
            raise PayloadLoadError(f"YAML syntax error: {exc}") from exc

    raise PayloadLoadError(f"Unsupported format: {fmt}")


def load_payload_file(path: Path, max_size_bytes: Optional[int] = None) -> Any:
    """
    Lit un fichier d'import après contrôle de taille et d'extension.

    Raises:
        PayloadLoadError: fichier absent, vide, trop gros, extension ou syntaxe invalide
    """
    if not path.exists():
        raise PayloadLoadError(f"Fichier introuvable: {path}")

    extension = path.suffix.lower()
    fmt = SUPPORTED_EXTENSIONS.get(extension)
    if fmt is None:
        expected = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        raise PayloadLoadError(
            f"Invalid file type. Expected one of {expected}, got {extension or 'no extension'}"
        )

    size = path.stat().st_size
    max_size = max_size_bytes if max_size_bytes is not None else settings.max_file_size_bytes
    if size == 0:
        raise PayloadLoadError("File is empty")
    if size > max_size:
        raise PayloadLoadError(
            f"File too large ({size / (1024 * 1024):.1f}MB). "
            f"Maximum size is {max_size / (1024 * 1024):.1f}MB"
        )

    data = parse_payload_text(path.read_bytes(), fmt)
    logger.info(f"📥 Fichier chargé: {path} ({size} octets, {fmt})")
    return data


def validate_import_structure(
    data: Any,
    max_treks: Optional[int] = None,
) -> Tuple[bool, Optional[str]]:
    """Contrôles bloquants d'un upload avant normalisation."""

    if not isinstance(data, Mapping):
        return False, "Invalid data: Expected JSON object"

    treks = data.get("treks")
    if treks is None:
        return False, 'Missing required field: "treks"'
    if not isinstance(treks, list):
        return False, '"treks" must be an array'
    if not treks:
        return False, '"treks" array is empty'

    limit = max_treks if max_treks is not None else settings.max_treks_per_upload
    if len(treks) > limit:
        return False, f"Too many treks ({len(treks)}). Maximum per upload is {limit}"

    slugs = [
        trek["slug"]
        for trek in treks
        if isinstance(trek, Mapping) and isinstance(trek.get("slug"), str) and trek["slug"]
    ]
    duplicates = sorted(slug for slug, count in Counter(slugs).items() if count > 1)
    if duplicates:
        return False, f"Duplicate slugs found: {', '.join(duplicates)}"

    if data.get("meta") is None:
        logger.warning('⚠️ Missing "meta" field - Will auto-generate during normalization')

    logger.info("✅ Structure validation passed")
    return True, None


def summarize_structure(data: Mapping[str, Any]) -> Dict[str, int]:
    """Compte rapide avant normalisation (affiché par la CLI)."""
    regions = data.get("regions")
    treks = data.get("treks")
    return {
        "regions": len(regions) if isinstance(regions, list) else 0,
        "treks": len(treks) if isinstance(treks, list) else 0,
    }
