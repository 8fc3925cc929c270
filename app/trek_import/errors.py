"""Exceptions levées par la pipeline d'import des treks."""
from __future__ import annotations

from typing import Any, Optional


class TrekImportError(Exception):
    """Erreur de base de la pipeline d'import."""


class InvalidPayloadError(TrekImportError):
    """Le payload d'import n'est pas un objet JSON."""


class ReconciliationError(TrekImportError):
    """Une sous-structure du trek ne correspond à aucune forme connue."""


class PayloadLoadError(TrekImportError):
    """Fichier d'import illisible, trop gros ou mal formé."""


class TrekNormalizationError(TrekImportError):
    """Échec de normalisation d'un trek : interrompt tout le batch."""

    def __init__(
        self,
        index: int,
        slug: Optional[str],
        title: Optional[str],
        cause: BaseException,
    ) -> None:
        self.index = index
        self.slug = slug
        self.title = title
        self.cause = cause
        label = title or slug or "sans identifiant"
        super().__init__(f"Trek {index} ({label}): {cause}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "slug": self.slug,
            "title": self.title,
            "error": str(self.cause),
        }
