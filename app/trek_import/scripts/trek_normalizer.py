"""Normalisation complète d'un trek vers la forme canonique.

Applique les règles de ``field_reconciler`` dans un ordre fixe (hero →
actions → cost → cost-and-dates → FAQ → gallery → additional-info → similar
→ overview → itinerary) puis normalise chaque jour d'itinéraire.

Le trek canonique est reconstruit champ par champ : les clés legacy ne sont
jamais recopiées, et l'entrée n'est jamais modifiée. Appliquer la fonction
sur un trek déjà normalisé renvoie un trek identique.
"""
from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable, Dict, Mapping, Optional

from app.trek_import.errors import ReconciliationError
from app.trek_import.observability import DiagnosticSink, resolve_sink
from app.trek_import.scripts.field_reconciler import (
    LEGACY_KEYS,
    pick_source,
    reconcile_action,
    reconcile_additional_info,
    reconcile_cost,
    reconcile_cost_and_date_section,
    reconcile_cost_dates,
    reconcile_faq_categories,
    reconcile_hero,
    reconcile_overview,
    reconcile_passthrough,
)
from app.trek_import.scripts.itinerary_normalizer import count_days_with_gps, normalize_itinerary_day

LEGACY_KEY_NAMES = frozenset(LEGACY_KEYS.values())

# Sections dont la source peut être canonique ou legacy, dans l'ordre d'application
_KEYED_SECTIONS: tuple[tuple[str, Callable[[Any], Any]], ...] = (
    ("hero_section", reconcile_hero),
    ("action", reconcile_action),
)


def trek_label(trek: Any) -> str:
    """Identifiant lisible d'un trek pour les logs."""
    if isinstance(trek, Mapping):
        return str(trek.get("slug") or trek.get("title") or "?")
    return "?"


def _reconcile_keyed(
    trek: Mapping[str, Any],
    normalized: Dict[str, Any],
    canonical_key: str,
    rule: Callable[[Any], Any],
    sink: DiagnosticSink,
) -> None:
    source, origin = pick_source(trek, canonical_key)
    if origin is None:
        return
    if origin != canonical_key:
        sink.info(f"🔁 {origin} → {canonical_key}", trek=trek_label(trek))
    normalized[canonical_key] = rule(source)


def _reconcile_cost_and_dates(
    trek: Mapping[str, Any],
    normalized: Dict[str, Any],
    sink: DiagnosticSink,
) -> None:
    source, origin = pick_source(trek, "cost_and_date_section")
    if origin is None:
        return
    if origin == "cost_and_date_section":
        normalized.update(reconcile_cost_and_date_section(source, trek))
    else:
        sink.info("🔁 cost_dates → cost_and_date_section", trek=trek_label(trek))
        normalized.update(reconcile_cost_dates(source))


def _normalize_itinerary(
    trek: Mapping[str, Any],
    normalized: Dict[str, Any],
    sink: DiagnosticSink,
) -> None:
    days = trek.get("itinerary_days")
    if not isinstance(days, (list, tuple)):
        return

    normalized["itinerary_days"] = [normalize_itinerary_day(day, sink) for day in days]

    total = len(normalized["itinerary_days"])
    with_gps = count_days_with_gps(normalized["itinerary_days"])
    sink.info(f"📍 Normalized {total} itinerary days", trek=trek_label(trek))
    sink.info(f"🗺️  {with_gps} days have GPS coordinates", trek=trek_label(trek))

    if with_gps == 0:
        sink.warning("⚠️  No GPS coordinates found in itinerary - map will not work!", trek=trek_label(trek))
    elif with_gps < total:
        sink.warning(f"⚠️  Only {with_gps}/{total} days have GPS coordinates", trek=trek_label(trek))


def normalize_trek(trek: Any, sink: Optional[DiagnosticSink] = None) -> Dict[str, Any]:
    """
    Normalise un trek brut vers la forme canonique.

    Args:
        trek: Enregistrement brut (n'importe laquelle des formes historiques)
        sink: Canal de diagnostics (logging par défaut)

    Returns:
        Nouveau dict canonique, sans aucune clé legacy

    Raises:
        ReconciliationError: si le trek ou une de ses sections n'a pas de forme reconnue
    """
    sink = resolve_sink(sink)
    if not isinstance(trek, Mapping):
        raise ReconciliationError(f"trek: objet attendu, reçu {type(trek).__name__}")

    sink.info(f"📝 Normalizing trek schema: {trek_label(trek)}")

    # Champs scalaires et sections sans règle : recopiés tels quels
    normalized: Dict[str, Any] = {
        key: deepcopy(value) for key, value in trek.items() if key not in LEGACY_KEY_NAMES
    }

    for canonical_key, rule in _KEYED_SECTIONS:
        _reconcile_keyed(trek, normalized, canonical_key, rule, sink)

    if trek.get("cost") is not None:
        normalized["cost"] = reconcile_cost(trek["cost"])

    _reconcile_cost_and_dates(trek, normalized, sink)

    if trek.get("faq_categories") is not None:
        normalized["faq_categories"] = reconcile_faq_categories(trek["faq_categories"])

    _reconcile_keyed(trek, normalized, "gallery_images", reconcile_passthrough, sink)
    _reconcile_keyed(trek, normalized, "additional_info_sections", reconcile_additional_info, sink)
    _reconcile_keyed(trek, normalized, "similar_treks", reconcile_passthrough, sink)

    if trek.get("overview") is not None:
        normalized["overview"] = reconcile_overview(trek["overview"])

    _normalize_itinerary(trek, normalized, sink)

    sink.info("✅ Schema normalized successfully", trek=trek_label(trek))
    return normalized
