"""Statistics Calculator - comptages déterministes d'une enveloppe normalisée.

Toujours recalculé sur l'ensemble du payload : aucune mise à jour
incrémentale n'existe.
"""

from typing import Any, List, Mapping
import logging

from app.trek_import.models import ImportStatistics
from app.trek_import.scripts.itinerary_normalizer import count_days_with_gps

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def calculate_statistics(payload: Mapping[str, Any]) -> ImportStatistics:
    """
    Calculate import statistics from normalized regions and treks.

    Args:
        payload: Normalized envelope (or any mapping with ``regions``/``treks``)

    Returns:
        ImportStatistics with every counter recomputed from scratch
    """
    regions = _as_list(payload.get("regions"))
    treks = _as_list(payload.get("treks"))

    stats = ImportStatistics(regions=len(regions), treks=len(treks))

    for trek in treks:
        if not isinstance(trek, Mapping):
            continue

        days = _as_list(trek.get("itinerary_days"))
        stats.total_itinerary_days += len(days)
        stats.days_with_gps += count_days_with_gps(days)

        stats.total_highlights += len(_as_list(trek.get("highlights")))

        for category in _as_list(trek.get("faq_categories")):
            if isinstance(category, Mapping):
                stats.total_faqs += len(_as_list(category.get("questions")))

        stats.total_gallery_images += len(_as_list(trek.get("gallery_images")))
        stats.total_departures += len(_as_list(trek.get("departures")))

    logger.info(
        f"📊 Statistics: {stats.treks} treks, {stats.total_itinerary_days} days "
        f"({stats.days_with_gps} with GPS), {stats.total_faqs} FAQs"
    )

    return stats
