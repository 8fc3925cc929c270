"""Règles de réconciliation par section d'un trek.

Chaque règle est une fonction pure ``(forme legacy | forme canonique) ->
forme canonique`` : elle construit un nouvel objet complet avec les valeurs
par défaut documentées, sans jamais modifier l'entrée. Une structure
imbriquée impossible à reconnaître lève ``ReconciliationError``.
"""
from __future__ import annotations

import json
import numbers
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.trek_import.errors import ReconciliationError

DEFAULT_CTA_LABEL = "Book This Trek"
DEFAULT_COST_TITLE = "Cost Includes / Excludes"
DEFAULT_FAQ_ICON = "general"

# Clé canonique -> clé legacy historique
LEGACY_KEYS: Dict[str, str] = {
    "hero_section": "hero",
    "action": "actions",
    "cost_and_date_section": "cost_dates",
    "gallery_images": "gallery",
    "additional_info_sections": "additional_info",
    "similar_treks": "similar",
}

HERO_TEXT_FIELDS = (
    "title",
    "subtitle",
    "tagline",
    "image_path",
    "season",
    "duration",
    "difficulty",
    "location",
)


def pick_source(trek: Mapping[str, Any], canonical_key: str) -> Tuple[Any, Optional[str]]:
    """
    Choisit la source d'une section : clé canonique d'abord, sinon clé legacy.

    Returns:
        (valeur, clé d'origine) ou (None, None) si aucune des deux n'est présente
    """
    value = trek.get(canonical_key)
    if value is not None:
        return value, canonical_key

    legacy_key = LEGACY_KEYS.get(canonical_key)
    if legacy_key is not None:
        legacy_value = trek.get(legacy_key)
        if legacy_value is not None:
            return legacy_value, legacy_key

    return None, None


def _first(source: Mapping[str, Any], *keys: str, default: Any) -> Any:
    """Première valeur non vide parmi ``keys`` (les chaînes/listes vides sont ignorées)."""
    for key in keys:
        value = source.get(key)
        if value:
            return deepcopy(value)
    return default


def _require_mapping(value: Any, section: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ReconciliationError(
            f"{section}: objet attendu, reçu {type(value).__name__}"
        )
    return value


def _require_list(value: Any, section: str) -> Sequence[Any]:
    if not isinstance(value, (list, tuple)):
        raise ReconciliationError(
            f"{section}: liste attendue, reçu {type(value).__name__}"
        )
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def reconcile_hero(hero: Any) -> Dict[str, Any]:
    """``hero`` / ``hero_section`` -> ``hero_section`` canonique."""
    hero = _require_mapping(hero, "hero_section")

    normalized = {field: hero.get(field) or "" for field in HERO_TEXT_FIELDS}
    normalized["cta_label"] = _first(hero, "cta_text", "cta_label", default=DEFAULT_CTA_LABEL)
    normalized["cta_link"] = hero.get("cta_link") or ""
    return normalized


def reconcile_action(action: Any) -> Dict[str, Any]:
    """``actions`` / ``action`` -> ``action`` canonique."""
    action = _require_mapping(action, "action")
    return {
        "pdf_path": _first(action, "pdf_path", "pdf_url", default=""),
        "map_image_path": _first(action, "map_image_path", "map_image", default=""),
    }


def reconcile_cost(cost: Any) -> Dict[str, Any]:
    cost = _require_mapping(cost, "cost")
    return {
        "title": cost.get("title") or DEFAULT_COST_TITLE,
        "cost_inclusions": _first(cost, "cost_inclusions", "inclusions", default=[]),
        "cost_exclusions": _first(cost, "cost_exclusions", "exclusions", default=[]),
    }


def flatten_departures(cost_dates: Mapping[str, Any]) -> List[Any]:
    """Aplati ``departures_by_month[*].departures`` ; sinon ``departures`` tel quel."""
    by_month = cost_dates.get("departures_by_month")
    if not by_month:
        return deepcopy(cost_dates.get("departures") or [])

    departures: List[Any] = []
    for month in _require_list(by_month, "cost_dates.departures_by_month"):
        if not isinstance(month, Mapping):
            continue
        month_departures = month.get("departures")
        if isinstance(month_departures, (list, tuple)):
            departures.extend(deepcopy(list(month_departures)))
    return departures


def reconcile_cost_dates(cost_dates: Any) -> Dict[str, Any]:
    """
    ``cost_dates`` legacy -> section canonique et ses trois listes sœurs.

    Returns:
        Dict avec ``cost_and_date_section``, ``departures``, ``group_prices``
        et ``date_highlights``
    """
    cost_dates = _require_mapping(cost_dates, "cost_dates")
    return {
        "cost_and_date_section": {"intro_text": cost_dates.get("intro_text") or ""},
        "departures": flatten_departures(cost_dates),
        "group_prices": _first(cost_dates, "groupPrices", "group_prices", default=[]),
        "date_highlights": _first(cost_dates, "highlights", "date_highlights", default=[]),
    }


def reconcile_cost_and_date_section(section: Any, trek: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Forme canonique déjà présente : même mise en forme que ``cost_dates``.

    Une liste sœur absente de la section est reprise du trek (forme déjà
    normalisée), ce qui rend la normalisation idempotente.
    """
    result = reconcile_cost_dates(_require_mapping(section, "cost_and_date_section"))
    for key in ("departures", "group_prices", "date_highlights"):
        if not result[key]:
            result[key] = deepcopy(trek.get(key) or [])
    return result


def reconcile_faq_question(question: Any, position: int) -> Dict[str, Any]:
    question = _require_mapping(question, "faq question")
    order = question.get("order")
    return {
        "question": question.get("question") or "",
        "answer": question.get("answer") or "",
        # 0 explicite conservé : seule l'absence retombe sur la position
        "order": order if _is_number(order) else position,
    }


def reconcile_faq_category(category: Any) -> Dict[str, Any]:
    category = _require_mapping(category, "faq category")
    questions = _first(category, "faqs", "questions", default=[])
    questions = _require_list(questions, "faq category questions")
    return {
        "title": category.get("title") or "",
        "icon": category.get("icon") or DEFAULT_FAQ_ICON,
        "order": category.get("order") or 1,
        "questions": [
            reconcile_faq_question(question, position)
            for position, question in enumerate(questions, start=1)
        ],
    }


def reconcile_faq_categories(categories: Any) -> List[Dict[str, Any]]:
    categories = _require_list(categories, "faq_categories")
    return [reconcile_faq_category(category) for category in categories]


def sniff_articles(articles: Any) -> List[Any]:
    """
    Ramène ``articles`` à une liste selon sa forme :
    liste -> telle quelle ; objet ``articles`` -> contenu ; objet ``details``
    -> détails sérialisés en JSON ; chaîne -> liste à un élément ; sinon [].
    """
    if isinstance(articles, (list, tuple)):
        return deepcopy(list(articles))

    if isinstance(articles, Mapping):
        if articles.get("articles") is not None:
            inner = articles["articles"]
            if isinstance(inner, (list, tuple)):
                return deepcopy(list(inner))
            return [deepcopy(inner)]
        if articles.get("details") is not None:
            return [json.dumps(articles["details"], ensure_ascii=False, separators=(",", ":"))]
        return []

    if isinstance(articles, str) and articles:
        return [articles]

    return []


def normalize_section(section: Any) -> Dict[str, Any]:
    """Section d'overview ou d'informations complémentaires."""
    section = _require_mapping(section, "section")
    order = section.get("order")
    return {
        "heading": section.get("heading") or "",
        "articles": sniff_articles(section.get("articles")),
        "order": 1 if order is None else order,
        "bullets": deepcopy(section.get("bullets") or []),
    }


def reconcile_additional_info(sections: Any) -> List[Dict[str, Any]]:
    sections = _require_list(sections, "additional_info_sections")
    return [normalize_section(section) for section in sections]


def reconcile_overview(overview: Any) -> Any:
    """
    ``overview`` -> ``{"sections": [...]}``.

    Accepte un objet avec ``sections``, directement une liste de sections ou
    un simple texte. Un objet sans ``sections`` est conservé tel quel.
    """
    if isinstance(overview, (list, tuple)):
        return {"sections": [normalize_section(section) for section in overview]}

    if isinstance(overview, str):
        return {"sections": [normalize_section({"articles": overview})]}

    overview = _require_mapping(overview, "overview")
    if overview.get("sections") is None:
        return deepcopy(dict(overview))

    sections = _require_list(overview["sections"], "overview.sections")
    normalized = deepcopy({key: value for key, value in overview.items() if key != "sections"})
    normalized["sections"] = [normalize_section(section) for section in sections]
    return normalized


def reconcile_passthrough(value: Any) -> Any:
    """Galerie et treks similaires : seule la clé change."""
    return deepcopy(value)
