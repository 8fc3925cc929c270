"""Modèle complet de fichier d'import, téléchargeable depuis la CLI."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from app.trek_import.scripts.meta_builder import create_complete_meta


def build_import_template() -> Dict[str, Any]:
    """Enveloppe d'exemple au format canonique (une région, un trek)."""
    return {
        "meta": create_complete_meta(),
        "regions": [
            {
                "name": "Everest",
                "slug": "everest",
                "short_label": "EBC, Gokyo, Three Passes",
                "order": 1,
                "marker_x": 50,
                "marker_y": 50,
                "cover_path": "",
            },
        ],
        "treks": [
            {
                "slug": "everest-base-camp-trek",
                "title": "Everest Base Camp Trek",
                "region_slug": "everest",
                "duration": "14 Days",
                "trip_grade": "Moderate",
                "start_point": "Lukla",
                "group_size": "1-12",
                "max_altitude": "5364m",
                "activity": "Trekking",
                "hero_section": {
                    "title": "Everest Base Camp Trek",
                    "subtitle": "Journey to the world's highest peak",
                    "tagline": "",
                    "image_path": "",
                    "season": "Spring & Autumn",
                    "duration": "14",
                    "difficulty": "Moderate",
                    "location": "Solukhumbu",
                    "cta_label": "Book Now",
                    "cta_link": "",
                },
                "overview": {
                    "sections": [
                        {
                            "heading": "Trek Overview",
                            "articles": ["Experience the legendary trek..."],
                            "order": 1,
                            "bullets": [],
                        },
                    ],
                },
                "itinerary_days": [
                    {
                        "day": 1,
                        "title": "Arrival in Kathmandu",
                        "description": "Welcome to Nepal",
                        "accommodation": "Hotel",
                        "altitude": "1400m",
                        "duration": "",
                        "distance": "",
                        "meals": "Dinner",
                        "place_name": "Kathmandu",
                        "latitude": 27.7172,
                        "longitude": 85.324,
                    },
                ],
                "highlights": [],
                "action": {"pdf_path": "", "map_image_path": ""},
                "cost": {
                    "title": "Cost Includes / Excludes",
                    "cost_inclusions": [],
                    "cost_exclusions": [],
                },
                "cost_and_date_section": {"intro_text": ""},
                "departures": [],
                "group_prices": [],
                "date_highlights": [],
                "faq_categories": [],
                "gallery_images": [],
                "elevation_chart": {
                    "title": "Elevation Profile",
                    "subtitle": "",
                    "background_image_path": "",
                    "points": [],
                },
                "booking_card": {
                    "base_price": 1299.0,
                    "original_price": 1499.0,
                    "pricing_mode": "base_only",
                    "badge_label": "Popular",
                    "secure_payment": True,
                    "no_hidden_fees": True,
                    "free_cancellation": True,
                    "support_24_7": True,
                    "trusted_reviews": True,
                    "group_prices": [],
                },
                "additional_info_sections": [],
                "similar_treks": [],
            },
        ],
    }


def write_import_template(path: Path) -> Path:
    """Écrit le modèle JSON sur disque et retourne le chemin."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(build_import_template(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path
