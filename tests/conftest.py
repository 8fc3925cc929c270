"""Configuration de tests: variables d'environnement minimales et fixtures partagées."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from app.trek_import.observability import CollectingSink  # noqa: E402


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def legacy_trek() -> dict:
    """Trek dans l'ancienne forme (clés legacy partout)."""
    return {
        "slug": "annapurna-circuit",
        "title": "Annapurna Circuit",
        "region_slug": "annapurna",
        "duration": "16 Days",
        "trip_grade": "Challenging",
        "highlights": [{"title": "Thorong La"}, {"title": "Muktinath"}],
        "hero": {
            "title": "Annapurna Circuit",
            "subtitle": "Around the massif",
            "cta_text": "Reserve",
        },
        "actions": {"pdf_url": "/docs/annapurna.pdf", "map_image": "/maps/annapurna.png"},
        "cost": {"inclusions": ["Permits"], "exclusions": ["Flights"]},
        "cost_dates": {
            "intro_text": "Fixed departures",
            "departures_by_month": [
                {"month": "March", "departures": [{"start": "2026-03-01"}, {"start": "2026-03-15"}]},
                {"month": "April", "departures": [{"start": "2026-04-01"}]},
            ],
            "groupPrices": [{"size": "2-4", "price": 1200}],
            "highlights": ["Best season"],
        },
        "faq_categories": [
            {
                "title": "Permits",
                "faqs": [
                    {"question": "Do I need a permit?", "answer": "Yes", "order": 0},
                    {"question": "Where?", "answer": "Kathmandu"},
                ],
            },
        ],
        "gallery": [{"image_path": "/g/1.jpg"}, {"image_path": "/g/2.jpg"}],
        "additional_info": [
            {"heading": "Insurance", "articles": "Mandatory", "order": 0},
            {"heading": "Gear", "articles": {"articles": ["Boots", "Poles"]}},
        ],
        "similar": [{"slug": "everest-base-camp-trek"}],
        "overview": {
            "sections": [
                {"heading": "Overview", "articles": {"details": {"days": 16}}},
            ],
        },
        "itinerary_days": [
            {"day": 1, "title": "Kathmandu", "latitude": "27.7172", "longitude": "85.3240"},
            {"day": 2, "title": "Besisahar", "latitude": 28.2306, "longitude": 84.3786},
            {"day": 3, "title": "Nowhere", "latitude": 999, "longitude": 84.1},
        ],
    }


@pytest.fixture
def canonical_trek() -> dict:
    """Trek déjà dans la forme canonique minimale."""
    return {
        "slug": "everest-base-camp-trek",
        "title": "Everest Base Camp Trek",
        "region_slug": "everest",
        "hero_section": {"title": "EBC", "cta_label": "Book Now"},
        "overview": {"sections": [{"heading": "Overview", "articles": ["Classic"], "order": 1, "bullets": []}]},
        "itinerary_days": [
            {"day": 1, "title": "Lukla", "latitude": 27.6857, "longitude": 86.7312},
        ],
    }
