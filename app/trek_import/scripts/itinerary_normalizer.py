"""Normalisation d'un jour d'itinéraire, avec validation des coordonnées GPS."""
from __future__ import annotations

import math
import reprlib
from typing import Any, Dict, Iterable, Mapping, Optional

from app.trek_import.observability import DiagnosticSink, resolve_sink

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)

DAY_TEXT_FIELDS = (
    "title",
    "description",
    "accommodation",
    "altitude",
    "duration",
    "distance",
    "meals",
    "place_name",
)


def coerce_coordinate(value: Any, bounds: tuple[float, float]) -> Optional[float]:
    """
    Convertit une coordonnée en float borné, ou ``None``.

    Les chaînes numériques sont parsées ; booléens, NaN, infinis et valeurs
    hors de ``bounds`` donnent ``None``.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        return None

    if math.isnan(number):
        return None

    low, high = bounds
    if number < low or number > high:
        return None
    return number


def _preview(value: Any) -> str:
    try:
        return reprlib.repr(value)
    except ValueError:
        # entier au-delà de sys.get_int_max_str_digits()
        return f"<{type(value).__name__}>"


def _coerce_day_number(value: Any) -> int:
    if isinstance(value, bool) or not value:
        return 1
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 1


def normalize_itinerary_day(day: Any, sink: Optional[DiagnosticSink] = None) -> Dict[str, Any]:
    """
    Normalise un jour d'itinéraire.

    Fonction totale : aucune forme d'entrée ne lève d'exception. Une
    coordonnée invalide devient ``None`` et produit un diagnostic.
    """
    sink = resolve_sink(sink)
    if not isinstance(day, Mapping):
        sink.warning(f"⚠️ Jour d'itinéraire ignoré (objet attendu): {_preview(day)}")
        day = {}

    day_number = _coerce_day_number(day.get("day"))
    normalized: Dict[str, Any] = {"day": day_number}
    for field in DAY_TEXT_FIELDS:
        normalized[field] = day.get(field) or ""

    for field, bounds in (("latitude", LATITUDE_RANGE), ("longitude", LONGITUDE_RANGE)):
        raw = day.get(field)
        value = coerce_coordinate(raw, bounds)
        if raw is not None and value is None:
            sink.warning(
                f"Invalid {field} for day {day_number}: {_preview(raw)}",
                day=day_number,
                field=field,
                value=raw,
            )
        normalized[field] = value

    return normalized


def has_gps(day: Any) -> bool:
    """Vrai si le jour porte latitude ET longitude."""
    return (
        isinstance(day, Mapping)
        and day.get("latitude") is not None
        and day.get("longitude") is not None
    )


def count_days_with_gps(days: Iterable[Any]) -> int:
    return sum(1 for day in days if has_gps(day))
