"""Scripts déterministes de la pipeline d'import (réconciliation, validation, statistiques)."""

from .field_reconciler import normalize_section, reconcile_faq_categories, sniff_articles
from .itinerary_normalizer import count_days_with_gps, has_gps, normalize_itinerary_day
from .trek_normalizer import normalize_trek
from .schema_validator import validate_envelope_schema, validate_trek
from .statistics_calculator import calculate_statistics
from .meta_builder import create_complete_meta, merge_meta, repair_meta, validate_meta
from .payload_loader import load_payload_file, parse_payload_text, validate_import_structure
from .import_template import build_import_template, write_import_template
