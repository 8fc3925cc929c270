"""Tests de la validation des treks normalisés et du schéma de l'enveloppe."""

import json

from app.trek_import.models import MetaValidation
from app.trek_import.observability import NullSink
from app.trek_import.pipeline import build_envelope
from app.trek_import.scripts.schema_validator import validate_envelope_schema, validate_trek
from app.trek_import.scripts.trek_normalizer import normalize_trek


class TestValidationTiering:
    """Erreurs bloquantes vs avertissements."""

    def test_missing_title_is_an_error(self):
        report = validate_trek({"slug": "abc"})
        assert report.valid is False
        assert "Missing required field: title" in report.errors

    def test_missing_slug_is_an_error(self):
        report = validate_trek({"title": "Abc"})
        assert report.errors == ["Missing required field: slug"]

    def test_missing_overview_is_only_a_warning(self, canonical_trek):
        trek = normalize_trek(canonical_trek, NullSink())
        del trek["overview"]
        report = validate_trek(trek)
        assert report.valid is True
        assert "Missing overview" in report.warnings

    def test_soft_missing_sections(self):
        report = validate_trek({"slug": "abc", "title": "Abc"})
        assert report.valid
        assert report.warnings == ["Missing hero_section", "Missing overview", "Missing itinerary_days"]

    def test_empty_itinerary(self):
        report = validate_trek({"slug": "abc", "title": "Abc", "itinerary_days": []})
        assert "Missing itinerary_days" in report.warnings

    def test_itinerary_without_gps(self):
        trek = {
            "slug": "abc",
            "title": "Abc",
            "itinerary_days": [{"day": 1, "latitude": 27.0, "longitude": None}],
        }
        report = validate_trek(trek)
        assert "No GPS coordinates found - interactive map will not work" in report.warnings

    def test_complete_trek_has_no_findings(self, canonical_trek):
        report = validate_trek(normalize_trek(canonical_trek, NullSink()))
        assert report.valid
        assert report.warnings == []

    def test_report_dump_contains_valid(self):
        dumped = validate_trek({"slug": "abc"}).model_dump()
        assert dumped["valid"] is False
        assert set(dumped) == {"valid", "errors", "warnings"}


class TestValidationRules:
    """Règles meta.validation optionnelles."""

    def test_extra_required_field_is_a_warning(self):
        report = validate_trek({"slug": "abc-trek", "title": "Abc"}, MetaValidation())
        assert report.valid
        assert "Missing required field: region_slug" in report.warnings

    def test_strict_mode_keeps_extra_fields_advisory(self):
        report = validate_trek({"slug": "abc-trek", "title": "Abc"}, MetaValidation(strict_mode=True))
        assert report.valid
        assert report.errors == []
        assert "Missing required field: region_slug" in report.warnings

    def test_strict_mode_still_blocks_on_title(self):
        report = validate_trek({"slug": "abc-trek"}, MetaValidation(strict_mode=True))
        assert report.errors == ["Missing required field: title"]

    def test_slug_format(self):
        rules = MetaValidation(required_fields=[])
        assert validate_trek({"slug": "Bad Slug!", "title": "x"}, rules).warnings[-1].startswith("Invalid slug")
        assert validate_trek({"slug": "ab", "title": "x"}, rules).warnings[-1].startswith("Invalid slug length")

    def test_slug_check_can_be_disabled(self):
        rules = MetaValidation(required_fields=[], validate_slugs=False)
        report = validate_trek({"slug": "Bad Slug!", "title": "x"}, rules)
        assert not any(w.startswith("Invalid slug") for w in report.warnings)


class TestEnvelopeSchema:
    """Validation JSON Schema de l'enveloppe normalisée."""

    def test_normalized_envelope_is_schema_valid(self, legacy_trek):
        envelope = build_envelope({"treks": [legacy_trek]}, sink=NullSink())
        assert validate_envelope_schema(envelope) == (True, None)

    def test_empty_envelope_is_schema_valid(self):
        assert validate_envelope_schema(build_envelope({}, sink=NullSink()))[0] is True

    def test_legacy_key_is_rejected(self):
        envelope = build_envelope({}, sink=NullSink())
        envelope["treks"].append({"slug": "x", "hero": {}})
        valid, error = validate_envelope_schema(envelope)
        assert valid is False
        assert error

    def test_invalid_mode_is_rejected(self):
        envelope = build_envelope({"meta": {"mode": "overwrite"}}, sink=NullSink())
        valid, _ = validate_envelope_schema(envelope)
        assert valid is False

    def test_missing_schema_file(self, tmp_path):
        valid, error = validate_envelope_schema({}, schema_path=tmp_path / "absent.json")
        assert valid is False
        assert "introuvable" in error

    def test_custom_schema(self, tmp_path):
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps({"type": "object", "required": ["meta"]}), encoding="utf-8")
        assert validate_envelope_schema({"meta": {}}, schema_path=schema_path) == (True, None)
