"""Tests unitaires pour les modèles Pydantic de l'import."""

import pytest
from pydantic import ValidationError

from app.trek_import.models import (
    ImportMeta,
    ImportStatistics,
    MetaProcessing,
    MetaSource,
    MetaValidation,
    ValidationReport,
)


class TestImportMeta:
    """Tests pour ImportMeta."""

    def test_defaults(self):
        meta = ImportMeta()
        assert meta.schema_version == "2.0"
        assert meta.format == "trek_import"
        assert meta.mode == "replace_nested"
        assert meta.generated_by == "admin_panel"
        assert meta.generator_version == "1.0.0"
        assert meta.counts == ImportStatistics()

    def test_extra_fields_kept(self):
        meta = ImportMeta(custom_flag=True, validation={"strict_mode": True, "custom_rule": "x"})
        dumped = meta.model_dump()
        assert dumped["custom_flag"] is True
        assert dumped["validation"]["custom_rule"] == "x"
        assert dumped["validation"]["validate_slugs"] is True

    def test_default_lists_are_independent(self):
        first = MetaValidation()
        first.required_fields.append("duration")
        assert MetaValidation().required_fields == ["slug", "title", "region_slug"]

    def test_source_environment_from_settings(self):
        from app.config import settings

        assert MetaSource().environment == settings.environment


class TestConstraints:
    """Contraintes de valeurs."""

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            ImportStatistics(treks=-1)

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            MetaProcessing(batch_size=0)


class TestValidationReport:
    """Tests pour ValidationReport."""

    def test_valid_without_errors(self):
        report = ValidationReport(warnings=["Missing overview"])
        assert report.valid is True

    def test_invalid_with_errors(self):
        report = ValidationReport(errors=["Missing required field: slug"])
        assert report.valid is False
        assert report.model_dump()["valid"] is False
