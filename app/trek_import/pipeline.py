"""Pipeline d'import : payload brut -> enveloppe canonique + rapports de validation."""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from pydantic import ValidationError

from app.config import settings
from app.trek_import.errors import InvalidPayloadError, TrekNormalizationError
from app.trek_import.models import MetaValidation, ValidationReport
from app.trek_import.observability import DiagnosticSink, ImportMetrics, resolve_sink
from app.trek_import.scripts.meta_builder import IMPORT_MODES, is_valid_mode, merge_meta
from app.trek_import.scripts.payload_loader import parse_payload_text
from app.trek_import.scripts.schema_validator import validate_envelope_schema, validate_trek
from app.trek_import.scripts.statistics_calculator import calculate_statistics
from app.trek_import.scripts.trek_normalizer import normalize_trek

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Résultat structuré d'un import normalisé."""
    run_id: str
    envelope: Dict[str, Any]
    reports: List[ValidationReport] = field(default_factory=list)
    schema_valid: Optional[bool] = None
    schema_error: Optional[str] = None
    metrics: Optional[ImportMetrics] = None

    @property
    def invalid_indexes(self) -> List[int]:
        """Index (1-based) des treks dont la validation a échoué."""
        return [index for index, report in enumerate(self.reports, start=1) if not report.valid]

    @property
    def has_errors(self) -> bool:
        return bool(self.invalid_indexes)

    @property
    def status(self) -> str:
        if self.has_errors or self.schema_valid is False:
            return "invalid"
        if any(report.warnings for report in self.reports):
            return "warnings"
        return "ok"

    def report_for(self, index: int) -> ValidationReport:
        """Rapport du trek ``index`` (1-based, comme dans les messages d'erreur)."""
        return self.reports[index - 1]

    def reports_summary(self) -> List[Dict[str, Any]]:
        treks = self.envelope.get("treks", [])
        summary = []
        for index, report in enumerate(self.reports, start=1):
            trek = treks[index - 1] if index - 1 < len(treks) else {}
            summary.append({
                "index": index,
                "slug": trek.get("slug"),
                "title": trek.get("title"),
                **report.model_dump(),
            })
        return summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "status": self.status,
            "envelope": self.envelope,
            "reports": self.reports_summary(),
            "schema": {"valid": self.schema_valid, "error": self.schema_error},
        }


class TrekImportPipeline:
    """
    Orchestrateur de normalisation d'un payload d'import.

    Etapes :
    - fusion du meta appelant sur le meta par défaut
    - normalisation de chaque trek (un échec interrompt tout le batch)
    - validation de chaque trek (rapports collectés, jamais levés)
    - statistiques écrites une seule fois dans ``meta.counts``
    - validation JSON Schema optionnelle de l'enveloppe
    """

    def __init__(
        self,
        *,
        sink: Optional[DiagnosticSink] = None,
        check_schema: bool = False,
        metrics_output_dir: Optional[Path] = None,
    ) -> None:
        self._sink = resolve_sink(sink)
        self._check_schema = check_schema
        output_dir = metrics_output_dir or settings.metrics_output_dir
        self._metrics_output_dir = Path(output_dir) if output_dir else None

    def run(self, raw_payload: Any) -> ImportResult:
        """Normalise ``raw_payload`` et retourne l'enveloppe + les rapports."""

        if raw_payload is None or not isinstance(raw_payload, Mapping):
            raise InvalidPayloadError("Invalid payload: Expected object")

        run_id = f"import-{uuid4().hex[:12]}"
        metrics = ImportMetrics(run_id=run_id)
        logger.info(f"🔄 Normalizing import payload (Run ID: {run_id})")

        meta = merge_meta(raw_payload.get("meta"))
        if not is_valid_mode(meta["mode"]):
            self._sink.warning(
                f"⚠️ Unknown import mode: {meta['mode']!r} (expected one of {', '.join(IMPORT_MODES)})",
                mode=meta["mode"],
            )
        regions = self._extract_list(raw_payload, "regions")
        raw_treks = self._extract_list(raw_payload, "treks")
        rules = self._validation_rules(meta)

        treks: List[Dict[str, Any]] = []
        reports: List[ValidationReport] = []

        for index, raw_trek in enumerate(raw_treks, start=1):
            slug = raw_trek.get("slug") if isinstance(raw_trek, Mapping) else None
            title = raw_trek.get("title") if isinstance(raw_trek, Mapping) else None
            trek_metrics = metrics.start_trek(index, slug)

            try:
                normalized = normalize_trek(raw_trek, self._sink)
            except Exception as exc:
                logger.error(f"❌ Failed to normalize trek {index}: {exc}")
                metrics.fail(f"trek {index}: {exc}")
                self._save_metrics(metrics)
                raise TrekNormalizationError(index, slug, title, exc) from exc

            report = validate_trek(normalized, rules)
            if not report.valid:
                logger.error(f"❌ Trek {index} validation failed: {report.errors}")
            if report.warnings:
                logger.warning(f"⚠️ Trek {index} warnings: {report.warnings}")

            trek_metrics.complete(
                valid=report.valid,
                errors_count=len(report.errors),
                warnings_count=len(report.warnings),
            )
            treks.append(normalized)
            reports.append(report)

        envelope: Dict[str, Any] = {"meta": meta, "regions": regions, "treks": treks}
        meta["counts"] = calculate_statistics(envelope).model_dump()

        result = ImportResult(run_id=run_id, envelope=envelope, reports=reports, metrics=metrics)

        if self._check_schema:
            result.schema_valid, result.schema_error = validate_envelope_schema(envelope)
            if not result.schema_valid:
                logger.warning(f"⚠️ Envelope schema check failed: {result.schema_error}")

        metrics.complete()
        self._save_metrics(metrics)
        logger.info(f"✅ Payload normalized successfully {meta['counts']}")
        return result

    def _extract_list(self, raw_payload: Mapping[str, Any], key: str) -> List[Any]:
        value = raw_payload.get(key)
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            self._sink.warning(f"⚠️ '{key}' ignoré (liste attendue, reçu {type(value).__name__})")
            return []
        return deepcopy(list(value))

    def _validation_rules(self, meta: Dict[str, Any]) -> Optional[MetaValidation]:
        try:
            return MetaValidation.model_validate(meta["validation"])
        except ValidationError as exc:
            self._sink.warning(f"⚠️ meta.validation inexploitable, règles par défaut ignorées: {exc}")
            return None

    def _save_metrics(self, metrics: ImportMetrics) -> None:
        if self._metrics_output_dir is not None:
            metrics.save_to_file(self._metrics_output_dir)


def build_envelope(raw_payload: Any, *, sink: Optional[DiagnosticSink] = None) -> Dict[str, Any]:
    """Construit l'enveloppe canonique ``{meta, regions, treks}`` d'un payload brut."""
    return TrekImportPipeline(sink=sink).run(raw_payload).envelope


def run_import_from_payload(
    payload: Any,
    *,
    pipeline: Optional[TrekImportPipeline] = None,
) -> ImportResult:
    """Helper pour exécuter l'import à partir d'un payload brut.

    Le payload peut être un dictionnaire ou une chaîne JSON/YAML.
    """

    if isinstance(payload, (str, bytes)):
        payload = parse_payload_text(payload)

    pipeline_instance = pipeline or TrekImportPipeline()
    return pipeline_instance.run(payload)
