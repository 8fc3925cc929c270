"""Module d'observabilité pour la pipeline d'import des treks.

Fournit le canal de diagnostics injecté dans les normaliseurs (logging,
collecte en mémoire ou silence) et les métriques d'exécution d'un import.
Les diagnostics n'influencent jamais les valeurs normalisées.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Diagnostic:
    """Un message émis pendant la normalisation."""

    level: int
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level_name,
            "message": self.message,
            "context": self.context,
        }


class DiagnosticSink:
    """Canal de diagnostics. Les sous-classes implémentent ``emit``."""

    def emit(self, level: int, message: str, **context: Any) -> None:
        raise NotImplementedError

    def info(self, message: str, **context: Any) -> None:
        self.emit(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.emit(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.emit(logging.ERROR, message, **context)


class LoggingSink(DiagnosticSink):
    """Redirige les diagnostics vers un logger standard."""

    def __init__(self, target: Optional[logging.Logger] = None) -> None:
        self._logger = target or logging.getLogger("app.trek_import.diagnostics")

    def emit(self, level: int, message: str, **context: Any) -> None:
        self._logger.log(level, message, extra={"diagnostic": context} if context else None)


class NullSink(DiagnosticSink):
    """Ignore tous les diagnostics."""

    def emit(self, level: int, message: str, **context: Any) -> None:
        return None


class CollectingSink(DiagnosticSink):
    """Conserve les diagnostics en mémoire (tests, rapport opérateur)."""

    def __init__(self) -> None:
        self.records: List[Diagnostic] = []

    def emit(self, level: int, message: str, **context: Any) -> None:
        self.records.append(Diagnostic(level=level, message=message, context=dict(context)))

    @property
    def warnings(self) -> List[Diagnostic]:
        return [record for record in self.records if record.level >= logging.WARNING]

    def messages(self, min_level: int = logging.NOTSET) -> List[str]:
        return [record.message for record in self.records if record.level >= min_level]

    def clear(self) -> None:
        self.records.clear()


def resolve_sink(sink: Optional[DiagnosticSink]) -> DiagnosticSink:
    """Retourne le sink fourni ou un ``LoggingSink`` par défaut."""
    return sink if sink is not None else LoggingSink()


@dataclass
class TrekMetrics:
    """Métriques de normalisation pour un trek individuel."""

    index: int
    slug: Optional[str]
    start_time: float
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
    valid: bool = True
    errors_count: int = 0
    warnings_count: int = 0

    def complete(self, valid: bool, errors_count: int = 0, warnings_count: int = 0) -> None:
        """Marque la normalisation comme terminée."""
        self.end_time = time.time()
        self.duration_seconds = self.end_time - self.start_time
        self.valid = valid
        self.errors_count = errors_count
        self.warnings_count = warnings_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "slug": self.slug,
            "duration_seconds": round(self.duration_seconds, 4) if self.duration_seconds else None,
            "valid": self.valid,
            "errors_count": self.errors_count,
            "warnings_count": self.warnings_count,
        }


@dataclass
class ImportMetrics:
    """Métriques globales d'un import."""

    run_id: str
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
    trek_metrics: List[TrekMetrics] = field(default_factory=list)
    failed: bool = False
    failure: Optional[str] = None

    def start_trek(self, index: int, slug: Optional[str]) -> TrekMetrics:
        """Démarre le suivi d'un trek."""
        metrics = TrekMetrics(index=index, slug=slug, start_time=time.time())
        self.trek_metrics.append(metrics)
        return metrics

    def fail(self, reason: str) -> None:
        """Marque l'import comme interrompu."""
        self.failed = True
        self.failure = reason
        self.complete()

    def complete(self) -> None:
        """Marque l'import comme terminé."""
        self.end_time = time.time()
        self.duration_seconds = self.end_time - self.start_time

        invalid = sum(1 for metrics in self.trek_metrics if not metrics.valid)
        logger.info(
            f"🎯 Import terminé: {self.run_id} ({self.duration_seconds:.3f}s)",
            extra={
                "run_id": self.run_id,
                "duration": self.duration_seconds,
                "treks": len(self.trek_metrics),
                "invalid_treks": invalid,
                "failed": self.failed,
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convertit les métriques en dictionnaire."""
        return {
            "run_id": self.run_id,
            "timestamp": datetime.now().isoformat(),
            "duration_seconds": round(self.duration_seconds, 4) if self.duration_seconds else None,
            "treks_count": len(self.trek_metrics),
            "invalid_treks_count": sum(1 for m in self.trek_metrics if not m.valid),
            "warnings_count": sum(m.warnings_count for m in self.trek_metrics),
            "failed": self.failed,
            "failure": self.failure,
            "trek_metrics": [m.to_dict() for m in self.trek_metrics],
        }

    def save_to_file(self, output_dir: Path) -> None:
        """Sauvegarde les métriques dans un fichier JSON."""
        metrics_file = output_dir / self.run_id / "metrics.json"
        try:
            metrics_file.parent.mkdir(parents=True, exist_ok=True)
            metrics_file.write_text(
                json.dumps(self.to_dict(), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            logger.debug(f"📊 Métriques sauvegardées: {metrics_file}")
        except OSError as exc:
            logger.warning(f"⚠️ Impossible de sauvegarder les métriques: {exc}")
