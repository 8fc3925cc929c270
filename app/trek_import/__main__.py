"""Point d'entrée CLI pour normaliser un fichier d'import de treks."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from app.trek_import.errors import PayloadLoadError, TrekImportError
from app.trek_import.logging_config import DATE_FORMAT, LOG_FORMAT, get_logger, setup_import_logging
from app.trek_import.pipeline import TrekImportPipeline, run_import_from_payload
from app.trek_import.scripts.import_template import write_import_template
from app.trek_import.scripts.payload_loader import (
    load_payload_file,
    summarize_structure,
    validate_import_structure,
)

LOGGER = get_logger("app.trek_import.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def _configure_logging(level: str, log_file: Optional[Path] = None) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if log_file is not None:
        setup_import_logging(log_file=log_file, level=numeric_level, console_output=True)
        return
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
    )


def _emit(data: Any, output: Optional[Path]) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    LOGGER.info("💾 Résultat écrit dans %s", output)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Normalise et valide un fichier d'import du catalogue de treks",
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--input-file",
        type=Path,
        help="Fichier JSON ou YAML contenant meta, regions et treks",
    )
    source_group.add_argument(
        "--write-template",
        type=Path,
        metavar="PATH",
        help="Écrit un modèle d'import complet à l'emplacement indiqué",
    )

    parser.add_argument(
        "--output",
        type=Path,
        help="Fichier de sortie (stdout par défaut)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Afficher aussi les rapports de validation par trek",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Code de sortie 2 si un trek a des erreurs de validation",
    )
    parser.add_argument(
        "--check-schema",
        action="store_true",
        help="Valider l'enveloppe normalisée contre le schéma JSON",
    )
    parser.add_argument(
        "--skip-structure-check",
        action="store_true",
        help="Ne pas exiger une liste de treks non vide et sans slug dupliqué",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Niveau de log (INFO par défaut)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Fichier de log (écrasé à chaque exécution)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.log_level, args.log_file)

    if args.write_template:
        path = write_import_template(args.write_template)
        LOGGER.info("📄 Modèle d'import écrit: %s", path)
        print(str(path))
        return EXIT_OK

    try:
        payload = load_payload_file(args.input_file)
    except PayloadLoadError as exc:
        LOGGER.error("❌ Lecture impossible: %s", exc)
        return EXIT_FAILURE

    if not args.skip_structure_check:
        valid, error = validate_import_structure(payload)
        if not valid:
            LOGGER.error("❌ Structure invalide: %s", error)
            return EXIT_FAILURE
        LOGGER.info("📦 Contenu: %s", summarize_structure(payload))

    try:
        LOGGER.info("🚀 Lancement de la normalisation (mode CLI)")
        result = run_import_from_payload(
            payload,
            pipeline=TrekImportPipeline(check_schema=args.check_schema),
        )
    except TrekImportError as exc:
        LOGGER.error("❌ Échec de la normalisation: %s", exc)
        return EXIT_FAILURE

    _emit(result.to_dict() if args.report else result.envelope, args.output)

    if args.strict and result.status == "invalid":
        LOGGER.error("❌ Treks invalides: %s", result.invalid_indexes)
        return EXIT_INVALID

    LOGGER.info("✅ Import normalisé (%s)", result.status)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - point d'entrée script
    sys.exit(main())
