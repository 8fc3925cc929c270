"""Configuration centralisée du logging pour la pipeline d'import.

Ce module configure un système de logs qui :
- Écrase le fichier logLastImport.txt à chaque exécution
- Enregistre tous les logs de tous les modules
- Maintient aussi une sortie console pour le développement
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_import_logging(
    log_file: Optional[Path] = None,
    level: int = logging.INFO,
    console_output: bool = True,
) -> Path:
    """
    Configure le système de logging pour l'import.

    Args:
        log_file: Chemin du fichier de log (défaut: logLastImport.txt à la racine)
        level: Niveau de log (défaut: INFO)
        console_output: Si True, affiche aussi les logs en console (défaut: True)

    Returns:
        Chemin du fichier de log utilisé
    """
    if log_file is None:
        project_root = Path(__file__).resolve().parent.parent.parent
        log_file = project_root / "logLastImport.txt"

    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # 'w' = écrasement à chaque exécution
    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    handlers = [file_handler]
    if console_output:
        # stderr : stdout reste réservé au JSON produit par la CLI
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        root_logger.addHandler(handler)

    logging.info("=" * 80)
    logging.info("TREK IMPORT - LOGS INITIALIZED")
    logging.info(f"Log file: {log_file}")
    logging.info(f"Log level: {logging.getLevelName(level)}")
    logging.info(f"Console output: {'Enabled' if console_output else 'Disabled'}")
    logging.info("=" * 80)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Récupère un logger nommé (helper pour simplifier l'usage).

    Args:
        name: Nom du logger (généralement __name__)

    Returns:
        Logger configuré
    """
    return logging.getLogger(name)
