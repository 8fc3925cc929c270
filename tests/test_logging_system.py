"""Test du système de logging centralisé."""
import logging

import pytest

from app.trek_import.logging_config import get_logger, setup_import_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def test_logging_creates_file_and_overwrites(tmp_path):
    """Le fichier de log est créé puis écrasé à chaque initialisation."""
    log_file = tmp_path / "logs" / "import.txt"

    returned = setup_import_logging(log_file=log_file, level=logging.INFO, console_output=False)
    assert returned == log_file

    logging.getLogger("test").info("Premier message")
    logging.getLogger("test").warning("Deuxième message")

    content1 = log_file.read_text(encoding="utf-8")
    assert "Premier message" in content1
    assert "Deuxième message" in content1
    assert "TREK IMPORT - LOGS INITIALIZED" in content1

    setup_import_logging(log_file=log_file, level=logging.INFO, console_output=False)
    logging.getLogger("test2").error("Troisième message (nouveau run)")

    content2 = log_file.read_text(encoding="utf-8")
    assert "Premier message" not in content2
    assert "Troisième message (nouveau run)" in content2


def test_log_format(tmp_path):
    """Chaque ligne suit le format 'date | niveau | logger | message'."""
    log_file = tmp_path / "format.txt"
    setup_import_logging(log_file=log_file, console_output=False)

    get_logger("app.trek_import.test").warning("⚠️  Format check")

    line = [l for l in log_file.read_text(encoding="utf-8").splitlines() if "Format check" in l][0]
    parts = [part.strip() for part in line.split(" | ")]
    assert parts[1] == "WARNING"
    assert parts[2] == "app.trek_import.test"
    assert parts[3] == "⚠️  Format check"


def test_level_filters_messages(tmp_path):
    log_file = tmp_path / "level.txt"
    setup_import_logging(log_file=log_file, level=logging.WARNING, console_output=False)

    logging.getLogger("test").info("caché")
    logging.getLogger("test").error("visible")

    content = log_file.read_text(encoding="utf-8")
    assert "caché" not in content
    assert "visible" in content
