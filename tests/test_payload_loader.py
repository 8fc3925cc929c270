"""Tests du chargement et de la pré-validation des fichiers d'import."""

import json

import pytest

from app.trek_import.errors import PayloadLoadError
from app.trek_import.scripts.import_template import build_import_template, write_import_template
from app.trek_import.scripts.payload_loader import (
    load_payload_file,
    parse_payload_text,
    summarize_structure,
    validate_import_structure,
)


class TestParsePayloadText:
    """Tests de parse_payload_text."""

    def test_json_with_bom(self):
        assert parse_payload_text("\ufeff{\"treks\": []}") == {"treks": []}

    def test_bytes(self):
        assert parse_payload_text(b'{"a": 1}') == {"a": 1}

    def test_empty(self):
        with pytest.raises(PayloadLoadError, match="empty"):
            parse_payload_text("   \n")

    def test_syntax_error_preview(self):
        with pytest.raises(PayloadLoadError) as exc_info:
            parse_payload_text('{"treks": [1, 2,, 3]}')
        assert "Syntax error near" in str(exc_info.value)
        assert "2,, 3" in str(exc_info.value)

    def test_yaml(self):
        assert parse_payload_text("treks:\n  - slug: a\n") == {"treks": [{"slug": "a"}]}

    def test_yaml_error(self):
        with pytest.raises(PayloadLoadError, match="YAML"):
            parse_payload_text("treks: [unclosed", fmt="yaml")


class TestLoadPayloadFile:
    """Tests de load_payload_file."""

    def test_loads_json_file(self, tmp_path):
        path = tmp_path / "import.json"
        path.write_text(json.dumps({"treks": [{"slug": "a"}]}), encoding="utf-8")
        assert load_payload_file(path) == {"treks": [{"slug": "a"}]}

    def test_loads_yaml_file(self, tmp_path):
        path = tmp_path / "import.yml"
        path.write_text("treks:\n  - slug: a\n", encoding="utf-8")
        assert load_payload_file(path)["treks"][0]["slug"] == "a"

    def test_missing_file(self, tmp_path):
        with pytest.raises(PayloadLoadError, match="introuvable"):
            load_payload_file(tmp_path / "absent.json")

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "import.csv"
        path.write_text("slug,title\n", encoding="utf-8")
        with pytest.raises(PayloadLoadError, match="Invalid file type"):
            load_payload_file(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "import.json"
        path.write_text("", encoding="utf-8")
        with pytest.raises(PayloadLoadError, match="File is empty"):
            load_payload_file(path)

    def test_too_large(self, tmp_path):
        path = tmp_path / "import.json"
        path.write_text(json.dumps({"treks": ["x" * 200]}), encoding="utf-8")
        with pytest.raises(PayloadLoadError, match="File too large"):
            load_payload_file(path, max_size_bytes=100)


class TestValidateImportStructure:
    """Tests de validate_import_structure."""

    def test_valid(self):
        assert validate_import_structure({"treks": [{"slug": "a"}, {"slug": "b"}]}) == (True, None)

    @pytest.mark.parametrize(
        "data, message",
        [
            ("text", "Expected JSON object"),
            ({}, 'Missing required field: "treks"'),
            ({"treks": {}}, '"treks" must be an array'),
            ({"treks": []}, '"treks" array is empty'),
        ],
    )
    def test_invalid(self, data, message):
        valid, error = validate_import_structure(data)
        assert not valid
        assert message in error

    def test_duplicate_slugs(self):
        valid, error = validate_import_structure({
            "treks": [{"slug": "b"}, {"slug": "a"}, {"slug": "b"}, {"slug": "a"}, {"title": "no slug"}],
        })
        assert not valid
        assert error == "Duplicate slugs found: a, b"

    def test_too_many_treks(self):
        valid, error = validate_import_structure({"treks": [{}, {}, {}]}, max_treks=2)
        assert not valid
        assert "Too many treks" in error

    def test_summary(self):
        assert summarize_structure({"regions": [{}], "treks": [{}, {}]}) == {"regions": 1, "treks": 2}


class TestImportTemplate:
    """Le modèle d'import est un fichier valide et déjà canonique."""

    def test_template_passes_structure_check(self):
        assert validate_import_structure(build_import_template()) == (True, None)

    def test_write_template(self, tmp_path):
        path = write_import_template(tmp_path / "out" / "template.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["treks"][0]["slug"] == "everest-base-camp-trek"
        assert data["meta"]["mode"] == "replace_nested"
