import json
from pathlib import Path

from cmsgraph.cli.main import main

PAGE_MODEL = {"id": "page", "json": {"Main": {"my-field": {"type": "Select"}}}}
DOCUMENTS = {
    "page": 1,
    "results": [{"id": "P1", "type": "page", "uid": "p1", "data": {"my-field": "A"}}],
}


def _write(path: Path, data) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_normalize_command_writes_nodes(tmp_path: Path):
    models = _write(tmp_path / "models.json", [PAGE_MODEL])
    docs = _write(tmp_path / "docs.json", DOCUMENTS)
    out = tmp_path / "out.json"

    rc = main(["normalize", "--custom-types", models, "--documents", docs, "--out", str(out)])

    assert rc == 0
    result = json.loads(out.read_text(encoding="utf-8"))
    assert result["nodes"][0]["prismic_id"] == "P1"
    assert result["nodes"][0]["data"] == {"my_field": "A"}
    assert {"path": ["page", "my_field"], "type": "Select"} in result["type_paths"]


def test_type_paths_command_prints_paths(tmp_path: Path, capsys):
    models = _write(tmp_path / "model.json", PAGE_MODEL)

    rc = main(["type-paths", "--custom-types", models])

    assert rc == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed == [
        {"path": ["page"], "type": "Document"},
        {"path": ["page", "my_field"], "type": "Select"},
    ]


def test_missing_input_file_is_an_error(tmp_path: Path):
    rc = main(["normalize", "--documents", str(tmp_path / "missing.json")])
    assert rc == 2


def test_malformed_document_is_an_error(tmp_path: Path, capsys):
    docs = _write(tmp_path / "docs.json", [{"type": "page"}])

    rc = main(["normalize", "--documents", docs])

    assert rc == 2
    assert "error:" in capsys.readouterr().err
