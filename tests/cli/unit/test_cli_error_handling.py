"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from data_contract_creator.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["validate"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--input" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["format", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_input_file_is_reported_without_traceback(tmp_path: Path, capsys) -> None:
    exit_code = main(["inspect", "--input", str(tmp_path / "missing.json")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Cannot read contract file" in captured.err
    assert "Traceback" not in captured.err


def test_import_failure_reports_kind_and_path(tmp_path: Path, capsys) -> None:
    input_path = tmp_path / "contract.json"
    input_path.write_text('{"note": {"properties": {"tags": {"type": "array"}}}}', encoding="utf-8")

    exit_code = main(["validate", "--input", str(input_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "SchemaShapeError" in captured.err
    assert "documentTypes.note.properties.tags" in captured.err


def test_invalid_configuration_is_reported(tmp_path: Path, capsys) -> None:
    input_path = tmp_path / "contract.json"
    input_path.write_text("{}", encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text("validation:\n  max_depth: 0\n", encoding="utf-8")

    exit_code = main(["validate", "--input", str(input_path), "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "validation.max_depth must be greater than zero." in captured.err


def test_generate_config_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    output_path = tmp_path / "contract-creator.yaml"
    output_path.write_text("existing", encoding="utf-8")

    exit_code = main(["generate-config", "--output", str(output_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "already exists" in captured.err


def test_undecodable_input_is_reported_as_malformed_json(tmp_path: Path, capsys) -> None:
    input_path = tmp_path / "contract.json"
    input_path.write_bytes(b'{"note": "\xff\xfe"}')

    exit_code = main(["format", "--input", str(input_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Import failed (MalformedJson)" in captured.err
    assert "Traceback" not in captured.err
