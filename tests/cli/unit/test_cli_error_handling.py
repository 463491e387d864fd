"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from oas_polymorph.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["pipeline", "api.yaml"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--config" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["allof-to-oneof", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_input_document_returns_exit_code_one(tmp_path: Path, capsys) -> None:
    exit_code = main(["allof-to-oneof", str(tmp_path / "missing.yaml")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Input document not found" in captured.err
    assert captured.out == ""


def test_invalid_configuration_returns_exit_code_one(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("pipeline: [shrink]\n", encoding="utf-8")

    exit_code = main(["pipeline", "api.yaml", "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "'shrink' is not a known step" in captured.err


def test_empty_wrapper_suffix_is_a_usage_error(tmp_path: Path, capsys) -> None:
    input_path = tmp_path / "api.yaml"
    input_path.write_text("openapi: 3.1.0\n", encoding="utf-8")

    exit_code = main(["allof-to-oneof", str(input_path), "--wrapper-suffix", " "])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "--wrapper-suffix" in captured.err


def test_generate_config_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("existing", encoding="utf-8")

    exit_code = main(["generate-config", "--output", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Configuration file already exists" in captured.err
    assert config_path.read_text(encoding="utf-8") == "existing"


def test_remove_oneof_requires_a_name(capsys) -> None:
    exit_code = main(["remove-oneof", "api.yaml"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--remove" in captured.err
