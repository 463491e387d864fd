"""CLI orchestration integration tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from click.testing import CliRunner
from openpyxl import load_workbook
from oas_polymorph.cli import cli, main
from oas_polymorph.results_writing import WARNINGS_SHEET_NAME

_PREFIX = "#/components/schemas/"


def _write_document(tmp_path: Path) -> Path:
    document = {
        "openapi": "3.1.0",
        "info": {"title": "Zoo", "version": "1"},
        "paths": {
            "/animals": {
                "get": {
                    "responses": {
                        "200": {
                            "description": "ok",
                            "content": {
                                "application/json": {"schema": {"$ref": f"{_PREFIX}Animal"}}
                            },
                        }
                    }
                }
            }
        },
        "components": {
            "schemas": {
                "Animal": {
                    "type": "object",
                    "properties": {"kind": {"type": "string"}},
                    "discriminator": {
                        "propertyName": "kind",
                        "mapping": {
                            "cat": f"{_PREFIX}Cat",
                            "dog": f"{_PREFIX}Dog",
                            "rock": f"{_PREFIX}Rock",
                        },
                    },
                },
                "Cat": {"allOf": [{"$ref": f"{_PREFIX}Animal"}]},
                "Dog": {"allOf": [{"$ref": f"{_PREFIX}Animal"}]},
                "Rock": {"type": "object"},
                "Owner": {
                    "type": "object",
                    "properties": {"pet": {"$ref": f"{_PREFIX}Ghost"}},
                },
            }
        },
    }
    path = tmp_path / "api.yaml"
    path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
    return path


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "config.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.output


def test_allof_to_oneof_command_writes_json_output(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)
    output_path = tmp_path / "out.json"

    exit_code = main(
        ["allof-to-oneof", str(input_path), "-o", str(output_path), "--wrapper-suffix", "Union"]
    )
    captured = capsys.readouterr()
    written = json.loads(output_path.read_text(encoding="utf-8"))

    assert exit_code == 0
    assert captured.out == ""
    assert "[ALLOF-TO-ONEOF] Created wrapper schema(s): AnimalUnion" in captured.err
    assert '[WARN] Schema "Rock" in discriminator mapping' in captured.err
    assert f"[OUTPUT] {output_path.resolve()}" in captured.err
    schemas = written["components"]["schemas"]
    assert schemas["AnimalUnion"]["oneOf"] == [
        {"$ref": f"{_PREFIX}Cat"},
        {"$ref": f"{_PREFIX}Dog"},
    ]
    assert "discriminator" not in schemas["Animal"]


def test_allof_to_oneof_command_streams_yaml_to_stdout(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)

    exit_code = main(["allof-to-oneof", str(input_path), "--no-const"])
    captured = capsys.readouterr()
    document = yaml.safe_load(captured.out)

    assert exit_code == 0
    assert "AnimalPolymorphic" in document["components"]["schemas"]
    assert document["components"]["schemas"]["Cat"] == {"allOf": [{"$ref": f"{_PREFIX}Animal"}]}
    assert "[OUTPUT]" not in captured.err


def test_cleanup_and_removal_commands(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)
    cleaned_path = tmp_path / "cleaned.yaml"
    pruned_path = tmp_path / "pruned.yaml"

    assert main(["remove-dangling", str(input_path), "-o", str(cleaned_path)]) == 0
    assert main(["remove-unused", str(cleaned_path), "-o", str(pruned_path), "--keep", "Rock"]) == 0
    captured = capsys.readouterr()
    schemas = yaml.safe_load(pruned_path.read_text(encoding="utf-8"))["components"]["schemas"]

    assert "[REMOVE-DANGLING] Removed 1 dangling reference(s)." in captured.err
    assert "[REMOVE] Owner" in captured.err
    assert set(schemas) == {"Animal", "Cat", "Dog", "Rock"}


def test_pipeline_command_runs_configured_steps_and_writes_report(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "pipeline:\n  - allof-to-oneof\n  - remove-dangling\n  - remove-unused\n",
        encoding="utf-8",
    )
    output_path = tmp_path / "out.yaml"
    report_path = tmp_path / "report.xlsx"

    exit_code = main(
        [
            "pipeline",
            str(input_path),
            "--config",
            str(config_path),
            "-o",
            str(output_path),
            "--report",
            str(report_path),
        ]
    )
    captured = capsys.readouterr()
    schemas = yaml.safe_load(output_path.read_text(encoding="utf-8"))["components"]["schemas"]
    warnings = list(load_workbook(report_path)[WARNINGS_SHEET_NAME].iter_rows(values_only=True))

    assert exit_code == 0
    assert f"[REPORT] {report_path.resolve()}" in captured.err
    assert set(schemas) == {"Animal", "Cat", "Dog", "AnimalPolymorphic"}
    assert warnings[1][1] == "not_inheriting"


def test_cleanup_discriminators_command(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)
    document = yaml.safe_load(input_path.read_text(encoding="utf-8"))
    document["components"]["schemas"]["Animal"]["discriminator"]["mapping"]["ghost"] = (
        f"{_PREFIX}Ghost"
    )
    input_path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")

    exit_code = main(["cleanup-discriminators", str(input_path)])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "removed 1 mapping(s)" in captured.err
    assert "ghost" not in yaml.safe_load(captured.out)["components"]["schemas"]["Animal"][
        "discriminator"
    ]["mapping"]


def test_verbose_flag_logs_transform_details(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)
    package_logger = logging.getLogger("oas_polymorph")

    try:
        exit_code = main(["--verbose", "allof-to-oneof", str(input_path), "-o", "-"])
        captured = capsys.readouterr()
    finally:
        for handler in list(package_logger.handlers):
            if not isinstance(handler, logging.NullHandler):
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)

    assert exit_code == 0
    assert "DEBUG oas_polymorph.polymorphism" in captured.err


def test_remove_single_composition_command_inlines_bare_children(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)

    exit_code = main(["remove-single-composition", str(input_path)])
    captured = capsys.readouterr()
    schemas = yaml.safe_load(captured.out)["components"]["schemas"]

    assert exit_code == 0
    assert "[REMOVE] Cat" in captured.err
    assert "[REMOVE] Dog" in captured.err
    assert set(schemas) == {"Animal", "Rock", "Owner"}
    assert schemas["Animal"]["discriminator"]["mapping"]["cat"] == f"{_PREFIX}Animal"


def test_optimize_allof_command(tmp_path: Path, capsys) -> None:
    input_path = tmp_path / "api.json"
    input_path.write_text(
        json.dumps(
            {
                "components": {
                    "schemas": {
                        "A": {"type": "object"},
                        "B": {"allOf": [{"$ref": f"{_PREFIX}A"}]},
                        "C": {"allOf": [{"$ref": f"{_PREFIX}B"}, {"$ref": f"{_PREFIX}A"}]},
                    }
                }
            }
        ),
        encoding="utf-8",
    )

    exit_code = main(["optimize-allof", str(input_path)])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "[OPTIMIZE-ALLOF] C: dropped A" in captured.err
    assert yaml.safe_load(captured.out)["components"]["schemas"]["C"] == {
        "allOf": [{"$ref": f"{_PREFIX}B"}]
    }


def test_remove_oneof_command_edits_one_parent(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)
    converted_path = tmp_path / "converted.yaml"
    assert main(["allof-to-oneof", str(input_path), "-o", str(converted_path)]) == 0
    capsys.readouterr()

    exit_code = main(
        ["remove-oneof", str(converted_path), "--parent", "AnimalPolymorphic", "--remove", "Dog"]
    )
    captured = capsys.readouterr()
    wrapper = yaml.safe_load(captured.out)["components"]["schemas"]["AnimalPolymorphic"]

    assert exit_code == 0
    assert "[REMOVE-ONEOF] Removed 'Dog' from oneOf of 'AnimalPolymorphic'." in captured.err
    assert wrapper["oneOf"] == [{"$ref": f"{_PREFIX}Cat"}]
    assert "dog" not in wrapper["discriminator"]["mapping"]


def test_remove_oneof_command_warns_when_nothing_matches(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)

    exit_code = main(["remove-oneof", str(input_path), "--remove", "Bird*"])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "[WARN] No schemas removed globally." in captured.err


def test_seal_command_splits_extended_and_used_base(tmp_path: Path, capsys) -> None:
    input_path = _write_document(tmp_path)

    exit_code = main(["seal", str(input_path), "--additional-properties"])
    captured = capsys.readouterr()
    schemas = yaml.safe_load(captured.out)["components"]["schemas"]

    assert exit_code == 0
    assert "[SEAL] Created core schema(s): AnimalCore" in captured.err
    assert schemas["Animal"]["allOf"] == [{"$ref": f"{_PREFIX}AnimalCore"}]
    assert schemas["Animal"]["unevaluatedProperties"] is False
    assert "additionalProperties" not in schemas["AnimalCore"]
    assert schemas["Cat"]["allOf"] == [{"$ref": f"{_PREFIX}AnimalCore"}]
    assert schemas["Cat"]["unevaluatedProperties"] is False
    assert schemas["Rock"]["additionalProperties"] is False
