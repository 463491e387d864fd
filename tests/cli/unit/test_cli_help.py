"""CLI smoke tests."""

from click.testing import CliRunner
from oas_polymorph.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in (
        "generate-config",
        "allof-to-oneof",
        "cleanup-discriminators",
        "remove-dangling",
        "remove-unused",
        "remove-single-composition",
        "optimize-allof",
        "remove-oneof",
        "seal",
        "pipeline",
    ):
        assert command in result.output


def test_allof_to_oneof_help_lists_options() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["allof-to-oneof", "-h"])

    assert result.exit_code == 0
    assert "--no-const" in result.output
    assert "--ignore-single-specialization" in result.output
    assert "--merge-nested-oneof" in result.output
    assert "--wrapper-suffix" in result.output


def test_remove_oneof_help_lists_options() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["remove-oneof", "-h"])

    assert result.exit_code == 0
    assert "--remove" in result.output
    assert "--parent" in result.output
    assert "--guess" in result.output
