"""Transform report workbook writer tests."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from openpyxl import load_workbook
from oas_polymorph.results_writing.report_models import (
    ChangeKind,
    RunSummary,
    SchemaChange,
    TransformReport,
    WarningRow,
)
from oas_polymorph.results_writing.transform_report_writer import (
    SCHEMAS_SHEET_NAME,
    SUMMARY_SHEET_NAME,
    WARNINGS_SHEET_NAME,
    write_transform_report,
)


def _report() -> TransformReport:
    return TransformReport(
        summary=RunSummary(
            run_start=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
            input_label="/tmp/api.yaml",
            output_label="<stdio>",
            steps=("allof-to-oneof", "remove-unused"),
        ),
        schema_changes=(
            SchemaChange("allof-to-oneof", "AnimalPolymorphic", ChangeKind.CREATED),
            SchemaChange("allof-to-oneof", "Animal", ChangeKind.DISCRIMINATOR_STRIPPED),
            SchemaChange("remove-unused", "Orphan", ChangeKind.REMOVED),
            SchemaChange("seal", "Owner", ChangeKind.SEALED),
        ),
        warnings=(
            WarningRow(
                step="allof-to-oneof",
                kind="missing_schema",
                parent="Animal",
                child="Ghost",
                message='Schema "Ghost" referenced in "Animal" mapping does not exist',
            ),
        ),
    )


def _rows(sheet) -> list[tuple]:
    return [tuple(row) for row in sheet.iter_rows(values_only=True)]


def test_writes_summary_schema_and_warning_sheets(tmp_path: Path) -> None:
    output_path = tmp_path / "reports" / "run.xlsx"

    written_path = write_transform_report(_report(), output_path)
    workbook = load_workbook(written_path)

    assert written_path == output_path.resolve()
    assert workbook.sheetnames == [SUMMARY_SHEET_NAME, SCHEMAS_SHEET_NAME, WARNINGS_SHEET_NAME]

    summary = dict(_rows(workbook[SUMMARY_SHEET_NAME]))
    assert summary["run_start"] == "2024-05-01T12:00:00+00:00"
    assert summary["steps"] == "allof-to-oneof, remove-unused"
    assert summary["created"] == 1
    assert summary["removed"] == 1
    assert summary["discriminators_stripped"] == 1
    assert summary["sealed"] == 1
    assert summary["warnings"] == 1

    assert _rows(workbook[SCHEMAS_SHEET_NAME]) == [
        ("step", "name", "change"),
        ("allof-to-oneof", "AnimalPolymorphic", "created"),
        ("allof-to-oneof", "Animal", "discriminator_stripped"),
        ("remove-unused", "Orphan", "removed"),
        ("seal", "Owner", "sealed"),
    ]
    warning_rows = _rows(workbook[WARNINGS_SHEET_NAME])
    assert warning_rows[0] == ("step", "kind", "parent", "child", "message")
    assert warning_rows[1][:4] == ("allof-to-oneof", "missing_schema", "Animal", "Ghost")
    assert workbook[WARNINGS_SHEET_NAME].freeze_panes == "A2"


def test_empty_report_keeps_headers(tmp_path: Path) -> None:
    report = TransformReport(
        summary=RunSummary(
            run_start=datetime.now(UTC), input_label="a", output_label="b", steps=()
        ),
        schema_changes=(),
        warnings=(),
    )

    workbook = load_workbook(write_transform_report(report, tmp_path / "empty.xlsx"))

    assert _rows(workbook[SCHEMAS_SHEET_NAME]) == [("step", "name", "change")]
    assert dict(_rows(workbook[SUMMARY_SHEET_NAME]))["warnings"] == 0
