"""Transform report workbook writer service."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .report_models import ChangeKind, SchemaChange, TransformReport, WarningRow

SUMMARY_SHEET_NAME = "Summary"
SCHEMAS_SHEET_NAME = "Schemas"
WARNINGS_SHEET_NAME = "Warnings"

SCHEMA_COLUMNS = ("step", "name", "change")
WARNING_COLUMNS = ("step", "kind", "parent", "child", "message")


def write_transform_report(report: TransformReport, output_path: Path | str) -> Path:
    """Write the Summary, Schemas and Warnings sheets; return the resolved path."""
    workbook = Workbook()
    summary_sheet = workbook.active
    summary_sheet.title = SUMMARY_SHEET_NAME
    _write_summary_sheet(summary_sheet, report)
    _write_schema_sheet(workbook.create_sheet(SCHEMAS_SHEET_NAME), report.schema_changes)
    _write_warning_sheet(workbook.create_sheet(WARNINGS_SHEET_NAME), report.warnings)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_summary_sheet(sheet, report: TransformReport) -> None:
    summary = report.summary
    entries: tuple[tuple[str, Any], ...] = (
        ("run_start", summary.run_start.isoformat()),
        ("input", summary.input_label),
        ("output", summary.output_label),
        ("steps", ", ".join(summary.steps)),
        ("created", _count(report.schema_changes, ChangeKind.CREATED)),
        ("removed", _count(report.schema_changes, ChangeKind.REMOVED)),
        (
            "discriminators_stripped",
            _count(report.schema_changes, ChangeKind.DISCRIMINATOR_STRIPPED),
        ),
        ("sealed", _count(report.schema_changes, ChangeKind.SEALED)),
        ("warnings", len(report.warnings)),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
    sheet.column_dimensions["A"].width = 26
    sheet.column_dimensions["B"].width = 60


def _write_schema_sheet(sheet, changes: Sequence[SchemaChange]) -> None:
    _write_header(sheet, SCHEMA_COLUMNS)
    for row, change in enumerate(changes, start=2):
        sheet.cell(row=row, column=1, value=change.step)
        sheet.cell(row=row, column=2, value=change.name)
        sheet.cell(row=row, column=3, value=change.change.value)


def _write_warning_sheet(sheet, warnings: Sequence[WarningRow]) -> None:
    _write_header(sheet, WARNING_COLUMNS)
    for row, warning in enumerate(warnings, start=2):
        values = (warning.step, warning.kind, warning.parent, warning.child, warning.message)
        for column, value in enumerate(values, start=1):
            sheet.cell(row=row, column=column, value=value)
    sheet.column_dimensions[get_column_letter(len(WARNING_COLUMNS))].width = 90


def _write_header(sheet, columns: Sequence[str]) -> None:
    for column, title in enumerate(columns, start=1):
        sheet.cell(row=1, column=column, value=title)
        sheet.column_dimensions[get_column_letter(column)].width = max(14, len(title) + 6)
    sheet.freeze_panes = "A2"


def _count(changes: Sequence[SchemaChange], kind: ChangeKind) -> int:
    return sum(1 for change in changes if change.change is kind)
