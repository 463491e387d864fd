"""Results writing domain exports."""

from .report_models import ChangeKind, RunSummary, SchemaChange, TransformReport, WarningRow
from .transform_report_writer import (
    SCHEMAS_SHEET_NAME,
    SUMMARY_SHEET_NAME,
    WARNINGS_SHEET_NAME,
    write_transform_report,
)

__all__ = [
    "ChangeKind",
    "RunSummary",
    "SchemaChange",
    "TransformReport",
    "WarningRow",
    "SCHEMAS_SHEET_NAME",
    "SUMMARY_SHEET_NAME",
    "WARNINGS_SHEET_NAME",
    "write_transform_report",
]
