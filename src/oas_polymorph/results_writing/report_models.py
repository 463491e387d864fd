"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChangeKind(str, Enum):
    """Rendered value of the Schemas sheet change column."""

    CREATED = "created"
    REMOVED = "removed"
    DISCRIMINATOR_STRIPPED = "discriminator_stripped"
    SEALED = "sealed"


@dataclass(frozen=True)
class SchemaChange:
    """One schema touched by a pipeline step."""

    step: str
    name: str
    change: ChangeKind


@dataclass(frozen=True)
class WarningRow:
    """One warning raised by a pipeline step."""

    step: str
    kind: str
    parent: str
    child: str | None
    message: str


@dataclass(frozen=True)
class RunSummary:
    """Metadata rendered into the Summary sheet."""

    run_start: datetime
    input_label: str
    output_label: str
    steps: tuple[str, ...]


@dataclass(frozen=True)
class TransformReport:
    """Everything written into one report workbook."""

    summary: RunSummary
    schema_changes: tuple[SchemaChange, ...]
    warnings: tuple[WarningRow, ...]
