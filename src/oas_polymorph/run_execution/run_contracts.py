"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from oas_polymorph.configuration.runtime_settings import PipelineSettings
from oas_polymorph.results_writing.report_models import SchemaChange, WarningRow


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    input_path: str | None
    output_path: str | None
    settings: PipelineSettings = field(default_factory=PipelineSettings)
    report_path: str | None = None


@dataclass(frozen=True)
class StepOutcome:
    """What one pipeline step changed."""

    step: str
    messages: tuple[str, ...]
    schema_changes: tuple[SchemaChange, ...] = ()
    warnings: tuple[WarningRow, ...] = ()


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    document: Any
    steps: tuple[StepOutcome, ...]
    output_path: Path | None
    rendered: str | None
    report_path: Path | None = None

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(message for step in self.steps for message in step.messages)
