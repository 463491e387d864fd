"""Transform run use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from oas_polymorph.configuration.runtime_settings import PipelineSettings, PipelineStep
from oas_polymorph.document_io import DocumentError, dump_document, load_document, render_document
from oas_polymorph.polymorphism import convert_allof_to_oneof
from oas_polymorph.results_writing import (
    ChangeKind,
    RunSummary,
    SchemaChange,
    TransformReport,
    WarningRow,
    write_transform_report,
)
from oas_polymorph.schema_cleanup import (
    OneOfRemovalError,
    cleanup_discriminator_mappings,
    optimize_allof_compositions,
    remove_dangling_refs,
    remove_from_one_of,
    remove_single_compositions,
    remove_unused_schemas,
    seal_schemas,
)

from .run_contracts import RunOutcome, RunRequest, StepOutcome

logger = logging.getLogger(__name__)

NO_SCHEMAS_MESSAGE = "[INFO] The input document does not contain valid components.schemas."


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_transform_run(request: RunRequest) -> RunOutcome:
    """Load a document, run the configured steps, write the result and report."""
    run_start = datetime.now(UTC)
    try:
        document = load_document(request.input_path)
    except DocumentError as exc:
        raise RunExecutionError(str(exc)) from exc

    if _has_schemas(document):
        steps = tuple(
            _run_step(step, document, request.settings) for step in request.settings.steps
        )
    else:
        steps = (StepOutcome(step="input", messages=(NO_SCHEMAS_MESSAGE,)),)

    output_path, rendered = _write_output(document, request.output_path)
    report_path = None
    if request.report_path:
        report_path = _write_report(request, steps, run_start)
    return RunOutcome(
        document=document,
        steps=steps,
        output_path=output_path,
        rendered=rendered,
        report_path=report_path,
    )


def run_pipeline_step(
    step: PipelineStep, document: Any, settings: PipelineSettings | None = None
) -> StepOutcome:
    """Apply one pipeline step to an in-memory document."""
    return _run_step(step, document, settings or PipelineSettings())


def _run_step(step: PipelineStep, document: Any, settings: PipelineSettings) -> StepOutcome:
    logger.debug("Running step %s", step.value)
    return _STEP_RUNNERS[step](document, settings)


def _run_allof_to_oneof(document: Any, settings: PipelineSettings) -> StepOutcome:
    step = PipelineStep.ALLOF_TO_ONEOF.value
    report = convert_allof_to_oneof(document, settings.allof_to_oneof)
    messages: list[str] = []
    if report.created_schemas:
        messages.append(
            f"[ALLOF-TO-ONEOF] Created wrapper schema(s): {', '.join(report.created_schemas)}"
        )
    else:
        messages.append("[INFO] No allOf + discriminator patterns found to convert.")
    messages.extend(f"[WARN] {warning.message}" for warning in report.warnings)

    changes = [SchemaChange(step, name, ChangeKind.CREATED) for name in report.created_schemas]
    changes.extend(
        SchemaChange(step, name, ChangeKind.REMOVED) for name in report.removed_schemas
    )
    changes.extend(
        SchemaChange(step, name, ChangeKind.DISCRIMINATOR_STRIPPED)
        for name in report.stripped_discriminators
    )
    warnings = tuple(
        WarningRow(
            step=step,
            kind=warning.kind.value,
            parent=warning.parent,
            child=warning.child,
            message=warning.message,
        )
        for warning in report.warnings
    )
    return StepOutcome(
        step=step, messages=tuple(messages), schema_changes=tuple(changes), warnings=warnings
    )


def _run_cleanup_discriminators(document: Any, _settings: PipelineSettings) -> StepOutcome:
    result = cleanup_discriminator_mappings(document)
    messages = [
        f"[CLEANUP-DISCRIMINATORS] Checked {result.schemas_checked} schema(s), "
        f"removed {result.mappings_removed} mapping(s)."
    ]
    messages.extend(
        f"[CLEANUP-DISCRIMINATORS] {detail.schema}: {', '.join(detail.removed_values)}"
        for detail in result.details
    )
    return StepOutcome(step=PipelineStep.CLEANUP_DISCRIMINATORS.value, messages=tuple(messages))


def _run_remove_dangling(document: Any, settings: PipelineSettings) -> StepOutcome:
    result = remove_dangling_refs(document, aggressive=settings.remove_dangling.aggressive)
    return StepOutcome(
        step=PipelineStep.REMOVE_DANGLING.value,
        messages=(f"[REMOVE-DANGLING] Removed {result.removed} dangling reference(s).",),
    )


def _run_remove_unused(document: Any, settings: PipelineSettings) -> StepOutcome:
    step = PipelineStep.REMOVE_UNUSED.value
    options = settings.remove_unused
    result = remove_unused_schemas(
        document,
        keep=options.keep,
        aggressive=options.aggressive,
        ignore_parents=options.ignore_parents,
    )
    messages = [f"[REMOVE] {name}" for name in result.removed]
    messages.extend(f"[REMOVE] {name}" for name in result.removed_components)
    if not messages:
        messages.append("[INFO] No unused schemas found.")
    changes = tuple(SchemaChange(step, name, ChangeKind.REMOVED) for name in result.removed)
    return StepOutcome(step=step, messages=tuple(messages), schema_changes=changes)


def _run_remove_single_composition(document: Any, settings: PipelineSettings) -> StepOutcome:
    step = PipelineStep.REMOVE_SINGLE_COMPOSITION.value
    result = remove_single_compositions(
        document, aggressive=settings.remove_single_composition.aggressive
    )
    messages = [f"[REMOVE] {name}" for name in result.removed]
    if not messages:
        messages.append("[INFO] No single-composition schemas found.")
    changes = tuple(SchemaChange(step, name, ChangeKind.REMOVED) for name in result.removed)
    return StepOutcome(step=step, messages=tuple(messages), schema_changes=changes)


def _run_optimize_allof(document: Any, _settings: PipelineSettings) -> StepOutcome:
    result = optimize_allof_compositions(document)
    messages = [
        f"[OPTIMIZE-ALLOF] {pruning.schema}: dropped {', '.join(pruning.removed_bases)}"
        for pruning in result.prunings
    ]
    if not messages:
        messages.append("[INFO] No redundant allOf references found.")
    return StepOutcome(step=PipelineStep.OPTIMIZE_ALLOF.value, messages=tuple(messages))


def _run_remove_oneof(document: Any, settings: PipelineSettings) -> StepOutcome:
    options = settings.remove_oneof
    try:
        result = remove_from_one_of(
            document, options.remove, parent=options.parent, guess=options.guess
        )
    except OneOfRemovalError as exc:
        raise RunExecutionError(str(exc)) from exc

    if options.parent is not None:
        messages = [
            f"[REMOVE-ONEOF] Removed '{removal.name}' from oneOf of '{options.parent}'."
            for removal in result.removals
        ]
        if not messages:
            messages.append(f"[WARN] No schemas removed from oneOf of '{options.parent}'.")
    else:
        counts: dict[str, int] = {}
        for removal in result.removals:
            counts[removal.name] = counts.get(removal.name, 0) + 1
        messages = [
            f"[REMOVE-ONEOF-GLOBAL] Removed '{name}' from {count} oneOf(s) globally."
            for name, count in counts.items()
        ]
        if not messages:
            messages.append("[WARN] No schemas removed globally.")
    return StepOutcome(step=PipelineStep.REMOVE_ONEOF.value, messages=tuple(messages))


def _run_seal(document: Any, settings: PipelineSettings) -> StepOutcome:
    step = PipelineStep.SEAL.value
    result = seal_schemas(
        document, use_unevaluated_properties=settings.seal.use_unevaluated_properties
    )
    messages = [
        f"[SEAL] Sealed {len(result.sealed)} schema(s) and "
        f"{result.inline_sealed} inline object(s)."
    ]
    if result.cores:
        messages.append(f"[SEAL] Created core schema(s): {', '.join(result.cores)}")
    changes = [SchemaChange(step, name, ChangeKind.CREATED) for name in result.cores]
    changes.extend(SchemaChange(step, name, ChangeKind.SEALED) for name in result.sealed)
    return StepOutcome(step=step, messages=tuple(messages), schema_changes=tuple(changes))


_STEP_RUNNERS: Mapping[PipelineStep, Callable[[Any, PipelineSettings], StepOutcome]] = {
    PipelineStep.ALLOF_TO_ONEOF: _run_allof_to_oneof,
    PipelineStep.CLEANUP_DISCRIMINATORS: _run_cleanup_discriminators,
    PipelineStep.REMOVE_DANGLING: _run_remove_dangling,
    PipelineStep.REMOVE_UNUSED: _run_remove_unused,
    PipelineStep.REMOVE_SINGLE_COMPOSITION: _run_remove_single_composition,
    PipelineStep.OPTIMIZE_ALLOF: _run_optimize_allof,
    PipelineStep.REMOVE_ONEOF: _run_remove_oneof,
    PipelineStep.SEAL: _run_seal,
}


def _has_schemas(document: Any) -> bool:
    if not isinstance(document, Mapping):
        return False
    components = document.get("components")
    if not isinstance(components, Mapping):
        return False
    schemas = components.get("schemas")
    return isinstance(schemas, Mapping) and bool(schemas)


def _write_output(document: Any, output_path: str | None) -> tuple[Path | None, str | None]:
    if not output_path or output_path == "-":
        return None, render_document(document)
    try:
        dump_document(document, output_path)
    except DocumentError as exc:
        raise RunExecutionError(str(exc)) from exc
    return Path(output_path).resolve(), None


def _write_report(
    request: RunRequest, steps: tuple[StepOutcome, ...], run_start: datetime
) -> Path:
    report = TransformReport(
        summary=RunSummary(
            run_start=run_start,
            input_label=_label(request.input_path),
            output_label=_label(request.output_path),
            steps=tuple(step.step for step in steps),
        ),
        schema_changes=tuple(change for step in steps for change in step.schema_changes),
        warnings=tuple(warning for step in steps for warning in step.warnings),
    )
    try:
        return write_transform_report(report, request.report_path)
    except OSError as exc:
        raise RunExecutionError(f"Failed to write report {request.report_path}: {exc}") from exc


def _label(path: str | None) -> str:
    if not path or path == "-":
        return "<stdio>"
    return str(Path(path).resolve())
