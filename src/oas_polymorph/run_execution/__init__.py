"""Run execution domain exports."""

from .run_contracts import RunOutcome, RunRequest, StepOutcome
from .transform_run_use_case import (
    NO_SCHEMAS_MESSAGE,
    RunExecutionError,
    execute_transform_run,
    run_pipeline_step,
)

__all__ = [
    "NO_SCHEMAS_MESSAGE",
    "RunRequest",
    "RunOutcome",
    "StepOutcome",
    "RunExecutionError",
    "execute_transform_run",
    "run_pipeline_step",
]
