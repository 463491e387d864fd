"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from oas_polymorph.polymorphism import TransformOptions


class PipelineStep(str, Enum):
    """Transform steps a pipeline can run, by CLI command name."""

    ALLOF_TO_ONEOF = "allof-to-oneof"
    CLEANUP_DISCRIMINATORS = "cleanup-discriminators"
    REMOVE_DANGLING = "remove-dangling"
    REMOVE_UNUSED = "remove-unused"
    REMOVE_SINGLE_COMPOSITION = "remove-single-composition"
    OPTIMIZE_ALLOF = "optimize-allof"
    REMOVE_ONEOF = "remove-oneof"
    SEAL = "seal"


DEFAULT_PIPELINE = (PipelineStep.ALLOF_TO_ONEOF,)


@dataclass(frozen=True)
class RemoveUnusedSettings:
    """Unused-schema garbage collection settings."""

    keep: tuple[str, ...] = ()
    ignore_parents: tuple[str, ...] = ()
    aggressive: bool = False


@dataclass(frozen=True)
class RemoveDanglingSettings:
    """Dangling-reference removal settings."""

    aggressive: bool = False


@dataclass(frozen=True)
class SingleCompositionSettings:
    """Single-composition schema removal settings."""

    aggressive: bool = False


@dataclass(frozen=True)
class RemoveOneOfSettings:
    """oneOf member removal settings; `remove` holds names or wildcard patterns."""

    remove: tuple[str, ...] = ()
    parent: str | None = None
    guess: bool = False


@dataclass(frozen=True)
class SealSettings:
    """Schema sealing settings."""

    use_unevaluated_properties: bool = True


@dataclass(frozen=True)
class PipelineSettings:
    """Top-level configuration aggregate."""

    path: Path | None = None
    steps: tuple[PipelineStep, ...] = DEFAULT_PIPELINE
    allof_to_oneof: TransformOptions = field(default_factory=TransformOptions)
    remove_unused: RemoveUnusedSettings = field(default_factory=RemoveUnusedSettings)
    remove_dangling: RemoveDanglingSettings = field(default_factory=RemoveDanglingSettings)
    remove_single_composition: SingleCompositionSettings = field(
        default_factory=SingleCompositionSettings
    )
    remove_oneof: RemoveOneOfSettings = field(default_factory=RemoveOneOfSettings)
    seal: SealSettings = field(default_factory=SealSettings)
