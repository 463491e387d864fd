"""Schema cleanup entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MappingCleanupDetail:
    """Discriminator values dropped from one schema's mapping."""

    schema: str
    removed_values: tuple[str, ...]


@dataclass(frozen=True)
class MappingCleanupResult:
    """Outcome of pruning discriminator mappings."""

    schemas_checked: int = 0
    mappings_removed: int = 0
    details: tuple[MappingCleanupDetail, ...] = ()


@dataclass(frozen=True)
class DanglingRefResult:
    """Outcome of dropping references to missing targets."""

    removed: int = 0


@dataclass(frozen=True)
class UnusedSchemaResult:
    """Outcome of garbage-collecting unreferenced schemas."""

    removed: tuple[str, ...] = ()
    removed_components: tuple[str, ...] = ()


@dataclass(frozen=True)
class SealingResult:
    """Outcome of closing object schemas against extra properties."""

    sealed: tuple[str, ...] = ()
    cores: tuple[str, ...] = ()
    inline_sealed: int = 0


@dataclass(frozen=True)
class SingleCompositionResult:
    """Outcome of inlining one-member composition schemas."""

    removed: tuple[str, ...] = ()
    rewritten: int = 0


@dataclass(frozen=True)
class AllOfPruning:
    """Redundant bases dropped from one schema's `allOf`."""

    schema: str
    removed_bases: tuple[str, ...]


@dataclass(frozen=True)
class AllOfOptimizationResult:
    """Outcome of dropping `allOf` bases already inherited through a sibling."""

    prunings: tuple[AllOfPruning, ...] = ()


@dataclass(frozen=True)
class OneOfRemoval:
    """One schema dropped from one `oneOf`."""

    location: str
    name: str


@dataclass(frozen=True)
class OneOfRemovalResult:
    """Outcome of removing schemas from `oneOf` unions."""

    removals: tuple[OneOfRemoval, ...] = ()
    mappings_removed: int = 0
