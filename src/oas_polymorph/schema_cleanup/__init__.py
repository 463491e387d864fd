"""Schema cleanup exports."""

from .allof_optimization import optimize_allof_compositions
from .cleanup_results import (
    AllOfOptimizationResult,
    AllOfPruning,
    DanglingRefResult,
    MappingCleanupDetail,
    MappingCleanupResult,
    OneOfRemoval,
    OneOfRemovalResult,
    SealingResult,
    SingleCompositionResult,
    UnusedSchemaResult,
)
from .dangling_ref_removal import remove_dangling_refs
from .discriminator_mapping_cleanup import cleanup_discriminator_mappings
from .name_patterns import build_name_filter, matches_any, wildcard_matcher
from .one_of_member_removal import OneOfRemovalError, remove_from_one_of
from .schema_sealing import seal_schemas
from .single_composition_removal import remove_single_compositions
from .unused_schema_removal import remove_unused_schemas

__all__ = [
    "AllOfOptimizationResult",
    "AllOfPruning",
    "DanglingRefResult",
    "MappingCleanupDetail",
    "MappingCleanupResult",
    "OneOfRemoval",
    "OneOfRemovalError",
    "OneOfRemovalResult",
    "SealingResult",
    "SingleCompositionResult",
    "UnusedSchemaResult",
    "build_name_filter",
    "cleanup_discriminator_mappings",
    "matches_any",
    "optimize_allof_compositions",
    "remove_dangling_refs",
    "remove_from_one_of",
    "remove_single_compositions",
    "remove_unused_schemas",
    "seal_schemas",
    "wildcard_matcher",
]
