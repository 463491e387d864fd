"""Polymorphism exports."""

from .allof_to_oneof import allof_to_oneof, convert_allof_to_oneof
from .child_validation import validate_children
from .discriminator_discovery import find_discriminator_parents
from .nested_union_merge import merge_nested_unions
from .reference_rewriting import rewrite_references
from .transform_contracts import (
    DEFAULT_WRAPPER_SUFFIX,
    ChildValidation,
    CreatedWrapper,
    DiscriminatorInfo,
    PolymorphismReport,
    TransformOptions,
    TransformWarning,
    WarningKind,
    WarningSink,
)
from .wrapper_chaining import (
    chain_wrappers,
    reconcile_existing_unions,
    strip_stale_discriminators,
)
from .wrapper_synthesis import (
    const_constraint,
    is_eligible,
    resolve_eligible_parents,
    synthesize_wrappers,
)

__all__ = [
    "DEFAULT_WRAPPER_SUFFIX",
    "ChildValidation",
    "CreatedWrapper",
    "DiscriminatorInfo",
    "PolymorphismReport",
    "TransformOptions",
    "TransformWarning",
    "WarningKind",
    "WarningSink",
    "allof_to_oneof",
    "chain_wrappers",
    "const_constraint",
    "convert_allof_to_oneof",
    "find_discriminator_parents",
    "is_eligible",
    "merge_nested_unions",
    "reconcile_existing_unions",
    "resolve_eligible_parents",
    "rewrite_references",
    "strip_stale_discriminators",
    "synthesize_wrappers",
    "validate_children",
]
