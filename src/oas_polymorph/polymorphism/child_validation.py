"""Mapped child validation service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from oas_polymorph.schema_graph import InheritanceGraph, ref_to_name

from .transform_contracts import ChildValidation, TransformWarning, WarningKind


def validate_children(
    parent: str,
    mapping: Mapping[str, Any],
    schemas: Mapping[str, Any],
    graph: InheritanceGraph,
) -> ChildValidation:
    """Split a parent's mapped children into union members and warnings.

    Unresolvable or missing targets are dropped from consideration. Targets
    that do not inherit from `parent` stay in the mapping but never join the
    union.
    """
    descendants = graph.descendants_of(parent)
    valid: list[str] = []
    mapped: list[str] = []
    warnings: list[TransformWarning] = []

    for ref in mapping.values():
        child = ref_to_name(ref)
        if child is None:
            warnings.append(
                TransformWarning(
                    kind=WarningKind.INVALID_REFERENCE,
                    parent=parent,
                    child=None,
                    message=f'Invalid reference in discriminator mapping for "{parent}": {ref}',
                )
            )
            continue
        if child not in schemas:
            warnings.append(
                TransformWarning(
                    kind=WarningKind.MISSING_SCHEMA,
                    parent=parent,
                    child=child,
                    message=(
                        f'Schema "{child}" referenced in "{parent}" discriminator mapping '
                        "does not exist"
                    ),
                )
            )
            continue
        if child not in mapped:
            mapped.append(child)
        if child == parent or child in descendants:
            if child not in valid:
                valid.append(child)
            continue
        warnings.append(
            TransformWarning(
                kind=WarningKind.NOT_INHERITING,
                parent=parent,
                child=child,
                message=(
                    f'Schema "{child}" in discriminator mapping does not inherit from '
                    f'"{parent}". It will be kept in the mapping but not in oneOf.'
                ),
            )
        )

    return ChildValidation(
        valid_children=tuple(valid),
        mapped_children=tuple(mapped),
        warnings=tuple(warnings),
    )
