"""allOf-to-oneOf conversion use case."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from oas_polymorph.schema_graph import (
    build_inheritance_graph,
    build_reference_index,
)

from .child_validation import validate_children
from .discriminator_discovery import find_discriminator_parents
from .nested_union_merge import merge_nested_unions
from .reference_rewriting import rewrite_references
from .transform_contracts import (
    CreatedWrapper,
    PolymorphismReport,
    TransformOptions,
    TransformWarning,
    WarningSink,
)
from .wrapper_chaining import (
    chain_wrappers,
    reconcile_existing_unions,
    strip_stale_discriminators,
)
from .wrapper_synthesis import resolve_eligible_parents, synthesize_wrappers

logger = logging.getLogger(__name__)


def allof_to_oneof(
    document: Any,
    options: TransformOptions | None = None,
    *,
    on_warning: WarningSink | None = None,
) -> Any:
    """Convert allOf + discriminator hierarchies into oneOf wrappers in place.

    Returns the same document. Data-quality warnings go to `on_warning`; they
    are dropped when no sink is given.
    """
    _convert(document, options or TransformOptions(), on_warning or _discard_warning)
    return document


def convert_allof_to_oneof(
    document: Any, options: TransformOptions | None = None
) -> PolymorphismReport:
    """Run `allof_to_oneof` and report what changed."""
    warnings: list[TransformWarning] = []
    schemas = _schemas_of(document)
    names_before = tuple(schemas) if schemas is not None else ()

    created, stripped = _convert(document, options or TransformOptions(), warnings.append)

    names_after = tuple(schemas) if schemas is not None else ()
    return PolymorphismReport(
        document=document,
        created_schemas=tuple(name for name in names_after if name not in names_before),
        removed_schemas=tuple(name for name in names_before if name not in names_after),
        wrapped_parents=tuple(entry.parent for entry in created),
        stripped_discriminators=stripped,
        warnings=tuple(warnings),
    )


def _convert(
    document: Any, options: TransformOptions, on_warning: WarningSink
) -> tuple[list[CreatedWrapper], tuple[str, ...]]:
    schemas = _schemas_of(document)
    if not schemas:
        logger.debug("No components.schemas; nothing to convert")
        return [], ()

    parents = find_discriminator_parents(schemas)
    logger.debug("Discriminator parents: %s", ", ".join(parents) or "none")

    created: list[CreatedWrapper] = []
    stripped: tuple[str, ...] = ()
    if parents:
        graph = build_inheritance_graph(schemas)
        index = build_reference_index(document)
        validations = {
            name: validate_children(name, info.mapping, schemas, graph)
            for name, info in parents.items()
        }
        for validation in validations.values():
            for warning in validation.warnings:
                on_warning(warning)

        eligible, augmented_index = resolve_eligible_parents(
            parents, validations, index, options
        )
        created = synthesize_wrappers(
            schemas, parents, validations, eligible, options, on_warning
        )
        if created:
            replacements = {entry.parent: entry.wrapper_name for entry in created}
            own_schemas = {entry.wrapper_name for entry in created}
            own_schemas.update(entry.helper_name for entry in created if entry.helper_name)
            rewrite_references(document, replacements, skip_schemas=own_schemas)
            chain_wrappers(schemas, created)
            reconcile_existing_unions(schemas, created)
            stripped = strip_stale_discriminators(schemas, created, augmented_index)

    if options.merge_nested_one_of:
        merge_nested_unions(schemas)
    return created, stripped


def _schemas_of(document: Any) -> MutableMapping[str, Any] | None:
    if not isinstance(document, MutableMapping):
        return None
    components = document.get("components")
    if not isinstance(components, MutableMapping):
        return None
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, MutableMapping) else None


def _discard_warning(_: TransformWarning) -> None:
    return None
