"""Discriminator mapping cleanup service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from oas_polymorph.schema_graph import ref_to_name

from .cleanup_results import MappingCleanupDetail, MappingCleanupResult

logger = logging.getLogger(__name__)


def cleanup_discriminator_mappings(document: Any) -> MappingCleanupResult:
    """Remove mapping entries whose local schema target does not exist.

    Non-local or unparseable targets are left alone.
    """
    schemas = _schemas_of(document)
    if schemas is None:
        return MappingCleanupResult()

    schemas_checked = 0
    mappings_removed = 0
    details: list[MappingCleanupDetail] = []
    for name, schema in schemas.items():
        mapping = _mapping_of(schema)
        if mapping is None:
            continue
        schemas_checked += 1
        removed = [value for value, ref in mapping.items() if _is_missing(ref, schemas)]
        for value in removed:
            del mapping[value]
        if removed:
            mappings_removed += len(removed)
            details.append(MappingCleanupDetail(schema=name, removed_values=tuple(removed)))
            logger.debug("Dropped %s from %s discriminator mapping", ", ".join(removed), name)

    return MappingCleanupResult(
        schemas_checked=schemas_checked,
        mappings_removed=mappings_removed,
        details=tuple(details),
    )


def _is_missing(ref: Any, schemas: Mapping[str, Any]) -> bool:
    target = ref_to_name(ref)
    return target is not None and target not in schemas


def _schemas_of(document: Any) -> Mapping[str, Any] | None:
    if not isinstance(document, Mapping):
        return None
    components = document.get("components")
    if not isinstance(components, Mapping):
        return None
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, Mapping) else None


def _mapping_of(schema: Any) -> MutableMapping[str, Any] | None:
    if not isinstance(schema, Mapping):
        return None
    discriminator = schema.get("discriminator")
    if not isinstance(discriminator, Mapping):
        return None
    mapping = discriminator.get("mapping")
    return mapping if isinstance(mapping, MutableMapping) else None
