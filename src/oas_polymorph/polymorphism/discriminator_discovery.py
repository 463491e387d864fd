"""Discriminator parent discovery service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from oas_polymorph.schema_graph import (
    CompositionSchema,
    ObjectSchema,
    classify_schema,
    ref_to_name,
)

from .transform_contracts import DiscriminatorInfo


def find_discriminator_parents(schemas: Mapping[str, Any]) -> dict[str, DiscriminatorInfo]:
    """Return candidate polymorphic parents in schema order.

    A candidate carries a discriminator with more than one mapping entry, or a
    single entry pointing back at itself. Schemas that already hold a `oneOf`
    are unions, not inheritance bases, and are skipped along with bare `$ref`
    nodes.
    """
    parents: dict[str, DiscriminatorInfo] = {}
    for name, schema in schemas.items():
        variant = classify_schema(schema)
        if not isinstance(variant, (CompositionSchema, ObjectSchema)):
            continue
        discriminator = variant.discriminator
        if discriminator is None or not discriminator.mapping:
            continue
        if not _is_polymorphic_mapping(name, discriminator.mapping):
            continue
        description = schema.get("description")
        parents[name] = DiscriminatorInfo(
            property_name=discriminator.property_name,
            mapping=dict(discriminator.mapping),
            description=description if isinstance(description, str) else None,
        )
    return parents


def _is_polymorphic_mapping(name: str, mapping: Mapping[str, Any]) -> bool:
    if len(mapping) > 1:
        return True
    (only_ref,) = mapping.values()
    return ref_to_name(only_ref) == name
