"""Wrapper chaining and discriminator reconciliation service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from oas_polymorph.schema_graph import (
    ReferenceIndex,
    UnionSchema,
    classify_schema,
    name_to_ref,
    parse_discriminator,
    ref_node_target,
    ref_to_name,
)

from .transform_contracts import CreatedWrapper

logger = logging.getLogger(__name__)


def chain_wrappers(schemas: Mapping[str, Any], created: Sequence[CreatedWrapper]) -> int:
    """Redirect wrapper members that are themselves wrapped parents to their wrappers."""
    wrapper_by_parent = {entry.parent: entry.wrapper_name for entry in created}
    redirected = 0
    for entry in created:
        wrapper = schemas.get(entry.wrapper_name)
        if not isinstance(wrapper, Mapping):
            continue
        for member in _one_of_members(wrapper):
            target = ref_node_target(member)
            if target is None or target == entry.parent:
                continue
            nested = wrapper_by_parent.get(target)
            if nested is not None:
                member["$ref"] = name_to_ref(nested)
                redirected += 1
                logger.debug("Chained %s into %s", nested, entry.wrapper_name)
    return redirected


def reconcile_existing_unions(
    schemas: Mapping[str, Any], created: Sequence[CreatedWrapper]
) -> int:
    """Point pre-existing `oneOf` schemas and their mappings at new wrappers."""
    wrapper_by_parent = {entry.parent: entry.wrapper_name for entry in created}
    if not wrapper_by_parent:
        return 0
    own_schemas = _created_schema_names(created)
    updated = 0
    for name, schema in schemas.items():
        if name in own_schemas or not isinstance(classify_schema(schema), UnionSchema):
            continue
        for member in _one_of_members(schema):
            target = ref_node_target(member)
            if target in wrapper_by_parent:
                member["$ref"] = name_to_ref(wrapper_by_parent[target])
                updated += 1
        discriminator = schema.get("discriminator")
        mapping = discriminator.get("mapping") if isinstance(discriminator, Mapping) else None
        if isinstance(mapping, MutableMapping):
            for value, ref in list(mapping.items()):
                target = ref_to_name(ref)
                if target in wrapper_by_parent:
                    mapping[value] = name_to_ref(wrapper_by_parent[target])
                    updated += 1
    return updated


def strip_stale_discriminators(
    schemas: Mapping[str, Any],
    created: Sequence[CreatedWrapper],
    index: ReferenceIndex,
) -> tuple[str, ...]:
    """Drop discriminators superseded by a wrapper; return the affected schema names.

    Wrapped parents always lose theirs. An unwrapped schema loses its own when
    it is only ever inherited from and one of its mapped children got a wrapper.
    """
    wrapped = {entry.parent for entry in created}
    own_schemas = _created_schema_names(created)
    stripped: list[str] = []

    for name, schema in schemas.items():
        if name in own_schemas or not isinstance(schema, MutableMapping):
            continue
        if "discriminator" not in schema:
            continue
        if name in wrapped:
            del schema["discriminator"]
            stripped.append(name)
            continue
        if isinstance(classify_schema(schema), UnionSchema):
            continue
        if index.is_referenced_outside_composition(name):
            continue
        discriminator = parse_discriminator(schema)
        if discriminator is None:
            continue
        if any(ref_to_name(ref) in wrapped for ref in discriminator.mapping.values()):
            del schema["discriminator"]
            stripped.append(name)

    if stripped:
        logger.debug("Stripped discriminator from %s", ", ".join(stripped))
    return tuple(stripped)


def _created_schema_names(created: Sequence[CreatedWrapper]) -> set[str]:
    names = {entry.wrapper_name for entry in created}
    names.update(entry.helper_name for entry in created if entry.helper_name)
    return names


def _one_of_members(schema: Mapping[str, Any]) -> list[MutableMapping[str, Any]]:
    one_of = schema.get("oneOf")
    if not isinstance(one_of, list):
        return []
    return [member for member in one_of if isinstance(member, MutableMapping)]
