"""Nested union merge service."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from oas_polymorph.schema_graph import (
    UnionSchema,
    classify_schema,
    is_pure_union,
    ref_node_target,
)

logger = logging.getLogger(__name__)

_MAX_MERGE_ROUNDS = 10


def merge_nested_unions(schemas: Mapping[str, Any]) -> int:
    """Inline referenced pure unions into their referrers; return the inline count.

    A pure union holds nothing but `oneOf`, `discriminator` and `description`.
    Inlining is refused when both sides name different discriminator
    properties.
    """
    pure_unions = {name for name, schema in schemas.items() if is_pure_union(schema)}
    if not pure_unions:
        return 0

    inlined = 0
    for name, schema in schemas.items():
        if not isinstance(classify_schema(schema), UnionSchema):
            continue
        for _ in range(_MAX_MERGE_ROUNDS):
            merged = _merge_once(name, schema, schemas, pure_unions)
            if not merged:
                break
            inlined += merged
    return inlined


def _merge_once(
    name: str,
    schema: MutableMapping[str, Any],
    schemas: Mapping[str, Any],
    pure_unions: set[str],
) -> int:
    property_name = _property_name(schema)
    merged_mapping: dict[str, Any] = {}
    members: list[Any] = []
    inlined = 0

    for entry in schema["oneOf"]:
        target = ref_node_target(entry)
        if target is None or target == name or target not in pure_unions:
            members.append(entry)
            continue
        nested = schemas[target]
        nested_property = _property_name(nested)
        if property_name and nested_property and property_name != nested_property:
            logger.debug(
                "Not merging %s into %s: discriminator %r differs from %r",
                target,
                name,
                nested_property,
                property_name,
            )
            members.append(entry)
            continue
        property_name = property_name or nested_property
        members.extend(copy.deepcopy(nested["oneOf"]))
        for value, ref in _mapping_of(nested).items():
            merged_mapping.setdefault(value, ref)
        inlined += 1

    if not inlined:
        return 0

    schema["oneOf"] = _dedupe_members(members)
    if property_name:
        discriminator = schema.get("discriminator")
        if not isinstance(discriminator, MutableMapping):
            discriminator = schema["discriminator"] = {}
        discriminator.setdefault("propertyName", property_name)
        if merged_mapping:
            mapping = discriminator.get("mapping")
            if not isinstance(mapping, MutableMapping):
                mapping = discriminator["mapping"] = {}
            for value, ref in merged_mapping.items():
                mapping.setdefault(value, ref)
    logger.debug("Inlined %d nested union(s) into %s", inlined, name)
    return inlined


def _dedupe_members(members: list[Any]) -> list[Any]:
    seen: set[str] = set()
    unique: list[Any] = []
    for member in members:
        if isinstance(member, Mapping) and isinstance(member.get("$ref"), str):
            key = member["$ref"]
        else:
            key = json.dumps(member, sort_keys=True, default=str)
        if key in seen:
            continue
        seen.add(key)
        unique.append(member)
    return unique


def _property_name(schema: Any) -> str | None:
    discriminator = schema.get("discriminator") if isinstance(schema, Mapping) else None
    if not isinstance(discriminator, Mapping):
        return None
    value = discriminator.get("propertyName")
    return value if isinstance(value, str) and value else None


def _mapping_of(schema: Mapping[str, Any]) -> Mapping[str, Any]:
    discriminator = schema.get("discriminator")
    if not isinstance(discriminator, Mapping):
        return {}
    mapping = discriminator.get("mapping")
    return mapping if isinstance(mapping, Mapping) else {}
