"""Schema node entities.

Raw document nodes are plain mappings. `classify_schema` turns one of them into
a tagged variant so callers can dispatch with `isinstance` instead of poking at
key sets.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .schema_refs import ref_to_name

PURE_UNION_KEYS = frozenset({"oneOf", "discriminator", "description"})


@dataclass(frozen=True)
class Discriminator:
    """Discriminator property plus its value-to-pointer mapping."""

    property_name: str
    mapping: Mapping[str, Any]


@dataclass(frozen=True)
class ReferenceNode:
    """A `{ $ref: <pointer> }` node; `target` is None for non-local pointers."""

    pointer: str
    target: str | None


@dataclass(frozen=True)
class UnionSchema:
    """A schema carrying a `oneOf` sequence."""

    members: tuple[Any, ...]
    discriminator: Discriminator | None
    keys: frozenset[str]

    @property
    def is_pure(self) -> bool:
        """Return True when the schema is nothing but a discriminated union."""
        return bool(self.members) and self.keys <= PURE_UNION_KEYS


@dataclass(frozen=True)
class CompositionSchema:
    """A schema built from `allOf` and/or `anyOf` without a `oneOf`."""

    all_of: tuple[Any, ...]
    any_of: tuple[Any, ...]
    discriminator: Discriminator | None


@dataclass(frozen=True)
class ObjectSchema:
    """Any other schema mapping (plain object, scalar type, empty schema)."""

    discriminator: Discriminator | None


@dataclass(frozen=True)
class OpaqueNode:
    """A node that is not a mapping at all."""

    value: Any


SchemaNode = ReferenceNode | UnionSchema | CompositionSchema | ObjectSchema | OpaqueNode


def classify_schema(node: Any) -> SchemaNode:
    """Classify a raw document node into its schema variant."""
    if not isinstance(node, Mapping):
        return OpaqueNode(value=node)

    pointer = node.get("$ref")
    if isinstance(pointer, str):
        return ReferenceNode(pointer=pointer, target=ref_to_name(pointer))

    discriminator = parse_discriminator(node)
    one_of = node.get("oneOf")
    if isinstance(one_of, Sequence) and not isinstance(one_of, str):
        return UnionSchema(
            members=tuple(one_of),
            discriminator=discriminator,
            keys=frozenset(node.keys()),
        )

    all_of = _sequence_member(node, "allOf")
    any_of = _sequence_member(node, "anyOf")
    if all_of or any_of:
        return CompositionSchema(all_of=all_of, any_of=any_of, discriminator=discriminator)
    return ObjectSchema(discriminator=discriminator)


def parse_discriminator(node: Any) -> Discriminator | None:
    """Return the discriminator of a schema mapping when it is well formed."""
    if not isinstance(node, Mapping):
        return None
    raw = node.get("discriminator")
    if not isinstance(raw, Mapping):
        return None
    property_name = raw.get("propertyName")
    if not isinstance(property_name, str) or not property_name:
        return None
    mapping = raw.get("mapping")
    if not isinstance(mapping, Mapping):
        mapping = {}
    return Discriminator(property_name=property_name, mapping=mapping)


def is_pure_union(node: Any) -> bool:
    """Return True for schemas holding only `oneOf`, `discriminator` and `description`."""
    variant = classify_schema(node)
    return isinstance(variant, UnionSchema) and variant.is_pure


def all_of_parent_names(node: Any) -> tuple[str, ...]:
    """Return local schema names referenced directly by a schema's `allOf` items."""
    variant = classify_schema(node)
    if not isinstance(variant, CompositionSchema):
        all_of = _sequence_member(node, "allOf") if isinstance(node, Mapping) else ()
    else:
        all_of = variant.all_of
    names: list[str] = []
    for item in all_of:
        item_variant = classify_schema(item)
        if isinstance(item_variant, ReferenceNode) and item_variant.target is not None:
            names.append(item_variant.target)
    return tuple(names)


def _sequence_member(node: Mapping[str, Any], key: str) -> tuple[Any, ...]:
    value = node.get(key)
    if isinstance(value, Sequence) and not isinstance(value, str):
        return tuple(value)
    return ()
