"""Single-composition schema removal service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from oas_polymorph.schema_graph import iter_nodes, iter_ref_holders, ref_to_name

from .cleanup_results import SingleCompositionResult

logger = logging.getLogger(__name__)

_COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")
_PRESERVED_KEYS = frozenset({"properties"})


def remove_single_compositions(
    document: Any, *, aggressive: bool = False
) -> SingleCompositionResult:
    """Replace schemas that only wrap one `$ref` in a composition by that `$ref`.

    A schema qualifies when its sole key is `allOf`, `anyOf` or `oneOf` holding
    exactly one `$ref` item. With `aggressive`, extra keys such as
    `description` or `discriminator` are tolerated unless one of them is
    `properties`. Chains collapse to their final target; cycles are kept.
    """
    schemas = _schemas_of(document)
    if schemas is None:
        return SingleCompositionResult()

    targets: dict[str, str] = {}
    for name, schema in schemas.items():
        target = _single_composition_target(schema, aggressive=aggressive)
        if target is not None:
            targets[name] = target
    replacements = _collapse_chains(targets)
    if not replacements:
        return SingleCompositionResult()

    rewritten = 0
    for _, holder in iter_ref_holders(document):
        target_name = ref_to_name(holder["$ref"])
        if target_name is not None and target_name in replacements:
            holder["$ref"] = replacements[target_name]
            rewritten += 1
    for _, node in iter_nodes(schemas):
        mapping = _mapping_of(node)
        if mapping is None:
            continue
        for value, ref in mapping.items():
            target_name = ref_to_name(ref)
            if target_name is not None and target_name in replacements:
                mapping[value] = replacements[target_name]

    removed = tuple(name for name in schemas if name in replacements)
    for name in removed:
        del schemas[name]
        logger.debug("Replaced single-composition schema %s", name)
    return SingleCompositionResult(removed=removed, rewritten=rewritten)


def _single_composition_target(schema: Any, *, aggressive: bool) -> str | None:
    if not isinstance(schema, Mapping) or not schema:
        return None
    keyword = next((key for key in schema if key in _COMPOSITION_KEYS), None)
    if keyword is None:
        return None
    extra = set(schema) - {keyword}
    if extra and (not aggressive or extra & _PRESERVED_KEYS):
        return None
    items = schema[keyword]
    if not isinstance(items, list) or len(items) != 1:
        return None
    item = items[0]
    if isinstance(item, Mapping) and isinstance(item.get("$ref"), str):
        return item["$ref"]
    return None


def _collapse_chains(targets: Mapping[str, str]) -> dict[str, str]:
    resolved: dict[str, str] = {}
    for name, ref in targets.items():
        seen = {name}
        current = ref_to_name(ref)
        while current in targets and current not in seen:
            seen.add(current)
            ref = targets[current]
            current = ref_to_name(ref)
        if current in seen:
            logger.debug("Keeping %s, its composition chain is cyclic", name)
            continue
        resolved[name] = ref
    return resolved


def _schemas_of(document: Any) -> MutableMapping[str, Any] | None:
    if not isinstance(document, Mapping):
        return None
    components = document.get("components")
    if not isinstance(components, Mapping):
        return None
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, MutableMapping) else None


def _mapping_of(node: Any) -> MutableMapping[str, Any] | None:
    if not isinstance(node, Mapping):
        return None
    discriminator = node.get("discriminator")
    if not isinstance(discriminator, Mapping):
        return None
    mapping = discriminator.get("mapping")
    return mapping if isinstance(mapping, MutableMapping) else None
