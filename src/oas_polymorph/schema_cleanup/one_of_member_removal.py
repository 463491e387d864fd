"""oneOf member removal service."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from oas_polymorph.schema_graph import (
    NodePath,
    format_path,
    is_sample_data,
    iter_nodes,
    ref_node_target,
    ref_to_name,
)

from .cleanup_results import OneOfRemoval, OneOfRemovalResult
from .name_patterns import NamePredicate, build_name_filter

logger = logging.getLogger(__name__)


class OneOfRemovalError(Exception):
    """Raised when a oneOf removal request cannot be applied."""


def remove_from_one_of(
    document: Any,
    patterns: Iterable[str],
    *,
    parent: str | None = None,
    guess: bool = False,
) -> OneOfRemovalResult:
    """Drop `$ref` members matching `patterns` from `oneOf` unions.

    With `parent`, only that component schema's own `oneOf` is edited;
    otherwise every `oneOf` in the document is. Discriminator mapping entries
    next to an edited `oneOf` that point at a dropped schema go too. `guess`
    also selects `<name>_*` variants of each plain pattern.
    """
    pattern_list = list(patterns)
    if guess:
        pattern_list.extend(
            f"{pattern}_*" for pattern in list(pattern_list) if not pattern.startswith("!")
        )
    selects = build_name_filter(pattern_list)
    if selects is None:
        raise OneOfRemovalError("At least one schema name or pattern is required.")

    if parent is not None:
        schema = _schema_named(document, parent)
        if schema is None:
            logger.debug("Schema %s not found, nothing removed", parent)
            return OneOfRemovalResult()
        targets = [(("components", "schemas", parent), schema)]
    else:
        targets = [
            (path, node)
            for path, node in iter_nodes(document)
            if isinstance(node, MutableMapping) and not _under_sample_data(path)
        ]

    removals: list[OneOfRemoval] = []
    mappings_removed = 0
    for path, node in targets:
        dropped = _drop_members(node, selects)
        if not dropped:
            continue
        location = format_path(path + ("oneOf",))
        removals.extend(OneOfRemoval(location=location, name=name) for name in dropped)
        mappings_removed += _drop_mapping_entries(node, set(dropped))
        logger.debug("Removed %s from %s", ", ".join(dropped), location)
    return OneOfRemovalResult(removals=tuple(removals), mappings_removed=mappings_removed)


def _drop_members(node: MutableMapping[str, Any], selects: NamePredicate) -> list[str]:
    members = node.get("oneOf")
    if not isinstance(members, list):
        return []
    kept: list[Any] = []
    dropped: list[str] = []
    for member in members:
        name = ref_node_target(member)
        if name is not None and selects(name):
            dropped.append(name)
        else:
            kept.append(member)
    if dropped:
        members[:] = kept
    return dropped


def _drop_mapping_entries(node: Mapping[str, Any], names: set[str]) -> int:
    discriminator = node.get("discriminator")
    if not isinstance(discriminator, Mapping):
        return 0
    mapping = discriminator.get("mapping")
    if not isinstance(mapping, MutableMapping):
        return 0
    doomed = [value for value, ref in mapping.items() if ref_to_name(ref) in names]
    for value in doomed:
        del mapping[value]
    return len(doomed)


def _schema_named(document: Any, name: str) -> MutableMapping[str, Any] | None:
    if not isinstance(document, Mapping):
        return None
    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    schema = schemas.get(name) if isinstance(schemas, Mapping) else None
    return schema if isinstance(schema, MutableMapping) else None


def _under_sample_data(path: NodePath) -> bool:
    return any(is_sample_data(path[:index], key) for index, key in enumerate(path))
