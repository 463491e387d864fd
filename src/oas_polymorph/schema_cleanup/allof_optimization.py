"""Redundant allOf base pruning service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from oas_polymorph.schema_graph import build_inheritance_graph, ref_node_target

from .cleanup_results import AllOfOptimizationResult, AllOfPruning

logger = logging.getLogger(__name__)


def optimize_allof_compositions(document: Any) -> AllOfOptimizationResult:
    """Drop `allOf` base references already inherited through a sibling base.

    When `C.allOf` lists both `B` and `A` and `B` extends `A` (directly or
    through a chain), the `A` item is redundant. Only `$ref` items of
    top-level `allOf` arrays in `components.schemas` are considered; inline
    members stay. Mutually inheriting bases are left alone.
    """
    schemas = _schemas_of(document)
    if schemas is None:
        return AllOfOptimizationResult()

    graph = build_inheritance_graph(schemas)
    prunings: list[AllOfPruning] = []
    for name, schema in schemas.items():
        all_of = schema.get("allOf") if isinstance(schema, Mapping) else None
        if not isinstance(all_of, list):
            continue
        named: list[tuple[int, str]] = []
        for index, item in enumerate(all_of):
            base = ref_node_target(item)
            if base is not None:
                named.append((index, base))
        if len(named) < 2:
            continue

        redundant: set[int] = set()
        for index, base in named:
            for other_index, other in named:
                if other_index == index or other == base:
                    continue
                if base in graph.ancestors_of(other) and other not in graph.ancestors_of(base):
                    redundant.add(index)
                    break
        if not redundant:
            continue
        all_of[:] = [item for index, item in enumerate(all_of) if index not in redundant]
        removed = tuple(base for index, base in named if index in redundant)
        prunings.append(AllOfPruning(schema=name, removed_bases=removed))
        logger.debug("Dropped redundant base(s) %s from %s", ", ".join(removed), name)
    return AllOfOptimizationResult(prunings=tuple(prunings))


def _schemas_of(document: Any) -> Mapping[str, Any] | None:
    if not isinstance(document, Mapping):
        return None
    components = document.get("components")
    if not isinstance(components, Mapping):
        return None
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, Mapping) else None
