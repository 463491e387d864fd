"""Reference rewriting service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Mapping
from typing import Any

from oas_polymorph.schema_graph import NodePath, iter_ref_holders, name_to_ref, ref_to_name

logger = logging.getLogger(__name__)

REWRITTEN_COMPONENT_SECTIONS = (
    "requestBodies",
    "responses",
    "parameters",
    "callbacks",
    "links",
    "pathItems",
)


def rewrite_references(
    document: Mapping[str, Any],
    replacements: Mapping[str, str],
    *,
    skip_schemas: Collection[str] = (),
) -> int:
    """Point every usage of a wrapped parent at its wrapper; return the rewrite count.

    `replacements` maps parent names to wrapper names. Any local pointer that
    resolves to a parent is rewritten, whatever its spelling.

    Inside `components.schemas`, direct items of a schema's own `allOf` keep
    pointing at the real base. `components.headers` and example payloads are
    left alone.
    """
    if not replacements:
        return 0
    rewritten = 0
    components = document.get("components")
    components = components if isinstance(components, Mapping) else {}

    schemas = components.get("schemas")
    if isinstance(schemas, Mapping):
        for name, schema in schemas.items():
            if name in skip_schemas:
                continue
            rewritten += _rewrite_tree(schema, replacements, keep=_is_inheritance_item)

    sections = [document.get("paths"), document.get("webhooks")]
    sections.extend(components.get(key) for key in REWRITTEN_COMPONENT_SECTIONS)
    for section in sections:
        if isinstance(section, Mapping):
            rewritten += _rewrite_tree(section, replacements)

    logger.debug("Rewrote %d reference(s) to wrappers", rewritten)
    return rewritten


def _rewrite_tree(
    node: Any,
    replacements: Mapping[str, str],
    keep: Callable[[NodePath], bool] | None = None,
) -> int:
    count = 0
    for path, holder in iter_ref_holders(node):
        if keep is not None and keep(path):
            continue
        name = ref_to_name(holder["$ref"])
        if name is None or name not in replacements:
            continue
        holder["$ref"] = name_to_ref(replacements[name])
        count += 1
    return count


def _is_inheritance_item(path: NodePath) -> bool:
    return len(path) == 2 and path[0] == "allOf" and isinstance(path[1], int)
