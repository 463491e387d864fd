"""Dangling reference removal service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any
from urllib.parse import unquote

from oas_polymorph.schema_graph import ref_to_name, transform_nodes

from .cleanup_results import DanglingRefResult

logger = logging.getLogger(__name__)


def remove_dangling_refs(document: Any, *, aggressive: bool = False) -> DanglingRefResult:
    """Delete every `{ $ref }` node whose target schema is missing.

    The containing key or list item is removed. With `aggressive`, external
    pointers and in-document pointers that do not resolve are removed as well.
    """
    if not isinstance(document, Mapping):
        return DanglingRefResult()
    schemas = _schema_names(document)
    removed = 0

    def _is_dangling(node: Any) -> bool:
        if not isinstance(node, Mapping) or not isinstance(node.get("$ref"), str):
            return False
        ref = node["$ref"]
        name = ref_to_name(ref)
        if name is not None:
            return name not in schemas
        if not aggressive:
            return False
        if not ref.startswith("#"):
            return True
        return not _pointer_resolves(document, ref)

    def _prune(container: Any) -> bool:
        nonlocal removed
        if isinstance(container, MutableMapping):
            doomed_keys = [key for key, value in container.items() if _is_dangling(value)]
            for key in doomed_keys:
                del container[key]
            removed += len(doomed_keys)
            return bool(doomed_keys)
        if isinstance(container, MutableSequence):
            kept = [item for item in container if not _is_dangling(item)]
            dropped = len(container) - len(kept)
            if dropped:
                container[:] = kept
                removed += dropped
            return bool(dropped)
        return False

    transform_nodes(document, _prune)
    if removed:
        logger.debug("Removed %d dangling reference(s)", removed)
    return DanglingRefResult(removed=removed)


def _schema_names(document: Mapping[str, Any]) -> set[str]:
    components = document.get("components")
    if not isinstance(components, Mapping):
        return set()
    schemas = components.get("schemas")
    return set(schemas) if isinstance(schemas, Mapping) else set()


def _pointer_resolves(document: Any, ref: str) -> bool:
    node = document
    for raw_token in ref[1:].split("/")[1:]:
        token = unquote(raw_token).replace("~1", "/").replace("~0", "~")
        if isinstance(node, Mapping):
            if token not in node:
                return False
            node = node[token]
        elif isinstance(node, Sequence) and not isinstance(node, str):
            if not token.isdigit() or int(token) >= len(node):
                return False
            node = node[int(token)]
        else:
            return False
    return True
