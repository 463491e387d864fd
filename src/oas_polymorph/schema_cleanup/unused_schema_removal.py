"""Unused schema removal service."""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterator, Mapping, MutableMapping
from typing import Any
from urllib.parse import unquote

from oas_polymorph.schema_graph import iter_ref_holders, ref_to_name

from .cleanup_results import UnusedSchemaResult

logger = logging.getLogger(__name__)

PRUNABLE_COMPONENT_SECTIONS = (
    "parameters",
    "responses",
    "headers",
    "requestBodies",
    "examples",
    "links",
    "callbacks",
    "pathItems",
)

_COMPONENT_REF_PATTERN = re.compile(r"^#/components/([^/]+)/([^#/]+)$")


def remove_unused_schemas(
    document: Any,
    *,
    keep: Collection[str] = (),
    aggressive: bool = False,
    ignore_parents: Collection[str] = (),
) -> UnusedSchemaResult:
    """Delete schemas not reachable from `paths` or `webhooks`.

    Reachability follows `$ref`s into other component sections, then downward
    through schema bodies. A schema whose `allOf` extends a used schema is used
    too, unless that base is listed in `ignore_parents`.
    """
    if not isinstance(document, MutableMapping):
        return UnusedSchemaResult()
    components = document.get("components")
    if not isinstance(components, MutableMapping):
        return UnusedSchemaResult()
    schemas = components.get("schemas")
    if not isinstance(schemas, MutableMapping):
        return UnusedSchemaResult()

    used, used_components = _collect_roots(document, components)
    _close_over_usage(schemas, used, ignore_parents=set(ignore_parents))

    keep_set = set(keep)
    removed = tuple(name for name in schemas if name not in used and name not in keep_set)
    for name in removed:
        del schemas[name]
        logger.debug("Removed unused schema %s", name)

    removed_components: tuple[str, ...] = ()
    if aggressive:
        removed_components = _prune_components(document, components, used_components)
    return UnusedSchemaResult(removed=removed, removed_components=removed_components)


def _collect_roots(
    document: Mapping[str, Any], components: Mapping[str, Any]
) -> tuple[set[str], dict[str, set[str]]]:
    used: set[str] = set()
    used_components: dict[str, set[str]] = {}
    pending = [document.get("paths"), document.get("webhooks")]
    while pending:
        node = pending.pop()
        for ref in _refs_in(node):
            name = ref_to_name(ref)
            if name is not None:
                used.add(name)
                continue
            match = _COMPONENT_REF_PATTERN.match(ref)
            if match is None:
                continue
            section, component = match.group(1), unquote(match.group(2))
            seen = used_components.setdefault(section, set())
            if component in seen:
                continue
            seen.add(component)
            target_section = components.get(section)
            if isinstance(target_section, Mapping) and component in target_section:
                pending.append(target_section[component])
    return used, used_components


def _close_over_usage(
    schemas: Mapping[str, Any], used: set[str], *, ignore_parents: set[str]
) -> None:
    extenders = _extenders_by_base(schemas)
    frontier = set(used)
    while frontier:
        _expand_downward(schemas, used, frontier)
        promoted: set[str] = set()
        for base in list(used):
            if base in ignore_parents:
                continue
            for child in extenders.get(base, ()):
                if child not in used:
                    promoted.add(child)
        used.update(promoted)
        frontier = promoted


def _expand_downward(schemas: Mapping[str, Any], used: set[str], frontier: set[str]) -> None:
    queue = list(frontier)
    while queue:
        name = queue.pop()
        for ref in _refs_in(schemas.get(name)):
            target = ref_to_name(ref)
            if target is not None and target not in used:
                used.add(target)
                queue.append(target)


def _extenders_by_base(schemas: Mapping[str, Any]) -> dict[str, set[str]]:
    extenders: dict[str, set[str]] = {}
    for name, schema in schemas.items():
        for base in _all_of_bases(schema):
            extenders.setdefault(base, set()).add(name)
    return extenders


def _all_of_bases(node: Any) -> Iterator[str]:
    for path, holder in iter_ref_holders(node, skip_sample_data=False):
        if len(path) >= 2 and path[-2] == "allOf" and isinstance(path[-1], int):
            base = ref_to_name(holder["$ref"])
            if base is not None:
                yield base


def _refs_in(node: Any) -> Iterator[str]:
    for _, holder in iter_ref_holders(node, skip_sample_data=False):
        yield holder["$ref"]


def _prune_components(
    document: MutableMapping[str, Any],
    components: MutableMapping[str, Any],
    used_components: Mapping[str, set[str]],
) -> tuple[str, ...]:
    removed: list[str] = []
    for section in PRUNABLE_COMPONENT_SECTIONS:
        entries = components.get(section)
        if not isinstance(entries, MutableMapping):
            continue
        used = used_components.get(section, set())
        for name in [name for name in entries if name not in used]:
            del entries[name]
            removed.append(f"{section}/{name}")
        if not entries:
            del components[section]
    schemas = components.get("schemas")
    if isinstance(schemas, Mapping) and not schemas:
        del components["schemas"]
    if not components:
        del document["components"]
    return tuple(removed)
