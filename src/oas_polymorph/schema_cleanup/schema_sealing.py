"""Schema sealing service.

Every object shape exposed by the API is closed against undeclared
properties, without breaking schemas other schemas extend through `allOf`:

* a schema that is only extended stays open;
* a schema that is extended and also used directly is split into an open
  `<Name>Core` carrying the body and a sealed `<Name>` wrapper over it, and
  every `allOf` extension is pointed at the core;
* other object schemas are sealed, `allOf` compositions always with
  `unevaluatedProperties` since `additionalProperties` cannot see the
  properties of sibling members;
* inline object schemas nested in properties, items and map values are
  sealed the same way.

Schemas already carrying `additionalProperties` or `unevaluatedProperties`
are left as they are.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from oas_polymorph.schema_graph import NodePath, iter_ref_holders, name_to_ref, ref_to_name

from .cleanup_results import SealingResult

logger = logging.getLogger(__name__)

ADDITIONAL_PROPERTIES = "additionalProperties"
UNEVALUATED_PROPERTIES = "unevaluatedProperties"
CORE_SUFFIX = "Core"

_COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


def seal_schemas(document: Any, *, use_unevaluated_properties: bool = True) -> SealingResult:
    """Close object schemas in `components.schemas` against extra properties."""
    schemas = _schemas_of(document)
    if schemas is None:
        return SealingResult()
    keyword = UNEVALUATED_PROPERTIES if use_unevaluated_properties else ADDITIONAL_PROPERTIES

    extended, used = _usage(document)
    cores: dict[str, str] = {}
    for name in list(schemas):
        schema = schemas[name]
        if name not in extended or name not in used:
            continue
        if not _is_object_like(schema) or _is_decided(schema):
            continue
        core_name = f"{name}{CORE_SUFFIX}"
        if core_name in schemas:
            logger.warning("Not splitting %s: %s already exists", name, core_name)
            continue
        schemas[core_name], schemas[name] = _split(schema, core_name)
        cores[name] = core_name
    if cores:
        _point_extensions_at_cores(document, cores)

    sealed = list(cores)
    for name, schema in schemas.items():
        if name in cores or name in extended or name in cores.values():
            continue
        if not isinstance(schema, MutableMapping) or _is_decided(schema):
            continue
        if _seal_node(schema, keyword):
            sealed.append(name)

    inline_sealed = sum(_seal_nested(schema, keyword) for schema in schemas.values())
    logger.debug(
        "Sealed %d schema(s) and %d inline object(s) with %s",
        len(sealed),
        inline_sealed,
        keyword,
    )
    return SealingResult(
        sealed=tuple(sealed), cores=tuple(cores.values()), inline_sealed=inline_sealed
    )


def _usage(document: Any) -> tuple[set[str], set[str]]:
    extended: set[str] = set()
    used: set[str] = set()
    for path, holder in iter_ref_holders(document):
        name = ref_to_name(holder["$ref"])
        if name is None:
            continue
        if _is_extension(path):
            extended.add(name)
        else:
            used.add(name)
    return extended, used


def _split(schema: Mapping[str, Any], core_name: str) -> tuple[dict[str, Any], dict[str, Any]]:
    core = copy.deepcopy(dict(schema))
    wrapper: dict[str, Any] = {}
    description = core.pop("description", None)
    if description is not None:
        wrapper["description"] = description
    wrapper["allOf"] = [{"$ref": name_to_ref(core_name)}]
    wrapper[UNEVALUATED_PROPERTIES] = False
    return core, wrapper


def _point_extensions_at_cores(document: Any, cores: Mapping[str, str]) -> None:
    for path, holder in iter_ref_holders(document):
        if not _is_extension(path):
            continue
        name = ref_to_name(holder["$ref"])
        if name is not None and name in cores:
            holder["$ref"] = name_to_ref(cores[name])


def _seal_node(node: MutableMapping[str, Any], keyword: str) -> bool:
    if "$ref" in node or not _is_object_like(node):
        return False
    if "allOf" in node:
        node[UNEVALUATED_PROPERTIES] = False
        return True
    if "anyOf" in node or "oneOf" in node:
        return False
    node[keyword] = False
    return True


def _seal_nested(node: Any, keyword: str) -> int:
    count = 0
    for child in _subschemas(node):
        if isinstance(child, MutableMapping) and not _is_decided(child):
            count += int(_seal_node(child, keyword))
        count += _seal_nested(child, keyword)
    return count


def _subschemas(node: Any) -> Iterator[Any]:
    if not isinstance(node, Mapping):
        return
    properties = node.get("properties")
    if isinstance(properties, Mapping):
        yield from properties.values()
    for key in ("items", ADDITIONAL_PROPERTIES):
        value = node.get(key)
        if isinstance(value, Mapping):
            yield value
    for key in _COMPOSITION_KEYS:
        members = node.get(key)
        if isinstance(members, list):
            for member in members:
                yield from _subschemas(member)


def _is_extension(path: NodePath) -> bool:
    return len(path) >= 2 and path[-2] == "allOf" and isinstance(path[-1], int)


def _is_object_like(schema: Any) -> bool:
    if not isinstance(schema, Mapping):
        return False
    declared = schema.get("type")
    if isinstance(declared, str) and declared != "object":
        return False
    if isinstance(declared, list) and "object" not in declared:
        return False
    return (
        declared is not None
        or "properties" in schema
        or any(key in schema for key in _COMPOSITION_KEYS)
    )


def _is_decided(schema: Mapping[str, Any]) -> bool:
    return ADDITIONAL_PROPERTIES in schema or UNEVALUATED_PROPERTIES in schema


def _schemas_of(document: Any) -> MutableMapping[str, Any] | None:
    if not isinstance(document, Mapping):
        return None
    components = document.get("components")
    if not isinstance(components, Mapping):
        return None
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, MutableMapping) else None
