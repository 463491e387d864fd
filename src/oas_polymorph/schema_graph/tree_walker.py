"""Generic document tree traversal helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableMapping, MutableSequence
from typing import Any

NodePath = tuple[str | int, ...]
NodeTransformer = Callable[[Any], bool]
NodePredicate = Callable[[Any], bool]

_SAMPLE_DATA_KEYS = frozenset({"example", "examples"})
_NAMED_MAP_KEYS = frozenset(
    {"properties", "patternProperties", "schemas", "$defs", "definitions", "dependentSchemas"}
)


def iter_nodes(node: Any, path: NodePath = ()) -> Iterator[tuple[NodePath, Any]]:
    """Yield every mapping and sequence under `node` depth-first, with its path."""
    if isinstance(node, MutableMapping):
        yield path, node
        for key, value in node.items():
            yield from iter_nodes(value, path + (key,))
    elif isinstance(node, MutableSequence):
        yield path, node
        for index, item in enumerate(node):
            yield from iter_nodes(item, path + (index,))


def iter_ref_holders(
    node: Any,
    path: NodePath = (),
    *,
    skip_sample_data: bool = True,
) -> Iterator[tuple[NodePath, MutableMapping[str, Any]]]:
    """Yield `(path, mapping)` for every mapping that carries a string `$ref`.

    With `skip_sample_data`, `example`/`examples` values are not descended into
    unless the key names a property or schema.
    """
    if isinstance(node, MutableMapping):
        if isinstance(node.get("$ref"), str):
            yield path, node
        for key, value in node.items():
            if skip_sample_data and is_sample_data(path, key):
                continue
            yield from iter_ref_holders(value, path + (key,), skip_sample_data=skip_sample_data)
    elif isinstance(node, MutableSequence):
        for index, item in enumerate(node):
            yield from iter_ref_holders(item, path + (index,), skip_sample_data=skip_sample_data)


def is_sample_data(path: NodePath, key: Any) -> bool:
    """Return True when `key` under the mapping at `path` holds example payloads."""
    if key not in _SAMPLE_DATA_KEYS:
        return False
    return not path or path[-1] not in _NAMED_MAP_KEYS


def transform_nodes(node: Any, transformer: NodeTransformer) -> int:
    """Apply `transformer` to every container node; return how many reported a change."""
    modified = 0
    for _, container in list(iter_nodes(node)):
        if transformer(container):
            modified += 1
    return modified


def collect_matching(node: Any, predicate: NodePredicate) -> list[Any]:
    """Return every container node under `node` accepted by `predicate`."""
    return [container for _, container in iter_nodes(node) if predicate(container)]


def format_path(path: NodePath) -> str:
    """Render a node path as a dotted location, indices in brackets."""
    rendered = ""
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}" if rendered else str(part)
    return rendered or "$"
