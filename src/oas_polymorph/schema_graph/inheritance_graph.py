"""Inheritance graph service."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from typing import Any

from .schema_nodes import all_of_parent_names


class InheritanceGraph:
    """Direct parent-to-children adjacency derived from `allOf` references.

    Descendant queries are memoized. Ancestor queries walk `allOf` upward from
    the schema bodies themselves. Both tolerate cycles.
    """

    def __init__(self, schemas: Mapping[str, Any], edges: Mapping[str, set[str]]) -> None:
        self._schemas = schemas
        self._edges = edges
        self._descendants: dict[str, frozenset[str]] = {}

    def children_of(self, name: str) -> frozenset[str]:
        """Return the direct children of `name`."""
        return frozenset(self._edges.get(name, ()))

    def descendants_of(self, name: str) -> frozenset[str]:
        """Return every schema that transitively inherits from `name`."""
        cached = self._descendants.get(name)
        if cached is not None:
            return cached

        visited: set[str] = set()
        queue = deque(self._edges.get(name, ()))
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            queue.extend(self._edges.get(current, ()))

        result = frozenset(visited)
        self._descendants[name] = result
        return result

    def parents_of(self, name: str) -> tuple[str, ...]:
        """Return the local schemas referenced directly by `name`'s `allOf`."""
        return all_of_parent_names(self._schemas.get(name))

    def ancestors_of(self, name: str) -> frozenset[str]:
        """Return every schema `name` transitively inherits from."""
        visited: set[str] = set()
        queue = deque(self.parents_of(name))
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            queue.extend(self.parents_of(current))
        return frozenset(visited)

    def inherits_from(self, child: str, parent: str) -> bool:
        return child in self.descendants_of(parent)


def build_inheritance_graph(schemas: Mapping[str, Any]) -> InheritanceGraph:
    """Scan every schema's `allOf` and return the direct adjacency graph."""
    edges: dict[str, set[str]] = {}
    for child_name, schema in schemas.items():
        for parent_name in all_of_parent_names(schema):
            edges.setdefault(parent_name, set()).add(child_name)
    return InheritanceGraph(schemas, edges)
