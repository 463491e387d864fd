"""Reference context index service."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .schema_refs import ref_to_name
from .tree_walker import NodePath, format_path, iter_ref_holders

_COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


class ReferenceContext(str, Enum):
    """Structural role of one schema reference."""

    ALL_OF = "allOf"
    ANY_OF = "anyOf"
    ONE_OF = "oneOf"
    DIRECT = "direct"


@dataclass(frozen=True)
class ReferenceLocation:
    """One place a schema is referenced from."""

    location: str
    context: ReferenceContext


class ReferenceIndex:
    """Schema name to every location (and context) it is referenced from."""

    def __init__(self, locations: Mapping[str, tuple[ReferenceLocation, ...]]) -> None:
        self._locations = dict(locations)

    def __contains__(self, name: object) -> bool:
        return name in self._locations

    def names(self) -> tuple[str, ...]:
        return tuple(self._locations)

    def locations_of(self, name: str) -> tuple[ReferenceLocation, ...]:
        return self._locations.get(name, ())

    def is_referenced_outside_composition(self, name: str) -> bool:
        """Return True when `name` has at least one `direct`, `oneOf` or `anyOf` reference."""
        return any(
            entry.context is not ReferenceContext.ALL_OF for entry in self.locations_of(name)
        )

    def with_additional(
        self, extra: Iterable[tuple[str, ReferenceLocation]]
    ) -> ReferenceIndex:
        """Return a new index holding this index's entries plus `extra`."""
        merged: dict[str, list[ReferenceLocation]] = {
            name: list(entries) for name, entries in self._locations.items()
        }
        for name, entry in extra:
            bucket = merged.setdefault(name, [])
            if entry not in bucket:
                bucket.append(entry)
        return ReferenceIndex({name: tuple(entries) for name, entries in merged.items()})


def build_reference_index(document: Any) -> ReferenceIndex:
    """Index every local schema reference in `document` by structural context.

    Discriminator mapping values are plain strings, not `$ref` nodes, so they
    never count as usage. Example payloads are skipped.
    """
    locations: dict[str, list[ReferenceLocation]] = {}
    for path, holder in iter_ref_holders(document):
        name = ref_to_name(holder["$ref"])
        if name is None:
            continue
        entry = ReferenceLocation(location=format_path(path), context=classify_context(path))
        locations.setdefault(name, []).append(entry)
    return ReferenceIndex({name: tuple(entries) for name, entries in locations.items()})


def classify_context(path: NodePath) -> ReferenceContext:
    """Return the context of a `$ref` holder from its nearest enclosing array.

    Walks outward to the closest list index; the key holding that list decides
    the context. A holder with no enclosing array, or one under any other list
    key, is `direct`.
    """
    for position in range(len(path) - 1, 0, -1):
        if isinstance(path[position], int):
            key = path[position - 1]
            if key in _COMPOSITION_KEYS:
                return ReferenceContext(key)
            return ReferenceContext.DIRECT
    return ReferenceContext.DIRECT
