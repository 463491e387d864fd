"""Local schema pointer helpers."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

SCHEMA_REF_PREFIX = "#/components/schemas/"

_LOCAL_SCHEMA_REF_PATTERN = re.compile(r"^#/(?:components/)?schemas/([^#/]+)$")


def ref_to_name(ref: Any) -> str | None:
    """Return the bare schema name of a local schema pointer, or None.

    Non-local pointers (other files, URLs, other component sections) are inert
    and always yield None.
    """
    if not isinstance(ref, str):
        return None
    match = _LOCAL_SCHEMA_REF_PATTERN.match(ref)
    if match is None:
        return None
    return _decode_pointer_token(unquote(match.group(1)))


def name_to_ref(name: str) -> str:
    """Format a schema name as a `#/components/schemas/<name>` pointer."""
    return SCHEMA_REF_PREFIX + name.replace("~", "~0").replace("/", "~1")


def is_ref_node(node: Any) -> bool:
    """Return True for mappings carrying a string `$ref`."""
    return isinstance(node, Mapping) and isinstance(node.get("$ref"), str)


def ref_node_target(node: Any) -> str | None:
    """Return the local schema name a `{ $ref }` node points at, if any."""
    if not is_ref_node(node):
        return None
    return ref_to_name(node["$ref"])


def _decode_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")
