"""Schema pointer helper tests."""

from __future__ import annotations

import pytest
from oas_polymorph.schema_graph import name_to_ref, ref_node_target, ref_to_name


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("#/components/schemas/Animal", "Animal"),
        ("#/schemas/Animal", "Animal"),
        ("#/components/schemas/Pet%20Store", "Pet Store"),
        ("#/components/schemas/a~1b", "a/b"),
        ("#/components/schemas/a~0b", "a~b"),
    ],
)
def test_ref_to_name_parses_local_schema_pointers(ref: str, expected: str) -> None:
    assert ref_to_name(ref) == expected


@pytest.mark.parametrize(
    "ref",
    [
        "other.yaml#/components/schemas/Animal",
        "https://example.com/api.yaml#/components/schemas/Animal",
        "#/components/responses/NotFound",
        "#/components/schemas/Animal/properties/name",
        "",
        None,
        42,
    ],
)
def test_ref_to_name_ignores_non_local_pointers(ref: object) -> None:
    assert ref_to_name(ref) is None


def test_name_to_ref_escapes_pointer_tokens() -> None:
    assert name_to_ref("Animal") == "#/components/schemas/Animal"
    assert name_to_ref("a/b") == "#/components/schemas/a~1b"
    assert ref_to_name(name_to_ref("x~y/z")) == "x~y/z"


def test_ref_node_target_requires_string_ref() -> None:
    assert ref_node_target({"$ref": "#/components/schemas/Cat"}) == "Cat"
    assert ref_node_target({"$ref": 1}) is None
    assert ref_node_target({"type": "object"}) is None
    assert ref_node_target("#/components/schemas/Cat") is None
