"""Discriminator discovery and child validation tests."""

from __future__ import annotations

from oas_polymorph.polymorphism import (
    WarningKind,
    find_discriminator_parents,
    validate_children,
)
from oas_polymorph.schema_graph import build_inheritance_graph

_PREFIX = "#/components/schemas/"


def _with_mapping(**mapping: str) -> dict:
    return {
        "type": "object",
        "discriminator": {
            "propertyName": "kind",
            "mapping": {value: f"{_PREFIX}{target}" for value, target in mapping.items()},
        },
    }


def test_parents_need_more_than_one_entry_or_a_self_reference() -> None:
    schemas = {
        "Animal": _with_mapping(cat="Cat", dog="Dog"),
        "Lonely": _with_mapping(cat="Cat"),
        "Selfish": _with_mapping(me="Selfish"),
        "Bare": {"type": "object", "discriminator": {"propertyName": "kind"}},
        "Union": {"oneOf": [{"$ref": f"{_PREFIX}Cat"}], **_with_mapping(a="Cat", b="Dog")},
    }

    parents = find_discriminator_parents(schemas)

    assert list(parents) == ["Animal", "Selfish"]
    assert parents["Animal"].property_name == "kind"


def test_only_object_and_composition_schemas_can_be_parents() -> None:
    schemas = {
        "Pet": {"allOf": [{"$ref": f"{_PREFIX}Base"}], **_with_mapping(cat="Cat", dog="Dog")},
        "Alias": {"$ref": f"{_PREFIX}Pet", **_with_mapping(cat="Cat", dog="Dog")},
        "Broken": ["not", "a", "schema"],
        "Animal": _with_mapping(cat="Cat", dog="Dog"),
    }

    assert list(find_discriminator_parents(schemas)) == ["Pet", "Animal"]


def test_discovered_mapping_is_a_private_copy() -> None:
    schemas = {"Animal": {**_with_mapping(cat="Cat", dog="Dog"), "description": "Base."}}

    info = find_discriminator_parents(schemas)["Animal"]
    info.mapping["cat"] = f"{_PREFIX}Changed"

    assert schemas["Animal"]["discriminator"]["mapping"]["cat"] == f"{_PREFIX}Cat"
    assert info.description == "Base."


def test_validate_children_splits_valid_children_from_warnings() -> None:
    schemas = {
        "Animal": _with_mapping(),
        "Cat": {"allOf": [{"$ref": f"{_PREFIX}Animal"}]},
        "Kitten": {"allOf": [{"$ref": f"{_PREFIX}Cat"}]},
        "Rock": {"type": "object"},
    }
    mapping = {
        "self": f"{_PREFIX}Animal",
        "cat": f"{_PREFIX}Cat",
        "kitten": f"{_PREFIX}Kitten",
        "again": f"{_PREFIX}Cat",
        "rock": f"{_PREFIX}Rock",
        "ghost": f"{_PREFIX}Ghost",
        "remote": "remote.yaml#/Animal",
    }

    validation = validate_children("Animal", mapping, schemas, build_inheritance_graph(schemas))

    assert validation.valid_children == ("Animal", "Cat", "Kitten")
    assert validation.mapped_children == ("Animal", "Cat", "Kitten", "Rock")
    assert [warning.kind for warning in validation.warnings] == [
        WarningKind.NOT_INHERITING,
        WarningKind.MISSING_SCHEMA,
        WarningKind.INVALID_REFERENCE,
    ]
    assert validation.warnings[0].message == (
        'Schema "Rock" in discriminator mapping does not inherit from "Animal". '
        "It will be kept in the mapping but not in oneOf."
    )
    assert validation.warnings[1].message == (
        'Schema "Ghost" referenced in "Animal" discriminator mapping does not exist'
    )
    assert validation.warnings[2].child is None
