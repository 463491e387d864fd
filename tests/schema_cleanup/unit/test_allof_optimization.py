"""Redundant allOf base pruning tests."""

from __future__ import annotations

from oas_polymorph.schema_cleanup import AllOfPruning, optimize_allof_compositions

_PREFIX = "#/components/schemas/"


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"{_PREFIX}{name}"}


def test_bases_inherited_through_a_sibling_are_dropped() -> None:
    document = {
        "components": {
            "schemas": {
                "A": {},
                "B": {"allOf": [_ref("A")]},
                "C": {"allOf": [_ref("B"), _ref("A")]},
                "D": {
                    "allOf": [
                        _ref("C"),
                        _ref("A"),
                        {"type": "object", "properties": {"d": {"type": "boolean"}}},
                    ]
                },
            }
        }
    }

    result = optimize_allof_compositions(document)
    schemas = document["components"]["schemas"]

    assert schemas["C"]["allOf"] == [_ref("B")]
    assert schemas["D"]["allOf"] == [
        _ref("C"),
        {"type": "object", "properties": {"d": {"type": "boolean"}}},
    ]
    assert result.prunings == (
        AllOfPruning(schema="C", removed_bases=("A",)),
        AllOfPruning(schema="D", removed_bases=("A",)),
    )


def test_inline_members_and_unrelated_bases_are_kept() -> None:
    inline = {"type": "object", "properties": {"c": {"type": "number"}}}
    document = {
        "components": {
            "schemas": {
                "A": {"type": "object", "properties": {"a": {"type": "string"}}},
                "Audit": {"type": "object"},
                "C": {"allOf": [_ref("A"), _ref("Audit"), inline]},
            }
        }
    }

    result = optimize_allof_compositions(document)

    assert result.prunings == ()
    assert document["components"]["schemas"]["C"]["allOf"] == [_ref("A"), _ref("Audit"), inline]


def test_mutually_inheriting_bases_are_left_alone() -> None:
    document = {
        "components": {
            "schemas": {
                "A": {"allOf": [_ref("B")]},
                "B": {"allOf": [_ref("A")]},
                "C": {"allOf": [_ref("A"), _ref("B")]},
            }
        }
    }

    result = optimize_allof_compositions(document)

    assert result.prunings == ()
    assert document["components"]["schemas"]["C"]["allOf"] == [_ref("A"), _ref("B")]


def test_documents_without_schemas_are_ignored() -> None:
    assert optimize_allof_compositions({"paths": {}}).prunings == ()
