"""Inheritance graph tests."""

from __future__ import annotations

from oas_polymorph.schema_graph import build_inheritance_graph


def _extends(*parents: str) -> dict:
    return {"allOf": [{"$ref": f"#/components/schemas/{parent}"} for parent in parents]}


def test_descendants_follow_direct_allof_edges_transitively() -> None:
    graph = build_inheritance_graph(
        {
            "Animal": {"type": "object"},
            "Pet": _extends("Animal"),
            "Cat": _extends("Pet"),
            "Dog": _extends("Pet"),
            "Bird": _extends("Animal"),
        }
    )

    assert graph.children_of("Animal") == {"Pet", "Bird"}
    assert graph.descendants_of("Animal") == {"Pet", "Cat", "Dog", "Bird"}
    assert graph.descendants_of("Cat") == frozenset()
    assert graph.ancestors_of("Cat") == {"Pet", "Animal"}


def test_diamond_inheritance_is_not_double_counted() -> None:
    graph = build_inheritance_graph(
        {
            "Base": {"type": "object"},
            "Left": _extends("Base"),
            "Right": _extends("Base"),
            "Leaf": _extends("Left", "Right"),
        }
    )

    assert graph.descendants_of("Base") == {"Left", "Right", "Leaf"}
    assert graph.ancestors_of("Leaf") == {"Left", "Right", "Base"}
    assert graph.parents_of("Leaf") == ("Left", "Right")


def test_cycles_terminate() -> None:
    graph = build_inheritance_graph({"A": _extends("B"), "B": _extends("A")})

    assert graph.descendants_of("A") == {"A", "B"}
    assert graph.ancestors_of("A") == {"A", "B"}


def test_nested_refs_do_not_create_edges() -> None:
    graph = build_inheritance_graph(
        {
            "Owner": {"type": "object"},
            "Cat": {"allOf": [{"properties": {"owner": {"$ref": "#/components/schemas/Owner"}}}]},
        }
    )

    assert graph.descendants_of("Owner") == frozenset()
    assert not graph.inherits_from("Cat", "Owner")
