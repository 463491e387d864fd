"""Schema graph exports."""

from .inheritance_graph import InheritanceGraph, build_inheritance_graph
from .reference_index import (
    ReferenceContext,
    ReferenceIndex,
    ReferenceLocation,
    build_reference_index,
    classify_context,
)
from .schema_nodes import (
    PURE_UNION_KEYS,
    CompositionSchema,
    Discriminator,
    ObjectSchema,
    OpaqueNode,
    ReferenceNode,
    SchemaNode,
    UnionSchema,
    all_of_parent_names,
    classify_schema,
    is_pure_union,
    parse_discriminator,
)
from .schema_refs import SCHEMA_REF_PREFIX, is_ref_node, name_to_ref, ref_node_target, ref_to_name
from .tree_walker import (
    NodePath,
    collect_matching,
    format_path,
    is_sample_data,
    iter_nodes,
    iter_ref_holders,
    transform_nodes,
)

__all__ = [
    "SCHEMA_REF_PREFIX",
    "PURE_UNION_KEYS",
    "CompositionSchema",
    "Discriminator",
    "InheritanceGraph",
    "NodePath",
    "ObjectSchema",
    "OpaqueNode",
    "ReferenceContext",
    "ReferenceIndex",
    "ReferenceLocation",
    "ReferenceNode",
    "SchemaNode",
    "UnionSchema",
    "all_of_parent_names",
    "build_inheritance_graph",
    "build_reference_index",
    "classify_context",
    "classify_schema",
    "collect_matching",
    "format_path",
    "is_pure_union",
    "is_ref_node",
    "is_sample_data",
    "iter_nodes",
    "iter_ref_holders",
    "name_to_ref",
    "parse_discriminator",
    "ref_node_target",
    "ref_to_name",
    "transform_nodes",
]
