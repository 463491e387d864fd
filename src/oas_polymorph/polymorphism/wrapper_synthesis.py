"""Polymorphic wrapper synthesis service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from oas_polymorph.schema_graph import (
    ReferenceContext,
    ReferenceIndex,
    ReferenceLocation,
    name_to_ref,
    ref_to_name,
)

from .transform_contracts import (
    SELF_REFERENCE_SUFFIX,
    ChildValidation,
    CreatedWrapper,
    DiscriminatorInfo,
    TransformOptions,
    TransformWarning,
    WarningKind,
    WarningSink,
)

logger = logging.getLogger(__name__)

_MISSING = object()


def is_eligible(
    parent: str,
    validation: ChildValidation,
    index: ReferenceIndex,
    options: TransformOptions,
) -> bool:
    """Return True when `parent` needs a union wrapper."""
    if not index.is_referenced_outside_composition(parent):
        return False
    valid = validation.valid_children
    if not valid:
        return False
    if len(valid) == 1 and (options.ignore_single_specialization or valid[0] == parent):
        return False
    return True


def resolve_eligible_parents(
    parents: Mapping[str, DiscriminatorInfo],
    validations: Mapping[str, ChildValidation],
    index: ReferenceIndex,
    options: TransformOptions,
) -> tuple[tuple[str, ...], ReferenceIndex]:
    """Re-check eligibility until no new parent qualifies.

    Each planned wrapper references its children from a `oneOf`, which can turn
    a child that was only inherited from into a directly used schema. Returns
    the eligible parents in discovery order and the index augmented with the
    planned wrapper references.
    """
    eligible: set[str] = set()
    current = index
    for pass_number in range(1, options.max_eligibility_passes + 1):
        newly_eligible = [
            name
            for name in parents
            if name not in eligible and is_eligible(name, validations[name], current, options)
        ]
        if not newly_eligible:
            logger.debug("Eligibility stable after %d pass(es)", pass_number)
            break
        logger.debug("Eligibility pass %d added %s", pass_number, ", ".join(newly_eligible))
        eligible.update(newly_eligible)
        current = current.with_additional(
            _planned_union_references(newly_eligible, validations, options.wrapper_suffix)
        )
    else:
        logger.warning(
            "Wrapper eligibility did not settle within %d passes",
            options.max_eligibility_passes,
        )
    return tuple(name for name in parents if name in eligible), current


def synthesize_wrappers(
    schemas: MutableMapping[str, Any],
    parents: Mapping[str, DiscriminatorInfo],
    validations: Mapping[str, ChildValidation],
    eligible: tuple[str, ...],
    options: TransformOptions,
    on_warning: WarningSink,
) -> list[CreatedWrapper]:
    """Create one union wrapper per eligible parent, tagging children on the way."""
    eligible_set = set(eligible)
    created: list[CreatedWrapper] = []
    for parent in eligible:
        info = parents[parent]
        valid_children = validations[parent].valid_children
        value_by_child = _reverse_mapping(info.mapping, valid_children)

        helper_name: str | None = None
        for child in valid_children:
            value = value_by_child.get(child)
            if value is None:
                continue
            if child == parent:
                helper_name = _create_self_reference_helper(schemas, parent, info, value)
                continue
            if not options.add_discriminator_const or child in eligible_set:
                continue
            _tag_child(
                schemas,
                parent=parent,
                child=child,
                property_name=info.property_name,
                value=value,
                on_warning=on_warning,
            )

        wrapper_name = f"{parent}{options.wrapper_suffix}"
        schemas[wrapper_name] = _build_wrapper(parent, info, valid_children, value_by_child)
        logger.debug(
            "Created %s with %d member(s) for %s", wrapper_name, len(valid_children), parent
        )
        created.append(
            CreatedWrapper(
                parent=parent,
                wrapper_name=wrapper_name,
                child_names=valid_children,
                helper_name=helper_name,
            )
        )
    return created


def const_constraint(property_name: str, value: Any) -> dict[str, Any]:
    """Return the `allOf` item pinning a discriminator property to one value."""
    return {"type": "object", "properties": {property_name: {"const": value}}}


def wrapper_description(parent: str, property_name: str) -> str:
    return (
        f'Polymorphic {parent}. Use the "{property_name}" property to identify '
        "the concrete schema."
    )


def _planned_union_references(
    parents: list[str],
    validations: Mapping[str, ChildValidation],
    wrapper_suffix: str,
) -> list[tuple[str, ReferenceLocation]]:
    extra: list[tuple[str, ReferenceLocation]] = []
    for parent in parents:
        location = f"components.schemas.{parent}{wrapper_suffix}.oneOf"
        for child in validations[parent].valid_children:
            if child == parent:
                continue
            extra.append(
                (child, ReferenceLocation(location=location, context=ReferenceContext.ONE_OF))
            )
    return extra


def _reverse_mapping(mapping: Mapping[str, Any], valid_children: tuple[str, ...]) -> dict[str, str]:
    value_by_child: dict[str, str] = {}
    for value, ref in mapping.items():
        child = ref_to_name(ref)
        if child in valid_children:
            value_by_child.setdefault(child, value)
    return value_by_child


def _create_self_reference_helper(
    schemas: MutableMapping[str, Any],
    parent: str,
    info: DiscriminatorInfo,
    value: str,
) -> str:
    helper_name = f"{parent}{SELF_REFERENCE_SUFFIX}"
    schemas[helper_name] = {
        "allOf": [
            {"$ref": name_to_ref(parent)},
            const_constraint(info.property_name, value),
        ]
    }
    info.mapping[value] = name_to_ref(helper_name)
    logger.debug("Redirected %s self-reference %r to %s", parent, value, helper_name)
    return helper_name


def _build_wrapper(
    parent: str,
    info: DiscriminatorInfo,
    valid_children: tuple[str, ...],
    value_by_child: Mapping[str, str],
) -> dict[str, Any]:
    one_of = []
    for child in valid_children:
        value = value_by_child.get(child)
        target = info.mapping.get(value) if value is not None else None
        one_of.append({"$ref": target if isinstance(target, str) else name_to_ref(child)})

    wrapper: dict[str, Any] = {
        "oneOf": one_of,
        "discriminator": {"propertyName": info.property_name, "mapping": dict(info.mapping)},
    }
    if info.description is not None:
        wrapper["description"] = wrapper_description(parent, info.property_name)
    return wrapper


def _tag_child(
    schemas: MutableMapping[str, Any],
    *,
    parent: str,
    child: str,
    property_name: str,
    value: str,
    on_warning: WarningSink,
) -> None:
    schema = schemas.get(child)
    if not isinstance(schema, MutableMapping):
        return

    existing = _existing_const(schema, property_name)
    if existing is not _MISSING:
        if existing != value:
            on_warning(
                TransformWarning(
                    kind=WarningKind.CONFLICTING_CONST,
                    parent=parent,
                    child=child,
                    message=(
                        f'Schema "{child}" already pins "{property_name}" to {existing!r}; '
                        f'not adding {value!r} from "{parent}".'
                    ),
                )
            )
        return

    all_of = schema.get("allOf")
    if all_of is None:
        all_of = schema["allOf"] = []
    elif not isinstance(all_of, list):
        return
    all_of.append(const_constraint(property_name, value))
    logger.debug("Tagged %s with %s=%r", child, property_name, value)


def _existing_const(schema: Mapping[str, Any], property_name: str) -> Any:
    candidates = [schema]
    all_of = schema.get("allOf")
    if isinstance(all_of, list):
        candidates.extend(item for item in all_of if isinstance(item, Mapping))
    for candidate in candidates:
        properties = candidate.get("properties")
        if not isinstance(properties, Mapping):
            continue
        definition = properties.get(property_name)
        if isinstance(definition, Mapping) and "const" in definition:
            return definition["const"]
    return _MISSING
