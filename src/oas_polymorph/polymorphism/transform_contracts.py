"""Polymorphism transform entities."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_WRAPPER_SUFFIX = "Polymorphic"
DEFAULT_MAX_ELIGIBILITY_PASSES = 10
SELF_REFERENCE_SUFFIX = "OneOf"


@dataclass(frozen=True)
class TransformOptions:
    """Switches for one allOf-to-oneOf conversion."""

    add_discriminator_const: bool = True
    ignore_single_specialization: bool = False
    merge_nested_one_of: bool = False
    wrapper_suffix: str = DEFAULT_WRAPPER_SUFFIX
    max_eligibility_passes: int = DEFAULT_MAX_ELIGIBILITY_PASSES


class WarningKind(str, Enum):
    """Category of a data-quality warning raised during conversion."""

    INVALID_REFERENCE = "invalid_reference"
    MISSING_SCHEMA = "missing_schema"
    NOT_INHERITING = "not_inheriting"
    CONFLICTING_CONST = "conflicting_const"


@dataclass(frozen=True)
class TransformWarning:
    """Recoverable data-quality issue found in a discriminator hierarchy."""

    kind: WarningKind
    parent: str
    child: str | None
    message: str


WarningSink = Callable[[TransformWarning], None]


@dataclass
class DiscriminatorInfo:
    """Discriminator of a candidate parent; `mapping` is a private copy."""

    property_name: str
    mapping: dict[str, Any]
    description: str | None = None


@dataclass(frozen=True)
class ChildValidation:
    """Outcome of checking a parent's mapped children against the graph."""

    valid_children: tuple[str, ...]
    mapped_children: tuple[str, ...]
    warnings: tuple[TransformWarning, ...]


@dataclass(frozen=True)
class CreatedWrapper:
    """A union schema synthesized for one parent."""

    parent: str
    wrapper_name: str
    child_names: tuple[str, ...]
    helper_name: str | None = None


@dataclass(frozen=True)
class PolymorphismReport:  # pylint: disable=too-many-instance-attributes
    """Outcome of `convert_allof_to_oneof`."""

    document: Any
    created_schemas: tuple[str, ...] = ()
    removed_schemas: tuple[str, ...] = ()
    wrapped_parents: tuple[str, ...] = ()
    stripped_discriminators: tuple[str, ...] = ()
    warnings: tuple[TransformWarning, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return bool(
            self.created_schemas or self.removed_schemas or self.stripped_discriminators
        )
