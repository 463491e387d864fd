"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from oas_polymorph.polymorphism import TransformOptions

from .runtime_settings import (
    DEFAULT_PIPELINE,
    PipelineSettings,
    PipelineStep,
    RemoveDanglingSettings,
    RemoveOneOfSettings,
    RemoveUnusedSettings,
    SealSettings,
    SingleCompositionSettings,
)

_ALLOF_TO_ONEOF_KEYS = {
    "add_discriminator_const": "addDiscriminatorConst",
    "ignore_single_specialization": "ignoreSingleSpecialization",
    "merge_nested_one_of": "mergeNestedOneOf",
    "wrapper_suffix": "wrapperSuffix",
    "max_eligibility_passes": "maxEligibilityPasses",
}


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> PipelineSettings:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    steps = _parse_pipeline_section(parsed.get("pipeline"))
    remove_oneof = _parse_remove_oneof_section(parsed.get("remove_oneof"))
    if PipelineStep.REMOVE_ONEOF in steps and not remove_oneof.remove:
        raise ConfigurationError(
            "remove_oneof.remove must name at least one schema when remove-oneof runs."
        )

    return PipelineSettings(
        path=path,
        steps=steps,
        allof_to_oneof=parse_transform_options(parsed.get("allof_to_oneof")),
        remove_unused=_parse_remove_unused_section(parsed.get("remove_unused")),
        remove_dangling=_parse_remove_dangling_section(parsed.get("remove_dangling")),
        remove_single_composition=_parse_remove_single_composition_section(
            parsed.get("remove_single_composition")
        ),
        remove_oneof=remove_oneof,
        seal=_parse_seal_section(parsed.get("seal")),
    )


def parse_transform_options(value: Any) -> TransformOptions:
    """Build transform options from an `allof_to_oneof` section."""
    section = _optional_mapping(value, "allof_to_oneof")
    known = set(_ALLOF_TO_ONEOF_KEYS) | set(_ALLOF_TO_ONEOF_KEYS.values())
    unknown = sorted(str(key) for key in section if key not in known)
    if unknown:
        raise ConfigurationError(f"allof_to_oneof.{unknown[0]} is not a recognized option.")

    values: dict[str, Any] = {}
    for key, alias in _ALLOF_TO_ONEOF_KEYS.items():
        if key in section and alias in section:
            raise ConfigurationError(f"allof_to_oneof.{key} is set twice (also as {alias}).")
        if key in section:
            values[key] = section[key]
        elif alias in section:
            values[key] = section[alias]

    defaults = TransformOptions()
    return TransformOptions(
        add_discriminator_const=_optional_bool(
            values.get("add_discriminator_const"),
            "allof_to_oneof.add_discriminator_const",
            default=defaults.add_discriminator_const,
        ),
        ignore_single_specialization=_optional_bool(
            values.get("ignore_single_specialization"),
            "allof_to_oneof.ignore_single_specialization",
            default=defaults.ignore_single_specialization,
        ),
        merge_nested_one_of=_optional_bool(
            values.get("merge_nested_one_of"),
            "allof_to_oneof.merge_nested_one_of",
            default=defaults.merge_nested_one_of,
        ),
        wrapper_suffix=_require_non_empty_string(
            values.get("wrapper_suffix", defaults.wrapper_suffix),
            "allof_to_oneof.wrapper_suffix",
        ),
        max_eligibility_passes=_require_positive_int(
            values.get("max_eligibility_passes", defaults.max_eligibility_passes),
            "allof_to_oneof.max_eligibility_passes",
        ),
    )


def _parse_pipeline_section(value: Any) -> tuple[PipelineStep, ...]:
    if value is None:
        return DEFAULT_PIPELINE
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError("pipeline must be a list of step names.")
    steps: list[PipelineStep] = []
    for index, item in enumerate(value):
        label = f"pipeline[{index}]"
        name = _require_non_empty_string(item, label)
        try:
            steps.append(PipelineStep(name))
        except ValueError as exc:
            choices = ", ".join(step.value for step in PipelineStep)
            raise ConfigurationError(
                f"{label} '{name}' is not a known step (expected one of: {choices})."
            ) from exc
    if not steps:
        raise ConfigurationError("pipeline must contain at least one step.")
    return tuple(steps)


def _parse_remove_unused_section(value: Any) -> RemoveUnusedSettings:
    section = _optional_mapping(value, "remove_unused")
    return RemoveUnusedSettings(
        keep=_normalize_string_sequence(section.get("keep"), "remove_unused.keep"),
        ignore_parents=_normalize_string_sequence(
            section.get("ignore_parents"), "remove_unused.ignore_parents"
        ),
        aggressive=_optional_bool(
            section.get("aggressive"), "remove_unused.aggressive", default=False
        ),
    )


def _parse_remove_dangling_section(value: Any) -> RemoveDanglingSettings:
    section = _optional_mapping(value, "remove_dangling")
    return RemoveDanglingSettings(
        aggressive=_optional_bool(
            section.get("aggressive"), "remove_dangling.aggressive", default=False
        )
    )


def _parse_remove_single_composition_section(value: Any) -> SingleCompositionSettings:
    section = _optional_mapping(value, "remove_single_composition")
    return SingleCompositionSettings(
        aggressive=_optional_bool(
            section.get("aggressive"), "remove_single_composition.aggressive", default=False
        )
    )


def _parse_remove_oneof_section(value: Any) -> RemoveOneOfSettings:
    section = _optional_mapping(value, "remove_oneof")
    parent = section.get("parent")
    return RemoveOneOfSettings(
        remove=_normalize_string_sequence(section.get("remove"), "remove_oneof.remove"),
        parent=None if parent is None else _require_non_empty_string(parent, "remove_oneof.parent"),
        guess=_optional_bool(section.get("guess"), "remove_oneof.guess", default=False),
    )


def _parse_seal_section(value: Any) -> SealSettings:
    section = _optional_mapping(value, "seal")
    return SealSettings(
        use_unevaluated_properties=_optional_bool(
            section.get("use_unevaluated_properties"),
            "seal.use_unevaluated_properties",
            default=True,
        )
    )


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _optional_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
