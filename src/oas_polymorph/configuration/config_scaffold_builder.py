"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Pipeline configuration for oas-polymorph.
# Every section is optional; the values below are the defaults.

allof_to_oneof:
  # Pin each concrete child to its discriminator value with a const constraint.
  add_discriminator_const: true
  # Skip wrappers for parents with exactly one concrete child.
  ignore_single_specialization: false
  # Inline nested pure oneOf unions that share the discriminator property.
  merge_nested_one_of: false
  # Wrapper schemas are named <Parent><wrapper_suffix>.
  wrapper_suffix: Polymorphic

# Steps run in order. Known steps:
#   allof-to-oneof, cleanup-discriminators, remove-dangling, remove-unused,
#   remove-single-composition, optimize-allof, remove-oneof, seal
pipeline:
  - allof-to-oneof
  - cleanup-discriminators

remove_unused:
  # Schema names kept even when nothing references them.
  keep: []
  # Bases whose allOf children are not kept alive through inheritance.
  ignore_parents: []
  # Also prune unused parameters, responses, headers, requestBodies, examples, links, callbacks.
  aggressive: false

remove_dangling:
  # Also drop external and unresolvable in-document references.
  aggressive: false

remove_single_composition:
  # Also inline wrappers with extra keywords such as description, unless they declare properties.
  aggressive: false

remove_oneof:
  # Schema names or wildcard patterns (`*`, `!` to exclude) dropped from oneOf unions.
  remove: []
  # Only edit this schema's own oneOf; every oneOf in the document when unset.
  parent: null
  # Also drop <name>_* variants of each name.
  guess: false

seal:
  # Seal plain objects with unevaluatedProperties instead of additionalProperties.
  use_unevaluated_properties: true
"""


def build_placeholder_configuration() -> str:
    """Build a YAML pipeline configuration with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the pipeline configuration scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
