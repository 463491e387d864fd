"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration, parse_transform_options
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

__all__ = [
    "DEFAULT_PIPELINE",
    "PipelineSettings",
    "PipelineStep",
    "RemoveDanglingSettings",
    "RemoveOneOfSettings",
    "RemoveUnusedSettings",
    "SealSettings",
    "SingleCompositionSettings",
    "ConfigurationError",
    "load_configuration",
    "parse_transform_options",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
