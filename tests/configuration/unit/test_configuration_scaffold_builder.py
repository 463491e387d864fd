"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from oas_polymorph.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from oas_polymorph.configuration.loader import load_configuration
from oas_polymorph.configuration.runtime_settings import (
    PipelineStep,
    RemoveOneOfSettings,
    SealSettings,
    SingleCompositionSettings,
)
from oas_polymorph.polymorphism import TransformOptions


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "Pipeline configuration for oas-polymorph" in scaffold
    assert "allof_to_oneof:" in scaffold
    assert "pipeline:" in scaffold
    assert "remove_unused:" in scaffold
    assert "remove_dangling:" in scaffold
    assert "remove_single_composition:" in scaffold
    assert "remove_oneof:" in scaffold
    assert "seal:" in scaffold
    assert "# Steps run in order" in scaffold


def test_written_scaffold_loads_to_defaults(tmp_path: Path) -> None:
    output_path = tmp_path / "config.yaml"

    written_path = write_placeholder_configuration(output_path)
    configuration = load_configuration(written_path)

    assert written_path == output_path.resolve()
    assert configuration.allof_to_oneof == TransformOptions()
    assert configuration.steps == (
        PipelineStep.ALLOF_TO_ONEOF,
        PipelineStep.CLEANUP_DISCRIMINATORS,
    )
    assert configuration.remove_unused.keep == ()
    assert configuration.remove_oneof == RemoveOneOfSettings()
    assert configuration.seal == SealSettings()
    assert configuration.remove_single_composition == SingleCompositionSettings()


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "config.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError, match="Configuration file already exists"):
        write_placeholder_configuration(output_path)
