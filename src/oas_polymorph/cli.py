"""Command line interface entry point."""

from __future__ import annotations

import dataclasses
import logging
import sys

import click

from oas_polymorph.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    PipelineSettings,
    PipelineStep,
    RemoveDanglingSettings,
    RemoveOneOfSettings,
    RemoveUnusedSettings,
    SealSettings,
    SingleCompositionSettings,
    load_configuration,
    write_placeholder_configuration,
)
from oas_polymorph.polymorphism import TransformOptions
from oas_polymorph.run_execution import RunExecutionError, RunRequest, execute_transform_run

_INPUT_ARGUMENT = click.argument("input_path", required=False, type=click.Path(path_type=str))
_OUTPUT_OPTION = click.option(
    "-o",
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Output file (.json writes JSON, anything else YAML); stdout when omitted",
)
_REPORT_OPTION = click.option(
    "--report",
    "report_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional path of an .xlsx report workbook to write",
)


_VERBOSE_HANDLER_NAME = "oas_polymorph.cli.verbose"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="oas-polymorph")
@click.option("--verbose", is_flag=True, default=False, help="Log transform details to stderr.")
def cli(verbose: bool) -> None:
    """OpenAPI allOf-to-oneOf polymorphism utility."""
    if verbose:
        _configure_verbose_logging()


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML pipeline configuration to write",
)
def generate_config(output_path: str) -> None:
    """Generate a pipeline configuration with defaults and guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="allof-to-oneof")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="YAML/JSON configuration supplying allof_to_oneof defaults",
)
@click.option("--no-const", is_flag=True, default=False, help="Do not add const tags to children.")
@click.option(
    "--ignore-single-specialization",
    is_flag=True,
    default=False,
    help="Skip wrappers for parents with exactly one concrete child.",
)
@click.option(
    "--merge-nested-oneof",
    is_flag=True,
    default=False,
    help="Inline nested pure oneOf unions sharing the discriminator property.",
)
@click.option(
    "--wrapper-suffix",
    required=False,
    type=str,
    help="Suffix of synthesized wrapper names [default: Polymorphic]",
)
@_REPORT_OPTION
def allof_to_oneof_command(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    input_path: str | None,
    output_path: str | None,
    config_path: str | None,
    no_const: bool,
    ignore_single_specialization: bool,
    merge_nested_oneof: bool,
    wrapper_suffix: str | None,
    report_path: str | None,
) -> None:
    """Convert allOf + discriminator hierarchies into oneOf wrappers."""
    settings = _load_settings(config_path)
    options = _override_options(
        settings.allof_to_oneof,
        no_const=no_const,
        ignore_single_specialization=ignore_single_specialization,
        merge_nested_oneof=merge_nested_oneof,
        wrapper_suffix=wrapper_suffix,
    )
    _run(
        input_path,
        output_path,
        dataclasses.replace(
            settings, steps=(PipelineStep.ALLOF_TO_ONEOF,), allof_to_oneof=options
        ),
        report_path,
    )


@cli.command(name="cleanup-discriminators")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
def cleanup_discriminators_command(input_path: str | None, output_path: str | None) -> None:
    """Remove discriminator mapping entries pointing at missing schemas."""
    _run(
        input_path,
        output_path,
        PipelineSettings(steps=(PipelineStep.CLEANUP_DISCRIMINATORS,)),
    )


@cli.command(name="remove-dangling")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option(
    "--aggressive",
    is_flag=True,
    default=False,
    help="Also remove external and unresolvable in-document references.",
)
def remove_dangling_command(
    input_path: str | None, output_path: str | None, aggressive: bool
) -> None:
    """Remove references to schemas that do not exist."""
    _run(
        input_path,
        output_path,
        PipelineSettings(
            steps=(PipelineStep.REMOVE_DANGLING,),
            remove_dangling=RemoveDanglingSettings(aggressive=aggressive),
        ),
    )


@cli.command(name="remove-unused")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option("--keep", multiple=True, help="Schema name to keep even when unused (repeatable).")
@click.option(
    "--ignore-parents",
    multiple=True,
    help="Base schema whose allOf children are not kept alive by it (repeatable).",
)
@click.option(
    "--aggressive",
    is_flag=True,
    default=False,
    help="Also prune unused entries of the other component sections.",
)
def remove_unused_command(
    input_path: str | None,
    output_path: str | None,
    keep: tuple[str, ...],
    ignore_parents: tuple[str, ...],
    aggressive: bool,
) -> None:
    """Remove schemas that nothing under paths or webhooks reaches."""
    _run(
        input_path,
        output_path,
        PipelineSettings(
            steps=(PipelineStep.REMOVE_UNUSED,),
            remove_unused=RemoveUnusedSettings(
                keep=tuple(keep), ignore_parents=tuple(ignore_parents), aggressive=aggressive
            ),
        ),
    )


@cli.command(name="remove-single-composition")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option(
    "--aggressive",
    is_flag=True,
    default=False,
    help="Also inline wrappers with extra keywords, unless they declare properties.",
)
def remove_single_composition_command(
    input_path: str | None, output_path: str | None, aggressive: bool
) -> None:
    """Replace schemas that only wrap one $ref in allOf, anyOf or oneOf."""
    _run(
        input_path,
        output_path,
        PipelineSettings(
            steps=(PipelineStep.REMOVE_SINGLE_COMPOSITION,),
            remove_single_composition=SingleCompositionSettings(aggressive=aggressive),
        ),
    )


@cli.command(name="optimize-allof")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
def optimize_allof_command(input_path: str | None, output_path: str | None) -> None:
    """Drop allOf bases already inherited through another listed base."""
    _run(input_path, output_path, PipelineSettings(steps=(PipelineStep.OPTIMIZE_ALLOF,)))


@cli.command(name="remove-oneof")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option(
    "--remove",
    "remove",
    multiple=True,
    required=True,
    help="Schema name or wildcard pattern to drop from oneOf; prefix ! to exclude (repeatable).",
)
@click.option("--parent", required=False, help="Only edit this schema's own oneOf.")
@click.option(
    "--guess", is_flag=True, default=False, help="Also drop <name>_* variants of each name."
)
def remove_oneof_command(
    input_path: str | None,
    output_path: str | None,
    remove: tuple[str, ...],
    parent: str | None,
    guess: bool,
) -> None:
    """Remove schemas from oneOf unions and their discriminator mappings."""
    _run(
        input_path,
        output_path,
        PipelineSettings(
            steps=(PipelineStep.REMOVE_ONEOF,),
            remove_oneof=RemoveOneOfSettings(remove=tuple(remove), parent=parent, guess=guess),
        ),
    )


@cli.command(name="seal")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option(
    "--additional-properties",
    "use_additional_properties",
    is_flag=True,
    default=False,
    help="Seal plain objects with additionalProperties instead of unevaluatedProperties.",
)
def seal_command(
    input_path: str | None, output_path: str | None, use_additional_properties: bool
) -> None:
    """Close object schemas against undeclared properties."""
    _run(
        input_path,
        output_path,
        PipelineSettings(
            steps=(PipelineStep.SEAL,),
            seal=SealSettings(use_unevaluated_properties=not use_additional_properties),
        ),
    )


@cli.command(name="pipeline")
@_INPUT_ARGUMENT
@_OUTPUT_OPTION
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="YAML/JSON configuration listing the steps to run",
)
@_REPORT_OPTION
def pipeline_command(
    input_path: str | None,
    output_path: str | None,
    config_path: str,
    report_path: str | None,
) -> None:
    """Run the configured transform steps in order."""
    _run(input_path, output_path, _load_settings(config_path), report_path)


def _load_settings(config_path: str | None) -> PipelineSettings:
    if config_path is None:
        return PipelineSettings()
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _override_options(
    options: TransformOptions,
    *,
    no_const: bool,
    ignore_single_specialization: bool,
    merge_nested_oneof: bool,
    wrapper_suffix: str | None,
) -> TransformOptions:
    overrides: dict[str, object] = {}
    if no_const:
        overrides["add_discriminator_const"] = False
    if ignore_single_specialization:
        overrides["ignore_single_specialization"] = True
    if merge_nested_oneof:
        overrides["merge_nested_one_of"] = True
    if wrapper_suffix is not None:
        if not wrapper_suffix.strip():
            raise click.BadParameter("must not be empty", param_hint="--wrapper-suffix")
        overrides["wrapper_suffix"] = wrapper_suffix.strip()
    return dataclasses.replace(options, **overrides)


def _run(
    input_path: str | None,
    output_path: str | None,
    settings: PipelineSettings,
    report_path: str | None = None,
) -> None:
    try:
        outcome = execute_transform_run(
            RunRequest(
                input_path=input_path,
                output_path=output_path,
                settings=settings,
                report_path=report_path,
            )
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc

    for message in outcome.messages:
        click.echo(message, err=True)
    if outcome.output_path is not None:
        click.echo(f"[OUTPUT] {outcome.output_path}", err=True)
    if outcome.report_path is not None:
        click.echo(f"[REPORT] {outcome.report_path}", err=True)
    if outcome.rendered is not None:
        click.echo(outcome.rendered, nl=False)


def _configure_verbose_logging() -> None:
    package_logger = logging.getLogger("oas_polymorph")
    for existing in list(package_logger.handlers):
        if existing.get_name() == _VERBOSE_HANDLER_NAME:
            package_logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_VERBOSE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
