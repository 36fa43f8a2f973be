"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from data_contract_creator.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    default_configuration,
    load_configuration,
    write_placeholder_configuration,
)
from data_contract_creator.contract_model import Contract, iter_property_paths
from data_contract_creator.editing_session import import_contract_text, submit
from data_contract_creator.results_writing import write_validation_report
from data_contract_creator.schema_codec import ContractImportError, render_contract_json

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="data-contract-creator")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Author, import and validate data contract schemas."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="validate")
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the contract JSON file",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML/JSON configuration file with validation limits",
)
@click.option(
    "--report",
    "report_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional path of an .xlsx validation report to write",
)
def validate(input_path: str, config_path: str | None, report_path: str | None) -> None:
    """Import a contract, print its canonical JSON and report every violation."""
    configuration = _load_configuration(config_path)
    contract = _import_contract(input_path)
    submission = submit(contract, configuration.limits)

    click.echo(render_contract_json(contract, indent=configuration.output.indent))
    for violation in submission.violations:
        click.echo(violation.describe())

    if report_path:
        try:
            written = write_validation_report(
                contract, submission, report_path, source_path=input_path
            )
        except OSError as exc:
            raise CliError(str(exc)) from exc
        click.echo(f"report written: {written}")

    if submission.violations:
        raise CliError(f"Contract has {len(submission.violations)} violation(s).")


@cli.command(name="format")
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the contract JSON file",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional file to write; prints to stdout when omitted",
)
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    required=False,
    help="Indentation width; overrides output.indent from the configuration",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML/JSON configuration file",
)
def format_contract(
    input_path: str, output_path: str | None, indent: int | None, config_path: str | None
) -> None:
    """Rewrite a contract as canonical JSON."""
    configuration = _load_configuration(config_path)
    contract = _import_contract(input_path)
    resolved_indent = indent if indent is not None else configuration.output.indent
    text = render_contract_json(contract, indent=resolved_indent)
    if not output_path:
        click.echo(text)
        return
    output = Path(output_path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(output.resolve()))


@cli.command(name="inspect")
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the contract JSON file",
)
def inspect_contract(input_path: str) -> None:
    """List the property paths and indices of every document type."""
    contract = _import_contract(input_path)
    for name, document_type in contract.document_types.items():
        click.echo(name)
        for path, prop in iter_property_paths(document_type.properties):
            marker = " required" if document_type.is_required(path) else ""
            click.echo(f"  {path} ({prop.kind.value}){marker}")
        for index in document_type.indices:
            entries = ", ".join(
                f"{entry.path} {entry.direction.value}" for entry in index.properties
            )
            unique = " unique" if index.unique else ""
            click.echo(f"  index {index.name}{unique}: {entries}")


def _load_configuration(config_path: str | None) -> Configuration:
    if not config_path:
        return default_configuration()
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _import_contract(input_path: str) -> Contract:
    try:
        raw = Path(input_path).read_bytes()
    except OSError as exc:
        raise CliError(f"Cannot read contract file: {exc}") from exc
    try:
        return import_contract_text(raw)
    except ContractImportError as exc:
        raise CliError(f"Import failed ({exc.kind.value}): {exc}") from exc


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
