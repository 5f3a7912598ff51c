import logging
from pathlib import Path

import click

from .cli_utils import dump_document, load_document, reconstruct_command_line
from .config import ConverterConfig
from .diagnostics import Severity
from .errors import ConversionError, IrFormatError
from .exporter import IrToSchemaConverter
from .importer import OpenApiImporter
from .ir.serialization import ir_from_dict, ir_to_dict

FORMATS = ["yaml", "json"]


def _load_config(config):
    if config is None:
        return ConverterConfig()
    return ConverterConfig.from_dict(load_document(config))


def _write(text, output):
    if output is None:
        click.echo(text, nl=False)
        return
    with open(output, "w", encoding="utf-8") as f:
        f.write(text)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug information")
def main(verbose):
    """Translate between OpenAPI v3 documents and the intermediate representation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("import")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True))
@click.option("--format", "output_format", default="yaml", type=click.Choice(FORMATS))
@click.option("--name", "-n", default=None, type=str, help="Name of the IR (defaults to the file stem)")
@click.option(
    "--fail-on-error",
    is_flag=True,
    default=False,
    help="Exit with an error if any schema or operation failed to convert",
)
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
def import_command(config, output, output_format, name, fail_on_error, path):
    """Import an OpenAPI v3 document (JSON or YAML) into the IR."""
    document = load_document(path)
    converter_config = _load_config(config)

    try:
        result = OpenApiImporter(converter_config).import_document(document)
    except ConversionError as e:
        raise click.ClickException(str(e)) from e

    for diagnostic in result.diagnostics:
        click.echo(str(diagnostic), err=True)

    if name is None:
        name = Path(path).stem

    header = None
    if converter_config.add_generation_comment:
        header = f"Generated by: {reconstruct_command_line(import_command)}"
    _write(dump_document(ir_to_dict(result.to_ir(name)), output_format, header), output)

    if fail_on_error and result.has_errors:
        errors = [d for d in result.diagnostics if d.severity is Severity.ERROR]
        raise click.ClickException(f"{len(errors)} conversion error(s)")


@main.command("export")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True))
@click.option("--format", "output_format", default="yaml", type=click.Choice(FORMATS))
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
def export_command(config, output, output_format, path):
    """Export an IR document (JSON or YAML) as an OpenAPI v3 document."""
    converter_config = _load_config(config)

    try:
        ir = ir_from_dict(load_document(path))
        document = IrToSchemaConverter(converter_config).convert(ir)
    except (ConversionError, IrFormatError) as e:
        raise click.ClickException(str(e)) from e

    header = None
    if converter_config.add_generation_comment:
        header = f"Generated by: {reconstruct_command_line(export_command)}"
    _write(dump_document(document, output_format, header), output)
