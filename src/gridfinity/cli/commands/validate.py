"""Validate command for checking configuration files.

The configuration is loaded, then planned without building geometry, so a
file that parses but describes an impossible set (a footprint smaller than
one grid unit, too much front padding) is reported as invalid too.
"""

from pathlib import Path
from typing import Annotated

import typer

from gridfinity.application import BaseplateSetInput, GenerateBaseplateSetCommand
from gridfinity.application.config import ConfigErrorType, ConfigFileError, load_config


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON configuration file to validate"),
    ],
) -> None:
    """Validate a baseplate set configuration file.

    Exit codes:
        0 - Configuration is valid
        1 - Configuration has errors (cannot be used)

    Example:
        gridfinity validate drawer.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigFileError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    result = GenerateBaseplateSetCommand().execute(
        BaseplateSetInput.from_config(config), build_geometry=False
    )
    if not result.is_valid:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Validation passed. Configuration describes {len(result.plan.pieces)} piece(s).")


def _display_load_error(error: ConfigFileError) -> None:
    """Display a configuration loading error, one issue per line."""
    typer.echo("Errors:", err=True)
    if error.error_type is ConfigErrorType.NOT_FOUND:
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type is ConfigErrorType.JSON_SYNTAX:
        typer.echo("  Invalid JSON syntax", err=True)
        for issue in error.issues:
            typer.echo(f"    Line {issue.line}, Column {issue.column}: {issue.message}", err=True)
    elif error.issues:
        for issue in error.issues:
            typer.echo(f"  {issue.path}: {issue.message}", err=True)
            if issue.value is not None:
                typer.echo(f"    Value: {issue.value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)
