"""Typer CLI for Gridfinity baseplates, bins and baseplate sets."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from gridfinity.application import (
    BaseplateInput,
    BaseplateSetInput,
    BaseplateSetOutput,
    BinInput,
    BuildBaseplateCommand,
    BuildBinCommand,
    GenerateBaseplateSetCommand,
    ModelOutput,
)
from gridfinity.application.config import (
    ConfigFileError,
    OutputConfig,
    load_config,
    merge_config_with_cli,
)
from gridfinity.cli.commands import validate_command
from gridfinity.infrastructure import (
    HardwareReportFormatter,
    JsonPlanExporter,
    LayoutPlanFormatter,
    StlExporter,
    slugify,
)

PLAN_FILENAME = "plan.json"

app = typer.Typer(
    name="gridfinity",
    help="Generate Gridfinity baseplates, bins and bed-sized interlocking baseplate sets.",
)

# Register validate command
app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress at debug level"),
    ] = False,
) -> None:
    """Gridfinity generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to JSON configuration file"),
]
WidthOption = Annotated[
    float | None, typer.Option("--width", "-w", help="Footprint width in mm")
]
DepthOption = Annotated[
    float | None, typer.Option("--depth", "-d", help="Footprint depth in mm")
]
BedWidthOption = Annotated[
    float | None, typer.Option("--bed-width", help="Print bed width in mm (default: 256)")
]
BedDepthOption = Annotated[
    float | None, typer.Option("--bed-depth", help="Print bed depth in mm (default: 256)")
]
FrontPaddingOption = Annotated[
    float | None, typer.Option("--front-padding", help="Space in front of the grid in mm")
]
BaseplateOptionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--option",
        "-o",
        help="Baseplate option: foundation, tabs, screws, magnets (repeatable)",
    ),
]
ToleranceOption = Annotated[
    float | None, typer.Option("--tolerance", help="Fit clearance in mm (default: 0.2)")
]


def _resolve_set(
    config_file: Path | None,
    width: float | None,
    depth: float | None,
    bed_width: float | None,
    bed_depth: float | None,
    front_padding: float | None,
    options: list[str] | None,
    tolerance: float | None,
    output_dir: Path | None = None,
) -> tuple[BaseplateSetInput, OutputConfig]:
    """Build the set input from a config file and CLI overrides."""
    if config_file is not None:
        try:
            config = merge_config_with_cli(
                load_config(config_file),
                width=width,
                depth=depth,
                bed_width=bed_width,
                bed_depth=bed_depth,
                front_padding=front_padding,
                options=options,
                tolerance=tolerance,
                output_dir=str(output_dir) if output_dir is not None else None,
            )
        except ConfigFileError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
        return BaseplateSetInput.from_config(config), config.output

    if width is None or depth is None:
        typer.echo(
            "Error: --width and --depth are required when --config is not provided",
            err=True,
        )
        raise typer.Exit(code=1)

    overrides = {
        "bed_width": bed_width,
        "bed_depth": bed_depth,
        "front_padding": front_padding,
        "options": options,
        "tolerance": tolerance,
    }
    set_input = BaseplateSetInput(
        footprint_width=width,
        footprint_depth=depth,
        **{key: value for key, value in overrides.items() if value is not None},
    )
    output = OutputConfig(directory=str(output_dir)) if output_dir is not None else OutputConfig()
    return set_input, output


def _exit_on_errors(result: BaseplateSetOutput | ModelOutput) -> None:
    if not result.is_valid:
        for error in result.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)


@app.command()
def plan(
    config_file: ConfigOption = None,
    width: WidthOption = None,
    depth: DepthOption = None,
    bed_width: BedWidthOption = None,
    bed_depth: BedDepthOption = None,
    front_padding: FrontPaddingOption = None,
    options: BaseplateOptionsOption = None,
    tolerance: ToleranceOption = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the plan as JSON")
    ] = False,
) -> None:
    """Show how a footprint splits into printable pieces, without building them.

    Examples:
        gridfinity plan --width 508 --depth 332
        gridfinity plan --config drawer.json --json
    """
    set_input, _ = _resolve_set(
        config_file, width, depth, bed_width, bed_depth, front_padding, options, tolerance
    )
    result = GenerateBaseplateSetCommand().execute(set_input, build_geometry=False)
    _exit_on_errors(result)

    if as_json:
        typer.echo(JsonPlanExporter().export(result.plan, result.layout, result.hardware))
        return
    typer.echo(LayoutPlanFormatter().format(result.plan))
    typer.echo()
    typer.echo(HardwareReportFormatter().format(result.hardware))


@app.command()
def generate(
    config_file: ConfigOption = None,
    width: WidthOption = None,
    depth: DepthOption = None,
    bed_width: BedWidthOption = None,
    bed_depth: BedDepthOption = None,
    front_padding: FrontPaddingOption = None,
    options: BaseplateOptionsOption = None,
    tolerance: ToleranceOption = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Directory for STL and JSON files"),
    ] = None,
    workers: Annotated[
        int, typer.Option("--workers", "-j", min=1, help="Pieces built in parallel")
    ] = 1,
) -> None:
    """Build every piece of a baseplate set and export STL files.

    Examples:
        gridfinity generate --width 508 --depth 332 --output-dir ./drawer
        gridfinity generate --config drawer.json -o screws -j 4
    """
    set_input, output = _resolve_set(
        config_file,
        width,
        depth,
        bed_width,
        bed_depth,
        front_padding,
        options,
        tolerance,
        output_dir,
    )
    result = GenerateBaseplateSetCommand(max_workers=workers).execute(set_input)
    _exit_on_errors(result)

    directory = Path(output.directory)
    written = StlExporter().export_set(
        result.pieces, directory, result.layout if output.assembly else None
    )
    if output.plan_json:
        plan_path = directory / PLAN_FILENAME
        plan_path.write_text(
            JsonPlanExporter().export(result.plan, result.layout, result.hardware),
            encoding="utf-8",
        )
        written.append(plan_path)

    for path in written:
        typer.echo(f"Wrote {path}")
    if result.hardware:
        typer.echo()
        typer.echo(HardwareReportFormatter().format(result.hardware))


@app.command()
def baseplate(
    units_x: Annotated[int, typer.Argument(help="Grid units along X")],
    units_y: Annotated[int, typer.Argument(help="Grid units along Y")],
    options: BaseplateOptionsOption = None,
    tolerance: ToleranceOption = None,
    output_file: Annotated[
        Path | None, typer.Option("--output", help="STL file to write")
    ] = None,
) -> None:
    """Export a single baseplate.

    Example:
        gridfinity baseplate 4 3 -o magnets --output baseplate.stl
    """
    baseplate_input = BaseplateInput(
        units_x=units_x,
        units_y=units_y,
        options=options or [],
        tolerance=tolerance if tolerance is not None else 0.2,
    )
    result = BuildBaseplateCommand().execute(baseplate_input)
    _exit_on_errors(result)

    path = output_file or Path(f"{slugify(result.piece.name)}.stl")
    StlExporter().export_to_file(result.piece, path)
    typer.echo(f"Wrote {path}")


@app.command(name="bin")
def bin_command(
    units_x: Annotated[int, typer.Argument(help="Grid units along X")],
    units_y: Annotated[int, typer.Argument(help="Grid units along Y")],
    units_z: Annotated[int, typer.Argument(help="Height in 7mm units")],
    wall_thickness: Annotated[
        float, typer.Option("--wall-thickness", help="Side wall thickness in mm")
    ] = 1.0,
    bottom_thickness: Annotated[
        float, typer.Option("--bottom-thickness", help="Floor thickness above the base in mm")
    ] = 0.6,
    corner_radius: Annotated[
        float, typer.Option("--corner-radius", help="Inner bottom fillet radius in mm")
    ] = 1.0,
    stacking_lip: Annotated[
        bool, typer.Option("--stacking-lip", help="Add a stacking lip")
    ] = False,
    magnets: Annotated[
        bool, typer.Option("--magnets", help="Corner magnet pockets under every base")
    ] = False,
    centered_magnet: Annotated[
        bool, typer.Option("--centered-magnet", help="Centre magnet pocket under every base")
    ] = False,
    output_file: Annotated[
        Path | None, typer.Option("--output", help="STL file to write")
    ] = None,
) -> None:
    """Export a single bin.

    Example:
        gridfinity bin 2 1 3 --stacking-lip --output bin.stl
    """
    bin_input = BinInput(
        units_x=units_x,
        units_y=units_y,
        units_z=units_z,
        wall_thickness=wall_thickness,
        bottom_thickness=bottom_thickness,
        inner_bottom_corner_radius=corner_radius,
        stacking_lip=stacking_lip,
        magnets=magnets,
        centered_magnet=centered_magnet,
    )
    result = BuildBinCommand().execute(bin_input)
    _exit_on_errors(result)

    path = output_file or Path(f"{slugify(result.piece.name)}.stl")
    StlExporter().export_to_file(result.piece, path)
    typer.echo(f"Wrote {path}")


if __name__ == "__main__":
    app()
