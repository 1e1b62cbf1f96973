"""Configuration merging utilities for CLI override support.

Precedence is: CLI args > config values > defaults. Only non-None CLI
arguments override configuration values.
"""

from typing import Any

from gridfinity.application.config.loader import parse_config
from gridfinity.application.config.schema import BaseplateSetConfiguration


def merge_config_with_cli(
    config: BaseplateSetConfiguration,
    *,
    width: float | None = None,
    depth: float | None = None,
    bed_width: float | None = None,
    bed_depth: float | None = None,
    front_padding: float | None = None,
    options: list[str] | None = None,
    tolerance: float | None = None,
    output_dir: str | None = None,
) -> BaseplateSetConfiguration:
    """Merge CLI arguments with configuration values.

    Args:
        config: The base configuration to merge with
        width: Override for footprint.width
        depth: Override for footprint.depth
        bed_width: Override for printbed.width
        bed_depth: Override for printbed.depth
        front_padding: Override for front_padding
        options: Override for options
        tolerance: Override for tolerance
        output_dir: Override for output.directory

    Returns:
        A new, revalidated BaseplateSetConfiguration

    Raises:
        ConfigFileError: If an override is rejected by the schema.

    Example:
        >>> merged = merge_config_with_cli(config, bed_width=220.0)
        >>> merged.printbed.width
        220.0
    """
    data = config.model_dump(mode="json")
    _override(data["footprint"], "width", width)
    _override(data["footprint"], "depth", depth)
    _override(data["printbed"], "width", bed_width)
    _override(data["printbed"], "depth", bed_depth)
    _override(data, "front_padding", front_padding)
    _override(data, "options", options)
    _override(data, "tolerance", tolerance)
    _override(data["output"], "directory", output_dir)
    return parse_config(data)


def _override(data: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value
