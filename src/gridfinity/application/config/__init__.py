"""Configuration schema and loading for baseplate sets.

Public API:
    - BaseplateSetConfiguration: Root configuration model
    - SizeConfig: Width x depth model
    - OutputConfig: Export settings model
    - load_config: Load configuration from a JSON file
    - parse_config: Validate decoded configuration data
    - ConfigFileError: Exception for configuration file errors
    - ConfigIssue, ConfigErrorType: What a ConfigFileError reports
    - merge_config_with_cli: Apply command-line overrides to a configuration

Example:
    >>> from pathlib import Path
    >>> from gridfinity.application.config import load_config, ConfigFileError
    >>>
    >>> try:
    ...     config = load_config(Path("drawer.json"))
    ...     print(f"Footprint: {config.footprint.width}x{config.footprint.depth}")
    ... except ConfigFileError as e:
    ...     print(f"Error: {e}")
"""

from gridfinity.application.config.loader import (
    ConfigErrorType,
    ConfigFileError,
    ConfigIssue,
    load_config,
    parse_config,
)
from gridfinity.application.config.merger import merge_config_with_cli
from gridfinity.application.config.schema import (
    SUPPORTED_VERSIONS,
    BaseplateSetConfiguration,
    OutputConfig,
    SizeConfig,
)

__all__ = [
    "BaseplateSetConfiguration",
    "ConfigErrorType",
    "ConfigFileError",
    "ConfigIssue",
    "OutputConfig",
    "SUPPORTED_VERSIONS",
    "SizeConfig",
    "load_config",
    "merge_config_with_cli",
    "parse_config",
]
