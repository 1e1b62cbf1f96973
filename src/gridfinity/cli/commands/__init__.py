"""CLI command implementations for the gridfinity application.

This package contains subcommands for the gridfinity CLI, including:
- validate: Validate a configuration file
"""

from gridfinity.cli.commands.validate import validate_command

__all__ = ["validate_command"]
