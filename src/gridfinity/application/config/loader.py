"""Reading baseplate set configuration files.

Everything that can go wrong between a path on disk and a validated
BaseplateSetConfiguration ends up as one ConfigFileError: a missing or
unreadable file, broken JSON, or values the schema rejects. Each problem is
a ConfigIssue located by line/column or by JSON path (``footprint.width``,
``options[1]``), which is what ``gridfinity validate`` prints.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gridfinity.application.config.schema import BaseplateSetConfiguration


class ConfigErrorType(str, Enum):
    """Why a configuration could not be used."""

    NOT_FOUND = "file_not_found"
    UNREADABLE = "file_read_error"
    JSON_SYNTAX = "json_parse"
    VALIDATION = "validation"


@dataclass(frozen=True)
class ConfigIssue:
    """One problem in a configuration.

    Attributes:
        path: JSON path of the offending value; empty for syntax errors.
        message: What is wrong.
        value: The rejected value, if there is one.
        line: Line of a JSON syntax error.
        column: Column of a JSON syntax error.
    """

    path: str
    message: str
    value: Any = None
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        location = self.path
        if self.line is not None:
            location = f"line {self.line}, column {self.column}"
        text = f"{location}: {self.message}"
        if self.value is not None:
            text += f" (got: {self.value!r})"
        return text


class ConfigFileError(Exception):
    """A configuration file could not be loaded or validated.

    Attributes:
        message: Summary of the failure.
        error_type: The ConfigErrorType category.
        path: The configuration file, when the data came from one.
        issues: Individual problems, in the order they were found.
    """

    def __init__(
        self,
        message: str,
        error_type: ConfigErrorType,
        path: Path | None = None,
        issues: list[ConfigIssue] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.issues = tuple(issues or ())
        super().__init__(message)

    def __str__(self) -> str:
        return "\n".join([self.message, *(f"  - {issue}" for issue in self.issues)])


def _json_path(loc: tuple[str | int, ...]) -> str:
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else segment
    return path


def parse_config(data: Any, path: Path | None = None) -> BaseplateSetConfiguration:
    """Validate decoded configuration data.

    Used for freshly loaded files and for configurations rebuilt with
    command-line overrides.

    Raises:
        ConfigFileError: With one ConfigIssue per rejected value.
    """
    try:
        return BaseplateSetConfiguration.model_validate(data)
    except ValidationError as e:
        issues = [
            ConfigIssue(_json_path(err["loc"]), err["msg"], err.get("input"))
            for err in e.errors()
        ]
        source = path if path is not None else "configuration"
        raise ConfigFileError(
            f"Invalid baseplate set in {source}", ConfigErrorType.VALIDATION, path, issues
        ) from e


def load_config(path: Path) -> BaseplateSetConfiguration:
    """Load and validate a baseplate set configuration from a JSON file.

    Raises:
        ConfigFileError: If the file is missing, unreadable, not JSON, or
            does not describe a valid baseplate set.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigFileError(
            f"Config file not found: {path}", ConfigErrorType.NOT_FOUND, path
        ) from e
    except OSError as e:
        raise ConfigFileError(
            f"Cannot read config file {path}: {e.strerror or e}", ConfigErrorType.UNREADABLE, path
        ) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        issue = ConfigIssue("", e.msg, line=e.lineno, column=e.colno)
        raise ConfigFileError(
            f"Invalid JSON syntax in {path}", ConfigErrorType.JSON_SYNTAX, path, [issue]
        ) from e

    return parse_config(data, path)
